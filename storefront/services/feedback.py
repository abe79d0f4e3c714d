import logging
from typing import Optional

import resend
from pydantic import BaseModel, Field

from ..config import settings
from ..email_templates.feedback import get_feedback_email_template

logger = logging.getLogger(__name__)

NO_COMMENTS = "No comments provided"


class FeedbackRequest(BaseModel):
    order_id: str
    vendor_name: str
    delivery_date: str
    rating: int = Field(ge=1, le=5)
    comments: Optional[str] = Field(None, max_length=2000)

    def template_params(self) -> dict:
        return {
            "order_id": self.order_id,
            "vendor_name": self.vendor_name,
            "delivery_date": self.delivery_date,
            "rating": self.rating,
            "comments": (self.comments or "").strip() or NO_COMMENTS,
        }


class FeedbackService:
    @staticmethod
    def send(feedback: FeedbackRequest, recipient: Optional[str] = None) -> bool:
        """Email the feedback to the support inbox; False if delivery failed"""
        params = feedback.template_params()
        resend.api_key = settings.RESEND_API_KEY

        try:
            resend.Emails.send({
                "from": settings.FEEDBACK_FROM_EMAIL,
                "to": recipient or settings.SUPPORT_EMAIL,
                "subject": f"Feedback for Order {feedback.order_id} ({feedback.rating}/5)",
                "html": get_feedback_email_template(**params),
            })
        except Exception as e:
            logger.error(f"Feedback email for order {feedback.order_id} failed: {e}")
            return False

        logger.info(f"Feedback for order {feedback.order_id} sent")
        return True
