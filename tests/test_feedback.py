from datetime import datetime, timezone
from decimal import Decimal

import pytest
import resend
from pydantic import ValidationError

from storefront.email_templates.feedback import get_feedback_email_template
from storefront.services.feedback import FeedbackRequest, FeedbackService
from storefront.utils.formatting import format_date, format_money


@pytest.fixture
def feedback():
    return FeedbackRequest(
        order_id="ord-1001",
        vendor_name="Fresh Mart",
        delivery_date="Mon, Jan 5, 2026",
        rating=4,
        comments="<b>Great</b> service",
    )


def test_send_uses_resend(feedback, monkeypatch):
    sent = []
    monkeypatch.setattr(resend.Emails, "send", lambda params: sent.append(params) or {"id": "email_1"})

    assert FeedbackService.send(feedback, recipient="support@example.com")

    params = sent[0]
    assert params["to"] == "support@example.com"
    assert params["subject"] == "Feedback for Order ord-1001 (4/5)"
    assert "&lt;b&gt;Great&lt;/b&gt; service" in params["html"]
    assert "★★★★☆" in params["html"]


def test_send_reports_failure(feedback, monkeypatch):
    def fail(params):
        raise RuntimeError("rate limited")

    monkeypatch.setattr(resend.Emails, "send", fail)

    assert FeedbackService.send(feedback) is False


def test_blank_comments_get_placeholder():
    request = FeedbackRequest(order_id="ord-1", vendor_name="Fresh Mart", delivery_date="today", rating=5, comments="  ")

    assert request.template_params()["comments"] == "No comments provided"


@pytest.mark.parametrize("rating", [0, 6])
def test_rating_bounds(rating):
    with pytest.raises(ValidationError):
        FeedbackRequest(order_id="ord-1", vendor_name="Fresh Mart", delivery_date="today", rating=rating)


def test_template_escapes_vendor_name():
    html = get_feedback_email_template("ord-1", "Tom & Jerry's", "today", 1, "ok")

    assert "Tom &amp; Jerry&#x27;s" in html
    assert "★☆☆☆☆" in html


def test_format_date():
    moment = datetime(2026, 1, 5, 8, 0, tzinfo=timezone.utc)

    assert format_date(moment, "Asia/Kolkata") == "Mon, Jan 5, 2026, 1:30 PM"
    assert format_date(moment, "UTC") == "Mon, Jan 5, 2026, 8:00 AM"
    assert format_date(datetime(2026, 1, 5, 0, 5, tzinfo=timezone.utc), "UTC") == "Mon, Jan 5, 2026, 12:05 AM"
    assert format_date(None, "UTC") == "N/A"


def test_format_money():
    assert format_money(Decimal("13.49")) == "$13.49"
    assert format_money(2) == "$2.00"
    assert format_money(0.1 + 0.2) == "$0.30"
