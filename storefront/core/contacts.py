from enum import Enum
from typing import Optional, Union, Literal, Annotated
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field, computed_field

from ..models.order import Order


class ContactRole(str, Enum):
    VENDOR = "vendor"
    DRIVER = "driver"
    SUPPORT = "support"


class NoAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["none"] = "none"


class CallAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["call"] = "call"
    number: str  # formatted for display
    dial: str  # as stored on the order

    @computed_field
    @property
    def href(self) -> str:
        return f"tel:{self.dial}"


class MessageAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["message"] = "message"
    address: str
    subject: str
    body: Optional[str] = None

    @computed_field
    @property
    def href(self) -> str:
        href = f"mailto:{self.address}?subject={quote(self.subject)}"
        if self.body:
            href += f"&body={quote(self.body)}"
        return href


ContactAction = Annotated[Union[NoAction, CallAction, MessageAction], Field(discriminator="kind")]


def format_phone(phone: Optional[str]) -> str:
    """Best-effort North American formatting; anything unexpected passes through."""
    if not phone:
        return ""

    # Already formatted, or in international form
    if "-" in phone or "(" in phone or phone.startswith("+"):
        return phone

    if len(phone) == 10 and phone.isdigit():
        return f"({phone[:3]}) {phone[3:6]}-{phone[6:]}"

    if len(phone) == 11 and phone.isdigit() and phone.startswith("1"):
        return f"+1 ({phone[1:4]}) {phone[4:7]}-{phone[7:]}"

    return phone


def _contact_fields(role: ContactRole, order: Order, support_email: Optional[str], support_phone: Optional[str]):
    if role == ContactRole.VENDOR:
        return order.vendor_phone, order.vendor_email
    if role == ContactRole.DRIVER:
        return order.driver_phone, order.driver_email
    return support_phone, support_email


def resolve_contact(
    role: ContactRole,
    order: Order,
    support_email: Optional[str] = None,
    support_phone: Optional[str] = None,
) -> Union[NoAction, CallAction, MessageAction]:
    """Phone beats email; with neither there is nothing to offer."""
    role = ContactRole(role)
    phone, email = _contact_fields(role, order, support_email, support_phone)

    if phone and phone.strip():
        return CallAction(number=format_phone(phone), dial=phone.strip())

    if email and email.strip():
        if role == ContactRole.SUPPORT:
            return MessageAction(
                address=email.strip(),
                subject=f"Support Request for Order {order.id}",
                body=f"Hello, I need assistance with my order (ID: {order.id}). Please provide support.",
            )
        return MessageAction(address=email.strip(), subject=f"Question about Order {order.id}")

    return NoAction()
