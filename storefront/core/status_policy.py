"""Presentation facts derived from an order status.

Every lookup here is total: a status outside the known set falls back to
its raw text, zero progress and a gray badge instead of raising, so a new
backend status cannot take the order panel down.
"""
from dataclasses import dataclass
from typing import Any, Optional

from ..models.order import OrderStatus, UnrecognizedStatus, parse_status
from .errors import InvalidStatusError, InvalidTransitionError


@dataclass(frozen=True)
class StatusPresentation:
    label: str
    progress: int
    color: str


UNKNOWN_COLOR = "gray"

FORWARD_PATH = (
    OrderStatus.PENDING,
    OrderStatus.PREPARING,
    OrderStatus.AWAITING_DRIVER,
    OrderStatus.PICKING_UP,
    OrderStatus.DELIVERING,
    OrderStatus.DELIVERED,
)

TERMINAL_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})

_PRESENTATION = {
    OrderStatus.PENDING: StatusPresentation("Pending Payment", 10, "yellow"),
    OrderStatus.PREPARING: StatusPresentation("Preparing", 30, "yellow"),
    OrderStatus.AWAITING_DRIVER: StatusPresentation("Awaiting Driver", 50, "purple"),
    OrderStatus.PICKING_UP: StatusPresentation("Driver Headed to Store", 65, "indigo"),
    OrderStatus.DELIVERING: StatusPresentation("Out for Delivery", 80, "teal"),
    OrderStatus.DELIVERED: StatusPresentation("Delivered", 100, "green"),
    OrderStatus.CANCELLED: StatusPresentation("Cancelled", 0, "red"),
}

_MESSAGES = {
    OrderStatus.PENDING: "Waiting for payment confirmation...",
    OrderStatus.PREPARING: "The vendor is preparing your order...",
    OrderStatus.AWAITING_DRIVER: "Looking for a driver to pick up your order...",
    OrderStatus.PICKING_UP: "Driver is headed to pick up your order...",
    OrderStatus.DELIVERING: "Your order is on the way to you!",
}


def describe_status(status: Any) -> StatusPresentation:
    """Label, progress and color for a status, or the fail-open defaults."""
    value = parse_status(status)
    if isinstance(value, UnrecognizedStatus):
        return StatusPresentation(value.raw, 0, UNKNOWN_COLOR)
    return _PRESENTATION[value]


def status_label(status: Any) -> str:
    return describe_status(status).label


def status_progress(status: Any) -> int:
    return describe_status(status).progress


def status_color(status: Any) -> str:
    return describe_status(status).color


def badge_class(color: str) -> str:
    return f"bg-{color}-100 text-{color}-800"


def status_message(status: Any) -> Optional[str]:
    """Progress caption shown under the bar; None for terminal or unknown states."""
    value = parse_status(status)
    if isinstance(value, UnrecognizedStatus):
        return None
    return _MESSAGES.get(value)


def is_terminal(status: Any) -> bool:
    return parse_status(status) in TERMINAL_STATUSES


def is_active(status: Any) -> bool:
    return not is_terminal(status)


def validate_status(raw: Any) -> OrderStatus:
    value = parse_status(raw)
    if isinstance(value, UnrecognizedStatus):
        raise InvalidStatusError(raw)
    return value


def validate_transition(current: Any, target: Any) -> OrderStatus:
    """Check a requested move against the forward path.

    CANCELLED may follow any non-terminal state; everything else must move
    strictly forward. Raises InvalidStatusError or InvalidTransitionError.
    """
    current_status = validate_status(current)
    target_status = validate_status(target)

    if current_status in TERMINAL_STATUSES:
        raise InvalidTransitionError(current_status.name, target_status.name, "order is already final")
    if target_status == OrderStatus.CANCELLED:
        return target_status
    if FORWARD_PATH.index(target_status) <= FORWARD_PATH.index(current_status):
        raise InvalidTransitionError(current_status.name, target_status.name, "status can only move forward")
    return target_status

