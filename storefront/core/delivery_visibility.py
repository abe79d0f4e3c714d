"""When the delivery route may be drawn, and how its estimate reads."""
from dataclasses import dataclass
from typing import Optional

from ..models.order import Order, OrderStatus, Coordinates, DeliveryInfo
from ..utils.formatting import NOT_AVAILABLE

ROUTE_STATUSES = frozenset({
    OrderStatus.PICKING_UP,
    OrderStatus.DELIVERING,
    OrderStatus.DELIVERED,
})


@dataclass(frozen=True)
class RouteEndpoints:
    source_address: str
    source_coordinates: Coordinates
    destination_address: str
    destination_coordinates: Coordinates


@dataclass(frozen=True)
class DeliveryEstimate:
    distance: str
    estimated_time: str


def should_render_route(order: Order) -> bool:
    """Both endpoints geocoded and a driver moving (or done)."""
    return (
        order.vendor_coordinates is not None
        and order.customer_coordinates is not None
        and order.status in ROUTE_STATUSES
    )


def route_endpoints(order: Order) -> Optional[RouteEndpoints]:
    if not should_render_route(order):
        return None
    return RouteEndpoints(
        source_address=order.vendor_location or "",
        source_coordinates=order.vendor_coordinates,
        destination_address=order.customer_location or "",
        destination_coordinates=order.customer_coordinates,
    )


def format_distance(info: Optional[DeliveryInfo]) -> str:
    """Miles when the backend computed them, kilometres otherwise."""
    if info is None:
        return NOT_AVAILABLE
    if info.distance_in_miles:
        return f"{info.distance_in_miles:.1f} miles"
    if info.distance_in_km is None:
        return NOT_AVAILABLE
    return f"{info.distance_in_km:.1f} km"


def format_minutes(minutes: Optional[int]) -> str:
    if minutes is None:
        return NOT_AVAILABLE
    if minutes < 60:
        return f"{minutes} min"
    hours, remaining = divmod(minutes, 60)
    return f"{hours}h {remaining}m"


def delivery_estimate(order: Order) -> Optional[DeliveryEstimate]:
    if order.delivery_info is None or not should_render_route(order):
        return None
    return DeliveryEstimate(
        distance=format_distance(order.delivery_info),
        estimated_time=format_minutes(order.delivery_info.estimated_time),
    )
