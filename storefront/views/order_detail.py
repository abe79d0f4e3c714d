from typing import Optional, Union

from ..config import settings
from ..core.contacts import ContactRole, NoAction, CallAction, MessageAction, resolve_contact, format_phone
from ..core.delivery_visibility import route_endpoints
from ..core.reconciler import LiveOrderReconciler
from ..core.status_policy import badge_class
from ..models.order import Order, OrderStatus, status_name
from ..models.panel import (
    OrderDetailPanel,
    OrderHeader,
    StatusBadge,
    ProgressSection,
    RouteSection,
    PartySection,
    DriverSection,
    LineItemRow,
    PaymentSummary,
    CancellationSection,
)
from ..services.maps import RouteRenderer
from ..utils.formatting import format_date, format_money

DRIVER_VISIBLE_STATUSES = (OrderStatus.PICKING_UP, OrderStatus.DELIVERING)

AUTHORIZATION_RELEASED = "authorization_released"
AUTHORIZATION_RELEASED_NOTE = (
    "Payment authorization has been released. No charge will appear on your statement."
)


class OrderDetailView:
    """Assembles the order panel from a live reconciler.

    The route renderer is only invoked when the delivery route is visible;
    contact controls are omitted, not disabled, when there is nothing to offer.
    """

    def __init__(
        self,
        reconciler: LiveOrderReconciler,
        route_renderer: Optional[RouteRenderer] = None,
        support_email: Optional[str] = None,
        support_phone: Optional[str] = None,
        timezone: Optional[str] = None,
    ):
        self.reconciler = reconciler
        self.route_renderer = route_renderer
        self.support_email = settings.SUPPORT_EMAIL if support_email is None else support_email
        self.support_phone = settings.SUPPORT_PHONE if support_phone is None else support_phone
        self.timezone = timezone or settings.DISPLAY_TIMEZONE

    def contact(self, role: ContactRole) -> Union[NoAction, CallAction, MessageAction]:
        return resolve_contact(
            role,
            self.reconciler.order,
            support_email=self.support_email,
            support_phone=self.support_phone,
        )

    def _offered(self, role: ContactRole):
        action = self.contact(role)
        return None if isinstance(action, NoAction) else action

    def render(self) -> OrderDetailPanel:
        order = self.reconciler.order
        facts = self.reconciler.facts

        return OrderDetailPanel(
            header=OrderHeader(
                order_id=order.id,
                vendor_name=order.vendor_name,
                placed_on=format_date(order.created_at, self.timezone),
                total=format_money(order.amount.total),
                item_count=order.item_count,
                badge=StatusBadge(
                    status=status_name(facts.status),
                    label=facts.label,
                    color=facts.color,
                    css_class=badge_class(facts.color),
                ),
            ),
            progress=ProgressSection(percent=facts.progress, message=facts.message) if facts.is_active else None,
            route=self._route(order) if facts.show_route else None,
            delivery=PartySection(
                name=order.customer_name,
                location=order.customer_location,
                phone=format_phone(order.customer_phone),
                email=order.customer_email,
            ),
            vendor=PartySection(
                name=order.vendor_name,
                location=order.vendor_location,
                phone=format_phone(order.vendor_phone),
                email=order.vendor_email,
                contact=self._offered(ContactRole.VENDOR) if facts.is_active else None,
            ),
            driver=self._driver(order),
            items=[
                LineItemRow(
                    name=item.name,
                    sku=item.barcode,
                    quantity=item.quantity,
                    price=format_money(item.price),
                    total=format_money(item.line_total),
                )
                for item in order.line_items
            ],
            payment=self._payment(order),
            special_instructions=order.special_instructions or None,
            cancellation=self._cancellation(order),
            support=self._offered(ContactRole.SUPPORT) if facts.is_active else None,
            loading=self.reconciler.loading,
        )

    def _route(self, order: Order) -> Optional[RouteSection]:
        endpoints = route_endpoints(order)
        if endpoints is None:
            return None

        rendered = None
        if self.route_renderer is not None:
            rendered = self.route_renderer.render(endpoints)

        estimate = self.reconciler.facts.delivery_estimate
        return RouteSection(
            source_address=endpoints.source_address,
            source_coordinates=endpoints.source_coordinates,
            destination_address=endpoints.destination_address,
            destination_coordinates=endpoints.destination_coordinates,
            map=rendered,
            distance=estimate.distance if estimate else None,
            estimated_time=estimate.estimated_time if estimate else None,
        )

    def _driver(self, order: Order) -> Optional[DriverSection]:
        if order.status not in DRIVER_VISIBLE_STATUSES or not order.driver_id:
            return None
        return DriverSection(
            name=order.driver_name or "Driver",
            phone=format_phone(order.driver_phone) or None,
            contact=self._offered(ContactRole.DRIVER),
        )

    def _payment(self, order: Order) -> PaymentSummary:
        amount = order.amount
        if order.payment_intent_id:
            reference = f"Payment ID: {order.payment_intent_id[:8]}..."
        else:
            reference = "Pending payment confirmation"

        return PaymentSummary(
            subtotal=format_money(amount.subtotal),
            delivery_fee=format_money(amount.delivery_fee),
            service_fee=format_money(amount.service_fee),
            tax=format_money(amount.tax),
            tip=format_money(amount.tip) if amount.tip else None,
            total=format_money(amount.total),
            payment_reference=reference,
        )

    def _cancellation(self, order: Order) -> Optional[CancellationSection]:
        if order.status != OrderStatus.CANCELLED:
            return None

        payment_note = None
        if order.payment_status == AUTHORIZATION_RELEASED:
            payment_note = AUTHORIZATION_RELEASED_NOTE
        elif order.payment_status:
            payment_note = f"Payment status: {order.payment_status}"

        return CancellationSection(
            reason=order.cancelled_reason or None,
            cancelled_on=format_date(order.cancelled_at, self.timezone) if order.cancelled_at else None,
            payment_note=payment_note,
        )
