import asyncio

import pytest

from storefront.core.contacts import CallAction, MessageAction
from storefront.core.delivery_visibility import route_endpoints
from storefront.core.reconciler import LiveOrderReconciler
from storefront.services.maps import DirectionsLinkRenderer
from storefront.views.order_detail import OrderDetailView

from factories import FakeOrderStore, CUSTOMER_COORDINATES, VENDOR_COORDINATES

SUPPORT_EMAIL = "customercontact@bhopalbazaar.com"


class RecordingRenderer:
    def __init__(self):
        self.calls = []

    def render(self, endpoints):
        self.calls.append(endpoints)
        return {"provider": "test"}


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def render(make_order, renderer):
    def build(**overrides):
        order = make_order(**overrides)
        reconciler = LiveOrderReconciler(order, FakeOrderStore(order))
        view = OrderDetailView(
            reconciler,
            route_renderer=renderer,
            support_email=SUPPORT_EMAIL,
            timezone="Asia/Kolkata",
        )
        return view.render()
    return build


def test_header(render):
    panel = render()

    assert panel.header.order_id == "ord-1001"
    assert panel.header.vendor_name == "Fresh Mart"
    assert panel.header.placed_on == "Mon, Jan 5, 2026, 1:30 PM"
    assert panel.header.total == "$13.49"
    assert panel.header.item_count == 3
    assert panel.header.badge.status == "PREPARING"
    assert panel.header.badge.css_class == "bg-yellow-100 text-yellow-800"


def test_out_for_delivery_shows_route(render, renderer):
    panel = render(
        status="DELIVERING",
        vendorCoordinates=VENDOR_COORDINATES,
        customerCoordinates=CUSTOMER_COORDINATES,
        deliveryInfo={"distanceInKm": 6.4, "estimatedTime": 25},
    )

    assert panel.header.badge.label == "Out for Delivery"
    assert panel.progress.percent == 80
    assert panel.progress.message == "Your order is on the way to you!"
    assert panel.route.source_address == "MP Nagar Zone 1, Bhopal"
    assert panel.route.map == {"provider": "test"}
    assert panel.route.distance == "6.4 km"
    assert panel.route.estimated_time == "25 min"
    assert len(renderer.calls) == 1


def test_route_without_delivery_info(render):
    panel = render(status="PICKING_UP", vendorCoordinates=VENDOR_COORDINATES, customerCoordinates=CUSTOMER_COORDINATES)

    assert panel.route is not None
    assert panel.route.distance is None
    assert panel.route.estimated_time is None


def test_awaiting_driver_hides_route(render, renderer):
    panel = render(status="AWAITING_DRIVER", vendorCoordinates=VENDOR_COORDINATES, customerCoordinates=CUSTOMER_COORDINATES)

    assert panel.header.badge.label == "Awaiting Driver"
    assert panel.progress.percent == 50
    assert panel.route is None
    assert renderer.calls == []


def test_cancelled_order(render):
    panel = render(
        status="CANCELLED",
        cancelled_reason="vendor unavailable",
        cancelled_at={"seconds": 1767603600},
        payment_status="authorization_released",
    )

    assert panel.header.badge.label == "Cancelled"
    assert panel.header.badge.color == "red"
    assert panel.progress is None
    assert panel.vendor.contact is None
    assert panel.support is None
    assert panel.cancellation.reason == "vendor unavailable"
    assert panel.cancellation.cancelled_on == "Mon, Jan 5, 2026, 2:30 PM"
    assert panel.cancellation.payment_note == (
        "Payment authorization has been released. No charge will appear on your statement."
    )


def test_cancelled_order_with_other_payment_state(render):
    panel = render(status="CANCELLED", payment_status="refunded")

    assert panel.cancellation.reason is None
    assert panel.cancellation.payment_note == "Payment status: refunded"


def test_no_cancellation_section_for_live_orders(render):
    assert render().cancellation is None


def test_delivered_order_offers_no_contacts(render):
    panel = render(status="DELIVERED")

    assert panel.progress is None
    assert panel.vendor.contact is None
    assert panel.support is None


def test_active_order_offers_contacts(render):
    panel = render()

    assert isinstance(panel.vendor.contact, CallAction)
    assert isinstance(panel.support, MessageAction)
    assert panel.support.address == SUPPORT_EMAIL


def test_vendor_contact_omitted_when_unreachable(render):
    assert render(vendorPhone=None, vendorEmail=None).vendor.contact is None


@pytest.mark.parametrize("status,visible", [
    ("AWAITING_DRIVER", False),
    ("PICKING_UP", True),
    ("DELIVERING", True),
    ("DELIVERED", False),
])
def test_driver_section(render, status, visible):
    panel = render(status=status, driverID="drv-3", driverName="Ravi", driverPhone="1234567890")

    assert (panel.driver is not None) is visible
    if visible:
        assert panel.driver.name == "Ravi"
        assert panel.driver.phone == "(123) 456-7890"
        assert panel.driver.contact.href == "tel:1234567890"


def test_driver_section_needs_assigned_driver(render):
    assert render(status="DELIVERING").driver is None


def test_unnamed_driver(render):
    panel = render(status="DELIVERING", driverID="drv-3")

    assert panel.driver.name == "Driver"
    assert panel.driver.phone is None
    assert panel.driver.contact is None


def test_items_and_payment(render):
    panel = render(paymentIntentId="pi_3NkQ9x2eZvKYlo2C")

    assert panel.items[0].name == "Basmati Rice 1kg"
    assert panel.items[0].sku == "8901234567890"
    assert panel.items[0].price == "$3.50"
    assert panel.items[0].total == "$7.00"
    assert panel.payment.subtotal == "$9.25"
    assert panel.payment.delivery_fee == "$2.50"
    assert panel.payment.tip is None
    assert panel.payment.payment_reference == "Payment ID: pi_3NkQ9..."


def test_tip_row_only_when_tipped(render):
    amount = {"subtotal": 9.25, "tax": 0.74, "serviceFee": 1.0, "deliveryFee": 2.5, "tip": 2, "total": 15.49}

    assert render(amount=amount).payment.tip == "$2.00"
    assert render(amount={**amount, "tip": 0}).payment.tip is None


def test_pending_payment_reference(render):
    assert render().payment.payment_reference == "Pending payment confirmation"


def test_unknown_status_renders(render):
    panel = render(status="returned_to_vendor")

    assert panel.header.badge.label == "returned_to_vendor"
    assert panel.header.badge.color == "gray"
    assert panel.progress.percent == 0
    assert panel.progress.message is None


async def test_loading_flag_follows_reconciler(order):
    store = FakeOrderStore(order)
    store.gate = asyncio.Event()
    reconciler = LiveOrderReconciler(order, store)
    view = OrderDetailView(reconciler)
    assert not view.render().loading

    refresh = asyncio.create_task(reconciler.refresh())
    await asyncio.sleep(0)
    assert view.render().loading

    store.gate.set()
    await refresh
    assert not view.render().loading


def test_directions_link(make_order):
    order = make_order(status="DELIVERING", vendorCoordinates=VENDOR_COORDINATES, customerCoordinates=CUSTOMER_COORDINATES)

    rendered = DirectionsLinkRenderer().render(route_endpoints(order))

    assert rendered["provider"] == "google_maps"
    assert rendered["url"] == (
        "https://www.google.com/maps/dir/?api=1&origin=23.25%2C77.41&destination=23.26%2C77.4&travelmode=driving"
    )
