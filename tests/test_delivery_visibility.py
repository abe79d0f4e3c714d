import pytest

from storefront.core.delivery_visibility import (
    should_render_route,
    route_endpoints,
    format_distance,
    format_minutes,
    delivery_estimate,
)
from storefront.models.order import DeliveryInfo, OrderStatus

from factories import CUSTOMER_COORDINATES, VENDOR_COORDINATES


@pytest.fixture
def routed(make_order):
    def build(**overrides):
        fields = {
            "status": "DELIVERING",
            "vendorCoordinates": VENDOR_COORDINATES,
            "customerCoordinates": CUSTOMER_COORDINATES,
            "deliveryInfo": {"distanceInKm": 6.4, "estimatedTime": 25},
        }
        fields.update(overrides)
        return make_order(**fields)
    return build


def test_route_shown_while_delivering(routed):
    assert should_render_route(routed())


def test_route_hidden_while_awaiting_driver(routed):
    assert not should_render_route(routed(status="AWAITING_DRIVER"))


@pytest.mark.parametrize("override", [
    {"vendorCoordinates": None},
    {"customerCoordinates": None},
    {"status": "PREPARING"},
])
def test_each_condition_is_required(routed, override):
    assert not should_render_route(routed(**override))


@pytest.mark.parametrize("status", list(OrderStatus))
def test_route_statuses(routed, status):
    expected = status in (OrderStatus.PICKING_UP, OrderStatus.DELIVERING, OrderStatus.DELIVERED)
    assert should_render_route(routed(status=status.value)) is expected


def test_unknown_status_hides_route(routed):
    assert not should_render_route(routed(status="returned_to_vendor"))


def test_route_endpoints(routed):
    endpoints = route_endpoints(routed())

    assert endpoints.source_address == "MP Nagar Zone 1, Bhopal"
    assert endpoints.destination_address == "12 Lake View Rd, Bhopal"
    assert endpoints.source_coordinates.latitude == 23.25
    assert endpoints.destination_coordinates.longitude == 77.40


def test_route_endpoints_without_addresses(routed):
    endpoints = route_endpoints(routed(vendorLocation=None, customerLocation=None))

    assert endpoints.source_address == ""
    assert endpoints.destination_address == ""


def test_no_endpoints_when_hidden(routed):
    assert route_endpoints(routed(status="PREPARING")) is None


def test_distance_prefers_miles():
    assert format_distance(DeliveryInfo(distanceInKm=6.44, distanceInMiles=4.0)) == "4.0 miles"
    assert format_distance(DeliveryInfo(distanceInKm=6.44)) == "6.4 km"
    assert format_distance(DeliveryInfo()) == "N/A"
    assert format_distance(None) == "N/A"


@pytest.mark.parametrize("minutes,expected", [
    (0, "0 min"),
    (45, "45 min"),
    (60, "1h 0m"),
    (125, "2h 5m"),
    (None, "N/A"),
])
def test_format_minutes(minutes, expected):
    assert format_minutes(minutes) == expected


def test_delivery_estimate(routed):
    estimate = delivery_estimate(routed())

    assert estimate.distance == "6.4 km"
    assert estimate.estimated_time == "25 min"


def test_no_estimate_without_route_or_info(routed):
    assert delivery_estimate(routed(status="AWAITING_DRIVER")) is None
    assert delivery_estimate(routed(deliveryInfo=None)) is None
