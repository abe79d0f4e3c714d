from typing import Callable

from ..services.maps import DirectionsLinkRenderer, RouteRenderer
from ..services.order_store import OrderStore, SupabaseOrderStore
from ..services.subscriptions import OrderSubscription, make_subscription

SubscriptionFactory = Callable[[str, OrderStore], OrderSubscription]

_order_store = SupabaseOrderStore()
_route_renderer = DirectionsLinkRenderer()


def get_order_store() -> OrderStore:
    return _order_store


def get_route_renderer() -> RouteRenderer:
    return _route_renderer


def get_subscription_factory() -> SubscriptionFactory:
    return make_subscription
