"""Exceptions raised by the order tracking core and its store adapters."""


class OrderTrackingError(Exception):
    """Base class for order tracking failures"""


class OrderNotFound(OrderTrackingError):
    def __init__(self, order_id: str):
        super().__init__(f"Order {order_id} not found")
        self.order_id = order_id


class OrderStoreError(OrderTrackingError):
    """The order store could not be read or returned an unusable document"""


class InvalidStatusError(OrderTrackingError, ValueError):
    def __init__(self, raw):
        super().__init__(f"Unknown order status: {raw!r}")
        self.raw = raw


class InvalidTransitionError(OrderTrackingError):
    def __init__(self, current, target, reason: str):
        super().__init__(f"Cannot move order from {current} to {target}: {reason}")
        self.current = current
        self.target = target
        self.reason = reason
