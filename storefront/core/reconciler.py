"""The live copy of one order, kept current by pushes and manual refresh.

One reconciler belongs to one open order panel. It is the only writer of
its order; everything the panel shows is recomputed from that order on
each apply.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, TYPE_CHECKING

from ..models.order import Order, StatusValue
from .errors import OrderNotFound, OrderStoreError
from .status_policy import describe_status, status_message, is_active
from .delivery_visibility import DeliveryEstimate, should_render_route, delivery_estimate

if TYPE_CHECKING:
    from ..services.order_store import OrderStore
    from ..services.subscriptions import OrderSubscription

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderFacts:
    """Presentation facts derived from a single order snapshot"""

    status: StatusValue
    label: str
    progress: int
    color: str
    message: Optional[str]
    is_active: bool
    show_route: bool
    delivery_estimate: Optional[DeliveryEstimate]

    @classmethod
    def from_order(cls, order: Order) -> "OrderFacts":
        presentation = describe_status(order.status)
        return cls(
            status=order.status,
            label=presentation.label,
            progress=presentation.progress,
            color=presentation.color,
            message=status_message(order.status),
            is_active=is_active(order.status),
            show_route=should_render_route(order),
            delivery_estimate=delivery_estimate(order),
        )


Listener = Callable[[OrderFacts], None]


class RefreshOutcome(Enum):
    """Why a refresh did or did not change the panel; truthy only when applied"""

    APPLIED = "applied"
    SKIPPED = "skipped"  # closed, or another refresh in flight
    FAILED = "failed"
    SUPERSEDED = "superseded"  # a push landed while fetching

    def __bool__(self) -> bool:
        return self is RefreshOutcome.APPLIED


class LiveOrderReconciler:
    """Owns the displayed order and its update lifecycle.

    Ordering between refresh and push: a refresh result is dropped when a
    push was applied while the refresh was in flight, since the push is at
    least as recent as the moment the refresh started. Pushes themselves
    always win (last write wins), with no timestamp comparison.
    """

    def __init__(self, order: Order, store: "OrderStore"):
        self._order = order
        self._facts = OrderFacts.from_order(order)
        self._store = store
        self._loading = False
        self._closed = False
        self._applied = 0
        self._listeners: List[Listener] = []
        self._subscriptions: List["OrderSubscription"] = []

    @property
    def order(self) -> Order:
        return self._order

    @property
    def order_id(self) -> str:
        return self._order.id

    @property
    def facts(self) -> OrderFacts:
        return self._facts

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def closed(self) -> bool:
        return self._closed

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def apply_push(self, order: Order) -> bool:
        """Replace the held order outright. Returns False when the update was refused."""
        if self._closed:
            logger.info(f"Dropping update for order {order.id}: panel already closed")
            return False
        if order.id != self._order.id:
            logger.warning(f"Dropping update for order {order.id} sent to panel for {self._order.id}")
            return False

        self._order = order
        self._facts = OrderFacts.from_order(order)
        self._applied += 1
        logger.debug(f"Applied update for order {order.id}: {self._facts.label}")

        for listener in list(self._listeners):
            try:
                listener(self._facts)
            except Exception:
                # A broken listener must not stop the others or the subscription feeding us
                logger.exception(f"Listener failed for order {order.id}")
        return True

    async def refresh(self) -> RefreshOutcome:
        """Fetch the order again and apply it.

        The outcome is truthy only when a fresh record was applied. Failures
        keep the current order untouched.
        """
        if self._closed:
            return RefreshOutcome.SKIPPED
        if self._loading:
            logger.debug(f"Refresh already running for order {self.order_id}")
            return RefreshOutcome.SKIPPED

        self._loading = True
        applied_before = self._applied
        try:
            fresh = await self._store.get_order(self.order_id)
        except (OrderNotFound, OrderStoreError) as e:
            logger.warning(f"Refresh failed for order {self.order_id}: {e}")
            return RefreshOutcome.FAILED
        except Exception:
            logger.exception(f"Refresh of order {self.order_id} failed unexpectedly")
            return RefreshOutcome.FAILED
        finally:
            self._loading = False

        if self._closed:
            return RefreshOutcome.SKIPPED
        if self._applied != applied_before:
            logger.info(f"Discarding refresh of order {self.order_id}: a newer update arrived meanwhile")
            return RefreshOutcome.SUPERSEDED
        if not self.apply_push(fresh):
            return RefreshOutcome.FAILED
        return RefreshOutcome.APPLIED

    async def attach(self, subscription: "OrderSubscription") -> None:
        """Start feeding this reconciler from a subscription; it is cancelled on close()."""
        if self._closed:
            raise RuntimeError(f"Panel for order {self.order_id} is closed")
        self._subscriptions.append(subscription)
        await subscription.start(self.apply_push)

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        subscriptions, self._subscriptions = self._subscriptions, []
        for subscription in subscriptions:
            await subscription.cancel()
        self._listeners.clear()
        logger.info(f"Closed live panel for order {self.order_id}")

    async def __aenter__(self) -> "LiveOrderReconciler":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
