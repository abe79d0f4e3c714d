"""Sources of order updates for a live panel.

Both transports share one contract: start(sink) begins delivering Order
snapshots to sink on a background task, cancel() stops it and waits until
the task has finished, so nothing is delivered after cancel() returns.
"""
import asyncio
import logging
from typing import Any, Callable, Optional

from pydantic import ValidationError
from redis import RedisError

from ..config import settings
from ..core.cache import CacheKeys
from ..core.errors import OrderNotFound, OrderStoreError
from ..models.order import Order
from .order_store import OrderStore
from .redis import redis_client

logger = logging.getLogger(__name__)

Sink = Callable[[Order], Any]


class OrderSubscription:
    def __init__(self, order_id: str):
        self.order_id = order_id
        self._task: Optional[asyncio.Task] = None

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self, sink: Sink) -> None:
        if self._task is not None:
            raise RuntimeError(f"{type(self).__name__} for order {self.order_id} already started")
        self._task = asyncio.create_task(self._run(sink), name=f"{type(self).__name__}:{self.order_id}")
        logger.info(f"Started {type(self).__name__} for order {self.order_id}")

    async def cancel(self) -> None:
        task = self._task
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        except Exception:
            logger.exception(f"{type(self).__name__} for order {self.order_id} had failed")
        logger.info(f"Stopped {type(self).__name__} for order {self.order_id}")

    async def _run(self, sink: Sink) -> None:
        raise NotImplementedError


class PollingSubscription(OrderSubscription):
    """Re-reads the order store on a fixed interval"""

    def __init__(self, order_id: str, store: OrderStore, interval: Optional[float] = None):
        super().__init__(order_id)
        self.store = store
        self.interval = settings.ORDER_POLL_SECONDS if interval is None else interval

    async def _run(self, sink: Sink) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                order = await self.store.get_order(self.order_id)
            except (OrderNotFound, OrderStoreError) as e:
                logger.warning(f"Polling order {self.order_id} failed: {e}")
                continue
            except Exception:
                logger.exception(f"Polling order {self.order_id} failed unexpectedly")
                continue
            sink(order)


class RedisPushSubscription(OrderSubscription):
    """Listens for snapshots published on the order's Redis channel"""

    def __init__(self, order_id: str, redis=None, retry_delay: Optional[float] = None):
        super().__init__(order_id)
        self.redis = redis or redis_client
        self.channel = CacheKeys.ORDER_UPDATES.format(order_id=order_id)
        self.retry_delay = settings.ORDER_POLL_SECONDS if retry_delay is None else retry_delay

    async def _run(self, sink: Sink) -> None:
        while True:
            try:
                await self._listen(sink)
            except RedisError as e:
                logger.warning(f"Lost {self.channel}, resubscribing in {self.retry_delay}s: {e}")
            await asyncio.sleep(self.retry_delay)

    async def _listen(self, sink: Sink) -> None:
        pubsub = self.redis.pubsub()
        try:
            await pubsub.subscribe(self.channel)
            async for message in pubsub.listen():
                if message.get("type") != "message":
                    continue
                try:
                    order = Order.model_validate_json(message["data"])
                except ValidationError as e:
                    logger.warning(f"Ignoring malformed update on {self.channel}: {e}")
                    continue
                sink(order)
        finally:
            await pubsub.aclose()


def make_subscription(order_id: str, store: OrderStore, transport: Optional[str] = None) -> OrderSubscription:
    transport = transport or settings.ORDER_UPDATES_TRANSPORT
    if transport == "poll":
        return PollingSubscription(order_id, store)
    if transport == "push":
        return RedisPushSubscription(order_id)
    raise ValueError(f"Unknown order update transport: {transport!r}")
