import logging
from typing import Optional, Protocol

from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError

from ..config import settings
from ..core.cache import CacheKeys
from ..core.errors import OrderNotFound, OrderStoreError
from ..models.order import Order
from .redis import redis_client, RedisClient

logger = logging.getLogger(__name__)


class OrderStore(Protocol):
    async def get_order(self, order_id: str) -> Order:
        """Raises OrderNotFound or OrderStoreError."""
        ...


class SupabaseOrderStore:
    """Reads order documents from the fulfilment backend's Supabase table"""

    def __init__(self, client=None, table: Optional[str] = None):
        self._client = client
        self.table = table or settings.ORDERS_TABLE

    @property
    def client(self):
        if self._client is None:
            from ..database import get_supabase
            self._client = get_supabase()
        return self._client

    def _fetch(self, order_id: str):
        return self.client.table(self.table).select("*").eq("id", order_id).limit(1).execute()

    async def get_order(self, order_id: str) -> Order:
        try:
            result = await run_in_threadpool(self._fetch, order_id)
        except Exception as e:
            raise OrderStoreError(f"Could not read order {order_id}: {e}") from e

        if not result.data:
            raise OrderNotFound(order_id)

        try:
            return Order.model_validate(result.data[0])
        except ValidationError as e:
            raise OrderStoreError(f"Order {order_id} is malformed: {e}") from e


def publish_order_update(order: Order, client: Optional[RedisClient] = None) -> int:
    """Push a snapshot to every live panel watching this order"""
    client = client or redis_client
    channel = CacheKeys.ORDER_UPDATES.format(order_id=order.id)
    listeners = client.publish(channel, order.model_dump_json(by_alias=True))
    logger.info(f"Published update for order {order.id} to {listeners} listener(s)")
    return listeners
