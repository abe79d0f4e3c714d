import json
import logging
from typing import Optional, Any

import redis
import redis.asyncio as aioredis

from ..config import settings

logger = logging.getLogger(__name__)


class RedisClient:
    def __init__(self, url: Optional[str] = None):
        url = url or settings.REDIS_URL
        self.client = redis.from_url(url, decode_responses=True)
        # Pub/sub listeners run on the event loop
        self.async_client = aioredis.from_url(url, decode_responses=True)

    # Basic operations
    def get(self, key: str) -> Optional[Any]:
        try:
            value = self.client.get(key)
        except redis.ConnectionError as e:
            logger.warning(f"Redis unavailable reading {key}: {e}")
            return None
        if value:
            try:
                return json.loads(value)
            except ValueError:
                return value
        return None

    # Pub/sub
    def publish(self, channel: str, message: Any) -> int:
        """Returns the number of listeners that received the message"""
        if isinstance(message, (dict, list)):
            message = json.dumps(message)
        return self.client.publish(channel, message)

    def pubsub(self):
        return self.async_client.pubsub()

    def ping(self) -> bool:
        return self.client.ping()

    async def close(self):
        self.client.close()
        await self.async_client.aclose()

redis_client = RedisClient()
