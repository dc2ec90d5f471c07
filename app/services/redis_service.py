# app/services/redis_service.py
import json
import logging
from typing import Any, Dict, Optional

import redis.asyncio as redis  # asyncio client for FastAPI

from app.core.config import settings

logger = logging.getLogger(__name__)


class RedisClient:
    """Publishes realtime events to Redis so processes outside this API can follow them."""

    def __init__(self, host: str = settings.REDIS_HOST, port: int = settings.REDIS_PORT,
                 prefix: str = settings.REDIS_CHANNEL_PREFIX):
        self.host = host
        self.port = port
        self.prefix = prefix
        self._client: Optional[redis.Redis] = None

    async def connect(self):
        if not self._client:
            client = redis.Redis(host=self.host, port=self.port, decode_responses=True)
            try:
                await client.ping()
            except redis.RedisError as e:
                logger.error("Failed to connect to Redis at %s:%s: %s", self.host, self.port, e)
                await client.aclose()
                return
            self._client = client
            logger.info("Connected to Redis at %s:%s", self.host, self.port)

    async def disconnect(self):
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.info("Disconnected from Redis.")

    @property
    def connected(self) -> bool:
        return self._client is not None

    def channel_for(self, room: str) -> str:
        return f"{self.prefix}:{room}"

    async def publish_message(self, channel: str, message: Dict[str, Any]) -> bool:
        if not self._client:
            await self.connect()  # Attempt to connect if not already connected
        if not self._client:
            logger.warning("Could not publish to %s: Redis client not connected", channel)
            return False
        try:
            await self._client.publish(channel, json.dumps(message))
        except redis.RedisError as e:
            logger.warning("Failed to publish to %s: %s", channel, e)
            return False
        logger.debug("Published %s on %s", message.get("event"), channel)
        return True


# Global instance used by the application
redis_client = RedisClient()


# Called on FastAPI startup and shutdown
async def startup_redis_client():
    if settings.REDIS_ENABLED:
        await redis_client.connect()


async def shutdown_redis_client():
    await redis_client.disconnect()
