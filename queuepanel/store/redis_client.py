import logging
from typing import Optional

from redis.asyncio import Redis

from queuepanel.constants import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)


class RedisConnector:
    """
    Helper to manage the dedicated stats connection lifecycle:
      - connect()
      - close()
    """

    def __init__(self, redis_url: str, *, decode_responses: bool = True):
        self.redis_url = redis_url
        self.decode_responses = decode_responses
        self.client: Optional[Redis] = None

    async def connect(self) -> Redis:
        self.client = Redis.from_url(self.redis_url, decode_responses=self.decode_responses)
        await self.client.ping()
        logger.info("Connected to Redis for stats (PING OK): %s", self.redis_url)
        return self.client

    async def close(self) -> None:
        if self.client:
            try:
                await self.client.aclose()
            except Exception as e:
                logger.warning("Redis close failed: %s", e)
            self.client = None
