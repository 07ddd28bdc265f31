from typing import Any, Optional
import json
import redis.asyncio as redis
from redis.exceptions import RedisError
import structlog

from .storage import _to_jsonable

logger = structlog.get_logger()


class RedisStorage:
    """
    Persists preload snapshots in Redis, one JSON value per network.

    Keys are "<key_prefix>:<network id>". Snapshots do not expire; a newer
    prepare() overwrites them.
    """

    def __init__(self, redis_url: str, key_prefix: str = "preload",
                 client: Optional[redis.Redis] = None):
        """Initialize Redis storage with connection URL and key prefix."""
        self.redis_url = redis_url
        self.key_prefix = key_prefix
        self.redis: Optional[redis.Redis] = client

    async def connect(self) -> None:
        """Establish connection to Redis."""
        try:
            client = redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True
            )
            await client.ping()
            self.redis = client
            logger.info("redis_connection_established")
        except RedisError as e:
            logger.error("redis_connection_failed", error=str(e))
            raise

    async def disconnect(self) -> None:
        """Close Redis connection."""
        if self.redis:
            await self.redis.aclose()
            self.redis = None
            logger.info("redis_connection_closed")

    def key_for(self, network: Any) -> str:
        return f"{self.key_prefix}:{network.id}"

    async def get_data(self, network: Any) -> Optional[Any]:
        """Get the persisted blob for a network, None when missing or unreadable."""
        key = self.key_for(network)
        try:
            if not self.redis:
                await self.connect()
            value = await self.redis.get(key)
        except RedisError as e:
            logger.error("redis_get_failed", key=key, error=str(e))
            return None

        if value is None:
            return None
        try:
            return json.loads(value)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning("preload_storage_corrupt", network=network.id, key=key, error=str(e))
            return None

    async def save_data(self, network: Any, data: Any) -> None:
        """
        Persist a snapshot for a network.

        Raises:
            RedisError: If the value could not be written
        """
        key = self.key_for(network)
        serialized_value = json.dumps(_to_jsonable(data))
        try:
            if not self.redis:
                await self.connect()
            await self.redis.set(key, serialized_value)
        except RedisError as e:
            logger.error("redis_set_failed", key=key, error=str(e))
            raise
        logger.debug("preload_storage_saved", network=network.id, key=key)
