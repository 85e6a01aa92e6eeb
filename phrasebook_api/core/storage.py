"""
Phrase list storage for the sync endpoints.

Each sync key owns one value: the whole phrase list, stored as a JSON array.
Unlike a cache, the store must not hide failures; a read or write that does
not reach the backend raises StorageUnavailableError so a push is never
reported as saved when it was not.
"""

import asyncio
import copy
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from redis import asyncio as aioredis
from redis.exceptions import RedisError

from phrasebook_api.config.settings import RedisSettings
from phrasebook_api.core.exceptions import StorageUnavailableError

logger = logging.getLogger(__name__)

PhraseRecords = List[Dict[str, Any]]


class PhraseStore(ABC):
    """Key-value port the sync service depends on."""

    @abstractmethod
    async def get(self, key: str) -> PhraseRecords:
        """Return the stored list for ``key`` or an empty list."""

    @abstractmethod
    async def set(self, key: str, value: PhraseRecords) -> bool:
        """Replace the stored list for ``key``."""

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        return None


class InMemoryPhraseStore(PhraseStore):
    """Process-local store for development and tests."""

    def __init__(self, initial: Optional[Dict[str, PhraseRecords]] = None):
        self._data: Dict[str, PhraseRecords] = copy.deepcopy(initial or {})
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> PhraseRecords:
        async with self._lock:
            return copy.deepcopy(self._data.get(key, []))

    async def set(self, key: str, value: PhraseRecords) -> bool:
        async with self._lock:
            self._data[key] = copy.deepcopy(list(value))
        return True

    def keys(self) -> List[str]:
        return sorted(self._data)


class RedisPhraseStore(PhraseStore):
    """
    Redis-backed phrase store.

    Values are JSON strings. A value that does not decode to a JSON array
    reads as an empty list and is logged, matching a missing key.
    """

    def __init__(self, redis_settings: Optional[RedisSettings] = None, client=None):
        """
        Initialize the store.

        Args:
            redis_settings: Connection settings (used when no client is given)
            client: Pre-built ``redis.asyncio.Redis`` client, mainly for tests
        """
        self.redis_settings = redis_settings or RedisSettings()
        self.redis_client = client
        self._connection_lock = asyncio.Lock()

    async def _client(self):
        if self.redis_client is not None:
            return self.redis_client

        async with self._connection_lock:
            if self.redis_client is None:
                logger.info(
                    "Creating Redis client",
                    extra={"redis_host": self.redis_settings.host, "redis_db": self.redis_settings.db},
                )
                self.redis_client = aioredis.from_url(
                    self.redis_settings.connection_url,
                    encoding="utf-8",
                    decode_responses=True,
                    socket_timeout=self.redis_settings.socket_timeout,
                    socket_connect_timeout=self.redis_settings.socket_timeout,
                    retry_on_timeout=True,
                    health_check_interval=30,
                )
        return self.redis_client

    async def get(self, key: str) -> PhraseRecords:
        client = await self._client()
        try:
            raw = await client.get(key)
        except RedisError as e:
            logger.error(f"Redis read failed: {e}", extra={"operation": "get"})
            raise StorageUnavailableError("read", details={"reason": str(e)}) from e

        if raw is None:
            return []

        try:
            value = json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Stored phrase list is not valid JSON, treating as empty")
            return []

        if not isinstance(value, list):
            logger.warning("Stored phrase list is not an array, treating as empty")
            return []
        return value

    async def set(self, key: str, value: PhraseRecords) -> bool:
        client = await self._client()
        payload = json.dumps(list(value), ensure_ascii=False)
        try:
            result = await client.set(key, payload)
        except RedisError as e:
            logger.error(f"Redis write failed: {e}", extra={"operation": "set"})
            raise StorageUnavailableError("write", details={"reason": str(e)}) from e

        if not result:
            raise StorageUnavailableError("write", details={"reason": "SET was not acknowledged"})
        return True

    async def ping(self) -> bool:
        try:
            client = await self._client()
            return bool(await client.ping())
        except RedisError as e:
            logger.warning(f"Redis ping failed: {e}")
            return False

    async def close(self) -> None:
        async with self._connection_lock:
            if self.redis_client is not None:
                try:
                    await self.redis_client.aclose()
                    logger.info("Disconnected from Redis")
                except RedisError as e:
                    logger.warning(f"Error during Redis disconnect: {e}")
                finally:
                    self.redis_client = None
