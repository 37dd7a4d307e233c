"""User document storage backends."""

import asyncio
import copy
import json
from typing import Any

import redis.asyncio as redis
from loguru import logger
from redis.exceptions import WatchError


class InMemoryDocumentStore:
    """Dict-backed store, used for tests and local runs without Redis."""

    def __init__(self, documents: dict[str, dict[str, Any]] | None = None):
        self._documents: dict[str, dict[str, Any]] = copy.deepcopy(documents or {})
        self._lock = asyncio.Lock()

    async def get(self, user_id: str) -> dict[str, Any] | None:
        document = self._documents.get(user_id)
        return copy.deepcopy(document) if document is not None else None

    async def update(self, user_id: str, fields: dict[str, Any]) -> None:
        async with self._lock:
            document = self._documents.setdefault(user_id, {})
            document.update(copy.deepcopy(fields))
        logger.debug(f"Updated document for {user_id}: {sorted(fields)}")


class RedisDocumentStore:
    """JSON document per user stored under ``<prefix><user_id>``."""

    def __init__(self, redis_url: str, prefix: str = "users:"):
        """
        Initialize store.

        Args:
            redis_url: Redis connection URL
            prefix: Key prefix for user documents
        """
        self.redis_url = redis_url
        self.prefix = prefix
        self._client = None

    async def connect(self) -> None:
        self._client = redis.from_url(self.redis_url, decode_responses=True)
        await self._client.ping()
        logger.info("Connected to Redis document store")

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _key(self, user_id: str) -> str:
        return f"{self.prefix}{user_id}"

    async def get(self, user_id: str) -> dict[str, Any] | None:
        if self._client is None:
            await self.connect()
        raw = await self._client.get(self._key(user_id))
        return json.loads(raw) if raw else None

    async def update(self, user_id: str, fields: dict[str, Any]) -> None:
        """Read-modify-write inside a WATCH transaction."""
        if self._client is None:
            await self.connect()

        key = self._key(user_id)
        async with self._client.pipeline(transaction=True) as pipe:
            while True:
                try:
                    await pipe.watch(key)
                    raw = await pipe.get(key)
                    document = json.loads(raw) if raw else {}
                    document.update(fields)
                    pipe.multi()
                    pipe.set(key, json.dumps(document))
                    await pipe.execute()
                    break
                except WatchError:
                    logger.debug(f"Concurrent update on {key}, retrying")
                    continue
