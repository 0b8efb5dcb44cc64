from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from tagwise.utils.logging import get_logger

if TYPE_CHECKING:
    from redis.asyncio import Redis

logger = get_logger(__name__)

DEFAULT_TTL = 60 * 5  # 5 minutes


class CacheService:
    """JSON key/value cache on Redis.

    Every operation fails open: errors are logged and reads behave like a
    miss, so an unreachable cache never fails a request.
    """

    def __init__(self, client: Redis, *, default_ttl: int = DEFAULT_TTL) -> None:
        self._client = client
        self._default_ttl = default_ttl

    @staticmethod
    def generate_key(*parts: Any) -> str:
        """Join key parts with ':'; None becomes the literal 'null'."""
        return ":".join("null" if p is None else str(p) for p in parts)

    async def get(self, key: str) -> Any | None:
        try:
            raw = await self._client.get(key)
        except Exception as err:
            logger.error("Cache get failed for %s: %s", key, err)
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (TypeError, ValueError) as err:
            logger.warning("Discarding undecodable cache entry %s: %s", key, err)
            return None

    async def set(self, key: str, value: Any, ttl_seconds: int | None = None) -> None:
        try:
            payload = json.dumps(value, default=str)
            await self._client.set(key, payload, ex=ttl_seconds or self._default_ttl)
        except Exception as err:
            logger.error("Cache set failed for %s: %s", key, err)

    async def delete(self, key: str) -> None:
        try:
            await self._client.delete(key)
        except Exception as err:
            logger.error("Cache delete failed for %s: %s", key, err)

    async def delete_by_pattern(self, pattern: str) -> None:
        try:
            batch: list[Any] = []
            async for key in self._client.scan_iter(match=pattern, count=100):
                batch.append(key)
                if len(batch) >= 100:
                    await self._client.delete(*batch)
                    batch = []
            if batch:
                await self._client.delete(*batch)
        except Exception as err:
            logger.error("Cache delete by pattern failed for %s: %s", pattern, err)
