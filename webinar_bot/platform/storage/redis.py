from typing import Optional

from redis.asyncio import Redis

from webinar_bot.platform.cache.redis import build_redis
from webinar_bot.platform.storage.base import KeyValueStore


class RedisStore(KeyValueStore):
    def __init__(self, redis_url: Optional[str] = None, client: Optional[Redis] = None):
        self.client = client if client is not None else build_redis(redis_url)

    async def close(self) -> None:
        await self.client.aclose()

    async def _get_raw(self, key: str) -> Optional[str]:
        return await self.client.get(key)

    async def _set_raw(self, key: str, raw: str) -> None:
        await self.client.set(key, raw)
