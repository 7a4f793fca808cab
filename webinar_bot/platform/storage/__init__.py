from webinar_bot.platform.config import Settings
from webinar_bot.platform.storage.base import KeyValueStore
from webinar_bot.platform.storage.memory import InMemoryStore


def build_store(settings: Settings) -> KeyValueStore:
    if settings.STORAGE_BACKEND == "sql":
        from webinar_bot.platform.storage.sql import SqlStore

        return SqlStore(settings.DATABASE_URL)
    if settings.STORAGE_BACKEND == "redis":
        from webinar_bot.platform.storage.redis import RedisStore

        return RedisStore(settings.REDIS_URL)
    return InMemoryStore()


__all__ = ["KeyValueStore", "InMemoryStore", "build_store"]
