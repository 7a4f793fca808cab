from typing import Optional

from sqlalchemy import Column, String, Text, select
from sqlalchemy.ext.asyncio import AsyncEngine

from webinar_bot.platform.db.base import Base, StoredRecord
from webinar_bot.platform.db.session import build_engine, build_sessionmaker
from webinar_bot.platform.logger import get_logger
from webinar_bot.platform.storage.base import KeyValueStore

logger = get_logger(__name__)


class KeyValueRecord(StoredRecord):
    __tablename__ = "kv_records"
    key = Column(String(255), unique=True, nullable=False, index=True)
    value = Column(Text, nullable=False)


class SqlStore(KeyValueStore):
    """Embedded or server-backed store, one row per key."""

    def __init__(self, database_url: Optional[str] = None, engine: Optional[AsyncEngine] = None):
        if engine is None:
            engine = build_engine(database_url)
        self.engine = engine
        self.session_factory = build_sessionmaker(engine)

    async def setup(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Key-value table ready")

    async def close(self) -> None:
        await self.engine.dispose()

    async def _get_raw(self, key: str) -> Optional[str]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(KeyValueRecord.value).where(KeyValueRecord.key == key)
            )
            return result.scalar_one_or_none()

    async def _set_raw(self, key: str, raw: str) -> None:
        async with self.session_factory() as session:
            result = await session.execute(select(KeyValueRecord).where(KeyValueRecord.key == key))
            record = result.scalar_one_or_none()
            if record is None:
                session.add(KeyValueRecord(key=key, value=raw))
            else:
                record.value = raw  # type: ignore
            await session.commit()
