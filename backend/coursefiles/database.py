"""Course file store: async SQLite engine and request-scoped sessions."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import AsyncGenerator

from sqlalchemy import event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from coursefiles.config import settings
from coursefiles.models.base import Base

logger = logging.getLogger(__name__)


def _on_connect(dbapi_conn, _connection_record):
    # Readers (listings) must not block the relicensing writer
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA synchronous=NORMAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


db_path = Path(settings.database_path)
db_path.parent.mkdir(parents=True, exist_ok=True)

engine = create_async_engine(
    f"sqlite+aiosqlite:///{db_path}",
    echo=settings.debug and settings.log_level == "DEBUG",
    pool_size=settings.max_db_connections,
    max_overflow=0,
)
event.listen(engine.sync_engine, "connect", _on_connect)

async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Session for one request; uncommitted work is discarded at the end."""
    async with async_session() as session:
        try:
            yield session
        finally:
            await session.close()


async def ping_db(db: AsyncSession) -> bool:
    """Whether the file store answers a trivial query."""
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("File store is not reachable")
        return False
    return True


async def init_db() -> None:
    """Create the context, file, user, course and log store tables."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("File store ready at %s (%d tables)", db_path, len(Base.metadata.tables))
