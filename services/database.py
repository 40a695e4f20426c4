from __future__ import annotations

import logging
from typing import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from config.settings import settings

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# SQLite tuning
# -----------------------------------------------------------------------------
def enable_case_sensitive_like(engine: AsyncEngine) -> None:
    """
    SQLite's LIKE ignores ASCII case by default. Name filters are
    case-sensitive substring matches, so switch every new connection over.
    """
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA case_sensitive_like = ON")
        cursor.close()

# -----------------------------------------------------------------------------
# Database Engine
# -----------------------------------------------------------------------------
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DATABASE_ECHO,
    future=True,
)
enable_case_sensitive_like(engine)

# -----------------------------------------------------------------------------
# Session Maker
# -----------------------------------------------------------------------------
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

# -----------------------------------------------------------------------------
# Declarative Base
# -----------------------------------------------------------------------------
class Base(DeclarativeBase):
    pass

# -----------------------------------------------------------------------------
# Dependency
# -----------------------------------------------------------------------------
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency to provide a database session.
    Ensures the session is closed after the request is processed.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

# -----------------------------------------------------------------------------
# Lifecycle Utilities
# -----------------------------------------------------------------------------
async def init_db():
    """
    Initialize database tables.
    Tables are plain per-entity tables without foreign key constraints.
    Models register on Base.metadata when the routers import them.
    """
    async with engine.begin() as conn:
        try:
            await conn.run_sync(Base.metadata.create_all)
        except Exception as e:
            logger.warning("Could not create tables: %s", e)

async def close_db():
    """
    Close the database engine.
    Should be called on application shutdown.
    """
    await engine.dispose()
