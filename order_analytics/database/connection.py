"""
Database engine and sessions.

One async engine per process, opened in the app lifespan (or by the seeder)
and disposed on shutdown. Report requests get a session per request through
``get_db_dependency``; the read store only issues SELECTs, so the commit at
the end of a request is a no-op for reports.
"""

import time
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

import structlog
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from order_analytics.config import get_settings
from order_analytics.database.models import Base

logger = structlog.get_logger(__name__)

_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


async def init_database(url: Optional[str] = None) -> AsyncEngine:
    """
    Open the process-wide engine and check it answers.

    Args:
        url: Override the configured ``async_url``

    Raises:
        Whatever the driver raises when the database cannot be reached
    """
    global _engine, _session_factory

    if _engine is not None:
        return _engine

    settings = get_settings()
    database_url = make_url(url or settings.database.async_url)

    # asyncpg pools internally; NullPool avoids sharing connections across loops
    _engine = create_async_engine(
        database_url,
        echo=settings.database.echo,
        pool_pre_ping=True,
        poolclass=NullPool,
    )
    _session_factory = async_sessionmaker(bind=_engine, expire_on_commit=False, autoflush=False)

    try:
        async with _engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.error("Order store unreachable", host=database_url.host, database=database_url.database, error=str(e))
        await close_database()
        raise

    logger.info("Order store connected", host=database_url.host, database=database_url.database)
    return _engine


async def close_database() -> None:
    global _engine, _session_factory

    if _engine is not None:
        await _engine.dispose()
        logger.info("Order store connection closed")
    _engine = None
    _session_factory = None


async def create_schema() -> None:
    """Create ``order_facts`` and ``transactions`` if missing"""
    if _engine is None:
        raise RuntimeError("Database not initialized. Call init_database() first.")
    async with _engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Order schema ensured", tables=sorted(Base.metadata.tables))


@asynccontextmanager
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Session scoped to the block: committed on success, rolled back on error.

    Example:
        async with get_db() as db:
            orders = await SqlOrderReadStore(db).find_orders_by_account(7, spec)
    """
    if _session_factory is None:
        raise RuntimeError("Database not initialized. Call init_database() first.")

    async with _session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception as e:
            logger.warning("Session rolled back", error_type=type(e).__name__)
            await session.rollback()
            raise


async def get_db_dependency() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding a request-scoped session"""
    async with get_db() as session:
        yield session


async def check_database_health() -> Dict[str, Any]:
    """Round-trip latency to the order store, or the failure reason"""
    start = time.perf_counter()
    try:
        async with get_db() as db:
            await db.execute(text("SELECT 1"))
    except Exception as e:
        return {"status": "unhealthy", "error": str(e)}

    return {"status": "healthy", "latency_ms": round((time.perf_counter() - start) * 1000, 2)}
