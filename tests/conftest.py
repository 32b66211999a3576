"""
Test Suite Configuration
"""
import itertools
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator, Callable

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from order_analytics.config import Settings, ReportingSettings
from order_analytics.database.models import Base, TransactionType
from order_analytics.reporting.types import OrderSnapshot, TransactionSnapshot

ACCOUNT_ID = 1
FIXED_NOW = datetime(2025, 3, 15, 14, 30, tzinfo=timezone.utc)


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings"""
    return Settings(APP_ENV="testing", reporting=ReportingSettings())


@pytest.fixture
def now() -> datetime:
    """Fixed reference instant (aware UTC)"""
    return FIXED_NOW


@pytest.fixture
def naive_now(now) -> datetime:
    """Reference instant as stored: naive UTC"""
    return now.replace(tzinfo=None)


@pytest.fixture
async def test_engine():
    """Create test database engine"""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def test_db(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session"""
    session_factory = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def make_transaction(naive_now) -> Callable[..., TransactionSnapshot]:
    """Factory for transaction snapshots; ``days_ago`` is relative to the fixed now"""
    ids = itertools.count(1)

    def factory(days_ago: float = 3, type: TransactionType = TransactionType.PAYMENT,
                amount_total: int = 1000, amount_net: int = 950, **kwargs) -> TransactionSnapshot:
        return TransactionSnapshot(
            id=kwargs.pop("id", next(ids)),
            type=type,
            processed_at=kwargs.pop("processed_at", naive_now - timedelta(days=days_ago)),
            amount_total=amount_total,
            amount_net=amount_net,
            **kwargs,
        )

    return factory


@pytest.fixture
def make_order(naive_now) -> Callable[..., OrderSnapshot]:
    """Factory for order snapshots"""
    ids = itertools.count(1)

    def factory(transactions=(), days_ago: float = 20, **kwargs) -> OrderSnapshot:
        order_pk = kwargs.pop("id", next(ids))
        return OrderSnapshot(
            id=order_pk,
            account_id=kwargs.pop("account_id", ACCOUNT_ID),
            order_id=kwargs.pop("order_id", f"order_{order_pk}"),
            original_order_date=kwargs.pop("original_order_date", naive_now - timedelta(days=days_ago)),
            transactions=tuple(transactions),
            **kwargs,
        )

    return factory
