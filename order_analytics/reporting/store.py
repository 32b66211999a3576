"""
Order read stores.

A store returns an account's candidate orders, each with its full transaction
history in chronological order. Stores may narrow candidates early (filter
pushdown, window pre-check); the engine re-applies both checks to whatever
comes back.
"""

from typing import Iterable, List, Optional, Protocol, runtime_checkable

import structlog
from sqlalchemy import and_, exists, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from order_analytics.database.models import OrderFact, Transaction
from order_analytics.reporting.errors import UpstreamReadError
from order_analytics.reporting.filters import EXACT_MATCH_FIELDS, OrderFilterPredicate
from order_analytics.reporting.types import DateWindow, FilterSpec, OrderSnapshot

logger = structlog.get_logger(__name__)


@runtime_checkable
class OrderReadStore(Protocol):
    """
    Tenant-scoped read access to orders and transactions.

    Implementations return orders newest first (``original_order_date`` then
    ``id``, both descending) and raise UpstreamReadError on any read failure.
    """

    async def find_orders_by_account(
        self,
        account_id: int,
        spec: FilterSpec,
        window: Optional[DateWindow] = None,
    ) -> List[OrderSnapshot]:
        ...


class InMemoryOrderReadStore:
    """Store over snapshots already held in memory"""

    def __init__(self, orders: Iterable[OrderSnapshot] = ()):
        self._orders = list(orders)
        self._predicate = OrderFilterPredicate()

    async def find_orders_by_account(
        self,
        account_id: int,
        spec: FilterSpec,
        window: Optional[DateWindow] = None,
    ) -> List[OrderSnapshot]:
        spec = spec.for_account(account_id)
        candidates = self._predicate.select(self._orders, spec)
        return sorted(candidates, key=lambda o: (o.original_order_date, o.id), reverse=True)


class SqlOrderReadStore:
    """
    SQLAlchemy-backed store.

    Filters are pushed into the WHERE clause and candidates are limited to
    orders with at least one transaction inside the window.

    Example:
        async with get_db() as db:
            orders = await SqlOrderReadStore(db).find_orders_by_account(7, spec, window)
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    def build_query(self, account_id: int, spec: FilterSpec, window: Optional[DateWindow] = None):
        conditions = [OrderFact.account_id == account_id]

        if spec.product_id is not None:
            conditions.append(or_(
                OrderFact.main_product_id == spec.product_id,
                OrderFact.bump_1_product_id == spec.product_id,
                OrderFact.bump_2_product_id == spec.product_id,
                OrderFact.bump_3_product_id == spec.product_id,
            ))

        for spec_field, column in EXACT_MATCH_FIELDS:
            expected = getattr(spec, spec_field)
            if expected is not None:
                conditions.append(getattr(OrderFact, column) == expected)

        if window is not None:
            window = window.to_utc_naive()
            conditions.append(exists().where(and_(
                Transaction.order_fact_id == OrderFact.id,
                Transaction.processed_at >= window.date_from,
                Transaction.processed_at <= window.date_to,
            )))

        return (
            select(OrderFact)
            .where(and_(*conditions))
            .options(selectinload(OrderFact.transactions))
            .order_by(OrderFact.original_order_date.desc(), OrderFact.id.desc())
        )

    async def find_orders_by_account(
        self,
        account_id: int,
        spec: FilterSpec,
        window: Optional[DateWindow] = None,
    ) -> List[OrderSnapshot]:
        query = self.build_query(account_id, spec, window)

        try:
            result = await self.session.execute(query)
            rows = result.scalars().all()
        except (SQLAlchemyError, OSError) as e:
            logger.error("Order read failed", account_id=account_id, error=str(e), error_type=type(e).__name__)
            raise UpstreamReadError(f"Order store read failed: {e}") from e

        try:
            orders = [OrderSnapshot.from_model(row) for row in rows]
        except (ValueError, TypeError) as e:
            logger.error("Malformed order row", account_id=account_id, error=str(e))
            raise UpstreamReadError(f"Order store returned malformed data: {e}") from e

        logger.debug("Orders loaded", account_id=account_id, count=len(orders))
        return orders
