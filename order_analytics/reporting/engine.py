"""
Order Aggregation Engine

Builds the windowed order report:

1. Resolve and clamp the date range
2. Validate the result limit
3. Load the account's candidate orders and apply the filter
4. Select each order's in-window transactions, dropping orders without any
5. Keep the first ``limit`` orders (newest first)
6. Format lifetime and period views per order and a summary over the kept set

Validation runs before any read, so a failed call never does partial work.
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Any, List, Optional, Sequence, Tuple

import structlog

from order_analytics.config import Settings, get_settings
from order_analytics.reporting.currency import CurrencyFormatter
from order_analytics.reporting.date_ranges import DateRange, DateRangeResolver
from order_analytics.reporting.errors import InvalidLimitError, ReportError
from order_analytics.reporting.filters import OrderFilterPredicate
from order_analytics.reporting.report import OrderReport, ReportSummary, build_order_entry
from order_analytics.reporting.store import OrderReadStore
from order_analytics.reporting.types import DateWindow, FilterSpec, OrderSnapshot
from order_analytics.reporting.windowing import TransactionWindowSelector, WindowSelection

logger = structlog.get_logger(__name__)


class OrderAggregationEngine:
    """
    Windowed order report over a read store.

    Stateless between calls; one instance can serve concurrent requests.

    Example:
        engine = OrderAggregationEngine(SqlOrderReadStore(session))
        report = await engine.run(account_id=7, spec=FilterSpec(account_id=7), range_token="last_30_days")
    """

    def __init__(
        self,
        store: OrderReadStore,
        resolver: Optional[DateRangeResolver] = None,
        settings: Optional[Settings] = None,
    ):
        self.store = store
        self.resolver = resolver or DateRangeResolver()
        self.settings = settings or get_settings()
        self.predicate = OrderFilterPredicate()
        self.selector = TransactionWindowSelector()
        self.formatter = CurrencyFormatter(self.settings.reporting.currency_symbol)

    def now(self) -> datetime:
        return datetime.now(self.settings.reporting.tzinfo)

    def validate_limit(self, limit: Any) -> int:
        reporting = self.settings.reporting
        if limit is None:
            return reporting.default_limit
        if isinstance(limit, bool) or not isinstance(limit, int):
            raise InvalidLimitError(limit, reporting.min_limit, reporting.max_limit)
        if not reporting.min_limit <= limit <= reporting.max_limit:
            raise InvalidLimitError(limit, reporting.min_limit, reporting.max_limit)
        return limit

    async def run(
        self,
        account_id: int,
        spec: Optional[FilterSpec] = None,
        range_token: Optional[str] = None,
        limit: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> OrderReport:
        """
        Build the order report for one account.

        Args:
            account_id: Tenant the report is scoped to; overrides ``spec.account_id``
            spec: Order filters
            range_token: Date range token, defaults to the configured range
            limit: Maximum orders returned, falls back to ``spec.limit`` then the default
            now: Reference instant, defaults to the current time in the reporting zone

        Raises:
            InvalidRangeError, InvalidLimitError: before any data is read
            UpstreamReadError: when the store read fails
        """
        spec = (spec or FilterSpec(account_id=account_id)).for_account(account_id)
        if limit is None:
            limit = spec.limit

        logger.info(
            "Order report requested",
            account_id=account_id,
            date_range=range_token,
            limit=limit,
        )

        try:
            date_range, window = self.resolver.resolve_clamped(
                range_token,
                now or self.now(),
                default=self.settings.reporting.default_date_range,
            )
            limit = self.validate_limit(limit)

            orders = await self.store.find_orders_by_account(account_id, spec, window)
        except ReportError as e:
            logger.warning("Order report failed", account_id=account_id, error=e.kind, message=e.message)
            raise

        report = self.build_report(orders, spec, window, date_range, limit)

        logger.info(
            "Order report completed",
            account_id=account_id,
            date_range=report.date_range,
            total_orders=report.summary.total_orders,
        )
        return report

    def select_active(
        self,
        orders: Sequence[OrderSnapshot],
        window: DateWindow,
    ) -> List[Tuple[OrderSnapshot, WindowSelection]]:
        """Pair each order with its window selection, dropping orders with no activity"""
        reporting = self.settings.reporting

        if len(orders) > reporting.parallel_threshold and reporting.max_workers > 1:
            with ThreadPoolExecutor(max_workers=reporting.max_workers) as pool:
                selections = list(pool.map(lambda o: self.selector.select_window(o.transactions, window), orders))
        else:
            selections = [self.selector.select_window(o.transactions, window) for o in orders]

        return [
            (order, selection)
            for order, selection in zip(orders, selections)
            if not selection.is_empty
        ]

    def build_report(
        self,
        orders: Sequence[OrderSnapshot],
        spec: FilterSpec,
        window: DateWindow,
        date_range: DateRange,
        limit: int,
    ) -> OrderReport:
        """Pure aggregation over already-loaded orders"""
        candidates = self.predicate.select(orders, spec)
        utc_window = window.to_utc_naive()
        active = self.select_active(candidates, utc_window)
        kept = active[:limit]

        logger.debug(
            "Orders windowed",
            loaded=len(orders),
            matched=len(candidates),
            active=len(active),
            returned=len(kept),
        )

        summary = ReportSummary(
            total_orders=len(kept),
            period_revenue=self.formatter.format_many(s.period_totals.revenue for _, s in kept),
            period_net_revenue=self.formatter.format_many(s.period_totals.net_revenue for _, s in kept),
        )

        return OrderReport(
            date_range=date_range.value,
            date_from=window.date_from,
            date_to=window.date_to,
            summary=summary,
            orders=[build_order_entry(order, selection, self.formatter) for order, selection in kept],
        )
