"""
Value types for the order report engine.

Snapshots are immutable, request-scoped copies of stored rows. The engine
never touches ORM objects directly so one aggregation always works on a
consistent read.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Optional, Tuple

from order_analytics.database.models import OrderFact, Transaction, TransactionType


@dataclass(frozen=True)
class DateWindow:
    """Closed instant range ``[date_from, date_to]``"""
    date_from: datetime
    date_to: datetime

    def __post_init__(self):
        if self.date_from > self.date_to:
            raise ValueError("date_from must not be after date_to")

    def contains(self, instant: datetime) -> bool:
        return self.date_from <= instant <= self.date_to

    def to_utc_naive(self) -> "DateWindow":
        """Same window expressed in the naive UTC used for stored timestamps"""
        return DateWindow(_to_utc_naive(self.date_from), _to_utc_naive(self.date_to))


def _to_utc_naive(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


@dataclass(frozen=True)
class FilterSpec:
    """Static order attributes to filter on; ``None`` matches everything"""
    account_id: int
    product_id: Optional[int] = None
    funnel_id: Optional[int] = None
    utm_source: Optional[str] = None
    utm_medium: Optional[str] = None
    utm_campaign: Optional[str] = None
    utm_term: Optional[str] = None
    utm_content: Optional[str] = None
    customer_country: Optional[str] = None
    has_subscription: Optional[bool] = None
    limit: Optional[int] = None

    def for_account(self, account_id: int) -> "FilterSpec":
        if account_id == self.account_id:
            return self
        return replace(self, account_id=account_id)


@dataclass(frozen=True)
class TransactionSnapshot:
    """One settled financial event"""
    id: int
    type: TransactionType
    processed_at: datetime
    amount_total: int = 0
    amount_net: int = 0
    amount_subtotal: int = 0
    amount_tax: int = 0
    amount_discount: int = 0
    currency_code: str = "USD"

    def __post_init__(self):
        # Stored instants are naive UTC; aware input is converted
        object.__setattr__(self, "processed_at", _to_utc_naive(self.processed_at))

    @classmethod
    def from_model(cls, row: Transaction) -> "TransactionSnapshot":
        return cls(
            id=row.id,
            type=TransactionType.from_value(getattr(row.type, "value", row.type)),
            processed_at=row.processed_at,
            amount_total=_minor_units(row.amount_total, "amount_total"),
            amount_net=_minor_units(row.amount_net, "amount_net"),
            amount_subtotal=_minor_units(row.amount_subtotal, "amount_subtotal"),
            amount_tax=_minor_units(row.amount_tax, "amount_tax"),
            amount_discount=_minor_units(row.amount_discount, "amount_discount"),
            currency_code=row.currency_code,
        )


@dataclass(frozen=True)
class OrderSnapshot:
    """Lifetime order record with its full transaction history"""
    id: int
    account_id: int
    order_id: str
    original_order_date: datetime
    funnel_id: Optional[int] = None
    main_product_id: Optional[int] = None
    bump_product_ids: Tuple[int, ...] = ()
    has_subscription: bool = False
    customer_email: Optional[str] = None
    customer_country: Optional[str] = None
    customer_state: Optional[str] = None
    utm_source: Optional[str] = None
    utm_medium: Optional[str] = None
    utm_campaign: Optional[str] = None
    utm_term: Optional[str] = None
    utm_content: Optional[str] = None
    total_revenue: int = 0
    net_revenue: int = 0
    mrr_contribution: int = 0
    arr_contribution: int = 0
    transactions: Tuple[TransactionSnapshot, ...] = field(default=(), repr=False)

    def __post_init__(self):
        object.__setattr__(self, "original_order_date", _to_utc_naive(self.original_order_date))

    @classmethod
    def from_model(cls, row: OrderFact) -> "OrderSnapshot":
        return cls(
            id=row.id,
            account_id=row.account_id,
            order_id=row.order_id,
            original_order_date=row.original_order_date,
            funnel_id=row.funnel_id,
            main_product_id=row.main_product_id,
            bump_product_ids=tuple(row.bump_product_ids),
            has_subscription=bool(row.has_subscription),
            customer_email=row.customer_email,
            customer_country=row.customer_country,
            customer_state=row.customer_state,
            utm_source=row.utm_source,
            utm_medium=row.utm_medium,
            utm_campaign=row.utm_campaign,
            utm_term=row.utm_term,
            utm_content=row.utm_content,
            total_revenue=_minor_units(row.total_revenue, "total_revenue"),
            net_revenue=_minor_units(row.net_revenue, "net_revenue"),
            mrr_contribution=_minor_units(row.mrr_contribution, "mrr_contribution"),
            arr_contribution=_minor_units(row.arr_contribution, "arr_contribution"),
            transactions=tuple(TransactionSnapshot.from_model(t) for t in row.transactions),
        )


def _minor_units(value, column: str) -> int:
    # NULL rollups on legacy rows read as zero
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{column} must be integer minor units, got {value!r}")
    return value
