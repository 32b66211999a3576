"""
Order Reporting Module
"""
from .currency import CurrencyFormatter
from .date_ranges import DateRange, DateRangeResolver
from .engine import OrderAggregationEngine
from .errors import (
    ReportError,
    InvalidRangeError,
    InvalidLimitError,
    UpstreamReadError,
    InvalidInputError,
)
from .filters import OrderFilterPredicate
from .report import OrderReport
from .store import OrderReadStore, InMemoryOrderReadStore, SqlOrderReadStore
from .types import DateWindow, FilterSpec, OrderSnapshot, TransactionSnapshot
from .windowing import TransactionWindowSelector, WindowSelection, PeriodTotals

__all__ = [
    "CurrencyFormatter",
    "DateRange",
    "DateRangeResolver",
    "OrderAggregationEngine",
    "ReportError",
    "InvalidRangeError",
    "InvalidLimitError",
    "UpstreamReadError",
    "InvalidInputError",
    "OrderFilterPredicate",
    "OrderReport",
    "OrderReadStore",
    "InMemoryOrderReadStore",
    "SqlOrderReadStore",
    "DateWindow",
    "FilterSpec",
    "OrderSnapshot",
    "TransactionSnapshot",
    "TransactionWindowSelector",
    "WindowSelection",
    "PeriodTotals",
]
