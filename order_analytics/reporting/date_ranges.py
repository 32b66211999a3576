"""
Named date ranges.

Maps a range token to a concrete ``[from, to]`` window relative to "now" and
applies the lookback clamp used by public tool interfaces.

Calendar ranges (today, yesterday, this_month, last_month, ytd) snap to
day/month/year boundaries in the zone of ``now``. Rolling ranges subtract a
fixed span from ``now`` and keep its time of day.
"""

import calendar
from datetime import datetime, timedelta
from enum import Enum
from typing import List, Optional, Tuple, Union

import structlog

from order_analytics.reporting.errors import InvalidRangeError
from order_analytics.reporting.types import DateWindow

logger = structlog.get_logger(__name__)


class DateRange(str, Enum):
    """Recognized date range tokens"""
    TODAY = "today"
    YESTERDAY = "yesterday"
    THIS_MONTH = "this_month"
    LAST_MONTH = "last_month"
    YTD = "ytd"
    LAST_7_DAYS = "last_7_days"
    LAST_30_DAYS = "last_30_days"
    LAST_90_DAYS = "last_90_days"
    LAST_180_DAYS = "last_180_days"
    LAST_365_DAYS = "last_365_days"
    LAST_18_MONTHS = "last_18_months"

    @classmethod
    def tokens(cls) -> List[str]:
        return [r.value for r in cls]


# Valid tokens that public interfaces silently downgrade instead of rejecting
CLAMPED_RANGES = frozenset({
    DateRange.LAST_180_DAYS,
    DateRange.LAST_365_DAYS,
    DateRange.LAST_18_MONTHS,
})
MAX_LOOKBACK_RANGE = DateRange.LAST_90_DAYS

_ROLLING_DAYS = {
    DateRange.LAST_7_DAYS: 7,
    DateRange.LAST_30_DAYS: 30,
    DateRange.LAST_90_DAYS: 90,
    DateRange.LAST_180_DAYS: 180,
    DateRange.LAST_365_DAYS: 365,
}

_ONE_TICK = timedelta(microseconds=1)


def start_of_day(value: datetime) -> datetime:
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def subtract_months(value: datetime, months: int) -> datetime:
    """Shift back by calendar months, clamping the day to the target month's length"""
    month_index = value.year * 12 + (value.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


class DateRangeResolver:
    """
    Resolve range tokens into date windows.

    Example:
        resolver = DateRangeResolver()
        token = resolver.enforce_max_lookback(resolver.parse("last_365_days"))
        window = resolver.resolve(token, now)
    """

    def parse(self, token: Union[str, DateRange, None]) -> DateRange:
        """Validate a token, raising InvalidRangeError with the valid tokens"""
        if isinstance(token, DateRange):
            return token
        try:
            return DateRange(token)
        except ValueError:
            raise InvalidRangeError(token, DateRange.tokens()) from None

    def enforce_max_lookback(self, token: Union[str, DateRange]) -> DateRange:
        """Downgrade over-long ranges to the maximum lookback; never an error"""
        date_range = self.parse(token)
        if date_range in CLAMPED_RANGES:
            logger.info(
                "Date range clamped",
                requested=date_range.value,
                applied=MAX_LOOKBACK_RANGE.value,
            )
            return MAX_LOOKBACK_RANGE
        return date_range

    def resolve(self, token: Union[str, DateRange], now: datetime) -> DateWindow:
        """Concrete window for ``token`` relative to ``now``"""
        date_range = self.parse(token)
        today = start_of_day(now)

        if date_range is DateRange.TODAY:
            return DateWindow(today, now)
        if date_range is DateRange.YESTERDAY:
            return DateWindow(today - timedelta(days=1), today - _ONE_TICK)
        if date_range is DateRange.THIS_MONTH:
            return DateWindow(today.replace(day=1), now)
        if date_range is DateRange.LAST_MONTH:
            this_month = today.replace(day=1)
            return DateWindow(subtract_months(this_month, 1), this_month - _ONE_TICK)
        if date_range is DateRange.YTD:
            return DateWindow(today.replace(month=1, day=1), now)
        if date_range is DateRange.LAST_18_MONTHS:
            return DateWindow(subtract_months(now, 18), now)

        return DateWindow(now - timedelta(days=_ROLLING_DAYS[date_range]), now)

    def resolve_clamped(self, token: Union[str, DateRange, None], now: datetime,
                        default: Optional[Union[str, DateRange]] = None) -> Tuple[DateRange, DateWindow]:
        """Parse, clamp and resolve in one step; ``None`` falls back to ``default``"""
        if token is None:
            token = default if default is not None else MAX_LOOKBACK_RANGE
        date_range = self.enforce_max_lookback(token)
        return date_range, self.resolve(date_range, now)
