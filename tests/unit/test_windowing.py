"""
Unit Tests - Transaction Window Selection
"""
from datetime import timedelta, timezone

import pytest

from order_analytics.database.models import TransactionType
from order_analytics.reporting.types import DateWindow
from order_analytics.reporting.windowing import TransactionWindowSelector


@pytest.fixture
def selector() -> TransactionWindowSelector:
    return TransactionWindowSelector()


@pytest.fixture
def last_7_days(naive_now) -> DateWindow:
    return DateWindow(naive_now - timedelta(days=7), naive_now)


class TestTransactionWindowSelector:
    """Tests for TransactionWindowSelector"""

    def test_excludes_out_of_window(self, selector, make_transaction, last_7_days):
        old = make_transaction(days_ago=30)
        recent = make_transaction(days_ago=3, type=TransactionType.RECURRING_PAYMENT)

        selection = selector.select_window([old, recent], last_7_days)

        assert selection.period_transactions == (recent,)
        assert selection.period_totals.revenue == 1000
        assert selection.period_totals.net_revenue == 950
        assert selection.period_totals.transaction_count == 1

    def test_bounds_are_inclusive(self, selector, make_transaction, last_7_days):
        at_start = make_transaction(processed_at=last_7_days.date_from)
        at_end = make_transaction(processed_at=last_7_days.date_to)
        just_before = make_transaction(processed_at=last_7_days.date_from - timedelta(microseconds=1))

        selection = selector.select_window([just_before, at_start, at_end], last_7_days)

        assert selection.period_transactions == (at_start, at_end)

    def test_refund_nets_against_payment(self, selector, make_transaction, last_7_days):
        payment = make_transaction(days_ago=5, amount_total=1000, amount_net=950)
        refund = make_transaction(days_ago=2, type=TransactionType.REFUND, amount_total=-500, amount_net=-475)

        selection = selector.select_window([payment, refund], last_7_days)

        assert selection.period_totals.revenue == 500
        assert selection.period_totals.net_revenue == 475
        assert selection.period_totals.transaction_count == 2

    def test_empty_when_nothing_in_window(self, selector, make_transaction, last_7_days):
        selection = selector.select_window([make_transaction(days_ago=40)], last_7_days)

        assert selection.is_empty
        assert selection.period_totals.revenue == 0
        assert selection.period_totals.transaction_count == 0

    def test_preserves_input_order(self, selector, make_transaction, last_7_days):
        # Deliberately not chronological
        later = make_transaction(days_ago=1)
        earlier = make_transaction(days_ago=6)

        selection = selector.select_window([later, earlier], last_7_days)

        assert selection.period_transactions == (later, earlier)

    def test_aware_times_compare_as_utc(self, selector, make_transaction, naive_now, last_7_days):
        plus_two = timezone(timedelta(hours=2))
        # Same instant as a day ago, expressed at +02:00
        local_time = (naive_now - timedelta(days=1)).replace(tzinfo=timezone.utc).astimezone(plus_two)
        transaction = make_transaction(processed_at=local_time)

        selection = selector.select_window([transaction], last_7_days)

        assert transaction.processed_at == naive_now - timedelta(days=1)
        assert transaction.processed_at.tzinfo is None
        assert selection.period_transactions == (transaction,)
