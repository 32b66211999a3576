"""
Unit Tests - Order Filter Predicate
"""
import pytest

from order_analytics.reporting.filters import OrderFilterPredicate
from order_analytics.reporting.types import FilterSpec

ACCOUNT_ID = 1


@pytest.fixture
def predicate() -> OrderFilterPredicate:
    return OrderFilterPredicate()


class TestOrderFilterPredicate:
    """Tests for OrderFilterPredicate"""

    def test_empty_filter_matches_everything(self, predicate, make_order):
        assert predicate.matches(make_order(), FilterSpec(account_id=ACCOUNT_ID))

    def test_other_account_never_matches(self, predicate, make_order):
        assert not predicate.matches(make_order(account_id=2), FilterSpec(account_id=ACCOUNT_ID))

    def test_product_matches_main_product(self, predicate, make_order):
        order = make_order(main_product_id=789)

        assert predicate.matches(order, FilterSpec(account_id=ACCOUNT_ID, product_id=789))
        assert not predicate.matches(order, FilterSpec(account_id=ACCOUNT_ID, product_id=790))

    def test_product_matches_any_bump(self, predicate, make_order):
        order = make_order(main_product_id=789, bump_product_ids=(101, 102))

        assert predicate.matches(order, FilterSpec(account_id=ACCOUNT_ID, product_id=102))

    def test_utm_filters_are_anded(self, predicate, make_order):
        google_social = make_order(utm_source="google", utm_medium="social")
        google_cpc = make_order(utm_source="google", utm_medium="cpc")
        spec = FilterSpec(account_id=ACCOUNT_ID, utm_source="google", utm_medium="cpc")

        assert not predicate.matches(google_social, spec)
        assert predicate.matches(google_cpc, spec)

    def test_string_filters_need_exact_equality(self, predicate, make_order):
        order = make_order(customer_country="US", utm_campaign="summer")

        assert not predicate.matches(order, FilterSpec(account_id=ACCOUNT_ID, customer_country="us"))
        assert not predicate.matches(order, FilterSpec(account_id=ACCOUNT_ID, utm_campaign="summer_sale"))

    def test_has_subscription_false_is_a_real_filter(self, predicate, make_order):
        spec = FilterSpec(account_id=ACCOUNT_ID, has_subscription=False)

        assert predicate.matches(make_order(has_subscription=False), spec)
        assert not predicate.matches(make_order(has_subscription=True), spec)

    def test_funnel_filter(self, predicate, make_order):
        spec = FilterSpec(account_id=ACCOUNT_ID, funnel_id=1)

        assert predicate.matches(make_order(funnel_id=1), spec)
        assert not predicate.matches(make_order(funnel_id=2), spec)
        assert not predicate.matches(make_order(funnel_id=None), spec)

    def test_select_keeps_input_order(self, predicate, make_order):
        orders = [make_order(customer_country=c) for c in ("US", "CA", "US", "GB")]

        selected = predicate.select(orders, FilterSpec(account_id=ACCOUNT_ID, customer_country="US"))

        assert [o.id for o in selected] == [orders[0].id, orders[2].id]
