"""
Order filter predicate.

Evaluates a FilterSpec against an order's static attributes. Every supplied
field must match; a field left as ``None`` matches any order. Transaction
timing plays no part here.
"""

from typing import Iterable, List

from order_analytics.reporting.types import FilterSpec, OrderSnapshot

# FilterSpec field -> OrderSnapshot attribute, compared by exact equality
EXACT_MATCH_FIELDS = (
    ("funnel_id", "funnel_id"),
    ("utm_source", "utm_source"),
    ("utm_medium", "utm_medium"),
    ("utm_campaign", "utm_campaign"),
    ("utm_term", "utm_term"),
    ("utm_content", "utm_content"),
    ("customer_country", "customer_country"),
    ("has_subscription", "has_subscription"),
)


class OrderFilterPredicate:
    """AND-combined filter over order classification and attribution"""

    def matches(self, order: OrderSnapshot, spec: FilterSpec) -> bool:
        if order.account_id != spec.account_id:
            return False

        if spec.product_id is not None:
            if order.main_product_id != spec.product_id and spec.product_id not in order.bump_product_ids:
                return False

        for spec_field, order_field in EXACT_MATCH_FIELDS:
            expected = getattr(spec, spec_field)
            if expected is not None and getattr(order, order_field) != expected:
                return False

        return True

    def select(self, orders: Iterable[OrderSnapshot], spec: FilterSpec) -> List[OrderSnapshot]:
        """Matching orders in their original order"""
        return [order for order in orders if self.matches(order, spec)]
