"""
Transaction window selection.

Picks the transactions of one order that settled inside a window and totals
them. An empty selection means the order had no activity in the period and is
left out of the report.
"""

from dataclasses import dataclass
from typing import Sequence, Tuple

from order_analytics.reporting.types import DateWindow, TransactionSnapshot


@dataclass(frozen=True)
class PeriodTotals:
    """Signed minor-unit sums over the selected transactions"""
    revenue: int = 0
    net_revenue: int = 0
    transaction_count: int = 0


@dataclass(frozen=True)
class WindowSelection:
    """In-window transactions and their totals"""
    period_transactions: Tuple[TransactionSnapshot, ...]
    period_totals: PeriodTotals

    @property
    def is_empty(self) -> bool:
        return not self.period_transactions


class TransactionWindowSelector:
    """
    Select in-window transactions by ``processed_at``.

    Bounds are inclusive at both ends. Input order is preserved. Refunds carry
    negative amounts and net against payments in the totals.
    """

    def select_window(
        self,
        transactions: Sequence[TransactionSnapshot],
        window: DateWindow,
    ) -> WindowSelection:
        selected = tuple(t for t in transactions if window.contains(t.processed_at))

        revenue = 0
        net_revenue = 0
        for transaction in selected:
            revenue += transaction.amount_total
            net_revenue += transaction.amount_net

        return WindowSelection(
            period_transactions=selected,
            period_totals=PeriodTotals(
                revenue=revenue,
                net_revenue=net_revenue,
                transaction_count=len(selected),
            ),
        )
