"""
Order report response models.

Money fields are formatted strings; every sum behind them is taken over
integer minor units before formatting.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from order_analytics.reporting.currency import CurrencyFormatter
from order_analytics.reporting.types import OrderSnapshot, TransactionSnapshot
from order_analytics.reporting.windowing import WindowSelection


class ProductRefs(BaseModel):
    """Main product and bump offers"""
    main_product_id: Optional[int]
    bump_offers: List[int]


class UtmData(BaseModel):
    """UTM attribution"""
    source: Optional[str]
    medium: Optional[str]
    campaign: Optional[str]
    term: Optional[str]
    content: Optional[str]


class LifetimeTotals(BaseModel):
    """Order rollups over its whole history"""
    total_revenue: str
    net_revenue: str
    mrr_contribution: str
    arr_contribution: str


class PeriodTransaction(BaseModel):
    """Transaction settled inside the window"""
    id: int
    type: str
    type_label: str
    amount_total: str
    amount_net: str
    amount_subtotal: str
    amount_tax: str
    amount_discount: str
    currency_code: str
    processed_at: datetime


class PeriodTotalsOut(BaseModel):
    """Totals over the period transactions"""
    revenue: str
    net_revenue: str
    transaction_count: int


class OrderEntry(BaseModel):
    """One order with activity in the window"""
    id: int
    order_id: str
    funnel_id: Optional[int]
    customer_email: Optional[str]
    customer_country: Optional[str]
    customer_state: Optional[str]
    has_subscription: bool
    original_order_date: datetime
    products: ProductRefs
    utm_data: UtmData
    lifetime_totals: LifetimeTotals
    period_transactions: List[PeriodTransaction]
    period_totals: PeriodTotalsOut


class ReportSummary(BaseModel):
    """Totals across the returned orders"""
    total_orders: int
    period_revenue: str
    period_net_revenue: str


class OrderReport(BaseModel):
    """Successful order report"""
    success: bool = True
    date_range: str
    date_from: datetime
    date_to: datetime
    summary: ReportSummary
    orders: List[OrderEntry] = Field(default_factory=list)


def build_transaction_entry(transaction: TransactionSnapshot, formatter: CurrencyFormatter) -> PeriodTransaction:
    return PeriodTransaction(
        id=transaction.id,
        type=transaction.type.value,
        type_label=transaction.type.label,
        amount_total=formatter.format(transaction.amount_total),
        amount_net=formatter.format(transaction.amount_net),
        amount_subtotal=formatter.format(transaction.amount_subtotal),
        amount_tax=formatter.format(transaction.amount_tax),
        amount_discount=formatter.format(transaction.amount_discount),
        currency_code=transaction.currency_code,
        processed_at=transaction.processed_at,
    )


def build_order_entry(
    order: OrderSnapshot,
    selection: WindowSelection,
    formatter: CurrencyFormatter,
) -> OrderEntry:
    """Report entry for one order: verbatim attributes, lifetime and period views"""
    totals = selection.period_totals
    return OrderEntry(
        id=order.id,
        order_id=order.order_id,
        funnel_id=order.funnel_id,
        customer_email=order.customer_email,
        customer_country=order.customer_country,
        customer_state=order.customer_state,
        has_subscription=order.has_subscription,
        original_order_date=order.original_order_date,
        products=ProductRefs(
            main_product_id=order.main_product_id,
            bump_offers=list(order.bump_product_ids),
        ),
        utm_data=UtmData(
            source=order.utm_source,
            medium=order.utm_medium,
            campaign=order.utm_campaign,
            term=order.utm_term,
            content=order.utm_content,
        ),
        lifetime_totals=LifetimeTotals(
            total_revenue=formatter.format(order.total_revenue),
            net_revenue=formatter.format(order.net_revenue),
            mrr_contribution=formatter.format(order.mrr_contribution),
            arr_contribution=formatter.format(order.arr_contribution),
        ),
        period_transactions=[
            build_transaction_entry(t, formatter) for t in selection.period_transactions
        ],
        period_totals=PeriodTotalsOut(
            revenue=formatter.format(totals.revenue),
            net_revenue=formatter.format(totals.net_revenue),
            transaction_count=totals.transaction_count,
        ),
    )
