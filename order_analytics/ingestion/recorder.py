"""
Transaction Recorder

Appends transactions to an order and keeps the order's lifetime rollups in
step, so ``total_revenue``/``net_revenue`` always equal the sums over the
order's transactions.
"""

from datetime import datetime
from typing import Optional

import structlog

from order_analytics.database.models import OrderFact, Transaction, TransactionType

logger = structlog.get_logger(__name__)


def record_transaction(
    order: OrderFact,
    type: TransactionType,
    amount_total: int,
    processed_at: datetime,
    amount_net: Optional[int] = None,
    amount_subtotal: Optional[int] = None,
    amount_tax: int = 0,
    amount_discount: int = 0,
    currency_code: str = "USD",
) -> Transaction:
    """
    Record one settled transaction against ``order``.

    Refund-type transactions are stored with negative amounts whatever sign
    the caller passes. Recurring payments also set the order's MRR/ARR
    contribution. ``order.transactions`` must already be loaded (or the
    order new) since this runs outside any awaitable lazy load.
    """
    if amount_net is None:
        amount_net = amount_total
    if amount_subtotal is None:
        amount_subtotal = amount_total - amount_tax + amount_discount

    if type.is_refund:
        amount_total, amount_net, amount_subtotal = -abs(amount_total), -abs(amount_net), -abs(amount_subtotal)
        amount_tax, amount_discount = -abs(amount_tax), -abs(amount_discount)

    transaction = Transaction(
        account_id=order.account_id,
        type=type,
        amount_total=amount_total,
        amount_net=amount_net,
        amount_subtotal=amount_subtotal,
        amount_tax=amount_tax,
        amount_discount=amount_discount,
        currency_code=currency_code,
        processed_at=processed_at,
    )
    order.transactions.append(transaction)

    order.total_revenue = (order.total_revenue or 0) + amount_total
    order.net_revenue = (order.net_revenue or 0) + amount_net
    if type is TransactionType.RECURRING_PAYMENT:
        order.mrr_contribution = amount_total
        order.arr_contribution = amount_total * 12

    logger.debug(
        "Transaction recorded",
        order_id=order.order_id,
        type=type.value,
        amount_total=amount_total,
    )
    return transaction
