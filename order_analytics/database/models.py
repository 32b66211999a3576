"""
Database Models - Order Facts and Transactions

Two tables back the order report:

- OrderFact: one row per order with lifetime rollups maintained by the
  transaction recorder
- Transaction: append-only settled financial events, each tied to one OrderFact

All money columns hold signed integer minor units (cents). All timestamps are
naive UTC.
"""

from datetime import datetime
from enum import Enum
from typing import Optional, List

from sqlalchemy import (
    BigInteger,
    Boolean,
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all database models"""
    pass


# =============================================================================
# ENUMERATIONS
# =============================================================================

class TransactionType(str, Enum):
    """Transaction type with a fixed human label per value"""
    PAYMENT = "payment"
    RECURRING_PAYMENT = "recurring_payment"
    REFUND = "refund"
    PARTIAL_REFUND = "partial_refund"
    CHARGEBACK = "chargeback"
    CHARGEBACK_REVERSAL = "chargeback_reversal"
    UPSELL_PAYMENT = "upsell_payment"
    DOWNSELL_PAYMENT = "downsell_payment"

    @property
    def label(self) -> str:
        return TRANSACTION_TYPE_LABELS[self]

    @property
    def is_refund(self) -> bool:
        return self in (TransactionType.REFUND, TransactionType.PARTIAL_REFUND, TransactionType.CHARGEBACK)

    @classmethod
    def from_value(cls, value: str) -> "TransactionType":
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(t.value for t in cls)
            raise ValueError(f"Unknown transaction type '{value}', expected one of: {allowed}") from None


TRANSACTION_TYPE_LABELS = {
    TransactionType.PAYMENT: "Payment",
    TransactionType.RECURRING_PAYMENT: "Recurring Payment",
    TransactionType.REFUND: "Refund",
    TransactionType.PARTIAL_REFUND: "Partial Refund",
    TransactionType.CHARGEBACK: "Chargeback",
    TransactionType.CHARGEBACK_REVERSAL: "Chargeback Reversal",
    TransactionType.UPSELL_PAYMENT: "Upsell Payment",
    TransactionType.DOWNSELL_PAYMENT: "Downsell Payment",
}


# =============================================================================
# FACT TABLES
# =============================================================================

class OrderFact(Base):
    """
    Order Fact Table

    Lifetime aggregate for one order. Classification and attribution columns
    are written once; the rollup columns accumulate as transactions post and
    always equal the sum of the order's transactions.
    """
    __tablename__ = "order_facts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(Integer, nullable=False)
    order_id: Mapped[str] = mapped_column(String(100), nullable=False)

    # Classification
    funnel_id: Mapped[Optional[int]] = mapped_column(Integer)
    main_product_id: Mapped[Optional[int]] = mapped_column(Integer)
    bump_1_product_id: Mapped[Optional[int]] = mapped_column(Integer)
    bump_2_product_id: Mapped[Optional[int]] = mapped_column(Integer)
    bump_3_product_id: Mapped[Optional[int]] = mapped_column(Integer)
    has_subscription: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Customer
    customer_email: Mapped[Optional[str]] = mapped_column(String(255))
    customer_country: Mapped[Optional[str]] = mapped_column(String(2))
    customer_state: Mapped[Optional[str]] = mapped_column(String(100))

    # Attribution
    utm_source: Mapped[Optional[str]] = mapped_column(String(255))
    utm_medium: Mapped[Optional[str]] = mapped_column(String(255))
    utm_campaign: Mapped[Optional[str]] = mapped_column(String(255))
    utm_term: Mapped[Optional[str]] = mapped_column(String(255))
    utm_content: Mapped[Optional[str]] = mapped_column(String(255))

    # Lifetime rollups (minor units)
    total_revenue: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)
    net_revenue: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)
    mrr_contribution: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)
    arr_contribution: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)

    original_order_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    # Audit
    created_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    transactions: Mapped[List["Transaction"]] = relationship(
        back_populates="order_fact",
        cascade="all, delete-orphan",
        order_by=lambda: [Transaction.processed_at, Transaction.id],
    )

    __table_args__ = (
        UniqueConstraint("account_id", "order_id", name="uq_order_facts_account_order"),
        Index("ix_order_facts_account_date", "account_id", "original_order_date"),
        Index("ix_order_facts_funnel", "funnel_id"),
        Index("ix_order_facts_main_product", "main_product_id"),
    )

    @property
    def bump_product_ids(self) -> List[int]:
        """Bump offer product IDs in slot order, empty slots skipped"""
        slots = (self.bump_1_product_id, self.bump_2_product_id, self.bump_3_product_id)
        return [product_id for product_id in slots if product_id is not None]


class Transaction(Base):
    """
    Transaction Fact Table

    One settled financial event. Refunds and chargebacks carry negative amounts.
    """
    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(Integer, nullable=False)
    order_fact_id: Mapped[int] = mapped_column(
        ForeignKey("order_facts.id", ondelete="CASCADE"), nullable=False
    )

    type: Mapped[TransactionType] = mapped_column(
        SQLEnum(TransactionType, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )

    # Amounts (signed minor units)
    amount_total: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)
    amount_net: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)
    amount_subtotal: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)
    amount_tax: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)
    amount_discount: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)
    currency_code: Mapped[str] = mapped_column(String(3), default="USD", nullable=False)

    processed_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now()
    )

    # Relationships
    order_fact: Mapped["OrderFact"] = relationship(back_populates="transactions")

    __table_args__ = (
        Index("ix_transactions_order_processed", "order_fact_id", "processed_at"),
        Index("ix_transactions_account_processed", "account_id", "processed_at"),
    )
