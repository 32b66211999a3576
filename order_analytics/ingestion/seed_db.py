"""
Demo Data Seeder

Generates orders with payment, recurring and refund histories for one
account and writes them through the transaction recorder.

Usage:
    python -m order_analytics.ingestion.seed_db --account-id 1 --orders 200
"""

import argparse
import asyncio
import random
from datetime import datetime, timedelta, timezone
from typing import List, Optional

import structlog
from faker import Faker
from sqlalchemy.ext.asyncio import AsyncSession

from order_analytics.database.connection import close_database, create_schema, get_db, init_database
from order_analytics.database.models import OrderFact, TransactionType
from order_analytics.ingestion.recorder import record_transaction

logger = structlog.get_logger(__name__)

UTM_SOURCES = [
    ("google", "cpc"),
    ("facebook", "social"),
    ("newsletter", "email"),
    ("youtube", "video"),
    (None, None),
]
COUNTRIES = ["US", "CA", "GB", "AU", "DE"]
PRICE_POINTS = [1900, 2700, 4700, 9700, 19700]


class OrderGenerator:
    """Generate demo orders with transaction histories"""

    def __init__(self, account_id: int, seed: Optional[int] = 42, now: Optional[datetime] = None):
        self.account_id = account_id
        self.rng = random.Random(seed)
        self.fake = Faker()
        if seed is not None:
            self.fake.seed_instance(seed)
        self.now = now or datetime.now(timezone.utc).replace(tzinfo=None)

    def generate_order(self, sequence: int) -> OrderFact:
        source, medium = self.rng.choice(UTM_SOURCES)
        bumps = self.rng.sample(range(200, 210), k=self.rng.randint(0, 3))
        placed_at = self.now - timedelta(days=self.rng.randint(0, 540), minutes=self.rng.randint(0, 1439))
        has_subscription = self.rng.random() < 0.3

        order = OrderFact(
            account_id=self.account_id,
            order_id=f"ord_{self.account_id}_{sequence:06d}",
            funnel_id=self.rng.randint(1, 5),
            main_product_id=self.rng.randint(100, 110),
            bump_1_product_id=bumps[0] if len(bumps) > 0 else None,
            bump_2_product_id=bumps[1] if len(bumps) > 1 else None,
            bump_3_product_id=bumps[2] if len(bumps) > 2 else None,
            has_subscription=has_subscription,
            customer_email=self.fake.email(),
            customer_country=self.rng.choice(COUNTRIES),
            customer_state=self.fake.state_abbr(),
            utm_source=source,
            utm_medium=medium,
            utm_campaign=self.fake.slug() if source else None,
            original_order_date=placed_at,
            total_revenue=0,
            net_revenue=0,
            mrr_contribution=0,
            arr_contribution=0,
        )

        price = self.rng.choice(PRICE_POINTS)
        tax = price // 10
        record_transaction(
            order, TransactionType.PAYMENT, price + tax, placed_at,
            amount_net=price - price * 3 // 100, amount_tax=tax,
        )

        if has_subscription:
            renewal = placed_at + timedelta(days=30)
            while renewal <= self.now:
                record_transaction(
                    order, TransactionType.RECURRING_PAYMENT, price, renewal,
                    amount_net=price - price * 3 // 100,
                )
                renewal += timedelta(days=30)

        if self.rng.random() < 0.05:
            refunded_at = min(placed_at + timedelta(days=self.rng.randint(1, 14)), self.now)
            record_transaction(order, TransactionType.PARTIAL_REFUND, price // 2, refunded_at)

        return order

    def generate(self, n: int) -> List[OrderFact]:
        return [self.generate_order(i) for i in range(n)]


async def seed_account(session: AsyncSession, account_id: int, n_orders: int, seed: Optional[int] = 42) -> int:
    """Insert ``n_orders`` generated orders; returns the transaction count"""
    orders = OrderGenerator(account_id, seed=seed).generate(n_orders)
    session.add_all(orders)
    await session.flush()

    transaction_count = sum(len(o.transactions) for o in orders)
    logger.info("Seeded account", account_id=account_id, orders=len(orders), transactions=transaction_count)
    return transaction_count


async def main(account_id: int, n_orders: int) -> None:
    logger.info("Starting database seeding...")
    await init_database()

    try:
        await create_schema()
        async with get_db() as db:
            await seed_account(db, account_id, n_orders)
        logger.info("Database seeding completed successfully!")
    except Exception as e:
        logger.error("Seeding failed", error=str(e))
        raise
    finally:
        await close_database()


def cli() -> None:
    parser = argparse.ArgumentParser(description="Seed demo orders")
    parser.add_argument("--account-id", type=int, default=1, help="Account to seed (default: 1)")
    parser.add_argument("--orders", type=int, default=200, help="Orders to generate (default: 200)")
    args = parser.parse_args()

    asyncio.run(main(args.account_id, args.orders))


if __name__ == "__main__":
    cli()
