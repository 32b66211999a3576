"""
Orders API Endpoints

Windowed order report over HTTP.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from order_analytics.config import get_settings
from order_analytics.database.connection import get_db_dependency
from order_analytics.reporting.engine import OrderAggregationEngine
from order_analytics.reporting.errors import ReportError, UpstreamReadError
from order_analytics.reporting.report import OrderReport
from order_analytics.reporting.store import SqlOrderReadStore
from order_analytics.reporting.types import FilterSpec

router = APIRouter()
logger = structlog.get_logger(__name__)


def error_response(error: ReportError) -> JSONResponse:
    status_code = 502 if isinstance(error, UpstreamReadError) else 422
    return JSONResponse(status_code=status_code, content=error.to_dict())


@router.get("/{account_id}/orders", response_model=OrderReport)
async def list_account_orders(
    account_id: int,
    date_range: Optional[str] = None,
    product_id: Optional[int] = None,
    funnel_id: Optional[int] = None,
    utm_source: Optional[str] = None,
    utm_medium: Optional[str] = None,
    utm_campaign: Optional[str] = None,
    utm_term: Optional[str] = None,
    utm_content: Optional[str] = None,
    customer_country: Optional[str] = None,
    has_subscription: Optional[bool] = None,
    limit: Optional[int] = None,
    db: AsyncSession = Depends(get_db_dependency),
):
    """
    List orders with transaction activity in the date range.

    Each order carries lifetime totals, the transactions settled in the
    period and period totals. Ranges longer than 90 days are clamped to
    ``last_90_days``.
    """
    spec = FilterSpec(
        account_id=account_id,
        product_id=product_id,
        funnel_id=funnel_id,
        utm_source=utm_source,
        utm_medium=utm_medium,
        utm_campaign=utm_campaign,
        utm_term=utm_term,
        utm_content=utm_content,
        customer_country=customer_country,
        has_subscription=has_subscription,
        limit=limit,
    )

    engine = OrderAggregationEngine(SqlOrderReadStore(db), settings=get_settings())
    try:
        return await engine.run(account_id=account_id, spec=spec, range_token=date_range, limit=limit)
    except ReportError as e:
        return error_response(e)
