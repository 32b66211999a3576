"""
list_orders tool

Tool-call adapter over the order report engine. Takes the raw tool input
object, returns a JSON-ready dict: the report on success, or
``{"error": kind, "message": text}`` for any failure.
"""

from typing import Any, Dict, Optional

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from order_analytics.config import Settings
from order_analytics.reporting.engine import OrderAggregationEngine
from order_analytics.reporting.errors import InvalidInputError, ReportError, UpstreamReadError
from order_analytics.reporting.store import OrderReadStore
from order_analytics.reporting.types import FilterSpec

logger = structlog.get_logger(__name__)

TOOL_NAME = "list_orders"
TOOL_DESCRIPTION = (
    "List orders with transactions in the specified date range (up to 90 days). "
    "Returns orders that had transaction activity in the period, with order metadata, "
    "lifetime order totals, period transactions and period totals."
)


class ListOrdersInput(BaseModel):
    """list_orders tool parameters"""

    model_config = ConfigDict(extra="ignore")

    date_range: Optional[str] = Field(
        default=None,
        description="today, yesterday, this_month, last_month, ytd, last_7_days, last_30_days, "
                    "last_90_days. Defaults to last_90_days. Maximum 90 days of data.",
    )
    product_id: Optional[int] = Field(default=None, description="Filter by product ID (main or bump offer)")
    funnel_id: Optional[int] = Field(default=None, description="Filter by funnel ID")
    utm_source: Optional[str] = Field(default=None, description="Filter by UTM source")
    utm_medium: Optional[str] = Field(default=None, description="Filter by UTM medium")
    utm_campaign: Optional[str] = Field(default=None, description="Filter by UTM campaign")
    utm_term: Optional[str] = Field(default=None, description="Filter by UTM term")
    utm_content: Optional[str] = Field(default=None, description="Filter by UTM content")
    customer_country: Optional[str] = Field(default=None, description="Filter by customer country code")
    has_subscription: Optional[bool] = Field(default=None, description="Filter by whether order has subscription items")
    limit: Optional[int] = Field(default=None, description="Maximum number of orders to return (1-1000). Defaults to 100.")

    def to_filter(self, account_id: int) -> FilterSpec:
        return FilterSpec(
            account_id=account_id,
            product_id=self.product_id,
            funnel_id=self.funnel_id,
            utm_source=self.utm_source,
            utm_medium=self.utm_medium,
            utm_campaign=self.utm_campaign,
            utm_term=self.utm_term,
            utm_content=self.utm_content,
            customer_country=self.customer_country,
            has_subscription=self.has_subscription,
            limit=self.limit,
        )


def tool_schema() -> Dict[str, Any]:
    """Tool definition in JSON-schema form"""
    return {
        "name": TOOL_NAME,
        "description": TOOL_DESCRIPTION,
        "input_schema": ListOrdersInput.model_json_schema(),
    }


def parse_input(payload: Optional[Dict[str, Any]]) -> ListOrdersInput:
    try:
        return ListOrdersInput.model_validate(payload or {})
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise InvalidInputError(f"Invalid input for: {fields}") from e


async def list_orders(
    account_id: int,
    payload: Optional[Dict[str, Any]],
    store: OrderReadStore,
    settings: Optional[Settings] = None,
) -> Dict[str, Any]:
    """
    Run the order report for a tool call.

    Args:
        account_id: Tenant the caller is authenticated for
        payload: Tool input object
        store: Read store for the account's orders

    Returns:
        Report dict, or an error dict; failures are never raised
    """
    try:
        params = parse_input(payload)
        engine = OrderAggregationEngine(store, settings=settings)
        report = await engine.run(
            account_id=account_id,
            spec=params.to_filter(account_id),
            range_token=params.date_range,
            limit=params.limit,
        )
    except ReportError as e:
        logger.info("list_orders returned error", account_id=account_id, error=e.kind)
        return e.to_dict()
    except Exception as e:
        logger.exception("list_orders failed", account_id=account_id)
        return UpstreamReadError(f"Failed to list orders: {e}").to_dict()

    return report.model_dump(mode="json")
