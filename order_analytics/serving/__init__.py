"""
Serving Module
"""
from .tools import list_orders, tool_schema, ListOrdersInput

__all__ = [
    "list_orders",
    "tool_schema",
    "ListOrdersInput",
]
