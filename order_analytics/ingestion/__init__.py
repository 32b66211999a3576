"""
Ingestion Module
"""
from .recorder import record_transaction

__all__ = ["record_transaction"]
