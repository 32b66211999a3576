"""
Order report error taxonomy.

Every error carries a machine kind and a human message, and renders as the
structured ``{"error": kind, "message": message}`` body returned to callers.
"""

from typing import Any, Dict, Iterable, Optional


class ReportError(Exception):
    """Base class for order report failures"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def kind(self) -> str:
        return type(self).__name__

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.kind, "message": self.message}


class InvalidRangeError(ReportError):
    """Unrecognized date-range token"""

    def __init__(self, token: Optional[str], valid_tokens: Iterable[str]):
        self.token = token
        self.valid_tokens = list(valid_tokens)
        super().__init__(f"Date range must be one of: {', '.join(self.valid_tokens)}")


class InvalidLimitError(ReportError):
    """Result limit outside the accepted bounds"""

    def __init__(self, limit: Any, minimum: int, maximum: int):
        self.limit = limit
        self.minimum = minimum
        self.maximum = maximum
        super().__init__(f"Limit must be between {minimum} and {maximum}")


class UpstreamReadError(ReportError):
    """Order/transaction store unreachable or returned malformed data"""


class InvalidInputError(ReportError):
    """Request payload failed type validation"""
