"""
Currency formatting from integer minor units.

Amounts are converted with Decimal arithmetic, never float, so repeated sums
cannot drift. Callers sum signed minor units first and format the net result
once.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

_CENTS = Decimal("0.01")


class CurrencyFormatter:
    """
    Render minor units as ``"$1,234.56"``.

    The symbol comes first and the sign stays on the number, so ``-500``
    renders as ``"$-5.00"``. No currency-code lookup is done; the code travels
    separately as transaction metadata.
    """

    def __init__(self, symbol: str = "$"):
        self.symbol = symbol

    def to_decimal(self, minor_units: int) -> Decimal:
        if isinstance(minor_units, bool) or not isinstance(minor_units, int):
            raise TypeError(f"Minor units must be an integer, got {type(minor_units).__name__}")
        return Decimal(minor_units).scaleb(-2).quantize(_CENTS, rounding=ROUND_HALF_UP)

    def format(self, minor_units: int) -> str:
        return f"{self.symbol}{self.to_decimal(minor_units):,.2f}"

    def format_many(self, values: Iterable[int]) -> str:
        """Sum minor units, then format the total once"""
        total = 0
        for value in values:
            self.to_decimal(value)
            total += value
        return self.format(total)
