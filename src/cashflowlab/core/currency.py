"""
Currency precision and minor-unit conversion for CashFlowLab.

The core works purely in integer minor units (cents for EUR/USD, yen for
JPY). These helpers convert to major units only at the display edge.
"""

from __future__ import annotations

from decimal import ROUND_HALF_EVEN, ROUND_HALF_UP, Decimal
from enum import Enum


class RoundingPolicy(Enum):
    """Rounding policies for currency calculations."""

    BANKERS = ROUND_HALF_EVEN
    HALF_UP = ROUND_HALF_UP


class Currency:
    """
    Currency definition with precision and rounding rules.

    Attributes:
        code: ISO currency code (e.g., 'EUR', 'USD', 'JPY')
        decimals: Number of minor-unit decimal places for this currency
        rounding: Rounding policy used when converting back to minor units
    """

    def __init__(
        self,
        code: str,
        decimals: int = 2,
        rounding: RoundingPolicy = RoundingPolicy.BANKERS,
    ):
        if decimals < 0:
            raise ValueError(f"decimals must be >= 0, got {decimals}")
        self.code = code.upper()
        self.decimals = decimals
        self.rounding = rounding

    @property
    def quantum(self) -> Decimal:
        return Decimal(1).scaleb(-self.decimals)  # 0.01 for 2 dp, 1 for 0 dp

    def quantize(self, amount: Decimal) -> Decimal:
        """Quantize amount to currency precision."""
        return amount.quantize(self.quantum, rounding=self.rounding.value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Currency):
            return NotImplemented
        return self.code == other.code and self.decimals == other.decimals

    def __hash__(self) -> int:
        return hash((self.code, self.decimals))

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"Currency('{self.code}', decimals={self.decimals})"


# Standard currency definitions
EUR = Currency("EUR", decimals=2)
USD = Currency("USD", decimals=2)
JPY = Currency("JPY", decimals=0)
GBP = Currency("GBP", decimals=2)

# Currency registry
CURRENCIES: dict[str, Currency] = {
    "EUR": EUR,
    "USD": USD,
    "JPY": JPY,
    "GBP": GBP,
}

DEFAULT_CURRENCY = USD


def get_currency(code: str | Currency | None) -> Currency:
    """Get currency by code; unknown codes default to 2 decimal places."""
    if code is None:
        return DEFAULT_CURRENCY
    if isinstance(code, Currency):
        return code
    code = code.upper()
    if code not in CURRENCIES:
        return Currency(code, decimals=2)
    return CURRENCIES[code]


def integer_to_amount(value: int, currency: Currency | str | None = None) -> Decimal:
    """
    Convert integer minor units into a major-unit Decimal.

    **Example:**
        ```python
        integer_to_amount(-123456)         # Decimal('-1234.56')
        integer_to_amount(500, "JPY")      # Decimal('500')
        ```
    """
    currency = get_currency(currency)
    return Decimal(int(value)).scaleb(-currency.decimals).quantize(currency.quantum)


def amount_to_integer(amount: Decimal | float | str | int, currency: Currency | str | None = None) -> int:
    """Convert a major-unit amount into integer minor units, rounding per policy."""
    currency = get_currency(currency)
    value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    return int(currency.quantize(value).scaleb(currency.decimals))


def integer_to_currency(value: int, currency: Currency | str | None = None) -> str:
    """
    Format integer minor units for display with thousands separators.

    Locale-specific separators and symbols are left to the presentation
    layer; this always renders ``-1,234.56`` style text.
    """
    currency = get_currency(currency)
    return f"{integer_to_amount(value, currency):,.{currency.decimals}f}"
