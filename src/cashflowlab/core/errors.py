"""
Error classes for CashFlowLab.

This module defines the exception hierarchy raised by the cash-flow core. All
errors are raised synchronously and propagate to the caller; the core never
retries or partially recovers. Errors raised by an aggregate source while
fetching data are not wrapped and reach the caller unchanged.
"""

from __future__ import annotations


class CashFlowError(Exception):
    """Base class for every error raised by the cash-flow core."""


class InvalidRangeError(CashFlowError, ValueError):
    """
    Requested month range is unusable.

    Raised when a month string does not parse to a valid calendar month, or
    when the range is inverted once its end has been clamped to today.

    **Example Usage:**
        ```python
        from datetime import date
        from cashflowlab.core.date_range import resolve_date_range
        from cashflowlab.core.errors import InvalidRangeError

        try:
            resolve_date_range("2030-01", "2030-03", today=date(2026, 1, 15))
        except InvalidRangeError as e:
            print(f"Range error: {e}")
        ```
    """


class MalformedAggregateError(CashFlowError, ValueError):
    """
    An aggregate row cannot be indexed.

    Attributes:
        side: Which input sequence the row came from ('income' or 'expense')
        index: Position of the row in that sequence
    """

    def __init__(self, message: str, *, side: str | None = None, index: int | None = None):
        self.side = side
        self.index = index
        super().__init__(self._fmt(message))

    def _fmt(self, msg: str) -> str:
        """Format the error message with row context."""
        if self.side is None and self.index is None:
            return msg
        where = self.side or "rows"
        if self.index is not None:
            where = f"{where}[{self.index}]"
        return f"[{where}] {msg}"


class EmptyRangeError(CashFlowError, ValueError):
    """Raised when a report would be assembled from zero buckets."""


class BalanceOverflowError(CashFlowError, OverflowError):
    """
    A running balance or total left the signed 64-bit minor-unit range.

    Python integers never wrap, so this is reported explicitly instead of
    letting an out-of-range value reach storage or display layers.
    """


class ConfigError(CashFlowError, ValueError):
    """
    Configuration error while loading report settings.

    **Common Causes:**
    - Unknown keys in a YAML/JSON config file
    - Unparseable month strings or granularity names
    - Unknown file format
    """
