"""
Data source protocol for CashFlowLab.
Defines the contract a record store must satisfy to feed the cash-flow core.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import Protocol, runtime_checkable

from .aggregates import AggregateRow
from .date_range import DateRange
from .granularity import Granularity


class AmountSign(Enum):
    """Sign predicate applied to transaction amounts."""

    POSITIVE = "positive"  # amount > 0
    NEGATIVE = "negative"  # amount < 0

    def matches(self, amount):
        """Apply the predicate to a scalar or elementwise to a pandas Series."""
        return amount > 0 if self is AmountSign.POSITIVE else amount < 0


@runtime_checkable
class AggregateSource(Protocol):
    """
    Contract for record stores that supply grouped transaction sums.
    Responsibilities: filter transactions, group and sum them. Results must
    be complete when returned; the core indexes them only after every fetch
    has finished.
    """

    def grouped_sums(
        self, date_range: DateRange, granularity: Granularity, sign: AmountSign
    ) -> Sequence[AggregateRow]:
        """
        Sum matching transactions of one sign within the range.

        Returns:
            AggregateRows grouped by (bucket date, transfer-link presence),
            ordered by bucket date. Dates use the granularity's bucket key.
        """
        ...

    def opening_balance(self, date_range: DateRange, granularity: Granularity) -> int:
        """Signed sum of all matching amounts strictly before the range start."""
        ...

    def totals(self, date_range: DateRange, sign: AmountSign) -> int:
        """Signed sum over the range of non-transfer transactions of one sign."""
        ...


__all__ = ["AmountSign", "AggregateSource"]
