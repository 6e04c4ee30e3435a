"""
Bucket granularity for cash-flow reports.

The granularity decides both the canonical bucket-key format and which
date-sequence generator is used to walk a range.
"""

from __future__ import annotations

from enum import Enum


class Granularity(Enum):
    """
    Size of one report bucket.

    Attributes:
        DAILY: One bucket per calendar day, keyed 'YYYY-MM-DD'
        MONTHLY: One bucket per calendar month, keyed 'YYYY-MM'
    """

    DAILY = "daily"
    MONTHLY = "monthly"

    @property
    def unit(self) -> str:
        """numpy datetime64 unit used to step through a range."""
        return "D" if self is Granularity.DAILY else "M"

    @property
    def freq(self) -> str:
        """pandas period frequency for tabular views."""
        return "D" if self is Granularity.DAILY else "M"

    @property
    def key_format(self) -> str:
        """strftime format of a canonical bucket key."""
        return "%Y-%m-%d" if self is Granularity.DAILY else "%Y-%m"

    @classmethod
    def from_concise(cls, is_concise: bool) -> Granularity:
        """Map the 'concise' report toggle onto a granularity."""
        return cls.MONTHLY if is_concise else cls.DAILY

    @classmethod
    def parse(cls, value: Granularity | str) -> Granularity:
        """
        Parse a granularity from user input.

        Accepts enum members and the strings 'daily'/'day'/'D' and
        'monthly'/'month'/'M' (case-insensitive).

        Raises:
            ValueError: If the value names no known granularity
        """
        if isinstance(value, Granularity):
            return value
        normalized = str(value).strip().lower()
        if normalized in {"daily", "day", "d"}:
            return cls.DAILY
        if normalized in {"monthly", "month", "m"}:
            return cls.MONTHLY
        raise ValueError(
            f"Unknown granularity {value!r}; expected 'daily' or 'monthly'"
        )
