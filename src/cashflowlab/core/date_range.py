"""
Resolution of a requested month range into concrete report dates.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from .errors import InvalidRangeError
from .granularity import Granularity
from .utils import bucket_keys, current_day, first_day_of_month, last_day_of_month

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DateRange:
    """
    Inclusive report date range.

    Attributes:
        start: First day covered (always the first day of a month)
        end: Last day covered, never later than the day it was resolved on
    """

    start: date
    end: date

    def __post_init__(self):
        if self.start > self.end:
            raise InvalidRangeError(
                f"Range start {self.start.isoformat()} is after end {self.end.isoformat()}"
            )

    def bucket_keys(self, granularity: Granularity) -> list[str]:
        """Dense bucket keys covering this range."""
        return bucket_keys(self.start, self.end, granularity)

    def __str__(self) -> str:
        return f"{self.start.isoformat()}..{self.end.isoformat()}"


def resolve_date_range(
    start_month: str | date,
    end_month: str | date,
    granularity: Granularity | str = Granularity.MONTHLY,
    *,
    today: date | None = None,
) -> DateRange:
    """
    Resolve a (start month, end month) request into a concrete date range.

    The start is the first day of ``start_month`` and the end is the last day
    of ``end_month``, clamped to ``today`` when that lies in the future.

    **Args:**
        start_month: First month of the report ('YYYY-MM')
        end_month: Last month of the report ('YYYY-MM')
        granularity: Bucket size the range will be walked at
        today: Reference date for clamping (defaults to the current day)

    **Returns:**
        DateRange with ``start <= end <= today``

    **Raises:**
        InvalidRangeError: If a month does not parse, or the range is empty
            once the end has been clamped

    **Example:**
        ```python
        from datetime import date
        rng = resolve_date_range("2024-01", "2024-12", today=date(2024, 6, 15))
        # DateRange(start=date(2024, 1, 1), end=date(2024, 6, 15))
        ```
    """
    try:
        Granularity.parse(granularity)
    except ValueError as e:
        raise InvalidRangeError(str(e)) from e

    try:
        start = first_day_of_month(start_month)
    except ValueError as e:
        raise InvalidRangeError(f"Invalid start month {start_month!r}: {e}") from e
    try:
        nominal_end = last_day_of_month(end_month)
    except ValueError as e:
        raise InvalidRangeError(f"Invalid end month {end_month!r}: {e}") from e

    if today is None:
        today = current_day()
    end = min(nominal_end, today)
    if end != nominal_end:
        logger.debug(
            "Clamped range end %s to today %s", nominal_end.isoformat(), today.isoformat()
        )

    if start > end:
        raise InvalidRangeError(
            f"Range {start.isoformat()}..{nominal_end.isoformat()} is empty "
            f"once clamped to {end.isoformat()}"
        )
    return DateRange(start=start, end=end)
