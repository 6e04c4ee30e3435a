"""
Date utilities for CashFlowLab.

Bucket keys are plain ISO strings ('YYYY-MM' or 'YYYY-MM-DD') so that they can
be used directly as lookup keys and compared lexically in date order.
"""

from __future__ import annotations

import re
from datetime import date, datetime

import numpy as np

from .granularity import Granularity

_ISO_RE = re.compile(r"^(\d{4})-(\d{2})(?:-(\d{2}))?$")


def _split_iso(value: str) -> tuple[int, int, int | None]:
    match = _ISO_RE.match(value.strip())
    if match is None:
        raise ValueError(f"Expected 'YYYY-MM' or 'YYYY-MM-DD', got {value!r}")
    year, month, day = match.groups()
    return int(year), int(month), int(day) if day is not None else None


def current_day() -> date:
    """Today's local date."""
    return date.today()


def parse_month(value: str | date) -> date:
    """
    Parse a month designator into the first day of that month.

    **Args:**
        value: 'YYYY-MM', 'YYYY-MM-DD' or a date; the day part is ignored

    **Returns:**
        The first calendar day of the month

    **Raises:**
        ValueError: If the value is not a valid calendar month (or date)

    **Example:**
        ```python
        parse_month("2024-03")     # date(2024, 3, 1)
        parse_month("2024-03-17")  # date(2024, 3, 1)
        ```
    """
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        return value.replace(day=1)
    if not isinstance(value, str):
        raise ValueError(f"Expected a month string, got {type(value).__name__}")
    year, month, day = _split_iso(value)
    if day is not None:
        # Validates the full date (e.g. rejects 2024-02-30)
        date(year, month, day)
    return date(year, month, 1)


def first_day_of_month(value: str | date) -> date:
    """First calendar day of the month containing ``value``."""
    return parse_month(value)


def last_day_of_month(value: str | date) -> date:
    """Last calendar day of the month containing ``value``."""
    next_month = np.datetime64(parse_month(value), "M") + np.timedelta64(1, "M")
    last = next_month.astype("datetime64[D]") - np.timedelta64(1, "D")
    return last.item()


def bucket_key(value: str | date, granularity: Granularity) -> str:
    """
    Canonicalise a date into the bucket key of a granularity.

    Monthly keys accept any date within the month ('2024-03-01' -> '2024-03').
    Daily keys need a full date; a bare month cannot be placed in a day.

    Raises:
        ValueError: If the value cannot be mapped to a bucket key
    """
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        year, month, day = value.year, value.month, value.day
    else:
        year, month, day = _split_iso(str(value))

    if day is None:
        if granularity is Granularity.DAILY:
            raise ValueError(f"Month key {value!r} has no day for a daily bucket")
        date(year, month, 1)
        return f"{year:04d}-{month:02d}"

    date(year, month, day)
    if granularity is Granularity.MONTHLY:
        return f"{year:04d}-{month:02d}"
    return f"{year:04d}-{month:02d}-{day:02d}"


def bucket_keys(start: date, end: date, granularity: Granularity) -> list[str]:
    """
    Generate the dense, ascending sequence of bucket keys for a range.

    Every month (or day) between ``start`` and ``end`` appears exactly once,
    inclusive on both ends, whether or not anything happened on it.

    **Example:**
        ```python
        from datetime import date
        bucket_keys(date(2024, 1, 1), date(2024, 3, 31), Granularity.MONTHLY)
        # ['2024-01', '2024-02', '2024-03']
        ```
    """
    unit = granularity.unit
    first = np.datetime64(start, unit)
    last = np.datetime64(end, unit)
    if last < first:
        return []
    steps = first + np.arange((last - first).astype(int) + 1).astype(
        f"timedelta64[{unit}]"
    )
    return np.datetime_as_string(steps, unit=unit).tolist()


def bucket_date(key: str) -> date:
    """Date a bucket key starts on ('2024-03' -> date(2024, 3, 1))."""
    year, month, day = _split_iso(key)
    return date(year, month, day or 1)
