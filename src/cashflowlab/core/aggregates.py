"""
Aggregate rows and the bucket indexes built from them.

Upstream groups transactions by (bucket date, transfer-link presence) and
sums their amounts separately for positive and negative amounts. This module
turns those grouped sums into lookup tables keyed by canonical bucket key,
each split into a non-transfer (False) and a transfer (True) branch.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from numbers import Integral
from typing import Any

import numpy as np
import pandas as pd

from .errors import MalformedAggregateError
from .granularity import Granularity
from .utils import bucket_key

logger = logging.getLogger(__name__)

# bucket key -> {is_transfer: summed amount}
BucketIndex = dict[str, dict[bool, int]]

_TRANSFER_KEYS = ("isTransfer", "isTransferRaw", "is_transfer_raw", "transfer_account")


@dataclass(frozen=True)
class AggregateRow:
    """
    One grouped sum produced upstream.

    Attributes:
        date: Bucket date as an ISO string ('YYYY-MM' or 'YYYY-MM-DD')
        is_transfer_raw: Linked transfer account id, or None for ordinary flow
        amount: Signed sum in minor currency units (e.g. cents)
    """

    date: str | date
    is_transfer_raw: Any
    amount: int

    @property
    def is_transfer(self) -> bool:
        return is_transfer_link(self.is_transfer_raw)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> AggregateRow:
        """
        Build a row from a mapping such as a query result or JSON object.

        The transfer link may be spelled ``isTransfer``, ``isTransferRaw``,
        ``is_transfer_raw`` or ``transfer_account``.
        """
        raw = None
        for key in _TRANSFER_KEYS:
            if key in data:
                raw = data[key]
                break
        return cls(date=data.get("date"), is_transfer_raw=raw, amount=data.get("amount"))


def is_transfer_link(raw: Any) -> bool:
    """
    Reclassify a raw transfer link into a flag.

    Any present value counts as a transfer regardless of what it is (an
    empty string included). None and pandas missing values (NaN, NA, NaT)
    count as ordinary flow.
    """
    if raw is None:
        return False
    if pd.api.types.is_scalar(raw) and pd.isna(raw):
        return False
    return True


def _coerce_amount(value: Any, side: str | None, index: int | None) -> int:
    if value is None:
        raise MalformedAggregateError("Missing amount", side=side, index=index)
    if isinstance(value, (bool, np.bool_)):
        raise MalformedAggregateError(
            f"Non-numeric amount {value!r}", side=side, index=index
        )
    if isinstance(value, Integral):
        return int(value)
    if isinstance(value, (float, np.floating, Decimal)):
        if isinstance(value, Decimal):
            finite = value.is_finite()
        else:
            finite = math.isfinite(value)
        if not finite or value != int(value):
            raise MalformedAggregateError(
                f"Amount {value!r} is not a whole number of minor units",
                side=side,
                index=index,
            )
        return int(value)
    raise MalformedAggregateError(
        f"Non-numeric amount {value!r}", side=side, index=index
    )


def _row_key(
    value: Any, granularity: Granularity | None, side: str | None, index: int | None
) -> str:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise MalformedAggregateError("Missing date", side=side, index=index)
    if granularity is None:
        return value.isoformat() if isinstance(value, date) else str(value)
    try:
        return bucket_key(value, granularity)
    except ValueError as e:
        raise MalformedAggregateError(
            f"Date {value!r} is not a {granularity.value} bucket: {e}",
            side=side,
            index=index,
        ) from e


def index_cash_flow(
    rows: Iterable[AggregateRow | Mapping[str, Any]],
    granularity: Granularity | None = None,
    *,
    side: str | None = None,
) -> BucketIndex:
    """
    Index one sequence of grouped sums by bucket key and transfer flag.

    **Args:**
        rows: AggregateRow instances or mappings with date/transfer/amount
        granularity: When given, row dates are canonicalised to its bucket
            keys; otherwise they are used verbatim
        side: Label used in error messages ('income' or 'expense')

    **Returns:**
        BucketIndex mapping each key to ``{False: amount, True: amount}``
        (only the flags that occurred are present)

    **Raises:**
        MalformedAggregateError: For a missing or non-integral amount, or a
            missing or unusable date

    **Note:**
        Upstream grouping makes (key, flag) unique. A repeated pair is summed
        rather than overwritten so no amount is lost.
    """
    index: BucketIndex = {}
    for i, row in enumerate(rows):
        if isinstance(row, Mapping):
            row = AggregateRow.from_mapping(row)
        elif not isinstance(row, AggregateRow):
            raise MalformedAggregateError(
                f"Unsupported row type {type(row).__name__}", side=side, index=i
            )
        amount = _coerce_amount(row.amount, side, i)
        key = _row_key(row.date, granularity, side, i)
        flag = row.is_transfer

        branch = index.setdefault(key, {})
        if flag in branch:
            logger.warning(
                "Duplicate aggregate for %s (transfer=%s) in %s rows; summing",
                key,
                flag,
                side or "aggregate",
            )
            branch[flag] += amount
        else:
            branch[flag] = amount
    return index


def index_aggregates(
    income_rows: Iterable[AggregateRow | Mapping[str, Any]],
    expense_rows: Iterable[AggregateRow | Mapping[str, Any]],
    granularity: Granularity | None = None,
) -> tuple[BucketIndex, BucketIndex]:
    """
    Build the income-side and expense-side indexes.

    ``income_rows`` are the grouped sums of positive amounts and
    ``expense_rows`` the grouped sums of negative amounts. Signs are kept as
    they arrive.
    """
    income_index = index_cash_flow(income_rows, granularity, side="income")
    expense_index = index_cash_flow(expense_rows, granularity, side="expense")
    logger.debug(
        "Indexed %d income and %d expense buckets",
        len(income_index),
        len(expense_index),
    )
    return income_index, expense_index


def lookup(index: BucketIndex, key: str, transfer: bool) -> int:
    """Amount stored for (key, transfer), or 0 when absent."""
    return index.get(key, {}).get(transfer, 0)
