"""
In-memory transaction source backed by a pandas DataFrame.

This is a reference implementation of the aggregate-source contract, used by
the CLI and tests. Real deployments plug in their own record store.
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import pandas as pd

from .core.aggregates import AggregateRow
from .core.date_range import DateRange
from .core.errors import MalformedAggregateError
from .core.granularity import Granularity
from .core.interfaces import AmountSign

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("date", "amount")


class TransactionFrameSource:
    """
    Aggregate source over raw transactions.

    Expected columns:
        date: Transaction date (anything ``pd.to_datetime`` understands)
        amount: Signed amount in minor units
        transfer_account: Linked account for transfers, missing otherwise
        offbudget: Optional flag; off-budget rows are ignored

    **Example:**
        ```python
        source = TransactionFrameSource([
            {"date": "2024-03-02", "amount": 500},
            {"date": "2024-03-09", "amount": -200, "transfer_account": "acct9"},
        ])
        rows = source.grouped_sums(rng, Granularity.MONTHLY, AmountSign.NEGATIVE)
        ```
    """

    def __init__(self, transactions: pd.DataFrame | Iterable[Mapping[str, Any]]):
        if isinstance(transactions, pd.DataFrame):
            frame = transactions.copy()
        else:
            frame = pd.DataFrame(list(transactions))

        missing = [col for col in REQUIRED_COLUMNS if col not in frame.columns]
        if missing and not frame.empty:
            raise ValueError(f"Transactions are missing columns: {', '.join(missing)}")
        for col in REQUIRED_COLUMNS:
            if col not in frame.columns:
                frame[col] = pd.Series(dtype="object")

        frame["date"] = pd.to_datetime(frame["date"]).dt.normalize()
        frame["amount"] = pd.to_numeric(frame["amount"])
        if "transfer_account" not in frame.columns:
            frame["transfer_account"] = None

        if "offbudget" in frame.columns:
            offbudget = frame["offbudget"].eq(True)
            if offbudget.any():
                logger.debug("Ignoring %d off-budget transactions", int(offbudget.sum()))
            frame = frame[~offbudget]

        self._frame = frame.reset_index(drop=True)

    @classmethod
    def from_file(cls, path: str | Path) -> TransactionFrameSource:
        """Load transactions from a CSV file or a JSON array of objects."""
        path = Path(path)
        if path.suffix.lower() == ".csv":
            source = cls(pd.read_csv(path))
        else:
            with open(path, encoding="utf-8") as f:
                source = cls(json.load(f))
        logger.debug("Loaded %d transactions from %s", len(source), path)
        return source

    def __len__(self) -> int:
        return len(self._frame)

    def _within(self, date_range: DateRange, granularity: Granularity) -> pd.DataFrame:
        """Rows whose bucket lies inside the range."""
        frame = self._frame
        if granularity is Granularity.MONTHLY:
            months = frame["date"].dt.to_period("M")
            start = pd.Period(date_range.start, freq="M")
            end = pd.Period(date_range.end, freq="M")
            return frame[(months >= start) & (months <= end)]
        start = pd.Timestamp(date_range.start)
        end = pd.Timestamp(date_range.end)
        return frame[(frame["date"] >= start) & (frame["date"] <= end)]

    @staticmethod
    def _signed(frame: pd.DataFrame, sign: AmountSign) -> pd.DataFrame:
        return frame[sign.matches(frame["amount"])]

    def grouped_sums(
        self, date_range: DateRange, granularity: Granularity, sign: AmountSign
    ) -> list[AggregateRow]:
        """Sum one sign's amounts per (bucket, transfer-link presence)."""
        subset = self._signed(self._within(date_range, granularity), sign)
        if subset.empty:
            return []

        grouped = (
            subset.assign(
                bucket=subset["date"].dt.strftime(granularity.key_format),
                is_transfer=subset["transfer_account"].notna(),
            )
            .groupby(["bucket", "is_transfer"], sort=True)
            .agg(
                amount=("amount", "sum"),
                accounts=(
                    "transfer_account",
                    lambda s: ",".join(sorted(str(v) for v in s.dropna().unique())),
                ),
            )
        )

        return [
            AggregateRow(
                date=bucket,
                is_transfer_raw=accounts if is_transfer else None,
                amount=_scalar(amount),
            )
            for (bucket, is_transfer), amount, accounts in zip(
                grouped.index, grouped["amount"], grouped["accounts"]
            )
        ]

    def opening_balance(self, date_range: DateRange, granularity: Granularity) -> int:
        """Sum of every amount dated before the range start."""
        before = self._frame[self._frame["date"] < pd.Timestamp(date_range.start)]
        return _whole_sum(before["amount"], "Opening balance")

    def totals(self, date_range: DateRange, sign: AmountSign) -> int:
        """Sum one sign's non-transfer amounts dated inside the range."""
        subset = self._signed(self._within(date_range, Granularity.DAILY), sign)
        subset = subset[subset["transfer_account"].isna()]
        return _whole_sum(subset["amount"], f"Total of {sign.value} amounts")


def _scalar(value):
    """Unwrap numpy scalars so downstream checks see plain Python numbers."""
    return value.item() if hasattr(value, "item") else value


def _whole_sum(amounts: pd.Series, what: str) -> int:
    """Sum minor-unit amounts, rejecting totals that are not whole numbers."""
    value = _scalar(amounts.sum())
    if isinstance(value, float) and not (math.isfinite(value) and value.is_integer()):
        raise MalformedAggregateError(
            f"{what} {value!r} is not a whole number of minor units"
        )
    return int(value)
