"""
Cash-flow report assembly and views.

``recalculate`` is the pure pipeline: index the grouped sums, walk the
buckets, assemble the report. Everything here operates on already-fetched
data and has no side effects.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any

import pandas as pd

from .accumulator import Accumulation, Bucket, accumulate_balances
from .aggregates import AggregateRow, index_aggregates, index_cash_flow
from .currency import Currency, get_currency
from .date_range import DateRange
from .errors import EmptyRangeError
from .granularity import Granularity
from .labels import BucketLabel, bucket_label

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CashFlowReport:
    """
    Dense cash-flow series with range totals.

    Attributes:
        buckets: One Bucket per month/day of the range, ascending
        starting_balance: Opening balance before the first bucket
        ending_balance: Running balance of the last bucket
        total_income: Sum of bucket incomes
        total_expenses: Sum of bucket expenses (non-positive)
        total_transfers: Sum of bucket credit and debit transfers
        total_change: Last bucket balance minus first bucket balance
        granularity: Bucket size the series was built at

    Note:
        ``total_change`` is measured across the emitted buckets, so the first
        bucket's own movement is not part of it. ``change_from_opening``
        gives ending minus starting balance instead.
    """

    buckets: tuple[Bucket, ...]
    starting_balance: int
    ending_balance: int
    total_income: int
    total_expenses: int
    total_transfers: int
    total_change: int
    granularity: Granularity = Granularity.MONTHLY

    @property
    def change_from_opening(self) -> int:
        return self.ending_balance - self.starting_balance

    @property
    def dates(self) -> list[str]:
        return [b.date for b in self.buckets]

    def labels(self, currency: Currency | str | None = None) -> list[BucketLabel]:
        """Label payload for every bucket."""
        currency = get_currency(currency)
        return [bucket_label(b, self.granularity, currency) for b in self.buckets]

    def to_frame(self) -> pd.DataFrame:
        """
        Tabular view in minor units, indexed by bucket period.

        Columns: income, expense, credit_transfers, debit_transfers,
        transfers, change, balance.
        """
        index = pd.period_range(
            start=self.buckets[0].date,
            periods=len(self.buckets),
            freq=self.granularity.freq,
            name="date",
        )
        return pd.DataFrame(
            {
                "income": [b.income for b in self.buckets],
                "expense": [b.expense for b in self.buckets],
                "credit_transfers": [b.credit_transfers for b in self.buckets],
                "debit_transfers": [b.debit_transfers for b in self.buckets],
                "transfers": [b.transfers for b in self.buckets],
                "change": [b.change for b in self.buckets],
                "balance": [b.running_balance for b in self.buckets],
            },
            index=index,
        )

    def graph_data(self, currency: Currency | str | None = None) -> pd.DataFrame:
        """
        Chart-ready series in major units.

        Columns: income, expenses, transfers, balance (floats).
        """
        currency = get_currency(currency)
        frame = self.to_frame()
        scale = 10**currency.decimals
        return pd.DataFrame(
            {
                "income": frame["income"] / scale,
                "expenses": frame["expense"] / scale,
                "transfers": frame["transfers"] / scale,
                "balance": frame["balance"] / scale,
            },
            index=frame.index,
        )

    def to_dict(self, currency: Currency | str | None = None) -> dict[str, Any]:
        """
        JSON-friendly representation.

        Args:
            currency: When given, each bucket also carries its label payload
        """
        buckets = [b.to_dict() for b in self.buckets]
        if currency is not None:
            for payload, label in zip(buckets, self.labels(currency)):
                payload["label"] = label.to_dict()
        return {
            "granularity": self.granularity.value,
            "buckets": buckets,
            "starting_balance": self.starting_balance,
            "ending_balance": self.ending_balance,
            "total_income": self.total_income,
            "total_expenses": self.total_expenses,
            "total_transfers": self.total_transfers,
            "total_change": self.total_change,
        }


def assemble_report(
    accumulation: Accumulation,
    starting_balance: int,
    granularity: Granularity = Granularity.MONTHLY,
) -> CashFlowReport:
    """
    Package an accumulation into a CashFlowReport.

    Raises:
        EmptyRangeError: If the accumulation has no buckets
    """
    buckets = accumulation.buckets
    if not buckets:
        raise EmptyRangeError("Cannot assemble a cash-flow report from zero buckets")

    ending_balance = buckets[-1].running_balance
    report = CashFlowReport(
        buckets=buckets,
        starting_balance=int(starting_balance),
        ending_balance=ending_balance,
        total_income=accumulation.total_income,
        total_expenses=accumulation.total_expenses,
        total_transfers=accumulation.total_transfers,
        total_change=ending_balance - buckets[0].running_balance,
        granularity=granularity,
    )
    logger.debug(
        "Assembled report: %d buckets, ending balance %d",
        len(buckets),
        ending_balance,
    )
    return report


def recalculate(
    starting_balance: int,
    income_rows: Iterable[AggregateRow | Mapping[str, Any]],
    expense_rows: Iterable[AggregateRow | Mapping[str, Any]],
    date_range: DateRange,
    granularity: Granularity | str,
) -> CashFlowReport:
    """
    Build a report from already-fetched inputs.

    **Args:**
        starting_balance: Sum of all amounts strictly before the range start
        income_rows: Grouped sums of positive amounts
        expense_rows: Grouped sums of negative amounts
        date_range: Resolved report range
        granularity: Bucket size

    **Returns:**
        CashFlowReport covering every bucket of the range

    **Example:**
        ```python
        from datetime import date
        rng = resolve_date_range("2024-03", "2024-03", today=date(2024, 12, 1))
        report = recalculate(
            1000,
            [{"date": "2024-03", "isTransfer": None, "amount": 500}],
            [{"date": "2024-03", "isTransfer": "acct9", "amount": -200}],
            rng,
            Granularity.MONTHLY,
        )
        report.ending_balance  # 1300
        ```
    """
    granularity = Granularity.parse(granularity)
    income_index, expense_index = index_aggregates(
        income_rows, expense_rows, granularity
    )
    accumulation = accumulate_balances(
        starting_balance, income_index, expense_index, date_range, granularity
    )
    return assemble_report(accumulation, starting_balance, granularity)


@dataclass(frozen=True)
class SimpleCashFlow:
    """Range totals of non-transfer income and expense (minor units)."""

    income: int
    expense: int

    @property
    def change(self) -> int:
        return self.income + self.expense

    def to_dict(self) -> dict[str, int]:
        return {"income": self.income, "expense": self.expense, "change": self.change}


def summarize_rows(
    income_rows: Iterable[AggregateRow | Mapping[str, Any]],
    expense_rows: Iterable[AggregateRow | Mapping[str, Any]],
) -> SimpleCashFlow:
    """Sum the non-transfer branches of both sides, ignoring transfers."""
    income_index = index_cash_flow(income_rows, side="income")
    expense_index = index_cash_flow(expense_rows, side="expense")
    return SimpleCashFlow(
        income=sum(branch.get(False, 0) for branch in income_index.values()),
        expense=sum(branch.get(False, 0) for branch in expense_index.values()),
    )


class ReportEncoder(json.JSONEncoder):
    """JSON encoder that handles Decimal, dates, pandas objects and report types."""

    def default(self, obj):
        if isinstance(obj, Decimal):
            return str(obj)
        elif isinstance(obj, date):
            return obj.isoformat()
        elif isinstance(obj, Granularity):
            return obj.value
        elif isinstance(obj, pd.Period):
            return str(obj)
        elif isinstance(obj, pd.DataFrame):
            return obj.to_dict("records")
        elif hasattr(obj, "to_dict"):
            return obj.to_dict()
        return super().default(obj)
