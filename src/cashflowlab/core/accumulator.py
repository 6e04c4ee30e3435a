"""
Running-balance accumulation over a dense bucket sequence.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from .aggregates import BucketIndex, lookup
from .date_range import DateRange
from .errors import BalanceOverflowError
from .granularity import Granularity

logger = logging.getLogger(__name__)

_INT64 = np.iinfo(np.int64)
MIN_AMOUNT = int(_INT64.min)
MAX_AMOUNT = int(_INT64.max)


@dataclass(frozen=True)
class Bucket:
    """
    One point of the cash-flow series.

    Attributes:
        date: Canonical bucket key ('YYYY-MM' or 'YYYY-MM-DD')
        income: Non-transfer positive flow (>= 0)
        expense: Non-transfer negative flow (<= 0)
        credit_transfers: Transfers in, carrying the positive group's sign
        debit_transfers: Transfers out, carrying the negative group's sign
        running_balance: Balance after this bucket

    All amounts are signed integers in minor currency units.
    """

    date: str
    income: int
    expense: int
    credit_transfers: int
    debit_transfers: int
    running_balance: int

    @property
    def change(self) -> int:
        """Non-transfer change in this bucket (income + expense)."""
        return self.income + self.expense

    @property
    def transfers(self) -> int:
        """Net transfers in this bucket."""
        return self.credit_transfers + self.debit_transfers

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "income": self.income,
            "expense": self.expense,
            "credit_transfers": self.credit_transfers,
            "debit_transfers": self.debit_transfers,
            "running_balance": self.running_balance,
        }


@dataclass(frozen=True)
class Accumulation:
    """Buckets and running totals produced by one walk."""

    buckets: tuple[Bucket, ...]
    total_income: int
    total_expenses: int
    total_transfers: int


def _checked(value: int, what: str, key: str) -> int:
    if value < MIN_AMOUNT or value > MAX_AMOUNT:
        raise BalanceOverflowError(
            f"{what} {value} at {key} exceeds the signed 64-bit minor-unit range"
        )
    return value


def accumulate_balances(
    starting_balance: int,
    income_index: BucketIndex,
    expense_index: BucketIndex,
    date_range: DateRange,
    granularity: Granularity,
) -> Accumulation:
    """
    Walk every bucket of a range and accumulate the running balance.

    The full key sequence is generated first; each key is then filled from
    the indexes or defaulted to zero, so days or months without activity
    still produce a bucket carrying the previous balance.

    **Args:**
        starting_balance: Balance before the first bucket (minor units)
        income_index: Index of positive grouped sums
        expense_index: Index of negative grouped sums
        date_range: Resolved range to cover
        granularity: Bucket size

    **Returns:**
        Accumulation with one Bucket per key and the range totals

    **Raises:**
        BalanceOverflowError: If the balance or a total leaves the int64 range

    **Note:**
        Amounts are added with their signs as given; expenses arrive negative
        so a bucket's change is simply ``income + expense``.
    """
    keys = date_range.bucket_keys(granularity)
    logger.debug(
        "Accumulating %d %s buckets over %s", len(keys), granularity.value, date_range
    )

    balance = _checked(int(starting_balance), "Starting balance", "start")
    total_income = 0
    total_expenses = 0
    total_transfers = 0
    buckets: list[Bucket] = []

    for key in keys:
        income = lookup(income_index, key, False)
        credit_transfers = lookup(income_index, key, True)
        expense = lookup(expense_index, key, False)
        debit_transfers = lookup(expense_index, key, True)

        balance = _checked(
            balance + income + expense + credit_transfers + debit_transfers,
            "Balance",
            key,
        )
        total_income = _checked(total_income + income, "Total income", key)
        total_expenses = _checked(total_expenses + expense, "Total expenses", key)
        total_transfers = _checked(
            total_transfers + credit_transfers + debit_transfers,
            "Total transfers",
            key,
        )

        buckets.append(
            Bucket(
                date=key,
                income=income,
                expense=expense,
                credit_transfers=credit_transfers,
                debit_transfers=debit_transfers,
                running_balance=balance,
            )
        )

    return Accumulation(
        buckets=tuple(buckets),
        total_income=total_income,
        total_expenses=total_expenses,
        total_transfers=total_transfers,
    )
