"""
Per-bucket label payloads.

A label holds what a tooltip for one bucket must show. It is plain data: the
presentation layer decides how (and whether) to render it.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import NamedTuple

from .accumulator import Bucket
from .currency import Currency, get_currency, integer_to_amount, integer_to_currency
from .granularity import Granularity
from .utils import bucket_date


class LabelLine(NamedTuple):
    """
    One caption/value line of a label.

    Attributes:
        caption: Line caption, e.g. 'Income:'
        amount: Value in major units
        text: Value formatted for display
        strong: Whether the value is emphasised
    """

    caption: str
    amount: Decimal
    text: str
    strong: bool = False


@dataclass(frozen=True)
class BucketLabel:
    """
    Label content for one bucket.

    Attributes:
        heading: Formatted bucket date ('March 2024' or 'March 5, 2024')
        income: Income in major units
        expense: Expense in major units
        change: income + expense in major units
        transfers: Net transfers in major units, or None when they are zero
        balance: Running balance in major units
        lines: Display lines in order; the change line is strong and the
            transfers line is present only when transfers are non-zero
    """

    heading: str
    income: Decimal
    expense: Decimal
    change: Decimal
    transfers: Decimal | None
    balance: Decimal
    lines: tuple[LabelLine, ...]

    def to_dict(self) -> dict:
        return {
            "heading": self.heading,
            "lines": [
                {"caption": line.caption, "text": line.text, "strong": line.strong}
                for line in self.lines
            ],
        }


def format_heading(key: str, granularity: Granularity) -> str:
    """Full month name for monthly buckets, full date for daily ones."""
    day = bucket_date(key)
    if granularity is Granularity.MONTHLY:
        return f"{day:%B} {day.year}"
    return f"{day:%B} {day.day}, {day.year}"


def bucket_label(
    bucket: Bucket,
    granularity: Granularity,
    currency: Currency | str | None = None,
) -> BucketLabel:
    """Build the label for one bucket, converting minor units for display."""
    currency = get_currency(currency)

    def line(caption: str, value: int, strong: bool = False) -> LabelLine:
        return LabelLine(
            caption,
            integer_to_amount(value, currency),
            integer_to_currency(value, currency),
            strong,
        )

    lines = [
        line("Income:", bucket.income),
        line("Expenses:", bucket.expense),
        line("Change:", bucket.change, strong=True),
    ]
    if bucket.transfers != 0:
        lines.append(line("Transfers:", bucket.transfers))
    lines.append(line("Balance:", bucket.running_balance))

    return BucketLabel(
        heading=format_heading(bucket.date, granularity),
        income=integer_to_amount(bucket.income, currency),
        expense=integer_to_amount(bucket.expense, currency),
        change=integer_to_amount(bucket.change, currency),
        transfers=(
            integer_to_amount(bucket.transfers, currency) if bucket.transfers else None
        ),
        balance=integer_to_amount(bucket.running_balance, currency),
        lines=tuple(lines),
    )
