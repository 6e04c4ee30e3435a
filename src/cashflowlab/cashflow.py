"""
Cash-flow report entry points.

These functions tie a data source to the pure core: they resolve the range,
fetch every input the report needs, and only then index and accumulate.
Errors raised by the source propagate unchanged.
"""

from __future__ import annotations

import logging
from datetime import date

from .core.date_range import resolve_date_range
from .core.granularity import Granularity
from .core.interfaces import AggregateSource, AmountSign
from .core.report import CashFlowReport, SimpleCashFlow, recalculate

logger = logging.getLogger(__name__)


def cash_flow_by_date(
    source: AggregateSource,
    start_month: str | date,
    end_month: str | date,
    granularity: Granularity | str = Granularity.MONTHLY,
    *,
    today: date | None = None,
) -> CashFlowReport:
    """
    Build a dense cash-flow report for a month range.

    **Args:**
        source: Supplier of grouped sums and the opening balance
        start_month: First month ('YYYY-MM')
        end_month: Last month ('YYYY-MM'); clamped to today if in the future
        granularity: 'monthly' or 'daily' buckets
        today: Reference date for clamping (defaults to the current day)

    **Returns:**
        CashFlowReport with one bucket per month or day of the range

    **Example:**
        ```python
        from cashflowlab import TransactionFrameSource, cash_flow_by_date

        source = TransactionFrameSource.from_file("transactions.csv")
        report = cash_flow_by_date(source, "2024-01", "2024-06", "monthly")
        print(report.total_income, report.ending_balance)
        ```
    """
    granularity = Granularity.parse(granularity)
    date_range = resolve_date_range(start_month, end_month, granularity, today=today)

    starting_balance = source.opening_balance(date_range, granularity)
    income_rows = list(source.grouped_sums(date_range, granularity, AmountSign.POSITIVE))
    expense_rows = list(source.grouped_sums(date_range, granularity, AmountSign.NEGATIVE))
    logger.debug(
        "Fetched %d income and %d expense rows for %s",
        len(income_rows),
        len(expense_rows),
        date_range,
    )

    return recalculate(starting_balance, income_rows, expense_rows, date_range, granularity)


def simple_cash_flow(
    source: AggregateSource,
    start_month: str | date,
    end_month: str | date,
    *,
    today: date | None = None,
) -> SimpleCashFlow:
    """Income and expense totals for a month range, transfers excluded."""
    date_range = resolve_date_range(start_month, end_month, today=today)
    return SimpleCashFlow(
        income=int(source.totals(date_range, AmountSign.POSITIVE)),
        expense=int(source.totals(date_range, AmountSign.NEGATIVE)),
    )
