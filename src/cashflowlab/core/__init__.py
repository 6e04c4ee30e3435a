"""
Core module for CashFlowLab.

This module contains the pure cash-flow pipeline: range resolution, aggregate
indexing, balance accumulation and report assembly.
"""

from .accumulator import Accumulation, Bucket, accumulate_balances
from .aggregates import (
    AggregateRow,
    BucketIndex,
    index_aggregates,
    index_cash_flow,
    is_transfer_link,
)
from .currency import (
    Currency,
    RoundingPolicy,
    amount_to_integer,
    get_currency,
    integer_to_amount,
    integer_to_currency,
)
from .date_range import DateRange, resolve_date_range
from .errors import (
    BalanceOverflowError,
    CashFlowError,
    ConfigError,
    EmptyRangeError,
    InvalidRangeError,
    MalformedAggregateError,
)
from .granularity import Granularity
from .interfaces import AggregateSource, AmountSign
from .labels import BucketLabel, LabelLine, bucket_label
from .report import (
    CashFlowReport,
    ReportEncoder,
    SimpleCashFlow,
    assemble_report,
    recalculate,
    summarize_rows,
)
from .utils import bucket_keys, first_day_of_month, last_day_of_month

__all__ = [
    # Errors
    "CashFlowError",
    "InvalidRangeError",
    "MalformedAggregateError",
    "EmptyRangeError",
    "BalanceOverflowError",
    "ConfigError",
    # Ranges
    "Granularity",
    "DateRange",
    "resolve_date_range",
    "bucket_keys",
    "first_day_of_month",
    "last_day_of_month",
    # Aggregates
    "AggregateRow",
    "BucketIndex",
    "index_aggregates",
    "index_cash_flow",
    "is_transfer_link",
    # Accumulation and report
    "Bucket",
    "Accumulation",
    "accumulate_balances",
    "CashFlowReport",
    "SimpleCashFlow",
    "ReportEncoder",
    "assemble_report",
    "recalculate",
    "summarize_rows",
    # Labels and currency
    "BucketLabel",
    "LabelLine",
    "bucket_label",
    "Currency",
    "RoundingPolicy",
    "get_currency",
    "integer_to_amount",
    "amount_to_integer",
    "integer_to_currency",
    # Sources
    "AggregateSource",
    "AmountSign",
]
