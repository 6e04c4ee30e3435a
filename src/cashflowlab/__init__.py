"""
CashFlowLab - Dense Cash-Flow Reports from Grouped Transaction Sums

CashFlowLab turns sparse, pre-aggregated transaction sums (income, expenses and
inter-account transfers) into a regularly spaced cash-flow series with a
running balance and range totals, at daily or monthly granularity.

Key Features:
- **Dense Series**: Every month or day of the range gets a bucket, zero-filled
- **Signed Accumulation**: Expenses stay negative; balances are plain sums
- **Transfer Aware**: Transfers are tracked apart from income and expense
- **Pure Core**: No I/O; any record store can feed it through a protocol
- **Label Payloads**: Per-bucket display content as data, not markup

Architecture Overview:
- **resolve_date_range**: Month range -> concrete dates, clamped to today
- **index_aggregates**: Grouped sums -> bucket lookups split by transfer flag
- **accumulate_balances**: Dense walk producing buckets and running totals
- **assemble_report**: Buckets and totals -> CashFlowReport
- **AggregateSource**: Protocol for the record store supplying the sums

Quick Start:
    ```python
    from datetime import date
    from cashflowlab import TransactionFrameSource, cash_flow_by_date

    source = TransactionFrameSource([
        {"date": "2024-03-02", "amount": 500},
        {"date": "2024-03-09", "amount": -200, "transfer_account": "acct9"},
    ])
    report = cash_flow_by_date(source, "2024-03", "2024-03", "monthly",
                               today=date(2024, 12, 31))
    report.ending_balance  # 300
    ```
"""

# Version information
__version__ = "0.1.0"
__author__ = "CashFlowLab Team"
__description__ = "Dense cash-flow reports from grouped transaction sums"

from .cashflow import cash_flow_by_date, simple_cash_flow
from .config import ReportConfig, load_report_config
from .core import (
    AggregateRow,
    AggregateSource,
    AmountSign,
    BalanceOverflowError,
    Bucket,
    BucketLabel,
    CashFlowError,
    CashFlowReport,
    ConfigError,
    Currency,
    DateRange,
    EmptyRangeError,
    Granularity,
    InvalidRangeError,
    MalformedAggregateError,
    SimpleCashFlow,
    accumulate_balances,
    assemble_report,
    index_aggregates,
    index_cash_flow,
    recalculate,
    resolve_date_range,
    summarize_rows,
)
from .sources import TransactionFrameSource

# Define what gets imported with "from cashflowlab import *"
__all__ = [
    # Pipeline
    "resolve_date_range",
    "index_aggregates",
    "index_cash_flow",
    "accumulate_balances",
    "assemble_report",
    "recalculate",
    "summarize_rows",
    # Entry points
    "cash_flow_by_date",
    "simple_cash_flow",
    # Data model
    "AggregateRow",
    "Bucket",
    "BucketLabel",
    "CashFlowReport",
    "SimpleCashFlow",
    "DateRange",
    "Granularity",
    "Currency",
    # Sources
    "AggregateSource",
    "AmountSign",
    "TransactionFrameSource",
    # Config
    "ReportConfig",
    "load_report_config",
    # Errors
    "CashFlowError",
    "InvalidRangeError",
    "MalformedAggregateError",
    "EmptyRangeError",
    "BalanceOverflowError",
    "ConfigError",
    # Version info
    "__version__",
    "__author__",
    "__description__",
]
