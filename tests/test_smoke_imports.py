"""
Smoke tests to verify basic imports and functionality.
"""

from datetime import date


def test_import_cashflowlab():
    """Test that we can import the main package."""
    import cashflowlab

    assert hasattr(cashflowlab, "__version__")
    assert cashflowlab.__version__ == "0.1.0"


def test_import_core_components():
    """Test that core components can be imported."""
    from cashflowlab import (
        CashFlowReport,
        Granularity,
        accumulate_balances,
        assemble_report,
        index_aggregates,
        resolve_date_range,
    )

    assert CashFlowReport is not None
    assert Granularity.MONTHLY.value == "monthly"
    assert callable(resolve_date_range)
    assert callable(index_aggregates)
    assert callable(accumulate_balances)
    assert callable(assemble_report)


def test_error_hierarchy():
    """All core errors share one base class."""
    from cashflowlab import (
        BalanceOverflowError,
        CashFlowError,
        ConfigError,
        EmptyRangeError,
        InvalidRangeError,
        MalformedAggregateError,
    )

    for err in (
        InvalidRangeError,
        MalformedAggregateError,
        EmptyRangeError,
        BalanceOverflowError,
        ConfigError,
    ):
        assert issubclass(err, CashFlowError)


def test_quick_start():
    """The package docstring example works."""
    from cashflowlab import TransactionFrameSource, cash_flow_by_date

    source = TransactionFrameSource(
        [
            {"date": "2024-03-02", "amount": 500},
            {"date": "2024-03-09", "amount": -200, "transfer_account": "acct9"},
        ]
    )
    report = cash_flow_by_date(
        source, "2024-03", "2024-03", "monthly", today=date(2024, 12, 31)
    )
    assert report.ending_balance == 300
