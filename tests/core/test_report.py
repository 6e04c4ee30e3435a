"""
Tests for report assembly, the pure pipeline, and report views.
"""

import json
from datetime import date
from decimal import Decimal

import pandas as pd
import pytest

from cashflowlab.core.accumulator import Accumulation
from cashflowlab.core.aggregates import AggregateRow
from cashflowlab.core.date_range import DateRange, resolve_date_range
from cashflowlab.core.errors import EmptyRangeError, MalformedAggregateError
from cashflowlab.core.granularity import Granularity
from cashflowlab.core.report import (
    ReportEncoder,
    SimpleCashFlow,
    assemble_report,
    recalculate,
    summarize_rows,
)


@pytest.fixture
def single_month_report():
    rng = resolve_date_range("2024-03", "2024-03", today=date(2024, 12, 31))
    return recalculate(
        1000,
        [AggregateRow("2024-03-01", None, 500)],
        [AggregateRow("2024-03-01", "acct9", -200)],
        rng,
        Granularity.MONTHLY,
    )


@pytest.fixture
def quarter_report():
    rng = DateRange(date(2024, 1, 1), date(2024, 3, 31))
    return recalculate(
        2000,
        [
            {"date": "2024-01", "isTransfer": None, "amount": 1000},
            {"date": "2024-03", "isTransfer": "savings", "amount": 400},
        ],
        [
            {"date": "2024-01", "isTransfer": None, "amount": -300},
            {"date": "2024-02", "isTransfer": None, "amount": -250},
        ],
        rng,
        "monthly",
    )


class TestSingleMonthExample:
    """One month, one income row, one outgoing transfer."""

    def test_bucket(self, single_month_report):
        (bucket,) = single_month_report.buckets
        assert bucket.date == "2024-03"
        assert bucket.income == 500
        assert bucket.expense == 0
        assert bucket.credit_transfers == 0
        assert bucket.debit_transfers == -200
        assert bucket.running_balance == 1300

    def test_totals(self, single_month_report):
        report = single_month_report
        assert report.starting_balance == 1000
        assert report.ending_balance == 1300
        assert report.total_income == 500
        assert report.total_expenses == 0
        assert report.total_transfers == -200

    def test_total_change_spans_emitted_buckets(self, single_month_report):
        """Change is last minus first bucket balance, so one bucket gives zero."""
        assert single_month_report.total_change == 0
        assert single_month_report.change_from_opening == 300


class TestAssembleReport:
    """Test assemble_report()."""

    def test_quarter(self, quarter_report):
        report = quarter_report
        assert [b.running_balance for b in report.buckets] == [2700, 2450, 2850]
        assert report.ending_balance == 2850
        assert report.total_change == 2850 - 2700
        assert report.total_income == 1000
        assert report.total_expenses == -550
        assert report.total_transfers == 400
        assert report.granularity is Granularity.MONTHLY

    def test_empty_accumulation(self):
        with pytest.raises(EmptyRangeError):
            assemble_report(Accumulation((), 0, 0, 0), 100)

    def test_recalculate_propagates_malformed_rows(self):
        rng = DateRange(date(2024, 1, 1), date(2024, 1, 31))
        with pytest.raises(MalformedAggregateError):
            recalculate(0, [{"date": "2024-01", "amount": "lots"}], [], rng, "monthly")

    def test_recalculate_daily(self):
        rng = DateRange(date(2024, 1, 30), date(2024, 2, 2))
        report = recalculate(
            0,
            [AggregateRow("2024-01-31", None, 50)],
            [AggregateRow("2024-02-01", "x", -20)],
            rng,
            Granularity.DAILY,
        )
        assert report.dates == ["2024-01-30", "2024-01-31", "2024-02-01", "2024-02-02"]
        assert report.total_change == 30
        assert report.change_from_opening == 30


class TestReportViews:
    """Test to_frame(), graph_data(), to_dict() and labels()."""

    def test_to_frame(self, quarter_report):
        frame = quarter_report.to_frame()
        assert isinstance(frame.index, pd.PeriodIndex)
        assert list(frame.index.astype(str)) == ["2024-01", "2024-02", "2024-03"]
        assert frame["balance"].tolist() == [2700, 2450, 2850]
        assert frame["change"].tolist() == [700, -250, 0]
        assert frame["transfers"].tolist() == [0, 0, 400]
        assert frame["income"].sum() == quarter_report.total_income

    def test_daily_frame_uses_day_periods(self):
        rng = DateRange(date(2024, 1, 1), date(2024, 1, 3))
        report = recalculate(0, [], [], rng, Granularity.DAILY)
        frame = report.to_frame()
        assert frame.index.freqstr == "D"
        assert len(frame) == 3

    def test_graph_data_in_major_units(self, quarter_report):
        graph = quarter_report.graph_data("USD")
        assert list(graph.columns) == ["income", "expenses", "transfers", "balance"]
        assert graph["balance"].tolist() == [27.0, 24.5, 28.5]
        assert graph["expenses"].iloc[1] == -2.5

    def test_graph_data_zero_decimal_currency(self, quarter_report):
        graph = quarter_report.graph_data("JPY")
        assert graph["balance"].tolist() == [2700.0, 2450.0, 2850.0]

    def test_to_dict_is_json_serialisable(self, quarter_report):
        payload = quarter_report.to_dict()
        assert payload["granularity"] == "monthly"
        assert payload["total_change"] == 150
        assert len(payload["buckets"]) == 3
        assert "label" not in payload["buckets"][0]
        json.dumps(payload)

    def test_to_dict_with_labels(self, quarter_report):
        payload = quarter_report.to_dict("EUR")
        label = payload["buckets"][2]["label"]
        assert label["heading"] == "March 2024"
        captions = [line["caption"] for line in label["lines"]]
        assert captions == ["Income:", "Expenses:", "Change:", "Transfers:", "Balance:"]
        json.dumps(payload, cls=ReportEncoder)

    def test_labels_one_per_bucket(self, quarter_report):
        labels = quarter_report.labels()
        assert len(labels) == 3
        assert labels[0].balance == Decimal("27.00")

    def test_encoder_handles_labels_and_decimals(self, quarter_report):
        text = json.dumps({"labels": quarter_report.labels(), "d": Decimal("1.50")}, cls=ReportEncoder)
        data = json.loads(text)
        assert data["d"] == "1.50"
        assert data["labels"][0]["heading"] == "January 2024"


class TestSummarizeRows:
    """Test the transfer-free summary."""

    def test_excludes_transfers(self):
        summary = summarize_rows(
            [
                AggregateRow("2024-01", None, 1000),
                AggregateRow("2024-01", "savings", 400),
                AggregateRow("2024-02", None, 50),
            ],
            [
                AggregateRow("2024-01", None, -300),
                AggregateRow("2024-02", "savings", -999),
            ],
        )
        assert summary == SimpleCashFlow(income=1050, expense=-300)
        assert summary.change == 750
        assert summary.to_dict() == {"income": 1050, "expense": -300, "change": 750}

    def test_empty(self):
        assert summarize_rows([], []) == SimpleCashFlow(0, 0)
