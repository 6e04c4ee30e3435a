"""
Property-based tests using Hypothesis for the cash-flow accumulation laws.
"""

from datetime import date, timedelta

from hypothesis import given, settings
from hypothesis import strategies as st

from cashflowlab.core.aggregates import AggregateRow
from cashflowlab.core.date_range import DateRange, resolve_date_range
from cashflowlab.core.granularity import Granularity
from cashflowlab.core.report import recalculate

TODAY = date(2025, 6, 15)

granularity_strategy = st.sampled_from([Granularity.DAILY, Granularity.MONTHLY])

month_strategy = st.builds(
    date,
    year=st.integers(min_value=2019, max_value=2025),
    month=st.integers(min_value=1, max_value=12),
    day=st.just(1),
).filter(lambda d: d <= TODAY)

amount_strategy = st.integers(min_value=1, max_value=10_000_000)
link_strategy = st.one_of(st.none(), st.sampled_from(["acct1", "acct2", ""]))


@st.composite
def ranges(draw, max_days=120):
    """A short DateRange within the past."""
    start = draw(st.dates(min_value=date(2020, 1, 1), max_value=TODAY))
    span = draw(st.integers(min_value=0, max_value=max_days))
    end = min(start + timedelta(days=span), TODAY)
    return DateRange(start, end)


@st.composite
def report_inputs(draw):
    """Range, granularity and unique grouped rows for both sides."""
    rng = draw(ranges())
    granularity = draw(granularity_strategy)
    keys = rng.bucket_keys(granularity)
    # Rows may also fall outside the range; those must be ignored
    key_strategy = st.sampled_from(keys + ["2019-01-01" if granularity is Granularity.DAILY else "2019-01"])

    def rows(sign):
        entries = draw(
            st.dictionaries(
                st.tuples(key_strategy, st.booleans()), amount_strategy, max_size=25
            )
        )
        return [
            AggregateRow(key, f"acct-{key}" if transfer else None, sign * amount)
            for (key, transfer), amount in entries.items()
        ]

    income_rows = rows(1)
    expense_rows = rows(-1)
    starting = draw(st.integers(min_value=-10**9, max_value=10**9))
    return rng, granularity, income_rows, expense_rows, starting


class TestAccumulationLaws:
    """Laws that hold for every valid input."""

    @given(report_inputs())
    @settings(max_examples=75, deadline=None)
    def test_dense_coverage(self, inputs):
        rng, granularity, income_rows, expense_rows, starting = inputs
        report = recalculate(starting, income_rows, expense_rows, rng, granularity)

        if granularity is Granularity.DAILY:
            expected = (rng.end - rng.start).days + 1
        else:
            expected = (
                (rng.end.year - rng.start.year) * 12
                + rng.end.month
                - rng.start.month
                + 1
            )
        assert len(report.buckets) == expected
        assert report.dates == sorted(set(report.dates))

    @given(report_inputs())
    @settings(max_examples=75, deadline=None)
    def test_balance_update_law(self, inputs):
        rng, granularity, income_rows, expense_rows, starting = inputs
        report = recalculate(starting, income_rows, expense_rows, rng, granularity)

        previous = starting
        for bucket in report.buckets:
            assert bucket.running_balance == (
                previous
                + bucket.income
                + bucket.expense
                + bucket.credit_transfers
                + bucket.debit_transfers
            )
            previous = bucket.running_balance
        assert report.ending_balance == previous

    @given(report_inputs())
    @settings(max_examples=75, deadline=None)
    def test_totals_law(self, inputs):
        rng, granularity, income_rows, expense_rows, starting = inputs
        report = recalculate(starting, income_rows, expense_rows, rng, granularity)

        assert report.total_income == sum(b.income for b in report.buckets)
        assert report.total_expenses == sum(b.expense for b in report.buckets)
        assert report.total_transfers == sum(
            b.credit_transfers + b.debit_transfers for b in report.buckets
        )
        assert report.total_change == (
            report.ending_balance - report.buckets[0].running_balance
        )

    @given(report_inputs())
    @settings(max_examples=50, deadline=None)
    def test_sign_convention(self, inputs):
        rng, granularity, income_rows, expense_rows, starting = inputs
        report = recalculate(starting, income_rows, expense_rows, rng, granularity)

        for bucket in report.buckets:
            assert bucket.income >= 0
            assert bucket.credit_transfers >= 0
            assert bucket.expense <= 0
            assert bucket.debit_transfers <= 0

    @given(report_inputs())
    @settings(max_examples=50, deadline=None)
    def test_idempotence(self, inputs):
        rng, granularity, income_rows, expense_rows, starting = inputs
        first = recalculate(starting, income_rows, expense_rows, rng, granularity)
        second = recalculate(starting, income_rows, expense_rows, rng, granularity)
        assert first == second
        assert first.to_dict() == second.to_dict()

    @given(report_inputs())
    @settings(max_examples=50, deadline=None)
    def test_zero_fill(self, inputs):
        rng, granularity, income_rows, expense_rows, starting = inputs
        report = recalculate(starting, income_rows, expense_rows, rng, granularity)
        touched = {row.date for row in income_rows + expense_rows}

        previous = starting
        for bucket in report.buckets:
            if bucket.date not in touched:
                assert bucket.income == bucket.expense == 0
                assert bucket.credit_transfers == bucket.debit_transfers == 0
                assert bucket.running_balance == previous
            previous = bucket.running_balance


class TestTransferReclassificationProperty:
    """A linked row only ever lands in the transfer branch."""

    @given(
        link=st.text(min_size=0, max_size=8),
        amount=amount_strategy,
        month=month_strategy,
    )
    @settings(max_examples=50, deadline=None)
    def test_linked_rows_are_transfers(self, link, amount, month):
        key = f"{month.year:04d}-{month.month:02d}"
        rng = resolve_date_range(key, key, today=TODAY)
        report = recalculate(
            0,
            [AggregateRow(key, link, amount)],
            [AggregateRow(key, link, -amount)],
            rng,
            Granularity.MONTHLY,
        )
        (bucket,) = report.buckets
        assert bucket.income == 0
        assert bucket.expense == 0
        assert bucket.credit_transfers == amount
        assert bucket.debit_transfers == -amount
