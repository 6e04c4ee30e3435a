"""
Quick demonstration of a monthly cash-flow report with labels and graph data.
"""

from __future__ import annotations

import json
from datetime import date

from cashflowlab import TransactionFrameSource, cash_flow_by_date
from cashflowlab.core.report import ReportEncoder


def pretty(data: dict) -> str:
    """Return JSON formatted output."""
    return json.dumps(data, indent=2, cls=ReportEncoder)


def build_sample_source() -> TransactionFrameSource:
    return TransactionFrameSource(
        [
            {"date": "2023-12-28", "amount": 120000},
            {"date": "2024-01-05", "amount": 320000},
            {"date": "2024-01-07", "amount": -145000},
            {"date": "2024-01-15", "amount": -40000, "transfer_account": "savings"},
            {"date": "2024-02-05", "amount": 320000},
            {"date": "2024-02-18", "amount": -62550},
            {"date": "2024-04-05", "amount": 320000},
        ]
    )


def main() -> None:
    source = build_sample_source()
    report = cash_flow_by_date(
        source, "2024-01", "2024-04", "monthly", today=date(2024, 4, 30)
    )

    print("== Buckets ==")
    print(report.to_frame())

    print("\n== Labels ==")
    for label in report.labels("EUR"):
        print(label.heading)
        for line in label.lines:
            print(f"  {line.caption:<11} {line.text}")

    print("\n== Graph data ==")
    print(report.graph_data("EUR"))

    print("\n== Totals ==")
    print(
        pretty(
            {
                "starting_balance": report.starting_balance,
                "ending_balance": report.ending_balance,
                "total_change": report.total_change,
                "change_from_opening": report.change_from_opening,
            }
        )
    )


if __name__ == "__main__":
    main()
