"""
Command-line interface for CashFlowLab.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date

from cashflowlab import __version__
from cashflowlab.cashflow import cash_flow_by_date, simple_cash_flow
from cashflowlab.config import ReportConfig, load_report_config
from cashflowlab.core.currency import get_currency, integer_to_currency
from cashflowlab.core.granularity import Granularity
from cashflowlab.core.report import CashFlowReport, ReportEncoder
from cashflowlab.sources import TransactionFrameSource


def _save_json(path: str, data: dict) -> None:
    """Save data as JSON to file path."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, cls=ReportEncoder)


def _resolve_config(args) -> ReportConfig:
    """Merge the optional config file with command-line overrides."""
    cfg = load_report_config(args.config) if args.config else ReportConfig()
    cfg = cfg.merged(
        start=args.start,
        end=args.end,
        granularity=(
            Granularity.parse(args.granularity)
            if getattr(args, "granularity", None)
            else None
        ),
        currency=get_currency(args.currency) if args.currency else None,
        today=date.fromisoformat(args.today) if args.today else None,
    )
    if cfg.start is None or cfg.end is None:
        raise ValueError("Both --start and --end are required (or set them in --config)")
    return cfg


def _print_report(report: CashFlowReport, cfg: ReportConfig) -> None:
    """Print a human-readable report to stdout."""
    currency = cfg.currency
    print(
        f"Cash flow {report.dates[0]}..{report.dates[-1]} "
        f"({report.granularity.value}, {currency.code})"
    )
    for label in report.labels(currency):
        parts = [f"{line.caption} {line.text}" for line in label.lines]
        print(f"  {label.heading:<20} " + "  ".join(parts))

    def fmt(value: int) -> str:
        return integer_to_currency(value, currency)

    print(f"Starting balance: {fmt(report.starting_balance)}")
    print(f"Ending balance:   {fmt(report.ending_balance)}")
    print(f"Total income:     {fmt(report.total_income)}")
    print(f"Total expenses:   {fmt(report.total_expenses)}")
    print(f"Total transfers:  {fmt(report.total_transfers)}")
    print(f"Total change:     {fmt(report.total_change)}")


def cmd_report(args) -> int:
    """Build a cash-flow report from a transactions file."""
    try:
        cfg = _resolve_config(args)
        source = TransactionFrameSource.from_file(args.input)
        report = cash_flow_by_date(
            source, cfg.start, cfg.end, cfg.granularity, today=cfg.today
        )

        payload = report.to_dict(cfg.currency if args.labels else None)
        if args.output:
            _save_json(args.output, payload)
        if args.json:
            json.dump(payload, sys.stdout, indent=2, cls=ReportEncoder)
            sys.stdout.write("\n")
        else:
            _print_report(report, cfg)
        return 0

    except Exception as e:
        print(f"Error building report: {e}", file=sys.stderr)
        return 1


def cmd_summary(args) -> int:
    """Print income and expense totals, transfers excluded."""
    try:
        cfg = _resolve_config(args)
        source = TransactionFrameSource.from_file(args.input)
        summary = simple_cash_flow(source, cfg.start, cfg.end, today=cfg.today)

        if args.json:
            json.dump(summary.to_dict(), sys.stdout, indent=2)
            sys.stdout.write("\n")
        else:
            currency = cfg.currency
            print(f"Income:   {integer_to_currency(summary.income, currency)}")
            print(f"Expenses: {integer_to_currency(summary.expense, currency)}")
            print(f"Change:   {integer_to_currency(summary.change, currency)}")
        return 0

    except Exception as e:
        print(f"Error building summary: {e}", file=sys.stderr)
        return 1


def cmd_example(_) -> int:
    """Print a small transactions JSON file usable with 'report'."""
    example = [
        {"date": "2024-01-05", "amount": 250000, "payee": "Employer"},
        {"date": "2024-01-12", "amount": -84250, "payee": "Landlord"},
        {"date": "2024-01-20", "amount": -50000, "transfer_account": "savings"},
        {"date": "2024-02-05", "amount": 250000, "payee": "Employer"},
        {"date": "2024-02-14", "amount": -12999, "payee": "Grocer"},
        {"date": "2024-02-28", "amount": 50000, "transfer_account": "savings"},
        {"date": "2024-03-05", "amount": 250000, "payee": "Employer"},
        {"date": "2024-03-09", "amount": -3000, "payee": "Cinema", "offbudget": True},
    ]
    json.dump(example, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


def _add_range_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-i", "--input", required=True, help="Transactions file (CSV or JSON)"
    )
    parser.add_argument("-c", "--config", help="Report settings (YAML or JSON)")
    parser.add_argument("--start", help="First month (YYYY-MM)")
    parser.add_argument("--end", help="Last month (YYYY-MM)")
    parser.add_argument("--currency", help="Currency code for display (default: USD)")
    parser.add_argument(
        "--today", help="Reference date for clamping (YYYY-MM-DD, default: today)"
    )
    parser.add_argument("--json", action="store_true", help="Output in JSON format")


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="cashflow", description="CashFlowLab - Cash-flow reports over time"
    )

    # Version argument
    parser.add_argument(
        "--version", action="version", version=f"CashFlowLab {__version__}"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(
        dest="cmd", required=True, help="Available commands"
    )

    # Example command
    example_parser = subparsers.add_parser(
        "example", help="Print a sample transactions JSON"
    )
    example_parser.set_defaults(func=cmd_example)

    # Report command
    report_parser = subparsers.add_parser(
        "report", help="Build a dense cash-flow report with running balance"
    )
    _add_range_arguments(report_parser)
    report_parser.add_argument(
        "--granularity",
        choices=["monthly", "daily"],
        help="Bucket size (default: monthly)",
    )
    report_parser.add_argument("-o", "--output", help="Also write JSON results here")
    report_parser.add_argument(
        "--labels", action="store_true", help="Include per-bucket labels in JSON"
    )
    report_parser.epilog = """
Report Semantics:
  • Every month (or day) of the range gets a bucket, even without activity
  • The range end is clamped to today
  • Total change is last bucket balance minus first bucket balance
    """
    report_parser.set_defaults(func=cmd_report)

    # Summary command
    summary_parser = subparsers.add_parser(
        "summary", help="Income and expense totals, transfers excluded"
    )
    _add_range_arguments(summary_parser)
    summary_parser.set_defaults(func=cmd_summary)

    # Parse arguments and execute
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
