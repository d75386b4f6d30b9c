"""Console interface for the finance tracker."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import List, Optional

from finance_core.aggregator import SORT_KEYS
from finance_core.exceptions import PersistenceError
from finance_core.gateway import EXPORT_FILENAME, PersistenceGateway
from finance_core.models import TRANSACTION_TYPES, Transaction
from finance_core.reports import render_text
from finance_core.storage import JSONStorage
from finance_core.tracker import FinanceTracker, Outcome

DATE_FORMAT = "YYYY-MM-DD"


def _parse_date(value: str) -> str:
    try:
        date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(
            f"Invalid date '{value}'. Expected format {DATE_FORMAT}."
        ) from exc
    return value


def _parse_amount(value: str) -> str:
    try:
        amount = Decimal(value)
    except InvalidOperation as exc:
        raise argparse.ArgumentTypeError("Amount must be a numeric value") from exc
    if not amount.is_finite():
        raise argparse.ArgumentTypeError("Amount must be a numeric value")
    if amount <= 0:
        raise argparse.ArgumentTypeError("Amount must be greater than zero")
    return value


def _load_tracker(data_dir: Path) -> FinanceTracker:
    return FinanceTracker(PersistenceGateway(JSONStorage(data_dir)))


def _format_transaction(transaction: Transaction) -> str:
    sign = "+" if transaction.is_income else "-"
    return (
        f"[{transaction.id}] {transaction.date.isoformat()} {sign}{transaction.amount:.2f}\n"
        f"  Category: {transaction.category} | Type: {transaction.type}\n"
        f"  Description: {transaction.description or '-'}\n"
    )


def _report_outcome(outcome: Outcome) -> int:
    if outcome.notification is not None:
        stream = sys.stdout if outcome.ok else sys.stderr
        print(outcome.notification.message, file=stream)
    return 0 if outcome.ok else 1


def handle_add(args: argparse.Namespace, tracker: FinanceTracker) -> int:
    outcome = tracker.add_transaction(
        args.category, args.amount, args.type, args.date, args.description
    )
    if outcome.ok:
        print(_format_transaction(outcome.value))
    return _report_outcome(outcome)


def handle_list(args: argparse.Namespace, tracker: FinanceTracker) -> int:
    transactions = tracker.list_transactions(args.type or "", args.sort or "")
    if not transactions:
        print("No transactions found.")
        return 0
    print(f"Found {len(transactions)} transactions:")
    for transaction in transactions:
        print(_format_transaction(transaction))
    return 0


def handle_show(args: argparse.Namespace, tracker: FinanceTracker) -> int:
    transaction = tracker.find_transaction(args.id)
    if transaction is None:
        print(f"Transaction {args.id} not found", file=sys.stderr)
        return 1
    print(_format_transaction(transaction))
    return 0


def handle_edit(args: argparse.Namespace, tracker: FinanceTracker) -> int:
    changes = {
        "category": args.category,
        "amount": args.amount,
        "type": args.type,
        "date": args.date,
        "description": args.description,
    }
    outcome = tracker.edit_transaction(args.id, changes)
    if outcome.ok:
        print(_format_transaction(outcome.value))
    return _report_outcome(outcome)


def handle_delete(args: argparse.Namespace, tracker: FinanceTracker) -> int:
    outcome = tracker.delete_transaction(args.id)
    if outcome.ok and not outcome.value:
        print(f"Transaction {args.id} not found; nothing deleted.")
    return _report_outcome(outcome)


def handle_budget(args: argparse.Namespace, tracker: FinanceTracker) -> int:
    return _report_outcome(tracker.set_budget(args.amount))


def handle_stats(args: argparse.Namespace, tracker: FinanceTracker) -> int:
    view = tracker.dashboard()
    stats = view["stats"]
    print(f"Total income:  {stats['total_income']:.2f}")
    print(f"Total expense: {stats['total_expense']:.2f}")
    print(f"Balance:       {stats['balance']:.2f}")
    budget = view["budget"]
    if budget is not None:
        print(
            f"Budget: {budget['budget']:.2f} | spent {budget['spent']:.2f} | "
            f"remaining {budget['remaining']:.2f} ({budget['percentage']:.1f}%)"
        )
    if view["categories"]:
        print("Categories:")
        for share in view["categories"]:
            arrow = "+" if share["kind"] == "income" else "-"
            print(
                f"  {arrow} {share['category']}: {share['amount']:.2f} "
                f"({share['percentage']:.1f}% of total expense)"
            )
    return 0


def handle_categories(args: argparse.Namespace, tracker: FinanceTracker) -> int:
    for category in tracker.categories():
        print(category)
    return 0


def handle_report(args: argparse.Namespace, tracker: FinanceTracker) -> int:
    print(render_text(tracker.report()), end="")
    return 0


def handle_export(args: argparse.Namespace, tracker: FinanceTracker) -> int:
    try:
        args.output.write_bytes(tracker.export_data())
    except OSError as exc:
        print(f"Storage error: {exc}", file=sys.stderr)
        return 1
    print(f"Exported to {args.output}")
    return 0


def handle_import(args: argparse.Namespace, tracker: FinanceTracker) -> int:
    try:
        blob = args.input.read_bytes()
    except OSError as exc:
        print(f"Storage error: {exc}", file=sys.stderr)
        return 1
    return _report_outcome(tracker.import_data(blob))


def handle_clear(args: argparse.Namespace, tracker: FinanceTracker) -> int:
    if not args.yes:
        print("Refusing to delete all data without --yes", file=sys.stderr)
        return 1
    return _report_outcome(tracker.clear_all())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Personal Finance Tracker CLI")
    parser.add_argument(
        "--data-dir",
        default=os.getenv("FINANCE_TRACKER_DATA_DIR", "data"),
        type=Path,
        help="Directory to store JSON data (default: $FINANCE_TRACKER_DATA_DIR or ./data)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    add = subparsers.add_parser("add", help="Record a transaction")
    add.add_argument("category")
    add.add_argument("amount", type=_parse_amount)
    add.add_argument("type", choices=sorted(TRANSACTION_TYPES))
    add.add_argument("date", nargs="?", default=None, type=_parse_date)
    add.add_argument("--description")
    add.set_defaults(handler=handle_add)

    listing = subparsers.add_parser("list", help="List transactions")
    listing.add_argument("--type", choices=sorted(TRANSACTION_TYPES))
    listing.add_argument("--sort", choices=SORT_KEYS)
    listing.set_defaults(handler=handle_list)

    show = subparsers.add_parser("show", help="Show a single transaction")
    show.add_argument("id")
    show.set_defaults(handler=handle_show)

    edit = subparsers.add_parser("edit", help="Edit a transaction (it receives a new id)")
    edit.add_argument("id")
    edit.add_argument("--category")
    edit.add_argument("--amount", type=_parse_amount)
    edit.add_argument("--type", choices=sorted(TRANSACTION_TYPES))
    edit.add_argument("--date", type=_parse_date)
    edit.add_argument("--description")
    edit.set_defaults(handler=handle_edit)

    delete = subparsers.add_parser("delete", help="Delete a transaction")
    delete.add_argument("id")
    delete.set_defaults(handler=handle_delete)

    budget = subparsers.add_parser("budget", help="Set the monthly budget")
    budget.add_argument("amount", type=_parse_amount)
    budget.set_defaults(handler=handle_budget)

    stats = subparsers.add_parser("stats", help="Show totals, budget and categories")
    stats.set_defaults(handler=handle_stats)

    categories = subparsers.add_parser("categories", help="List suggested categories")
    categories.set_defaults(handler=handle_categories)

    report = subparsers.add_parser("report", help="Print the financial report")
    report.set_defaults(handler=handle_report)

    export = subparsers.add_parser("export", help="Export all data as JSON")
    export.add_argument("output", nargs="?", default=Path(EXPORT_FILENAME), type=Path)
    export.set_defaults(handler=handle_export)

    import_ = subparsers.add_parser("import", help="Replace all data from a JSON export")
    import_.add_argument("input", type=Path)
    import_.set_defaults(handler=handle_import)

    clear = subparsers.add_parser("clear", help="Delete all transactions and the budget")
    clear.add_argument("--yes", action="store_true", help="Confirm deletion")
    clear.set_defaults(handler=handle_clear)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    if args.command == "add" and args.date is None:
        args.date = date.today().isoformat()

    try:
        tracker = _load_tracker(args.data_dir)
    except PersistenceError as exc:
        print(f"Storage error: {exc}", file=sys.stderr)
        return 1
    if tracker.startup_notification is not None:
        print(tracker.startup_notification.message, file=sys.stderr)

    return args.handler(args, tracker)


if __name__ == "__main__":
    raise SystemExit(main())
