"""Summary report built from ledger state."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from . import aggregator
from .models import LedgerState, isoformat_utc

TOP_CATEGORY_LIMIT = 5


@dataclass(frozen=True)
class Report:
    total_income: Decimal
    total_expense: Decimal
    balance: Decimal
    transaction_count: int
    generated_at: datetime
    top_expense_categories: List[Tuple[str, Decimal]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_income": float(self.total_income),
            "total_expense": float(self.total_expense),
            "balance": float(self.balance),
            "transaction_count": self.transaction_count,
            "top_expense_categories": [
                {"category": category, "amount": float(amount)}
                for category, amount in self.top_expense_categories
            ],
            "generated_at": isoformat_utc(self.generated_at),
        }


def generate_report(state: LedgerState, now: Optional[datetime] = None) -> Report:
    transactions = state.transactions
    income = aggregator.total_income(transactions)
    expense = aggregator.total_expense(transactions)
    return Report(
        total_income=income,
        total_expense=expense,
        balance=income - expense,
        transaction_count=len(transactions),
        generated_at=now or datetime.now(timezone.utc),
        top_expense_categories=aggregator.top_expense_categories(
            transactions, TOP_CATEGORY_LIMIT
        ),
    )


def render_text(report: Report) -> str:
    """Plain-text layout of the report, suitable for printing."""
    lines = [
        "Financial Summary",
        "=================",
        f"Total Income:   {report.total_income:>12.2f}",
        f"Total Expense:  {report.total_expense:>12.2f}",
        f"Balance:        {report.balance:>12.2f}",
        f"Transactions:   {report.transaction_count:>12}",
    ]
    if report.top_expense_categories:
        lines += ["", "Top Spending Categories", "-----------------------"]
        for category, amount in report.top_expense_categories:
            lines.append(f"{category:<20} {amount:>12.2f}")
    lines += ["", f"Report generated on {isoformat_utc(report.generated_at)}"]
    return "\n".join(lines) + "\n"
