"""Read-only summaries derived from ledger state.

Every function here is pure: it takes transactions (plus the budget or a
reference date where needed) and returns fresh values without touching the
ledger. Money stays in ``Decimal``; ``to_dict`` helpers convert to floats for
JSON output.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_DOWN
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .models import EXPENSE, INCOME, LedgerState, Transaction

__all__ = [
    "SORT_KEYS",
    "BudgetProgress",
    "CategoryShare",
    "balance",
    "budget_progress",
    "category_breakdown",
    "current_month_expense",
    "dashboard",
    "filter_and_sort",
    "top_expense_categories",
    "total_expense",
    "total_income",
]

ZERO = Decimal("0")
HUNDRED = Decimal("100")

SORT_KEYS = ("latest", "oldest", "amount-high", "amount-low")


@dataclass(frozen=True)
class BudgetProgress:
    budget: Decimal
    spent: Decimal
    remaining: Decimal
    percentage: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "budget": float(self.budget),
            "spent": float(self.spent),
            "remaining": float(self.remaining),
            "percentage": float(self.percentage),
        }


@dataclass(frozen=True)
class CategoryShare:
    category: str
    kind: str
    income: Decimal
    expense: Decimal
    amount: Decimal
    percentage: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "kind": self.kind,
            "amount": float(self.amount),
            "percentage": float(self.percentage),
        }


def _sum(transactions: Iterable[Transaction]) -> Decimal:
    return sum((txn.amount for txn in transactions), start=ZERO)


def total_income(transactions: Iterable[Transaction]) -> Decimal:
    return _sum(txn for txn in transactions if txn.type == INCOME)


def total_expense(transactions: Iterable[Transaction]) -> Decimal:
    return _sum(txn for txn in transactions if txn.type == EXPENSE)


def balance(transactions: Sequence[Transaction]) -> Decimal:
    return total_income(transactions) - total_expense(transactions)


def current_month_expense(
    transactions: Iterable[Transaction], today: Optional[date] = None
) -> Decimal:
    """Expense total for the calendar month containing ``today``."""
    today = today or date.today()
    return _sum(
        txn
        for txn in transactions
        if txn.type == EXPENSE
        and txn.date.year == today.year
        and txn.date.month == today.month
    )


def budget_progress(
    budget: Decimal,
    transactions: Iterable[Transaction],
    today: Optional[date] = None,
) -> Optional[BudgetProgress]:
    """Spent/remaining/percentage for this month, or ``None`` when no budget is set."""
    if budget <= 0:
        return None
    spent = current_month_expense(transactions, today)
    return BudgetProgress(
        budget=budget,
        spent=spent,
        remaining=max(ZERO, budget - spent),
        percentage=min(HUNDRED, spent / budget * HUNDRED),
    )


def category_breakdown(transactions: Sequence[Transaction]) -> List[CategoryShare]:
    """Per-category totals in first-seen order.

    A category with any income is reported as income even if it also holds
    expenses. Percentages are relative to total expense and truncated to one
    decimal place.
    """
    sums: "OrderedDict[str, Dict[str, Decimal]]" = OrderedDict()
    for txn in transactions:
        entry = sums.setdefault(txn.category, {INCOME: ZERO, EXPENSE: ZERO})
        entry[txn.type] += txn.amount

    expense_total = total_expense(transactions)
    shares: List[CategoryShare] = []
    for category, entry in sums.items():
        kind = INCOME if entry[INCOME] > 0 else EXPENSE
        amount = entry[kind]
        if expense_total > 0:
            percentage = (amount / expense_total * HUNDRED).quantize(
                Decimal("0.1"), rounding=ROUND_DOWN
            )
        else:
            percentage = Decimal("0.0")
        shares.append(
            CategoryShare(
                category=category,
                kind=kind,
                income=entry[INCOME],
                expense=entry[EXPENSE],
                amount=amount,
                percentage=percentage,
            )
        )
    return shares


def top_expense_categories(
    transactions: Iterable[Transaction], n: int = 5
) -> List[Tuple[str, Decimal]]:
    totals: "OrderedDict[str, Decimal]" = OrderedDict()
    for txn in transactions:
        if txn.type == EXPENSE:
            totals[txn.category] = totals.get(txn.category, ZERO) + txn.amount
    # sorted() is stable, so equal totals keep first-seen order.
    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return ranked[: max(n, 0)]


def filter_and_sort(
    transactions: Iterable[Transaction],
    type_filter: Optional[str] = "",
    sort_key: Optional[str] = "",
) -> List[Transaction]:
    records = [
        txn for txn in transactions if not type_filter or txn.type == type_filter
    ]
    if sort_key == "latest":
        return sorted(records, key=lambda txn: txn.date, reverse=True)
    if sort_key == "oldest":
        return sorted(records, key=lambda txn: txn.date)
    if sort_key == "amount-high":
        return sorted(records, key=lambda txn: txn.amount, reverse=True)
    if sort_key == "amount-low":
        return sorted(records, key=lambda txn: txn.amount)
    return records


def dashboard(state: LedgerState, today: Optional[date] = None) -> Dict[str, Any]:
    """Everything a UI needs to redraw after a change, as JSON natives."""
    transactions = state.transactions
    income = total_income(transactions)
    expense = total_expense(transactions)
    progress = budget_progress(state.budget, transactions, today)
    return {
        "stats": {
            "total_income": float(income),
            "total_expense": float(expense),
            "balance": float(income - expense),
        },
        "budget": progress.to_dict() if progress else None,
        "categories": [share.to_dict() for share in category_breakdown(transactions)],
        "transaction_count": len(transactions),
    }
