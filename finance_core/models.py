"""Data models for the finance tracker domain."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Tuple

__all__ = [
    "CATEGORIES",
    "INCOME",
    "EXPENSE",
    "TRANSACTION_TYPES",
    "LedgerState",
    "Transaction",
    "isoformat_utc",
    "parse_date",
]

INCOME = "income"
EXPENSE = "expense"
TRANSACTION_TYPES = frozenset({INCOME, EXPENSE})

# Suggested categories offered by the entry form; free text is still accepted.
CATEGORIES: Tuple[str, ...] = (
    "Salary",
    "Bonus",
    "Investment",
    "Food",
    "Transport",
    "Entertainment",
    "Utilities",
    "Healthcare",
    "Shopping",
    "Other",
)


def isoformat_utc(dt: datetime) -> str:
    """Return an ISO 8601 string with trailing Z for UTC-aware datetimes."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)
    iso = dt.isoformat(timespec="seconds")
    # datetime.isoformat renders +00:00 for UTC; replace with the shorter Z form.
    return iso.replace("+00:00", "Z")


def parse_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` calendar date."""
    return date.fromisoformat(value.strip())


@dataclass(frozen=True)
class Transaction:
    id: str
    category: str
    amount: Decimal
    type: str
    date: date
    description: str = ""

    @property
    def is_income(self) -> bool:
        return self.type == INCOME

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the transaction to JSON-friendly natives."""
        return {
            "id": self.id,
            "category": self.category,
            "amount": float(self.amount),
            "type": self.type,
            "date": self.date.isoformat(),
            "description": self.description,
            # Soft-delete flag kept for files written by the browser app; never set.
            "deleted": False,
        }


@dataclass(frozen=True)
class LedgerState:
    transactions: Tuple[Transaction, ...] = field(default_factory=tuple)
    budget: Decimal = Decimal("0")

    @classmethod
    def empty(cls) -> "LedgerState":
        return cls()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "transactions": [txn.to_dict() for txn in self.transactions],
            "budget": float(self.budget),
        }
