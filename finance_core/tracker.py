"""Application context tying the ledger, persistence and refresh hooks together."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Dict, Generic, List, Optional, Tuple, TypeVar

from . import aggregator
from .exceptions import ParseError, PersistenceError, RecordNotFoundError, ValidationError
from .gateway import PersistenceGateway
from .ledger import Ledger
from .models import CATEGORIES, LedgerState, Transaction
from .reports import Report, generate_report
from .validators import validate_transaction_fields

logger = logging.getLogger(__name__)

T = TypeVar("T")

SUCCESS = "success"
WARNING = "warning"
ERROR = "error"

EDITABLE_FIELDS = ("category", "amount", "type", "date", "description")


@dataclass(frozen=True)
class Notification:
    level: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"level": self.level, "message": self.message}


@dataclass(frozen=True)
class Outcome(Generic[T]):
    ok: bool
    value: Optional[T] = None
    notification: Optional[Notification] = None
    error: Optional[Exception] = None


RefreshHook = Callable[[LedgerState], None]


class FinanceTracker:
    """Runs user actions as mutate, persist, refresh.

    Errors raised by the core are converted into an unsuccessful ``Outcome``
    carrying a notification; none of them escape an action.
    """

    def __init__(self, gateway: PersistenceGateway) -> None:
        self._gateway = gateway
        self._listeners: List[RefreshHook] = []
        state, error = gateway.load()
        self._ledger = Ledger(state)
        self.startup_notification: Optional[Notification] = None
        if error is not None:
            self.startup_notification = Notification(ERROR, "Error loading saved data")

    # Read side ------------------------------------------------------------
    @property
    def state(self) -> LedgerState:
        return self._ledger.state

    def categories(self) -> Tuple[str, ...]:
        return CATEGORIES

    def find_transaction(self, transaction_id: str) -> Optional[Transaction]:
        return self._ledger.edit_transaction(transaction_id)

    def list_transactions(
        self, type_filter: Optional[str] = "", sort_key: Optional[str] = ""
    ) -> List[Transaction]:
        return aggregator.filter_and_sort(self._ledger.transactions, type_filter, sort_key)

    def dashboard(self, today: Optional[date] = None) -> Dict[str, Any]:
        return aggregator.dashboard(self._ledger.state, today)

    def report(self, now: Optional[datetime] = None) -> Report:
        return generate_report(self._ledger.state, now)

    def export_data(self) -> bytes:
        return self._gateway.export_state(self._ledger.state)

    def subscribe(self, hook: RefreshHook) -> None:
        """Register a callback invoked with the new state after every change."""
        self._listeners.append(hook)

    # Actions --------------------------------------------------------------
    def add_transaction(
        self,
        category: object,
        amount: object,
        txn_type: object,
        date: object,
        description: object = None,
    ) -> Outcome[Transaction]:
        try:
            transaction = self._ledger.add_transaction(
                category, amount, txn_type, date, description
            )
        except ValidationError as exc:
            return self._reject(exc, f"Invalid input: {exc}")
        return self._commit(transaction, "Transaction added successfully!")

    def delete_transaction(self, transaction_id: str) -> Outcome[bool]:
        if not self._ledger.delete_transaction(transaction_id):
            return Outcome(ok=True, value=False)
        return self._commit(True, "Transaction deleted")

    def edit_transaction(
        self, transaction_id: str, changes: Dict[str, object]
    ) -> Outcome[Transaction]:
        """Replace a transaction with an edited copy.

        The replacement gets a new id and is placed first, exactly like a
        freshly added transaction. Keys other than the editable fields are
        ignored; ``None`` values keep the current value.
        """
        existing = self._ledger.edit_transaction(transaction_id)
        if existing is None:
            exc = RecordNotFoundError(f"Transaction {transaction_id} not found")
            return self._reject(exc, str(exc))

        merged: Dict[str, object] = {
            "category": existing.category,
            "amount": existing.amount,
            "type": existing.type,
            "date": existing.date,
            "description": existing.description,
        }
        merged.update(
            {
                key: value
                for key, value in changes.items()
                if key in EDITABLE_FIELDS and value is not None
            }
        )
        try:
            # Validate before deleting so a rejected edit leaves the ledger untouched.
            fields = validate_transaction_fields(
                merged["category"],
                merged["amount"],
                merged["type"],
                merged["date"],
                merged["description"],
            )
        except ValidationError as exc:
            return self._reject(exc, f"Invalid input: {exc}")

        self._ledger.delete_transaction(transaction_id)
        transaction = self._ledger.add_transaction(
            fields["category"],
            fields["amount"],
            fields["type"],
            fields["date"],
            fields["description"],
        )
        return self._commit(transaction, "Transaction updated successfully!")

    def set_budget(self, amount: object) -> Outcome[Any]:
        try:
            budget = self._ledger.set_budget(amount)
        except ValidationError as exc:
            return self._reject(exc, "Invalid budget")
        return self._commit(budget, "Budget updated")

    def clear_all(self) -> Outcome[None]:
        self._ledger.clear_all()
        logger.info("Cleared all transactions and the budget")
        return self._commit(None, "All data cleared")

    def import_data(self, blob: Any) -> Outcome[LedgerState]:
        try:
            imported = self._gateway.import_state(blob)
        except ParseError as exc:
            return self._reject(exc, "Error importing data")
        self._ledger.replace_state(imported.transactions, imported.budget)
        logger.info("Imported %d transactions", len(imported.transactions))
        return self._commit(self._ledger.state, "Data imported successfully!")

    # Internal helpers -----------------------------------------------------
    def _reject(self, exc: Exception, message: str) -> Outcome[Any]:
        logger.info("Action rejected: %s", exc)
        return Outcome(ok=False, notification=Notification(ERROR, message), error=exc)

    def _commit(self, value: Any, message: str) -> Outcome[Any]:
        state = self._ledger.state
        notification = Notification(SUCCESS, message)
        try:
            self._gateway.save(state)
        except PersistenceError as exc:
            # Memory stays authoritative; the next successful save catches up.
            logger.warning("Could not save state: %s", exc)
            notification = Notification(
                WARNING, f"{message} (changes could not be saved: {exc})"
            )
        for hook in self._listeners:
            try:
                hook(state)
            except Exception:
                # The change is already saved; a failing hook does not fail the action.
                logger.exception("Refresh hook %r failed", hook)
        return Outcome(ok=True, value=value, notification=notification)
