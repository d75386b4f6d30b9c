"""In-memory ledger owning the transactions and the monthly budget."""

from __future__ import annotations

import time
from decimal import Decimal
from typing import Iterable, List, Optional, Tuple

from .models import LedgerState, Transaction
from .validators import coerce_budget, parse_amount, validate_transaction_fields


class Ledger:
    """Owns the transaction list (newest first) and the budget value.

    The ledger performs no I/O. Persistence and refresh are driven by the
    application context after each mutation.
    """

    def __init__(self, state: Optional[LedgerState] = None) -> None:
        self._transactions: List[Transaction] = []
        self._budget = Decimal("0")
        self._last_id = 0
        if state is not None:
            self.replace_state(state.transactions, state.budget)

    # Public API -----------------------------------------------------------
    @property
    def transactions(self) -> Tuple[Transaction, ...]:
        return tuple(self._transactions)

    @property
    def budget(self) -> Decimal:
        return self._budget

    @property
    def state(self) -> LedgerState:
        return LedgerState(transactions=tuple(self._transactions), budget=self._budget)

    def __len__(self) -> int:
        return len(self._transactions)

    def add_transaction(
        self,
        category: object,
        amount: object,
        txn_type: object,
        date: object,
        description: object = None,
    ) -> Transaction:
        data = validate_transaction_fields(category, amount, txn_type, date, description)
        transaction = Transaction(id=self._next_id(), **data)
        self._transactions.insert(0, transaction)
        return transaction

    def delete_transaction(self, transaction_id: str) -> bool:
        for index, transaction in enumerate(self._transactions):
            if transaction.id == transaction_id:
                del self._transactions[index]
                return True
        return False

    def edit_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Return the transaction to pre-fill an edit form, or ``None``.

        Editing is delete followed by ``add_transaction``: the edited entry
        receives a fresh id and moves to the top of the list.
        """
        for transaction in self._transactions:
            if transaction.id == transaction_id:
                return transaction
        return None

    def set_budget(self, amount: object) -> Decimal:
        self._budget = parse_amount(amount, "budget")
        return self._budget

    def clear_all(self) -> None:
        self._transactions = []
        self._budget = Decimal("0")

    def replace_state(
        self,
        transactions: Optional[Iterable[Transaction]] = None,
        budget: object = None,
    ) -> None:
        self._transactions = list(transactions or [])
        self._budget = coerce_budget(budget)
        for transaction in self._transactions:
            if transaction.id.isdigit():
                self._last_id = max(self._last_id, int(transaction.id))

    # Internal helpers -----------------------------------------------------
    def _next_id(self) -> str:
        # Nanosecond timestamps, bumped so ids stay unique when adds land in the same tick.
        candidate = max(time.time_ns(), self._last_id + 1)
        self._last_id = candidate
        return str(candidate)
