"""Bridges ledger state and its JSON representation on disk or in export files."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Tuple

from .exceptions import ParseError, PersistenceError, ValidationError
from .models import LedgerState, Transaction
from .storage import JSONStorage
from .validators import coerce_budget, validate_transaction_fields

logger = logging.getLogger(__name__)

STORAGE_KEY = "financeTrackerData.json"
EXPORT_FILENAME = "finance-data.json"


def _decode_transaction(raw: Any, position: int) -> Transaction:
    if not isinstance(raw, dict):
        raise ParseError(f"transactions[{position}] must be an object")
    raw_id = raw.get("id")
    if isinstance(raw_id, bool) or not isinstance(raw_id, (str, int)) or not str(raw_id).strip():
        raise ParseError(f"transactions[{position}] has no usable id")
    try:
        fields = validate_transaction_fields(
            raw.get("category"),
            raw.get("amount"),
            raw.get("type"),
            raw.get("date"),
            raw.get("description"),
        )
    except ValidationError as exc:
        raise ParseError(f"transactions[{position}]: {exc}") from exc
    return Transaction(id=str(raw_id).strip(), **fields)


def decode_state(document: Any) -> LedgerState:
    """Turn a decoded JSON document into ledger state or raise ParseError."""
    if not isinstance(document, dict):
        raise ParseError("Expected a JSON object with 'transactions' and 'budget'")

    raw_transactions = document.get("transactions")
    if raw_transactions is None:
        raw_transactions = []
    if not isinstance(raw_transactions, list):
        raise ParseError("'transactions' must be a list")

    transactions: List[Transaction] = []
    seen = set()
    for position, raw in enumerate(raw_transactions):
        transaction = _decode_transaction(raw, position)
        if transaction.id in seen:
            raise ParseError(f"Duplicate transaction id {transaction.id}")
        seen.add(transaction.id)
        transactions.append(transaction)

    return LedgerState(
        transactions=tuple(transactions),
        budget=coerce_budget(document.get("budget")),
    )


class PersistenceGateway:
    """Saves, restores, exports and imports ledger state.

    The gateway keeps no copy of the state; every call works from what the
    caller hands over or what is currently stored.
    """

    def __init__(self, storage: JSONStorage, key: str = STORAGE_KEY) -> None:
        self._storage = storage
        self._key = key

    @property
    def storage(self) -> JSONStorage:
        return self._storage

    def save(self, state: LedgerState) -> None:
        self._storage.save(self._key, state.to_dict())

    def load(self) -> Tuple[LedgerState, Optional[PersistenceError]]:
        """Return the stored state, falling back to empty state on any failure.

        The second element carries the error that caused a fallback so the
        caller can tell the user; it is ``None`` when nothing went wrong,
        including when nothing has been saved yet.
        """
        try:
            document = self._storage.load(self._key)
        except PersistenceError as exc:
            logger.warning("Discarding unreadable saved state: %s", exc)
            return LedgerState.empty(), exc

        if document is None:
            return LedgerState.empty(), None

        try:
            return decode_state(document), None
        except ParseError as exc:
            error = PersistenceError(f"Saved state is invalid: {exc}")
            error.__cause__ = exc
            logger.warning("Discarding invalid saved state: %s", exc)
            return LedgerState.empty(), error

    def export_state(self, state: LedgerState) -> bytes:
        return json.dumps(state.to_dict(), indent=2).encode("utf-8")

    def import_state(self, blob: Any) -> LedgerState:
        """Parse an exported file; raises ParseError on anything malformed."""
        if isinstance(blob, (bytes, bytearray)):
            try:
                blob = blob.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise ParseError("Import file is not UTF-8 text") from exc
        if not isinstance(blob, str):
            raise ParseError("Import payload must be JSON text")
        try:
            document: Dict[str, Any] = json.loads(blob)
        except json.JSONDecodeError as exc:
            raise ParseError(f"Import file is not valid JSON: {exc.msg}") from exc
        return decode_state(document)
