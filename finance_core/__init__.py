"""Core business logic package for the finance tracker."""

from .exceptions import ParseError, PersistenceError, RecordNotFoundError, ValidationError
from .gateway import EXPORT_FILENAME, STORAGE_KEY, PersistenceGateway
from .ledger import Ledger
from .models import CATEGORIES, LedgerState, Transaction
from .reports import Report, generate_report, render_text
from .storage import JSONStorage
from .tracker import FinanceTracker, Notification, Outcome

__all__ = [
    "CATEGORIES",
    "EXPORT_FILENAME",
    "STORAGE_KEY",
    "FinanceTracker",
    "JSONStorage",
    "Ledger",
    "LedgerState",
    "Notification",
    "Outcome",
    "ParseError",
    "PersistenceError",
    "PersistenceGateway",
    "RecordNotFoundError",
    "Report",
    "Transaction",
    "ValidationError",
    "generate_report",
    "render_text",
]
