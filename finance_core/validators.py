"""Validation helpers shared across the ledger, gateway and adapters."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Dict, Iterable

from .exceptions import ValidationError
from .models import TRANSACTION_TYPES, parse_date

CATEGORY_MAX_LENGTH = 50
DESCRIPTION_MAX_LENGTH = 200
# Two-decimal values below this have at most 15 significant digits and survive a float.
MAX_AMOUNT = Decimal("10000000000000")


def _quantize_two_decimals(amount: Decimal) -> Decimal:
    """Round the amount to two decimal places using HALF_UP rounding."""
    return amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def parse_amount(raw: object, field: str) -> Decimal:
    """Convert raw input to a positive Decimal with exactly two fraction digits.

    Amounts must stay below ``MAX_AMOUNT`` so the JSON number written on save
    reads back as the same value.
    """
    if isinstance(raw, bool):
        raise ValidationError(f"{field} must be a numeric value")
    try:
        amount = Decimal(str(raw).strip())
    except (InvalidOperation, TypeError) as exc:  # type: ignore[arg-type]
        raise ValidationError(f"{field} must be a numeric value") from exc

    if not amount.is_finite():
        raise ValidationError(f"{field} must be a numeric value")
    if amount >= MAX_AMOUNT:
        raise ValidationError(f"{field} must be less than {MAX_AMOUNT:,}")
    try:
        amount = _quantize_two_decimals(amount)
    except InvalidOperation as exc:
        raise ValidationError(f"{field} must be a numeric value") from exc
    if amount <= 0:
        raise ValidationError(f"{field} must be greater than zero")
    return amount


def coerce_budget(raw: object) -> Decimal:
    """Lenient budget parsing for restored state: anything unusable becomes 0."""
    if raw is None or isinstance(raw, bool):
        return Decimal("0")
    try:
        amount = Decimal(str(raw).strip())
    except (InvalidOperation, TypeError):
        return Decimal("0")
    if not amount.is_finite() or amount < 0 or amount >= MAX_AMOUNT:
        return Decimal("0")
    try:
        return _quantize_two_decimals(amount)
    except InvalidOperation:
        return Decimal("0")


def validate_required_str(value: object, field: str, max_length: int) -> str:
    if value is None:
        raise ValidationError(f"{field} is required")
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    trimmed = value.strip()
    if not trimmed:
        raise ValidationError(f"{field} cannot be empty")
    if len(trimmed) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters")
    return trimmed


def validate_optional_str(value: object, field: str, max_length: int) -> str:
    """Like ``validate_required_str`` but blank or missing input yields ``""``."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return ""
    return validate_required_str(value, field, max_length)


def validate_date(value: object, field: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if value is None:
        raise ValidationError(f"{field} is required")
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a date or YYYY-MM-DD string")
    if not value.strip():
        raise ValidationError(f"{field} cannot be empty")
    try:
        return parse_date(value)
    except ValueError as exc:
        raise ValidationError(f"{field} must be a valid YYYY-MM-DD date") from exc


def validate_enum(value: object, field: str, allowed: Iterable[str]) -> str:
    if value is None:
        raise ValidationError(f"{field} is required")
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    canonical = value.strip().lower()
    if not canonical:
        raise ValidationError(f"{field} cannot be empty")
    if canonical not in allowed:
        raise ValidationError(f"{field} must be one of: {', '.join(sorted(allowed))}")
    return canonical


def validate_transaction_fields(
    category: object,
    amount: object,
    txn_type: object,
    txn_date: object,
    description: object = None,
) -> Dict[str, object]:
    """Normalise the user-editable fields of a transaction or raise ValidationError."""
    return {
        "category": validate_required_str(category, "category", CATEGORY_MAX_LENGTH),
        "amount": parse_amount(amount, "amount"),
        "type": validate_enum(txn_type, "type", TRANSACTION_TYPES),
        "date": validate_date(txn_date, "date"),
        "description": validate_optional_str(
            description, "description", DESCRIPTION_MAX_LENGTH
        ),
    }
