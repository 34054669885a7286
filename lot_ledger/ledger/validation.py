"""Caller-input validation shared by ledger services.

Every helper raises `LedgerValidationError` so rejected input never reaches
a store write.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from lot_ledger.domain import ZERO, LedgerValidationError


def ledger_require_text(value: str | None, field_name: str) -> str:
    """Return stripped required text.

    Args:
        value: Candidate text value.
        field_name: Field name for deterministic error text.

    Returns:
        str: Normalized text value.

    Raises:
        LedgerValidationError: Raised when value is missing or blank.
    """

    if not isinstance(value, str) or not value.strip():
        raise LedgerValidationError(f"{field_name} is required")
    return value.strip()


def ledger_require_choice(value: str | None, field_name: str, choices: frozenset[str]) -> str:
    """Return upper-cased value when it is one of `choices`."""

    normalized_value = ledger_require_text(value, field_name).upper()
    if normalized_value not in choices:
        raise LedgerValidationError(f"{field_name} must be one of {', '.join(sorted(choices))}")
    return normalized_value


def ledger_require_positive(value: Decimal | None, field_name: str) -> Decimal:
    """Return `value` as Decimal when it is strictly positive.

    Raises:
        LedgerValidationError: Raised when value is missing, not numeric, or not positive.
    """

    decimal_value = _ledger_to_decimal(value, field_name)
    if decimal_value is None:
        raise LedgerValidationError(f"{field_name} is required")
    if decimal_value <= ZERO:
        raise LedgerValidationError(f"{field_name} must be positive")
    return decimal_value


def ledger_optional_non_negative(value: Decimal | None, field_name: str) -> Decimal | None:
    """Return `value` as Decimal, None when absent; reject negatives."""

    decimal_value = _ledger_to_decimal(value, field_name)
    if decimal_value is not None and decimal_value < ZERO:
        raise LedgerValidationError(f"{field_name} must not be negative")
    return decimal_value


def ledger_require_date(value: date | None, field_name: str) -> date:
    """Return a day-granularity date, truncating datetimes."""

    if isinstance(value, datetime):
        return value.date()
    if not isinstance(value, date):
        raise LedgerValidationError(f"{field_name} is required")
    return value


def ledger_optional_text(value: str | None) -> str | None:
    """Normalize optional free text, mapping blank input to None."""

    if value is None:
        return None
    normalized_value = str(value).strip()
    return normalized_value or None


def _ledger_to_decimal(value: object, field_name: str) -> Decimal | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise LedgerValidationError(f"{field_name} must be numeric")
    try:
        decimal_value = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation as error:
        raise LedgerValidationError(f"{field_name} must be numeric") from error
    if not decimal_value.is_finite():
        raise LedgerValidationError(f"{field_name} must be finite")
    return decimal_value


__all__ = [
    "ledger_optional_non_negative",
    "ledger_optional_text",
    "ledger_require_choice",
    "ledger_require_date",
    "ledger_require_positive",
    "ledger_require_text",
]
