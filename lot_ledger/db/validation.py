"""Shared input normalization and lock-key helpers for db-layer services."""

from __future__ import annotations

import hashlib


def db_validate_non_empty_text(value: str, field_name: str) -> str:
    """Validate required text input and return stripped value.

    Args:
        value: Candidate text value.
        field_name: Field name for deterministic error text.

    Returns:
        str: Normalized text value.

    Raises:
        ValueError: Raised when value is invalid.
    """

    if not isinstance(value, str):
        raise ValueError(f"{field_name} must be a string")

    normalized_value = value.strip()
    if not normalized_value:
        raise ValueError(f"{field_name} must not be blank")

    return normalized_value


def db_validate_optional_text(value: str | None) -> str | None:
    """Normalize optional text, mapping blank input to None."""

    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError("optional text value must be a string when provided")

    normalized_value = value.strip()
    return normalized_value or None


def db_build_instrument_lock_keys(instrument_name: str) -> tuple[int, int]:
    """Create deterministic advisory lock keys for instrument-scoped writes.

    Args:
        instrument_name: Instrument name.

    Returns:
        tuple[int, int]: Two signed int32 lock keys for PostgreSQL advisory lock.

    Raises:
        ValueError: Raised when instrument_name is blank.
    """

    normalized_name = db_validate_non_empty_text(instrument_name, "instrument_name")
    digest = hashlib.sha256(normalized_name.encode("utf-8")).digest()
    key_1 = int.from_bytes(digest[0:4], byteorder="big", signed=True)
    key_2 = int.from_bytes(digest[4:8], byteorder="big", signed=True)
    return key_1, key_2


__all__ = ["db_build_instrument_lock_keys", "db_validate_non_empty_text", "db_validate_optional_text"]
