"""Project-native typed exceptions for ledger core failures.

The CRUD and API layers map these to user-facing responses. Core operations
raise them instead of logging and continuing.
"""

from __future__ import annotations


class LedgerError(Exception):
    """Base exception for ledger-level failures.

    Attributes:
        error_code: Stable machine-readable error code.
    """

    default_error_code = "LEDGER_ERROR"

    def __init__(self, message: str, error_code: str | None = None):
        super().__init__(message)
        self.error_code = error_code or self.default_error_code


class LedgerValidationError(LedgerError, ValueError):
    """Caller-correctable input failure. No state was mutated."""

    default_error_code = "VALIDATION_FAILED"


class LedgerNotFoundError(LedgerError, LookupError):
    """Addressed transaction, corporate action or instrument does not exist."""

    default_error_code = "NOT_FOUND"


class LedgerInvariantError(LedgerError, RuntimeError):
    """Stored data violates a creation-time invariant and cannot be processed safely."""

    default_error_code = "INVARIANT_VIOLATION"


class LedgerConflictError(LedgerError, RuntimeError):
    """Requested mutation conflicts with dependent stored records."""

    default_error_code = "CONFLICT"
