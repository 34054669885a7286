"""Error envelope and exception-to-status mapping for API responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from lot_ledger.domain import (
    LedgerConflictError,
    LedgerError,
    LedgerInvariantError,
    LedgerNotFoundError,
    LedgerValidationError,
)

logger = logging.getLogger(__name__)

_API_STATUS_BY_ERROR_TYPE: tuple[tuple[type[LedgerError], int], ...] = (
    (LedgerValidationError, status.HTTP_400_BAD_REQUEST),
    (LedgerNotFoundError, status.HTTP_404_NOT_FOUND),
    (LedgerConflictError, status.HTTP_409_CONFLICT),
    (LedgerInvariantError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def api_error_payload(code: str, message: str) -> dict[str, str]:
    """Build the error envelope shared by every endpoint."""

    return {"status": "error", "code": code, "message": message}


def api_error_response(error: LedgerError) -> JSONResponse:
    """Translate one ledger error into its JSON response.

    Args:
        error: Raised ledger error.

    Returns:
        JSONResponse: Error envelope with the mapped status code.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    for error_type, mapped_status in _API_STATUS_BY_ERROR_TYPE:
        if isinstance(error, error_type):
            status_code = mapped_status
            break

    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("ledger request failed code=%s: %s", error.error_code, error)
    return JSONResponse(content=api_error_payload(error.error_code, str(error)), status_code=status_code)


def api_register_error_handlers(application: FastAPI) -> None:
    """Register ledger and request-validation exception handlers on `application`."""

    @application.exception_handler(LedgerError)
    async def api_handle_ledger_error(_request: Request, error: LedgerError) -> JSONResponse:
        return api_error_response(error)

    @application.exception_handler(RequestValidationError)
    async def api_handle_request_validation_error(_request: Request, error: RequestValidationError) -> JSONResponse:
        details = "; ".join(
            f"{'.'.join(str(part) for part in item.get('loc', ()))}: {item.get('msg', 'invalid value')}"
            for item in error.errors()
        )
        return JSONResponse(
            content=api_error_payload(LedgerValidationError.default_error_code, details or "invalid request"),
            status_code=status.HTTP_400_BAD_REQUEST,
        )


__all__ = ["api_error_payload", "api_error_response", "api_register_error_handlers"]
