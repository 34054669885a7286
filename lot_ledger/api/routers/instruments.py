"""Instrument API router: master data and derived instrument detail."""
# pylint: disable=duplicate-code

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Query, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from lot_ledger.api.pagination import api_build_list_envelope
from lot_ledger.api.serializers import api_serialize_instrument, api_serialize_instrument_detail
from lot_ledger.config import AppSettings
from lot_ledger.ledger import LedgerInstrumentPort


class InstrumentCreateBody(BaseModel):
    """Request body for instrument creation."""

    name: str | None = None
    instrument_class: str | None = None


def api_create_instrument_router(settings: AppSettings, instrument_service: LedgerInstrumentPort) -> APIRouter:
    """Create instrument router exposing CRUD and detail endpoints.

    Args:
        settings: Runtime settings used for pagination defaults.
        instrument_service: Ledger-layer instrument service.

    Returns:
        APIRouter: Router exposing `/instruments` endpoints.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    if settings is None:
        raise ValueError("settings must not be None")
    if instrument_service is None:
        raise ValueError("instrument_service must not be None")

    router = APIRouter(prefix="/instruments", tags=["instruments"])

    @router.get("")
    def api_instrument_list(
        limit: int = Query(default=settings.api_default_limit, ge=1),
        offset: int = Query(default=0, ge=0),
    ) -> JSONResponse:
        """List instruments ordered by name."""

        payload = api_build_list_envelope(
            settings=settings,
            rows=instrument_service.ledger_instrument_list(),
            serialize=api_serialize_instrument,
            limit=limit,
            offset=offset,
            filters={},
        )
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    @router.post("")
    def api_instrument_create(body: InstrumentCreateBody) -> JSONResponse:
        """Create one instrument.

        Returns:
            JSONResponse: Created instrument with status 201.

        Raises:
            LedgerValidationError: Raised when input is invalid or the name is taken.
        """

        record = instrument_service.ledger_instrument_create(
            name=body.name,
            instrument_class=body.instrument_class,
        )
        return JSONResponse(content=api_serialize_instrument(record), status_code=status.HTTP_201_CREATED)

    @router.get("/by-name/{instrument_name}/detail")
    def api_instrument_detail(instrument_name: str) -> JSONResponse:
        """Return realized P/L, position, open lots, closed lots and transactions of one instrument."""

        detail = instrument_service.ledger_instrument_detail(instrument_name)
        return JSONResponse(content=api_serialize_instrument_detail(detail), status_code=status.HTTP_200_OK)

    @router.get("/{instrument_id}")
    def api_instrument_get(instrument_id: UUID) -> JSONResponse:
        record = instrument_service.ledger_instrument_get(instrument_id)
        return JSONResponse(content=api_serialize_instrument(record), status_code=status.HTTP_200_OK)

    @router.delete("/{instrument_id}")
    def api_instrument_delete(instrument_id: UUID) -> JSONResponse:
        """Delete one instrument; 409 while transactions still reference it."""

        instrument_service.ledger_instrument_delete(instrument_id)
        return JSONResponse(
            content={"status": "ok", "instrument_id": str(instrument_id)},
            status_code=status.HTTP_200_OK,
        )

    return router


__all__ = ["InstrumentCreateBody", "api_create_instrument_router"]
