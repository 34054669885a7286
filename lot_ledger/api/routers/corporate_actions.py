"""Corporate action API router and explicit restatement sync endpoint."""
# pylint: disable=duplicate-code

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID

from fastapi import APIRouter, Query, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from lot_ledger.api.pagination import api_build_list_envelope
from lot_ledger.api.serializers import api_serialize_corporate_action, api_serialize_sync_result
from lot_ledger.config import AppSettings
from lot_ledger.ledger import CorporateActionChangeResult, CorporateActionCommand, LedgerCorporateActionPort


class CorporateActionBody(BaseModel):
    """Request body for corporate action create and edit."""

    instrument_name: str | None = None
    action_type: str | None = None
    action_date: date | None = None
    ratio: Decimal | None = None
    amount: Decimal | None = None
    note: str | None = None

    def to_command(self) -> CorporateActionCommand:
        return CorporateActionCommand(
            instrument_name=self.instrument_name,
            action_type=self.action_type,
            action_date=self.action_date,
            ratio=self.ratio,
            amount=self.amount,
            note=self.note,
        )


def api_serialize_corporate_action_change(result: CorporateActionChangeResult) -> dict[str, object]:
    """Serialize one action write together with the syncs it triggered."""

    return {
        "action": None if result.action is None else api_serialize_corporate_action(result.action),
        "sync": [api_serialize_sync_result(sync_result) for sync_result in result.sync_results],
    }


def api_create_corporate_action_router(
    settings: AppSettings,
    corporate_action_service: LedgerCorporateActionPort,
) -> APIRouter:
    """Create corporate action router with CRUD endpoints.

    Every write endpoint reports the restatement sync it triggered.

    Args:
        settings: Runtime settings used for pagination defaults.
        corporate_action_service: Ledger-layer corporate action service.

    Returns:
        APIRouter: Router exposing `/corporate-actions` endpoints.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    if settings is None:
        raise ValueError("settings must not be None")
    if corporate_action_service is None:
        raise ValueError("corporate_action_service must not be None")

    router = APIRouter(prefix="/corporate-actions", tags=["corporate-actions"])

    @router.get("")
    def api_corporate_action_list(
        limit: int = Query(default=settings.api_default_limit, ge=1),
        offset: int = Query(default=0, ge=0),
    ) -> JSONResponse:
        """List all actions ordered by date desc then creation desc."""

        payload = api_build_list_envelope(
            settings=settings,
            rows=corporate_action_service.ledger_corporate_action_list(),
            serialize=api_serialize_corporate_action,
            limit=limit,
            offset=offset,
            filters={},
        )
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    @router.post("")
    def api_corporate_action_create(body: CorporateActionBody) -> JSONResponse:
        """Create one action and restate its instrument.

        Returns:
            JSONResponse: Created action and sync summary with status 201.

        Raises:
            LedgerValidationError: Raised when input is invalid.
        """

        result = corporate_action_service.ledger_corporate_action_create(body.to_command())
        return JSONResponse(
            content=api_serialize_corporate_action_change(result),
            status_code=status.HTTP_201_CREATED,
        )

    @router.get("/by-instrument/{instrument_name}")
    def api_corporate_action_list_by_instrument(
        instrument_name: str,
        limit: int = Query(default=settings.api_default_limit, ge=1),
        offset: int = Query(default=0, ge=0),
    ) -> JSONResponse:
        """List one instrument's actions in application order."""

        payload = api_build_list_envelope(
            settings=settings,
            rows=corporate_action_service.ledger_corporate_action_list(instrument_name),
            serialize=api_serialize_corporate_action,
            limit=limit,
            offset=offset,
            filters={"instrument_name": instrument_name},
        )
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    @router.get("/{action_id}")
    def api_corporate_action_get(action_id: UUID) -> JSONResponse:
        record = corporate_action_service.ledger_corporate_action_get(action_id)
        return JSONResponse(content=api_serialize_corporate_action(record), status_code=status.HTTP_200_OK)

    @router.put("/{action_id}")
    def api_corporate_action_update(action_id: UUID, body: CorporateActionBody) -> JSONResponse:
        result = corporate_action_service.ledger_corporate_action_update(action_id, body.to_command())
        return JSONResponse(content=api_serialize_corporate_action_change(result), status_code=status.HTTP_200_OK)

    @router.delete("/{action_id}")
    def api_corporate_action_delete(action_id: UUID) -> JSONResponse:
        result = corporate_action_service.ledger_corporate_action_delete(action_id)
        return JSONResponse(content=api_serialize_corporate_action_change(result), status_code=status.HTTP_200_OK)

    return router


def api_create_sync_router(corporate_action_service: LedgerCorporateActionPort) -> APIRouter:
    """Create router exposing the explicit per-instrument restatement sync.

    Args:
        corporate_action_service: Ledger-layer corporate action service.

    Returns:
        APIRouter: Router exposing `POST /sync/{instrument_name}`.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    if corporate_action_service is None:
        raise ValueError("corporate_action_service must not be None")

    router = APIRouter(prefix="/sync", tags=["sync"])

    @router.post("/{instrument_name}")
    def api_sync_instrument(instrument_name: str) -> JSONResponse:
        """Restate one instrument's transactions and return the changed count."""

        result = corporate_action_service.ledger_corporate_action_sync_instrument(instrument_name)
        return JSONResponse(content=api_serialize_sync_result(result), status_code=status.HTTP_200_OK)

    return router


__all__ = [
    "CorporateActionBody",
    "api_create_corporate_action_router",
    "api_create_sync_router",
    "api_serialize_corporate_action_change",
]
