"""Transaction API router: lifecycle endpoints and profit/loss statistics."""
# pylint: disable=duplicate-code

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID

from fastapi import APIRouter, Query, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from lot_ledger.api.pagination import api_build_list_envelope
from lot_ledger.api.serializers import api_serialize_ledger_stats, api_serialize_transaction
from lot_ledger.config import AppSettings
from lot_ledger.ledger import (
    LedgerInstrumentPort,
    LedgerTransactionPort,
    TransactionCreateCommand,
    TransactionEditCommand,
)


class TransactionCreateBody(BaseModel):
    """Request body for transaction creation."""

    instrument_name: str | None = None
    side: str | None = None
    quantity: Decimal | None = None
    price: Decimal | None = None
    transaction_date: date | None = None
    commission: Decimal | None = None
    note: str | None = None


class TransactionEditBody(BaseModel):
    """Request body for transaction edits. Quantity and price may only echo stored values."""

    side: str | None = None
    transaction_date: date | None = None
    commission: Decimal | None = None
    note: str | None = None
    quantity: Decimal | None = None
    price: Decimal | None = None


def api_create_transaction_router(
    settings: AppSettings,
    transaction_service: LedgerTransactionPort,
    instrument_service: LedgerInstrumentPort,
) -> APIRouter:
    """Create transaction router with CRUD and statistics endpoints.

    Args:
        settings: Runtime settings used for pagination defaults.
        transaction_service: Ledger-layer transaction service.
        instrument_service: Ledger-layer instrument service providing statistics.

    Returns:
        APIRouter: Router exposing `/transactions` endpoints.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    if settings is None:
        raise ValueError("settings must not be None")
    if transaction_service is None:
        raise ValueError("transaction_service must not be None")
    if instrument_service is None:
        raise ValueError("instrument_service must not be None")

    router = APIRouter(prefix="/transactions", tags=["transactions"])

    @router.get("")
    def api_transaction_list(
        limit: int = Query(default=settings.api_default_limit, ge=1),
        offset: int = Query(default=0, ge=0),
        instrument_name: str | None = Query(default=None),
    ) -> JSONResponse:
        """List transactions ordered by date desc then creation desc.

        Args:
            limit: Max rows to return.
            offset: Rows to skip.
            instrument_name: Optional instrument filter.

        Returns:
            JSONResponse: Transaction list envelope payload.
        """

        payload = api_build_list_envelope(
            settings=settings,
            rows=transaction_service.ledger_transaction_list(instrument_name),
            serialize=api_serialize_transaction,
            limit=limit,
            offset=offset,
            filters={"instrument_name": instrument_name},
        )
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    @router.post("")
    def api_transaction_create(body: TransactionCreateBody) -> JSONResponse:
        """Create one transaction with computed fees and realized P/L.

        Returns:
            JSONResponse: Created transaction with status 201.

        Raises:
            LedgerValidationError: Raised when input is invalid.
        """

        record = transaction_service.ledger_transaction_create(
            TransactionCreateCommand(
                instrument_name=body.instrument_name,
                side=body.side,
                quantity=body.quantity,
                price=body.price,
                transaction_date=body.transaction_date,
                commission=body.commission,
                note=body.note,
            )
        )
        return JSONResponse(content=api_serialize_transaction(record), status_code=status.HTTP_201_CREATED)

    @router.get("/by-instrument/{instrument_name}")
    def api_transaction_list_by_instrument(
        instrument_name: str,
        limit: int = Query(default=settings.api_default_limit, ge=1),
        offset: int = Query(default=0, ge=0),
    ) -> JSONResponse:
        payload = api_build_list_envelope(
            settings=settings,
            rows=transaction_service.ledger_transaction_list(instrument_name),
            serialize=api_serialize_transaction,
            limit=limit,
            offset=offset,
            filters={"instrument_name": instrument_name},
        )
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    @router.get("/stats/profit-loss")
    def api_transaction_profit_loss_stats() -> JSONResponse:
        """Return per-instrument and overall profit/loss rollups."""

        stats = instrument_service.ledger_profit_loss_stats()
        return JSONResponse(content=api_serialize_ledger_stats(stats), status_code=status.HTTP_200_OK)

    @router.get("/{transaction_id}")
    def api_transaction_get(transaction_id: UUID) -> JSONResponse:
        record = transaction_service.ledger_transaction_get(transaction_id)
        return JSONResponse(content=api_serialize_transaction(record), status_code=status.HTTP_200_OK)

    @router.put("/{transaction_id}")
    def api_transaction_update(transaction_id: UUID, body: TransactionEditBody) -> JSONResponse:
        """Edit one transaction and return recomputed values.

        Raises:
            LedgerNotFoundError: Raised when the transaction does not exist.
            LedgerValidationError: Raised when input is invalid.
        """

        record = transaction_service.ledger_transaction_update(
            transaction_id,
            TransactionEditCommand(
                side=body.side,
                transaction_date=body.transaction_date,
                commission=body.commission,
                note=body.note,
                quantity=body.quantity,
                price=body.price,
            ),
        )
        return JSONResponse(content=api_serialize_transaction(record), status_code=status.HTTP_200_OK)

    @router.delete("/{transaction_id}")
    def api_transaction_delete(transaction_id: UUID) -> JSONResponse:
        transaction_service.ledger_transaction_delete(transaction_id)
        return JSONResponse(
            content={"status": "ok", "transaction_id": str(transaction_id)},
            status_code=status.HTTP_200_OK,
        )

    return router


__all__ = ["TransactionCreateBody", "TransactionEditBody", "api_create_transaction_router"]
