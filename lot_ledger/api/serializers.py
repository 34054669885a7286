"""JSON serialization of stored records and derived ledger views.

Decimal values are rendered as strings so no precision is lost in transit.
"""

from __future__ import annotations

from decimal import Decimal

from lot_ledger.db import CorporateActionRecord, InstrumentRecord, TransactionRecord
from lot_ledger.ledger import (
    ClosedLotRecord,
    InstrumentDetail,
    InstrumentStats,
    LedgerStats,
    OpenLotResult,
    SyncResult,
)


def _api_decimal(value: Decimal | None) -> str | None:
    return None if value is None else str(value)


def api_serialize_instrument(record: InstrumentRecord) -> dict[str, object]:
    """Serialize one instrument row."""

    return {
        "instrument_id": str(record.instrument_id),
        "name": record.name,
        "instrument_class": record.instrument_class,
        "created_at_utc": record.created_at_utc.isoformat(),
    }


def api_serialize_transaction(record: TransactionRecord) -> dict[str, object]:
    """Serialize one transaction row with effective and original values.

    Args:
        record: Typed transaction row.

    Returns:
        dict[str, object]: JSON-serializable transaction payload.
    """

    return {
        "transaction_id": str(record.transaction_id),
        "instrument_name": record.instrument_name,
        "side": record.side,
        "quantity": _api_decimal(record.quantity),
        "price": _api_decimal(record.price),
        "total_amount": _api_decimal(record.total_amount),
        "original_quantity": _api_decimal(record.original_quantity),
        "original_price": _api_decimal(record.original_price),
        "transaction_date": record.transaction_date.isoformat(),
        "commission": _api_decimal(record.commission),
        "tax": _api_decimal(record.tax),
        "profit_loss": _api_decimal(record.profit_loss),
        "note": record.note,
        "created_at_utc": record.created_at_utc.isoformat(),
    }


def api_serialize_corporate_action(record: CorporateActionRecord) -> dict[str, object]:
    """Serialize one corporate action row."""

    return {
        "action_id": str(record.action_id),
        "instrument_name": record.instrument_name,
        "action_type": record.action_type,
        "action_date": record.action_date.isoformat(),
        "ratio": _api_decimal(record.ratio),
        "amount": _api_decimal(record.amount),
        "note": record.note,
        "created_at_utc": record.created_at_utc.isoformat(),
    }


def api_serialize_sync_result(result: SyncResult) -> dict[str, object]:
    return {
        "instrument_name": result.instrument_name,
        "updated_count": result.updated_count,
        "message": result.message,
    }


def api_serialize_open_lot(lot: OpenLotResult) -> dict[str, object]:
    return {
        "direction": lot.direction,
        "open_transaction_id": lot.open_transaction_id,
        "opened_on": lot.opened_on.isoformat(),
        "quantity": _api_decimal(lot.quantity),
        "price": _api_decimal(lot.price),
        "notional": _api_decimal(lot.notional),
        "unrecognized_fees": _api_decimal(lot.unrecognized_fees),
    }


def api_serialize_closed_lot(record: ClosedLotRecord) -> dict[str, object]:
    return {
        "side": record.side,
        "open_transaction_id": record.open_transaction_id,
        "close_transaction_id": record.close_transaction_id,
        "open_date": record.open_date.isoformat(),
        "close_date": record.close_date.isoformat(),
        "open_price": _api_decimal(record.open_price),
        "close_price": _api_decimal(record.close_price),
        "quantity": _api_decimal(record.quantity),
        "gross_pnl": _api_decimal(record.gross_pnl),
        "opening_fee_allocated": _api_decimal(record.opening_fee_allocated),
        "closing_fee_allocated": _api_decimal(record.closing_fee_allocated),
        "realized_pnl": _api_decimal(record.realized_pnl),
    }


def api_serialize_instrument_stats(stats: InstrumentStats) -> dict[str, object]:
    return {
        "instrument_name": stats.instrument_name,
        "total_buy_amount": _api_decimal(stats.total_buy_amount),
        "total_sell_amount": _api_decimal(stats.total_sell_amount),
        "total_buy_quantity": _api_decimal(stats.total_buy_quantity),
        "total_sell_quantity": _api_decimal(stats.total_sell_quantity),
        "realized_pnl": _api_decimal(stats.realized_pnl),
        "transaction_count": stats.transaction_count,
    }


def api_serialize_ledger_stats(stats: LedgerStats) -> dict[str, object]:
    """Serialize per-instrument and overall rollups."""

    return {
        "by_instrument": [api_serialize_instrument_stats(item) for item in stats.by_instrument],
        "overall": api_serialize_instrument_stats(stats.overall),
    }


def api_serialize_instrument_detail(detail: InstrumentDetail) -> dict[str, object]:
    """Serialize one derived instrument view.

    Args:
        detail: Derived instrument detail.

    Returns:
        dict[str, object]: JSON-serializable detail payload.
    """

    return {
        "instrument": api_serialize_instrument(detail.instrument),
        "position_quantity": _api_decimal(detail.position_quantity),
        "realized_pnl": _api_decimal(detail.realized_pnl),
        "open_lots": [api_serialize_open_lot(lot) for lot in detail.open_lots],
        "closed_lots": [api_serialize_closed_lot(record) for record in detail.closed_lots],
        "transactions": [api_serialize_transaction(record) for record in detail.transactions],
        "corporate_actions": [api_serialize_corporate_action(record) for record in detail.corporate_actions],
        "stats": api_serialize_instrument_stats(detail.stats),
    }


__all__ = [
    "api_serialize_closed_lot",
    "api_serialize_corporate_action",
    "api_serialize_instrument",
    "api_serialize_instrument_detail",
    "api_serialize_instrument_stats",
    "api_serialize_ledger_stats",
    "api_serialize_open_lot",
    "api_serialize_sync_result",
    "api_serialize_transaction",
]
