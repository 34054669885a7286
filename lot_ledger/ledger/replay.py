"""Conversions from stored rows to pure-core inputs, and full-history replay."""

from __future__ import annotations

from typing import Iterable

from lot_ledger.db import CorporateActionRecord, TransactionRecord

from .lot_engine import LotLedgerComputationRequest, LotLedgerComputationResult, LotTradeInput, lot_derive_ledger
from .restatement import RestatementActionInput, RestatementTransactionInput


def replay_trade_input(record: TransactionRecord) -> LotTradeInput:
    """Map one stored transaction to a matcher input using effective values."""

    return LotTradeInput(
        transaction_id=str(record.transaction_id),
        transaction_date=record.transaction_date,
        created_at_utc=record.created_at_utc,
        side=record.side,
        quantity=record.quantity,
        price=record.price,
        commission=record.commission,
        tax=record.tax,
    )


def replay_restatement_input(record: TransactionRecord) -> RestatementTransactionInput:
    """Map one stored transaction to a restatement input."""

    return RestatementTransactionInput(
        transaction_id=str(record.transaction_id),
        instrument_name=record.instrument_name,
        transaction_date=record.transaction_date,
        original_quantity=record.original_quantity,
        original_price=record.original_price,
        quantity=record.quantity,
        price=record.price,
        total_amount=record.total_amount,
    )


def replay_action_input(record: CorporateActionRecord) -> RestatementActionInput:
    """Map one stored corporate action to a restatement input."""

    return RestatementActionInput(
        action_id=str(record.action_id),
        instrument_name=record.instrument_name,
        action_type=record.action_type,
        action_date=record.action_date,
        created_at_utc=record.created_at_utc,
        ratio=record.ratio,
        amount=record.amount,
    )


def replay_derive_instrument(
    instrument_name: str,
    trades: Iterable[LotTradeInput],
) -> LotLedgerComputationResult:
    """Replay one instrument's full history into a fresh lot book.

    Args:
        instrument_name: Instrument name.
        trades: Matcher inputs in any order.

    Returns:
        LotLedgerComputationResult: Derived lots and realized P/L.
    """

    return lot_derive_ledger(LotLedgerComputationRequest(instrument_name=instrument_name, trades=list(trades)))


__all__ = [
    "replay_action_input",
    "replay_derive_instrument",
    "replay_restatement_input",
    "replay_trade_input",
]
