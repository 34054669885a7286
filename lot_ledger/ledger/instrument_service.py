"""Instrument master data, instrument detail and profit/loss statistics."""

from __future__ import annotations

import logging
from collections import defaultdict
from uuid import UUID

from lot_ledger.db import (
    CorporateActionStorePort,
    InstrumentRecord,
    InstrumentStorePort,
    TransactionRecord,
    TransactionStorePort,
)
from lot_ledger.domain import INSTRUMENT_CLASSES, LedgerConflictError, LedgerNotFoundError, LedgerValidationError

from .interfaces import InstrumentDetail, LedgerInstrumentPort
from .lot_engine import ClosedLotRecord
from .replay import replay_derive_instrument, replay_trade_input
from .stats import LedgerStats, StatsTransactionInput, stats_aggregate
from .validation import ledger_require_text

logger = logging.getLogger(__name__)


class InstrumentLedgerService(LedgerInstrumentPort):
    """Instrument CRUD plus read models derived by full-history replay."""

    def __init__(
        self,
        instrument_store: InstrumentStorePort,
        transaction_store: TransactionStorePort,
        corporate_action_store: CorporateActionStorePort,
    ):
        """Initialize instrument service dependencies.

        Args:
            instrument_store: DB-layer instrument store.
            transaction_store: DB-layer transaction store.
            corporate_action_store: DB-layer corporate action store.

        Raises:
            ValueError: Raised when a dependency is missing.
        """

        if instrument_store is None:
            raise ValueError("instrument_store must not be None")
        if transaction_store is None:
            raise ValueError("transaction_store must not be None")
        if corporate_action_store is None:
            raise ValueError("corporate_action_store must not be None")
        self._instrument_store = instrument_store
        self._transaction_store = transaction_store
        self._corporate_action_store = corporate_action_store

    def ledger_instrument_list(self) -> list[InstrumentRecord]:
        return self._instrument_store.db_instrument_list()

    def ledger_instrument_get(self, instrument_id: UUID) -> InstrumentRecord:
        """Fetch one instrument.

        Raises:
            LedgerNotFoundError: Raised when the instrument does not exist.
        """

        record = self._instrument_store.db_instrument_get_by_id(instrument_id)
        if record is None:
            raise LedgerNotFoundError(f"instrument_id={instrument_id} was not found")
        return record

    def ledger_instrument_create(self, name: str, instrument_class: str) -> InstrumentRecord:
        """Create one instrument.

        Args:
            name: Unique instrument name.
            instrument_class: One of the supported fee schedule classes.

        Returns:
            InstrumentRecord: Stored instrument.

        Raises:
            LedgerValidationError: Raised when input is invalid or the name is taken.
        """

        normalized_name = ledger_require_text(name, "name")
        normalized_class = ledger_require_text(instrument_class, "instrument_class").lower()
        if normalized_class not in INSTRUMENT_CLASSES:
            raise LedgerValidationError(
                f"instrument_class must be one of {', '.join(sorted(INSTRUMENT_CLASSES))}"
            )
        if self._instrument_store.db_instrument_get_by_name(normalized_name) is not None:
            raise LedgerValidationError(f"instrument name={normalized_name} already exists")

        try:
            record = self._instrument_store.db_instrument_insert(normalized_name, normalized_class)
        except ValueError as error:
            raise LedgerValidationError(str(error)) from error
        logger.info("created instrument name=%s class=%s", record.name, record.instrument_class)
        return record

    def ledger_instrument_delete(self, instrument_id: UUID) -> None:
        """Delete one instrument.

        Raises:
            LedgerNotFoundError: Raised when the instrument does not exist.
            LedgerConflictError: Raised when transactions still reference it.
        """

        record = self.ledger_instrument_get(instrument_id)
        transaction_count = self._transaction_store.db_transaction_count_by_instrument(record.name)
        if transaction_count > 0:
            raise LedgerConflictError(
                f"instrument name={record.name} still has {transaction_count} transactions and cannot be deleted"
            )
        if not self._instrument_store.db_instrument_delete(record.instrument_id):
            raise LedgerNotFoundError(f"instrument_id={instrument_id} was not found")
        logger.info("deleted instrument name=%s", record.name)

    def ledger_instrument_detail(self, instrument_name: str) -> InstrumentDetail:
        """Derive open lots, closed lots and realized P/L for one instrument.

        Args:
            instrument_name: Instrument name.

        Returns:
            InstrumentDetail: Derived per-instrument view.

        Raises:
            LedgerNotFoundError: Raised when the instrument does not exist.
        """

        normalized_name = ledger_require_text(instrument_name, "instrument_name")
        instrument = self._instrument_store.db_instrument_get_by_name(normalized_name)
        if instrument is None:
            raise LedgerNotFoundError(f"instrument name={normalized_name} was not found")

        history = self._transaction_store.db_transaction_list_by_instrument(normalized_name)
        derived = replay_derive_instrument(normalized_name, [replay_trade_input(record) for record in history])
        stats = stats_aggregate(
            [_stats_input(record) for record in history],
            {normalized_name: derived.closed_lots},
        )

        return InstrumentDetail(
            instrument=instrument,
            position_quantity=derived.position_quantity,
            realized_pnl=derived.realized_pnl,
            open_lots=derived.open_lots,
            closed_lots=derived.closed_lots,
            transactions=tuple(
                sorted(
                    history,
                    key=lambda record: (record.transaction_date, record.created_at_utc, str(record.transaction_id)),
                    reverse=True,
                )
            ),
            corporate_actions=tuple(
                self._corporate_action_store.db_corporate_action_list_by_instrument(normalized_name)
            ),
            stats=stats.by_instrument[0],
        )

    def ledger_profit_loss_stats(self) -> LedgerStats:
        """Aggregate transaction totals and realized P/L per instrument and overall."""

        transactions = self._transaction_store.db_transaction_list_all()
        history_by_instrument: dict[str, list[TransactionRecord]] = defaultdict(list)
        for record in transactions:
            history_by_instrument[record.instrument_name].append(record)

        closed_lots_by_instrument: dict[str, tuple[ClosedLotRecord, ...]] = {}
        for instrument_name, history in history_by_instrument.items():
            derived = replay_derive_instrument(instrument_name, [replay_trade_input(record) for record in history])
            closed_lots_by_instrument[instrument_name] = derived.closed_lots

        return stats_aggregate([_stats_input(record) for record in transactions], closed_lots_by_instrument)


def _stats_input(record: TransactionRecord) -> StatsTransactionInput:
    return StatsTransactionInput(
        instrument_name=record.instrument_name,
        side=record.side,
        quantity=record.quantity,
        total_amount=record.total_amount,
    )


__all__ = ["InstrumentLedgerService"]
