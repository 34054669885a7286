"""Typed interfaces for ledger-layer services."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Protocol
from uuid import UUID

from lot_ledger.db import CorporateActionRecord, InstrumentRecord, TransactionRecord

from .lot_engine import ClosedLotRecord, OpenLotResult
from .stats import InstrumentStats, LedgerStats


@dataclass(frozen=True)
class TransactionCreateCommand:
    """Caller input for one new transaction.

    Attributes:
        instrument_name: Instrument name; must reference an existing instrument.
        side: Trade side (`BUY` or `SELL`).
        quantity: Entered quantity, stored as the original quantity.
        price: Entered price, stored as the original price.
        transaction_date: Trade date.
        commission: Manual commission, honored for foreign-equity instruments.
        note: Optional free-text note.
    """

    instrument_name: str
    side: str
    quantity: Decimal
    price: Decimal
    transaction_date: date
    commission: Decimal | None = None
    note: str | None = None


@dataclass(frozen=True)
class TransactionEditCommand:
    """Caller input for one transaction edit.

    Quantity and price are fixed at creation. When supplied they must equal
    the stored original or effective values.

    Attributes:
        side: Trade side.
        transaction_date: Trade date.
        commission: Manual commission, honored for foreign-equity instruments.
        note: Optional free-text note.
        quantity: Optional echo of the fixed quantity.
        price: Optional echo of the fixed price.
    """

    side: str
    transaction_date: date
    commission: Decimal | None = None
    note: str | None = None
    quantity: Decimal | None = None
    price: Decimal | None = None


@dataclass(frozen=True)
class CorporateActionCommand:
    """Caller input for corporate action create or edit.

    Attributes:
        instrument_name: Instrument name.
        action_type: `DIVIDEND`, `SPLIT` or `REVERSE_SPLIT`.
        action_date: Effective date.
        ratio: Split ratio, required for split types.
        amount: Per-share amount, required for dividends.
        note: Optional free-text note.
    """

    instrument_name: str
    action_type: str
    action_date: date
    ratio: Decimal | None = None
    amount: Decimal | None = None
    note: str | None = None


@dataclass(frozen=True)
class SyncResult:
    """Outcome of one restatement sync.

    Attributes:
        instrument_name: Restated instrument.
        updated_count: Transactions whose effective values changed.
        message: Human-readable summary.
    """

    instrument_name: str
    updated_count: int
    message: str


@dataclass(frozen=True)
class CorporateActionChangeResult:
    """Corporate action write outcome with the syncs it triggered.

    Attributes:
        action: Written action, None for deletions.
        sync_results: One sync result per affected instrument.
    """

    action: CorporateActionRecord | None
    sync_results: tuple[SyncResult, ...]


@dataclass(frozen=True)
class InstrumentDetail:
    """Derived per-instrument view.

    Attributes:
        instrument: Instrument master data.
        position_quantity: Signed open quantity.
        realized_pnl: Net realized P/L rounded to cents.
        open_lots: Currently open lots.
        closed_lots: Closed-lot ledger.
        transactions: Transactions ordered by date desc then creation desc.
        corporate_actions: Actions ordered by date then creation ascending.
        stats: Transaction and P/L rollup for the instrument.
    """

    instrument: InstrumentRecord
    position_quantity: Decimal
    realized_pnl: Decimal
    open_lots: tuple[OpenLotResult, ...]
    closed_lots: tuple[ClosedLotRecord, ...]
    transactions: tuple[TransactionRecord, ...]
    corporate_actions: tuple[CorporateActionRecord, ...]
    stats: InstrumentStats


class LedgerTransactionPort(Protocol):
    """Port definition for transaction lifecycle operations."""

    def ledger_transaction_list(self, instrument_name: str | None = None) -> list[TransactionRecord]:
        """List transactions, optionally for one instrument, newest first."""

    def ledger_transaction_get(self, transaction_id: UUID) -> TransactionRecord:
        """Fetch one transaction or raise `LedgerNotFoundError`."""

    def ledger_transaction_create(self, command: TransactionCreateCommand) -> TransactionRecord:
        """Create one transaction with computed fees, P/L and effective values."""

    def ledger_transaction_update(self, transaction_id: UUID, command: TransactionEditCommand) -> TransactionRecord:
        """Edit one transaction and recompute fees, P/L and effective values."""

    def ledger_transaction_delete(self, transaction_id: UUID) -> None:
        """Delete one transaction or raise `LedgerNotFoundError`."""


class LedgerCorporateActionPort(Protocol):
    """Port definition for corporate action lifecycle and restatement sync."""

    def ledger_corporate_action_list(self, instrument_name: str | None = None) -> list[CorporateActionRecord]:
        """List actions, optionally for one instrument."""

    def ledger_corporate_action_get(self, action_id: UUID) -> CorporateActionRecord:
        """Fetch one action or raise `LedgerNotFoundError`."""

    def ledger_corporate_action_create(self, command: CorporateActionCommand) -> CorporateActionChangeResult:
        """Create one action and restate its instrument."""

    def ledger_corporate_action_update(
        self,
        action_id: UUID,
        command: CorporateActionCommand,
    ) -> CorporateActionChangeResult:
        """Edit one action and restate every affected instrument."""

    def ledger_corporate_action_delete(self, action_id: UUID) -> CorporateActionChangeResult:
        """Delete one action and restate its instrument."""

    def ledger_corporate_action_sync_instrument(self, instrument_name: str) -> SyncResult:
        """Restate one instrument's transactions from originals."""


class LedgerInstrumentPort(Protocol):
    """Port definition for instrument master data and derived reports."""

    def ledger_instrument_list(self) -> list[InstrumentRecord]:
        """List instruments ordered by name."""

    def ledger_instrument_get(self, instrument_id: UUID) -> InstrumentRecord:
        """Fetch one instrument or raise `LedgerNotFoundError`."""

    def ledger_instrument_create(self, name: str, instrument_class: str) -> InstrumentRecord:
        """Create one instrument with a unique name."""

    def ledger_instrument_delete(self, instrument_id: UUID) -> None:
        """Delete one instrument that has no transactions."""

    def ledger_instrument_detail(self, instrument_name: str) -> InstrumentDetail:
        """Derive the lot and P/L view of one instrument."""

    def ledger_profit_loss_stats(self) -> LedgerStats:
        """Aggregate per-instrument and overall statistics."""
