"""Typed interfaces for database-layer services.

All SQL access must remain in the db package and its submodules.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Protocol
from uuid import UUID

from lot_ledger.domain import HealthStatus


class DatabaseHealthPort(Protocol):
    """Port definition for database connectivity verification."""

    def db_connection_label(self) -> str:
        """Return a stable label for the active database connection target.

        Returns:
            str: Database target label for diagnostics.
        """

    def db_check_health(self) -> HealthStatus:
        """Check database connectivity and return deterministic health payload.

        Returns:
            HealthStatus: Database health status payload.

        Raises:
            ConnectionError: Raised when database cannot be reached.
        """


@dataclass(frozen=True)
class InstrumentRecord:
    """Persistence model for one instrument row.

    Attributes:
        instrument_id: Unique instrument identifier.
        name: Unique instrument name referenced by transactions and actions.
        instrument_class: Fee schedule selector.
        created_at_utc: Row creation timestamp in UTC.
    """

    instrument_id: UUID
    name: str
    instrument_class: str
    created_at_utc: datetime


@dataclass(frozen=True)
class TransactionRecord:
    """Persistence model for one trade transaction row.

    `quantity`, `price` and `total_amount` hold effective values rewritten by
    corporate-action restatement. `original_quantity` and `original_price`
    are written once at creation.

    Attributes:
        transaction_id: Unique transaction identifier.
        instrument_name: Instrument name.
        side: Trade side (`BUY` or `SELL`).
        quantity: Effective quantity.
        price: Effective price.
        total_amount: Effective quantity times price.
        original_quantity: Quantity entered at creation.
        original_price: Price entered at creation.
        transaction_date: Trade date.
        commission: Commission computed at creation or last edit.
        tax: Tax computed at creation or last edit.
        profit_loss: Realized P/L computed at creation or last edit.
        note: Optional free-text note.
        created_at_utc: Row creation timestamp in UTC.
    """

    transaction_id: UUID
    instrument_name: str
    side: str
    quantity: Decimal
    price: Decimal
    total_amount: Decimal
    original_quantity: Decimal | None
    original_price: Decimal | None
    transaction_date: date
    commission: Decimal
    tax: Decimal
    profit_loss: Decimal
    note: str | None
    created_at_utc: datetime


@dataclass(frozen=True)
class TransactionInsertRequest:
    """Input payload for one transaction insert.

    Attributes:
        transaction_id: Pre-allocated transaction identifier.
        instrument_name: Instrument name.
        side: Trade side.
        quantity: Effective quantity.
        price: Effective price.
        total_amount: Effective total.
        original_quantity: Entered quantity.
        original_price: Entered price.
        transaction_date: Trade date.
        commission: Computed commission.
        tax: Computed tax.
        profit_loss: Computed realized P/L.
        note: Optional note.
        created_at_utc: Creation timestamp used for same-day ordering.
    """

    transaction_id: UUID
    instrument_name: str
    side: str
    quantity: Decimal
    price: Decimal
    total_amount: Decimal
    original_quantity: Decimal
    original_price: Decimal
    transaction_date: date
    commission: Decimal
    tax: Decimal
    profit_loss: Decimal
    note: str | None
    created_at_utc: datetime


@dataclass(frozen=True)
class TransactionUpdateRequest:
    """Input payload for one user edit. Original values are not writable.

    Attributes:
        transaction_id: Target transaction identifier.
        side: Trade side.
        transaction_date: Trade date.
        quantity: Re-derived effective quantity.
        price: Re-derived effective price.
        total_amount: Re-derived effective total.
        commission: Recomputed commission.
        tax: Recomputed tax.
        profit_loss: Recomputed realized P/L.
        note: Optional note.
    """

    transaction_id: UUID
    side: str
    transaction_date: date
    quantity: Decimal
    price: Decimal
    total_amount: Decimal
    commission: Decimal
    tax: Decimal
    profit_loss: Decimal
    note: str | None


@dataclass(frozen=True)
class TransactionEffectiveUpdateRequest:
    """Restated effective values for one transaction.

    Attributes:
        transaction_id: Target transaction identifier.
        quantity: Effective quantity.
        price: Effective price.
        total_amount: Effective total.
    """

    transaction_id: UUID
    quantity: Decimal
    price: Decimal
    total_amount: Decimal


@dataclass(frozen=True)
class CorporateActionRecord:
    """Persistence model for one corporate action row.

    Attributes:
        action_id: Unique action identifier.
        instrument_name: Instrument name.
        action_type: `DIVIDEND`, `SPLIT` or `REVERSE_SPLIT`.
        action_date: Effective date.
        ratio: Split ratio, None for dividends.
        amount: Per-share amount, None for splits.
        note: Optional note.
        created_at_utc: Row creation timestamp in UTC.
    """

    action_id: UUID
    instrument_name: str
    action_type: str
    action_date: date
    ratio: Decimal | None
    amount: Decimal | None
    note: str | None
    created_at_utc: datetime


@dataclass(frozen=True)
class CorporateActionWriteRequest:
    """Input payload for corporate action insert or update.

    Attributes:
        instrument_name: Instrument name.
        action_type: Action type.
        action_date: Effective date.
        ratio: Split ratio, None for dividends.
        amount: Per-share amount, None for splits.
        note: Optional note.
    """

    instrument_name: str
    action_type: str
    action_date: date
    ratio: Decimal | None
    amount: Decimal | None
    note: str | None


class InstrumentStorePort(Protocol):
    """Port definition for instrument master-data persistence."""

    def db_instrument_list(self) -> list[InstrumentRecord]:
        """List instruments ordered by name."""

    def db_instrument_get_by_id(self, instrument_id: UUID) -> InstrumentRecord | None:
        """Fetch one instrument by primary key, None when absent."""

    def db_instrument_get_by_name(self, name: str) -> InstrumentRecord | None:
        """Fetch one instrument by unique name, None when absent."""

    def db_instrument_insert(self, name: str, instrument_class: str) -> InstrumentRecord:
        """Insert one instrument.

        Args:
            name: Unique instrument name.
            instrument_class: Fee schedule selector.

        Returns:
            InstrumentRecord: Inserted row.

        Raises:
            ValueError: Raised when the name already exists.
            RuntimeError: Raised when persistence fails.
        """

    def db_instrument_delete(self, instrument_id: UUID) -> bool:
        """Delete one instrument, returning whether a row was removed."""


class TransactionStorePort(Protocol):
    """Port definition for trade transaction persistence and ordered reads."""

    def db_transaction_list_all(self) -> list[TransactionRecord]:
        """List all transactions ordered by date desc then creation desc."""

    def db_transaction_list_by_instrument(
        self,
        instrument_name: str,
        excluding_transaction_id: UUID | None = None,
    ) -> list[TransactionRecord]:
        """List one instrument's transactions ordered by date then creation ascending.

        Args:
            instrument_name: Instrument name.
            excluding_transaction_id: Optional transaction to leave out.

        Returns:
            list[TransactionRecord]: Chronologically ordered rows.
        """

    def db_transaction_get_by_id(self, transaction_id: UUID) -> TransactionRecord | None:
        """Fetch one transaction by primary key, None when absent."""

    def db_transaction_count_by_instrument(self, instrument_name: str) -> int:
        """Count transactions referencing one instrument."""

    def db_transaction_insert(self, request: TransactionInsertRequest) -> TransactionRecord:
        """Insert one transaction with computed values persisted verbatim."""

    def db_transaction_update(self, request: TransactionUpdateRequest) -> TransactionRecord:
        """Apply one user edit with recomputed values persisted verbatim."""

    def db_transaction_update_effective_many(
        self,
        instrument_name: str,
        requests: list[TransactionEffectiveUpdateRequest],
    ) -> int:
        """Write restated effective values for one instrument in one database transaction.

        Returns:
            int: Number of rows updated.
        """

    def db_transaction_delete(self, transaction_id: UUID) -> bool:
        """Delete one transaction, returning whether a row was removed."""


class CorporateActionStorePort(Protocol):
    """Port definition for corporate action persistence."""

    def db_corporate_action_list_all(self) -> list[CorporateActionRecord]:
        """List all actions ordered by date desc then creation desc."""

    def db_corporate_action_list_by_instrument(self, instrument_name: str) -> list[CorporateActionRecord]:
        """List one instrument's actions ordered by date then creation ascending."""

    def db_corporate_action_get_by_id(self, action_id: UUID) -> CorporateActionRecord | None:
        """Fetch one action by primary key, None when absent."""

    def db_corporate_action_insert(self, request: CorporateActionWriteRequest) -> CorporateActionRecord:
        """Insert one corporate action."""

    def db_corporate_action_update(self, action_id: UUID, request: CorporateActionWriteRequest) -> CorporateActionRecord:
        """Replace one corporate action's fields."""

    def db_corporate_action_delete(self, action_id: UUID) -> bool:
        """Delete one action, returning whether a row was removed."""
