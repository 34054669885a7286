"""Database service for trade transaction persistence and ordered reads."""
# pylint: disable=duplicate-code

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy import Connection, Engine, text
from sqlalchemy.exc import SQLAlchemyError

from lot_ledger.db.interfaces import (
    TransactionEffectiveUpdateRequest,
    TransactionInsertRequest,
    TransactionRecord,
    TransactionStorePort,
    TransactionUpdateRequest,
)
from lot_ledger.db.validation import (
    db_build_instrument_lock_keys,
    db_validate_non_empty_text,
    db_validate_optional_text,
)


class SQLAlchemyTransactionStore(TransactionStorePort):
    """SQLAlchemy implementation for trade transaction DB operations.

    Every write takes a transaction-scoped advisory lock keyed by instrument
    name, so writes against one instrument's history never interleave.
    """

    _TRANSACTION_SELECT_COLUMNS = (
        "SELECT "
        "transaction_id, instrument_name, side, quantity, price, total_amount, original_quantity, "
        "original_price, transaction_date, commission, tax, profit_loss, note, created_at_utc "
        "FROM trade_transaction "
    )
    _TRANSACTION_RETURNING_COLUMNS = (
        "RETURNING "
        "transaction_id, instrument_name, side, quantity, price, total_amount, original_quantity, "
        "original_price, transaction_date, commission, tax, profit_loss, note, created_at_utc"
    )

    def __init__(self, engine: Engine):
        """Initialize transaction store.

        Args:
            engine: SQLAlchemy engine used for persistence and reads.

        Raises:
            ValueError: Raised when engine is invalid.
        """

        if engine is None:
            raise ValueError("engine must not be None")
        self._engine = engine

    def db_transaction_list_all(self) -> list[TransactionRecord]:
        """List all transactions, newest trade date first.

        Returns:
            list[TransactionRecord]: Rows ordered by date desc then creation desc.

        Raises:
            RuntimeError: Raised when database read fails.
        """

        try:
            with self._engine.connect() as connection:
                rows = connection.execute(
                    text(
                        self._TRANSACTION_SELECT_COLUMNS
                        + "ORDER BY transaction_date desc, created_at_utc desc, transaction_id desc"
                    )
                ).mappings().all()
        except SQLAlchemyError as error:
            raise RuntimeError("transaction list read failed") from error

        return [self._db_transaction_map_row(row) for row in rows]

    def db_transaction_list_by_instrument(
        self,
        instrument_name: str,
        excluding_transaction_id: UUID | None = None,
    ) -> list[TransactionRecord]:
        """List one instrument's transactions in replay order.

        Args:
            instrument_name: Instrument name.
            excluding_transaction_id: Optional transaction to leave out.

        Returns:
            list[TransactionRecord]: Rows ordered by date then creation ascending.

        Raises:
            ValueError: Raised when instrument_name is blank.
            RuntimeError: Raised when database read fails.
        """

        normalized_name = db_validate_non_empty_text(instrument_name, "instrument_name")

        try:
            with self._engine.connect() as connection:
                rows = connection.execute(
                    text(
                        self._TRANSACTION_SELECT_COLUMNS
                        + "WHERE instrument_name = :instrument_name "
                        + "AND (CAST(:excluding_transaction_id AS uuid) IS NULL "
                        + "OR transaction_id <> CAST(:excluding_transaction_id AS uuid)) "
                        + "ORDER BY transaction_date asc, created_at_utc asc, transaction_id asc"
                    ),
                    {
                        "instrument_name": normalized_name,
                        "excluding_transaction_id": (
                            None if excluding_transaction_id is None else str(excluding_transaction_id)
                        ),
                    },
                ).mappings().all()
        except SQLAlchemyError as error:
            raise RuntimeError("instrument transaction read failed") from error

        return [self._db_transaction_map_row(row) for row in rows]

    def db_transaction_get_by_id(self, transaction_id: UUID) -> TransactionRecord | None:
        """Fetch one transaction by identifier.

        Raises:
            RuntimeError: Raised when database read fails.
        """

        try:
            with self._engine.connect() as connection:
                row = connection.execute(
                    text(self._TRANSACTION_SELECT_COLUMNS + "WHERE transaction_id = :transaction_id"),
                    {"transaction_id": transaction_id},
                ).mappings().first()
        except SQLAlchemyError as error:
            raise RuntimeError("transaction read failed") from error

        return None if row is None else self._db_transaction_map_row(row)

    def db_transaction_count_by_instrument(self, instrument_name: str) -> int:
        """Count transactions referencing one instrument.

        Raises:
            ValueError: Raised when instrument_name is blank.
            RuntimeError: Raised when database read fails.
        """

        normalized_name = db_validate_non_empty_text(instrument_name, "instrument_name")
        try:
            with self._engine.connect() as connection:
                count_value = connection.execute(
                    text("SELECT count(*) FROM trade_transaction WHERE instrument_name = :instrument_name"),
                    {"instrument_name": normalized_name},
                ).scalar_one()
        except SQLAlchemyError as error:
            raise RuntimeError("transaction count read failed") from error

        return int(count_value)

    def db_transaction_insert(self, request: TransactionInsertRequest) -> TransactionRecord:
        """Insert one transaction with computed values persisted verbatim.

        Args:
            request: Insert payload.

        Returns:
            TransactionRecord: Inserted row.

        Raises:
            ValueError: Raised when request is invalid.
            RuntimeError: Raised when persistence fails.
        """

        if request is None:
            raise ValueError("request must not be None")
        normalized_name = db_validate_non_empty_text(request.instrument_name, "instrument_name")

        try:
            with self._engine.begin() as connection:
                self._db_transaction_lock_instrument(connection, normalized_name)
                row = connection.execute(
                    text(
                        "INSERT INTO trade_transaction ("
                        "transaction_id, instrument_name, side, quantity, price, total_amount, original_quantity, "
                        "original_price, transaction_date, commission, tax, profit_loss, note, created_at_utc"
                        ") VALUES ("
                        ":transaction_id, :instrument_name, :side, :quantity, :price, :total_amount, "
                        ":original_quantity, :original_price, :transaction_date, :commission, :tax, "
                        ":profit_loss, :note, :created_at_utc"
                        ") "
                        + self._TRANSACTION_RETURNING_COLUMNS
                    ),
                    {
                        "transaction_id": request.transaction_id,
                        "instrument_name": normalized_name,
                        "side": request.side,
                        "quantity": request.quantity,
                        "price": request.price,
                        "total_amount": request.total_amount,
                        "original_quantity": request.original_quantity,
                        "original_price": request.original_price,
                        "transaction_date": request.transaction_date,
                        "commission": request.commission,
                        "tax": request.tax,
                        "profit_loss": request.profit_loss,
                        "note": db_validate_optional_text(request.note),
                        "created_at_utc": request.created_at_utc,
                    },
                ).mappings().one()
        except SQLAlchemyError as error:
            raise RuntimeError("transaction insert failed") from error

        return self._db_transaction_map_row(row)

    def db_transaction_update(self, request: TransactionUpdateRequest) -> TransactionRecord:
        """Apply one user edit. Original quantity and price are never written.

        Args:
            request: Update payload.

        Returns:
            TransactionRecord: Updated row.

        Raises:
            LookupError: Raised when the transaction does not exist.
            RuntimeError: Raised when persistence fails.
        """

        if request is None:
            raise ValueError("request must not be None")

        try:
            with self._engine.begin() as connection:
                instrument_name = self._db_transaction_instrument_name_or_raise(connection, request.transaction_id)
                self._db_transaction_lock_instrument(connection, instrument_name)
                row = connection.execute(
                    text(
                        "UPDATE trade_transaction SET "
                        "side = :side, transaction_date = :transaction_date, quantity = :quantity, "
                        "price = :price, total_amount = :total_amount, commission = :commission, "
                        "tax = :tax, profit_loss = :profit_loss, note = :note "
                        "WHERE transaction_id = :transaction_id "
                        + self._TRANSACTION_RETURNING_COLUMNS
                    ),
                    {
                        "transaction_id": request.transaction_id,
                        "side": request.side,
                        "transaction_date": request.transaction_date,
                        "quantity": request.quantity,
                        "price": request.price,
                        "total_amount": request.total_amount,
                        "commission": request.commission,
                        "tax": request.tax,
                        "profit_loss": request.profit_loss,
                        "note": db_validate_optional_text(request.note),
                    },
                ).mappings().one()
        except SQLAlchemyError as error:
            raise RuntimeError("transaction update failed") from error

        return self._db_transaction_map_row(row)

    def db_transaction_update_effective_many(
        self,
        instrument_name: str,
        requests: list[TransactionEffectiveUpdateRequest],
    ) -> int:
        """Write restated effective values inside one database transaction.

        Args:
            instrument_name: Instrument all requests belong to.
            requests: Effective-value updates.

        Returns:
            int: Number of rows updated.

        Raises:
            ValueError: Raised when instrument_name is blank.
            RuntimeError: Raised when persistence fails; no row is changed.
        """

        normalized_name = db_validate_non_empty_text(instrument_name, "instrument_name")
        if not requests:
            return 0

        updated_count = 0
        try:
            with self._engine.begin() as connection:
                self._db_transaction_lock_instrument(connection, normalized_name)
                for request in requests:
                    result = connection.execute(
                        text(
                            "UPDATE trade_transaction SET "
                            "quantity = :quantity, price = :price, total_amount = :total_amount "
                            "WHERE transaction_id = :transaction_id AND instrument_name = :instrument_name"
                        ),
                        {
                            "transaction_id": request.transaction_id,
                            "instrument_name": normalized_name,
                            "quantity": request.quantity,
                            "price": request.price,
                            "total_amount": request.total_amount,
                        },
                    )
                    updated_count += result.rowcount
        except SQLAlchemyError as error:
            raise RuntimeError("transaction restatement write failed") from error

        return updated_count

    def db_transaction_delete(self, transaction_id: UUID) -> bool:
        """Delete one transaction.

        Returns:
            bool: True when a row was removed.

        Raises:
            RuntimeError: Raised when persistence fails.
        """

        try:
            with self._engine.begin() as connection:
                instrument_row = connection.execute(
                    text("SELECT instrument_name FROM trade_transaction WHERE transaction_id = :transaction_id"),
                    {"transaction_id": transaction_id},
                ).mappings().first()
                if instrument_row is None:
                    return False
                self._db_transaction_lock_instrument(connection, instrument_row["instrument_name"])
                result = connection.execute(
                    text("DELETE FROM trade_transaction WHERE transaction_id = :transaction_id"),
                    {"transaction_id": transaction_id},
                )
        except SQLAlchemyError as error:
            raise RuntimeError("transaction delete failed") from error

        return result.rowcount > 0

    def _db_transaction_instrument_name_or_raise(self, connection: Connection, transaction_id: UUID) -> str:
        row = connection.execute(
            text("SELECT instrument_name FROM trade_transaction WHERE transaction_id = :transaction_id"),
            {"transaction_id": transaction_id},
        ).mappings().first()
        if row is None:
            raise LookupError(f"transaction_id={transaction_id} was not found")
        return row["instrument_name"]

    def _db_transaction_lock_instrument(self, connection: Connection, instrument_name: str) -> None:
        """Block until the instrument-scoped advisory lock is held for this transaction."""

        key_1, key_2 = db_build_instrument_lock_keys(instrument_name)
        connection.execute(
            text("SELECT pg_advisory_xact_lock(:key_1, :key_2)"),
            {"key_1": key_1, "key_2": key_2},
        )

    def _db_transaction_map_row(self, row: Any) -> TransactionRecord:
        return TransactionRecord(
            transaction_id=row["transaction_id"],
            instrument_name=row["instrument_name"],
            side=row["side"],
            quantity=row["quantity"],
            price=row["price"],
            total_amount=row["total_amount"],
            original_quantity=row["original_quantity"],
            original_price=row["original_price"],
            transaction_date=row["transaction_date"],
            commission=row["commission"],
            tax=row["tax"],
            profit_loss=row["profit_loss"],
            note=row["note"],
            created_at_utc=row["created_at_utc"],
        )


__all__ = ["SQLAlchemyTransactionStore"]
