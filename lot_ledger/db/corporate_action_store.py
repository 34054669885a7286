"""Database service for corporate action persistence."""
# pylint: disable=duplicate-code

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy import Connection, Engine, text
from sqlalchemy.exc import SQLAlchemyError

from lot_ledger.db.interfaces import CorporateActionRecord, CorporateActionStorePort, CorporateActionWriteRequest
from lot_ledger.db.validation import (
    db_build_instrument_lock_keys,
    db_validate_non_empty_text,
    db_validate_optional_text,
)


class SQLAlchemyCorporateActionStore(CorporateActionStorePort):
    """SQLAlchemy implementation for corporate action DB operations."""

    _ACTION_SELECT_COLUMNS = (
        "SELECT action_id, instrument_name, action_type, action_date, ratio, amount, note, created_at_utc "
        "FROM corporate_action "
    )
    _ACTION_RETURNING_COLUMNS = (
        "RETURNING action_id, instrument_name, action_type, action_date, ratio, amount, note, created_at_utc"
    )

    def __init__(self, engine: Engine):
        """Initialize corporate action store.

        Args:
            engine: SQLAlchemy engine used for persistence and reads.

        Raises:
            ValueError: Raised when engine is invalid.
        """

        if engine is None:
            raise ValueError("engine must not be None")
        self._engine = engine

    def db_corporate_action_list_all(self) -> list[CorporateActionRecord]:
        """List all actions, newest effective date first.

        Raises:
            RuntimeError: Raised when database read fails.
        """

        try:
            with self._engine.connect() as connection:
                rows = connection.execute(
                    text(
                        self._ACTION_SELECT_COLUMNS
                        + "ORDER BY action_date desc, created_at_utc desc, action_id desc"
                    )
                ).mappings().all()
        except SQLAlchemyError as error:
            raise RuntimeError("corporate action list read failed") from error

        return [self._db_corporate_action_map_row(row) for row in rows]

    def db_corporate_action_list_by_instrument(self, instrument_name: str) -> list[CorporateActionRecord]:
        """List one instrument's actions in application order.

        Args:
            instrument_name: Instrument name.

        Returns:
            list[CorporateActionRecord]: Rows ordered by date then creation ascending.

        Raises:
            ValueError: Raised when instrument_name is blank.
            RuntimeError: Raised when database read fails.
        """

        normalized_name = db_validate_non_empty_text(instrument_name, "instrument_name")
        try:
            with self._engine.connect() as connection:
                rows = connection.execute(
                    text(
                        self._ACTION_SELECT_COLUMNS
                        + "WHERE instrument_name = :instrument_name "
                        + "ORDER BY action_date asc, created_at_utc asc, action_id asc"
                    ),
                    {"instrument_name": normalized_name},
                ).mappings().all()
        except SQLAlchemyError as error:
            raise RuntimeError("instrument corporate action read failed") from error

        return [self._db_corporate_action_map_row(row) for row in rows]

    def db_corporate_action_get_by_id(self, action_id: UUID) -> CorporateActionRecord | None:
        """Fetch one action by identifier.

        Raises:
            RuntimeError: Raised when database read fails.
        """

        try:
            with self._engine.connect() as connection:
                row = connection.execute(
                    text(self._ACTION_SELECT_COLUMNS + "WHERE action_id = :action_id"),
                    {"action_id": action_id},
                ).mappings().first()
        except SQLAlchemyError as error:
            raise RuntimeError("corporate action read failed") from error

        return None if row is None else self._db_corporate_action_map_row(row)

    def db_corporate_action_insert(self, request: CorporateActionWriteRequest) -> CorporateActionRecord:
        """Insert one corporate action.

        Args:
            request: Write payload.

        Returns:
            CorporateActionRecord: Inserted row.

        Raises:
            ValueError: Raised when request is invalid.
            RuntimeError: Raised when persistence fails.
        """

        if request is None:
            raise ValueError("request must not be None")
        normalized_name = db_validate_non_empty_text(request.instrument_name, "instrument_name")

        try:
            with self._engine.begin() as connection:
                self._db_corporate_action_lock_instrument(connection, normalized_name)
                row = connection.execute(
                    text(
                        "INSERT INTO corporate_action ("
                        "instrument_name, action_type, action_date, ratio, amount, note, created_at_utc"
                        ") VALUES ("
                        ":instrument_name, :action_type, :action_date, :ratio, :amount, :note, now()"
                        ") "
                        + self._ACTION_RETURNING_COLUMNS
                    ),
                    self._db_corporate_action_params(request, normalized_name),
                ).mappings().one()
        except SQLAlchemyError as error:
            raise RuntimeError("corporate action insert failed") from error

        return self._db_corporate_action_map_row(row)

    def db_corporate_action_update(
        self,
        action_id: UUID,
        request: CorporateActionWriteRequest,
    ) -> CorporateActionRecord:
        """Replace one action's fields, keeping its identity and creation timestamp.

        Args:
            action_id: Target action identifier.
            request: Write payload.

        Returns:
            CorporateActionRecord: Updated row.

        Raises:
            LookupError: Raised when the action does not exist.
            RuntimeError: Raised when persistence fails.
        """

        if request is None:
            raise ValueError("request must not be None")
        normalized_name = db_validate_non_empty_text(request.instrument_name, "instrument_name")

        try:
            with self._engine.begin() as connection:
                previous_name = self._db_corporate_action_instrument_name(connection, action_id)
                if previous_name is None:
                    raise LookupError(f"action_id={action_id} was not found")
                # Sorted order keeps two concurrent moves from deadlocking.
                for instrument_name in sorted({previous_name, normalized_name}):
                    self._db_corporate_action_lock_instrument(connection, instrument_name)
                row = connection.execute(
                    text(
                        "UPDATE corporate_action SET "
                        "instrument_name = :instrument_name, action_type = :action_type, "
                        "action_date = :action_date, ratio = :ratio, amount = :amount, note = :note "
                        "WHERE action_id = :action_id "
                        + self._ACTION_RETURNING_COLUMNS
                    ),
                    {**self._db_corporate_action_params(request, normalized_name), "action_id": action_id},
                ).mappings().first()
        except SQLAlchemyError as error:
            raise RuntimeError("corporate action update failed") from error

        if row is None:
            raise LookupError(f"action_id={action_id} was not found")
        return self._db_corporate_action_map_row(row)

    def db_corporate_action_delete(self, action_id: UUID) -> bool:
        """Delete one action.

        Returns:
            bool: True when a row was removed.

        Raises:
            RuntimeError: Raised when persistence fails.
        """

        try:
            with self._engine.begin() as connection:
                instrument_name = self._db_corporate_action_instrument_name(connection, action_id)
                if instrument_name is None:
                    return False
                self._db_corporate_action_lock_instrument(connection, instrument_name)
                result = connection.execute(
                    text("DELETE FROM corporate_action WHERE action_id = :action_id"),
                    {"action_id": action_id},
                )
        except SQLAlchemyError as error:
            raise RuntimeError("corporate action delete failed") from error

        return result.rowcount > 0

    def _db_corporate_action_instrument_name(self, connection: Connection, action_id: UUID) -> str | None:
        row = connection.execute(
            text("SELECT instrument_name FROM corporate_action WHERE action_id = :action_id"),
            {"action_id": action_id},
        ).mappings().first()
        return None if row is None else row["instrument_name"]

    def _db_corporate_action_lock_instrument(self, connection: Connection, instrument_name: str) -> None:
        key_1, key_2 = db_build_instrument_lock_keys(instrument_name)
        connection.execute(
            text("SELECT pg_advisory_xact_lock(:key_1, :key_2)"),
            {"key_1": key_1, "key_2": key_2},
        )

    def _db_corporate_action_params(
        self,
        request: CorporateActionWriteRequest,
        normalized_name: str,
    ) -> dict[str, Any]:
        return {
            "instrument_name": normalized_name,
            "action_type": db_validate_non_empty_text(request.action_type, "action_type"),
            "action_date": request.action_date,
            "ratio": request.ratio,
            "amount": request.amount,
            "note": db_validate_optional_text(request.note),
        }

    def _db_corporate_action_map_row(self, row: Any) -> CorporateActionRecord:
        return CorporateActionRecord(
            action_id=row["action_id"],
            instrument_name=row["instrument_name"],
            action_type=row["action_type"],
            action_date=row["action_date"],
            ratio=row["ratio"],
            amount=row["amount"],
            note=row["note"],
            created_at_utc=row["created_at_utc"],
        )


__all__ = ["SQLAlchemyCorporateActionStore"]
