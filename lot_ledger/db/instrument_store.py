"""Database service for instrument master data."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy import Engine, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from lot_ledger.db.interfaces import InstrumentRecord, InstrumentStorePort
from lot_ledger.db.validation import db_validate_non_empty_text


class SQLAlchemyInstrumentStore(InstrumentStorePort):
    """SQLAlchemy implementation for instrument reads and writes."""

    _INSTRUMENT_SELECT_COLUMNS = "SELECT instrument_id, name, instrument_class, created_at_utc FROM instrument "

    def __init__(self, engine: Engine):
        """Initialize instrument store.

        Args:
            engine: SQLAlchemy engine used for persistence and reads.

        Raises:
            ValueError: Raised when engine is invalid.
        """

        if engine is None:
            raise ValueError("engine must not be None")
        self._engine = engine

    def db_instrument_list(self) -> list[InstrumentRecord]:
        """List instruments ordered by name.

        Returns:
            list[InstrumentRecord]: All instrument rows.

        Raises:
            RuntimeError: Raised when database read fails.
        """

        try:
            with self._engine.connect() as connection:
                rows = connection.execute(
                    text(self._INSTRUMENT_SELECT_COLUMNS + "ORDER BY name asc")
                ).mappings().all()
        except SQLAlchemyError as error:
            raise RuntimeError("instrument list read failed") from error

        return [self._db_instrument_map_row(row) for row in rows]

    def db_instrument_get_by_id(self, instrument_id: UUID) -> InstrumentRecord | None:
        """Fetch one instrument by identifier.

        Raises:
            RuntimeError: Raised when database read fails.
        """

        try:
            with self._engine.connect() as connection:
                row = connection.execute(
                    text(self._INSTRUMENT_SELECT_COLUMNS + "WHERE instrument_id = :instrument_id"),
                    {"instrument_id": instrument_id},
                ).mappings().first()
        except SQLAlchemyError as error:
            raise RuntimeError("instrument read failed") from error

        return None if row is None else self._db_instrument_map_row(row)

    def db_instrument_get_by_name(self, name: str) -> InstrumentRecord | None:
        """Fetch one instrument by unique name.

        Raises:
            ValueError: Raised when name is blank.
            RuntimeError: Raised when database read fails.
        """

        normalized_name = db_validate_non_empty_text(name, "name")
        try:
            with self._engine.connect() as connection:
                row = connection.execute(
                    text(self._INSTRUMENT_SELECT_COLUMNS + "WHERE name = :name"),
                    {"name": normalized_name},
                ).mappings().first()
        except SQLAlchemyError as error:
            raise RuntimeError("instrument read failed") from error

        return None if row is None else self._db_instrument_map_row(row)

    def db_instrument_insert(self, name: str, instrument_class: str) -> InstrumentRecord:
        """Insert one instrument.

        Args:
            name: Unique instrument name.
            instrument_class: Fee schedule selector.

        Returns:
            InstrumentRecord: Inserted row.

        Raises:
            ValueError: Raised when inputs are blank or the name already exists.
            RuntimeError: Raised when persistence fails.
        """

        normalized_name = db_validate_non_empty_text(name, "name")
        normalized_class = db_validate_non_empty_text(instrument_class, "instrument_class")

        try:
            with self._engine.begin() as connection:
                row = connection.execute(
                    text(
                        "INSERT INTO instrument (name, instrument_class, created_at_utc) "
                        "VALUES (:name, :instrument_class, now()) "
                        "RETURNING instrument_id, name, instrument_class, created_at_utc"
                    ),
                    {"name": normalized_name, "instrument_class": normalized_class},
                ).mappings().one()
        except IntegrityError as error:
            raise ValueError(f"instrument name={normalized_name} already exists") from error
        except SQLAlchemyError as error:
            raise RuntimeError("instrument insert failed") from error

        return self._db_instrument_map_row(row)

    def db_instrument_delete(self, instrument_id: UUID) -> bool:
        """Delete one instrument.

        Returns:
            bool: True when a row was removed.

        Raises:
            RuntimeError: Raised when persistence fails.
        """

        try:
            with self._engine.begin() as connection:
                result = connection.execute(
                    text("DELETE FROM instrument WHERE instrument_id = :instrument_id"),
                    {"instrument_id": instrument_id},
                )
        except SQLAlchemyError as error:
            raise RuntimeError("instrument delete failed") from error

        return result.rowcount > 0

    def _db_instrument_map_row(self, row: Any) -> InstrumentRecord:
        return InstrumentRecord(
            instrument_id=row["instrument_id"],
            name=row["name"],
            instrument_class=row["instrument_class"],
            created_at_utc=row["created_at_utc"],
        )


__all__ = ["SQLAlchemyInstrumentStore"]
