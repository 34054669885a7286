"""Regression tests for fixed SQL templates and advisory locking in db-layer stores."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError, ProgrammingError

from lot_ledger.db.corporate_action_store import SQLAlchemyCorporateActionStore
from lot_ledger.db.health import SQLAlchemyDatabaseHealthService
from lot_ledger.db.instrument_store import SQLAlchemyInstrumentStore
from lot_ledger.db.interfaces import CorporateActionWriteRequest, TransactionEffectiveUpdateRequest
from lot_ledger.db.transaction_store import SQLAlchemyTransactionStore
from lot_ledger.db.validation import db_build_instrument_lock_keys


class _ResultStub:
    """SQLAlchemy-like result wrapper returning fixed rows."""

    def __init__(self, rows: list[dict], rowcount: int = 1):
        self._rows = rows
        self.rowcount = rowcount

    def mappings(self) -> _ResultStub:
        return self

    def all(self) -> list[dict]:
        return self._rows

    def first(self) -> dict | None:
        return self._rows[0] if self._rows else None

    def one(self) -> dict:
        return self._rows[0]

    def scalar_one(self) -> int:
        return len(self._rows)

    def scalar(self):
        return next(iter(self._rows[0].values())) if self._rows else None


class _ConnectionStub:
    """Connection stub capturing executed SQL and parameters.

    `rows_by_keyword` maps a SQL keyword to the rows returned by statements
    containing it; statements matching nothing return no rows.
    """

    def __init__(self, rows_by_keyword: dict[str, list[dict]] | None = None, error: Exception | None = None):
        self._rows_by_keyword = rows_by_keyword or {}
        self._error = error
        self.executed_queries: list[str] = []
        self.executed_parameters: list[dict] = []

    def __enter__(self) -> _ConnectionStub:
        return self

    def __exit__(self, exc_type, exc, traceback) -> bool:
        _ = (exc_type, exc, traceback)
        return False

    def execute(self, statement, parameters: dict | None = None):
        """Capture execute input and return rows keyed by statement keyword.

        Raises:
            Exception: The configured error, when one is set.
        """

        if self._error is not None:
            raise self._error
        statement_text = getattr(statement, "text", str(statement))
        self.executed_queries.append(statement_text)
        self.executed_parameters.append(parameters or {})
        for keyword, rows in self._rows_by_keyword.items():
            if keyword in statement_text:
                return _ResultStub(rows=rows, rowcount=len(rows) or 1)
        return _ResultStub(rows=[])


class _EngineStub:
    """Engine stub handing out one connection for reads and transactions."""

    def __init__(self, connection: _ConnectionStub):
        self._connection = connection
        self.begin_calls = 0

    def connect(self) -> _ConnectionStub:
        return self._connection

    def begin(self) -> _ConnectionStub:
        self.begin_calls += 1
        return self._connection


def test_db_transaction_list_by_instrument_uses_replay_order_and_exclusion() -> None:
    """Order by date, creation and id ascending and pass the excluded id as text.

    Returns:
        None: Assertions validate the SQL template and parameters.

    Raises:
        AssertionError: Raised when the query template deviates.
    """

    connection = _ConnectionStub()
    store = SQLAlchemyTransactionStore(engine=_EngineStub(connection))
    excluded_id = uuid4()

    store.db_transaction_list_by_instrument(" ACME ", excluding_transaction_id=excluded_id)

    query = connection.executed_queries[0]
    assert "WHERE instrument_name = :instrument_name" in query
    assert "transaction_id <> CAST(:excluding_transaction_id AS uuid)" in query
    assert query.endswith("ORDER BY transaction_date asc, created_at_utc asc, transaction_id asc")
    assert connection.executed_parameters[0] == {
        "instrument_name": "ACME",
        "excluding_transaction_id": str(excluded_id),
    }


def test_db_transaction_list_all_orders_newest_first() -> None:
    """Order the unfiltered listing by date and creation descending."""

    connection = _ConnectionStub()

    SQLAlchemyTransactionStore(engine=_EngineStub(connection)).db_transaction_list_all()

    assert connection.executed_queries[0].endswith(
        "ORDER BY transaction_date desc, created_at_utc desc, transaction_id desc"
    )


def test_db_transaction_effective_update_locks_instrument_once_in_one_transaction() -> None:
    """Take the instrument advisory lock before writing every restated row.

    Returns:
        None: Assertions validate lock and update statements.

    Raises:
        AssertionError: Raised when rows are written without the lock.
    """

    connection = _ConnectionStub(rows_by_keyword={"UPDATE trade_transaction": [{}]})
    engine = _EngineStub(connection)
    store = SQLAlchemyTransactionStore(engine=engine)
    requests = [
        TransactionEffectiveUpdateRequest(uuid4(), Decimal("200"), Decimal("10.00"), Decimal("2000.00")),
        TransactionEffectiveUpdateRequest(uuid4(), Decimal("50"), Decimal("9.50"), Decimal("475.00")),
    ]

    updated_count = store.db_transaction_update_effective_many("ACME", requests)

    key_1, key_2 = db_build_instrument_lock_keys("ACME")
    assert updated_count == 2
    assert engine.begin_calls == 1
    assert connection.executed_queries[0] == "SELECT pg_advisory_xact_lock(:key_1, :key_2)"
    assert connection.executed_parameters[0] == {"key_1": key_1, "key_2": key_2}
    assert all(query.startswith("UPDATE trade_transaction SET quantity") for query in connection.executed_queries[1:])
    assert [parameters["transaction_id"] for parameters in connection.executed_parameters[1:]] == [
        request.transaction_id for request in requests
    ]


def test_db_transaction_effective_update_skips_database_for_empty_batch() -> None:
    """Return zero without opening a transaction when nothing changed."""

    connection = _ConnectionStub()
    engine = _EngineStub(connection)

    assert SQLAlchemyTransactionStore(engine=engine).db_transaction_update_effective_many("ACME", []) == 0
    assert engine.begin_calls == 0
    assert connection.executed_queries == []


def test_db_transaction_delete_missing_row_returns_false_without_lock() -> None:
    """Report a missing transaction without deleting or locking."""

    connection = _ConnectionStub()

    deleted = SQLAlchemyTransactionStore(engine=_EngineStub(connection)).db_transaction_delete(uuid4())

    assert deleted is False
    assert len(connection.executed_queries) == 1
    assert connection.executed_queries[0].startswith("SELECT instrument_name FROM trade_transaction")


def test_db_transaction_read_failure_maps_to_runtime_error() -> None:
    """Wrap driver failures in a deterministic runtime error."""

    connection = _ConnectionStub(error=OperationalError("SELECT 1", {}, Exception("down")))

    with pytest.raises(RuntimeError, match="transaction list read failed"):
        SQLAlchemyTransactionStore(engine=_EngineStub(connection)).db_transaction_list_all()


def test_db_corporate_action_update_locks_previous_and_new_instrument_in_name_order() -> None:
    """Lock both instruments, sorted by name, when an action moves.

    Returns:
        None: Assertions validate lock ordering.

    Raises:
        AssertionError: Raised when an affected instrument is not locked.
    """

    action_id = uuid4()
    returned_row = {
        "action_id": action_id,
        "instrument_name": "ACME",
        "action_type": "SPLIT",
        "action_date": date(2026, 2, 1),
        "ratio": Decimal("0.5"),
        "amount": None,
        "note": None,
        "created_at_utc": None,
    }
    connection = _ConnectionStub(
        rows_by_keyword={
            "SELECT instrument_name FROM corporate_action": [{"instrument_name": "ZETA"}],
            "UPDATE corporate_action": [returned_row],
        }
    )
    store = SQLAlchemyCorporateActionStore(engine=_EngineStub(connection))

    record = store.db_corporate_action_update(
        action_id,
        CorporateActionWriteRequest("ACME", "SPLIT", date(2026, 2, 1), Decimal("0.5"), None, None),
    )

    lock_parameters = [
        parameters
        for query, parameters in zip(connection.executed_queries, connection.executed_parameters)
        if "pg_advisory_xact_lock" in query
    ]
    expected_keys = [db_build_instrument_lock_keys(name) for name in ("ACME", "ZETA")]
    assert [(item["key_1"], item["key_2"]) for item in lock_parameters] == expected_keys
    assert record.instrument_name == "ACME"


def test_db_corporate_action_update_missing_row_raises_lookup_error() -> None:
    """Raise LookupError before locking when the action does not exist."""

    connection = _ConnectionStub()
    store = SQLAlchemyCorporateActionStore(engine=_EngineStub(connection))

    with pytest.raises(LookupError):
        store.db_corporate_action_update(
            uuid4(),
            CorporateActionWriteRequest("ACME", "DIVIDEND", date(2026, 2, 1), None, Decimal("1"), None),
        )
    assert not any("pg_advisory_xact_lock" in query for query in connection.executed_queries)


def test_db_instrument_insert_duplicate_maps_to_value_error() -> None:
    """Map unique-constraint violations to ValueError."""

    connection = _ConnectionStub(error=IntegrityError("INSERT", {}, Exception("uq_instrument_name")))

    with pytest.raises(ValueError, match="already exists"):
        SQLAlchemyInstrumentStore(engine=_EngineStub(connection)).db_instrument_insert("ACME", "domestic-equity")


def test_db_instrument_lock_keys_are_deterministic_signed_int32() -> None:
    """Derive stable int32 lock keys from the stripped instrument name."""

    key_1, key_2 = db_build_instrument_lock_keys("ACME")

    assert (key_1, key_2) == db_build_instrument_lock_keys("  ACME  ")
    assert (key_1, key_2) != db_build_instrument_lock_keys("BETA")
    assert all(-(2**31) <= key <= 2**31 - 1 for key in (key_1, key_2))


@pytest.mark.parametrize(
    ("connection", "status", "detail"),
    [
        (
            _ConnectionStub(rows_by_keyword={"alembic_version": [{"version_num": "20261019_01"}]}),
            "ok",
            "ledger schema revision=20261019_01",
        ),
        (_ConnectionStub(), "unmigrated", "no ledger schema revision recorded"),
        (
            _ConnectionStub(error=ProgrammingError("SELECT", {}, Exception("relation does not exist"))),
            "unmigrated",
            "ledger schema missing; run `alembic upgrade head`",
        ),
    ],
)
def test_db_health_reports_schema_revision_state(connection: _ConnectionStub, status: str, detail: str) -> None:
    """Report the applied revision, or `unmigrated` when none is recorded."""

    health = SQLAlchemyDatabaseHealthService(engine=_EngineStub(connection)).db_check_health()

    assert (health.status, health.detail) == (status, detail)


def test_db_health_maps_driver_failure_to_connection_error() -> None:
    """Raise ConnectionError when the database cannot be reached."""

    connection = _ConnectionStub(error=OperationalError("SELECT", {}, Exception("refused")))

    with pytest.raises(ConnectionError, match="connectivity check failed"):
        SQLAlchemyDatabaseHealthService(engine=_EngineStub(connection)).db_check_health()
