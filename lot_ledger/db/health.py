"""Ledger database reachability and schema-revision check."""

from sqlalchemy import Engine, text
from sqlalchemy.exc import ProgrammingError, SQLAlchemyError

from lot_ledger.domain import HealthStatus

from .interfaces import DatabaseHealthPort

HEALTH_STATUS_OK = "ok"
HEALTH_STATUS_UNMIGRATED = "unmigrated"


class SQLAlchemyDatabaseHealthService(DatabaseHealthPort):
    """Report whether the ledger database is reachable and migrated.

    A reachable database without the `alembic_version` table is reported as
    `unmigrated` rather than raising, so the API can answer with a clear
    operator hint.
    """

    def __init__(self, engine: Engine):
        if engine is None:
            raise ValueError("engine must not be None")
        self._engine = engine

    def db_connection_label(self) -> str:
        """Return the target database URL with the password masked."""

        return self._engine.url.render_as_string(hide_password=True)

    def db_check_health(self) -> HealthStatus:
        """Read the applied schema revision.

        Returns:
            HealthStatus: `ok` with the revision, or `unmigrated` when no revision is recorded.

        Raises:
            ConnectionError: Raised when the database cannot be reached.
        """

        try:
            with self._engine.connect() as connection:
                revision = connection.execute(text("SELECT version_num FROM alembic_version")).scalar()
        except ProgrammingError:
            return HealthStatus(
                status=HEALTH_STATUS_UNMIGRATED,
                detail="ledger schema missing; run `alembic upgrade head`",
            )
        except SQLAlchemyError as error:
            raise ConnectionError("ledger database connectivity check failed") from error

        if revision is None:
            return HealthStatus(status=HEALTH_STATUS_UNMIGRATED, detail="no ledger schema revision recorded")
        return HealthStatus(status=HEALTH_STATUS_OK, detail=f"ledger schema revision={revision}")


__all__ = ["HEALTH_STATUS_OK", "HEALTH_STATUS_UNMIGRATED", "SQLAlchemyDatabaseHealthService"]
