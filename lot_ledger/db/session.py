"""Database engine construction.

All SQLAlchemy engine creation goes through this module so the db package
stays the only place that knows about connection pooling.
"""

from sqlalchemy import Engine, create_engine


def db_create_engine(database_url: str, echo: bool = False) -> Engine:
    """Create the SQLAlchemy engine for ledger database access.

    Args:
        database_url: SQLAlchemy database URL.
        echo: Whether SQLAlchemy logs emitted SQL statements.

    Returns:
        Engine: Configured SQLAlchemy engine.

    Raises:
        ValueError: Raised when the database URL is blank.
    """

    if not database_url.strip():
        raise ValueError("database_url must not be blank")

    return create_engine(database_url, pool_pre_ping=True, echo=echo)
