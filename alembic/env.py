"""Alembic environment for the lot ledger schema.

An explicit `sqlalchemy.url`, set in `alembic.ini` or on a programmatic
`Config`, wins. Otherwise the URL is read from `DATABASE_URL` through
`config_load_database_url`, which needs only the database settings and not
the full runtime configuration. The migrations are hand-written, so no
metadata is attached for autogenerate.
"""
# pylint: disable=no-member,invalid-name,wrong-import-order

import logging
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, make_url, pool

from lot_ledger.config import config_load_database_url

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

logger = logging.getLogger("alembic.env")


def _alembic_resolve_database_url() -> str:
    """Return the configured URL, falling back to `DATABASE_URL` and storing it on the config."""

    configured_url = config.get_main_option("sqlalchemy.url")
    if not configured_url:
        configured_url = config_load_database_url()
        config.set_main_option("sqlalchemy.url", configured_url)
    logger.info("migrating ledger schema on %s", make_url(configured_url).render_as_string(hide_password=True))
    return configured_url


def run_migrations_offline(database_url: str) -> None:
    """Emit migration SQL for `database_url` without connecting."""

    context.configure(
        url=database_url,
        target_metadata=None,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply migrations over one connection that uses no pooling."""

    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=None)
        with context.begin_transaction():
            context.run_migrations()


_database_url = _alembic_resolve_database_url()
if context.is_offline_mode():
    run_migrations_offline(_database_url)
else:
    run_migrations_online()
