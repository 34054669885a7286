"""Application bootstrap wiring for startup validation and dependency assembly."""

from dataclasses import dataclass

from fastapi import FastAPI

from lot_ledger.api import create_api_application
from lot_ledger.config import AppSettings, config_load_settings
from lot_ledger.db import (
    SQLAlchemyCorporateActionStore,
    SQLAlchemyDatabaseHealthService,
    SQLAlchemyInstrumentStore,
    SQLAlchemyTransactionStore,
    db_create_engine,
)
from lot_ledger.ledger import CorporateActionLedgerService, InstrumentLedgerService, TransactionLedgerService


@dataclass(frozen=True)
class LedgerServices:
    """Fully wired runtime services sharing one database engine.

    Attributes:
        db_health_service: Database connectivity checks.
        instrument_service: Instrument master data, detail and statistics.
        transaction_service: Transaction lifecycle.
        corporate_action_service: Corporate action lifecycle and restatement sync.
    """

    db_health_service: SQLAlchemyDatabaseHealthService
    instrument_service: InstrumentLedgerService
    transaction_service: TransactionLedgerService
    corporate_action_service: CorporateActionLedgerService


def bootstrap_create_services(settings: AppSettings) -> LedgerServices:
    """Build stores and ledger services from validated settings.

    Args:
        settings: Validated runtime settings.

    Returns:
        LedgerServices: Wired services.

    Raises:
        ValueError: Raised when the database URL is blank.
    """

    engine = db_create_engine(database_url=settings.database_url, echo=settings.database_echo)
    instrument_store = SQLAlchemyInstrumentStore(engine=engine)
    transaction_store = SQLAlchemyTransactionStore(engine=engine)
    corporate_action_store = SQLAlchemyCorporateActionStore(engine=engine)

    return LedgerServices(
        db_health_service=SQLAlchemyDatabaseHealthService(engine=engine),
        instrument_service=InstrumentLedgerService(
            instrument_store=instrument_store,
            transaction_store=transaction_store,
            corporate_action_store=corporate_action_store,
        ),
        transaction_service=TransactionLedgerService(
            transaction_store=transaction_store,
            corporate_action_store=corporate_action_store,
            instrument_store=instrument_store,
        ),
        corporate_action_service=CorporateActionLedgerService(
            corporate_action_store=corporate_action_store,
            transaction_store=transaction_store,
            instrument_store=instrument_store,
        ),
    )


def bootstrap_create_application(settings: AppSettings | None = None) -> FastAPI:
    """Assemble the runtime application after validating startup configuration.

    Args:
        settings: Optional pre-loaded settings; loaded from the environment when omitted.

    Returns:
        FastAPI: Fully initialized FastAPI application instance.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    resolved_settings = settings or config_load_settings()
    services = bootstrap_create_services(resolved_settings)
    return create_api_application(
        settings=resolved_settings,
        db_health_service=services.db_health_service,
        instrument_service=services.instrument_service,
        transaction_service=services.transaction_service,
        corporate_action_service=services.corporate_action_service,
    )
