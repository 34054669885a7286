"""FastAPI application factory for the lot ledger service."""

from fastapi import FastAPI

from lot_ledger.config import AppSettings
from lot_ledger.db import DatabaseHealthPort
from lot_ledger.ledger import LedgerCorporateActionPort, LedgerInstrumentPort, LedgerTransactionPort

from .errors import api_register_error_handlers
from .routers import (
    api_create_corporate_action_router,
    api_create_health_router,
    api_create_instrument_router,
    api_create_sync_router,
    api_create_transaction_router,
)


def create_api_application(
    settings: AppSettings,
    db_health_service: DatabaseHealthPort,
    instrument_service: LedgerInstrumentPort,
    transaction_service: LedgerTransactionPort,
    corporate_action_service: LedgerCorporateActionPort,
) -> FastAPI:
    """Create the FastAPI application instance for the service.

    Args:
        settings: Validated application settings used for runtime metadata.
        db_health_service: Database health service used by health endpoints.
        instrument_service: Instrument master data, detail and statistics service.
        transaction_service: Transaction lifecycle service.
        corporate_action_service: Corporate action lifecycle and sync service.

    Returns:
        FastAPI: Framework application instance with all routers mounted.
    """
    application = FastAPI(title="Lot Ledger")
    api_register_error_handlers(application)

    @application.get("/", tags=["foundation"])
    def foundation_index() -> dict[str, str]:
        """Return service identification for bootstrap verification."""

        return {
            "service": "lot-ledger",
            "status": "ready",
            "environment": settings.environment_name,
        }

    application.include_router(api_create_health_router(db_health_service=db_health_service))
    application.include_router(
        api_create_instrument_router(settings=settings, instrument_service=instrument_service)
    )
    application.include_router(
        api_create_transaction_router(
            settings=settings,
            transaction_service=transaction_service,
            instrument_service=instrument_service,
        )
    )
    application.include_router(
        api_create_corporate_action_router(settings=settings, corporate_action_service=corporate_action_service)
    )
    application.include_router(api_create_sync_router(corporate_action_service=corporate_action_service))

    return application
