"""Main module entrypoint for local runtime execution.

This module validates startup configuration, configures logging and either
launches the FastAPI service or runs one restatement sync.
"""

import argparse
import logging

import uvicorn

from lot_ledger.bootstrap import bootstrap_create_application, bootstrap_create_services
from lot_ledger.config import AppSettings, config_load_settings
from lot_ledger.domain import LedgerError

logger = logging.getLogger(__name__)


def main() -> None:
    """Run selected runtime command with validated startup configuration.

    Raises:
        SettingsLoadError: Raised when configuration validation fails.
        SystemExit: Raised with status 1 when a sync fails.
    """

    argument_parser = argparse.ArgumentParser(description="Lot ledger runtime entrypoint")
    argument_parser.add_argument(
        "command",
        nargs="?",
        default="api",
        choices=("api", "sync-instrument"),
        help="Runtime command: `api` starts server, `sync-instrument` restates one instrument's "
        "transactions from their original values",
        type=str,
    )
    argument_parser.add_argument(
        "--instrument-name",
        dest="instrument_name",
        type=str,
        help="Instrument name for `sync-instrument`",
    )
    parsed_arguments = argument_parser.parse_args()

    settings = config_load_settings()
    main_configure_logging(settings)

    if parsed_arguments.command == "sync-instrument":
        if not (parsed_arguments.instrument_name or "").strip():
            argument_parser.error("--instrument-name is required for `sync-instrument`")
        services = bootstrap_create_services(settings)
        try:
            sync_result = services.corporate_action_service.ledger_corporate_action_sync_instrument(
                parsed_arguments.instrument_name
            )
        except LedgerError as error:
            logger.error("sync failed instrument=%s code=%s: %s", parsed_arguments.instrument_name, error.error_code, error)
            raise SystemExit(1) from error
        print(f"{sync_result.instrument_name}: {sync_result.message}")
        return

    application = bootstrap_create_application(settings)
    uvicorn.run(
        application,
        host=settings.application_host,
        port=settings.application_port,
        log_level=settings.log_level.lower(),
    )


def main_configure_logging(settings: AppSettings) -> None:
    """Configure root logging from validated settings."""

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


if __name__ == "__main__":
    main()
