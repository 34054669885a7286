"""Typed domain models and vocabulary shared across runtime layers."""

from dataclasses import dataclass

SIDE_BUY = "BUY"
SIDE_SELL = "SELL"
TRANSACTION_SIDES = frozenset({SIDE_BUY, SIDE_SELL})

ACTION_DIVIDEND = "DIVIDEND"
ACTION_SPLIT = "SPLIT"
ACTION_REVERSE_SPLIT = "REVERSE_SPLIT"
CORPORATE_ACTION_TYPES = frozenset({ACTION_DIVIDEND, ACTION_SPLIT, ACTION_REVERSE_SPLIT})
RATIO_ACTION_TYPES = frozenset({ACTION_SPLIT, ACTION_REVERSE_SPLIT})

INSTRUMENT_CLASS_DOMESTIC_EQUITY = "domestic-equity"
INSTRUMENT_CLASS_CROSS_BORDER_EQUITY = "cross-border-equity"
INSTRUMENT_CLASS_FOREIGN_EQUITY = "foreign-equity"
INSTRUMENT_CLASSES = frozenset(
    {
        INSTRUMENT_CLASS_DOMESTIC_EQUITY,
        INSTRUMENT_CLASS_CROSS_BORDER_EQUITY,
        INSTRUMENT_CLASS_FOREIGN_EQUITY,
    }
)


@dataclass(frozen=True)
class AppMetadata:
    """Static application metadata for runtime identification.

    Attributes:
        application_name: Human-readable app name.
        environment_name: Runtime environment label.
    """

    application_name: str
    environment_name: str


@dataclass(frozen=True)
class HealthStatus:
    """Health response contract used by health-check surfaces.

    Attributes:
        status: Overall status text for service health.
        detail: Additional message suitable for operational diagnostics.
    """

    status: str
    detail: str
