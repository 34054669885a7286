"""Domain models used across application layer boundaries."""

from .errors import (
	LedgerConflictError,
	LedgerError,
	LedgerInvariantError,
	LedgerNotFoundError,
	LedgerValidationError,
)
from .models import (
	ACTION_DIVIDEND,
	ACTION_REVERSE_SPLIT,
	ACTION_SPLIT,
	CORPORATE_ACTION_TYPES,
	INSTRUMENT_CLASS_CROSS_BORDER_EQUITY,
	INSTRUMENT_CLASS_DOMESTIC_EQUITY,
	INSTRUMENT_CLASS_FOREIGN_EQUITY,
	INSTRUMENT_CLASSES,
	RATIO_ACTION_TYPES,
	SIDE_BUY,
	SIDE_SELL,
	TRANSACTION_SIDES,
	AppMetadata,
	HealthStatus,
)
from .numbers import ZERO, domain_round_money, domain_round_quantity

__all__ = [
	"AppMetadata",
	"HealthStatus",
	"LedgerError",
	"LedgerValidationError",
	"LedgerNotFoundError",
	"LedgerInvariantError",
	"LedgerConflictError",
	"SIDE_BUY",
	"SIDE_SELL",
	"TRANSACTION_SIDES",
	"ACTION_DIVIDEND",
	"ACTION_SPLIT",
	"ACTION_REVERSE_SPLIT",
	"CORPORATE_ACTION_TYPES",
	"RATIO_ACTION_TYPES",
	"INSTRUMENT_CLASS_DOMESTIC_EQUITY",
	"INSTRUMENT_CLASS_CROSS_BORDER_EQUITY",
	"INSTRUMENT_CLASS_FOREIGN_EQUITY",
	"INSTRUMENT_CLASSES",
	"ZERO",
	"domain_round_money",
	"domain_round_quantity",
]
