"""Ledger layer package for lot matching, restatement and ledger services."""

from .corporate_action_service import CorporateActionLedgerService
from .fees import FEE_FALLBACK_INSTRUMENT_CLASS, FeeComputationResult, fee_compute
from .instrument_service import InstrumentLedgerService
from .interfaces import (
	CorporateActionChangeResult,
	CorporateActionCommand,
	InstrumentDetail,
	LedgerCorporateActionPort,
	LedgerInstrumentPort,
	LedgerTransactionPort,
	SyncResult,
	TransactionCreateCommand,
	TransactionEditCommand,
)
from .lot_engine import (
	CLOSED_LOT_LONG,
	CLOSED_LOT_SHORT,
	DIRECTION_LONG,
	DIRECTION_SHORT,
	ClosedLotRecord,
	LotBook,
	LotLedgerComputationRequest,
	LotLedgerComputationResult,
	LotTradeInput,
	OpenLot,
	OpenLotResult,
	TransactionMatchResult,
	lot_apply_transaction,
	lot_derive_ledger,
)
from .restatement import (
	RestatedTransaction,
	RestatementActionInput,
	RestatementTransactionInput,
	restate_transaction,
	restate_transactions,
)
from .stats import InstrumentStats, LedgerStats, StatsTransactionInput, stats_aggregate
from .transaction_service import TransactionLedgerService

__all__ = [
	"FEE_FALLBACK_INSTRUMENT_CLASS",
	"FeeComputationResult",
	"fee_compute",
	"CLOSED_LOT_LONG",
	"CLOSED_LOT_SHORT",
	"DIRECTION_LONG",
	"DIRECTION_SHORT",
	"ClosedLotRecord",
	"LotBook",
	"LotLedgerComputationRequest",
	"LotLedgerComputationResult",
	"LotTradeInput",
	"OpenLot",
	"OpenLotResult",
	"TransactionMatchResult",
	"lot_apply_transaction",
	"lot_derive_ledger",
	"RestatedTransaction",
	"RestatementActionInput",
	"RestatementTransactionInput",
	"restate_transaction",
	"restate_transactions",
	"InstrumentStats",
	"LedgerStats",
	"StatsTransactionInput",
	"stats_aggregate",
	"CorporateActionChangeResult",
	"CorporateActionCommand",
	"InstrumentDetail",
	"LedgerCorporateActionPort",
	"LedgerInstrumentPort",
	"LedgerTransactionPort",
	"SyncResult",
	"TransactionCreateCommand",
	"TransactionEditCommand",
	"CorporateActionLedgerService",
	"InstrumentLedgerService",
	"TransactionLedgerService",
]
