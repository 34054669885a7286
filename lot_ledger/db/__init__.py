"""Database layer package for all SQL and persistence boundaries."""

from .corporate_action_store import SQLAlchemyCorporateActionStore
from .health import HEALTH_STATUS_OK, HEALTH_STATUS_UNMIGRATED, SQLAlchemyDatabaseHealthService
from .instrument_store import SQLAlchemyInstrumentStore
from .interfaces import (
	CorporateActionRecord,
	CorporateActionStorePort,
	CorporateActionWriteRequest,
	DatabaseHealthPort,
	InstrumentRecord,
	InstrumentStorePort,
	TransactionEffectiveUpdateRequest,
	TransactionInsertRequest,
	TransactionRecord,
	TransactionStorePort,
	TransactionUpdateRequest,
)
from .session import db_create_engine
from .transaction_store import SQLAlchemyTransactionStore

__all__ = [
	"CorporateActionRecord",
	"CorporateActionStorePort",
	"CorporateActionWriteRequest",
	"DatabaseHealthPort",
	"InstrumentRecord",
	"InstrumentStorePort",
	"TransactionEffectiveUpdateRequest",
	"TransactionInsertRequest",
	"TransactionRecord",
	"TransactionStorePort",
	"TransactionUpdateRequest",
	"HEALTH_STATUS_OK",
	"HEALTH_STATUS_UNMIGRATED",
	"SQLAlchemyCorporateActionStore",
	"SQLAlchemyDatabaseHealthService",
	"SQLAlchemyInstrumentStore",
	"SQLAlchemyTransactionStore",
	"db_create_engine",
]
