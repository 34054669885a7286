"""Corporate action lifecycle service and per-instrument restatement sync."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from uuid import UUID

from lot_ledger.db import (
    CorporateActionRecord,
    CorporateActionStorePort,
    CorporateActionWriteRequest,
    InstrumentStorePort,
    TransactionEffectiveUpdateRequest,
    TransactionStorePort,
)
from lot_ledger.domain import (
    ACTION_DIVIDEND,
    CORPORATE_ACTION_TYPES,
    LedgerNotFoundError,
    LedgerValidationError,
)

from .interfaces import CorporateActionChangeResult, CorporateActionCommand, LedgerCorporateActionPort, SyncResult
from .replay import replay_action_input, replay_restatement_input
from .restatement import RestatementActionInput, restate_transactions
from .validation import (
    ledger_optional_text,
    ledger_require_choice,
    ledger_require_date,
    ledger_require_positive,
    ledger_require_text,
)

logger = logging.getLogger(__name__)


class CorporateActionLedgerService(LedgerCorporateActionPort):
    """Maintain corporate actions and keep effective transaction values in sync.

    Any action write is followed by a restatement sync of every instrument it
    touches. The sync always recomputes from original values, so it is safe
    to run repeatedly.
    """

    def __init__(
        self,
        corporate_action_store: CorporateActionStorePort,
        transaction_store: TransactionStorePort,
        instrument_store: InstrumentStorePort,
    ):
        """Initialize corporate action service dependencies.

        Args:
            corporate_action_store: DB-layer corporate action store.
            transaction_store: DB-layer transaction store.
            instrument_store: DB-layer instrument store.

        Raises:
            ValueError: Raised when a dependency is missing.
        """

        if corporate_action_store is None:
            raise ValueError("corporate_action_store must not be None")
        if transaction_store is None:
            raise ValueError("transaction_store must not be None")
        if instrument_store is None:
            raise ValueError("instrument_store must not be None")
        self._corporate_action_store = corporate_action_store
        self._transaction_store = transaction_store
        self._instrument_store = instrument_store

    def ledger_corporate_action_list(self, instrument_name: str | None = None) -> list[CorporateActionRecord]:
        """List actions; all instruments newest first, or one instrument in application order."""

        if instrument_name is None:
            return self._corporate_action_store.db_corporate_action_list_all()
        return self._corporate_action_store.db_corporate_action_list_by_instrument(
            ledger_require_text(instrument_name, "instrument_name")
        )

    def ledger_corporate_action_get(self, action_id: UUID) -> CorporateActionRecord:
        """Fetch one action.

        Raises:
            LedgerNotFoundError: Raised when the action does not exist.
        """

        record = self._corporate_action_store.db_corporate_action_get_by_id(action_id)
        if record is None:
            raise LedgerNotFoundError(f"action_id={action_id} was not found")
        return record

    def ledger_corporate_action_create(self, command: CorporateActionCommand) -> CorporateActionChangeResult:
        """Create one action and restate its instrument.

        Args:
            command: Caller input.

        Returns:
            CorporateActionChangeResult: Stored action and sync outcome.

        Raises:
            LedgerValidationError: Raised when input is invalid or the action would
                round a transaction's quantity down to zero; nothing is written.
            LedgerInvariantError: Raised when a transaction cannot be restated.
        """

        request = self._ledger_corporate_action_build_request(command)
        self._ledger_corporate_action_check_restatable(
            request.instrument_name,
            _candidate_action_input("pending", request, datetime.now(timezone.utc)),
        )
        record = self._corporate_action_store.db_corporate_action_insert(request)
        logger.info(
            "created corporate action action_id=%s instrument=%s type=%s date=%s",
            record.action_id,
            record.instrument_name,
            record.action_type,
            record.action_date,
        )
        return CorporateActionChangeResult(
            action=record,
            sync_results=(self.ledger_corporate_action_sync_instrument(record.instrument_name),),
        )

    def ledger_corporate_action_update(
        self,
        action_id: UUID,
        command: CorporateActionCommand,
    ) -> CorporateActionChangeResult:
        """Edit one action and restate every instrument it affected.

        When the edit moves the action to another instrument, both the
        previous and the new instrument are restated.

        Raises:
            LedgerNotFoundError: Raised when the action does not exist.
            LedgerValidationError: Raised when input is invalid or the edited action
                set would round a transaction's quantity down to zero.
        """

        existing = self.ledger_corporate_action_get(action_id)
        request = self._ledger_corporate_action_build_request(command)
        candidate = _candidate_action_input(str(existing.action_id), request, existing.created_at_utc)
        self._ledger_corporate_action_check_restatable(request.instrument_name, candidate, excluding=existing.action_id)
        if request.instrument_name != existing.instrument_name:
            self._ledger_corporate_action_check_restatable(existing.instrument_name, None, excluding=existing.action_id)
        try:
            record = self._corporate_action_store.db_corporate_action_update(existing.action_id, request)
        except LookupError as error:
            raise LedgerNotFoundError(f"action_id={action_id} was not found") from error
        logger.info(
            "updated corporate action action_id=%s instrument=%s type=%s date=%s",
            record.action_id,
            record.instrument_name,
            record.action_type,
            record.action_date,
        )

        affected_names = [existing.instrument_name]
        if record.instrument_name != existing.instrument_name:
            affected_names.append(record.instrument_name)
        return CorporateActionChangeResult(
            action=record,
            sync_results=tuple(self.ledger_corporate_action_sync_instrument(name) for name in affected_names),
        )

    def ledger_corporate_action_delete(self, action_id: UUID) -> CorporateActionChangeResult:
        """Delete one action and restate its instrument.

        Raises:
            LedgerNotFoundError: Raised when the action does not exist.
            LedgerValidationError: Raised when the remaining actions would round a
                transaction's quantity down to zero.
        """

        existing = self.ledger_corporate_action_get(action_id)
        self._ledger_corporate_action_check_restatable(existing.instrument_name, None, excluding=existing.action_id)
        if not self._corporate_action_store.db_corporate_action_delete(existing.action_id):
            raise LedgerNotFoundError(f"action_id={action_id} was not found")
        logger.info("deleted corporate action action_id=%s instrument=%s", action_id, existing.instrument_name)
        return CorporateActionChangeResult(
            action=None,
            sync_results=(self.ledger_corporate_action_sync_instrument(existing.instrument_name),),
        )

    def ledger_corporate_action_sync_instrument(self, instrument_name: str) -> SyncResult:
        """Restate every transaction of one instrument from its original values.

        All effective values are computed in memory first. Only rows whose
        values changed are written, inside one store transaction.

        Args:
            instrument_name: Instrument to restate.

        Returns:
            SyncResult: Number of changed transactions and a summary.

        Raises:
            LedgerValidationError: Raised when instrument_name is blank.
            LedgerInvariantError: Raised when a transaction lacks original values
                or a stored action is malformed; nothing is written.
        """

        normalized_name = ledger_require_text(instrument_name, "instrument_name")
        transactions = self._transaction_store.db_transaction_list_by_instrument(normalized_name)
        if not transactions:
            logger.info("sync skipped instrument=%s: no transactions", normalized_name)
            return SyncResult(
                instrument_name=normalized_name,
                updated_count=0,
                message=f"instrument {normalized_name} has no transactions",
            )

        actions = self._corporate_action_store.db_corporate_action_list_by_instrument(normalized_name)
        restated_rows = restate_transactions(
            [replay_restatement_input(record) for record in transactions],
            [replay_action_input(action) for action in actions],
        )
        record_ids = {str(record.transaction_id): record.transaction_id for record in transactions}
        update_requests = [
            TransactionEffectiveUpdateRequest(
                transaction_id=record_ids[restated.transaction_id],
                quantity=restated.quantity,
                price=restated.price,
                total_amount=restated.total_amount,
            )
            for restated in restated_rows
            if restated.changed
        ]
        updated_count = self._transaction_store.db_transaction_update_effective_many(normalized_name, update_requests)

        if actions:
            message = (
                f"restated {updated_count} of {len(transactions)} transactions from {len(actions)} corporate actions; "
                "commission, tax and realized P/L unchanged"
            )
        else:
            message = f"reset {updated_count} of {len(transactions)} transactions to original quantity and price"
        logger.info("sync instrument=%s updated=%s actions=%s", normalized_name, updated_count, len(actions))
        return SyncResult(instrument_name=normalized_name, updated_count=updated_count, message=message)

    def _ledger_corporate_action_check_restatable(
        self,
        instrument_name: str,
        candidate: RestatementActionInput | None,
        excluding: UUID | None = None,
    ) -> None:
        """Restate an instrument in memory against the action set a write would leave.

        Args:
            instrument_name: Instrument whose transactions are checked.
            candidate: Action being created or edited, or None for a removal.
            excluding: Stored action replaced or removed by the write.

        Raises:
            LedgerValidationError: Raised when a transaction would round to a zero quantity.
            LedgerInvariantError: Raised when a transaction lacks original values.
        """

        transactions = self._transaction_store.db_transaction_list_by_instrument(instrument_name)
        if not transactions:
            return
        actions = [
            replay_action_input(action)
            for action in self._corporate_action_store.db_corporate_action_list_by_instrument(instrument_name)
            if action.action_id != excluding
        ]
        if candidate is not None:
            actions.append(candidate)
        restate_transactions([replay_restatement_input(record) for record in transactions], actions)

    def _ledger_corporate_action_build_request(self, command: CorporateActionCommand) -> CorporateActionWriteRequest:
        """Validate caller input and keep only the value field its type uses.

        Raises:
            LedgerValidationError: Raised when input is invalid or the instrument is unknown.
        """

        if command is None:
            raise LedgerValidationError("command must not be None")

        instrument_name = ledger_require_text(command.instrument_name, "instrument_name")
        action_type = ledger_require_choice(command.action_type, "action_type", CORPORATE_ACTION_TYPES)
        action_date = ledger_require_date(command.action_date, "action_date")

        if action_type == ACTION_DIVIDEND:
            if command.amount is None:
                raise LedgerValidationError("amount is required for DIVIDEND")
            amount = ledger_require_positive(command.amount, "amount")
            ratio = None
        else:
            if command.ratio is None:
                raise LedgerValidationError(f"ratio is required for {action_type}")
            ratio = ledger_require_positive(command.ratio, "ratio")
            amount = None

        if self._instrument_store.db_instrument_get_by_name(instrument_name) is None:
            raise LedgerValidationError(f"instrument name={instrument_name} does not exist")

        return CorporateActionWriteRequest(
            instrument_name=instrument_name,
            action_type=action_type,
            action_date=action_date,
            ratio=ratio,
            amount=amount,
            note=ledger_optional_text(command.note),
        )


def _candidate_action_input(
    action_id: str,
    request: CorporateActionWriteRequest,
    created_at_utc: datetime,
) -> RestatementActionInput:
    return RestatementActionInput(
        action_id=action_id,
        instrument_name=request.instrument_name,
        action_type=request.action_type,
        action_date=request.action_date,
        created_at_utc=created_at_utc,
        ratio=request.ratio,
        amount=request.amount,
    )


__all__ = ["CorporateActionLedgerService"]
