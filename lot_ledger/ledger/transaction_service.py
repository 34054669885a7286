"""Transaction lifecycle service: fees, realized P/L and effective values."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID, uuid4

from lot_ledger.db import (
    CorporateActionStorePort,
    InstrumentRecord,
    InstrumentStorePort,
    TransactionInsertRequest,
    TransactionRecord,
    TransactionStorePort,
    TransactionUpdateRequest,
)
from lot_ledger.domain import (
    INSTRUMENT_CLASS_FOREIGN_EQUITY,
    TRANSACTION_SIDES,
    ZERO,
    LedgerInvariantError,
    LedgerNotFoundError,
    LedgerValidationError,
    domain_round_money,
)

from .fees import fee_compute
from .interfaces import LedgerTransactionPort, TransactionCreateCommand, TransactionEditCommand
from .lot_engine import LotTradeInput
from .replay import replay_action_input, replay_derive_instrument, replay_trade_input
from .restatement import RestatedTransaction, RestatementTransactionInput, restate_transactions
from .validation import (
    ledger_optional_non_negative,
    ledger_optional_text,
    ledger_require_choice,
    ledger_require_date,
    ledger_require_positive,
    ledger_require_text,
)

logger = logging.getLogger(__name__)


class TransactionLedgerService(LedgerTransactionPort):
    """Create, edit, delete and read trade transactions.

    Every mutation validates and computes all derived values before the
    single store write, so a rejected operation leaves storage untouched.
    Realized P/L of a created or edited transaction is obtained by replaying
    the instrument's full history with the transaction in its chronological
    position.
    """

    def __init__(
        self,
        transaction_store: TransactionStorePort,
        corporate_action_store: CorporateActionStorePort,
        instrument_store: InstrumentStorePort,
    ):
        """Initialize transaction service dependencies.

        Args:
            transaction_store: DB-layer transaction store.
            corporate_action_store: DB-layer corporate action store.
            instrument_store: DB-layer instrument store used for fee class lookup.

        Raises:
            ValueError: Raised when a dependency is missing.
        """

        if transaction_store is None:
            raise ValueError("transaction_store must not be None")
        if corporate_action_store is None:
            raise ValueError("corporate_action_store must not be None")
        if instrument_store is None:
            raise ValueError("instrument_store must not be None")
        self._transaction_store = transaction_store
        self._corporate_action_store = corporate_action_store
        self._instrument_store = instrument_store

    def ledger_transaction_list(self, instrument_name: str | None = None) -> list[TransactionRecord]:
        """List transactions ordered by date desc then creation desc.

        Args:
            instrument_name: Optional instrument filter.

        Returns:
            list[TransactionRecord]: Matching transactions.
        """

        if instrument_name is None:
            return self._transaction_store.db_transaction_list_all()

        normalized_name = ledger_require_text(instrument_name, "instrument_name")
        records = self._transaction_store.db_transaction_list_by_instrument(normalized_name)
        return sorted(
            records,
            key=lambda record: (record.transaction_date, record.created_at_utc, str(record.transaction_id)),
            reverse=True,
        )

    def ledger_transaction_get(self, transaction_id: UUID) -> TransactionRecord:
        """Fetch one transaction.

        Raises:
            LedgerNotFoundError: Raised when the transaction does not exist.
        """

        record = self._transaction_store.db_transaction_get_by_id(transaction_id)
        if record is None:
            raise LedgerNotFoundError(f"transaction_id={transaction_id} was not found")
        return record

    def ledger_transaction_create(self, command: TransactionCreateCommand) -> TransactionRecord:
        """Create one transaction.

        Args:
            command: Caller input.

        Returns:
            TransactionRecord: Stored transaction with commission, tax, realized P/L
            and effective values.

        Raises:
            LedgerValidationError: Raised when input is invalid or the instrument is unknown.
            LedgerInvariantError: Raised when stored history cannot be restated.
        """

        if command is None:
            raise LedgerValidationError("command must not be None")

        instrument_name = ledger_require_text(command.instrument_name, "instrument_name")
        side = ledger_require_choice(command.side, "side", TRANSACTION_SIDES)
        quantity = ledger_require_positive(command.quantity, "quantity")
        price = ledger_require_positive(command.price, "price")
        transaction_date = ledger_require_date(command.transaction_date, "transaction_date")
        manual_commission = ledger_optional_non_negative(command.commission, "commission")
        instrument = self._ledger_transaction_require_instrument(instrument_name)

        fees = fee_compute(instrument.instrument_class, side, quantity * price, manual_commission)

        transaction_id = uuid4()
        created_at_utc = datetime.now(timezone.utc)
        restated = self._ledger_transaction_restate(
            RestatementTransactionInput(
                transaction_id=str(transaction_id),
                instrument_name=instrument_name,
                transaction_date=transaction_date,
                original_quantity=quantity,
                original_price=price,
                quantity=quantity,
                price=price,
                total_amount=domain_round_money(quantity * price),
            )
        )

        profit_loss = self._ledger_transaction_realized_pnl(
            instrument_name=instrument_name,
            trade=LotTradeInput(
                transaction_id=str(transaction_id),
                transaction_date=transaction_date,
                created_at_utc=created_at_utc,
                side=side,
                quantity=restated.quantity,
                price=restated.price,
                commission=fees.commission,
                tax=fees.tax,
            ),
            excluding_transaction_id=None,
        )

        record = self._transaction_store.db_transaction_insert(
            TransactionInsertRequest(
                transaction_id=transaction_id,
                instrument_name=instrument_name,
                side=side,
                quantity=restated.quantity,
                price=restated.price,
                total_amount=restated.total_amount,
                original_quantity=quantity,
                original_price=price,
                transaction_date=transaction_date,
                commission=fees.commission,
                tax=fees.tax,
                profit_loss=profit_loss,
                note=ledger_optional_text(command.note),
                created_at_utc=created_at_utc,
            )
        )
        logger.info(
            "created transaction_id=%s instrument=%s side=%s quantity=%s price=%s profit_loss=%s",
            record.transaction_id,
            instrument_name,
            side,
            quantity,
            price,
            profit_loss,
        )
        return record

    def ledger_transaction_update(self, transaction_id: UUID, command: TransactionEditCommand) -> TransactionRecord:
        """Edit side, date, note or manual commission of one transaction.

        Fees and realized P/L are recomputed and effective values are derived
        again from the originals for the new date.

        Args:
            transaction_id: Target transaction identifier.
            command: Caller input.

        Returns:
            TransactionRecord: Updated transaction.

        Raises:
            LedgerNotFoundError: Raised when the transaction does not exist.
            LedgerValidationError: Raised when input is invalid or tries to change fixed terms.
            LedgerInvariantError: Raised when original values are missing.
        """

        if command is None:
            raise LedgerValidationError("command must not be None")

        existing = self.ledger_transaction_get(transaction_id)
        side = ledger_require_choice(command.side, "side", TRANSACTION_SIDES)
        transaction_date = ledger_require_date(command.transaction_date, "transaction_date")
        manual_commission = ledger_optional_non_negative(command.commission, "commission")
        self._ledger_transaction_require_fixed_terms(existing, command)
        instrument = self._ledger_transaction_require_instrument(existing.instrument_name)

        if existing.original_quantity is None or existing.original_price is None:
            raise LedgerInvariantError(
                f"transaction_id={existing.transaction_id} is missing original quantity or price"
            )
        if manual_commission is None and instrument.instrument_class == INSTRUMENT_CLASS_FOREIGN_EQUITY:
            manual_commission = existing.commission

        fees = fee_compute(
            instrument.instrument_class,
            side,
            existing.original_quantity * existing.original_price,
            manual_commission,
        )
        restated = self._ledger_transaction_restate(
            RestatementTransactionInput(
                transaction_id=str(existing.transaction_id),
                instrument_name=existing.instrument_name,
                transaction_date=transaction_date,
                original_quantity=existing.original_quantity,
                original_price=existing.original_price,
                quantity=existing.quantity,
                price=existing.price,
                total_amount=existing.total_amount,
            )
        )
        profit_loss = self._ledger_transaction_realized_pnl(
            instrument_name=existing.instrument_name,
            trade=LotTradeInput(
                transaction_id=str(existing.transaction_id),
                transaction_date=transaction_date,
                created_at_utc=existing.created_at_utc,
                side=side,
                quantity=restated.quantity,
                price=restated.price,
                commission=fees.commission,
                tax=fees.tax,
            ),
            excluding_transaction_id=existing.transaction_id,
        )

        try:
            record = self._transaction_store.db_transaction_update(
                TransactionUpdateRequest(
                    transaction_id=existing.transaction_id,
                    side=side,
                    transaction_date=transaction_date,
                    quantity=restated.quantity,
                    price=restated.price,
                    total_amount=restated.total_amount,
                    commission=fees.commission,
                    tax=fees.tax,
                    profit_loss=profit_loss,
                    note=ledger_optional_text(command.note),
                )
            )
        except LookupError as error:
            raise LedgerNotFoundError(f"transaction_id={transaction_id} was not found") from error
        logger.info(
            "updated transaction_id=%s instrument=%s side=%s profit_loss=%s",
            record.transaction_id,
            record.instrument_name,
            side,
            profit_loss,
        )
        return record

    def ledger_transaction_delete(self, transaction_id: UUID) -> None:
        """Delete one transaction.

        Raises:
            LedgerNotFoundError: Raised when the transaction does not exist.
        """

        if not self._transaction_store.db_transaction_delete(transaction_id):
            raise LedgerNotFoundError(f"transaction_id={transaction_id} was not found")
        logger.info("deleted transaction_id=%s", transaction_id)

    def _ledger_transaction_require_instrument(self, instrument_name: str) -> InstrumentRecord:
        instrument = self._instrument_store.db_instrument_get_by_name(instrument_name)
        if instrument is None:
            raise LedgerValidationError(f"instrument name={instrument_name} does not exist")
        return instrument

    def _ledger_transaction_require_fixed_terms(
        self,
        existing: TransactionRecord,
        command: TransactionEditCommand,
    ) -> None:
        """Reject edits that would change quantity or price after creation."""

        for field_name, supplied, original, effective in (
            ("quantity", command.quantity, existing.original_quantity, existing.quantity),
            ("price", command.price, existing.original_price, existing.price),
        ):
            if supplied is None:
                continue
            supplied_value = ledger_require_positive(supplied, field_name)
            if supplied_value not in (original, effective):
                raise LedgerValidationError(
                    f"{field_name} is fixed at creation; delete the transaction and enter it again"
                )

    def _ledger_transaction_restate(self, transaction: RestatementTransactionInput) -> RestatedTransaction:
        actions = self._corporate_action_store.db_corporate_action_list_by_instrument(transaction.instrument_name)
        return restate_transactions([transaction], [replay_action_input(action) for action in actions])[0]

    def _ledger_transaction_realized_pnl(
        self,
        instrument_name: str,
        trade: LotTradeInput,
        excluding_transaction_id: UUID | None,
    ) -> Decimal:
        """Replay history including `trade` and return the P/L it realizes."""

        history = self._transaction_store.db_transaction_list_by_instrument(
            instrument_name,
            excluding_transaction_id=excluding_transaction_id,
        )
        derived = replay_derive_instrument(
            instrument_name,
            [*(replay_trade_input(record) for record in history), trade],
        )
        return domain_round_money(derived.realized_pnl_by_transaction.get(trade.transaction_id, ZERO))


__all__ = ["TransactionLedgerService"]
