"""Corporate-action restatement of effective transaction quantity and price.

Restatement always starts from a transaction's original quantity and price
and replays every action dated strictly after the trade. Effective values are
never derived from previously stored effective values, which keeps the pass
idempotent and makes action edits and deletions fully reversible.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from lot_ledger.domain import (
    ACTION_DIVIDEND,
    CORPORATE_ACTION_TYPES,
    RATIO_ACTION_TYPES,
    ZERO,
    LedgerInvariantError,
    LedgerValidationError,
    domain_round_money,
    domain_round_quantity,
)


@dataclass(frozen=True)
class RestatementTransactionInput:
    """Transaction values needed for restatement.

    Attributes:
        transaction_id: Transaction identifier.
        instrument_name: Instrument name.
        transaction_date: Trade date.
        original_quantity: Quantity entered at creation.
        original_price: Price entered at creation.
        quantity: Currently stored effective quantity.
        price: Currently stored effective price.
        total_amount: Currently stored effective total.
    """

    transaction_id: str
    instrument_name: str
    transaction_date: date
    original_quantity: Decimal | None
    original_price: Decimal | None
    quantity: Decimal
    price: Decimal
    total_amount: Decimal


@dataclass(frozen=True)
class RestatementActionInput:
    """Corporate-action values needed for restatement.

    Attributes:
        action_id: Corporate action identifier.
        instrument_name: Instrument name.
        action_type: `DIVIDEND`, `SPLIT` or `REVERSE_SPLIT`.
        action_date: Effective date.
        created_at_utc: Creation timestamp ordering same-day actions.
        ratio: Split ratio for split types.
        amount: Per-share amount for dividends.
    """

    action_id: str
    instrument_name: str
    action_type: str
    action_date: date
    created_at_utc: datetime
    ratio: Decimal | None = None
    amount: Decimal | None = None


@dataclass(frozen=True)
class RestatedTransaction:
    """Recomputed effective values for one transaction.

    Attributes:
        transaction_id: Transaction identifier.
        quantity: Effective quantity.
        price: Effective price.
        total_amount: Effective quantity times price, rounded to cents.
        applied_action_count: Number of actions applied.
        changed: Whether values differ from the stored effective values.
    """

    transaction_id: str
    quantity: Decimal
    price: Decimal
    total_amount: Decimal
    applied_action_count: int
    changed: bool


def restate_transactions(
    transactions: list[RestatementTransactionInput],
    actions: list[RestatementActionInput],
) -> tuple[RestatedTransaction, ...]:
    """Recompute effective quantity and price for every transaction.

    Args:
        transactions: Transactions to restate.
        actions: Corporate actions; only those of the transaction's instrument apply.

    Returns:
        tuple[RestatedTransaction, ...]: Restated values in input order.

    Raises:
        LedgerInvariantError: Raised when a transaction lacks original values
            or a stored action lacks its ratio or amount.
        LedgerValidationError: Raised when a split rounds a quantity down to zero.
    """

    ordered_actions = sorted(actions, key=restate_action_sort_key)
    for action in ordered_actions:
        _restate_validate_action(action)

    return tuple(restate_transaction(transaction, ordered_actions) for transaction in transactions)


def restate_transaction(
    transaction: RestatementTransactionInput,
    ordered_actions: list[RestatementActionInput],
) -> RestatedTransaction:
    """Restate one transaction from its original values.

    Args:
        transaction: Transaction to restate.
        ordered_actions: Actions sorted by `restate_action_sort_key`.

    Returns:
        RestatedTransaction: Effective values and change marker.

    Raises:
        LedgerInvariantError: Raised when original values are missing.
        LedgerValidationError: Raised when a split rounds the effective quantity
            down to zero.
    """

    if transaction.original_quantity is None or transaction.original_price is None:
        raise LedgerInvariantError(
            f"transaction_id={transaction.transaction_id} is missing original quantity or price; "
            "original values are set at creation and restatement cannot proceed without them"
        )

    effective_quantity = transaction.original_quantity
    effective_price = transaction.original_price
    applied_action_count = 0

    for action in ordered_actions:
        if action.instrument_name != transaction.instrument_name:
            continue
        if action.action_date <= transaction.transaction_date:
            continue

        if action.action_type == ACTION_DIVIDEND:
            effective_price = max(domain_round_money(effective_price - action.amount), ZERO)
        else:
            effective_quantity = domain_round_quantity(effective_quantity / action.ratio)
            effective_price = domain_round_money(effective_price * action.ratio)
            if effective_quantity <= ZERO:
                raise LedgerValidationError(
                    f"action_id={action.action_id} {action.action_type} ratio={action.ratio} rounds "
                    f"transaction_id={transaction.transaction_id} to a non-positive quantity"
                )
        applied_action_count += 1

    total_amount = domain_round_money(effective_quantity * effective_price)
    changed = (
        effective_quantity != transaction.quantity
        or effective_price != transaction.price
        or total_amount != transaction.total_amount
    )

    return RestatedTransaction(
        transaction_id=transaction.transaction_id,
        quantity=effective_quantity,
        price=effective_price,
        total_amount=total_amount,
        applied_action_count=applied_action_count,
        changed=changed,
    )


def restate_action_sort_key(action: RestatementActionInput) -> tuple[date, datetime, str]:
    """Return deterministic application ordering key for one action."""

    return (action.action_date, action.created_at_utc, action.action_id)


def _restate_validate_action(action: RestatementActionInput) -> None:
    """Validate that a stored action carries the field its type requires.

    Args:
        action: Stored corporate action.

    Raises:
        LedgerInvariantError: Raised when the stored action is malformed.
    """

    if action.action_type not in CORPORATE_ACTION_TYPES:
        raise LedgerInvariantError(f"action_id={action.action_id} has unsupported action_type={action.action_type}")
    if action.action_type == ACTION_DIVIDEND and (action.amount is None or action.amount <= ZERO):
        raise LedgerInvariantError(f"action_id={action.action_id} dividend must carry a positive amount")
    if action.action_type in RATIO_ACTION_TYPES and (action.ratio is None or action.ratio <= ZERO):
        raise LedgerInvariantError(f"action_id={action.action_id} split must carry a positive ratio")


__all__ = [
    "RestatedTransaction",
    "RestatementActionInput",
    "RestatementTransactionInput",
    "restate_action_sort_key",
    "restate_transaction",
    "restate_transactions",
]
