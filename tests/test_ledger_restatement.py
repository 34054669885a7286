"""Regression tests for corporate-action restatement from original values."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from lot_ledger.domain import LedgerInvariantError, LedgerValidationError
from lot_ledger.ledger.restatement import (
    RestatementActionInput,
    RestatementTransactionInput,
    restate_transaction,
    restate_transactions,
)

_CREATED_AT = datetime(2026, 3, 1, 8, 0, tzinfo=timezone.utc)


def _restatement_transaction(
    transaction_id: str = "t-1",
    transaction_date: date = date(2026, 2, 2),
    quantity: str = "100",
    price: str = "20.00",
    stored_quantity: str | None = None,
    stored_price: str | None = None,
) -> RestatementTransactionInput:
    effective_quantity = Decimal(stored_quantity or quantity)
    effective_price = Decimal(stored_price or price)
    return RestatementTransactionInput(
        transaction_id=transaction_id,
        instrument_name="ACME",
        transaction_date=transaction_date,
        original_quantity=Decimal(quantity),
        original_price=Decimal(price),
        quantity=effective_quantity,
        price=effective_price,
        total_amount=(effective_quantity * effective_price).quantize(Decimal("0.01")),
    )


def _restatement_action(
    action_id: str,
    action_type: str,
    action_date: date,
    ratio: str | None = None,
    amount: str | None = None,
    instrument_name: str = "ACME",
    created_offset_seconds: int = 0,
) -> RestatementActionInput:
    return RestatementActionInput(
        action_id=action_id,
        instrument_name=instrument_name,
        action_type=action_type,
        action_date=action_date,
        created_at_utc=_CREATED_AT + timedelta(seconds=created_offset_seconds),
        ratio=Decimal(ratio) if ratio is not None else None,
        amount=Decimal(amount) if amount is not None else None,
    )


def test_ledger_restatement_without_actions_is_identity() -> None:
    """Keep original values and report no change when no action applies."""

    (restated,) = restate_transactions([_restatement_transaction()], [])

    assert restated.quantity == Decimal("100")
    assert restated.price == Decimal("20.00")
    assert restated.total_amount == Decimal("2000.00")
    assert restated.applied_action_count == 0
    assert restated.changed is False


def test_ledger_restatement_split_divides_quantity_and_multiplies_price() -> None:
    """Restate BUY 100 @ 20.00 to 200 @ 10.00 after a 0.5 ratio split.

    Returns:
        None: Assertions validate restated values.

    Raises:
        AssertionError: Raised when the split is applied incorrectly.
    """

    split = _restatement_action("split", "SPLIT", date(2026, 2, 10), ratio="0.5")

    (restated,) = restate_transactions([_restatement_transaction()], [split])

    assert restated.quantity == Decimal("200")
    assert restated.price == Decimal("10.00")
    assert restated.total_amount == Decimal("2000.00")
    assert restated.applied_action_count == 1
    assert restated.changed is True


def test_ledger_restatement_reverse_split_uses_same_formula() -> None:
    """Apply a ratio above one as a share consolidation."""

    reverse_split = _restatement_action("reverse", "REVERSE_SPLIT", date(2026, 2, 10), ratio="2")

    (restated,) = restate_transactions([_restatement_transaction()], [reverse_split])

    assert restated.quantity == Decimal("50")
    assert restated.price == Decimal("40.00")


def test_ledger_restatement_split_rounds_quantity_to_four_decimals() -> None:
    """Keep fractional shares rounded half-up to four decimals."""

    split = _restatement_action("split", "SPLIT", date(2026, 2, 10), ratio="3")

    (restated,) = restate_transactions([_restatement_transaction(quantity="10", price="3.00")], [split])

    assert restated.quantity == Decimal("3.3333")
    assert restated.price == Decimal("9.00")
    assert restated.total_amount == Decimal("30.00")


def test_ledger_restatement_dividend_reduces_price_and_floors_at_zero() -> None:
    """Subtract per-share dividends from price and never go below zero.

    Returns:
        None: Assertions validate dividend adjustment and floor.

    Raises:
        AssertionError: Raised when dividend restatement deviates.
    """

    dividend = _restatement_action("dividend", "DIVIDEND", date(2026, 2, 10), amount="0.50")
    large_dividend = _restatement_action("large", "DIVIDEND", date(2026, 2, 10), amount="15")

    (reduced,) = restate_transactions([_restatement_transaction(price="10.00")], [dividend])
    (floored,) = restate_transactions([_restatement_transaction(price="10.00")], [large_dividend])

    assert reduced.price == Decimal("9.50")
    assert reduced.quantity == Decimal("100")
    assert reduced.total_amount == Decimal("950.00")
    assert floored.price == Decimal("0")
    assert floored.total_amount == Decimal("0")


def test_ledger_restatement_skips_actions_on_or_before_trade_date() -> None:
    """Apply only actions dated strictly after the trade date."""

    actions = [
        _restatement_action("before", "SPLIT", date(2026, 2, 1), ratio="0.5"),
        _restatement_action("same-day", "SPLIT", date(2026, 2, 2), ratio="0.5"),
        _restatement_action("other-instrument", "SPLIT", date(2026, 2, 5), ratio="0.5", instrument_name="OTHER"),
    ]

    (restated,) = restate_transactions([_restatement_transaction()], actions)

    assert restated.applied_action_count == 0
    assert restated.changed is False


def test_ledger_restatement_applies_actions_in_date_order() -> None:
    """Apply a dividend before a later split regardless of input order."""

    actions = [
        _restatement_action("split", "SPLIT", date(2026, 2, 20), ratio="0.5"),
        _restatement_action("dividend", "DIVIDEND", date(2026, 2, 10), amount="1.00"),
    ]

    (restated,) = restate_transactions([_restatement_transaction()], actions)

    assert restated.price == Decimal("9.50")
    assert restated.quantity == Decimal("200")
    assert restated.applied_action_count == 2


def test_ledger_restatement_is_idempotent_against_stored_effective_values() -> None:
    """Report no change when stored effective values already reflect the actions."""

    split = _restatement_action("split", "SPLIT", date(2026, 2, 10), ratio="0.5")
    already_restated = _restatement_transaction(stored_quantity="200", stored_price="10.00")

    (restated,) = restate_transactions([already_restated], [split])

    assert restated.quantity == Decimal("200")
    assert restated.price == Decimal("10.00")
    assert restated.changed is False


def test_ledger_restatement_removing_action_restores_original_values() -> None:
    """Return to original values once the action list no longer holds the split.

    Returns:
        None: Assertions validate reversal.

    Raises:
        AssertionError: Raised when restatement compounds on stored values.
    """

    already_restated = _restatement_transaction(stored_quantity="200", stored_price="10.00")

    restated = restate_transaction(already_restated, [])

    assert restated.quantity == Decimal("100")
    assert restated.price == Decimal("20.00")
    assert restated.total_amount == Decimal("2000.00")
    assert restated.changed is True


def test_ledger_restatement_requires_original_values() -> None:
    """Fail loudly when original quantity or price is missing."""

    legacy_transaction = RestatementTransactionInput(
        transaction_id="legacy",
        instrument_name="ACME",
        transaction_date=date(2026, 2, 2),
        original_quantity=None,
        original_price=Decimal("20"),
        quantity=Decimal("100"),
        price=Decimal("20"),
        total_amount=Decimal("2000.00"),
    )

    with pytest.raises(LedgerInvariantError):
        restate_transactions([legacy_transaction], [])


@pytest.mark.parametrize(
    ("action_type", "ratio", "amount"),
    [("SPLIT", None, None), ("REVERSE_SPLIT", "0", None), ("DIVIDEND", None, None), ("MERGER", "1", None)],
)
def test_ledger_restatement_rejects_malformed_stored_actions(
    action_type: str,
    ratio: str | None,
    amount: str | None,
) -> None:
    """Reject stored actions missing the value their type needs."""

    malformed = _restatement_action("bad", action_type, date(2026, 2, 10), ratio=ratio, amount=amount)

    with pytest.raises(LedgerInvariantError):
        restate_transactions([_restatement_transaction()], [malformed])


def test_ledger_restatement_rejects_reverse_split_rounding_quantity_to_zero() -> None:
    """Fail when a reverse split rounds a fractional lot to 0.0000 shares.

    Returns:
        None: Assertions validate the raised error.

    Raises:
        AssertionError: Raised when a zero quantity is returned instead.
    """

    transaction = _restatement_transaction(transaction_id="t-small", quantity="0.0004", price="10.00")
    reverse_split = _restatement_action("a-reverse", "REVERSE_SPLIT", date(2026, 3, 1), ratio="10")

    with pytest.raises(LedgerValidationError, match="transaction_id=t-small") as error_info:
        restate_transactions([transaction], [reverse_split])

    assert "action_id=a-reverse" in str(error_info.value)
