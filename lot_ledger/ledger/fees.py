"""Commission and tax schedule per instrument class."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from lot_ledger.domain import (
    INSTRUMENT_CLASS_CROSS_BORDER_EQUITY,
    INSTRUMENT_CLASS_DOMESTIC_EQUITY,
    INSTRUMENT_CLASS_FOREIGN_EQUITY,
    SIDE_SELL,
    TRANSACTION_SIDES,
    ZERO,
    LedgerValidationError,
    domain_round_money,
)

logger = logging.getLogger(__name__)

DOMESTIC_COMMISSION_RATE = Decimal("0.00015")
DOMESTIC_SELL_TAX_RATE = Decimal("0.00005")
CROSS_BORDER_COMMISSION_RATE = Decimal("0.0002")
CROSS_BORDER_TAX_RATE = Decimal("0.001")

FEE_FALLBACK_INSTRUMENT_CLASS = INSTRUMENT_CLASS_DOMESTIC_EQUITY


@dataclass(frozen=True)
class FeeComputationResult:
    """Fee amounts charged on one transaction.

    Attributes:
        commission: Broker commission rounded to cents.
        tax: Transaction tax rounded to cents.
    """

    commission: Decimal
    tax: Decimal

    @property
    def total(self) -> Decimal:
        """Return combined commission and tax."""

        return self.commission + self.tax


def fee_compute(
    instrument_class: str,
    side: str,
    notional: Decimal,
    manual_commission: Decimal | None = None,
) -> FeeComputationResult:
    """Compute commission and tax for one transaction.

    Unknown instrument classes are charged with the domestic-equity schedule.
    The fallback is logged at WARNING level.

    Args:
        instrument_class: Instrument class selecting the schedule.
        side: Transaction side (`BUY` or `SELL`).
        notional: Transaction notional (quantity times price).
        manual_commission: Caller-supplied commission, honored for foreign equity only.

    Returns:
        FeeComputationResult: Rounded commission and tax amounts.

    Raises:
        LedgerValidationError: Raised when class is blank, side is unsupported,
            or amounts are negative.
    """

    if not isinstance(instrument_class, str) or not instrument_class.strip():
        raise LedgerValidationError("instrument_class must not be blank")
    normalized_side = side.strip().upper() if isinstance(side, str) else ""
    if normalized_side not in TRANSACTION_SIDES:
        raise LedgerValidationError(f"unsupported transaction side={side}")
    if notional < ZERO:
        raise LedgerValidationError("notional must not be negative")
    if manual_commission is not None and manual_commission < ZERO:
        raise LedgerValidationError("commission must not be negative")

    normalized_class = instrument_class.strip()
    rounded_notional = domain_round_money(notional)

    if normalized_class == INSTRUMENT_CLASS_FOREIGN_EQUITY:
        commission = manual_commission if manual_commission is not None else ZERO
        return FeeComputationResult(commission=domain_round_money(commission), tax=domain_round_money(ZERO))

    if normalized_class == INSTRUMENT_CLASS_CROSS_BORDER_EQUITY:
        return FeeComputationResult(
            commission=domain_round_money(rounded_notional * CROSS_BORDER_COMMISSION_RATE),
            tax=domain_round_money(rounded_notional * CROSS_BORDER_TAX_RATE),
        )

    if normalized_class != INSTRUMENT_CLASS_DOMESTIC_EQUITY:
        logger.warning(
            "unknown instrument_class=%s, applying %s fee schedule",
            normalized_class,
            FEE_FALLBACK_INSTRUMENT_CLASS,
        )

    tax = rounded_notional * DOMESTIC_SELL_TAX_RATE if normalized_side == SIDE_SELL else ZERO
    return FeeComputationResult(
        commission=domain_round_money(rounded_notional * DOMESTIC_COMMISSION_RATE),
        tax=domain_round_money(tax),
    )


__all__ = ["FeeComputationResult", "FEE_FALLBACK_INSTRUMENT_CLASS", "fee_compute"]
