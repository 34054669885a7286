"""Lot book and maximum-gain lot matching primitives.

Open long lots are kept ascending by price and open short lots descending by
price, so the head of each list is always the lot whose close realizes the
largest gain. Equal prices keep insertion order.
"""

from __future__ import annotations

from bisect import insort_right
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal

from lot_ledger.domain import SIDE_BUY, TRANSACTION_SIDES, ZERO, LedgerValidationError, domain_round_money

DIRECTION_LONG = "long"
DIRECTION_SHORT = "short"

CLOSED_LOT_LONG = "LONG"
CLOSED_LOT_SHORT = "SHORT"


@dataclass(frozen=True)
class LotTradeInput:
    """Trade input contract for lot matching.

    Attributes:
        transaction_id: Transaction identifier.
        transaction_date: Trade date (day granularity).
        created_at_utc: Creation timestamp used to order same-day trades.
        side: Trade side (`BUY` or `SELL`).
        quantity: Effective trade quantity.
        price: Effective trade price.
        commission: Commission charged on the trade.
        tax: Tax charged on the trade.
    """

    transaction_id: str
    transaction_date: date
    created_at_utc: datetime
    side: str
    quantity: Decimal
    price: Decimal
    commission: Decimal = ZERO
    tax: Decimal = ZERO


@dataclass(frozen=True)
class LotLedgerComputationRequest:
    """Input contract for one instrument ledger derivation.

    Attributes:
        instrument_name: Instrument the trades belong to.
        trades: Ordered or unordered trade inputs.
    """

    instrument_name: str
    trades: list[LotTradeInput]


@dataclass
class OpenLot:
    """Mutable open-lot state held by a lot book.

    Attributes:
        direction: Lot direction (`long` or `short`).
        open_transaction_id: Transaction that opened the lot.
        opened_on: Opening trade date.
        unit_price: Opening unit price.
        open_quantity: Quantity at lot opening.
        remaining_quantity: Quantity not yet closed.
        commission: Full commission of the opening transaction.
        tax: Full tax of the opening transaction.
    """

    direction: str
    open_transaction_id: str
    opened_on: date
    unit_price: Decimal
    open_quantity: Decimal
    remaining_quantity: Decimal
    commission: Decimal
    tax: Decimal

    @property
    def unrecognized_fees(self) -> Decimal:
        """Opening fees not yet deducted from any realized P/L."""

        return self.commission + self.tax


@dataclass
class LotBook:
    """Per-instrument open lots ordered for maximum-gain matching."""

    long_lots: list[OpenLot] = field(default_factory=list)
    short_lots: list[OpenLot] = field(default_factory=list)

    def lot_book_open(self, lot: OpenLot) -> None:
        """Insert one lot keeping price order and insertion order for ties.

        Args:
            lot: Newly opened lot.

        Raises:
            ValueError: Raised when lot direction is unknown.
        """

        if lot.direction == DIRECTION_LONG:
            insort_right(self.long_lots, lot, key=lambda open_lot: open_lot.unit_price)
        elif lot.direction == DIRECTION_SHORT:
            insort_right(self.short_lots, lot, key=lambda open_lot: -open_lot.unit_price)
        else:
            raise ValueError(f"unsupported lot direction={lot.direction}")

    @property
    def position_quantity(self) -> Decimal:
        """Signed open quantity: positive long, negative short."""

        long_quantity = sum((lot.remaining_quantity for lot in self.long_lots), ZERO)
        short_quantity = sum((lot.remaining_quantity for lot in self.short_lots), ZERO)
        return long_quantity - short_quantity


@dataclass(frozen=True)
class ClosedLotRecord:
    """One lot-closing event.

    Attributes:
        side: Closed position type (`LONG` or `SHORT`).
        open_transaction_id: Transaction that opened the lot.
        close_transaction_id: Transaction that closed (part of) the lot.
        open_date: Lot opening date.
        close_date: Closing trade date.
        open_price: Lot unit price.
        close_price: Closing trade price.
        quantity: Quantity closed by this event.
        gross_pnl: Signed price difference times quantity.
        opening_fee_allocated: Opening fees recognized by this event.
        closing_fee_allocated: Closing-trade fees recognized by this event.
        realized_pnl: Gross P/L net of allocated fees, rounded to cents.
    """

    side: str
    open_transaction_id: str
    close_transaction_id: str
    open_date: date
    close_date: date
    open_price: Decimal
    close_price: Decimal
    quantity: Decimal
    gross_pnl: Decimal
    opening_fee_allocated: Decimal
    closing_fee_allocated: Decimal
    realized_pnl: Decimal


@dataclass(frozen=True)
class TransactionMatchResult:
    """Outcome of applying one transaction to a lot book.

    Attributes:
        transaction_id: Applied transaction identifier.
        closed_lots: Closing events produced by the transaction.
        opened_quantity: Residual quantity that opened a new lot.
        realized_pnl: Sum of realized P/L over `closed_lots`.
    """

    transaction_id: str
    closed_lots: tuple[ClosedLotRecord, ...]
    opened_quantity: Decimal
    realized_pnl: Decimal


@dataclass(frozen=True)
class OpenLotResult:
    """Open-lot snapshot for detail views.

    Attributes:
        direction: Lot direction (`long` or `short`).
        open_transaction_id: Opening transaction identifier.
        opened_on: Opening date.
        quantity: Signed remaining quantity (negative for short lots).
        price: Lot unit price.
        notional: Remaining quantity times price, rounded to cents.
        unrecognized_fees: Opening fees not yet charged against realized P/L.
    """

    direction: str
    open_transaction_id: str
    opened_on: date
    quantity: Decimal
    price: Decimal
    notional: Decimal
    unrecognized_fees: Decimal


@dataclass(frozen=True)
class LotLedgerComputationResult:
    """Output payload for one instrument ledger derivation.

    Attributes:
        instrument_name: Instrument name.
        position_quantity: Signed open quantity after replay.
        realized_pnl: Total realized P/L over all closed lots, rounded to cents.
        open_lots: Open lots, long lots first then short lots, each in matching order.
        closed_lots: Closed-lot ledger in production order.
        realized_pnl_by_transaction: Realized P/L keyed by closing transaction id.
    """

    instrument_name: str
    position_quantity: Decimal
    realized_pnl: Decimal
    open_lots: tuple[OpenLotResult, ...]
    closed_lots: tuple[ClosedLotRecord, ...]
    realized_pnl_by_transaction: dict[str, Decimal]


def lot_apply_transaction(trade: LotTradeInput, lot_book: LotBook) -> TransactionMatchResult:
    """Apply one transaction to the lot book, closing opposite lots first.

    A BUY closes short lots highest price first and a SELL closes long lots
    lowest price first. Any residual quantity opens a new lot carrying the
    full fees of this transaction.

    Fee allocation per closing event:
        * the opening lot's fees are charged only on the event that exhausts
          the lot's remaining quantity;
        * this transaction's fees are charged only on the event that brings
          its remaining-to-match quantity to zero, so they are never charged
          when a residual opens a new lot.

    Args:
        trade: Transaction to apply.
        lot_book: Lot book mutated in place.

    Returns:
        TransactionMatchResult: Closing events and residual quantity.

    Raises:
        LedgerValidationError: Raised when side, quantity or price is invalid.
    """

    side = _lot_validate_trade(trade)
    trade_fees = trade.commission + trade.tax

    if side == SIDE_BUY:
        opposite_lots = lot_book.short_lots
        closed_side = CLOSED_LOT_SHORT
        opens_direction = DIRECTION_LONG
    else:
        opposite_lots = lot_book.long_lots
        closed_side = CLOSED_LOT_LONG
        opens_direction = DIRECTION_SHORT

    quantity_to_close = trade.quantity
    closed_lots: list[ClosedLotRecord] = []

    while quantity_to_close > ZERO and opposite_lots:
        current_lot = opposite_lots[0]
        close_quantity = min(quantity_to_close, current_lot.remaining_quantity)
        exhausts_lot = close_quantity == current_lot.remaining_quantity
        quantity_to_close -= close_quantity
        absorbs_trade = quantity_to_close == ZERO

        if closed_side == CLOSED_LOT_LONG:
            gross_pnl = (trade.price - current_lot.unit_price) * close_quantity
        else:
            gross_pnl = (current_lot.unit_price - trade.price) * close_quantity

        opening_fee = current_lot.unrecognized_fees if exhausts_lot else ZERO
        closing_fee = trade_fees if absorbs_trade else ZERO

        closed_lots.append(
            ClosedLotRecord(
                side=closed_side,
                open_transaction_id=current_lot.open_transaction_id,
                close_transaction_id=trade.transaction_id,
                open_date=current_lot.opened_on,
                close_date=trade.transaction_date,
                open_price=current_lot.unit_price,
                close_price=trade.price,
                quantity=close_quantity,
                gross_pnl=gross_pnl,
                opening_fee_allocated=opening_fee,
                closing_fee_allocated=closing_fee,
                realized_pnl=domain_round_money(gross_pnl - opening_fee - closing_fee),
            )
        )

        current_lot.remaining_quantity -= close_quantity
        if exhausts_lot:
            opposite_lots.pop(0)

    if quantity_to_close > ZERO:
        lot_book.lot_book_open(
            OpenLot(
                direction=opens_direction,
                open_transaction_id=trade.transaction_id,
                opened_on=trade.transaction_date,
                unit_price=trade.price,
                open_quantity=quantity_to_close,
                remaining_quantity=quantity_to_close,
                commission=trade.commission,
                tax=trade.tax,
            )
        )

    return TransactionMatchResult(
        transaction_id=trade.transaction_id,
        closed_lots=tuple(closed_lots),
        opened_quantity=quantity_to_close,
        realized_pnl=domain_round_money(sum((record.realized_pnl for record in closed_lots), ZERO)),
    )


def lot_derive_ledger(request: LotLedgerComputationRequest) -> LotLedgerComputationResult:
    """Replay one instrument's full history into open lots and closed-lot ledger.

    The derivation is a pure function of its input: trades are sorted by
    (date, creation timestamp, id) and replayed into a fresh lot book.

    Args:
        request: Ledger derivation request.

    Returns:
        LotLedgerComputationResult: Open lots, closed lots and realized totals.

    Raises:
        LedgerValidationError: Raised when request data is invalid.
    """

    if request is None:
        raise LedgerValidationError("request must not be None")
    if not isinstance(request.instrument_name, str) or not request.instrument_name.strip():
        raise LedgerValidationError("request.instrument_name must not be blank")

    sorted_trades = sorted(request.trades, key=lot_trade_sort_key)

    lot_book = LotBook()
    closed_lots: list[ClosedLotRecord] = []
    realized_pnl_by_transaction: dict[str, Decimal] = {}

    for trade in sorted_trades:
        match_result = lot_apply_transaction(trade, lot_book)
        closed_lots.extend(match_result.closed_lots)
        if match_result.closed_lots:
            realized_pnl_by_transaction[trade.transaction_id] = match_result.realized_pnl

    open_lots = [*lot_book.long_lots, *lot_book.short_lots]

    return LotLedgerComputationResult(
        instrument_name=request.instrument_name.strip(),
        position_quantity=lot_book.position_quantity,
        realized_pnl=domain_round_money(sum((record.realized_pnl for record in closed_lots), ZERO)),
        open_lots=tuple(
            OpenLotResult(
                direction=lot.direction,
                open_transaction_id=lot.open_transaction_id,
                opened_on=lot.opened_on,
                quantity=lot.remaining_quantity if lot.direction == DIRECTION_LONG else -lot.remaining_quantity,
                price=lot.unit_price,
                notional=domain_round_money(lot.remaining_quantity * lot.unit_price),
                unrecognized_fees=lot.unrecognized_fees,
            )
            for lot in open_lots
        ),
        closed_lots=tuple(closed_lots),
        realized_pnl_by_transaction=realized_pnl_by_transaction,
    )


def lot_trade_sort_key(trade: LotTradeInput) -> tuple[date, datetime, str]:
    """Return deterministic chronological ordering key for one trade."""

    return (trade.transaction_date, trade.created_at_utc, trade.transaction_id)


def _lot_validate_trade(trade: LotTradeInput) -> str:
    """Validate one trade input and return its normalized side.

    Quantity must be positive. Price may be zero, since dividend restatement
    floors effective prices at zero, but never negative.

    Args:
        trade: Trade input.

    Returns:
        str: Upper-case side.

    Raises:
        LedgerValidationError: Raised when trade values are invalid.
    """

    if trade is None:
        raise LedgerValidationError("trade must not be None")
    side = trade.side.strip().upper() if isinstance(trade.side, str) else ""
    if side not in TRANSACTION_SIDES:
        raise LedgerValidationError(f"unsupported trade side={trade.side}")
    if trade.quantity <= ZERO:
        raise LedgerValidationError(f"trade quantity must be positive, transaction_id={trade.transaction_id}")
    if trade.price < ZERO:
        raise LedgerValidationError(f"trade price must not be negative, transaction_id={trade.transaction_id}")
    return side


__all__ = [
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
    "lot_trade_sort_key",
]
