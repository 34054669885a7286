"""Per-instrument and overall profit/loss rollups."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Mapping, Sequence

from lot_ledger.domain import SIDE_BUY, SIDE_SELL, ZERO, domain_round_money

from .lot_engine import ClosedLotRecord


@dataclass(frozen=True)
class StatsTransactionInput:
    """Transaction totals needed for aggregation.

    Attributes:
        instrument_name: Instrument name.
        side: Trade side.
        quantity: Effective quantity.
        total_amount: Effective total amount.
    """

    instrument_name: str
    side: str
    quantity: Decimal
    total_amount: Decimal


@dataclass(frozen=True)
class InstrumentStats:
    """Rollup for one instrument, or for all instruments when `instrument_name` is None.

    Attributes:
        instrument_name: Instrument name, None for the overall rollup.
        total_buy_amount: Sum of BUY effective totals.
        total_sell_amount: Sum of SELL effective totals.
        total_buy_quantity: Sum of BUY effective quantities.
        total_sell_quantity: Sum of SELL effective quantities.
        realized_pnl: Sum of realized P/L over closed-lot records.
        transaction_count: Number of transactions.
    """

    instrument_name: str | None
    total_buy_amount: Decimal
    total_sell_amount: Decimal
    total_buy_quantity: Decimal
    total_sell_quantity: Decimal
    realized_pnl: Decimal
    transaction_count: int


@dataclass(frozen=True)
class LedgerStats:
    """Aggregated statistics payload.

    Attributes:
        by_instrument: Per-instrument rollups ordered by instrument name.
        overall: Rollup across all instruments.
    """

    by_instrument: tuple[InstrumentStats, ...]
    overall: InstrumentStats


def stats_aggregate(
    transactions: Sequence[StatsTransactionInput],
    closed_lots_by_instrument: Mapping[str, Sequence[ClosedLotRecord]],
) -> LedgerStats:
    """Aggregate transaction totals and realized P/L per instrument and overall.

    Args:
        transactions: Transactions of all instruments.
        closed_lots_by_instrument: Closed-lot ledgers keyed by instrument name.

    Returns:
        LedgerStats: Per-instrument and overall rollups.
    """

    instrument_names = sorted(
        {transaction.instrument_name for transaction in transactions} | set(closed_lots_by_instrument)
    )
    by_instrument = tuple(
        _stats_build(
            instrument_name=instrument_name,
            transactions=[item for item in transactions if item.instrument_name == instrument_name],
            closed_lots=closed_lots_by_instrument.get(instrument_name, ()),
        )
        for instrument_name in instrument_names
    )

    overall = InstrumentStats(
        instrument_name=None,
        total_buy_amount=domain_round_money(sum((row.total_buy_amount for row in by_instrument), ZERO)),
        total_sell_amount=domain_round_money(sum((row.total_sell_amount for row in by_instrument), ZERO)),
        total_buy_quantity=sum((row.total_buy_quantity for row in by_instrument), ZERO),
        total_sell_quantity=sum((row.total_sell_quantity for row in by_instrument), ZERO),
        realized_pnl=domain_round_money(sum((row.realized_pnl for row in by_instrument), ZERO)),
        transaction_count=sum(row.transaction_count for row in by_instrument),
    )
    return LedgerStats(by_instrument=by_instrument, overall=overall)


def _stats_build(
    instrument_name: str,
    transactions: Sequence[StatsTransactionInput],
    closed_lots: Sequence[ClosedLotRecord],
) -> InstrumentStats:
    buys = [item for item in transactions if item.side == SIDE_BUY]
    sells = [item for item in transactions if item.side == SIDE_SELL]
    return InstrumentStats(
        instrument_name=instrument_name,
        total_buy_amount=domain_round_money(sum((item.total_amount for item in buys), ZERO)),
        total_sell_amount=domain_round_money(sum((item.total_amount for item in sells), ZERO)),
        total_buy_quantity=sum((item.quantity for item in buys), ZERO),
        total_sell_quantity=sum((item.quantity for item in sells), ZERO),
        realized_pnl=domain_round_money(sum((record.realized_pnl for record in closed_lots), ZERO)),
        transaction_count=len(transactions),
    )


__all__ = ["InstrumentStats", "LedgerStats", "StatsTransactionInput", "stats_aggregate"]
