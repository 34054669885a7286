"""Regression tests for profit/loss rollups."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from lot_ledger.ledger.lot_engine import ClosedLotRecord
from lot_ledger.ledger.stats import StatsTransactionInput, stats_aggregate


def _stats_closed_lot(realized_pnl: str) -> ClosedLotRecord:
    return ClosedLotRecord(
        side="LONG",
        open_transaction_id="open",
        close_transaction_id="close",
        open_date=date(2026, 1, 2),
        close_date=date(2026, 1, 3),
        open_price=Decimal("10"),
        close_price=Decimal("12"),
        quantity=Decimal("1"),
        gross_pnl=Decimal("2"),
        opening_fee_allocated=Decimal("0"),
        closing_fee_allocated=Decimal("0"),
        realized_pnl=Decimal(realized_pnl),
    )


def test_ledger_stats_rolls_up_per_instrument_and_overall() -> None:
    """Sum buy/sell totals and realized P/L per instrument and across all.

    Returns:
        None: Assertions validate rollup values.

    Raises:
        AssertionError: Raised when aggregation deviates.
    """

    transactions = [
        StatsTransactionInput("BETA", "BUY", Decimal("10"), Decimal("100.00")),
        StatsTransactionInput("ACME", "BUY", Decimal("100"), Decimal("1000.00")),
        StatsTransactionInput("ACME", "SELL", Decimal("100"), Decimal("1200.00")),
        StatsTransactionInput("ACME", "BUY", Decimal("5"), Decimal("55.50")),
    ]
    closed_lots = {"ACME": [_stats_closed_lot("199.61")], "BETA": []}

    stats = stats_aggregate(transactions, closed_lots)

    assert [row.instrument_name for row in stats.by_instrument] == ["ACME", "BETA"]
    acme = stats.by_instrument[0]
    assert acme.total_buy_amount == Decimal("1055.50")
    assert acme.total_sell_amount == Decimal("1200.00")
    assert acme.total_buy_quantity == Decimal("105")
    assert acme.total_sell_quantity == Decimal("100")
    assert acme.realized_pnl == Decimal("199.61")
    assert acme.transaction_count == 3

    assert stats.overall.instrument_name is None
    assert stats.overall.total_buy_amount == Decimal("1155.50")
    assert stats.overall.realized_pnl == Decimal("199.61")
    assert stats.overall.transaction_count == 4


def test_ledger_stats_empty_input_returns_zero_overall() -> None:
    """Return zero totals and no instrument rows for an empty ledger."""

    stats = stats_aggregate([], {})

    assert stats.by_instrument == ()
    assert stats.overall.realized_pnl == Decimal("0")
    assert stats.overall.transaction_count == 0


def test_ledger_stats_sums_realized_pnl_across_closed_lots() -> None:
    """Add realized P/L of every closed lot, including losses."""

    stats = stats_aggregate(
        [StatsTransactionInput("ACME", "SELL", Decimal("2"), Decimal("20.00"))],
        {"ACME": [_stats_closed_lot("5.25"), _stats_closed_lot("-7.10")]},
    )

    assert stats.by_instrument[0].realized_pnl == Decimal("-1.85")
    assert stats.overall.realized_pnl == Decimal("-1.85")
