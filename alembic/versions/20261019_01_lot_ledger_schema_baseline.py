"""Lot ledger schema baseline

Revision ID: 20261019_01
Revises: None
Create Date: 2026-10-19
"""
# pylint: disable=no-member,invalid-name,wrong-import-order

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "20261019_01"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""

    op.execute("CREATE EXTENSION IF NOT EXISTS pgcrypto")

    op.create_table(
        "instrument",
        sa.Column("instrument_id", postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("instrument_class", sa.Text(), nullable=False),
        sa.Column("created_at_utc", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.UniqueConstraint("name", name="uq_instrument_name"),
        sa.CheckConstraint(
            "instrument_class in ('domestic-equity', 'cross-border-equity', 'foreign-equity')",
            name="ck_instrument_class",
        ),
    )

    op.create_table(
        "trade_transaction",
        sa.Column("transaction_id", postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("instrument_name", sa.Text(), nullable=False),
        sa.Column("side", sa.Text(), nullable=False),
        sa.Column("quantity", sa.Numeric(24, 8), nullable=False),
        sa.Column("price", sa.Numeric(24, 8), nullable=False),
        sa.Column("total_amount", sa.Numeric(24, 2), nullable=False),
        sa.Column("original_quantity", sa.Numeric(24, 8), nullable=False),
        sa.Column("original_price", sa.Numeric(24, 8), nullable=False),
        sa.Column("transaction_date", sa.Date(), nullable=False),
        sa.Column("commission", sa.Numeric(24, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("tax", sa.Numeric(24, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("profit_loss", sa.Numeric(24, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("created_at_utc", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint("side in ('BUY', 'SELL')", name="ck_trade_transaction_side"),
        sa.CheckConstraint("quantity > 0 and original_quantity > 0", name="ck_trade_transaction_quantity_positive"),
        sa.CheckConstraint("price >= 0 and original_price > 0", name="ck_trade_transaction_price"),
        sa.ForeignKeyConstraint(["instrument_name"], ["instrument.name"], ondelete="RESTRICT"),
    )
    op.create_index(
        "ix_trade_transaction_instrument_replay_order",
        "trade_transaction",
        ["instrument_name", "transaction_date", "created_at_utc"],
    )

    op.create_table(
        "corporate_action",
        sa.Column("action_id", postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("instrument_name", sa.Text(), nullable=False),
        sa.Column("action_type", sa.Text(), nullable=False),
        sa.Column("action_date", sa.Date(), nullable=False),
        sa.Column("ratio", sa.Numeric(24, 8), nullable=True),
        sa.Column("amount", sa.Numeric(24, 8), nullable=True),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("created_at_utc", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint(
            "action_type in ('DIVIDEND', 'SPLIT', 'REVERSE_SPLIT')",
            name="ck_corporate_action_type",
        ),
        sa.CheckConstraint(
            "(action_type = 'DIVIDEND' and amount > 0 and ratio is null) "
            "or (action_type in ('SPLIT', 'REVERSE_SPLIT') and ratio > 0 and amount is null)",
            name="ck_corporate_action_value_by_type",
        ),
        sa.ForeignKeyConstraint(["instrument_name"], ["instrument.name"], ondelete="CASCADE"),
    )
    op.create_index(
        "ix_corporate_action_instrument_apply_order",
        "corporate_action",
        ["instrument_name", "action_date", "created_at_utc"],
    )


def downgrade() -> None:
    """Downgrade schema."""

    op.drop_index("ix_corporate_action_instrument_apply_order", table_name="corporate_action")
    op.drop_table("corporate_action")
    op.drop_index("ix_trade_transaction_instrument_replay_order", table_name="trade_transaction")
    op.drop_table("trade_transaction")
    op.drop_table("instrument")
