"""stocks, daily_prices, stock_analytics

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18 09:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "stocks",
        sa.Column("symbol", sa.String(length=50), primary_key=True),
        sa.Column("company_name", sa.String(length=256), nullable=True),
        sa.Column("sector", sa.String(length=128), nullable=True),
        sa.Column("market_cap", sa.Numeric(24, 10), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        "daily_prices",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "symbol",
            sa.String(length=50),
            sa.ForeignKey("stocks.symbol", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("trade_date", sa.Date(), nullable=False),
        sa.Column("series", sa.String(length=10), nullable=True),
        sa.Column("prev_close", sa.Numeric(24, 10), nullable=True),
        sa.Column("open_price", sa.Numeric(24, 10), nullable=False),
        sa.Column("high_price", sa.Numeric(24, 10), nullable=False),
        sa.Column("low_price", sa.Numeric(24, 10), nullable=False),
        sa.Column("last_price", sa.Numeric(24, 10), nullable=True),
        sa.Column("close_price", sa.Numeric(24, 10), nullable=False),
        sa.Column("vwap", sa.Numeric(24, 10), nullable=True),
        sa.Column("volume", sa.BigInteger(), nullable=True),
        sa.Column("turnover", sa.Numeric(28, 6), nullable=True),
        sa.Column("trades", sa.Integer(), nullable=True),
        sa.Column("deliverable_volume", sa.BigInteger(), nullable=True),
        sa.Column("deliverable_percentage", sa.Numeric(10, 4), nullable=True),
        sa.UniqueConstraint("symbol", "trade_date", name="uix_daily_prices_symbol_trade_date"),
    )
    op.create_index("ix_daily_prices_symbol", "daily_prices", ["symbol"])
    op.create_index("ix_daily_prices_trade_date", "daily_prices", ["trade_date"])

    op.create_table(
        "stock_analytics",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("symbol", sa.String(length=50), nullable=False),
        sa.Column("analysis_date", sa.Date(), nullable=False),
        sa.Column("daily_volatility", sa.Numeric(24, 10), nullable=True),
        sa.Column("daily_price_change", sa.Numeric(24, 10), nullable=True),
        sa.Column("price_gap", sa.Numeric(24, 10), nullable=True),
        sa.Column("moving_avg_7", sa.Numeric(24, 10), nullable=True),
        sa.Column("moving_avg_30", sa.Numeric(24, 10), nullable=True),
        sa.Column("moving_avg_90", sa.Numeric(24, 10), nullable=True),
        sa.Column("volume_trend", sa.Numeric(24, 10), nullable=True),
        sa.Column("turnover_ratio", sa.Numeric(24, 10), nullable=True),
        sa.UniqueConstraint("symbol", "analysis_date", name="uix_stock_analytics_symbol_date"),
    )
    op.create_index("ix_stock_analytics_symbol", "stock_analytics", ["symbol"])
    op.create_index("ix_stock_analytics_analysis_date", "stock_analytics", ["analysis_date"])


def downgrade() -> None:
    op.drop_index("ix_stock_analytics_analysis_date", table_name="stock_analytics")
    op.drop_index("ix_stock_analytics_symbol", table_name="stock_analytics")
    op.drop_table("stock_analytics")
    op.drop_index("ix_daily_prices_trade_date", table_name="daily_prices")
    op.drop_index("ix_daily_prices_symbol", table_name="daily_prices")
    op.drop_table("daily_prices")
    op.drop_table("stocks")
