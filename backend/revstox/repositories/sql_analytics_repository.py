from __future__ import annotations

import datetime as dt
from decimal import Decimal

from sqlalchemy import Date, Integer, Numeric, String, UniqueConstraint, delete, select
from sqlalchemy.orm import Mapped, Session, mapped_column, sessionmaker

from revstox.db_base import Base
from revstox.domain.stock_analytics import StockAnalytics
from revstox.repositories.analytics_repository import AnalyticsRepository

_METRIC_COLUMNS = (
    "daily_volatility",
    "daily_price_change",
    "price_gap",
    "moving_avg_7",
    "moving_avg_30",
    "moving_avg_90",
    "volume_trend",
    "turnover_ratio",
)


class StockAnalyticsRow(Base):
    __tablename__ = "stock_analytics"
    __table_args__ = (UniqueConstraint("symbol", "analysis_date", name="uix_stock_analytics_symbol_date"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    symbol: Mapped[str] = mapped_column(String(50), index=True, nullable=False)
    analysis_date: Mapped[dt.date] = mapped_column(Date, index=True, nullable=False)
    daily_volatility: Mapped[Decimal | None] = mapped_column(Numeric(24, 10), nullable=True)
    daily_price_change: Mapped[Decimal | None] = mapped_column(Numeric(24, 10), nullable=True)
    price_gap: Mapped[Decimal | None] = mapped_column(Numeric(24, 10), nullable=True)
    moving_avg_7: Mapped[Decimal | None] = mapped_column(Numeric(24, 10), nullable=True)
    moving_avg_30: Mapped[Decimal | None] = mapped_column(Numeric(24, 10), nullable=True)
    moving_avg_90: Mapped[Decimal | None] = mapped_column(Numeric(24, 10), nullable=True)
    volume_trend: Mapped[Decimal | None] = mapped_column(Numeric(24, 10), nullable=True)
    turnover_ratio: Mapped[Decimal | None] = mapped_column(Numeric(24, 10), nullable=True)


class SqlAnalyticsRepository(AnalyticsRepository):
    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._sessions = session_factory

    def upsert(self, analytics: StockAnalytics) -> int:
        with self._sessions() as s:
            row = s.execute(
                select(StockAnalyticsRow)
                .where(StockAnalyticsRow.symbol == analytics.symbol)
                .where(StockAnalyticsRow.analysis_date == analytics.analysis_date)
            ).scalars().first()

            if row is None:
                row = StockAnalyticsRow(symbol=analytics.symbol, analysis_date=analytics.analysis_date)
                s.add(row)
            for name in _METRIC_COLUMNS:
                setattr(row, name, getattr(analytics, name))
            s.commit()
            return 1

    def list(self, *, symbol: str) -> list[StockAnalytics]:
        stmt = (
            select(StockAnalyticsRow)
            .where(StockAnalyticsRow.symbol == symbol.strip())
            .order_by(StockAnalyticsRow.analysis_date.desc())
        )
        with self._sessions() as s:
            rows = s.execute(stmt).scalars().all()
        return [self._to_domain(r) for r in rows]

    def list_between(self, *, symbol: str, date_from: dt.date, date_to: dt.date) -> list[StockAnalytics]:
        if date_from > date_to:
            raise ValueError("date_from must be <= date_to")

        stmt = (
            select(StockAnalyticsRow)
            .where(StockAnalyticsRow.symbol == symbol.strip())
            .where(StockAnalyticsRow.analysis_date >= date_from)
            .where(StockAnalyticsRow.analysis_date <= date_to)
            .order_by(StockAnalyticsRow.analysis_date.desc())
        )
        with self._sessions() as s:
            rows = s.execute(stmt).scalars().all()
        return [self._to_domain(r) for r in rows]

    def list_since(self, *, date_from: dt.date) -> list[StockAnalytics]:
        stmt = (
            select(StockAnalyticsRow)
            .where(StockAnalyticsRow.analysis_date >= date_from)
            .order_by(StockAnalyticsRow.symbol, StockAnalyticsRow.analysis_date)
        )
        with self._sessions() as s:
            rows = s.execute(stmt).scalars().all()
        return [self._to_domain(r) for r in rows]

    def delete_before(self, *, day: dt.date) -> int:
        with self._sessions() as s:
            res = s.execute(delete(StockAnalyticsRow).where(StockAnalyticsRow.analysis_date < day))
            s.commit()
            return int(res.rowcount or 0)

    @staticmethod
    def _to_domain(row: StockAnalyticsRow) -> StockAnalytics:
        return StockAnalytics(
            symbol=row.symbol,
            analysis_date=row.analysis_date,
            **{
                name: None if getattr(row, name) is None else Decimal(getattr(row, name))
                for name in _METRIC_COLUMNS
            },
        )
