from __future__ import annotations

import datetime as dt
from decimal import Decimal

from sqlalchemy import BigInteger, Date, ForeignKey, Integer, Numeric, String, UniqueConstraint, func, select
from sqlalchemy.orm import Mapped, Session, mapped_column, sessionmaker

from revstox.db_base import Base
from revstox.domain.price_record import PriceRecord
from revstox.repositories.price_repository import PriceRepository
from revstox.repositories.sql_stock_repository import StockRow  # noqa: F401

# colonnes écrasées lors d'un upsert (tout sauf l'identité)
_VALUE_COLUMNS = (
    "series",
    "prev_close",
    "open",
    "high",
    "low",
    "last",
    "close",
    "vwap",
    "volume",
    "turnover",
    "trades",
    "deliverable_volume",
    "deliverable_percentage",
)


class DailyPriceRow(Base):
    __tablename__ = "daily_prices"
    __table_args__ = (UniqueConstraint("symbol", "trade_date", name="uix_daily_prices_symbol_trade_date"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    symbol: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("stocks.symbol", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    trade_date: Mapped[dt.date] = mapped_column(Date, index=True, nullable=False)
    series: Mapped[str | None] = mapped_column(String(10), nullable=True)
    prev_close: Mapped[Decimal | None] = mapped_column(Numeric(24, 10), nullable=True)
    open: Mapped[Decimal] = mapped_column("open_price", Numeric(24, 10), nullable=False)
    high: Mapped[Decimal] = mapped_column("high_price", Numeric(24, 10), nullable=False)
    low: Mapped[Decimal] = mapped_column("low_price", Numeric(24, 10), nullable=False)
    last: Mapped[Decimal | None] = mapped_column("last_price", Numeric(24, 10), nullable=True)
    close: Mapped[Decimal] = mapped_column("close_price", Numeric(24, 10), nullable=False)
    vwap: Mapped[Decimal | None] = mapped_column(Numeric(24, 10), nullable=True)
    volume: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    turnover: Mapped[Decimal | None] = mapped_column(Numeric(28, 6), nullable=True)
    trades: Mapped[int | None] = mapped_column(Integer, nullable=True)
    deliverable_volume: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    deliverable_percentage: Mapped[Decimal | None] = mapped_column(Numeric(10, 4), nullable=True)


class SqlPriceRepository(PriceRepository):
    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._sessions = session_factory

    def upsert(self, record: PriceRecord) -> int:
        with self._sessions() as s:
            row = s.execute(
                select(DailyPriceRow)
                .where(DailyPriceRow.symbol == record.symbol)
                .where(DailyPriceRow.trade_date == record.trade_date)
            ).scalars().first()

            if row is None:
                s.add(self._to_row(record))
            else:
                for name in _VALUE_COLUMNS:
                    setattr(row, name, getattr(record, name))
            s.commit()
            return 1

    def get(self, *, symbol: str, trade_date: dt.date) -> PriceRecord | None:
        stmt = (
            select(DailyPriceRow)
            .where(DailyPriceRow.symbol == symbol.strip())
            .where(DailyPriceRow.trade_date == trade_date)
        )
        with self._sessions() as s:
            row = s.execute(stmt).scalars().first()
        return None if row is None else self._to_domain(row)

    def list(self, *, symbol: str | None = None) -> list[PriceRecord]:
        stmt = select(DailyPriceRow)
        if symbol is not None:
            stmt = stmt.where(DailyPriceRow.symbol == symbol.strip())
        stmt = stmt.order_by(DailyPriceRow.symbol, DailyPriceRow.trade_date)

        with self._sessions() as s:
            rows = s.execute(stmt).scalars().all()

        return [self._to_domain(r) for r in rows]

    def list_between(self, *, symbol: str, date_from: dt.date, date_to: dt.date) -> list[PriceRecord]:
        if date_from > date_to:
            raise ValueError("date_from must be <= date_to")

        stmt = (
            select(DailyPriceRow)
            .where(DailyPriceRow.symbol == symbol.strip())
            .where(DailyPriceRow.trade_date >= date_from)
            .where(DailyPriceRow.trade_date <= date_to)
            .order_by(DailyPriceRow.trade_date)
        )
        with self._sessions() as s:
            rows = s.execute(stmt).scalars().all()

        return [self._to_domain(r) for r in rows]

    def list_since(self, *, date_from: dt.date) -> list[PriceRecord]:
        stmt = (
            select(DailyPriceRow)
            .where(DailyPriceRow.trade_date >= date_from)
            .order_by(DailyPriceRow.symbol, DailyPriceRow.trade_date)
        )
        with self._sessions() as s:
            rows = s.execute(stmt).scalars().all()

        return [self._to_domain(r) for r in rows]

    def latest(self, *, symbol: str) -> PriceRecord | None:
        stmt = (
            select(DailyPriceRow)
            .where(DailyPriceRow.symbol == symbol.strip())
            .order_by(DailyPriceRow.trade_date.desc())
            .limit(1)
        )
        with self._sessions() as s:
            row = s.execute(stmt).scalars().first()

        return None if row is None else self._to_domain(row)

    def symbols(self) -> list[str]:
        stmt = select(DailyPriceRow.symbol).distinct().order_by(DailyPriceRow.symbol)
        with self._sessions() as s:
            return list(s.execute(stmt).scalars().all())

    def date_range(self, *, symbol: str) -> tuple[dt.date, dt.date] | None:
        stmt = select(func.min(DailyPriceRow.trade_date), func.max(DailyPriceRow.trade_date)).where(
            DailyPriceRow.symbol == symbol.strip()
        )
        with self._sessions() as s:
            first, last = s.execute(stmt).one()

        if first is None or last is None:
            return None
        return (first, last)

    def count_by_symbol(self) -> dict[str, int]:
        stmt = (
            select(DailyPriceRow.symbol, func.count(DailyPriceRow.id))
            .group_by(DailyPriceRow.symbol)
            .order_by(func.count(DailyPriceRow.id).desc(), DailyPriceRow.symbol)
        )
        with self._sessions() as s:
            return {sym: int(n) for sym, n in s.execute(stmt).all()}

    @staticmethod
    def _to_row(r: PriceRecord) -> DailyPriceRow:
        return DailyPriceRow(
            symbol=r.symbol,
            trade_date=r.trade_date,
            **{name: getattr(r, name) for name in _VALUE_COLUMNS},
        )

    @staticmethod
    def _to_domain(row: DailyPriceRow) -> PriceRecord:
        def dec(v) -> Decimal | None:
            return None if v is None else Decimal(v)

        return PriceRecord(
            symbol=row.symbol,
            trade_date=row.trade_date,
            series=row.series,
            prev_close=dec(row.prev_close),
            open=Decimal(row.open),
            high=Decimal(row.high),
            low=Decimal(row.low),
            last=dec(row.last),
            close=Decimal(row.close),
            vwap=dec(row.vwap),
            volume=row.volume,
            turnover=dec(row.turnover),
            trades=row.trades,
            deliverable_volume=row.deliverable_volume,
            deliverable_percentage=dec(row.deliverable_percentage),
        )
