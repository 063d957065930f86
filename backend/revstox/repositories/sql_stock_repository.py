from __future__ import annotations

import datetime as dt
from decimal import Decimal

from sqlalchemy import DateTime, Numeric, String, delete, select
from sqlalchemy.orm import Mapped, Session, mapped_column, sessionmaker

from revstox.db_base import Base
from revstox.domain.stock import Stock
from revstox.repositories.stock_repository import StockRepository


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class StockRow(Base):
    __tablename__ = "stocks"

    symbol: Mapped[str] = mapped_column(String(50), primary_key=True)
    company_name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    sector: Mapped[str | None] = mapped_column(String(128), nullable=True)
    market_cap: Mapped[Decimal | None] = mapped_column(Numeric(24, 10), nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )


class SqlStockRepository(StockRepository):
    """
    Registre des symboles.
    - find(): None si inconnu
    - update(): KeyError si inconnu
    - delete(): supprime aussi cours et analytics du symbole
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._sessions = session_factory

    def list(self) -> list[Stock]:
        with self._sessions() as s:
            rows = s.execute(select(StockRow).order_by(StockRow.symbol)).scalars().all()
            return [self._to_domain(r) for r in rows]

    def find(self, symbol: str) -> Stock | None:
        with self._sessions() as s:
            row = s.get(StockRow, symbol.strip())
            return None if row is None else self._to_domain(row)

    def exists(self, symbol: str) -> bool:
        with self._sessions() as s:
            return s.get(StockRow, symbol.strip()) is not None

    def upsert(self, stock: Stock) -> None:
        sym = stock.symbol.strip()
        with self._sessions() as s:
            row = s.get(StockRow, sym)
            if row is None:
                s.add(
                    StockRow(
                        symbol=sym,
                        company_name=stock.company_name,
                        sector=stock.sector,
                        market_cap=stock.market_cap,
                    )
                )
            else:
                row.company_name = stock.company_name
                row.sector = stock.sector
                row.market_cap = stock.market_cap
            s.commit()

    def create_placeholder(self, symbol: str) -> Stock:
        placeholder = Stock.placeholder(symbol.strip())
        with self._sessions() as s:
            if s.get(StockRow, placeholder.symbol) is not None:
                raise ValueError(f"stock '{placeholder.symbol}' already exists")
            row = StockRow(
                symbol=placeholder.symbol,
                company_name=placeholder.company_name,
                sector=placeholder.sector,
                market_cap=placeholder.market_cap,
            )
            s.add(row)
            s.commit()
            return self._to_domain(row)

    def update(
        self,
        *,
        symbol: str,
        company_name: str | None,
        sector: str | None,
        market_cap: Decimal | None,
    ) -> Stock:
        sym = symbol.strip()
        with self._sessions() as s:
            row = s.get(StockRow, sym)
            if row is None:
                raise KeyError(f"unknown stock symbol '{sym}'")
            row.company_name = company_name
            row.sector = sector
            row.market_cap = market_cap
            s.commit()
            s.refresh(row)
            return self._to_domain(row)

    def delete(self, *, symbol: str) -> bool:
        # import here to avoid circular imports
        from revstox.repositories.sql_analytics_repository import StockAnalyticsRow
        from revstox.repositories.sql_price_repository import DailyPriceRow

        sym = symbol.strip()
        with self._sessions() as s:
            row = s.get(StockRow, sym)
            if row is None:
                return False
            s.execute(delete(DailyPriceRow).where(DailyPriceRow.symbol == sym))
            s.execute(delete(StockAnalyticsRow).where(StockAnalyticsRow.symbol == sym))
            s.delete(row)
            s.commit()
            return True

    @staticmethod
    def _to_domain(row: StockRow) -> Stock:
        return Stock(
            symbol=row.symbol,
            company_name=row.company_name,
            sector=row.sector,
            market_cap=None if row.market_cap is None else Decimal(row.market_cap),
            created_at=row.created_at,
            updated_at=row.updated_at,
        )
