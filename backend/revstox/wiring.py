from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.orm import Session, sessionmaker

from revstox.repositories.sql_analytics_repository import SqlAnalyticsRepository
from revstox.repositories.sql_price_repository import SqlPriceRepository
from revstox.repositories.sql_stock_repository import SqlStockRepository
from revstox.services.analytics_service import AnalyticsService
from revstox.services.csv_import_service import CsvImportService
from revstox.services.stock_service import StockService


@dataclass(frozen=True)
class Services:
    stocks: StockService
    imports: CsvImportService
    analytics: AnalyticsService


def build_services(session_factory: sessionmaker[Session]) -> Services:
    stock_repo = SqlStockRepository(session_factory)
    price_repo = SqlPriceRepository(session_factory)
    analytics_repo = SqlAnalyticsRepository(session_factory)

    return Services(
        stocks=StockService(stock_repo=stock_repo, price_repo=price_repo),
        imports=CsvImportService(stock_repo=stock_repo, price_repo=price_repo),
        analytics=AnalyticsService(price_repo=price_repo, analytics_repo=analytics_repo),
    )
