from __future__ import annotations

from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from revstox.settings import get_settings


def create_db_engine(url: str) -> Engine:
    # sqlite needs check_same_thread for FastAPI sync access
    connect_args = {}
    if url.startswith("sqlite:///"):
        connect_args = {"check_same_thread": False}

    return create_engine(url, future=True, connect_args=connect_args)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False, future=True)


def init_db(engine: Engine) -> None:
    # import here to avoid circular imports
    from revstox.db_base import Base
    from revstox.repositories.sql_stock_repository import StockRow  # noqa: F401
    from revstox.repositories.sql_price_repository import DailyPriceRow  # noqa: F401
    from revstox.repositories.sql_analytics_repository import StockAnalyticsRow  # noqa: F401

    Base.metadata.create_all(engine)


@lru_cache
def get_engine() -> Engine:
    engine = create_db_engine(get_settings().database_url)
    init_db(engine)
    return engine


@lru_cache
def get_session_factory() -> sessionmaker[Session]:
    return create_session_factory(get_engine())
