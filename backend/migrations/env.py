import os
import sys
from logging.config import fileConfig

from sqlalchemy import create_engine
from sqlalchemy import pool


# --- add backend/ to sys.path (so "revstox.*" imports work)
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from alembic import context

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

from revstox.db_base import Base
from revstox.settings import get_settings

# Ensure all models are registered on Base.metadata for autogenerate
from revstox.repositories.sql_stock_repository import StockRow  # noqa: F401
from revstox.repositories.sql_price_repository import DailyPriceRow  # noqa: F401
from revstox.repositories.sql_analytics_repository import StockAnalyticsRow  # noqa: F401

target_metadata = Base.metadata


def _database_url() -> str:
    # REVSTOX_DATABASE_URL (or the default sqlite file) wins over alembic.ini
    return get_settings().database_url


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode (SQL emitted to the script output)."""
    context.configure(
        url=_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = create_engine(_database_url(), poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=True,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
