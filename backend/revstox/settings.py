from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    database_url: str
    default_csv_path: Path
    log_level: str


def _env(name: str) -> str | None:
    value = os.getenv(name)
    if value and value.strip():
        return value.strip()
    return None


def get_settings() -> Settings:
    # 1) env var
    env_dir = _env("REVSTOX_DATA_DIR")
    if env_dir is not None:
        data_dir = Path(env_dir).expanduser()
    else:
        # 2) default: backend/data
        # revstox/settings.py -> revstox/ -> backend/
        data_dir = Path(__file__).resolve().parents[1] / "data"

    data_dir.mkdir(parents=True, exist_ok=True)

    database_url = _env("REVSTOX_DATABASE_URL") or f"sqlite:///{(data_dir / 'revstox.db').as_posix()}"

    env_csv = _env("REVSTOX_DEFAULT_CSV")
    default_csv = Path(env_csv).expanduser() if env_csv else data_dir / "NIFTY50_sample.csv"

    log_level = (_env("REVSTOX_LOG_LEVEL") or "INFO").upper()

    return Settings(
        data_dir=data_dir,
        database_url=database_url,
        default_csv_path=default_csv,
        log_level=log_level,
    )
