from __future__ import annotations

from pathlib import Path

import pytest

from revstox.db import create_db_engine, create_session_factory, init_db

HEADER = (
    "Date,Symbol,Series,Prev Close,Open,High,Low,Last,Close,VWAP,"
    "Volume,Turnover,Trades,Deliverable Volume,%Deliverble"
)


@pytest.fixture
def session_factory(tmp_path: Path):
    # une base sqlite neuve par test
    engine = create_db_engine(f"sqlite:///{(tmp_path / 'test.db').as_posix()}")
    init_db(engine)
    yield create_session_factory(engine)
    engine.dispose()


@pytest.fixture
def write_csv(tmp_path: Path):
    """write_csv(*lines, name=..., header=True) -> Path"""

    def _write(*lines: str, name: str = "prices.csv", header: bool = True) -> Path:
        path = tmp_path / name
        content = ([HEADER] if header else []) + list(lines)
        path.write_text("\n".join(content) + ("\n" if content else ""), encoding="utf-8")
        return path

    return _write
