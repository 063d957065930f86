import pytest
from rich.console import Console
from typer.testing import CliRunner

from revstox import cli
from revstox.menu import _Menu
from revstox.settings import get_settings
from revstox.wiring import build_services


HEADER = "Date,Symbol,Series,Prev Close,Open,High,Low,Last,Close,VWAP,Volume,Turnover,Trades,Deliverable Volume,%Deliverble"
ROW = "2021-01-04,TCS,EQ,2931.95,2946.00,3067.00,2946.00,3055.00,3054.15,3027.03,4604013,13936450000,167431,2151398,0.4673"
BAD = "2021-01-05,TCS,EQ,3054.15,3058.00,3097.00,3037.40,3080.00,,3072.29,3863457,11869660000,141092,1750842,0.4532"

runner = CliRunner()


def _patch_services(monkeypatch, session_factory):
    services = build_services(session_factory)
    monkeypatch.setattr(cli, "get_services", lambda: services)
    return services


def _write(tmp_path, *rows, name="prices.csv"):
    path = tmp_path / name
    path.write_text("\n".join([HEADER, *rows]) + "\n", encoding="utf-8")
    return path


def test_import_with_yes(monkeypatch, session_factory, tmp_path):
    services = _patch_services(monkeypatch, session_factory)
    path = _write(tmp_path, ROW)

    result = runner.invoke(cli.app, ["import", str(path), "--yes"])

    assert result.exit_code == 0, result.output
    assert "CSV import completed successfully!" in result.output
    assert services.stocks.available_symbols() == ["TCS"]


def test_import_with_errors_exits_1(monkeypatch, session_factory, tmp_path):
    _patch_services(monkeypatch, session_factory)
    path = _write(tmp_path, ROW, BAD)

    result = runner.invoke(cli.app, ["import", str(path), "-y"])

    assert result.exit_code == 1
    assert "Check logs for details." in result.output


def test_import_cancelled(monkeypatch, session_factory, tmp_path):
    services = _patch_services(monkeypatch, session_factory)
    path = _write(tmp_path, ROW)

    result = runner.invoke(cli.app, ["import", str(path)], input="n\n")

    assert result.exit_code == 0
    assert "CSV import cancelled." in result.output
    assert services.stocks.available_symbols() == []


def test_import_blank_path_uses_default(monkeypatch, session_factory, tmp_path):
    services = _patch_services(monkeypatch, session_factory)
    path = _write(tmp_path, ROW, name="default.csv")
    monkeypatch.setenv("REVSTOX_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("REVSTOX_DEFAULT_CSV", str(path))

    result = runner.invoke(cli.app, ["import", "  ", "--yes"])

    assert result.exit_code == 0, result.output
    assert services.stocks.stock_exists("TCS")


def test_import_invalid_file_exits_1(monkeypatch, session_factory, tmp_path):
    _patch_services(monkeypatch, session_factory)
    path = tmp_path / "short.csv"
    path.write_text("Date,Symbol\n", encoding="utf-8")

    result = runner.invoke(cli.app, ["import", str(path), "--yes"])

    assert result.exit_code == 1
    assert "validation failed" in result.output


def test_validate_and_preview(tmp_path):
    path = _write(tmp_path, ROW, ROW)

    ok = runner.invoke(cli.app, ["validate", str(path)])
    assert ok.exit_code == 0

    missing = runner.invoke(cli.app, ["validate", str(tmp_path / "missing.csv")])
    assert missing.exit_code == 1

    preview = runner.invoke(cli.app, ["preview", str(path)])
    assert preview.exit_code == 0
    assert "Total Data Lines: 2" in preview.output


def test_menu_stock_flow(monkeypatch, session_factory, tmp_path):
    services = _patch_services(monkeypatch, session_factory)
    monkeypatch.setenv("REVSTOX_DATA_DIR", str(tmp_path))
    path = _write(tmp_path, ROW)

    keys = [
        "1",                # stock management
        "1", str(path), "y",  # import csv
        "2",                # view all
        "4", "infy", "Infosys", "IT", "",  # add stock
        "7", "tcs",         # latest price
        "x",                # invalid input
        "0",                # back
        "3",                # system information
        "0",                # exit
    ]
    result = runner.invoke(cli.app, ["menu"], input="\n".join(keys) + "\n")

    assert result.exit_code == 0, result.output
    assert "CSV import completed successfully!" in result.output
    assert "Stock added successfully: INFY" in result.output
    assert "=== LATEST PRICE FOR TCS ===" in result.output
    assert "Invalid input! Please enter a number." in result.output
    assert services.stocks.get_stock("INFY").company_name == "Infosys"


def test_menu_analytics_flow(monkeypatch, session_factory, tmp_path):
    services = _patch_services(monkeypatch, session_factory)
    monkeypatch.setenv("REVSTOX_DATA_DIR", str(tmp_path))
    services.imports.run(_write(tmp_path, ROW))

    keys = [
        "2",                          # analytics
        "1", "tcs", "2021-01-04",     # calculate
        "2", "TCS", "",               # view analytics
        "8", "2021-01-01", "",        # top performers
        "0",
        "0",
    ]
    result = runner.invoke(cli.app, ["menu"], input="\n".join(keys) + "\n")

    assert result.exit_code == 0, result.output
    assert "Analytics calculated and stored successfully!" in result.output
    assert len(services.analytics.get_analytics("TCS")) == 1


def test_menu_without_handlers_cannot_be_built(session_factory):
    class _Incomplete(_Menu):
        title = "INCOMPLETE"

    with pytest.raises(TypeError):
        _Incomplete(build_services(session_factory), Console(), get_settings())
