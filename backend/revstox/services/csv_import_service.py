from __future__ import annotations

import csv
import logging
import time
from pathlib import Path
from typing import Iterator, Optional

from revstox.domain.import_run import ImportRun, RowResult
from revstox.ingest.normalizer import normalize_row
from revstox.repositories.price_repository import PriceRepository
from revstox.repositories.stock_repository import StockRepository

logger = logging.getLogger(__name__)

PROGRESS_EVERY = 1000


def read_csv_rows(path: Path) -> Iterator[tuple[int, list[str]]]:
    """
    (line_no, fields) pour chaque ligne du fichier, header compris (line 1).
    Le handle est libéré à la sortie du générateur, y compris sur exception.
    """
    with path.open("r", encoding="utf-8-sig", newline="") as f:
        reader = csv.reader(f)
        for fields in reader:
            yield reader.line_num, fields


class CsvImportService:
    """
    Import d'un export CSV de cours journaliers.
    Chaque ligne est upsertée indépendamment : une ligne invalide est comptée
    en échec et n'interrompt pas l'import (pas de rollback global).
    """

    def __init__(self, *, stock_repo: StockRepository, price_repo: PriceRepository) -> None:
        self._stocks = stock_repo
        self._prices = price_repo

    def run(self, source_path: str | Path) -> ImportRun:
        logger.info("Starting CSV import from: %s", source_path)
        return self._run(Path(source_path), target_symbol=None)

    def run_for_symbol(self, source_path: str | Path, target_symbol: str) -> ImportRun:
        logger.info("Starting targeted CSV import for symbol %s from: %s", target_symbol, source_path)
        return self._run(Path(source_path), target_symbol=target_symbol.strip())

    # -------- internals --------

    def _run(self, path: Path, *, target_symbol: Optional[str]) -> ImportRun:
        run = ImportRun(source=str(path), symbol=target_symbol)
        started = time.perf_counter()
        wanted = target_symbol.casefold() if target_symbol is not None else None

        try:
            header_seen = False
            for line_no, fields in read_csv_rows(path):
                if not header_seen:
                    header_seen = True
                    logger.info("CSV Header: %s", ",".join(fields))
                    continue

                if not fields:
                    continue

                if wanted is not None:
                    if len(fields) < 2 or fields[1].strip().casefold() != wanted:
                        continue

                run.record(self._process_row(line_no, fields))

                if run.total % PROGRESS_EVERY == 0:
                    logger.info(
                        "Processed %d records. Success: %d, Failed: %d",
                        run.total,
                        run.successful,
                        run.failed,
                    )
        except (OSError, UnicodeDecodeError, csv.Error) as e:
            run.file_error = str(e)
            logger.error("Error reading CSV file %s: %s", path, e)

        run.elapsed_seconds = time.perf_counter() - started
        logger.info(
            "CSV import completed%s. Total: %d, Success: %d, Failed: %d",
            f" for {target_symbol}" if target_symbol else "",
            run.total,
            run.successful,
            run.failed,
        )
        return run

    def _process_row(self, line_no: int, fields: list[str]) -> RowResult:
        outcome = normalize_row(fields)
        if not outcome.ok:
            return RowResult.rejected(line_no, outcome.reason or "invalid row", outcome.symbol)

        record = outcome.record
        try:
            self._ensure_stock_exists(record.symbol)
            affected = self._prices.upsert(record)
        except Exception as e:
            # une erreur de stockage ne rejette que cette ligne
            logger.exception("Error persisting line %d (%s): %s", line_no, record.symbol, e)
            return RowResult.rejected(line_no, f"storage error: {e.__class__.__name__}", record.symbol)

        if affected < 1:
            logger.warning("No row affected for %s on %s (line %d)", record.symbol, record.trade_date, line_no)
            return RowResult.rejected(line_no, "no row affected", record.symbol)

        return RowResult.accepted(line_no, record.symbol)

    def _ensure_stock_exists(self, symbol: str) -> None:
        if self._stocks.exists(symbol):
            return
        self._stocks.create_placeholder(symbol)
        logger.info("Created new stock entry for: %s", symbol)
