from __future__ import annotations

import csv
import logging
from contextlib import closing
from pathlib import Path

from revstox.domain.import_run import ImportRun
from revstox.ingest.normalizer import MIN_FIELDS
from revstox.services.csv_import_service import read_csv_rows

logger = logging.getLogger(__name__)

SAMPLE_ROWS = 5
MAX_REJECTIONS_SHOWN = 10


def validate_csv(path: str | Path) -> bool:
    """
    Contrôle rapide du format, sans rien persister :
    - fichier vide ou header < 14 colonnes => False
    - les 5 premières lignes de données trop courtes => warning seulement
    """
    path = Path(path)
    try:
        with closing(read_csv_rows(path)) as rows:
            header = next(rows, None)
            if header is None:
                logger.error("CSV file is empty: %s", path)
                return False

            _, header_fields = header
            if len(header_fields) < MIN_FIELDS:
                logger.error(
                    "CSV file has insufficient columns. Expected at least %d, found: %d",
                    MIN_FIELDS,
                    len(header_fields),
                )
                return False

            for sampled, (line_no, fields) in enumerate(rows):
                if sampled >= SAMPLE_ROWS:
                    break
                if len(fields) < MIN_FIELDS:
                    logger.warning("Sample line %d has insufficient fields: %s", line_no, ",".join(fields))
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        logger.error("Error validating CSV file %s: %s", path, e)
        return False

    logger.info("CSV format validation completed successfully")
    return True


def preview_csv(path: str | Path) -> str:
    path = Path(path)
    lines = ["=== CSV IMPORT STATISTICS ===", f"File: {path}"]
    try:
        data_rows = 0
        header_seen = False
        for _, fields in read_csv_rows(path):
            if not header_seen:
                header_seen = True
                lines.append(f"Header: {','.join(fields)}")
                continue
            if fields:
                data_rows += 1
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        logger.error("Error getting import statistics: %s", e)
        return f"Error getting statistics for: {path}"

    lines.append(f"Total Data Lines: {data_rows}")
    return "\n".join(lines) + "\n"


def render_import_run(run: ImportRun) -> str:
    lines = ["=== CSV IMPORT REPORT ===", f"File: {run.source}"]
    if run.symbol:
        lines.append(f"Symbol filter: {run.symbol}")
    if run.file_error:
        lines.append(f"File error: {run.file_error}")
    lines += [
        f"Rows processed: {run.total}",
        f"Successful: {run.successful}",
        f"Failed: {run.failed}",
        f"Import time: {run.elapsed_seconds * 1000:.0f} ms",
    ]

    if run.succeeded:
        lines.append("CSV import completed successfully!")
    else:
        lines.append("CSV import completed with some errors. Check logs for details.")

    if run.rejections:
        lines.append("")
        lines.append("Rejected rows:")
        for r in run.rejections[:MAX_REJECTIONS_SHOWN]:
            lines.append(f"  line {r.line_no}: {r.reason}")
        hidden = len(run.rejections) - MAX_REJECTIONS_SHOWN
        if hidden > 0:
            lines.append(f"  ... and {hidden} more")

    return "\n".join(lines) + "\n"
