from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from revstox.api.deps import get_services
from revstox.api.mappers.response_mappers import run_to_response
from revstox.api.schemas.imports import ImportRunOut, ValidationOut
from revstox.services.import_report import validate_csv
from revstox.wiring import Services

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/imports", tags=["import"])


def _spool(file: UploadFile) -> Path:
    """Copie l'upload dans un fichier temporaire (le pipeline lit un chemin)."""
    if not file.filename or not file.filename.lower().endswith(".csv"):
        raise HTTPException(status_code=422, detail="Invalid file type (expected .csv)")

    fd, name = tempfile.mkstemp(suffix=".csv", prefix="revstox-upload-")
    with os.fdopen(fd, "wb") as out:
        shutil.copyfileobj(file.file, out)
    return Path(name)


@router.post("/prices-csv", response_model=ImportRunOut)
def import_prices_csv(
    file: UploadFile = File(...),
    symbol: str | None = None,
    services: Services = Depends(get_services),
):
    path = _spool(file)
    try:
        if symbol and symbol.strip():
            run = services.imports.run_for_symbol(path, symbol.strip().upper())
        else:
            run = services.imports.run(path)
    finally:
        path.unlink(missing_ok=True)

    run.source = file.filename
    logger.info(
        "Upload import %s: %d ok, %d failed", file.filename, run.successful, run.failed
    )
    return run_to_response(run)


@router.post("/validate", response_model=ValidationOut)
def validate_upload(file: UploadFile = File(...)):
    path = _spool(file)
    try:
        valid = validate_csv(path)
    finally:
        path.unlink(missing_ok=True)
    return ValidationOut(filename=file.filename, valid=valid)
