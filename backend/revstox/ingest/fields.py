from __future__ import annotations

import datetime as dt
import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Optional

logger = logging.getLogger(__name__)

# sentinels "valeur manquante" dans les exports bhavcopy
MISSING_MARKERS = frozenset({"", "-"})

DATE_FORMATS = ("%Y-%m-%d", "%d-%b-%Y")

_INT_RE = re.compile(r"^[+-]?\d+$")
_DECIMAL_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")

# partie entiere de Numeric(28,6), echelle de Numeric(24,10)
MAX_DECIMAL_EXPONENT = 22
MIN_DECIMAL_EXPONENT = -10


def clean_number(raw: Optional[str]) -> str:
    """
    Convertit '"1,234.50"' -> "1234.50"
    Convertit ' 42 ' -> "42"
    """
    if raw is None:
        return ""
    return raw.replace('"', "").replace(",", "").strip()


def parse_decimal(raw: Optional[str]) -> Optional[Decimal]:
    value = clean_number(raw)
    if value in MISSING_MARKERS:
        return None

    if not _DECIMAL_RE.match(value):
        logger.warning("Could not parse decimal: %r", raw)
        return None

    try:
        d = Decimal(value)
    except InvalidOperation:
        logger.warning("Could not parse decimal: %r", raw)
        return None

    if d and not MIN_DECIMAL_EXPONENT <= d.adjusted() < MAX_DECIMAL_EXPONENT:
        logger.warning("Decimal out of range: %r", raw)
        return None
    return d


def parse_int(raw: Optional[str]) -> Optional[int]:
    value = clean_number(raw)
    if value in MISSING_MARKERS:
        return None

    if not _INT_RE.match(value):
        logger.warning("Could not parse integer: %r", raw)
        return None
    return int(value)


def parse_date(raw: Optional[str]) -> Optional[dt.date]:
    """
    Accepte "2021-01-05" puis "05-Jan-2021".
    Renvoie None si aucun format ne correspond (la date est un champ essentiel,
    c'est à l'appelant de rejeter la ligne).
    """
    value = (raw or "").replace('"', "").strip()
    if not value:
        return None

    for fmt in DATE_FORMATS:
        try:
            return dt.datetime.strptime(value, fmt).date()
        except ValueError:
            continue

    logger.warning("Could not parse date: %r", raw)
    return None
