from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class RowStatus(str, Enum):
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


@dataclass(frozen=True, slots=True)
class RowResult:
    line_no: int
    status: RowStatus
    symbol: Optional[str] = None
    reason: Optional[str] = None

    @classmethod
    def accepted(cls, line_no: int, symbol: str) -> "RowResult":
        return cls(line_no=line_no, status=RowStatus.ACCEPTED, symbol=symbol)

    @classmethod
    def rejected(cls, line_no: int, reason: str, symbol: Optional[str] = None) -> "RowResult":
        return cls(line_no=line_no, status=RowStatus.REJECTED, symbol=symbol, reason=reason)


@dataclass
class ImportRun:
    """
    Compteurs d'une exécution d'import (non persistés).
    - total / successful / failed dérivés des RowResult enregistrés
    - file_error : erreur fichier => aucune ligne traitée
    """
    source: str
    symbol: Optional[str] = None
    total: int = 0
    successful: int = 0
    failed: int = 0
    elapsed_seconds: float = 0.0
    file_error: Optional[str] = None
    rejections: list[RowResult] = field(default_factory=list)

    def record(self, result: RowResult) -> None:
        self.total += 1
        if result.status is RowStatus.ACCEPTED:
            self.successful += 1
        else:
            self.failed += 1
            self.rejections.append(result)

    @property
    def succeeded(self) -> bool:
        return self.file_error is None and self.failed == 0
