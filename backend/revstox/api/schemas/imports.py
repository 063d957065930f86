from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class RejectionOut(BaseModel):
    line_no: int
    symbol: Optional[str]
    reason: Optional[str]


class ImportRunOut(BaseModel):
    source: str
    symbol: Optional[str]
    total: int = Field(ge=0)
    successful: int = Field(ge=0)
    failed: int = Field(ge=0)
    elapsed_ms: int = Field(ge=0)
    succeeded: bool
    file_error: Optional[str]
    rejections: list[RejectionOut]


class ValidationOut(BaseModel):
    filename: str
    valid: bool
