from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel


class ErrorEnvelope(BaseModel):
    code: str
    message: str
    details: Optional[dict[str, Any]] = None
    requestId: Optional[str] = None


class Health(BaseModel):
    status: str = "ok"


class Version(BaseModel):
    version: str


class GeneratorConfig(BaseModel):
    symbols: str
    blockSize: int
    stepSize: int
    strict: bool
    spacingRatio: float


class NextIn(BaseModel):
    prev: str = ""


class PrevIn(BaseModel):
    next: str = ""


class BetweenIn(BaseModel):
    prev: str = ""
    before: str


class KeyOut(BaseModel):
    key: str
