from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class ErrorOut(BaseModel):
    """Wire form of ``RequestError.to_json()``."""

    message: str
    status: int
    details: Optional[str] = None


class HealthOut(BaseModel):
    status: str
    service: str
