"""Pydantic schemas for the fortune REST envelope."""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel


class RestResponseStatus(StrEnum):
    """Overall outcome of a call."""

    SUCCESS = "success"
    ERROR = "error"


class RestResponse(BaseModel):
    """Envelope wrapped around every API response."""

    status: RestResponseStatus
    code: int
    message: str | None = None
    data: Any = None


class FortunePayload(BaseModel):
    """Body of POST /api/v1/fortune."""

    fortune: str | None = None
