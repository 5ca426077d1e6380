"""Response envelopes shared by all endpoints."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from bookit.services.errors import ErrorKind

DataT = TypeVar("DataT")


class Envelope(BaseModel, Generic[DataT]):
    """Successful response wrapper."""

    success: bool = True
    message: str | None = None
    data: DataT


class ListEnvelope(BaseModel, Generic[DataT]):
    """Successful list response wrapper."""

    success: bool = True
    count: int
    data: list[DataT]


class ErrorResponse(BaseModel):
    """Structured failure payload."""

    success: bool = False
    kind: ErrorKind
    message: str
    detail: Any | None = None
