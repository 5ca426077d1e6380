"""Exception handlers mapping failures to structured responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from bookit.schemas.common import ErrorResponse
from bookit.services.errors import BookingError, ErrorKind

logger = logging.getLogger(__name__)

_STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.VALIDATION_FAILED: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _error_response(
    kind: ErrorKind, message: str, detail: object | None = None
) -> JSONResponse:
    payload = ErrorResponse(kind=kind, message=message, detail=detail)
    return JSONResponse(
        status_code=_STATUS_BY_KIND[kind],
        content=jsonable_encoder(payload, exclude_none=True),
    )


async def _handle_booking_error(request: Request, exc: BookingError) -> JSONResponse:
    logger.info("%s %s -> %s", request.method, request.url.path, exc)
    return _error_response(exc.kind, exc.message, exc.detail)


async def _handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "message": error.get("msg", "Invalid value"),
        }
        for error in exc.errors()
    ]
    return _error_response(ErrorKind.VALIDATION_FAILED, "Validation failed", errors)


async def _handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error_response(ErrorKind.INTERNAL, "An unexpected error occurred")


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the structured failure handlers to the application."""
    app.add_exception_handler(BookingError, _handle_booking_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _handle_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _handle_unexpected_error)
