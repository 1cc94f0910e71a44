"""
Domain exceptions and global exception handlers.

Every error leaves the gateway as ``{"error": <message>, "success": false}``
so callers can surface the raw message to the operator; stack traces never
leak to clients.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

logger = logging.getLogger(__name__)


class PharmaHRError(Exception):
    """Base class for errors raised by the gateway and the engines."""

    status_code: int = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidPayload(PharmaHRError):
    """Request body does not match any known action variant."""


class InvalidQrFormat(PharmaHRError):
    """Scanned text could not be parsed into an employee id."""


class EmployeeNotFound(PharmaHRError):
    status_code = 404

    def __init__(self, employee_id: str) -> None:
        super().__init__(f"Employee '{employee_id}' is not in the loaded roster")
        self.employee_id = employee_id


class DuplicateEvaluation(PharmaHRError):
    status_code = 409


class NotFoundError(PharmaHRError):
    status_code = 404


class ConflictError(PharmaHRError):
    status_code = 409


class AuthenticationFailed(PharmaHRError):
    status_code = 401


class PermissionDenied(PharmaHRError):
    status_code = 403


class LockTimeout(PharmaHRError):
    """The write lock could not be acquired within the bounded wait."""

    status_code = 503


class GatewayError(PharmaHRError):
    """A gateway call failed; ``message`` is the raw error text."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": message, "success": False},
    )


async def _domain_error_handler(_request: Request, exc: PharmaHRError) -> JSONResponse:
    logger.info("%s: %s", type(exc).__name__, exc.message)
    return _error(exc.status_code, exc.message)


async def _http_exception_handler(_request: Request, exc: HTTPException) -> JSONResponse:
    return _error(exc.status_code, str(exc.detail))


async def _integrity_error_handler(_request: Request, exc: IntegrityError) -> JSONResponse:
    logger.error("Database integrity error: %s", exc, exc_info=True)
    return _error(409, "Record already exists")


async def _sqlalchemy_error_handler(_request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Database error: %s", exc, exc_info=True)
    return _error(500, "Internal database error")


async def _generic_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception: %s", exc)
    return _error(500, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all exception handlers to the FastAPI app."""
    app.add_exception_handler(PharmaHRError, _domain_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(HTTPException, _http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(IntegrityError, _integrity_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, _sqlalchemy_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _generic_exception_handler)
