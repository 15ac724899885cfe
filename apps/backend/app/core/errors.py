"""Typed failures raised by the ledger services and their HTTP mapping."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .logging import get_logger

logger = get_logger(__name__)


class LedgerError(Exception):
    """Base class; ``reason`` is the machine-readable message sent to clients."""

    status_code = 500

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class ValidationFailure(LedgerError):
    status_code = 400


class NotFound(LedgerError):
    status_code = 404

    def __init__(self, reason: str = "not found") -> None:
        super().__init__(reason)


class RenderFailure(LedgerError):
    """A layout decoration (merge, border) could not be applied to the sheet."""


def _error_body(reason: str) -> dict:
    return {"ok": False, "error": reason}


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(LedgerError)
    async def _ledger_error(request: Request, exc: LedgerError):
        if exc.status_code >= 500:
            logger.error("[%s %s] %s", request.method, request.url.path, exc.reason, exc_info=exc)
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc.reason))

    @app.exception_handler(RequestValidationError)
    async def _request_validation(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        detail = errors[0].get("msg", "invalid payload") if errors else "invalid payload"
        logger.info("[%s %s] rejected: %s", request.method, request.url.path, detail)
        return JSONResponse(
            status_code=400,
            content={**_error_body("invalid payload"), "detail": detail},
        )

    @app.exception_handler(Exception)
    async def _unexpected(request: Request, exc: Exception):
        logger.exception("[%s %s] unexpected failure", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content=_error_body("internal error"))
