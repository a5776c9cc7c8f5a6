"""Trade journal error taxonomy and the handlers that render it as JSON."""
import logging
from typing import Optional, Sequence

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from trading_journal.core.config import settings

logger = logging.getLogger(__name__)


class JournalError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class TradeValidationError(JournalError):
    status_code = 400
    default_message = "Invalid trade payload"

    def __init__(self, message: Optional[str] = None, missing_fields: Sequence[str] = ()):
        self.missing_fields = list(missing_fields)
        if message is None and self.missing_fields:
            message = f"Missing required fields: {', '.join(self.missing_fields)}"
        super().__init__(message)


class TradeNotFoundError(JournalError):
    status_code = 404
    default_message = "Trade not found"

    def __init__(self, trade_id: Optional[str] = None):
        self.trade_id = trade_id
        super().__init__()


class StorageError(JournalError):
    status_code = 500
    default_message = "Database error"

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None):
        self.detail = detail
        super().__init__(message)


def error_body(message: str, details=None) -> dict:
    body = {"success": False, "error": message}
    if details is not None:
        body["details"] = details
    return body


async def journal_error_handler(request: Request, exc: JournalError) -> ORJSONResponse:
    details = None
    if isinstance(exc, TradeValidationError) and exc.missing_fields:
        details = {"missingFields": exc.missing_fields}
    elif isinstance(exc, StorageError) and settings.is_development:
        details = exc.detail

    if exc.status_code >= 500:
        reason = getattr(exc, "detail", None) or exc.message
        logger.error(f"{request.method} {request.url.path} failed: {reason}")
    else:
        logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return ORJSONResponse(status_code=exc.status_code, content=error_body(exc.message, details))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> ORJSONResponse:
    details = [
        {"field": ".".join(str(p) for p in err.get("loc", ()) if p != "body"), "message": err.get("msg")}
        for err in exc.errors()
    ]
    logger.warning(f"{request.method} {request.url.path} -> 400: {details}")
    return ORJSONResponse(status_code=400, content=error_body("Invalid request", details))


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> ORJSONResponse:
    return ORJSONResponse(status_code=exc.status_code, content=error_body(str(exc.detail)))


async def unhandled_error_handler(request: Request, exc: Exception) -> ORJSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    details = str(exc) if settings.is_development else None
    return ORJSONResponse(status_code=500, content=error_body("Internal server error", details))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(JournalError, journal_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
