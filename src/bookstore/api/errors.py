"""HTTP mapping for the bookstore's typed failures."""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from bookstore.exceptions import (
    AlreadyFulfilledError,
    ForbiddenError,
    InsufficientStockError,
    InvalidItemError,
    InvalidStateError,
    NotFoundError,
    UnauthorizedError,
    UnavailableError,
)

logger = structlog.get_logger(__name__)

_STATUS_CODES = {
    NotFoundError: 404,
    InvalidItemError: 400,
    InvalidStateError: 409,
    AlreadyFulfilledError: 409,
    UnauthorizedError: 401,
    ForbiddenError: 403,
    UnavailableError: 503,
}


def _handler_for(status_code: int):
    async def handle(request: Request, exc) -> JSONResponse:
        return JSONResponse(status_code=status_code, content={"error": exc.messages})

    return handle


async def _insufficient_stock(request: Request, exc: InsufficientStockError) -> JSONResponse:
    return JSONResponse(
        status_code=409,
        content={
            "error": exc.messages,
            "book_id": exc.book_id,
            "title": exc.title,
            "requested": exc.requested,
            "available": exc.available,
        },
    )


async def _unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error while serving request", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=503, content={"error": {"service": ["Service unavailable, please retry"]}})


def register_error_handlers(app: FastAPI) -> None:
    """Install Protean's handlers, then the more specific bookstore ones."""
    register_exception_handlers(app)
    for exc_class, status_code in _STATUS_CODES.items():
        app.add_exception_handler(exc_class, _handler_for(status_code))
    app.add_exception_handler(InsufficientStockError, _insufficient_stock)
    app.add_exception_handler(Exception, _unexpected)
