import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class StorefrontError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "", field: str | None = None):
        super().__init__(message)
        self.message = message
        self.field = field


class ValidationError(StorefrontError):
    """Malformed input; ``field`` names the offending field."""
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


class NotFoundError(StorefrontError):
    status_code = status.HTTP_404_NOT_FOUND


class UnauthorizedError(StorefrontError):
    status_code = status.HTTP_403_FORBIDDEN


class UpstreamError(StorefrontError):
    """Payment gateway or webhook signature failure."""
    status_code = status.HTTP_502_BAD_GATEWAY


class PersistenceError(StorefrontError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class EmptyCartError(StorefrontError):
    status_code = status.HTTP_303_SEE_OTHER


class SessionNotExpirableError(UpstreamError):
    """The gateway refused to expire a session (already completed or expired)."""


class WebhookSignatureError(UpstreamError):
    status_code = status.HTTP_400_BAD_REQUEST


class CheckoutConflictError(StorefrontError):
    """Another checkout replaced the pending session while this one ran."""
    status_code = status.HTTP_409_CONFLICT


def _error_body(exc: StorefrontError) -> dict:
    body = {"detail": exc.message or exc.__class__.__name__}
    if exc.field:
        body["field"] = exc.field
    return body


async def empty_cart_handler(request: Request, exc: EmptyCartError):
    return RedirectResponse("/cart", status_code=status.HTTP_303_SEE_OTHER)


async def storefront_error_handler(request: Request, exc: StorefrontError):
    if exc.status_code >= 500:
        logger.error(f"{exc.__class__.__name__} on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc))


async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception(f"Database failure on {request.url.path}")
    return JSONResponse(
        status_code=PersistenceError.status_code,
        content={"detail": "Database operation failed, please try again."},
    )


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(EmptyCartError, empty_cart_handler)
    app.add_exception_handler(StorefrontError, storefront_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
