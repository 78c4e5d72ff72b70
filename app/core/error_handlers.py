# app/core/error_handlers.py
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.errors import (
    CartError,
    InvalidArgumentError,
    NotFoundError,
    ProductNotFoundError,
    TransientError,
    UnauthorizedError,
)

logger = logging.getLogger(__name__)

# Error kind -> HTTP status. Checked in order, so subclasses come first.
STATUS_BY_ERROR: list[tuple[type[CartError], int]] = [
    (UnauthorizedError, status.HTTP_403_FORBIDDEN),
    (InvalidArgumentError, status.HTTP_400_BAD_REQUEST),
    (ProductNotFoundError, status.HTTP_404_NOT_FOUND),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (TransientError, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def status_for(exc: CartError) -> int:
    for error_type, code in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def cart_error_handler(request: Request, exc: CartError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.warning("%s %s -> %s: %s", request.method, request.url.path, exc.code, exc)
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "code": exc.code},
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed request bodies are invalid arguments, not 422s."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": "Invalid request",
            "code": InvalidArgumentError.code,
            "errors": [
                {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
                for err in exc.errors()
            ],
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CartError, cart_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
