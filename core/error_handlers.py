"""
Error handlers: single translation point from raised errors to the error envelope.

Three-layer policy, matched in order:
    - AppError -> its own status and body
    - pydantic ValidationError / RequestValidationError -> 400 VALIDATION_ERROR
    - unmatched route -> 404 NOT_FOUND
    - anything else -> carried status_code (100-599) or 500; message hidden outside development
"""

import logging
import traceback
from typing import Any, Callable

from fastapi import FastAPI, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from core.config import get_settings
from core.errors import AppError
from utils.logging import get_logger

logger = get_logger(__name__)

GENERIC_MESSAGE = "Internal server error"


def register_error_handlers(app: FastAPI) -> None:
    """Route every handled error type through build_error_response."""
    for exc_class in (AppError, ValidationError, RequestValidationError, StarletteHTTPException):
        app.add_exception_handler(exc_class, _handle)
    # Innermost middleware: catches what the exception handlers above do not.
    app.add_middleware(ErrorHandlerMiddleware)


async def _handle(request: Request, exc: Exception) -> JSONResponse:
    return build_error_response(request, exc)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Catch-all for unknown errors so none propagate past the app."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            return build_error_response(request, exc)


def build_error_response(request: Request, exc: Exception) -> JSONResponse:
    """Log the error, then translate it into a JSON error envelope."""
    _request_logger(request).error(
        "request_error",
        extra={
            "path": request.url.path,
            "method": request.method,
            "error_type": type(exc).__name__,
            "error_code": getattr(exc, "code", None),
        },
        exc_info=None if isinstance(exc, (AppError, ValidationError, RequestValidationError)) else exc,
    )
    development = get_settings().is_development

    if isinstance(exc, AppError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict(include_stack=development))

    if isinstance(exc, ValidationError):
        issues = exc.errors(include_url=False, include_context=False)
        return _validation_response({"issues": jsonable_encoder(issues)})

    if isinstance(exc, RequestValidationError):
        return _validation_response({"validation": jsonable_encoder(exc.errors())})

    status_code = _carried_status(exc)
    if isinstance(exc, StarletteHTTPException) and status_code == status.HTTP_404_NOT_FOUND:
        # No route matched
        body: dict[str, Any] = {
            "message": f"Route {request.method}:{request.url.path} not found",
            "code": "NOT_FOUND",
            "statusCode": status_code,
        }
    else:
        body = {
            "message": (_raw_message(exc) or "Unknown error") if development else GENERIC_MESSAGE,
            "code": "INTERNAL_ERROR",
            "statusCode": status_code,
        }
    if development:
        body["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return JSONResponse(
        status_code=status_code,
        content={"error": body},
        headers=getattr(exc, "headers", None),
    )


def _validation_response(details: dict[str, Any]) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": {
                "message": "Validation failed",
                "code": "VALIDATION_ERROR",
                "statusCode": status.HTTP_400_BAD_REQUEST,
                "details": details,
            }
        },
    )


def _carried_status(exc: Exception) -> int:
    """Integer status_code on the error if it is a valid HTTP status, else 500."""
    status_code = getattr(exc, "status_code", None)
    if isinstance(status_code, int) and not isinstance(status_code, bool) and 100 <= status_code <= 599:
        return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _raw_message(exc: Exception) -> str:
    # Starlette HTTPException keeps its message in detail
    detail = getattr(exc, "detail", None)
    if isinstance(detail, str):
        return detail
    return str(exc)


def _request_logger(request: Request) -> logging.Logger | logging.LoggerAdapter:
    return getattr(request.state, "logger", None) or logger
