"""HTTP envelope, error mapping and caller identity shared by all routers.

Every response, success or failure, is wrapped in the same envelope::

    {"success": true,  "message": "...", "data": {...}}
    {"success": false, "message": "...", "error": {...}}
"""

from typing import Any, Generic, TypeVar

import structlog
from fastapi import FastAPI, Header, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import (
    ExpectedVersionError,
    InvalidOperationError,
    ObjectNotFoundError,
    ValidationError,
)
from pydantic import BaseModel

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class AuthenticationError(Exception):
    """The request carries no authenticated caller."""

    def __init__(self, message: str = "Authentication required"):
        self.message = message
        super().__init__(message)


class Envelope(BaseModel, Generic[T]):
    success: bool = True
    message: str = "OK"
    data: T | None = None


def ok(data: Any = None, message: str = "OK") -> dict:
    return {"success": True, "message": message, "data": data}


def _error_payload(exc: Exception) -> Any:
    messages = getattr(exc, "messages", None)
    if isinstance(messages, dict):
        return {key: list(value) if isinstance(value, list | tuple) else value for key, value in messages.items()}
    return str(exc)


def _first_message(error: Any, default: str) -> str:
    if isinstance(error, dict):
        for value in error.values():
            if isinstance(value, list) and value:
                return str(value[0])
            if value:
                return str(value)
    if isinstance(error, str) and error:
        return error
    return default


def _failure(status_code: int, message: str, error: Any) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, "error": jsonable_encoder(error)},
    )


async def validation_error_handler(_request: Request, exc: ValidationError) -> JSONResponse:
    error = _error_payload(exc)
    return _failure(400, _first_message(error, "Invalid request"), error)


async def request_validation_error_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = {}
    for item in exc.errors():
        field = ".".join(str(part) for part in item.get("loc", ()) if part != "body") or "body"
        errors.setdefault(field, []).append(item.get("msg", "Invalid value"))
    return _failure(400, _first_message(errors, "Invalid request"), errors)


async def not_found_handler(_request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    error = _error_payload(exc)
    return _failure(404, _first_message(error, "Not found"), error)


async def conflict_handler(_request: Request, exc: InvalidOperationError) -> JSONResponse:
    error = _error_payload(exc)
    return _failure(400, _first_message(error, "Operation not allowed"), error)


async def version_conflict_handler(_request: Request, exc: ExpectedVersionError) -> JSONResponse:
    logger.warning("Concurrent update could not be applied", error=str(exc))
    return _failure(409, "The resource was modified concurrently, please retry", str(exc))


async def authentication_error_handler(_request: Request, exc: AuthenticationError) -> JSONResponse:
    return _failure(401, exc.message, exc.message)


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        exc_info=exc,
    )
    return _failure(500, "Internal server error", "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain and transport errors to enveloped HTTP responses."""
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(ObjectNotFoundError, not_found_handler)
    app.add_exception_handler(InvalidOperationError, conflict_handler)
    app.add_exception_handler(ExpectedVersionError, version_conflict_handler)
    app.add_exception_handler(AuthenticationError, authentication_error_handler)
    app.add_exception_handler(Exception, generic_exception_handler)


def current_user_id(x_user_id: str | None = Header(default=None, alias="X-User-Id")) -> str | None:
    """Caller identity forwarded by the upstream auth layer, if any."""
    if x_user_id is None or not x_user_id.strip():
        return None
    return x_user_id.strip()


def require_user_id(x_user_id: str | None = Header(default=None, alias="X-User-Id")) -> str:
    user_id = current_user_id(x_user_id)
    if user_id is None:
        raise AuthenticationError()
    return user_id
