"""Application error taxonomy and the handlers that normalize failures to JSON.

Every failed request produces exactly one body of the form::

    {"statusCode": 404, "error": "Todo not found"}

Validation failures add ``details`` (a list of ``{field, message}``), and
unclassified errors add ``detail``/``stack`` outside production.
"""

import logging
import traceback
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, NoResultFound
from sqlalchemy.orm.exc import StaleDataError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from todo_api.config import get_settings

logger = logging.getLogger(__name__)

# Request parts FastAPI prefixes to validation error locations
_LOCATION_PREFIXES = {"body", "path", "query", "cookie", "header"}

# SQLSTATE codes reported by PostgreSQL drivers
_UNIQUE_VIOLATION = "23505"
_FOREIGN_KEY_VIOLATION = "23503"


class AppError(Exception):
    """Base class for errors that map to a specific HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal Server Error"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_body(self) -> dict[str, Any]:
        return {"statusCode": self.status_code, "error": self.message}


class ValidationFailedError(AppError):
    """Input failed one or more field rules."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Validation failed"

    def __init__(self, details: list[dict[str, str]], message: str | None = None):
        super().__init__(message)
        self.details = details

    def to_body(self) -> dict[str, Any]:
        body = super().to_body()
        body["details"] = self.details
        return body


class UnauthenticatedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Not authenticated"


class InvalidCredentialsError(AppError):
    """Login failed. The message never reveals whether the email exists."""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid credentials"


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Forbidden"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    message = "Conflict"


def _field_name(loc: tuple) -> str:
    parts = [str(part) for part in loc]
    if parts and parts[0] in _LOCATION_PREFIXES and len(parts) > 1:
        parts = parts[1:]
    return ".".join(parts) or "request"


def validation_details(errors: list[dict[str, Any]]) -> list[dict[str, str]]:
    """Convert pydantic errors to ``{field, message}`` pairs, one per field."""
    details: list[dict[str, str]] = []
    seen: set[str] = set()
    for error in errors:
        field = _field_name(tuple(error.get("loc", ())))
        if field in seen:
            continue
        seen.add(field)
        details.append({"field": field, "message": error.get("msg", "Invalid value")})
    return details


def is_unique_violation(exc: IntegrityError) -> bool:
    """Check whether an integrity error was caused by a unique constraint."""
    return _constraint_kind(exc) == "unique"


def _constraint_kind(exc: IntegrityError) -> str | None:
    orig = exc.orig
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code == _UNIQUE_VIOLATION:
        return "unique"
    if code == _FOREIGN_KEY_VIOLATION:
        return "foreign_key"

    text = str(orig).lower()
    if "unique" in text or "duplicate" in text:
        return "unique"
    if "foreign key" in text:
        return "foreign_key"
    return None


def _json(body: dict[str, Any], headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(status_code=body["statusCode"], content=body, headers=headers)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return _json(exc.to_body())


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    error = ValidationFailedError(validation_details(list(exc.errors())))
    return _json(error.to_body())


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    body = {"statusCode": exc.status_code, "error": str(exc.detail)}
    return _json(body, headers=getattr(exc, "headers", None))


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    kind = _constraint_kind(exc)
    if kind == "unique":
        return _json(ConflictError("A record with this value already exists").to_body())
    if kind == "foreign_key":
        return _json(
            {"statusCode": status.HTTP_400_BAD_REQUEST, "error": "Related record not found"}
        )
    return await unhandled_error_handler(request, exc)


async def missing_row_handler(request: Request, exc: Exception) -> JSONResponse:
    return _json(NotFoundError("The requested resource was not found").to_body())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)

    body: dict[str, Any] = {
        "statusCode": status.HTTP_500_INTERNAL_SERVER_ERROR,
        "error": "Internal Server Error",
    }
    if not get_settings().is_production:
        body["detail"] = repr(exc)
        body["stack"] = "".join(traceback.format_exception(exc))
    return _json(body)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers that map every failure to the JSON error shape."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(NoResultFound, missing_row_handler)
    app.add_exception_handler(StaleDataError, missing_row_handler)


class UnhandledErrorMiddleware:
    """Turn unclassified exceptions into the JSON 500 body.

    Must be installed inside CORS so 500 responses carry the CORS headers.
    Errors raised after the response has started are re-raised.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as exc:
            if response_started:
                raise
            response = await unhandled_error_handler(Request(scope), exc)
            await response(scope, receive, send)
