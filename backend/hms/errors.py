"""Application error types and the FastAPI handlers that render them."""
import logging
import re
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from hms.config import get_settings

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base error carrying an HTTP status and a machine readable code."""

    status_code = 500
    code = "INTERNAL_SERVER_ERROR"
    default_message = "Internal server error"

    def __init__(
        self,
        message: str | None = None,
        *,
        code: str | None = None,
        field: str | None = None,
        errors: list[dict] | None = None,
    ):
        self.message = message or self.default_message
        if code:
            self.code = code
        self.field = field
        self.errors = errors
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return error_body(self.message, self.code, self.field, self.errors)


class ValidationError(AppError):
    status_code = 400
    code = "VALIDATION_ERROR"
    default_message = "Validation failed"


class UnauthorizedError(AppError):
    status_code = 401
    code = "UNAUTHORIZED"
    default_message = "Unauthorized"


class TokenExpiredError(UnauthorizedError):
    default_message = "Token expired"


class InvalidTokenError(UnauthorizedError):
    default_message = "Invalid token"


class ForbiddenError(AppError):
    status_code = 403
    code = "FORBIDDEN"
    default_message = "Forbidden"


class NotFoundError(AppError):
    status_code = 404
    code = "NOT_FOUND"
    default_message = "Resource not found"


class ConflictError(AppError):
    status_code = 409
    code = "CONFLICT"
    default_message = "Resource already exists"


class InternalServerError(AppError):
    pass


def error_body(
    message: str,
    code: str | None = None,
    field: str | None = None,
    errors: list[dict] | None = None,
    **extra: Any,
) -> dict[str, Any]:
    """Failure envelope; keys without a value are left out."""
    body: dict[str, Any] = {"success": False, "message": message}
    for key, value in (("code", code), ("field", field), ("errors", errors), *extra.items()):
        if value is not None:
            body[key] = value
    return body


DUPLICATE_FIELDS = (
    ("email", "Email already exists"),
    ("username", "Username already exists"),
    ("phone", "Phone number already exists"),
)


def conflict_from_integrity_error(exc: IntegrityError) -> AppError:
    """Translate a storage constraint violation into an application error."""
    text = str(exc.orig if exc.orig is not None else exc).lower()
    if "unique" not in text and "duplicate" not in text:
        return ValidationError("Invalid reference or missing required value")
    # drop offending values so only constraint and column names are matched
    names = re.sub(r"=\(.*?\)", "", text)
    names = re.sub(r"duplicate entry '.*?'", "duplicate entry", names)
    for field, message in DUPLICATE_FIELDS:
        if re.search(rf"[._(]{field}(?:_key|_idx)?\b", names):
            return ConflictError(message, field=field)
    return ConflictError("Duplicate entry", code="DUPLICATE_ENTRY")


def _field_name(loc: tuple) -> str:
    parts = [str(p) for p in loc if p not in ("body", "query", "path", "header", "cookie")]
    return ".".join(parts) or "body"


async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"field": _field_name(tuple(err.get("loc", ()))), "message": err.get("msg", "Invalid value")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content=error_body("Validation failed", "VALIDATION_ERROR", errors=errors),
    )


async def integrity_error_handler(request: Request, exc: IntegrityError):
    error = conflict_from_integrity_error(exc)
    logger.warning(f"Constraint violation on {request.method} {request.url.path}: {error.message}")
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    settings = get_settings()
    detail = str(exc) if settings.is_development else None
    return JSONResponse(
        status_code=500,
        content=error_body("Internal server error", "INTERNAL_SERVER_ERROR", detail=detail),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the error envelope handlers on an application."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
