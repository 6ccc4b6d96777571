"""Application error taxonomy and FastAPI exception handlers.

Every failure the service layer can report is an :class:`AppException` tagged
with one :class:`ErrorKind`. The set of kinds is closed, so the HTTP layer (and
any other caller) can branch exhaustively on ``exc.kind``.
"""

import enum
import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import Settings

logger = logging.getLogger(__name__)


class ErrorKind(str, enum.Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    INVALID_STATE_TRANSITION = "INVALID_STATE_TRANSITION"
    INVALID_OPERATION = "INVALID_OPERATION"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    STORE_FAILURE = "STORE_FAILURE"


_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.INVALID_STATE_TRANSITION: status.HTTP_409_CONFLICT,
    ErrorKind.INVALID_OPERATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.STORE_FAILURE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class AppException(Exception):
    """The one application exception; ``kind`` says what went wrong."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        errors: list[dict[str, Any]] | None = None,
    ):
        self.kind = kind
        self.message = message
        self.errors = errors
        super().__init__(message)

    @property
    def status_code(self) -> int:
        return _STATUS_BY_KIND[self.kind]

    @property
    def code(self) -> str:
        return self.kind.value


def validation_error(message: str, errors: list[dict[str, Any]] | None = None) -> AppException:
    return AppException(ErrorKind.VALIDATION_ERROR, message, errors)


def not_found(entity: str, entity_id: str | None = None) -> AppException:
    msg = f"{entity} not found" if not entity_id else f"{entity} '{entity_id}' not found"
    return AppException(ErrorKind.NOT_FOUND, msg)


def invalid_transition(
    transition: str, current_status: str | None, reason: str | None = None
) -> AppException:
    msg = f"Cannot {transition} vendor in status '{current_status}'"
    if reason:
        msg = f"{msg}: {reason}"
    return AppException(ErrorKind.INVALID_STATE_TRANSITION, msg)


def invalid_operation(message: str) -> AppException:
    return AppException(ErrorKind.INVALID_OPERATION, message)


def unauthorized(message: str = "Authentication required") -> AppException:
    return AppException(ErrorKind.UNAUTHORIZED, message)


def forbidden(message: str = "Access denied") -> AppException:
    return AppException(ErrorKind.FORBIDDEN, message)


def store_failure(message: str = "A storage error occurred") -> AppException:
    return AppException(ErrorKind.STORE_FAILURE, message)


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

def _error_body(
    message: str,
    errors: list[dict[str, Any]] | None = None,
    details: str | None = None,
    show_details: bool = False,
) -> dict:
    body: dict[str, Any] = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    if details and show_details:
        body["details"] = details
    return body


def _field_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    errors = []
    for err in exc.errors():
        # loc looks like ("body", "companyName") or ("path", "vendor_id")
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        errors.append({"field": ".".join(loc) or None, "message": err.get("msg", "Invalid value")})
    return errors


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    """Attach all custom exception handlers to the FastAPI app.

    Failure details are echoed only when ``settings`` is a development config.
    """
    show_details = settings.is_development

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        if exc.kind is ErrorKind.STORE_FAILURE:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.message, exc.errors),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body("Validation failed", _field_errors(exc)),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        if exc.status_code == status.HTTP_404_NOT_FOUND and message == "Not Found":
            message = "Endpoint not found"
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(message),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(SQLAlchemyError)
    async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.exception("Store failure on %s %s", request.method, request.url.path)
        failure = store_failure()
        return JSONResponse(
            status_code=failure.status_code,
            content=_error_body(failure.message, details=str(exc), show_details=show_details),
        )

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body("Internal server error", details=str(exc), show_details=show_details),
        )
