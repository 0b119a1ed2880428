"""
Taskboard - Structured Errors
Error taxonomy shared by the server (raised by services, rendered by handlers)
and the client (rebuilt from error responses).
"""

from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from constants import ErrorCodes
from logging_config import get_logger

logger = get_logger(__name__)


class AppError(Exception):
    """Base class for every error that crosses the API boundary"""

    code = ErrorCodes.INTERNAL_SERVER_ERROR
    status_code = 500

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        field_errors: Optional[Dict[str, List[str]]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.field = field
        self.field_errors = dict(field_errors or {})
        if field and field not in self.field_errors:
            self.field_errors[field] = [message]

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "success": False,
            "error": self.message,
            "code": self.code,
        }
        if self.field_errors:
            payload["field_errors"] = self.field_errors
        return payload

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


class InvalidInputError(AppError):
    """Empty or oversized fields, rejected before persistence"""

    code = ErrorCodes.BAD_REQUEST
    status_code = 400


class NotFoundError(AppError):
    """Stale id: the task or category no longer exists"""

    code = ErrorCodes.NOT_FOUND
    status_code = 404


class ConflictError(AppError):
    """Duplicate category name"""

    code = ErrorCodes.CONFLICT
    status_code = 409


class InternalError(AppError):
    """Server-side failure, fully rolled back"""

    code = ErrorCodes.INTERNAL_SERVER_ERROR
    status_code = 500


class RateLimitError(AppError):
    code = ErrorCodes.TOO_MANY_REQUESTS
    status_code = 429


class TransportError(AppError):
    """The request never produced a response (connection refused, timeout, ...)"""

    code = ErrorCodes.TRANSPORT_ERROR
    status_code = 0


_ERRORS_BY_CODE = {
    cls.code: cls
    for cls in (InvalidInputError, NotFoundError, ConflictError, InternalError, RateLimitError, TransportError)
}

_ERRORS_BY_STATUS = {
    400: InvalidInputError,
    404: NotFoundError,
    409: ConflictError,
    422: InvalidInputError,
    429: RateLimitError,
}


def error_from_response(status_code: int, payload: Any) -> AppError:
    """
    Rebuild an AppError from an error response body.

    Falls back to the HTTP status when the body carries no known code.
    """
    if not isinstance(payload, dict):
        payload = {}

    error_cls = _ERRORS_BY_CODE.get(payload.get("code")) or _ERRORS_BY_STATUS.get(status_code, InternalError)
    message = payload.get("error") or f"Request failed with status {status_code}"
    if not isinstance(message, str):
        message = str(message)
    return error_cls(message, field_errors=payload.get("field_errors"))


def _validation_field_errors(exc: RequestValidationError) -> Dict[str, List[str]]:
    field_errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        # loc looks like ("body", "title") or ("query", "id")
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query")]
        field = ".".join(loc) or "_"
        field_errors.setdefault(field, []).append(error.get("msg", "Invalid value"))
    return field_errors


def register_error_handlers(app: FastAPI) -> None:
    """Install handlers that render AppError and request validation failures"""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error(
                f"{exc.code}: {exc.message}",
                extra={"extra_fields": {"path": request.url.path}}
            )
        elif exc.status_code == 404:
            logger.info(
                f"{exc.code}: {exc.message}",
                extra={"extra_fields": {"path": request.url.path}}
            )
        else:
            logger.warning(
                f"{exc.code}: {exc.message}",
                extra={"extra_fields": {"path": request.url.path, "method": request.method}}
            )
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        field_errors = _validation_field_errors(exc)
        first_field, first_messages = next(iter(field_errors.items()), ("_", ["Invalid input"]))
        error = InvalidInputError(
            f"Invalid input for '{first_field}': {first_messages[0]}",
            field_errors=field_errors,
        )
        logger.warning(
            f"Request validation failed: {error.message}",
            extra={"extra_fields": {"path": request.url.path, "method": request.method}}
        )
        return JSONResponse(status_code=error.status_code, content=error.to_dict())
