"""Domain error system + handler registration.

All handlers render the ``{success, error, message}`` failure envelope.
"""
from __future__ import annotations

import logging
import uuid
from typing import Any

from flask import request
from werkzeug.exceptions import HTTPException
from werkzeug.wrappers.response import Response

from .http_errors import error_response, internal_server_error

log = logging.getLogger(__name__)


class DirectoryError(Exception):
    status_code = 400
    error = "bad_request"

    def __init__(self, message: str | None = None, *, error: str | None = None, status: int | None = None):
        super().__init__(message or self.error)
        if error:
            self.error = error
        if status:
            self.status_code = status
        self.message = message or self.error


class QueryParamError(DirectoryError):
    """Raised in strict mode when a query parameter violates the fallback policy."""

    status_code = 400
    error = "Invalid query parameters"

    def __init__(self, param: str, raw: object, reason: str):
        super().__init__(f"{param}: {reason} (got {raw!r})")
        self.param = param
        self.raw = raw
        self.reason = reason


class NotFoundError(DirectoryError):
    status_code = 404
    error = "Not found"


class StoreUnavailableError(DirectoryError):
    status_code = 503
    error = "Service unavailable"


class UnsupportedFilterOperation(ValueError):
    """An operation was requested against a field type that cannot express it."""

    def __init__(self, field: str, operation: str, kind: str):
        super().__init__(f"Unsupported operation {operation} for {kind} field {field}")
        self.field = field
        self.operation = operation


def register_error_handlers(app: Any) -> None:
    @app.errorhandler(DirectoryError)
    def _h_directory(err: DirectoryError) -> Response:
        return error_response(err.status_code, err.error, err.message)

    @app.errorhandler(HTTPException)
    def _h_http(ex: HTTPException) -> Response:
        status = ex.code or 500
        if status >= 500:
            return internal_server_error()
        return error_response(status, ex.name, str(ex.description))

    @app.errorhandler(Exception)
    def _h_exception(ex: Exception) -> Response:
        incident_id = str(uuid.uuid4())
        log.error("Unhandled exception incident_id=%s path=%s", incident_id, request.path, exc_info=ex)
        return internal_server_error(message=str(ex) or "Unknown error", incident_id=incident_id)


__all__ = [
    "DirectoryError",
    "NotFoundError",
    "QueryParamError",
    "StoreUnavailableError",
    "UnsupportedFilterOperation",
    "register_error_handlers",
]
