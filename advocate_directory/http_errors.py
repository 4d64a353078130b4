"""Shared failure-envelope helpers for consistent error responses.

Every non-2xx JSON body has the shape ``{"success": false, "error", "message"}``.
"""
from __future__ import annotations

from flask import g, jsonify
from werkzeug.wrappers.response import Response

def error_response(status: int, error: str, message: str, **extra: object) -> Response:
    payload: dict[str, object] = {
        "success": False,
        "error": error,
        "message": message,
    }
    for k, v in extra.items():
        if v is not None:
            payload[k] = v
    resp = jsonify(payload)
    resp.status_code = status
    rid = getattr(g, "request_id", None)
    if rid and "X-Request-Id" not in resp.headers:
        resp.headers["X-Request-Id"] = rid
    return resp


def internal_server_error(message: str = "Unknown error", error: str = "Internal server error", **extra: object) -> Response:
    return error_response(500, error, message, **extra)


__all__ = ["error_response", "internal_server_error"]
