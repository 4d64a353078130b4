"""Logging configuration and per-request timing middleware.

Every response carries ``X-Request-Id`` (echoed from the request or freshly
generated) and ``X-Request-Duration-ms``, and one structured line is written
to the ``advocates`` logger per request.
"""

from __future__ import annotations

import logging
import time
import uuid

from flask import Flask, g, request
from werkzeug.wrappers.response import Response

APP_LOGGER = "advocates"


def configure_logging(level: str = "INFO") -> logging.Logger:
    log = logging.getLogger(APP_LOGGER)
    if not log.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter("%(message)s"))
        log.addHandler(h)
    log.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    # module loggers (advocate_directory.*) follow the configured level too
    logging.getLogger("advocate_directory").setLevel(log.level)
    return log


def install_request_logging(app: Flask) -> None:
    log = logging.getLogger(APP_LOGGER)

    @app.before_request
    def _before_req() -> None:
        g._t0 = time.perf_counter()
        g.request_id = request.headers.get("X-Request-Id") or str(uuid.uuid4())

    @app.after_request
    def _after_req(resp: Response) -> Response:
        dur_ms = int((time.perf_counter() - getattr(g, "_t0", time.perf_counter())) * 1000)
        rid = getattr(g, "request_id", None) or str(uuid.uuid4())
        resp.headers["X-Request-Id"] = rid
        resp.headers["X-Request-Duration-ms"] = str(dur_ms)
        log.info(
            {
                "request_id": rid,
                "method": request.method,
                "path": request.path,
                "status": resp.status_code,
                "duration_ms": dur_ms,
            }
        )
        return resp


__all__ = ["APP_LOGGER", "configure_logging", "install_request_logging"]
