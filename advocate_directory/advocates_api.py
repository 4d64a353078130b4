"""Advocate JSON API.

``GET /api/advocates`` (also served at ``/advocates``) supports offset and
cursor pagination, sorting on a fixed field set, and ``field[op]=value``
filters. Invalid input falls back to defaults unless ``STRICT_QUERY_PARAMS``
is enabled, in which case it is rejected with 400.
"""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.wrappers.response import Response

from .api_types import AdvocateDetailResponse
from .errors import NotFoundError, StoreUnavailableError
from .http_errors import internal_server_error
from .listing import list_advocates
from .seed import seed_database
from .store import AdvocateStore

bp = Blueprint("advocates_api", __name__)


def current_store() -> AdvocateStore:
    return current_app.extensions["advocate_store"]


def strict_mode() -> bool:
    return bool(current_app.config.get("STRICT_QUERY_PARAMS", False))


@bp.get("/api/advocates")
@bp.get("/advocates")
def get_advocates() -> Response:
    result = list_advocates(current_store(), request.args, request.url, strict=strict_mode())
    resp = jsonify(result.body)
    resp.status_code = result.status
    for name, value in result.headers.items():
        resp.headers[name] = value
    return resp


@bp.get("/api/advocates/<advocate_id>")
def get_advocate(advocate_id: str) -> Response:
    record = current_store().get_advocate(advocate_id)
    if record is None:
        raise NotFoundError(f"Advocate {advocate_id} not found")
    return jsonify(AdvocateDetailResponse(success=True, data=record))


@bp.post("/api/seed")
def seed() -> Response | tuple[Response, int]:
    session_factory = current_app.extensions.get("advocate_session_factory")
    if session_factory is None:
        raise StoreUnavailableError("DATABASE_URL is not configured")
    with session_factory() as db:
        try:
            result = seed_database(db)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            current_app.logger.exception("Error seeding database")
            return internal_server_error(message=str(e), error="Failed to seed database")
    return jsonify(
        {"success": True, "data": result.to_summary(), "message": "Database seeded successfully"}
    ), 201


__all__ = ["bp", "current_store", "strict_mode"]
