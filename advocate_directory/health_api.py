from __future__ import annotations

from typing import Any

from flask import Blueprint, current_app

bp = Blueprint("health_api", __name__)


@bp.get("/healthz")
def healthz() -> tuple[dict[str, Any], int]:
    # Minimal health endpoint for container orchestrators
    store = current_app.extensions["advocate_store"]
    return {"status": "ok", "store": store.describe()}, 200
