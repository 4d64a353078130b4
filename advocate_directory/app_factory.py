"""Flask application factory.

Provides:
 - App factory with configuration override
 - Store selection: SQLAlchemy when DATABASE_URL is set, null store otherwise
 - Unified JSON failure envelope {success,error,message}
 - Request id / duration headers and one structured log line per request
 - Blueprint registration (advocates API, UI, health, OpenAPI)
"""

from __future__ import annotations

import logging
from typing import Any

from dotenv import load_dotenv
from flask import Flask

from .advocates_api import bp as advocates_bp
from .config import Config
from .db import create_all, make_engine, make_session_factory
from .errors import register_error_handlers
from .health_api import bp as health_bp
from .logging_setup import configure_logging, install_request_logging
from .openapi import bp as openapi_bp
from .store import AdvocateStore, NullAdvocateStore, SqlAlchemyAdvocateStore
from .ui import ui_bp

log = logging.getLogger(__name__)


def _build_store(app: Flask, cfg: Config, config_override: dict[str, Any]) -> AdvocateStore:
    injected = config_override.get("advocate_store")
    if injected is not None:
        return injected
    if not cfg.database_url:
        log.warning("DATABASE_URL not set; serving an empty advocate directory")
        return NullAdvocateStore()
    engine = make_engine(cfg.database_url, echo=cfg.sql_echo)
    if config_override.get("create_schema"):
        create_all(engine)
    session_factory = make_session_factory(engine)
    app.extensions["advocate_engine"] = engine
    app.extensions["advocate_session_factory"] = session_factory
    return SqlAlchemyAdvocateStore(session_factory)


def create_app(config_override: dict[str, Any] | None = None) -> Flask:
    # Load .env early so DATABASE_URL etc. are visible to Config.from_env
    load_dotenv()
    app = Flask(__name__)
    override = dict(config_override or {})

    # --- Configuration ---
    cfg = Config.from_env()
    known = {k: v for k, v in override.items() if hasattr(cfg, k)}
    if known:
        cfg.override(known)
    app.config.update(cfg.to_flask_dict())
    for k, v in override.items():  # also allow direct Flask config keys
        if k.isupper():
            app.config[k] = v
    app.json.sort_keys = False  # type: ignore[attr-defined]

    configure_logging(cfg.log_level)

    # --- Store ---
    store = _build_store(app, cfg, override)
    app.extensions["advocate_store"] = store
    log.info("advocate store: %s", store.describe())

    # --- Middleware / errors ---
    install_request_logging(app)
    register_error_handlers(app)

    # --- Blueprints ---
    app.register_blueprint(advocates_bp)
    app.register_blueprint(ui_bp)
    app.register_blueprint(health_bp)
    app.register_blueprint(openapi_bp)
    return app


__all__ = ["create_app"]
