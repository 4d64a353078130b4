"""Database engine + session factory construction.

Unlike a module-global engine, each app builds its own engine and hands the
session factory to the store it injects (see ``store.SqlAlchemyAdvocateStore``).
"""

from __future__ import annotations

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .models import Base


def normalize_url(url: str) -> str:
    # Normalize postgres schemes to ensure SQLAlchemy uses psycopg v3
    if url.startswith("postgres://"):
        return "postgresql+psycopg://" + url[len("postgres://") :]
    if url.startswith("postgresql://") and "+" not in url.split("://", 1)[1].split("@", 1)[0]:
        return "postgresql+psycopg://" + url[len("postgresql://") :]
    return url


def _enable_sqlite_foreign_keys(engine: Engine) -> None:
    # junction cascades rely on FK enforcement, which sqlite leaves off by default
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_conn, _record) -> None:  # pragma: no cover - driver hook
        cur = dbapi_conn.cursor()
        cur.execute("PRAGMA foreign_keys=ON")
        cur.close()


def make_engine(database_url: str, echo: bool = False) -> Engine:
    engine = create_engine(normalize_url(database_url), future=True, echo=echo)
    if engine.dialect.name == "sqlite":
        _enable_sqlite_foreign_keys(engine)
    return engine


def make_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def create_all(engine: Engine) -> None:
    """Dev/test helper ONLY for fresh ephemeral DBs. Use Alembic in normal flows."""
    Base.metadata.create_all(engine)
