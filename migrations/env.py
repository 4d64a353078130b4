"""Alembic environment for the advocate directory schema.

``DATABASE_URL`` wins over ``sqlalchemy.url`` in alembic.ini and goes
through the same driver normalisation as the app.
"""
from __future__ import annotations

import os
import sys
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from advocate_directory.db import normalize_url  # noqa: E402
from advocate_directory.models import Base  # noqa: E402

alembic_cfg = context.config
if alembic_cfg.config_file_name:
    fileConfig(alembic_cfg.config_file_name)

env_url = (os.getenv("DATABASE_URL") or "").strip()
if env_url:
    alembic_cfg.set_main_option("sqlalchemy.url", normalize_url(env_url))

target_metadata = Base.metadata


def _migrate_offline() -> None:
    context.configure(
        url=alembic_cfg.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def _migrate_online() -> None:
    engine = engine_from_config(
        alembic_cfg.get_section(alembic_cfg.config_ini_section) or {},
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with engine.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata, compare_type=True)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    _migrate_offline()
else:
    _migrate_online()
