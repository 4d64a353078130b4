from __future__ import annotations

from pathlib import Path

from alembic import command
from alembic.config import Config as AlembicConfig
from sqlalchemy import create_engine, inspect

MIGRATIONS = Path(__file__).resolve().parent.parent / "migrations"


def _alembic_config() -> AlembicConfig:
    # no ini file: keeps fileConfig from reconfiguring test logging
    cfg = AlembicConfig()
    cfg.set_main_option("script_location", str(MIGRATIONS))
    cfg.set_main_option("sqlalchemy.url", "sqlite:///unused.db")
    return cfg


def test_upgrade_head_uses_database_url(tmp_path, monkeypatch):
    db_file = tmp_path / "migrated.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    command.upgrade(_alembic_config(), "head")

    insp = inspect(create_engine(f"sqlite:///{db_file}"))
    assert {"advocates", "specialties", "advocate_specialties", "locations"} <= set(insp.get_table_names())
    assert "ix_locations_advocate_id" in {ix["name"] for ix in insp.get_indexes("locations")}


def test_downgrade_base_drops_tables(tmp_path, monkeypatch):
    db_file = tmp_path / "migrated.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    cfg = _alembic_config()
    command.upgrade(cfg, "head")
    command.downgrade(cfg, "base")

    assert set(inspect(create_engine(f"sqlite:///{db_file}")).get_table_names()) <= {"alembic_version"}
