"""Seed sample advocates, specialties and locations.

Run: DATABASE_URL=... python scripts/seed_advocates.py [--create-schema] [--seed N]

Specialties are created only if absent; advocates are always inserted.
"""
from __future__ import annotations

import argparse
import random
import sys
from pathlib import Path

from dotenv import load_dotenv

# Ensure project root (parent of scripts/) is on sys.path when run as a file.
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from advocate_directory.config import Config
from advocate_directory.db import create_all, make_engine, make_session_factory
from advocate_directory.seed import seed_database


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--create-schema", action="store_true", help="create tables before seeding (dev only)")
    parser.add_argument("--seed", type=int, default=None, help="random seed for specialty assignment")
    args = parser.parse_args(argv)

    load_dotenv()
    cfg = Config.from_env()
    if not cfg.database_url:
        print("DATABASE_URL is not set", file=sys.stderr)
        return 2

    engine = make_engine(cfg.database_url, echo=cfg.sql_echo)
    if args.create_schema:
        create_all(engine)
    session_factory = make_session_factory(engine)
    with session_factory() as db:
        try:
            result = seed_database(db, random.Random(args.seed))
            db.commit()
        except Exception:
            db.rollback()
            raise
    print(
        f"Inserted {result.advocates} advocates, {result.specialties} specialties, "
        f"{result.locations} locations, {result.relationships} advocate-specialty relationships"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
