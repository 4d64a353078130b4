import os
import sys
from datetime import UTC, datetime, timedelta

import pytest

# Path setup before any project imports to satisfy E402
ROOT = os.path.dirname(__file__)
PARENT = os.path.abspath(os.path.join(ROOT, ".."))
if PARENT not in sys.path:  # pragma: no cover - environment dependent
    sys.path.insert(0, PARENT)

from advocate_directory import create_app  # noqa: E402
from advocate_directory.models import Advocate, Location, Specialty  # noqa: E402

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    # .env files or CI variables must not leak into app configuration
    for name in ("DATABASE_URL", "STRICT_QUERY_PARAMS", "LOG_LEVEL", "SQL_ECHO"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("advocate_directory.app_factory.load_dotenv", lambda *a, **k: False)


@pytest.fixture
def app(tmp_path):
    url = f"sqlite:///{tmp_path / 'advocates.db'}"
    return create_app({"TESTING": True, "SECRET_KEY": "test", "database_url": url, "create_schema": True})


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def session_factory(app):
    return app.extensions["advocate_session_factory"]


@pytest.fixture
def store(app):
    return app.extensions["advocate_store"]


@pytest.fixture
def add_advocate(session_factory):
    """Insert one advocate with its location and specialties; returns its id."""
    counter = {"n": 0}

    def _add(
        first_name="John",
        last_name="Doe",
        degree="MD",
        years=10,
        phone=5551234567,
        city="New York",
        specialties=(),
        created_at=None,
    ):
        counter["n"] += 1
        stamp = created_at or BASE_TIME + timedelta(minutes=counter["n"])
        with session_factory() as db:
            specs = []
            for name in specialties:
                spec = db.query(Specialty).filter_by(name=name).one_or_none()
                if spec is None:
                    spec = Specialty(name=name)
                    db.add(spec)
                specs.append(spec)
            advocate = Advocate(
                first_name=first_name,
                last_name=last_name,
                degree=degree,
                years_of_experience=years,
                phone_number=phone,
                created_at=stamp,
                updated_at=stamp,
            )
            advocate.specialties.extend(specs)
            if city is not None:
                advocate.locations.append(Location(city=city, state="NY", created_at=stamp))
            db.add(advocate)
            db.commit()
            return advocate.id

    return _add


@pytest.fixture
def three_advocates(add_advocate):
    return [
        add_advocate("John", "Doe", "MD", 10, 5551234567, "New York", ["Trauma & PTSD", "Bipolar"]),
        add_advocate("Jane", "Smith", "PhD", 8, 5559876543, "Los Angeles", ["Anxiety"]),
        add_advocate("alice", "Johnson", "MSW", 5, 5554567890, "Chicago", ["Bipolar", "Anxiety"]),
    ]
