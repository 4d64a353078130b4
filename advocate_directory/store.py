"""Advocate store: typed Protocol plus SQLAlchemy and null implementations.

The app factory constructs exactly one store and registers it on the app;
endpoint code only ever talks to the Protocol.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Protocol, runtime_checkable

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload, sessionmaker

from .api_types import AdvocateRecord
from .filtering import build_filter_conditions, build_search_condition
from .models import Advocate
from .query_params import FilterValue, SortParams
from .sorting import build_sort_expressions

log = logging.getLogger(__name__)


@runtime_checkable
class AdvocateStore(Protocol):
    def fetch_advocates(
        self, filters: Sequence[FilterValue], sort: SortParams, search: str | None = None
    ) -> list[AdvocateRecord]: ...  # pragma: no cover

    def get_advocate(self, advocate_id: str) -> AdvocateRecord | None: ...  # pragma: no cover

    def describe(self) -> str: ...  # pragma: no cover


def _iso(value: datetime | None) -> str | None:
    if value is None:
        return None
    # sqlite hands back naive datetimes; everything is stored as UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.isoformat()


def to_record(advocate: Advocate) -> AdvocateRecord:
    """Flatten an advocate and its relations into the wire projection."""
    location = advocate.locations[0] if advocate.locations else None
    return AdvocateRecord(
        id=advocate.id,
        firstName=advocate.first_name,
        lastName=advocate.last_name,
        degree=advocate.degree,
        yearsOfExperience=advocate.years_of_experience,
        phoneNumber=advocate.phone_number,
        specialties=[s.name for s in advocate.specialties],
        city=location.city if location else "",
        state=(location.state or "") if location else "",
        country=location.country if location else "",
        createdAt=_iso(advocate.created_at),
        updatedAt=_iso(advocate.updated_at),
    )


class SqlAlchemyAdvocateStore:
    """Relational store.

    Each call runs one filtered, sorted query and materialises the full
    result; windowing happens afterwards in memory, so every request scans
    the whole matching set. ``Advocate.id`` is appended as the last ORDER BY
    term so that equal sort keys still come back in a stable order.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory

    def describe(self) -> str:
        return "sqlalchemy"

    def fetch_advocates(
        self, filters: Sequence[FilterValue], sort: SortParams, search: str | None = None
    ) -> list[AdvocateRecord]:
        conditions = build_filter_conditions(filters)
        if search:
            conditions.append(build_search_condition(search))
        stmt = (
            select(Advocate)
            .options(selectinload(Advocate.specialties), selectinload(Advocate.locations))
            .where(*conditions)
            .order_by(*build_sort_expressions(sort), Advocate.id.asc())
        )
        with self.session_factory() as session:
            rows = session.scalars(stmt).all()
            log.debug("fetched %d advocates (%d predicates)", len(rows), len(conditions))
            return [to_record(a) for a in rows]

    def get_advocate(self, advocate_id: str) -> AdvocateRecord | None:
        stmt = (
            select(Advocate)
            .options(selectinload(Advocate.specialties), selectinload(Advocate.locations))
            .where(Advocate.id == advocate_id)
        )
        with self.session_factory() as session:
            advocate = session.scalars(stmt).first()
            return to_record(advocate) if advocate is not None else None


class NullAdvocateStore:
    """Store used when no database is configured; always empty."""

    def describe(self) -> str:
        return "null"

    def fetch_advocates(
        self, filters: Sequence[FilterValue], sort: SortParams, search: str | None = None
    ) -> list[AdvocateRecord]:
        return []

    def get_advocate(self, advocate_id: str) -> AdvocateRecord | None:
        return None


__all__ = ["AdvocateStore", "NullAdvocateStore", "SqlAlchemyAdvocateStore", "to_record"]
