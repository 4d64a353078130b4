"""SQLAlchemy models for the advocate directory (normalized schema)."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import (
    BigInteger,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def _uuid() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    pass


# Junction: no attributes of its own; cascades with either parent.
advocate_specialties = Table(
    "advocate_specialties",
    Base.metadata,
    Column(
        "advocate_id",
        String(36),
        ForeignKey("advocates.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "specialty_id",
        String(36),
        ForeignKey("specialties.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Advocate(Base):
    __tablename__ = "advocates"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    first_name: Mapped[str] = mapped_column(String(100))
    last_name: Mapped[str] = mapped_column(String(100))
    degree: Mapped[str] = mapped_column(String(50))
    years_of_experience: Mapped[int] = mapped_column(Integer)
    phone_number: Mapped[int] = mapped_column(BigInteger)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)

    specialties: Mapped[list[Specialty]] = relationship(
        secondary=advocate_specialties,
        order_by="Specialty.name",
        passive_deletes=True,
    )
    locations: Mapped[list[Location]] = relationship(
        back_populates="advocate",
        order_by=lambda: [Location.created_at, Location.id],
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class Specialty(Base):
    __tablename__ = "specialties"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(100), unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)


class Location(Base):
    __tablename__ = "locations"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    advocate_id: Mapped[str] = mapped_column(
        ForeignKey("advocates.id", ondelete="CASCADE"), index=True
    )
    city: Mapped[str] = mapped_column(String(100))
    state: Mapped[str | None] = mapped_column(String(50), nullable=True)
    country: Mapped[str] = mapped_column(String(100), default="United States")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)

    advocate: Mapped[Advocate] = relationship(back_populates="locations")
