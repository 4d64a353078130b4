"""Initial advocate directory schema

Revision ID: 0001_init
Revises: 
Create Date: 2026-10-17
"""
from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "advocates",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("degree", sa.String(length=50), nullable=False),
        sa.Column("years_of_experience", sa.Integer(), nullable=False),
        sa.Column("phone_number", sa.BigInteger(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_table(
        "specialties",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=100), nullable=False, unique=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_table(
        "advocate_specialties",
        sa.Column("advocate_id", sa.String(length=36), sa.ForeignKey("advocates.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("specialty_id", sa.String(length=36), sa.ForeignKey("specialties.id", ondelete="CASCADE"), primary_key=True),
    )
    op.create_table(
        "locations",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("advocate_id", sa.String(length=36), sa.ForeignKey("advocates.id", ondelete="CASCADE"), nullable=False),
        sa.Column("city", sa.String(length=100), nullable=False),
        sa.Column("state", sa.String(length=50), nullable=True),
        sa.Column("country", sa.String(length=100), nullable=False, server_default="United States"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_locations_advocate_id", "locations", ["advocate_id"])


def downgrade() -> None:
    op.drop_index("ix_locations_advocate_id", table_name="locations")
    op.drop_table("locations")
    op.drop_table("advocate_specialties")
    op.drop_table("specialties")
    op.drop_table("advocates")
