from __future__ import annotations

from collections.abc import Collection

from sqlalchemy import func
from sqlalchemy.sql.elements import ColumnElement

from .fields import CASE_INSENSITIVE_SORT_FIELDS
from .models import Advocate
from .query_params import SortParams

__all__ = ["SORTABLE_COLUMNS", "build_sort_expressions"]

SORTABLE_COLUMNS = {
    "firstName": Advocate.first_name,
    "lastName": Advocate.last_name,
    "degree": Advocate.degree,
    "yearsOfExperience": Advocate.years_of_experience,
    "createdAt": Advocate.created_at,
    "updatedAt": Advocate.updated_at,
}


def _expression(field: str | None, direction: str | None, case_insensitive: Collection[str]):
    if field is None or field not in SORTABLE_COLUMNS:
        return None
    column = SORTABLE_COLUMNS[field]
    key = func.lower(column) if field in case_insensitive else column
    return key.desc() if direction == "desc" else key.asc()


def build_sort_expressions(
    sort: SortParams, case_insensitive_fields: Collection[str] = CASE_INSENSITIVE_SORT_FIELDS
) -> list[ColumnElement]:
    """Primary then secondary ORDER BY clauses; unknown fields contribute nothing."""
    expressions = []
    for field, direction in (
        (sort["field"], sort["direction"]),
        (sort.get("secondary_field"), sort.get("secondary_direction")),
    ):
        expr = _expression(field, direction, case_insensitive_fields)
        if expr is not None:
            expressions.append(expr)
    return expressions
