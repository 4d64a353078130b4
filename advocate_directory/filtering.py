"""Filter descriptors -> SQLAlchemy predicates.

Single-field builders raise :class:`UnsupportedFilterOperation` when asked for
an operation their field type cannot express. ``build_filter_conditions``
treats that as a local fault: the offending filter is logged and skipped,
the rest are still applied (AND).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import datetime

from sqlalchemy import String, and_, cast, distinct, func, or_, select, true
from sqlalchemy.sql.elements import ColumnElement

from .errors import UnsupportedFilterOperation
from .fields import TIMESTAMP_FIELDS, FilterOperation, FilterType, filter_definition
from .models import Advocate, Location, Specialty, advocate_specialties
from .query_params import FilterValue, parse_number, parse_timestamp

log = logging.getLogger(__name__)

__all__ = [
    "ADVOCATE_COLUMNS",
    "build_array_condition",
    "build_exact_condition",
    "build_filter_condition",
    "build_filter_conditions",
    "build_location_condition",
    "build_range_condition",
    "build_search_condition",
    "build_text_condition",
    "combine_conditions",
]

Predicate = ColumnElement[bool]

# advocate attribute name (wire) -> column
ADVOCATE_COLUMNS = {
    "id": Advocate.id,
    "firstName": Advocate.first_name,
    "lastName": Advocate.last_name,
    "degree": Advocate.degree,
    "yearsOfExperience": Advocate.years_of_experience,
    "phoneNumber": Advocate.phone_number,
    "createdAt": Advocate.created_at,
    "updatedAt": Advocate.updated_at,
}


def _require_str(field: str, value: object) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{field} expects a string value, got {type(value).__name__}")
    return value


def _require_list(field: str, value: object) -> list[str]:
    if isinstance(value, str):
        return [v.strip() for v in value.split(",")]
    if not isinstance(value, (list, tuple)):
        raise TypeError(f"{field} expects a list value, got {type(value).__name__}")
    return [str(v) for v in value]


def build_text_condition(column, field: str, operation: FilterOperation, value: object) -> Predicate:
    text = _require_str(field, value)
    if operation is FilterOperation.EQUALS:
        return column == text
    if operation is FilterOperation.CONTAINS:
        return column.icontains(text, autoescape=True)
    if operation is FilterOperation.STARTS_WITH:
        return column.istartswith(text, autoescape=True)
    if operation is FilterOperation.ENDS_WITH:
        return column.iendswith(text, autoescape=True)
    raise UnsupportedFilterOperation(field, operation.value, "text")


def build_exact_condition(column, field: str, operation: FilterOperation, value: object) -> Predicate:
    if operation is FilterOperation.EQUALS:
        return column == _require_str(field, value)
    if operation is FilterOperation.IN:
        return column.in_(_require_list(field, value))
    raise UnsupportedFilterOperation(field, operation.value, "exact")


def _range_scalar(field: str, value: object) -> int | float | datetime:
    if field in TIMESTAMP_FIELDS:
        if isinstance(value, datetime):
            return value
        parsed_ts = parse_timestamp(str(value))
        if parsed_ts is None:
            raise ValueError(f"{field} expects a timestamp, got {value!r}")
        return parsed_ts
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    parsed = parse_number(str(value))
    if parsed is None:
        raise ValueError(f"{field} expects a number, got {value!r}")
    return parsed


def build_range_condition(column, field: str, operation: FilterOperation, value: object) -> Predicate:
    if operation is FilterOperation.BETWEEN:
        if not isinstance(value, (list, tuple)) or len(value) != 2:
            raise ValueError(f"{field}[between] expects a [min, max] pair")
        low, high = (_range_scalar(field, v) for v in value)
        # positional: caller supplies min <= max
        return and_(column >= low, column <= high)

    comparisons = {
        FilterOperation.EQUALS: column.__eq__,
        FilterOperation.GREATER_THAN: column.__gt__,
        FilterOperation.GREATER_THAN_OR_EQUAL: column.__ge__,
        FilterOperation.LESS_THAN: column.__lt__,
        FilterOperation.LESS_THAN_OR_EQUAL: column.__le__,
    }
    compare = comparisons.get(operation)
    if compare is None:
        raise UnsupportedFilterOperation(field, operation.value, "range")
    return compare(_range_scalar(field, value))


def build_array_condition(operation: FilterOperation, value: object) -> Predicate:
    names = _require_list("specialties", value)
    if operation is FilterOperation.ANY:
        return Advocate.specialties.any(Specialty.name.in_(names))
    if operation is FilterOperation.ALL:
        matched = (
            select(func.count(distinct(Specialty.name)))
            .select_from(
                advocate_specialties.join(Specialty, advocate_specialties.c.specialty_id == Specialty.id)
            )
            .where(
                advocate_specialties.c.advocate_id == Advocate.id,
                Specialty.name.in_(names),
            )
            .correlate(Advocate)
            .scalar_subquery()
        )
        return matched == len(names)
    raise UnsupportedFilterOperation("specialties", operation.value, "array")


def build_location_condition(operation: FilterOperation, value: object) -> Predicate:
    """City lives on the Location row, so the predicate is an EXISTS over it."""
    city = _require_str("city", value)
    if operation is FilterOperation.EQUALS:
        return Advocate.locations.any(Location.city == city)
    if operation is FilterOperation.CONTAINS:
        return Advocate.locations.any(Location.city.icontains(city, autoescape=True))
    raise UnsupportedFilterOperation("city", operation.value, "location")


def build_filter_condition(filter_value: FilterValue) -> Predicate | None:
    """Build one predicate; ``None`` when the field is not in the registry."""
    field = filter_value["field"]
    definition = filter_definition(field)
    if definition is None:
        return None
    operation = FilterOperation(filter_value["operation"])
    value = filter_value["value"]

    if definition.type is FilterType.TEXT:
        return build_text_condition(ADVOCATE_COLUMNS[field], field, operation, value)
    if definition.type is FilterType.EXACT:
        return build_exact_condition(ADVOCATE_COLUMNS[field], field, operation, value)
    if definition.type is FilterType.RANGE:
        return build_range_condition(ADVOCATE_COLUMNS[field], field, operation, value)
    if definition.type is FilterType.ARRAY:
        return build_array_condition(operation, value)
    if definition.type is FilterType.LOCATION:
        return build_location_condition(operation, value)
    return None


def build_filter_conditions(filters: Iterable[FilterValue]) -> list[Predicate]:
    conditions: list[Predicate] = []
    for filter_value in filters:
        try:
            condition = build_filter_condition(filter_value)
        except (ValueError, TypeError) as exc:
            log.warning(
                "Skipping filter %s[%s]: %s",
                filter_value.get("field"),
                getattr(filter_value.get("operation"), "value", filter_value.get("operation")),
                exc,
            )
            continue
        if condition is not None:
            conditions.append(condition)
    return conditions


def build_search_condition(term: str) -> Predicate:
    """Free-text search: case-insensitive contains across name, degree, city, specialty and phone."""
    return or_(
        Advocate.first_name.icontains(term, autoescape=True),
        Advocate.last_name.icontains(term, autoescape=True),
        Advocate.degree.icontains(term, autoescape=True),
        cast(Advocate.phone_number, String).icontains(term, autoescape=True),
        Advocate.locations.any(Location.city.icontains(term, autoescape=True)),
        Advocate.specialties.any(Specialty.name.icontains(term, autoescape=True)),
    )


def combine_conditions(conditions: Sequence[Predicate]) -> Predicate:
    if not conditions:
        return true()
    return and_(*conditions)
