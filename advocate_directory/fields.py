"""Filterable/sortable field registry for advocates.

Each field carries its type classification and allowed operation set, so
the parser, predicate builder and client builder share one source of truth.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal


class FilterType(str, Enum):
    TEXT = "text"
    EXACT = "exact"
    RANGE = "range"
    ARRAY = "array"
    LOCATION = "location"


class FilterOperation(str, Enum):
    EQUALS = "eq"
    NOT_EQUALS = "neq"
    CONTAINS = "contains"
    STARTS_WITH = "startsWith"
    ENDS_WITH = "endsWith"
    GREATER_THAN = "gt"
    GREATER_THAN_OR_EQUAL = "gte"
    LESS_THAN = "lt"
    LESS_THAN_OR_EQUAL = "lte"
    BETWEEN = "between"
    IN = "in"
    ANY = "any"
    ALL = "all"


LIST_OPERATIONS = frozenset({FilterOperation.IN, FilterOperation.ANY, FilterOperation.ALL})
COMPARISON_OPERATIONS = frozenset(
    {
        FilterOperation.GREATER_THAN,
        FilterOperation.GREATER_THAN_OR_EQUAL,
        FilterOperation.LESS_THAN,
        FilterOperation.LESS_THAN_OR_EQUAL,
    }
)


@dataclass(frozen=True)
class FilterDefinition:
    field: str
    type: FilterType
    operations: tuple[FilterOperation, ...]
    param_name: str | None = None

    @property
    def param(self) -> str:
        return self.param_name or self.field

    def allows(self, operation: FilterOperation) -> bool:
        return operation in self.operations


_TEXT_OPS = (
    FilterOperation.EQUALS,
    FilterOperation.CONTAINS,
    FilterOperation.STARTS_WITH,
    FilterOperation.ENDS_WITH,
)

ADVOCATE_FILTERS: tuple[FilterDefinition, ...] = (
    FilterDefinition("firstName", FilterType.TEXT, _TEXT_OPS, "firstName"),
    FilterDefinition("lastName", FilterType.TEXT, _TEXT_OPS, "lastName"),
    FilterDefinition(
        "degree", FilterType.EXACT, (FilterOperation.EQUALS, FilterOperation.IN), "degree"
    ),
    FilterDefinition(
        "yearsOfExperience",
        FilterType.RANGE,
        (
            FilterOperation.EQUALS,
            FilterOperation.GREATER_THAN,
            FilterOperation.GREATER_THAN_OR_EQUAL,
            FilterOperation.LESS_THAN,
            FilterOperation.LESS_THAN_OR_EQUAL,
            FilterOperation.BETWEEN,
        ),
        "experience",
    ),
    FilterDefinition(
        "specialties", FilterType.ARRAY, (FilterOperation.ANY, FilterOperation.ALL), "specialty"
    ),
    FilterDefinition(
        "city", FilterType.LOCATION, (FilterOperation.EQUALS, FilterOperation.CONTAINS), "city"
    ),
    FilterDefinition(
        "createdAt",
        FilterType.RANGE,
        (
            FilterOperation.GREATER_THAN,
            FilterOperation.GREATER_THAN_OR_EQUAL,
            FilterOperation.LESS_THAN,
            FilterOperation.LESS_THAN_OR_EQUAL,
            FilterOperation.BETWEEN,
        ),
        "createdAt",
    ),
)

# range fields whose values are timestamps rather than plain numbers
TIMESTAMP_FIELDS = frozenset({"createdAt"})

_BY_FIELD = {d.field: d for d in ADVOCATE_FILTERS}
_BY_PARAM = {d.param: d for d in ADVOCATE_FILTERS}


def filter_definition(field: str) -> FilterDefinition | None:
    return _BY_FIELD.get(field)


def filter_definition_for_param(param: str) -> FilterDefinition | None:
    return _BY_PARAM.get(param)


# --- Sorting ---
SortField = Literal[
    "firstName", "lastName", "degree", "yearsOfExperience", "createdAt", "updatedAt"
]
SortDirection = Literal["asc", "desc"]

ALLOWED_ADVOCATE_SORT_FIELDS: tuple[str, ...] = (
    "firstName",
    "lastName",
    "degree",
    "yearsOfExperience",
    "createdAt",
    "updatedAt",
)
CASE_INSENSITIVE_SORT_FIELDS: frozenset[str] = frozenset({"firstName", "lastName", "degree"})

# keys of the advocate projection a cursor may reference
CURSOR_FIELDS: frozenset[str] = frozenset(
    {"id", "firstName", "lastName", "degree", "yearsOfExperience", "phoneNumber", "createdAt", "updatedAt"}
)
DEFAULT_CURSOR_FIELD = "id"

__all__ = [
    "ADVOCATE_FILTERS",
    "ALLOWED_ADVOCATE_SORT_FIELDS",
    "CASE_INSENSITIVE_SORT_FIELDS",
    "COMPARISON_OPERATIONS",
    "CURSOR_FIELDS",
    "DEFAULT_CURSOR_FIELD",
    "FilterDefinition",
    "FilterOperation",
    "FilterType",
    "LIST_OPERATIONS",
    "SortDirection",
    "SortField",
    "TIMESTAMP_FIELDS",
    "filter_definition",
    "filter_definition_for_param",
]
