"""Query-string parsing for the advocate listing.

Turns raw ``request.args`` into typed pagination / sort / filter descriptors.

Malformed input never fails the request by default: every coercion goes
through ``FALLBACK_POLICY`` so the permissive behaviour is one auditable
table. With ``strict=True`` (``STRICT_QUERY_PARAMS``) the same violations
raise :class:`QueryParamError` instead.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TypedDict, Union, cast

from .errors import QueryParamError
from .fields import (
    ADVOCATE_FILTERS,
    ALLOWED_ADVOCATE_SORT_FIELDS,
    COMPARISON_OPERATIONS,
    CURSOR_FIELDS,
    LIST_OPERATIONS,
    TIMESTAMP_FIELDS,
    FilterDefinition,
    FilterOperation,
    SortDirection,
    filter_definition_for_param,
)

log = logging.getLogger(__name__)

__all__ = [
    "ALLOWED_PAGE_SIZES",
    "DEFAULT_PAGE_SIZE",
    "DEFAULT_SORT",
    "FALLBACK_POLICY",
    "FilterValue",
    "MAX_PAGE_SIZE",
    "PaginationParams",
    "ParsedQuery",
    "SortParams",
    "get_filter_params",
    "get_pagination_params",
    "get_search_term",
    "get_sort_params",
    "parse_number",
    "parse_query",
    "parse_timestamp",
]

QueryArgs = Mapping[str, str]
Number = Union[int, float]
FilterScalar = Union[str, Number, datetime]
FilterPayload = Union[FilterScalar, list[str], list[Number], list[datetime]]

# ---- Contracts -----------------------------------------------------------------


class PaginationParams(TypedDict):
    page: int  # 1-based
    limit: int
    cursor: str | None
    cursor_field: str | None


class SortParams(TypedDict):
    field: str
    direction: SortDirection
    secondary_field: str | None
    secondary_direction: SortDirection | None


class FilterValue(TypedDict):
    field: str
    operation: FilterOperation
    value: FilterPayload


@dataclass
class ParsedQuery:
    pagination: PaginationParams
    sort: SortParams
    filters: list[FilterValue] = field(default_factory=list)
    search: str | None = None


DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 50
ALLOWED_PAGE_SIZES: tuple[int, ...] = (5, 10, 25, 50)

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

DEFAULT_SORT = SortParams(field="createdAt", direction="desc", secondary_field=None, secondary_direction=None)
DEFAULT_SECONDARY_DIRECTION: SortDirection = "asc"


# ---- Fallback policy -----------------------------------------------------------


@dataclass(frozen=True)
class Fallback:
    default: object
    reason: str


FALLBACK_POLICY: dict[str, Fallback] = {
    "page": Fallback(DEFAULT_PAGE, "page must be an integer >= 1"),
    "limit": Fallback(DEFAULT_PAGE_SIZE, f"limit must be one of {list(ALLOWED_PAGE_SIZES)}"),
    "cursorField": Fallback(None, "cursorField must name an advocate attribute"),
    "sort": Fallback(DEFAULT_SORT["field"], f"sort must be one of {list(ALLOWED_ADVOCATE_SORT_FIELDS)}"),
    "order": Fallback(DEFAULT_SORT["direction"], "order must be 'asc' or 'desc'"),
    "secondarySort": Fallback(None, f"secondarySort must be one of {list(ALLOWED_ADVOCATE_SORT_FIELDS)}"),
    "secondaryOrder": Fallback(DEFAULT_SECONDARY_DIRECTION, "secondaryOrder must be 'asc' or 'desc'"),
    "filter_value": Fallback(None, "filter value could not be parsed; filter dropped"),
    "filter_key": Fallback(None, "unknown filter field or operation; filter dropped"),
}


def _fallback(policy_key: str, param: str, raw: object, strict: bool) -> object:
    policy = FALLBACK_POLICY[policy_key]
    if strict:
        raise QueryParamError(param, raw, policy.reason)
    log.debug("query param %s=%r ignored: %s", param, raw, policy.reason)
    return policy.default


# ---- Pagination ----------------------------------------------------------------

_LEADING_INT_RE = re.compile(r"^\s*[+-]?\d+")


def _leading_int(raw: str) -> int | None:
    """Integer prefix of ``raw`` (``"2.5"`` -> 2, ``"10abc"`` -> 10); ``None`` without one."""
    m = _LEADING_INT_RE.match(raw)
    return int(m.group()) if m else None


def get_pagination_params(args: QueryArgs, *, strict: bool = False) -> PaginationParams:
    page_raw = args.get("page")
    limit_raw = args.get("limit")

    page = DEFAULT_PAGE
    if page_raw:
        parsed_page = _leading_int(page_raw)
        if parsed_page is None or parsed_page < 1:
            page = cast(int, _fallback("page", "page", page_raw, strict))
        else:
            page = parsed_page

    limit = DEFAULT_PAGE_SIZE
    if limit_raw:
        parsed_limit = _leading_int(limit_raw)
        if parsed_limit is None or parsed_limit not in ALLOWED_PAGE_SIZES:
            limit = cast(int, _fallback("limit", "limit", limit_raw, strict))
        else:
            limit = parsed_limit
    limit = min(limit, MAX_PAGE_SIZE)

    cursor = args.get("cursor") or None
    cursor_field = args.get("cursorField") or None
    if cursor_field is not None and cursor_field not in CURSOR_FIELDS:
        cursor_field = cast("str | None", _fallback("cursorField", "cursorField", cursor_field, strict))

    return PaginationParams(page=page, limit=limit, cursor=cursor, cursor_field=cursor_field)


# ---- Sorting -------------------------------------------------------------------


def _direction(raw: str | None, param: str, default: SortDirection, strict: bool) -> SortDirection:
    if not raw:
        return default
    if raw in ("asc", "desc"):
        return cast(SortDirection, raw)
    return cast(SortDirection, _fallback(param, param, raw, strict))


def get_sort_params(args: QueryArgs, *, strict: bool = False) -> SortParams:
    sort_raw = args.get("sort")
    field_name = sort_raw or DEFAULT_SORT["field"]
    if field_name not in ALLOWED_ADVOCATE_SORT_FIELDS:
        field_name = cast(str, _fallback("sort", "sort", sort_raw, strict))
    direction = _direction(args.get("order"), "order", DEFAULT_SORT["direction"], strict)

    secondary_raw = args.get("secondarySort") or None
    secondary_field: str | None = secondary_raw
    if secondary_raw is not None and secondary_raw not in ALLOWED_ADVOCATE_SORT_FIELDS:
        # an invalid secondary field is dropped entirely, never defaulted
        secondary_field = cast("str | None", _fallback("secondarySort", "secondarySort", secondary_raw, strict))

    secondary_direction: SortDirection | None = None
    if secondary_field is not None:
        secondary_direction = _direction(
            args.get("secondaryOrder"), "secondaryOrder", DEFAULT_SECONDARY_DIRECTION, strict
        )

    return SortParams(
        field=field_name,
        direction=direction,
        secondary_field=secondary_field,
        secondary_direction=secondary_direction,
    )


# ---- Filtering -----------------------------------------------------------------

_SUFFIXED_KEY_RE = re.compile(r"^(?P<param>[^\[\]]+)\[(?P<op>[^\[\]]+)\]$")


def parse_number(token: str) -> Number | None:
    token = token.strip()
    if not token:
        return None
    try:
        whole = int(token)
    except ValueError:
        pass
    else:
        # column storage is a signed 64-bit integer
        return whole if INT64_MIN <= whole <= INT64_MAX else None
    try:
        num = float(token)
    except ValueError:
        return None
    if math.isnan(num) or math.isinf(num):
        return None
    return num


def parse_timestamp(token: str) -> datetime | None:
    """ISO-8601 string, or a number meaning epoch milliseconds."""
    token = token.strip()
    num = parse_number(token)
    try:
        if num is not None:
            return datetime.fromtimestamp(num / 1000, tz=UTC)
        parsed = datetime.fromisoformat(token)
    except (ValueError, OverflowError, OSError):
        return None
    return parsed.astimezone(UTC) if parsed.tzinfo else parsed.replace(tzinfo=UTC)


def _parse_operation_value(
    definition: FilterDefinition, operation: FilterOperation, raw: str
) -> FilterPayload | None:
    if operation in LIST_OPERATIONS:
        return [token.strip() for token in raw.split(",")]

    is_timestamp = definition.field in TIMESTAMP_FIELDS
    scalar = parse_timestamp if is_timestamp else parse_number

    if operation is FilterOperation.BETWEEN:
        tokens = raw.split(",")
        if len(tokens) != 2:
            return None
        low, high = scalar(tokens[0]), scalar(tokens[1])
        if low is None or high is None:
            return None
        return cast(FilterPayload, [low, high])

    if operation in COMPARISON_OPERATIONS:
        return scalar(raw)

    return raw


def _reject_unknown_keys(args: QueryArgs) -> None:
    for key in args.keys():
        m = _SUFFIXED_KEY_RE.match(key)
        if not m:
            continue
        definition = filter_definition_for_param(m.group("param"))
        try:
            op = FilterOperation(m.group("op"))
        except ValueError:
            op = None
        if definition is None or op is None or not definition.allows(op):
            _fallback("filter_key", key, args.get(key), True)


def get_filter_params(args: QueryArgs, *, strict: bool = False) -> list[FilterValue]:
    if strict:
        _reject_unknown_keys(args)

    filters: list[FilterValue] = []
    for definition in ADVOCATE_FILTERS:
        param = definition.param
        bare = args.get(param)
        if bare and definition.allows(FilterOperation.EQUALS):
            # a bare key wins; suffixed operations for the same field are ignored
            filters.append(FilterValue(field=definition.field, operation=FilterOperation.EQUALS, value=bare))
            continue

        for operation in definition.operations:
            key = f"{param}[{operation.value}]"
            raw = args.get(key)
            if not raw:
                continue
            value = _parse_operation_value(definition, operation, raw)
            if value is None:
                _fallback("filter_value", key, raw, strict)
                continue
            filters.append(FilterValue(field=definition.field, operation=operation, value=value))

    return filters


def get_search_term(args: QueryArgs) -> str | None:
    term = (args.get("search") or "").strip()
    return term or None


def parse_query(args: QueryArgs, *, strict: bool = False) -> ParsedQuery:
    return ParsedQuery(
        pagination=get_pagination_params(args, strict=strict),
        sort=get_sort_params(args, strict=strict),
        filters=get_filter_params(args, strict=strict),
        search=get_search_term(args),
    )
