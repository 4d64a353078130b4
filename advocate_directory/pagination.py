"""Windowing over an already sorted result set.

Two mutually exclusive modes, picked by the presence of ``cursor``:

* offset: ``page``/``limit`` select rows ``[(page-1)*limit, page*limit)``
* cursor: an opaque token ``{field, value, direction}`` names a row; the
  window is the ``limit`` rows after it (forward) or before it (backward).

A cursor that fails to decode, or whose row is no longer present, yields
the first page. Nothing here raises on client input.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Literal, TypedDict
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from .api_types import AdvocateRecord, PaginationMeta
from .fields import CURSOR_FIELDS, DEFAULT_CURSOR_FIELD
from .query_params import PaginationParams

log = logging.getLogger(__name__)

__all__ = [
    "CursorData",
    "PageWindow",
    "build_link_header",
    "decode_cursor",
    "empty_pagination_meta",
    "encode_cursor",
    "paginate",
]

CursorDirection = Literal["forward", "backward"]
_DIRECTIONS = ("forward", "backward")


class CursorData(TypedDict):
    field: str
    value: Any
    direction: CursorDirection


@dataclass
class PageWindow:
    items: list[AdvocateRecord]
    meta: PaginationMeta


# ---- Cursor codec --------------------------------------------------------------


def _serialise(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def encode_cursor(field: str, value: Any, direction: CursorDirection) -> str:
    payload = {"field": field, "value": _serialise(value), "direction": direction}
    return base64.b64encode(json.dumps(payload, separators=(",", ":")).encode("utf-8")).decode("ascii")


def decode_cursor(token: str | None) -> CursorData | None:
    if not token:
        return None
    try:
        raw = base64.b64decode(token.encode("ascii"), validate=True)
        data = json.loads(raw.decode("utf-8"))
    except (binascii.Error, UnicodeError, ValueError) as exc:
        log.debug("cursor decode failed: %s", exc)
        return None
    if not isinstance(data, dict):
        log.debug("cursor decode failed: payload is not an object")
        return None
    if not data.get("field") or data.get("direction") not in _DIRECTIONS:
        log.debug("cursor decode failed: missing field or direction")
        return None
    return CursorData(field=str(data["field"]), value=data.get("value"), direction=data["direction"])


# ---- Windowing -----------------------------------------------------------------


def _cursor_field(params: PaginationParams) -> str:
    field = params.get("cursor_field") or DEFAULT_CURSOR_FIELD
    return field if field in CURSOR_FIELDS else DEFAULT_CURSOR_FIELD


def _locate(rows: Sequence[Mapping[str, Any]], cursor: CursorData) -> int:
    if cursor["field"] not in CURSOR_FIELDS:
        return -1
    for index, row in enumerate(rows):
        if _serialise(row.get(cursor["field"])) == cursor["value"]:
            return index
    return -1


def _cursor_window(rows: Sequence[AdvocateRecord], params: PaginationParams) -> tuple[int, int]:
    limit = params["limit"]
    cursor = decode_cursor(params.get("cursor"))
    index = _locate(rows, cursor) if cursor else -1
    if cursor is None or index < 0:
        return 0, min(limit, len(rows))
    if cursor["direction"] == "forward":
        return index + 1, min(index + 1 + limit, len(rows))
    return max(0, index - limit), index


def paginate(rows: Sequence[AdvocateRecord], params: PaginationParams) -> PageWindow:
    total = len(rows)
    limit = params["limit"]
    cursor_mode = bool(params.get("cursor"))

    if cursor_mode:
        start, end = _cursor_window(rows, params)
    else:
        start = (params["page"] - 1) * limit
        end = start + limit
    items = list(rows[start:end])

    has_next = end < total
    has_prev = start > 0 if cursor_mode else params["page"] > 1

    field = _cursor_field(params)
    meta = PaginationMeta(
        totalCount=total,
        pageSize=limit,
        hasNextPage=has_next,
        hasPreviousPage=has_prev,
    )
    if not cursor_mode:
        meta["currentPage"] = params["page"]
        meta["totalPages"] = math.ceil(total / limit)
    if items and has_next:
        meta["nextCursor"] = encode_cursor(field, items[-1].get(field), "forward")
    if items and start > 0:
        meta["prevCursor"] = encode_cursor(field, items[0].get(field), "backward")
    meta["cursorField"] = field
    return PageWindow(items=items, meta=meta)


def empty_pagination_meta(params: PaginationParams) -> PaginationMeta:
    return PaginationMeta(
        totalCount=0,
        pageSize=params["limit"],
        currentPage=params["page"],
        totalPages=0,
        hasNextPage=False,
        hasPreviousPage=False,
    )


# ---- Link header ---------------------------------------------------------------

_REPLACED_PARAMS = frozenset({"page", "limit", "cursor"})


def _link(url: str, rel: str, overrides: Mapping[str, str]) -> str:
    parts = urlsplit(url)
    kept = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k not in _REPLACED_PARAMS]
    query = urlencode(kept + list(overrides.items()))
    return f'<{urlunsplit((parts.scheme, parts.netloc, parts.path, query, ""))}>; rel="{rel}"'


def build_link_header(url: str, meta: PaginationMeta) -> str:
    """RFC 5988 navigation links; empty string when there is nothing to link."""
    size = str(meta["pageSize"])
    links: list[str] = []
    current = meta.get("currentPage")
    total_pages = meta.get("totalPages")

    if current is None or total_pages is None:
        if "nextCursor" in meta:
            links.append(_link(url, "next", {"cursor": meta["nextCursor"], "limit": size}))
        if "prevCursor" in meta:
            links.append(_link(url, "prev", {"cursor": meta["prevCursor"], "limit": size}))
        return ", ".join(links)

    links.append(_link(url, "first", {"page": "1", "limit": size}))
    links.append(_link(url, "last", {"page": str(max(total_pages, 1)), "limit": size}))
    if current < total_pages:
        links.append(_link(url, "next", {"page": str(current + 1), "limit": size}))
    if current > 1:
        links.append(_link(url, "prev", {"page": str(current - 1), "limit": size}))
    return ", ".join(links)
