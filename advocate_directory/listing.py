"""Listing orchestration: parse -> fetch -> paginate -> envelope + headers.

Kept free of Flask request globals so it can be driven from the JSON route,
the HTML page and tests alike.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from .api_types import AdvocateListResponse, ErrorResponse
from .errors import QueryParamError
from .etag import make_listing_etag
from .pagination import build_link_header, empty_pagination_meta, paginate
from .query_params import ParsedQuery, parse_query
from .store import AdvocateStore

log = logging.getLogger(__name__)

FETCH_FAILED = "Failed to fetch advocates"


@dataclass
class ListingResult:
    body: AdvocateListResponse | ErrorResponse
    status: int = 200
    headers: dict[str, str] = field(default_factory=dict)
    query: ParsedQuery | None = None

    @property
    def ok(self) -> bool:
        return self.status < 400


def list_advocates(store: AdvocateStore, args: Mapping[str, str], url: str, strict: bool = False) -> ListingResult:
    try:
        query = parse_query(args, strict=strict)
    except QueryParamError as e:
        return ListingResult(
            body=ErrorResponse(success=False, error=e.error, message=e.message),
            status=e.status_code,
        )

    try:
        rows = store.fetch_advocates(query.filters, query.sort, search=query.search)
        if not rows:
            log.info("advocate listing returned no rows (store=%s)", store.describe())
            return ListingResult(
                body=AdvocateListResponse(
                    success=True, data=[], pagination=empty_pagination_meta(query.pagination)
                ),
                query=query,
            )

        window = paginate(rows, query.pagination)
        headers: dict[str, str] = {}
        link = build_link_header(url, window.meta)
        if link:
            headers["Link"] = link
        headers["ETag"] = make_listing_etag(
            window.meta["totalCount"],
            query.pagination["page"],
            query.pagination["limit"],
            query.sort["field"],
            query.sort["direction"],
        )
        return ListingResult(
            body=AdvocateListResponse(success=True, data=window.items, pagination=window.meta),
            headers=headers,
            query=query,
        )
    except Exception as e:
        log.exception("Error fetching advocates")
        return ListingResult(
            body=ErrorResponse(success=False, error=FETCH_FAILED, message=str(e) or "Unknown error"),
            status=500,
            query=query,
        )


__all__ = ["FETCH_FAILED", "ListingResult", "list_advocates"]
