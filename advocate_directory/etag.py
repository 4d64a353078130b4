from __future__ import annotations


def make_listing_etag(total: int, page: int, limit: int, sort_field: str, sort_direction: str) -> str:
    """Create a weak ETag for a listing window.

    Pattern: W/"<total>-<page>-<limit>-<sortField>-<direction>". It is a
    validator for the window shape, not a content hash.
    """
    return f'W/"{int(total)}-{int(page)}-{int(limit)}-{sort_field}-{sort_direction}"'


__all__ = ["make_listing_etag"]
