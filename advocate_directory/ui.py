"""Server-rendered advocate directory page.

The page reuses ``list_advocates`` so the HTML and JSON views always agree on
filtering, sorting and windowing.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import urlencode

from flask import Blueprint, render_template, request

from .advocates_api import current_store, strict_mode
from .listing import list_advocates
from .query_params import ALLOWED_PAGE_SIZES, DEFAULT_SORT

ui_bp = Blueprint("advocates_ui", __name__)

COLUMNS: tuple[tuple[str | None, str], ...] = (
    ("firstName", "First Name"),
    ("lastName", "Last Name"),
    (None, "City"),
    ("degree", "Degree"),
    (None, "Specialties"),
    ("yearsOfExperience", "Years of Experience"),
    (None, "Phone Number"),
)


def _href(args: dict[str, str], **changes: Any) -> str:
    merged = {k: v for k, v in args.items() if v not in (None, "")}
    for k, v in changes.items():
        if v is None:
            merged.pop(k, None)
        else:
            merged[k] = str(v)
    query = urlencode(merged)
    return f"?{query}" if query else "?"


def format_phone(number: int | str) -> str:
    digits = str(number)
    if len(digits) == 10:
        return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"
    return digits


def build_directory_vm(result_body: dict, args: dict[str, str], sort_field: str, sort_dir: str) -> dict[str, Any]:
    pagination = result_body.get("pagination", {})
    page = int(pagination.get("currentPage") or 1)
    total_pages = int(pagination.get("totalPages") or 0)
    limit = int(pagination.get("pageSize") or ALLOWED_PAGE_SIZES[1])

    headers = []
    for field, label in COLUMNS:
        if field is None:
            headers.append({"label": label, "href": None, "indicator": ""})
            continue
        active = field == sort_field
        next_dir = "desc" if active and sort_dir == "asc" else "asc"
        headers.append(
            {
                "label": label,
                "href": _href(args, sort=field, order=next_dir, page=1),
                "indicator": ("▲" if sort_dir == "asc" else "▼") if active else "",
            }
        )

    controls = {
        "first": _href(args, page=1) if page > 1 else None,
        "prev": _href(args, page=page - 1) if pagination.get("hasPreviousPage") else None,
        "next": _href(args, page=page + 1) if pagination.get("hasNextPage") else None,
        "last": _href(args, page=total_pages) if total_pages and page < total_pages else None,
    }
    return {
        "advocates": [dict(a, phoneDisplay=format_phone(a.get("phoneNumber", ""))) for a in result_body.get("data", [])],
        "headers": headers,
        "search": args.get("search", ""),
        "total": int(pagination.get("totalCount") or 0),
        "page": page,
        "total_pages": total_pages,
        "limit": limit,
        "page_sizes": list(ALLOWED_PAGE_SIZES),
        "controls": controls,
        "sort": sort_field,
        "order": sort_dir,
        "reset_href": "?",
    }


@ui_bp.get("/")
def directory_page():
    args = {k: v for k, v in request.args.items()}
    result = list_advocates(current_store(), request.args, request.url, strict=strict_mode())
    if result.query is not None:
        sort_field, sort_dir = result.query.sort["field"], result.query.sort["direction"]
    else:
        sort_field, sort_dir = DEFAULT_SORT["field"], DEFAULT_SORT["direction"]
    vm = build_directory_vm(result.body, args, sort_field, sort_dir)
    vm["error"] = None if result.ok else result.body.get("message")
    return render_template("advocates.html", vm=vm), result.status
