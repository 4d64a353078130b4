"""OpenAPI 3 document for the advocate API, served at /openapi.json.

Filter parameters are generated from the field registry so the document
cannot drift from what the parser accepts.
"""

from __future__ import annotations

from typing import Any

from flask import Blueprint, jsonify
from werkzeug.wrappers.response import Response

from .fields import ADVOCATE_FILTERS, ALLOWED_ADVOCATE_SORT_FIELDS, CURSOR_FIELDS, FilterOperation
from .query_params import ALLOWED_PAGE_SIZES, DEFAULT_PAGE_SIZE, DEFAULT_SORT

bp = Blueprint("openapi", __name__)

ADVOCATE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["id", "firstName", "lastName", "degree", "yearsOfExperience", "phoneNumber", "specialties"],
    "properties": {
        "id": {"type": "string"},
        "firstName": {"type": "string"},
        "lastName": {"type": "string"},
        "degree": {"type": "string"},
        "yearsOfExperience": {"type": "integer", "minimum": 0},
        "phoneNumber": {"type": "integer"},
        "specialties": {"type": "array", "items": {"type": "string"}},
        "city": {"type": "string"},
        "state": {"type": "string"},
        "country": {"type": "string"},
        "createdAt": {"type": "string", "format": "date-time", "nullable": True},
        "updatedAt": {"type": "string", "format": "date-time", "nullable": True},
    },
}

PAGINATION_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["totalCount", "pageSize", "hasNextPage", "hasPreviousPage"],
    "properties": {
        "totalCount": {"type": "integer"},
        "pageSize": {"type": "integer"},
        "currentPage": {"type": "integer", "description": "Offset mode only"},
        "totalPages": {"type": "integer", "description": "Offset mode only"},
        "hasNextPage": {"type": "boolean"},
        "hasPreviousPage": {"type": "boolean"},
        "nextCursor": {"type": "string"},
        "prevCursor": {"type": "string"},
        "cursorField": {"type": "string"},
    },
}

ERROR_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["success", "error", "message"],
    "properties": {
        "success": {"type": "boolean", "enum": [False]},
        "error": {"type": "string"},
        "message": {"type": "string"},
    },
}


def _query(name: str, schema: dict[str, Any], description: str | None = None) -> dict[str, Any]:
    p: dict[str, Any] = {"name": name, "in": "query", "required": False, "schema": schema}
    if description:
        p["description"] = description
    return p


def _filter_parameters() -> list[dict[str, Any]]:
    params: list[dict[str, Any]] = []
    for definition in ADVOCATE_FILTERS:
        for op in definition.operations:
            if op is FilterOperation.EQUALS:
                params.append(_query(definition.param, {"type": "string"}, f"{definition.field} equals"))
            else:
                params.append(
                    _query(f"{definition.param}[{op.value}]", {"type": "string"}, f"{definition.field} {op.value}")
                )
    return params


def build_openapi_document() -> dict[str, Any]:
    listing_params = [
        _query("page", {"type": "integer", "minimum": 1, "default": 1}),
        _query("limit", {"type": "integer", "enum": list(ALLOWED_PAGE_SIZES), "default": DEFAULT_PAGE_SIZE}),
        _query("cursor", {"type": "string"}, "Opaque cursor from pagination.nextCursor/prevCursor"),
        _query("cursorField", {"type": "string", "enum": sorted(CURSOR_FIELDS), "default": "id"}),
        _query("sort", {"type": "string", "enum": list(ALLOWED_ADVOCATE_SORT_FIELDS), "default": DEFAULT_SORT["field"]}),
        _query("order", {"type": "string", "enum": ["asc", "desc"], "default": DEFAULT_SORT["direction"]}),
        _query("secondarySort", {"type": "string", "enum": list(ALLOWED_ADVOCATE_SORT_FIELDS)}),
        _query("secondaryOrder", {"type": "string", "enum": ["asc", "desc"], "default": "asc"}),
        _query("search", {"type": "string"}, "Case-insensitive match on name, degree, city, specialty or phone"),
        *_filter_parameters(),
    ]
    error_response = {"description": "Error", "content": {"application/json": {"schema": {"$ref": "#/components/schemas/Error"}}}}
    return {
        "openapi": "3.0.3",
        "info": {"title": "Advocate Directory API", "version": "1.0.0"},
        "paths": {
            "/api/advocates": {
                "get": {
                    "summary": "List advocates",
                    "parameters": listing_params,
                    "responses": {
                        "200": {
                            "description": "Advocate page",
                            "headers": {
                                "Link": {"schema": {"type": "string"}, "description": "RFC 5988 navigation links"},
                                "ETag": {"schema": {"type": "string"}, "description": "Weak validator"},
                            },
                            "content": {
                                "application/json": {"schema": {"$ref": "#/components/schemas/AdvocateList"}}
                            },
                        },
                        "400": error_response,
                        "500": error_response,
                    },
                }
            },
            "/api/advocates/{advocate_id}": {
                "get": {
                    "summary": "Get one advocate",
                    "parameters": [{"name": "advocate_id", "in": "path", "required": True, "schema": {"type": "string"}}],
                    "responses": {
                        "200": {
                            "description": "Advocate",
                            "content": {
                                "application/json": {
                                    "schema": {
                                        "type": "object",
                                        "properties": {
                                            "success": {"type": "boolean"},
                                            "data": {"$ref": "#/components/schemas/Advocate"},
                                        },
                                    }
                                }
                            },
                        },
                        "404": error_response,
                    },
                }
            },
            "/api/seed": {
                "post": {
                    "summary": "Insert sample advocates",
                    "responses": {"201": {"description": "Seeded"}, "500": error_response, "503": error_response},
                }
            },
        },
        "components": {
            "schemas": {
                "Advocate": ADVOCATE_SCHEMA,
                "Pagination": PAGINATION_SCHEMA,
                "AdvocateList": {
                    "type": "object",
                    "required": ["success", "data", "pagination"],
                    "properties": {
                        "success": {"type": "boolean"},
                        "data": {"type": "array", "items": {"$ref": "#/components/schemas/Advocate"}},
                        "pagination": {"$ref": "#/components/schemas/Pagination"},
                    },
                },
                "Error": ERROR_SCHEMA,
            }
        },
    }


@bp.get("/openapi.json")
def openapi_spec() -> Response:
    return jsonify(build_openapi_document())
