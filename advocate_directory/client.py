"""HTTP client for the advocate API.

The ``build_*`` helpers turn descriptor dicts back into query-string pairs
using the same field registry the server parses with, so a filter on
``yearsOfExperience`` is sent as ``experience[...]`` and ``specialties`` as
``specialty[...]``.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, TypedDict

import requests

from .api_types import AdvocateRecord, PaginationMeta
from .fields import FilterOperation, filter_definition, filter_definition_for_param

DEFAULT_ENDPOINT = "/api/advocates"


class ClientPagination(TypedDict, total=False):
    page: int
    limit: int
    cursor: str
    cursorField: str


class ClientSort(TypedDict, total=False):
    sort: str
    order: str
    secondarySort: str
    secondaryOrder: str


class ClientFilter(TypedDict):
    field: str
    operation: str
    value: Any


class ApiError(Exception):
    """Non-2xx response (or transport failure, with status 0)."""

    def __init__(self, message: str, status: int, payload: Any = None) -> None:
        super().__init__(message)
        self.status = status
        self.payload = payload


@dataclass
class AdvocatePage:
    data: list[AdvocateRecord]
    pagination: PaginationMeta
    links: dict[str, str] = field(default_factory=dict)


# ---- Query builders ------------------------------------------------------------


def build_pagination_params(pagination: ClientPagination | None) -> dict[str, str]:
    if not pagination:
        return {}
    result: dict[str, str] = {}
    page = pagination.get("page")
    if page is not None and page > 0:
        result["page"] = str(page)
    limit = pagination.get("limit")
    if limit is not None and limit > 0:
        result["limit"] = str(limit)
    if pagination.get("cursor"):
        result["cursor"] = pagination["cursor"]
    if pagination.get("cursorField"):
        result["cursorField"] = pagination["cursorField"]
    return result


_SORT_KEYS = ("sort", "order", "secondarySort", "secondaryOrder")


def build_sort_params(sorting: ClientSort | None) -> dict[str, str]:
    if not sorting:
        return {}
    return {k: str(v) for k, v in sorting.items() if k in _SORT_KEYS and v}


def _param_name(field_name: str) -> str:
    definition = filter_definition(field_name) or filter_definition_for_param(field_name)
    return definition.param if definition else field_name


def _join(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value)
    return str(value)


def build_filter_params(filters: Iterable[ClientFilter] | None) -> dict[str, str]:
    result: dict[str, str] = {}
    for f in filters or ():
        param = _param_name(f["field"])
        operation = FilterOperation(f["operation"])
        if operation is FilterOperation.EQUALS:
            result[param] = _join(f["value"])
        else:
            result[f"{param}[{operation.value}]"] = _join(f["value"])
    return result


def build_query_params(
    pagination: ClientPagination | None = None,
    sorting: ClientSort | None = None,
    filters: Iterable[ClientFilter] | None = None,
) -> dict[str, str]:
    return {
        **build_pagination_params(pagination),
        **build_sort_params(sorting),
        **build_filter_params(filters),
    }


# ---- Client --------------------------------------------------------------------


class AdvocateClient:
    def __init__(
        self,
        base_url: str,
        session: requests.Session | None = None,
        timeout: float = 10,
        endpoint: str = DEFAULT_ENDPOINT,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        self.endpoint = endpoint

    def _get(self, path: str, params: Mapping[str, str] | None = None) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            resp = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise ApiError(str(e) or "Network request failed", 0) from e
        if not resp.ok:
            try:
                payload = resp.json()
            except ValueError:
                payload = resp.text
            raise ApiError(f"API request failed with status {resp.status_code}", resp.status_code, payload)
        return resp

    def _page(self, params: Mapping[str, str]) -> AdvocatePage:
        resp = self._get(self.endpoint, params)
        body = resp.json()
        links = {rel: link["url"] for rel, link in (resp.links or {}).items() if "url" in link}
        return AdvocatePage(data=body["data"], pagination=body["pagination"], links=links)

    def get_advocates(
        self,
        pagination: ClientPagination | None = None,
        sorting: ClientSort | None = None,
        filters: Iterable[ClientFilter] | None = None,
    ) -> AdvocatePage:
        return self._page(build_query_params(pagination, sorting, filters))

    def get_advocate(self, advocate_id: str) -> AdvocateRecord:
        return self._get(f"{self.endpoint}/{advocate_id}").json()["data"]

    def search_advocates(self, term: str, pagination: ClientPagination | None = None) -> AdvocatePage:
        params = build_query_params(pagination)
        params["search"] = term
        return self._page(params)

    def filter_by_experience(
        self,
        minimum: int,
        maximum: int,
        pagination: ClientPagination | None = None,
        sorting: ClientSort | None = None,
    ) -> AdvocatePage:
        filters = [ClientFilter(field="yearsOfExperience", operation="between", value=[minimum, maximum])]
        return self.get_advocates(pagination, sorting, filters)

    def filter_by_specialties(
        self,
        specialties: list[str],
        match_all: bool = False,
        pagination: ClientPagination | None = None,
        sorting: ClientSort | None = None,
    ) -> AdvocatePage:
        filters = [ClientFilter(field="specialties", operation="all" if match_all else "any", value=specialties)]
        return self.get_advocates(pagination, sorting, filters)

    def filter_by_location(
        self,
        city: str,
        pagination: ClientPagination | None = None,
        sorting: ClientSort | None = None,
    ) -> AdvocatePage:
        filters = [ClientFilter(field="city", operation="contains", value=city)]
        return self.get_advocates(pagination, sorting, filters)

    def get_advocates_by_cursor(
        self, cursor: str, limit: int | None = None, sorting: ClientSort | None = None
    ) -> AdvocatePage:
        pagination = ClientPagination(cursor=cursor)
        if limit is not None:
            pagination["limit"] = limit
        return self.get_advocates(pagination, sorting)


__all__ = [
    "AdvocateClient",
    "AdvocatePage",
    "ApiError",
    "ClientFilter",
    "ClientPagination",
    "ClientSort",
    "build_filter_params",
    "build_pagination_params",
    "build_query_params",
    "build_sort_params",
]
