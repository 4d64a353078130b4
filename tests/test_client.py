from __future__ import annotations

from urllib.parse import urlsplit

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from advocate_directory.client import (
    AdvocateClient,
    ApiError,
    build_filter_params,
    build_pagination_params,
    build_query_params,
    build_sort_params,
)


class FlaskSession:
    """requests.Session stand-in that routes GETs to a Flask test client."""

    def __init__(self, flask_client):
        self.flask_client = flask_client
        self.calls: list[tuple[str, dict]] = []

    def get(self, url, params=None, timeout=None):
        parts = urlsplit(url)
        self.calls.append((parts.path, dict(params or {})))
        r = self.flask_client.get(parts.path, query_string=params or {})
        resp = requests.Response()
        resp.status_code = r.status_code
        resp._content = r.get_data()
        resp.headers = CaseInsensitiveDict(dict(r.headers))
        resp.encoding = "utf-8"
        resp.url = url
        return resp


class BrokenSession:
    def get(self, url, params=None, timeout=None):
        raise requests.ConnectionError("boom")


# --- Builders ---


def test_build_pagination_params():
    assert build_pagination_params({"page": 2, "limit": 25}) == {"page": "2", "limit": "25"}
    assert build_pagination_params({"page": 0, "limit": -1}) == {}
    assert build_pagination_params({"cursor": "abc", "cursorField": "id"}) == {"cursor": "abc", "cursorField": "id"}
    assert build_pagination_params(None) == {}


def test_build_sort_params():
    assert build_sort_params({"sort": "lastName", "order": "asc", "secondarySort": ""}) == {
        "sort": "lastName",
        "order": "asc",
    }


def test_build_filter_params_uses_wire_param_names():
    params = build_filter_params(
        [
            {"field": "firstName", "operation": "eq", "value": "Jane"},
            {"field": "lastName", "operation": "contains", "value": "Sm"},
            {"field": "yearsOfExperience", "operation": "between", "value": [3, 9]},
            {"field": "yearsOfExperience", "operation": "gte", "value": 5},
            {"field": "specialties", "operation": "all", "value": ["Bipolar", "LGBTQ"]},
            {"field": "specialty", "operation": "any", "value": ["Anxiety"]},
            {"field": "degree", "operation": "in", "value": ["MD", "PhD"]},
        ]
    )
    assert params == {
        "firstName": "Jane",
        "lastName[contains]": "Sm",
        "experience[between]": "3,9",
        "experience[gte]": "5",
        "specialty[all]": "Bipolar,LGBTQ",
        "specialty[any]": "Anxiety",
        "degree[in]": "MD,PhD",
    }


def test_build_query_params_merges_all_parts():
    params = build_query_params(
        {"page": 1, "limit": 10}, {"sort": "firstName"}, [{"field": "city", "operation": "eq", "value": "Austin"}]
    )
    assert params == {"page": "1", "limit": "10", "sort": "firstName", "city": "Austin"}


def test_build_filter_params_rejects_unknown_operation():
    with pytest.raises(ValueError):
        build_filter_params([{"field": "firstName", "operation": "like", "value": "x"}])


# --- Client against the app ---


@pytest.fixture
def api(client):
    return AdvocateClient("http://testserver", session=FlaskSession(client))


def test_get_advocates_returns_page_with_links(api, three_advocates):
    page = api.get_advocates({"page": 1, "limit": 5}, {"sort": "firstName", "order": "asc"})
    assert [a["firstName"] for a in page.data] == ["alice", "Jane", "John"]
    assert page.pagination["totalCount"] == 3
    assert set(page.links) == {"first", "last"}


def test_filter_helpers(api, three_advocates):
    assert [a["firstName"] for a in api.filter_by_experience(6, 9).data] == ["Jane"]
    assert {a["firstName"] for a in api.filter_by_specialties(["Bipolar"]).data} == {"John", "alice"}
    assert [a["firstName"] for a in api.filter_by_specialties(["Bipolar", "Anxiety"], match_all=True).data] == ["alice"]
    assert [a["firstName"] for a in api.filter_by_location("york").data] == ["John"]


def test_search_advocates(api, three_advocates):
    page = api.search_advocates("johnson", {"limit": 5})
    assert [a["lastName"] for a in page.data] == ["Johnson"]
    assert api.session.calls[-1][1] == {"limit": "5", "search": "johnson"}


def test_get_advocate_and_missing(api, three_advocates):
    assert api.get_advocate(three_advocates[0])["firstName"] == "John"
    with pytest.raises(ApiError) as exc:
        api.get_advocate("missing")
    assert exc.value.status == 404
    assert exc.value.payload["success"] is False


def test_cursor_walk(api, add_advocate):
    for i in range(7):
        add_advocate(f"W{i}", "Walker")
    sorting = {"sort": "firstName", "order": "asc"}
    first = api.get_advocates({"limit": 5}, sorting)
    nxt = api.get_advocates_by_cursor(first.pagination["nextCursor"], limit=5, sorting=sorting)
    assert [a["firstName"] for a in nxt.data] == ["W5", "W6"]
    assert "prev" in nxt.links


def test_transport_error_maps_to_api_error():
    with pytest.raises(ApiError) as exc:
        AdvocateClient("http://nowhere", session=BrokenSession()).get_advocates()
    assert exc.value.status == 0
