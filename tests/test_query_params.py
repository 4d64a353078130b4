from __future__ import annotations

from datetime import UTC, datetime

import pytest
from werkzeug.datastructures import MultiDict

from advocate_directory.errors import QueryParamError
from advocate_directory.fields import FilterOperation
from advocate_directory.query_params import (
    ALLOWED_PAGE_SIZES,
    DEFAULT_PAGE_SIZE,
    FALLBACK_POLICY,
    get_filter_params,
    get_pagination_params,
    get_sort_params,
    parse_number,
    parse_query,
    parse_timestamp,
)


def test_pagination_defaults():
    req = get_pagination_params({})
    assert req == {"page": 1, "limit": 10, "cursor": None, "cursor_field": None}


@pytest.mark.parametrize("limit", ALLOWED_PAGE_SIZES)
def test_pagination_allowed_limits(limit):
    assert get_pagination_params({"limit": str(limit)})["limit"] == limit


def test_pagination_disallowed_limit_falls_back():
    assert 30 not in ALLOWED_PAGE_SIZES
    assert get_pagination_params({"limit": "30"})["limit"] == DEFAULT_PAGE_SIZE
    assert get_pagination_params({"limit": "abc"})["limit"] == DEFAULT_PAGE_SIZE


@pytest.mark.parametrize("raw", ["0", "-3", "abc", ".5"])
def test_pagination_invalid_page_falls_back(raw):
    assert get_pagination_params({"page": raw})["page"] == 1


def test_pagination_uses_leading_integer():
    assert get_pagination_params({"page": "2.5"})["page"] == 2
    assert get_pagination_params({"page": " 3rd"})["page"] == 3
    assert get_pagination_params({"limit": "25.0"})["limit"] == 25
    assert get_pagination_params({"limit": "5px"})["limit"] == 5


def test_pagination_cursor_and_field():
    req = get_pagination_params({"cursor": "abc", "cursorField": "lastName"})
    assert req["cursor"] == "abc"
    assert req["cursor_field"] == "lastName"
    assert get_pagination_params({"cursorField": "nope"})["cursor_field"] is None


def test_sort_defaults():
    assert get_sort_params({}) == {
        "field": "createdAt",
        "direction": "desc",
        "secondary_field": None,
        "secondary_direction": None,
    }


def test_sort_with_secondary():
    sort = get_sort_params(
        {"sort": "yearsOfExperience", "order": "desc", "secondarySort": "lastName", "secondaryOrder": "asc"}
    )
    assert sort == {
        "field": "yearsOfExperience",
        "direction": "desc",
        "secondary_field": "lastName",
        "secondary_direction": "asc",
    }


def test_sort_invalid_values_fall_back():
    sort = get_sort_params({"sort": "phoneNumber", "order": "sideways"})
    assert sort["field"] == "createdAt"
    assert sort["direction"] == "desc"


def test_invalid_secondary_sort_is_dropped_with_its_direction():
    sort = get_sort_params({"sort": "lastName", "secondarySort": "bogus", "secondaryOrder": "desc"})
    assert sort["secondary_field"] is None
    assert sort["secondary_direction"] is None


def test_secondary_direction_defaults_to_asc():
    assert get_sort_params({"secondarySort": "firstName"})["secondary_direction"] == "asc"


def test_filters_combined_example():
    filters = get_filter_params(
        {
            "firstName[contains]": "Jo",
            "experience[gte]": "5",
            "specialty[any]": "Trauma, Anxiety",
            "city": "New York",
            "unknownField": "value",
        }
    )
    by_field = {f["field"]: f for f in filters}
    assert set(by_field) == {"firstName", "yearsOfExperience", "specialties", "city"}
    assert by_field["firstName"]["operation"] is FilterOperation.CONTAINS
    assert by_field["firstName"]["value"] == "Jo"
    assert by_field["yearsOfExperience"]["value"] == 5
    assert by_field["specialties"]["value"] == ["Trauma", "Anxiety"]
    assert by_field["city"]["operation"] is FilterOperation.EQUALS


def test_bare_key_eq_passes_raw_string():
    filters = get_filter_params({"experience": "7"})
    assert filters == [{"field": "yearsOfExperience", "operation": FilterOperation.EQUALS, "value": "7"}]


def test_bare_key_ignored_when_field_has_no_eq():
    assert get_filter_params({"specialty": "Bipolar", "createdAt": "2024-01-01"}) == []


def test_bare_key_suppresses_suffixed_operations_for_that_field():
    filters = get_filter_params(MultiDict([("firstName", "Jane"), ("firstName[eq]", "John")]))
    assert filters == [{"field": "firstName", "operation": FilterOperation.EQUALS, "value": "Jane"}]

    filters = get_filter_params(
        {"firstName": "John", "firstName[contains]": "J", "lastName[contains]": "Do"}
    )
    assert [(f["field"], f["operation"]) for f in filters] == [
        ("firstName", FilterOperation.EQUALS),
        ("lastName", FilterOperation.CONTAINS),
    ]


def test_suffixed_eq_used_when_no_bare_key():
    filters = get_filter_params({"degree[eq]": "MD"})
    assert filters == [{"field": "degree", "operation": FilterOperation.EQUALS, "value": "MD"}]


def test_between_requires_two_numeric_tokens():
    assert get_filter_params({"experience[between]": "3,9"})[0]["value"] == [3, 9]
    assert get_filter_params({"experience[between]": "3"}) == []
    assert get_filter_params({"experience[between]": "3,x"}) == []
    assert get_filter_params({"experience[between]": "1,2,3"}) == []


def test_comparison_skips_unparseable_number():
    assert get_filter_params({"experience[gt]": "lots"}) == []
    assert get_filter_params({"experience[lt]": "2.5"})[0]["value"] == 2.5


def test_operation_not_allowed_for_field_is_dropped():
    assert get_filter_params({"degree[contains]": "M", "city[startsWith]": "New"}) == []


def test_created_at_range_parses_iso_and_epoch_ms():
    iso = get_filter_params({"createdAt[gte]": "2024-01-01T00:00:00"})[0]["value"]
    assert iso == datetime(2024, 1, 1, tzinfo=UTC)
    epoch = get_filter_params({"createdAt[lt]": "1704067200000"})[0]["value"]
    assert epoch == datetime(2024, 1, 1, tzinfo=UTC)


def test_parse_number_rejects_non_finite():
    assert parse_number("nan") is None
    assert parse_number("inf") is None
    assert parse_number(" 12 ") == 12


def test_parse_number_rejects_integers_wider_than_64_bits():
    assert parse_number(str(2**63 - 1)) == 2**63 - 1
    assert parse_number(str(-(2**63))) == -(2**63)
    assert parse_number(str(2**63)) is None
    assert parse_number("99999999999999999999") is None
    assert get_filter_params({"experience[gt]": "99999999999999999999"}) == []
    assert get_filter_params({"experience[between]": "1,99999999999999999999"}) == []


def test_parse_timestamp_converts_offsets_to_utc():
    assert parse_timestamp("2024-01-01T02:00:00+02:00") == datetime(2024, 1, 1, tzinfo=UTC)
    assert parse_timestamp("not a date") is None


def test_search_term_is_trimmed():
    assert parse_query({"search": "  ann  "}).search == "ann"
    assert parse_query({"search": "   "}).search is None


def test_fallback_policy_covers_every_coercion():
    assert set(FALLBACK_POLICY) == {
        "page",
        "limit",
        "cursorField",
        "sort",
        "order",
        "secondarySort",
        "secondaryOrder",
        "filter_value",
        "filter_key",
    }


# --- Strict mode ---


@pytest.mark.parametrize(
    "args,param",
    [
        ({"page": "0"}, "page"),
        ({"limit": "30"}, "limit"),
        ({"sort": "bogus"}, "sort"),
        ({"order": "up"}, "order"),
        ({"secondarySort": "bogus"}, "secondarySort"),
        ({"cursorField": "bogus"}, "cursorField"),
        ({"experience[gt]": "many"}, "experience[gt]"),
        ({"degree[contains]": "M"}, "degree[contains]"),
        ({"unknown[eq]": "x"}, "unknown[eq]"),
    ],
)
def test_strict_mode_rejects(args, param):
    with pytest.raises(QueryParamError) as exc:
        parse_query(args, strict=True)
    assert exc.value.param == param
    assert exc.value.status_code == 400


def test_strict_mode_accepts_valid_query():
    parsed = parse_query({"page": "2", "limit": "5", "sort": "lastName", "firstName[startsWith]": "J"}, strict=True)
    assert parsed.pagination["page"] == 2
    assert parsed.filters[0]["operation"] is FilterOperation.STARTS_WITH
