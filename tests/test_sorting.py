from __future__ import annotations

from advocate_directory.query_params import get_sort_params
from advocate_directory.sorting import build_sort_expressions


def _compiled(sort):
    return [str(e) for e in build_sort_expressions(sort)]


def test_primary_and_secondary_in_order():
    sort = get_sort_params(
        {"sort": "yearsOfExperience", "order": "desc", "secondarySort": "lastName", "secondaryOrder": "asc"}
    )
    exprs = _compiled(sort)
    assert len(exprs) == 2
    assert exprs[0] == "advocates.years_of_experience DESC"
    assert exprs[1] == "lower(advocates.last_name) ASC"


def test_invalid_secondary_gives_primary_only():
    sort = get_sort_params({"sort": "yearsOfExperience", "secondarySort": "bogus"})
    assert len(build_sort_expressions(sort)) == 1


def test_unknown_fields_produce_nothing():
    sort = {"field": "phoneNumber", "direction": "asc", "secondary_field": "nope", "secondary_direction": "asc"}
    assert build_sort_expressions(sort) == []  # type: ignore[arg-type]


def test_case_sensitivity_is_configurable():
    sort = get_sort_params({"sort": "firstName", "order": "asc"})
    assert [str(e) for e in build_sort_expressions(sort, case_insensitive_fields=())] == [
        "advocates.first_name ASC"
    ]


def _first_names(store, args):
    return [r["firstName"] for r in store.fetch_advocates([], get_sort_params(args))]


def test_case_insensitive_name_sort(store, three_advocates):
    assert _first_names(store, {"sort": "firstName", "order": "asc"}) == ["alice", "Jane", "John"]
    assert _first_names(store, {"sort": "firstName", "order": "desc"}) == ["John", "Jane", "alice"]


def test_default_sort_is_newest_first(store, three_advocates):
    assert _first_names(store, {}) == ["alice", "Jane", "John"]


def test_secondary_sort_breaks_ties(store, add_advocate):
    add_advocate("Zed", "Young", years=5)
    add_advocate("Amy", "Young", years=5)
    add_advocate("Bob", "Old", years=9)
    names = _first_names(store, {"sort": "yearsOfExperience", "order": "asc", "secondarySort": "firstName"})
    assert names == ["Amy", "Zed", "Bob"]
