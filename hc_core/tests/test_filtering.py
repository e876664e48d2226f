# hc_core/tests/test_filtering.py
from datetime import date

import pytest

from hc_core.common.filtering import FilterCriteria, resolve

RECORDS = [
    {
        "id": "r1",
        "title": "Full blood count",
        "record_type": "LAB_RESULT",
        "status": "ACTIVE",
        "date": "2024-03-01",
        "patient": {"id": "p1", "first_name": "Amara", "last_name": "Silva"},
    },
    {
        "id": "r2",
        "title": "Chest X-ray",
        "record_type": "IMAGING",
        "status": "COMPLETED",
        "date": "2024-03-05",
        "patient": {"id": "p2", "first_name": "Saman", "last_name": "Perera"},
    },
]

SEARCH = ("title", "patient.first_name", "patient.last_name")


def _ids(items):
    return [i["id"] for i in items]


def test_status_filter_keeps_only_matching_rows():
    criteria = FilterCriteria().with_filter("status", "ACTIVE")
    rows = criteria.apply(RECORDS, search_fields=SEARCH, date_field="date")
    assert _ids(rows) == ["r1"]
    assert rows[0]["record_type"] == "LAB_RESULT"


def test_search_is_case_insensitive_across_fields():
    assert _ids(FilterCriteria().with_search("PERERA").apply(RECORDS, search_fields=SEARCH)) == ["r2"]
    assert _ids(FilterCriteria().with_search("  x-RAY ").apply(RECORDS, search_fields=SEARCH)) == ["r2"]


def test_date_range_is_inclusive():
    criteria = FilterCriteria().with_date_range("2024-03-01", date(2024, 3, 4))
    assert _ids(criteria.apply(RECORDS, date_field="date")) == ["r1"]
    criteria = FilterCriteria().with_date_range(None, "2024-03-05")
    assert _ids(criteria.apply(RECORDS, date_field="date")) == ["r1", "r2"]


def test_filter_on_expanded_reference_matches_id():
    assert _ids(FilterCriteria().with_filter("patient", "p2").apply(RECORDS)) == ["r2"]


@pytest.mark.parametrize(
    "step",
    [
        lambda c: c.with_search("a"),
        lambda c: c.with_filter("record_type", "IMAGING"),
        lambda c: c.with_date_range("2024-03-02", None),
    ],
)
def test_adding_a_predicate_never_grows_the_result(step):
    base = FilterCriteria().with_search("r")
    before = set(_ids(base.apply(RECORDS, search_fields=SEARCH, date_field="date")))
    after = set(_ids(step(base).apply(RECORDS, search_fields=SEARCH, date_field="date")))
    assert after <= before


def test_predicate_order_does_not_matter():
    a = FilterCriteria().with_search("a").with_filter("status", "ACTIVE")
    b = FilterCriteria().with_filter("status", "ACTIVE").with_search("a")
    assert a == b
    assert a.apply(RECORDS, search_fields=SEARCH) == b.apply(RECORDS, search_fields=SEARCH)


def test_query_params_round_trip():
    criteria = FilterCriteria().with_search("blood").with_filter("status", "ACTIVE").with_date_range("2024-01-01")
    params = criteria.to_query_params()
    assert params == {"search": "blood", "status": "ACTIVE", "date_from": "2024-01-01"}
    assert FilterCriteria.from_query_params({**params, "page": "3"}) == criteria


def test_clearing_a_filter_value():
    criteria = FilterCriteria().with_filter("status", "ACTIVE").with_filter("status", "")
    assert criteria.is_empty


def test_resolve_dotted_paths():
    assert resolve(RECORDS[0], "patient.first_name") == "Amara"
    assert resolve(RECORDS[0], "patient.missing.deeper") is None
