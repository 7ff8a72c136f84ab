"""Filter Normalizer — verifies raw query strings become a typed FilterCriteria.

Tests:
    - Page index: absent, negative, and non-numeric values become 0
    - Numeric dates: "NaN"/"undefined" are absent, never zero
    - Numbers beyond the signed 64-bit range are rejected with 400
    - List filters must be JSON arrays (malformed → InvalidFilterError)
    - Status flags expand positionally (Completed, In review, In progress, Not started)
    - due keywords resolve to a window; unknown keywords are rejected
"""

from datetime import datetime, timezone
from uuid import uuid4

import pytest

from iperformance.core.domain_types import (
    CompanyDomain, DueBucket, RecordStatus, TenantContext,
)
from iperformance.core.errors import InvalidFilterError
from iperformance.core.filter_criteria import (
    expand_status_flags, normalize_filters, parse_json_list, parse_optional_int,
)

TENANT = TenantContext(CompanyDomain("acme.com"), uuid4())
NOW = datetime(2024, 5, 15, 10, 30, tzinfo=timezone.utc)


def _normalize(**params):
    return normalize_filters(params, TENANT, NOW)


def test_empty_params_give_defaults():
    criteria = _normalize()
    assert criteria.page_index == 0
    assert criteria.search is None
    assert criteria.statuses == ()
    assert criteria.users == ()
    assert criteria.archived is False
    assert criteria.tenant is TENANT


@pytest.mark.parametrize("raw", ["-3", "abc", "NaN", "undefined", ""])
def test_bad_page_index_becomes_zero(raw):
    assert _normalize(count=raw).page_index == 0


def test_page_index_parsed():
    assert _normalize(count="2").page_index == 2


def test_nan_dates_are_absent_not_zero():
    criteria = _normalize(startDate="NaN", endDate="undefined")
    assert criteria.start_date is None
    assert criteria.end_date is None


def test_float_date_truncates():
    assert parse_optional_int("1715769000000.0") == 1715769000000


def test_infinite_number_is_absent():
    assert parse_optional_int("inf") is None


def test_search_is_trimmed_and_empty_is_absent():
    assert _normalize(search="  roadmap ").search == "roadmap"
    assert _normalize(search="   ").search is None


def test_malformed_users_raises():
    with pytest.raises(InvalidFilterError) as exc:
        _normalize(users="[not json")
    assert exc.value.field == "users"
    assert exc.value.http_status == 400


def test_object_instead_of_array_raises():
    with pytest.raises(InvalidFilterError):
        parse_json_list('{"a": 1}', "teams")


def test_id_lists_kept_as_raw_values():
    uid = str(uuid4())
    assert _normalize(users=f'["{uid}"]').users == (uid,)


def test_status_flags_expand_in_fixed_order():
    assert expand_status_flags([True, False, True, False]) == (
        RecordStatus.COMPLETED, RecordStatus.IN_PROGRESS,
    )


def test_short_status_array_pads_with_false():
    assert expand_status_flags([False, True]) == (RecordStatus.IN_REVIEW,)


def test_status_param_decoded():
    criteria = _normalize(status="[false, false, false, true]")
    assert criteria.statuses == (RecordStatus.NOT_STARTED,)


def test_due_today_resolves_window():
    criteria = _normalize(due="Due today")
    assert criteria.due is DueBucket.TODAY
    start, end = criteria.due_window
    assert start == int(datetime(2024, 5, 15, tzinfo=timezone.utc).timestamp() * 1000)
    assert end == start + 86_400_000 - 1


def test_due_for_review_has_no_window():
    criteria = _normalize(due="Due for review")
    assert criteria.due is DueBucket.FOR_REVIEW
    assert criteria.due_window is None


def test_unknown_due_rejected():
    with pytest.raises(InvalidFilterError) as exc:
        _normalize(due="Due yesterday")
    assert exc.value.field == "due"


def test_archived_view():
    assert _normalize(view="archived").archived is True
    assert _normalize(view="active").archived is False


@pytest.mark.parametrize("raw", ["undefined", "null", ""])
def test_period_markers_are_absent(raw):
    assert _normalize(period=raw).period is None


@pytest.mark.parametrize("name", ["startDate", "endDate", "count"])
def test_out_of_range_number_rejected(name):
    with pytest.raises(InvalidFilterError) as exc:
        _normalize(**{name: "99999999999999999999"})
    assert exc.value.field == name
    assert exc.value.http_status == 400


def test_largest_int64_accepted():
    assert parse_optional_int(str(2 ** 63 - 1)) == 2 ** 63 - 1
