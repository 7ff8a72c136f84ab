"""Bulk Delete Classification — verifies per-id outcomes and the summary contract."""

from uuid import uuid4

import pytest

from iperformance.core.bulk_delete import (
    DELETED, ERROR, NOT_FOUND, classify, resolve_requested_ids, split_ids,
)
from iperformance.core.errors import InvalidFilterError


def test_split_separates_malformed():
    good = str(uuid4())
    valid, malformed = split_ids([good, "nope"])
    assert list(valid) == [good]
    assert malformed == ["nope"]


def test_one_of_each_outcome():
    present, missing = uuid4(), uuid4()
    raw = [str(present), str(missing), "zzz"]
    valid, _ = split_ids(raw)
    outcome = classify(raw, valid, {present})
    assert [d["status"] for d in outcome.details] == [DELETED, NOT_FOUND, ERROR]
    assert outcome.summary() == {"deleted": 1, "notFound": 1, "errors": 1}
    assert outcome.deleted_ids == [str(present)]


def test_response_envelope():
    response = classify([], {}, set()).to_response()
    assert response["message"] == "Deletion operation completed"
    assert response["summary"] == {"deleted": 0, "notFound": 0, "errors": 0}


def test_ids_from_body_win():
    assert resolve_requested_ids(["a"], '["b"]') == ["a"]


def test_ids_from_query_fallback():
    assert resolve_requested_ids(None, '["b"]') == ["b"]


@pytest.mark.parametrize("body, query", [(None, None), ([], None), (None, "[]")])
def test_no_ids_rejected(body, query):
    with pytest.raises(InvalidFilterError):
        resolve_requested_ids(body, query)


def test_repeated_id_reported_once():
    present = uuid4()
    raw = [str(present), "zzz", str(present), "zzz"]
    valid, _ = split_ids(raw)
    outcome = classify(raw, valid, {present})
    assert [d["id"] for d in outcome.details] == [str(present), "zzz"]
    assert outcome.summary() == {"deleted": 1, "notFound": 0, "errors": 1}


def test_case_variants_of_one_id_reported_once():
    present = uuid4()
    raw = [str(present), str(present).upper()]
    valid, _ = split_ids(raw)
    outcome = classify(raw, valid, {present})
    assert outcome.summary()["deleted"] == 1
    assert len(outcome.details) == 1
