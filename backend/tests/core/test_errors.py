"""Error Hierarchy — verifies status codes and the response envelope."""

from iperformance.core.errors import (
    ConstraintViolationError, DuplicateKeyError, ErrorContext, InvalidFilterError,
    InvalidIdError, NotFoundError, PersistenceError, TenantContextMissingError,
)


def test_http_statuses():
    assert InvalidFilterError("bad", "users").http_status == 400
    assert InvalidIdError("x", "goals").http_status == 400
    assert TenantContextMissingError().http_status == 401
    assert NotFoundError("Task not found").http_status == 404
    assert DuplicateKeyError("dup").http_status == 409
    assert ConstraintViolationError("missing").http_status == 400
    assert PersistenceError("boom", "commit").http_status == 500


def test_response_has_top_level_message():
    body = NotFoundError(
        "Parent task not found",
        ErrorContext(entity="task", debug_info={"subtaskId": "abc"}),
    ).to_response()
    assert body["message"] == "Parent task not found"
    assert body["error"]["code"] == "RESOURCE_NOT_FOUND"
    assert body["error"]["context"] == {"entity": "task", "subtaskId": "abc"}


def test_invalid_id_message_names_field():
    assert InvalidIdError("zzz", "users").message == "Invalid id 'zzz' in users"
