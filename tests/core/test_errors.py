"""Tests for the error hierarchy's response envelope and status codes."""

from decision_log.core.errors import (
    CategoryInUseError, CryptoError, DatabaseError, ImportFormatError,
    RecordValidationError, RemoteServiceError, ResourceNotFoundError,
)


def test_not_found_envelope():
    body = ResourceNotFoundError("Backup", "b1").to_response()
    assert body["error"]["code"] == "RESOURCE_NOT_FOUND"
    assert "b1" in body["error"]["message"]


def test_validation_error_carries_all_diagnostics():
    err = RecordValidationError(["Decision 1 (a): x", "Decision 3 (c): y"])
    assert err.http_status == 400
    assert err.to_response()["error"]["details"] == err.errors
    assert err.message.startswith("Validation errors: ")


def test_remote_error_message_contains_body():
    err = RemoteServiceError("Failed to fetch gist", 404, '{"message": "Not Found"}')
    assert err.http_status == 502
    assert "Not Found" in err.message
    assert err.status_code == 404


def test_status_codes():
    assert ImportFormatError("Invalid format", kind="format").http_status == 400
    assert CryptoError().message == "Cannot decrypt token"
    assert CategoryInUseError("work", 2).http_status == 409
    assert DatabaseError("boom", "commit").http_status == 503
