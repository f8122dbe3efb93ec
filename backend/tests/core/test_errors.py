"""Error Hierarchy — verifies status codes and the public error envelope.

Tests:
    - Each error class maps to its HTTP status
    - Client errors expose their message; server errors expose a generic one
    - Field details only appear on client errors
"""

from app.core.errors import (
    ConflictError, DatabaseError, ErrorCategory, ForbiddenError,
    GENERIC_ERROR_MESSAGE, InvalidInputError, ResourceNotFoundError,
    UnauthenticatedError,
)


def test_status_codes():
    assert InvalidInputError("bad").http_status == 400
    assert UnauthenticatedError().http_status == 401
    assert ForbiddenError().http_status == 403
    assert ResourceNotFoundError("User", "1").http_status == 404
    assert ConflictError("dup").http_status == 409
    assert DatabaseError("down", "query").http_status == 503


def test_not_found_message_names_resource():
    err = ResourceNotFoundError("Menu item", "abc")
    assert err.to_response() == {"error": "Menu item not found"}
    assert err.category is ErrorCategory.RESOURCE_NOT_FOUND


def test_invalid_input_with_field_carries_details():
    err = InvalidInputError("'page' must be an integer", field="page")
    assert err.to_response() == {
        "error": "'page' must be an integer",
        "details": [{"field": "page", "message": "'page' must be an integer"}],
    }


def test_invalid_input_without_field_has_no_details():
    assert InvalidInputError("Missing required fields").to_response() == {
        "error": "Missing required fields",
    }


def test_server_error_hides_internal_text():
    err = DatabaseError("password authentication failed for user x", "connect")
    assert err.is_client_error is False
    assert err.to_response() == {"error": GENERIC_ERROR_MESSAGE}


def test_default_auth_messages():
    assert UnauthenticatedError().to_response() == {"error": "Unauthorized"}
    assert ForbiddenError().to_response() == {"error": "Insufficient permissions"}
