"""Request Parsing — verifies query/body coercion rules.

Tests:
    - activeOnly-style flags are True only for the exact string "true"
    - integers fall back to defaults and reject junk or out-of-range values
    - ISO dates keep the instant they describe; naive values are UTC
    - date ranges exist only when both bounds are given
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from app.core.errors import InvalidInputError
from app.core.request_parsing import (
    missing_fields, parse_amount, parse_date_range, parse_datetime, parse_flag,
    parse_int, parse_optional_flag, parse_uuid,
)


@pytest.mark.parametrize("raw", [None, "", "false", "True", "1", "yes", "TRUE"])
def test_flag_is_false_unless_exactly_true(raw):
    assert parse_flag(raw) is False


def test_flag_true_for_exact_string():
    assert parse_flag("true") is True


def test_optional_flag_is_none_when_absent():
    assert parse_optional_flag(None) is None
    assert parse_optional_flag("") is None
    assert parse_optional_flag("true") is True
    assert parse_optional_flag("no") is False


def test_int_defaults_when_absent():
    assert parse_int(None, "page", 1) == 1
    assert parse_int("", "page", 1) == 1


def test_int_parses_value():
    assert parse_int("7", "page", 1, minimum=1) == 7


def test_int_rejects_non_integer():
    with pytest.raises(InvalidInputError) as exc:
        parse_int("abc", "page", 1)
    assert exc.value.http_status == 400
    assert exc.value.details == [{"field": "page", "message": "'page' must be an integer"}]


def test_int_enforces_bounds():
    with pytest.raises(InvalidInputError):
        parse_int("0", "page", 1, minimum=1)
    with pytest.raises(InvalidInputError):
        parse_int("500", "limit", 20, maximum=100)


def test_uuid_round_trip_and_rejection():
    uid = uuid4()
    assert parse_uuid(str(uid), "id") == uid
    with pytest.raises(InvalidInputError) as exc:
        parse_uuid("not-a-uuid", "user id")
    assert exc.value.message == "Invalid user id format"


def test_date_only_is_utc_midnight():
    assert parse_datetime("2024-03-01", "from") == datetime(
        2024, 3, 1, tzinfo=timezone.utc,
    )


def test_offset_datetime_keeps_instant():
    parsed = parse_datetime("2024-03-01T10:30:00+05:30", "from")
    assert parsed == datetime(2024, 3, 1, 5, 0, tzinfo=timezone.utc)
    assert parsed.utcoffset() == timedelta(hours=5, minutes=30)


def test_naive_datetime_taken_as_utc():
    parsed = parse_datetime("2024-03-01T10:30:00", "from")
    assert parsed.tzinfo is not None
    assert parsed == datetime(2024, 3, 1, 10, 30, tzinfo=timezone.utc)


def test_zulu_datetime():
    parsed = parse_datetime("2024-03-01T10:30:00Z", "to")
    assert parsed == datetime(2024, 3, 1, 10, 30, tzinfo=timezone.utc)


def test_invalid_datetime_names_field():
    with pytest.raises(InvalidInputError) as exc:
        parse_datetime("yesterday", "dateFrom")
    assert exc.value.field == "dateFrom"


def test_absent_datetime_is_none():
    assert parse_datetime(None, "from") is None
    assert parse_datetime("", "from") is None


def test_date_range_requires_both_bounds():
    assert parse_date_range("2024-01-01", None) is None
    assert parse_date_range(None, "2024-01-31") is None


def test_date_range_built_from_both_bounds():
    date_range = parse_date_range("2024-01-01", "2024-01-31T23:59:59Z")
    assert date_range.start == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert date_range.end == datetime(2024, 1, 31, 23, 59, 59, tzinfo=timezone.utc)


def test_date_range_rejects_inverted_bounds():
    with pytest.raises(InvalidInputError):
        parse_date_range("2024-02-01", "2024-01-01")


def test_missing_fields_treats_falsy_as_missing():
    body = {"offerId": "x", "orderAmount": 0}
    assert missing_fields(body, ("offerId", "orderAmount")) == ["orderAmount"]
    assert missing_fields({}, ("offerId",)) == ["offerId"]
    assert missing_fields({"offerId": "x", "orderAmount": 10}, ("offerId", "orderAmount")) == []


def test_amount_accepts_numbers_and_numeric_strings():
    assert parse_amount(120, "orderAmount") == 120.0
    assert parse_amount("99.5", "orderAmount") == 99.5


@pytest.mark.parametrize("raw", [True, "abc", None, float("nan"), float("inf"), -5])
def test_amount_rejects_invalid(raw):
    with pytest.raises(InvalidInputError):
        parse_amount(raw, "orderAmount")
