"""Request Parsing — pure coercion of raw query/path/body strings into typed values.

Invariants:
    - Absent values map to the documented default, never to an exception
    - Malformed values raise InvalidInputError naming the offending field
    - Parsed datetimes are always timezone-aware (naive input is taken as UTC)

Design Decisions:
    - Pure functions, no Request object: routes pass strings in, tests need no HTTP
    - Flag parsing is exact-match on "true": any other value is False, matching the
      behavior the frontend was built against
"""

import math
from datetime import date, datetime, time, timezone
from typing import Any, Iterable, Mapping
from uuid import UUID

from pydantic import TypeAdapter, ValidationError

from app.core.domain_types import DateRange
from app.core.errors import InvalidInputError

_datetime_adapter = TypeAdapter(datetime)


def parse_flag(raw: str | None) -> bool:
    """True only for the exact string "true"."""
    return raw == "true"


def parse_optional_flag(raw: str | None) -> bool | None:
    """Tri-state filter flag: None when absent, else exact "true" check."""
    if raw is None or raw == "":
        return None
    return raw == "true"


def parse_int(
    raw: str | None, field: str, default: int,
    minimum: int | None = None, maximum: int | None = None,
) -> int:
    """Parse an integer query param, falling back to default when absent."""
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise InvalidInputError(f"'{field}' must be an integer", field=field)
    if minimum is not None and value < minimum:
        raise InvalidInputError(f"'{field}' must be >= {minimum}", field=field)
    if maximum is not None and value > maximum:
        raise InvalidInputError(f"'{field}' must be <= {maximum}", field=field)
    return value


def parse_uuid(raw: str, field: str) -> UUID:
    try:
        return UUID(raw)
    except (ValueError, AttributeError, TypeError):
        raise InvalidInputError(f"Invalid {field} format", field=field)


def parse_datetime(raw: str | None, field: str) -> datetime | None:
    """Parse an ISO-8601 date or datetime. Date-only means UTC midnight."""
    if raw is None or raw == "":
        return None
    value = raw.strip()
    if len(value) == 10:
        try:
            return datetime.combine(
                date.fromisoformat(value), time.min, tzinfo=timezone.utc,
            )
        except ValueError:
            pass
    try:
        parsed = _datetime_adapter.validate_python(value)
    except ValidationError:
        raise InvalidInputError(
            f"'{field}' must be an ISO-8601 date", field=field,
        )
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_date_range(
    raw_from: str | None, raw_to: str | None,
    from_field: str = "from", to_field: str = "to",
) -> DateRange | None:
    """Build a DateRange only when both bounds are supplied."""
    if not raw_from or not raw_to:
        return None
    start = parse_datetime(raw_from, from_field)
    end = parse_datetime(raw_to, to_field)
    if start > end:
        raise InvalidInputError(
            f"'{from_field}' must not be after '{to_field}'", field=from_field,
        )
    return DateRange(start=start, end=end)


def missing_fields(body: Mapping[str, Any], required: Iterable[str]) -> list[str]:
    """Names of required fields that are absent or falsy."""
    return [name for name in required if not body.get(name)]


def parse_amount(raw: Any, field: str) -> float:
    """Coerce a JSON number (or numeric string) into a non-negative float."""
    if isinstance(raw, bool):
        raise InvalidInputError(f"'{field}' must be a number", field=field)
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise InvalidInputError(f"'{field}' must be a number", field=field)
    if not math.isfinite(value):
        raise InvalidInputError(f"'{field}' must be a number", field=field)
    if value < 0:
        raise InvalidInputError(f"'{field}' must not be negative", field=field)
    return value
