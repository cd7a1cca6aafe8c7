"""Instant parsing and normalisation.

All instants are stored as naive UTC datetimes so that window comparisons
never mix aware and naive values.
"""

from datetime import UTC, date, datetime

from protean.exceptions import ValidationError


def utc_now() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        value = value.astimezone(UTC).replace(tzinfo=None)
    return value


def parse_instant(value, field: str = "date") -> datetime:
    """Parse an ISO-8601 date or datetime into a naive UTC datetime.

    Accepts ``datetime`` and ``date`` objects as well as strings such as
    ``2025-01-01``, ``2025-01-01T10:00:00`` and ``2025-01-01T10:00:00Z``.
    """
    if value is None or value == "":
        raise ValidationError({field: [f"{field} is required"]})

    if isinstance(value, datetime):
        return to_naive_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)

    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise ValidationError({field: [f"'{value}' is not a valid ISO date"]}) from None
    return to_naive_utc(parsed)
