"""Helpers for ISO-8601 timestamp parsing."""

from datetime import datetime, timezone


def parse_datetime_iso(value: str) -> datetime:
    """Parse an ISO-8601 timestamp into a timezone-aware datetime.

    A trailing ``Z`` is read as UTC and naive timestamps are assumed to be
    UTC, so values with mixed offsets compare by instant.

    Args:
        value: Timestamp such as ``2024-01-01T10:00:00.000Z``.

    Returns:
        datetime: Aware datetime keeping the offset it was written with.

    Raises:
        ValueError: If the value is not an ISO-8601 timestamp.
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = f"{text[:-1]}+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed


__all__ = ["parse_datetime_iso"]
