"""Timestamp parsing helpers.

Naive values are interpreted as UTC so that the cutoff comparison does not
depend on the host timezone of the worker running the restore.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timezone
from email.utils import parsedate_to_datetime

_DATE_ONLY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_EPOCH_RE = re.compile(r"^\d{9,11}(\.\d+)?$")


def parse_cutoff(raw_value: str) -> datetime:
    """Parse an ISO-8601 datetime or a date-only value into an aware datetime."""
    value = raw_value.strip()
    if not value:
        raise ValueError("Cutoff value is empty.")

    if _DATE_ONLY_RE.match(value):
        parsed_date = date.fromisoformat(value)
        return datetime(
            parsed_date.year, parsed_date.month, parsed_date.day, tzinfo=timezone.utc
        )

    return _coerce_to_utc(_parse_iso(value))


def parse_delete_timestamp(raw_value: str) -> datetime:
    """Parse a server delete timestamp.

    Accepts RFC 1123 (`Thu, 01 Feb 2024 10:00:00 GMT`), ISO-8601 and unix
    epoch seconds.
    """
    value = raw_value.strip()
    if not value:
        raise ValueError("Delete timestamp is empty.")

    if _EPOCH_RE.match(value):
        return datetime.fromtimestamp(float(value), tz=timezone.utc)

    if "," in value or value.endswith("GMT"):
        try:
            return _coerce_to_utc(parsedate_to_datetime(value))
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid RFC 1123 timestamp: {raw_value}") from exc

    return _coerce_to_utc(_parse_iso(value))


def format_timestamp(value: datetime) -> str:
    return _coerce_to_utc(value).strftime("%Y-%m-%dT%H:%M:%SZ")


def _parse_iso(value: str) -> datetime:
    normalized = value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value
    try:
        return datetime.fromisoformat(normalized)
    except ValueError as exc:
        raise ValueError(f"Invalid ISO-8601 timestamp: {value}") from exc


def _coerce_to_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
