from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from davrestore.timestamps import format_timestamp, parse_cutoff, parse_delete_timestamp


def test_parse_cutoff_accepts_date_only_as_utc_midnight() -> None:
    assert parse_cutoff("2024-03-01") == datetime(2024, 3, 1, tzinfo=timezone.utc)


def test_parse_cutoff_accepts_iso_with_offset_and_naive_as_utc() -> None:
    assert parse_cutoff("2024-03-01T10:00:00+02:00") == datetime(
        2024, 3, 1, 8, 0, tzinfo=timezone.utc
    )
    assert parse_cutoff("2024-03-01T10:00:00Z") == datetime(
        2024, 3, 1, 10, 0, tzinfo=timezone.utc
    )
    assert parse_cutoff("2024-03-01T10:00:00") == datetime(
        2024, 3, 1, 10, 0, tzinfo=timezone.utc
    )


def test_parse_cutoff_rejects_garbage() -> None:
    with pytest.raises(ValueError):
        parse_cutoff("last tuesday")
    with pytest.raises(ValueError):
        parse_cutoff("  ")


def test_parse_delete_timestamp_formats() -> None:
    expected = datetime(2024, 2, 1, 10, 0, tzinfo=timezone.utc)

    assert parse_delete_timestamp("Thu, 01 Feb 2024 10:00:00 GMT") == expected
    assert parse_delete_timestamp("2024-02-01T11:00:00+01:00") == expected
    assert parse_delete_timestamp(str(int(expected.timestamp()))) == expected


def test_parse_delete_timestamp_rejects_invalid_values() -> None:
    with pytest.raises(ValueError):
        parse_delete_timestamp("Thu, 99 Foo 2024 10:00:00 GMT")
    with pytest.raises(ValueError):
        parse_delete_timestamp("")


def test_format_timestamp_renders_utc() -> None:
    value = datetime(2024, 2, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
    assert format_timestamp(value) == "2024-02-01T10:00:00Z"
