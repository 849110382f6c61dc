from datetime import datetime, timedelta, timezone

from supadrive.utils.datetime import ensure_aware, parse_timestamp, utc_now


def test_ensure_aware_adds_utc_to_naive():
    assert ensure_aware(datetime(2026, 1, 1, 12, 0)).tzinfo == timezone.utc
    assert ensure_aware(None) is None


def test_ensure_aware_keeps_existing_offset():
    offset = timezone(timedelta(hours=9))
    dt = datetime(2026, 1, 1, 12, 0, tzinfo=offset)
    assert ensure_aware(dt) is dt


def test_parse_timestamp_handles_zulu_suffix():
    parsed = parse_timestamp("2026-01-02T03:04:05.123Z")
    assert parsed == datetime(2026, 1, 2, 3, 4, 5, 123000, tzinfo=timezone.utc)


def test_parse_timestamp_invalid_or_missing():
    assert parse_timestamp("yesterday") is None
    assert parse_timestamp(None) is None


def test_utc_now_is_aware():
    assert utc_now().tzinfo is not None
