"""Assertion helpers for lifecycle stamps read back from the store."""

from datetime import datetime, timedelta


def assert_timezone_aware(actual_dt: datetime) -> None:
    """Assert that a datetime is timezone-aware."""
    if actual_dt is None:
        raise AssertionError("Cannot check timezone awareness of None datetime")

    if actual_dt.tzinfo is None:
        raise AssertionError(f"Expected timezone-aware datetime, got naive datetime: {actual_dt}")


def assert_utc_timezone(actual_dt: datetime) -> None:
    """Assert that a datetime carries a zero UTC offset."""
    assert_timezone_aware(actual_dt)

    if actual_dt.utcoffset() != timedelta(0):
        raise AssertionError(f"Expected UTC datetime, got offset {actual_dt.utcoffset()} for {actual_dt}")
