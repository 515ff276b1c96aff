"""Time helpers shared by tests."""
from datetime import datetime, timedelta, timezone


NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def days_ago(days: float) -> datetime:
    return NOW - timedelta(days=days)
