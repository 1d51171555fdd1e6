from datetime import datetime, timedelta, timezone


def utc_now() -> datetime:
    """Current UTC time as a naive datetime, the form every DateTime column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime | None) -> datetime | None:
    """Convert an aware datetime to naive UTC; naive values are assumed UTC already."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def add_days(value: datetime, days: int | None) -> datetime:
    return value + timedelta(days=days or 0)
