from datetime import datetime, timezone


def utcnow() -> datetime:
    """Naive UTC timestamp, the form SQLite DateTime columns round-trip."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat(value):
    """ISO-8601 string with a trailing Z for naive UTC datetimes."""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if value.tzinfo is None:
        return value.isoformat(timespec='milliseconds') + 'Z'
    return value.isoformat(timespec='milliseconds')
