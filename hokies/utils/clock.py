import datetime as dt


def utcnow() -> dt.datetime:
    """Naive UTC now, matching what the DateTime columns store."""
    return dt.datetime.now(dt.timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: dt.datetime) -> dt.datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(dt.timezone.utc).replace(tzinfo=None)


def isoformat(value):
    return value.isoformat() if value else None
