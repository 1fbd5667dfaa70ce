from datetime import datetime, timezone


def utcnow() -> datetime:
    # naive UTC, matching how every DateTime column is stored
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat(value):
    return value.isoformat() if value is not None else None
