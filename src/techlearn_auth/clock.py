"""UTC clock helpers."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def ensure_tz_aware(dt: datetime) -> datetime:
    """Attach UTC to naive values; SQLite hands timestamps back without a zone."""
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=timezone.utc)
