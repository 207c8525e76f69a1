"""Timestamp helpers shared by the rules and the response builders."""
from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(dt: datetime) -> datetime:
    """Columns come back naive from SQLite; treat those as UTC."""
    return dt.replace(tzinfo=timezone.utc) if dt.tzinfo is None else dt.astimezone(timezone.utc)


def api_iso_z(dt: datetime | None) -> str | None:
    """createdAt/updatedAt as `2030-06-15T19:30:00Z`, or None for unset columns."""
    if dt is None:
        return None
    return as_utc(dt).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def order_day(now: datetime | None = None) -> str:
    """The YYYYMMDD stamp used inside order numbers."""
    return (now or utc_now()).strftime("%Y%m%d")
