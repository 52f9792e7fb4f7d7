from __future__ import annotations

from datetime import datetime, timezone


def to_utc(dt: datetime) -> datetime:
    # naive values are taken as UTC
    if dt.tzinfo is None or dt.utcoffset() is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def utc_iso_z(dt: datetime) -> str:
    return to_utc(dt).isoformat().replace("+00:00", "Z")
