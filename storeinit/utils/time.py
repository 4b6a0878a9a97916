from __future__ import annotations
from datetime import datetime, timezone


def utc_now() -> datetime:
    # Mongo keeps millisecond precision; truncate so stored and in-memory values agree
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def ms_to_dt_utc(ms: int) -> datetime:
    return datetime.fromtimestamp(ms / 1000.0, tz=timezone.utc)


def ms_to_utc_iso(ms: int) -> str:
    """Return ISO-8601 string of the given epoch ms in UTC."""
    return ms_to_dt_utc(ms).isoformat()
