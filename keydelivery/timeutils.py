from datetime import datetime, timedelta, timezone

DEFAULT_NAME_PREFIX = "20刀体验"

# Expirations snap to 05:59:08.330 UTC (13:59 in UTC+8), the daily pass cutover.
EXPIRATION_ANCHOR = {"hour": 5, "minute": 59, "second": 8, "microsecond": 330_000}


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def default_name(offset_hours: int = 8, now: datetime | None = None) -> str:
    """
    Builds the default key name, e.g. "20刀体验_20260111_143005".

    The offset is added to the UTC instant and the shifted UTC fields are
    formatted directly; no timezone database is consulted.
    """
    now = now or _utc_now()
    shifted = now.astimezone(timezone.utc) + timedelta(hours=offset_hours)
    return f"{DEFAULT_NAME_PREFIX}_{shifted.strftime('%Y%m%d_%H%M%S')}"


def expiration_instant(days: int, now: datetime | None = None) -> datetime:
    """
    Returns the UTC instant `days` days from now with the time of day
    replaced by the fixed expiration anchor.
    """
    now = now or _utc_now()
    expires_at = now.astimezone(timezone.utc) + timedelta(days=days)
    return expires_at.replace(**EXPIRATION_ANCHOR)


def to_iso_timestamp(value: datetime) -> str:
    """Formats a datetime as UTC ISO-8601 with millisecond precision and a Z suffix."""
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"
