"""Time parsing and formatting utilities."""

from __future__ import annotations

from datetime import UTC, date, datetime, tzinfo

from zoneinfo import ZoneInfo


def tzinfo_from_name(tz_name: str) -> tzinfo:
    """Create tzinfo from an IANA timezone name.

    Args:
        tz_name: Timezone name like "Europe/Vienna".

    Returns:
        tzinfo instance.

    Raises:
        ValueError: If timezone name is invalid on this system.
    """

    if tz_name.upper() in ("UTC", "Z"):
        return UTC
    try:
        return ZoneInfo(tz_name)
    except Exception as exc:  # ZoneInfo raises KeyError / ZoneInfoNotFoundError (platform dependent)
        raise ValueError(f"invalid timezone: {tz_name!r}, e.g. Europe/Vienna") from exc


def utc_now() -> datetime:
    return datetime.now(UTC)


def iso_utc(dt: datetime) -> str:
    """Format a datetime as ISO-8601 UTC with milliseconds and a ``Z`` suffix.

    Naive datetimes are treated as UTC.
    """

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso(text: str) -> datetime:
    """Parse an ISO-8601 timestamp into an aware datetime (naive means UTC).

    Raises:
        ValueError: If the text cannot be parsed.
    """

    try:
        dt = datetime.fromisoformat(text.strip())
    except ValueError as exc:
        raise ValueError(f"cannot parse timestamp: {text!r}") from exc
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt


def utc_date(text: str) -> date:
    """Calendar day (UTC) of an ISO timestamp."""

    return parse_iso(text).astimezone(UTC).date()


def dt_from_epoch_ms(epoch_ms: int, tz_name: str) -> datetime:
    """Convert epoch milliseconds to a timezone-aware datetime."""

    return datetime.fromtimestamp(epoch_ms / 1000.0, tz=tzinfo_from_name(tz_name))
