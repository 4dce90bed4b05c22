"""Date-time helpers for timestamps and academic term labels."""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Return the current UTC time as a naive timestamp for DateTime columns."""

    return datetime.now(timezone.utc).replace(tzinfo=None)


def term_label(now: datetime | None = None) -> str:
    """Return the academic term (e.g. ``"Fall 2026"``) containing the timestamp.

    January through May is Spring, June and July are Summer, and August through
    December is Fall.
    """

    current = now.astimezone(timezone.utc) if now and now.tzinfo else now or datetime.now(timezone.utc)
    if current.month <= 5:
        season = "Spring"
    elif current.month <= 7:
        season = "Summer"
    else:
        season = "Fall"
    return f"{season} {current.year}"
