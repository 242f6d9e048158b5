"""Time helpers. All persisted timestamps are naive UTC."""

from datetime import datetime, timedelta, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def next_weekly_deadline(now: datetime, weekday: int, hour: int) -> datetime:
    """Return the next occurrence of ``weekday`` at ``hour``:00 strictly after ``now``.

    ``weekday`` follows ``datetime.weekday()`` (0 = Monday).
    """
    candidate = now.replace(hour=hour, minute=0, second=0, microsecond=0)
    candidate += timedelta(days=(weekday - now.weekday()) % 7)
    if candidate <= now:
        candidate += timedelta(days=7)
    return candidate
