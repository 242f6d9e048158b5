"""
Urgency calculation for food listings.

A listing's deadline is its ``pickup_by`` timestamp, or the end of its
``expiry_date`` when no pickup deadline is set. The time left until that
deadline maps to an urgency level used for badges and "most urgent first"
sorting.
"""

from datetime import datetime, time, timedelta
from typing import Iterable, List, Optional

from app.clock import utcnow
from domain.enums import UrgencyLevel
from domain.schemas.listing_schemas import UrgencyInfo

CRITICAL_THRESHOLD_SEC = 6 * 60 * 60
HIGH_THRESHOLD_SEC = 24 * 60 * 60
MEDIUM_THRESHOLD_SEC = 72 * 60 * 60

URGENCY_ORDER = {
    UrgencyLevel.CRITICAL: 0,
    UrgencyLevel.HIGH: 1,
    UrgencyLevel.MEDIUM: 2,
    UrgencyLevel.NORMAL: 3,
    UrgencyLevel.NONE: 4,
}

_END_OF_DAY = time(23, 59, 59)


def get_deadline(listing) -> Optional[datetime]:
    """pickup_by takes precedence over expiry_date (end of day)."""
    if getattr(listing, "pickup_by", None):
        return listing.pickup_by
    if getattr(listing, "expiry_date", None):
        return datetime.combine(listing.expiry_date, _END_OF_DAY)
    return None


def seconds_remaining(deadline: Optional[datetime], now: Optional[datetime] = None) -> int:
    if deadline is None:
        return 0
    now = now or utcnow()
    return int((deadline - now).total_seconds())


def calculate_level(listing, now: Optional[datetime] = None) -> UrgencyLevel:
    deadline = get_deadline(listing)
    if deadline is None:
        return UrgencyLevel.NONE

    remaining = seconds_remaining(deadline, now)
    if remaining <= 0:
        return UrgencyLevel.NONE
    if remaining <= CRITICAL_THRESHOLD_SEC:
        return UrgencyLevel.CRITICAL
    if remaining <= HIGH_THRESHOLD_SEC:
        return UrgencyLevel.HIGH
    if remaining <= MEDIUM_THRESHOLD_SEC:
        return UrgencyLevel.MEDIUM
    return UrgencyLevel.NORMAL


def format_countdown(seconds: int) -> str:
    """Human readable countdown, e.g. '2d 3h remaining' or '12 minutes remaining'."""
    if seconds <= 0:
        return "Expired"

    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    days = hours // 24

    if days > 0:
        remaining_hours = hours % 24
        if remaining_hours > 0:
            return f"{days}d {remaining_hours}h remaining"
        return f"{days} day{'s' if days > 1 else ''} remaining"
    if hours > 0:
        if minutes > 0:
            return f"{hours}h {minutes}m remaining"
        return f"{hours} hour{'s' if hours > 1 else ''} remaining"
    return f"{minutes} minute{'' if minutes == 1 else 's'} remaining"


def get_urgency_info(listing, now: Optional[datetime] = None) -> UrgencyInfo:
    now = now or utcnow()
    deadline = get_deadline(listing)
    remaining = seconds_remaining(deadline, now) if deadline else 0
    level = calculate_level(listing, now)
    return UrgencyInfo(
        level=level,
        deadline=deadline,
        seconds_remaining=max(remaining, 0),
        countdown=format_countdown(remaining) if deadline else "No deadline",
        is_expired=deadline is not None and remaining <= 0,
        is_urgent=level in (UrgencyLevel.CRITICAL, UrgencyLevel.HIGH),
    )


def is_expired(listing, now: Optional[datetime] = None) -> bool:
    """Listings without any deadline never expire."""
    deadline = get_deadline(listing)
    if deadline is None:
        return False
    return seconds_remaining(deadline, now) <= 0


def sort_by_urgency(listings: Iterable, now: Optional[datetime] = None) -> List:
    """Most urgent first; equal levels by earliest deadline, no deadline last."""
    now = now or utcnow()

    def key(listing):
        deadline = get_deadline(listing)
        return (
            URGENCY_ORDER[calculate_level(listing, now)],
            deadline is None,
            deadline or datetime.max,
        )

    return sorted(listings, key=key)


def filter_expired(listings: Iterable, now: Optional[datetime] = None) -> List:
    now = now or utcnow()
    return [l for l in listings if not is_expired(l, now)]


def get_urgent_listings(listings: Iterable, now: Optional[datetime] = None) -> List:
    now = now or utcnow()
    return [
        l
        for l in listings
        if calculate_level(l, now) in (UrgencyLevel.CRITICAL, UrgencyLevel.HIGH)
    ]
