"""API routes package"""

from . import (
    approval_codes,
    communities,
    feedback,
    functions,
    health,
    listings,
    messages,
    notifications,
    receipts,
    users,
    verification,
)

__all__ = [
    "approval_codes",
    "communities",
    "feedback",
    "functions",
    "health",
    "listings",
    "messages",
    "notifications",
    "receipts",
    "users",
    "verification",
]
