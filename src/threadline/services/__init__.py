"""Business logic for forum actions.

Each public action takes the database session and the caller's session
first and returns an ``ActionResult``; none of them raise.
"""

from .rate_limit import RateLimiter, get_rate_limiter, set_rate_limiter
from .recipients import (
    ForumEvent,
    LikeAdded,
    ReplyCreated,
    ReportFiled,
    ReportResolved,
    ThreadCreated,
    resolve_recipients,
)
from .reputation import ReputationLedger, reputation_ledger

__all__ = [
    "ForumEvent",
    "LikeAdded",
    "RateLimiter",
    "ReplyCreated",
    "ReportFiled",
    "ReportResolved",
    "ReputationLedger",
    "ThreadCreated",
    "get_rate_limiter",
    "reputation_ledger",
    "resolve_recipients",
    "set_rate_limiter",
]
