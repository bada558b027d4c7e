"""Error taxonomy for forum actions.

Services raise these to abort an action; the action boundary converts them
into a failed ``ActionResult`` so they never reach callers as exceptions.
"""

from __future__ import annotations


class ActionError(Exception):
    """Base class for expected, user-visible action failures."""

    code = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UnauthorizedError(ActionError):
    """No session is present."""

    code = "unauthorized"


class ForbiddenError(ActionError):
    """The session lacks the role, ownership or moderation rights required."""

    code = "forbidden"


class ValidationFailedError(ActionError):
    """Input failed a validation rule."""

    code = "validation"


class NotFoundError(ActionError):
    """A referenced entity is missing or not visible to the caller."""

    code = "not_found"


class RateLimitedError(ActionError):
    """The caller exhausted the current rate-limit window."""

    code = "rate_limited"

    def __init__(self, message: str, reset_time: int | None = None) -> None:
        super().__init__(message)
        self.reset_time = reset_time
