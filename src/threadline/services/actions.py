"""Action boundary shared by every caller-facing forum operation.

An action is a function taking the database session first and returning an
``ActionResult``. The ``action`` decorator guarantees that nothing raised
inside it escapes: expected failures become their user-visible message and
anything else is logged and replaced by a generic message.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, ParamSpec

from pydantic import ValidationError
from sqlalchemy.orm import Session

from threadline.core.errors import (
    ActionError,
    RateLimitedError,
    UnauthorizedError,
    ValidationFailedError,
)
from threadline.core.settings import settings
from threadline.schemas.auth import AuthSession
from threadline.schemas.common import ActionResult

logger = logging.getLogger(__name__)

P = ParamSpec("P")

_VALUE_ERROR_PREFIX = "Value error, "


def first_error_message(error: ValidationError) -> str:
    """Return the message of the first violated validation rule."""
    details = error.errors()
    if not details:
        return "Invalid input"
    first = details[0]
    message = str(first.get("msg", "Invalid input"))
    if message.startswith(_VALUE_ERROR_PREFIX):
        message = message[len(_VALUE_ERROR_PREFIX):]
    loc = [str(part) for part in first.get("loc", ())]
    if loc and first.get("type") not in ("value_error", "assertion_error"):
        return f"{'.'.join(loc)}: {message}"
    return message


def action(fallback_message: str) -> Callable[[Callable[P, ActionResult[Any]]], Callable[P, ActionResult[Any]]]:
    """Trap every exception raised by an action and convert it to a result.

    Args:
        fallback_message: Generic message surfaced for unexpected failures.
    """

    def decorator(func: Callable[P, ActionResult[Any]]) -> Callable[P, ActionResult[Any]]:
        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> ActionResult[Any]:
            db = args[0] if args else kwargs.get("db")
            try:
                return func(*args, **kwargs)
            except RateLimitedError as err:
                _rollback(db)
                return ActionResult.fail(err.message, code=err.code, reset_time=err.reset_time)
            except ActionError as err:
                _rollback(db)
                return ActionResult.fail(err.message, code=err.code)
            except ValidationError as err:
                _rollback(db)
                return ActionResult.fail(first_error_message(err), code=ValidationFailedError.code)
            except Exception:
                _rollback(db)
                logger.exception("Action %s failed", func.__name__)
                return ActionResult.fail(fallback_message, code="internal")

        return wrapper

    return decorator


def _rollback(db: object) -> None:
    if not isinstance(db, Session):
        return
    try:
        db.rollback()
    except Exception:  # pragma: no cover - connection already unusable
        logger.exception("Rollback after failed action also failed")


@contextmanager
def best_effort(db: Session, label: str) -> Iterator[None]:
    """Run a side effect inside its own savepoint.

    A failure rolls back only the savepoint and is logged; the primary
    mutation that precedes it still commits with the enclosing transaction.
    """
    try:
        with db.begin_nested():
            yield
    except Exception:
        logger.exception("Side effect %r failed; keeping primary mutation", label)


def require_session(
    session: AuthSession | None,
    message: str = "Not authenticated",
) -> AuthSession:
    """Return the session or raise ``UnauthorizedError``."""
    if session is None:
        raise UnauthorizedError(message)
    return session


def page_bounds(page: int, limit: int | None) -> tuple[int, int, int]:
    """Clamp pagination input and return ``(page, limit, offset)``."""
    page = max(1, page)
    limit = settings.default_page_size if limit is None else limit
    limit = min(max(1, limit), settings.max_page_size)
    return page, limit, (page - 1) * limit
