"""Session token helpers.

Identity is established by an external auth provider which signs a JWT with a
shared secret. We only mint tokens for tooling and tests and decode them on
incoming requests.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from threadline.core.settings import settings


def create_access_token(user_id: int) -> str:
    """Create a JWT access token for the given user id."""
    to_encode: dict[str, object] = {"sub": str(user_id)}
    expire = datetime.now(UTC) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode["exp"] = expire
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_access_token(token: str) -> int | None:
    """Return the user id carried by ``token`` or None if it is not valid."""
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError:
        return None

    subject = payload.get("sub")
    if subject is None:
        return None
    try:
        return int(subject)
    except (TypeError, ValueError):
        return None
