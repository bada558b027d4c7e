"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from threadline.core.security import decode_access_token
from threadline.db.session import get_db
from threadline.models import User
from threadline.schemas.auth import AuthSession, SessionUser

# Missing or invalid credentials are not an HTTP error here: actions decide
# what an anonymous caller may do.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_auth_session(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: SessionDep,
) -> AuthSession | None:
    """Resolve the bearer token into a session, or None for anonymous callers.

    Role and name are read from the database so a role change takes effect
    without waiting for the token to expire.
    """
    if credentials is None:
        return None
    user_id = decode_access_token(credentials.credentials)
    if user_id is None:
        return None
    user = db.get(User, user_id)
    if user is None:
        return None
    return AuthSession(user=SessionUser(id=user.id, role=user.role, name=user.name))


# Type alias for the optional caller session
AuthSessionDep = Annotated[AuthSession | None, Depends(get_auth_session)]
