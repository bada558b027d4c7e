"""Session schemas handed to actions by the auth dependency."""

from pydantic import BaseModel

from threadline.models.user import UserRole


class SessionUser(BaseModel):
    """The authenticated caller."""

    id: int
    role: UserRole = UserRole.user
    name: str


class AuthSession(BaseModel):
    """Session as provided by the external auth provider."""

    user: SessionUser

    @property
    def is_admin(self) -> bool:
        return self.user.role == UserRole.admin

    @property
    def is_staff(self) -> bool:
        """Admins and site-wide moderators."""
        return self.user.role in (UserRole.admin, UserRole.moderator)
