"""User administration Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from threadline.models.user import UserRole


class BanRequest(BaseModel):
    """Schema for suspending an account."""

    reason: str = Field(..., min_length=1, max_length=500)
    expires_at: datetime | None = Field(None, description="Omit for a permanent ban")


class BanStatus(BaseModel):
    """Current suspension state of an account."""

    banned: bool
    reason: str | None = None
    expires_at: datetime | None = None


class RoleUpdate(BaseModel):
    role: UserRole


class Permissions(BaseModel):
    """Capabilities granted by a site-wide role."""

    can_moderate: bool = False
    can_edit_any_post: bool = False
    can_delete_any_post: bool = False
    can_ban_users: bool = False
    can_manage_categories: bool = False
    can_view_reports: bool = False
    can_manage_roles: bool = False


class UserResponse(BaseModel):
    """Public view of a forum member."""

    id: int
    name: str
    role: UserRole
    reputation: int
    banned: bool

    model_config = ConfigDict(from_attributes=True)
