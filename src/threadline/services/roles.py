"""Site-wide roles and the capabilities they grant."""

from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from threadline.core.errors import ForbiddenError, NotFoundError, ValidationFailedError
from threadline.models import User, UserRole
from threadline.schemas.auth import AuthSession
from threadline.schemas.common import ActionResult
from threadline.schemas.user import Permissions, UserResponse
from threadline.services.actions import action, require_session

logger = logging.getLogger(__name__)

_ROLE_PERMISSIONS: dict[UserRole, Permissions] = {
    UserRole.admin: Permissions(
        can_moderate=True,
        can_edit_any_post=True,
        can_delete_any_post=True,
        can_ban_users=True,
        can_manage_categories=True,
        can_view_reports=True,
        can_manage_roles=True,
    ),
    UserRole.moderator: Permissions(
        can_moderate=True,
        can_edit_any_post=True,
        can_delete_any_post=True,
        can_view_reports=True,
    ),
    UserRole.user: Permissions(),
}


def permissions_for_role(role: UserRole | str | None) -> Permissions:
    """Capabilities of a role; unknown roles get none."""
    try:
        return _ROLE_PERMISSIONS[UserRole(role)].model_copy()
    except ValueError:
        return Permissions()


@action("Failed to update user role")
def update_user_role(
    db: Session,
    session: AuthSession | None,
    target_user_id: int,
    role: UserRole,
) -> ActionResult[UserResponse]:
    """Change a member's site role. The last remaining admin cannot be demoted."""
    session = require_session(session)
    if not session.is_admin:
        raise ForbiddenError("Not authorized to change user roles")

    user = db.get(User, target_user_id)
    if user is None:
        raise NotFoundError("User not found")

    if user.role == UserRole.admin and role != UserRole.admin:
        admin_count = db.scalar(
            select(func.count()).select_from(User).where(User.role == UserRole.admin)
        )
        if admin_count == 1:
            raise ValidationFailedError("Cannot demote the last admin")

    user.role = role
    db.commit()
    logger.info("User %s role set to %s by %s", target_user_id, role, session.user.id)
    return ActionResult.ok(UserResponse.model_validate(user))
