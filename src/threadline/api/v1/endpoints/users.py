"""User endpoints for the Threadline API."""

from fastapi import APIRouter

from threadline.api.v1.dependencies import AuthSessionDep
from threadline.models import UserRole
from threadline.schemas.user import Permissions
from threadline.services.roles import permissions_for_role

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me/permissions", response_model=Permissions)
async def my_permissions(session: AuthSessionDep) -> Permissions:
    """Capabilities of the caller's role; anonymous callers have none."""
    role = session.user.role if session else UserRole.user
    return permissions_for_role(role)
