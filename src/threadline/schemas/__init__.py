"""
Pydantic schemas for action inputs and results.

These schemas define the structure of API data for serialization and validation.
"""

from .auth import AuthSession, SessionUser
from .category import CategoryResponse, CategoryThreads, SubscriptionState
from .common import ActionResult, Page, Pagination
from .notification import NotificationCreate, NotificationFeed, NotificationResponse
from .post import PostCreate, PostResponse, PostUpdate
from .reaction import ReactionState, ReactionToggle
from .report import ReportCreate, ReportResponse, ReportStats, ReportStatusUpdate
from .thread import ThreadCreate, ThreadResponse, ThreadUpdate
from .user import BanRequest, BanStatus, Permissions, RoleUpdate, UserResponse

__all__ = [
    "AuthSession", "SessionUser",
    "CategoryResponse", "CategoryThreads", "SubscriptionState",
    "ActionResult", "Page", "Pagination",
    "NotificationCreate", "NotificationFeed", "NotificationResponse",
    "PostCreate", "PostResponse", "PostUpdate",
    "ReactionState", "ReactionToggle",
    "ReportCreate", "ReportResponse", "ReportStats", "ReportStatusUpdate",
    "ThreadCreate", "ThreadResponse", "ThreadUpdate",
    "BanRequest", "BanStatus", "Permissions", "RoleUpdate", "UserResponse",
]
