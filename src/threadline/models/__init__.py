"""SQLAlchemy models for the Threadline application."""

from .category import Category, CategoryModerator
from .notification import EntityType, Notification, NotificationType
from .post import Post
from .reaction import Reaction, ReactionType
from .report import Report, ReportStatus, ReportType
from .subscription import CategorySubscription, ThreadSubscription
from .thread import Thread
from .user import User, UserRole

__all__ = [
    "Category", "CategoryModerator",
    "EntityType", "Notification", "NotificationType",
    "Post",
    "Reaction", "ReactionType",
    "Report", "ReportStatus", "ReportType",
    "CategorySubscription", "ThreadSubscription",
    "Thread",
    "User", "UserRole",
]
