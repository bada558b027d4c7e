"""API endpoint modules for version 1."""

from .admin import router as admin_router
from .categories import router as categories_router
from .notifications import router as notifications_router
from .posts import router as posts_router
from .reactions import router as reactions_router
from .reports import router as reports_router
from .threads import router as threads_router
from .users import router as users_router

__all__ = [
    "admin_router",
    "categories_router",
    "notifications_router",
    "posts_router",
    "reactions_router",
    "reports_router",
    "threads_router",
    "users_router",
]
