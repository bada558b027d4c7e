"""Version 1 API endpoints."""

from .endpoints import (
    admin_router,
    categories_router,
    notifications_router,
    posts_router,
    reactions_router,
    reports_router,
    threads_router,
    users_router,
)

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
