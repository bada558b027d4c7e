"""Main entry point for the Threadline application."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from threadline.api.v1 import (
    admin_router,
    categories_router,
    notifications_router,
    posts_router,
    reactions_router,
    reports_router,
    threads_router,
    users_router,
)
from threadline.core.logging import configure_logging
from threadline.core.settings import settings

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title=f"{settings.app_name} API",
    description="Forum moderation, notification and reputation core",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Include API routers
app.include_router(categories_router, prefix="/api/v1")
app.include_router(threads_router, prefix="/api/v1")
app.include_router(posts_router, prefix="/api/v1")
app.include_router(reactions_router, prefix="/api/v1")
app.include_router(reports_router, prefix="/api/v1")
app.include_router(notifications_router, prefix="/api/v1")
app.include_router(admin_router, prefix="/api/v1")
app.include_router(users_router, prefix="/api/v1")


@app.on_event("startup")
async def on_startup() -> None:
    configure_logging()
    logger.info(
        "%s %s starting (rate limit backend: %s)",
        settings.app_name,
        settings.app_version,
        settings.rate_limit_backend,
    )


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": f"{settings.app_name} API",
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("threadline.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
