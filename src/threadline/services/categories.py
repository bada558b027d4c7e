"""Category listings."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from threadline.core.errors import NotFoundError
from threadline.models import Category, Thread
from threadline.schemas.category import CategoryResponse, CategoryThreads
from threadline.schemas.common import ActionResult, Pagination
from threadline.schemas.thread import ThreadResponse
from threadline.services.actions import action, page_bounds


@action("Failed to fetch categories")
def get_categories(db: Session) -> ActionResult[list[CategoryResponse]]:
    """Return visible categories in display order, then by name."""
    categories = db.scalars(
        select(Category)
        .where(Category.is_hidden.is_(False))
        .order_by(Category.display_order, Category.name)
    ).all()
    return ActionResult.ok([CategoryResponse.model_validate(c) for c in categories])


@action("Failed to fetch category")
def get_category_with_threads(
    db: Session,
    slug: str,
    page: int = 1,
    limit: int | None = None,
) -> ActionResult[CategoryThreads]:
    """Return a category and a page of its threads.

    Pinned threads come first, then the most recently active.
    """
    category = db.scalar(select(Category).where(Category.slug == slug))
    if category is None:
        raise NotFoundError("Category not found")

    page, limit, offset = page_bounds(page, limit)
    visible = (Thread.category_id == category.id, Thread.is_deleted.is_(False))
    threads = db.scalars(
        select(Thread)
        .where(*visible)
        .order_by(
            Thread.is_pinned.desc(),
            Thread.last_post_at.desc().nulls_last(),
            Thread.id.desc(),
        )
        .offset(offset)
        .limit(limit)
    ).all()
    total_count = db.scalar(select(func.count()).select_from(Thread).where(*visible)) or 0

    return ActionResult.ok(
        CategoryThreads(
            category=CategoryResponse.model_validate(category),
            threads=[ThreadResponse.model_validate(t) for t in threads],
            pagination=Pagination.build(page, limit, total_count),
        )
    )
