"""
Post business logic.

Scope:
- default substitution on create (category -> "", published -> false)
- partial-update merge over the stored row
- mapping storage failures onto the API error kinds
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from uuid import UUID

import asyncpg

from core.errors import BadRequestError, InternalServerError, NotFoundError, is_unique_violation

from . import repository, schemas

ENTITY_NAME = "Post"
DUPLICATE_TITLE_MESSAGE = "Post with that title already exists"
DELETED_MESSAGE = "Successfully deleted"

EDITABLE_FIELDS = ("title", "author", "category", "content", "published")

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _to_post(row: dict) -> schemas.Post:
    return schemas.Post(
        id=row["id"],
        title=str(row["title"]),
        author=str(row["author"]),
        category=row.get("category"),
        content=str(row["content"]),
        published=row.get("published"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


def merge_update(current: dict, payload: schemas.UpdatePostRequest) -> dict:
    """
    Overlay the fields present in `payload` on the stored row.

    Missing or null request fields keep the stored value, and a stored null
    (category/published) is kept as null.
    """
    changes = payload.model_dump(exclude_none=True)
    return {field: changes.get(field, current.get(field)) for field in EDITABLE_FIELDS}


async def list_posts(pool: asyncpg.Pool, options: schemas.FilterOptions) -> list[schemas.Post]:
    try:
        rows = await repository.list_posts(pool, limit=options.limit, offset=options.offset)
    except Exception as exc:
        logger.exception("post_list_failed page=%s limit=%s", options.page, options.limit)
        raise InternalServerError("Something bad happened while fetching all post items") from exc
    return [_to_post(row) for row in rows]


async def get_post(pool: asyncpg.Pool, post_id: UUID) -> schemas.Post:
    try:
        row = await repository.get_post(pool, post_id)
    except Exception as exc:
        logger.exception("post_get_failed id=%s", post_id)
        raise InternalServerError("Something bad happened while fetching post") from exc

    if row is None:
        raise NotFoundError(post_id, ENTITY_NAME)
    return _to_post(row)


async def create_post(pool: asyncpg.Pool, payload: schemas.CreatePostRequest) -> schemas.Post:
    try:
        row = await repository.create_post(
            pool,
            title=payload.title,
            author=payload.author,
            category=payload.category if payload.category is not None else "",
            content=payload.content,
            published=payload.published if payload.published is not None else False,
        )
    except Exception as exc:
        if is_unique_violation(exc):
            raise BadRequestError(DUPLICATE_TITLE_MESSAGE) from exc
        logger.exception("post_create_failed title=%r", payload.title)
        raise InternalServerError("Something bad happened while creating post") from exc

    logger.info("post_created id=%s", row["id"])
    return _to_post(row)


async def update_post(
    pool: asyncpg.Pool,
    post_id: UUID,
    payload: schemas.UpdatePostRequest,
) -> schemas.Post:
    """
    Read-merge-write. The read and the write are separate statements, so two
    concurrent updates of the same post can lose one of the changes.
    """
    current = await _get_current_row(pool, post_id)
    merged = merge_update(current, payload)

    try:
        row = await repository.update_post(pool, post_id, updated_at=_utc_now(), **merged)
    except Exception as exc:
        if is_unique_violation(exc):
            raise BadRequestError(DUPLICATE_TITLE_MESSAGE) from exc
        logger.exception("post_update_failed id=%s", post_id)
        raise InternalServerError("Something bad happened while updating post") from exc

    if row is None:
        # Deleted between the read and the write.
        raise NotFoundError(post_id, ENTITY_NAME)

    logger.info("post_updated id=%s fields=%s", post_id, ",".join(sorted(payload.model_dump(exclude_none=True))))
    return _to_post(row)


async def _get_current_row(pool: asyncpg.Pool, post_id: UUID) -> dict:
    try:
        row = await repository.get_post(pool, post_id)
    except Exception as exc:
        logger.exception("post_get_failed id=%s", post_id)
        raise InternalServerError("Something bad happened while updating post") from exc
    if row is None:
        raise NotFoundError(post_id, ENTITY_NAME)
    return row


async def delete_post(pool: asyncpg.Pool, post_id: UUID) -> dict[str, str]:
    try:
        deleted = await repository.delete_post(pool, post_id)
    except Exception as exc:
        logger.exception("post_delete_failed id=%s", post_id)
        raise InternalServerError("Something bad happened while deleting post") from exc

    if deleted == 0:
        raise NotFoundError(post_id, ENTITY_NAME)

    logger.info("post_deleted id=%s", post_id)
    return {"msg": DELETED_MESSAGE}
