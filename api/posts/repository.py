"""
Post persistence (raw SQL).

Schema comes from the dbmate migration in `db/migrations/`:
- post(id uuid, title text unique, author, category, content, published,
  created_at, updated_at)
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

import asyncpg

from core import db

_POST_COLUMNS = "id, title, author, category, content, published, created_at, updated_at"


async def list_posts(pool: asyncpg.Pool, *, limit: int = 10, offset: int = 0) -> list[dict[str, Any]]:
    return await db.fetch_all(
        pool,
        f"""
        SELECT {_POST_COLUMNS}
        FROM post
        ORDER BY id
        LIMIT $1
        OFFSET $2
        """,
        limit,
        offset,
    )


async def get_post(pool: asyncpg.Pool, post_id: UUID) -> dict[str, Any] | None:
    return await db.fetch_one(
        pool,
        f"""
        SELECT {_POST_COLUMNS}
        FROM post
        WHERE id = $1
        """,
        post_id,
    )


async def create_post(
    pool: asyncpg.Pool,
    *,
    title: str,
    author: str,
    category: str | None,
    content: str,
    published: bool | None,
) -> dict[str, Any]:
    """
    Insert a post. A duplicate title raises asyncpg.UniqueViolationError.
    """
    row = await db.fetch_one(
        pool,
        f"""
        INSERT INTO post (title, author, category, content, published)
        VALUES ($1, $2, $3, $4, $5)
        RETURNING {_POST_COLUMNS}
        """,
        title,
        author,
        category,
        content,
        published,
    )
    if row is None:
        raise RuntimeError("Failed to insert post.")
    return row


async def update_post(
    pool: asyncpg.Pool,
    post_id: UUID,
    *,
    title: str,
    author: str,
    category: str | None,
    content: str,
    published: bool | None,
    updated_at: datetime,
) -> dict[str, Any] | None:
    """
    Overwrite every editable column of a post.
    Returns the updated row, or None when the post no longer exists.
    """
    return await db.fetch_one(
        pool,
        f"""
        UPDATE post
        SET title = $1,
            author = $2,
            category = $3,
            content = $4,
            published = $5,
            updated_at = $6
        WHERE id = $7
        RETURNING {_POST_COLUMNS}
        """,
        title,
        author,
        category,
        content,
        published,
        updated_at,
        post_id,
    )


async def delete_post(pool: asyncpg.Pool, post_id: UUID) -> int:
    """
    Delete a post permanently. Returns the number of rows removed (0 or 1).
    """
    command_status = await db.execute(
        pool,
        """
        DELETE FROM post
        WHERE id = $1
        """,
        post_id,
    )
    return db.rows_affected(command_status)
