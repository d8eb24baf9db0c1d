"""Post service: merge policy, defaults, error classification, update race.

Invariants:
    - merge_update never requires a stored category/published to be non-null
    - create substitutes "" / False for absent category / published
    - update is read-then-write without a transaction (lost update is possible)
"""

import asyncio
from uuid import uuid4

import asyncpg
import pytest

from core.errors import BadRequestError, InternalServerError, NotFoundError
from posts import repository, schemas, service


def test_merge_update_overlays_present_fields_only():
    current = {
        "title": "t", "author": "a", "category": "c", "content": "body", "published": True,
    }

    merged = service.merge_update(current, schemas.UpdatePostRequest(title="new", published=False))

    assert merged == {
        "title": "new", "author": "a", "category": "c", "content": "body", "published": False,
    }


def test_merge_update_accepts_null_stored_values():
    current = {
        "title": "t", "author": "a", "category": None, "content": "body", "published": None,
    }

    merged = service.merge_update(current, schemas.UpdatePostRequest(author="b"))

    assert merged["category"] is None
    assert merged["published"] is None
    assert merged["author"] == "b"


def test_filter_options_offset():
    assert schemas.FilterOptions().offset == 0
    assert schemas.FilterOptions(page=3, limit=20).offset == 40


async def test_create_applies_defaults(fake_pool):
    post = await service.create_post(
        fake_pool, schemas.CreatePostRequest(title="t", author="a", content="c"),
    )

    assert post.category == ""
    assert post.published is False
    assert post.created_at == post.updated_at
    assert fake_pool.rows[post.id]["category"] == ""


async def test_create_duplicate_raises_bad_request(fake_pool):
    payload = schemas.CreatePostRequest(title="same", author="a", content="c")
    await service.create_post(fake_pool, payload)

    with pytest.raises(BadRequestError) as excinfo:
        await service.create_post(fake_pool, payload)

    assert isinstance(excinfo.value.__cause__, asyncpg.UniqueViolationError)
    assert len(fake_pool.rows) == 1


async def test_get_missing_raises_not_found(fake_pool):
    missing = uuid4()

    with pytest.raises(NotFoundError) as excinfo:
        await service.get_post(fake_pool, missing)

    assert excinfo.value.entity_id == missing
    assert excinfo.value.entity_name == "Post"


async def test_update_row_vanishing_before_write_is_not_found(fake_pool, monkeypatch):
    seeded = fake_pool.seed(title="gone soon")
    original_update = repository.update_post

    async def delete_then_update(pool, post_id, **fields):
        pool.rows.pop(post_id)
        return await original_update(pool, post_id, **fields)

    monkeypatch.setattr(repository, "update_post", delete_then_update)

    with pytest.raises(NotFoundError):
        await service.update_post(fake_pool, seeded["id"], schemas.UpdatePostRequest(title="x"))


async def test_delete_storage_error_is_internal(fake_pool):
    fake_pool.failure = asyncpg.PostgresError("server closed the connection unexpectedly")

    with pytest.raises(InternalServerError) as excinfo:
        await service.delete_post(fake_pool, uuid4())

    assert excinfo.value.msg == "Something bad happened while deleting post"


async def test_concurrent_updates_can_lose_a_change(fake_pool):
    # Known limitation: both requests read the same row before either writes,
    # so the later write puts back the title the first one changed.
    seeded = fake_pool.seed(title="original", author="original author")

    await asyncio.gather(
        service.update_post(fake_pool, seeded["id"], schemas.UpdatePostRequest(title="changed")),
        service.update_post(fake_pool, seeded["id"], schemas.UpdatePostRequest(author="new author")),
    )

    stored = fake_pool.rows[seeded["id"]]
    assert stored["author"] == "new author"
    assert stored["title"] == "original"
