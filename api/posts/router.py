"""
FastAPI router for post endpoints.
"""

from __future__ import annotations

from uuid import UUID

import asyncpg
from fastapi import APIRouter, Depends, Query, status

from core import db
from core.schemas import OperationsResponse

from . import schemas, service

router = APIRouter(prefix="/posts", tags=["Post"])

_NOT_FOUND = {400: {"description": "Post not found or invalid request"}}
_INTERNAL = {500: {"description": "Storage failure"}}


@router.get("", response_model=list[schemas.Post], responses=_INTERNAL)
async def list_posts(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    pool: asyncpg.Pool = Depends(db.get_pool),
) -> list[schemas.Post]:
    """
    List posts ordered by id, one page at a time.
    """
    return await service.list_posts(pool, schemas.FilterOptions(page=page, limit=limit))


@router.post(
    "",
    response_model=schemas.Post,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "Post with that title already exists"}, **_INTERNAL},
)
async def create_post(
    payload: schemas.CreatePostRequest,
    pool: asyncpg.Pool = Depends(db.get_pool),
) -> schemas.Post:
    """
    Create a post. Titles are unique.
    """
    return await service.create_post(pool, payload)


@router.get("/{post_id}", response_model=schemas.Post, responses={**_NOT_FOUND, **_INTERNAL})
async def get_post(
    post_id: UUID,
    pool: asyncpg.Pool = Depends(db.get_pool),
) -> schemas.Post:
    return await service.get_post(pool, post_id)


@router.patch("/{post_id}", response_model=schemas.Post, responses={**_NOT_FOUND, **_INTERNAL})
async def update_post(
    post_id: UUID,
    payload: schemas.UpdatePostRequest,
    pool: asyncpg.Pool = Depends(db.get_pool),
) -> schemas.Post:
    """
    Partially update a post. Omitted fields keep their stored values.
    """
    return await service.update_post(pool, post_id, payload)


@router.delete("/{post_id}", response_model=OperationsResponse, responses={**_NOT_FOUND, **_INTERNAL})
async def delete_post(
    post_id: UUID,
    pool: asyncpg.Pool = Depends(db.get_pool),
) -> dict:
    return await service.delete_post(pool, post_id)
