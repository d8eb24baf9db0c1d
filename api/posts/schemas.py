"""
Pydantic schemas for post endpoints.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class Post(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: UUID
    title: str
    author: str
    category: str | None = None
    content: str
    published: bool | None = None
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")


class CreatePostRequest(BaseModel):
    title: str
    author: str
    category: str | None = None
    published: bool | None = None
    content: str


class UpdatePostRequest(BaseModel):
    title: str | None = None
    author: str | None = None
    category: str | None = None
    content: str | None = None
    published: bool | None = None


class FilterOptions(BaseModel):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit
