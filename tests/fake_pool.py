"""In-memory stand-in for the asyncpg pool used by posts/repository.py.

Understands exactly the statements the repository issues (list, get, insert,
update, delete on `post`) and enforces the unique title constraint the same
way PostgreSQL reports it: by raising asyncpg.UniqueViolationError.
"""

import asyncio
from datetime import datetime, timezone
from uuid import uuid4

import asyncpg


class FakePool:
    def __init__(self):
        self.rows = {}
        self.failure = None
        self.statements = []

    def seed(self, **fields):
        """Insert a row directly, bypassing defaults (e.g. null category)."""
        now = datetime.now(timezone.utc)
        row = {
            "id": uuid4(),
            "title": "seeded",
            "author": "seed",
            "category": None,
            "content": "seeded content",
            "published": None,
            "created_at": now,
            "updated_at": now,
        }
        row.update(fields)
        self.rows[row["id"]] = row
        return dict(row)

    async def _enter(self, sql):
        # Yield like a real round-trip so concurrent requests interleave.
        await asyncio.sleep(0)
        if self.failure is not None:
            raise self.failure
        statement = " ".join(sql.split())
        self.statements.append(statement)
        return statement

    def _check_title(self, title, own_id=None):
        for row in self.rows.values():
            if row["title"] == title and row["id"] != own_id:
                raise asyncpg.UniqueViolationError(
                    'duplicate key value violates unique constraint "post_title_key"'
                )

    async def fetch(self, sql, *args):
        statement = await self._enter(sql)
        assert statement.startswith("SELECT") and "LIMIT $1 OFFSET $2" in statement, statement
        limit, offset = args
        ordered = sorted(self.rows.values(), key=lambda r: r["id"])
        return [dict(r) for r in ordered[offset:offset + limit]]

    async def fetchrow(self, sql, *args):
        statement = await self._enter(sql)
        if statement.startswith("SELECT"):
            row = self.rows.get(args[0])
            return dict(row) if row is not None else None

        if statement.startswith("INSERT INTO post"):
            title, author, category, content, published = args
            self._check_title(title)
            now = datetime.now(timezone.utc)
            row = {
                "id": uuid4(),
                "title": title,
                "author": author,
                "category": category,
                "content": content,
                "published": published,
                "created_at": now,
                "updated_at": now,
            }
            self.rows[row["id"]] = row
            return dict(row)

        if statement.startswith("UPDATE post"):
            title, author, category, content, published, updated_at, post_id = args
            row = self.rows.get(post_id)
            if row is None:
                return None
            self._check_title(title, own_id=post_id)
            row.update(
                title=title,
                author=author,
                category=category,
                content=content,
                published=published,
                updated_at=updated_at,
            )
            return dict(row)

        raise AssertionError(f"unexpected statement: {statement}")

    async def execute(self, sql, *args):
        statement = await self._enter(sql)
        assert statement.startswith("DELETE FROM post"), statement
        removed = self.rows.pop(args[0], None)
        return f"DELETE {0 if removed is None else 1}"
