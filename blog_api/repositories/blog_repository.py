"""
Blog repository — persistence for the Blog aggregate.

Design notes
------------
- The repository flushes but never commits; the request-scoped ``get_db``
  dependency owns the transaction, which makes each create/update/delete
  atomic from the caller's point of view.
- Relationships are declared ``lazy="noload"`` on the model, so every read
  that returns a Blog goes through ``_blog_query`` which eager-loads the
  category/tag links, likes and comments with ``selectinload``.
- Category and Tag references are resolved before anything is written; an
  unknown id raises ``ValidationError`` and leaves the session untouched.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from sqlalchemy import desc, func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from blog_api.errors import ValidationError
from blog_api.models import (
    Blog,
    BlogCategory,
    BlogTag,
    Category,
    Comment,
    Like,
    Tag,
    new_id,
    utcnow,
)
from blog_api.schemas import BlogCreate

logger = logging.getLogger(__name__)

_REQUIRED_TEXT_FIELDS = ("title", "content", "author")
_MUTABLE_FIELDS = frozenset(
    {"title", "content", "author", "image_url", "categories", "tags"}
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _require_text(field: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"'{field}' is required and must not be empty")
    return value


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for DateTime(timezone=True).
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _next_timestamp(previous: datetime | None) -> datetime:
    """Return the current time, nudged forward so it is strictly after *previous*."""
    now = utcnow()
    if previous is not None:
        previous = _as_utc(previous)
        if now <= previous:
            now = previous + timedelta(microseconds=1)
    return now


def _dedupe(ids: list[str]) -> list[str]:
    return list(dict.fromkeys(ids))


def _blog_query():
    return select(Blog).options(
        selectinload(Blog.category_links),
        selectinload(Blog.tag_links),
        selectinload(Blog.likes),
        selectinload(Blog.comments),
    )


class BlogRepository:
    """
    Repository for Blog records and the Category/Tag/Like/Comment rows
    hanging off them.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    # ------------------------------------------------------------------
    # Reference resolution
    # ------------------------------------------------------------------

    async def _resolve(self, model, ids: list[str], kind: str) -> list:
        """
        Return *model* rows for *ids* in the order given.

        Raises ``ValidationError`` naming every id that does not exist.
        """
        ids = _dedupe(ids)
        if not ids:
            return []
        result = await self.session.execute(select(model).where(model.id.in_(ids)))
        found = {row.id: row for row in result.scalars().all()}
        missing = [i for i in ids if i not in found]
        if missing:
            raise ValidationError(f"Unknown {kind} id(s): {', '.join(missing)}")
        return [found[i] for i in ids]

    async def _replace_categories(self, blog: Blog, categories: list[Category]) -> None:
        if blog.category_links:
            blog.category_links.clear()
            await self.session.flush()
        blog.category_links.extend(
            BlogCategory(category=category, position=index)
            for index, category in enumerate(categories)
        )

    async def _replace_tags(self, blog: Blog, tags: list[Tag]) -> None:
        if blog.tag_links:
            blog.tag_links.clear()
            await self.session.flush()
        blog.tag_links.extend(
            BlogTag(tag=tag, position=index) for index, tag in enumerate(tags)
        )

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    async def create(self, data: BlogCreate) -> Blog:
        """
        Persist a new blog post and return it fully loaded.

        Raises ``ValidationError`` when title/content/author is blank or a
        category/tag id does not resolve.
        """
        for field in _REQUIRED_TEXT_FIELDS:
            _require_text(field, getattr(data, field))

        categories = await self._resolve(Category, data.categories, "category")
        tags = await self._resolve(Tag, data.tags, "tag")

        now = utcnow()
        blog = Blog(
            id=new_id(),
            title=data.title,
            content=data.content,
            author=data.author,
            image_url=data.image_url,
            created_at=now,
            updated_at=now,
        )
        blog.category_links = [
            BlogCategory(category=category, position=index)
            for index, category in enumerate(categories)
        ]
        blog.tag_links = [
            BlogTag(tag=tag, position=index) for index, tag in enumerate(tags)
        ]
        self.session.add(blog)
        await self.session.flush()
        logger.debug("Inserted blog %s", blog.id)
        return await self.get_by_id(blog.id)

    async def get_by_id(self, blog_id: str) -> Blog | None:
        """
        Return the blog with all aggregates loaded, or None.

        ``populate_existing`` re-reads an instance already in the session so
        likes and comments added since it was first loaded are included.
        """
        q = (
            _blog_query()
            .where(Blog.id == blog_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(q)
        return result.scalar_one_or_none()

    async def list(self, page: int = 1, limit: int = 10, offset: int = 0) -> tuple[list[Blog], int]:
        """
        Return ``(items, total)`` for one page of blogs, newest first.

        A positive *offset* is authoritative; otherwise the skip count is
        derived from *page*.  *total* ignores pagination.
        """
        skip = offset if offset > 0 else (page - 1) * limit

        total: int = (
            await self.session.execute(select(func.count()).select_from(Blog))
        ).scalar_one()

        q = (
            _blog_query()
            .order_by(desc(Blog.created_at), desc(Blog.id))
            .offset(skip)
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(q)
        return list(result.scalars().all()), total

    async def update(self, blog_id: str, patch: dict[str, Any]) -> Blog | None:
        """
        Apply the keys present in *patch* and return the updated blog.

        Absent keys are left untouched.  ``image_url: None`` clears the image;
        ``categories``/``tags`` set to ``None`` clear the references.
        Returns None when the blog does not exist.
        """
        unknown = set(patch) - _MUTABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown field(s): {', '.join(sorted(unknown))}")

        blog = await self.get_by_id(blog_id)
        if blog is None:
            return None

        for field in _REQUIRED_TEXT_FIELDS:
            if field in patch:
                _require_text(field, patch[field])

        # Resolve everything before touching the row.
        categories = tags = None
        if "categories" in patch:
            categories = await self._resolve(Category, patch["categories"] or [], "category")
        if "tags" in patch:
            tags = await self._resolve(Tag, patch["tags"] or [], "tag")

        for field in ("title", "content", "author", "image_url"):
            if field in patch:
                setattr(blog, field, patch[field])
        if categories is not None:
            await self._replace_categories(blog, categories)
        if tags is not None:
            await self._replace_tags(blog, tags)

        blog.updated_at = _next_timestamp(blog.updated_at)
        await self.session.flush()
        logger.debug("Updated blog %s fields=%s", blog_id, sorted(patch))
        return await self.get_by_id(blog.id)

    async def delete(self, blog_id: str) -> bool:
        """
        Delete the blog identified by *blog_id*.

        Comments and category/tag links go with it; likes survive with their
        blog reference set to NULL.  Returns False when it does not exist.
        """
        blog = await self.get_by_id(blog_id)
        if blog is None:
            return False

        # Collections are loaded above, so the ORM cascade (comments, links)
        # and FK nulling (likes) apply regardless of backend FK enforcement.
        await self.session.delete(blog)
        await self.session.flush()
        logger.debug("Deleted blog %s", blog_id)
        return True

    # ------------------------------------------------------------------
    # Likes / comments
    # ------------------------------------------------------------------

    def _insert_for_dialect(self):
        dialect = self.session.get_bind().dialect.name
        if dialect == "postgresql":
            return pg_insert
        if dialect == "sqlite":
            return sqlite_insert
        raise NotImplementedError(f"Unsupported database dialect: {dialect}")

    async def _blog_exists(self, blog_id: str) -> bool:
        result = await self.session.execute(select(Blog.id).where(Blog.id == blog_id))
        return result.scalar_one_or_none() is not None

    async def add_like(self, blog_id: str, user: str) -> Like | None:
        """
        Record that *user* likes the blog; a repeat like is a no-op.

        Uses a single ``INSERT ... ON CONFLICT DO NOTHING`` against the
        ``(blog_id, user)`` unique constraint, so concurrent likes by the
        same user cannot produce two rows.  Returns the (possibly existing)
        Like, or None when the blog does not exist.
        """
        if not await self._blog_exists(blog_id):
            return None

        insert = self._insert_for_dialect()
        stmt = (
            insert(Like)
            .values(id=new_id(), blog_id=blog_id, user=user, created_at=utcnow())
            .on_conflict_do_nothing(index_elements=[Like.blog_id, Like.user])
        )
        await self.session.execute(stmt)

        result = await self.session.execute(
            select(Like).where(Like.blog_id == blog_id, Like.user == user)
        )
        return result.scalar_one()

    async def add_comment(self, blog_id: str, author: str, content: str) -> Comment | None:
        """Append a comment to the blog. Returns None when the blog does not exist."""
        _require_text("author", author)
        _require_text("content", content)
        if not await self._blog_exists(blog_id):
            return None

        comment = Comment(id=new_id(), blog_id=blog_id, author=author, content=content)
        self.session.add(comment)
        await self.session.flush()
        return comment
