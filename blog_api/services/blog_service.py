"""
Blog service — authorization and orchestration for the Blog aggregate.

Design notes
------------
- Every function takes the ``BlogRepository`` explicitly; the router
  layer builds it from the request-scoped session.
- Ownership is checked on every mutation against the stored ``author``;
  nothing about a previous check is remembered between calls.
- Storage exceptions are translated here: integrity violations become
  ``ValidationError`` (400), anything else from SQLAlchemy becomes
  ``InternalError`` (500).  The original exception is logged, never
  returned to the client.
- Results are serialised to plain dicts; the router's ``response_model``
  turns them into the documented schema.
"""
import functools
import logging
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from blog_api.config import settings
from blog_api.errors import Forbidden, InternalError, NotFound, ValidationError
from blog_api.models import Blog, Comment, Like
from blog_api.repositories.blog_repository import BlogRepository
from blog_api.schemas import BlogCreate, BlogUpdate

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1


# ---------------------------------------------------------------------------
# Storage error translation
# ---------------------------------------------------------------------------

def translate_storage_errors(func):
    """Map SQLAlchemy failures raised by *func* onto the API error taxonomy."""

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except IntegrityError as exc:
            logger.warning("%s rejected by a storage constraint: %s", func.__name__, exc.orig)
            raise ValidationError("The request violates a data constraint") from exc
        except SQLAlchemyError as exc:
            logger.exception("%s failed in the storage layer", func.__name__)
            raise InternalError() from exc

    return wrapper


# ---------------------------------------------------------------------------
# Serialisation helpers
# ---------------------------------------------------------------------------

def _iso(value: datetime | None) -> str | None:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def _like_to_dict(like: Like) -> dict:
    return {"id": like.id, "user": like.user}


def _comment_to_dict(comment: Comment) -> dict:
    return {
        "id": comment.id,
        "author": comment.author,
        "content": comment.content,
        "created_at": _iso(comment.created_at),
    }


def blog_to_dict(blog: Blog) -> dict:
    """Serialise a fully loaded Blog ORM instance to a plain dict."""
    return {
        "id": blog.id,
        "title": blog.title,
        "content": blog.content,
        "author": blog.author,
        "image_url": blog.image_url,
        "categories": [{"id": c.id, "name": c.name} for c in blog.categories],
        "tags": [{"id": t.id, "name": t.name} for t in blog.tags],
        "likes": [_like_to_dict(like) for like in blog.likes],
        "comments": [_comment_to_dict(c) for c in blog.comments],
        "like_count": len(blog.likes),
        "comment_count": len(blog.comments),
        "created_at": _iso(blog.created_at),
        "updated_at": _iso(blog.updated_at),
    }


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------

def normalize_pagination(
    page: int | None, limit: int | None, offset: int | None
) -> tuple[int, int, int]:
    """
    Coerce raw query values into a usable ``(page, limit, offset)``.

    Missing or non-positive ``page``/``limit`` fall back to the defaults,
    ``limit`` is capped at ``settings.MAX_PAGE_SIZE`` and a missing or
    negative ``offset`` becomes 0.
    """
    if page is None or page < 1:
        page = DEFAULT_PAGE
    if limit is None or limit < 1:
        limit = settings.DEFAULT_PAGE_SIZE
    limit = min(limit, settings.MAX_PAGE_SIZE)
    if offset is None or offset < 0:
        offset = 0
    return page, limit, offset


# ---------------------------------------------------------------------------
# Ownership
# ---------------------------------------------------------------------------

async def _load_owned(repo: BlogRepository, acting_user: str, blog_id: str) -> Blog:
    blog = await repo.get_by_id(blog_id)
    if blog is None:
        raise NotFound()
    if blog.author != acting_user:
        logger.warning(
            "User %s denied mutation of blog %s owned by %s", acting_user, blog_id, blog.author
        )
        raise Forbidden()
    return blog


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------

@translate_storage_errors
async def create_blog(repo: BlogRepository, acting_user: str, data: BlogCreate) -> dict:
    """
    Create a blog post attributed to *acting_user*.

    Any ``author`` in the payload is overwritten: a user cannot publish a
    post in someone else's name.
    """
    data = data.model_copy(update={"author": acting_user})
    blog = await repo.create(data)
    logger.info("User %s created blog %s", acting_user, blog.id)
    return blog_to_dict(blog)


@translate_storage_errors
async def list_blogs(
    repo: BlogRepository,
    page: int | None = None,
    limit: int | None = None,
    offset: int | None = None,
) -> dict:
    """Return one page of blogs (newest first) with pagination metadata."""
    page, limit, offset = normalize_pagination(page, limit, offset)
    items, total = await repo.list(page=page, limit=limit, offset=offset)

    skip = offset if offset > 0 else (page - 1) * limit
    return {
        "items": [blog_to_dict(b) for b in items],
        "page": page,
        "limit": limit,
        "offset": offset,
        "total": total,
        "has_next": skip + len(items) < total,
    }


@translate_storage_errors
async def get_blog(repo: BlogRepository, blog_id: str) -> dict:
    blog = await repo.get_by_id(blog_id)
    if blog is None:
        raise NotFound()
    return blog_to_dict(blog)


@translate_storage_errors
async def update_blog(
    repo: BlogRepository, acting_user: str, blog_id: str, patch: BlogUpdate
) -> dict:
    """
    Partially update a blog post owned by *acting_user*.

    Only fields explicitly present in the payload are applied
    (``model_dump(exclude_unset=True)``).
    """
    await _load_owned(repo, acting_user, blog_id)

    changes = patch.model_dump(exclude_unset=True)
    blog = await repo.update(blog_id, changes)
    if blog is None:
        raise NotFound()
    logger.info("User %s updated blog %s (%s)", acting_user, blog_id, ", ".join(sorted(changes)))
    return blog_to_dict(blog)


@translate_storage_errors
async def delete_blog_post(repo: BlogRepository, acting_user: str, blog_id: str) -> None:
    """Delete a blog post owned by *acting_user*, cascading to its comments."""
    await _load_owned(repo, acting_user, blog_id)

    if not await repo.delete(blog_id):
        raise NotFound()
    logger.info("User %s deleted blog %s", acting_user, blog_id)
