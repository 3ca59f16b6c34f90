"""
Taxonomy service — the Category and Tag vocabularies blog posts refer to.

Both kinds are flat ``{id, name}`` records with a unique name.  They are
created independently of any blog post and are never removed when a post
that references them is deleted.
"""
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.errors import Conflict, ValidationError
from blog_api.models import Category, Tag


def _to_dict(row: Category | Tag) -> dict:
    return {"id": row.id, "name": row.name}


async def _list(db: AsyncSession, model) -> list[dict]:
    result = await db.execute(select(model).order_by(model.name))
    return [_to_dict(row) for row in result.scalars().all()]


async def _create(db: AsyncSession, model, name: str, kind: str) -> dict:
    """
    Insert a new *model* row named *name*.

    The unique constraint on ``name`` is the source of truth; the lookup
    beforehand only gives the common case a clean error.
    """
    name = name.strip()
    if not name:
        raise ValidationError(f"{kind.capitalize()} name must not be empty")

    existing = await db.execute(select(model).where(model.name == name))
    if existing.scalar_one_or_none() is not None:
        raise Conflict(f"A {kind} named '{name}' already exists")

    row = model(name=name)
    db.add(row)
    try:
        await db.flush()
    except IntegrityError as exc:
        raise Conflict(f"A {kind} named '{name}' already exists") from exc
    return _to_dict(row)


async def get_categories(db: AsyncSession) -> list[dict]:
    """Return all categories ordered by name."""
    return await _list(db, Category)


async def create_category(db: AsyncSession, name: str) -> dict:
    return await _create(db, Category, name, "category")


async def get_tags(db: AsyncSession) -> list[dict]:
    """Return all tags ordered by name."""
    return await _list(db, Tag)


async def create_tag(db: AsyncSession, name: str) -> dict:
    return await _create(db, Tag, name, "tag")
