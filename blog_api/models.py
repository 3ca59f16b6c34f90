from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from blog_api.database import Base


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Category / Tag — shared vocabularies, referenced (never owned) by Blog
# ---------------------------------------------------------------------------
class Category(Base):
    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)


class Tag(Base):
    __tablename__ = "tags"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)


# ---------------------------------------------------------------------------
# Ordered link tables: Blog <-> Category, Blog <-> Tag
#
# ``position`` keeps the order the author supplied the references in.
# ---------------------------------------------------------------------------
class BlogCategory(Base):
    __tablename__ = "blog_categories"

    blog_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("blogs.id", ondelete="CASCADE"), primary_key=True
    )
    category_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    category: Mapped["Category"] = relationship("Category", lazy="joined")


class BlogTag(Base):
    __tablename__ = "blog_tags"

    blog_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("blogs.id", ondelete="CASCADE"), primary_key=True
    )
    tag_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    tag: Mapped["Tag"] = relationship("Tag", lazy="joined")


# ---------------------------------------------------------------------------
# Blog
# ---------------------------------------------------------------------------
class Blog(Base):
    __tablename__ = "blogs"

    __table_args__ = (
        # Newest-first listing
        Index("ix_blogs_created_at_id", "created_at", "id"),
        # Author feed / ownership lookups
        Index("ix_blogs_author_created_at", "author", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    author: Mapped[str] = mapped_column(String(150), nullable=False)
    image_url: Mapped[Optional[str]] = mapped_column(String(2048), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    # Relationships — all lazy="noload"; the repository eager-loads explicitly.
    category_links: Mapped[List["BlogCategory"]] = relationship(
        "BlogCategory",
        order_by="BlogCategory.position",
        cascade="all, delete-orphan",
        lazy="noload",
    )
    tag_links: Mapped[List["BlogTag"]] = relationship(
        "BlogTag",
        order_by="BlogTag.position",
        cascade="all, delete-orphan",
        lazy="noload",
    )
    # No delete cascade: deleting a Blog nulls Like.blog_id instead.
    likes: Mapped[List["Like"]] = relationship(
        "Like", back_populates="blog", lazy="noload"
    )
    comments: Mapped[List["Comment"]] = relationship(
        "Comment",
        back_populates="blog",
        order_by="Comment.created_at",
        cascade="all, delete-orphan",
        lazy="noload",
    )

    @property
    def categories(self) -> list[Category]:
        return [link.category for link in self.category_links]

    @property
    def tags(self) -> list[Tag]:
        return [link.tag for link in self.tag_links]


# ---------------------------------------------------------------------------
# Like
# ---------------------------------------------------------------------------
class Like(Base):
    __tablename__ = "likes"

    __table_args__ = (
        UniqueConstraint("blog_id", "user", name="uq_likes_blog_id_user"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user: Mapped[str] = mapped_column(String(150), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    blog_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("blogs.id", ondelete="SET NULL"), nullable=True, index=True
    )

    blog: Mapped[Optional["Blog"]] = relationship("Blog", back_populates="likes", lazy="noload")


# ---------------------------------------------------------------------------
# Comment
# ---------------------------------------------------------------------------
class Comment(Base):
    __tablename__ = "comments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    author: Mapped[str] = mapped_column(String(150), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    blog_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("blogs.id", ondelete="CASCADE"), nullable=False, index=True
    )

    blog: Mapped["Blog"] = relationship("Blog", back_populates="comments", lazy="noload")
