from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from datetime import datetime


# --- Category / Tag ---

class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)


class CategoryResponse(BaseModel):
    id: str
    name: str
    model_config = ConfigDict(from_attributes=True)


class TagCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)


class TagResponse(BaseModel):
    id: str
    name: str
    model_config = ConfigDict(from_attributes=True)


# --- Like / Comment (read-only aggregates) ---

class LikeResponse(BaseModel):
    id: str
    user: str
    model_config = ConfigDict(from_attributes=True)


class CommentResponse(BaseModel):
    id: str
    author: str
    content: str
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


# --- Blog ---
#
# Blank titles/content are rejected by the repository, not here, so that
# service callers and HTTP callers get the same ValidationError.

class BlogCreate(BaseModel):
    title: str = Field(max_length=300)
    content: str
    # Always replaced by the authenticated user; accepted for compatibility.
    author: str | None = Field(None, max_length=150)
    image_url: str | None = Field(
        None, max_length=2048, validation_alias=AliasChoices("image_url", "imageUrl")
    )
    categories: list[str] = []  # category ids
    tags: list[str] = []  # tag ids


class BlogUpdate(BaseModel):
    title: str | None = Field(None, max_length=300)
    content: str | None = None
    author: str | None = Field(None, max_length=150)
    image_url: str | None = Field(
        None, max_length=2048, validation_alias=AliasChoices("image_url", "imageUrl")
    )
    categories: list[str] | None = None
    tags: list[str] | None = None


class BlogResponse(BaseModel):
    id: str
    title: str
    content: str
    author: str
    image_url: str | None
    categories: list[CategoryResponse] = []
    tags: list[TagResponse] = []
    likes: list[LikeResponse] = []
    comments: list[CommentResponse] = []
    like_count: int = 0
    comment_count: int = 0
    created_at: datetime
    updated_at: datetime


# --- Pagination ---

class BlogListResponse(BaseModel):
    items: list[BlogResponse]
    page: int
    limit: int
    offset: int
    total: int
    has_next: bool
