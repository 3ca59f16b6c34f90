from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.config import settings
from blog_api.database import get_db
from blog_api.repositories.blog_repository import BlogRepository


def get_blog_repository(db: AsyncSession = Depends(get_db)) -> BlogRepository:
    """Build a repository bound to the request-scoped session."""
    return BlogRepository(db)


class PaginationParams:
    """
    Reusable FastAPI dependency that parses pagination query parameters.

    Usage in a router::

        @router.get("/blog")
        async def list_blogs(pagination: PaginationParams = Depends(PaginationParams)):
            ...

    Values are deliberately not range-checked here: ``page=0`` or
    ``limit=-5`` are coerced to the defaults by
    ``blog_service.normalize_pagination`` instead of being rejected.

    Attributes
    ----------
    page:
        1-based page number.
    limit:
        Number of items returned per page, capped at
        ``settings.MAX_PAGE_SIZE`` by the service.
    offset:
        Number of items to skip.  When positive it takes precedence over
        *page*.
    """

    def __init__(
        self,
        page: int = Query(
            1,
            description="Page number (1-based).",
        ),
        limit: int = Query(
            settings.DEFAULT_PAGE_SIZE,
            description=f"Number of items returned per page (max {settings.MAX_PAGE_SIZE}).",
        ),
        offset: int = Query(
            0,
            description="Items to skip; overrides page when greater than 0.",
        ),
    ) -> None:
        self.page = page
        self.limit = limit
        self.offset = offset
