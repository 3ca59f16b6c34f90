"""
Error taxonomy for the Blog API.

Every error the service layer raises derives from ``BlogAPIError`` and
carries the HTTP status it maps to, so a single exception handler can
render all of them.  Storage-level details never reach the client: the
service translates SQLAlchemy errors into ``ValidationError`` or
``InternalError`` before they propagate.
"""
import logging
import uuid

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class BlogAPIError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "Internal server error"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(BlogAPIError):
    """Missing/blank fields or unresolved Category/Tag references."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid blog data"


class Unauthenticated(BlogAPIError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Not authenticated"


class Forbidden(BlogAPIError):
    """The acting user is authenticated but does not own the post."""

    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Only the author may modify this blog post"


class NotFound(BlogAPIError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Blog post not found"


class Conflict(BlogAPIError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Resource already exists"


class InternalError(BlogAPIError):
    pass


# ---------------------------------------------------------------------------
# Exception handlers (registered in main.py)
# ---------------------------------------------------------------------------

async def blog_api_error_handler(request: Request, exc: BlogAPIError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    else:
        logger.info(
            "%s %s -> %d: %s", request.method, request.url.path, exc.status_code, exc.detail
        )
    headers = None
    if isinstance(exc, Unauthenticated):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=headers,
    )


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render malformed bodies and query strings as 400 rather than FastAPI's 422."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request", "errors": jsonable_encoder(exc.errors())},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Last-resort handler: log the full traceback under a short correlation id
    and hand the client only that id.
    """
    error_id = uuid.uuid4().hex[:8]
    logger.error(
        "Unhandled error [%s] on %s %s: %s: %s",
        error_id,
        request.method,
        request.url.path,
        type(exc).__name__,
        exc,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error", "error_id": error_id},
    )
