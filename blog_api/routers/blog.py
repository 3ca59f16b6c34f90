from fastapi import APIRouter, Depends, Response
from blog_api.auth import AuthenticatedUser, get_current_user
from blog_api.dependencies import PaginationParams, get_blog_repository
from blog_api.repositories.blog_repository import BlogRepository
from blog_api.schemas import BlogCreate, BlogListResponse, BlogResponse, BlogUpdate
from blog_api.services import blog_service

router = APIRouter(prefix="/api/v1/blog", tags=["blog"])

_ERROR = {"content": {"application/json": {"example": {"detail": "string"}}}}
BAD_REQUEST = {400: {"description": "Bad request", **_ERROR}}
UNAUTHENTICATED = {401: {"description": "Missing or invalid bearer token", **_ERROR}}
FORBIDDEN = {403: {"description": "Acting user is not the author", **_ERROR}}
NOT_FOUND = {404: {"description": "Blog post not found", **_ERROR}}
SERVER_ERROR = {500: {"description": "Server error", **_ERROR}}


@router.post(
    "/create",
    status_code=201,
    response_model=BlogResponse,
    summary="Create a blog post",
    responses={**BAD_REQUEST, **UNAUTHENTICATED, **SERVER_ERROR},
)
async def create_blog(
    data: BlogCreate,
    user: AuthenticatedUser = Depends(get_current_user),
    repo: BlogRepository = Depends(get_blog_repository),
):
    return await blog_service.create_blog(repo, user.user_id, data)


@router.get(
    "",
    response_model=BlogListResponse,
    summary="List blog posts, newest first",
    responses={**BAD_REQUEST, **SERVER_ERROR},
)
async def list_blogs(
    pagination: PaginationParams = Depends(),
    repo: BlogRepository = Depends(get_blog_repository),
):
    return await blog_service.list_blogs(
        repo, pagination.page, pagination.limit, pagination.offset
    )


@router.get(
    "/{blog_id}",
    response_model=BlogResponse,
    summary="Get a single blog post by ID",
    responses={**NOT_FOUND, **SERVER_ERROR},
)
async def get_blog(blog_id: str, repo: BlogRepository = Depends(get_blog_repository)):
    return await blog_service.get_blog(repo, blog_id)


@router.put(
    "/{blog_id}",
    response_model=BlogResponse,
    summary="Edit a blog post (author only)",
    responses={**BAD_REQUEST, **UNAUTHENTICATED, **FORBIDDEN, **NOT_FOUND, **SERVER_ERROR},
)
async def update_blog(
    blog_id: str,
    data: BlogUpdate,
    user: AuthenticatedUser = Depends(get_current_user),
    repo: BlogRepository = Depends(get_blog_repository),
):
    return await blog_service.update_blog(repo, user.user_id, blog_id, data)


@router.delete(
    "/{blog_id}",
    status_code=204,
    response_class=Response,
    summary="Delete a blog post (author only)",
    responses={**UNAUTHENTICATED, **FORBIDDEN, **NOT_FOUND, **SERVER_ERROR},
)
async def delete_blog(
    blog_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    repo: BlogRepository = Depends(get_blog_repository),
):
    await blog_service.delete_blog_post(repo, user.user_id, blog_id)
    return Response(status_code=204)
