from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from blog_api.auth import AuthenticatedUser, get_current_user
from blog_api.database import get_db
from blog_api.schemas import CategoryCreate, CategoryResponse, TagCreate, TagResponse
from blog_api.services import taxonomy_service

router = APIRouter(prefix="/api/v1", tags=["taxonomy"])

@router.get("/categories", response_model=list[CategoryResponse])
async def list_categories(db: AsyncSession = Depends(get_db)):
    return await taxonomy_service.get_categories(db)

@router.post("/categories", status_code=201, response_model=CategoryResponse)
async def create_category(
    data: CategoryCreate,
    _: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await taxonomy_service.create_category(db, data.name)

@router.get("/tags", response_model=list[TagResponse])
async def list_tags(db: AsyncSession = Depends(get_db)):
    return await taxonomy_service.get_tags(db)

@router.post("/tags", status_code=201, response_model=TagResponse)
async def create_tag(
    data: TagCreate,
    _: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await taxonomy_service.create_tag(db, data.name)
