from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from catalog_api.database import get_db
from catalog_api.schemas.category import CategoryCreate, CategoryUpdate, CategoryResponse
from catalog_api.services.category_service import CategoryService

router = APIRouter(prefix="/api/categories", tags=["categories"])


class CategorySearch(BaseModel):
    category_name: str


@router.get("", response_model=List[CategoryResponse])
async def list_categories(db: AsyncSession = Depends(get_db)):
    categories = await CategoryService.list_categories(db)
    return [CategoryResponse.model_validate(c) for c in categories]


@router.post("/search", response_model=List[CategoryResponse])
async def search_categories(criteria: CategorySearch, db: AsyncSession = Depends(get_db)):
    categories = await CategoryService.search_categories(db, criteria.category_name)
    return [CategoryResponse.model_validate(c) for c in categories]


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(category_id: int, db: AsyncSession = Depends(get_db)):
    category = await CategoryService.get_category(db, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return CategoryResponse.model_validate(category)


@router.post("", response_model=CategoryResponse, status_code=201)
async def create_category(category_data: CategoryCreate, db: AsyncSession = Depends(get_db)):
    """Create a category; display names are unique."""
    try:
        category = await CategoryService.create_category(db, category_data)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return CategoryResponse.model_validate(category)


@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: int,
    category_data: CategoryUpdate,
    db: AsyncSession = Depends(get_db)
):
    try:
        category = await CategoryService.update_category(db, category_id, category_data)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return CategoryResponse.model_validate(category)


@router.delete("/{category_id}", status_code=204)
async def delete_category(category_id: int, db: AsyncSession = Depends(get_db)):
    deleted = await CategoryService.delete_category(db, category_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Category not found")
    return None
