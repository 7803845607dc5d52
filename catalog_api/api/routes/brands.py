from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from catalog_api.database import get_db
from catalog_api.schemas.brand import BrandCreate, BrandUpdate, BrandResponse
from catalog_api.services.brand_service import BrandService

router = APIRouter(prefix="/api/brands", tags=["brands"])


class BrandSearch(BaseModel):
    brand_name: str


@router.get("", response_model=List[BrandResponse])
async def list_brands(db: AsyncSession = Depends(get_db)):
    brands = await BrandService.list_brands(db)
    return [BrandResponse.model_validate(b) for b in brands]


@router.post("/search", response_model=List[BrandResponse])
async def search_brands(criteria: BrandSearch, db: AsyncSession = Depends(get_db)):
    brands = await BrandService.search_brands(db, criteria.brand_name)
    return [BrandResponse.model_validate(b) for b in brands]


@router.get("/{brand_id}", response_model=BrandResponse)
async def get_brand(brand_id: int, db: AsyncSession = Depends(get_db)):
    brand = await BrandService.get_brand(db, brand_id)
    if not brand:
        raise HTTPException(status_code=404, detail="Brand not found")
    return BrandResponse.model_validate(brand)


@router.post("", response_model=BrandResponse, status_code=201)
async def create_brand(brand_data: BrandCreate, db: AsyncSession = Depends(get_db)):
    try:
        brand = await BrandService.create_brand(db, brand_data)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return BrandResponse.model_validate(brand)


@router.put("/{brand_id}", response_model=BrandResponse)
async def update_brand(
    brand_id: int,
    brand_data: BrandUpdate,
    db: AsyncSession = Depends(get_db)
):
    try:
        brand = await BrandService.update_brand(db, brand_id, brand_data)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if not brand:
        raise HTTPException(status_code=404, detail="Brand not found")
    return BrandResponse.model_validate(brand)


@router.delete("/{brand_id}", status_code=204)
async def delete_brand(brand_id: int, db: AsyncSession = Depends(get_db)):
    deleted = await BrandService.delete_brand(db, brand_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Brand not found")
    return None
