from fastapi import APIRouter, Depends, HTTPException, Query, UploadFile, File, Form
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from catalog_api.database import get_db
from catalog_api.models.asset import AssetType
from catalog_api.schemas.asset import AssetCreate, AssetResponse
from catalog_api.schemas.inventory import InventoryUpsert, InventoryResponse
from catalog_api.schemas.pricing import PricingUpsert, PricingResponse
from catalog_api.schemas.product import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    ProductSearch
)
from catalog_api.schemas.review import ReviewCreate, ReviewResponse
from catalog_api.services.inventory_service import InventoryService
from catalog_api.services.pricing_service import PricingService
from catalog_api.services.product_service import ProductService
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("", response_model=List[ProductResponse])
async def list_products(
    sort_by: str = Query("created_at"),
    sort_order: str = Query("descending"),
    product_name: Optional[str] = None,
    sku: Optional[str] = None,
    db: AsyncSession = Depends(get_db)
):
    """List products sorted by a product column."""
    products = await ProductService.list_products(
        db,
        sort_by=sort_by,
        sort_order=sort_order,
        product_name=product_name,
        sku=sku
    )
    return [ProductResponse.model_validate(p) for p in products]


@router.post("/search", response_model=List[ProductResponse])
async def search_products(criteria: ProductSearch, db: AsyncSession = Depends(get_db)):
    products = await ProductService.search_products(db, criteria)
    return [ProductResponse.model_validate(p) for p in products]


@router.post("/inventory", response_model=InventoryResponse)
async def upsert_inventory(inventory_data: InventoryUpsert, db: AsyncSession = Depends(get_db)):
    """Create or update the stock record for (product, bin, location)."""
    inventory = await InventoryService.upsert_inventory(db, inventory_data)
    return InventoryResponse.model_validate(inventory)


@router.post("/pricing", response_model=PricingResponse)
async def upsert_pricing(pricing_data: PricingUpsert, db: AsyncSession = Depends(get_db)):
    """Create a price record or rewrite the one whose window overlaps."""
    pricing = await PricingService.upsert_pricing(db, pricing_data)
    logger.info("Saved pricing id=%s for product %s", pricing.id, pricing.product_id)
    return PricingResponse.model_validate(pricing)


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: int, db: AsyncSession = Depends(get_db)):
    """Get a single product by ID."""
    product = await ProductService.get_product(db, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return ProductResponse.model_validate(product)


@router.post("", response_model=ProductResponse, status_code=201)
async def create_product(product_data: ProductCreate, db: AsyncSession = Depends(get_db)):
    product = await ProductService.create_product(db, product_data)
    return ProductResponse.model_validate(product)


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: int,
    product_data: ProductUpdate,
    db: AsyncSession = Depends(get_db)
):
    product = await ProductService.update_product(db, product_id, product_data)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return ProductResponse.model_validate(product)


@router.delete("/{product_id}", status_code=204)
async def delete_product(product_id: int, db: AsyncSession = Depends(get_db)):
    """Delete a product; its reviews, assets, inventory and pricing stay."""
    deleted = await ProductService.delete_product(db, product_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Product not found")
    logger.info("Deleted product %s", product_id)
    return None


@router.post("/{product_id}/reviews", response_model=List[ReviewResponse], status_code=201)
async def add_reviews(
    product_id: int,
    reviews: List[ReviewCreate],
    db: AsyncSession = Depends(get_db)
):
    saved = await ProductService.save_product_reviews(db, product_id, reviews)
    if saved is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return [ReviewResponse.model_validate(r) for r in saved]


@router.get("/{product_id}/reviews", response_model=List[ReviewResponse])
async def get_reviews(product_id: int, db: AsyncSession = Depends(get_db)):
    reviews = await ProductService.get_product_reviews(db, product_id)
    if reviews is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return [ReviewResponse.model_validate(r) for r in reviews]


@router.post("/{product_id}/assets", response_model=List[AssetResponse], status_code=201)
async def upload_assets(
    product_id: int,
    files: List[UploadFile] = File(...),
    type: AssetType = Form(AssetType.IMAGE),
    db: AsyncSession = Depends(get_db)
):
    """Store uploaded files as assets of the product."""
    assets = []
    for upload in files:
        file_name = upload.filename or "upload"
        extension = file_name.rsplit(".", 1)[-1].lower() if "." in file_name else ""
        assets.append(AssetCreate(
            product_id=product_id,
            file_name=file_name,
            type=type,
            extension=extension,
            binary_data=await upload.read(),
        ))
    saved = await ProductService.save_product_assets(db, assets)
    return [AssetResponse.model_validate(a) for a in saved]


@router.get("/{product_id}/assets", response_model=List[AssetResponse])
async def get_assets(product_id: int, db: AsyncSession = Depends(get_db)):
    assets = await ProductService.get_product_assets(db, product_id)
    return [AssetResponse.model_validate(a) for a in assets]


@router.get("/{product_id}/inventory", response_model=List[InventoryResponse])
async def get_inventory(product_id: int, db: AsyncSession = Depends(get_db)):
    inventory = await InventoryService.find_inventory_by_product(db, product_id)
    return [InventoryResponse.model_validate(i) for i in inventory]


@router.get("/{product_id}/pricing", response_model=List[PricingResponse])
async def get_pricing(product_id: int, db: AsyncSession = Depends(get_db)):
    pricing = await PricingService.get_pricing_by_product(db, product_id)
    return [PricingResponse.model_validate(p) for p in pricing]
