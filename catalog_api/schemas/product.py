from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from datetime import datetime


class ProductBase(BaseModel):
    product_name: str = Field(..., description="Product display name")
    sku: Optional[str] = Field(None, description="Stock keeping unit")
    short_description: Optional[str] = None
    long_description: Optional[str] = None
    shipping_notes: Optional[str] = None
    warranty_info: Optional[str] = None
    visible_to_front_end: bool = False
    featured_product: bool = False
    category_id: Optional[int] = None
    brand_id: Optional[int] = None
    specifications: Dict[str, str] = Field(default_factory=dict)


class ProductCreate(ProductBase):
    pass


class ProductRecord(ProductBase):
    """Canonical product produced by the import row transformer.

    Straight-through text fields keep whatever the row carried, including
    empty strings and missing cells.
    """
    product_name: Optional[str] = None


class ProductUpdate(BaseModel):
    product_name: Optional[str] = None
    sku: Optional[str] = None
    short_description: Optional[str] = None
    long_description: Optional[str] = None
    shipping_notes: Optional[str] = None
    warranty_info: Optional[str] = None
    brand_id: Optional[int] = None
    visible_to_front_end: Optional[bool] = None
    featured_product: Optional[bool] = None


class ProductResponse(ProductBase):
    product_name: Optional[str] = None
    id: int
    review_ids: List[int] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ProductSearch(BaseModel):
    product_name: Optional[str] = Field(None, description="Case-insensitive substring")
    sku: Optional[str] = None
    category_id: Optional[int] = None
    brand_id: Optional[int] = None
