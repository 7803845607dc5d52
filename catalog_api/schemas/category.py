from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class CategoryBase(BaseModel):
    category_name: str = Field(..., description="Unique display name")
    url: Optional[str] = None
    parent_category: Optional[str] = None
    description: Optional[str] = None
    sort_order: Optional[str] = None
    is_visible: Optional[bool] = None
    smart_category: Optional[bool] = None
    product_must_watch: Optional[bool] = None


class CategoryCreate(CategoryBase):
    pass


class CategoryUpdate(BaseModel):
    category_name: Optional[str] = None
    url: Optional[str] = None
    parent_category: Optional[str] = None
    description: Optional[str] = None
    sort_order: Optional[str] = None
    is_visible: Optional[bool] = None
    smart_category: Optional[bool] = None
    product_must_watch: Optional[bool] = None


class CategoryResponse(CategoryBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
