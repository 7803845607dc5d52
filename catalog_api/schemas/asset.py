from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from catalog_api.models.asset import AssetType


class AssetCreate(BaseModel):
    product_id: int
    file_name: str
    type: AssetType
    extension: str
    binary_data: bytes
    product_asset_id: Optional[int] = None


class AssetResponse(BaseModel):
    """Asset metadata; the binary payload is served separately."""
    id: int
    product_id: int
    product_asset_id: int
    file_name: str
    type: AssetType
    extension: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
