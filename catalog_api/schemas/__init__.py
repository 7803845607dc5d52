from catalog_api.schemas.product import ProductCreate, ProductUpdate, ProductResponse, ProductRecord, ProductSearch
from catalog_api.schemas.category import CategoryCreate, CategoryUpdate, CategoryResponse
from catalog_api.schemas.brand import BrandCreate, BrandUpdate, BrandResponse
from catalog_api.schemas.pricing import PricingUpsert, PricingResponse
from catalog_api.schemas.inventory import InventoryUpsert, InventoryResponse
from catalog_api.schemas.review import ReviewCreate, ReviewResponse
from catalog_api.schemas.asset import AssetCreate, AssetResponse
from catalog_api.schemas.import_task import ImportTaskResponse, ImportReport, RowRejection

__all__ = [
    "ProductCreate",
    "ProductUpdate",
    "ProductResponse",
    "ProductRecord",
    "ProductSearch",
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryResponse",
    "BrandCreate",
    "BrandUpdate",
    "BrandResponse",
    "PricingUpsert",
    "PricingResponse",
    "InventoryUpsert",
    "InventoryResponse",
    "ReviewCreate",
    "ReviewResponse",
    "AssetCreate",
    "AssetResponse",
    "ImportTaskResponse",
    "ImportReport",
    "RowRejection",
]
