from catalog_api.models.category import Category
from catalog_api.models.brand import Brand
from catalog_api.models.product import Product
from catalog_api.models.review import Review
from catalog_api.models.asset import ProductAsset, AssetType
from catalog_api.models.inventory import ProductInventory
from catalog_api.models.pricing import ProductPricing
from catalog_api.models.import_task import ImportTask

__all__ = [
    "Category",
    "Brand",
    "Product",
    "Review",
    "ProductAsset",
    "AssetType",
    "ProductInventory",
    "ProductPricing",
    "ImportTask",
]
