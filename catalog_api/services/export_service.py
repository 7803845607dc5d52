import csv
import io
import json
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from catalog_api.models.asset import ProductAsset
from catalog_api.models.brand import Brand
from catalog_api.models.category import Category
from catalog_api.models.inventory import ProductInventory
from catalog_api.models.pricing import ProductPricing
from catalog_api.models.product import Product
from catalog_api.models.review import Review
from catalog_api.services.csv_processor import CatalogDialect
from catalog_api.services.specifications import SPECIFICATION_KEYS

EXPORT_GROUPS = (
    "categories",
    "brands",
    "products",
    "productSpecifications",
    "productReviews",
    "productAssets",
    "productInventories",
    "productPricing",
)


class ExportLabels:
    """Column label overrides keyed by default label.

    Unknown or empty overrides fall back to the default label.
    """

    def __init__(self, overrides: Optional[Mapping[str, str]] = None):
        self.overrides = {k: v for k, v in (overrides or {}).items() if v}

    def __call__(self, default: str) -> str:
        return self.overrides.get(default, default)

    def merged(self, overrides: Optional[Mapping[str, str]]) -> "ExportLabels":
        return ExportLabels({**self.overrides, **(overrides or {})})


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _enum_value(value: Any) -> Any:
    return getattr(value, "value", value)


class CatalogExporter:
    """Flattens the whole catalog into labelled, denormalized rows.

    Identifiers held by products and satellite records are replaced by the
    referenced display name, or ``None`` when the reference no longer
    resolves. Read only.
    """

    def __init__(self, labels: Optional[ExportLabels] = None):
        self.labels = labels or ExportLabels()

    async def export_all(self, session: AsyncSession) -> Dict[str, List[Dict[str, Any]]]:
        label = self.labels

        categories = await self._all(session, Category)
        brands = await self._all(session, Brand)
        products = await self._all(session, Product)

        category_names = {c.id: c.category_name for c in categories}
        brand_names = {b.id: b.brand_name for b in brands}
        product_names = {p.id: p.product_name for p in products}

        result = {}
        result["categories"] = [
            {
                label("category_id"): category.id,
                label("category_name"): category.category_name,
                label("description"): category.description,
            }
            for category in categories
        ]
        result["brands"] = [
            {
                label("brand_id"): brand.id,
                label("brand_name"): brand.brand_name,
                label("description"): brand.description,
            }
            for brand in brands
        ]
        result["products"] = [
            {
                label("product_name"): product.product_name,
                label("sku"): product.sku,
                label("category_name"): category_names.get(product.category_id),
                label("brand_name"): brand_names.get(product.brand_id),
                label("specifications"): json.dumps(product.specifications or {}, ensure_ascii=False),
            }
            for product in products
        ]
        result["productSpecifications"] = [
            {
                label("product_name"): product.product_name,
                **{label(key): (product.specifications or {}).get(key) for key in SPECIFICATION_KEYS},
            }
            for product in products
        ]

        reviews = await self._all(session, Review)
        result["productReviews"] = [
            {
                label("product_name"): product_names.get(review.product_id),
                label("user"): review.user,
                label("comment"): review.comment,
            }
            for review in reviews
        ]

        assets = await self._all(session, ProductAsset)
        result["productAssets"] = [
            {
                label("product_name"): product_names.get(asset.product_id),
                label("file_name"): asset.file_name,
                label("type"): _enum_value(asset.type),
            }
            for asset in assets
        ]

        inventories = await self._all(session, ProductInventory)
        result["productInventories"] = [
            {
                label("product_name"): product_names.get(inventory.product_id),
                label("bin"): inventory.bin,
                label("location"): inventory.location,
                label("on_hand"): inventory.on_hand,
                label("on_hold"): inventory.on_hold,
            }
            for inventory in inventories
        ]

        pricing = await self._all(session, ProductPricing)
        result["productPricing"] = [
            {
                label("product_name"): product_names.get(price.product_id),
                label("msrp"): price.msrp,
                label("sell"): price.sell,
                label("start_date"): _iso(price.start_date),
                label("end_date"): _iso(price.end_date),
            }
            for price in pricing
        ]

        return result

    @staticmethod
    async def _all(session: AsyncSession, model) -> list:
        result = await session.execute(select(model).order_by(model.id))
        return list(result.scalars().all())


def rows_to_csv(rows: Sequence[Mapping[str, Any]]) -> str:
    """Write exported rows as CSV text readable by the product importer."""
    if not rows:
        return ""
    output = io.StringIO()
    writer = csv.DictWriter(
        output,
        fieldnames=list(rows[0].keys()),
        dialect=CatalogDialect,
    )
    writer.writeheader()
    for row in rows:
        writer.writerow({k: ("" if v is None else v) for k, v in row.items()})
    return output.getvalue()
