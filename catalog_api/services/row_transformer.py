import logging
from typing import Mapping, Optional
from pydantic import ValidationError as SchemaValidationError
from catalog_api.errors import ReferenceNotFound, RowRejected
from catalog_api.schemas.product import ProductRecord
from catalog_api.services.reference_resolver import ReferenceResolver
from catalog_api.services.specifications import (
    coerce_boolean_strict_true_string,
    normalize_specs_best_effort,
)

logger = logging.getLogger(__name__)

# CSV header -> product attribute, copied verbatim
TEXT_FIELDS = {
    "productName": "product_name",
    "sku": "sku",
    "shortDescription": "short_description",
    "longDescription": "long_description",
    "shippingNotes": "shipping_notes",
    "warrantyInfo": "warranty_info",
}

FLAG_FIELDS = {
    "visibleToFrontEnd": "visible_to_front_end",
    "featuredProduct": "featured_product",
}

CATEGORY_FIELD = "Category"
BRAND_FIELD = "Brand"
SPECIFICATIONS_FIELD = "specifications"


def row_label(row: Mapping[str, object]) -> Optional[str]:
    """Identifying field used in rejection reports."""
    return row.get("productName") or row.get("sku") or None


class RowTransformer:
    """Turns one raw import row into a canonical ``ProductRecord``."""

    def __init__(self, resolver: ReferenceResolver):
        self.resolver = resolver

    async def transform(self, row: Mapping[str, object]) -> ProductRecord:
        label = row_label(row)
        try:
            references = await self.resolver.resolve(
                row.get(CATEGORY_FIELD),
                row.get(BRAND_FIELD),
            )
        except ReferenceNotFound as e:
            raise RowRejected(e.message, row_label=label) from e

        # The products table requires a name; an empty string is kept as-is
        if row.get("productName") is None:
            raise RowRejected("Missing productName", row_label=label)

        logger.debug("Raw specifications: %r", row.get(SPECIFICATIONS_FIELD))
        specifications = normalize_specs_best_effort(row.get(SPECIFICATIONS_FIELD))

        record = {attr: row.get(header) for header, attr in TEXT_FIELDS.items()}
        for header, attr in FLAG_FIELDS.items():
            record[attr] = coerce_boolean_strict_true_string(row.get(header))

        try:
            return ProductRecord(
                **record,
                category_id=references.category_id,
                brand_id=references.brand_id,
                specifications=specifications,
            )
        except SchemaValidationError as e:
            raise RowRejected(f"Invalid product fields: {e.errors()[0]['msg']}", row_label=label) from e
