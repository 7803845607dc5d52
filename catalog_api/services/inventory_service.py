import logging
from typing import List, Mapping, Union
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from catalog_api.errors import StoreError, ValidationError
from catalog_api.models.inventory import ProductInventory
from catalog_api.schemas.inventory import InventoryUpsert

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("product_id", "bin", "location", "source")


class InventoryService:
    """Stock levels keyed by (product_id, bin, location)."""

    @staticmethod
    async def find_inventory_by_product(session: AsyncSession, product_id: int) -> List[ProductInventory]:
        result = await session.execute(
            select(ProductInventory)
            .where(ProductInventory.product_id == product_id)
            .order_by(ProductInventory.id)
        )
        return list(result.scalars().all())

    @staticmethod
    async def upsert_inventory(
        session: AsyncSession,
        inventory_data: Union[InventoryUpsert, Mapping]
    ) -> ProductInventory:
        if not isinstance(inventory_data, InventoryUpsert):
            try:
                inventory_data = InventoryUpsert.model_validate(dict(inventory_data))
            except SchemaValidationError as e:
                raise ValidationError(f"Invalid inventory data: {e.errors()[0]['msg']}") from e

        missing = [f for f in REQUIRED_FIELDS if getattr(inventory_data, f) in (None, "")]
        if missing:
            raise ValidationError(
                f"Missing required fields: {', '.join(missing)}.",
                missing_fields=missing
            )

        try:
            result = await session.execute(
                select(ProductInventory).where(
                    ProductInventory.product_id == inventory_data.product_id,
                    ProductInventory.bin == inventory_data.bin,
                    ProductInventory.location == inventory_data.location,
                )
            )
            inventory = result.scalars().first()

            if inventory:
                if inventory_data.on_hand is not None:
                    inventory.on_hand = inventory_data.on_hand
                if inventory_data.on_hold is not None:
                    inventory.on_hold = inventory_data.on_hold
                inventory.source = inventory_data.source
            else:
                inventory = ProductInventory(
                    product_id=inventory_data.product_id,
                    bin=inventory_data.bin,
                    location=inventory_data.location,
                    source=inventory_data.source,
                    on_hand=inventory_data.on_hand or 0,
                    on_hold=inventory_data.on_hold or 0,
                )
                session.add(inventory)

            await session.commit()
            await session.refresh(inventory)
        except SQLAlchemyError as e:
            await session.rollback()
            logger.exception("Error upserting inventory for product %s", inventory_data.product_id)
            raise StoreError("Could not save inventory.") from e

        return inventory
