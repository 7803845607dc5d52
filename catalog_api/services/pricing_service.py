import logging
from datetime import datetime, timezone
from typing import List, Mapping, Optional, Union
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy import select, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from catalog_api.errors import StoreError, ValidationError
from catalog_api.models.pricing import ProductPricing
from catalog_api.schemas.pricing import PricingUpsert

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("product_id", "msrp", "start_date", "created_by")
MUTABLE_FIELDS = ("msrp", "map", "cost", "sell", "base", "start_date", "end_date", "created_by")


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Naive datetimes are taken to be UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class PricingService:
    """Time-bounded pricing ledger.

    A product should never hold two distinct price records whose validity
    windows overlap. Upserting a record that overlaps an existing one
    rewrites that record in place; partial overlaps are not split.
    """

    @staticmethod
    def validate(pricing_data: Union[PricingUpsert, Mapping]) -> PricingUpsert:
        if not isinstance(pricing_data, PricingUpsert):
            try:
                pricing_data = PricingUpsert.model_validate(dict(pricing_data))
            except SchemaValidationError as e:
                raise ValidationError(f"Invalid pricing data: {e.errors()[0]['msg']}") from e

        missing = [
            field for field in REQUIRED_FIELDS
            if getattr(pricing_data, field) in (None, "")
        ]
        if missing:
            raise ValidationError(
                f"Missing required fields: {', '.join(missing)}.",
                missing_fields=missing
            )
        return pricing_data

    @staticmethod
    async def find_overlapping(
        session: AsyncSession,
        product_id: int,
        start_date: datetime,
        end_date: Optional[datetime],
        now: Optional[datetime] = None
    ) -> List[ProductPricing]:
        """Records of ``product_id`` overlapping ``[start_date, end_date or now]``.

        A stored record without an end date is compared as ending ``now``.
        Newest ``start_date`` first.
        """
        now = as_utc(now) or datetime.now(timezone.utc)
        query_start = as_utc(start_date)
        query_end = as_utc(end_date) or now

        ends_after_start = ProductPricing.end_date >= query_start
        if now >= query_start:
            ends_after_start = or_(ends_after_start, ProductPricing.end_date.is_(None))

        result = await session.execute(
            select(ProductPricing)
            .where(
                ProductPricing.product_id == product_id,
                ProductPricing.start_date <= query_end,
                ends_after_start,
            )
            .order_by(ProductPricing.start_date.desc(), ProductPricing.id.desc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def upsert_pricing(
        session: AsyncSession,
        pricing_data: Union[PricingUpsert, Mapping],
        now: Optional[datetime] = None
    ) -> ProductPricing:
        """Update the overlapping record for the window, or insert a new one."""
        data = PricingService.validate(pricing_data)
        values = {field: getattr(data, field) for field in MUTABLE_FIELDS}
        values["start_date"] = as_utc(values["start_date"])
        values["end_date"] = as_utc(values["end_date"])

        try:
            overlapping = await PricingService.find_overlapping(
                session, data.product_id, values["start_date"], values["end_date"], now=now
            )

            if overlapping:
                pricing = overlapping[0]
                if len(overlapping) > 1:
                    logger.warning(
                        "%d pricing records overlap product %s window; updating id=%s (latest start)",
                        len(overlapping), data.product_id, pricing.id
                    )
                for field, value in values.items():
                    setattr(pricing, field, value)
            else:
                pricing = ProductPricing(product_id=data.product_id, **values)
                session.add(pricing)

            await session.commit()
            await session.refresh(pricing)
        except SQLAlchemyError as e:
            await session.rollback()
            logger.exception("Error saving pricing for product %s", data.product_id)
            raise StoreError("Could not save pricing data.") from e

        return pricing

    @staticmethod
    async def get_pricing_by_product(session: AsyncSession, product_id: int) -> List[ProductPricing]:
        result = await session.execute(
            select(ProductPricing)
            .where(ProductPricing.product_id == product_id)
            .order_by(ProductPricing.start_date)
        )
        return list(result.scalars().all())
