import logging
from typing import Optional, List
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from catalog_api.errors import StoreError
from catalog_api.models.brand import Brand
from catalog_api.schemas.brand import BrandCreate, BrandUpdate

logger = logging.getLogger(__name__)


class BrandService:
    """Brands are looked up by exact name during import."""

    @staticmethod
    async def create_brand(session: AsyncSession, brand_data: BrandCreate) -> Brand:
        existing = await BrandService.get_brand_by_name(session, brand_data.brand_name)
        if existing:
            raise ValueError(f"Brand '{brand_data.brand_name}' already exists")

        brand = Brand(**brand_data.model_dump())
        session.add(brand)
        await BrandService._commit(session, brand)
        return brand

    @staticmethod
    async def get_brand(session: AsyncSession, brand_id: int) -> Optional[Brand]:
        result = await session.execute(select(Brand).where(Brand.id == brand_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_brand_by_name(session: AsyncSession, name: str) -> Optional[Brand]:
        result = await session.execute(select(Brand).where(Brand.brand_name == name))
        return result.scalar_one_or_none()

    @staticmethod
    async def list_brands(session: AsyncSession) -> List[Brand]:
        result = await session.execute(select(Brand).order_by(Brand.brand_name))
        return list(result.scalars().all())

    @staticmethod
    async def search_brands(session: AsyncSession, name: str) -> List[Brand]:
        result = await session.execute(
            select(Brand)
            .where(func.lower(Brand.brand_name).contains(name.lower()))
            .order_by(Brand.brand_name)
        )
        return list(result.scalars().all())

    @staticmethod
    async def update_brand(
        session: AsyncSession,
        brand_id: int,
        brand_data: BrandUpdate
    ) -> Optional[Brand]:
        """Update description, assets or the (unique) name."""
        brand = await BrandService.get_brand(session, brand_id)
        if not brand:
            return None

        changes = brand_data.model_dump(exclude_unset=True)
        new_name = changes.get("brand_name")
        if new_name is None:
            changes.pop("brand_name", None)
        elif new_name != brand.brand_name:
            if await BrandService.get_brand_by_name(session, new_name):
                raise ValueError(f"Brand '{new_name}' already exists")

        for key, value in changes.items():
            setattr(brand, key, value)
        await BrandService._commit(session, brand)
        return brand

    @staticmethod
    async def delete_brand(session: AsyncSession, brand_id: int) -> bool:
        """Delete a brand; products keep their now-dangling brand_id."""
        brand = await BrandService.get_brand(session, brand_id)
        if not brand:
            return False
        await session.delete(brand)
        await BrandService._commit(session)
        return True

    @staticmethod
    async def _commit(session: AsyncSession, brand: Optional[Brand] = None) -> None:
        try:
            await session.commit()
            if brand is not None:
                await session.refresh(brand)
        except SQLAlchemyError as e:
            await session.rollback()
            logger.exception("Error saving brand")
            raise StoreError("Could not save brand.") from e
