import logging
from typing import Optional, List
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from catalog_api.errors import StoreError
from catalog_api.models.category import Category
from catalog_api.schemas.category import CategoryCreate, CategoryUpdate

logger = logging.getLogger(__name__)


class CategoryService:
    """Service for category CRUD operations."""

    @staticmethod
    async def create_category(session: AsyncSession, category_data: CategoryCreate) -> Category:
        existing = await CategoryService.get_category_by_name(session, category_data.category_name)
        if existing:
            raise ValueError(f"Category '{category_data.category_name}' already exists")

        category = Category(**category_data.model_dump())
        session.add(category)
        await CategoryService._commit(session, category)
        return category

    @staticmethod
    async def get_category(session: AsyncSession, category_id: int) -> Optional[Category]:
        result = await session.execute(select(Category).where(Category.id == category_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_category_by_name(session: AsyncSession, name: str) -> Optional[Category]:
        result = await session.execute(select(Category).where(Category.category_name == name))
        return result.scalar_one_or_none()

    @staticmethod
    async def list_categories(session: AsyncSession) -> List[Category]:
        result = await session.execute(select(Category).order_by(Category.category_name))
        return list(result.scalars().all())

    @staticmethod
    async def search_categories(session: AsyncSession, name: str) -> List[Category]:
        """Case-insensitive substring match on the display name."""
        result = await session.execute(
            select(Category)
            .where(func.lower(Category.category_name).contains(name.lower()))
            .order_by(Category.category_name)
        )
        return list(result.scalars().all())

    @staticmethod
    async def update_category(
        session: AsyncSession,
        category_id: int,
        category_data: CategoryUpdate
    ) -> Optional[Category]:
        """Update whitelisted category fields; a rename must stay unique."""
        category = await CategoryService.get_category(session, category_id)
        if not category:
            return None

        changes = category_data.model_dump(exclude_unset=True)
        new_name = changes.get("category_name")
        if new_name is None:
            changes.pop("category_name", None)
        elif new_name != category.category_name:
            if await CategoryService.get_category_by_name(session, new_name):
                raise ValueError(f"Category '{new_name}' already exists")

        for key, value in changes.items():
            setattr(category, key, value)
        await CategoryService._commit(session, category)
        return category

    @staticmethod
    async def delete_category(session: AsyncSession, category_id: int) -> bool:
        """Delete a category; products keep their now-dangling category_id."""
        category = await CategoryService.get_category(session, category_id)
        if not category:
            return False
        await session.delete(category)
        await CategoryService._commit(session)
        return True

    @staticmethod
    async def _commit(session: AsyncSession, category: Optional[Category] = None) -> None:
        try:
            await session.commit()
            if category is not None:
                await session.refresh(category)
        except SQLAlchemyError as e:
            await session.rollback()
            logger.exception("Error saving category")
            raise StoreError("Could not save category.") from e
