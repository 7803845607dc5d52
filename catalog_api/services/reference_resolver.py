from typing import Dict, NamedTuple, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from catalog_api.errors import ReferenceNotFound
from catalog_api.models.brand import Brand
from catalog_api.models.category import Category


class ResolvedReferences(NamedTuple):
    category_id: int
    brand_id: int


class ReferenceResolver:
    """Maps category/brand display names to their identifiers.

    Lookups are exact-match and read-only. Results are remembered for the
    lifetime of the resolver, which is one import.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self._categories: Dict[str, Optional[int]] = {}
        self._brands: Dict[str, Optional[int]] = {}

    async def _category_id(self, name: Optional[str]) -> Optional[int]:
        if not name:
            return None
        if name not in self._categories:
            result = await self.session.execute(
                select(Category.id).where(Category.category_name == name)
            )
            self._categories[name] = result.scalars().first()
        return self._categories[name]

    async def _brand_id(self, name: Optional[str]) -> Optional[int]:
        if not name:
            return None
        if name not in self._brands:
            result = await self.session.execute(
                select(Brand.id).where(Brand.brand_name == name)
            )
            self._brands[name] = result.scalars().first()
        return self._brands[name]

    async def resolve(self, category_name: Optional[str], brand_name: Optional[str]) -> ResolvedReferences:
        category_id = await self._category_id(category_name)
        brand_id = await self._brand_id(brand_name)

        if category_id is None or brand_id is None:
            raise ReferenceNotFound(
                category_name,
                brand_name,
                missing_category=category_id is None,
                missing_brand=brand_id is None,
            )

        return ResolvedReferences(category_id, brand_id)
