import logging
from typing import Optional, List, Sequence
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from catalog_api.errors import StoreError, ValidationError
from catalog_api.models.product import Product
from catalog_api.models.review import Review
from catalog_api.models.asset import ProductAsset
from catalog_api.schemas.asset import AssetCreate
from catalog_api.schemas.product import ProductCreate, ProductUpdate, ProductSearch
from catalog_api.schemas.review import ReviewCreate

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = {"created_at", "updated_at", "product_name", "sku", "id"}


class ProductService:
    """Service for product CRUD and the product's satellite records.

    Product ids held by reviews, assets, inventory and pricing are weak
    references: deleting a product leaves them in place, and looking one up
    simply finds nothing.
    """

    @staticmethod
    async def create_product(session: AsyncSession, product_data: ProductCreate) -> Product:
        """Create a new product."""
        product = Product(**product_data.model_dump())
        try:
            session.add(product)
            await session.commit()
            await session.refresh(product)
        except SQLAlchemyError as e:
            await session.rollback()
            logger.exception("Error creating product %r", product_data.product_name)
            raise StoreError("Could not save product.") from e
        return product

    @staticmethod
    async def get_product(session: AsyncSession, product_id: int) -> Optional[Product]:
        """Get a product by ID."""
        result = await session.execute(
            select(Product).where(Product.id == product_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def list_products(
        session: AsyncSession,
        sort_by: str = "created_at",
        sort_order: str = "descending",
        product_name: Optional[str] = None,
        sku: Optional[str] = None
    ) -> List[Product]:
        """List products, optionally filtered by exact name or SKU."""
        if sort_by not in SORTABLE_FIELDS:
            raise ValidationError(f"Cannot sort by '{sort_by}'")
        column = getattr(Product, sort_by)
        order = column.asc() if sort_order in ("ascending", "asc") else column.desc()

        query = select(Product)
        if product_name is not None:
            query = query.where(Product.product_name == product_name)
        if sku is not None:
            query = query.where(Product.sku == sku)

        result = await session.execute(query.order_by(order, Product.id.desc()))
        return list(result.scalars().all())

    @staticmethod
    async def search_products(session: AsyncSession, criteria: ProductSearch) -> List[Product]:
        conditions = []
        if criteria.product_name:
            conditions.append(func.lower(Product.product_name).contains(criteria.product_name.lower()))
        if criteria.sku:
            conditions.append(Product.sku == criteria.sku)
        if criteria.category_id is not None:
            conditions.append(Product.category_id == criteria.category_id)
        if criteria.brand_id is not None:
            conditions.append(Product.brand_id == criteria.brand_id)

        result = await session.execute(select(Product).where(*conditions).order_by(Product.id))
        return list(result.scalars().all())

    @staticmethod
    async def update_product(
        session: AsyncSession,
        product_id: int,
        product_data: ProductUpdate
    ) -> Optional[Product]:
        """Update whitelisted product fields."""
        product = await ProductService.get_product(session, product_id)
        if not product:
            return None

        for key, value in product_data.model_dump(exclude_unset=True).items():
            setattr(product, key, value)

        try:
            await session.commit()
            await session.refresh(product)
        except SQLAlchemyError as e:
            await session.rollback()
            logger.exception("Error updating product %s", product_id)
            raise StoreError("Could not update product.") from e
        return product

    @staticmethod
    async def delete_product(session: AsyncSession, product_id: int) -> bool:
        """Delete a product. Satellite records are left untouched."""
        product = await ProductService.get_product(session, product_id)
        if not product:
            return False

        try:
            await session.delete(product)
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            logger.exception("Error deleting product %s", product_id)
            raise StoreError("Could not delete product.") from e
        return True

    @staticmethod
    async def save_product_reviews(
        session: AsyncSession,
        product_id: int,
        reviews: Sequence[ReviewCreate]
    ) -> Optional[List[Review]]:
        """Insert reviews and append their ids to the product's review list."""
        product = await ProductService.get_product(session, product_id)
        if not product:
            return None

        documents = [Review(product_id=product_id, **review.model_dump()) for review in reviews]
        try:
            session.add_all(documents)
            await session.flush()
            # JSON columns are not mutation-tracked; assign a new list
            product.review_ids = [*(product.review_ids or []), *(r.id for r in documents)]
            await session.commit()
            for review in documents:
                await session.refresh(review)
        except SQLAlchemyError as e:
            await session.rollback()
            logger.exception("Error saving reviews for product %s", product_id)
            raise StoreError("Could not save reviews.") from e
        return documents

    @staticmethod
    async def get_product_reviews(session: AsyncSession, product_id: int) -> Optional[List[Review]]:
        """Reviews in the product's stored order, or None for an unknown product."""
        product = await ProductService.get_product(session, product_id)
        if not product:
            return None
        if not product.review_ids:
            return []

        result = await session.execute(select(Review).where(Review.id.in_(product.review_ids)))
        by_id = {review.id: review for review in result.scalars().all()}
        return [by_id[rid] for rid in product.review_ids if rid in by_id]

    @staticmethod
    async def save_product_assets(session: AsyncSession, assets: Sequence[AssetCreate]) -> List[ProductAsset]:
        """Insert assets, numbering them per product when no sequence is given."""
        if not assets:
            raise ValidationError("Blank assets")

        next_seq = {}
        documents = []
        for asset in assets:
            data = asset.model_dump()
            if data["product_asset_id"] is None:
                if asset.product_id not in next_seq:
                    result = await session.execute(
                        select(func.max(ProductAsset.product_asset_id))
                        .where(ProductAsset.product_id == asset.product_id)
                    )
                    next_seq[asset.product_id] = (result.scalar() or 0) + 1
                data["product_asset_id"] = next_seq[asset.product_id]
                next_seq[asset.product_id] += 1
            documents.append(ProductAsset(**data))

        try:
            session.add_all(documents)
            await session.commit()
            for asset in documents:
                await session.refresh(asset)
        except SQLAlchemyError as e:
            await session.rollback()
            logger.exception("Error saving %d assets", len(documents))
            raise StoreError("Could not save assets.") from e
        return documents

    @staticmethod
    async def get_product_assets(session: AsyncSession, product_id: int) -> List[ProductAsset]:
        result = await session.execute(
            select(ProductAsset)
            .where(ProductAsset.product_id == product_id)
            .order_by(ProductAsset.product_asset_id)
        )
        return list(result.scalars().all())
