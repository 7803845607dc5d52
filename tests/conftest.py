"""Shared fixtures: an in-memory catalog database and an HTTP client bound to it."""

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import catalog_api.models  # noqa: F401
from catalog_api.database import Base, get_db
from catalog_api.models.brand import Brand
from catalog_api.models.category import Category


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session(engine):
    maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with maker() as session:
        yield session


@pytest.fixture
async def catalog(session):
    """Two categories and two brands the import rows can reference."""
    categories = [
        Category(category_name="Electronics", description="Gadgets"),
        Category(category_name="Kitchen", description="Cookware"),
    ]
    brands = [
        Brand(brand_name="Acme", description="Everything"),
        Brand(brand_name="Globex", description="Global"),
    ]
    session.add_all(categories + brands)
    await session.commit()
    return {
        "categories": {c.category_name: c.id for c in categories},
        "brands": {b.brand_name: b.id for b in brands},
    }


@pytest.fixture
async def client(session):
    from catalog_api.main import app

    async def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


HEADER = (
    "productName,sku,shortDescription,longDescription,shippingNotes,warrantyInfo,"
    "visibleToFrontEnd,featuredProduct,Category,Brand,specifications"
)


def make_csv(*rows: str) -> bytes:
    """Build an import file from data lines under the standard header."""
    return ("\n".join((HEADER,) + rows) + "\n").encode("utf-8")
