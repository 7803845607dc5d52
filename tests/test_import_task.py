"""Worker-side import runs against a file-backed database."""

import json
from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from catalog_api.config import settings
from catalog_api.database import Base
from catalog_api.errors import CatalogError, ParseError, StoreError
from catalog_api.models.category import Category
from catalog_api.models.brand import Brand
from catalog_api.models.import_task import ImportTask
from catalog_api.models.product import Product
from catalog_api.tasks.import_task import get_user_friendly_error, run_import
from tests.conftest import make_csv


@pytest.fixture
async def worker_db(tmp_path, monkeypatch):
    url = f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}"
    monkeypatch.setattr(settings, "database_url", url)

    engine = create_async_engine(url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with maker() as session:
        session.add_all([Category(category_name="Kitchen"), Brand(brand_name="Acme")])
        await session.commit()
    yield maker
    await engine.dispose()


async def fetch_task(maker, task_id):
    async with maker() as session:
        result = await session.execute(select(ImportTask).where(ImportTask.task_id == task_id))
        return result.scalar_one()


async def test_run_import_records_completion(worker_db, tmp_path):
    csv_path = tmp_path / "upload.csv"
    csv_path.write_bytes(make_csv(
        "Kettle,K-1,,,,,,,Kitchen,Acme,",
        "Ghost,G-1,,,,,,,Garden,Acme,",
    ))
    task = MagicMock()

    with patch("catalog_api.tasks.import_task.publish") as publish:
        report = await run_import(task, str(csv_path), "task-1", "add")

    assert report["rows_committed"] == 1
    assert report["rows_rejected"] == 1

    record = await fetch_task(worker_db, "task-1")
    assert record.status == "completed"
    assert record.total_rows == 2
    assert record.committed_rows == 1
    assert record.rejected_rows == 1
    assert json.loads(record.errors)[0]["row_label"] == "Ghost"

    final = publish.call_args.args[0]
    assert final["type"] == "complete"
    assert final["success"] is True
    assert final["success_count"] == 1
    task.update_progress.assert_called_with(2, 2, "task-1")

    async with worker_db() as session:
        names = (await session.execute(select(Product.product_name))).scalars().all()
    assert names == ["Kettle"]


async def test_run_import_marks_failure(worker_db, tmp_path):
    csv_path = tmp_path / "broken.csv"
    csv_path.write_bytes(b'productName\n"unterminated\n')

    with patch("catalog_api.tasks.import_task.publish") as publish:
        with pytest.raises(ParseError):
            await run_import(MagicMock(), str(csv_path), "task-2", "replace")

    record = await fetch_task(worker_db, "task-2")
    assert record.status == "failed"
    assert json.loads(record.errors)[0]["error"].startswith("Invalid CSV format")
    assert publish.call_args.args[0]["success"] is False


@pytest.mark.parametrize("error, expected", [
    (ParseError("bad quote"), "Invalid CSV format: bad quote"),
    (StoreError("boom"), "Database error while saving products. No products from this file were saved."),
    (CatalogError("Invalid mode: x"), "Invalid mode: x"),
    (FileNotFoundError("gone"), "Unable to access the uploaded file. Please try uploading again."),
])
def test_user_friendly_errors(error, expected):
    assert get_user_friendly_error(error) == expected


def test_unexpected_errors_get_generic_message():
    assert get_user_friendly_error(RuntimeError("x")).startswith("An error occurred")
