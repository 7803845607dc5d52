"""Tests for additive and replace-mode CSV product imports."""

import logging
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from catalog_api.errors import InvalidImportMode, ParseError, StoreError
from catalog_api.models.product import Product
from catalog_api.services.product_importer import ProductImporter
from tests.conftest import make_csv

VALID_ROWS = (
    'Kettle,K-1,Short,Long,Ship,Warranty,true,false,Kitchen,Globex,"{""color"": ""red""}"',
    "Radio,R-1,,,,,false,true,Electronics,Acme,",
    'Toaster,T-1,,,,,,,Kitchen,Acme,"{""wattage"": ""900W""}"',
)


async def product_names(session):
    result = await session.execute(select(Product.product_name).order_by(Product.id))
    return list(result.scalars().all())


async def test_additive_import_commits_every_valid_row(session, catalog):
    report = await ProductImporter(session).import_additive(make_csv(*VALID_ROWS))

    assert report.mode == "add"
    assert report.rows_seen == 3
    assert report.rows_committed == 3
    assert report.rows_rejected == 0
    assert await product_names(session) == ["Kettle", "Radio", "Toaster"]

    result = await session.execute(select(Product).where(Product.sku == "K-1"))
    kettle = result.scalar_one()
    assert kettle.category_id == catalog["categories"]["Kitchen"]
    assert kettle.brand_id == catalog["brands"]["Globex"]
    assert kettle.specifications == {"color": "red"}
    assert kettle.visible_to_front_end is True
    assert kettle.featured_product is False


async def test_bad_rows_are_skipped_and_reported(session, catalog, caplog):
    source = make_csv(
        VALID_ROWS[0],
        "Ghost,G-1,,,,,,,Garden,Acme,",
        VALID_ROWS[1],
        "Phantom,P-1,,,,,,,Kitchen,Initech,not json",
        VALID_ROWS[2],
    )

    with caplog.at_level(logging.INFO):
        report = await ProductImporter(session).import_additive(source)

    assert report.rows_seen == 5
    assert report.rows_rejected == 2
    assert report.rows_committed == report.rows_seen - report.rows_rejected
    assert [(r.row_number, r.row_label) for r in report.rejections] == [(2, "Ghost"), (4, "Phantom")]
    assert "Garden" in report.rejections[0].reason
    assert "Initech" in report.rejections[1].reason
    assert await product_names(session) == ["Kettle", "Radio", "Toaster"]

    assert "Skipping product: Ghost" in caplog.text
    assert "Skipping product: Phantom" in caplog.text
    assert "3 products added successfully." in caplog.text


async def test_additive_import_keeps_existing_products(session, catalog):
    session.add(Product(product_name="Existing"))
    await session.commit()

    await ProductImporter(session).import_additive(make_csv(VALID_ROWS[1]))

    assert await product_names(session) == ["Existing", "Radio"]


async def test_no_valid_rows_means_no_write(session, catalog, caplog):
    with caplog.at_level(logging.WARNING):
        report = await ProductImporter(session).import_additive(make_csv("Ghost,G-1,,,,,,,Garden,Acme,"))

    assert report.rows_committed == 0
    assert report.rows_rejected == 1
    assert await product_names(session) == []
    assert "No valid products to add." in caplog.text


async def test_replace_import_clears_existing_products(session, catalog):
    session.add(Product(product_name="Old"))
    await session.commit()

    report = await ProductImporter(session).import_replace(make_csv(*VALID_ROWS))

    assert report.mode == "replace"
    assert await product_names(session) == ["Kettle", "Radio", "Toaster"]


async def test_replace_with_no_valid_rows_leaves_collection_empty(session, catalog):
    session.add_all([Product(product_name="Old 1"), Product(product_name="Old 2")])
    await session.commit()

    report = await ProductImporter(session).import_replace(make_csv("Ghost,G-1,,,,,,,Garden,Acme,"))

    assert report.rows_committed == 0
    assert await product_names(session) == []


async def test_parse_failure_commits_nothing_and_keeps_existing(session, catalog):
    session.add(Product(product_name="Old"))
    await session.commit()

    with pytest.raises(ParseError):
        await ProductImporter(session).import_replace(make_csv(VALID_ROWS[0], '"Broken,B-1'))

    assert await product_names(session) == ["Old"]


async def test_unknown_mode_fails_before_parsing(session, catalog):
    with pytest.raises(InvalidImportMode) as exc_info:
        await ProductImporter(session).run(b'"not, a valid csv', "merge")

    assert exc_info.value.message == "Invalid mode: merge"


@pytest.mark.parametrize("mode,expected", [("add", ["Old", "Radio"]), ("replace", ["Radio"])])
async def test_run_dispatches_on_mode(session, catalog, mode, expected):
    session.add(Product(product_name="Old"))
    await session.commit()

    await ProductImporter(session).run(make_csv(VALID_ROWS[1]), mode)

    assert await product_names(session) == expected


async def test_bulk_insert_failure_is_a_store_error(session, catalog, monkeypatch):
    monkeypatch.setattr(session, "commit", AsyncMock(side_effect=SQLAlchemyError("disk full")))

    with pytest.raises(StoreError) as exc_info:
        await ProductImporter(session).import_additive(make_csv(*VALID_ROWS))

    assert "none were committed" in exc_info.value.message
    monkeypatch.undo()
    result = await session.execute(select(func.count()).select_from(Product))
    assert result.scalar() == 0


async def test_progress_is_reported(session, catalog):
    calls = []
    importer = ProductImporter(session, on_progress=lambda done, total: calls.append((done, total)))
    importer.PROGRESS_EVERY = 2

    await importer.import_additive(make_csv(*VALID_ROWS))

    assert calls == [(2, 3), (3, 3)]
