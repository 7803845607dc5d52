"""Tests for the denormalized catalog export."""

import json
from datetime import datetime

from sqlalchemy import select

from catalog_api.models.asset import AssetType, ProductAsset
from catalog_api.models.inventory import ProductInventory
from catalog_api.models.pricing import ProductPricing
from catalog_api.models.product import Product
from catalog_api.models.review import Review
from catalog_api.services.csv_processor import CSVProcessor
from catalog_api.services.export_service import (
    EXPORT_GROUPS,
    CatalogExporter,
    ExportLabels,
    rows_to_csv,
)
from catalog_api.services.product_importer import ProductImporter
from tests.conftest import make_csv


async def seed_product(session, catalog, **kwargs):
    product = Product(
        product_name=kwargs.pop("product_name", "Kettle"),
        sku=kwargs.pop("sku", "K-1"),
        category_id=kwargs.pop("category_id", catalog["categories"]["Kitchen"]),
        brand_id=kwargs.pop("brand_id", catalog["brands"]["Globex"]),
        specifications=kwargs.pop("specifications", {"color": "red", "weight": "1kg"}),
    )
    session.add(product)
    await session.commit()
    return product


def test_labels_fall_back_to_defaults():
    labels = ExportLabels({"product_name": "Name", "sku": ""})

    assert labels("product_name") == "Name"
    assert labels("sku") == "sku"
    assert labels.merged({"sku": "SKU"})("sku") == "SKU"
    assert labels.merged({"sku": "SKU"})("product_name") == "Name"


async def test_export_contains_every_group(session, catalog):
    data = await CatalogExporter().export_all(session)

    assert tuple(data) == EXPORT_GROUPS
    assert {row["category_name"] for row in data["categories"]} == {"Electronics", "Kitchen"}
    assert data["brands"][0] == {"brand_id": catalog["brands"]["Acme"], "brand_name": "Acme", "description": "Everything"}


async def test_products_carry_names_not_ids(session, catalog):
    await seed_product(session, catalog)

    data = await CatalogExporter().export_all(session)

    assert data["products"] == [{
        "product_name": "Kettle",
        "sku": "K-1",
        "category_name": "Kitchen",
        "brand_name": "Globex",
        "specifications": json.dumps({"color": "red", "weight": "1kg"}),
    }]
    spec_row = data["productSpecifications"][0]
    assert spec_row["color"] == "red"
    assert spec_row["weight"] == "1kg"
    assert spec_row["voltage"] is None


async def test_unresolved_references_export_as_none(session, catalog):
    await seed_product(session, catalog, category_id=999, brand_id=None)
    session.add_all([
        Review(product_id=555, user="ann", comment="gone"),
        ProductInventory(product_id=555, bin="A1", location="WH1", source="erp", on_hand=2, on_hold=0),
        ProductPricing(product_id=555, msrp=9.0, start_date=datetime(2024, 1, 1), created_by="t"),
        ProductAsset(product_id=555, product_asset_id=1, file_name="a.png", type=AssetType.IMAGE, extension="png", binary_data=b"x"),
    ])
    await session.commit()

    data = await CatalogExporter().export_all(session)

    assert data["products"][0]["category_name"] is None
    assert data["products"][0]["brand_name"] is None
    assert data["productReviews"] == [{"product_name": None, "user": "ann", "comment": "gone"}]
    assert data["productInventories"][0]["product_name"] is None
    assert data["productPricing"][0]["product_name"] is None
    assert data["productPricing"][0]["start_date"].startswith("2024-01-01")
    assert data["productAssets"] == [{"product_name": None, "file_name": "a.png", "type": "Image"}]


async def test_label_overrides_rename_columns(session, catalog):
    await seed_product(session, catalog)
    exporter = CatalogExporter(ExportLabels({"product_name": "Product", "category_name": "Category", "msrp": "MSRP"}))

    data = await exporter.export_all(session)

    assert data["products"][0]["Product"] == "Kettle"
    assert data["products"][0]["Category"] == "Kitchen"
    assert data["categories"][0]["Category"] in {"Electronics", "Kitchen"}
    assert "product_name" not in data["productSpecifications"][0]


async def test_export_then_reimport_round_trip(session, catalog):
    source = make_csv(
        'Kettle,K-1,,,,,true,false,Kitchen,Globex,"{""color"": ""red"", ""size"": ""1, 7L""}"',
        "Radio,R-1,,,,,,,Electronics,Acme,",
        'Lamp,L-1,,,,,,,Electronics,Globex,"{""material"": ""brass""}"',
    )
    await ProductImporter(session).import_additive(source)

    before = await snapshot(session)
    exporter = CatalogExporter(ExportLabels({
        "product_name": "productName",
        "category_name": "Category",
        "brand_name": "Brand",
    }))
    products_csv = rows_to_csv((await exporter.export_all(session))["products"])

    report = await ProductImporter(session).import_replace(products_csv)

    assert report.rows_rejected == 0
    assert await snapshot(session) == before


async def snapshot(session):
    result = await session.execute(select(Product).order_by(Product.sku))
    return [
        (p.sku, p.category_id, p.brand_id, p.specifications)
        for p in result.scalars().all()
    ]


def test_rows_to_csv_writes_header_and_blanks_for_none():
    text = rows_to_csv([{"a": 1, "b": None}, {"a": "x,y", "b": "z"}])

    assert text == 'a,b\n1,\n"x,y",z\n'
    assert rows_to_csv([]) == ""


def test_rows_to_csv_output_parses_back_unchanged():
    rows = [{
        "productName": 'Lamp "XL", brass',
        "shortDescription": "C:\\temp\\new",
        "specifications": '{"size": "15\\u0022"}',
    }]

    assert CSVProcessor.parse_rows(rows_to_csv(rows)) == rows
