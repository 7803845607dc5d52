"""HTTP tests for the import, pricing, export and product routes."""

from pathlib import Path
from unittest.mock import MagicMock, patch

from sqlalchemy import select

from catalog_api.models.product import Product
from tests.conftest import make_csv


def upload(content: bytes, name: str = "products.csv"):
    return {"file": (name, content, "text/csv")}


async def test_import_returns_report(client, session, catalog):
    content = make_csv(
        "Kettle,K-1,,,,,true,,Kitchen,Globex,",
        "Ghost,G-1,,,,,,,Garden,Acme,",
    )

    response = await client.post("/api/products/import", files=upload(content), data={"mode": "add"})

    assert response.status_code == 200
    body = response.json()
    assert body["rows_seen"] == 2
    assert body["rows_committed"] == 1
    assert body["rows_rejected"] == 1
    assert body["rejections"][0]["row_label"] == "Ghost"

    result = await session.execute(select(Product.product_name))
    assert result.scalars().all() == ["Kettle"]


async def test_import_rejects_unknown_mode(client, catalog):
    response = await client.post("/api/products/import", files=upload(make_csv()), data={"mode": "merge"})

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid mode: merge"}


async def test_import_requires_a_file(client):
    response = await client.post("/api/products/import", data={"mode": "add"})

    assert response.status_code == 400


async def test_import_parse_error_is_bad_request(client, catalog):
    response = await client.post(
        "/api/products/import", files=upload(b'productName\n"unterminated\n'), data={"mode": "replace"}
    )

    assert response.status_code == 400
    assert "Malformed CSV" in response.json()["error"]


async def test_async_import_queues_task(client, session, tmp_path, monkeypatch):
    from catalog_api.config import settings

    monkeypatch.setattr(settings, "upload_dir", str(tmp_path))
    with patch("catalog_api.api.routes.imports.import_products_task") as task:
        task.delay.return_value = MagicMock(id="celery-1")
        response = await client.post(
            "/api/products/import/async", files=upload(make_csv()), data={"mode": "replace"}
        )

    assert response.status_code == 202
    body = response.json()
    assert body["status"] == "pending"
    assert body["mode"] == "replace"

    file_path, task_id, mode = task.delay.call_args.args
    assert task_id == body["task_id"]
    assert mode == "replace"
    assert Path(file_path).read_bytes() == make_csv()

    status = await client.get(f"/api/products/import/tasks/{task_id}")
    assert status.status_code == 200
    assert status.json()["task_id"] == task_id


async def test_async_import_requires_csv_extension(client):
    response = await client.post(
        "/api/products/import/async", files=upload(make_csv(), name="products.txt"), data={"mode": "add"}
    )

    assert response.status_code == 400


async def test_unknown_import_task_is_404(client):
    response = await client.get("/api/products/import/tasks/nope")

    assert response.status_code == 404


async def test_pricing_upsert_over_http(client):
    first = await client.post("/api/products/pricing", json={
        "productId": 1, "msrp": 100, "startDate": "2024-01-01T00:00:00",
        "endDate": "2024-06-30T00:00:00", "createdBy": "ann",
    })
    second = await client.post("/api/products/pricing", json={
        "productId": 1, "msrp": 120, "startDate": "2024-03-01T00:00:00",
        "endDate": "2024-12-31T00:00:00", "createdBy": "bob",
    })

    assert first.status_code == 200
    assert second.json()["id"] == first.json()["id"]
    assert second.json()["created_by"] == "bob"

    listing = await client.get("/api/products/1/pricing")
    assert [p["msrp"] for p in listing.json()] == [120.0]


async def test_pricing_missing_fields_is_bad_request(client):
    response = await client.post("/api/products/pricing", json={"productId": 1})

    assert response.status_code == 400
    assert "msrp" in response.json()["error"]


async def test_inventory_upsert_over_http(client):
    response = await client.post("/api/products/inventory", json={
        "productId": 3, "bin": "A1", "location": "WH1", "source": "erp", "onHand": 4,
    })

    assert response.status_code == 200
    assert response.json()["on_hand"] == 4
    listing = await client.get("/api/products/3/inventory")
    assert len(listing.json()) == 1


async def test_export_with_query_labels(client, session, catalog):
    session.add(Product(product_name="Kettle", category_id=404, brand_id=catalog["brands"]["Acme"]))
    await session.commit()

    response = await client.get("/api/export", params={"product_name": "Name"})

    assert response.status_code == 200
    row = response.json()["products"][0]
    assert row["Name"] == "Kettle"
    assert row["category_name"] is None
    assert row["brand_name"] == "Acme"


async def test_export_group_as_csv(client, catalog):
    response = await client.get("/api/export/brands.csv")

    assert response.status_code == 200
    assert response.text.splitlines()[0] == "brand_id,brand_name,description"
    assert (await client.get("/api/export/nothing.csv")).status_code == 404


async def test_product_crud_and_weak_references(client):
    created = await client.post("/api/products", json={"product_name": "Lamp", "sku": "L-1"})
    product_id = created.json()["id"]
    await client.post("/api/products/pricing", json={
        "productId": product_id, "msrp": 5, "startDate": "2024-01-01T00:00:00", "createdBy": "ann",
    })

    assert (await client.delete(f"/api/products/{product_id}")).status_code == 204
    assert (await client.get(f"/api/products/{product_id}")).status_code == 404
    assert (await client.get(f"/api/products/{product_id}/reviews")).status_code == 404
    assert len((await client.get(f"/api/products/{product_id}/pricing")).json()) == 1


async def test_category_and_brand_routes(client):
    created = await client.post("/api/categories", json={"category_name": "Garden"})
    duplicate = await client.post("/api/categories", json={"category_name": "Garden"})
    brand = await client.post("/api/brands", json={"brand_name": "Initech"})
    found = await client.post("/api/brands/search", json={"brand_name": "init"})

    assert created.status_code == 201
    assert duplicate.status_code == 409
    assert brand.status_code == 201
    assert [b["brand_name"] for b in found.json()] == ["Initech"]
    assert (await client.delete(f"/api/categories/{created.json()['id']}")).status_code == 204


async def test_category_and_brand_updates(client):
    garden = (await client.post("/api/categories", json={"category_name": "Garden"})).json()
    await client.post("/api/categories", json={"category_name": "Tools"})
    brand = (await client.post("/api/brands", json={"brand_name": "Initech"})).json()

    updated = await client.put(f"/api/categories/{garden['id']}", json={"description": "Outdoor"})
    clash = await client.put(f"/api/categories/{garden['id']}", json={"category_name": "Tools"})
    renamed = await client.put(f"/api/brands/{brand['id']}", json={"brand_name": "Initrode"})

    assert updated.json()["description"] == "Outdoor"
    assert clash.status_code == 409
    assert renamed.json()["brand_name"] == "Initrode"
    assert (await client.put("/api/brands/999", json={"description": "x"})).status_code == 404
