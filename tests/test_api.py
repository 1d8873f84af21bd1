"""HTTP tests for the inventory and image routes."""
from unittest.mock import AsyncMock

from core.errors import DocumentStoreError
from core.inventory import InventoryService
from db.document_store import DocumentStore
from main import app
from routers.inventory import get_inventory_service


async def _add(client, name, quantity="1", category="", **kwargs):
    return await client.post("/inventory/", data={"name": name, "quantity": quantity, "category": category}, **kwargs)


async def test_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


async def test_add_then_add_again(client):
    resp = await _add(client, "apple", "3", "fruit")
    assert resp.status_code == 200
    body = resp.json()
    assert body["result"]["ok"] is True
    assert body["result"]["action"] == "create"
    assert body["items"] == [{"name": "apple", "quantity": 3, "category": "fruit", "image_url": ""}]

    resp = await _add(client, "apple", "2", "fruit")
    body = resp.json()
    assert body["result"]["action"] == "update"
    assert body["items"] == [{"name": "apple", "quantity": 5, "category": "fruit", "image_url": ""}]


async def test_search_filters_items_but_not_categories(client):
    await _add(client, "apple", "1", "fruit")
    await _add(client, "banana", "1", "")
    await _add(client, "hammer", "1", "tools")

    resp = await client.get("/inventory/", params={"search": "App"})

    assert resp.status_code == 200
    body = resp.json()
    assert [i["name"] for i in body["items"]] == ["apple"]
    assert body["categories"] == ["fruit", "Unknown", "tools"]


async def test_categories_endpoint(client):
    await _add(client, "hammer", "1", "tools")
    await _add(client, "apple", "1", "fruit")
    await _add(client, "nail", "1", "tools")

    resp = await client.get("/inventory/categories")

    assert resp.json() == ["tools", "fruit"]


async def test_malformed_quantity_defaults_to_one(client):
    resp = await _add(client, "apple", "lots", "fruit")
    assert resp.json()["items"][0]["quantity"] == 1

    resp = await client.post("/inventory/", data={"name": "pear"})
    assert resp.status_code == 200
    assert resp.json()["result"]["record"]["quantity"] == 1


async def test_blank_name_is_rejected(client):
    resp = await _add(client, "   ", "2")
    assert resp.status_code == 422

    listing = await client.get("/inventory/")
    assert listing.json()["items"] == []


async def test_remove_until_gone(client):
    await _add(client, "apple", "3", "fruit")

    quantities = []
    for _ in range(3):
        resp = await client.post("/inventory/apple/remove")
        assert resp.status_code == 200
        quantities.append([i["quantity"] for i in resp.json()["items"]])

    assert quantities == [[2], [1], []]
    assert resp.json()["result"]["action"] == "delete"

    resp = await client.post("/inventory/apple/remove")
    assert resp.status_code == 200
    assert resp.json()["result"]["action"] == "noop"


async def test_photo_is_stored_and_served(client, png_bytes):
    resp = await _add(
        client, "apple", "2", "fruit",
        files={"photo": ("apple.png", png_bytes, "image/png")},
    )
    assert resp.status_code == 200
    image_url = resp.json()["result"]["record"]["image_url"]
    assert image_url.startswith("/images/serve/images/")
    assert image_url.endswith("_apple.png")

    served = await client.get(image_url)
    assert served.status_code == 200
    assert served.content == png_bytes
    assert served.headers["content-type"] == "image/png"

    # partial decrement loses the photo
    resp = await client.post("/inventory/apple/remove")
    assert resp.json()["items"][0]["image_url"] == ""


async def test_non_image_upload_rejected(client):
    resp = await _add(client, "notes", "1", "", files={"photo": ("notes.txt", b"hello" * 50, "text/plain")})
    assert resp.status_code == 400


async def test_missing_image_is_404(client):
    resp = await client.get("/images/serve/images/1_nothing.png")
    assert resp.status_code == 404


async def test_name_with_slash_is_rejected(client):
    resp = await _add(client, "1/2 inch bolts", "4", "hardware")
    assert resp.status_code == 422

    listing = await client.get("/inventory/")
    assert listing.json()["items"] == []


async def test_name_surrounding_whitespace_is_trimmed(client):
    await _add(client, " apple ", "1", "fruit")

    resp = await client.post("/inventory/apple/remove")

    assert resp.json()["result"]["action"] == "delete"


async def test_committed_add_is_reported_when_refetch_fails(client):
    documents = AsyncMock(spec=DocumentStore)
    documents.get.return_value = None
    documents.list.side_effect = DocumentStoreError("timeout")
    app.dependency_overrides[get_inventory_service] = lambda: InventoryService(documents)

    resp = await _add(client, "apple", "2", "fruit")

    documents.set.assert_awaited_once()
    assert resp.status_code == 503
    body = resp.json()
    assert body["refreshed"] is False
    assert body["result"]["ok"] is True
    assert body["result"]["action"] == "create"
    assert body["result"]["record"]["quantity"] == 2
    assert body["items"] == []


async def test_store_failure_is_reported_as_failed_result(client):
    documents = AsyncMock(spec=DocumentStore)
    documents.get.side_effect = DocumentStoreError("connection refused")
    documents.list.return_value = []
    app.dependency_overrides[get_inventory_service] = lambda: InventoryService(documents)

    resp = await _add(client, "apple", "1", "fruit")

    assert resp.status_code == 503
    body = resp.json()
    assert body["result"]["ok"] is False
    assert "connection refused" in body["result"]["reason"]
    assert body["items"] == []


async def test_listing_failure_is_503(client):
    documents = AsyncMock(spec=DocumentStore)
    documents.list.side_effect = DocumentStoreError("timeout")
    app.dependency_overrides[get_inventory_service] = lambda: InventoryService(documents)

    resp = await client.get("/inventory/")

    assert resp.status_code == 503
    assert "timeout" in resp.json()["detail"]
