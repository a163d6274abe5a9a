API = "/api/v1"


def test_create_and_fetch_product(client, sample_product_data):
    response = client.post(f"{API}/products", json=sample_product_data)

    assert response.status_code == 201
    created = response.json()
    assert created["sku"] == "SKU-SUNF-LITE-00001"
    assert created["stock"] == 0
    assert created["is_low_stock"] is True

    fetched = client.get(f"{API}/products/{created['id']}").json()
    assert fetched["name"] == "Sunflower Oil"
    assert fetched["reorder_level"] == 4


def test_list_products_includes_derived_stock(client, sample_product_data):
    product = client.post(f"{API}/products", json=sample_product_data).json()
    client.post(f"{API}/inventory/in", json={"product_id": product["id"], "quantity": 9})

    [row] = client.get(f"{API}/products").json()

    assert row["stock"] == 9
    assert row["is_low_stock"] is False


def test_duplicate_sku_conflict(client, sample_product_data):
    first = client.post(f"{API}/products", json={**sample_product_data, "sku": "OIL-1"})
    second = client.post(f"{API}/products", json={**sample_product_data, "sku": "oil-1"})

    assert first.status_code == 201
    assert second.status_code == 409
    assert second.json()["code"] == "duplicate_sku"


def test_create_product_validation(client):
    assert client.post(f"{API}/products", json={"name": ""}).status_code == 422
    assert client.post(f"{API}/products", json={"name": "Rice", "reorder_level": -1}).status_code == 422


def test_update_product(client, sample_product_data):
    product = client.post(f"{API}/products", json=sample_product_data).json()

    response = client.put(f"{API}/products/{product['id']}", json={"reorder_level": 10, "unit": "L"})

    assert response.status_code == 200
    body = response.json()
    assert body["reorder_level"] == 10
    assert body["unit"] == "L"
    assert body["name"] == "Sunflower Oil"
    assert body["sku"] == product["sku"]


def test_update_missing_product(client):
    response = client.put(f"{API}/products/42", json={"name": "Ghost"})
    assert response.status_code == 404


def test_root(client):
    assert client.get("/").json()["docs"] == "/docs"
