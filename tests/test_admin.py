# tests/test_admin.py
from storefront.database import StorageError
from storefront.models.product import Product


def _form(**overrides):
    data = {
        "name": "Ceramic Planter",
        "category": "Home & Garden",
        "price": "349.00",
        "rating": "4.2",
        "imageUrl": "https://img.example.com/planter.jpg",
        "referralLink": "https://shop.example.com/dp/planter",
        "details": "Glazed planter with drainage hole",
        "specifications": "",
        "aboutItem": "",
        "freeDelivery": "on",
    }
    data.update(overrides)
    return {k: v for k, v in data.items() if v is not None}


def _products(store):
    return {k: Product.from_record(v, k) for k, v in store.snapshot("products").items()}


def test_admin_panel_lists_products(client, seed_product):
    seed_product(name="Ceramic Planter")
    seed_product(name="Desk Lamp")
    resp = client.get("/admin")
    assert resp.status_code == 200
    assert "Products (2)" in resp.text
    assert "#2" in resp.text


def test_admin_search(client, seed_product):
    seed_product(name="Ceramic Planter", category="Home & Garden")
    seed_product(name="Desk Lamp", category="Electronics")
    html = client.get("/admin", params={"search": "lamp"}).text
    assert "Products (1)" in html
    assert "Desk Lamp" in html


def test_admin_create_via_form(client, store):
    resp = client.post("/admin/products", data=_form(), follow_redirects=False)
    assert resp.status_code == 303
    assert "notice=Product+added+successfully" in resp.headers["location"]

    products = list(_products(store).values())
    assert len(products) == 1
    product = products[0]
    assert product.price == 349.0
    assert product.free_delivery is True
    assert product.return_available is False
    assert product.created_at == product.updated_at

    page = client.get(resp.headers["location"]).text
    assert "Product added successfully!" in page
    assert "Ceramic Planter" in page


def test_admin_create_validation_error_blocks_write(client, store):
    resp = client.post("/admin/products", data=_form(price="abc", imageUrl="nope"))
    assert resp.status_code == 422
    assert store.snapshot("products") == {}
    # the form comes back with what was typed
    assert 'value="Ceramic Planter"' in resp.text
    assert "Add New Product" in resp.text
    # a re-rendered form holds unsaved input, so live reload stays paused
    assert 'data-dirty="1"' in resp.text


def test_admin_edit_prefills_form(client, seed_product):
    pid = seed_product(name="Desk Lamp", price=1200.0)
    html = client.get("/admin", params={"edit": pid}).text
    assert "Edit Product" in html
    assert 'value="Desk Lamp"' in html
    assert 'value="1200"' in html
    assert f'action="/admin/products/{pid}"' in html
    # untouched until the operator types; the form flags itself on input
    assert 'data-dirty="1"' not in html
    assert "this.dataset.dirty" in html


def test_admin_edit_unknown_product(client):
    html = client.get("/admin", params={"edit": "missing"}).text
    assert "Product not found." in html
    assert "Edit Product" not in html


def test_admin_update_preserves_created_at(client, store, seed_product):
    pid = seed_product(created="2024-01-01T00:00:00", name="Desk Lamp")
    created = _products(store)[pid].created_at

    resp = client.post(f"/admin/products/{pid}", data=_form(name="Desk Lamp Pro", price="10"),
                       follow_redirects=False)
    assert resp.status_code == 303
    assert "updated" in resp.headers["location"]

    product = _products(store)[pid]
    assert product.name == "Desk Lamp Pro"
    assert product.price == 10.0
    assert product.created_at == created
    assert product.updated_at > created


def test_admin_update_unknown_product(client):
    resp = client.post("/admin/products/missing", data=_form(), follow_redirects=False)
    assert resp.status_code == 303
    assert "error=" in resp.headers["location"]


def test_admin_delete(client, store, seed_product):
    pid = seed_product()
    resp = client.post(f"/admin/products/{pid}/delete", follow_redirects=False)
    assert resp.status_code == 303
    assert "deleted" in resp.headers["location"]
    assert store.snapshot("products") == {}

    resp = client.post(f"/admin/products/{pid}/delete", follow_redirects=False)
    assert "error=" in resp.headers["location"]


def test_admin_storage_failure_leaves_view_unchanged(client, store, seed_product, monkeypatch):
    seed_product(name="Existing")

    def failing_create(path, record):
        raise StorageError("network down")

    monkeypatch.setattr(store, "create", failing_create)
    resp = client.post("/admin/products", data=_form())
    assert resp.status_code == 503
    assert "Error saving product. Please try again." in resp.text
    assert "Products (1)" in resp.text
    assert 'data-dirty="1"' in resp.text
