"""Integration tests for Cart API endpoints via TestClient."""

import pytest
from fastapi.testclient import TestClient

from marketplace.api import create_app
from marketplace.ordering.cart import items


def _client(email):
    client = TestClient(create_app())
    assert client.post("/api/auth/register", json={"email": email, "password": "s3cret-pass"}).status_code == 201
    return client


@pytest.fixture()
def client():
    return _client("cart-api@example.com")


class TestCartEndpoints:
    def test_add_and_list(self, client, product_a):
        response = client.post("/api/cart", json={"product_id": product_a, "quantity": 2})
        assert response.status_code == 201
        item_id = response.json()["item_id"]

        lines = client.get("/api/cart").json()
        assert [(line["id"], line["quantity"]) for line in lines] == [(item_id, 2)]
        assert lines[0]["product"]["name"] == "Product A"

    def test_adding_twice_merges(self, client, product_a):
        client.post("/api/cart", json={"product_id": product_a, "quantity": 1})
        client.post("/api/cart", json={"product_id": product_a, "quantity": 2})
        lines = client.get("/api/cart").json()
        assert len(lines) == 1
        assert lines[0]["quantity"] == 3

    def test_summary(self, client, product_a, product_b):
        client.post("/api/cart", json={"product_id": product_a, "quantity": 2})
        client.post("/api/cart", json={"product_id": product_b})

        summary = client.get("/api/cart/summary").json()
        assert summary["subtotal"] == 25.0
        assert summary["item_count"] == 3
        assert len(summary["items"]) == 2

    def test_patch_to_zero_removes(self, client, product_a):
        item_id = client.post("/api/cart", json={"product_id": product_a}).json()["item_id"]
        assert client.patch(f"/api/cart/{item_id}", json={"quantity": 0}).status_code == 200
        assert client.get("/api/cart").json() == []

    def test_delete_line_and_clear(self, client, product_a, product_b):
        item_id = client.post("/api/cart", json={"product_id": product_a}).json()["item_id"]
        client.post("/api/cart", json={"product_id": product_b})

        assert client.delete(f"/api/cart/{item_id}").status_code == 200
        assert len(client.get("/api/cart").json()) == 1

        assert client.delete("/api/cart").status_code == 200
        assert client.get("/api/cart").json() == []

    def test_missing_product_is_404(self, client):
        assert client.post("/api/cart", json={"product_id": "ghost"}).status_code == 404

    def test_zero_quantity_is_rejected(self, client, product_a):
        assert client.post("/api/cart", json={"product_id": product_a, "quantity": 0}).status_code == 422

    def test_inactive_product_is_400(self, client, vendor_id, product_a):
        from protean import current_domain

        from marketplace.catalogue.product.lifecycle import DeactivateProduct

        current_domain.process(DeactivateProduct(product_id=product_a, vendor_id=vendor_id), asynchronous=False)
        assert client.post("/api/cart", json={"product_id": product_a}).status_code == 400

    def test_other_users_line_is_untouchable(self, client, product_a):
        item_id = client.post("/api/cart", json={"product_id": product_a}).json()["item_id"]
        intruder = _client("intruder@example.com")
        intruder.post("/api/cart", json={"product_id": product_a})

        assert intruder.delete(f"/api/cart/{item_id}").status_code == 400
        assert len(client.get("/api/cart").json()) == 1

    def test_requires_login(self):
        assert TestClient(create_app()).get("/api/cart").status_code == 401


class TestConcurrentCartWrites:
    def test_lost_race_is_409_and_cart_unchanged(self, client, product_a, product_b, monkeypatch):
        client.post("/api/cart", json={"product_id": product_a})
        user_id = client.get("/api/auth/user").json()["id"]
        stale = items.load_cart(user_id)
        client.post("/api/cart", json={"product_id": product_b})

        monkeypatch.setattr(items, "load_cart", lambda user_id: stale)
        response = client.post("/api/cart", json={"product_id": product_a, "quantity": 4})
        assert response.status_code == 409
        monkeypatch.undo()

        lines = client.get("/api/cart").json()
        assert sorted((line["product_id"], line["quantity"]) for line in lines) == sorted(
            [(product_a, 1), (product_b, 1)]
        )
