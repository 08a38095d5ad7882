"""Integration tests for Product API endpoints.

Covers:
- CRUD operations via /api/v1/products/.
- Success envelopes (200, 201, 204).
- Taxonomy error mapping (400, 404).
"""

from __future__ import annotations

import pytest

from modules.products.models import Product

pytestmark = pytest.mark.integration

MISSING_ID = "00000000-0000-0000-0000-000000000000"


@pytest.fixture()
def sample_product(make_product):
    return make_product(name="Widget Alpha", description="A fine widget", stock_quantity=100)


def _url(product_id=None) -> str:
    if product_id is None:
        return "/api/v1/products/"
    return f"/api/v1/products/{product_id}/"


# ===========================================================================
# LIST
# ===========================================================================


class TestProductList:
    def test_list_empty(self, api_client):
        response = api_client.get(_url())
        assert response.status_code == 200
        assert response.data == {
            "success": True,
            "message": "Operation completed successfully",
            "data": [],
        }

    def test_list_returns_products(self, api_client, sample_product):
        response = api_client.get(_url())
        assert response.status_code == 200
        assert len(response.data["data"]) == 1
        assert response.data["data"][0]["name"] == "Widget Alpha"

    def test_list_excludes_deleted(self, api_client, sample_product, make_product):
        make_product(name="Gone").delete()
        response = api_client.get(_url())
        assert [p["name"] for p in response.data["data"]] == ["Widget Alpha"]


# ===========================================================================
# RETRIEVE
# ===========================================================================


class TestProductRetrieve:
    def test_retrieve_existing(self, api_client, sample_product):
        response = api_client.get(_url(sample_product.id))
        assert response.status_code == 200
        data = response.data["data"]
        assert data["id"] == str(sample_product.id)
        assert data["stock_quantity"] == 100
        assert data["is_low_stock"] is False
        assert "created_at" in data
        assert "updated_at" in data

    def test_retrieve_not_found(self, api_client):
        response = api_client.get(_url(MISSING_ID))
        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["code"] == "PRODUCT_NOT_FOUND"
        assert body["details"] == {"id": MISSING_ID}

    def test_retrieve_malformed_id_is_not_found(self, api_client):
        response = api_client.get(_url("not-a-uuid"))
        assert response.status_code == 404
        assert response.json()["code"] == "PRODUCT_NOT_FOUND"


# ===========================================================================
# CREATE
# ===========================================================================


class TestProductCreate:
    def test_create_success(self, api_client):
        payload = {
            "name": "New Product",
            "description": "Brand new",
            "stock_quantity": 50,
            "low_stock_threshold": 10,
        }
        response = api_client.post(_url(), payload, format="json")

        assert response.status_code == 201
        assert response.data["success"] is True
        assert response.data["message"] == "Resource created successfully"
        assert response.data["data"]["name"] == "New Product"
        assert Product.objects.filter(name="New Product").exists()

    def test_create_with_defaults(self, api_client):
        response = api_client.post(_url(), {"name": "Bare"}, format="json")

        assert response.status_code == 201
        data = response.data["data"]
        assert data["description"] == ""
        assert data["stock_quantity"] == 0
        assert data["low_stock_threshold"] == 0
        assert data["is_low_stock"] is True

    def test_create_missing_name(self, api_client):
        response = api_client.post(_url(), {"stock_quantity": 10}, format="json")

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "MISSING_REQUIRED_DATA"
        assert body["details"] == {"field": "name"}
        assert not Product.objects.exists()

    def test_create_null_name(self, api_client):
        response = api_client.post(
            _url(), {"name": None, "stock_quantity": 10}, format="json"
        )

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "MISSING_REQUIRED_DATA"
        assert body["details"] == {"field": "name"}
        assert not Product.objects.exists()

    def test_create_negative_stock(self, api_client):
        payload = {"name": "Bad", "stock_quantity": -1}
        response = api_client.post(_url(), payload, format="json")

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_INPUT"
        assert not Product.objects.exists()

    def test_create_wrong_type(self, api_client):
        payload = {"name": "Bad", "stock_quantity": "lots"}
        response = api_client.post(_url(), payload, format="json")

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert body["details"]["errors"][0]["field"] == "stock_quantity"

    def test_create_malformed_json(self, api_client):
        response = api_client.post(_url(), data="{", content_type="application/json")

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["code"] == "INVALID_INPUT"
        assert body["message"].startswith("invalid request body format")

    def test_create_non_object_body(self, api_client):
        response = api_client.post(_url(), [1, 2], format="json")

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_INPUT"


# ===========================================================================
# UPDATE
# ===========================================================================


class TestProductUpdate:
    def test_put_replaces_all_fields(self, api_client, sample_product):
        payload = {"name": "Widget Beta", "stock_quantity": 3}
        response = api_client.put(_url(sample_product.id), payload, format="json")

        assert response.status_code == 200
        data = response.data["data"]
        assert data["name"] == "Widget Beta"
        assert data["description"] == ""
        assert data["stock_quantity"] == 3
        assert data["low_stock_threshold"] == 0

    def test_put_keeps_id_and_created_at(self, api_client, sample_product):
        response = api_client.put(
            _url(sample_product.id), {"name": "Widget Beta"}, format="json"
        )

        sample_product.refresh_from_db()
        assert response.data["data"]["id"] == str(sample_product.id)
        assert sample_product.name == "Widget Beta"

    def test_put_not_found(self, api_client):
        response = api_client.put(_url(MISSING_ID), {"name": "Ghost"}, format="json")
        assert response.status_code == 404
        assert response.json()["code"] == "PRODUCT_NOT_FOUND"

    def test_put_empty_name_leaves_record(self, api_client, sample_product):
        response = api_client.put(_url(sample_product.id), {"name": ""}, format="json")

        assert response.status_code == 400
        sample_product.refresh_from_db()
        assert sample_product.name == "Widget Alpha"

    def test_put_null_name_leaves_record(self, api_client, sample_product):
        response = api_client.put(_url(sample_product.id), {"name": None}, format="json")

        assert response.status_code == 400
        assert response.json()["code"] == "MISSING_REQUIRED_DATA"
        sample_product.refresh_from_db()
        assert sample_product.name == "Widget Alpha"

    def test_patch_not_allowed(self, api_client, sample_product):
        response = api_client.patch(
            _url(sample_product.id), {"name": "Partial"}, format="json"
        )
        assert response.status_code == 405
        assert response.json()["code"] == "METHOD_NOT_ALLOWED"


# ===========================================================================
# DELETE
# ===========================================================================


class TestProductDelete:
    def test_delete_success(self, api_client, sample_product):
        response = api_client.delete(_url(sample_product.id))

        assert response.status_code == 204
        assert not response.content
        sample_product.refresh_from_db()
        assert sample_product.is_deleted is True

    def test_deleted_product_is_not_found(self, api_client, sample_product):
        api_client.delete(_url(sample_product.id))

        assert api_client.get(_url(sample_product.id)).status_code == 404
        assert api_client.delete(_url(sample_product.id)).status_code == 404

    def test_delete_not_found(self, api_client):
        response = api_client.delete(_url(MISSING_ID))
        assert response.status_code == 404
        assert response.json()["code"] == "PRODUCT_NOT_FOUND"
