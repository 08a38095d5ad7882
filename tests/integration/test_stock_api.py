"""Integration tests for the stock adjustment endpoints."""

from __future__ import annotations

import pytest

pytestmark = pytest.mark.integration

MISSING_ID = "00000000-0000-0000-0000-000000000000"


def _increment(client, product_id, amount):
    return client.post(
        f"/api/v1/products/{product_id}/increment-stock/",
        {"stock_increment": amount},
        format="json",
    )


def _decrement(client, product_id, amount):
    return client.post(
        f"/api/v1/products/{product_id}/decrement-stock/",
        {"stock_decrement": amount},
        format="json",
    )


class TestIncrementStock:
    def test_increment(self, api_client, make_product):
        product = make_product(stock_quantity=10)

        response = _increment(api_client, product.id, 5)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Stock incremented successfully"
        assert body["data"]["increment_amount"] == 5
        assert body["data"]["product"]["stock_quantity"] == 15
        product.refresh_from_db()
        assert product.stock_quantity == 15

    @pytest.mark.parametrize("amount", [0, -3])
    def test_non_positive_amount(self, api_client, make_product, amount):
        product = make_product(stock_quantity=10)

        response = _increment(api_client, product.id, amount)

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_INPUT"

    def test_missing_amount(self, api_client, make_product):
        product = make_product()
        response = api_client.post(
            f"/api/v1/products/{product.id}/increment-stock/", {}, format="json"
        )
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_INPUT"

    def test_non_integer_amount(self, api_client, make_product):
        product = make_product()
        response = _increment(api_client, product.id, "many")
        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "INVALID_INPUT"
        assert body["message"].startswith("invalid request body format")

    def test_null_amount(self, api_client, make_product):
        product = make_product(stock_quantity=10)
        response = _increment(api_client, product.id, None)
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_INPUT"

    def test_amount_beyond_column_range(self, api_client, make_product):
        product = make_product(stock_quantity=10)

        response = _increment(api_client, product.id, 10**30)

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_INPUT"
        product.refresh_from_db()
        assert product.stock_quantity == 10

    def test_total_beyond_column_range(self, api_client, make_product):
        product = make_product(stock_quantity=10)

        response = _increment(api_client, product.id, 2_147_483_647)

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_INPUT"
        product.refresh_from_db()
        assert product.stock_quantity == 10

    def test_unknown_product(self, api_client):
        response = _increment(api_client, MISSING_ID, 5)
        assert response.status_code == 404
        assert response.json()["code"] == "PRODUCT_NOT_FOUND"

    def test_get_not_allowed(self, api_client, make_product):
        product = make_product()
        response = api_client.get(f"/api/v1/products/{product.id}/increment-stock/")
        assert response.status_code == 405


class TestDecrementStock:
    def test_decrement(self, api_client, make_product):
        product = make_product(stock_quantity=10)

        response = _decrement(api_client, product.id, 3)

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Stock decremented successfully"
        assert body["data"]["decrement_amount"] == 3
        assert body["data"]["product"]["stock_quantity"] == 7

    def test_decrement_to_zero_flags_low_stock(self, api_client, make_product):
        product = make_product(stock_quantity=5, low_stock_threshold=3)

        response = _decrement(api_client, product.id, 5)

        assert response.status_code == 200
        assert response.json()["data"]["product"]["stock_quantity"] == 0
        assert response.json()["data"]["product"]["is_low_stock"] is True

    def test_insufficient_stock(self, api_client, make_product):
        product = make_product(stock_quantity=12)

        response = _decrement(api_client, product.id, 100)

        assert response.status_code == 409
        body = response.json()
        assert body["success"] is False
        assert body["code"] == "INSUFFICIENT_STOCK"
        assert body["message"] == "Insufficient stock. Available: 12, Required: 100"
        assert body["details"] == {"available": 12, "required": 100}
        product.refresh_from_db()
        assert product.stock_quantity == 12

    @pytest.mark.parametrize("amount", [None, "many", [1]])
    def test_null_or_mistyped_amount_is_invalid_input(self, api_client, make_product, amount):
        product = make_product(stock_quantity=10)

        response = _decrement(api_client, product.id, amount)

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_INPUT"
        product.refresh_from_db()
        assert product.stock_quantity == 10

    def test_unknown_product(self, api_client):
        response = _decrement(api_client, MISSING_ID, 1)
        assert response.status_code == 404
        assert response.json()["code"] == "PRODUCT_NOT_FOUND"


class TestStockWalkthrough:
    def test_increment_decrement_and_overdraw(self, api_client, make_product):
        product = make_product(stock_quantity=10)

        assert _increment(api_client, product.id, 5).json()["data"]["product"][
            "stock_quantity"
        ] == 15
        assert _decrement(api_client, product.id, 3).json()["data"]["product"][
            "stock_quantity"
        ] == 12
        assert _decrement(api_client, product.id, 100).status_code == 409

        response = api_client.get(f"/api/v1/products/{product.id}/")
        assert response.json()["data"]["stock_quantity"] == 12
