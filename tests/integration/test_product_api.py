"""Integration tests for the public product catalog."""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.products.models import Product

pytestmark = pytest.mark.integration

URL = "/api/v1/products/"


class TestProductCatalog:
    def test_list_is_public_and_hides_inactive(self, api_client, product, inactive_product):
        response = api_client.get(URL)

        assert response.status_code == 200
        names = [row["name"] for row in response.json()["results"]]
        assert names == ["Cotton Kurta"]

    def test_retrieve(self, api_client, product):
        response = api_client.get(f"{URL}{product.id}/")

        assert response.status_code == 200
        assert response.json()["price"] == "100.00"

    def test_retrieve_inactive_is_404(self, api_client, inactive_product):
        assert api_client.get(f"{URL}{inactive_product.id}/").status_code == 404

    def test_retrieve_malformed_id_is_404(self, api_client):
        assert api_client.get(f"{URL}nope/").status_code == 404

    def test_price_filters(self, api_client, product, second_product):
        response = api_client.get(URL, {"max_price": "50"})
        assert [row["name"] for row in response.json()["results"]] == ["Copper Bottle"]

    def test_default_page_size(self, api_client):
        Product.objects.bulk_create(
            [Product(name=f"Item {idx:02d}", price=Decimal("9.99")) for idx in range(15)]
        )
        data = api_client.get(URL).json()
        assert data["count"] == 15
        assert len(data["results"]) == 10
        assert data["has_next"] is True
