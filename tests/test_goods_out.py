"""Goods-out ledger tests: snapshots, totals, note numbers and stock effect."""

from datetime import datetime
from decimal import Decimal

import pytest

from config import settings


@pytest.fixture
def post_goods_out(client, auth_headers, refs):
    def _post(product_id, qty_out=3, **overrides):
        data = {
            "date": datetime.now().isoformat(),
            "note_type_id": refs["note_type_id"],
            "product_id": product_id,
            "qty_out": qty_out,
        }
        data.update(overrides)
        return client.post("/goods-out", json=data, headers=auth_headers)
    return _post


@pytest.fixture
def legacy_goods_out(monkeypatch):
    """Goods-out leaves product counters untouched."""
    monkeypatch.setattr(settings, "GOODS_OUT_ADJUSTS_STOCK", False)


class TestGoodsOutCreate:
    def test_snapshots_product_and_computes_total(self, post_goods_out, make_product):
        product = make_product(code="A1", hpp=Decimal("12500"), product_name="Kaos Oblong", unit="lusin")

        response = post_goods_out(product.id, qty_out=3)
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["product_name_snapshot"] == "Kaos Oblong"
        assert data["hpp_snapshot"] == 12500
        assert data["unit_snapshot"] == "lusin"
        assert data["total_hpp"] == 37500

    def test_later_price_change_does_not_touch_snapshot(self, client, auth_headers, post_goods_out, make_product):
        product = make_product(code="A1", hpp=Decimal("10000"))
        entry_id = post_goods_out(product.id, qty_out=2).json()["data"]["id"]

        client.put(f"/products/{product.id}", json={"hpp_per_piece": 99999}, headers=auth_headers)

        data = client.get(f"/goods-out/{entry_id}", headers=auth_headers).json()["data"]
        assert data["hpp_snapshot"] == 10000
        assert data["total_hpp"] == 20000
        # the live reference shows the new cost
        assert data["product"]["data"]["hpp_per_piece"] == 99999

    def test_missing_product_is_404(self, post_goods_out):
        response = post_goods_out(12345)
        assert response.status_code == 404
        assert response.json()["message"] == "Product not found"

    def test_non_positive_qty_is_rejected(self, post_goods_out, make_product):
        product = make_product(code="A1")
        assert post_goods_out(product.id, qty_out=0).status_code == 400

    def test_generated_note_numbers_are_distinct(self, post_goods_out, make_product):
        product = make_product(code="A1")

        numbers = [post_goods_out(product.id, qty_out=1).json()["data"]["note_number"] for _ in range(5)]
        assert all(n.startswith("NT-") and len(n) > 3 for n in numbers)
        assert len(set(numbers)) == 5

    def test_caller_note_number_is_kept(self, post_goods_out, make_product):
        product = make_product(code="A1")

        first = post_goods_out(product.id, note_number="SJ-77").json()["data"]
        second = post_goods_out(product.id, note_number="SJ-77").json()["data"]
        assert first["note_number"] == second["note_number"] == "SJ-77"

    def test_optional_references(self, post_goods_out, make_product, refs, user):
        product = make_product(code="A1")

        data = post_goods_out(product.id).json()["data"]
        assert data["customer"] is None
        assert data["location"] is None
        assert data["handled_by"]["id"] == user.id

        data = post_goods_out(product.id, customer_id=refs["customer_id"]).json()["data"]
        assert data["customer"]["data"]["email"] == "berkah@example.com"


class TestGoodsOutUpdate:
    def test_same_product_keeps_snapshot_and_recomputes_total(
        self, client, auth_headers, post_goods_out, make_product
    ):
        product = make_product(code="A1", hpp=Decimal("5000"))
        entry_id = post_goods_out(product.id, qty_out=2).json()["data"]["id"]
        client.put(f"/products/{product.id}", json={"hpp_per_piece": 8000}, headers=auth_headers)

        response = client.put(
            f"/goods-out/{entry_id}", json={"product_id": product.id, "qty_out": 4}, headers=auth_headers
        )
        data = response.json()["data"]
        assert data["hpp_snapshot"] == 5000
        assert data["total_hpp"] == 20000

    def test_body_hpp_snapshot_takes_precedence(self, client, auth_headers, post_goods_out, make_product):
        product = make_product(code="A1", hpp=Decimal("5000"))
        entry_id = post_goods_out(product.id, qty_out=2).json()["data"]["id"]

        data = client.put(
            f"/goods-out/{entry_id}", json={"hpp_snapshot": 7000}, headers=auth_headers
        ).json()["data"]
        assert data["hpp_snapshot"] == 7000
        assert data["total_hpp"] == 14000

    def test_sub_cent_hpp_is_rounded_before_total(self, client, auth_headers, post_goods_out, make_product):
        product = make_product(code="A1", hpp=Decimal("5000"))
        entry_id = post_goods_out(product.id, qty_out=4).json()["data"]["id"]

        client.put(f"/goods-out/{entry_id}", json={"hpp_snapshot": 0.125}, headers=auth_headers)

        data = client.get(f"/goods-out/{entry_id}", headers=auth_headers).json()["data"]
        assert data["hpp_snapshot"] == 0.13
        assert data["total_hpp"] == 0.52
        assert Decimal(str(data["total_hpp"])) == Decimal(str(data["hpp_snapshot"])) * data["qty_out"]

    def test_product_change_resnapshots(self, client, auth_headers, post_goods_out, make_product):
        first = make_product(code="A1", hpp=Decimal("5000"), product_name="Kaos")
        second = make_product(code="B1", hpp=Decimal("9000"), product_name="Jaket", unit="buah")
        entry_id = post_goods_out(first.id, qty_out=3).json()["data"]["id"]

        data = client.put(
            f"/goods-out/{entry_id}", json={"product_id": second.id}, headers=auth_headers
        ).json()["data"]
        assert data["product_name_snapshot"] == "Jaket"
        assert data["unit_snapshot"] == "buah"
        assert data["hpp_snapshot"] == 9000
        assert data["total_hpp"] == 27000

    def test_change_to_missing_product_is_404(self, client, auth_headers, post_goods_out, make_product):
        product = make_product(code="A1")
        entry_id = post_goods_out(product.id).json()["data"]["id"]

        response = client.put(f"/goods-out/{entry_id}", json={"product_id": 999}, headers=auth_headers)
        assert response.status_code == 404

    def test_other_fields_overwrite(self, client, auth_headers, post_goods_out, make_product):
        product = make_product(code="A1")
        entry_id = post_goods_out(product.id).json()["data"]["id"]

        data = client.put(
            f"/goods-out/{entry_id}",
            json={"note_number": "NT-MANUAL", "additional_info": "dikirim via kurir"},
            headers=auth_headers,
        ).json()["data"]
        assert data["note_number"] == "NT-MANUAL"
        assert data["additional_info"] == "dikirim via kurir"


class TestGoodsOutStockEffect:
    def _goods_in(self, client, auth_headers, refs, product_id, qty_in):
        return client.post("/goods-in", json={
            "note_type_id": refs["note_type_id"],
            "supplier_id": refs["supplier_id"],
            "storage_location_id": refs["storage_location_id"],
            "product_id": product_id,
            "note_number": "PB-1",
            "qty_in": qty_in,
            "unit": "pcs",
            "hpp": 1000,
        }, headers=auth_headers)

    def test_legacy_mode_leaves_total_unchanged(
        self, client, auth_headers, refs, post_goods_out, make_product, get_product, legacy_goods_out
    ):
        product = make_product(code="A1")
        self._goods_in(client, auth_headers, refs, product.id, 5)
        assert get_product(product.id).total_stock == 5

        data = post_goods_out(product.id, qty_out=3).json()["data"]
        assert data["total_hpp"] == data["hpp_snapshot"] * 3

        fresh = get_product(product.id)
        assert fresh.stock_out == 0
        assert fresh.total_stock == 5

    def test_default_mode_issues_stock(self, client, auth_headers, refs, post_goods_out, make_product, get_product):
        product = make_product(code="A1")
        self._goods_in(client, auth_headers, refs, product.id, 5)

        entry_id = post_goods_out(product.id, qty_out=3).json()["data"]["id"]
        fresh = get_product(product.id)
        assert fresh.stock_out == 3
        assert fresh.total_stock == 2

        client.put(f"/goods-out/{entry_id}", json={"qty_out": 4}, headers=auth_headers)
        assert get_product(product.id).total_stock == 1

        client.delete(f"/goods-out/{entry_id}", headers=auth_headers)
        fresh = get_product(product.id)
        assert fresh.stock_out == 0
        assert fresh.total_stock == 5

    def test_overselling_clamps_total_at_zero(self, post_goods_out, make_product, get_product):
        product = make_product(code="A1", stock_in=2)

        post_goods_out(product.id, qty_out=5)
        fresh = get_product(product.id)
        assert fresh.stock_out == 5
        assert fresh.total_stock == 0
