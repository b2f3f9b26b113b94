"""Goods-in ledger tests: counter side effects and reference resolution."""

import logging

import pytest
from sqlalchemy.exc import OperationalError

import utils.stock


def goods_in_payload(refs, product_id, qty_in=5, **overrides):
    data = {
        "note_type_id": refs["note_type_id"],
        "supplier_id": refs["supplier_id"],
        "storage_location_id": refs["storage_location_id"],
        "product_id": product_id,
        "note_number": "PB-0001",
        "qty_in": qty_in,
        "unit": "pcs",
        "hpp": 24000,
    }
    data.update(overrides)
    return data


@pytest.fixture
def post_goods_in(client, auth_headers, refs):
    def _post(product_id, qty_in=5, **overrides):
        return client.post(
            "/goods-in", json=goods_in_payload(refs, product_id, qty_in, **overrides), headers=auth_headers
        )
    return _post


class TestGoodsInCreate:
    def test_create_increments_stock_in_and_total(self, post_goods_in, make_product, get_product):
        product = make_product(code="A1")

        response = post_goods_in(product.id, qty_in=5)
        assert response.status_code == 201

        fresh = get_product(product.id)
        assert fresh.stock_in == 5
        assert fresh.total_stock == 5

    def test_response_resolves_references(self, post_goods_in, make_product, user):
        product = make_product(code="A1")

        data = post_goods_in(product.id, qty_in=2).json()["data"]
        assert data["total_value"] == 48000
        assert data["product"]["resolved"] is True
        assert data["product"]["data"]["code"] == "A1"
        assert data["product"]["data"]["total_stock"] == 2
        assert data["supplier"]["data"]["name"] == "PT Sumber Makmur"
        assert data["note_type"]["data"]["name"] == "Nota Pembelian"
        # entered_by defaults to the caller
        assert data["entered_by"]["id"] == user.id
        assert data["entered_by"]["data"]["email"] == "admin@example.com"

    def test_non_positive_qty_is_rejected(self, post_goods_in, make_product, get_product):
        product = make_product(code="A1")

        response = post_goods_in(product.id, qty_in=0)
        assert response.status_code == 400
        assert get_product(product.id).stock_in == 0

    def test_unknown_product_is_stored_as_unresolved_reference(self, post_goods_in):
        response = post_goods_in(4242, qty_in=3)
        assert response.status_code == 201
        assert response.json()["data"]["product"] == {"id": 4242, "resolved": False, "data": None}

    def test_counter_failure_is_logged_not_surfaced(
        self, post_goods_in, make_product, get_product, monkeypatch, caplog
    ):
        product = make_product(code="A1")

        def broken(*args, **kwargs):
            raise OperationalError("UPDATE products", {}, Exception("disk I/O error"))

        monkeypatch.setattr(utils.stock, "adjust_product_stock", broken)

        with caplog.at_level(logging.ERROR, logger="utils.stock"):
            response = post_goods_in(product.id, qty_in=5)

        assert response.status_code == 201
        assert get_product(product.id).stock_in == 0
        assert any("Stock update failed" in r.getMessage() for r in caplog.records)


class TestGoodsInDelete:
    def test_delete_reverses_exactly_qty_in(self, client, auth_headers, post_goods_in, make_product, get_product):
        product = make_product(code="A1", stock_in=10, stock_out=4)

        entry_id = post_goods_in(product.id, qty_in=3).json()["data"]["id"]
        assert get_product(product.id).stock_in == 13

        response = client.delete(f"/goods-in/{entry_id}", headers=auth_headers)
        assert response.status_code == 200

        fresh = get_product(product.id)
        assert fresh.stock_in == 10
        assert fresh.total_stock == 6
        assert client.get(f"/goods-in/{entry_id}", headers=auth_headers).status_code == 404


class TestGoodsInUpdate:
    def test_qty_change_moves_difference(self, client, auth_headers, post_goods_in, make_product, get_product):
        product = make_product(code="A1")
        entry_id = post_goods_in(product.id, qty_in=5).json()["data"]["id"]

        response = client.put(f"/goods-in/{entry_id}", json={"qty_in": 8}, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["data"]["qty_in"] == 8

        fresh = get_product(product.id)
        assert fresh.stock_in == 8
        assert fresh.total_stock == 8

    def test_product_change_moves_stock_between_products(
        self, client, auth_headers, post_goods_in, make_product, get_product
    ):
        first = make_product(code="A1")
        second = make_product(code="B1")
        entry_id = post_goods_in(first.id, qty_in=4).json()["data"]["id"]

        client.put(f"/goods-in/{entry_id}", json={"product_id": second.id}, headers=auth_headers)

        assert get_product(first.id).stock_in == 0
        assert get_product(second.id).stock_in == 4

    def test_update_missing_entry_is_404(self, client, auth_headers):
        response = client.put("/goods-in/77", json={"qty_in": 1}, headers=auth_headers)
        assert response.status_code == 404


class TestStockInvariant:
    def test_total_matches_counters_after_mixed_sequence(
        self, client, auth_headers, post_goods_in, make_product, get_product
    ):
        product = make_product(code="A1", stock_out=6)

        ids = [post_goods_in(product.id, qty_in=q).json()["data"]["id"] for q in (2, 3, 7)]
        client.delete(f"/goods-in/{ids[1]}", headers=auth_headers)
        post_goods_in(product.id, qty_in=1)

        fresh = get_product(product.id)
        assert fresh.stock_in == 10
        assert fresh.total_stock == max(0, fresh.stock_in - fresh.stock_out) == 4


class TestDanglingReferences:
    def test_deleting_product_leaves_ledger_readable(self, client, auth_headers, post_goods_in, make_product):
        product = make_product(code="A1")
        entry_id = post_goods_in(product.id, qty_in=2).json()["data"]["id"]

        assert client.delete(f"/products/{product.id}", headers=auth_headers).status_code == 200

        response = client.get(f"/goods-in/{entry_id}", headers=auth_headers)
        assert response.status_code == 200
        ref = response.json()["data"]["product"]
        assert ref == {"id": product.id, "resolved": False, "data": None}

        listed = client.get("/goods-in", headers=auth_headers).json()["data"]
        assert [e["id"] for e in listed] == [entry_id]
