"""Stock counter and note number unit tests."""

from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from conftest import TestingSessionLocal
from database import Base
from models.product import Product, compute_total_stock
from utils.note_numbers import generate_note_number
from utils.stock import IN, OUT, adjust_product_stock, apply_ledger_change


@pytest.mark.parametrize("stock_in, stock_out, expected", [
    (5, 0, 5),
    (5, 5, 0),
    (2, 7, 0),
    (None, None, 0),
])
def test_compute_total_stock(stock_in, stock_out, expected):
    assert compute_total_stock(stock_in, stock_out) == expected


def test_model_recomputes_total_on_counter_change(db_session, make_product):
    product = make_product(stock_in=8)
    assert product.total_stock == 8

    product.stock_out = 3
    db_session.commit()
    db_session.refresh(product)
    assert product.total_stock == 5


class TestAdjustProductStock:
    def test_missing_product_returns_false(self, db_session):
        assert adjust_product_stock(db_session, 404, delta_in=1) is False

    def test_counters_never_go_negative(self, db_session, make_product, get_product):
        product = make_product(stock_in=2, stock_out=1)

        assert adjust_product_stock(db_session, product.id, delta_in=-5, delta_out=-5)
        fresh = get_product(product.id)
        assert (fresh.stock_in, fresh.stock_out, fresh.total_stock) == (0, 0, 0)

    def test_stale_sessions_both_land(self, make_product, get_product):
        product = make_product()
        first, second = TestingSessionLocal(), TestingSessionLocal()
        try:
            # both sessions hold the row before either writes
            assert first.get(Product, product.id).stock_in == 0
            assert second.get(Product, product.id).stock_in == 0

            adjust_product_stock(first, product.id, delta_in=3)
            adjust_product_stock(second, product.id, delta_in=4)
        finally:
            first.close()
            second.close()

        fresh = get_product(product.id)
        assert fresh.stock_in == 7
        assert fresh.total_stock == 7


class TestApplyLedgerChange:
    def test_create_update_delete(self, db_session, make_product, get_product):
        product = make_product(stock_in=10)

        apply_ledger_change(db_session, OUT, after=(product.id, 4))
        assert get_product(product.id).total_stock == 6

        apply_ledger_change(db_session, OUT, before=(product.id, 4), after=(product.id, 1))
        assert get_product(product.id).total_stock == 9

        apply_ledger_change(db_session, OUT, before=(product.id, 1))
        assert get_product(product.id).stock_out == 0

    def test_move_between_products(self, db_session, make_product, get_product):
        a = make_product(code="A")
        b = make_product(code="B")
        apply_ledger_change(db_session, IN, after=(a.id, 5))

        apply_ledger_change(db_session, IN, before=(a.id, 5), after=(b.id, 5))
        assert get_product(a.id).stock_in == 0
        assert get_product(b.id).stock_in == 5

    def test_unknown_side(self, db_session):
        with pytest.raises(ValueError):
            apply_ledger_change(db_session, "sideways", after=(1, 1))


def test_concurrent_increments_are_not_lost(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'stock.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(bind=engine)

    with Session() as session:
        product = Product(code="C1", name="C", product_name="C", category="Umum", variation="-",
                          unit="pcs", hpp_per_piece=0)
        session.add(product)
        session.commit()
        product_id = product.id

    def receive(_):
        with Session() as session:
            for _ in range(5):
                adjust_product_stock(session, product_id, delta_in=1)

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(receive, range(8)))

    with Session() as session:
        product = session.get(Product, product_id)
        assert product.stock_in == 40
        assert product.total_stock == 40
    engine.dispose()


def test_note_numbers_are_unique_and_prefixed():
    numbers = [generate_note_number() for _ in range(200)]
    assert len(set(numbers)) == 200
    assert all(n.startswith("NT-") and n[3:].isdigit() for n in numbers)
