# utils/stock.py
"""Product stock counters.

Every ledger write (goods-in and goods-out create, update and delete) funnels
its stock effect through :func:`apply_ledger_change`, so ``total_stock`` always
reflects ledger history as ``max(0, stock_in - stock_out)``.

Counters are changed with a single SQL UPDATE that increments relative to the
stored values. Two requests touching the same product therefore never overwrite
each other's increment, even when both hold a stale copy of the row.

The ledger row is committed before the counters move. A failing counter update
is logged and swallowed: the ledger entry stays durable and the counters may be
stale until corrected.
"""
import logging
from collections import defaultdict
from typing import Optional, Tuple

from sqlalchemy import case, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.product import Product

logger = logging.getLogger(__name__)

IN = "in"
OUT = "out"

# (product_id, qty) as stored on a ledger row
LedgerLine = Tuple[int, int]


def _floor_zero(expr):
    return case((expr > 0, expr), else_=0)


def adjust_product_stock(db: Session, product_id: int, *, delta_in: int = 0, delta_out: int = 0) -> bool:
    """Atomically shift a product's counters and recompute total_stock.

    Returns False when no product with that id exists.
    """
    new_in = _floor_zero(Product.stock_in + delta_in)
    new_out = _floor_zero(Product.stock_out + delta_out)
    stmt = (
        update(Product)
        .where(Product.id == product_id)
        .values(stock_in=new_in, stock_out=new_out, total_stock=_floor_zero(new_in - new_out))
        .execution_options(synchronize_session=False)
    )
    result = db.execute(stmt)
    db.commit()
    return result.rowcount > 0


def apply_stock_effect(db: Session, product_id: Optional[int], *, delta_in: int = 0, delta_out: int = 0,
                       reason: str = "") -> bool:
    if product_id is None or (delta_in == 0 and delta_out == 0):
        return False
    try:
        applied = adjust_product_stock(db, product_id, delta_in=delta_in, delta_out=delta_out)
    except SQLAlchemyError:
        db.rollback()
        logger.exception(
            "Stock update failed for product %s (%s, in=%+d, out=%+d)", product_id, reason, delta_in, delta_out
        )
        return False

    if applied:
        logger.info("Stock updated for product %s (%s, in=%+d, out=%+d)", product_id, reason, delta_in, delta_out)
    else:
        logger.warning("Stock update skipped, product %s not found (%s)", product_id, reason)
    return applied


def apply_ledger_change(db: Session, side: str, *, before: Optional[LedgerLine] = None,
                        after: Optional[LedgerLine] = None, reason: str = ""):
    """Apply the counter difference between two states of one ledger row.

    ``before`` is None for a create, ``after`` is None for a delete. When an update
    moves the row to another product the old product is reversed and the new one
    charged.
    """
    if side not in (IN, OUT):
        raise ValueError(f"Unknown ledger side: {side}")

    deltas = defaultdict(int)
    if before is not None:
        deltas[before[0]] -= before[1]
    if after is not None:
        deltas[after[0]] += after[1]

    for product_id, delta in deltas.items():
        if delta == 0:
            continue
        if side == IN:
            apply_stock_effect(db, product_id, delta_in=delta, reason=reason)
        else:
            apply_stock_effect(db, product_id, delta_out=delta, reason=reason)
