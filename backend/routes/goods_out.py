# backend/routes/goods_out.py
import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from models.goods_out import GoodsOut
from models.product import Product
from models.reference import Customer, NoteType, StorageLocation  # noqa: F401  (relationship targets)
from models.users import User
from schemas.common import Envelope, envelope, provided_fields, reference
from schemas.product import ProductRef
from schemas.reference import ContactOut, NamedOut
from schemas.user import UserRef
from utils.errors import NotFoundError
from utils.note_numbers import generate_note_number
from utils.stock import OUT, apply_ledger_change
from utils.tokenJWT import get_current_user
import schemas.goods_out as goods_out_schemas

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/goods-out", tags=["Goods Out"])


CENTS = Decimal("0.01")


def _money(value) -> Decimal:
    """Decimal rounded to the cent precision of the money columns."""
    return Decimal(str(value or 0)).quantize(CENTS, rounding=ROUND_HALF_UP)


def _get_entry_or_404(db: Session, entry_id: int) -> GoodsOut:
    entry = db.query(GoodsOut).filter(GoodsOut.id == entry_id).first()
    if not entry:
        raise NotFoundError("Goods-out entry not found")
    return entry


def _get_product_or_404(db: Session, product_id: int) -> Product:
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise NotFoundError("Product not found")
    return product


def _snapshot(entry: GoodsOut, product: Product):
    # Freeze the cost basis of the sale
    entry.product_name_snapshot = product.product_name
    entry.hpp_snapshot = _money(product.hpp_per_piece)
    entry.unit_snapshot = product.unit


def _apply_stock(db: Session, before=None, after=None, reason=""):
    if not settings.GOODS_OUT_ADJUSTS_STOCK:
        return
    apply_ledger_change(db, OUT, before=before, after=after, reason=reason)


def _serialize(entry: GoodsOut) -> dict:
    return goods_out_schemas.GoodsOutOut(
        id=entry.id,
        date=entry.date,
        note_number=entry.note_number,
        additional_info=entry.additional_info,
        qty_out=entry.qty_out,
        product_name_snapshot=entry.product_name_snapshot,
        hpp_snapshot=None if entry.hpp_snapshot is None else float(entry.hpp_snapshot),
        unit_snapshot=entry.unit_snapshot,
        total_hpp=None if entry.total_hpp is None else float(entry.total_hpp),
        note_type=reference(entry.note_type_id, entry.note_type, NamedOut),
        customer=reference(entry.customer_id, entry.customer, ContactOut),
        product=reference(entry.product_id, entry.product, ProductRef),
        handled_by=reference(entry.handled_by_id, entry.handled_by, UserRef),
        location=reference(entry.location_id, entry.location, NamedOut),
        created_at=entry.created_at,
        updated_at=entry.updated_at,
    ).model_dump(mode="json")


# =========================
# CREATE
# =========================
@router.post("", status_code=201, response_model=Envelope[goods_out_schemas.GoodsOutOut])
def create_goods_out(
    payload: goods_out_schemas.GoodsOutCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    product = _get_product_or_404(db, payload.product_id)

    data = payload.model_dump()
    data["note_number"] = data["note_number"] or generate_note_number()
    data["handled_by_id"] = data["handled_by_id"] or current_user.id

    entry = GoodsOut(**data)
    _snapshot(entry, product)
    entry.total_hpp = entry.hpp_snapshot * entry.qty_out

    db.add(entry)
    db.commit()
    db.refresh(entry)
    logger.info("Goods-out %s recorded by user %s (product=%s, qty=%s, note=%s)",
                entry.id, current_user.id, entry.product_id, entry.qty_out, entry.note_number)

    _apply_stock(db, after=(entry.product_id, entry.qty_out), reason=f"goods-out {entry.id} created")

    db.refresh(entry)
    return envelope(_serialize(entry), "Goods-out created successfully", 201)


# =========================
# LIST
# =========================
@router.get("", response_model=Envelope[List[goods_out_schemas.GoodsOutOut]])
def list_goods_out(
    product_id: Optional[int] = Query(None),
    customer_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    query = db.query(GoodsOut)
    if product_id is not None:
        query = query.filter(GoodsOut.product_id == product_id)
    if customer_id is not None:
        query = query.filter(GoodsOut.customer_id == customer_id)

    entries = query.order_by(GoodsOut.date.desc(), GoodsOut.id.desc()).all()
    return envelope([_serialize(e) for e in entries], "Goods-out data retrieved successfully")


# =========================
# SINGLE ENTRY
# =========================
@router.get("/{entry_id}", response_model=Envelope[goods_out_schemas.GoodsOutOut])
def get_goods_out(
    entry_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    entry = _get_entry_or_404(db, entry_id)
    return envelope(_serialize(entry), "Goods-out retrieved successfully")


# =========================
# UPDATE
# =========================
@router.put("/{entry_id}", response_model=Envelope[goods_out_schemas.GoodsOutOut])
def update_goods_out(
    entry_id: int,
    payload: goods_out_schemas.GoodsOutUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    entry = _get_entry_or_404(db, entry_id)
    before = (entry.product_id, entry.qty_out)
    changes = provided_fields(payload, nullable=("customer_id", "location_id", "additional_info"))

    # A different product means a new cost basis
    new_product_id = changes.get("product_id")
    if new_product_id is not None and new_product_id != entry.product_id:
        _snapshot(entry, _get_product_or_404(db, new_product_id))

    if "hpp_snapshot" in changes:
        changes["hpp_snapshot"] = _money(changes["hpp_snapshot"])

    # Body overrides win over the stored values
    hpp = changes.get("hpp_snapshot", entry.hpp_snapshot)
    qty = changes.get("qty_out", entry.qty_out)
    entry.total_hpp = _money(hpp) * qty
    for key, value in changes.items():
        setattr(entry, key, value)

    db.commit()
    db.refresh(entry)

    _apply_stock(db, before=before, after=(entry.product_id, entry.qty_out), reason=f"goods-out {entry.id} updated")

    db.refresh(entry)
    return envelope(_serialize(entry), "Goods-out updated successfully")


# =========================
# DELETE
# =========================
@router.delete("/{entry_id}", response_model=Envelope)
def delete_goods_out(
    entry_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    entry = _get_entry_or_404(db, entry_id)
    before = (entry.product_id, entry.qty_out)

    db.delete(entry)
    db.commit()
    logger.info("Goods-out %s deleted by user %s", entry_id, current_user.id)

    _apply_stock(db, before=before, reason=f"goods-out {entry_id} deleted")
    return envelope(None, "Goods-out deleted successfully")
