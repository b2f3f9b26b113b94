# backend/routes/goods_in.py
import logging
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_db
from models.goods_in import GoodsIn
from models.product import Product  # noqa: F401  (relationship target)
from models.reference import NoteType, StorageLocation, Supplier  # noqa: F401
from models.users import User
from schemas.common import Envelope, envelope, provided_fields, reference
from schemas.product import ProductRef
from schemas.reference import NamedOut, SupplierOut
from schemas.user import UserRef
from utils.errors import NotFoundError
from utils.stock import IN, apply_ledger_change
from utils.tokenJWT import get_current_user
import schemas.goods_in as goods_in_schemas

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/goods-in", tags=["Goods In"])


def _get_entry_or_404(db: Session, entry_id: int) -> GoodsIn:
    entry = db.query(GoodsIn).filter(GoodsIn.id == entry_id).first()
    if not entry:
        raise NotFoundError("Goods-in entry not found")
    return entry


def _serialize(entry: GoodsIn) -> dict:
    hpp = Decimal(str(entry.hpp or 0))
    return goods_in_schemas.GoodsInOut(
        id=entry.id,
        date=entry.date,
        note_number=entry.note_number,
        additional_notes=entry.additional_notes,
        qty_in=entry.qty_in,
        unit=entry.unit,
        hpp=float(hpp),
        total_value=float(hpp * entry.qty_in),
        note_type=reference(entry.note_type_id, entry.note_type, NamedOut),
        supplier=reference(entry.supplier_id, entry.supplier, SupplierOut),
        product=reference(entry.product_id, entry.product, ProductRef),
        entered_by=reference(entry.entered_by_id, entry.entered_by, UserRef),
        storage_location=reference(entry.storage_location_id, entry.storage_location, NamedOut),
        created_at=entry.created_at,
        updated_at=entry.updated_at,
    ).model_dump(mode="json")


# =========================
# CREATE
# =========================
@router.post("", status_code=201, response_model=Envelope[goods_in_schemas.GoodsInOut])
def create_goods_in(
    payload: goods_in_schemas.GoodsInCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    data = payload.model_dump()
    data["date"] = data["date"] or datetime.now()
    data["entered_by_id"] = data["entered_by_id"] or current_user.id
    data["hpp"] = Decimal(str(data["hpp"]))

    entry = GoodsIn(**data)
    db.add(entry)
    db.commit()
    db.refresh(entry)
    logger.info("Goods-in %s recorded by user %s (product=%s, qty=%s)",
                entry.id, current_user.id, entry.product_id, entry.qty_in)

    # Ledger row is durable at this point, counter update is best-effort
    apply_ledger_change(db, IN, after=(entry.product_id, entry.qty_in), reason=f"goods-in {entry.id} created")

    db.refresh(entry)
    return envelope(_serialize(entry), "Goods-in created successfully", 201)


# =========================
# LIST
# =========================
@router.get("", response_model=Envelope[List[goods_in_schemas.GoodsInOut]])
def list_goods_in(
    product_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    query = db.query(GoodsIn)
    if product_id is not None:
        query = query.filter(GoodsIn.product_id == product_id)

    entries = query.order_by(GoodsIn.date.desc(), GoodsIn.id.desc()).all()
    return envelope([_serialize(e) for e in entries], "Goods-in data retrieved successfully")


# =========================
# SINGLE ENTRY
# =========================
@router.get("/{entry_id}", response_model=Envelope[goods_in_schemas.GoodsInOut])
def get_goods_in(
    entry_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    entry = _get_entry_or_404(db, entry_id)
    return envelope(_serialize(entry), "Goods-in retrieved successfully")


# =========================
# UPDATE
# =========================
@router.put("/{entry_id}", response_model=Envelope[goods_in_schemas.GoodsInOut])
def update_goods_in(
    entry_id: int,
    payload: goods_in_schemas.GoodsInUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    entry = _get_entry_or_404(db, entry_id)
    before = (entry.product_id, entry.qty_in)

    changes = provided_fields(payload, nullable=("additional_notes",))
    if "hpp" in changes:
        changes["hpp"] = Decimal(str(changes["hpp"]))

    for key, value in changes.items():
        setattr(entry, key, value)

    db.commit()
    db.refresh(entry)

    # Moves the qty difference, or the whole qty when the product changed
    apply_ledger_change(db, IN, before=before, after=(entry.product_id, entry.qty_in),
                        reason=f"goods-in {entry.id} updated")

    db.refresh(entry)
    return envelope(_serialize(entry), "Goods-in updated successfully")


# =========================
# DELETE
# =========================
@router.delete("/{entry_id}", response_model=Envelope)
def delete_goods_in(
    entry_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    entry = _get_entry_or_404(db, entry_id)
    before = (entry.product_id, entry.qty_in)

    db.delete(entry)
    db.commit()
    logger.info("Goods-in %s deleted by user %s", entry_id, current_user.id)

    apply_ledger_change(db, IN, before=before, reason=f"goods-in {entry_id} deleted")
    return envelope(None, "Goods-in deleted successfully")
