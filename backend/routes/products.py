# backend/routes/products.py
import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session

from database import get_db
from models.product import Product
from models.users import User
from schemas.common import Envelope, envelope, provided_fields
from utils.errors import ConflictError, NotFoundError
from utils.integrity import commit_or_conflict, find_duplicate
from utils.tokenJWT import get_current_user
import schemas.product as product_schemas

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["Products"])


# ---- HELPERS ----
def _to_decimal(value) -> Decimal:
    return Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

def _get_product_or_404(db: Session, product_id: int) -> Product:
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise NotFoundError("Product not found")
    return product

def _serialize(product: Product) -> dict:
    return product_schemas.ProductOut.model_validate(product).model_dump(mode="json")


# =========================
# CREATE
# =========================
@router.post("", status_code=201, response_model=Envelope[product_schemas.ProductOut])
def create_product(
    payload: product_schemas.ProductCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if find_duplicate(db, Product, "code", payload.code):
        raise ConflictError("Product code already exists")

    data = payload.model_dump()
    data["hpp_per_piece"] = _to_decimal(data["hpp_per_piece"])
    product = Product(**data)

    db.add(product)
    commit_or_conflict(db, "Product code already exists")
    db.refresh(product)

    logger.info("Product %s created by user %s (code=%s)", product.id, current_user.id, product.code)
    return envelope(_serialize(product), "Product created successfully", 201)


# =========================
# LIST (newest first)
# =========================
@router.get("", response_model=Envelope[List[product_schemas.ProductOut]])
def list_products(
    q: Optional[str] = Query(None, description="Search code, name or product name"),
    category: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    query = db.query(Product)

    if q:
        like = f"%{q}%"
        query = query.filter(or_(Product.code.ilike(like), Product.name.ilike(like), Product.product_name.ilike(like)))
    if category:
        query = query.filter(Product.category.ilike(f"%{category}%"))

    products = query.order_by(Product.created_at.desc(), Product.id.desc()).all()
    return envelope([_serialize(p) for p in products], "Products retrieved successfully")


# =========================
# SINGLE PRODUCT
# =========================
@router.get("/{product_id}", response_model=Envelope[product_schemas.ProductOut])
def get_product(
    product_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    product = _get_product_or_404(db, product_id)
    return envelope(_serialize(product), "Product retrieved successfully")


# =========================
# UPDATE
# =========================
@router.put("/{product_id}", response_model=Envelope[product_schemas.ProductOut])
def update_product(
    product_id: int,
    payload: product_schemas.ProductUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    product = _get_product_or_404(db, product_id)
    changes = provided_fields(payload, nullable=("location", "image_url"))

    code = changes.get("code")
    if code is not None and code != product.code:
        if find_duplicate(db, Product, "code", code, exclude_id=product.id):
            raise ConflictError("Product code already exists")

    if "hpp_per_piece" in changes:
        changes["hpp_per_piece"] = _to_decimal(changes["hpp_per_piece"])

    # Direct counter overwrite is allowed; total_stock is recomputed on flush
    for key, value in changes.items():
        setattr(product, key, value)

    commit_or_conflict(db, "Product code already exists")
    db.refresh(product)

    logger.info("Product %s updated by user %s (fields=%s)", product.id, current_user.id, sorted(changes))
    return envelope(_serialize(product), "Product updated successfully")


# =========================
# DELETE
# =========================
@router.delete("/{product_id}", response_model=Envelope)
def delete_product(
    product_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    # Ledger entries referencing the product are kept; they resolve as unresolved references
    product = _get_product_or_404(db, product_id)
    db.delete(product)
    db.commit()

    logger.info("Product %s deleted by user %s", product_id, current_user.id)
    return envelope(None, "Product deleted successfully")
