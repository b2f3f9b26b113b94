# backend/routes/vendors.py
from fastapi import Depends
from sqlalchemy import func, or_
from sqlalchemy.orm import Session
from typing import List

from database import get_db
from models.reference import Vendor
from models.users import User
from routes.reference import build_reference_router
from schemas.common import Envelope, envelope
from utils.errors import NotFoundError
from utils.tokenJWT import get_current_user
import schemas.reference as ref_schemas

SEARCH_LIMIT = 20

router = build_reference_router(
    prefix="/vendors", tag="Vendors", label="Vendor", model=Vendor,
    create_schema=ref_schemas.ContactCreate, update_schema=ref_schemas.ContactUpdate,
    out_schema=ref_schemas.ContactOut, unique_field="email",
    search_fields=("name", "email", "phone"), nullable=("email", "phone", "address"),
)


def _serialize(vendor: Vendor) -> dict:
    return ref_schemas.ContactOut.model_validate(vendor).model_dump(mode="json")


# Two-segment paths, so they never collide with "/{item_id}"
@router.get("/email/{email}", response_model=Envelope[ref_schemas.ContactOut])
def get_vendor_by_email(
    email: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    vendor = db.query(Vendor).filter(func.lower(Vendor.email) == email.strip().lower()).first()
    if not vendor:
        raise NotFoundError("Vendor not found with this email")
    return envelope(_serialize(vendor), "Vendor retrieved successfully")


@router.get("/search/{keyword}", response_model=Envelope[List[ref_schemas.ContactOut]])
def search_vendors(
    keyword: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    like = f"%{keyword}%"
    vendors = (
        db.query(Vendor)
        .filter(or_(
            Vendor.name.ilike(like),
            Vendor.email.ilike(like),
            Vendor.phone.ilike(like),
            Vendor.address.ilike(like),
        ))
        .order_by(Vendor.name.asc())
        .limit(SEARCH_LIMIT)
        .all()
    )
    return envelope([_serialize(v) for v in vendors], "Search results retrieved successfully")
