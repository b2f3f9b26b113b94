# backend/routes/reference.py
import logging
from typing import List, Literal, Optional, Sequence, Type

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy import or_
from sqlalchemy.orm import Session

from database import Base, get_db
from models.reference import Category, Customer, NoteType, StorageLocation, Supplier
from models.users import User
from schemas.common import Envelope, envelope, provided_fields
from utils.errors import ConflictError, NotFoundError
from utils.integrity import commit_or_conflict, find_duplicate
from utils.tokenJWT import get_current_user
import schemas.reference as ref_schemas

logger = logging.getLogger(__name__)


def build_reference_router(
    *,
    prefix: str,
    tag: str,
    label: str,
    model: Type[Base],
    create_schema: Type[BaseModel],
    update_schema: Type[BaseModel],
    out_schema: Type[BaseModel],
    unique_field: Optional[str] = None,
    search_fields: Sequence[str] = ("name",),
    nullable: Sequence[str] = (),
) -> APIRouter:
    """CRUD router for a small reference table (create, list, get, update, delete).

    ``unique_field`` is checked before create/update and reported as a conflict.
    """
    router = APIRouter(prefix=prefix, tags=[tag])
    sortable = {"created_at": model.created_at, "name": model.name, "id": model.id}

    def _serialize(obj) -> dict:
        return out_schema.model_validate(obj).model_dump(mode="json")

    def _get_or_404(db: Session, item_id: int):
        obj = db.query(model).filter(model.id == item_id).first()
        if not obj:
            raise NotFoundError(f"{label} not found")
        return obj

    conflict_message = f"{label} {unique_field} already exists" if unique_field else f"{label} already exists"

    def _check_unique(db: Session, value, exclude_id: Optional[int] = None):
        if unique_field is None:
            return
        if find_duplicate(db, model, unique_field, value, exclude_id=exclude_id):
            raise ConflictError(conflict_message)

    @router.post("", status_code=201, response_model=Envelope[out_schema])
    def create_item(
        payload: create_schema,
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user),
    ):
        data = payload.model_dump()
        if unique_field:
            _check_unique(db, data.get(unique_field))

        obj = model(**data)
        db.add(obj)
        commit_or_conflict(db, conflict_message)
        db.refresh(obj)
        logger.info("%s %s created by user %s", label, obj.id, current_user.id)
        return envelope(_serialize(obj), f"{label} created successfully", 201)

    @router.get("", response_model=Envelope[List[out_schema]])
    def list_items(
        search: Optional[str] = Query(None),
        sort_by: Literal["created_at", "name", "id"] = "created_at",
        order: Literal["asc", "desc"] = "desc",
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user),
    ):
        query = db.query(model)
        if search:
            like = f"%{search}%"
            query = query.filter(or_(*[getattr(model, f).ilike(like) for f in search_fields]))

        col = sortable[sort_by]
        if order == "desc":
            query = query.order_by(col.desc(), model.id.desc())
        else:
            query = query.order_by(col.asc(), model.id.asc())

        return envelope([_serialize(o) for o in query.all()], f"{label} list retrieved successfully")

    @router.get("/{item_id}", response_model=Envelope[out_schema])
    def get_item(
        item_id: int,
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user),
    ):
        return envelope(_serialize(_get_or_404(db, item_id)), f"{label} retrieved successfully")

    @router.put("/{item_id}", response_model=Envelope[out_schema])
    def update_item(
        item_id: int,
        payload: update_schema,
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user),
    ):
        obj = _get_or_404(db, item_id)
        changes = provided_fields(payload, nullable=nullable)
        if unique_field and unique_field in changes:
            _check_unique(db, changes[unique_field], exclude_id=obj.id)

        for key, value in changes.items():
            setattr(obj, key, value)

        commit_or_conflict(db, conflict_message)
        db.refresh(obj)
        return envelope(_serialize(obj), f"{label} updated successfully")

    @router.delete("/{item_id}", response_model=Envelope)
    def delete_item(
        item_id: int,
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user),
    ):
        obj = _get_or_404(db, item_id)
        db.delete(obj)
        db.commit()
        logger.info("%s %s deleted by user %s", label, item_id, current_user.id)
        return envelope(None, f"{label} deleted successfully")

    return router


category_router = build_reference_router(
    prefix="/categories", tag="Categories", label="Category", model=Category,
    create_schema=ref_schemas.NamedCreate, update_schema=ref_schemas.NamedUpdate,
    out_schema=ref_schemas.NamedOut, unique_field="name",
)

note_type_router = build_reference_router(
    prefix="/note-types", tag="Note Types", label="Note type", model=NoteType,
    create_schema=ref_schemas.NamedCreate, update_schema=ref_schemas.NamedUpdate,
    out_schema=ref_schemas.NamedOut,
)

storage_location_router = build_reference_router(
    prefix="/storage-locations", tag="Storage Locations", label="Storage location", model=StorageLocation,
    create_schema=ref_schemas.NamedCreate, update_schema=ref_schemas.NamedUpdate,
    out_schema=ref_schemas.NamedOut,
)

supplier_router = build_reference_router(
    prefix="/suppliers", tag="Suppliers", label="Supplier", model=Supplier,
    create_schema=ref_schemas.SupplierCreate, update_schema=ref_schemas.SupplierUpdate,
    out_schema=ref_schemas.SupplierOut, search_fields=("name", "phone"), nullable=("phone",),
)

customer_router = build_reference_router(
    prefix="/customers", tag="Customers", label="Customer", model=Customer,
    create_schema=ref_schemas.ContactCreate, update_schema=ref_schemas.ContactUpdate,
    out_schema=ref_schemas.ContactOut, unique_field="email",
    search_fields=("name", "email", "phone"), nullable=("email", "phone", "address"),
)
