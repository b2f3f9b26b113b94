# backend/schemas/goods_out.py
from pydantic import Field, ConfigDict
from datetime import datetime
from typing import Optional

from schemas.common import ORMBase, ReferenceOut


class GoodsOutBase(ORMBase):
    model_config = ConfigDict(from_attributes=True, str_strip_whitespace=True)


# Schema for registering outgoing goods. Snapshot fields are filled from the product.
class GoodsOutCreate(GoodsOutBase):
    date: datetime
    note_type_id: int
    customer_id: Optional[int] = None
    note_number: Optional[str] = Field(None, max_length=100)  # generated when empty
    additional_info: Optional[str] = None
    product_id: int
    qty_out: int = Field(gt=0)
    handled_by_id: Optional[int] = None  # defaults to the caller
    location_id: Optional[int] = None


# Partial update. Snapshot overrides are accepted and take precedence.
class GoodsOutUpdate(GoodsOutBase):
    date: Optional[datetime] = None
    note_type_id: Optional[int] = None
    customer_id: Optional[int] = None
    note_number: Optional[str] = Field(None, min_length=1, max_length=100)
    additional_info: Optional[str] = None
    product_id: Optional[int] = None
    qty_out: Optional[int] = Field(None, gt=0)
    handled_by_id: Optional[int] = None
    location_id: Optional[int] = None
    product_name_snapshot: Optional[str] = Field(None, max_length=255)
    hpp_snapshot: Optional[float] = Field(None, ge=0)
    unit_snapshot: Optional[str] = Field(None, max_length=50)


class GoodsOutOut(GoodsOutBase):
    id: int
    date: datetime
    note_number: str
    additional_info: Optional[str] = None
    qty_out: int
    product_name_snapshot: Optional[str] = None
    hpp_snapshot: Optional[float] = None
    unit_snapshot: Optional[str] = None
    total_hpp: Optional[float] = None

    note_type: Optional[ReferenceOut] = None
    customer: Optional[ReferenceOut] = None
    product: Optional[ReferenceOut] = None
    handled_by: Optional[ReferenceOut] = None
    location: Optional[ReferenceOut] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
