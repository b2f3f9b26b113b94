# backend/schemas/goods_in.py
from pydantic import Field, ConfigDict
from datetime import datetime
from typing import Optional

from schemas.common import ORMBase, ReferenceOut


class GoodsInBase(ORMBase):
    model_config = ConfigDict(from_attributes=True, str_strip_whitespace=True)


# Schema for registering incoming goods
class GoodsInCreate(GoodsInBase):
    date: Optional[datetime] = None  # defaults to now
    note_type_id: int
    supplier_id: int
    note_number: str = Field(min_length=1, max_length=100)
    additional_notes: Optional[str] = ""
    product_id: int
    qty_in: int = Field(gt=0)
    unit: str = Field(min_length=1, max_length=50)
    entered_by_id: Optional[int] = None  # defaults to the caller
    storage_location_id: int
    hpp: float = Field(ge=0)


# Partial update, provided keys overwrite the entry
class GoodsInUpdate(GoodsInBase):
    date: Optional[datetime] = None
    note_type_id: Optional[int] = None
    supplier_id: Optional[int] = None
    note_number: Optional[str] = Field(None, min_length=1, max_length=100)
    additional_notes: Optional[str] = None
    product_id: Optional[int] = None
    qty_in: Optional[int] = Field(None, gt=0)
    unit: Optional[str] = Field(None, min_length=1, max_length=50)
    entered_by_id: Optional[int] = None
    storage_location_id: Optional[int] = None
    hpp: Optional[float] = Field(None, ge=0)


class GoodsInOut(GoodsInBase):
    id: int
    date: datetime
    note_number: str
    additional_notes: Optional[str] = None
    qty_in: int
    unit: str
    hpp: float
    total_value: float

    note_type: Optional[ReferenceOut] = None
    supplier: Optional[ReferenceOut] = None
    product: Optional[ReferenceOut] = None
    entered_by: Optional[ReferenceOut] = None
    storage_location: Optional[ReferenceOut] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
