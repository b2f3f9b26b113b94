# backend/schemas/product.py
from pydantic import Field, ConfigDict
from typing import Optional
from datetime import datetime

from schemas.common import ORMBase


# Shared catalogue attributes
class ProductBase(ORMBase):
    model_config = ConfigDict(from_attributes=True, str_strip_whitespace=True)

    code: str = Field(min_length=1, max_length=100)
    name: str = Field(min_length=1, max_length=255)
    product_name: str = Field(min_length=1, max_length=255)
    category: str = Field(min_length=1, max_length=255)
    variation: str = Field(min_length=1, max_length=255)
    unit: str = Field(min_length=1, max_length=50)
    hpp_per_piece: float = Field(ge=0)
    location: Optional[str] = Field(default=None, max_length=255)
    image_url: Optional[str] = None


# Schema for creating a new product. total_stock is always derived.
class ProductCreate(ProductBase):
    stock_in: int = Field(default=0, ge=0)
    stock_out: int = Field(default=0, ge=0)


# Schema for updates - every field optional, provided keys overwrite the record
class ProductUpdate(ORMBase):
    model_config = ConfigDict(from_attributes=True, str_strip_whitespace=True)

    code: Optional[str] = Field(None, min_length=1, max_length=100)
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    product_name: Optional[str] = Field(None, min_length=1, max_length=255)
    category: Optional[str] = Field(None, min_length=1, max_length=255)
    variation: Optional[str] = Field(None, min_length=1, max_length=255)
    unit: Optional[str] = Field(None, min_length=1, max_length=50)
    hpp_per_piece: Optional[float] = Field(None, ge=0)
    stock_in: Optional[int] = Field(None, ge=0)
    stock_out: Optional[int] = Field(None, ge=0)
    location: Optional[str] = Field(None, max_length=255)
    image_url: Optional[str] = None


# Full product representation
class ProductOut(ProductBase):
    id: int
    stock_in: int
    stock_out: int
    total_stock: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Compact form used inside ledger references
class ProductRef(ORMBase):
    id: int
    code: str
    name: str
    product_name: str
    category: str
    unit: str
    hpp_per_piece: float
    total_stock: int
