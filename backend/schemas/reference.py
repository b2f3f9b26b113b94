# backend/schemas/reference.py
from pydantic import ConfigDict, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime

from schemas.common import ORMBase

PHONE_PATTERN = r"^[\d\s\-\+\(\)]+$"


class ReferenceBase(ORMBase):
    model_config = ConfigDict(from_attributes=True, str_strip_whitespace=True)


class ReferenceOutBase(ReferenceBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# --- Category / note type / storage location: name only ---

class NamedCreate(ReferenceBase):
    name: str = Field(min_length=1, max_length=255)


class NamedUpdate(ReferenceBase):
    name: Optional[str] = Field(None, min_length=1, max_length=255)


class NamedOut(ReferenceOutBase):
    name: str


# --- Supplier ---

class SupplierCreate(ReferenceBase):
    name: str = Field(min_length=1, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)


class SupplierUpdate(ReferenceBase):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)


class SupplierOut(ReferenceOutBase):
    name: str
    phone: Optional[str] = None


# --- Customer / vendor: contact records with unique email ---

class ContactCreate(ReferenceBase):
    name: str = Field(min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50, pattern=PHONE_PATTERN)
    address: Optional[str] = Field(None, max_length=500)

    @field_validator("email")
    @classmethod
    def _lower_email(cls, v):
        return v.lower() if v else v


class ContactUpdate(ReferenceBase):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50, pattern=PHONE_PATTERN)
    address: Optional[str] = Field(None, max_length=500)

    @field_validator("email")
    @classmethod
    def _lower_email(cls, v):
        return v.lower() if v else v


class ContactOut(ReferenceOutBase):
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
