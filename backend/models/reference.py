# backend/models/reference.py
from sqlalchemy import Column, Integer, String, DateTime, func
from database import Base

# Reference data used by the goods-in / goods-out ledgers.
# Ledger rows point at these by id; deleting one leaves the ledger untouched.


class TimestampMixin:
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class Category(TimestampMixin, Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False, index=True)


# Note type ("Tipe Nota"), e.g. purchase note vs. sales note
class NoteType(TimestampMixin, Base):
    __tablename__ = "note_types"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)


# Storage location ("Lokasi Simpan")
class StorageLocation(TimestampMixin, Base):
    __tablename__ = "storage_locations"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)


class Supplier(TimestampMixin, Base):
    __tablename__ = "suppliers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    phone = Column(String(50), nullable=True)


class Customer(TimestampMixin, Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=True, index=True)
    phone = Column(String(50), nullable=True)
    address = Column(String(500), nullable=True)


class Vendor(TimestampMixin, Base):
    __tablename__ = "vendors"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=True, index=True)
    phone = Column(String(50), nullable=True)
    address = Column(String(500), nullable=True)
