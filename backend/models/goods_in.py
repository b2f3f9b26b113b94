# backend/models/goods_in.py
from sqlalchemy import Column, Integer, String, Numeric, DateTime, CheckConstraint, func
from sqlalchemy.orm import relationship
from database import Base

# Goods-in ("Barang Masuk") ledger entry.
# References are plain id columns without FK constraints: a referenced row may be
# deleted later and the ledger entry must survive it. Relationships are read-only.
class GoodsIn(Base):
    __tablename__ = "goods_in"

    id = Column(Integer, primary_key=True, index=True)
    date = Column(DateTime, nullable=False, default=func.now(), index=True)

    note_type_id = Column(Integer, nullable=False)
    supplier_id = Column(Integer, nullable=False)
    product_id = Column(Integer, nullable=False, index=True)
    entered_by_id = Column(Integer, nullable=False)
    storage_location_id = Column(Integer, nullable=False)

    note_number = Column(String(100), nullable=False)
    additional_notes = Column(String, nullable=True, default="")

    qty_in = Column(Integer, CheckConstraint("qty_in > 0"), nullable=False)
    unit = Column(String(50), nullable=False)

    # Unit cost at the time of entry
    hpp = Column(Numeric(14, 2), CheckConstraint("hpp >= 0"), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    note_type = relationship("NoteType", primaryjoin="foreign(GoodsIn.note_type_id) == NoteType.id", viewonly=True)
    supplier = relationship("Supplier", primaryjoin="foreign(GoodsIn.supplier_id) == Supplier.id", viewonly=True)
    product = relationship("Product", primaryjoin="foreign(GoodsIn.product_id) == Product.id", viewonly=True)
    entered_by = relationship("User", primaryjoin="foreign(GoodsIn.entered_by_id) == User.id", viewonly=True)
    storage_location = relationship(
        "StorageLocation",
        primaryjoin="foreign(GoodsIn.storage_location_id) == StorageLocation.id",
        viewonly=True,
    )
