# backend/models/goods_out.py
from sqlalchemy import Column, Integer, String, Numeric, DateTime, CheckConstraint, func
from sqlalchemy.orm import relationship
from database import Base

# Goods-out ("Barang Keluar") ledger entry.
# product_name_snapshot / hpp_snapshot / unit_snapshot are copied from the product
# when the entry is created and stay fixed afterwards, so later price changes
# never rewrite historical sales value.
class GoodsOut(Base):
    __tablename__ = "goods_out"

    id = Column(Integer, primary_key=True, index=True)
    date = Column(DateTime, nullable=False, index=True)

    note_type_id = Column(Integer, nullable=False)
    customer_id = Column(Integer, nullable=True)
    product_id = Column(Integer, nullable=False, index=True)
    handled_by_id = Column(Integer, nullable=False)
    location_id = Column(Integer, nullable=True)

    note_number = Column(String(100), nullable=False)
    additional_info = Column(String, nullable=True)

    qty_out = Column(Integer, CheckConstraint("qty_out > 0"), nullable=False)

    # Snapshots
    product_name_snapshot = Column(String(255), nullable=True)
    hpp_snapshot = Column(Numeric(14, 2), CheckConstraint("hpp_snapshot >= 0"), nullable=True)
    unit_snapshot = Column(String(50), nullable=True)

    # hpp_snapshot * qty_out
    total_hpp = Column(Numeric(16, 2), CheckConstraint("total_hpp >= 0"), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    note_type = relationship("NoteType", primaryjoin="foreign(GoodsOut.note_type_id) == NoteType.id", viewonly=True)
    customer = relationship("Customer", primaryjoin="foreign(GoodsOut.customer_id) == Customer.id", viewonly=True)
    product = relationship("Product", primaryjoin="foreign(GoodsOut.product_id) == Product.id", viewonly=True)
    handled_by = relationship("User", primaryjoin="foreign(GoodsOut.handled_by_id) == User.id", viewonly=True)
    location = relationship(
        "StorageLocation",
        primaryjoin="foreign(GoodsOut.location_id) == StorageLocation.id",
        viewonly=True,
    )
