# backend/models/product.py
from sqlalchemy import Column, Integer, String, Numeric, DateTime, CheckConstraint, event, func
from sqlalchemy.orm import attributes
from database import Base

# Model Product
# A single stock-keeping item. Carries catalogue data, the unit cost (HPP)
# and the running stock counters maintained by the goods-in / goods-out ledgers.
class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(100), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False, index=True)
    product_name = Column(String(255), nullable=False)
    category = Column(String(255), nullable=False)
    variation = Column(String(255), nullable=False)
    unit = Column(String(50), nullable=False)

    # Unit cost (HPP per piece)
    hpp_per_piece = Column(Numeric(14, 2), CheckConstraint("hpp_per_piece >= 0"), nullable=False)

    # Stock counters. total_stock is always derived, never written by callers.
    stock_in = Column(Integer, CheckConstraint("stock_in >= 0"), nullable=False, default=0)
    stock_out = Column(Integer, CheckConstraint("stock_out >= 0"), nullable=False, default=0)
    total_stock = Column(Integer, CheckConstraint("total_stock >= 0"), nullable=False, default=0)

    location = Column(String(255), nullable=True)
    image_url = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def recompute_total_stock(self):
        self.total_stock = compute_total_stock(self.stock_in, self.stock_out)
        return self.total_stock


def compute_total_stock(stock_in, stock_out) -> int:
    return max(0, int(stock_in or 0) - int(stock_out or 0))


@event.listens_for(Product, "before_insert")
def _product_before_insert(mapper, connection, target):
    target.stock_in = target.stock_in or 0
    target.stock_out = target.stock_out or 0
    target.recompute_total_stock()


@event.listens_for(Product, "before_update")
def _product_before_update(mapper, connection, target):
    state = attributes.instance_state(target)
    if state.attrs.stock_in.history.has_changes() or state.attrs.stock_out.history.has_changes():
        target.recompute_total_stock()
