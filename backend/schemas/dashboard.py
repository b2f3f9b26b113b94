# backend/schemas/dashboard.py
from pydantic import BaseModel
from datetime import date, datetime
from typing import List, Literal, Optional

from schemas.common import ORMBase


class DashboardSummary(BaseModel):
    total_products: int
    low_stock_products: int
    total_goods_in_value: float
    total_goods_out_value: float


# Product ranked by stock value (hpp_per_piece * total_stock)
class TopValueProduct(BaseModel):
    product_id: int
    code: str
    name: str
    product_name: str
    category: str
    hpp_per_piece: float
    total_stock: int
    value: float
    # total_stock relative to the number of products, not to total stock
    percentage_product: float


class TopSellingProduct(BaseModel):
    product_id: int
    resolved: bool
    code: Optional[str] = None
    name: Optional[str] = None
    product_name: Optional[str] = None
    category: Optional[str] = None
    hpp_per_piece: Optional[float] = None  # current cost
    total_qty_out: int
    total_value: float  # from hpp_snapshot at sale time
    total_value_current: Optional[float] = None  # at current cost
    last_sale_date: Optional[datetime] = None


class RevenueBucket(BaseModel):
    label: str
    start: date
    end: date
    revenue: float


class RevenueByMonth(BaseModel):
    year: int
    months: List[RevenueBucket]
    total: float


class ChartData(BaseModel):
    period: Literal["monthly", "weekly"]
    buckets: List[RevenueBucket]
    total: float


class StockAlertItem(ORMBase):
    id: int
    code: str
    name: str
    product_name: str
    category: str
    unit: str
    total_stock: int


class StockAlert(BaseModel):
    threshold: int
    count: int
    items: List[StockAlertItem]


class DashboardOverview(BaseModel):
    summary: DashboardSummary
    top_products: List[TopValueProduct]
    top_selling: List[TopSellingProduct]
    revenue_by_month: RevenueByMonth
