# backend/routes/dashboard.py
import calendar
from datetime import date, datetime, time, timedelta
from typing import List, Literal, Optional, Tuple

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from models.goods_in import GoodsIn
from models.goods_out import GoodsOut
from models.product import Product
from models.users import User
from schemas.common import Envelope, envelope
from utils.tokenJWT import get_current_user
import schemas.dashboard as dash_schemas

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])

TOP_VALUE_LIMIT = 2
TOP_SELLING_LIMIT = 5
MONTHLY_BUCKETS = 12
WEEKLY_BUCKETS = 8

# (label, first day, last day) - both ends inclusive
Bucket = Tuple[str, date, date]


def _today() -> date:
    return datetime.now().date()


def _month_start(d: date, shift: int = 0) -> date:
    index = d.year * 12 + (d.month - 1) + shift
    return date(index // 12, index % 12 + 1, 1)


def _month_end(d: date) -> date:
    return d.replace(day=calendar.monthrange(d.year, d.month)[1])


def calendar_year_buckets(year: int) -> List[Bucket]:
    buckets = []
    for month in range(1, 13):
        start = date(year, month, 1)
        buckets.append((calendar.month_abbr[month], start, _month_end(start)))
    return buckets


def trailing_month_buckets(today: date, count: int = MONTHLY_BUCKETS) -> List[Bucket]:
    buckets = []
    for shift in range(count - 1, -1, -1):
        start = _month_start(today, -shift)
        end = min(_month_end(start), today)
        buckets.append((start.strftime("%Y-%m"), start, end))
    return buckets


def trailing_week_buckets(today: date, count: int = WEEKLY_BUCKETS) -> List[Bucket]:
    buckets = []
    for i in range(count - 1, -1, -1):
        end = today - timedelta(days=7 * i)
        start = end - timedelta(days=6)
        buckets.append((f"{start:%d/%m}-{end:%d/%m}", start, end))
    return buckets


def _revenue_buckets(db: Session, buckets: List[Bucket]) -> List[dash_schemas.RevenueBucket]:
    """Sum hpp_snapshot * qty_out of goods-out entries dated inside each bucket."""
    first, last = buckets[0][1], buckets[-1][2]
    rows = (
        db.query(GoodsOut.date, GoodsOut.hpp_snapshot, GoodsOut.qty_out)
        .filter(
            GoodsOut.date >= datetime.combine(first, time.min),
            GoodsOut.date <= datetime.combine(last, time.max),
        )
        .all()
    )

    totals = [0.0] * len(buckets)
    for row in rows:
        day = row.date.date()
        for i, (_, start, end) in enumerate(buckets):
            if start <= day <= end:
                totals[i] += float(row.hpp_snapshot or 0) * (row.qty_out or 0)
                break

    return [
        dash_schemas.RevenueBucket(label=label, start=start, end=end, revenue=round(total, 2))
        for (label, start, end), total in zip(buckets, totals)
    ]


# === Aggregations ===

def build_summary(db: Session) -> dash_schemas.DashboardSummary:
    total_products = db.query(func.count(Product.id)).scalar() or 0
    low_stock = (
        db.query(func.count(Product.id))
        .filter(Product.total_stock <= settings.LOW_STOCK_THRESHOLD)
        .scalar()
    ) or 0
    goods_in_value = db.query(func.sum(GoodsIn.hpp * GoodsIn.qty_in)).scalar()
    goods_out_value = db.query(func.sum(GoodsOut.hpp_snapshot * GoodsOut.qty_out)).scalar()

    return dash_schemas.DashboardSummary(
        total_products=total_products,
        low_stock_products=low_stock,
        total_goods_in_value=float(goods_in_value or 0),
        total_goods_out_value=float(goods_out_value or 0),
    )


def build_top_products(db: Session, limit: int = TOP_VALUE_LIMIT) -> List[dash_schemas.TopValueProduct]:
    products = db.query(Product).order_by(Product.id).all()
    total_products = len(products)

    ranked = []
    for p in products:
        hpp = float(p.hpp_per_piece or 0)
        stock = p.total_stock or 0
        ranked.append(dash_schemas.TopValueProduct(
            product_id=p.id,
            code=p.code,
            name=p.name,
            product_name=p.product_name,
            category=p.category,
            hpp_per_piece=hpp,
            total_stock=stock,
            value=round(hpp * stock, 2),
            percentage_product=round(stock / total_products * 100, 2) if total_products else 0.0,
        ))

    ranked.sort(key=lambda item: item.value, reverse=True)
    return ranked[:limit]


def build_top_selling(db: Session, limit: int = TOP_SELLING_LIMIT) -> List[dash_schemas.TopSellingProduct]:
    total_qty = func.sum(GoodsOut.qty_out)
    rows = (
        db.query(
            GoodsOut.product_id.label("product_id"),
            total_qty.label("total_qty_out"),
            func.sum(GoodsOut.qty_out * GoodsOut.hpp_snapshot).label("total_value"),
            func.max(GoodsOut.date).label("last_sale_date"),
        )
        .group_by(GoodsOut.product_id)
        .order_by(total_qty.desc(), GoodsOut.product_id.asc())
        .limit(limit)
        .all()
    )

    ids = [row.product_id for row in rows]
    products = {p.id: p for p in db.query(Product).filter(Product.id.in_(ids)).all()} if ids else {}

    result = []
    for row in rows:
        product = products.get(row.product_id)
        item = dash_schemas.TopSellingProduct(
            product_id=row.product_id,
            resolved=product is not None,
            total_qty_out=int(row.total_qty_out or 0),
            total_value=float(row.total_value or 0),
            last_sale_date=row.last_sale_date,
        )
        # Current catalogue data next to the historical (snapshot) value
        if product is not None:
            current_hpp = float(product.hpp_per_piece or 0)
            item.code = product.code
            item.name = product.name
            item.product_name = product.product_name
            item.category = product.category
            item.hpp_per_piece = current_hpp
            item.total_value_current = round(current_hpp * item.total_qty_out, 2)
        result.append(item)
    return result


def build_revenue_by_month(db: Session, year: Optional[int] = None) -> dash_schemas.RevenueByMonth:
    year = year or _today().year
    months = _revenue_buckets(db, calendar_year_buckets(year))
    return dash_schemas.RevenueByMonth(year=year, months=months, total=round(sum(m.revenue for m in months), 2))


# === Endpoints ===

@router.get("", response_model=Envelope[dash_schemas.DashboardOverview])
def get_dashboard(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    overview = dash_schemas.DashboardOverview(
        summary=build_summary(db),
        top_products=build_top_products(db),
        top_selling=build_top_selling(db),
        revenue_by_month=build_revenue_by_month(db),
    )
    return envelope(overview.model_dump(mode="json"), "Dashboard data retrieved successfully")


@router.get("/summary", response_model=Envelope[dash_schemas.DashboardSummary])
def get_summary(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return envelope(build_summary(db).model_dump(mode="json"), "Summary retrieved successfully")


@router.get("/top-products", response_model=Envelope[List[dash_schemas.TopValueProduct]])
def get_top_products(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    data = [p.model_dump(mode="json") for p in build_top_products(db)]
    return envelope(data, "Top products retrieved successfully")


@router.get("/top-selling", response_model=Envelope[List[dash_schemas.TopSellingProduct]])
def get_top_selling(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    data = [p.model_dump(mode="json") for p in build_top_selling(db)]
    return envelope(data, "Top selling products retrieved successfully")


@router.get("/revenue-by-month", response_model=Envelope[dash_schemas.RevenueByMonth])
def get_revenue_by_month(
    year: Optional[int] = Query(None, ge=1900, le=9999),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return envelope(build_revenue_by_month(db, year).model_dump(mode="json"), "Revenue retrieved successfully")


@router.get("/chart", response_model=Envelope[dash_schemas.ChartData])
def get_chart_data(
    period: Literal["monthly", "weekly"] = "monthly",
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    today = _today()
    buckets = trailing_month_buckets(today) if period == "monthly" else trailing_week_buckets(today)
    series = _revenue_buckets(db, buckets)
    chart = dash_schemas.ChartData(period=period, buckets=series, total=round(sum(b.revenue for b in series), 2))
    return envelope(chart.model_dump(mode="json"), "Chart data retrieved successfully")


@router.get("/stock-alert", response_model=Envelope[dash_schemas.StockAlert])
def get_stock_alert(
    threshold: Optional[int] = Query(None, ge=0),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    limit = settings.LOW_STOCK_THRESHOLD if threshold is None else threshold
    products = (
        db.query(Product)
        .filter(Product.total_stock <= limit)
        .order_by(Product.total_stock.asc(), Product.id.asc())
        .all()
    )
    items = [dash_schemas.StockAlertItem.model_validate(p) for p in products]
    alert = dash_schemas.StockAlert(threshold=limit, count=len(items), items=items)
    return envelope(alert.model_dump(mode="json"), "Stock alert retrieved successfully")
