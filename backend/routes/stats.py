# backend/routes/stats.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import func
from datetime import datetime, timedelta, timezone

from database import get_db
from utils.tokenJWT import get_current_admin
from schemas.admin import AdminUser, StatsSummary
from models.order import Order, OrderStatus
from models.product import Product

router = APIRouter(
    prefix="/admin/stats",
    tags=["Stats"]
)

# Window for the "new orders" counter
NEW_ORDERS_DAYS = 7


# === Dashboard Summary ===

@router.get("", response_model=StatsSummary)
def get_stats_summary(
    db: Session = Depends(get_db),
    admin: AdminUser = Depends(get_current_admin)
):
    total_orders = db.query(Order).count()

    # Orders placed in the last week
    since = datetime.now(timezone.utc) - timedelta(days=NEW_ORDERS_DAYS)
    new_orders = db.query(Order).filter(Order.created_at >= since).count()

    total_products = db.query(Product).count()

    # Revenue excludes cancelled orders
    total_revenue = (
        db.query(func.sum(Order.total_amount))
        .filter(Order.status != OrderStatus.CANCELLED.value)
        .scalar()
    ) or 0

    # Every known status appears, zero-filled
    counts = dict(
        db.query(Order.status, func.count(Order.id)).group_by(Order.status).all()
    )
    orders_by_status = {s.value: counts.get(s.value, 0) for s in OrderStatus}

    return StatsSummary(
        total_orders=total_orders,
        new_orders=new_orders,
        total_products=total_products,
        total_revenue=total_revenue,
        orders_by_status=orders_by_status,
    )
