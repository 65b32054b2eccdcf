# backend/routes/orders.py
from typing import Any, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Request, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from database import get_db
import logging
from utils.tokenJWT import get_current_admin
from utils.audit import client_ip, write_log
from utils.checkout import OrderSubmissionError, OrderValidationError, parse_order_payload, place_order
from utils.order_status import IllegalStatusTransition, check_transition
from utils.text import format_kes
from models.order import Order, OrderItem
from schemas.admin import AdminUser
from schemas.order import (
    OrderResponse, OrdersPage, OrderStatusPatch, OrderItemOut, OrderSubmitResponse,
)

router = APIRouter(prefix="/orders", tags=["Orders"])
admin_router = APIRouter(prefix="/admin/orders", tags=["Admin"])
logger = logging.getLogger(__name__)

# Raw JSON body; checkout input errors are 400s, never FastAPI's 422
async def read_json_body(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid order data")

# Map Order model to OrderResponse schema
def order_to_out(order: Order) -> OrderResponse:
    items: List[OrderItemOut] = []
    for it in order.items:
        product_name = it.product.name if it.product else "Deleted product"
        items.append(OrderItemOut(
            product_id=it.product_id,
            product_name=product_name,
            quantity=it.quantity,
            price=it.price,
            line_total=it.quantity * it.price,
        ))
    return OrderResponse(
        id=order.id,
        status=order.status,
        total_amount=order.total_amount,
        total_formatted=format_kes(order.total_amount),
        customer_name=order.customer_name,
        customer_email=order.customer_email,
        customer_phone=order.customer_phone,
        shipping_address=order.shipping_address,
        created_at=order.created_at,
        updated_at=order.updated_at,
        items=items,
    )

def _load_order(db: Session, order_id: int) -> Optional[Order]:
    return db.query(Order).options(
        joinedload(Order.items).joinedload(OrderItem.product)
    ).filter(Order.id == order_id).first()


# Submit an order from a client-held cart
@router.post("", response_model=OrderSubmitResponse)
def create_order(
    request: Request,
    payload: Any = Depends(read_json_body),
    db: Session = Depends(get_db),
):
    try:
        order_payload = parse_order_payload(payload)
        order = place_order(db, order_payload)
    except OrderValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except OrderSubmissionError as e:
        raise HTTPException(status_code=500, detail=str(e))

    write_log(db, actor="customer", action="ORDER_CREATE", resource="orders", status="SUCCESS",
              ip=client_ip(request), meta={"order_id": order.id, "total": order.total_amount})
    return OrderSubmitResponse(order_id=order.id, order=order_to_out(order))


# Confirmation view of a placed order
@router.get("/{order_id}", response_model=OrderResponse)
def get_order_detail(order_id: int, db: Session = Depends(get_db)):
    order = _load_order(db, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order_to_out(order)


# ==========================================
#  BACK OFFICE
# ==========================================
@admin_router.get("", response_model=OrdersPage)
def list_orders(
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    status: Optional[str] = Query(None, description="Filter by status"),
    db: Session = Depends(get_db),
    admin: AdminUser = Depends(get_current_admin),
):
    q = db.query(Order)
    if status:
        q = q.filter(Order.status == status)
    total = q.count()

    rows = q.options(
        joinedload(Order.items).joinedload(OrderItem.product)
    ).order_by(Order.created_at.desc(), Order.id.desc()).offset(offset).limit(limit).all()
    return {"items": [order_to_out(o) for o in rows], "total": total, "limit": limit, "offset": offset}


@admin_router.patch("/{order_id}", response_model=OrderResponse)
def update_order_status(
    order_id: int,
    payload: OrderStatusPatch,
    request: Request,
    db: Session = Depends(get_db),
    admin: AdminUser = Depends(get_current_admin),
):
    order = _load_order(db, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")

    old_status = order.status
    try:
        new_status = check_transition(old_status, payload.status)
    except IllegalStatusTransition as e:
        write_log(db, actor=admin.username, action="ORDER_STATUS_CHANGE", resource="orders", status="FAIL",
                  ip=client_ip(request), meta={"order_id": order_id, "old": old_status, "new": payload.status})
        raise HTTPException(status_code=400, detail=str(e))

    if new_status.value != old_status:
        order.status = new_status.value
        try:
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception(f"Status update failed for order {order_id}")
            raise HTTPException(status_code=500, detail="Could not update the order. Please try again.")
        write_log(db, actor=admin.username, action="ORDER_STATUS_CHANGE", resource="orders", status="SUCCESS",
                  ip=client_ip(request), meta={"order_id": order.id, "old": old_status, "new": new_status.value})

    return order_to_out(_load_order(db, order_id))
