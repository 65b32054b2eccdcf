# backend/utils/checkout.py
import logging
from typing import Any, Dict, Iterable, List

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config import settings
from models.order import Order, OrderItem, OrderStatus
from models.product import Product
from schemas.cart import CartState
from schemas.order import OrderCreatePayload, OrderItemIn

logger = logging.getLogger(__name__)


class OrderValidationError(Exception):
    """Checkout input is incomplete; nothing was written."""

class OrderSubmissionError(Exception):
    """The order could not be stored; the transaction was rolled back."""


def shipping_cost(subtotal: int) -> int:
    # Free delivery from the threshold upwards, flat fee below it
    if subtotal >= settings.FREE_SHIPPING_THRESHOLD:
        return 0
    return settings.SHIPPING_FEE


def subtotal_of(items: List[OrderItemIn]) -> int:
    return sum(it.price * it.quantity for it in items)


def missing_products(db: Session, product_ids: Iterable[int]) -> List[int]:
    # Ids that are no longer in the catalog, in request order
    wanted = list(dict.fromkeys(product_ids))
    found = {pid for (pid,) in db.query(Product.id).filter(Product.id.in_(wanted)).all()}
    return [pid for pid in wanted if pid not in found]


def parse_order_payload(data: Any) -> OrderCreatePayload:
    """Validate a raw submission body.

    Missing customer name, email, address or an empty item list are rejected
    before any database access. Phone is optional and not format-checked.
    """
    if not isinstance(data, dict):
        raise OrderValidationError("Missing required fields")
    try:
        payload = OrderCreatePayload.model_validate(data)
    except ValidationError as e:
        logger.info(f"Rejected order payload: {e.error_count()} invalid field(s)")
        raise OrderValidationError("Invalid order data") from e

    required = (payload.customer_name, payload.customer_email, payload.shipping_address)
    if not all(v and v.strip() for v in required) or not payload.items:
        raise OrderValidationError("Missing required fields")
    return payload


def payload_from_cart(cart: CartState, contact: Dict[str, Any]) -> OrderCreatePayload:
    """Build a submission from the cart snapshot plus contact fields.

    Unit prices come from the cart lines, not the live catalog.
    """
    items = [
        {"product_id": line.product.id, "price": line.product.price, "quantity": line.quantity}
        for line in cart.items
    ]
    return parse_order_payload({**contact, "items": items})


def place_order(db: Session, payload: OrderCreatePayload) -> Order:
    """
    Store the order header and all of its lines in a single transaction.

    The header is flushed to obtain its id, the lines are added, and one commit
    makes both visible. Any failure rolls the whole order back, so an order
    without lines is never left behind. Lines pointing at products that have
    since been deleted are rejected with OrderValidationError before any write.
    """
    missing = missing_products(db, [it.product_id for it in payload.items])
    if missing:
        raise OrderValidationError(f"Products no longer available: {', '.join(map(str, missing))}")

    subtotal = subtotal_of(payload.items)
    total = payload.total_amount if payload.total_amount is not None else subtotal + shipping_cost(subtotal)

    order = Order(
        status=OrderStatus.NEW.value,
        total_amount=total,
        customer_name=payload.customer_name.strip(),
        customer_email=payload.customer_email.strip(),
        customer_phone=(payload.customer_phone or "").strip() or None,
        shipping_address=payload.shipping_address.strip(),
    )
    try:
        db.add(order)
        db.flush()

        db.add_all([
            OrderItem(order_id=order.id, product_id=it.product_id, quantity=it.quantity, price=it.price)
            for it in payload.items
        ])
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Order submission failed for %s", payload.customer_email)
        raise OrderSubmissionError("Could not place the order. Please try again.") from e

    db.refresh(order)
    logger.info(f"Order {order.id} placed: {len(payload.items)} line(s), total {total}")
    return order
