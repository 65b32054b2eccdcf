# backend/routes/cart.py
import logging
import uuid
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from pydantic import ValidationError
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from models.product import Product
from schemas.cart import CartAddItem, CartUpdateItem, CartOut, CartItemOut, CheckoutPayload, ProductSnapshot
from schemas.order import OrderSubmitResponse
from utils.audit import client_ip, write_log
from utils.cart_reducer import AddItem, RemoveItem, UpdateQuantity, ClearCart
from utils.cart_store import CartStore, SqlCartStorage
from utils.checkout import (
    OrderSubmissionError, OrderValidationError, missing_products, payload_from_cart, place_order, shipping_cost,
)
from routes.orders import order_to_out, read_json_body

router = APIRouter(prefix="/cart", tags=["Cart"])
logger = logging.getLogger(__name__)

def get_cart_store(request: Request, response: Response, db: Session = Depends(get_db)) -> CartStore:
    # Cart session id lives in a cookie; a new one is issued on first contact
    cart_id = request.cookies.get(settings.CART_COOKIE_NAME)
    if not cart_id or len(cart_id) > 64:
        cart_id = uuid.uuid4().hex
        response.set_cookie(settings.CART_COOKIE_NAME, cart_id, httponly=True, samesite="lax", max_age=60 * 60 * 24 * 30)

    store = CartStore(SqlCartStorage(db), cart_id)
    store.hydrate()
    return store

def _cart_to_out(store: CartStore) -> CartOut:
    state = store.state
    items_out = [
        CartItemOut(
            product_id=line.product.id,
            name=line.product.name,
            slug=line.product.slug,
            image_url=line.product.image_url,
            unit_price=line.product.price,
            quantity=line.quantity,
            stock_quantity=line.product.stock_quantity,
            line_total=line.product.price * line.quantity,
        )
        for line in state.items
    ]
    shipping = shipping_cost(state.total) if state.items else 0
    return CartOut(
        cart_id=store.key,
        items=items_out,
        item_count=state.item_count,
        total=state.total,
        shipping=shipping,
        grand_total=state.total + shipping,
        persistent=store.persistent,
    )

def _live_product(db: Session, product_id: int) -> Product:
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product

@router.get("", response_model=CartOut)
def get_cart(store: CartStore = Depends(get_cart_store)):
    return _cart_to_out(store)

@router.post("/items", response_model=CartOut)
def add_to_cart(
    payload: CartAddItem,
    db: Session = Depends(get_db),
    store: CartStore = Depends(get_cart_store),
):
    product = _live_product(db, payload.product_id)

    # Validate stock availability for the resulting line quantity
    line = store.state.find(product.id)
    wanted = (line.quantity if line else 0) + 1
    if wanted > product.stock_quantity:
        raise HTTPException(status_code=400, detail="Insufficient stock")

    store.dispatch(AddItem(ProductSnapshot.model_validate(product)))
    return _cart_to_out(store)

@router.put("/items/{product_id}", response_model=CartOut)
def update_cart_item(
    product_id: int,
    payload: CartUpdateItem,
    db: Session = Depends(get_db),
    store: CartStore = Depends(get_cart_store),
):
    # Absent lines are a no-op, the same as DELETE
    if payload.quantity > 0 and store.state.find(product_id) is not None:
        product = db.query(Product).filter(Product.id == product_id).first()
        if product and payload.quantity > product.stock_quantity:
            raise HTTPException(status_code=400, detail="Insufficient stock")

    store.dispatch(UpdateQuantity(product_id, payload.quantity))
    return _cart_to_out(store)

@router.delete("/items/{product_id}", response_model=CartOut)
def delete_cart_item(product_id: int, store: CartStore = Depends(get_cart_store)):
    store.dispatch(RemoveItem(product_id))
    return _cart_to_out(store)

@router.delete("", response_model=CartOut)
def clear_cart(store: CartStore = Depends(get_cart_store)):
    store.dispatch(ClearCart())
    return _cart_to_out(store)

# Place an order from the cart; the cart is only cleared once the order is stored
@router.post("/checkout", response_model=OrderSubmitResponse)
def checkout_cart(
    request: Request,
    body: Any = Depends(read_json_body),
    db: Session = Depends(get_db),
    store: CartStore = Depends(get_cart_store),
):
    if not store.state.items:
        raise HTTPException(status_code=400, detail="Cart is empty")

    try:
        contact = CheckoutPayload.model_validate(body)
    except ValidationError:
        raise HTTPException(status_code=400, detail="Invalid order data")

    # Products deleted since they were added cannot be ordered
    missing = missing_products(db, [line.product.id for line in store.state.items])
    if missing:
        names = ", ".join(store.state.find(pid).product.name for pid in missing)
        raise HTTPException(status_code=400, detail=f"No longer available, please remove from cart: {names}")

    try:
        order_payload = payload_from_cart(store.state, contact.model_dump())
        order = place_order(db, order_payload)
    except OrderValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except OrderSubmissionError as e:
        write_log(db, actor="customer", action="CHECKOUT", resource="orders", status="FAIL",
                  ip=client_ip(request), meta={"cart_id": store.key, "lines": len(store.state.items)})
        raise HTTPException(status_code=500, detail=str(e))

    store.dispatch(ClearCart())
    write_log(db, actor="customer", action="CHECKOUT", resource="orders", status="SUCCESS",
              ip=client_ip(request), meta={"cart_id": store.key, "order_id": order.id, "total": order.total_amount})
    return OrderSubmitResponse(order_id=order.id, order=order_to_out(order))
