import pytest
from sqlalchemy.exc import OperationalError

from models.order import Order, OrderItem
from schemas.cart import ProductSnapshot
from utils.cart_reducer import AddItem, EMPTY_CART, UpdateQuantity, reduce
from utils.checkout import (
    OrderSubmissionError, OrderValidationError, parse_order_payload, payload_from_cart,
    place_order, shipping_cost,
)


CONTACT = {
    "customerName": "Wanjiru Kamau",
    "customerEmail": "wanjiru@example.co.ke",
    "customerPhone": "+254712345678",
    "shippingAddress": "Moi Avenue 12, Nairobi",
}


def order_body(products, **overrides):
    body = {
        **CONTACT,
        "items": [{"product": {"id": p.id, "name": p.name, "price": p.price}, "quantity": q} for p, q in products],
    }
    body.update(overrides)
    return body


@pytest.mark.parametrize("subtotal,shipping,grand_total", [
    (18000, 150, 18150),
    (25000, 0, 25000),
    (20000, 0, 20000),
    (19999, 150, 20149),
])
def test_shipping_threshold(subtotal, shipping, grand_total):
    assert shipping_cost(subtotal) == shipping
    assert subtotal + shipping_cost(subtotal) == grand_total


@pytest.mark.parametrize("missing", ["customerName", "customerEmail", "shippingAddress"])
def test_missing_contact_field_is_rejected(missing):
    body = {**CONTACT, "items": [{"id": 1, "price": 100, "quantity": 1}]}
    body[missing] = "  "
    with pytest.raises(OrderValidationError, match="Missing required fields"):
        parse_order_payload(body)


def test_phone_is_optional():
    body = {k: v for k, v in CONTACT.items() if k != "customerPhone"}
    payload = parse_order_payload({**body, "items": [{"id": 1, "price": 100, "quantity": 1}]})
    assert payload.customer_phone is None


def test_empty_cart_is_rejected_before_any_write(db_session):
    with pytest.raises(OrderValidationError):
        payload_from_cart(EMPTY_CART, {"customer_name": "A", "customer_email": "a@b.c", "shipping_address": "X"})
    assert db_session.query(Order).count() == 0


def test_bad_line_values_are_invalid_data():
    with pytest.raises(OrderValidationError, match="Invalid order data"):
        parse_order_payload({**CONTACT, "items": [{"id": 1, "price": 100, "quantity": 0}]})


def test_place_order_writes_header_and_lines(db_session, fridge, kettle):
    payload = parse_order_payload(order_body([(fridge, 1), (kettle, 3)]))
    order = place_order(db_session, payload)

    assert order.status == "new"
    assert order.total_amount == 65500
    assert sorted((i.product_id, i.quantity, i.price) for i in order.items) == sorted([
        (fridge.id, 1, 55000), (kettle.id, 3, 3500),
    ])


def test_supplied_total_is_kept(db_session, kettle):
    payload = parse_order_payload(order_body([(kettle, 1)], totalAmount=3650))
    assert place_order(db_session, payload).total_amount == 3650


def test_small_order_gets_shipping_fee(db_session, kettle):
    payload = parse_order_payload(order_body([(kettle, 2)]))
    assert place_order(db_session, payload).total_amount == 7000 + 150


def test_line_price_comes_from_cart_not_catalog(db_session, kettle):
    cart = reduce(EMPTY_CART, AddItem(ProductSnapshot.model_validate(kettle)))
    cart = reduce(cart, UpdateQuantity(kettle.id, 2))

    kettle.price = 4200
    db_session.commit()

    payload = payload_from_cart(cart, {
        "customer_name": "Otieno", "customer_email": "otieno@example.com", "shipping_address": "Kisumu",
    })
    order = place_order(db_session, payload)

    assert order.items[0].price == 3500
    assert order.total_amount == 7000 + 150


def test_line_failure_leaves_no_order_behind(db_session, monkeypatch, fridge):
    def fail(*args, **kwargs):
        raise OperationalError("INSERT INTO order_items", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db_session, "add_all", fail)
    payload = parse_order_payload(order_body([(fridge, 1)]))

    with pytest.raises(OrderSubmissionError):
        place_order(db_session, payload)

    monkeypatch.undo()
    assert db_session.query(Order).count() == 0
    assert db_session.query(OrderItem).count() == 0
