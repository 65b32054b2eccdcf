from sqlalchemy.exc import OperationalError

from models.log import Log
from models.order import Order, OrderItem


CHECKOUT = {
    "customerName": "Wanjiru Kamau",
    "customerEmail": "wanjiru@example.co.ke",
    "customerPhone": "+254712345678",
    "shippingAddress": "Moi Avenue 12, Nairobi",
}


def test_new_visitor_gets_cart_cookie(client):
    response = client.get("/cart")

    assert response.status_code == 200
    assert response.cookies.get("cart_id")
    assert response.json()["items"] == []
    assert response.json()["total"] == 0


def test_cart_survives_between_requests(client, fridge, kettle):
    client.post("/cart/items", json={"product_id": fridge.id})
    client.post("/cart/items", json={"product_id": kettle.id})
    response = client.put(f"/cart/items/{kettle.id}", json={"quantity": 3})

    assert response.status_code == 200
    assert response.json()["total"] == 65500

    cart = client.get("/cart").json()
    assert [(i["product_id"], i["quantity"]) for i in cart["items"]] == [(fridge.id, 1), (kettle.id, 3)]
    assert cart["item_count"] == 4
    assert cart["shipping"] == 0
    assert cart["persistent"] is True


def test_add_merges_same_product(client, kettle):
    client.post("/cart/items", json={"product_id": kettle.id})
    cart = client.post("/cart/items", json={"product_id": kettle.id}).json()

    assert len(cart["items"]) == 1
    assert cart["items"][0]["quantity"] == 2


def test_small_cart_pays_shipping(client, kettle):
    cart = client.post("/cart/items", json={"product_id": kettle.id}).json()
    assert cart["shipping"] == 150
    assert cart["grand_total"] == 3650


def test_add_unknown_product_is_404(client, catalog):
    assert client.post("/cart/items", json={"product_id": 9999}).status_code == 404


def test_add_beyond_stock_is_rejected(client, db_session, kettle):
    kettle.stock_quantity = 1
    db_session.commit()

    assert client.post("/cart/items", json={"product_id": kettle.id}).status_code == 200
    response = client.post("/cart/items", json={"product_id": kettle.id})

    assert response.status_code == 400
    assert response.json()["detail"] == "Insufficient stock"
    assert client.get("/cart").json()["items"][0]["quantity"] == 1


def test_update_to_zero_removes_line(client, kettle):
    client.post("/cart/items", json={"product_id": kettle.id})
    cart = client.put(f"/cart/items/{kettle.id}", json={"quantity": 0}).json()
    assert cart["items"] == []


def test_update_missing_line_is_noop(client, fridge, kettle):
    client.post("/cart/items", json={"product_id": fridge.id})

    for quantity in (0, 2):
        response = client.put(f"/cart/items/{kettle.id}", json={"quantity": quantity})
        assert response.status_code == 200
        assert [(i["product_id"], i["quantity"]) for i in response.json()["items"]] == [(fridge.id, 1)]

    assert client.put("/cart/items/9999", json={"quantity": 0}).status_code == 200


def test_remove_and_clear(client, fridge, kettle):
    client.post("/cart/items", json={"product_id": fridge.id})
    client.post("/cart/items", json={"product_id": kettle.id})

    cart = client.delete(f"/cart/items/{fridge.id}").json()
    assert [i["product_id"] for i in cart["items"]] == [kettle.id]

    # Removing an absent product is not an error
    assert client.delete(f"/cart/items/{fridge.id}").status_code == 200

    assert client.delete("/cart").json()["items"] == []


def test_checkout_creates_order_and_clears_cart(client, db_session, fridge, kettle):
    client.post("/cart/items", json={"product_id": fridge.id})
    client.post("/cart/items", json={"product_id": kettle.id})
    client.put(f"/cart/items/{kettle.id}", json={"quantity": 3})

    response = client.post("/cart/checkout", json=CHECKOUT)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    order = db_session.get(Order, body["order_id"])
    assert order.status == "new"
    assert order.total_amount == 65500
    assert len(order.items) == 2
    assert body["order"]["total_formatted"] == "KES 65,500"

    assert client.get("/cart").json()["items"] == []


def test_checkout_with_empty_cart_is_rejected(client, db_session):
    response = client.post("/cart/checkout", json=CHECKOUT)

    assert response.status_code == 400
    assert db_session.query(Order).count() == 0


def test_checkout_missing_address_keeps_cart(client, kettle):
    client.post("/cart/items", json={"product_id": kettle.id})
    body = {k: v for k, v in CHECKOUT.items() if k != "shippingAddress"}

    response = client.post("/cart/checkout", json=body)

    assert response.status_code == 400
    assert response.json()["detail"] == "Missing required fields"
    assert len(client.get("/cart").json()["items"]) == 1


def test_checkout_with_wrong_field_types_is_400(client, db_session, kettle):
    client.post("/cart/items", json={"product_id": kettle.id})

    response = client.post("/cart/checkout", json={**CHECKOUT, "customerName": 5})

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid order data"
    assert db_session.query(Order).count() == 0


def test_checkout_with_unreadable_body_is_400(client, kettle):
    client.post("/cart/items", json={"product_id": kettle.id})

    for kwargs in ({"content": b"{not json", "headers": {"Content-Type": "application/json"}}, {"json": [1, 2]}):
        assert client.post("/cart/checkout", **kwargs).status_code == 400
    assert len(client.get("/cart").json()["items"]) == 1


def test_checkout_names_products_deleted_since_adding(client, db_session, fridge, kettle):
    client.post("/cart/items", json={"product_id": fridge.id})
    client.post("/cart/items", json={"product_id": kettle.id})
    db_session.delete(kettle)
    db_session.commit()

    response = client.post("/cart/checkout", json=CHECKOUT)

    assert response.status_code == 400
    assert "Sayona 1.7L Cordless Kettle" in response.json()["detail"]
    assert db_session.query(Order).count() == 0
    assert len(client.get("/cart").json()["items"]) == 2


def test_storage_failure_keeps_cart_and_returns_500(client, db_session, monkeypatch, kettle):
    client.post("/cart/items", json={"product_id": kettle.id})

    def fail(*args, **kwargs):
        raise OperationalError("INSERT INTO order_items", {}, Exception("database is locked"))

    monkeypatch.setattr(db_session, "add_all", fail)
    response = client.post("/cart/checkout", json=CHECKOUT)
    monkeypatch.undo()

    assert response.status_code == 500
    assert response.json()["detail"] == "Could not place the order. Please try again."
    assert db_session.query(Order).count() == 0
    assert db_session.query(OrderItem).count() == 0
    assert len(client.get("/cart").json()["items"]) == 1

    failure = db_session.query(Log).filter(Log.action == "CHECKOUT").one()
    assert failure.status == "FAIL"
