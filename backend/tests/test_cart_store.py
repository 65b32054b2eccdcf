import json

from models.cart import CartSnapshot
from schemas.cart import ProductSnapshot
from utils.cart_reducer import AddItem, ClearCart, UpdateQuantity, parse_items, serialize_items
from utils.cart_store import CartStorageError, CartStore, MemoryCartStorage, SqlCartStorage


FRIDGE = ProductSnapshot(id=1, name="Hotpoint 250L Double Door Fridge", price=55000, stock_quantity=8)
KETTLE = ProductSnapshot(id=2, name="Sayona 1.7L Cordless Kettle", price=3500, stock_quantity=40)


class BrokenStorage:
    """Storage whose every read and write fails."""

    def __init__(self):
        self.writes = 0

    def read(self, key):
        raise CartStorageError("storage disabled")

    def write(self, key, value):
        self.writes += 1
        raise CartStorageError("quota exceeded")


class ReadOnlyFailure(MemoryCartStorage):
    def write(self, key, value):
        raise CartStorageError("quota exceeded")


def test_snapshot_round_trip_reproduces_cart():
    storage = MemoryCartStorage()
    first = CartStore(storage, "abc")
    first.hydrate()
    first.dispatch(AddItem(FRIDGE))
    first.dispatch(AddItem(KETTLE))
    first.dispatch(UpdateQuantity(KETTLE.id, 3))

    second = CartStore(storage, "abc")
    second.hydrate()

    assert second.state == first.state
    assert second.state.total == 65500


def test_persisted_format_is_array_of_product_and_quantity():
    storage = MemoryCartStorage()
    store = CartStore(storage, "abc")
    store.hydrate()
    store.dispatch(AddItem(KETTLE))

    payload = json.loads(storage.read("abc"))
    assert payload == [{"product": KETTLE.model_dump(mode="json"), "quantity": 1}]


def test_malformed_snapshots_load_as_empty_cart():
    for raw in ["{not json", '{"product": 1}', "42", "null", ""]:
        storage = MemoryCartStorage()
        storage.write("abc", raw)
        store = CartStore(storage, "abc")

        assert store.hydrate().items == ()
        assert store.persistent


def test_invalid_lines_are_dropped_individually():
    raw = json.dumps([
        {"product": KETTLE.model_dump(mode="json"), "quantity": 2},
        {"product": {"id": 9, "name": "No price"}, "quantity": 1},
        {"product": FRIDGE.model_dump(mode="json"), "quantity": 0},
        "garbage",
    ])
    items = parse_items(raw)
    assert [(i.product.id, i.quantity) for i in items] == [(KETTLE.id, 2)]


def test_old_snapshots_with_extra_product_fields_still_load():
    product = {**KETTLE.model_dump(mode="json"), "brand": "Sayona", "rating": 4.5}
    items = parse_items(json.dumps([{"product": product, "quantity": 1}]))
    assert items[0].product == KETTLE


def test_dispatch_before_hydrate_never_writes():
    storage = MemoryCartStorage()
    storage.write("abc", serialize_items(CartStore(storage, "x").dispatch(AddItem(FRIDGE))))

    store = CartStore(storage, "abc")
    store.dispatch(ClearCart())
    assert parse_items(storage.read("abc"))[0].product.id == FRIDGE.id

    store.hydrate()
    assert store.state.find(FRIDGE.id) is not None


def test_unreadable_storage_degrades_to_memory():
    storage = BrokenStorage()
    store = CartStore(storage, "abc")

    store.hydrate()
    store.dispatch(AddItem(KETTLE))

    assert store.persistent is False
    assert store.state.total == 3500
    assert storage.writes == 0


def test_write_failure_keeps_cart_in_memory():
    store = CartStore(ReadOnlyFailure(), "abc")
    store.hydrate()

    store.dispatch(AddItem(KETTLE))
    store.dispatch(AddItem(KETTLE))

    assert store.persistent is False
    assert store.state.find(KETTLE.id).quantity == 2


def test_sql_storage_upserts_one_row_per_cart(db_session):
    storage = SqlCartStorage(db_session)
    store = CartStore(storage, "session-1")
    store.hydrate()
    store.dispatch(AddItem(FRIDGE))
    store.dispatch(AddItem(KETTLE))

    rows = db_session.query(CartSnapshot).all()
    assert [r.key for r in rows] == ["session-1"]

    reloaded = CartStore(SqlCartStorage(db_session), "session-1")
    assert reloaded.hydrate().total == 58500
