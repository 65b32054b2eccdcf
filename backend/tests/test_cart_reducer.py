import pytest
from hypothesis import given, strategies as st

from schemas.cart import CartLineItem, CartState, ProductSnapshot
from utils.cart_reducer import (
    EMPTY_CART, AddItem, ClearCart, LoadCart, RemoveItem, UpdateQuantity, reduce,
)


FRIDGE = ProductSnapshot(id=1, name="Hotpoint 250L Double Door Fridge", price=55000, stock_quantity=8)
KETTLE = ProductSnapshot(id=2, name="Sayona 1.7L Cordless Kettle", price=3500, stock_quantity=40)
IRON = ProductSnapshot(id=3, name="Philips Steam Iron", price=4000, stock_quantity=30)


def run(*actions, state=EMPTY_CART):
    for action in actions:
        state = reduce(state, action)
    return state


def test_adding_same_product_twice_merges_into_one_line():
    state = run(AddItem(FRIDGE), AddItem(FRIDGE))

    assert len(state.items) == 1
    assert state.items[0].quantity == 2
    assert state.total == 110000


@pytest.mark.parametrize("quantity", [0, -1])
def test_non_positive_quantity_removes_line(quantity):
    state = run(AddItem(FRIDGE), AddItem(KETTLE), UpdateQuantity(KETTLE.id, quantity))

    assert state.find(KETTLE.id) is None
    assert [i.product.id for i in state.items] == [FRIDGE.id]


def test_fridge_and_kettle_totals():
    state = run(AddItem(FRIDGE), AddItem(KETTLE))
    assert state.total == 58500

    state = reduce(state, UpdateQuantity(KETTLE.id, 3))
    assert state.total == 65500
    assert state.find(KETTLE.id).quantity == 3


def test_update_quantity_sets_exact_value():
    state = run(AddItem(KETTLE), AddItem(KETTLE), UpdateQuantity(KETTLE.id, 5))
    assert state.find(KETTLE.id).quantity == 5


def test_missing_products_are_noops():
    start = run(AddItem(FRIDGE))
    assert reduce(start, RemoveItem(99)) == start
    assert reduce(start, UpdateQuantity(99, 4)) == start


def test_clear_empties_cart():
    state = run(AddItem(FRIDGE), AddItem(IRON), ClearCart())
    assert state.items == ()
    assert state.total == 0


def test_reduce_does_not_mutate_input():
    before = run(AddItem(KETTLE))
    reduce(before, AddItem(KETTLE))
    assert before.find(KETTLE.id).quantity == 1


def test_load_replaces_and_merges_duplicate_lines():
    state = run(AddItem(IRON))
    loaded = reduce(state, LoadCart([
        CartLineItem(product=KETTLE, quantity=1),
        CartLineItem(product=FRIDGE, quantity=1),
        CartLineItem(product=KETTLE, quantity=2),
    ]))

    assert [i.product.id for i in loaded.items] == [KETTLE.id, FRIDGE.id]
    assert loaded.find(KETTLE.id).quantity == 3
    assert loaded.find(IRON.id) is None


def test_unknown_action_is_rejected():
    with pytest.raises(TypeError):
        reduce(EMPTY_CART, {"type": "ADD_ITEM", "payload": FRIDGE})


def test_item_count_sums_quantities():
    state = run(AddItem(FRIDGE), AddItem(KETTLE), UpdateQuantity(KETTLE.id, 4))
    assert state.item_count == 5


# --- randomized action sequences ---

products = st.sampled_from([FRIDGE, KETTLE, IRON])
product_ids = st.sampled_from([FRIDGE.id, KETTLE.id, IRON.id, 99])

actions = st.one_of(
    products.map(AddItem),
    product_ids.map(RemoveItem),
    st.builds(UpdateQuantity, product_ids, st.integers(min_value=-3, max_value=20)),
)


@given(st.lists(actions, max_size=40))
def test_total_matches_line_items_after_every_action(sequence):
    state = CartState()
    for action in sequence:
        state = reduce(state, action)
        assert state.total == sum(i.product.price * i.quantity for i in state.items)
        assert all(i.quantity >= 1 for i in state.items)
        assert len({i.product.id for i in state.items}) == len(state.items)
