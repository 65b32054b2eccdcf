# backend/utils/cart_reducer.py
"""
Pure cart state transitions.

Every action is a small frozen dataclass and ``reduce`` returns a new
``CartState`` without touching storage. Persistence lives in ``cart_store``.
"""
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Union

from pydantic import ValidationError

from schemas.cart import CartLineItem, CartState, ProductSnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AddItem:
    product: ProductSnapshot

@dataclass(frozen=True)
class RemoveItem:
    product_id: int

@dataclass(frozen=True)
class UpdateQuantity:
    product_id: int
    quantity: int

@dataclass(frozen=True)
class ClearCart:
    pass

@dataclass(frozen=True)
class LoadCart:
    items: Sequence[CartLineItem]


CartAction = Union[AddItem, RemoveItem, UpdateQuantity, ClearCart, LoadCart]

EMPTY_CART = CartState()


def reduce(state: CartState, action: CartAction) -> CartState:
    if isinstance(action, AddItem):
        return _add(state, action.product)
    if isinstance(action, RemoveItem):
        return CartState(items=tuple(i for i in state.items if i.product.id != action.product_id))
    if isinstance(action, UpdateQuantity):
        if action.quantity <= 0:
            return reduce(state, RemoveItem(action.product_id))
        return CartState(items=tuple(
            i.model_copy(update={"quantity": action.quantity}) if i.product.id == action.product_id else i
            for i in state.items
        ))
    if isinstance(action, ClearCart):
        return EMPTY_CART
    if isinstance(action, LoadCart):
        return CartState(items=_merge(action.items))
    raise TypeError(f"Unknown cart action: {action!r}")


def _add(state: CartState, product: ProductSnapshot) -> CartState:
    if state.find(product.id) is None:
        return CartState(items=state.items + (CartLineItem(product=product, quantity=1),))
    return CartState(items=tuple(
        i.model_copy(update={"quantity": i.quantity + 1}) if i.product.id == product.id else i
        for i in state.items
    ))


def _merge(items: Sequence[CartLineItem]) -> tuple:
    # One line per product id, first occurrence keeps its position
    merged: Dict[int, CartLineItem] = {}
    for item in items:
        existing = merged.get(item.product.id)
        if existing is None:
            merged[item.product.id] = item
        else:
            merged[item.product.id] = existing.model_copy(update={"quantity": existing.quantity + item.quantity})
    return tuple(merged.values())


# =========================
# SNAPSHOT (DE)SERIALIZATION
# =========================
def serialize_items(state: CartState) -> str:
    return json.dumps([item.model_dump(mode="json") for item in state.items])


def parse_items(raw: Union[str, bytes, None]) -> List[CartLineItem]:
    """Decode a persisted snapshot into line items.

    Anything that is not a JSON array yields an empty list. Elements that do not
    validate as a line item are dropped one by one.
    """
    if not raw:
        return []
    try:
        payload: Any = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Discarding unreadable cart snapshot")
        return []

    if not isinstance(payload, list):
        logger.warning("Discarding cart snapshot of type %s", type(payload).__name__)
        return []

    items = []
    for entry in payload:
        try:
            items.append(CartLineItem.model_validate(entry))
        except ValidationError:
            logger.warning("Dropping malformed cart line: %r", entry)
    return items
