# backend/utils/cart_store.py
import logging
from typing import Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.cart import CartSnapshot
from schemas.cart import CartState
from utils.cart_reducer import EMPTY_CART, CartAction, LoadCart, parse_items, reduce, serialize_items

logger = logging.getLogger(__name__)


class CartStorageError(Exception):
    """Raised by a storage backend when a snapshot cannot be read or written."""


# In-process backend, used by tests and as a fallback when no database is wired
class MemoryCartStorage:
    def __init__(self):
        self._data: Dict[str, str] = {}

    def read(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def write(self, key: str, value: str) -> None:
        self._data[key] = value


# Durable backend: one row per cart session in cart_snapshots
class SqlCartStorage:
    def __init__(self, db: Session):
        self.db = db

    def read(self, key: str) -> Optional[str]:
        try:
            row = self.db.get(CartSnapshot, key)
        except SQLAlchemyError as e:
            raise CartStorageError(f"read failed for cart {key}") from e
        return row.value if row else None

    def write(self, key: str, value: str) -> None:
        try:
            row = self.db.get(CartSnapshot, key)
            if row:
                row.value = value
            else:
                self.db.add(CartSnapshot(key=key, value=value))
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise CartStorageError(f"write failed for cart {key}") from e


class CartStore:
    """
    Holds the cart of one cart session.

    The store starts empty and does not write anything until ``hydrate`` has
    loaded the persisted snapshot; writing earlier would overwrite the saved cart
    with an empty one. Storage errors are logged and switch the store to
    in-memory mode for the rest of its life.
    """

    def __init__(self, storage, key: str):
        self.storage = storage
        self.key = key
        self.state: CartState = EMPTY_CART
        self.hydrated = False
        self.persistent = True

    def hydrate(self) -> CartState:
        raw = None
        try:
            raw = self.storage.read(self.key)
        except CartStorageError as e:
            logger.warning(f"Cart {self.key}: snapshot unavailable, continuing in memory ({e})")
            self.persistent = False

        self.state = reduce(self.state, LoadCart(parse_items(raw)))
        self.hydrated = True
        return self.state

    def dispatch(self, action: CartAction) -> CartState:
        self.state = reduce(self.state, action)
        if self.hydrated and self.persistent:
            self._persist()
        return self.state

    def _persist(self) -> None:
        try:
            self.storage.write(self.key, serialize_items(self.state))
        except CartStorageError as e:
            logger.warning(f"Cart {self.key}: persisting failed, continuing in memory ({e})")
            self.persistent = False
