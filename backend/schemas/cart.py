from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel
from typing import List, Optional, Tuple


# Product fields copied into the cart at add time.
# Unknown keys are ignored so snapshots written by older builds keep loading.
class ProductSnapshot(BaseModel):
    model_config = ConfigDict(extra="ignore", from_attributes=True, frozen=True)

    id: int
    name: str
    price: int = Field(gt=0)
    stock_quantity: int = Field(default=0, ge=0)
    slug: Optional[str] = None
    image_url: Optional[str] = None
    category_id: Optional[int] = None


# One (product, quantity) pair; this is also the persisted JSON element
class CartLineItem(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    product: ProductSnapshot
    quantity: int = Field(ge=1)


class CartState(BaseModel):
    """Immutable cart value produced by the reducer.

    ``total`` is derived from ``items`` on every access and is never stored.
    """
    model_config = ConfigDict(frozen=True)

    items: Tuple[CartLineItem, ...] = ()

    @computed_field
    @property
    def total(self) -> int:
        return sum(item.product.price * item.quantity for item in self.items)

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def find(self, product_id: int) -> Optional[CartLineItem]:
        return next((item for item in self.items if item.product.id == product_id), None)


# Request schema for adding a product to the cart
class CartAddItem(BaseModel):
    product_id: int

# Request schema for setting a line quantity; zero or less removes the line
class CartUpdateItem(BaseModel):
    quantity: int

# Contact and delivery details sent with a cart checkout
class CheckoutPayload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    shipping_address: Optional[str] = None

# Response schema for a single cart line
class CartItemOut(BaseModel):
    product_id: int
    name: str
    slug: Optional[str] = None
    image_url: Optional[str] = None
    unit_price: int
    quantity: int
    stock_quantity: int
    line_total: int

# Response schema for the whole cart, with checkout pricing
class CartOut(BaseModel):
    cart_id: str
    items: List[CartItemOut]
    item_count: int
    total: int
    shipping: int
    grand_total: int
    persistent: bool = True
