from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime


# One submitted line. Accepts the cart's persisted shape
# ({"product": {...}, "quantity": n}) as well as a flat {"id", "price", "quantity"}.
class OrderItemIn(BaseModel):
    product_id: int
    price: int = Field(gt=0)
    quantity: int = Field(ge=1)

    @model_validator(mode="before")
    @classmethod
    def _flatten_product(cls, data):
        if not isinstance(data, dict):
            return data
        product = data.get("product")
        if isinstance(product, dict):
            return {
                "product_id": product.get("id"),
                "price": product.get("price", data.get("price")),
                "quantity": data.get("quantity"),
            }
        if "product_id" not in data and "id" in data:
            return {**data, "product_id": data["id"]}
        return data


# Input schema for the public order submission endpoint (camelCase on the wire)
class OrderCreatePayload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    shipping_address: Optional[str] = None
    items: Optional[List[OrderItemIn]] = None
    total_amount: Optional[int] = Field(default=None, ge=0)


# Output schema for an individual order line item
class OrderItemOut(BaseModel):
    product_id: Optional[int] = None
    product_name: str
    quantity: int
    price: int
    line_total: int


# Output schema representing the full order details
class OrderResponse(BaseModel):
    id: int
    status: str
    total_amount: int
    total_formatted: str
    customer_name: str
    customer_email: str
    customer_phone: Optional[str] = None
    shipping_address: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    items: List[OrderItemOut]


# Result of a successful order submission
class OrderSubmitResponse(BaseModel):
    success: bool = True
    order_id: int
    order: OrderResponse


# Schema for the admin order list (offset pagination)
class OrdersPage(BaseModel):
    items: List[OrderResponse]
    total: int
    limit: int
    offset: int

# Schema for updating order status
class OrderStatusPatch(BaseModel):
    status: str
