from models.category import Category
from models.product import Product, ProductGroup
from models.order import Order, OrderItem, OrderStatus
from models.cart import CartSnapshot
from models.setting import SiteSetting
from models.log import Log

__all__ = [
    "Category",
    "Product",
    "ProductGroup",
    "Order",
    "OrderItem",
    "OrderStatus",
    "CartSnapshot",
    "SiteSetting",
    "Log",
]
