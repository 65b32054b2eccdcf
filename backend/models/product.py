# backend/models/product.py
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, CheckConstraint, func
from sqlalchemy.orm import relationship
from database import Base

PLACEHOLDER_IMAGE = "/placeholder.svg?height=400&width=400"

# Model Product
# A single sellable appliance. Variants of the same model (colour, capacity...)
# point at a shared ProductGroup and carry their own price and stock.
class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    slug = Column(String, unique=True, nullable=False, index=True)
    description = Column(Text)

    # Whole Kenyan Shillings, no minor units.
    price = Column(Integer, CheckConstraint("price > 0"), nullable=False)
    stock_quantity = Column(Integer, CheckConstraint("stock_quantity >= 0"), nullable=False, default=0)

    image_url = Column(String, nullable=True, default=PLACEHOLDER_IMAGE)
    featured = Column(Boolean, nullable=False, default=False)

    category_id = Column(Integer, ForeignKey("categories.id"), index=True, nullable=False)

    # Variant data, only set when the product belongs to a group.
    group_id = Column(Integer, ForeignKey("product_groups.id"), index=True, nullable=True)
    variant_type = Column(String, nullable=True)
    variant_value = Column(String, nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    category = relationship("Category", back_populates="products")
    product_group = relationship("ProductGroup", back_populates="products")


# Parent record for a family of variant products
class ProductGroup(Base):
    __tablename__ = "product_groups"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    slug = Column(String, unique=True, nullable=False, index=True)
    description = Column(Text)
    base_price = Column(Integer, CheckConstraint("base_price >= 0"), nullable=False, default=0)
    category_id = Column(Integer, ForeignKey("categories.id"), index=True, nullable=False)
    featured = Column(Boolean, nullable=False, default=False)
    main_image_url = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    category = relationship("Category", back_populates="product_groups")
    products = relationship("Product", back_populates="product_group", order_by="Product.sort_order")
