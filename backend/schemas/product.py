# backend/schemas/product.py
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import datetime


# Base configuration for ORM compatibility
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# ---- Categories ----
class CategoryOut(ORMBase):
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

# Name is checked in the route so a missing name is a 400, not a 422
class CategoryWrite(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None


# ---- Products ----
class ProductOut(ORMBase):
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    price: int
    stock_quantity: int
    image_url: Optional[str] = None
    featured: bool = False
    category_id: int
    group_id: Optional[int] = None
    variant_type: Optional[str] = None
    variant_value: Optional[str] = None
    sort_order: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class ProductWithCategory(ProductOut):
    category: Optional[CategoryOut] = None

# Single product page: the product plus the other variants of its group
class ProductDetail(ProductWithCategory):
    variants: List[ProductOut] = []

# Schema for creating or replacing a product; required fields are checked in the route
class ProductWrite(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[int] = Field(default=None, gt=0)
    stock_quantity: Optional[int] = Field(default=None, ge=0)
    image_url: Optional[str] = None
    featured: Optional[bool] = None
    category_id: Optional[int] = None
    group_id: Optional[int] = None
    variant_type: Optional[str] = None
    variant_value: Optional[str] = None
    sort_order: Optional[int] = None

# Paginated response for product listings
class ProductListPage(ORMBase):
    items: List[ProductWithCategory]
    total: int
    page: int
    page_size: int


# ---- Product groups ----
class ProductGroupOut(ORMBase):
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    base_price: int
    category_id: int
    featured: bool = False
    main_image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    category: Optional[CategoryOut] = None
    products: List[ProductOut] = []

class ProductGroupWrite(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    base_price: Optional[int] = Field(default=None, ge=0)
    category_id: Optional[int] = None
    featured: Optional[bool] = None
    main_image_url: Optional[str] = None


# ---- Assets and import ----
class ImageUploadOut(BaseModel):
    success: bool = True
    image_url: str
    file_name: str
    file_size: int
    mime_type: str
    stored_as: str

class ImageUploadResult(BaseModel):
    file_name: str
    success: bool
    image_url: Optional[str] = None
    error: Optional[str] = None

class StoredImage(BaseModel):
    name: str
    url: str
    size: int
    uploaded_at: datetime

class BulkUploadResult(BaseModel):
    success: bool = True
    inserted: int
    skipped: int
    message: str
