from pydantic import BaseModel
from typing import Optional, Any, Dict

# Schema for back-office login credentials
class AdminLogin(BaseModel):
    username: str
    password: str

# Authenticated back-office identity
class AdminUser(BaseModel):
    username: str
    role: str = "admin"

# Schema for JWT authentication token response
class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: AdminUser

# Schema for explicit token verification requests
class TokenVerifyRequest(BaseModel):
    token: Optional[str] = None

class TokenVerifyResponse(BaseModel):
    valid: bool
    user: Optional[AdminUser] = None

# Schema for storefront setting upserts
class SiteSettingWrite(BaseModel):
    key: str
    value: Any = None

# Dashboard counters
class StatsSummary(BaseModel):
    total_orders: int
    new_orders: int
    total_products: int
    total_revenue: int
    orders_by_status: Dict[str, int]

# Product assistant request/response
class PriceGuideRequest(BaseModel):
    product_name: str
    brand: Optional[str] = None

class PriceGuideResponse(BaseModel):
    product_name: str
    matched: Optional[str] = None
    confidence: str
    min_price: int
    max_price: int
    suggested_price: int
    suggested_price_formatted: str
    description: str
