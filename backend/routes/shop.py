from typing import Any, Dict, Optional, List, Literal
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session, joinedload

from database import get_db
from models.category import Category
from models.product import Product, ProductGroup
from models.setting import SiteSetting
import schemas.product as product_schemas

router = APIRouter(
    prefix="/shop",
    tags=["Shop"]
)

# Categories for navigation, alphabetical
@router.get("/categories", response_model=List[product_schemas.CategoryOut])
def list_categories(db: Session = Depends(get_db)):
    return db.query(Category).order_by(Category.name.asc()).all()

@router.get("/products", response_model=product_schemas.ProductListPage)
def list_products_for_shop(
    # Search and filter parameters
    category: Optional[str] = Query(None, description="Category slug"),
    search: Optional[str] = Query(None, description="Search by product name"),
    featured: Optional[bool] = Query(None),

    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=100),
    sort: Literal["newest", "price-asc", "price-desc", "name"] = "newest",
    db: Session = Depends(get_db),
):
    query = db.query(Product).options(joinedload(Product.category))

    # Filter by category slug; an unknown slug means no filter
    if category:
        cat = db.query(Category).filter(Category.slug == category).first()
        if cat:
            query = query.filter(Product.category_id == cat.id)

    if search:
        query = query.filter(Product.name.ilike(f"%{search}%"))

    if featured:
        query = query.filter(Product.featured.is_(True))

    # Configure sorting logic
    ordering = {
        "price-asc": (Product.price.asc(),),
        "price-desc": (Product.price.desc(),),
        "name": (Product.name.asc(),),
        "newest": (Product.created_at.desc(), Product.id.desc()),
    }
    query = query.order_by(*ordering[sort])

    total = query.count()
    items: List[Product] = query.offset((page - 1) * page_size).limit(page_size).all()

    return {"items": items, "total": total, "page": page, "page_size": page_size}

# Single product page, with sibling variants when the product is part of a group
@router.get("/products/{slug}", response_model=product_schemas.ProductDetail)
def get_product_by_slug(slug: str, db: Session = Depends(get_db)):
    product = db.query(Product).options(joinedload(Product.category)).filter(Product.slug == slug).first()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    variants = []
    if product.group_id is not None:
        variants = (
            db.query(Product)
            .filter(Product.group_id == product.group_id, Product.id != product.id)
            .order_by(Product.sort_order.asc(), Product.id.asc())
            .all()
        )

    out = product_schemas.ProductDetail.model_validate(product)
    out.variants = [product_schemas.ProductOut.model_validate(v) for v in variants]
    return out

@router.get("/product-groups/{slug}", response_model=product_schemas.ProductGroupOut)
def get_product_group(slug: str, db: Session = Depends(get_db)):
    group = (
        db.query(ProductGroup)
        .options(joinedload(ProductGroup.category), joinedload(ProductGroup.products))
        .filter(ProductGroup.slug == slug)
        .first()
    )
    if not group:
        raise HTTPException(status_code=404, detail="Product group not found")
    return group

# Public theming values as a flat {key: value} object
@router.get("/settings")
def get_public_settings(db: Session = Depends(get_db)) -> Dict[str, Any]:
    return {s.key: s.value for s in db.query(SiteSetting).all()}
