# backend/routes/product_groups.py
import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from database import get_db
from models.category import Category
from models.product import Product, ProductGroup
from schemas.admin import AdminUser
from schemas.product import ProductGroupOut, ProductGroupWrite
from utils.audit import client_ip, write_log
from utils.text import slugify
from utils.tokenJWT import get_current_admin

router = APIRouter(prefix="/admin/product-groups", tags=["Admin"])
logger = logging.getLogger(__name__)


def _save(db: Session):
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="A product group with this name already exists")
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Database error while saving product group")
        raise HTTPException(status_code=500, detail="Internal server error")

def _load(db: Session, group_id: int) -> ProductGroup:
    group = (
        db.query(ProductGroup)
        .options(joinedload(ProductGroup.category), joinedload(ProductGroup.products))
        .filter(ProductGroup.id == group_id)
        .first()
    )
    if not group:
        raise HTTPException(status_code=404, detail="Product group not found")
    return group


@router.get("", response_model=List[ProductGroupOut])
def list_product_groups(db: Session = Depends(get_db), admin: AdminUser = Depends(get_current_admin)):
    return (
        db.query(ProductGroup)
        .options(joinedload(ProductGroup.category), joinedload(ProductGroup.products))
        .order_by(ProductGroup.name.asc())
        .all()
    )


@router.post("", response_model=ProductGroupOut)
def create_product_group(
    payload: ProductGroupWrite,
    request: Request,
    db: Session = Depends(get_db),
    admin: AdminUser = Depends(get_current_admin),
):
    name = (payload.name or "").strip()
    if not name or not payload.category_id:
        raise HTTPException(status_code=400, detail="Missing required fields: name and category_id are required")
    if db.get(Category, payload.category_id) is None:
        raise HTTPException(status_code=400, detail="Unknown category")

    data = payload.model_dump(exclude_none=True)
    data["name"] = name
    group = ProductGroup(**data, slug=slugify(name))
    db.add(group)
    _save(db)

    write_log(db, actor=admin.username, action="GROUP_CREATE", resource="product_groups",
              ip=client_ip(request), meta={"id": group.id, "slug": group.slug})
    return _load(db, group.id)


@router.put("/{group_id}", response_model=ProductGroupOut)
def update_product_group(
    group_id: int,
    payload: ProductGroupWrite,
    request: Request,
    db: Session = Depends(get_db),
    admin: AdminUser = Depends(get_current_admin),
):
    group = _load(db, group_id)
    changes = payload.model_dump(exclude_unset=True)
    nulled = sorted(k for k in ("base_price", "category_id", "featured") if k in changes and changes[k] is None)
    if nulled:
        raise HTTPException(status_code=400, detail=f"Fields cannot be null: {', '.join(nulled)}")

    if "name" in changes:
        name = (changes["name"] or "").strip()
        if not name:
            raise HTTPException(status_code=400, detail="Product group name is required")
        changes["name"] = name
        group.slug = slugify(name)
    if "category_id" in changes and db.get(Category, changes["category_id"]) is None:
        raise HTTPException(status_code=400, detail="Unknown category")

    for key, value in changes.items():
        setattr(group, key, value)
    _save(db)

    write_log(db, actor=admin.username, action="GROUP_UPDATE", resource="product_groups",
              ip=client_ip(request), meta={"id": group_id, "fields": sorted(changes)})
    return _load(db, group_id)


# Variants survive as standalone products
@router.delete("/{group_id}")
def delete_product_group(
    group_id: int,
    request: Request,
    db: Session = Depends(get_db),
    admin: AdminUser = Depends(get_current_admin),
):
    group = _load(db, group_id)

    detached = (
        db.query(Product)
        .filter(Product.group_id == group_id)
        .update(
            {Product.group_id: None, Product.variant_type: None, Product.variant_value: None},
            synchronize_session=False,
        )
    )
    db.delete(group)
    _save(db)

    write_log(db, actor=admin.username, action="GROUP_DELETE", resource="product_groups",
              ip=client_ip(request), meta={"id": group_id, "detached": detached})
    return {"success": True, "detached": detached}
