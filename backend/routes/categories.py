# backend/routes/categories.py
import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from database import get_db
from models.category import Category
from models.product import Product, ProductGroup
from schemas.admin import AdminUser
from schemas.product import CategoryOut, CategoryWrite
from utils.audit import client_ip, write_log
from utils.text import slugify
from utils.tokenJWT import get_current_admin

router = APIRouter(prefix="/admin/categories", tags=["Admin"])
logger = logging.getLogger(__name__)


def _save(db: Session):
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="A category with this name already exists")
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Database error while saving category")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("", response_model=List[CategoryOut])
def list_categories(db: Session = Depends(get_db), admin: AdminUser = Depends(get_current_admin)):
    return db.query(Category).order_by(Category.name.asc()).all()


@router.post("", response_model=CategoryOut)
def create_category(
    payload: CategoryWrite,
    request: Request,
    db: Session = Depends(get_db),
    admin: AdminUser = Depends(get_current_admin),
):
    name = (payload.name or "").strip()
    if not name:
        raise HTTPException(status_code=400, detail="Category name is required")

    category = Category(name=name, slug=slugify(name), description=payload.description)
    db.add(category)
    _save(db)
    db.refresh(category)

    write_log(db, actor=admin.username, action="CATEGORY_CREATE", resource="categories",
              ip=client_ip(request), meta={"id": category.id, "name": category.name})
    return category


@router.put("/{category_id}", response_model=CategoryOut)
def update_category(
    category_id: int,
    payload: CategoryWrite,
    request: Request,
    db: Session = Depends(get_db),
    admin: AdminUser = Depends(get_current_admin),
):
    category = db.get(Category, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")

    if payload.name is not None:
        name = payload.name.strip()
        if not name:
            raise HTTPException(status_code=400, detail="Category name is required")
        category.name = name
        category.slug = slugify(name)
    if payload.description is not None:
        category.description = payload.description

    _save(db)
    db.refresh(category)

    write_log(db, actor=admin.username, action="CATEGORY_UPDATE", resource="categories",
              ip=client_ip(request), meta={"id": category.id})
    return category


# Refused while anything still points at the category
@router.delete("/{category_id}")
def delete_category(
    category_id: int,
    request: Request,
    db: Session = Depends(get_db),
    admin: AdminUser = Depends(get_current_admin),
):
    category = db.get(Category, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")

    products = db.query(Product).filter(Product.category_id == category_id).count()
    groups = db.query(ProductGroup).filter(ProductGroup.category_id == category_id).count()
    if products or groups:
        write_log(db, actor=admin.username, action="CATEGORY_DELETE", resource="categories", status="FAIL",
                  ip=client_ip(request), meta={"id": category_id, "products": products, "groups": groups})
        raise HTTPException(
            status_code=400,
            detail=f"Category is in use by {products} product(s) and {groups} product group(s)",
        )

    db.delete(category)
    _save(db)
    write_log(db, actor=admin.username, action="CATEGORY_DELETE", resource="categories",
              ip=client_ip(request), meta={"id": category_id})
    return {"success": True}
