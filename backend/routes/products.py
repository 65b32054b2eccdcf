# backend/routes/products.py
import logging
from typing import List

import pandas as pd
from fastapi import APIRouter, Depends, HTTPException, Request, UploadFile, File
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from database import get_db
from utils.tokenJWT import get_current_admin
from utils.audit import client_ip, write_log
from utils.bulk_import import import_products_csv
from utils.price_guide import describe, estimate_price
from utils.text import format_kes, slugify
from utils import uploads
from models.category import Category
from models.product import Product, ProductGroup, PLACEHOLDER_IMAGE
from schemas.admin import AdminUser, PriceGuideRequest, PriceGuideResponse
import schemas.product as product_schemas

router = APIRouter(prefix="/admin", tags=["Admin"])
logger = logging.getLogger(__name__)

# Columns declared NOT NULL on products
REQUIRED_PRODUCT_FIELDS = ("price", "stock_quantity", "featured", "category_id", "sort_order")


# ---- HELPERS ----
def _unique_slug(db: Session, name: str, exclude_id: int = None) -> str:
    base = slugify(name) or "product"
    slug, n = base, 2
    while True:
        q = db.query(Product.id).filter(Product.slug == slug)
        if exclude_id is not None:
            q = q.filter(Product.id != exclude_id)
        if q.first() is None:
            return slug
        slug, n = f"{base}-{n}", n + 1

def _check_references(db: Session, category_id, group_id):
    if category_id is not None and db.get(Category, category_id) is None:
        raise HTTPException(status_code=400, detail="Unknown category")
    if group_id is not None and db.get(ProductGroup, group_id) is None:
        raise HTTPException(status_code=400, detail="Unknown product group")

def _commit(db: Session, what: str):
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Database error while saving {what}")
        raise HTTPException(status_code=500, detail="Internal server error")


# =========================
# PRODUCT LIST
# =========================
@router.get("/products", response_model=List[product_schemas.ProductWithCategory])
def list_products(db: Session = Depends(get_db), admin: AdminUser = Depends(get_current_admin)):
    return (
        db.query(Product)
        .options(joinedload(Product.category))
        .order_by(Product.created_at.desc(), Product.id.desc())
        .all()
    )


# =========================
# CREATE
# =========================
@router.post("/products", response_model=product_schemas.ProductOut)
def add_product(
    payload: product_schemas.ProductWrite,
    request: Request,
    db: Session = Depends(get_db),
    admin: AdminUser = Depends(get_current_admin),
):
    if not payload.name or not payload.price or not payload.category_id:
        raise HTTPException(
            status_code=400,
            detail="Missing required fields: name, price, and category_id are required",
        )
    _check_references(db, payload.category_id, payload.group_id)

    data = payload.model_dump(exclude_none=True)
    new_product = Product(
        **data,
        slug=_unique_slug(db, payload.name),
    )
    new_product.stock_quantity = data.get("stock_quantity", 0)
    new_product.featured = data.get("featured", False)
    new_product.image_url = data.get("image_url") or PLACEHOLDER_IMAGE

    db.add(new_product)
    _commit(db, "product")
    db.refresh(new_product)

    write_log(db, actor=admin.username, action="PRODUCT_CREATE", resource="products",
              ip=client_ip(request), meta={"id": new_product.id, "slug": new_product.slug})
    return new_product


# =========================
# UPDATE
# =========================
@router.put("/products/{product_id}", response_model=product_schemas.ProductOut)
def update_product(
    product_id: int,
    payload: product_schemas.ProductWrite,
    request: Request,
    db: Session = Depends(get_db),
    admin: AdminUser = Depends(get_current_admin),
):
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    changes = payload.model_dump(exclude_unset=True)
    if "name" in changes and not changes["name"]:
        raise HTTPException(status_code=400, detail="Product name cannot be empty")
    nulled = sorted(k for k in REQUIRED_PRODUCT_FIELDS if k in changes and changes[k] is None)
    if nulled:
        raise HTTPException(status_code=400, detail=f"Fields cannot be null: {', '.join(nulled)}")
    _check_references(db, changes.get("category_id"), changes.get("group_id"))

    for key, value in changes.items():
        setattr(product, key, value)
    if "name" in changes:
        product.slug = _unique_slug(db, product.name, exclude_id=product.id)

    _commit(db, "product")
    db.refresh(product)

    write_log(db, actor=admin.username, action="PRODUCT_UPDATE", resource="products",
              ip=client_ip(request), meta={"id": product.id, "fields": sorted(changes)})
    return product


# =========================
# DELETE
# =========================
@router.delete("/products/{product_id}")
def delete_product(
    product_id: int, request: Request,
    db: Session = Depends(get_db), admin: AdminUser = Depends(get_current_admin),
):
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    pid, pname = product.id, product.name
    db.delete(product)
    _commit(db, "product")
    write_log(db, actor=admin.username, action="PRODUCT_DELETE", resource="products",
              ip=client_ip(request), meta={"id": pid})
    return {"success": True, "detail": f"Product '{pname}' deleted"}


# =========================
# IMAGES
# =========================
@router.post("/products/upload-image", response_model=product_schemas.ImageUploadOut)
def upload_product_image(
    request: Request,
    image: UploadFile = File(...),
    db: Session = Depends(get_db),
    admin: AdminUser = Depends(get_current_admin),
):
    stored = uploads.save_image(image)
    write_log(db, actor=admin.username, action="IMAGE_UPLOAD", resource="images",
              ip=client_ip(request), meta={"stored_as": stored["stored_as"], "size": stored["file_size"]})
    return stored

@router.post("/products/bulk-upload-images", response_model=List[product_schemas.ImageUploadResult])
def bulk_upload_images(
    request: Request,
    images: List[UploadFile] = File(...),
    db: Session = Depends(get_db),
    admin: AdminUser = Depends(get_current_admin),
):
    results = []
    for image in images:
        try:
            stored = uploads.save_image(image)
            results.append({"file_name": stored["file_name"], "success": True, "image_url": stored["image_url"]})
        except HTTPException as e:
            results.append({"file_name": image.filename or "", "success": False, "error": e.detail})

    write_log(db, actor=admin.username, action="IMAGE_BULK_UPLOAD", resource="images",
              ip=client_ip(request), meta={"uploaded": sum(r["success"] for r in results), "files": len(results)})
    return results

@router.get("/images", response_model=List[product_schemas.StoredImage])
def list_images(admin: AdminUser = Depends(get_current_admin)):
    return uploads.list_images()

@router.delete("/images/{name}")
def delete_image(
    name: str, request: Request,
    db: Session = Depends(get_db), admin: AdminUser = Depends(get_current_admin),
):
    if not uploads.delete_image(name):
        raise HTTPException(status_code=404, detail="Image not found")
    write_log(db, actor=admin.username, action="IMAGE_DELETE", resource="images",
              ip=client_ip(request), meta={"name": name})
    return {"success": True}


# =========================
# CSV IMPORT
# =========================
@router.post("/products/bulk-upload", response_model=product_schemas.BulkUploadResult)
def bulk_upload_products(
    request: Request,
    file: UploadFile = File(None),
    db: Session = Depends(get_db),
    admin: AdminUser = Depends(get_current_admin),
):
    if file is None:
        raise HTTPException(status_code=400, detail="No file provided")
    try:
        content = file.file.read()
    finally:
        file.file.close()

    try:
        inserted, skipped = import_products_csv(db, content)
    except (ValueError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise HTTPException(status_code=400, detail=f"Invalid CSV: {e}")
    except SQLAlchemyError:
        db.rollback()
        logger.exception("CSV product import failed")
        raise HTTPException(status_code=500, detail="Internal server error")

    write_log(db, actor=admin.username, action="PRODUCT_BULK_UPLOAD", resource="products",
              ip=client_ip(request), meta={"inserted": inserted, "skipped": skipped})
    return {"inserted": inserted, "skipped": skipped, "message": f"Successfully uploaded {inserted} products"}


# ==========================================
#  PRODUCT ASSISTANT
# ==========================================
@router.post("/assistant/price", response_model=PriceGuideResponse)
def suggest_price(payload: PriceGuideRequest, admin: AdminUser = Depends(get_current_admin)):
    """Suggest a KES price range and a short description from the static price guide."""
    if not payload.product_name.strip():
        raise HTTPException(status_code=400, detail="Product name is required")
    matched, (low, high, typical), confidence = estimate_price(payload.product_name)
    return PriceGuideResponse(
        product_name=payload.product_name,
        matched=matched,
        confidence=confidence,
        min_price=low,
        max_price=high,
        suggested_price=typical,
        suggested_price_formatted=format_kes(typical),
        description=describe(payload.product_name, payload.brand),
    )
