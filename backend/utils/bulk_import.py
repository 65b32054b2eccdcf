# backend/utils/bulk_import.py
import io
import logging
import math
from typing import Optional, Tuple

import pandas as pd
from sqlalchemy.orm import Session

from models.category import Category
from models.product import Product, PLACEHOLDER_IMAGE
from utils.text import slugify

logger = logging.getLogger(__name__)

# Largest value an INTEGER column holds on every supported backend
MAX_INT = 2**31 - 1


def _whole_number(value) -> Optional[int]:
    """Round a CSV cell to whole shillings/units; None when blank, non-numeric or infinite."""
    number = pd.to_numeric(value, errors="coerce")
    if pd.isna(number) or not math.isfinite(number):
        return None
    return int(round(number))


def import_products_csv(db: Session, content: bytes) -> Tuple[int, int]:
    """Insert products from a CSV export. Returns (inserted, skipped).

    Header: name,description,price,category,stock_quantity,featured,image_url
    where category is a category slug.

    Rows without a name, without a known category slug, or whose price does not
    round to a positive whole amount are skipped. Stock is rounded and clamped
    to zero or more. Slugs already present in the catalog are skipped too.
    """
    df = pd.read_csv(io.BytesIO(content), dtype=str, keep_default_na=False, skipinitialspace=True)
    df.columns = [c.strip().lower() for c in df.columns]
    missing = [c for c in ("name", "price", "category") if c not in df.columns]
    if missing:
        raise ValueError(f"Missing CSV columns: {', '.join(missing)}")

    category_map = {c.slug: c.id for c in db.query(Category.slug, Category.id).all()}
    existing_slugs = {s for (s,) in db.query(Product.slug).all()}

    products, skipped = [], 0
    for row in df.to_dict(orient="records"):
        name = (row.get("name") or "").strip()
        category_id = category_map.get((row.get("category") or "").strip())
        price = _whole_number(row.get("price"))
        slug = slugify(name)

        if not name or category_id is None or slug in existing_slugs:
            skipped += 1
            continue
        if price is None or not 0 < price <= MAX_INT:
            skipped += 1
            continue

        stock = _whole_number(row.get("stock_quantity") or 0)
        products.append(Product(
            name=name,
            slug=slug,
            description=(row.get("description") or "").strip() or None,
            price=price,
            category_id=category_id,
            stock_quantity=min(max(stock or 0, 0), MAX_INT),
            featured=(row.get("featured") or "").strip().lower() == "true",
            image_url=(row.get("image_url") or "").strip() or PLACEHOLDER_IMAGE,
        ))
        existing_slugs.add(slug)

    if products:
        db.add_all(products)
        db.commit()

    logger.info(f"CSV import: {len(products)} inserted, {skipped} skipped")
    return len(products), skipped
