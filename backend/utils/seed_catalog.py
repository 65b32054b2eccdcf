# utils/seed_catalog.py
import os
import sys
from typing import Dict

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from sqlalchemy.orm import Session
from database import SessionLocal, init_db
from models.category import Category
from models.product import Product, ProductGroup
from utils.text import slugify

# Starter catalog for a fresh store
CATEGORIES = [
    {"name": "Refrigerators", "description": "Single door, double door and side-by-side fridges."},
    {"name": "Kitchen Appliances", "description": "Kettles, blenders, air fryers and more."},
    {"name": "Cookers", "description": "Gas, electric and induction cookers."},
    {"name": "Laundry", "description": "Washing machines and irons."},
]

PRODUCTS = [
    {"name": "Hotpoint 250L Double Door Fridge", "category": "refrigerators", "price": 55000, "stock_quantity": 8, "featured": True},
    {"name": "Ramtons 90L Mini Fridge", "category": "refrigerators", "price": 22000, "stock_quantity": 15},
    {"name": "Sayona 1.7L Cordless Kettle", "category": "kitchen-appliances", "price": 3500, "stock_quantity": 40, "featured": True},
    {"name": "Nunix 1.5L Heavy Duty Blender", "category": "kitchen-appliances", "price": 6000, "stock_quantity": 25},
    {"name": "Mika 4L Digital Air Fryer", "category": "kitchen-appliances", "price": 12500, "stock_quantity": 12},
    {"name": "Von 4-Burner Gas Cooker", "category": "cookers", "price": 38000, "stock_quantity": 5},
    {"name": "Philips Steam Iron", "category": "laundry", "price": 4000, "stock_quantity": 30},
]

# Variant family: one group, one product per drum size
WASHER_GROUP = {
    "name": "LG Front Load Washing Machine",
    "category": "laundry",
    "base_price": 45000,
    "description": "Inverter direct drive, 14 wash programs.",
    "variants": [("7kg", 45000, 6), ("8kg", 52000, 4), ("9kg", 61000, 2)],
}


def seed_catalog(db: Session) -> Dict[str, int]:
    """Insert the starter categories and products. Existing slugs are left alone."""
    categories = {c.slug: c for c in db.query(Category).all()}
    for item in CATEGORIES:
        slug = slugify(item["name"])
        if slug not in categories:
            categories[slug] = Category(name=item["name"], slug=slug, description=item["description"])
            db.add(categories[slug])
    db.flush()

    existing = {s for (s,) in db.query(Product.slug).all()}
    added = 0
    for item in PRODUCTS:
        slug = slugify(item["name"])
        if slug in existing:
            continue
        db.add(Product(
            name=item["name"],
            slug=slug,
            price=item["price"],
            stock_quantity=item["stock_quantity"],
            featured=item.get("featured", False),
            category_id=categories[item["category"]].id,
        ))
        added += 1

    group_slug = slugify(WASHER_GROUP["name"])
    if db.query(ProductGroup).filter(ProductGroup.slug == group_slug).first() is None:
        group = ProductGroup(
            name=WASHER_GROUP["name"],
            slug=group_slug,
            description=WASHER_GROUP["description"],
            base_price=WASHER_GROUP["base_price"],
            category_id=categories[WASHER_GROUP["category"]].id,
        )
        db.add(group)
        db.flush()
        for order, (size, price, stock) in enumerate(WASHER_GROUP["variants"]):
            name = f"{WASHER_GROUP['name']} {size}"
            db.add(Product(
                name=name, slug=slugify(name), price=price, stock_quantity=stock,
                category_id=group.category_id, group_id=group.id,
                variant_type="capacity", variant_value=size, sort_order=order,
            ))
            added += 1

    db.commit()
    return {"categories": len(categories), "products_added": added}


def main():
    init_db()
    db = SessionLocal()
    try:
        result = seed_catalog(db)
        print(f"Seeded {result['products_added']} products in {result['categories']} categories.")
    finally:
        db.close()

if __name__ == "__main__":
    main()
