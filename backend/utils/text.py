import re

_NON_ALNUM = re.compile(r"[^a-z0-9]+")

def slugify(name: str) -> str:
    """'LG 260L Double Door Fridge' -> 'lg-260l-double-door-fridge'"""
    return _NON_ALNUM.sub("-", (name or "").lower()).strip("-")

def format_kes(amount) -> str:
    # Whole shillings with thousands separators, e.g. "KES 58,500"
    return f"KES {int(round(amount or 0)):,}"
