# backend/utils/price_guide.py
"""
Static Kenyan market price ranges and description templates for the
admin product assistant. No model calls, lookup only.
"""
import re
from typing import Dict, List, Optional, Tuple

# name fragment -> (min, max, typical) in KES
PRICE_RANGES: Dict[str, Tuple[int, int, int]] = {
    "blender": (2500, 15000, 6000),
    "heavy duty blender": (8000, 25000, 15000),
    "commercial blender": (15000, 45000, 28000),
    "nutribullet": (8000, 18000, 12000),
    "kettle": (1500, 8000, 3500),
    "electric kettle": (1800, 10000, 4000),
    "cordless kettle": (2000, 8000, 4500),
    "glass kettle": (2500, 7000, 4000),
    "microwave": (8000, 35000, 15000),
    "microwave oven": (10000, 45000, 22000),
    "grill microwave": (15000, 40000, 25000),
    "fridge": (25000, 150000, 55000),
    "refrigerator": (25000, 150000, 55000),
    "mini fridge": (12000, 35000, 22000),
    "double door fridge": (45000, 120000, 75000),
    "side by side fridge": (80000, 200000, 120000),
    "washing machine": (25000, 80000, 45000),
    "front load washer": (35000, 100000, 55000),
    "top load washer": (20000, 60000, 35000),
    "twin tub": (15000, 35000, 22000),
    "cooker": (15000, 80000, 35000),
    "gas cooker": (18000, 90000, 40000),
    "electric cooker": (20000, 70000, 38000),
    "induction cooker": (5000, 25000, 12000),
    "hot plate": (2000, 8000, 4000),
    "air fryer": (6000, 25000, 12000),
    "digital air fryer": (8000, 30000, 15000),
    "toaster": (2000, 8000, 4000),
    "sandwich maker": (1500, 5000, 2800),
    "iron": (1200, 6000, 2500),
    "steam iron": (2000, 8000, 4000),
    "dry iron": (1000, 3500, 2000),
    "fan": (2000, 15000, 5000),
    "standing fan": (3500, 12000, 6000),
    "ceiling fan": (4000, 15000, 8000),
    "table fan": (1500, 5000, 3000),
    "water dispenser": (8000, 35000, 18000),
    "hot and cold dispenser": (12000, 40000, 22000),
    "vacuum cleaner": (5000, 35000, 15000),
    "wet dry vacuum": (8000, 25000, 15000),
    "juicer": (3000, 15000, 7000),
    "citrus juicer": (2000, 8000, 4000),
    "food processor": (5000, 25000, 12000),
    "mixer grinder": (4000, 15000, 8000),
    "rice cooker": (2500, 12000, 5500),
    "pressure cooker": (3000, 15000, 7000),
    "electric pressure cooker": (6000, 20000, 12000),
    "coffee maker": (3000, 25000, 10000),
    "espresso machine": (15000, 80000, 35000),
    "tv": (15000, 150000, 45000),
    "smart tv": (20000, 200000, 55000),
    "led tv": (15000, 120000, 40000),
    "heater": (3000, 15000, 7000),
    "room heater": (3500, 12000, 6500),
    "water heater": (8000, 35000, 18000),
}
DEFAULT_RANGE = (2000, 50000, 15000)

FEATURES: Dict[str, List[str]] = {
    "blender": [
        "Powerful motor for smooth blending of fruits, vegetables and ice.",
        "Multiple speed settings for versatile food preparation.",
        "Perfect for smoothies, soups, sauces and baby food.",
    ],
    "kettle": [
        "Fast-boiling element for quick hot water.",
        "Auto shut-off and boil-dry protection.",
        "Cordless design for easy pouring.",
    ],
    "microwave": [
        "Even heating for consistent results.",
        "Multiple power levels and preset programs.",
        "Quick defrost function for frozen foods.",
    ],
    "fridge": [
        "Energy-efficient cooling to save on electricity bills.",
        "Adjustable temperature controls for lasting freshness.",
        "Frost-free operation for hassle-free maintenance.",
    ],
    "washing machine": [
        "Multiple wash programs for different fabrics.",
        "Water and energy efficient operation.",
        "Quick wash option for lightly soiled items.",
    ],
    "air fryer": [
        "Up to 80% less oil than traditional frying.",
        "Rapid air circulation for crispy results.",
        "Non-stick basket for easy cleaning.",
    ],
    "iron": [
        "Powerful steam output for easy wrinkle removal.",
        "Non-stick soleplate for smooth gliding.",
        "Anti-drip system to prevent water spots.",
    ],
    "fan": [
        "Powerful airflow with multiple speed settings.",
        "Oscillation for wide area coverage.",
        "Quiet, energy-efficient motor.",
    ],
    "cooker": [
        "Even heat distribution across all burners.",
        "Easy-clean surfaces.",
        "Flame failure protection.",
    ],
    "vacuum": [
        "Powerful suction for deep cleaning.",
        "Versatile attachments for different surfaces.",
        "Easy-empty dust container.",
    ],
}
DEFAULT_FEATURES = [
    "High-quality home appliance designed for modern households.",
    "Durable construction for long-lasting performance.",
    "Backed by manufacturer warranty.",
]


def estimate_price(product_name: str) -> Tuple[Optional[str], Tuple[int, int, int], str]:
    """Return (matched key, (min, max, typical), confidence).

    The longest key contained in the name wins; failing that, any key sharing
    a word longer than three letters with the name; failing that, the default.
    """
    name = (product_name or "").lower()
    hits = [k for k in PRICE_RANGES if re.search(rf"\b{re.escape(k)}\b", name)]
    if hits:
        key = max(hits, key=len)
        return key, PRICE_RANGES[key], "high"

    words = [w for w in re.split(r"[\s\-_]+", name) if len(w) > 3]
    for word in words:
        for key in PRICE_RANGES:
            if word in key:
                return key, PRICE_RANGES[key], "medium"
    return None, DEFAULT_RANGE, "low"


def describe(product_name: str, brand: Optional[str] = None) -> str:
    name = (product_name or "").lower()
    features = next((f for key, f in FEATURES.items() if key in name), DEFAULT_FEATURES)
    title = f"{brand} {product_name}".strip() if brand else product_name.strip()
    return f"{title}. " + " ".join(features)
