from typing import Final

# Bucket sentinel used by move requests and drop keys
UNASSIGNED: Final[str] = "unassigned"
UNASSIGNED_LABEL: Final[str] = "Unassigned"

CATEGORIES: Final[tuple[str, ...]] = (
    "Produce", "Dairy", "Meat", "Pantry", "Frozen", "Bakery", "Beverages", "Other",
)
DEFAULT_CATEGORY: Final[str] = "Other"

# Unit words accepted after a trailing number ("Apples 2 lbs")
TRAILING_UNITS: Final[tuple[str, ...]] = (
    "lbs?", "oz", "g", "kg", "cups?", "gallons?", "liters?", "pints?", "quarts?",
    "dozen", "pack", "bunch", "bag", "box", "can", "jar", "bottle", "ct", "count",
    "pcs?", "pieces?", "slices?", "servings?",
)
# Unit words accepted after a leading number ("2 dozen eggs")
LEADING_UNITS: Final[tuple[str, ...]] = (
    "dozen", "pack", "bunch", "bag", "box", "can", "jar", "bottle", "ct", "count",
)

DEFAULT_STORES: Final[tuple[dict[str, str], ...]] = (
    {"name": "Meijer", "color": "#4A90D9"},
    {"name": "Costco", "color": "#E31837"},
    {"name": "Aldi", "color": "#00A0DF"},
    {"name": "Trader Joe's", "color": "#C10230"},
)

# Fractional rank alphabet, must be in ascending ASCII order
RANK_DIGITS: Final[str] = "0123456789abcdefghijklmnopqrstuvwxyz"
