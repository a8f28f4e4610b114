"""
Grocery aisle categories used to group the shopping list.
Order reflects a typical store walk; "other" is the catch-all bucket.
"""
from dataclasses import dataclass
from typing import Dict, List, Optional

OTHER_AISLE = "other"
FALLBACK_ORDER = 99


@dataclass(frozen=True)
class AisleCategory:
    """A store department shown as one group on the checklist."""

    id: str
    name: str
    icon: str
    order: int


AISLE_CATEGORIES: List[AisleCategory] = sorted(
    [
        AisleCategory("produce", "Produce", "🥬", 1),
        AisleCategory("dairy", "Dairy & Eggs", "🥛", 2),
        AisleCategory("meat", "Meat & Seafood", "🥩", 3),
        AisleCategory("bakery", "Bakery", "🍞", 4),
        AisleCategory("frozen", "Frozen", "🧊", 5),
        AisleCategory("pantry", "Pantry & Dry Goods", "🥫", 6),
        AisleCategory("spices", "Spices & Seasonings", "🧂", 7),
        AisleCategory("beverages", "Beverages", "🥤", 8),
        AisleCategory(OTHER_AISLE, "Other", "📦", FALLBACK_ORDER),
    ],
    key=lambda category: category.order,
)

_CATEGORIES_BY_ID: Dict[str, AisleCategory] = {c.id: c for c in AISLE_CATEGORIES}

# Store-department names (as recipe providers report them) -> aisle id.
# Canonical ids map to themselves so normalization is idempotent.
AISLE_MAPPING: Dict[str, str] = {
    **{c.id: c.id for c in AISLE_CATEGORIES},
    # Produce
    "vegetables": "produce",
    "fruits": "produce",
    "fresh vegetables": "produce",
    "fresh fruits": "produce",
    # Dairy
    "milk, eggs, other dairy": "dairy",
    "dairy, eggs, other dairy": "dairy",
    "cheese": "dairy",
    "refrigerated": "dairy",
    "eggs": "dairy",
    # Meat
    "seafood": "meat",
    "poultry": "meat",
    # Bakery
    "bakery/bread": "bakery",
    "bread": "bakery",
    "baking": "bakery",
    # Pantry
    "pasta and rice": "pantry",
    "canned and jarred": "pantry",
    "condiments": "pantry",
    "oil, vinegar, salad dressing": "pantry",
    # Spices
    "spices and seasonings": "spices",
    "ethnic foods": "spices",
    # Beverages
    "alcoholic beverages": "beverages",
}


def normalize_aisle(aisle: Optional[str]) -> str:
    """
    Map a raw aisle string to an aisle id.

    Provider aisles may be semicolon-separated ("Produce;Vegetables"); only
    the first segment is used. Anything unrecognised, empty or not a string
    falls back to "other".
    """
    if not aisle or not isinstance(aisle, str):
        return OTHER_AISLE
    first = aisle.split(";")[0].strip().lower()
    return AISLE_MAPPING.get(first, OTHER_AISLE)


def get_aisle_category(aisle_id: str) -> Optional[AisleCategory]:
    """Look up the static category for an aisle id."""
    return _CATEGORIES_BY_ID.get(aisle_id)


def aisle_order(aisle_id: str) -> int:
    """Sort position of an aisle; unknown ids sort with the catch-all bucket."""
    category = _CATEGORIES_BY_ID.get(aisle_id)
    return category.order if category else FALLBACK_ORDER
