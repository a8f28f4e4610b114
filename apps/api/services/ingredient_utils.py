"""
Utility functions for ingredient processing.
Unit and amount normalization, and aisle inference from ingredient names.
"""
import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from services.aisles import OTHER_AISLE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IngredientInfo:
    """Static dictionary entry for a common ingredient."""

    aisle: str
    default_unit: str


# Common ingredients -> default aisle and purchase unit.
INGREDIENT_DB: Dict[str, IngredientInfo] = {
    # Produce
    "apple": IngredientInfo("produce", "piece"),
    "banana": IngredientInfo("produce", "piece"),
    "carrot": IngredientInfo("produce", "piece"),
    "onion": IngredientInfo("produce", "piece"),
    "garlic": IngredientInfo("produce", "clove"),
    "potato": IngredientInfo("produce", "lb"),
    "lettuce": IngredientInfo("produce", "head"),
    "spinach": IngredientInfo("produce", "bag"),
    "tomato": IngredientInfo("produce", "piece"),
    "bell pepper": IngredientInfo("produce", "piece"),
    "broccoli": IngredientInfo("produce", "head"),
    "cucumber": IngredientInfo("produce", "piece"),
    "celery": IngredientInfo("produce", "stalk"),
    "mushroom": IngredientInfo("produce", "package"),
    "avocado": IngredientInfo("produce", "piece"),
    "lemon": IngredientInfo("produce", "piece"),
    "lime": IngredientInfo("produce", "piece"),
    "ginger": IngredientInfo("produce", "inch"),
    "cilantro": IngredientInfo("produce", "bunch"),
    "parsley": IngredientInfo("produce", "bunch"),
    "basil": IngredientInfo("produce", "bunch"),
    # Dairy & eggs
    "milk": IngredientInfo("dairy", "gallon"),
    "egg": IngredientInfo("dairy", "dozen"),
    "butter": IngredientInfo("dairy", "lb"),
    "cheese": IngredientInfo("dairy", "package"),
    "yogurt": IngredientInfo("dairy", "container"),
    "cream": IngredientInfo("dairy", "pint"),
    "sour cream": IngredientInfo("dairy", "container"),
    "cream cheese": IngredientInfo("dairy", "package"),
    "parmesan": IngredientInfo("dairy", "package"),
    # Meat & seafood
    "chicken breast": IngredientInfo("meat", "lb"),
    "chicken thigh": IngredientInfo("meat", "lb"),
    "ground beef": IngredientInfo("meat", "lb"),
    "ground turkey": IngredientInfo("meat", "lb"),
    "steak": IngredientInfo("meat", "lb"),
    "pork chop": IngredientInfo("meat", "lb"),
    "bacon": IngredientInfo("meat", "package"),
    "salmon": IngredientInfo("meat", "lb"),
    "shrimp": IngredientInfo("meat", "lb"),
    "sausage": IngredientInfo("meat", "package"),
    "pepperoni": IngredientInfo("meat", "package"),
    "beef": IngredientInfo("meat", "lb"),
    "pork": IngredientInfo("meat", "lb"),
    "chicken": IngredientInfo("meat", "lb"),
    # Bakery
    "bread": IngredientInfo("bakery", "loaf"),
    "bagel": IngredientInfo("bakery", "package"),
    "tortilla": IngredientInfo("bakery", "package"),
    "bun": IngredientInfo("bakery", "package"),
    "croissant": IngredientInfo("bakery", "piece"),
    # Pantry
    "rice": IngredientInfo("pantry", "bag"),
    "pasta": IngredientInfo("pantry", "box"),
    "flour": IngredientInfo("pantry", "bag"),
    "sugar": IngredientInfo("pantry", "bag"),
    "oil": IngredientInfo("pantry", "bottle"),
    "olive oil": IngredientInfo("pantry", "bottle"),
    "vinegar": IngredientInfo("pantry", "bottle"),
    "canned tomato": IngredientInfo("pantry", "can"),
    "tomato sauce": IngredientInfo("pantry", "can"),
    "beans": IngredientInfo("pantry", "can"),
    "peanut butter": IngredientInfo("pantry", "jar"),
    "jelly": IngredientInfo("pantry", "jar"),
    "honey": IngredientInfo("pantry", "bottle"),
    "cereal": IngredientInfo("pantry", "box"),
    "oat": IngredientInfo("pantry", "canister"),
    "soy sauce": IngredientInfo("pantry", "bottle"),
    "broth": IngredientInfo("pantry", "carton"),
    "stock": IngredientInfo("pantry", "carton"),
    # Spices
    "salt": IngredientInfo("spices", "container"),
    "pepper": IngredientInfo("spices", "container"),
    "black pepper": IngredientInfo("spices", "container"),
    "chili powder": IngredientInfo("spices", "bottle"),
    "cumin": IngredientInfo("spices", "bottle"),
    "cinnamon": IngredientInfo("spices", "bottle"),
    "garlic powder": IngredientInfo("spices", "bottle"),
    "onion powder": IngredientInfo("spices", "bottle"),
    "paprika": IngredientInfo("spices", "bottle"),
    "oregano": IngredientInfo("spices", "bottle"),
    "thyme": IngredientInfo("spices", "bottle"),
    "vanilla extract": IngredientInfo("spices", "bottle"),
    # Frozen
    "ice cream": IngredientInfo("frozen", "carton"),
    "frozen vegetable": IngredientInfo("frozen", "bag"),
    "frozen fruit": IngredientInfo("frozen", "bag"),
    "pizza": IngredientInfo("frozen", "box"),
    # Beverages
    "water": IngredientInfo("beverages", "case"),
    "soda": IngredientInfo("beverages", "pack"),
    "juice": IngredientInfo("beverages", "bottle"),
    "coffee": IngredientInfo("beverages", "bag"),
    "tea": IngredientInfo("beverages", "box"),
}

# Partial-match rules for names that are not dictionary keys.
# Precedence: longer patterns first ("garlic powder" before "garlic"),
# then dictionary order. Patterns match whole words with an optional
# plural suffix, so "pepperoni pizza" never matches "pepper".
AISLE_RULES: List[Tuple[str, "re.Pattern[str]", str]] = [
    (key, re.compile(rf"\b{re.escape(key)}(?:e?s)?\b"), info.aisle)
    for key, info in sorted(INGREDIENT_DB.items(), key=lambda kv: -len(kv[0]))
]

UNIT_SYNONYMS: Dict[str, str] = {
    "cups": "cup",
    "tbsp": "tablespoon",
    "tablespoons": "tablespoon",
    "tsp": "teaspoon",
    "teaspoons": "teaspoon",
    "lbs": "lb",
    "pounds": "lb",
    "ounces": "oz",
    "ozs": "oz",
}

UNICODE_FRACTIONS: Dict[str, float] = {
    "½": 0.5,
    "⅓": 1 / 3,
    "⅔": 2 / 3,
    "¼": 0.25,
    "¾": 0.75,
    "⅛": 0.125,
    "⅜": 0.375,
    "⅝": 0.625,
    "⅞": 0.875,
}

_MIXED_FRACTION = re.compile(r"^(\d+)\s+(\d+)\s*/\s*(\d+)")
_FRACTION = re.compile(r"^(\d+)\s*/\s*(\d+)")
_LEADING_NUMBER = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")


def normalize_unit(unit: Optional[str]) -> str:
    """Lower-case a unit and fold plural/abbreviated forms to one spelling."""
    if not unit or not isinstance(unit, str):
        return ""
    lower = unit.strip().lower()
    return UNIT_SYNONYMS.get(lower, lower)


def _finite_or_zero(value: float) -> float:
    if math.isnan(value) or math.isinf(value) or value < 0:
        return 0.0
    return float(value)


def parse_amount(value: Any) -> float:
    """
    Coerce an ingredient amount to a non-negative float.

    Accepts numbers and text such as "2", "1.5", "2 cups", "1/2", "1 1/2",
    "1½" or "½". Anything else (None, "to taste", NaN, negatives) is 0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        try:
            return _finite_or_zero(float(value))
        except OverflowError:
            return 0.0
    if not isinstance(value, str):
        return 0.0

    text = value.strip()
    if not text:
        return 0.0
    try:
        return _parse_text_amount(text)
    except (OverflowError, ValueError):
        # int() refuses very long digit strings; division can overflow float
        logger.debug(f"Amount out of range: {text[:40]}")
        return 0.0


def _parse_text_amount(text: str) -> float:
    if text[0] in UNICODE_FRACTIONS:
        return UNICODE_FRACTIONS[text[0]]

    mixed = _MIXED_FRACTION.match(text)
    if mixed:
        whole, num, den = (int(g) for g in mixed.groups())
        return _finite_or_zero(whole + num / den) if den else _finite_or_zero(float(whole))

    fraction = _FRACTION.match(text)
    if fraction:
        num, den = (int(g) for g in fraction.groups())
        return _finite_or_zero(num / den) if den else 0.0

    number = _LEADING_NUMBER.match(text)
    if not number:
        return 0.0
    amount = float(number.group(0))
    rest = text[number.end():].lstrip()
    if rest and rest[0] in UNICODE_FRACTIONS:
        amount += UNICODE_FRACTIONS[rest[0]]
    return _finite_or_zero(amount)


def infer_aisle_from_name(name: Optional[str]) -> str:
    """
    Guess an aisle from an ingredient name using the ingredient dictionary.

    Exact (case-insensitive) dictionary hits win; otherwise the first
    matching entry of AISLE_RULES is used and logged so the guess can be
    reviewed. Returns "other" when nothing matches.
    """
    if not name or not isinstance(name, str):
        return OTHER_AISLE

    lower = name.strip().lower()
    if not lower:
        return OTHER_AISLE

    info = INGREDIENT_DB.get(lower)
    if info:
        return info.aisle

    for key, pattern, aisle in AISLE_RULES:
        if pattern.search(lower):
            logger.debug(f"Inferred aisle '{aisle}' for '{name}' from partial match '{key}'")
            return aisle

    return OTHER_AISLE


def format_amount(amount: float) -> str:
    """Render an amount without trailing zeros ("3", "1.5", "0.33")."""
    if amount == int(amount):
        return str(int(amount))
    return f"{round(amount, 2):g}"


def render_original(amount: Any, unit: Optional[str], name: Optional[str]) -> str:
    """Human-readable "amount unit name" line, e.g. "2 cup flour"."""
    parts = []
    if isinstance(amount, (int, float)) and not isinstance(amount, bool):
        parts.append(format_amount(float(amount)))
    elif amount:
        parts.append(str(amount).strip())
    parts.extend(p.strip() for p in (unit, name) if p and p.strip())
    return " ".join(parts)


def suggest_ingredients(query: Optional[str] = None, limit: int = 20) -> List[Dict[str, str]]:
    """
    Dictionary entries for autocomplete, sorted by name.

    Args:
        query: Optional case-insensitive substring filter
        limit: Maximum number of suggestions

    Returns:
        List of {"name", "aisle", "default_unit"} dicts
    """
    needle = (query or "").strip().lower()
    names = sorted(name for name in INGREDIENT_DB if needle in name)
    return [
        {
            "name": name,
            "aisle": INGREDIENT_DB[name].aisle,
            "default_unit": INGREDIENT_DB[name].default_unit,
        }
        for name in names[:limit]
    ]
