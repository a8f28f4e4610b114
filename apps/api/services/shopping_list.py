"""
Shopping list generation from the weekly meal plan.
Consolidates ingredients across meals, sorts them by aisle and renders the
checklist export.
"""
import logging
from datetime import date, datetime, timedelta, timezone
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

from schemas.shopping import AisleGroup, Ingredient, Meal, ShoppingList, ShoppingListItem
from services.aisles import AISLE_CATEGORIES, aisle_order, normalize_aisle
from services.ingredient_utils import format_amount, normalize_unit

logger = logging.getLogger(__name__)

DEFAULT_DAYS_AHEAD = 7
DATE_KEY_FORMAT = "%Y-%m-%d"


def week_start(today: date, week_starts_on: int = 0) -> date:
    """
    First day of the week containing ``today``.

    ``week_starts_on`` counts from Sunday (0 = Sunday, 1 = Monday, ...).
    """
    # date.weekday() counts from Monday
    days_since_sunday = (today.weekday() + 1) % 7
    offset = (days_since_sunday - week_starts_on) % 7
    return today - timedelta(days=offset)


def date_keys(start: date, days_ahead: int) -> List[str]:
    """YYYY-MM-DD keys for ``days_ahead`` consecutive days from ``start``."""
    return [
        (start + timedelta(days=i)).strftime(DATE_KEY_FORMAT)
        for i in range(max(days_ahead, 0))
    ]


def consolidation_key(ingredient: Ingredient) -> Tuple[str, str]:
    """Two ingredients with the same key become one list line."""
    return ingredient.name.lower(), normalize_unit(ingredient.unit)


def _meals_for_days(
    meals: Mapping[str, Mapping[str, Sequence[Meal]]],
    keys: Iterable[str],
) -> Iterator[Meal]:
    for key in keys:
        day = meals.get(key)
        if not day:
            continue
        for category_meals in day.values():
            yield from category_meals or []


def sort_items(items: Iterable[ShoppingListItem]) -> List[ShoppingListItem]:
    """Order items by aisle position, then alphabetically by name."""
    return sorted(
        items,
        key=lambda item: (aisle_order(item.aisle), item.name.casefold(), item.name),
    )


def consolidate_meals(meals: Iterable[Meal]) -> List[ShoppingListItem]:
    """
    Fold the ingredients of ``meals`` into one line per consolidation key.

    Amounts are summed and every contributing meal name is appended to
    ``source_recipes``. The first occurrence of a key decides the item's
    name casing and aisle. The result is unsorted, in first-seen order.
    """
    consolidated: Dict[Tuple[str, str], ShoppingListItem] = {}

    for meal in meals:
        for ingredient in meal.ingredients:
            key = consolidation_key(ingredient)
            existing = consolidated.get(key)
            if existing is None:
                consolidated[key] = ShoppingListItem(
                    name=ingredient.name,
                    amount=ingredient.amount,
                    unit=key[1],
                    aisle=normalize_aisle(ingredient.aisle),
                    checked=False,
                    source_recipes=[meal.name],
                )
            else:
                existing.amount += ingredient.amount
                existing.source_recipes.append(meal.name)

    return list(consolidated.values())


def generate_shopping_list(
    meals: Mapping[str, Mapping[str, Sequence[Meal]]],
    days_ahead: int = DEFAULT_DAYS_AHEAD,
    today: Optional[date] = None,
    week_starts_on: int = 0,
    now: Optional[datetime] = None,
) -> ShoppingList:
    """
    Build a fresh shopping list from the meal plan.

    Args:
        meals: Meal plan keyed by date (YYYY-MM-DD), then meal category
        days_ahead: Number of days to scan from the start of this week
        today: Reference day (defaults to the current date)
        week_starts_on: First day of the week, 0 = Sunday
        now: Generation timestamp (defaults to the current UTC time)

    Returns:
        A new ShoppingList with sorted, consolidated items
    """
    start = week_start(today or date.today(), week_starts_on)
    keys = date_keys(start, days_ahead)
    scanned_meals = list(_meals_for_days(meals, keys))
    items = sort_items(consolidate_meals(scanned_meals))

    logger.info(
        f"Generated shopping list from {len(scanned_meals)} meals over {len(keys)} days "
        f"starting {start.isoformat()}: {len(items)} items"
    )

    return ShoppingList(items=items, last_generated=now or datetime.now(timezone.utc))


def get_grouped_items(shopping_list: ShoppingList) -> List[AisleGroup]:
    """
    Split the list into aisle groups in store order.

    Aisles without items are left out. Items keep their relative order.
    """
    groups = []
    for category in AISLE_CATEGORIES:
        items = [item for item in shopping_list.items if item.aisle == category.id]
        if items:
            groups.append(
                AisleGroup(
                    id=category.id,
                    name=category.name,
                    icon=category.icon,
                    order=category.order,
                    items=items,
                )
            )
    return groups


def format_item_line(item: ShoppingListItem) -> str:
    """
    Checklist line such as "- [x] 1.5 cup flour".

    Empty parts are left out, so a unitless item reads "- [ ] 3 egg" rather
    than carrying a double space. The "- [ ]" / "- [x]" markers are unchanged.
    """
    mark = "x" if item.checked else " "
    parts = [format_amount(item.amount), item.unit, item.name]
    return f"- [{mark}] " + " ".join(part for part in parts if part)


def export_text(shopping_list: ShoppingList) -> str:
    """
    Plain-text checklist grouped by aisle, for copying to the clipboard.

    Each group is a header line ("<icon> <aisle name>") followed by one line
    per item; groups are separated by a blank line.
    """
    blocks = []
    for group in get_grouped_items(shopping_list):
        lines = [f"{group.icon} {group.name}"]
        lines.extend(format_item_line(item) for item in group.items)
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)
