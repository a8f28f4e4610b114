"""
Shopping list store: the one place the persisted list is changed.
"""
import logging
from datetime import date
from typing import Dict, List, Mapping, Optional, Sequence

from error_handler import StoreNotInitializedError
from repositories.shopping_list import ShoppingListRepository
from schemas.shopping import AisleGroup, Meal, ShoppingList, ShoppingListItem, new_id
from services.aisles import OTHER_AISLE
from services.shopping_list import (
    DEFAULT_DAYS_AHEAD,
    export_text,
    generate_shopping_list,
    get_grouped_items,
)

logger = logging.getLogger(__name__)

MANUAL_SOURCE = "Manual"


class ShoppingListStore:
    """
    Holds one household's shopping list and persists every change.

    Call ``load()`` before anything else. Each operation is a
    read-modify-write of the in-memory list followed by a save; concurrent
    stores on the same key are not coordinated, the last save wins.
    """

    def __init__(self, repository: ShoppingListRepository, storage_key: str):
        self.repository = repository
        self.storage_key = storage_key
        self._shopping_list: Optional[ShoppingList] = None

    def load(self) -> ShoppingList:
        """Read the stored list, or start an empty one."""
        stored = self.repository.load(self.storage_key)
        self._shopping_list = stored if stored is not None else ShoppingList()
        logger.debug(
            f"Loaded shopping list '{self.storage_key}' with {len(self._shopping_list.items)} items"
        )
        return self._shopping_list

    def _require_loaded(self) -> ShoppingList:
        if self._shopping_list is None:
            raise StoreNotInitializedError(
                f"Shopping list store '{self.storage_key}' used before load()"
            )
        return self._shopping_list

    @property
    def shopping_list(self) -> ShoppingList:
        return self._require_loaded()

    def _commit(self, shopping_list: ShoppingList) -> ShoppingList:
        self._shopping_list = shopping_list
        self.repository.save(self.storage_key, shopping_list)
        return shopping_list

    def _find(self, item_id: str) -> Optional[ShoppingListItem]:
        return next((item for item in self.shopping_list.items if item.id == item_id), None)

    def generate_from_meals(
        self,
        meals: Mapping[str, Mapping[str, Sequence[Meal]]],
        days_ahead: int = DEFAULT_DAYS_AHEAD,
        today: Optional[date] = None,
        week_starts_on: int = 0,
    ) -> ShoppingList:
        """Replace the list with one generated from the meal plan."""
        self._require_loaded()
        generated = generate_shopping_list(
            meals, days_ahead=days_ahead, today=today, week_starts_on=week_starts_on
        )
        return self._commit(generated)

    def toggle_item(self, item_id: str) -> ShoppingList:
        """Flip an item's checked flag. Unknown ids are ignored."""
        item = self._find(item_id)
        if item is None:
            logger.debug(f"toggle_item: no item {item_id} in '{self.storage_key}'")
            return self.shopping_list

        items = [
            it.model_copy(update={"checked": not it.checked}) if it.id == item_id else it
            for it in self.shopping_list.items
        ]
        return self._commit(self.shopping_list.model_copy(update={"items": items}))

    def add_item(self, name: str) -> ShoppingListItem:
        """Append a manually entered item; it is never merged with other lines."""
        item = ShoppingListItem(
            id=new_id(),
            name=name.strip(),
            amount=1,
            unit="item",
            aisle=OTHER_AISLE,
            checked=False,
            source_recipes=[MANUAL_SOURCE],
        )
        items = [*self.shopping_list.items, item]
        self._commit(self.shopping_list.model_copy(update={"items": items}))
        return item

    def delete_item(self, item_id: str) -> ShoppingList:
        """Remove an item. Unknown ids are ignored."""
        if self._find(item_id) is None:
            logger.debug(f"delete_item: no item {item_id} in '{self.storage_key}'")
            return self.shopping_list

        items = [item for item in self.shopping_list.items if item.id != item_id]
        return self._commit(self.shopping_list.model_copy(update={"items": items}))

    def clear_list(self) -> ShoppingList:
        """Reset to an empty, never-generated list."""
        self._require_loaded()
        return self._commit(ShoppingList(items=[], last_generated=None))

    def get_grouped_items(self) -> List[AisleGroup]:
        return get_grouped_items(self.shopping_list)

    def export_text(self) -> str:
        return export_text(self.shopping_list)

    def progress(self) -> Dict[str, int]:
        """Total and checked item counts."""
        items = self.shopping_list.items
        return {"total": len(items), "checked": sum(1 for item in items if item.checked)}
