"""
Shopping list repository: load/save one list per storage key.
"""
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from db.models import ShoppingListRecord
from schemas.shopping import ShoppingList


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Timestamps are stored in UTC; SQLite hands them back without an offset."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class ShoppingListRepository:
    """
    Repository for persisted shopping lists.

    Saves overwrite whatever is stored under the key (last writer wins);
    there is no version check between load and save.
    """

    def __init__(self, db: Session):
        """Initialize with database session."""
        self.db = db

    def _get_record(self, storage_key: str) -> Optional[ShoppingListRecord]:
        return self.db.get(ShoppingListRecord, storage_key)

    def load(self, storage_key: str) -> Optional[ShoppingList]:
        """
        Load the list stored under a key.

        Args:
            storage_key: Household storage key

        Returns:
            ShoppingList or None if nothing has been saved yet
        """
        record = self._get_record(storage_key)
        if not record:
            return None

        return ShoppingList.model_validate(
            {"items": record.items or [], "last_generated": _as_utc(record.last_generated)}
        )

    def save(self, storage_key: str, shopping_list: ShoppingList) -> None:
        """
        Store a list under a key, replacing any previous list.

        Args:
            storage_key: Household storage key
            shopping_list: List to persist
        """
        items = [item.model_dump(mode="json") for item in shopping_list.items]

        record = self._get_record(storage_key)
        if record is None:
            record = ShoppingListRecord(storage_key=storage_key)
            self.db.add(record)

        record.items = items
        record.last_generated = _as_utc(shopping_list.last_generated)
        self.db.commit()
