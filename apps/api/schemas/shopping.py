"""
FamilyBoard Pydantic models for meals and the shopping list.
Ingredient data coming from the meal plan is coerced here, once, so the
aggregation code only ever sees well-formed values.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator, model_validator

from services.aisles import OTHER_AISLE, normalize_aisle
from services.ingredient_utils import infer_aisle_from_name, parse_amount, render_original


def new_id() -> str:
    """Fresh identifier for ingredients and list items."""
    return str(uuid4())


class Ingredient(BaseModel):
    """Structured recipe ingredient as stored on a planned meal."""
    id: str = Field(default_factory=new_id)
    name: str = ""
    amount: float = Field(0.0, ge=0.0)
    unit: str = ""
    aisle: str = Field(OTHER_AISLE, description="Resolved aisle id")
    original: str = Field("", description="Display text, never re-parsed")

    @model_validator(mode="before")
    @classmethod
    def _coerce(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        name = data.get("name")
        data["name"] = name.strip() if isinstance(name, str) else ""
        data["amount"] = parse_amount(data.get("amount"))
        unit = data.get("unit")
        data["unit"] = unit if isinstance(unit, str) else ""

        raw_aisle = data.get("aisle")
        if raw_aisle and isinstance(raw_aisle, str):
            data["aisle"] = normalize_aisle(raw_aisle)
        else:
            data["aisle"] = infer_aisle_from_name(data["name"])

        if not data.get("original") or not isinstance(data.get("original"), str):
            data["original"] = render_original(data["amount"], data["unit"], data["name"])
        if data.get("id") is None:
            data.pop("id", None)
        else:
            data["id"] = str(data["id"])
        return data


class Meal(BaseModel):
    """A planned meal. Only name and ingredients matter to the shopping list."""
    id: Optional[str] = None
    name: str = "Untitled Recipe"
    ingredients: List[Ingredient] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Optional[str]:
        return None if value is None else str(value)

    @field_validator("name", mode="before")
    @classmethod
    def _default_name(cls, value: Any) -> str:
        return value if isinstance(value, str) and value.strip() else "Untitled Recipe"

    @field_validator("ingredients", mode="before")
    @classmethod
    def _default_ingredients(cls, value: Any) -> Any:
        return value or []


# date key (YYYY-MM-DD) -> meal category id -> meals in display order
MealPlan = Dict[str, Dict[str, List[Meal]]]


class ShoppingListItem(BaseModel):
    """One consolidated line on the shopping list."""
    id: str = Field(default_factory=new_id)
    name: str
    amount: float = 0.0
    unit: str = ""
    aisle: str = OTHER_AISLE
    checked: bool = False
    source_recipes: List[str] = Field(default_factory=list, description="Contributing meal names")

    @field_validator("aisle", mode="before")
    @classmethod
    def _known_aisle(cls, value: Any) -> str:
        return normalize_aisle(value)


class ShoppingList(BaseModel):
    """The whole list; replaced wholesale on regeneration."""
    items: List[ShoppingListItem] = Field(default_factory=list)
    last_generated: Optional[datetime] = None


class AisleGroup(BaseModel):
    """Items of one aisle, in list order."""
    id: str
    name: str
    icon: str
    order: int
    items: List[ShoppingListItem] = Field(default_factory=list)


def create_ingredient(
    name: Optional[str] = None,
    amount: Any = None,
    unit: Optional[str] = None,
    aisle: Optional[str] = None,
    original: Optional[str] = None,
    id: Optional[str] = None,
) -> Ingredient:
    """
    Build an ingredient for a manually entered recipe.

    Missing amounts default to 1 here (a typed-in ingredient means "one of
    it"); missing aisles are looked up from the ingredient dictionary.
    """
    data: Dict[str, Any] = {
        "name": name,
        "amount": amount if amount not in (None, "") else 1,
        "unit": unit,
        "aisle": aisle,
        "original": original,
    }
    if id is not None:
        data["id"] = id
    return Ingredient.model_validate(data)
