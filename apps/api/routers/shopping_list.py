"""
Shopping list endpoints: generate from the meal plan, check off, export.
"""
import logging
from datetime import date
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config import settings
from db.session import get_session
from error_handler import APIError
from repositories.shopping_list import ShoppingListRepository
from schemas.shopping import AisleGroup, Meal, ShoppingList
from services.aisles import AISLE_CATEGORIES
from services.ingredient_utils import suggest_ingredients
from services.shopping_list_store import ShoppingListStore

logger = logging.getLogger(__name__)
router = APIRouter(tags=["shopping-list"])


# ============================================================================
# Pydantic Models
# ============================================================================


class GenerateRequest(BaseModel):
    """Meal plan to build the list from."""

    meals: Dict[str, Dict[str, List[Meal]]] = Field(
        default_factory=dict, description="Meals keyed by YYYY-MM-DD, then meal category"
    )
    days_ahead: int = Field(
        settings.SHOPPING_DAYS_AHEAD, ge=0, le=366, description="Days to scan from week start"
    )
    today: Optional[date] = Field(None, description="Reference day (defaults to server date)")


class AddItemRequest(BaseModel):
    """Manually entered item."""

    name: str = Field(..., min_length=1, max_length=200)

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value


class ShoppingListResponse(ShoppingList):
    """Shopping list with progress counts."""

    total: int = 0
    checked: int = 0


class AisleResponse(BaseModel):
    id: str
    name: str
    icon: str
    order: int


class IngredientSuggestion(BaseModel):
    name: str
    aisle: str
    default_unit: str


# ============================================================================
# Dependencies
# ============================================================================


def get_store(
    household: str = Query(
        settings.SHOPPING_LIST_KEY, min_length=1, max_length=128, description="Household storage key"
    ),
    db: Session = Depends(get_session),
) -> ShoppingListStore:
    """Loaded store for the requested household."""
    store = ShoppingListStore(ShoppingListRepository(db), storage_key=household)
    try:
        store.load()
    except SQLAlchemyError as e:
        raise APIError.handle_database_error("load shopping list", e, household=household)
    return store


def _response(store: ShoppingListStore) -> ShoppingListResponse:
    return ShoppingListResponse(
        items=store.shopping_list.items,
        last_generated=store.shopping_list.last_generated,
        **store.progress(),
    )


# ============================================================================
# Endpoints
# ============================================================================


@router.get("/", response_model=ShoppingListResponse)
def get_shopping_list(store: ShoppingListStore = Depends(get_store)) -> ShoppingListResponse:
    """Current shopping list for the household."""
    return _response(store)


@router.post("/generate", response_model=ShoppingListResponse)
def generate_shopping_list(
    payload: GenerateRequest,
    store: ShoppingListStore = Depends(get_store),
) -> ShoppingListResponse:
    """
    Regenerate the list from the meal plan.

    The previous list, including checked items and manual additions, is
    replaced.
    """
    APIError.log_operation_start(
        "generate shopping list",
        household=store.storage_key,
        extra_context={"days_ahead": payload.days_ahead},
    )
    try:
        store.generate_from_meals(
            payload.meals,
            days_ahead=payload.days_ahead,
            today=payload.today,
            week_starts_on=settings.WEEK_STARTS_ON,
        )
    except SQLAlchemyError as e:
        raise APIError.handle_database_error("generate shopping list", e, household=store.storage_key)

    APIError.log_operation_success(
        "generate shopping list",
        household=store.storage_key,
        extra_context={"items": len(store.shopping_list.items)},
    )
    return _response(store)


@router.get("/groups", response_model=List[AisleGroup])
def get_grouped_items(store: ShoppingListStore = Depends(get_store)) -> List[AisleGroup]:
    """Items grouped by aisle in store order; empty aisles omitted."""
    return store.get_grouped_items()


@router.get("/export", response_class=PlainTextResponse)
def export_shopping_list(store: ShoppingListStore = Depends(get_store)) -> str:
    """Checklist text for the clipboard."""
    return store.export_text()


@router.post("/items", response_model=ShoppingListResponse)
def add_item(
    payload: AddItemRequest,
    store: ShoppingListStore = Depends(get_store),
) -> ShoppingListResponse:
    """Add a manual item."""
    try:
        store.add_item(payload.name)
    except SQLAlchemyError as e:
        raise APIError.handle_database_error("add shopping list item", e, household=store.storage_key)
    return _response(store)


@router.post("/items/{item_id}/toggle", response_model=ShoppingListResponse)
def toggle_item(item_id: str, store: ShoppingListStore = Depends(get_store)) -> ShoppingListResponse:
    """Check or uncheck an item. Unknown ids leave the list unchanged."""
    try:
        store.toggle_item(item_id)
    except SQLAlchemyError as e:
        raise APIError.handle_database_error("toggle shopping list item", e, household=store.storage_key)
    return _response(store)


@router.delete("/items/{item_id}", response_model=ShoppingListResponse)
def delete_item(item_id: str, store: ShoppingListStore = Depends(get_store)) -> ShoppingListResponse:
    """Remove an item. Unknown ids leave the list unchanged."""
    try:
        store.delete_item(item_id)
    except SQLAlchemyError as e:
        raise APIError.handle_database_error("delete shopping list item", e, household=store.storage_key)
    return _response(store)


@router.delete("/", response_model=ShoppingListResponse)
def clear_list(store: ShoppingListStore = Depends(get_store)) -> ShoppingListResponse:
    """Empty the list."""
    try:
        store.clear_list()
    except SQLAlchemyError as e:
        raise APIError.handle_database_error("clear shopping list", e, household=store.storage_key)
    return _response(store)


@router.get("/aisles", response_model=List[AisleResponse])
def list_aisles() -> List[AisleResponse]:
    """Aisle categories in store order."""
    return [
        AisleResponse(id=c.id, name=c.name, icon=c.icon, order=c.order)
        for c in AISLE_CATEGORIES
    ]


@router.get("/ingredients", response_model=List[IngredientSuggestion])
def list_ingredient_suggestions(
    query: Optional[str] = Query(None, description="Substring to match"),
    limit: int = Query(20, ge=1, le=200),
) -> List[IngredientSuggestion]:
    """Known ingredients with their default aisle and unit, for autocomplete."""
    return [IngredientSuggestion(**s) for s in suggest_ingredients(query, limit=limit)]
