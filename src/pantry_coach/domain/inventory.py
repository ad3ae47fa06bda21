"""Domain models for pantry inventory."""

from dataclasses import dataclass
from datetime import datetime
from typing import Annotated, Literal

from pydantic import Field

FoodCategory = Literal[
    "produce",
    "dairy",
    "meat",
    "pantry",
    "frozen",
    "beverages",
    "condiments",
    "grains",
    "snacks",
]

FOOD_CATEGORIES: tuple[FoodCategory, ...] = (
    "produce",
    "dairy",
    "meat",
    "pantry",
    "frozen",
    "beverages",
    "condiments",
    "grains",
    "snacks",
)

UNKNOWN: Literal["unknown"] = "unknown"

Grams = Annotated[float, Field(ge=0)]
Quantity = Annotated[float, Field(ge=0)] | Literal["unknown"]


@dataclass(frozen=True)
class InventoryItem:
    """A pantry item with per-serving macros."""

    id: str
    item_name: str
    quantity: Quantity
    category: FoodCategory
    fiber_g: Grams
    fat_g: Grams
    carbs_g: Grams
    protein_g: Grams
    last_updated: datetime
    unit: str | None = None
    calories: Annotated[float, Field(ge=0)] | None = None
    glycemic_index: float | None = None
    serving_size: str | None = None
    expiration_date: datetime | None = None


def has_known_quantity(item: InventoryItem) -> bool:
    """Return True when the item's quantity is a number."""
    return item.quantity != UNKNOWN


def is_absent(item: InventoryItem) -> bool:
    """Return True for items with a known quantity of zero or less."""
    return has_known_quantity(item) and item.quantity <= 0
