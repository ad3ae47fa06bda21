"""Delimited-text import of pantry items."""

import csv
import logging
import math
from dataclasses import replace
from datetime import UTC, datetime
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from pantry_coach.domain.inventory import (
    UNKNOWN,
    FoodCategory,
    InventoryItem,
    has_known_quantity,
)

_logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = (
    "item_name",
    "quantity",
    "fiber_g",
    "fat_g",
    "carbs_g",
    "protein_g",
    "category",
)
NAME_COLUMNS = ("item_name", "name", "item")
MIN_CSV_LINES = 2

AI_IMPORT_PROMPT = """Please identify all food items visible in this image and return them in CSV format with the following columns:
item_name,quantity,unit,fiber_g,fat_g,carbs_g,protein_g,category

Guidelines:
- item_name: The name of the food item
- quantity: Estimated quantity (number or "unknown")
- unit: Unit of measurement (e.g., cup, lb, oz, pieces)
- fiber_g, fat_g, carbs_g, protein_g: Macronutrients per typical serving
- category: One of: produce, dairy, meat, pantry, frozen, beverages, condiments, grains, snacks

Example output:
item_name,quantity,unit,fiber_g,fat_g,carbs_g,protein_g,category
Greek Yogurt,1,cup,0,5,9,17,dairy
Broccoli,2,cups,5,0,6,3,produce
Chicken Breast,1,lb,0,4,0,31,meat
Almonds,1,cup,12,49,21,21,snacks

Please provide accurate macronutrient values based on standard nutritional data."""  # noqa: E501

_CATEGORY_ALIASES: dict[str, FoodCategory] = {
    "produce": "produce",
    "vegetable": "produce",
    "vegetables": "produce",
    "fruit": "produce",
    "fruits": "produce",
    "dairy": "dairy",
    "milk": "dairy",
    "cheese": "dairy",
    "yogurt": "dairy",
    "meat": "meat",
    "protein": "meat",
    "poultry": "meat",
    "fish": "meat",
    "seafood": "meat",
    "pantry": "pantry",
    "dry goods": "pantry",
    "canned": "pantry",
    "frozen": "frozen",
    "freezer": "frozen",
    "beverages": "beverages",
    "drinks": "beverages",
    "condiments": "condiments",
    "sauce": "condiments",
    "sauces": "condiments",
    "grains": "grains",
    "bread": "grains",
    "pasta": "grains",
    "rice": "grains",
    "snacks": "snacks",
    "snack": "snacks",
}


def normalize_category(value: str | None) -> FoodCategory:
    """Map a free-text category onto a known category, defaulting to pantry."""
    if not value:
        return "pantry"
    return _CATEGORY_ALIASES.get(value.strip().lower(), "pantry")


class CsvInventoryRow(BaseModel):
    """One validated import row."""

    model_config = ConfigDict(extra="ignore")

    item_name: str = Field(min_length=1)
    quantity: float | Literal["unknown"] = Field(default=UNKNOWN)
    unit: str | None = None
    fiber_g: float = Field(default=0.0, ge=0)
    fat_g: float = Field(default=0.0, ge=0)
    carbs_g: float = Field(default=0.0, ge=0)
    protein_g: float = Field(default=0.0, ge=0)
    category: FoodCategory = "pantry"
    calories: float | None = Field(default=None, ge=0)
    glycemic_index: float | None = None
    serving_size: str | None = None
    expiration_date: datetime | None = None

    @field_validator("item_name", mode="before")
    @classmethod
    def strip_name(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    @field_validator("quantity", mode="before")
    @classmethod
    def parse_quantity(cls, value: object) -> object:
        if not isinstance(value, str):
            return value
        if not value.strip() or value.strip().lower() == UNKNOWN:
            return UNKNOWN
        parsed = _to_float(value)
        return UNKNOWN if parsed is None else parsed

    @field_validator("quantity")
    @classmethod
    def non_negative_quantity(cls, value: float | str) -> float | str:
        if value != UNKNOWN and value < 0:
            raise ValueError("quantity must not be negative")
        return value

    @field_validator("fiber_g", "fat_g", "carbs_g", "protein_g", mode="before")
    @classmethod
    def parse_macro(cls, value: object) -> object:
        if isinstance(value, str):
            return _to_float(value) or 0.0
        return value

    @field_validator("calories", "glycemic_index", mode="before")
    @classmethod
    def parse_optional_number(cls, value: object) -> object:
        if isinstance(value, str):
            return _to_float(value)
        return value

    @field_validator("unit", "serving_size", mode="before")
    @classmethod
    def blank_to_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("category", mode="before")
    @classmethod
    def coerce_category(cls, value: object) -> object:
        if value is None or isinstance(value, str):
            return normalize_category(value)
        return value

    @field_validator("expiration_date", mode="before")
    @classmethod
    def parse_expiration(cls, value: object) -> object:
        if not isinstance(value, str):
            return value
        if not value.strip():
            return None
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError:
            _logger.warning("Ignoring unparseable expiration date: %s", value)
            return None


def parse_csv(text: str, now: datetime | None = None) -> list[InventoryItem]:
    """Parse delimited text with a header row into inventory items.

    Rows without a name, or with negative numbers, are skipped.
    """
    lines = text.strip().splitlines()
    if len(lines) < MIN_CSV_LINES:
        return []
    timestamp = now or datetime.now(tz=UTC)
    reader = csv.reader(lines, skipinitialspace=True)
    headers = [header.strip().lower() for header in next(reader)]

    items: list[InventoryItem] = []
    for line_number, values in enumerate(reader, start=2):
        if not any(value.strip() for value in values):
            continue
        row = {
            header: values[index].strip() if index < len(values) else ""
            for index, header in enumerate(headers)
        }
        row["item_name"] = next(
            (row[column] for column in NAME_COLUMNS if row.get(column)), ""
        )
        try:
            parsed = CsvInventoryRow.model_validate(row)
        except ValidationError as exc:
            _logger.warning(
                "Skipping invalid import row %s: %s", line_number, exc.errors()
            )
            continue
        items.append(_to_item(parsed, timestamp))
    return items


def validate_csv(text: str) -> tuple[bool, list[str]]:
    """Check that the text has a header row with every required column."""
    trimmed = text.strip()
    if not trimmed:
        return False, ["CSV is empty"]
    header_line = trimmed.splitlines()[0]
    headers = {
        header.strip().lower()
        for header in next(csv.reader([header_line], skipinitialspace=True))
    }
    errors = [
        f"Missing required column: {column}"
        for column in REQUIRED_COLUMNS
        if column not in headers
    ]
    return not errors, errors


def merge_inventory(
    existing: list[InventoryItem],
    new_items: list[InventoryItem],
    now: datetime | None = None,
) -> list[InventoryItem]:
    """Merge imported items into an inventory by case-insensitive name.

    Matching items keep their original id and sum known quantities; the
    imported fields replace everything else.
    """
    timestamp = now or datetime.now(tz=UTC)
    merged = list(existing)
    for new_item in new_items:
        index = next(
            (
                position
                for position, item in enumerate(merged)
                if item.item_name.lower() == new_item.item_name.lower()
            ),
            None,
        )
        if index is None:
            merged.append(new_item)
            continue
        current = merged[index]
        merged[index] = replace(
            new_item,
            id=current.id,
            quantity=_combine_quantities(current, new_item),
            last_updated=timestamp,
        )
    return merged


def new_item_id() -> str:
    """Return a fresh inventory item id."""
    return f"item_{uuid4().hex}"


def _combine_quantities(
    current: InventoryItem, incoming: InventoryItem
) -> float | Literal["unknown"]:
    if not has_known_quantity(current):
        return incoming.quantity
    if not has_known_quantity(incoming):
        return current.quantity
    return current.quantity + incoming.quantity


def _to_item(row: CsvInventoryRow, timestamp: datetime) -> InventoryItem:
    return InventoryItem(
        id=new_item_id(),
        item_name=row.item_name,
        quantity=row.quantity,
        unit=row.unit,
        category=row.category,
        fiber_g=row.fiber_g,
        fat_g=row.fat_g,
        carbs_g=row.carbs_g,
        protein_g=row.protein_g,
        calories=row.calories,
        glycemic_index=row.glycemic_index,
        serving_size=row.serving_size,
        expiration_date=row.expiration_date,
        last_updated=timestamp,
    )


def _to_float(value: str) -> float | None:
    try:
        parsed = float(value.strip())
    except ValueError:
        return None
    return parsed if math.isfinite(parsed) else None
