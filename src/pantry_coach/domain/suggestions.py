"""Domain models for meal suggestions."""

from dataclasses import dataclass

from pantry_coach.domain.inventory import InventoryItem


@dataclass(frozen=True)
class ItemScore:
    """Clamped score for one item with the reasons behind it."""

    score: float
    reasons: list[str]
    warnings: list[str]


@dataclass(frozen=True)
class MealSuggestion:
    """A ranked pantry item suggestion."""

    item: InventoryItem
    reason: str
    score: float
    warnings: list[str]
