"""Domain models for dietary history."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class MacroAmounts:
    """Macros consumed in a single entry."""

    fiber_g: float
    fat_g: float
    carbs_g: float
    protein_g: float
    calories: float | None = None


@dataclass(frozen=True)
class DietaryHistoryEntry:
    """Immutable record of one consumption event."""

    id: str
    timestamp: datetime
    item_name: str
    quantity_consumed: float
    macros_consumed: MacroAmounts
    item_id: str | None = None
    unit: str | None = None
    dietary_rule_violations: tuple[str, ...] = ()
    glucose_relevance_flag: bool = False


@dataclass(frozen=True)
class DailyMacros:
    """Summed macros for a set of history entries."""

    total_carbs: float = 0.0
    total_protein: float = 0.0
    total_fat: float = 0.0
    total_fiber: float = 0.0
    total_calories: float = 0.0

    def __add__(self, other: "DailyMacros") -> "DailyMacros":
        return DailyMacros(
            total_carbs=self.total_carbs + other.total_carbs,
            total_protein=self.total_protein + other.total_protein,
            total_fat=self.total_fat + other.total_fat,
            total_fiber=self.total_fiber + other.total_fiber,
            total_calories=self.total_calories + other.total_calories,
        )
