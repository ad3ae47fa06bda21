"""Domain models for the user profile."""

from dataclasses import dataclass, field
from typing import Literal

DietType = Literal[
    "low-glycemic",
    "mediterranean",
    "keto",
    "paleo",
    "whole30",
    "intermittent-fasting",
    "dash",
    "vegan",
    "vegetarian",
    "high-protein",
    "low-fodmap",
    "flexitarian",
]

DIET_TYPES: tuple[DietType, ...] = (
    "low-glycemic",
    "mediterranean",
    "keto",
    "paleo",
    "whole30",
    "intermittent-fasting",
    "dash",
    "vegan",
    "vegetarian",
    "high-protein",
    "low-fodmap",
    "flexitarian",
)

DietaryGoal = Literal[
    "glucose-stability",
    "weight-loss",
    "weight-maintenance",
    "muscle-gain",
    "heart-health",
]

UnitsPreference = Literal["metric", "imperial"]


@dataclass(frozen=True)
class EatingSchedule:
    """Preferred meal times as HH:MM strings."""

    breakfast: str = "07:00"
    lunch: str = "12:00"
    dinner: str = "18:00"
    snacks: tuple[str, ...] = ("10:00", "15:00")


@dataclass(frozen=True)
class FastingWindow:
    """Daily fasting range; start and end are local HH:MM strings."""

    start: str
    end: str


@dataclass(frozen=True)
class UserProfile:
    """Single-user diet profile."""

    user_id: str
    diet_type: DietType
    dietary_goals: tuple[DietaryGoal, ...]
    eating_schedule: EatingSchedule = field(default_factory=EatingSchedule)
    allergies: tuple[str, ...] = ()
    intolerances: tuple[str, ...] = ()
    units_preference: UnitsPreference = "metric"
    fasting_window: FastingWindow | None = None
