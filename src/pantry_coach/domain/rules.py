"""Domain models for diet rules and their evaluation."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Literal

from pantry_coach.domain.history import DietaryHistoryEntry
from pantry_coach.domain.inventory import InventoryItem
from pantry_coach.domain.profile import DietType, UserProfile

RuleType = Literal[
    "allowed",
    "restricted",
    "time-based",
    "sequencing",
    "macro-threshold",
    "daily-limit",
]


@dataclass(frozen=True)
class RuleContext:
    """Inputs every rule condition receives."""

    item: InventoryItem
    current_time: datetime
    profile: UserProfile
    today_history: tuple[DietaryHistoryEntry, ...] = ()


@dataclass(frozen=True)
class DietRule:
    """A named predicate bound to one diet type and one rule kind."""

    id: str
    diet_type: DietType
    rule_type: RuleType
    description: str
    condition: Callable[[RuleContext], bool]
    message: str


@dataclass(frozen=True)
class RuleEvaluation:
    """Outcome of applying a diet's rules to one item."""

    passed: bool
    messages: list[str]
    warnings: list[str]


@dataclass(frozen=True)
class DietLimits:
    """Daily macro thresholds for a diet; protein is a floor."""

    carbs: float | None = None
    protein: float | None = None
    fat: float | None = None


@dataclass(frozen=True)
class LimitCheck:
    """Whether an item fits the remaining daily limits."""

    fits: bool
    warnings: list[str]
