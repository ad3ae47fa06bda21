"""Domain models for daily progress reporting."""

from dataclasses import dataclass
from datetime import date
from typing import Literal

ProgressStatus = Literal[
    "within",
    "approaching",
    "over",
    "starting",
    "progressing",
    "on-target",
]


@dataclass(frozen=True)
class DailyTargets:
    """Daily macro targets for a diet."""

    carbs: float
    protein: float
    fat: float
    fiber: float
    calories: float


@dataclass(frozen=True)
class MacroProgress:
    """Progress of one macro toward its daily target."""

    name: str
    current: float
    target: float
    percent: int
    is_limit: bool
    status: ProgressStatus


@dataclass(frozen=True)
class DailyProgress:
    """Per-macro progress for one day."""

    day: date
    entry_count: int
    macros: list[MacroProgress]
