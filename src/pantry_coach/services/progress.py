"""Daily progress toward per-diet macro targets."""

import math
from dataclasses import dataclass
from datetime import date, datetime
from zoneinfo import ZoneInfo

from pantry_coach.domain.history import DailyMacros
from pantry_coach.domain.progress import (
    DailyProgress,
    DailyTargets,
    MacroProgress,
    ProgressStatus,
)
from pantry_coach.services.diet_rules import calculate_daily_macros
from pantry_coach.services.history import HistoryService

DEFAULT_TARGETS = DailyTargets(carbs=250, protein=50, fat=65, fiber=25, calories=2000)
DAILY_TARGETS: dict[str, DailyTargets] = {
    "keto": DailyTargets(carbs=50, protein=75, fat=150, fiber=25, calories=1800),
    "low-glycemic": DailyTargets(
        carbs=130, protein=60, fat=70, fiber=35, calories=2000
    ),
    "high-protein": DailyTargets(
        carbs=200, protein=150, fat=65, fiber=25, calories=2200
    ),
    "mediterranean": DailyTargets(
        carbs=200, protein=60, fat=80, fiber=30, calories=2000
    ),
}
LIMIT_DIETS = ("keto", "low-glycemic")

OVER_PERCENT = 100
APPROACHING_PERCENT = 80
ON_TARGET_PERCENT = 80
PROGRESSING_PERCENT = 50


def get_targets(diet_type: str) -> DailyTargets:
    """Return the daily targets for a diet, falling back to the defaults."""
    return DAILY_TARGETS.get(diet_type, DEFAULT_TARGETS)


def progress_percent(current: float, target: float) -> int:
    """Return rounded progress, capped at 100."""
    if target <= 0:
        return OVER_PERCENT
    return min(OVER_PERCENT, math.floor(current / target * 100 + 0.5))


def progress_status(percent: int, is_limit: bool) -> ProgressStatus:
    """Classify progress; limits are ceilings, everything else a goal."""
    if is_limit:
        if percent >= OVER_PERCENT:
            return "over"
        if percent >= APPROACHING_PERCENT:
            return "approaching"
        return "within"
    if percent >= ON_TARGET_PERCENT:
        return "on-target"
    if percent >= PROGRESSING_PERCENT:
        return "progressing"
    return "starting"


def build_progress(
    diet_type: str, day: date, macros: DailyMacros, entry_count: int
) -> DailyProgress:
    """Compare summed macros against the diet's targets."""
    targets = get_targets(diet_type)
    limits_carbs = diet_type in LIMIT_DIETS
    rows = (
        ("carbs", macros.total_carbs, targets.carbs, limits_carbs),
        ("protein", macros.total_protein, targets.protein, False),
        ("fat", macros.total_fat, targets.fat, False),
        ("fiber", macros.total_fiber, targets.fiber, False),
        ("calories", macros.total_calories, targets.calories, False),
    )
    progress = []
    for name, current, target, is_limit in rows:
        percent = progress_percent(current, target)
        progress.append(
            MacroProgress(
                name=name,
                current=current,
                target=target,
                percent=percent,
                is_limit=is_limit,
                status=progress_status(percent, is_limit),
            )
        )
    return DailyProgress(day=day, entry_count=entry_count, macros=progress)


@dataclass
class ProgressService:
    """Service for daily progress in the configured timezone."""

    history_service: HistoryService

    def get_daily_progress(
        self, diet_type: str, day: date | None = None
    ) -> DailyProgress:
        """Return progress for a local date, today by default."""
        if day is None:
            tz = ZoneInfo(self.history_service.timezone)
            day = datetime.now(tz=tz).date()
        entries = self.history_service.get_history_for_date(day)
        return build_progress(
            diet_type, day, calculate_daily_macros(entries), len(entries)
        )
