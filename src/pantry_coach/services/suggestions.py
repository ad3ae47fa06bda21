"""Scoring and ranking of pantry items as meal suggestions."""

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from zoneinfo import ZoneInfo

from pantry_coach.domain.history import DietaryHistoryEntry
from pantry_coach.domain.inventory import InventoryItem, has_known_quantity, is_absent
from pantry_coach.domain.profile import UserProfile
from pantry_coach.domain.rules import RuleContext
from pantry_coach.domain.suggestions import ItemScore, MealSuggestion
from pantry_coach.services.diet_rules import check_daily_limits, evaluate_item
from pantry_coach.services.history import HistoryService
from pantry_coach.services.inventory import InventoryService
from pantry_coach.services.profile import ProfileService

BASE_SCORE = 50
MIN_SCORE = 0
MAX_SCORE = 100
MIN_SUGGESTION_SCORE = 20
SECONDS_PER_DAY = 60 * 60 * 24
VARIETY_WINDOW = 3
EXPIRY_URGENT_DAYS = 2
EXPIRY_SOON_DAYS = 5
LOW_GI_MAX = 55
HIGH_FIBER_G = 3
PROTEIN_RICH_G = 10
LOW_CARB_G = 10
DEFAULT_REASON = "Available in your pantry"

BREAKFAST_HOURS = range(6, 10)
LUNCH_HOURS = range(11, 14)
DINNER_HOURS = range(17, 21)


def calculate_suggestion_score(
    item: InventoryItem,
    profile: UserProfile,
    today_history: Sequence[DietaryHistoryEntry],
    current_time: datetime,
) -> ItemScore:
    """Score one item against the profile, today's history, and the time."""
    score = BASE_SCORE
    reasons: list[str] = []
    warnings: list[str] = []

    evaluation = evaluate_item(
        RuleContext(
            item=item,
            current_time=current_time,
            profile=profile,
            today_history=tuple(today_history),
        )
    )
    if evaluation.passed:
        score += 20
        reasons.extend(evaluation.messages)
    else:
        score -= 40
        warnings.extend(evaluation.warnings)

    limits = check_daily_limits(item, today_history, profile.diet_type)
    if not limits.fits:
        score -= 30
        warnings.extend(limits.warnings)

    if item.expiration_date is not None:
        days = _days_until(item.expiration_date, current_time)
        if days <= 0:
            score -= 100
            warnings.append("This item has expired")
        elif days <= EXPIRY_URGENT_DAYS:
            score += 25
            reasons.append(f"Eat soon - expiring in {math.ceil(days)} days")
        elif days <= EXPIRY_SOON_DAYS:
            score += 10
            reasons.append(
                f"Consider eating soon - expires in {math.ceil(days)} days"
            )

    if "glucose-stability" in profile.dietary_goals:
        if item.glycemic_index is not None and item.glycemic_index <= LOW_GI_MAX:
            score += 15
            reasons.append("Low glycemic index - good for blood sugar")
        if item.fiber_g >= HIGH_FIBER_G:
            score += 10
            reasons.append("High fiber helps stabilize glucose")
        if item.protein_g >= PROTEIN_RICH_G and item.carbs_g <= LOW_CARB_G:
            score += 10
            reasons.append("Protein-rich with low carbs - stabilizes glucose")

    if _is_snack_time(current_time) and item.category == "snacks":
        score += 10
        reasons.append("Good snack option")

    recent_names = [
        entry.item_name.lower() for entry in today_history[-VARIETY_WINDOW:]
    ]
    if not any(item.item_name.lower() in name for name in recent_names):
        score += 5

    if has_known_quantity(item) and item.quantity > 0:
        score += 5

    return ItemScore(
        score=max(MIN_SCORE, min(MAX_SCORE, score)),
        reasons=reasons,
        warnings=warnings,
    )


def generate_suggestions(
    inventory: Iterable[InventoryItem],
    profile: UserProfile,
    today_history: Sequence[DietaryHistoryEntry],
    current_time: datetime | None = None,
) -> list[MealSuggestion]:
    """Return suggestions for every eligible item, best first."""
    now = current_time or datetime.now().astimezone()
    suggestions: list[MealSuggestion] = []
    for item in inventory:
        if is_absent(item) or item.category == "condiments":
            continue
        result = calculate_suggestion_score(item, profile, today_history, now)
        if result.score < MIN_SUGGESTION_SCORE:
            continue
        suggestions.append(
            MealSuggestion(
                item=item,
                reason=". ".join(result.reasons) if result.reasons else DEFAULT_REASON,
                score=result.score,
                warnings=result.warnings,
            )
        )
    # sorted() is stable: equal scores keep inventory order.
    return sorted(suggestions, key=lambda suggestion: suggestion.score, reverse=True)


def get_top_suggestions(
    inventory: Iterable[InventoryItem],
    profile: UserProfile,
    today_history: Sequence[DietaryHistoryEntry],
    count: int = 5,
    current_time: datetime | None = None,
) -> list[MealSuggestion]:
    """Return the best ``count`` suggestions."""
    return generate_suggestions(inventory, profile, today_history, current_time)[
        :count
    ]


def get_quick_suggestion(
    inventory: Iterable[InventoryItem],
    profile: UserProfile,
    today_history: Sequence[DietaryHistoryEntry],
    current_time: datetime | None = None,
) -> MealSuggestion | None:
    """Answer "what can I eat right now?" with the single best item."""
    top = get_top_suggestions(inventory, profile, today_history, 1, current_time)
    return top[0] if top else None


def get_suggestions_by_category(
    inventory: Iterable[InventoryItem],
    profile: UserProfile,
    today_history: Sequence[DietaryHistoryEntry],
    category: str,
    current_time: datetime | None = None,
) -> list[MealSuggestion]:
    """Return ranked suggestions limited to one category."""
    return [
        suggestion
        for suggestion in generate_suggestions(
            inventory, profile, today_history, current_time
        )
        if suggestion.item.category == category
    ]


def _is_snack_time(current_time: datetime) -> bool:
    hour = current_time.hour
    return (
        hour not in BREAKFAST_HOURS
        and hour not in LUNCH_HOURS
        and hour not in DINNER_HOURS
    )


def _days_until(expiration: datetime, current_time: datetime) -> float:
    """Fractional days from current_time to expiration."""
    if expiration.tzinfo is None and current_time.tzinfo is not None:
        expiration = expiration.replace(tzinfo=current_time.tzinfo)
    elif expiration.tzinfo is not None and current_time.tzinfo is None:
        current_time = current_time.replace(tzinfo=expiration.tzinfo)
    return (expiration - current_time).total_seconds() / SECONDS_PER_DAY


@dataclass
class SuggestionService:
    """Suggestions from the stored pantry, evaluated in the user's timezone."""

    profile_service: ProfileService
    inventory_service: InventoryService
    history_service: HistoryService
    suggestion_limit: int = 10

    def get_suggestions(
        self, current_time: datetime | None = None
    ) -> list[MealSuggestion]:
        """Return every eligible item, best first; empty without a profile."""
        profile = self.profile_service.get_profile()
        if profile is None:
            return []
        now = self._local_now(current_time)
        return generate_suggestions(
            self.inventory_service.list_items(),
            profile,
            self.history_service.get_today_history(now),
            now,
        )

    def get_top_suggestions(
        self, count: int | None = None, current_time: datetime | None = None
    ) -> list[MealSuggestion]:
        """Return the best suggestions, ``suggestion_limit`` by default."""
        limit = self.suggestion_limit if count is None else count
        return self.get_suggestions(current_time)[:limit]

    def get_quick_suggestion(
        self, current_time: datetime | None = None
    ) -> MealSuggestion | None:
        """Return the single best suggestion, if any."""
        top = self.get_top_suggestions(1, current_time)
        return top[0] if top else None

    def get_suggestions_by_category(
        self, category: str, current_time: datetime | None = None
    ) -> list[MealSuggestion]:
        """Return ranked suggestions limited to one category."""
        return [
            suggestion
            for suggestion in self.get_suggestions(current_time)
            if suggestion.item.category == category
        ]

    def _local_now(self, current_time: datetime | None) -> datetime:
        tz = ZoneInfo(self.history_service.timezone)
        return (current_time or datetime.now(tz=tz)).astimezone(tz)
