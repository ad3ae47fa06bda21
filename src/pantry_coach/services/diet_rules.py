"""Diet rule table, rule evaluation, and daily limit checks.

Rules are plain data: each ``DietRule`` pairs a diet type and a rule kind
with a pure predicate over a ``RuleContext``. ``evaluate_item`` is the single
dispatcher that interprets the rule kind.

Keyword lists are substring heuristics over item names. They approximate a
diet's restrictions and make no claim to nutritional accuracy.
"""

import logging
from collections.abc import Iterable

from pantry_coach.domain.history import DailyMacros, DietaryHistoryEntry
from pantry_coach.domain.inventory import InventoryItem
from pantry_coach.domain.rules import (
    DietLimits,
    DietRule,
    LimitCheck,
    RuleContext,
    RuleEvaluation,
)

_logger = logging.getLogger(__name__)

HIGH_PROTEIN_G = 15
HIGH_FAT_G = 10
HIGH_FIBER_G = 3
LOW_GI_MAX = 55
SEQUENCING_MACRO_G = 15
KETO_CARB_MAX_G = 5
KETO_FIBROUS_CARB_MAX_G = 10
KETO_FIBER_RATIO = 0.3
PLANT_PROTEIN_G = 5
MINUTES_PER_HOUR = 60

NON_VEGAN_CATEGORIES = ("meat", "dairy")
WHOLE_FOOD_CATEGORIES = ("produce", "meat")

KETO_RESTRICTED = (
    "bread",
    "pasta",
    "rice",
    "potato",
    "sugar",
    "fruit juice",
    "candy",
    "soda",
)
PALEO_RESTRICTED = ("bread", "pasta", "rice", "beans", "peanut", "dairy", "processed")
WHOLE30_RESTRICTED = (
    "sugar",
    "alcohol",
    "grain",
    "legume",
    "dairy",
    "soy",
    "carrageenan",
    "sulfites",
)
LOW_FODMAP_RESTRICTED = (
    "garlic",
    "onion",
    "wheat",
    "apple",
    "pear",
    "watermelon",
    "honey",
    "milk",
    "beans",
)
DASH_ENCOURAGED = (
    "vegetable",
    "fruit",
    "whole grain",
    "lean protein",
    "nuts",
    "beans",
)
MEDITERRANEAN_FATS = ("olive", "avocado", "nuts", "fish", "salmon")
MEAT_KEYWORDS = ("meat", "chicken", "beef")


def _contains_any(name: str, keywords: Iterable[str]) -> bool:
    lower_name = name.lower()
    return any(keyword.lower() in lower_name for keyword in keywords)


def _is_high_protein(item: InventoryItem) -> bool:
    return item.protein_g >= HIGH_PROTEIN_G


def _is_high_fat(item: InventoryItem) -> bool:
    return item.fat_g >= HIGH_FAT_G


def _is_high_fiber(item: InventoryItem) -> bool:
    return item.fiber_g >= HIGH_FIBER_G


def _is_low_gi(item: InventoryItem) -> bool:
    return item.glycemic_index is None or item.glycemic_index <= LOW_GI_MAX


def _is_vegan(item: InventoryItem) -> bool:
    return item.category not in NON_VEGAN_CATEGORIES


def _is_vegetarian(item: InventoryItem) -> bool:
    return item.category != "meat"


def _minutes_since_midnight(value: str) -> int | None:
    """Parse an HH:MM string; return None when it is malformed."""
    hours, sep, minutes = value.strip().partition(":")
    if not sep:
        return None
    try:
        return int(hours) * MINUTES_PER_HOUR + int(minutes)
    except ValueError:
        return None


def _fits_keto_carbs(ctx: RuleContext) -> bool:
    item = ctx.item
    return item.carbs_g <= KETO_CARB_MAX_G or (
        item.carbs_g <= KETO_FIBROUS_CARB_MAX_G
        and item.fiber_g >= item.carbs_g * KETO_FIBER_RATIO
    )


def _outside_fasting_window(ctx: RuleContext) -> bool:
    # The two branches disagree on polarity for non-wrapping windows.
    window = ctx.profile.fasting_window
    if window is None:
        return True
    start = _minutes_since_midnight(window.start)
    end = _minutes_since_midnight(window.end)
    if start is None or end is None:
        _logger.debug("Ignoring malformed fasting window: %s", window)
        return True
    now = ctx.current_time.hour * MINUTES_PER_HOUR + ctx.current_time.minute
    if start > end:
        return now < start and now >= end
    return now >= end and now < start


def _protein_before_carbs(ctx: RuleContext) -> bool:
    if not _is_high_protein(ctx.item):
        return True
    carb_entries = [
        entry
        for entry in ctx.today_history
        if entry.macros_consumed.carbs_g > SEQUENCING_MACRO_G
    ]
    protein_entries = [
        entry
        for entry in ctx.today_history
        if entry.macros_consumed.protein_g > SEQUENCING_MACRO_G
    ]
    if not carb_entries:
        return True
    if not protein_entries:
        return False
    last_carb = max(carb_entries, key=lambda entry: entry.timestamp)
    last_protein = max(protein_entries, key=lambda entry: entry.timestamp)
    return last_protein.timestamp > last_carb.timestamp


def _limits_meat_today(ctx: RuleContext) -> bool:
    if ctx.item.category != "meat":
        return True
    meat_meals = [
        entry
        for entry in ctx.today_history
        if _contains_any(entry.item_name, MEAT_KEYWORDS)
    ]
    return len(meat_meals) < 1


DIET_RULES: tuple[DietRule, ...] = (
    DietRule(
        id="low-gi-allowed",
        diet_type="low-glycemic",
        rule_type="allowed",
        description="Prefer foods with low glycemic index",
        condition=lambda ctx: _is_low_gi(ctx.item),
        message="Great choice for blood sugar stability",
    ),
    DietRule(
        id="low-gi-fiber",
        diet_type="low-glycemic",
        rule_type="allowed",
        description="High fiber foods help stabilize glucose",
        condition=lambda ctx: _is_high_fiber(ctx.item),
        message="High fiber content helps with glucose control",
    ),
    DietRule(
        id="keto-low-carb",
        diet_type="keto",
        rule_type="macro-threshold",
        description="Foods must be very low in carbohydrates",
        condition=_fits_keto_carbs,
        message="Fits keto carb limits",
    ),
    DietRule(
        id="keto-high-fat",
        diet_type="keto",
        rule_type="allowed",
        description="Prefer high-fat foods",
        condition=lambda ctx: _is_high_fat(ctx.item),
        message="Good fat source for keto",
    ),
    DietRule(
        id="keto-restricted",
        diet_type="keto",
        rule_type="restricted",
        description="Avoid high-carb foods",
        condition=lambda ctx: not _contains_any(ctx.item.item_name, KETO_RESTRICTED),
        message="This food may be too high in carbs for keto",
    ),
    DietRule(
        id="med-vegetables",
        diet_type="mediterranean",
        rule_type="allowed",
        description="Emphasize vegetables",
        condition=lambda ctx: ctx.item.category == "produce",
        message="Great vegetable choice for Mediterranean diet",
    ),
    DietRule(
        id="med-healthy-fats",
        diet_type="mediterranean",
        rule_type="allowed",
        description="Include healthy fats",
        condition=lambda ctx: _contains_any(ctx.item.item_name, MEDITERRANEAN_FATS),
        message="Excellent source of healthy fats",
    ),
    DietRule(
        id="paleo-whole-foods",
        diet_type="paleo",
        rule_type="allowed",
        description="Emphasize whole, unprocessed foods",
        condition=lambda ctx: ctx.item.category in WHOLE_FOOD_CATEGORIES,
        message="Whole food appropriate for Paleo",
    ),
    DietRule(
        id="paleo-restricted",
        diet_type="paleo",
        rule_type="restricted",
        description="Avoid grains, legumes, dairy, and processed foods",
        condition=lambda ctx: not _contains_any(ctx.item.item_name, PALEO_RESTRICTED),
        message="This food is not typically allowed on Paleo",
    ),
    DietRule(
        id="whole30-restricted",
        diet_type="whole30",
        rule_type="restricted",
        description="No sugar, alcohol, grains, legumes, soy, or dairy",
        condition=lambda ctx: not _contains_any(
            ctx.item.item_name, WHOLE30_RESTRICTED
        ),
        message="This food is not allowed on Whole30",
    ),
    DietRule(
        id="whole30-whole-foods",
        diet_type="whole30",
        rule_type="allowed",
        description="Eat whole, unprocessed foods",
        condition=lambda ctx: ctx.item.category in WHOLE_FOOD_CATEGORIES,
        message="Whole food appropriate for Whole30",
    ),
    DietRule(
        id="if-fasting-window",
        diet_type="intermittent-fasting",
        rule_type="time-based",
        description="Check if currently in eating window",
        condition=_outside_fasting_window,
        message="You are currently in your fasting window",
    ),
    DietRule(
        id="dash-low-sodium",
        diet_type="dash",
        rule_type="allowed",
        description="Emphasize low-sodium, nutrient-rich foods",
        condition=lambda ctx: (
            _contains_any(ctx.item.item_name, DASH_ENCOURAGED)
            or ctx.item.category == "produce"
        ),
        message="Heart-healthy choice for DASH diet",
    ),
    DietRule(
        id="dash-vegetables",
        diet_type="dash",
        rule_type="allowed",
        description="Emphasize fruits and vegetables",
        condition=lambda ctx: (
            ctx.item.category == "produce" and _is_high_fiber(ctx.item)
        ),
        message="Excellent produce choice for DASH",
    ),
    DietRule(
        id="vegan-no-animal",
        diet_type="vegan",
        rule_type="restricted",
        description="No animal products",
        condition=lambda ctx: _is_vegan(ctx.item),
        message="This food contains animal products",
    ),
    DietRule(
        id="vegan-protein",
        diet_type="vegan",
        rule_type="allowed",
        description="Plant-based protein sources",
        condition=lambda ctx: (
            _is_vegan(ctx.item) and ctx.item.protein_g >= PLANT_PROTEIN_G
        ),
        message="Good plant-based protein source",
    ),
    DietRule(
        id="vegetarian-no-meat",
        diet_type="vegetarian",
        rule_type="restricted",
        description="No meat",
        condition=lambda ctx: _is_vegetarian(ctx.item),
        message="This food contains meat",
    ),
    DietRule(
        id="high-protein-priority",
        diet_type="high-protein",
        rule_type="allowed",
        description="Prioritize high-protein foods",
        condition=lambda ctx: _is_high_protein(ctx.item),
        message="Excellent protein source",
    ),
    DietRule(
        id="high-protein-sequence",
        diet_type="high-protein",
        rule_type="sequencing",
        description="Eat protein before carbs",
        condition=_protein_before_carbs,
        message="Try to eat protein before carbs for better satiety",
    ),
    DietRule(
        id="low-fodmap-restricted",
        diet_type="low-fodmap",
        rule_type="restricted",
        description="Avoid high-FODMAP foods",
        condition=lambda ctx: not _contains_any(
            ctx.item.item_name, LOW_FODMAP_RESTRICTED
        ),
        message="This food may be high in FODMAPs",
    ),
    DietRule(
        id="flexitarian-mostly-plants",
        diet_type="flexitarian",
        rule_type="allowed",
        description="Emphasize plant-based foods with occasional meat",
        condition=_limits_meat_today,
        message="Consider a plant-based alternative",
    ),
)

DAILY_LIMITS: dict[str, DietLimits] = {
    "keto": DietLimits(carbs=50),
    "low-glycemic": DietLimits(carbs=130),
    # Declared as a daily minimum; check_daily_limits does not enforce it.
    "high-protein": DietLimits(protein=150),
    "mediterranean": DietLimits(),
    "paleo": DietLimits(),
    "whole30": DietLimits(),
    "intermittent-fasting": DietLimits(),
    "dash": DietLimits(),
    "vegan": DietLimits(),
    "vegetarian": DietLimits(),
    "low-fodmap": DietLimits(),
    "flexitarian": DietLimits(),
}


def get_rules_for_diet(diet_type: str) -> list[DietRule]:
    """Return all rules bound to a diet type; unknown diets have none."""
    return [rule for rule in DIET_RULES if rule.diet_type == diet_type]


def evaluate_item(ctx: RuleContext) -> RuleEvaluation:
    """Apply every rule for the profile's diet to one item."""
    messages: list[str] = []
    warnings: list[str] = []
    passed = True

    for rule in get_rules_for_diet(ctx.profile.diet_type):
        result = rule.condition(ctx)
        if rule.rule_type in {"restricted", "time-based"}:
            if not result:
                passed = False
                warnings.append(rule.message)
        elif rule.rule_type == "allowed":
            if result:
                messages.append(rule.message)
        elif rule.rule_type == "sequencing" and not result:
            warnings.append(rule.message)

    return RuleEvaluation(passed=passed, messages=messages, warnings=warnings)


def calculate_daily_macros(history: Iterable[DietaryHistoryEntry]) -> DailyMacros:
    """Sum consumed macros across history entries."""
    totals = DailyMacros()
    for entry in history:
        macros = entry.macros_consumed
        totals = totals + DailyMacros(
            total_carbs=macros.carbs_g,
            total_protein=macros.protein_g,
            total_fat=macros.fat_g,
            total_fiber=macros.fiber_g,
            total_calories=macros.calories or 0.0,
        )
    return totals


def check_daily_limits(
    item: InventoryItem,
    today_history: Iterable[DietaryHistoryEntry],
    diet_type: str,
) -> LimitCheck:
    """Check whether eating the item keeps today's totals within limits."""
    limits = DAILY_LIMITS.get(diet_type)
    if limits is None or limits.carbs is None:
        return LimitCheck(fits=True, warnings=[])

    daily = calculate_daily_macros(today_history)
    if daily.total_carbs + item.carbs_g > limits.carbs:
        return LimitCheck(
            fits=False,
            warnings=[
                f"This would exceed your daily carb limit of {limits.carbs:g}g"
            ],
        )
    return LimitCheck(fits=True, warnings=[])
