"""Consumption logging across inventory and history."""

import logging
from dataclasses import dataclass
from datetime import datetime
from zoneinfo import ZoneInfo

from pantry_coach.domain.models import ConsumptionResult
from pantry_coach.domain.rules import RuleContext
from pantry_coach.services.diet_rules import evaluate_item
from pantry_coach.services.history import HistoryService
from pantry_coach.services.inventory import InventoryService, reduce_item_quantity
from pantry_coach.services.profile import ProfileService

_logger = logging.getLogger(__name__)

GLUCOSE_GOAL = "glucose-stability"


@dataclass
class ConsumptionService:
    """Logs an eaten item and updates the pantry in one step."""

    profile_service: ProfileService
    inventory_service: InventoryService
    history_service: HistoryService

    def consume(
        self,
        item_id: str,
        quantity_consumed: float,
        finished: bool = False,
        current_time: datetime | None = None,
    ) -> ConsumptionResult:
        """Record consumption of an item.

        The history entry carries the rule warnings for the item at
        ``current_time``. If the inventory cannot be saved afterwards the
        previous history is restored, so either both datasets change or
        neither does.
        """
        if quantity_consumed <= 0:
            return ConsumptionResult(
                success=False, message="Quantity consumed must be positive"
            )
        profile = self.profile_service.get_profile()
        if profile is None:
            return ConsumptionResult(success=False, message="No profile configured")

        items = self.inventory_service.list_items()
        item = next((item for item in items if item.id == item_id), None)
        if item is None:
            return ConsumptionResult(success=False, message="Item not found")

        tz = ZoneInfo(self.history_service.timezone)
        now = (current_time or datetime.now(tz=tz)).astimezone(tz)
        today_history = self.history_service.get_today_history(now)
        evaluation = evaluate_item(
            RuleContext(
                item=item,
                current_time=now,
                profile=profile,
                today_history=tuple(today_history),
            )
        )

        previous_history = self.history_service.list_entries()
        entry = self.history_service.build_entry(
            item,
            quantity_consumed,
            rule_violations=tuple(evaluation.warnings),
            glucose_relevant=GLUCOSE_GOAL in profile.dietary_goals,
            timestamp=now,
        )
        saved_history = self.history_service.save_entries([*previous_history, entry])
        if not saved_history.success:
            return ConsumptionResult(success=False, message=saved_history.message)

        if finished:
            remaining = [other for other in items if other.id != item_id]
        else:
            remaining = reduce_item_quantity(items, item_id, quantity_consumed)
        saved_inventory = self.inventory_service.save_items(remaining)
        if not saved_inventory.success:
            _logger.warning("Rolling back history after inventory save failure")
            restored = self.history_service.save_entries(previous_history)
            if not restored.success:
                _logger.error(
                    "History rollback failed; entry %s remains logged", entry.id
                )
                return ConsumptionResult(
                    success=False,
                    message=f"{saved_inventory.message}; history rollback also failed",
                )
            return ConsumptionResult(success=False, message=saved_inventory.message)

        return ConsumptionResult(
            success=True, entry=entry, warnings=tuple(evaluation.warnings)
        )
