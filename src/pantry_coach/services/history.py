"""Dietary history service."""

import logging
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta
from uuid import uuid4
from zoneinfo import ZoneInfo

from pantry_coach.domain.history import DailyMacros, DietaryHistoryEntry, MacroAmounts
from pantry_coach.domain.inventory import InventoryItem, has_known_quantity
from pantry_coach.domain.models import OperationResult
from pantry_coach.services.diet_rules import calculate_daily_macros
from pantry_coach.services.storage import (
    HISTORY_KEY,
    KeyValueStore,
    StorageError,
    decode_history,
    encode_history,
)

_logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 100


@dataclass
class HistoryService:
    """Records consumption events and answers per-day questions about them."""

    store: KeyValueStore
    timezone: str = "UTC"
    history_limit: int = DEFAULT_HISTORY_LIMIT
    last_error: str | None = field(default=None, init=False)

    def list_entries(self) -> list[DietaryHistoryEntry]:
        """Return stored entries oldest first; unreadable history reads as empty."""
        try:
            raw = self.store.load(HISTORY_KEY)
            entries = decode_history(raw) if raw is not None else []
        except StorageError:
            _logger.exception("Failed to load history")
            self.last_error = "Failed to load dietary history from storage"
            return []
        return entries

    def save_entries(self, entries: list[DietaryHistoryEntry]) -> OperationResult:
        """Persist entries, keeping only the most recent ones."""
        trimmed = entries[-self.history_limit :] if self.history_limit > 0 else []
        try:
            self.store.save(HISTORY_KEY, encode_history(trimmed))
        except StorageError:
            _logger.exception("Failed to save history")
            self.last_error = "Failed to save dietary history to storage"
            return OperationResult(success=False, message=self.last_error)
        self.last_error = None
        return OperationResult(success=True, count=len(trimmed))

    def build_entry(
        self,
        item: InventoryItem,
        quantity_consumed: float,
        rule_violations: tuple[str, ...] = (),
        glucose_relevant: bool = False,
        timestamp: datetime | None = None,
    ) -> DietaryHistoryEntry:
        """Create an entry with macros prorated by the item's quantity."""
        divisor = item.quantity if has_known_quantity(item) and item.quantity else 1

        def prorate(amount: float) -> float:
            return amount / divisor * quantity_consumed

        return DietaryHistoryEntry(
            id=f"history_{uuid4().hex}",
            timestamp=timestamp or datetime.now(tz=UTC),
            item_name=item.item_name,
            item_id=item.id,
            quantity_consumed=quantity_consumed,
            unit=item.unit,
            macros_consumed=MacroAmounts(
                fiber_g=prorate(item.fiber_g),
                fat_g=prorate(item.fat_g),
                carbs_g=prorate(item.carbs_g),
                protein_g=prorate(item.protein_g),
                calories=prorate(item.calories) if item.calories else None,
            ),
            dietary_rule_violations=tuple(rule_violations),
            glucose_relevance_flag=glucose_relevant,
        )

    def log_consumption(
        self,
        item: InventoryItem,
        quantity_consumed: float,
        rule_violations: tuple[str, ...] = (),
        glucose_relevant: bool = False,
        timestamp: datetime | None = None,
    ) -> DietaryHistoryEntry:
        """Append a consumption entry and persist the history."""
        entry = self.build_entry(
            item, quantity_consumed, rule_violations, glucose_relevant, timestamp
        )
        self.save_entries([*self.list_entries(), entry])
        return entry

    def get_today_history(
        self, now: datetime | None = None
    ) -> list[DietaryHistoryEntry]:
        """Return entries logged since local midnight."""
        tz = ZoneInfo(self.timezone)
        current = (now or datetime.now(tz=tz)).astimezone(tz)
        return self.get_history_for_date(current.date())

    def get_history_for_date(self, day: date) -> list[DietaryHistoryEntry]:
        """Return entries whose local date is ``day``."""
        tz = ZoneInfo(self.timezone)
        return [
            entry
            for entry in self.list_entries()
            if _as_aware(entry.timestamp).astimezone(tz).date() == day
        ]

    def get_daily_macros(self, day: date | None = None) -> DailyMacros:
        """Sum macros consumed on a local date, today by default."""
        if day is None:
            return calculate_daily_macros(self.get_today_history())
        return calculate_daily_macros(self.get_history_for_date(day))

    def get_recent_violations(
        self, days: int = 7, now: datetime | None = None
    ) -> list[DietaryHistoryEntry]:
        """Return entries with rule violations from the last ``days`` days."""
        cutoff = (now or datetime.now(tz=UTC)) - timedelta(days=days)
        cutoff = _as_aware(cutoff)
        return [
            entry
            for entry in self.list_entries()
            if _as_aware(entry.timestamp) >= cutoff and entry.dietary_rule_violations
        ]

    def delete_entry(self, entry_id: str) -> OperationResult:
        """Remove a single entry by id."""
        entries = self.list_entries()
        return self.save_entries([entry for entry in entries if entry.id != entry_id])

    def clear_history(self) -> OperationResult:
        """Remove all stored history."""
        try:
            self.store.remove(HISTORY_KEY)
        except StorageError:
            _logger.exception("Failed to clear history")
            self.last_error = "Failed to clear dietary history from storage"
            return OperationResult(success=False, message=self.last_error)
        self.last_error = None
        return OperationResult(success=True)


def _as_aware(value: datetime) -> datetime:
    # Stored timestamps without an offset were written as UTC.
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)
