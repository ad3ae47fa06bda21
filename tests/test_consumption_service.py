"""Tests for consumption logging."""

from dataclasses import dataclass
from datetime import UTC, datetime

from pantry_coach.services.consumption import ConsumptionService
from pantry_coach.services.history import HistoryService
from pantry_coach.services.inventory import InventoryService
from pantry_coach.services.profile import ProfileService
from pantry_coach.services.storage import HISTORY_KEY, INVENTORY_KEY
from tests.conftest import InMemoryStore, make_item, make_profile

LUNCH = datetime(2024, 1, 15, 12, 30, tzinfo=UTC)


def test_consume_logs_entry_and_reduces_item(
    consumption_service: ConsumptionService,
    profile_service: ProfileService,
    inventory_service: InventoryService,
    history_service: HistoryService,
) -> None:
    profile_service.save_profile(make_profile("keto"))
    inventory_service.save_items(
        [make_item(id="eggs", item_name="Eggs", quantity=6, protein_g=36)]
    )

    result = consumption_service.consume("eggs", 2, current_time=LUNCH)

    assert result.success is True
    assert result.entry is not None
    assert result.entry.macros_consumed.protein_g == 12
    assert result.entry.timestamp == LUNCH
    assert history_service.list_entries() == [result.entry]
    assert inventory_service.get_item("eggs").quantity == 4  # type: ignore[union-attr]


def test_consume_finished_removes_item(
    consumption_service: ConsumptionService,
    profile_service: ProfileService,
    inventory_service: InventoryService,
) -> None:
    profile_service.save_profile(make_profile())
    inventory_service.save_items([make_item(id="a", quantity=5)])

    result = consumption_service.consume("a", 1, finished=True, current_time=LUNCH)

    assert result.success is True
    assert inventory_service.list_items() == []


def test_consume_records_rule_warnings_and_glucose_flag(
    consumption_service: ConsumptionService,
    profile_service: ProfileService,
    inventory_service: InventoryService,
) -> None:
    profile_service.save_profile(
        make_profile("vegetarian", dietary_goals=("glucose-stability",))
    )
    inventory_service.save_items(
        [make_item(id="c", item_name="Chicken Breast", category="meat")]
    )

    result = consumption_service.consume("c", 1, current_time=LUNCH)

    assert result.success is True
    assert result.warnings == ("This food contains meat",)
    assert result.entry is not None
    assert result.entry.dietary_rule_violations == ("This food contains meat",)
    assert result.entry.glucose_relevance_flag is True


def test_consume_requires_profile_and_item(
    consumption_service: ConsumptionService,
    profile_service: ProfileService,
) -> None:
    missing_profile = consumption_service.consume("a", 1, current_time=LUNCH)
    profile_service.save_profile(make_profile())
    missing_item = consumption_service.consume("a", 1, current_time=LUNCH)
    bad_quantity = consumption_service.consume("a", 0, current_time=LUNCH)

    assert missing_profile.message == "No profile configured"
    assert missing_item.message == "Item not found"
    assert bad_quantity.success is False


def test_inventory_failure_rolls_back_history(store: InMemoryStore) -> None:
    profile_service = ProfileService(store)
    inventory_service = InventoryService(store)
    history_service = HistoryService(store)
    service = ConsumptionService(profile_service, inventory_service, history_service)
    profile_service.save_profile(make_profile())
    inventory_service.save_items([make_item(id="a", quantity=2)])
    store.fail_save_keys.add(INVENTORY_KEY)

    result = service.consume("a", 1, current_time=LUNCH)

    assert result.success is False
    assert history_service.list_entries() == []
    assert inventory_service.get_item("a").quantity == 2  # type: ignore[union-attr]


@dataclass
class _CascadingFailureStore(InMemoryStore):
    """Store whose history writes start failing after any failed write."""

    def save(self, key: str, value: object) -> None:
        if key in self.fail_save_keys:
            self.fail_save_keys.add(HISTORY_KEY)
        super().save(key, value)


def test_failed_rollback_is_reported() -> None:
    store = _CascadingFailureStore()
    profile_service = ProfileService(store)
    history_service = HistoryService(store)
    service = ConsumptionService(
        profile_service, InventoryService(store), history_service
    )
    profile_service.save_profile(make_profile())
    InventoryService(store).save_items([make_item(id="a", quantity=2)])
    store.fail_save_keys.add(INVENTORY_KEY)

    result = service.consume("a", 1, current_time=LUNCH)

    assert result.success is False
    assert result.message.endswith("history rollback also failed")
    assert len(history_service.list_entries()) == 1
