"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

import pytest

from pantry_coach.config import Settings
from pantry_coach.domain.history import DietaryHistoryEntry, MacroAmounts
from pantry_coach.domain.inventory import InventoryItem
from pantry_coach.domain.profile import UserProfile
from pantry_coach.services.consumption import ConsumptionService
from pantry_coach.services.history import HistoryService
from pantry_coach.services.inventory import InventoryService
from pantry_coach.services.profile import ProfileService
from pantry_coach.services.scan import ScanClient
from pantry_coach.services.storage import KeyValueStore, StorageError

FIXED_NOW = datetime(2024, 1, 15, 12, 0, tzinfo=UTC)


@dataclass
class InMemoryStore(KeyValueStore):
    """In-memory key-value store for tests."""

    values: dict[str, object] = field(default_factory=dict)
    fail_save_keys: set[str] = field(default_factory=set)
    saves: list[str] = field(default_factory=list)

    def load(self, key: str) -> object | None:
        return self.values.get(key)

    def save(self, key: str, value: object) -> None:
        if key in self.fail_save_keys:
            raise StorageError(f"Failed to save {key}")
        self.saves.append(key)
        self.values[key] = value

    def remove(self, key: str) -> None:
        self.values.pop(key, None)


@dataclass
class FakeScanClient(ScanClient):
    """Fake scan client returning fixed CSV text."""

    output: str = (
        "```csv\n"
        "item_name,quantity,unit,fiber_g,fat_g,carbs_g,protein_g,category\n"
        "Greek Yogurt,1,cup,0,5,9,17,dairy\n"
        "Broccoli,2,cups,5,0,6,3,produce\n"
        "```"
    )
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def read_pantry(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        image_data_url: str,
        prompt: str,
    ) -> str:
        self.calls.append(
            {
                "model": model,
                "reasoning_effort": reasoning_effort,
                "store": store,
                "image_data_url": image_data_url,
                "prompt": prompt,
            }
        )
        if self.error is not None:
            raise self.error
        return self.output


def make_item(**overrides: object) -> InventoryItem:
    values: dict[str, object] = {
        "id": "item_1",
        "item_name": "Test Food",
        "quantity": 1.0,
        "category": "pantry",
        "fiber_g": 0.0,
        "fat_g": 0.0,
        "carbs_g": 0.0,
        "protein_g": 0.0,
        "last_updated": FIXED_NOW,
    }
    values.update(overrides)
    return InventoryItem(**values)


def make_profile(diet_type: str = "low-glycemic", **overrides: object) -> UserProfile:
    values: dict[str, object] = {
        "user_id": "user_test",
        "diet_type": diet_type,
        "dietary_goals": ("weight-maintenance",),
    }
    values.update(overrides)
    return UserProfile(**values)


def make_entry(  # noqa: PLR0913
    item_name: str = "Test Food",
    timestamp: datetime = FIXED_NOW,
    carbs_g: float = 0.0,
    protein_g: float = 0.0,
    fat_g: float = 0.0,
    fiber_g: float = 0.0,
    calories: float | None = None,
    violations: tuple[str, ...] = (),
    entry_id: str = "history_1",
) -> DietaryHistoryEntry:
    return DietaryHistoryEntry(
        id=entry_id,
        timestamp=timestamp,
        item_name=item_name,
        quantity_consumed=1.0,
        macros_consumed=MacroAmounts(
            fiber_g=fiber_g,
            fat_g=fat_g,
            carbs_g=carbs_g,
            protein_g=protein_g,
            calories=calories,
        ),
        dietary_rule_violations=violations,
    )


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def profile_service(store: InMemoryStore) -> ProfileService:
    return ProfileService(store)


@pytest.fixture
def inventory_service(store: InMemoryStore) -> InventoryService:
    return InventoryService(store)


@pytest.fixture
def history_service(store: InMemoryStore) -> HistoryService:
    return HistoryService(store)


@pytest.fixture
def consumption_service(
    profile_service: ProfileService,
    inventory_service: InventoryService,
    history_service: HistoryService,
) -> ConsumptionService:
    return ConsumptionService(
        profile_service=profile_service,
        inventory_service=inventory_service,
        history_service=history_service,
    )


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(data_dir=tmp_path / "data", openai_api_key="openai-key")
