"""Tests for the inventory service."""

from datetime import UTC, datetime, timedelta

from pantry_coach.services.inventory import InventoryService
from pantry_coach.services.storage import INVENTORY_KEY
from tests.conftest import InMemoryStore, make_item

HEADER = "item_name,quantity,unit,fiber_g,fat_g,carbs_g,protein_g,category"


def test_add_and_list_items(inventory_service: InventoryService) -> None:
    item = inventory_service.add_item(
        item_name="Almonds",
        quantity=1,
        category="snacks",
        fiber_g=12,
        fat_g=49,
        carbs_g=21,
        protein_g=21,
        unit="cup",
    )

    items = inventory_service.list_items()

    assert item is not None
    assert items == [item]
    assert item.id.startswith("item_")
    assert item.unit == "cup"


def test_update_item_changes_fields(inventory_service: InventoryService) -> None:
    inventory_service.save_items([make_item(id="a", item_name="Milk")])

    updated = inventory_service.update_item("a", quantity=3)

    assert updated is not None
    assert updated.quantity == 3
    assert inventory_service.get_item("a") == updated
    assert inventory_service.update_item("missing", quantity=1) is None


def test_reduce_quantity_and_remove_at_zero(
    inventory_service: InventoryService,
) -> None:
    inventory_service.save_items(
        [
            make_item(id="a", quantity=3),
            make_item(id="b", quantity=1),
            make_item(id="c", quantity="unknown"),
        ]
    )

    inventory_service.reduce_quantity("a", 1)
    inventory_service.reduce_quantity("b", 2)
    inventory_service.reduce_quantity("c", 1)

    items = {item.id: item for item in inventory_service.list_items()}
    assert items["a"].quantity == 2
    assert "b" not in items
    assert items["c"].quantity == "unknown"


def test_finish_and_remove_item(inventory_service: InventoryService) -> None:
    inventory_service.save_items([make_item(id="a"), make_item(id="b")])

    inventory_service.finish_item("a")

    assert [item.id for item in inventory_service.list_items()] == ["b"]


def test_import_from_csv_merges(inventory_service: InventoryService) -> None:
    inventory_service.save_items([make_item(id="eggs", item_name="Eggs", quantity=6)])
    text = f"{HEADER}\nEggs,6,pieces,0,5,1,6,dairy\nBroccoli,2,cups,5,0,6,3,produce"

    result = inventory_service.import_from_csv(text)

    items = inventory_service.list_items()
    assert result.success is True
    assert result.count == 2
    assert [item.item_name for item in items] == ["Eggs", "Broccoli"]
    assert items[0].id == "eggs"
    assert items[0].quantity == 12


def test_import_from_csv_replace(inventory_service: InventoryService) -> None:
    inventory_service.save_items([make_item(id="old")])

    result = inventory_service.import_from_csv(
        f"{HEADER}\nRice,1,bag,1,0,45,4,grains", merge=False
    )

    assert result.success is True
    assert [item.item_name for item in inventory_service.list_items()] == ["Rice"]


def test_import_without_rows_fails(inventory_service: InventoryService) -> None:
    result = inventory_service.import_from_csv(HEADER)

    assert result.success is False
    assert result.message == "No valid items found in CSV"
    assert inventory_service.last_error == "No valid items found in CSV"


def test_import_reports_save_failure(store: InMemoryStore) -> None:
    store.fail_save_keys.add(INVENTORY_KEY)
    service = InventoryService(store)

    result = service.import_from_csv(f"{HEADER}\nRice,1,bag,1,0,45,4,grains")

    assert result.success is False
    assert result.message == "Failed to save inventory to storage"


def test_queries(inventory_service: InventoryService) -> None:
    now = datetime(2024, 1, 15, 12, 0, tzinfo=UTC)
    inventory_service.save_items(
        [
            make_item(id="a", item_name="Greek Yogurt", category="dairy"),
            make_item(
                id="b",
                item_name="Spinach",
                category="produce",
                expiration_date=now + timedelta(days=2),
            ),
            make_item(
                id="c",
                item_name="Frozen Peas",
                category="frozen",
                expiration_date=now + timedelta(days=30),
            ),
            make_item(
                id="d",
                item_name="Old Yogurt",
                category="dairy",
                expiration_date=now - timedelta(days=1),
            ),
        ]
    )

    assert [item.id for item in inventory_service.get_by_category("dairy")] == [
        "a",
        "d",
    ]
    assert [item.id for item in inventory_service.search_items("yogurt")] == [
        "a",
        "d",
    ]
    expiring = inventory_service.get_expiring_soon(days=3, now=now)
    assert [item.id for item in expiring] == ["b"]


def test_corrupt_inventory_reads_as_empty(store: InMemoryStore) -> None:
    store.values[INVENTORY_KEY] = "garbage"
    service = InventoryService(store)

    assert service.list_items() == []
    assert service.last_error == "Failed to load inventory from storage"


def test_clear_inventory(inventory_service: InventoryService) -> None:
    inventory_service.save_items([make_item()])

    assert inventory_service.clear_inventory().success is True
    assert inventory_service.list_items() == []


def test_add_invalid_item_keeps_existing_inventory(
    inventory_service: InventoryService,
) -> None:
    kept = inventory_service.add_item("Oats", 2, "grains", 3, 1, 20, 5)

    negative = inventory_service.add_item("Bad", 1, "grains", -1, 0, 0, 0)
    unknown_category = inventory_service.add_item("Gadget", 1, "tools", 0, 0, 0, 0)

    assert kept is not None
    assert negative is None
    assert unknown_category is None
    assert inventory_service.last_error == "Invalid inventory item"
    assert [item.item_name for item in inventory_service.list_items()] == ["Oats"]


def test_update_with_negative_quantity_is_rejected(
    inventory_service: InventoryService,
) -> None:
    item = inventory_service.add_item("Oats", 2, "grains", 3, 1, 20, 5)
    assert item is not None

    updated = inventory_service.update_item(item.id, quantity=-3)

    assert updated is None
    assert inventory_service.last_error == "Invalid inventory item"
    stored = inventory_service.list_items()
    assert [entry.quantity for entry in stored] == [2]


def test_saved_numbers_are_stored_as_floats(store: InMemoryStore) -> None:
    service = InventoryService(store)

    service.add_item("Oats", 2, "grains", 3, 1, 20, 5)

    (payload,) = store.values[INVENTORY_KEY]  # type: ignore[misc]
    assert isinstance(payload["quantity"], float)
    assert isinstance(payload["protein_g"], float)
