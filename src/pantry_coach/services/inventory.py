"""Inventory service for pantry items."""

import csv
import logging
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta

from pydantic import ValidationError

from pantry_coach.domain.inventory import (
    FoodCategory,
    InventoryItem,
    Quantity,
    has_known_quantity,
)
from pantry_coach.domain.models import OperationResult
from pantry_coach.services.importer import merge_inventory, new_item_id, parse_csv
from pantry_coach.services.storage import (
    INVENTORY_KEY,
    KeyValueStore,
    StorageError,
    decode_inventory,
    encode_inventory,
    validate_inventory,
)

_logger = logging.getLogger(__name__)


@dataclass
class InventoryService:
    """Application service for pantry inventory operations."""

    store: KeyValueStore
    last_error: str | None = field(default=None, init=False)

    def list_items(self) -> list[InventoryItem]:
        """Return stored items; an unreadable inventory reads as empty."""
        try:
            raw = self.store.load(INVENTORY_KEY)
            items = decode_inventory(raw) if raw is not None else []
        except StorageError:
            _logger.exception("Failed to load inventory")
            self.last_error = "Failed to load inventory from storage"
            return []
        return items

    def save_items(self, items: list[InventoryItem]) -> OperationResult:
        """Replace the stored inventory; invalid items reject the whole save."""
        try:
            checked = validate_inventory(items)
        except ValidationError as exc:
            _logger.warning("Rejected invalid inventory item: %s", exc.errors())
            self.last_error = "Invalid inventory item"
            return OperationResult(success=False, message=self.last_error)
        try:
            self.store.save(INVENTORY_KEY, encode_inventory(checked))
        except StorageError:
            _logger.exception("Failed to save inventory")
            self.last_error = "Failed to save inventory to storage"
            return OperationResult(success=False, message=self.last_error)
        self.last_error = None
        return OperationResult(success=True, count=len(items))

    def get_item(self, item_id: str) -> InventoryItem | None:
        """Return an item by id, if present."""
        return next((item for item in self.list_items() if item.id == item_id), None)

    def add_item(  # noqa: PLR0913
        self,
        item_name: str,
        quantity: Quantity,
        category: FoodCategory,
        fiber_g: float,
        fat_g: float,
        carbs_g: float,
        protein_g: float,
        **optional: object,
    ) -> InventoryItem | None:
        """Create an item with a fresh id and append it to the inventory.

        Returns None when the item is invalid or cannot be saved.
        """
        item = InventoryItem(
            id=new_item_id(),
            item_name=item_name,
            quantity=quantity,
            category=category,
            fiber_g=fiber_g,
            fat_g=fat_g,
            carbs_g=carbs_g,
            protein_g=protein_g,
            last_updated=datetime.now(tz=UTC),
            **optional,
        )
        saved = self.save_items([*self.list_items(), item])
        return item if saved.success else None

    def update_item(self, item_id: str, **changes: object) -> InventoryItem | None:
        """Apply field changes to an item and stamp it as updated.

        Returns None when the item is missing or the change is rejected.
        """
        items = self.list_items()
        updated_item: InventoryItem | None = None
        for index, item in enumerate(items):
            if item.id == item_id:
                updated_item = replace(
                    item, **changes, last_updated=datetime.now(tz=UTC)
                )
                items[index] = updated_item
        if updated_item is None or not self.save_items(items).success:
            return None
        return updated_item

    def remove_item(self, item_id: str) -> OperationResult:
        """Delete an item by id."""
        items = self.list_items()
        return self.save_items([item for item in items if item.id != item_id])

    def finish_item(self, item_id: str) -> OperationResult:
        """Mark an item as used up."""
        return self.remove_item(item_id)

    def reduce_quantity(self, item_id: str, amount: float) -> OperationResult:
        """Reduce a known quantity; items reaching zero are removed."""
        items = self.list_items()
        remaining = reduce_item_quantity(items, item_id, amount)
        if remaining == items:
            return OperationResult(success=True, count=len(items))
        return self.save_items(remaining)

    def import_from_csv(self, text: str, merge: bool = True) -> OperationResult:
        """Import items from delimited text, merging by name by default."""
        try:
            new_items = parse_csv(text)
        except csv.Error:
            _logger.exception("Failed to parse CSV import")
            self.last_error = "Failed to parse CSV data"
            return OperationResult(success=False, message=self.last_error)
        if not new_items:
            self.last_error = "No valid items found in CSV"
            return OperationResult(success=False, message=self.last_error)

        final_items = (
            merge_inventory(self.list_items(), new_items) if merge else new_items
        )
        saved = self.save_items(final_items)
        if not saved.success:
            return saved
        _logger.info("Imported %s pantry items", len(new_items))
        return OperationResult(success=True, count=len(new_items))

    def get_by_category(self, category: str) -> list[InventoryItem]:
        """Return items in one category."""
        return [item for item in self.list_items() if item.category == category]

    def get_expiring_soon(
        self, days: int = 3, now: datetime | None = None
    ) -> list[InventoryItem]:
        """Return items that expire between now and ``days`` from now."""
        current = now or datetime.now(tz=UTC)
        threshold = current + timedelta(days=days)
        expiring = []
        for item in self.list_items():
            if item.expiration_date is None:
                continue
            expiry = item.expiration_date
            if expiry.tzinfo is None:
                expiry = expiry.replace(tzinfo=current.tzinfo)
            if current <= expiry <= threshold:
                expiring.append(item)
        return expiring

    def search_items(self, query: str) -> list[InventoryItem]:
        """Return items whose name contains the query."""
        lower_query = query.lower()
        return [
            item for item in self.list_items() if lower_query in item.item_name.lower()
        ]

    def clear_inventory(self) -> OperationResult:
        """Remove the stored inventory."""
        try:
            self.store.remove(INVENTORY_KEY)
        except StorageError:
            _logger.exception("Failed to clear inventory")
            self.last_error = "Failed to clear inventory from storage"
            return OperationResult(success=False, message=self.last_error)
        self.last_error = None
        return OperationResult(success=True)


def reduce_item_quantity(
    items: list[InventoryItem], item_id: str, amount: float
) -> list[InventoryItem]:
    """Return the inventory after consuming ``amount`` of one item.

    Unknown quantities cannot be reduced and are left as they are.
    """
    result: list[InventoryItem] = []
    for item in items:
        if item.id != item_id or not has_known_quantity(item):
            result.append(item)
            continue
        new_quantity = max(0.0, item.quantity - amount)
        if new_quantity > 0:
            result.append(
                replace(item, quantity=new_quantity, last_updated=datetime.now(tz=UTC))
            )
    return result
