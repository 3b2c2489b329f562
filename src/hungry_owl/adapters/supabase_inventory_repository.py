"""Supabase implementation for inventory rows and pantry staples.

``user_inventory`` has a unique constraint on
``(user_id, ingredient_id, storage_location)`` and an integer ``version``
column. Updates and deletes filter on the version the caller read, so a write
raced by another process matches no rows and the caller retries.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID

from postgrest.exceptions import APIError
from supabase import Client

from hungry_owl.domain.errors import InventoryConflictError
from hungry_owl.domain.inventory import (
    FreshnessState,
    InventoryItem,
    PantryStaple,
    StorageLocation,
)
from hungry_owl.services.freshness import as_utc
from hungry_owl.services.inventory import InventoryRepository

_INVENTORY_COLUMNS = "*, ingredients(name)"
_UNIQUE_VIOLATION = "23505"


@dataclass
class SupabaseInventoryRepository(InventoryRepository):
    """Supabase-backed repository for user inventory."""

    client: Client

    def find_item(
        self, user_id: UUID, ingredient_id: UUID, storage_location: StorageLocation
    ) -> InventoryItem | None:
        """Return the row for a (user, ingredient, location) triple."""
        response = (
            self.client.table("user_inventory")
            .select(_INVENTORY_COLUMNS)
            .eq("user_id", str(user_id))
            .eq("ingredient_id", str(ingredient_id))
            .eq("storage_location", storage_location.value)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_item(response.data[0])

    def get_item(self, item_id: UUID) -> InventoryItem | None:
        """Return a row by id, if present."""
        response = (
            self.client.table("user_inventory")
            .select(_INVENTORY_COLUMNS)
            .eq("id", str(item_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_item(response.data[0])

    def list_items(self, user_id: UUID) -> list[InventoryItem]:
        """Return all rows for a user."""
        response = (
            self.client.table("user_inventory")
            .select(_INVENTORY_COLUMNS)
            .eq("user_id", str(user_id))
            .order("expiration_date")
            .execute()
        )
        return [_parse_item(row) for row in response.data or []]

    def create_item(  # noqa: PLR0913
        self,
        user_id: UUID,
        ingredient_id: UUID,
        quantity: float,
        unit: str,
        storage_location: StorageLocation,
        expiration_date: datetime | None,
        status: FreshnessState,
    ) -> InventoryItem:
        """Insert a row and return it."""
        row = _to_row(
            {
                "user_id": user_id,
                "ingredient_id": ingredient_id,
                "quantity": quantity,
                "unit": unit,
                "storage_location": storage_location,
                "expiration_date": expiration_date,
                "status": status,
            }
        )
        try:
            response = self.client.table("user_inventory").insert(row).execute()
        except APIError as exc:
            if exc.code == _UNIQUE_VIOLATION:
                raise InventoryConflictError(
                    f"Inventory row for ingredient {ingredient_id} already exists"
                ) from exc
            raise
        if not response.data:
            raise RuntimeError("Failed to create inventory item")
        return self._reload(response.data[0])

    def update_item(
        self, item_id: UUID, version: int, changes: dict[str, object]
    ) -> InventoryItem | None:
        """Apply changes if the row is still at ``version``, bumping it."""
        response = (
            self.client.table("user_inventory")
            .update(_to_row({**changes, "version": version + 1}))
            .eq("id", str(item_id))
            .eq("version", version)
            .execute()
        )
        if not response.data:
            return None
        return self._reload(response.data[0])

    def delete_item(self, item_id: UUID, version: int | None = None) -> bool:
        """Delete a row, only at ``version`` when given."""
        query = self.client.table("user_inventory").delete().eq("id", str(item_id))
        if version is not None:
            query = query.eq("version", version)
        response = query.execute()
        return bool(response.data)

    def list_pantry_staples(self, user_id: UUID) -> list[PantryStaple]:
        """Return the user's pantry staples."""
        response = (
            self.client.table("pantry_staples")
            .select("*, ingredients(name)")
            .eq("user_id", str(user_id))
            .execute()
        )
        return [_parse_staple(row) for row in response.data or []]

    def upsert_pantry_staple(
        self, user_id: UUID, ingredient_id: UUID, in_stock: bool
    ) -> PantryStaple:
        """Create or update the in-stock flag for a staple."""
        self.client.table("pantry_staples").upsert(
            {
                "user_id": str(user_id),
                "ingredient_id": str(ingredient_id),
                "in_stock": in_stock,
            },
            on_conflict="user_id,ingredient_id",
        ).execute()
        response = (
            self.client.table("pantry_staples")
            .select("*, ingredients(name)")
            .eq("user_id", str(user_id))
            .eq("ingredient_id", str(ingredient_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save pantry staple")
        return _parse_staple(response.data[0])

    def _reload(self, row: dict[str, object]) -> InventoryItem:
        """Return the written row, fetching the joined name if it is absent."""
        if isinstance(row.get("ingredients"), dict):
            return _parse_item(row)
        item = self.get_item(UUID(str(row["id"])))
        if item is None:
            raise RuntimeError("Inventory item vanished after write")
        return item


def _to_row(values: dict[str, object]) -> dict[str, object]:
    """Convert domain values to JSON-compatible column values."""
    row: dict[str, object] = {}
    for key, value in values.items():
        if isinstance(value, UUID):
            row[key] = str(value)
        elif isinstance(value, datetime):
            row[key] = value.isoformat()
        elif isinstance(value, Enum):
            row[key] = value.value
        else:
            row[key] = value
    return row


def _ingredient_name(row: dict[str, object]) -> str:
    joined = row.get("ingredients")
    if isinstance(joined, dict):
        return str(joined.get("name", ""))
    return ""


def _parse_item(row: dict[str, object]) -> InventoryItem:
    """Parse an inventory row into a domain model."""
    expiration_raw = row.get("expiration_date")
    expiration = (
        as_utc(datetime.fromisoformat(expiration_raw))
        if isinstance(expiration_raw, str) and expiration_raw
        else None
    )
    return InventoryItem(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        ingredient_id=UUID(str(row["ingredient_id"])),
        ingredient_name=_ingredient_name(row),
        quantity=float(row.get("quantity", 0.0)),
        unit=str(row.get("unit", "")),
        storage_location=StorageLocation(row.get("storage_location", "FRIDGE")),
        expiration_date=expiration,
        status=FreshnessState(row.get("status", "FRESH")),
        version=int(row.get("version") or 0),
    )


def _parse_staple(row: dict[str, object]) -> PantryStaple:
    return PantryStaple(
        user_id=UUID(str(row["user_id"])),
        ingredient_id=UUID(str(row["ingredient_id"])),
        ingredient_name=_ingredient_name(row),
        in_stock=bool(row.get("in_stock", False)),
    )
