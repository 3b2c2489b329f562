"""Supabase implementation for shopping lists."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from hungry_owl.domain.shopping import ShoppingItem, ShoppingList
from hungry_owl.services.shopping import ShoppingRepository


@dataclass
class SupabaseShoppingRepository(ShoppingRepository):
    """Supabase-backed repository; list items live in a JSON column."""

    client: Client

    def list_lists(self, user_id: UUID) -> list[ShoppingList]:
        """Return the user's lists, newest first."""
        response = (
            self.client.table("shopping_lists")
            .select("*")
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_list(row) for row in response.data or []]

    def get_list(self, list_id: UUID) -> ShoppingList | None:
        """Return a list by id, if present."""
        response = (
            self.client.table("shopping_lists")
            .select("*")
            .eq("id", str(list_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_list(response.data[0])

    def get_active_list(self, user_id: UUID) -> ShoppingList | None:
        """Return the user's active list, if any."""
        response = (
            self.client.table("shopping_lists")
            .select("*")
            .eq("user_id", str(user_id))
            .eq("is_active", True)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_list(response.data[0])

    def deactivate_lists(self, user_id: UUID) -> None:
        """Mark every active list of the user inactive."""
        self.client.table("shopping_lists").update({"is_active": False}).eq(
            "user_id", str(user_id)
        ).eq("is_active", True).execute()

    def create_list(self, user_id: UUID, name: str) -> ShoppingList:
        """Create an empty active list and return it."""
        response = (
            self.client.table("shopping_lists")
            .insert(
                {"user_id": str(user_id), "name": name, "items": [], "is_active": True}
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create shopping list")
        return _parse_list(response.data[0])

    def save_items(self, list_id: UUID, items: list[ShoppingItem]) -> ShoppingList:
        """Replace a list's items and return the list."""
        response = (
            self.client.table("shopping_lists")
            .update({"items": [_dump_item(item) for item in items]})
            .eq("id", str(list_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update shopping list")
        return _parse_list(response.data[0])


def _dump_item(item: ShoppingItem) -> dict[str, object]:
    return {
        "id": str(item.id),
        "name": item.name,
        "quantity": item.quantity,
        "unit": item.unit,
        "category": item.category,
        "checked": item.checked,
        "recipe_id": str(item.recipe_id) if item.recipe_id else None,
        "ingredient_id": str(item.ingredient_id) if item.ingredient_id else None,
        "emoji": item.emoji,
    }


def _optional_uuid(value: object) -> UUID | None:
    if isinstance(value, str) and value:
        return UUID(value)
    return None


def _parse_item(row: dict[str, object]) -> ShoppingItem:
    return ShoppingItem(
        id=UUID(str(row["id"])),
        name=str(row.get("name", "")),
        quantity=float(row.get("quantity", 0.0)),
        unit=str(row.get("unit", "")),
        category=str(row.get("category") or "OTHER"),
        checked=bool(row.get("checked", False)),
        recipe_id=_optional_uuid(row.get("recipe_id")),
        ingredient_id=_optional_uuid(row.get("ingredient_id")),
        emoji=row.get("emoji"),
    )


def _parse_list(row: dict[str, object]) -> ShoppingList:
    """Parse a shopping list row into a domain model."""
    created_raw = row.get("created_at")
    return ShoppingList(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        name=str(row.get("name", "")),
        is_active=bool(row.get("is_active", False)),
        items=[_parse_item(item) for item in row.get("items") or []],
        created_at=(
            datetime.fromisoformat(created_raw)
            if isinstance(created_raw, str) and created_raw
            else None
        ),
    )
