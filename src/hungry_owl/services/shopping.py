"""Shopping list management."""

from dataclasses import dataclass, replace
from typing import Protocol
from uuid import UUID, uuid4

from hungry_owl.domain.errors import NotFoundError
from hungry_owl.domain.inventory import (
    IngredientCategory,
    InventoryItem,
    StorageLocation,
)
from hungry_owl.domain.recipes import GeneratedRecipe
from hungry_owl.domain.shopping import ShoppingItem, ShoppingList
from hungry_owl.services.ingredients import IngredientService
from hungry_owl.services.inventory import InventoryService

DEFAULT_LIST_NAME = "Shopping List"


class ShoppingRepository(Protocol):
    """Persistence interface for shopping lists."""

    def list_lists(self, user_id: UUID) -> list[ShoppingList]:
        """Return the user's lists, newest first."""

    def get_list(self, list_id: UUID) -> ShoppingList | None:
        """Return a list by id, if present."""

    def get_active_list(self, user_id: UUID) -> ShoppingList | None:
        """Return the user's active list, if any."""

    def deactivate_lists(self, user_id: UUID) -> None:
        """Mark every list of the user inactive."""

    def create_list(self, user_id: UUID, name: str) -> ShoppingList:
        """Create an empty active list and return it."""

    def save_items(self, list_id: UUID, items: list[ShoppingItem]) -> ShoppingList:
        """Replace a list's items and return the list."""


@dataclass
class ShoppingListService:
    """Application service for shopping list operations."""

    repository: ShoppingRepository
    inventory_service: InventoryService
    ingredient_service: IngredientService

    def list_lists(self, user_id: UUID) -> list[ShoppingList]:
        """Return all of the user's lists."""
        return self.repository.list_lists(user_id)

    def get_active_list(self, user_id: UUID) -> ShoppingList | None:
        """Return the active list, if any."""
        return self.repository.get_active_list(user_id)

    def create_list(self, user_id: UUID, name: str = DEFAULT_LIST_NAME) -> ShoppingList:
        """Create a new active list, deactivating the previous one."""
        self.repository.deactivate_lists(user_id)
        return self.repository.create_list(user_id, name)

    def add_item(  # noqa: PLR0913
        self,
        user_id: UUID,
        list_id: UUID,
        name: str,
        quantity: float,
        unit: str,
        category: str = IngredientCategory.OTHER.value,
        recipe_id: UUID | None = None,
        ingredient_id: UUID | None = None,
        emoji: str | None = None,
    ) -> ShoppingList:
        """Append an unchecked item to a list."""
        shopping_list = self._owned_list(user_id, list_id)
        item = ShoppingItem(
            id=uuid4(),
            name=name,
            quantity=quantity,
            unit=unit,
            category=category,
            recipe_id=recipe_id,
            ingredient_id=ingredient_id,
            emoji=emoji,
        )
        return self.repository.save_items(list_id, [*shopping_list.items, item])

    def add_missing_ingredients(
        self, user_id: UUID, recipe: GeneratedRecipe
    ) -> ShoppingList:
        """Put a scored recipe's missing ingredients on the active list."""
        shopping_list = self.get_active_list(user_id) or self.create_list(user_id)
        missing = set(recipe.missing_ingredients or [])
        items = list(shopping_list.items)
        for ingredient in recipe.ingredients:
            if ingredient.name.lower() not in missing:
                continue
            items.append(
                ShoppingItem(
                    id=uuid4(),
                    name=ingredient.name,
                    quantity=ingredient.quantity,
                    unit=ingredient.unit,
                    category=IngredientCategory.OTHER.value,
                )
            )
            missing.discard(ingredient.name.lower())
        return self.repository.save_items(shopping_list.id, items)

    def toggle_item(self, user_id: UUID, list_id: UUID, item_id: UUID) -> ShoppingList:
        """Flip an item's checked flag."""
        shopping_list = self._owned_list(user_id, list_id)
        self._find_item(shopping_list, item_id)
        items = [
            replace(item, checked=not item.checked) if item.id == item_id else item
            for item in shopping_list.items
        ]
        return self.repository.save_items(list_id, items)

    def remove_item(self, user_id: UUID, list_id: UUID, item_id: UUID) -> ShoppingList:
        """Drop an item from a list."""
        shopping_list = self._owned_list(user_id, list_id)
        items = [item for item in shopping_list.items if item.id != item_id]
        return self.repository.save_items(list_id, items)

    def clear_checked(self, user_id: UUID, list_id: UUID) -> ShoppingList:
        """Drop every checked item from a list."""
        shopping_list = self._owned_list(user_id, list_id)
        items = [item for item in shopping_list.items if not item.checked]
        return self.repository.save_items(list_id, items)

    def mark_purchased(
        self, user_id: UUID, list_id: UUID, item_id: UUID
    ) -> InventoryItem:
        """Move a bought item into the fridge inventory and check it off."""
        shopping_list = self._owned_list(user_id, list_id)
        item = self._find_item(shopping_list, item_id)

        ingredient_id = item.ingredient_id
        if ingredient_id is None:
            category = (
                IngredientCategory(item.category)
                if item.category in IngredientCategory.__members__
                else IngredientCategory.OTHER
            )
            ingredient_id = self.ingredient_service.resolve_by_name(
                item.name, category=category, unit=item.unit, emoji=item.emoji
            ).id

        stocked = self.inventory_service.upsert(
            user_id,
            ingredient_id,
            item.quantity,
            item.unit,
            StorageLocation.FRIDGE,
        )
        items = [
            replace(entry, checked=True, ingredient_id=ingredient_id)
            if entry.id == item_id
            else entry
            for entry in shopping_list.items
        ]
        self.repository.save_items(list_id, items)
        return stocked

    def _owned_list(self, user_id: UUID, list_id: UUID) -> ShoppingList:
        shopping_list = self.repository.get_list(list_id)
        if shopping_list is None or shopping_list.user_id != user_id:
            raise NotFoundError(f"Shopping list {list_id} not found")
        return shopping_list

    @staticmethod
    def _find_item(shopping_list: ShoppingList, item_id: UUID) -> ShoppingItem:
        for item in shopping_list.items:
            if item.id == item_id:
                return item
        raise NotFoundError(f"Shopping item {item_id} not found")
