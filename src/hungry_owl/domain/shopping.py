"""Domain models for shopping lists."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class ShoppingItem:
    """Line on a shopping list."""

    id: UUID
    name: str
    quantity: float
    unit: str
    category: str
    checked: bool = False
    recipe_id: UUID | None = None
    ingredient_id: UUID | None = None
    emoji: str | None = None


@dataclass(frozen=True)
class ShoppingList:
    """A named list of items; at most one list per user is active."""

    id: UUID
    user_id: UUID
    name: str
    is_active: bool
    items: list[ShoppingItem] = field(default_factory=list)
    created_at: datetime | None = None
