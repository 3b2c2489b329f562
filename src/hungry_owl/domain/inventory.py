"""Domain models for ingredients, inventory rows, and pantry staples."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID


class StorageLocation(StrEnum):
    """Where an inventory item is kept."""

    FRIDGE = "FRIDGE"
    FREEZER = "FREEZER"
    PANTRY = "PANTRY"


class FreshnessState(StrEnum):
    """Freshness buckets derived from days until expiration."""

    FRESH = "FRESH"
    USE_SOON = "USE_SOON"
    EXPIRING = "EXPIRING"
    EXPIRED = "EXPIRED"


class IngredientCategory(StrEnum):
    """Catalog categories for ingredients."""

    PRODUCE = "PRODUCE"
    PROTEIN = "PROTEIN"
    DAIRY = "DAIRY"
    PANTRY = "PANTRY"
    FROZEN = "FROZEN"
    BEVERAGES = "BEVERAGES"
    SPICES = "SPICES"
    GRAINS = "GRAINS"
    OTHER = "OTHER"


@dataclass(frozen=True)
class Ingredient:
    """Catalog entry for an ingredient."""

    id: UUID
    name: str
    category: IngredientCategory
    aliases: list[str] = field(default_factory=list)
    common_units: list[str] = field(default_factory=list)
    emoji: str | None = None
    shelf_life_days: int | None = None
    usda_fdc_id: int | None = None


@dataclass(frozen=True)
class InventoryItem:
    """A user's stock of one ingredient in one storage location."""

    id: UUID
    user_id: UUID
    ingredient_id: UUID
    ingredient_name: str
    quantity: float
    unit: str
    storage_location: StorageLocation
    expiration_date: datetime | None
    status: FreshnessState
    version: int = 0


@dataclass(frozen=True)
class PantryStaple:
    """Whether a user currently has a staple ingredient in stock."""

    user_id: UUID
    ingredient_id: UUID
    ingredient_name: str
    in_stock: bool
