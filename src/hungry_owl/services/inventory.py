"""Inventory reconciliation: merging adds, quantity changes, and staples."""

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID

from hungry_owl.domain.errors import (
    InvalidQuantityError,
    InventoryConflictError,
    NotFoundError,
)
from hungry_owl.domain.inventory import (
    FreshnessState,
    InventoryItem,
    PantryStaple,
    StorageLocation,
)
from hungry_owl.domain.models import SkillLevel
from hungry_owl.domain.staples import StapleRecommendation
from hungry_owl.services.availability import build_availability_index
from hungry_owl.services.freshness import as_utc, classify_freshness
from hungry_owl.services.ingredients import IngredientRepository
from hungry_owl.services.locks import KeyedLock
from hungry_owl.services.recommendations import recommend_staples
from hungry_owl.services.users import UserRepository

_logger = logging.getLogger(__name__)

_FAR_FUTURE = datetime.max.replace(tzinfo=UTC)
_MAX_WRITE_ATTEMPTS = 5


class InventoryRepository(Protocol):
    """Persistence interface for inventory rows and pantry staples.

    Rows carry a ``version`` that every successful update increments. Writers
    pass the version they read, so a write based on a stale read is refused
    instead of overwriting another writer's change.
    """

    def find_item(
        self, user_id: UUID, ingredient_id: UUID, storage_location: StorageLocation
    ) -> InventoryItem | None:
        """Return the row for a (user, ingredient, location) triple."""

    def get_item(self, item_id: UUID) -> InventoryItem | None:
        """Return a row by id, if present."""

    def list_items(self, user_id: UUID) -> list[InventoryItem]:
        """Return all rows for a user."""

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
        """Insert a row and return it.

        Raises ``InventoryConflictError`` when a row for the triple exists.
        """

    def update_item(
        self, item_id: UUID, version: int, changes: dict[str, object]
    ) -> InventoryItem | None:
        """Apply changes if the row is still at ``version``.

        Returns None when the row has moved on or no longer exists.
        """

    def delete_item(self, item_id: UUID, version: int | None = None) -> bool:
        """Delete a row, only at ``version`` when given. True if deleted."""

    def list_pantry_staples(self, user_id: UUID) -> list[PantryStaple]:
        """Return the user's pantry staples."""

    def upsert_pantry_staple(
        self, user_id: UUID, ingredient_id: UUID, in_stock: bool
    ) -> PantryStaple:
        """Create or update the in-stock flag for a staple."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


def _require_positive(quantity: float) -> None:
    if not math.isfinite(quantity) or quantity <= 0:
        raise InvalidQuantityError(f"Quantity must be positive, got {quantity}")


def _sooner(first: datetime | None, second: datetime | None) -> datetime | None:
    if first is None:
        return second
    if second is None:
        return first
    return min(first, second)


@dataclass
class InventoryService:
    """The single write path into a user's inventory.

    The per-triple lock keeps writers in this process from racing each other.
    Writers in other processes are caught by the row version check and the
    unique constraint on the triple; the losing write reads again and retries.
    """

    repository: InventoryRepository
    ingredients: IngredientRepository
    users: UserRepository
    clock: Callable[[], datetime] = _utcnow
    locks: KeyedLock = field(default_factory=KeyedLock)
    max_write_attempts: int = _MAX_WRITE_ATTEMPTS

    def upsert(  # noqa: PLR0913
        self,
        user_id: UUID,
        ingredient_id: UUID,
        quantity: float,
        unit: str,
        storage_location: StorageLocation = StorageLocation.FRIDGE,
        expiration: datetime | None = None,
    ) -> InventoryItem:
        """Add stock, merging into the existing row for the same location.

        Quantities are additive. An existing row keeps its expiration unless
        one is passed explicitly; the shelf-life default only applies to new
        rows.
        """
        return self._merge(
            user_id,
            ingredient_id,
            quantity,
            unit,
            storage_location,
            expiration,
            keep_sooner_expiration=False,
        )

    def adjust_quantity(
        self, user_id: UUID, item_id: UUID, delta: float
    ) -> InventoryItem | None:
        """Change quantity by ``delta``; the row is deleted when it runs out."""
        if not math.isfinite(delta):
            raise InvalidQuantityError(f"Quantity change must be finite, got {delta}")
        item = self._owned_item(user_id, item_id)
        with self.locks.hold((user_id, item.ingredient_id, item.storage_location)):
            for _ in range(self.max_write_attempts):
                current = self._owned_item(user_id, item_id)
                new_quantity = current.quantity + delta
                if new_quantity <= 0:
                    if self.repository.delete_item(item_id, current.version):
                        return None
                else:
                    updated = self.repository.update_item(
                        item_id, current.version, {"quantity": new_quantity}
                    )
                    if updated is not None:
                        return updated
                _logger.info("Inventory row %s changed during adjust", item_id)
        raise InventoryConflictError(f"Inventory item {item_id} is busy, try again")

    def update_item(  # noqa: PLR0913
        self,
        user_id: UUID,
        item_id: UUID,
        *,
        quantity: float | None = None,
        unit: str | None = None,
        expiration: datetime | None = None,
        clear_expiration: bool = False,
    ) -> InventoryItem:
        """Edit a row in place; freshness follows only expiration changes."""
        if quantity is not None:
            _require_positive(quantity)
        item = self._owned_item(user_id, item_id)
        changes: dict[str, object] = {}
        if quantity is not None:
            changes["quantity"] = quantity
        if unit is not None:
            changes["unit"] = unit
        if expiration is not None or clear_expiration:
            new_expiration = (
                None if clear_expiration or expiration is None else as_utc(expiration)
            )
            changes["expiration_date"] = new_expiration
            changes["status"] = classify_freshness(new_expiration, self.clock())
        if not changes:
            return item
        with self.locks.hold((user_id, item.ingredient_id, item.storage_location)):
            for _ in range(self.max_write_attempts):
                current = self._owned_item(user_id, item_id)
                updated = self.repository.update_item(
                    item_id, current.version, changes
                )
                if updated is not None:
                    return updated
                _logger.info("Inventory row %s changed during edit", item_id)
        raise InventoryConflictError(f"Inventory item {item_id} is busy, try again")

    def move_item(
        self, user_id: UUID, item_id: UUID, storage_location: StorageLocation
    ) -> InventoryItem:
        """Move a row to another location, merging with any row already there.

        When both rows have an expiration the sooner one wins.
        """
        item = self._owned_item(user_id, item_id)
        if item.storage_location == storage_location:
            return item
        moved = self._merge(
            user_id,
            item.ingredient_id,
            item.quantity,
            item.unit,
            storage_location,
            item.expiration_date,
            keep_sooner_expiration=True,
        )
        self.remove(user_id, item_id)
        return moved

    def remove(self, user_id: UUID, item_id: UUID) -> None:
        """Delete a row owned by the user."""
        item = self._owned_item(user_id, item_id)
        with self.locks.hold((user_id, item.ingredient_id, item.storage_location)):
            self.repository.delete_item(item_id)

    def list_inventory(
        self, user_id: UUID, now: datetime | None = None
    ) -> list[InventoryItem]:
        """Return rows soonest-expiring first, with freshness as of now."""
        reference = now or self.clock()
        items = [
            replace(item, status=classify_freshness(item.expiration_date, reference))
            for item in self.repository.list_items(user_id)
        ]
        return sorted(
            items,
            key=lambda item: (
                item.expiration_date or _FAR_FUTURE,
                item.ingredient_name.lower(),
            ),
        )

    def list_pantry_staples(self, user_id: UUID) -> list[PantryStaple]:
        """Return the user's pantry staples."""
        return self.repository.list_pantry_staples(user_id)

    def toggle_pantry_staple(
        self, user_id: UUID, ingredient_id: UUID, in_stock: bool
    ) -> PantryStaple:
        """Set whether a staple is in stock."""
        if self.ingredients.get_ingredient(ingredient_id) is None:
            raise NotFoundError(f"Ingredient {ingredient_id} not found")
        return self.repository.upsert_pantry_staple(user_id, ingredient_id, in_stock)

    def availability(self, user_id: UUID) -> frozenset[str]:
        """Build a fresh availability index for the user."""
        return build_availability_index(
            self.repository.list_items(user_id),
            self.repository.list_pantry_staples(user_id),
        )

    def recommend_ingredients(self, user_id: UUID) -> StapleRecommendation:
        """Recommend staples the user is missing for their skill level."""
        profile = self.users.get_profile(user_id)
        return recommend_staples(
            self.availability(user_id),
            profile.skill_level if profile else SkillLevel.BEGINNER,
        )

    def _owned_item(self, user_id: UUID, item_id: UUID) -> InventoryItem:
        item = self.repository.get_item(item_id)
        if item is None or item.user_id != user_id:
            raise NotFoundError(f"Inventory item {item_id} not found")
        return item

    def _merge(  # noqa: PLR0913
        self,
        user_id: UUID,
        ingredient_id: UUID,
        quantity: float,
        unit: str,
        storage_location: StorageLocation,
        expiration: datetime | None,
        *,
        keep_sooner_expiration: bool,
    ) -> InventoryItem:
        _require_positive(quantity)
        ingredient = self.ingredients.get_ingredient(ingredient_id)
        if ingredient is None:
            raise NotFoundError(f"Ingredient {ingredient_id} not found")

        now = self.clock()
        if expiration is not None:
            expiration = as_utc(expiration)
        default_expiration = expiration
        if default_expiration is None and ingredient.shelf_life_days:
            default_expiration = now + timedelta(days=ingredient.shelf_life_days)

        with self.locks.hold((user_id, ingredient_id, storage_location)):
            for _ in range(self.max_write_attempts):
                existing = self.repository.find_item(
                    user_id, ingredient_id, storage_location
                )
                if existing is None:
                    try:
                        return self.repository.create_item(
                            user_id=user_id,
                            ingredient_id=ingredient_id,
                            quantity=quantity,
                            unit=unit,
                            storage_location=storage_location,
                            expiration_date=default_expiration,
                            status=classify_freshness(default_expiration, now),
                        )
                    except InventoryConflictError:
                        _logger.info(
                            "Inventory row for ingredient %s created concurrently",
                            ingredient_id,
                        )
                        continue

                if keep_sooner_expiration:
                    new_expiration = _sooner(expiration, existing.expiration_date)
                else:
                    new_expiration = expiration or existing.expiration_date
                _logger.debug(
                    "Merging %s %s into inventory row %s", quantity, unit, existing.id
                )
                merged = self.repository.update_item(
                    existing.id,
                    existing.version,
                    {
                        "quantity": existing.quantity + quantity,
                        "expiration_date": new_expiration,
                        "status": classify_freshness(new_expiration, now),
                    },
                )
                if merged is not None:
                    return merged
                _logger.info("Inventory row %s changed during merge", existing.id)
        raise InventoryConflictError(
            f"Inventory for ingredient {ingredient_id} is busy, try again"
        )
