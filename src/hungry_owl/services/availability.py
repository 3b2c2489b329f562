"""Availability index of ingredient names a user has on hand."""

from collections.abc import Iterable

from hungry_owl.domain.inventory import InventoryItem, PantryStaple


def build_availability_index(
    inventory_items: Iterable[InventoryItem],
    pantry_staples: Iterable[PantryStaple],
) -> frozenset[str]:
    """Return lower-cased names from inventory plus in-stock pantry staples."""
    names = {item.ingredient_name.lower() for item in inventory_items}
    names.update(
        staple.ingredient_name.lower() for staple in pantry_staples if staple.in_stock
    )
    names.discard("")
    return frozenset(names)
