"""Supabase implementation for the ingredient catalog."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from hungry_owl.domain.inventory import Ingredient, IngredientCategory
from hungry_owl.services.ingredients import IngredientRepository


@dataclass
class SupabaseIngredientRepository(IngredientRepository):
    """Supabase-backed repository for catalog ingredients."""

    client: Client

    def get_ingredient(self, ingredient_id: UUID) -> Ingredient | None:
        """Return an ingredient by id, if present."""
        response = (
            self.client.table("ingredients")
            .select("*")
            .eq("id", str(ingredient_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_ingredient(response.data[0])

    def find_by_name(self, name: str) -> Ingredient | None:
        """Return an ingredient with the same name, ignoring case."""
        response = (
            self.client.table("ingredients")
            .select("*")
            .ilike("name", name)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_ingredient(response.data[0])

    def find_by_fdc_id(self, fdc_id: int) -> Ingredient | None:
        """Return the ingredient imported from a USDA FDC id."""
        response = (
            self.client.table("ingredients")
            .select("*")
            .eq("usda_fdc_id", fdc_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_ingredient(response.data[0])

    def search(self, query: str, limit: int) -> list[Ingredient]:
        """Search by name substring or exact alias."""
        response = (
            self.client.table("ingredients")
            .select("*")
            .or_(f"name.ilike.%{query}%,aliases.cs.{{{query.lower()}}}")
            .order("name")
            .limit(limit)
            .execute()
        )
        return [_parse_ingredient(row) for row in response.data or []]

    def create_ingredient(self, payload: dict[str, object]) -> Ingredient:
        """Create an ingredient and return it."""
        response = self.client.table("ingredients").insert(payload).execute()
        if not response.data:
            raise RuntimeError("Failed to create ingredient")
        return _parse_ingredient(response.data[0])


def _parse_ingredient(row: dict[str, object]) -> Ingredient:
    """Parse an ingredient row into a domain model."""
    shelf_life = row.get("shelf_life_days")
    fdc_id = row.get("usda_fdc_id")
    return Ingredient(
        id=UUID(str(row["id"])),
        name=str(row.get("name", "")),
        category=IngredientCategory(row.get("category") or IngredientCategory.OTHER),
        aliases=list(row.get("aliases") or []),
        common_units=list(row.get("common_units") or []),
        emoji=row.get("emoji"),
        shelf_life_days=int(shelf_life) if shelf_life is not None else None,
        usda_fdc_id=int(fdc_id) if fdc_id is not None else None,
    )
