"""Supabase implementation for saved recipes and cooking history."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from hungry_owl.domain.recipes import GeneratedRecipe, SavedRecipe
from hungry_owl.services.recipes import RecipeRepository


@dataclass
class SupabaseRecipeRepository(RecipeRepository):
    """Supabase-backed repository for recipes."""

    client: Client

    def save_recipe(self, user_id: UUID, recipe: GeneratedRecipe) -> SavedRecipe:
        """Persist a recipe and link it to the user's saved list."""
        payload = recipe.model_dump(
            mode="json",
            by_alias=True,
            exclude={"match_percentage", "missing_ingredients"},
        )
        response = (
            self.client.table("recipes")
            .insert({"user_id": str(user_id), "name": recipe.name, "payload": payload})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save recipe")
        recipe_id = response.data[0]["id"]
        saved_at = datetime.now(tz=UTC)
        self.client.table("saved_recipes").insert(
            {
                "user_id": str(user_id),
                "recipe_id": recipe_id,
                "saved_at": saved_at.isoformat(),
            }
        ).execute()
        return SavedRecipe(
            id=UUID(str(recipe_id)),
            user_id=user_id,
            name=recipe.name,
            recipe=GeneratedRecipe.model_validate(payload),
            saved_at=saved_at,
        )

    def list_saved_recipes(self, user_id: UUID) -> list[SavedRecipe]:
        """Return the user's saved recipes, newest first."""
        response = (
            self.client.table("saved_recipes")
            .select("saved_at, recipes(id, user_id, name, payload)")
            .eq("user_id", str(user_id))
            .order("saved_at", desc=True)
            .execute()
        )
        saved: list[SavedRecipe] = []
        for row in response.data or []:
            recipe = row.get("recipes")
            if not isinstance(recipe, dict):
                continue
            saved_at_raw = row.get("saved_at")
            saved.append(
                SavedRecipe(
                    id=UUID(str(recipe["id"])),
                    user_id=UUID(str(recipe["user_id"])),
                    name=str(recipe.get("name", "")),
                    recipe=GeneratedRecipe.model_validate(recipe["payload"]),
                    saved_at=(
                        datetime.fromisoformat(saved_at_raw)
                        if isinstance(saved_at_raw, str) and saved_at_raw
                        else None
                    ),
                )
            )
        return saved

    def is_saved(self, user_id: UUID, recipe_id: UUID) -> bool:
        """Return whether the recipe is in the user's saved list."""
        response = (
            self.client.table("saved_recipes")
            .select("recipe_id")
            .eq("user_id", str(user_id))
            .eq("recipe_id", str(recipe_id))
            .limit(1)
            .execute()
        )
        return bool(response.data)

    def record_cooked(self, user_id: UUID, recipe_id: UUID) -> None:
        """Add a cooking history entry."""
        self.client.table("recipe_history").insert(
            {
                "user_id": str(user_id),
                "recipe_id": str(recipe_id),
                "cooked_at": datetime.now(tz=UTC).isoformat(),
            }
        ).execute()

    def list_recent_cooked(self, user_id: UUID, limit: int) -> list[str]:
        """Return names of recently cooked recipes, newest first."""
        response = (
            self.client.table("recipe_history")
            .select("cooked_at, recipes(name)")
            .eq("user_id", str(user_id))
            .order("cooked_at", desc=True)
            .limit(limit)
            .execute()
        )
        names: list[str] = []
        for row in response.data or []:
            recipe = row.get("recipes")
            if isinstance(recipe, dict) and recipe.get("name"):
                names.append(str(recipe["name"]))
        return names
