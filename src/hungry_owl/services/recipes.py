"""Recipe generation, scoring, and saved recipes."""

import hashlib
import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from pydantic import ValidationError

from hungry_owl.domain.errors import NotFoundError, RecipeGenerationError
from hungry_owl.domain.inventory import FreshnessState, InventoryItem
from hungry_owl.domain.models import UserProfile
from hungry_owl.domain.recipes import (
    GeneratedRecipe,
    GenerateOptions,
    RecipeBatch,
    SavedRecipe,
)
from hungry_owl.services.availability import build_availability_index
from hungry_owl.services.cache import Cache
from hungry_owl.services.inventory import InventoryService
from hungry_owl.services.matching import annotate_recipes
from hungry_owl.services.users import UserService

_logger = logging.getLogger(__name__)

_NULLABLE_NUMBER = {"anyOf": [{"type": "number"}, {"type": "null"}]}

RECIPE_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "recipes": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "description": {"type": "string"},
                    "heroEmoji": {"type": "string"},
                    "ingredients": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "properties": {
                                "name": {"type": "string"},
                                "quantity": {"type": "number"},
                                "unit": {"type": "string"},
                                "optional": {"type": "boolean"},
                            },
                            "required": ["name", "quantity", "unit", "optional"],
                            "additionalProperties": False,
                        },
                    },
                    "steps": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "properties": {
                                "stepNumber": {"type": "integer"},
                                "instruction": {"type": "string"},
                                "duration": {
                                    "anyOf": [{"type": "integer"}, {"type": "null"}]
                                },
                                "tips": {
                                    "anyOf": [{"type": "string"}, {"type": "null"}]
                                },
                            },
                            "required": [
                                "stepNumber",
                                "instruction",
                                "duration",
                                "tips",
                            ],
                            "additionalProperties": False,
                        },
                    },
                    "totalTime": {"type": "integer"},
                    "activeTime": {"type": "integer"},
                    "difficulty": {
                        "type": "string",
                        "enum": ["BEGINNER", "INTERMEDIATE", "ADVANCED"],
                    },
                    "cuisineType": {"type": "string"},
                    "mealType": {
                        "type": "string",
                        "enum": ["BREAKFAST", "LUNCH", "DINNER", "SNACK", "DESSERT"],
                    },
                    "isOnePot": {"type": "boolean"},
                    "isVegetarian": {"type": "boolean"},
                    "isVegan": {"type": "boolean"},
                    "equipment": {"type": "array", "items": {"type": "string"}},
                    "nutrition": {
                        "type": "object",
                        "properties": {
                            "calories": _NULLABLE_NUMBER,
                            "protein": _NULLABLE_NUMBER,
                            "carbs": _NULLABLE_NUMBER,
                            "fat": _NULLABLE_NUMBER,
                        },
                        "required": ["calories", "protein", "carbs", "fat"],
                        "additionalProperties": False,
                    },
                    "servings": {"type": "integer"},
                },
                "required": [
                    "name",
                    "description",
                    "heroEmoji",
                    "ingredients",
                    "steps",
                    "totalTime",
                    "activeTime",
                    "difficulty",
                    "cuisineType",
                    "mealType",
                    "isOnePot",
                    "isVegetarian",
                    "isVegan",
                    "equipment",
                    "nutrition",
                    "servings",
                ],
                "additionalProperties": False,
            },
        }
    },
    "required": ["recipes"],
    "additionalProperties": False,
}


class RecipeClient(Protocol):
    """Interface for LLM recipe generation."""

    async def generate(
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        """Return structured recipe data."""


class RecipeRepository(Protocol):
    """Persistence interface for saved recipes and cooking history."""

    def save_recipe(self, user_id: UUID, recipe: GeneratedRecipe) -> SavedRecipe:
        """Persist a recipe and link it to the user's saved list."""

    def list_saved_recipes(self, user_id: UUID) -> list[SavedRecipe]:
        """Return the user's saved recipes, newest first."""

    def is_saved(self, user_id: UUID, recipe_id: UUID) -> bool:
        """Return whether the recipe is in the user's saved list."""

    def record_cooked(self, user_id: UUID, recipe_id: UUID) -> None:
        """Add a cooking history entry."""

    def list_recent_cooked(self, user_id: UUID, limit: int) -> list[str]:
        """Return names of recently cooked recipes, newest first."""


@dataclass
class RecipeService:
    """Builds prompts, calls the recipe model, and ranks results by fit."""

    client: RecipeClient
    repository: RecipeRepository
    inventory_service: InventoryService
    user_service: UserService
    cache: Cache
    model: str
    reasoning_effort: str | None
    store: bool
    cache_ttl_seconds: int = 1800
    recipe_count: int = 5
    history_limit: int = 10

    async def generate(
        self, user_id: UUID, options: GenerateOptions
    ) -> list[GeneratedRecipe]:
        """Generate recipes for the user, best inventory match first."""
        items = self.inventory_service.list_inventory(user_id)
        staples = [
            staple
            for staple in self.inventory_service.list_pantry_staples(user_id)
            if staple.in_stock
        ]
        inventory_list = ", ".join(
            f"{item.ingredient_name} ({item.quantity:g} {item.unit})" for item in items
        )
        staple_list = ", ".join(staple.ingredient_name for staple in staples)

        cache_key = recipe_cache_key(user_id, options, inventory_list, staple_list)
        cached = self._read_cache(cache_key)
        if cached is not None:
            return cached

        prompt = build_recipe_prompt(
            options=options,
            profile=self.user_service.get_profile(user_id),
            inventory_list=inventory_list,
            staple_list=staple_list,
            expiring=_expiring_names(items),
            recent=self.repository.list_recent_cooked(user_id, self.history_limit),
            recipe_count=self.recipe_count,
        )
        try:
            raw = await self.client.generate(
                model=self.model,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
                schema=RECIPE_SCHEMA,
                prompt=prompt,
            )
            batch = RecipeBatch.model_validate(raw)
        except ValidationError as exc:
            _logger.exception("Recipe model returned invalid recipes")
            raise RecipeGenerationError("Failed to generate recipes") from exc
        except Exception as exc:
            _logger.exception("Recipe generation request failed")
            raise RecipeGenerationError("Failed to generate recipes") from exc

        recipes = annotate_recipes(
            batch.recipes, build_availability_index(items, staples)
        )
        self.cache.set(
            cache_key,
            [recipe.model_dump(mode="json", by_alias=True) for recipe in recipes],
            ttl_seconds=self.cache_ttl_seconds,
        )
        return recipes

    def save_recipe(self, user_id: UUID, recipe: GeneratedRecipe) -> SavedRecipe:
        """Save a generated recipe to the user's collection."""
        return self.repository.save_recipe(user_id, recipe)

    def list_saved_recipes(self, user_id: UUID) -> list[SavedRecipe]:
        """Return the user's saved recipes."""
        return self.repository.list_saved_recipes(user_id)

    def record_cooked(self, user_id: UUID, recipe_id: UUID) -> None:
        """Record that the user cooked a saved recipe."""
        if not self.repository.is_saved(user_id, recipe_id):
            raise NotFoundError(f"Saved recipe {recipe_id} not found")
        self.repository.record_cooked(user_id, recipe_id)
        self.cache.delete_prefix(f"recipes:{user_id}:")

    def _read_cache(self, cache_key: str) -> list[GeneratedRecipe] | None:
        cached = self.cache.get(cache_key)
        if not isinstance(cached, list):
            return None
        try:
            return [GeneratedRecipe.model_validate(row) for row in cached]
        except ValidationError:
            _logger.warning("Discarding unreadable cached recipes for %s", cache_key)
            return None


def recipe_cache_key(
    user_id: UUID, options: GenerateOptions, inventory_list: str, staple_list: str
) -> str:
    """Key scored recipes by user, constraints, and what is on hand."""
    signature = hashlib.sha256(
        "|".join(
            [
                inventory_list,
                staple_list,
                str(options.prioritize_expiring),
                options.meal_type or "",
                options.cuisine_type or "",
            ]
        ).encode("utf-8")
    ).hexdigest()[:16]
    return (
        f"recipes:{user_id}:{options.max_time}:{options.one_pot_only}:"
        f"{options.willing_to_shop}:{signature}"
    )


def build_recipe_prompt(  # noqa: PLR0913
    *,
    options: GenerateOptions,
    profile: UserProfile,
    inventory_list: str,
    staple_list: str,
    expiring: list[str],
    recent: list[str],
    recipe_count: int,
) -> str:
    """Render the natural-language prompt for the recipe model."""
    if options.willing_to_shop:
        shopping = (
            "SHOPPING MODE: User is willing to buy 1-3 additional common "
            "ingredients. You may suggest recipes that need a few extra items "
            "beyond what's available."
        )
    else:
        shopping = (
            "IMPORTANT: Only suggest recipes that can be made with the available "
            "ingredients. Avoid recipes that require significant shopping."
        )

    constraints = [
        f"- Maximum cooking time: {options.max_time} minutes",
        f"- Skill level: {profile.skill_level.value.lower()}",
        f"- Allergies (NEVER include): {_joined(profile.allergies, 'none')}",
        f"- Dietary restrictions: {_joined(profile.restrictions, 'none')}",
        f"- Dislikes (avoid): {_joined(profile.dislikes, 'none')}",
        f"- Available cookware: {_joined(profile.cookware, 'standard pots and pans')}",
        f"- Available appliances: {_joined(profile.appliances, 'oven, stovetop')}",
        f"- Household size: {profile.household_size}",
    ]
    if options.one_pot_only:
        constraints.append("- ONE POT MEALS ONLY")
    if options.meal_type:
        constraints.append(f"- Meal type: {options.meal_type.value}")
    if options.cuisine_type:
        constraints.append(f"- Cuisine: {options.cuisine_type}")

    lines = [
        f"Generate {recipe_count} recipe suggestions based on the following context:",
        "",
        "AVAILABLE INGREDIENTS: "
        + (
            inventory_list
            or "Not much, please suggest simple recipes with common ingredients"
        ),
        f"PANTRY STAPLES: {staple_list or 'basic salt, pepper, oil'}",
    ]
    if options.prioritize_expiring and expiring:
        lines.append(f"MUST USE (EXPIRING SOON): {', '.join(expiring)}")
    lines.extend(
        [
            shopping,
            "",
            "CONSTRAINTS:",
            *constraints,
            "",
            f"AVOID REPEATING: {_joined(recent, 'none')}",
            "",
            "INSTRUCTION REQUIREMENTS:",
            "- Each step should be detailed with specific techniques and timing",
            "- Include sensory cues (what to look for, smell, texture changes)",
            "- Mention specific temperatures",
            "- Add a helpful tip or common mistake to avoid where relevant",
            "- Mark ingredients that are nice-to-have as optional",
        ]
    )
    return "\n".join(lines)


def _expiring_names(items: list[InventoryItem]) -> list[str]:
    return [
        item.ingredient_name
        for item in items
        if item.status in {FreshnessState.EXPIRING, FreshnessState.USE_SOON}
    ]


def _joined(values: list[str], fallback: str) -> str:
    return ", ".join(values) if values else fallback
