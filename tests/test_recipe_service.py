"""Tests for recipe generation and history."""

import asyncio
from uuid import uuid4

import pytest

from hungry_owl.domain.errors import NotFoundError, RecipeGenerationError
from hungry_owl.domain.models import UserProfile
from hungry_owl.domain.recipes import GenerateOptions, GeneratedRecipe, MealType
from hungry_owl.services.cache import InMemoryCache
from hungry_owl.services.inventory import InventoryService
from hungry_owl.services.recipes import (
    RecipeService,
    build_recipe_prompt,
    recipe_cache_key,
)
from tests.conftest import (
    FakeRecipeClient,
    InMemoryIngredientRepository,
    recipe_payload,
)


@pytest.fixture
def stocked_user(
    inventory_service: InventoryService,
    ingredient_repository: InMemoryIngredientRepository,
    user_id,
):
    chicken = ingredient_repository.add("Chicken Breast", shelf_life_days=2)
    rice = ingredient_repository.add("Rice")
    inventory_service.upsert(user_id, chicken.id, 1, "lb")
    inventory_service.upsert(user_id, rice.id, 2, "cup")
    return user_id


def test_generate_scores_and_sorts_recipes(
    recipe_service: RecipeService, stocked_user
) -> None:
    recipes = asyncio.run(recipe_service.generate(stocked_user, GenerateOptions()))

    assert [recipe.name for recipe in recipes] == [
        "Chicken Rice Bowl",
        "Broccoli Chicken Rice",
    ]
    assert recipes[0].match_percentage == 100
    assert recipes[0].missing_ingredients == []
    assert recipes[1].match_percentage == 67
    assert recipes[1].missing_ingredients == ["broccoli"]


def test_generate_uses_cache_until_inventory_changes(
    recipe_service: RecipeService,
    recipe_client: FakeRecipeClient,
    inventory_service: InventoryService,
    ingredient_repository: InMemoryIngredientRepository,
    stocked_user,
) -> None:
    options = GenerateOptions(max_time=45)

    first = asyncio.run(recipe_service.generate(stocked_user, options))
    second = asyncio.run(recipe_service.generate(stocked_user, options))

    assert len(recipe_client.prompts) == 1
    assert [recipe.name for recipe in second] == [recipe.name for recipe in first]
    assert second[1].missing_ingredients == ["broccoli"]

    broccoli = ingredient_repository.add("Broccoli")
    inventory_service.upsert(stocked_user, broccoli.id, 1, "head")
    third = asyncio.run(recipe_service.generate(stocked_user, options))

    assert len(recipe_client.prompts) == 2
    assert all(recipe.match_percentage == 100 for recipe in third)


def test_record_cooked_clears_cached_recipes(
    recipe_service: RecipeService,
    recipe_client: FakeRecipeClient,
    stocked_user,
) -> None:
    recipes = asyncio.run(recipe_service.generate(stocked_user, GenerateOptions()))
    saved = recipe_service.save_recipe(stocked_user, recipes[0])

    recipe_service.record_cooked(stocked_user, saved.id)
    asyncio.run(recipe_service.generate(stocked_user, GenerateOptions()))

    assert len(recipe_client.prompts) == 2
    assert "AVOID REPEATING: Chicken Rice Bowl" in recipe_client.prompts[-1]
    saved_names = [
        entry.name for entry in recipe_service.list_saved_recipes(stocked_user)
    ]
    assert saved_names == ["Chicken Rice Bowl"]


def test_client_failure_raises_generation_error(
    recipe_service: RecipeService,
    recipe_client: FakeRecipeClient,
    cache: InMemoryCache,
    stocked_user,
) -> None:
    recipe_client.error = RuntimeError("upstream down")

    with pytest.raises(RecipeGenerationError):
        asyncio.run(recipe_service.generate(stocked_user, GenerateOptions()))

    assert cache._entries == {}


def test_invalid_model_output_raises_generation_error(
    recipe_service: RecipeService,
    recipe_client: FakeRecipeClient,
    stocked_user,
) -> None:
    broken = recipe_payload("Broken", [("rice", False)])
    del broken["steps"]
    recipe_client.payload = {"recipes": [broken]}

    with pytest.raises(RecipeGenerationError):
        asyncio.run(recipe_service.generate(stocked_user, GenerateOptions()))


def test_prompt_includes_expiring_items_when_prioritized(
    recipe_service: RecipeService,
    recipe_client: FakeRecipeClient,
    stocked_user,
) -> None:
    options = GenerateOptions(prioritize_expiring=True, meal_type=MealType.LUNCH)

    asyncio.run(recipe_service.generate(stocked_user, options))

    prompt = recipe_client.prompts[0]
    assert "MUST USE (EXPIRING SOON): Chicken Breast" in prompt
    assert "Chicken Breast (1 lb)" in prompt
    assert "- Meal type: LUNCH" in prompt


def test_build_recipe_prompt_reflects_profile_and_mode() -> None:
    profile = UserProfile(
        user_id=uuid4(),
        allergies=["peanuts"],
        household_size=4,
    )
    prompt = build_recipe_prompt(
        options=GenerateOptions(one_pot_only=True, willing_to_shop=True),
        profile=profile,
        inventory_list="",
        staple_list="",
        expiring=[],
        recent=[],
        recipe_count=5,
    )

    assert "Allergies (NEVER include): peanuts" in prompt
    assert "Household size: 4" in prompt
    assert "ONE POT MEALS ONLY" in prompt
    assert "SHOPPING MODE" in prompt
    assert "PANTRY STAPLES: basic salt, pepper, oil" in prompt


def test_cache_key_depends_on_inventory_and_options(user_id) -> None:
    base = recipe_cache_key(user_id, GenerateOptions(), "rice (1 cup)", "")

    assert base.startswith(f"recipes:{user_id}:30:False:False:")
    assert base == recipe_cache_key(user_id, GenerateOptions(), "rice (1 cup)", "")
    assert base != recipe_cache_key(user_id, GenerateOptions(), "rice (2 cup)", "")
    assert base != recipe_cache_key(
        user_id, GenerateOptions(cuisine_type="Thai"), "rice (1 cup)", ""
    )


def test_cached_recipes_round_trip_aliases(
    recipe_service: RecipeService, cache: InMemoryCache, stocked_user
) -> None:
    asyncio.run(recipe_service.generate(stocked_user, GenerateOptions()))

    [cached] = [
        value
        for key, value in cache._entries.items()
        if key.startswith(f"recipes:{stocked_user}:")
    ]
    restored = [GeneratedRecipe.model_validate(row) for row in cached.value]

    assert cached.value[0]["matchPercentage"] == 100
    assert restored[0].hero_emoji == "🍲"


def test_record_cooked_requires_a_saved_recipe(
    recipe_service: RecipeService,
    recipe_client: FakeRecipeClient,
    stocked_user,
) -> None:
    recipes = asyncio.run(recipe_service.generate(stocked_user, GenerateOptions()))
    saved = recipe_service.save_recipe(stocked_user, recipes[0])

    with pytest.raises(NotFoundError):
        recipe_service.record_cooked(stocked_user, uuid4())
    with pytest.raises(NotFoundError):
        recipe_service.record_cooked(uuid4(), saved.id)

    asyncio.run(recipe_service.generate(stocked_user, GenerateOptions()))
    assert len(recipe_client.prompts) == 1
