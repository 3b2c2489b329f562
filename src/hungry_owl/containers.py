"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from hungry_owl.adapters.fdc_client import HttpxFdcClient
from hungry_owl.adapters.openai_recipe_client import OpenAIRecipeClient
from hungry_owl.adapters.redis_cache import RedisCache
from hungry_owl.adapters.supabase_ingredient_repository import (
    SupabaseIngredientRepository,
)
from hungry_owl.adapters.supabase_inventory_repository import (
    SupabaseInventoryRepository,
)
from hungry_owl.adapters.supabase_recipe_repository import SupabaseRecipeRepository
from hungry_owl.adapters.supabase_shopping_repository import (
    SupabaseShoppingRepository,
)
from hungry_owl.adapters.supabase_user_repository import SupabaseUserRepository
from hungry_owl.config import Settings
from hungry_owl.services.cache import Cache, InMemoryCache
from hungry_owl.services.ingredients import IngredientService
from hungry_owl.services.inventory import InventoryService
from hungry_owl.services.recipes import RecipeService
from hungry_owl.services.shopping import ShoppingListService
from hungry_owl.services.users import UserService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    user_service: UserService
    ingredient_service: IngredientService
    inventory_service: InventoryService
    recipe_service: RecipeService
    shopping_service: ShoppingListService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    user_repository = SupabaseUserRepository(supabase_client)
    ingredient_repository = SupabaseIngredientRepository(supabase_client)
    inventory_repository = SupabaseInventoryRepository(supabase_client)
    recipe_repository = SupabaseRecipeRepository(supabase_client)
    shopping_repository = SupabaseShoppingRepository(supabase_client)

    redis_cache: RedisCache | None = None
    cache: Cache
    if resolved_settings.redis_url:
        redis_cache = RedisCache.create(resolved_settings.redis_url)
        cache = redis_cache
    else:
        cache = InMemoryCache()

    fdc_client = HttpxFdcClient.create(
        api_key=resolved_settings.fdc_api_key,
        base_url=resolved_settings.fdc_base_url,
    )
    recipe_client = OpenAIRecipeClient.create(resolved_settings.openai_api_key)

    user_service = UserService(user_repository)
    ingredient_service = IngredientService(
        repository=ingredient_repository,
        fdc_client=fdc_client,
        cache=cache,
    )
    inventory_service = InventoryService(
        repository=inventory_repository,
        ingredients=ingredient_repository,
        users=user_repository,
    )
    recipe_service = RecipeService(
        client=recipe_client,
        repository=recipe_repository,
        inventory_service=inventory_service,
        user_service=user_service,
        cache=cache,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
        cache_ttl_seconds=resolved_settings.recipe_cache_ttl_seconds,
    )
    shopping_service = ShoppingListService(
        repository=shopping_repository,
        inventory_service=inventory_service,
        ingredient_service=ingredient_service,
    )

    async def close_resources() -> None:
        await fdc_client.close()
        await recipe_client.close()
        if redis_cache is not None:
            redis_cache.close()

    return AppContainer(
        settings=resolved_settings,
        user_service=user_service,
        ingredient_service=ingredient_service,
        inventory_service=inventory_service,
        recipe_service=recipe_service,
        shopping_service=shopping_service,
        close_resources=close_resources,
    )
