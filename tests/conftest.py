"""Shared test fixtures."""

import threading
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from hungry_owl.adapters.fdc_client import DEFAULT_DATA_TYPES, FdcClient
from hungry_owl.config import Settings
from hungry_owl.containers import AppContainer
from hungry_owl.domain.errors import InventoryConflictError
from hungry_owl.domain.inventory import (
    FreshnessState,
    Ingredient,
    IngredientCategory,
    InventoryItem,
    PantryStaple,
    StorageLocation,
)
from hungry_owl.domain.models import SkillLevel, UserProfile, UserRecord
from hungry_owl.domain.recipes import GeneratedRecipe, SavedRecipe
from hungry_owl.domain.shopping import ShoppingItem, ShoppingList
from hungry_owl.services.cache import InMemoryCache
from hungry_owl.services.ingredients import IngredientRepository, IngredientService
from hungry_owl.services.inventory import InventoryRepository, InventoryService
from hungry_owl.services.recipes import RecipeClient, RecipeRepository, RecipeService
from hungry_owl.services.shopping import ShoppingListService, ShoppingRepository
from hungry_owl.services.users import UserRepository, UserService

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)


@dataclass
class InMemoryUserRepository(UserRepository):
    """In-memory user repository for tests."""

    users: dict[str, UserRecord] = field(default_factory=dict)
    profiles: dict[UUID, UserProfile] = field(default_factory=dict)

    def get_by_external_id(self, external_id: str) -> UserRecord | None:
        return self.users.get(external_id)

    def create_user(  # noqa: PLR0913
        self,
        external_id: str,
        email: str,
        first_name: str | None,
        last_name: str | None,
        image_url: str | None,
    ) -> UserRecord:
        user = UserRecord(id=uuid4(), external_id=external_id, email=email)
        self.users[external_id] = user
        return user

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        return self.profiles.get(user_id)

    def upsert_profile(self, user_id: UUID, payload: dict[str, object]) -> UserProfile:
        current = self.profiles.get(user_id) or UserProfile(user_id=user_id)
        changes = dict(payload)
        if "skill_level" in changes:
            changes["skill_level"] = SkillLevel(changes["skill_level"])
        profile = replace(current, **changes)
        self.profiles[user_id] = profile
        return profile


@dataclass
class InMemoryIngredientRepository(IngredientRepository):
    """In-memory ingredient catalog for tests."""

    ingredients: dict[UUID, Ingredient] = field(default_factory=dict)

    def add(
        self,
        name: str,
        category: IngredientCategory = IngredientCategory.OTHER,
        shelf_life_days: int | None = None,
        aliases: list[str] | None = None,
    ) -> Ingredient:
        ingredient = Ingredient(
            id=uuid4(),
            name=name,
            category=category,
            aliases=aliases or [],
            common_units=["piece"],
            emoji="🍽️",
            shelf_life_days=shelf_life_days,
        )
        self.ingredients[ingredient.id] = ingredient
        return ingredient

    def get_ingredient(self, ingredient_id: UUID) -> Ingredient | None:
        return self.ingredients.get(ingredient_id)

    def find_by_name(self, name: str) -> Ingredient | None:
        for ingredient in self.ingredients.values():
            if ingredient.name.lower() == name.lower():
                return ingredient
        return None

    def find_by_fdc_id(self, fdc_id: int) -> Ingredient | None:
        for ingredient in self.ingredients.values():
            if ingredient.usda_fdc_id == fdc_id:
                return ingredient
        return None

    def search(self, query: str, limit: int) -> list[Ingredient]:
        query_lower = query.lower()
        matches = [
            ingredient
            for ingredient in self.ingredients.values()
            if query_lower in ingredient.name.lower()
            or query_lower in ingredient.aliases
        ]
        return sorted(matches, key=lambda ingredient: ingredient.name)[:limit]

    def create_ingredient(self, payload: dict[str, object]) -> Ingredient:
        ingredient = Ingredient(
            id=uuid4(),
            name=str(payload["name"]),
            category=IngredientCategory(payload["category"]),
            aliases=list(payload.get("aliases", [])),
            common_units=list(payload.get("common_units", [])),
            emoji=payload.get("emoji"),
            usda_fdc_id=payload.get("usda_fdc_id"),
        )
        self.ingredients[ingredient.id] = ingredient
        return ingredient


@dataclass
class InMemoryInventoryRepository(InventoryRepository):
    """In-memory inventory with the database's uniqueness and version rules."""

    ingredients: InMemoryIngredientRepository
    items: dict[UUID, InventoryItem] = field(default_factory=dict)
    staples: dict[tuple[UUID, UUID], PantryStaple] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def find_item(
        self, user_id: UUID, ingredient_id: UUID, storage_location: StorageLocation
    ) -> InventoryItem | None:
        with self._lock:
            return self._find(user_id, ingredient_id, storage_location)

    def get_item(self, item_id: UUID) -> InventoryItem | None:
        with self._lock:
            return self.items.get(item_id)

    def list_items(self, user_id: UUID) -> list[InventoryItem]:
        with self._lock:
            return [item for item in self.items.values() if item.user_id == user_id]

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
        ingredient = self.ingredients.get_ingredient(ingredient_id)
        with self._lock:
            if self._find(user_id, ingredient_id, storage_location):
                raise InventoryConflictError("duplicate inventory triple")
            item = InventoryItem(
                id=uuid4(),
                user_id=user_id,
                ingredient_id=ingredient_id,
                ingredient_name=ingredient.name if ingredient else "",
                quantity=quantity,
                unit=unit,
                storage_location=storage_location,
                expiration_date=expiration_date,
                status=status,
            )
            self.items[item.id] = item
            return item

    def update_item(
        self, item_id: UUID, version: int, changes: dict[str, object]
    ) -> InventoryItem | None:
        with self._lock:
            current = self.items.get(item_id)
            if current is None or current.version != version:
                return None
            item = replace(current, **changes, version=version + 1)
            self.items[item_id] = item
            return item

    def delete_item(self, item_id: UUID, version: int | None = None) -> bool:
        with self._lock:
            current = self.items.get(item_id)
            if current is None or (version is not None and current.version != version):
                return False
            del self.items[item_id]
            return True

    def _find(
        self, user_id: UUID, ingredient_id: UUID, storage_location: StorageLocation
    ) -> InventoryItem | None:
        for item in self.items.values():
            if (
                item.user_id == user_id
                and item.ingredient_id == ingredient_id
                and item.storage_location == storage_location
            ):
                return item
        return None

    def list_pantry_staples(self, user_id: UUID) -> list[PantryStaple]:
        return [
            staple
            for (owner, _), staple in self.staples.items()
            if owner == user_id
        ]

    def upsert_pantry_staple(
        self, user_id: UUID, ingredient_id: UUID, in_stock: bool
    ) -> PantryStaple:
        ingredient = self.ingredients.get_ingredient(ingredient_id)
        staple = PantryStaple(
            user_id=user_id,
            ingredient_id=ingredient_id,
            ingredient_name=ingredient.name if ingredient else "",
            in_stock=in_stock,
        )
        self.staples[(user_id, ingredient_id)] = staple
        return staple


@dataclass
class InMemoryRecipeRepository(RecipeRepository):
    """In-memory saved recipes and cooking history for tests."""

    saved: list[SavedRecipe] = field(default_factory=list)
    cooked: list[tuple[UUID, UUID]] = field(default_factory=list)

    def save_recipe(self, user_id: UUID, recipe: GeneratedRecipe) -> SavedRecipe:
        entry = SavedRecipe(
            id=uuid4(),
            user_id=user_id,
            name=recipe.name,
            recipe=recipe,
            saved_at=NOW,
        )
        self.saved.append(entry)
        return entry

    def list_saved_recipes(self, user_id: UUID) -> list[SavedRecipe]:
        return [entry for entry in self.saved if entry.user_id == user_id]

    def is_saved(self, user_id: UUID, recipe_id: UUID) -> bool:
        return any(
            entry.id == recipe_id and entry.user_id == user_id for entry in self.saved
        )

    def record_cooked(self, user_id: UUID, recipe_id: UUID) -> None:
        self.cooked.append((user_id, recipe_id))

    def list_recent_cooked(self, user_id: UUID, limit: int) -> list[str]:
        names = {entry.id: entry.name for entry in self.saved}
        recent = [
            names.get(recipe_id, "")
            for owner, recipe_id in reversed(self.cooked)
            if owner == user_id
        ]
        return recent[:limit]


@dataclass
class InMemoryShoppingRepository(ShoppingRepository):
    """In-memory shopping lists for tests."""

    lists: dict[UUID, ShoppingList] = field(default_factory=dict)

    def list_lists(self, user_id: UUID) -> list[ShoppingList]:
        return [entry for entry in self.lists.values() if entry.user_id == user_id]

    def get_list(self, list_id: UUID) -> ShoppingList | None:
        return self.lists.get(list_id)

    def get_active_list(self, user_id: UUID) -> ShoppingList | None:
        for entry in self.lists.values():
            if entry.user_id == user_id and entry.is_active:
                return entry
        return None

    def deactivate_lists(self, user_id: UUID) -> None:
        for list_id, entry in list(self.lists.items()):
            if entry.user_id == user_id:
                self.lists[list_id] = replace(entry, is_active=False)

    def create_list(self, user_id: UUID, name: str) -> ShoppingList:
        entry = ShoppingList(
            id=uuid4(), user_id=user_id, name=name, is_active=True, created_at=NOW
        )
        self.lists[entry.id] = entry
        return entry

    def save_items(self, list_id: UUID, items: list[ShoppingItem]) -> ShoppingList:
        entry = replace(self.lists[list_id], items=list(items))
        self.lists[list_id] = entry
        return entry


@dataclass
class FakeFdcClient(FdcClient):
    """Fake FDC client with in-memory responses."""

    search_payload: dict[str, object] = field(
        default_factory=lambda: {
            "foods": [
                {
                    "fdcId": 171077,
                    "description": "Chicken, broilers or fryers, breast, raw",
                    "dataType": "SR Legacy",
                    "foodCategory": "Poultry Products",
                },
                {
                    "fdcId": 169756,
                    "description": "Rice, white, long-grain, regular, raw",
                    "dataType": "SR Legacy",
                    "foodCategory": {"description": "Cereal Grains and Pasta"},
                },
            ]
        }
    )
    error: Exception | None = None
    calls: list[str] = field(default_factory=list)

    async def search_foods(
        self,
        query: str,
        page_size: int = 25,
        page_number: int = 1,
        data_types: tuple[str, ...] = DEFAULT_DATA_TYPES,
    ) -> dict[str, object]:
        self.calls.append(query)
        if self.error is not None:
            raise self.error
        return self.search_payload


def recipe_payload(
    name: str, ingredients: list[tuple[str, bool]]
) -> dict[str, object]:
    """Build a recipe dict shaped like the model's structured output."""
    return {
        "name": name,
        "description": f"{name} for tonight",
        "heroEmoji": "🍲",
        "ingredients": [
            {"name": ingredient, "quantity": 1, "unit": "cup", "optional": optional}
            for ingredient, optional in ingredients
        ],
        "steps": [
            {
                "stepNumber": 1,
                "instruction": "Cook everything over medium heat.",
                "duration": 10,
                "tips": None,
            }
        ],
        "totalTime": 25,
        "activeTime": 15,
        "difficulty": "BEGINNER",
        "cuisineType": "American",
        "mealType": "DINNER",
        "isOnePot": True,
        "isVegetarian": False,
        "isVegan": False,
        "equipment": ["skillet"],
        "nutrition": {"calories": 450, "protein": 30, "carbs": 40, "fat": 12},
        "servings": 2,
    }


@dataclass
class FakeRecipeClient(RecipeClient):
    """Fake recipe client returning a fixed batch."""

    payload: dict[str, object] = field(
        default_factory=lambda: {
            "recipes": [
                recipe_payload(
                    "Broccoli Chicken Rice",
                    [("chicken", False), ("rice", False), ("broccoli", False)],
                ),
                recipe_payload(
                    "Chicken Rice Bowl",
                    [("chicken breast", False), ("rice", False), ("scallion", True)],
                ),
            ]
        }
    )
    error: Exception | None = None
    prompts: list[str] = field(default_factory=list)

    async def generate(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.payload


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        openai_api_key="openai-key",
        fdc_api_key="fdc-key",
    )


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def ingredient_repository() -> InMemoryIngredientRepository:
    return InMemoryIngredientRepository()


@pytest.fixture
def inventory_repository(
    ingredient_repository: InMemoryIngredientRepository,
) -> InMemoryInventoryRepository:
    return InMemoryInventoryRepository(ingredients=ingredient_repository)


@pytest.fixture
def fdc_client() -> FakeFdcClient:
    return FakeFdcClient()


@pytest.fixture
def recipe_client() -> FakeRecipeClient:
    return FakeRecipeClient()


@pytest.fixture
def cache() -> InMemoryCache:
    return InMemoryCache()


@pytest.fixture
def user_service(user_repository: InMemoryUserRepository) -> UserService:
    return UserService(user_repository)


@pytest.fixture
def ingredient_service(
    ingredient_repository: InMemoryIngredientRepository,
    fdc_client: FakeFdcClient,
    cache: InMemoryCache,
) -> IngredientService:
    return IngredientService(
        repository=ingredient_repository,
        fdc_client=fdc_client,
        cache=cache,
        retry_delay_seconds=0,
    )


@pytest.fixture
def inventory_service(
    inventory_repository: InMemoryInventoryRepository,
    ingredient_repository: InMemoryIngredientRepository,
    user_repository: InMemoryUserRepository,
) -> InventoryService:
    return InventoryService(
        repository=inventory_repository,
        ingredients=ingredient_repository,
        users=user_repository,
        clock=lambda: NOW,
    )


@pytest.fixture
def recipe_service(
    recipe_client: FakeRecipeClient,
    inventory_service: InventoryService,
    user_service: UserService,
    cache: InMemoryCache,
) -> RecipeService:
    return RecipeService(
        client=recipe_client,
        repository=InMemoryRecipeRepository(),
        inventory_service=inventory_service,
        user_service=user_service,
        cache=cache,
        model="gpt-5.2",
        reasoning_effort="low",
        store=False,
    )


@pytest.fixture
def shopping_service(
    inventory_service: InventoryService, ingredient_service: IngredientService
) -> ShoppingListService:
    return ShoppingListService(
        repository=InMemoryShoppingRepository(),
        inventory_service=inventory_service,
        ingredient_service=ingredient_service,
    )


@pytest.fixture
def user_id() -> UUID:
    return uuid4()


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    user_service: UserService,
    ingredient_service: IngredientService,
    inventory_service: InventoryService,
    recipe_service: RecipeService,
    shopping_service: ShoppingListService,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        user_service=user_service,
        ingredient_service=ingredient_service,
        inventory_service=inventory_service,
        recipe_service=recipe_service,
        shopping_service=shopping_service,
        close_resources=close_resources,
    )
