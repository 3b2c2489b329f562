"""Ingredient catalog search backed by the local catalog and USDA FDC."""

import asyncio
import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol
from uuid import UUID

from hungry_owl.adapters.fdc_client import FdcClient
from hungry_owl.domain.inventory import Ingredient, IngredientCategory
from hungry_owl.domain.nutrition import IngredientSearchResult, UsdaFood
from hungry_owl.services.cache import Cache

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

_logger = logging.getLogger(__name__)

DEFAULT_UNITS = ["piece", "oz", "cup", "lb"]
DEFAULT_EMOJI = "🍽️"
MIN_QUERY_LENGTH = 2

USDA_CATEGORY_MAP: Mapping[str, IngredientCategory] = {
    "Vegetables and Vegetable Products": IngredientCategory.PRODUCE,
    "Fruits and Fruit Juices": IngredientCategory.PRODUCE,
    "Spices and Herbs": IngredientCategory.SPICES,
    "Beef Products": IngredientCategory.PROTEIN,
    "Pork Products": IngredientCategory.PROTEIN,
    "Poultry Products": IngredientCategory.PROTEIN,
    "Lamb, Veal, and Game Products": IngredientCategory.PROTEIN,
    "Finfish and Shellfish Products": IngredientCategory.PROTEIN,
    "Legumes and Legume Products": IngredientCategory.PANTRY,
    "Nut and Seed Products": IngredientCategory.PANTRY,
    "Dairy and Egg Products": IngredientCategory.DAIRY,
    "Fats and Oils": IngredientCategory.PANTRY,
    "Cereal Grains and Pasta": IngredientCategory.GRAINS,
    "Baked Products": IngredientCategory.GRAINS,
    "Breakfast Cereals": IngredientCategory.GRAINS,
    "Beverages": IngredientCategory.BEVERAGES,
    "Sweets": IngredientCategory.PANTRY,
    "Soups, Sauces, and Gravies": IngredientCategory.PANTRY,
    "Snacks": IngredientCategory.PANTRY,
}

# First matching keyword wins, so more specific words come first.
KEYWORD_EMOJI: Sequence[tuple[tuple[str, ...], str]] = (
    (("pineapple",), "🍍"),
    (("apple",), "🍎"),
    (("banana",), "🍌"),
    (("orange", "citrus"), "🍊"),
    (("lemon",), "🍋"),
    (("grape",), "🍇"),
    (("strawberr",), "🍓"),
    (("blueberr", "berr"), "🫐"),
    (("cherry",), "🍒"),
    (("peach",), "🍑"),
    (("pear",), "🍐"),
    (("watermelon", "melon"), "🍉"),
    (("mango",), "🥭"),
    (("avocado",), "🥑"),
    (("tomato",), "🍅"),
    (("broccoli",), "🥦"),
    (("carrot",), "🥕"),
    (("corn",), "🌽"),
    (("pepper", "chili"), "🌶️"),
    (("cucumber",), "🥒"),
    (("lettuce", "salad", "green"), "🥬"),
    (("potato",), "🥔"),
    (("onion",), "🧅"),
    (("garlic",), "🧄"),
    (("mushroom",), "🍄"),
    (("coconut",), "🥥"),
    (("ginger",), "🫚"),
    (("chicken",), "🍗"),
    (("beef", "steak"), "🥩"),
    (("pork", "bacon"), "🥓"),
    (("fish", "salmon", "tuna"), "🐟"),
    (("shrimp", "prawn"), "🦐"),
    (("crab",), "🦀"),
    (("lobster",), "🦞"),
    (("egg",), "🥚"),
    (("milk",), "🥛"),
    (("cheese",), "🧀"),
    (("butter",), "🧈"),
    (("yogurt",), "🥛"),
    (("bread",), "🍞"),
    (("rice",), "🍚"),
    (("pasta", "spaghetti", "noodle"), "🍝"),
    (("coffee",), "☕"),
    (("tea",), "🍵"),
    (("honey",), "🍯"),
    (("chocolate",), "🍫"),
    (("salt",), "🧂"),
)

CATEGORY_EMOJI: Mapping[IngredientCategory, str] = {
    IngredientCategory.PRODUCE: "🥬",
    IngredientCategory.PROTEIN: "🍖",
    IngredientCategory.DAIRY: "🥛",
    IngredientCategory.GRAINS: "🌾",
    IngredientCategory.SPICES: "🌿",
    IngredientCategory.PANTRY: "🥫",
    IngredientCategory.BEVERAGES: "🥤",
    IngredientCategory.FROZEN: "❄️",
}

_USDA_SUFFIXES = re.compile(
    r",\s*(raw|cooked|fresh|frozen|canned|dried|NFS)$|,\s*NS.*$", re.IGNORECASE
)


class IngredientRepository(Protocol):
    """Persistence interface for the ingredient catalog."""

    def get_ingredient(self, ingredient_id: UUID) -> Ingredient | None:
        """Return an ingredient by id, if present."""

    def find_by_name(self, name: str) -> Ingredient | None:
        """Return an ingredient whose name matches case-insensitively."""

    def find_by_fdc_id(self, fdc_id: int) -> Ingredient | None:
        """Return the ingredient imported from a USDA FDC id."""

    def search(self, query: str, limit: int) -> list[Ingredient]:
        """Return ingredients whose name contains the query or alias equals it."""

    def create_ingredient(self, payload: dict[str, object]) -> Ingredient:
        """Create an ingredient and return it."""


@dataclass
class IngredientService:
    """Search and import ingredients for inventory entry."""

    repository: IngredientRepository
    fdc_client: FdcClient
    cache: Cache
    search_ttl_seconds: int = 3600
    local_limit: int = 15
    local_sufficient: int = 10
    usda_page_size: int = 20
    max_results: int = 20
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def search(self, query: str) -> list[IngredientSearchResult]:
        """Search the local catalog, topping up from USDA when results are thin."""
        if not query or len(query) < MIN_QUERY_LENGTH:
            return []
        local = [
            _local_result(ingredient)
            for ingredient in self.repository.search(query, self.local_limit)
        ]
        if len(local) >= self.local_sufficient:
            return local[: self.local_limit]

        try:
            usda_foods = await self.search_usda(query, self.usda_page_size)
        except Exception:
            _logger.exception("USDA search failed, continuing with local results")
            usda_foods = []

        seen = {result.name.lower() for result in local}
        usda: list[IngredientSearchResult] = []
        for food in usda_foods:
            normalized = normalize_usda_food(food)
            if normalized.name.lower() in seen:
                continue
            seen.add(normalized.name.lower())
            usda.append(normalized)
        return [*local, *usda][: self.max_results]

    async def search_usda(self, query: str, limit: int) -> list[UsdaFood]:
        """Search USDA FDC foods with caching."""
        cache_key = f"fdc:search:{query.lower()}:{limit}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return [_parse_usda_food(row) for row in cached]

        payload = await self._call_with_retry(
            lambda: self.fdc_client.search_foods(query, page_size=limit),
            action="search",
        )
        rows = [row for row in payload.get("foods", []) if isinstance(row, dict)]
        self.cache.set(cache_key, rows, ttl_seconds=self.search_ttl_seconds)
        return [_parse_usda_food(row) for row in rows]

    def create_from_usda(  # noqa: PLR0913
        self,
        name: str,
        category: IngredientCategory,
        common_units: list[str],
        emoji: str,
        fdc_id: int | None = None,
    ) -> Ingredient:
        """Return the matching catalog entry or import the USDA food."""
        existing = self.repository.find_by_name(name)
        if existing is None and fdc_id is not None:
            existing = self.repository.find_by_fdc_id(fdc_id)
        if existing:
            return existing
        return self.repository.create_ingredient(
            {
                "name": name,
                "category": category.value,
                "common_units": common_units,
                "emoji": emoji,
                "usda_fdc_id": fdc_id,
                "aliases": [],
            }
        )

    def create_custom(
        self,
        name: str,
        category: IngredientCategory,
        emoji: str,
        description: str | None = None,
    ) -> Ingredient:
        """Return the matching catalog entry or create a user-defined one."""
        existing = self.repository.find_by_name(name)
        if existing:
            return existing
        payload: dict[str, object] = {
            "name": name,
            "category": category.value,
            "common_units": list(DEFAULT_UNITS),
            "emoji": emoji,
            "aliases": [],
        }
        if description:
            payload["description"] = description
        return self.repository.create_ingredient(payload)

    def resolve_by_name(
        self,
        name: str,
        category: IngredientCategory = IngredientCategory.OTHER,
        unit: str | None = None,
        emoji: str | None = None,
    ) -> Ingredient:
        """Find an ingredient by name, creating a custom entry when unknown."""
        existing = self.repository.find_by_name(name)
        if existing:
            return existing
        units = [unit, "piece", "oz", "cup"] if unit else list(DEFAULT_UNITS)
        return self.repository.create_ingredient(
            {
                "name": name,
                "category": category.value,
                "common_units": units,
                "emoji": emoji or DEFAULT_EMOJI,
                "aliases": [],
            }
        )

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[dict[str, object]]]", *, action: str
    ) -> dict[str, object]:
        """Call an async function with a short retry."""
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                attempt += 1
                _logger.warning(
                    "USDA %s failed (attempt %s/%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def clean_food_name(description: str) -> str:
    """Strip USDA preparation suffixes and title-case the words."""
    name = _USDA_SUFFIXES.sub("", description).strip()
    return " ".join(word.capitalize() for word in name.split(" "))


def emoji_for_food(
    name: str,
    category: IngredientCategory,
    keyword_emoji: Sequence[tuple[tuple[str, ...], str]] = KEYWORD_EMOJI,
    category_emoji: Mapping[IngredientCategory, str] = CATEGORY_EMOJI,
) -> str:
    """Pick an emoji from name keywords, then the category, then a plate."""
    lower_name = name.lower()
    for keywords, emoji in keyword_emoji:
        if any(keyword in lower_name for keyword in keywords):
            return emoji
    return category_emoji.get(category, DEFAULT_EMOJI)


def normalize_usda_food(
    food: UsdaFood,
    category_map: Mapping[str, IngredientCategory] = USDA_CATEGORY_MAP,
) -> IngredientSearchResult:
    """Convert a USDA food into an ingredient candidate."""
    category = IngredientCategory.PANTRY
    if food.food_category:
        category = category_map.get(food.food_category, IngredientCategory.PANTRY)
    name = clean_food_name(food.description)
    return IngredientSearchResult(
        name=name,
        category=category,
        common_units=list(DEFAULT_UNITS),
        emoji=emoji_for_food(name, category),
        source="usda",
        fdc_id=food.fdc_id,
    )


def _local_result(ingredient: Ingredient) -> IngredientSearchResult:
    return IngredientSearchResult(
        name=ingredient.name,
        category=ingredient.category,
        common_units=ingredient.common_units,
        emoji=ingredient.emoji or DEFAULT_EMOJI,
        source="local",
        id=ingredient.id,
        aliases=ingredient.aliases,
    )


def _parse_usda_food(row: dict[str, object]) -> UsdaFood:
    category = row.get("foodCategory")
    if isinstance(category, dict):
        category = category.get("description")
    return UsdaFood(
        fdc_id=int(row["fdcId"]),
        description=str(row.get("description", "")),
        data_type=row.get("dataType"),
        food_category=category if isinstance(category, str) else None,
        brand_owner=row.get("brandOwner"),
    )
