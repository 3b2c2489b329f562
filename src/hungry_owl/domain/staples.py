"""Staple ingredient catalog and recommendation results."""

from dataclasses import dataclass

from hungry_owl.domain.inventory import IngredientCategory


@dataclass(frozen=True)
class StapleSuggestion:
    """A commonly needed ingredient worth keeping on hand."""

    name: str
    category: IngredientCategory
    reason: str
    emoji: str


@dataclass(frozen=True)
class StapleCatalog:
    """Staples grouped by the skill tier that needs them."""

    core: tuple[StapleSuggestion, ...]
    intermediate: tuple[StapleSuggestion, ...]


@dataclass(frozen=True)
class StapleRecommendation:
    """Result of comparing a user's stock against the staple catalog."""

    recommendations: list[StapleSuggestion]
    is_well_stocked: bool
    message: str


DEFAULT_STAPLE_CATALOG = StapleCatalog(
    core=(
        StapleSuggestion(
            "Olive Oil",
            IngredientCategory.PANTRY,
            "Essential for cooking almost anything",
            "🫒",
        ),
        StapleSuggestion(
            "Salt", IngredientCategory.PANTRY, "Basic seasoning for all dishes", "🧂"
        ),
        StapleSuggestion(
            "Black Pepper", IngredientCategory.SPICES, "Universal seasoning", "🌶️"
        ),
        StapleSuggestion(
            "Garlic", IngredientCategory.PRODUCE, "Adds depth to savory dishes", "🧄"
        ),
        StapleSuggestion(
            "Onion", IngredientCategory.PRODUCE, "Base for countless recipes", "🧅"
        ),
        StapleSuggestion(
            "Butter",
            IngredientCategory.DAIRY,
            "Essential for cooking and baking",
            "🧈",
        ),
        StapleSuggestion(
            "Egg", IngredientCategory.PROTEIN, "Versatile protein for any meal", "🥚"
        ),
        StapleSuggestion(
            "Chicken Breast",
            IngredientCategory.PROTEIN,
            "Lean protein that's easy to cook",
            "🍗",
        ),
        StapleSuggestion(
            "Rice", IngredientCategory.GRAINS, "Affordable base for many meals", "🍚"
        ),
        StapleSuggestion(
            "Pasta", IngredientCategory.GRAINS, "Quick and easy meal foundation", "🍝"
        ),
    ),
    intermediate=(
        StapleSuggestion(
            "Lemon", IngredientCategory.PRODUCE, "Brightens flavors in dishes", "🍋"
        ),
        StapleSuggestion(
            "Ginger", IngredientCategory.PRODUCE, "Essential for Asian cuisine", "🫚"
        ),
        StapleSuggestion(
            "Soy Sauce", IngredientCategory.PANTRY, "Key umami flavor enhancer", "🥢"
        ),
        StapleSuggestion(
            "Cumin",
            IngredientCategory.SPICES,
            "Essential for Mexican & Indian dishes",
            "🌿",
        ),
        StapleSuggestion(
            "Chicken Broth",
            IngredientCategory.PANTRY,
            "Base for soups and sauces",
            "🥣",
        ),
    ),
)
