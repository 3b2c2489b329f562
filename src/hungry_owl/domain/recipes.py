"""Models for generated and saved recipes."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, Field


class Difficulty(StrEnum):
    """Recipe difficulty levels."""

    BEGINNER = "BEGINNER"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"


class MealType(StrEnum):
    """Meal slots a recipe targets."""

    BREAKFAST = "BREAKFAST"
    LUNCH = "LUNCH"
    DINNER = "DINNER"
    SNACK = "SNACK"
    DESSERT = "DESSERT"


class RecipeIngredient(BaseModel):
    """Ingredient line as returned by the recipe model."""

    name: str
    quantity: float = Field(ge=0.0)
    unit: str
    optional: bool = False


class RecipeStep(BaseModel):
    """Single cooking step."""

    step_number: int = Field(alias="stepNumber", ge=1)
    instruction: str
    duration: int | None = Field(default=None, ge=0)
    tips: str | None = None

    model_config = {"populate_by_name": True}


class NutritionEstimate(BaseModel):
    """Per-serving nutrition estimate."""

    calories: float | None = None
    protein: float | None = None
    carbs: float | None = None
    fat: float | None = None


class GeneratedRecipe(BaseModel):
    """Recipe suggestion, annotated with how well it fits the inventory."""

    name: str
    description: str
    hero_emoji: str = Field(alias="heroEmoji")
    ingredients: list[RecipeIngredient]
    steps: list[RecipeStep]
    total_time: int = Field(alias="totalTime", ge=0)
    active_time: int = Field(alias="activeTime", ge=0)
    difficulty: Difficulty
    cuisine_type: str = Field(alias="cuisineType")
    meal_type: MealType = Field(alias="mealType")
    is_one_pot: bool = Field(alias="isOnePot")
    is_vegetarian: bool = Field(alias="isVegetarian")
    is_vegan: bool = Field(alias="isVegan")
    equipment: list[str]
    nutrition: NutritionEstimate
    servings: int = Field(ge=1)
    match_percentage: int | None = Field(default=None, alias="matchPercentage")
    missing_ingredients: list[str] | None = Field(
        default=None, alias="missingIngredients"
    )

    model_config = {"populate_by_name": True}


class RecipeBatch(BaseModel):
    """Structured output wrapper for a batch of recipes."""

    recipes: list[GeneratedRecipe]


@dataclass(frozen=True)
class RecipeMatch:
    """How much of a recipe the user can make from what they have."""

    match_percentage: int
    missing: list[str]


@dataclass(frozen=True)
class GenerateOptions:
    """Constraints for a recipe generation request."""

    max_time: int = 30
    prioritize_expiring: bool = False
    one_pot_only: bool = False
    willing_to_shop: bool = False
    meal_type: MealType | None = None
    cuisine_type: str | None = None


@dataclass(frozen=True)
class SavedRecipe:
    """A recipe persisted to the user's collection."""

    id: UUID
    user_id: UUID
    name: str
    recipe: GeneratedRecipe
    saved_at: datetime | None
