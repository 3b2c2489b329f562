"""Request models for the HTTP API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from hungry_owl.domain.inventory import IngredientCategory, StorageLocation
from hungry_owl.domain.models import SkillLevel
from hungry_owl.domain.recipes import GenerateOptions, MealType


class ProfileUpdate(BaseModel):
    """Partial profile update; omitted fields stay unchanged."""

    household_size: int | None = Field(default=None, ge=1)
    allergies: list[str] | None = None
    restrictions: list[str] | None = None
    dislikes: list[str] | None = None
    cuisine_preferences: dict[str, str] | None = None
    cookware: list[str] | None = None
    appliances: list[str] | None = None
    skill_level: SkillLevel | None = None
    preferred_stores: list[str] | None = None
    shopping_frequency: str | None = None
    budget_preference: str | None = None


class InventoryAdd(BaseModel):
    """Stock to add for an ingredient."""

    ingredient_id: UUID
    quantity: float = Field(gt=0, allow_inf_nan=False)
    unit: str
    storage_location: StorageLocation = StorageLocation.FRIDGE
    expiration_date: datetime | None = None


class InventoryUpdate(BaseModel):
    """In-place edits to an inventory row."""

    quantity: float | None = Field(default=None, gt=0, allow_inf_nan=False)
    unit: str | None = None
    expiration_date: datetime | None = None
    clear_expiration: bool = False
    storage_location: StorageLocation | None = None


class QuantityAdjust(BaseModel):
    """Signed change to an item's quantity."""

    delta: float = Field(allow_inf_nan=False)


class StapleToggle(BaseModel):
    """In-stock flag for a pantry staple."""

    in_stock: bool


class UsdaIngredientCreate(BaseModel):
    """USDA search result the user picked."""

    name: str
    category: IngredientCategory
    common_units: list[str]
    emoji: str
    fdc_id: int | None = None


class CustomIngredientCreate(BaseModel):
    """User-defined ingredient."""

    name: str = Field(min_length=1)
    category: IngredientCategory = IngredientCategory.OTHER
    emoji: str = "🍽️"
    description: str | None = None


class GenerateRequest(BaseModel):
    """Constraints for recipe generation."""

    max_time: int = Field(default=30, ge=5, le=240)
    prioritize_expiring: bool = False
    one_pot_only: bool = False
    willing_to_shop: bool = False
    meal_type: MealType | None = None
    cuisine_type: str | None = None

    def to_options(self) -> GenerateOptions:
        """Convert to the service-level options."""
        return GenerateOptions(
            max_time=self.max_time,
            prioritize_expiring=self.prioritize_expiring,
            one_pot_only=self.one_pot_only,
            willing_to_shop=self.willing_to_shop,
            meal_type=self.meal_type,
            cuisine_type=self.cuisine_type,
        )


class ShoppingListCreate(BaseModel):
    """Name for a new shopping list."""

    name: str = "Shopping List"


class ShoppingItemCreate(BaseModel):
    """Item to append to a shopping list."""

    name: str = Field(min_length=1)
    quantity: float = Field(default=1, gt=0, allow_inf_nan=False)
    unit: str = "piece"
    category: str = IngredientCategory.OTHER.value
    recipe_id: UUID | None = None
    ingredient_id: UUID | None = None
    emoji: str | None = None
