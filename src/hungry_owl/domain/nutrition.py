"""Models for USDA FoodData Central lookups."""

from dataclasses import dataclass, field
from typing import Literal
from uuid import UUID

from hungry_owl.domain.inventory import IngredientCategory


@dataclass(frozen=True)
class UsdaFood:
    """Summary information about a food from FDC."""

    fdc_id: int
    description: str
    data_type: str | None
    food_category: str | None
    brand_owner: str | None


@dataclass(frozen=True)
class IngredientSearchResult:
    """Ingredient candidate from the local catalog or from USDA."""

    name: str
    category: IngredientCategory
    common_units: list[str]
    emoji: str
    source: Literal["local", "usda"]
    id: UUID | None = None
    fdc_id: int | None = None
    aliases: list[str] = field(default_factory=list)
