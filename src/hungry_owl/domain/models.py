"""Domain models for users and their cooking profile."""

from dataclasses import dataclass, field
from enum import StrEnum
from uuid import UUID


class SkillLevel(StrEnum):
    """Self-reported cooking skill."""

    BEGINNER = "BEGINNER"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"


@dataclass(frozen=True)
class UserRecord:
    """Represents a user stored in the database."""

    id: UUID
    external_id: str
    email: str


@dataclass(frozen=True)
class UserProfile:
    """Household, dietary, and kitchen preferences for a user."""

    user_id: UUID
    household_size: int = 1
    allergies: list[str] = field(default_factory=list)
    restrictions: list[str] = field(default_factory=list)
    dislikes: list[str] = field(default_factory=list)
    cuisine_preferences: dict[str, str] = field(default_factory=dict)
    cookware: list[str] = field(default_factory=list)
    appliances: list[str] = field(default_factory=list)
    skill_level: SkillLevel = SkillLevel.BEGINNER
    preferred_stores: list[str] = field(default_factory=list)
    shopping_frequency: str | None = None
    budget_preference: str | None = None
    onboarding_completed: bool = False
