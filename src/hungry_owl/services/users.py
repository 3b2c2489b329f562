"""User-related business logic."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from hungry_owl.domain.models import UserProfile, UserRecord

PROFILE_FIELDS = frozenset(
    {
        "household_size",
        "allergies",
        "restrictions",
        "dislikes",
        "cuisine_preferences",
        "cookware",
        "appliances",
        "skill_level",
        "preferred_stores",
        "shopping_frequency",
        "budget_preference",
    }
)


class UserRepository(Protocol):
    """Persistence interface for users and profiles."""

    def get_by_external_id(self, external_id: str) -> UserRecord | None:
        """Return the user for an identity-provider id, if present."""

    def create_user(  # noqa: PLR0913
        self,
        external_id: str,
        email: str,
        first_name: str | None,
        last_name: str | None,
        image_url: str | None,
    ) -> UserRecord:
        """Create and return a new user record."""

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the user's profile, if one exists."""

    def upsert_profile(self, user_id: UUID, payload: dict[str, object]) -> UserProfile:
        """Create or update the user's profile and return it."""


@dataclass
class UserService:
    """Application service for user lifecycle and profile actions."""

    repository: UserRepository

    def ensure_user(  # noqa: PLR0913
        self,
        external_id: str,
        email: str = "",
        first_name: str | None = None,
        last_name: str | None = None,
        image_url: str | None = None,
    ) -> UserRecord:
        """Ensure a user exists for the identity-provider id and return it."""
        existing = self.repository.get_by_external_id(external_id)
        if existing:
            return existing
        return self.repository.create_user(
            external_id, email, first_name, last_name, image_url
        )

    def get_profile(self, user_id: UUID) -> UserProfile:
        """Return the stored profile or defaults for a new user."""
        return self.repository.get_profile(user_id) or UserProfile(user_id=user_id)

    def update_profile(self, user_id: UUID, changes: dict[str, object]) -> UserProfile:
        """Apply profile changes, ignoring unknown keys."""
        payload = {
            key: value for key, value in changes.items() if key in PROFILE_FIELDS
        }
        return self.repository.upsert_profile(user_id, payload)

    def complete_onboarding(self, user_id: UUID) -> UserProfile:
        """Mark onboarding as done."""
        return self.repository.upsert_profile(user_id, {"onboarding_completed": True})

    def is_onboarding_complete(self, user_id: UUID) -> bool:
        """Return True once the user has finished onboarding."""
        return self.get_profile(user_id).onboarding_completed
