"""Supabase-backed user and profile repository."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from hungry_owl.domain.models import SkillLevel, UserProfile, UserRecord
from hungry_owl.services.users import UserRepository


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase implementation for user persistence."""

    client: Client

    def get_by_external_id(self, external_id: str) -> UserRecord | None:
        """Return the user for an identity-provider id, if present."""
        response = (
            self.client.table("users")
            .select("id, external_id, email")
            .eq("external_id", external_id)
            .limit(1)
            .execute()
        )
        if response.data:
            return _parse_user(response.data[0])
        return None

    def create_user(  # noqa: PLR0913
        self,
        external_id: str,
        email: str,
        first_name: str | None,
        last_name: str | None,
        image_url: str | None,
    ) -> UserRecord:
        """Create a new user row and return it."""
        response = (
            self.client.table("users")
            .insert(
                {
                    "external_id": external_id,
                    "email": email,
                    "first_name": first_name,
                    "last_name": last_name,
                    "image_url": image_url,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create user in Supabase")
        return _parse_user(response.data[0])

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the profile row for a user, if present."""
        response = (
            self.client.table("user_profiles")
            .select("*")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_profile(response.data[0])

    def upsert_profile(self, user_id: UUID, payload: dict[str, object]) -> UserProfile:
        """Create or update the profile row for a user."""
        row = {
            key: value.value if isinstance(value, SkillLevel) else value
            for key, value in payload.items()
        }
        response = (
            self.client.table("user_profiles")
            .upsert({"user_id": str(user_id), **row}, on_conflict="user_id")
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save user profile")
        return _parse_profile(response.data[0])


def _parse_user(row: dict[str, object]) -> UserRecord:
    return UserRecord(
        id=UUID(str(row["id"])),
        external_id=str(row["external_id"]),
        email=str(row.get("email") or ""),
    )


def _parse_profile(row: dict[str, object]) -> UserProfile:
    """Parse a profile row into a domain model."""
    return UserProfile(
        user_id=UUID(str(row["user_id"])),
        household_size=int(row.get("household_size") or 1),
        allergies=list(row.get("allergies") or []),
        restrictions=list(row.get("restrictions") or []),
        dislikes=list(row.get("dislikes") or []),
        cuisine_preferences=dict(row.get("cuisine_preferences") or {}),
        cookware=list(row.get("cookware") or []),
        appliances=list(row.get("appliances") or []),
        skill_level=SkillLevel(row.get("skill_level") or SkillLevel.BEGINNER),
        preferred_stores=list(row.get("preferred_stores") or []),
        shopping_frequency=row.get("shopping_frequency"),
        budget_preference=row.get("budget_preference"),
        onboarding_completed=bool(row.get("onboarding_completed", False)),
    )
