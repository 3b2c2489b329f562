"""Current-user profile endpoints."""

from fastapi import APIRouter, Depends

from hungry_owl.api.deps import current_user, get_container
from hungry_owl.api.schemas import ProfileUpdate
from hungry_owl.containers import AppContainer
from hungry_owl.domain.models import UserRecord

router = APIRouter(prefix="/me", tags=["users"])


@router.get("")
def get_me(
    user: UserRecord = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return the user and their profile."""
    return {"user": user, "profile": container.user_service.get_profile(user.id)}


@router.patch("/profile")
def update_profile(
    body: ProfileUpdate,
    user: UserRecord = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Update onboarding and preference fields."""
    profile = container.user_service.update_profile(
        user.id, body.model_dump(mode="json", exclude_unset=True)
    )
    return {"profile": profile}


@router.post("/onboarding")
def complete_onboarding(
    user: UserRecord = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Mark onboarding as finished."""
    return {"profile": container.user_service.complete_onboarding(user.id)}
