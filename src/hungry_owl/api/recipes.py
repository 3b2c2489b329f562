"""Recipe generation and saved recipe endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from hungry_owl.api.deps import current_user, get_container
from hungry_owl.api.schemas import GenerateRequest
from hungry_owl.containers import AppContainer
from hungry_owl.domain.models import UserRecord
from hungry_owl.domain.recipes import GeneratedRecipe

router = APIRouter(prefix="/recipes", tags=["recipes"])


@router.post("/generate")
async def generate_recipes(
    body: GenerateRequest,
    user: UserRecord = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Generate recipes ranked by how much of them the user can already make."""
    recipes = await container.recipe_service.generate(user.id, body.to_options())
    return {
        "recipes": [
            recipe.model_dump(mode="json", by_alias=True) for recipe in recipes
        ]
    }


@router.get("/saved")
def list_saved(
    user: UserRecord = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return the user's saved recipes."""
    saved = container.recipe_service.list_saved_recipes(user.id)
    return {
        "recipes": [
            {
                "id": entry.id,
                "name": entry.name,
                "saved_at": entry.saved_at,
                "recipe": entry.recipe.model_dump(mode="json", by_alias=True),
            }
            for entry in saved
        ]
    }


@router.post("/saved", status_code=status.HTTP_201_CREATED)
def save_recipe(
    recipe: GeneratedRecipe,
    user: UserRecord = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Save a generated recipe."""
    saved = container.recipe_service.save_recipe(user.id, recipe)
    return {"id": saved.id, "name": saved.name, "saved_at": saved.saved_at}


@router.post("/saved/{recipe_id}/cooked")
def mark_cooked(
    recipe_id: UUID,
    user: UserRecord = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, str]:
    """Record that the user cooked a saved recipe."""
    container.recipe_service.record_cooked(user.id, recipe_id)
    return {"status": "ok"}
