"""Shopping list endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from hungry_owl.api.deps import current_user, get_container
from hungry_owl.api.schemas import ShoppingItemCreate, ShoppingListCreate
from hungry_owl.containers import AppContainer
from hungry_owl.domain.models import UserRecord
from hungry_owl.domain.recipes import GeneratedRecipe

router = APIRouter(prefix="/shopping-lists", tags=["shopping"])


@router.get("")
def list_lists(
    user: UserRecord = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return every list the user owns."""
    return {"lists": container.shopping_service.list_lists(user.id)}


@router.get("/active")
def active_list(
    user: UserRecord = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return the active list, or null when there is none."""
    return {"list": container.shopping_service.get_active_list(user.id)}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_list(
    body: ShoppingListCreate,
    user: UserRecord = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Start a new active list."""
    return {"list": container.shopping_service.create_list(user.id, body.name)}


@router.post("/from-recipe")
def add_from_recipe(
    recipe: GeneratedRecipe,
    user: UserRecord = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Put a recipe's missing ingredients on the active list."""
    return {
        "list": container.shopping_service.add_missing_ingredients(user.id, recipe)
    }


@router.post("/{list_id}/items", status_code=status.HTTP_201_CREATED)
def add_item(
    list_id: UUID,
    body: ShoppingItemCreate,
    user: UserRecord = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Append an item to a list."""
    shopping_list = container.shopping_service.add_item(
        user.id,
        list_id,
        body.name,
        body.quantity,
        body.unit,
        category=body.category,
        recipe_id=body.recipe_id,
        ingredient_id=body.ingredient_id,
        emoji=body.emoji,
    )
    return {"list": shopping_list}


@router.post("/{list_id}/items/{item_id}/toggle")
def toggle_item(
    list_id: UUID,
    item_id: UUID,
    user: UserRecord = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Flip an item's checked flag."""
    return {
        "list": container.shopping_service.toggle_item(user.id, list_id, item_id)
    }


@router.delete("/{list_id}/items/{item_id}")
def remove_item(
    list_id: UUID,
    item_id: UUID,
    user: UserRecord = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Drop an item from a list."""
    return {
        "list": container.shopping_service.remove_item(user.id, list_id, item_id)
    }


@router.post("/{list_id}/clear-checked")
def clear_checked(
    list_id: UUID,
    user: UserRecord = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Drop every checked item."""
    return {"list": container.shopping_service.clear_checked(user.id, list_id)}


@router.post("/{list_id}/items/{item_id}/purchased")
def mark_purchased(
    list_id: UUID,
    item_id: UUID,
    user: UserRecord = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Move a bought item into the fridge."""
    item = container.shopping_service.mark_purchased(user.id, list_id, item_id)
    return {"item": item}
