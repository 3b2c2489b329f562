"""Inventory, pantry staple, and ingredient catalog endpoints."""

from datetime import UTC, datetime
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from hungry_owl.api.deps import current_user, get_container
from hungry_owl.api.schemas import (
    CustomIngredientCreate,
    InventoryAdd,
    InventoryUpdate,
    QuantityAdjust,
    StapleToggle,
    UsdaIngredientCreate,
)
from hungry_owl.containers import AppContainer
from hungry_owl.domain.inventory import InventoryItem
from hungry_owl.domain.models import UserRecord
from hungry_owl.services.freshness import format_relative_date

router = APIRouter(tags=["inventory"])


@router.get("/inventory")
def list_inventory(
    user: UserRecord = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return the user's inventory, soonest-expiring first."""
    now = datetime.now(tz=UTC)
    items = container.inventory_service.list_inventory(user.id, now=now)
    return {"items": [_item_payload(item, now) for item in items]}


@router.post("/inventory", status_code=status.HTTP_201_CREATED)
def add_inventory(
    body: InventoryAdd,
    user: UserRecord = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Add stock, merging with an existing row in the same location."""
    item = container.inventory_service.upsert(
        user.id,
        body.ingredient_id,
        body.quantity,
        body.unit,
        body.storage_location,
        body.expiration_date,
    )
    return _item_payload(item, datetime.now(tz=UTC))


@router.patch("/inventory/{item_id}")
def update_inventory(
    item_id: UUID,
    body: InventoryUpdate,
    user: UserRecord = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Edit an inventory row."""
    service = container.inventory_service
    item = service.update_item(
        user.id,
        item_id,
        quantity=body.quantity,
        unit=body.unit,
        expiration=body.expiration_date,
        clear_expiration=body.clear_expiration,
    )
    if body.storage_location is not None:
        item = service.move_item(user.id, item_id, body.storage_location)
    return _item_payload(item, datetime.now(tz=UTC))


@router.post("/inventory/{item_id}/adjust")
def adjust_inventory(
    item_id: UUID,
    body: QuantityAdjust,
    user: UserRecord = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Change an item's quantity; the item is removed when it runs out."""
    item = container.inventory_service.adjust_quantity(user.id, item_id, body.delta)
    if item is None:
        return {"deleted": True, "item": None}
    return {"deleted": False, "item": _item_payload(item, datetime.now(tz=UTC))}


@router.delete("/inventory/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_inventory(
    item_id: UUID,
    user: UserRecord = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> Response:
    """Remove an inventory row."""
    container.inventory_service.remove(user.id, item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/inventory/recommendations")
def recommendations(
    user: UserRecord = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Suggest staples the user is missing."""
    result = container.inventory_service.recommend_ingredients(user.id)
    return {
        "recommendations": result.recommendations,
        "is_well_stocked": result.is_well_stocked,
        "message": result.message,
    }


@router.get("/pantry-staples")
def list_staples(
    user: UserRecord = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return the user's pantry staples."""
    return {"staples": container.inventory_service.list_pantry_staples(user.id)}


@router.put("/pantry-staples/{ingredient_id}")
def toggle_staple(
    ingredient_id: UUID,
    body: StapleToggle,
    user: UserRecord = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Set whether a staple is in stock."""
    staple = container.inventory_service.toggle_pantry_staple(
        user.id, ingredient_id, body.in_stock
    )
    return {"staple": staple}


@router.get("/ingredients/search")
async def search_ingredients(
    q: str = "",
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Search the local catalog, topped up with USDA results."""
    results = await container.ingredient_service.search(q)
    return {
        "results": results,
        "local_count": sum(1 for result in results if result.source == "local"),
        "usda_count": sum(1 for result in results if result.source == "usda"),
    }


@router.post("/ingredients/usda", status_code=status.HTTP_201_CREATED)
def create_usda_ingredient(
    body: UsdaIngredientCreate,
    _user: UserRecord = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Import a USDA food into the catalog."""
    ingredient = container.ingredient_service.create_from_usda(
        body.name, body.category, body.common_units, body.emoji, body.fdc_id
    )
    return {"ingredient": ingredient}


@router.post("/ingredients/custom", status_code=status.HTTP_201_CREATED)
def create_custom_ingredient(
    body: CustomIngredientCreate,
    _user: UserRecord = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Create a user-defined catalog ingredient."""
    ingredient = container.ingredient_service.create_custom(
        body.name, body.category, body.emoji, body.description
    )
    return {"ingredient": ingredient}


def _item_payload(item: InventoryItem, now: datetime) -> dict[str, object]:
    return {
        "id": item.id,
        "ingredient_id": item.ingredient_id,
        "ingredient_name": item.ingredient_name,
        "quantity": item.quantity,
        "unit": item.unit,
        "storage_location": item.storage_location,
        "expiration_date": item.expiration_date,
        "status": item.status,
        "expires": (
            format_relative_date(item.expiration_date, now)
            if item.expiration_date
            else None
        ),
    }
