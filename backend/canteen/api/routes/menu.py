"""Menu Routes — public browsing, admin/staff item management.

Invariants:
    - Staff-created items always belong to the staff member's canteen
    - Staff may update, toggle or delete only their own canteen's items
    - Batch create reports per-entry errors instead of failing the request
"""

import logging
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Body, Depends, File, Form, UploadFile, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from canteen.api.deps import (
    Principal, get_image_storage, require_admin, require_admin_or_staff,
    require_canteen_staff,
)
from canteen.core.errors import PermissionDeniedError
from canteen.infrastructure.database import get_db
from canteen.infrastructure.image_storage import ImageStorage
from canteen.models import Admin, Canteen, CanteenStaff, MenuItem
from canteen.schemas.catalog import MenuBatchResponse, MenuItemResponse
from canteen.schemas.common import AvailabilityUpdate, MessageResponse
from canteen.services import catalog
from canteen.services.lookups import get_or_404

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/menu", tags=["menu"])


def _check_own_item(principal: Principal, item: MenuItem, action: str) -> None:
    if not principal.is_admin and principal.account.canteen_id != item.canteen_id:
        raise PermissionDeniedError(
            f"Access denied. You can only {action} menu items from your own canteen.",
        )


@router.get("/", response_model=list[MenuItemResponse])
async def list_menu(db: AsyncSession = Depends(get_db)):
    rows = (
        await db.execute(select(MenuItem).order_by(MenuItem.item_name))
    ).scalars().all()
    return [MenuItemResponse.model_validate(m) for m in rows]


@router.get("/canteen/{canteen_id}", response_model=list[MenuItemResponse])
async def list_canteen_menu(canteen_id: UUID, db: AsyncSession = Depends(get_db)):
    rows = (
        await db.execute(
            select(MenuItem)
            .where(MenuItem.canteen_id == canteen_id)
            .order_by(MenuItem.category, MenuItem.item_name),
        )
    ).scalars().all()
    return [MenuItemResponse.model_validate(m) for m in rows]


@router.get("/{item_id}", response_model=MenuItemResponse)
async def get_menu_item(item_id: UUID, db: AsyncSession = Depends(get_db)):
    return MenuItemResponse.model_validate(
        await get_or_404(db, MenuItem, item_id, "Menu item"),
    )


async def _create(
    db: AsyncSession, storage: ImageStorage, canteen_id: UUID,
    fields: dict[str, Any], image: UploadFile | None,
) -> MenuItemResponse:
    await get_or_404(db, Canteen, canteen_id, "Canteen")
    item = await catalog.create_menu_item(
        db, storage, {**fields, "canteen_id": canteen_id}, image,
    )
    return MenuItemResponse.model_validate(item)


@router.post(
    "/", response_model=MenuItemResponse, status_code=status.HTTP_201_CREATED,
)
async def create_menu_item(
    item_name: str = Form(..., alias="itemName", min_length=1, max_length=100),
    canteen_id: UUID = Form(..., alias="canteenId"),
    category: str = Form(..., min_length=1, max_length=50),
    price: float = Form(..., ge=0),
    description: str | None = Form(None),
    availability: bool = Form(True),
    preparation_time: int = Form(10, alias="preparationTime", ge=0),
    is_vegetarian: bool = Form(True, alias="isVegetarian"),
    image: UploadFile | None = File(None),
    db: AsyncSession = Depends(get_db),
    storage: ImageStorage = Depends(get_image_storage),
    _: Admin = Depends(require_admin),
):
    return await _create(db, storage, canteen_id, {
        "item_name": item_name, "category": category, "price": price,
        "description": description, "availability": availability,
        "preparation_time": preparation_time, "is_vegetarian": is_vegetarian,
    }, image)


@router.post(
    "/canteen-staff", response_model=MenuItemResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_staff_menu_item(
    item_name: str = Form(..., alias="itemName", min_length=1, max_length=100),
    category: str = Form(..., min_length=1, max_length=50),
    price: float = Form(..., ge=0),
    description: str | None = Form(None),
    availability: bool = Form(True),
    preparation_time: int = Form(10, alias="preparationTime", ge=0),
    is_vegetarian: bool = Form(True, alias="isVegetarian"),
    image: UploadFile | None = File(None),
    db: AsyncSession = Depends(get_db),
    storage: ImageStorage = Depends(get_image_storage),
    staff: CanteenStaff = Depends(require_canteen_staff),
):
    """Staff variant: canteen is always the caller's own."""
    return await _create(db, storage, staff.canteen_id, {
        "item_name": item_name, "category": category, "price": price,
        "description": description, "availability": availability,
        "preparation_time": preparation_time, "is_vegetarian": is_vegetarian,
    }, image)


@router.post(
    "/batch", response_model=MenuBatchResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_menu_batch(
    menu_items: list[dict[str, Any]] = Body(..., alias="menuItems", embed=True),
    db: AsyncSession = Depends(get_db),
    _: Admin = Depends(require_admin),
):
    created, errors = await catalog.create_menu_batch(db, menu_items)
    suffix = f" with {len(errors)} errors" if errors else ""
    return MenuBatchResponse(
        message=f"Created {len(created)} menu items successfully{suffix}",
        items=[MenuItemResponse.model_validate(m) for m in created],
        errors=errors,
    )


@router.put("/{item_id}", response_model=MenuItemResponse)
async def update_menu_item(
    item_id: UUID,
    item_name: str | None = Form(None, alias="itemName", min_length=1, max_length=100),
    category: str | None = Form(None, min_length=1, max_length=50),
    price: float | None = Form(None, ge=0),
    description: str | None = Form(None),
    availability: bool | None = Form(None),
    preparation_time: int | None = Form(None, alias="preparationTime", ge=0),
    is_vegetarian: bool | None = Form(None, alias="isVegetarian"),
    image: UploadFile | None = File(None),
    db: AsyncSession = Depends(get_db),
    storage: ImageStorage = Depends(get_image_storage),
    principal: Principal = Depends(require_admin_or_staff),
):
    item = await get_or_404(db, MenuItem, item_id, "Menu item")
    _check_own_item(principal, item, "update")
    item = await catalog.update_menu_item(db, storage, item, {
        "item_name": item_name, "category": category, "price": price,
        "description": description, "availability": availability,
        "preparation_time": preparation_time, "is_vegetarian": is_vegetarian,
    }, image)
    return MenuItemResponse.model_validate(item)


@router.patch("/{item_id}/availability", response_model=MenuItemResponse)
async def update_menu_availability(
    item_id: UUID,
    body: AvailabilityUpdate,
    db: AsyncSession = Depends(get_db),
    staff: CanteenStaff = Depends(require_canteen_staff),
):
    item = await get_or_404(db, MenuItem, item_id, "Menu item")
    if staff.canteen_id != item.canteen_id:
        raise PermissionDeniedError(
            "Access denied. You can only update menu items from your own canteen.",
        )
    item.availability = body.availability
    await db.commit()
    await db.refresh(item)
    return MenuItemResponse.model_validate(item)


@router.delete("/{item_id}", response_model=MessageResponse)
async def delete_menu_item(
    item_id: UUID,
    db: AsyncSession = Depends(get_db),
    storage: ImageStorage = Depends(get_image_storage),
    principal: Principal = Depends(require_admin_or_staff),
):
    item = await get_or_404(db, MenuItem, item_id, "Menu item")
    _check_own_item(principal, item, "delete")
    await catalog.delete_menu_item(db, storage, item)
    return MessageResponse(message="Menu item deleted successfully")
