"""Catalog Service — canteen and menu writes that touch hosted images.

Invariants:
    - A row's image_public_id always names the image currently in storage
    - Replacing an image uploads (and validates) the new one first; the old
      image is deleted only after that succeeds
    - Canteen deletion removes staff, menu items, their images and the canteen;
      image deletion failures are collected, never abort the cascade
    - Batch menu creation validates each entry independently

Design Decisions:
    - Image storage passed in (not imported) so routes inject it via Depends
"""

import logging
from typing import Any

from fastapi import UploadFile
from pydantic import ValidationError
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from canteen.core.domain_types import ImageFolder
from canteen.core.errors import ImageStorageError
from canteen.infrastructure.image_storage import ImageStorage
from canteen.models import Canteen, CanteenStaff, MenuItem
from canteen.schemas.catalog import BatchItemError, MenuItemCreate

logger = logging.getLogger(__name__)


def _apply(row, fields: dict[str, Any]) -> None:
    for name, value in fields.items():
        if value is not None:
            setattr(row, name, value)


async def _replace_image(
    storage: ImageStorage, row, upload: UploadFile, folder: ImageFolder,
) -> None:
    """Upload a new image for row, then drop the previous one."""
    stored = await storage.upload(upload, folder)
    previous = row.image_public_id
    row.image_url = stored.url
    row.image_public_id = stored.public_id
    if previous:
        try:
            await storage.delete(previous)
        except ImageStorageError as e:
            logger.warning(f"Old image {previous} not deleted: {e.message}")


# ─── Canteens ───────────────────────────────────────────────────

async def create_canteen(
    db: AsyncSession, storage: ImageStorage,
    fields: dict[str, Any], image: UploadFile | None,
) -> Canteen:
    canteen = Canteen(**{k: v for k, v in fields.items() if v is not None})
    if image is not None:
        await _replace_image(storage, canteen, image, ImageFolder.CANTEENS)
    db.add(canteen)
    await db.commit()
    await db.refresh(canteen)
    logger.info("Canteen created", extra={"canteen_id": str(canteen.id)})
    return canteen


async def update_canteen(
    db: AsyncSession, storage: ImageStorage, canteen: Canteen,
    fields: dict[str, Any], image: UploadFile | None,
) -> Canteen:
    _apply(canteen, fields)
    if image is not None:
        await _replace_image(storage, canteen, image, ImageFolder.CANTEENS)
    await db.commit()
    await db.refresh(canteen)
    return canteen


async def delete_canteen(
    db: AsyncSession, storage: ImageStorage, canteen: Canteen,
) -> dict[str, Any]:
    """Cascade-delete a canteen; returns counts plus any image errors."""
    image_errors: list[str] = []
    images_deleted = 0

    async def _drop_image(public_id: str | None) -> None:
        nonlocal images_deleted
        if not public_id:
            return
        try:
            await storage.delete(public_id)
            images_deleted += 1
        except ImageStorageError as e:
            image_errors.append(f"{public_id}: {e.message}")

    items = (
        await db.execute(select(MenuItem).where(MenuItem.canteen_id == canteen.id))
    ).scalars().all()
    for item in items:
        await _drop_image(item.image_public_id)
    await _drop_image(canteen.image_public_id)

    staff = await db.execute(
        delete(CanteenStaff).where(CanteenStaff.canteen_id == canteen.id),
    )
    menu = await db.execute(
        delete(MenuItem).where(MenuItem.canteen_id == canteen.id),
    )
    canteen_id = canteen.id
    await db.delete(canteen)
    await db.commit()

    if image_errors:
        logger.warning(
            f"Canteen deleted with {len(image_errors)} image errors",
            extra={"canteen_id": str(canteen_id)},
        )
    return {
        "message": (
            "Canteen deleted with some errors" if image_errors
            else "Canteen and all associated data deleted successfully"
        ),
        "canteen_id": canteen_id,
        "staff_deleted": staff.rowcount,
        "menu_items_deleted": menu.rowcount,
        "images_deleted": images_deleted,
        "image_errors": image_errors,
    }


# ─── Menu items ─────────────────────────────────────────────────

async def create_menu_item(
    db: AsyncSession, storage: ImageStorage,
    fields: dict[str, Any], image: UploadFile | None,
) -> MenuItem:
    item = MenuItem(**{k: v for k, v in fields.items() if v is not None})
    if image is not None:
        await _replace_image(storage, item, image, ImageFolder.MENU)
    db.add(item)
    await db.commit()
    await db.refresh(item)
    return item


async def update_menu_item(
    db: AsyncSession, storage: ImageStorage, item: MenuItem,
    fields: dict[str, Any], image: UploadFile | None,
) -> MenuItem:
    _apply(item, fields)
    if image is not None:
        await _replace_image(storage, item, image, ImageFolder.MENU)
    await db.commit()
    await db.refresh(item)
    return item


async def delete_menu_item(
    db: AsyncSession, storage: ImageStorage, item: MenuItem,
) -> None:
    if item.image_public_id:
        try:
            await storage.delete(item.image_public_id)
        except ImageStorageError as e:
            logger.warning(f"Menu image {item.image_public_id} not deleted: {e.message}")
    await db.delete(item)
    await db.commit()


async def create_menu_batch(
    db: AsyncSession, entries: list[dict[str, Any]],
) -> tuple[list[MenuItem], list[BatchItemError]]:
    """Create every valid entry; invalid ones are reported, not raised."""
    created: list[MenuItem] = []
    errors: list[BatchItemError] = []
    known_canteens: set = set()

    for index, entry in enumerate(entries):
        name = entry.get("itemName") if isinstance(entry, dict) else None
        try:
            data = MenuItemCreate.model_validate(entry)
        except ValidationError as e:
            fields = ", ".join(
                ".".join(str(loc) for loc in err["loc"]) for err in e.errors()
            )
            errors.append(BatchItemError(
                index=index, item_name=name,
                error=f"Missing or invalid fields: {fields}",
            ))
            continue
        if data.canteen_id not in known_canteens:
            if await db.get(Canteen, data.canteen_id) is None:
                errors.append(BatchItemError(
                    index=index, item_name=data.item_name,
                    error="Canteen not found",
                ))
                continue
            known_canteens.add(data.canteen_id)
        item = MenuItem(**data.model_dump())
        db.add(item)
        created.append(item)

    await db.commit()
    for item in created:
        await db.refresh(item)
    return created, errors
