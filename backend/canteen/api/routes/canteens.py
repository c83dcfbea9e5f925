"""Canteen Routes — public catalog reads, admin writes, staff availability.

Invariants:
    - Create/update accept multipart forms with an optional image
    - Delete cascades through the catalog service; image failures yield 207
    - Staff may toggle availability of their own canteen only
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from canteen.api.deps import get_image_storage, require_admin, require_canteen_staff
from canteen.core.errors import PermissionDeniedError
from canteen.infrastructure.database import get_db
from canteen.infrastructure.image_storage import ImageStorage
from canteen.models import Admin, Canteen, CanteenStaff
from canteen.schemas.catalog import CanteenDeletionSummary, CanteenResponse
from canteen.schemas.common import AvailabilityUpdate
from canteen.services import catalog
from canteen.services.lookups import get_or_404

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/canteens", tags=["canteens"])


@router.get("/", response_model=list[CanteenResponse])
async def list_canteens(db: AsyncSession = Depends(get_db)):
    rows = (await db.execute(select(Canteen).order_by(Canteen.name))).scalars().all()
    return [CanteenResponse.model_validate(c) for c in rows]


@router.get("/{canteen_id}", response_model=CanteenResponse)
async def get_canteen(canteen_id: UUID, db: AsyncSession = Depends(get_db)):
    return CanteenResponse.model_validate(
        await get_or_404(db, Canteen, canteen_id, "Canteen"),
    )


@router.post(
    "/", response_model=CanteenResponse, status_code=status.HTTP_201_CREATED,
)
async def create_canteen(
    name: str = Form(..., min_length=1, max_length=100),
    location: str = Form(..., min_length=1, max_length=255),
    contact_number: str | None = Form(None, alias="contactNumber"),
    availability: bool = Form(True),
    opening_time: str | None = Form(None, alias="openingTime"),
    closing_time: str | None = Form(None, alias="closingTime"),
    description: str | None = Form(None),
    image: UploadFile | None = File(None),
    db: AsyncSession = Depends(get_db),
    storage: ImageStorage = Depends(get_image_storage),
    _: Admin = Depends(require_admin),
):
    canteen = await catalog.create_canteen(db, storage, {
        "name": name, "location": location, "contact_number": contact_number,
        "availability": availability, "opening_time": opening_time,
        "closing_time": closing_time, "description": description,
    }, image)
    return CanteenResponse.model_validate(canteen)


@router.put("/{canteen_id}", response_model=CanteenResponse)
async def update_canteen(
    canteen_id: UUID,
    name: str | None = Form(None, min_length=1, max_length=100),
    location: str | None = Form(None, min_length=1, max_length=255),
    contact_number: str | None = Form(None, alias="contactNumber"),
    availability: bool | None = Form(None),
    opening_time: str | None = Form(None, alias="openingTime"),
    closing_time: str | None = Form(None, alias="closingTime"),
    description: str | None = Form(None),
    image: UploadFile | None = File(None),
    db: AsyncSession = Depends(get_db),
    storage: ImageStorage = Depends(get_image_storage),
    _: Admin = Depends(require_admin),
):
    canteen = await get_or_404(db, Canteen, canteen_id, "Canteen")
    canteen = await catalog.update_canteen(db, storage, canteen, {
        "name": name, "location": location, "contact_number": contact_number,
        "availability": availability, "opening_time": opening_time,
        "closing_time": closing_time, "description": description,
    }, image)
    return CanteenResponse.model_validate(canteen)


@router.delete("/{canteen_id}", response_model=CanteenDeletionSummary)
async def delete_canteen(
    canteen_id: UUID,
    db: AsyncSession = Depends(get_db),
    storage: ImageStorage = Depends(get_image_storage),
    _: Admin = Depends(require_admin),
):
    canteen = await get_or_404(db, Canteen, canteen_id, "Canteen")
    summary = CanteenDeletionSummary(**await catalog.delete_canteen(db, storage, canteen))
    return JSONResponse(
        status_code=(
            status.HTTP_207_MULTI_STATUS if summary.image_errors
            else status.HTTP_200_OK
        ),
        content=summary.model_dump(mode="json", by_alias=True),
    )


@router.patch("/{canteen_id}/availability", response_model=CanteenResponse)
async def update_canteen_availability(
    canteen_id: UUID,
    body: AvailabilityUpdate,
    db: AsyncSession = Depends(get_db),
    staff: CanteenStaff = Depends(require_canteen_staff),
):
    if staff.canteen_id != canteen_id:
        raise PermissionDeniedError("You can only update your own canteen")
    canteen = await get_or_404(db, Canteen, canteen_id, "Canteen")
    canteen.availability = body.availability
    await db.commit()
    await db.refresh(canteen)
    logger.info(
        f"Canteen is now {'available' if canteen.availability else 'unavailable'}",
        extra={"canteen_id": str(canteen.id)},
    )
    return CanteenResponse.model_validate(canteen)
