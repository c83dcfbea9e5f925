"""Catalog Schemas — canteens and menu items.

Canteen and menu create/update arrive as multipart forms (optional image),
so only their responses and the JSON batch payload are modeled here.
"""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from canteen.schemas.common import CamelModel, CanteenSummary


class CanteenResponse(CamelModel):
    id: UUID
    name: str
    location: str
    contact_number: str | None = None
    availability: bool
    opening_time: str | None = None
    closing_time: str | None = None
    image: str | None = Field(None, validation_alias="image_url")
    description: str | None = None
    average_rating: float = 0.0
    total_ratings: int = 0
    food_quality: float = 0.0
    service_speed: float = 0.0
    app_experience: float = 0.0
    created_at: datetime | None = None


class CanteenDeletionSummary(CamelModel):
    message: str
    canteen_id: UUID
    staff_deleted: int
    menu_items_deleted: int
    images_deleted: int
    image_errors: list[str] = []


class MenuItemCreate(CamelModel):
    """One entry of a batch create."""
    item_name: str = Field(min_length=1, max_length=100)
    canteen_id: UUID
    category: str = Field(min_length=1, max_length=50)
    price: float = Field(ge=0)
    description: str | None = None
    availability: bool = True
    preparation_time: int = Field(10, ge=0)
    is_vegetarian: bool = True


class MenuItemResponse(CamelModel):
    id: UUID
    item_code: str
    item_name: str
    canteen_id: UUID
    availability: bool
    category: str
    price: float
    description: str | None = None
    image: str | None = Field(None, validation_alias="image_url")
    preparation_time: int = 10
    is_vegetarian: bool = True
    canteen: CanteenSummary | None = None


class BatchItemError(CamelModel):
    index: int
    item_name: str | None = None
    error: str


class MenuBatchResponse(CamelModel):
    message: str
    items: list[MenuItemResponse]
    errors: list[BatchItemError] = []
