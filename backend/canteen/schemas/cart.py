"""Cart Schemas — add/update requests and the cart view with subtotal."""

from uuid import UUID

from pydantic import Field

from canteen.schemas.common import CamelModel


class CartItemAdd(CamelModel):
    item_id: UUID
    quantity: int = Field(1, ge=1)


class CartItemUpdate(CamelModel):
    item_id: UUID
    quantity: int = Field(ge=1)


class CartItemResponse(CamelModel):
    item_id: UUID = Field(validation_alias="menu_item_id")
    canteen_id: UUID
    name: str
    price: float
    quantity: int
    image: str | None = Field(None, validation_alias="image_url")


class CartResponse(CamelModel):
    id: UUID
    user_id: UUID
    items: list[CartItemResponse] = []
    subtotal: float = 0.0


class CartResult(CamelModel):
    message: str
    cart: CartResponse
