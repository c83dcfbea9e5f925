"""Cart Routes — the caller's own cart (user tokens only)."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from canteen.api.deps import require_user
from canteen.infrastructure.database import get_db
from canteen.models import Cart, User
from canteen.schemas.cart import CartItemAdd, CartItemUpdate, CartResponse, CartResult
from canteen.services import cart as cart_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/cart", tags=["cart"])


def _result(message: str, cart: Cart) -> CartResult:
    return CartResult(message=message, cart=CartResponse.model_validate(cart))


@router.get("/", response_model=CartResult)
async def get_cart(
    db: AsyncSession = Depends(get_db), user: User = Depends(require_user),
):
    cart = await cart_service.get_or_create_cart(db, user)
    return _result("Cart retrieved successfully", cart)


@router.post("/add", response_model=CartResult)
async def add_to_cart(
    body: CartItemAdd,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_user),
):
    cart = await cart_service.add_item(db, user, body.item_id, body.quantity)
    return _result("Item added to cart successfully", cart)


@router.put("/update", response_model=CartResult)
async def update_cart_item(
    body: CartItemUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_user),
):
    cart = await cart_service.update_item(db, user, body.item_id, body.quantity)
    return _result("Cart item updated successfully", cart)


@router.delete("/remove/{item_id}", response_model=CartResult)
async def remove_cart_item(
    item_id: UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_user),
):
    cart = await cart_service.remove_item(db, user, item_id)
    return _result("Item removed from cart successfully", cart)


@router.delete("/clear", response_model=CartResult)
async def clear_cart(
    db: AsyncSession = Depends(get_db), user: User = Depends(require_user),
):
    cart = await cart_service.clear_cart(db, user)
    return _result("Cart cleared successfully", cart)
