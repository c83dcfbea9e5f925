"""Cart Service — per-user cart with a single-canteen rule.

Invariants:
    - get_or_create_cart never returns None
    - Adding an item already in the cart increments its quantity
    - Items from a second canteen are rejected with MIXED_CANTEEN_CART
"""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from canteen.core.errors import BusinessRuleError, ResourceNotFoundError
from canteen.models import Cart, CartItem, MenuItem, User


async def _find_cart(db: AsyncSession, user: User) -> Cart | None:
    return (
        await db.execute(select(Cart).where(Cart.user_id == user.id))
    ).scalar_one_or_none()


async def _require_cart(db: AsyncSession, user: User) -> Cart:
    cart = await _find_cart(db, user)
    if cart is None:
        raise ResourceNotFoundError("Cart")
    return cart


def _find_line(cart: Cart, menu_item_id: UUID) -> CartItem | None:
    return next((i for i in cart.items if i.menu_item_id == menu_item_id), None)


async def get_or_create_cart(db: AsyncSession, user: User) -> Cart:
    cart = await _find_cart(db, user)
    if cart is None:
        cart = Cart(user_id=user.id, items=[])
        db.add(cart)
        await db.commit()
        await db.refresh(cart)
    return cart


async def add_item(
    db: AsyncSession, user: User, menu_item_id: UUID, quantity: int,
) -> Cart:
    menu_item = await db.get(MenuItem, menu_item_id)
    if menu_item is None:
        raise ResourceNotFoundError("Menu item", str(menu_item_id))
    if not menu_item.availability:
        raise BusinessRuleError(
            "This item is currently unavailable", "ITEM_UNAVAILABLE",
            {"itemId": str(menu_item_id)},
        )

    cart = await get_or_create_cart(db, user)
    if cart.items and cart.items[0].canteen_id != menu_item.canteen_id:
        raise BusinessRuleError(
            "Cannot add items from different canteens. Please clear your cart first.",
            "MIXED_CANTEEN_CART",
            {
                "cartCanteenId": str(cart.items[0].canteen_id),
                "itemCanteenId": str(menu_item.canteen_id),
            },
        )

    line = _find_line(cart, menu_item_id)
    if line is not None:
        line.quantity += quantity
    else:
        cart.items.append(CartItem(
            menu_item_id=menu_item.id,
            canteen_id=menu_item.canteen_id,
            name=menu_item.item_name,
            price=menu_item.price,
            quantity=quantity,
            image_url=menu_item.image_url,
        ))
    await db.commit()
    await db.refresh(cart)
    return cart


async def update_item(
    db: AsyncSession, user: User, menu_item_id: UUID, quantity: int,
) -> Cart:
    cart = await _require_cart(db, user)
    line = _find_line(cart, menu_item_id)
    if line is None:
        raise ResourceNotFoundError("Cart item", str(menu_item_id))
    line.quantity = quantity
    await db.commit()
    await db.refresh(cart)
    return cart


async def remove_item(db: AsyncSession, user: User, menu_item_id: UUID) -> Cart:
    cart = await _require_cart(db, user)
    line = _find_line(cart, menu_item_id)
    if line is not None:
        cart.items.remove(line)
        await db.commit()
        await db.refresh(cart)
    return cart


async def clear_cart(db: AsyncSession, user: User) -> Cart:
    cart = await _require_cart(db, user)
    cart.items.clear()
    await db.commit()
    await db.refresh(cart)
    return cart
