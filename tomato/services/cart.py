"""
Cart Service

The cart lives on the user row as a mapping of item key to quantity.
JSON columns only notice reassignment, so every change builds a new dict.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from tomato.core.exceptions import NotFoundError
from tomato.models import User

logger = logging.getLogger(__name__)


async def get_user_or_404(db: AsyncSession, user_id: int) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


async def get_cart(db: AsyncSession, user_id: int) -> dict[str, int]:
    user = await get_user_or_404(db, user_id)
    return dict(user.cart_data or {})


async def add_to_cart(db: AsyncSession, user_id: int, item_id: str) -> dict[str, int]:
    """Increase the quantity of an item by one."""
    user = await get_user_or_404(db, user_id)
    cart = dict(user.cart_data or {})
    cart[item_id] = cart.get(item_id, 0) + 1
    user.cart_data = cart
    await db.commit()
    return cart


async def remove_from_cart(db: AsyncSession, user_id: int, item_id: str) -> dict[str, int]:
    """Decrease the quantity of an item by one, dropping it at zero."""
    user = await get_user_or_404(db, user_id)
    cart = dict(user.cart_data or {})
    quantity = cart.get(item_id, 0)
    if quantity <= 0:
        return cart

    if quantity == 1:
        del cart[item_id]
    else:
        cart[item_id] = quantity - 1
    user.cart_data = cart
    await db.commit()
    return cart


async def clear_cart(db: AsyncSession, user_id: int) -> None:
    """Reset the cart to empty. A missing user is logged, not raised."""
    user = await db.get(User, user_id)
    if user is None:
        logger.warning(f"Cannot clear cart: user #{user_id} not found")
        return
    user.cart_data = {}
    await db.commit()
