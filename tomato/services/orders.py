"""
Order Service

Two ways an order is created:
    - place_order: direct placement, payment stays False
    - verify_and_place_order: only after the Razorpay signature matches,
      payment is True

Both clear the user's cart afterwards. The order insert and the cart reset
are separate commits; a failure between them leaves the cart untouched.
"""

import logging
import time
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tomato.core.config import Settings
from tomato.core.exceptions import PaymentSignatureError, ValidationError
from tomato.models import Order
from tomato.schemas import OrderItem, PlaceOrderRequest, RazorpayOrderRequest, RazorpayVerifyRequest
from tomato.services.cart import clear_cart, get_user_or_404
from tomato.services.payment import BasePaymentGateway, GatewayOrder

logger = logging.getLogger(__name__)


def _items_json(items: list[OrderItem]) -> list[dict[str, Any]]:
    return [item.model_dump() for item in items]


async def _save_order(
    db: AsyncSession,
    user_id: int,
    items: list[OrderItem],
    amount: float,
    address: dict[str, Any],
    payment: bool = False,
    razorpay_order_id: str | None = None,
    razorpay_payment_id: str | None = None,
) -> Order:
    order = Order(
        user_id=user_id,
        items=_items_json(items),
        amount=amount,
        address=address,
        payment=payment,
        razorpay_order_id=razorpay_order_id,
        razorpay_payment_id=razorpay_payment_id,
    )
    db.add(order)
    await db.commit()
    await db.refresh(order)
    return order


async def place_order(db: AsyncSession, user_id: int, payload: PlaceOrderRequest) -> Order:
    """
    Persist an unpaid order for the user and empty their cart.

    Raises:
        NotFoundError: The token's user no longer exists
    """
    await get_user_or_404(db, user_id)

    order = await _save_order(db, user_id, payload.items, payload.amount, payload.address)
    await clear_cart(db, user_id)

    logger.info(f"Order #{order.id} placed by user #{user_id} (unpaid)")
    return order


async def create_gateway_order(
    gateway: BasePaymentGateway,
    payload: RazorpayOrderRequest,
    settings: Settings,
) -> GatewayOrder:
    """
    Create the Razorpay order the client will pay against.

    Raises:
        ValidationError: Amount missing or not positive
        UpstreamError: Gateway call failed
    """
    if payload.amount is None:
        raise ValidationError("Amount is required")
    if payload.amount <= 0:
        raise ValidationError("Amount must be greater than 0")

    currency = (payload.currency or settings.razorpay_currency).upper()
    receipt = f"receipt_order_{int(time.time() * 1000)}"

    return await gateway.create_order(payload.amount, currency, receipt)


async def verify_and_place_order(
    db: AsyncSession,
    gateway: BasePaymentGateway,
    user_id: int,
    payload: RazorpayVerifyRequest,
) -> Order:
    """
    Verify the payment signature, then persist a paid order and empty the cart.

    Nothing is written unless the signature matches.

    Raises:
        ValidationError: A gateway field is missing
        PaymentSignatureError: Signature does not match
    """
    order_id = payload.razorpay_order_id
    payment_id = payload.razorpay_payment_id
    signature = payload.razorpay_signature

    if not order_id or not payment_id or not signature:
        raise ValidationError(
            "razorpay_order_id, razorpay_payment_id and razorpay_signature are required"
        )

    if not gateway.verify_payment_signature(order_id, payment_id, signature):
        raise PaymentSignatureError()

    await get_user_or_404(db, user_id)

    order = await _save_order(
        db,
        user_id,
        payload.items,
        payload.amount,
        payload.address,
        payment=True,
        razorpay_order_id=order_id,
        razorpay_payment_id=payment_id,
    )
    await clear_cart(db, user_id)

    logger.info(f"Order #{order.id} placed by user #{user_id} (paid, {payment_id})")
    return order


async def list_user_orders(db: AsyncSession, user_id: int) -> list[Order]:
    """All orders of a user, newest first."""
    result = await db.execute(
        select(Order)
        .where(Order.user_id == user_id)
        .order_by(Order.created_at.desc(), Order.id.desc())
    )
    return list(result.scalars().all())
