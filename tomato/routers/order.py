"""Orders API router. Every route requires authentication."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from tomato.core.config import Settings
from tomato.dependencies import get_current_user_id, get_db, get_payment_gateway, get_settings
from tomato.schemas import (
    ErrorResponse,
    MessageResponse,
    OrderOut,
    PlaceOrderRequest,
    PlaceOrderResponse,
    RazorpayOrderRequest,
    RazorpayOrderResponse,
    RazorpayVerifyRequest,
    UserOrdersResponse,
)
from tomato.services import orders
from tomato.services.payment import BasePaymentGateway

router = APIRouter(
    prefix="/api/order",
    tags=["Orders"],
    responses={401: {"model": ErrorResponse}},
)


@router.post("/place", response_model=PlaceOrderResponse)
async def place_order(
    payload: PlaceOrderRequest,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> PlaceOrderResponse:
    """Place an order without online payment."""
    order = await orders.place_order(db, user_id, payload)
    return PlaceOrderResponse(message="Order placed successfully", orderId=order.id)


@router.post(
    "/razorpay/order",
    response_model=RazorpayOrderResponse,
    responses={502: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def create_razorpay_order(
    payload: RazorpayOrderRequest,
    user_id: int = Depends(get_current_user_id),
    gateway: BasePaymentGateway = Depends(get_payment_gateway),
    settings: Settings = Depends(get_settings),
) -> RazorpayOrderResponse:
    gateway_order = await orders.create_gateway_order(gateway, payload, settings)
    return RazorpayOrderResponse(order=gateway_order.to_dict())


@router.post(
    "/razorpay/verify",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def verify_razorpay_payment(
    payload: RazorpayVerifyRequest,
    user_id: int = Depends(get_current_user_id),
    gateway: BasePaymentGateway = Depends(get_payment_gateway),
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Save the order only once Razorpay's signature checks out."""
    await orders.verify_and_place_order(db, gateway, user_id, payload)
    return MessageResponse(message="Payment verified and order placed")


@router.post("/user-orders", response_model=UserOrdersResponse)
async def user_orders(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> UserOrdersResponse:
    """Orders of the authenticated user, newest first."""
    found = await orders.list_user_orders(db, user_id)
    return UserOrdersResponse(orders=[OrderOut.model_validate(o) for o in found])
