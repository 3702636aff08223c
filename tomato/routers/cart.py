"""Cart API router."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tomato.dependencies import get_current_user_id, get_db
from tomato.schemas import CartItemRequest, CartResponse, ErrorResponse
from tomato.services import cart

router = APIRouter(
    prefix="/api/cart",
    tags=["Cart"],
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)


@router.post("/add", response_model=CartResponse)
async def add_to_cart(
    payload: CartItemRequest,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> CartResponse:
    return CartResponse(cartData=await cart.add_to_cart(db, user_id, payload.itemId))


@router.post("/remove", response_model=CartResponse)
async def remove_from_cart(
    payload: CartItemRequest,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> CartResponse:
    return CartResponse(cartData=await cart.remove_from_cart(db, user_id, payload.itemId))


@router.post("/get", response_model=CartResponse)
async def get_cart(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> CartResponse:
    return CartResponse(cartData=await cart.get_cart(db, user_id))
