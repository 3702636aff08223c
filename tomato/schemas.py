"""
Pydantic Schemas for Request/Response Validation

Field names follow the JSON the frontend already sends and expects
(camelCase where the web client uses it).
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


# =============================================================================
# USER SCHEMAS
# =============================================================================

class RegisterRequest(BaseModel):
    """Registration body. Presence and format are checked by the user service."""
    name: Optional[str] = Field(None, max_length=100, examples=["Jane Doe"])
    email: Optional[str] = Field(None, max_length=255, examples=["jane@example.com"])
    password: Optional[str] = Field(None, max_length=128, examples=["correct-horse"])


class LoginRequest(BaseModel):
    email: Optional[str] = Field(None, max_length=255)
    password: Optional[str] = Field(None, max_length=128)


class UserPublic(BaseModel):
    """The only user projection ever returned to clients."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str


class AuthResponse(BaseModel):
    success: bool = True
    token: str
    user: UserPublic


# =============================================================================
# ORDER SCHEMAS
# =============================================================================

class OrderItem(BaseModel):
    """Single line item. Extra keys from the menu (ids, images) are kept."""
    model_config = ConfigDict(extra="allow")

    name: str = Field(..., min_length=1, max_length=100, examples=["Greek Salad"])
    price: float = Field(..., ge=0, allow_inf_nan=False, examples=[12])
    quantity: int = Field(..., ge=1, examples=[2])


class PlaceOrderRequest(BaseModel):
    items: List[OrderItem] = Field(..., min_length=1)
    amount: float = Field(..., ge=0, allow_inf_nan=False)
    address: Dict[str, Any]


class RazorpayOrderRequest(BaseModel):
    amount: Optional[float] = Field(None, allow_inf_nan=False, examples=[499])
    currency: Optional[str] = Field(None, min_length=3, max_length=3, examples=["INR"])


class RazorpayVerifyRequest(BaseModel):
    razorpay_order_id: Optional[str] = None
    razorpay_payment_id: Optional[str] = None
    razorpay_signature: Optional[str] = None
    items: List[OrderItem] = Field(..., min_length=1)
    amount: float = Field(..., ge=0, allow_inf_nan=False)
    address: Dict[str, Any]


class OrderOut(BaseModel):
    """Order as returned by /api/order/user-orders."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    userId: int = Field(validation_alias=AliasChoices("user_id", "userId"))
    items: List[Dict[str, Any]]
    amount: float
    address: Dict[str, Any]
    payment: bool
    date: Optional[datetime] = Field(None, validation_alias=AliasChoices("created_at", "date"))


class UserOrdersResponse(BaseModel):
    success: bool = True
    orders: List[OrderOut]


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class PlaceOrderResponse(MessageResponse):
    orderId: int


class RazorpayOrderResponse(BaseModel):
    success: bool = True
    order: Dict[str, Any]


# =============================================================================
# CART SCHEMAS
# =============================================================================

class CartItemRequest(BaseModel):
    itemId: str = Field(..., min_length=1, max_length=100)


class CartResponse(BaseModel):
    success: bool = True
    cartData: Dict[str, int]


# =============================================================================
# SERVICE SCHEMAS
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    message: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    database: str
    payment_service: str
    timestamp: datetime
