"""
Payment Gateway Abstract Base Class

Defines the interface contract for payment gateway implementations.
RazorpayGateway talks to Razorpay; UnavailablePaymentGateway stands in when
the deployment has no gateway credentials, so handlers always receive an
object and the missing capability surfaces as a typed error.

Design Pattern: Strategy Pattern
    - Handlers depend only on BasePaymentGateway
    - Tests inject their own implementation through the app context
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from tomato.core.exceptions import PaymentUnavailableError


@dataclass
class GatewayOrder:
    """
    Order record created on the gateway before the customer pays.

    Attributes:
        id: Gateway order id (Razorpay format: order_xxx)
        amount: Amount in the currency's minor unit (paise for INR)
        currency: Three-letter currency code
        receipt: Merchant receipt reference
        status: Gateway status (created, attempted, paid)
        raw: Full response body from the gateway
    """
    id: str
    amount: int
    currency: str
    receipt: Optional[str] = None
    status: Optional[str] = None
    raw: Optional[dict] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        if self.raw is not None:
            return dict(self.raw)
        return {
            "id": self.id,
            "amount": self.amount,
            "currency": self.currency,
            "receipt": self.receipt,
            "status": self.status,
        }


def to_minor_units(amount: float) -> int:
    """
    Convert a major-unit amount to the gateway's minor unit.

    Args:
        amount: Amount in rupees (e.g., 499.5)

    Returns:
        int: Amount in paise (e.g., 49950)
    """
    return int(round(amount * 100))


class BasePaymentGateway(ABC):
    """Abstract base class for payment gateways."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """
        Return the name of the payment provider.

        Returns:
            str: Provider name (e.g., "razorpay")
        """

    @property
    def available(self) -> bool:
        return True

    @abstractmethod
    async def create_order(
        self,
        amount: float,
        currency: str,
        receipt: str,
    ) -> GatewayOrder:
        """
        Create an order on the gateway for the client to pay against.

        Args:
            amount: Amount in major units; implementations convert to minor units
            currency: Three-letter currency code
            receipt: Merchant receipt reference

        Raises:
            UpstreamError: The gateway rejected the request or was unreachable
        """

    @abstractmethod
    def verify_payment_signature(
        self,
        order_id: str,
        payment_id: str,
        signature: str,
    ) -> bool:
        """
        Check the signature the gateway handed to the client after payment.

        Returns:
            bool: True only when the recomputed signature matches exactly
        """


class UnavailablePaymentGateway(BasePaymentGateway):
    """Gateway placeholder used when credentials are not configured."""

    def __init__(self, reason: str):
        self.reason = reason

    @property
    def provider_name(self) -> str:
        return "unavailable"

    @property
    def available(self) -> bool:
        return False

    async def create_order(self, amount: float, currency: str, receipt: str) -> GatewayOrder:
        raise PaymentUnavailableError()

    def verify_payment_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        raise PaymentUnavailableError()
