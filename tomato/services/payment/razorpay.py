"""
Razorpay Payment Gateway Implementation

Uses the official Razorpay Python SDK.

Requirements:
    - RAZORPAY_KEY_ID and RAZORPAY_KEY_SECRET must be set in environment

Security Notes:
    - Never log the key secret or client-supplied signatures
    - Payment signatures are HMAC-SHA256(key_secret, "<order_id>|<payment_id>")
      in hex; the SDK recomputes and compares them in constant time
"""

import asyncio
import logging
from typing import Any, Optional

import razorpay
import requests
from razorpay.errors import BadRequestError, GatewayError, ServerError, SignatureVerificationError

from tomato.core.exceptions import UpstreamError
from tomato.services.payment.base import BasePaymentGateway, GatewayOrder, to_minor_units

logger = logging.getLogger(__name__)


class RazorpayGateway(BasePaymentGateway):
    """
    Razorpay gateway: order creation and payment signature verification.

    The SDK is synchronous, so remote calls run in a worker thread.

    Example:
        >>> gateway = RazorpayGateway("rzp_test_xxx", "secret")
        >>> order = await gateway.create_order(499, "INR", "receipt_order_1")
        >>> order.amount
        49900
    """

    def __init__(self, key_id: str, key_secret: str, client: Optional[Any] = None):
        """
        Args:
            key_id: Razorpay API key id
            key_secret: Razorpay API key secret
            client: Pre-built SDK client (defaults to razorpay.Client)

        Raises:
            ValueError: If either credential is empty
        """
        if not key_id or not key_secret:
            raise ValueError("RAZORPAY_KEY_ID and RAZORPAY_KEY_SECRET are required")

        self._client = client or razorpay.Client(auth=(key_id, key_secret))
        logger.info("RazorpayGateway initialized")

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "razorpay"

    async def create_order(
        self,
        amount: float,
        currency: str,
        receipt: str,
    ) -> GatewayOrder:
        """Create a Razorpay order; amount is sent in paise."""
        options = {
            "amount": to_minor_units(amount),
            "currency": currency,
            "receipt": receipt,
        }

        try:
            order = await asyncio.to_thread(self._client.order.create, data=options)
        except (BadRequestError, GatewayError, ServerError) as e:
            logger.error(f"Razorpay: Order creation rejected - {e}")
            raise UpstreamError()
        except requests.RequestException as e:
            logger.error(f"Razorpay: Connection error - {e}")
            raise UpstreamError()

        logger.info(f"Razorpay: Order created - {order.get('id')} - {options['amount']} {currency}")

        return GatewayOrder(
            id=order["id"],
            amount=order.get("amount", options["amount"]),
            currency=order.get("currency", currency),
            receipt=order.get("receipt", receipt),
            status=order.get("status"),
            raw=order,
        )

    def verify_payment_signature(
        self,
        order_id: str,
        payment_id: str,
        signature: str,
    ) -> bool:
        if not order_id or not payment_id or not signature:
            return False
        if not signature.isascii():
            # compare_digest refuses non-ASCII str input
            return False

        try:
            self._client.utility.verify_payment_signature({
                "razorpay_order_id": order_id,
                "razorpay_payment_id": payment_id,
                "razorpay_signature": signature,
            })
        except SignatureVerificationError:
            logger.warning(f"Razorpay: Signature mismatch for order {order_id}")
            return False

        return True
