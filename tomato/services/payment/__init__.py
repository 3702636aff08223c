"""
Payment Gateway Factory

Provides a single entry point for obtaining the payment gateway for a set of
settings. The rest of the application depends only on BasePaymentGateway.

Usage:
    from tomato.services.payment import build_payment_gateway

    gateway = build_payment_gateway(settings)
    if not gateway.available:
        ...  # payment routes answer 503

Configuration:
    - RAZORPAY_KEY_ID + RAZORPAY_KEY_SECRET set → RazorpayGateway
    - either missing → UnavailablePaymentGateway
"""

import logging

from tomato.core.config import Settings
from tomato.services.payment.base import (
    BasePaymentGateway,
    GatewayOrder,
    UnavailablePaymentGateway,
    to_minor_units,
)
from tomato.services.payment.razorpay import RazorpayGateway

logger = logging.getLogger(__name__)


def build_payment_gateway(settings: Settings) -> BasePaymentGateway:
    """
    Build the payment gateway for the given settings.

    Missing credentials disable payments instead of failing startup.

    Returns:
        BasePaymentGateway: RazorpayGateway or UnavailablePaymentGateway
    """
    if not settings.payments_enabled:
        reason = f"missing {', '.join(settings.missing_payment_config())}"
        logger.warning(f"Payment Service: disabled ({reason})")
        return UnavailablePaymentGateway(reason)

    logger.info("Payment Service: Using RazorpayGateway")
    return RazorpayGateway(settings.razorpay_key_id, settings.razorpay_key_secret)


# Export commonly used types and functions
__all__ = [
    "build_payment_gateway",
    "BasePaymentGateway",
    "GatewayOrder",
    "RazorpayGateway",
    "UnavailablePaymentGateway",
    "to_minor_units",
]
