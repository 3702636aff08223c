import asyncio

import pytest
import requests
from razorpay.errors import BadRequestError

from tests.conftest import RAZORPAY_KEY_ID, RAZORPAY_KEY_SECRET, FakeRazorpayClient, make_settings, sign
from tomato.core.exceptions import PaymentUnavailableError, UpstreamError
from tomato.services.payment import (
    RazorpayGateway,
    UnavailablePaymentGateway,
    build_payment_gateway,
    to_minor_units,
)


@pytest.fixture
def gateway():
    return RazorpayGateway(RAZORPAY_KEY_ID, RAZORPAY_KEY_SECRET)


@pytest.mark.parametrize("amount,expected", [(1, 100), (499, 49900), (499.5, 49950), (0.29, 29), (19.99, 1999)])
def test_to_minor_units(amount, expected):
    assert to_minor_units(amount) == expected


def test_signature_over_order_and_payment_id_verifies(gateway):
    assert gateway.verify_payment_signature("order_1", "pay_1", sign("order_1", "pay_1"))


@pytest.mark.parametrize(
    "order_id,payment_id,signature",
    [
        ("order_1", "pay_1", sign("order_1", "pay_2")),
        ("order_1", "pay_1", sign("pay_1", "order_1")),
        ("order_1", "pay_1", sign("order_1", "pay_1", secret="wrong")),
        ("order_1", "pay_1", sign("order_1", "pay_1")[:-1]),
        ("order_1", "pay_1", ""),
        ("order_1", "pay_1", "é" * 64),
        ("", "pay_1", sign("", "pay_1")),
    ],
)
def test_mismatched_signatures_fail(gateway, order_id, payment_id, signature):
    assert gateway.verify_payment_signature(order_id, payment_id, signature) is False


def test_gateway_requires_both_credentials():
    with pytest.raises(ValueError):
        RazorpayGateway(RAZORPAY_KEY_ID, "")


def test_create_order_converts_to_paise():
    client = FakeRazorpayClient()
    gateway = RazorpayGateway(RAZORPAY_KEY_ID, RAZORPAY_KEY_SECRET, client=client)

    order = asyncio.run(gateway.create_order(250.75, "INR", "receipt_order_1"))

    assert client.order.calls == [{"amount": 25075, "currency": "INR", "receipt": "receipt_order_1"}]
    assert order.id == "order_fake1"
    assert order.amount == 25075
    assert order.to_dict()["status"] == "created"


class FailingOrderClient:
    def __init__(self, error):
        self.error = error

    def create(self, data):
        raise self.error


@pytest.mark.parametrize(
    "error",
    [BadRequestError("The amount must be atleast INR 1.00"), requests.ConnectionError("down")],
)
def test_gateway_failures_become_upstream_errors(error):
    client = FakeRazorpayClient()
    client.order = FailingOrderClient(error)
    gateway = RazorpayGateway(RAZORPAY_KEY_ID, RAZORPAY_KEY_SECRET, client=client)

    with pytest.raises(UpstreamError) as exc_info:
        asyncio.run(gateway.create_order(10, "INR", "receipt_order_1"))

    assert "atleast" not in exc_info.value.message


def test_unavailable_gateway_raises_typed_error():
    gateway = UnavailablePaymentGateway("missing RAZORPAY_KEY_SECRET")

    assert gateway.available is False
    with pytest.raises(PaymentUnavailableError):
        gateway.verify_payment_signature("order_1", "pay_1", "sig")
    with pytest.raises(PaymentUnavailableError):
        asyncio.run(gateway.create_order(10, "INR", "r"))


def test_build_payment_gateway(tmp_path):
    configured = build_payment_gateway(make_settings(tmp_path))
    missing = build_payment_gateway(make_settings(tmp_path, razorpay_key_secret=None))

    assert isinstance(configured, RazorpayGateway)
    assert isinstance(missing, UnavailablePaymentGateway)
    assert missing.reason == "missing RAZORPAY_KEY_SECRET"
