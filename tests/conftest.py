import hashlib
import hmac
from typing import Optional

import pytest
from fastapi.testclient import TestClient

from tomato.core.config import Settings
from tomato.core.context import AppContext
from tomato.main import create_app
from tomato.services.payment import BasePaymentGateway, GatewayOrder, RazorpayGateway, to_minor_units

RAZORPAY_KEY_ID = "rzp_test_key"
RAZORPAY_KEY_SECRET = "rzp_test_secret"

ITEMS = [
    {"name": "Greek Salad", "price": 12, "quantity": 2},
    {"name": "Cheese Pasta", "price": 12, "quantity": 1},
]
ADDRESS = {"firstName": "Asha", "street": "12 MG Road", "city": "Bengaluru", "zipcode": "560001"}


def sign(order_id: str, payment_id: str, secret: str = RAZORPAY_KEY_SECRET) -> str:
    """Signature Razorpay hands the client after a successful payment."""
    message = f"{order_id}|{payment_id}".encode()
    return hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()


class FakeOrderClient:
    def __init__(self):
        self.calls = []

    def create(self, data):
        self.calls.append(data)
        return {
            "id": f"order_fake{len(self.calls)}",
            "entity": "order",
            "amount": data["amount"],
            "currency": data["currency"],
            "receipt": data["receipt"],
            "status": "created",
        }


class FakeRazorpayClient:
    """Stands in for razorpay.Client's order API; signature checks stay real."""

    def __init__(self):
        import razorpay

        self.order = FakeOrderClient()
        self.utility = razorpay.Client(auth=(RAZORPAY_KEY_ID, RAZORPAY_KEY_SECRET)).utility


class RecordingGateway(BasePaymentGateway):
    """Gateway double that records created orders and accepts one fixed signature."""

    def __init__(self, accepted_signature: Optional[str] = None):
        self.created = []
        self.accepted_signature = accepted_signature

    @property
    def provider_name(self) -> str:
        return "recording"

    async def create_order(self, amount, currency, receipt):
        self.created.append((amount, currency, receipt))
        return GatewayOrder(id="order_rec1", amount=to_minor_units(amount), currency=currency, receipt=receipt)

    def verify_payment_signature(self, order_id, payment_id, signature):
        return signature == self.accepted_signature


def make_settings(tmp_path, **overrides) -> Settings:
    values = dict(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        jwt_secret="test-jwt-secret",
        razorpay_key_id=RAZORPAY_KEY_ID,
        razorpay_key_secret=RAZORPAY_KEY_SECRET,
        uploads_dir=str(tmp_path / "uploads"),
        bcrypt_rounds=4,
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings(tmp_path):
    return make_settings(tmp_path)


@pytest.fixture
def razorpay_client():
    return FakeRazorpayClient()


@pytest.fixture
def client(settings, razorpay_client):
    gateway = RazorpayGateway(RAZORPAY_KEY_ID, RAZORPAY_KEY_SECRET, client=razorpay_client)
    context = AppContext.from_settings(settings, payment_gateway=gateway)
    with TestClient(create_app(context=context)) as test_client:
        yield test_client


@pytest.fixture
def register(client):
    """Register a user and return (auth headers, response body)."""

    def _register(email="asha@example.com", password="supersecret", name="Asha"):
        response = client.post(
            "/api/user/register",
            json={"name": name, "email": email, "password": password},
        )
        assert response.status_code == 201, response.text
        body = response.json()
        return {"Authorization": f"Bearer {body['token']}"}, body

    return _register


@pytest.fixture
def auth_headers(register):
    headers, _ = register()
    return headers
