import hashlib
from decimal import Decimal

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from rest_framework.test import APIClient

from apps.orders.models import Order
from apps.payments.models import Payment
from apps.payments.signing import JengaConfig

MERCHANT_CODE = "TEST123"
SITE_URL = "https://run.example.com"
WEBHOOK_PATH = "api/pgw-webhook-4365c21f"
CALLBACK_URL = f"{SITE_URL}/{WEBHOOK_PATH}"


def pytest_configure(config):
    config.addinivalue_line("markers", "payment: mark test as payment-related")


def callback_hash(order_reference: str, amount: str = "1000", merchant_code: str = MERCHANT_CODE) -> str:
    data = f"{merchant_code}{order_reference}KES{amount}{CALLBACK_URL}"
    return hashlib.sha256(data.encode("utf-8")).hexdigest()


@pytest.fixture(scope="session")
def rsa_keys():
    """PEM-encoded (private, public) RSA key pair."""
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("utf-8")
    public_pem = key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("utf-8")
    return private_pem, public_pem


@pytest.fixture
def jenga_config():
    def _make(**overrides):
        values = {
            "merchant_code": MERCHANT_CODE,
            "site_url": SITE_URL,
            "webhook_path": WEBHOOK_PATH,
        }
        values.update(overrides)
        return JengaConfig(**values)

    return _make


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def admin_user(django_user_model):
    return django_user_model.objects.create_superuser(username="admin", email="admin@example.com", password="pass1234")


@pytest.fixture
def admin_client(admin_user):
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


@pytest.fixture
def order_payload():
    return {
        "student": "yes",
        "university": "nairobi",
        "year_of_study": "III",
        "reg_number": "H31/1234/2021",
        "attending": "attending",
        "tshirt_type": "polo",
        "tshirt_size": "M:1",
        "quantity": 1,
        "total_amount": "1000.00",
        "name": "Wanjiku Kamau",
        "email": "wanjiku@example.com",
        "phone": "0712345678",
        "name_of_kin": "Njeri Kamau",
        "kin_number": "0722000000",
        "medical_condition": "",
        "pick_up": "chiromo-campus",
        "confirm": "yes",
    }


@pytest.fixture
def make_order(db):
    def _make(order_reference="ORD1", **overrides):
        values = {
            "order_reference": order_reference,
            "student": "no",
            "attending": "attending",
            "tshirt_type": "polo",
            "tshirt_size": "large",
            "quantity": 1,
            "total_amount": Decimal("1500"),
            "name": "Otieno Odhiambo",
            "email": "otieno@example.com",
            "phone": "0700111222",
            "name_of_kin": "Akinyi Odhiambo",
            "kin_number": "0700333444",
            "confirm": "yes",
        }
        values.update(overrides)
        return Order.objects.create(**values)

    return _make


@pytest.fixture
def make_payment(db):
    def _make(order_reference="ORD1", **overrides):
        values = {
            "order_reference": order_reference,
            "order_amount": Decimal("1000"),
            "merchant_code": MERCHANT_CODE,
            "callback_url": CALLBACK_URL,
            "secondary_reference": order_reference,
            "customer_email": "otieno@example.com",
        }
        values.update(overrides)
        return Payment.objects.create(**values)

    return _make
