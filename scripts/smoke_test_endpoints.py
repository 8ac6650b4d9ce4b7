from __future__ import annotations

import hashlib
import json

from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from apps.orders.models import Order
from apps.payments.models import Payment, PaymentLog, ProcessedCallback
from apps.payments.security import build_signature_data
from apps.payments.signing import JengaConfig


def _print(title: str, data) -> None:
    print(f"\n=== {title} ===")
    if isinstance(data, (dict, list)):
        print(json.dumps(data, indent=2, default=str))
    else:
        print(data)


def run() -> None:
    """
    Manual smoke test walking a registration through checkout and payment.

    Run with:
      python manage.py shell --settings=config.settings.development -c "from scripts.smoke_test_endpoints import run; run()"

    Gateway credentials are not needed under DEBUG: a placeholder access token is used.
    """
    User = get_user_model()

    # Clean tables for a deterministic run
    ProcessedCallback.objects.all().delete()
    PaymentLog.objects.all().delete()
    Payment.objects.all().delete()
    Order.objects.all().delete()
    User.objects.filter(username="smoke-admin").delete()

    User.objects.create_superuser(username="smoke-admin", email="admin@example.com", password="Admin123!")

    public = APIClient()

    resp = public.get("/api/orders/products/")
    _print("GET /api/orders/products/", {"status": resp.status_code, "data": resp.data})

    order_payload = {
        "student": "yes",
        "university": "nairobi",
        "year_of_study": "II",
        "attending": "attending",
        "tshirt_type": "polo",
        "tshirt_size": "M:1",
        "quantity": 1,
        "total_amount": "1000.00",
        "name": "Smoke Tester",
        "email": "smoke@example.com",
        "phone": "0712345678",
        "name_of_kin": "Kin Tester",
        "kin_number": "0722000000",
        "confirm": "yes",
    }
    resp = public.post("/api/orders/", order_payload, format="json")
    _print("POST /api/orders/", {"status": resp.status_code, "data": resp.data})
    assert resp.status_code == 201, resp.content
    reference = resp.data["order_reference"]

    resp = public.post(
        "/api/payments/",
        {
            "order_reference": reference,
            "order_amount": "1000",
            "customer_first_name": "Smoke",
            "customer_last_name": "Tester",
            "customer_email": "smoke@example.com",
            "customer_phone": "0712345678",
            "product_description": "Polo T-shirt x1",
        },
        format="json",
    )
    _print("POST /api/payments/", {"status": resp.status_code, "data": resp.data})
    assert resp.status_code == 201, resp.content

    # Simulate the gateway's signed server-to-server callback
    config = JengaConfig.from_settings()
    signature_data = build_signature_data(config.merchant_code, reference, "1000", config.callback_url)
    callback = {
        "orderReference": reference,
        "status": "paid",
        "transactionId": "SMOKE-TX-1",
        "desc": "MPESA",
        "amount": "1000",
        "hash": hashlib.sha256(signature_data.encode("utf-8")).hexdigest(),
    }
    webhook_url = f"/{config.webhook_path}"
    resp = public.post(webhook_url, callback, format="json")
    _print(f"POST {webhook_url}", {"status": resp.status_code, "data": resp.data})

    resp = public.post(webhook_url, callback, format="json")
    _print(f"POST {webhook_url} (replay)", {"status": resp.status_code, "data": resp.data})

    resp = public.get("/api/checkout/status", {"reference": reference})
    _print("GET /api/checkout/status", {"status": resp.status_code, "data": resp.data})

    resp = public.post("/api/auth/token/", {"username": "smoke-admin", "password": "Admin123!"}, format="json")
    assert resp.status_code == 200, resp.content
    admin = APIClient()
    admin.credentials(HTTP_AUTHORIZATION=f"Bearer {resp.data['access']}")

    resp = admin.get("/api/orders/stats/")
    _print("GET /api/orders/stats/", {"status": resp.status_code, "data": resp.data})

    _print("Smoke test complete", "OK")
