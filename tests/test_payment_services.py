from datetime import timedelta
from decimal import Decimal
from unittest.mock import patch

import pytest
from django.utils import timezone

from apps.orders.models import Order
from apps.payments.gateway import JengaGatewayError
from apps.payments.models import Payment, PaymentLog, ProcessedCallback
from apps.payments.services import (
    PaymentNotFound,
    create_payment_record,
    map_gateway_status,
    process_gateway_callback,
    purge_processed_callbacks,
    update_payment_status,
)
from apps.payments.signing import SigningConfigurationError, verify_signature_base64

from .conftest import CALLBACK_URL, callback_hash

pytestmark = [pytest.mark.django_db, pytest.mark.payment]

CUSTOMER = {
    "order_amount": Decimal("1000"),
    "customer_first_name": "Wanjiku",
    "customer_last_name": "Kamau",
    "customer_email": "wanjiku@example.com",
    "customer_phone": "0712345678",
    "customer_address": "Nairobi",
    "product_description": "Polo T-shirt x1",
}


@pytest.fixture
def no_gateway():
    with patch("apps.payments.services.fetch_access_token", return_value="tok-abc") as mock_token:
        yield mock_token


def test_create_payment_record_builds_signed_record(jenga_config, rsa_keys, no_gateway):
    private_pem, public_pem = rsa_keys
    payment = create_payment_record(jenga_config(private_key_pem=private_pem), order_reference="ord-12/34", **CUSTOMER)

    assert payment.order_reference == "ORD1234"
    assert payment.secondary_reference == "ORD1234"
    assert payment.token == "tok-abc"
    assert payment.status == Payment.STATUS_PENDING
    assert payment.callback_url == CALLBACK_URL
    assert payment.product_type == "Product"
    assert payment.payment_time_limit == "15mins"
    assert payment.customer_postal_code_zip == "00100"
    assert payment.country_code == "KE"
    assert payment.currency == "KES"
    assert verify_signature_base64(f"TEST123ORD1234KES1000{CALLBACK_URL}", payment.signature, public_pem)


def test_create_payment_record_without_key_has_empty_signature(jenga_config, no_gateway):
    payment = create_payment_record(jenga_config(), order_reference="ORD1", **CUSTOMER)
    assert payment.signature == ""


def test_create_payment_record_gateway_payload_is_camel_case(jenga_config, no_gateway):
    payload = create_payment_record(jenga_config(), order_reference="ORD1", **CUSTOMER).to_gateway_payload()

    assert payload["orderReference"] == "ORD1"
    assert payload["orderAmount"] == 1000
    assert payload["merchantCode"] == "TEST123"
    assert payload["customerPostalCodeZip"] == "00100"
    assert payload["secondaryReference"] == "ORD1"
    assert payload["callbackUrl"] == CALLBACK_URL


def test_create_payment_record_rejects_empty_reference(jenga_config, no_gateway):
    with pytest.raises(ValueError):
        create_payment_record(jenga_config(), order_reference="---", **CUSTOMER)
    assert Payment.objects.count() == 0


def test_create_payment_record_production_needs_merchant(jenga_config, no_gateway):
    with pytest.raises(SigningConfigurationError):
        create_payment_record(jenga_config(merchant_code="", environment="production"), order_reference="ORD1", **CUSTOMER)
    no_gateway.assert_not_called()


def test_create_payment_record_propagates_gateway_errors(jenga_config):
    with patch("apps.payments.services.fetch_access_token", side_effect=JengaGatewayError("down")):
        with pytest.raises(JengaGatewayError):
            create_payment_record(jenga_config(), order_reference="ORD1", **CUSTOMER)
    assert Payment.objects.count() == 0


@pytest.mark.parametrize(
    "gateway_status, expected",
    [("paid", "paid"), ("pending", "processing"), ("failed", "failed"), ("cancelled", "failed"), (None, "failed")],
)
def test_map_gateway_status(gateway_status, expected):
    assert map_gateway_status(gateway_status) == expected


def test_update_payment_status_marks_order_paid(make_order, make_payment):
    make_order("ORD1")
    make_payment("ORD1")

    payment = update_payment_status("ORD1", "paid", transaction_id="TX1", payment_channel="MPESA")

    assert payment.status == "paid"
    assert payment.transaction_id == "TX1"
    assert payment.payment_channel == "MPESA"
    assert Order.objects.get(order_reference="ORD1").paid is True


def test_update_payment_status_non_paid_leaves_order(make_order, make_payment):
    make_order("ORD1")
    make_payment("ORD1")

    update_payment_status("ORD1", "failed")

    assert Order.objects.get(order_reference="ORD1").paid is False


def test_update_payment_status_is_idempotent(make_order, make_payment):
    make_order("ORD1")
    make_payment("ORD1")

    update_payment_status("ORD1", "paid", transaction_id="TX1")
    update_payment_status("ORD1", "paid", transaction_id="TX1")

    payment = Payment.objects.get(order_reference="ORD1")
    assert payment.status == "paid"
    assert payment.transaction_id == "TX1"


def test_update_payment_status_paid_without_order(make_payment):
    make_payment("ORD1")
    assert update_payment_status("ORD1", "paid").status == "paid"


def test_update_payment_status_unknown_reference():
    with pytest.raises(PaymentNotFound):
        update_payment_status("NOPE", "paid")


class TestProcessGatewayCallback:
    def _payload(self, **overrides):
        payload = {
            "orderReference": "ORD1",
            "status": "paid",
            "transactionId": "TX1",
            "desc": "MPESA",
            "amount": "1000",
            "hash": callback_hash("ORD1"),
        }
        payload.update(overrides)
        return payload

    def test_paid_callback_updates_payment_and_order(self, jenga_config, make_order, make_payment):
        make_order("ORD1")
        make_payment("ORD1")

        outcome = process_gateway_callback(self._payload(), jenga_config())

        assert outcome.status_code == 200
        assert outcome.body == {"success": True, "message": "Payment status updated"}
        payment = Payment.objects.get(order_reference="ORD1")
        assert payment.status == "paid"
        assert payment.payment_channel == "MPESA"
        assert Order.objects.get(order_reference="ORD1").paid is True
        assert ProcessedCallback.objects.count() == 1

    def test_invalid_payload(self, jenga_config):
        outcome = process_gateway_callback({"hash": "x"}, jenga_config())
        assert outcome.status_code == 400
        assert outcome.body == {"error": "Invalid payload", "missing": ["orderReference", "status"]}

    @pytest.mark.parametrize(
        "overrides, config_overrides, reason",
        [
            ({"hash": ""}, {}, "Missing signature hash"),
            ({}, {"merchant_code": ""}, "Server configuration error"),
            ({"amount": "1"}, {}, "Invalid signature"),
        ],
    )
    def test_authentication_failures(self, jenga_config, make_payment, overrides, config_overrides, reason):
        make_payment("ORD1")

        outcome = process_gateway_callback(self._payload(**overrides), jenga_config(**config_overrides))

        assert outcome.status_code == 401
        assert outcome.body == {"error": "Webhook authentication failed", "reason": reason}
        assert Payment.objects.get(order_reference="ORD1").status == "pending"
        assert PaymentLog.objects.count() == 0
        assert ProcessedCallback.objects.count() == 0

    def test_missing_amount_is_signed_as_zero(self, jenga_config, make_payment):
        make_payment("ORD1")
        payload = self._payload(hash=callback_hash("ORD1", amount="0"))
        del payload["amount"]

        assert process_gateway_callback(payload, jenga_config()).status_code == 200

    @pytest.mark.parametrize("amount", [1000, 1000.0, Decimal("1000.00")])
    def test_numeric_amount_is_signed_like_the_checkout_form(self, jenga_config, make_payment, amount):
        make_payment("ORD1")

        outcome = process_gateway_callback(self._payload(amount=amount), jenga_config())

        assert outcome.status_code == 200

    def test_string_amount_is_signed_verbatim(self, jenga_config, make_payment):
        make_payment("ORD1")

        assert process_gateway_callback(self._payload(amount="1000.0"), jenga_config()).status_code == 401
        payload = self._payload(amount="1000.0", hash=callback_hash("ORD1", amount="1000.0"))
        assert process_gateway_callback(payload, jenga_config()).status_code == 200

    @pytest.mark.parametrize(
        "overrides, field",
        [
            ({"orderReference": "R" * 65}, "orderReference"),
            ({"transactionId": "T" * 101}, "transactionId"),
        ],
    )
    def test_overlong_identifiers_are_rejected(self, jenga_config, overrides, field):
        payload = self._payload(**overrides)
        payload["hash"] = callback_hash(payload["orderReference"])

        outcome = process_gateway_callback(payload, jenga_config())

        assert outcome.status_code == 400
        assert outcome.body == {"error": "Invalid payload", "invalid": [field]}
        assert PaymentLog.objects.count() == 0
        assert ProcessedCallback.objects.count() == 0

    def test_reference_at_column_width_is_accepted(self, jenga_config, make_payment):
        reference = "R" * 64
        make_payment(reference)

        outcome = process_gateway_callback(
            self._payload(orderReference=reference, hash=callback_hash(reference)), jenga_config()
        )

        assert outcome.status_code == 200
        assert PaymentLog.objects.filter(reference=reference).count() == 1

    def test_duplicate_callback_is_acknowledged_once(self, jenga_config, make_payment):
        make_payment("ORD1")
        process_gateway_callback(self._payload(), jenga_config())

        with patch("apps.payments.services.update_payment_status") as mock_update:
            outcome = process_gateway_callback(self._payload(), jenga_config())

        assert outcome.status_code == 200
        assert outcome.body == {"success": True, "message": "Already processed", "duplicate": True}
        mock_update.assert_not_called()

    def test_unknown_payment_releases_idempotency_key(self, jenga_config):
        outcome = process_gateway_callback(self._payload(), jenga_config())

        assert outcome.status_code == 404
        assert ProcessedCallback.objects.count() == 0

    def test_audit_log_is_sanitized(self, jenga_config, make_payment):
        make_payment("ORD1")
        process_gateway_callback(self._payload(), jenga_config())

        log = PaymentLog.objects.get(reference="ORD1")
        assert log.provider == "jenga"
        assert log.raw_payload["hash"].endswith("...")
        assert log.raw_payload["status"] == "paid"


def test_purge_processed_callbacks_keeps_recent_entries():
    old = ProcessedCallback.objects.create(key="a" * 64, order_reference="ORD1")
    ProcessedCallback.objects.create(key="b" * 64, order_reference="ORD2")
    ProcessedCallback.objects.filter(pk=old.pk).update(processed_at=timezone.now() - timedelta(hours=2))

    assert purge_processed_callbacks(timedelta(hours=1)) == 1
    assert list(ProcessedCallback.objects.values_list("order_reference", flat=True)) == ["ORD2"]
