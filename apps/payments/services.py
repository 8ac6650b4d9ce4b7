from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional

from django.db import transaction
from django.utils import timezone

from apps.orders.references import sanitize_reference
from apps.orders.services import OrderNotFound, mark_order_paid

from .gateway import fetch_access_token
from .models import Payment, PaymentLog, ProcessedCallback
from .security import (
    DEFAULT_CURRENCY,
    PaymentSecurityLogger,
    generate_idempotency_key,
    sanitize_log_data,
    validate_callback_payload,
    verify_jenga_signature,
)
from .signing import JengaConfig, format_amount, sign_payment, validate_signing_config

PROVIDER = "jenga"

# Column widths of ProcessedCallback.order_reference and transaction_id.
MAX_REFERENCE_LENGTH = 64
MAX_TRANSACTION_ID_LENGTH = 100


class PaymentNotFound(Exception):
    pass


@dataclass
class CallbackOutcome:
    body: Dict[str, Any] = field(default_factory=dict)
    status_code: int = 200


def create_payment_record(
    config: JengaConfig,
    *,
    order_reference: str,
    order_amount: Decimal,
    customer_first_name: str,
    customer_last_name: str,
    customer_email: str,
    customer_phone: str,
    customer_address: str = "",
    product_description: str = "",
) -> Payment:
    """
    Build, sign and store the payment record the client submits to the Jenga
    checkout.

    Raises ``ValueError`` when the reference has no usable characters,
    ``SigningConfigurationError`` on a misconfigured signer and
    ``JengaGatewayError`` when no access token can be obtained.
    """
    clean_ref = sanitize_reference(order_reference)
    if not clean_ref:
        raise ValueError("orderReference must contain letters or digits")

    validate_signing_config(config)

    token = fetch_access_token(config)
    signature = sign_payment(config, clean_ref, order_amount)

    payment = Payment.objects.create(
        token=token,
        merchant_code=config.merchant_code,
        currency=DEFAULT_CURRENCY,
        order_amount=order_amount,
        order_reference=clean_ref,
        product_type="Product",
        product_description=product_description,
        payment_time_limit="15mins",
        customer_first_name=customer_first_name,
        customer_last_name=customer_last_name,
        customer_postal_code_zip="00100",
        customer_address=customer_address,
        customer_email=customer_email,
        customer_phone=customer_phone,
        callback_url=config.callback_url,
        country_code="KE",
        secondary_reference=clean_ref,
        signature=signature,
        status=Payment.STATUS_PENDING,
    )

    PaymentSecurityLogger.event(
        "PAYMENT_RECORD_CREATED",
        {
            "orderReference": clean_ref,
            "paymentId": str(payment.id),
            "signed": bool(signature),
            "customerEmail": customer_email,
            "customerPhone": customer_phone,
        },
    )
    return payment


def map_gateway_status(gateway_status: Optional[str]) -> str:
    if gateway_status == "paid":
        return Payment.STATUS_PAID
    if gateway_status == "pending":
        return Payment.STATUS_PROCESSING
    return Payment.STATUS_FAILED


def update_payment_status(
    order_reference: str,
    status: str,
    transaction_id: Optional[str] = None,
    payment_channel: Optional[str] = None,
) -> Payment:
    """
    Apply a gateway status to the latest payment for ``order_reference``.

    A ``paid`` status also flips the matching order's paid flag. Applying the
    same update twice leaves the same state.
    """
    with transaction.atomic():
        payment = (
            Payment.objects.select_for_update()
            .filter(order_reference=order_reference)
            .order_by("-created_at")
            .first()
        )
        if payment is None:
            raise PaymentNotFound(order_reference)

        payment.status = status
        payment.transaction_id = transaction_id
        payment.payment_channel = payment_channel
        payment.save(update_fields=["status", "transaction_id", "payment_channel", "updated_at"])

        if status == Payment.STATUS_PAID:
            try:
                mark_order_paid(order_reference)
            except OrderNotFound:
                PaymentSecurityLogger.warning("ORDER_NOT_FOUND_FOR_PAYMENT", {"orderReference": order_reference})

    return payment


def _signed_amount(value: Any) -> str:
    # JSON numbers are rendered as on the checkout form; strings are signed verbatim.
    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        return format_amount(value)
    return str(value or "0")


def _check_authenticity(payload: Mapping[str, Any], config: JengaConfig) -> Optional[str]:
    """Return the reason the callback is not authentic, or ``None``."""
    received_hash = payload.get("hash")
    if not received_hash:
        return "Missing signature hash"

    if not config.merchant_code:
        PaymentSecurityLogger.error(
            "MISSING_MERCHANT_CODE",
            {"message": "Cannot verify signature without merchant code"},
        )
        return "Server configuration error"

    params = {
        "orderReference": str(payload.get("orderReference")),
        "amount": _signed_amount(payload.get("amount")),
        "currency": DEFAULT_CURRENCY,
        "callbackUrl": config.callback_url,
    }
    if not verify_jenga_signature(params, str(received_hash), config.merchant_code):
        return "Invalid signature"
    return None


def process_gateway_callback(payload: Mapping[str, Any], config: JengaConfig) -> CallbackOutcome:
    """
    Handle a server-to-server callback from the gateway.

    Steps: validate the payload, verify its signature, write the audit row,
    claim the idempotency key, then apply the mapped status. Unauthenticated
    callbacks leave no rows behind. The key is claimed in the same
    transaction as the status update, so a failed update leaves the callback
    free to be retried.
    """
    PaymentSecurityLogger.event(
        "CALLBACK_POST_RECEIVED",
        {
            "orderReference": payload.get("orderReference"),
            "status": payload.get("status"),
            "hasHash": bool(payload.get("hash")),
        },
    )

    validation = validate_callback_payload(payload)
    if not validation.valid:
        PaymentSecurityLogger.warning("CALLBACK_INVALID_PAYLOAD", {"missing": validation.missing})
        return CallbackOutcome({"error": "Invalid payload", "missing": validation.missing}, 400)

    order_reference = str(payload["orderReference"])
    transaction_id = str(payload["transactionId"]) if payload.get("transactionId") else None
    channel = str(payload["desc"]) if payload.get("desc") else None

    too_long = []
    if len(order_reference) > MAX_REFERENCE_LENGTH:
        too_long.append("orderReference")
    if transaction_id and len(transaction_id) > MAX_TRANSACTION_ID_LENGTH:
        too_long.append("transactionId")
    if too_long:
        PaymentSecurityLogger.warning("CALLBACK_INVALID_PAYLOAD", {"tooLong": too_long})
        return CallbackOutcome({"error": "Invalid payload", "invalid": too_long}, 400)

    reason = _check_authenticity(payload, config)
    if reason:
        PaymentSecurityLogger.error("CALLBACK_AUTH_FAILED", {"reason": reason, "orderReference": order_reference})
        return CallbackOutcome({"error": "Webhook authentication failed", "reason": reason}, 401)

    PaymentLog.objects.create(provider=PROVIDER, reference=order_reference, raw_payload=sanitize_log_data(payload))

    key = generate_idempotency_key(order_reference, transaction_id)
    payment_status = map_gateway_status(payload.get("status"))

    try:
        with transaction.atomic():
            _, created = ProcessedCallback.objects.get_or_create(
                key=key,
                defaults={"order_reference": order_reference, "transaction_id": transaction_id},
            )
            if not created:
                PaymentSecurityLogger.warning(
                    "CALLBACK_DUPLICATE",
                    {"orderReference": order_reference, "transactionId": transaction_id, "idempotencyKey": key},
                )
                return CallbackOutcome({"success": True, "message": "Already processed", "duplicate": True})

            update_payment_status(
                order_reference,
                payment_status,
                transaction_id=transaction_id,
                payment_channel=channel,
            )
    except PaymentNotFound:
        PaymentSecurityLogger.error("CALLBACK_PAYMENT_NOT_FOUND", {"orderReference": order_reference})
        return CallbackOutcome({"error": "Payment record not found", "orderReference": order_reference}, 404)

    PaymentSecurityLogger.event(
        "CALLBACK_PROCESSED",
        {
            "orderReference": order_reference,
            "status": payment_status,
            "transactionId": transaction_id,
            "channel": channel,
        },
    )
    return CallbackOutcome({"success": True, "message": "Payment status updated"})


def find_payment(order_reference: Optional[str] = None, transaction_id: Optional[str] = None) -> Optional[Payment]:
    payment = None
    if order_reference:
        payment = Payment.objects.filter(order_reference=order_reference).order_by("-created_at").first()
    if payment is None and transaction_id:
        payment = Payment.objects.filter(transaction_id=transaction_id).order_by("-created_at").first()
    return payment


def purge_processed_callbacks(older_than: timedelta) -> int:
    cutoff = timezone.now() - older_than
    deleted, _ = ProcessedCallback.objects.filter(processed_at__lt=cutoff).delete()
    return deleted
