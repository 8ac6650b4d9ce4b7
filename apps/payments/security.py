"""
Security helpers for Jenga Payment Gateway callbacks.

Covers callback signature verification, payload validation, idempotency
keys and masking of sensitive values before they reach the logs.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

DEFAULT_CURRENCY = "KES"

REQUIRED_CALLBACK_FIELDS = ("orderReference", "status")

SENSITIVE_LOG_FIELDS = ("token", "hash", "customerEmail", "customerPhone", "mobileNumber")

security_logger = logging.getLogger("payments.security")


@dataclass(frozen=True)
class CallbackValidation:
    valid: bool
    missing: List[str] = field(default_factory=list)


def build_signature_data(
    merchant_code: str,
    order_reference: str,
    amount: str,
    callback_url: str,
    currency: Optional[str] = None,
) -> str:
    """
    Concatenate the signed fields in gateway order, without separators:
    merchantCode + orderReference + currency + amount + callbackUrl.
    """
    return f"{merchant_code}{order_reference}{currency or DEFAULT_CURRENCY}{amount}{callback_url}"


def verify_jenga_signature(params: Mapping[str, Any], received_hash: str, merchant_code: str) -> bool:
    """
    Check the SHA-256 hex hash sent with a callback.

    ``params`` carries ``orderReference``, ``amount``, ``callbackUrl`` and an
    optional ``currency``. The received hash must equal the lowercase hex
    digest character for character. Never raises: a missing hash or merchant
    code, or a hash of the wrong length, yields ``False``.
    """
    if not received_hash or not merchant_code:
        return False

    signature_data = build_signature_data(
        merchant_code,
        str(params.get("orderReference") or ""),
        str(params.get("amount") or ""),
        str(params.get("callbackUrl") or ""),
        currency=params.get("currency"),
    )
    computed = hashlib.sha256(signature_data.encode("utf-8")).hexdigest().encode("ascii")
    received = str(received_hash).encode("utf-8")

    if len(received) != len(computed):
        return False
    return hmac.compare_digest(received, computed)


def validate_callback_payload(payload: Mapping[str, Any]) -> CallbackValidation:
    missing = [name for name in REQUIRED_CALLBACK_FIELDS if not payload.get(name)]
    return CallbackValidation(valid=not missing, missing=missing)


def sanitize_log_data(data: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Return a copy of ``data`` with sensitive values masked.

    Values longer than four characters keep their first four characters
    followed by ``...``; shorter ones become ``***``. Empty values are left
    alone.
    """
    sanitized = dict(data or {})
    for name in SENSITIVE_LOG_FIELDS:
        value = sanitized.get(name)
        if value:
            value = str(value)
            sanitized[name] = f"{value[:4]}..." if len(value) > 4 else "***"
    return sanitized


def generate_idempotency_key(order_reference: str, transaction_id: Optional[str] = None) -> str:
    key = f"{order_reference}-{transaction_id}" if transaction_id else order_reference
    return hashlib.sha256(key.encode("utf-8")).hexdigest()


class PaymentSecurityLogger:
    """
    Structured logging for payment events. Data is always sanitized first.
    """

    @classmethod
    def _log(cls, level: int, event: str, data: Optional[Mapping[str, Any]]) -> None:
        security_logger.log(level, event, extra={"event": event, "security": sanitize_log_data(data)})

    @classmethod
    def event(cls, event: str, data: Optional[Mapping[str, Any]] = None) -> None:
        cls._log(logging.INFO, event, data)

    @classmethod
    def warning(cls, event: str, data: Optional[Mapping[str, Any]] = None) -> None:
        cls._log(logging.WARNING, event, data)

    @classmethod
    def error(cls, event: str, data: Optional[Mapping[str, Any]] = None) -> None:
        cls._log(logging.ERROR, event, data)
