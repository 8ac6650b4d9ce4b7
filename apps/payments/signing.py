from __future__ import annotations

import base64
import binascii
import logging
import os
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding
from django.conf import settings

from .security import DEFAULT_CURRENCY, PaymentSecurityLogger, build_signature_data

logger = logging.getLogger(__name__)

PRODUCTION_ENVIRONMENTS = ("production", "prod")


class SigningConfigurationError(RuntimeError):
    pass


@dataclass(frozen=True)
class JengaConfig:
    """
    Everything the payment routines need to know about the gateway setup.

    Built once per request with ``from_settings``; nothing else in the payments
    app reads the Jenga settings directly.
    """

    merchant_code: str
    site_url: str
    webhook_path: str
    private_key_pem: Optional[str] = None
    api_key: str = ""
    consumer_secret: str = ""
    base_url: str = "https://uat.finserve.africa"
    require_signature: bool = False
    environment: str = "development"
    debug: bool = False

    @property
    def callback_url(self) -> str:
        return f"{self.site_url.rstrip('/')}/{self.webhook_path.strip('/')}"

    @property
    def is_production(self) -> bool:
        return self.environment.lower() in PRODUCTION_ENVIRONMENTS

    @classmethod
    def from_settings(cls) -> "JengaConfig":
        return cls(
            merchant_code=settings.JENGA_MERCHANT_CODE,
            site_url=settings.SITE_URL,
            webhook_path=settings.JENGA_WEBHOOK_PATH,
            private_key_pem=load_private_key(
                base64_key=settings.JENGA_PRIVATE_KEY_BASE64,
                raw_key=settings.JENGA_PRIVATE_KEY,
                key_path=settings.JENGA_PRIVATE_KEY_PATH,
            ),
            api_key=settings.JENGA_API_KEY,
            consumer_secret=settings.JENGA_CONSUMER_SECRET,
            base_url=settings.JENGA_BASE_URL,
            require_signature=settings.JENGA_REQUIRE_SIGNATURE,
            environment=settings.APP_ENV,
            debug=settings.DEBUG,
        )


def load_private_key(
    base64_key: Optional[str] = None,
    raw_key: Optional[str] = None,
    key_path: Optional[Union[str, os.PathLike]] = None,
) -> Optional[str]:
    """
    Resolve the PEM private key used for outbound signatures.

    Tried in order: a base64-encoded PEM (handy for single-line secrets), a
    raw PEM string, then a PEM file on disk. Returns ``None`` when none of
    them yields a key.
    """
    if base64_key:
        try:
            return base64.b64decode(base64_key, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError):
            logger.warning("JENGA_PRIVATE_KEY_BASE64 is not valid base64; trying other sources")

    if raw_key:
        return raw_key

    if key_path and os.path.isfile(key_path):
        with open(key_path, "r", encoding="utf-8") as fh:
            return fh.read()

    return None


def format_amount(value: Union[int, float, str, Decimal]) -> str:
    """
    Render an amount the way it appears in the signed string.

    Whole amounts carry no decimals (``1000.00`` -> ``"1000"``).
    """
    amount = Decimal(str(value))
    if amount == amount.to_integral_value():
        return str(int(amount))
    return format(amount.normalize(), "f")


def compute_signature_base64(signature_data: str, private_key_pem: str) -> str:
    private_key = serialization.load_pem_private_key(private_key_pem.encode("utf-8"), password=None)
    signature = private_key.sign(signature_data.encode("utf-8"), padding.PKCS1v15(), hashes.SHA256())
    return base64.b64encode(signature).decode("ascii")


def verify_signature_base64(signature_data: str, signature_b64: str, public_key_pem: str) -> bool:
    try:
        signature = base64.b64decode(signature_b64, validate=True)
    except binascii.Error:
        return False

    public_key = serialization.load_pem_public_key(public_key_pem.encode("utf-8"))
    try:
        public_key.verify(signature, signature_data.encode("utf-8"), padding.PKCS1v15(), hashes.SHA256())
    except InvalidSignature:
        return False
    return True


def validate_signing_config(config: JengaConfig) -> None:
    if not config.is_production:
        return

    missing = []
    if not config.merchant_code:
        missing.append("JENGA_MERCHANT_CODE")
    if not config.site_url:
        missing.append("SITE_URL")
    if missing:
        raise SigningConfigurationError(
            "Missing required environment variables for Jenga signing in production: "
            f"{', '.join(missing)}. Aborting to avoid signature mismatch."
        )


def build_payment_signature_data(config: JengaConfig, order_reference: str, amount) -> str:
    return build_signature_data(
        config.merchant_code,
        order_reference,
        format_amount(amount),
        config.callback_url,
        currency=DEFAULT_CURRENCY,
    )


def sign_payment(config: JengaConfig, order_reference: str, amount) -> str:
    """
    Sign an outbound payment record.

    Returns an empty signature when no private key is configured, unless the
    configuration requires one, in which case ``SigningConfigurationError`` is
    raised.
    """
    if not config.private_key_pem:
        if config.require_signature:
            raise SigningConfigurationError("No Jenga private key configured and signatures are required.")
        PaymentSecurityLogger.warning(
            "PAYMENT_SIGNATURE_SKIPPED",
            {"orderReference": order_reference, "reason": "no private key configured"},
        )
        return ""

    signature_data = build_payment_signature_data(config, order_reference, amount)
    try:
        return compute_signature_base64(signature_data, config.private_key_pem)
    except (ValueError, TypeError) as exc:
        raise SigningConfigurationError(f"Jenga private key could not be used for signing: {exc}") from exc
