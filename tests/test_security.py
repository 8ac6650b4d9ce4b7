import hashlib
import logging
from unittest.mock import patch

from apps.payments.security import (
    PaymentSecurityLogger,
    build_signature_data,
    generate_idempotency_key,
    sanitize_log_data,
    validate_callback_payload,
    verify_jenga_signature,
)

from .conftest import CALLBACK_URL, MERCHANT_CODE, callback_hash


def _params(**overrides):
    params = {"orderReference": "ORD1", "amount": "1000", "callbackUrl": CALLBACK_URL}
    params.update(overrides)
    return params


def test_build_signature_data_concatenates_without_separators():
    data = build_signature_data("M1", "ORD1", "1000", "https://x.test/cb")
    assert data == "M1ORD1KES1000https://x.test/cb"


def test_build_signature_data_uses_given_currency():
    assert build_signature_data("M1", "ORD1", "5", "u", currency="USD") == "M1ORD1USD5u"


def test_verify_accepts_matching_hash():
    assert verify_jenga_signature(_params(), callback_hash("ORD1"), MERCHANT_CODE) is True


def test_verify_rejects_uppercase_hex():
    assert verify_jenga_signature(_params(), callback_hash("ORD1").upper(), MERCHANT_CODE) is False


def test_verify_rejects_any_single_character_change():
    valid = callback_hash("ORD1")
    for index, char in enumerate(valid):
        variants = ["0" if char != "0" else "1"]
        if char.isalpha():
            variants.append(char.upper())
        for replacement in variants:
            mutated = valid[:index] + replacement + valid[index + 1 :]
            assert verify_jenga_signature(_params(), mutated, MERCHANT_CODE) is False, (index, replacement)


def test_verify_rejects_tampered_amount():
    assert verify_jenga_signature(_params(amount="1"), callback_hash("ORD1"), MERCHANT_CODE) is False


def test_verify_rejects_empty_hash_or_merchant():
    assert verify_jenga_signature(_params(), "", MERCHANT_CODE) is False
    assert verify_jenga_signature(_params(), callback_hash("ORD1"), "") is False


def test_verify_rejects_malformed_hash_without_raising():
    assert verify_jenga_signature(_params(), "not-hex", MERCHANT_CODE) is False
    assert verify_jenga_signature(_params(), "abcd", MERCHANT_CODE) is False


def test_verify_defaults_currency_to_kes():
    expected = callback_hash("ORD1")
    assert verify_jenga_signature(_params(currency=""), expected, MERCHANT_CODE) is True
    assert verify_jenga_signature(_params(currency="USD"), expected, MERCHANT_CODE) is False


def test_validate_callback_payload_lists_missing_in_order():
    result = validate_callback_payload({})
    assert result.valid is False
    assert result.missing == ["orderReference", "status"]

    result = validate_callback_payload({"orderReference": "ORD1", "status": ""})
    assert result.missing == ["status"]

    assert validate_callback_payload({"orderReference": "ORD1", "status": "paid"}).valid is True


def test_sanitize_log_data_masks_sensitive_fields():
    data = {
        "token": "eyJhbGciOi",
        "hash": "abc",
        "customerEmail": "test@example.com",
        "customerPhone": "0712345678",
        "mobileNumber": "1234",
        "orderReference": "ORD1",
    }
    sanitized = sanitize_log_data(data)

    assert sanitized == {
        "token": "eyJh...",
        "hash": "***",
        "customerEmail": "test...",
        "customerPhone": "0712...",
        "mobileNumber": "***",
        "orderReference": "ORD1",
    }
    assert data["customerEmail"] == "test@example.com"


def test_sanitize_log_data_leaves_empty_values():
    assert sanitize_log_data({"token": "", "hash": None}) == {"token": "", "hash": None}
    assert sanitize_log_data(None) == {}


def test_idempotency_key_is_sha256_of_reference_and_transaction():
    assert generate_idempotency_key("ORD1") == hashlib.sha256(b"ORD1").hexdigest()
    assert generate_idempotency_key("ORD1", "TX9") == hashlib.sha256(b"ORD1-TX9").hexdigest()
    assert len(generate_idempotency_key("ORD1")) == 64
    assert generate_idempotency_key("ORD1", "TX9") != generate_idempotency_key("ORD1", "TX8")


def test_security_logger_sanitizes_before_logging():
    with patch("apps.payments.security.security_logger") as mock_logger:
        PaymentSecurityLogger.warning("CALLBACK_DUPLICATE", {"hash": "deadbeef", "orderReference": "ORD1"})

    level, message = mock_logger.log.call_args.args
    extra = mock_logger.log.call_args.kwargs["extra"]
    assert level == logging.WARNING
    assert message == "CALLBACK_DUPLICATE"
    assert extra["event"] == "CALLBACK_DUPLICATE"
    assert extra["security"] == {"hash": "dead...", "orderReference": "ORD1"}
