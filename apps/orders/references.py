import re
import secrets
import string
import time

# Characters a payment provider accepts in its reference field.
_UNSAFE_REFERENCE_CHARS = re.compile(r"[^A-Za-z0-9]")

BASE36_ALPHABET = string.digits + string.ascii_lowercase


def sanitize_reference(value: str | None) -> str:
    if not value:
        return ""
    return _UNSAFE_REFERENCE_CHARS.sub("", value).upper()


def generate_order_reference(prefix: str = "ORD") -> str:
    """
    Provider-safe order reference: prefix + epoch milliseconds + 4-char
    base-36 random suffix, uppercase alphanumeric only.
    """
    timestamp_ms = int(time.time() * 1000)
    suffix = "".join(secrets.choice(BASE36_ALPHABET) for _ in range(4))
    return sanitize_reference(f"{prefix}{timestamp_ms}{suffix}")
