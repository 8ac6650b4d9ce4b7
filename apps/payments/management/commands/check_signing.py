from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from apps.payments.signing import (
    JengaConfig,
    build_payment_signature_data,
    compute_signature_base64,
    verify_signature_base64,
)

SAMPLE_REFERENCE = "ORD12345678"
SAMPLE_AMOUNT = "1000"


class Command(BaseCommand):
    help = "Sign a sample payment with the configured Jenga private key and optionally verify it."

    def add_arguments(self, parser):
        parser.add_argument("--public-key", dest="public_key", help="Path to a PEM public key to verify the signature with.")

    def handle(self, *args, **options):
        config = JengaConfig.from_settings()
        if not config.private_key_pem:
            raise CommandError("No private key found. Set JENGA_PRIVATE_KEY_BASE64, JENGA_PRIVATE_KEY or JENGA_PRIVATE_KEY_PATH.")

        signature_data = build_payment_signature_data(config, SAMPLE_REFERENCE, SAMPLE_AMOUNT)
        try:
            signature = compute_signature_base64(signature_data, config.private_key_pem)
        except (ValueError, TypeError) as exc:
            raise CommandError(f"Private key could not be used for signing: {exc}") from exc

        self.stdout.write(f"signatureData: {signature_data}")
        self.stdout.write(f"signature (base64): {signature}")

        public_key_path = options.get("public_key")
        if not public_key_path:
            self.stdout.write("No public key given; skipping verification.")
            return

        path = Path(public_key_path)
        if not path.is_file():
            raise CommandError(f"Public key not found: {path}")

        ok = verify_signature_base64(signature_data, signature, path.read_text(encoding="utf-8"))
        if not ok:
            raise CommandError("Signature verification failed.")
        self.stdout.write(self.style.SUCCESS("Signature verified."))
