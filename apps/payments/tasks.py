from datetime import timedelta

from celery import shared_task
from django.conf import settings

from .services import purge_processed_callbacks as purge_ledger


@shared_task
def purge_processed_callbacks() -> int:
    """
    Drop idempotency entries older than the configured TTL.
    """
    ttl = timedelta(seconds=settings.PAYMENTS_IDEMPOTENCY_TTL_SECONDS)
    return purge_ledger(ttl)
