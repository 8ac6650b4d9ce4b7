from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict

from django.db import transaction
from django.db.models import Sum
from django.utils import timezone

from .models import Order
from .pricing import calculate_order_total
from .references import generate_order_reference, sanitize_reference
from .universities import resolve_university


class OrderNotFound(Exception):
    pass


def create_order(data: Dict[str, Any]) -> Order:
    """
    Persist a registration order submitted from the checkout form.

    ``university_user_entered`` is consumed here and not stored; it only
    decides whether an unmatched university gets the ``Other:`` prefix.

    The stored total is always the catalogue price. A submitted
    ``total_amount`` that disagrees with it raises ``ValueError``.
    """
    fields = dict(data)
    expected_total = calculate_order_total(fields["tshirt_type"], fields["student"] == "yes", fields["quantity"])
    submitted_total = fields.pop("total_amount", None)
    if submitted_total is not None and Decimal(submitted_total) != expected_total:
        raise ValueError(f"total_amount must be {expected_total} for this order")
    fields["total_amount"] = expected_total

    user_entered = bool(fields.pop("university_user_entered", False))
    fields["university"] = resolve_university(fields.get("university"), user_entered=user_entered)
    fields["order_reference"] = sanitize_reference(fields.get("order_reference")) or generate_order_reference()
    with transaction.atomic():
        return Order.objects.create(paid=False, **fields)


def get_order_by_reference(order_reference: str) -> Order:
    try:
        return Order.objects.get(order_reference=order_reference)
    except Order.DoesNotExist:
        raise OrderNotFound(order_reference)


def mark_order_paid(order_reference: str, paid: bool = True) -> Order:
    order = get_order_by_reference(order_reference)
    order.paid = paid
    order.save(update_fields=["paid", "updated_at"])
    return order


def get_order_stats() -> Dict[str, object]:
    # Imported here to keep the orders app free of a module-level dependency on payments.
    from apps.payments.models import Payment

    now = timezone.localtime()
    orders = Order.objects.all()
    paid_orders = orders.filter(paid=True)

    total_revenue = paid_orders.aggregate(total=Sum("total_amount"))["total"] or Decimal("0")

    return {
        "total_orders": orders.count(),
        "paid_orders": paid_orders.count(),
        "total_revenue": total_revenue,
        "successful_payments": Payment.objects.filter(status=Payment.STATUS_PAID).count(),
        "pending_payments": Payment.objects.filter(status=Payment.STATUS_PENDING).count(),
        "monthly_orders": orders.filter(created_at__year=now.year, created_at__month=now.month).count(),
    }
