from decimal import Decimal

from rest_framework import serializers

from .models import Payment


class PaymentCreateSerializer(serializers.Serializer):
    order_reference = serializers.CharField(max_length=64)
    order_amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("1"))
    customer_first_name = serializers.CharField(max_length=100)
    customer_last_name = serializers.CharField(max_length=100)
    customer_email = serializers.EmailField()
    customer_phone = serializers.CharField(max_length=20)
    customer_address = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    product_description = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")


class PaymentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Payment
        exclude = ["token"]


class PaymentStatusSerializer(serializers.ModelSerializer):
    """
    What the checkout result page may see about a payment.
    """

    class Meta:
        model = Payment
        fields = [
            "order_reference",
            "status",
            "transaction_id",
            "payment_channel",
            "order_amount",
            "currency",
            "created_at",
            "updated_at",
        ]
