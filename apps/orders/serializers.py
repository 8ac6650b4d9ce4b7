from decimal import Decimal

from rest_framework import serializers

from .models import Order
from .pricing import Product


class OrderSerializer(serializers.ModelSerializer):
    class Meta:
        model = Order
        fields = "__all__"
        read_only_fields = ["id", "paid", "created_at", "updated_at"]


class OrderCreateSerializer(serializers.ModelSerializer):
    """
    Input payload for a registration submitted from the checkout form.
    """

    university_user_entered = serializers.BooleanField(required=False, default=False)
    order_reference = serializers.CharField(required=False, allow_blank=True, max_length=64)
    quantity = serializers.IntegerField(min_value=1)
    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0"), required=False)

    class Meta:
        model = Order
        fields = [
            "student",
            "university",
            "university_user_entered",
            "graduation_year",
            "year_of_study",
            "reg_number",
            "attending",
            "tshirt_type",
            "tshirt_size",
            "quantity",
            "total_amount",
            "sales_agent_name",
            "name",
            "email",
            "phone",
            "name_of_kin",
            "kin_number",
            "medical_condition",
            "pick_up",
            "confirm",
            "order_reference",
            "school_id_url",
            "school_id_public_id",
        ]


class OrderStatusSerializer(serializers.ModelSerializer):
    """
    Public, contact-free view of an order for the checkout result page.
    """

    class Meta:
        model = Order
        fields = [
            "order_reference",
            "paid",
            "tshirt_type",
            "tshirt_size",
            "quantity",
            "total_amount",
            "created_at",
            "updated_at",
        ]


class OrderPaymentUpdateSerializer(serializers.Serializer):
    paid = serializers.BooleanField()
    transaction_id = serializers.CharField(required=False, allow_blank=True)


class ProductSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    price = serializers.DecimalField(max_digits=10, decimal_places=2)
    student_price = serializers.DecimalField(max_digits=10, decimal_places=2)
    student_savings = serializers.SerializerMethodField()

    def get_student_savings(self, obj: Product) -> str:
        return f"{obj.student_savings.quantize(Decimal('0.01'))}"
