import logging

from django.db import IntegrityError
from rest_framework import permissions, status, viewsets
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import Order
from .pricing import PRODUCTS
from .serializers import (
    OrderCreateSerializer,
    OrderPaymentUpdateSerializer,
    OrderSerializer,
    OrderStatusSerializer,
    ProductSerializer,
)
from .services import OrderNotFound, create_order, get_order_by_reference, get_order_stats, mark_order_paid

logger = logging.getLogger(__name__)


class OrderViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Registrations. Anyone may submit one; listing and detail are admin only.
    """

    queryset = Order.objects.all()
    serializer_class = OrderSerializer
    permission_classes = [permissions.IsAdminUser]
    filterset_fields = ["paid", "student", "tshirt_type", "attending", "university"]
    search_fields = ["order_reference", "email", "name", "phone"]
    ordering_fields = ["created_at", "total_amount"]

    def get_permissions(self):
        if self.action == "create":
            return [permissions.AllowAny()]
        return super().get_permissions()

    def create(self, request, *args, **kwargs):
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = create_order(serializer.validated_data)
        except ValueError as exc:
            return Response({"total_amount": [str(exc)]}, status=status.HTTP_400_BAD_REQUEST)
        except IntegrityError:
            return Response(
                {"detail": "An order with this reference already exists."},
                status=status.HTTP_409_CONFLICT,
            )

        logger.info("Order created", extra={"order_reference": order.order_reference})
        return Response(
            {"id": str(order.id), "order_reference": order.order_reference},
            status=status.HTTP_201_CREATED,
        )


class OrderByReferenceView(APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request, order_reference: str, *args, **kwargs):
        try:
            order = get_order_by_reference(order_reference)
        except OrderNotFound:
            return Response({"detail": "Order not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response(OrderStatusSerializer(order).data)


class OrderPaymentStatusView(APIView):
    """
    Manual override of an order's paid flag from the admin dashboard.
    """

    permission_classes = [permissions.IsAdminUser]

    def patch(self, request, order_reference: str, *args, **kwargs):
        serializer = OrderPaymentUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = mark_order_paid(order_reference, paid=serializer.validated_data["paid"])
        except OrderNotFound:
            return Response({"detail": "Order not found"}, status=status.HTTP_404_NOT_FOUND)

        logger.info(
            "Order payment flag updated",
            extra={
                "order_reference": order.order_reference,
                "paid": order.paid,
                "transaction_id": serializer.validated_data.get("transaction_id") or None,
            },
        )
        return Response({"id": str(order.id), "order_reference": order.order_reference, "paid": order.paid})


class OrderStatsView(APIView):
    permission_classes = [permissions.IsAdminUser]

    def get(self, request, *args, **kwargs):
        stats = get_order_stats()
        stats["total_revenue"] = str(stats["total_revenue"])
        return Response(stats)


class ProductListView(APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request, *args, **kwargs):
        serializer = ProductSerializer(list(PRODUCTS.values()), many=True)
        return Response(serializer.data)
