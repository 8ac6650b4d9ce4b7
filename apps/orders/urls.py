from django.urls import path
from rest_framework.routers import DefaultRouter

from .views import (
    OrderByReferenceView,
    OrderPaymentStatusView,
    OrderStatsView,
    OrderViewSet,
    ProductListView,
)

router = DefaultRouter()
router.register("", OrderViewSet, basename="order")

urlpatterns = [
    path("stats/", OrderStatsView.as_view(), name="order-stats"),
    path("products/", ProductListView.as_view(), name="order-products"),
    path("reference/<str:order_reference>/", OrderByReferenceView.as_view(), name="order-by-reference"),
    path(
        "reference/<str:order_reference>/payment/",
        OrderPaymentStatusView.as_view(),
        name="order-payment-status",
    ),
] + router.urls
