from django.conf import settings
from django.contrib import admin
from django.urls import include, path
from drf_yasg import openapi
from drf_yasg.views import get_schema_view
from rest_framework import permissions
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from apps.payments.views import (
    CheckoutStatusView,
    JengaWebhookView,
    LegacyPaymentCallbackView,
    ReconcileOrdersView,
)

schema_view = get_schema_view(
    openapi.Info(title="Run checkout API", default_version="v1"),
    public=True,
    permission_classes=[permissions.AllowAny],
)

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/auth/token/", TokenObtainPairView.as_view(), name="token-obtain"),
    path("api/auth/token/refresh/", TokenRefreshView.as_view(), name="token-refresh"),
    path("api/orders/", include("apps.orders.urls")),
    path("api/payments/", include("apps.payments.urls")),
    # Gateway-facing routes have no trailing slash; the webhook path is part of the signed callback URL.
    path(settings.JENGA_WEBHOOK_PATH, JengaWebhookView.as_view(), name="jenga-webhook"),
    path("api/payment/callback", LegacyPaymentCallbackView.as_view(), name="legacy-payment-callback"),
    path("api/checkout/status", CheckoutStatusView.as_view(), name="checkout-status"),
    path("api/reconcile-orders", ReconcileOrdersView.as_view(), name="reconcile-orders"),
    path("api/docs/", schema_view.with_ui("swagger", cache_timeout=0), name="api-docs"),
]
