import logging
from urllib.parse import urlencode

import sentry_sdk
from django.conf import settings
from django.http import HttpResponseRedirect
from rest_framework import permissions, status, views, viewsets
from rest_framework.response import Response

from .gateway import JengaGatewayError
from .models import Payment
from .security import PaymentSecurityLogger
from .serializers import PaymentCreateSerializer, PaymentSerializer, PaymentStatusSerializer
from .services import create_payment_record, find_payment, process_gateway_callback
from .signing import JengaConfig, SigningConfigurationError

logger = logging.getLogger(__name__)


def _payload(request) -> dict:
    # Gateway callbacks arrive as JSON or as form posts.
    data = request.data
    if hasattr(data, "dict"):
        return data.dict()
    if isinstance(data, dict):
        return dict(data)
    return {}


def _checkout_result_redirect(**params) -> HttpResponseRedirect:
    base = settings.FRONTEND_BASE_URL.rstrip("/")
    return HttpResponseRedirect(f"{base}/checkout/result?{urlencode(params)}")


class PaymentViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Payment records. Creation is public (the checkout form), reading is admin only.
    """

    queryset = Payment.objects.all()
    serializer_class = PaymentSerializer
    permission_classes = [permissions.IsAdminUser]
    filterset_fields = ["status", "payment_channel"]
    search_fields = ["order_reference", "transaction_id"]
    ordering_fields = ["created_at", "order_amount"]

    def get_permissions(self):
        if self.action == "create":
            return [permissions.AllowAny()]
        return super().get_permissions()

    def create(self, request, *args, **kwargs):
        serializer = PaymentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            payment = create_payment_record(JengaConfig.from_settings(), **serializer.validated_data)
        except ValueError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except SigningConfigurationError as exc:
            PaymentSecurityLogger.error("SIGNING_CONFIGURATION_ERROR", {"error": str(exc)})
            return Response(
                {"detail": "Payment provider is not configured."},
                status=status.HTTP_503_SERVICE_UNAVAILABLE,
            )
        except JengaGatewayError as exc:
            PaymentSecurityLogger.error("GATEWAY_TOKEN_ERROR", {"error": str(exc)})
            return Response(
                {"detail": "Failed to initialize payment with Jenga.", "error": str(exc)},
                status=status.HTTP_502_BAD_GATEWAY,
            )

        return Response(
            {"payment_id": str(payment.id), "payment_data": payment.to_gateway_payload()},
            status=status.HTTP_201_CREATED,
        )


class JengaWebhookView(views.APIView):
    """
    Jenga PGW callback endpoint.

    POST is the signed server-to-server notification and the only path that
    changes payment state. GET is the shopper's browser coming back from the
    checkout and is only redirected to the result page.
    """

    permission_classes = [permissions.AllowAny]
    authentication_classes: list = []

    def get(self, request, *args, **kwargs):
        params = request.query_params
        order_reference = params.get("orderReference")
        transaction_id = params.get("transactionId")
        gateway_status = params.get("status")

        PaymentSecurityLogger.event(
            "CALLBACK_GET_RECEIVED",
            {
                "orderReference": order_reference,
                "status": gateway_status,
                "transactionId": transaction_id,
                "hasAmount": bool(params.get("amount")),
            },
        )

        if not order_reference:
            PaymentSecurityLogger.warning("CALLBACK_GET_MISSING_REFERENCE", {"params": list(params.keys())})
            return _checkout_result_redirect(status="error", message="Invalid payment reference")

        redirect_params = {"status": gateway_status or "pending", "reference": order_reference}
        if transaction_id:
            redirect_params["transactionId"] = transaction_id

        PaymentSecurityLogger.event("CALLBACK_GET_REDIRECT", {"orderReference": order_reference, "status": gateway_status})
        return _checkout_result_redirect(**redirect_params)

    def post(self, request, *args, **kwargs):
        try:
            outcome = process_gateway_callback(_payload(request), JengaConfig.from_settings())
        except Exception as exc:
            sentry_sdk.capture_exception(exc)
            PaymentSecurityLogger.error("CALLBACK_PROCESSING_ERROR", {"error": str(exc)})
            return Response(
                {"error": "Failed to process payment callback"},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        return Response(outcome.body, status=outcome.status_code)


class LegacyPaymentCallbackView(views.APIView):
    """
    Deprecated callback URL kept for merchants still configured with it.
    """

    permission_classes = [permissions.AllowAny]
    authentication_classes: list = []

    def _warn(self, method: str, data) -> None:
        reference = (data or {}).get("orderReference") or (data or {}).get("transactionReference") or "unknown"
        logger.warning(
            "[DEPRECATED] /api/payment/callback %s endpoint is deprecated. Use /%s instead",
            method,
            settings.JENGA_WEBHOOK_PATH,
            extra={"method": method, "reference": str(reference), "endpoint": "/api/payment/callback"},
        )

    def get(self, request, *args, **kwargs):
        params = request.query_params
        self._warn("GET", params)
        target = f"/{settings.JENGA_WEBHOOK_PATH}"
        if params:
            target = f"{target}?{params.urlencode()}"
        return HttpResponseRedirect(target)

    def post(self, request, *args, **kwargs):
        try:
            payload = _payload(request)
            self._warn("POST", payload)
            outcome = process_gateway_callback(payload, JengaConfig.from_settings())
        except Exception as exc:
            sentry_sdk.capture_exception(exc)
            logger.error("Error forwarding deprecated payment callback", extra={"error": str(exc)})
            # Always 200 so the gateway stops retrying.
            return Response(
                {"success": False, "message": "Callback received but processing failed", "error": str(exc)},
                status=status.HTTP_200_OK,
            )

        body = {"success": True, "message": "Callback forwarded to secure webhook"}
        body.update(outcome.body)
        return Response(body, status=status.HTTP_200_OK)


class CheckoutStatusView(views.APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request, *args, **kwargs):
        reference = request.query_params.get("reference")
        transaction_id = request.query_params.get("transactionId")

        if not reference and not transaction_id:
            return Response(
                {"success": False, "error": "missing_reference_or_transactionId"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            payment = find_payment(order_reference=reference, transaction_id=transaction_id)
        except Exception as exc:
            sentry_sdk.capture_exception(exc, tags={"endpoint": "/api/checkout/status"})
            logger.exception("Checkout status lookup failed")
            return Response({"success": False, "error": str(exc)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        data = PaymentStatusSerializer(payment).data if payment else None
        return Response({"success": True, "payment": data})


class ReconcileOrdersView(views.APIView):
    permission_classes = [permissions.AllowAny]

    def post(self, request, *args, **kwargs):
        return Response(
            {
                "success": False,
                "message": "Reconciliation has moved to PATCH /api/orders/reference/<order_reference>/payment/.",
            },
            status=status.HTTP_410_GONE,
        )
