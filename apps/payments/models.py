import uuid

from django.db import models


class Payment(models.Model):
    """
    Outbound payment record handed to the Jenga checkout, plus the status the
    gateway later reports back for it.
    """

    STATUS_PENDING = "pending"
    STATUS_PROCESSING = "processing"
    STATUS_PAID = "paid"
    STATUS_FAILED = "failed"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_PROCESSING, "Processing"),
        (STATUS_PAID, "Paid"),
        (STATUS_FAILED, "Failed"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    token = models.TextField(blank=True, default="")
    merchant_code = models.CharField(max_length=64, blank=True, default="")
    currency = models.CharField(max_length=3, default="KES")
    order_amount = models.DecimalField(max_digits=12, decimal_places=2)
    order_reference = models.CharField(max_length=64, db_index=True)
    product_type = models.CharField(max_length=50, default="Product")
    product_description = models.CharField(max_length=255, blank=True, default="")
    payment_time_limit = models.CharField(max_length=20, default="15mins")

    customer_first_name = models.CharField(max_length=100, blank=True, default="")
    customer_last_name = models.CharField(max_length=100, blank=True, default="")
    customer_postal_code_zip = models.CharField(max_length=20, default="00100")
    customer_address = models.CharField(max_length=255, blank=True, default="")
    customer_email = models.EmailField(blank=True, default="")
    customer_phone = models.CharField(max_length=20, blank=True, default="")

    callback_url = models.URLField(max_length=500)
    country_code = models.CharField(max_length=2, default="KE")
    secondary_reference = models.CharField(max_length=64, blank=True, default="")
    signature = models.TextField(blank=True, default="")
    extra_data = models.TextField(blank=True, default="")

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    transaction_id = models.CharField(max_length=100, blank=True, null=True, db_index=True)
    payment_channel = models.CharField(max_length=50, blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.order_reference} ({self.status})"

    @property
    def gateway_amount(self):
        amount = self.order_amount
        if amount == amount.to_integral_value():
            return int(amount)
        return float(amount)

    def to_gateway_payload(self) -> dict:
        return {
            "token": self.token,
            "merchantCode": self.merchant_code,
            "currency": self.currency,
            "orderAmount": self.gateway_amount,
            "orderReference": self.order_reference,
            "productType": self.product_type,
            "productDescription": self.product_description,
            "paymentTimeLimit": self.payment_time_limit,
            "customerFirstName": self.customer_first_name,
            "customerLastName": self.customer_last_name,
            "customerPostalCodeZip": self.customer_postal_code_zip,
            "customerAddress": self.customer_address,
            "customerEmail": self.customer_email,
            "customerPhone": self.customer_phone,
            "callbackUrl": self.callback_url,
            "countryCode": self.country_code,
            "secondaryReference": self.secondary_reference,
            "signature": self.signature,
            "status": self.status,
        }


class ProcessedCallback(models.Model):
    key = models.CharField(max_length=64, unique=True)
    order_reference = models.CharField(max_length=64)
    transaction_id = models.CharField(max_length=100, blank=True, null=True)
    processed_at = models.DateTimeField(auto_now_add=True, db_index=True)

    def __str__(self) -> str:
        return self.key


class PaymentLog(models.Model):
    provider = models.CharField(max_length=50)
    reference = models.CharField(max_length=100, db_index=True)
    raw_payload = models.JSONField()
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return f"{self.provider}:{self.reference}"
