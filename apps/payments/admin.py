from django.contrib import admin

from .models import Payment, PaymentLog, ProcessedCallback


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ("order_reference", "order_amount", "status", "payment_channel", "transaction_id", "created_at")
    search_fields = ("order_reference", "transaction_id", "customer_email")
    list_filter = ("status", "payment_channel")
    exclude = ("token",)


@admin.register(ProcessedCallback)
class ProcessedCallbackAdmin(admin.ModelAdmin):
    list_display = ("order_reference", "transaction_id", "processed_at")
    search_fields = ("order_reference", "transaction_id", "key")


@admin.register(PaymentLog)
class PaymentLogAdmin(admin.ModelAdmin):
    list_display = ("provider", "reference", "created_at")
    search_fields = ("provider", "reference")
