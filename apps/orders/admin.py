from django.contrib import admin

from .models import Order


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("order_reference", "name", "tshirt_type", "tshirt_size", "quantity", "total_amount", "paid", "created_at")
    search_fields = ("order_reference", "email", "name", "phone")
    list_filter = ("paid", "student", "tshirt_type", "attending")
