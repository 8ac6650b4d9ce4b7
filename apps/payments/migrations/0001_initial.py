import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Payment",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("token", models.TextField(blank=True, default="")),
                ("merchant_code", models.CharField(blank=True, default="", max_length=64)),
                ("currency", models.CharField(default="KES", max_length=3)),
                ("order_amount", models.DecimalField(decimal_places=2, max_digits=12)),
                ("order_reference", models.CharField(db_index=True, max_length=64)),
                ("product_type", models.CharField(default="Product", max_length=50)),
                ("product_description", models.CharField(blank=True, default="", max_length=255)),
                ("payment_time_limit", models.CharField(default="15mins", max_length=20)),
                ("customer_first_name", models.CharField(blank=True, default="", max_length=100)),
                ("customer_last_name", models.CharField(blank=True, default="", max_length=100)),
                ("customer_postal_code_zip", models.CharField(default="00100", max_length=20)),
                ("customer_address", models.CharField(blank=True, default="", max_length=255)),
                ("customer_email", models.EmailField(blank=True, default="", max_length=254)),
                ("customer_phone", models.CharField(blank=True, default="", max_length=20)),
                ("callback_url", models.URLField(max_length=500)),
                ("country_code", models.CharField(default="KE", max_length=2)),
                ("secondary_reference", models.CharField(blank=True, default="", max_length=64)),
                ("signature", models.TextField(blank=True, default="")),
                ("extra_data", models.TextField(blank=True, default="")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("processing", "Processing"),
                            ("paid", "Paid"),
                            ("failed", "Failed"),
                        ],
                        db_index=True,
                        default="pending",
                        max_length=20,
                    ),
                ),
                ("transaction_id", models.CharField(blank=True, db_index=True, max_length=100, null=True)),
                ("payment_channel", models.CharField(blank=True, max_length=50, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="PaymentLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("provider", models.CharField(max_length=50)),
                ("reference", models.CharField(db_index=True, max_length=100)),
                ("raw_payload", models.JSONField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
        ),
        migrations.CreateModel(
            name="ProcessedCallback",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("key", models.CharField(max_length=64, unique=True)),
                ("order_reference", models.CharField(max_length=64)),
                ("transaction_id", models.CharField(blank=True, max_length=100, null=True)),
                ("processed_at", models.DateTimeField(auto_now_add=True, db_index=True)),
            ],
        ),
    ]
