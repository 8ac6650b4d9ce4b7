import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("order_reference", models.CharField(max_length=64, unique=True)),
                ("student", models.CharField(choices=[("yes", "Yes"), ("no", "No")], max_length=3)),
                ("university", models.CharField(blank=True, max_length=255, null=True)),
                ("graduation_year", models.CharField(blank=True, max_length=10, null=True)),
                ("year_of_study", models.CharField(blank=True, max_length=10, null=True)),
                ("reg_number", models.CharField(blank=True, max_length=64, null=True)),
                (
                    "attending",
                    models.CharField(
                        choices=[("attending", "Attending"), ("notattending", "Not attending")], max_length=20
                    ),
                ),
                ("tshirt_type", models.CharField(choices=[("polo", "Polo"), ("round", "Round")], max_length=10)),
                ("tshirt_size", models.CharField(max_length=255)),
                ("quantity", models.PositiveIntegerField()),
                ("total_amount", models.DecimalField(decimal_places=2, max_digits=12)),
                ("sales_agent_name", models.CharField(blank=True, max_length=255, null=True)),
                ("name", models.CharField(max_length=255)),
                ("email", models.EmailField(db_index=True, max_length=254)),
                ("phone", models.CharField(db_index=True, max_length=20)),
                ("name_of_kin", models.CharField(max_length=255)),
                ("kin_number", models.CharField(max_length=20)),
                ("medical_condition", models.TextField(blank=True, default="")),
                ("pick_up", models.CharField(blank=True, max_length=64, null=True)),
                ("confirm", models.CharField(max_length=10)),
                ("paid", models.BooleanField(default=False)),
                ("school_id_url", models.URLField(blank=True, max_length=500, null=True)),
                ("school_id_public_id", models.CharField(blank=True, max_length=255, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
    ]
