import uuid

from django.db import models


class Order(models.Model):
    """
    A run registration together with the t-shirt purchase it pays for.
    """

    STUDENT_CHOICES = [
        ("yes", "Yes"),
        ("no", "No"),
    ]

    ATTENDING_CHOICES = [
        ("attending", "Attending"),
        ("notattending", "Not attending"),
    ]

    TSHIRT_TYPE_CHOICES = [
        ("polo", "Polo"),
        ("round", "Round"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order_reference = models.CharField(max_length=64, unique=True)

    student = models.CharField(max_length=3, choices=STUDENT_CHOICES)
    university = models.CharField(max_length=255, blank=True, null=True)
    graduation_year = models.CharField(max_length=10, blank=True, null=True)
    year_of_study = models.CharField(max_length=10, blank=True, null=True)
    reg_number = models.CharField(max_length=64, blank=True, null=True)

    attending = models.CharField(max_length=20, choices=ATTENDING_CHOICES)
    tshirt_type = models.CharField(max_length=10, choices=TSHIRT_TYPE_CHOICES)
    # Either a single size ("medium") or a cart string ("M:2,L:3,XL:1").
    tshirt_size = models.CharField(max_length=255)
    quantity = models.PositiveIntegerField()
    total_amount = models.DecimalField(max_digits=12, decimal_places=2)
    sales_agent_name = models.CharField(max_length=255, blank=True, null=True)

    name = models.CharField(max_length=255)
    email = models.EmailField(db_index=True)
    phone = models.CharField(max_length=20, db_index=True)
    name_of_kin = models.CharField(max_length=255)
    kin_number = models.CharField(max_length=20)
    medical_condition = models.TextField(blank=True, default="")
    pick_up = models.CharField(max_length=64, blank=True, null=True)
    confirm = models.CharField(max_length=10)

    paid = models.BooleanField(default=False)

    school_id_url = models.URLField(max_length=500, blank=True, null=True)
    school_id_public_id = models.CharField(max_length=255, blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.order_reference
