from django.db import models
from django.utils import timezone


class PaymentStatus(models.TextChoices):
    SUCCESS = "SUCCESS", "Success"


class Payment(models.Model):
    # Orders live in the order service; only their id is stored here.
    order_id = models.BigIntegerField(db_index=True)
    total = models.DecimalField(max_digits=12, decimal_places=2)
    currency = models.CharField(max_length=10)
    method = models.CharField(max_length=50)
    description = models.CharField(max_length=255, blank=True, default="")
    status = models.CharField(
        max_length=20, choices=PaymentStatus.choices, default=PaymentStatus.SUCCESS
    )
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "payments"
        ordering = ["id"]

    def __str__(self):
        return f"Payment {self.id} for order {self.order_id} ({self.status})"
