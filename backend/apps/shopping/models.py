from decimal import Decimal

from django.db import models
from django.utils import timezone


class Cart(models.Model):
    # Users live in the auth service; only their id is stored here.
    user_id = models.BigIntegerField(unique=True)
    total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "carts"

    def __str__(self):
        return f"Cart {self.id} for {self.user_id}"


class CartItem(models.Model):
    cart = models.ForeignKey(Cart, on_delete=models.CASCADE, related_name="cart_items")
    product_id = models.BigIntegerField()
    quantity = models.PositiveIntegerField()
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)

    class Meta:
        unique_together = ("cart", "product_id")
        db_table = "cart_items"

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity
