from decimal import Decimal

from rest_framework import serializers


class PaymentReadSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    order_id = serializers.IntegerField()
    total = serializers.DecimalField(max_digits=12, decimal_places=2)
    currency = serializers.CharField()
    method = serializers.CharField()
    description = serializers.CharField(allow_blank=True)
    status = serializers.CharField()
    created_at = serializers.DateTimeField(allow_null=True)


class PaymentCreateSerializer(serializers.Serializer):
    orderId = serializers.IntegerField(min_value=1)
    total = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0.01")
    )
    currency = serializers.CharField(max_length=10)
    method = serializers.CharField(max_length=50)
    description = serializers.CharField(
        max_length=255, required=False, allow_blank=True, allow_null=True
    )

    def validate_currency(self, value):
        return value.upper()


class OrderReadSerializer(serializers.Serializer):
    order_id = serializers.IntegerField()
    name = serializers.CharField()
    last_name = serializers.CharField()
    email = serializers.CharField()
    address = serializers.CharField()
    phone = serializers.CharField()
    order_status = serializers.CharField(allow_null=True)
    order_date = serializers.DateTimeField(allow_null=True)
    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2, allow_null=True)
