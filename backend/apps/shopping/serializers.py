from rest_framework import serializers


class CartItemReadSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField()
    unit_price = serializers.DecimalField(max_digits=10, decimal_places=2)
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2)


class CartReadSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    user_id = serializers.IntegerField()
    total = serializers.DecimalField(max_digits=12, decimal_places=2)
    items = CartItemReadSerializer(many=True)


class ProductRequestSerializer(serializers.Serializer):
    # Documentation only; the views parse bodies leniently via ProductRequestCommand.
    idProduct = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1, required=False)
