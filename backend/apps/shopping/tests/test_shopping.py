from decimal import Decimal
from unittest.mock import patch

from django.test import TestCase
from rest_framework import status
from rest_framework.test import APITestCase

from apps.api.identity import RequestIdentityResolver
from apps.api.views import EnvelopeAPIView
from apps.clients.dtos import ProductResponse, UserResponse
from apps.shopping.mappers import CartItemMapper, CartMapper
from apps.shopping.models import Cart, CartItem
from apps.shopping.repositories import CartItemRepository, CartRepository
from apps.shopping.services import ShoppingService
from apps.shopping.views import ShoppingView


class StaticProductClient:
    def __init__(self):
        self.products = {
            1: ProductResponse(id=1, name="Widget", price=Decimal("10.00"), stock=50),
            2: ProductResponse(id=2, name="Gadget", price=Decimal("4.00"), stock=50),
            3: ProductResponse(id=3, name="Gizmo", price=Decimal("1.50"), stock=50),
        }

    def find_product_by_id(self, product_id):
        return self.products.get(product_id)

    def update_stock_product(self, product_id, quantity):
        return self.products.get(product_id)


class StaticUserClient:
    def get_user_by_id(self, user_id):
        return UserResponse(id=user_id, name="Cart", last_name="User", email="cart@example.com")


class TestShoppingApi(APITestCase):
    def setUp(self):
        service = ShoppingService(
            carts=CartRepository(),
            cart_items=CartItemRepository(),
            products=StaticProductClient(),
            users=StaticUserClient(),
            cart_mapper=CartMapper(CartItemMapper()),
        )
        self.service_patch = patch.object(ShoppingView, "service", service)
        self.service_patch.start()
        self.identity_patch = patch.object(
            EnvelopeAPIView, "identity", RequestIdentityResolver(trust_headers=True)
        )
        self.identity_patch.start()
        self.client.credentials(HTTP_X_USER_ID="42", HTTP_X_USER_EMAIL="cart@example.com")

    def tearDown(self):
        self.identity_patch.stop()
        self.service_patch.stop()

    def _add(self, product_id, quantity):
        return self.client.post(
            "/shopping/add-to-cart",
            {"idProduct": product_id, "quantity": quantity},
            format="json",
        )

    def test_add_twice_merges_into_one_line(self):
        self.assertEqual(self._add(1, 2).status_code, status.HTTP_200_OK)
        res = self._add(1, 3)
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["data"]["total"], "50.00")
        cart = Cart.objects.get(user_id=42)
        self.assertEqual(CartItem.objects.filter(cart=cart).count(), 1)
        self.assertEqual(CartItem.objects.get(cart=cart, product_id=1).quantity, 5)
        self.assertEqual(cart.total, Decimal("50.00"))

    def test_remove_then_get(self):
        self._add(1, 1)
        self._add(2, 2)
        res = self.client.delete("/shopping/remove-from-cart", {"idProduct": 1}, format="json")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        res_get = self.client.get("/shopping/send-cart")
        self.assertEqual(res_get.status_code, status.HTTP_200_OK)
        self.assertEqual(res_get.data["data"]["total"], "8.00")
        self.assertEqual([i["product_id"] for i in res_get.data["data"]["items"]], [2])

    def test_clear_cart_empties_lines(self):
        self._add(1, 1)
        self._add(2, 1)
        self._add(3, 1)
        res = self.client.get("/shopping/clear-cart")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        cart = Cart.objects.get(user_id=42)
        self.assertEqual(cart.total, Decimal("0.00"))
        self.assertFalse(CartItem.objects.filter(cart=cart).exists())

    def test_send_cart_without_cart_is_404(self):
        res = self.client.get("/shopping/send-cart")
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(res.data["status"], "ERROR")

    def test_unknown_product_is_404_and_creates_no_cart(self):
        res = self._add(999, 1)
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)
        self.assertFalse(Cart.objects.filter(user_id=42).exists())


class CartInsertedByOtherRequestRepository(CartRepository):
    def __init__(self):
        super().__init__()
        self.raced = False

    def get_for_user(self, user_id, lock=False):
        cart = super().get_for_user(user_id, lock=lock)
        if cart is None and not self.raced:
            self.raced = True
            Cart.objects.create(user_id=user_id)
        return cart


class TestConcurrentFirstAdd(TestCase):
    def test_unique_conflict_on_first_add_reuses_existing_cart(self):
        carts = CartInsertedByOtherRequestRepository()
        service = ShoppingService(
            carts=carts,
            cart_items=CartItemRepository(),
            products=StaticProductClient(),
            users=StaticUserClient(),
            cart_mapper=CartMapper(CartItemMapper()),
        )
        dto = service.add_to_cart(7, 1, 2)
        self.assertTrue(carts.raced)
        self.assertEqual(Cart.objects.filter(user_id=7).count(), 1)
        self.assertEqual(dto.total, Decimal("20.00"))
        self.assertEqual(CartItem.objects.get(cart_id=dto.id).quantity, 2)
