import unittest
from decimal import Decimal
from unittest.mock import patch

from django.db import IntegrityError

from apps.clients.dtos import ProductResponse, UserResponse
from apps.clients.exceptions import RemoteNotFoundError, RemoteServiceError
from apps.shopping.exceptions import (
    CartNotFoundError,
    CartOperationError,
    ProductNotFoundError,
    UserNotFoundError,
)
from apps.shopping.mappers import CartItemMapper, CartMapper
from apps.shopping.services import ShoppingService


class DummyAtomic:
    def __call__(self, *args, **kwargs):
        return self

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


class StubCart:
    def __init__(self, cart_id: int, user_id: int, total=Decimal("0.00")):
        self.id = cart_id
        self.user_id = user_id
        self.total = total


class StubCartItem:
    def __init__(self, item_id: int, cart_id: int, product_id: int, quantity: int, unit_price):
        self.id = item_id
        self.cart_id = cart_id
        self.product_id = product_id
        self.quantity = quantity
        self.unit_price = unit_price


class FakeCartRepository:
    def __init__(self):
        self._storage = {}
        self._pk = 1
        self.saves = 0
        self.lock_requests = []

    def get_for_user(self, user_id: int, lock: bool = False):
        self.lock_requests.append(lock)
        for cart in self._storage.values():
            if cart.user_id == user_id:
                return cart
        return None

    def create(self, **data):
        cart = StubCart(self._pk, data["user_id"], data.get("total", Decimal("0.00")))
        self._storage[self._pk] = cart
        self._pk += 1
        return cart

    def save(self, cart):
        self.saves += 1
        return cart


class RacingCartRepository(FakeCartRepository):
    """Another request inserts the same user's cart between our read and insert."""

    def create(self, **data):
        super().create(**data)
        raise IntegrityError("UNIQUE constraint failed: carts.user_id")


class FakeCartItemRepository:
    def __init__(self):
        self._items = []
        self._pk = 1

    def create(self, **data):
        item = StubCartItem(
            self._pk,
            data["cart"].id,
            data["product_id"],
            data["quantity"],
            data["unit_price"],
        )
        self._pk += 1
        self._items.append(item)
        return item

    def save(self, item):
        return item

    def list_for_cart(self, cart_id: int):
        return [i for i in self._items if i.cart_id == cart_id]

    def get_for_cart_product(self, cart_id: int, product_id: int):
        for item in self._items:
            if item.cart_id == cart_id and item.product_id == product_id:
                return item
        return None

    def delete(self, item):
        self._items.remove(item)

    def delete_for_cart(self, cart):
        self._items = [i for i in self._items if i.cart_id != cart.id]


class FakeProductClient:
    def __init__(self, products):
        self._products = {p.id: p for p in products}
        self.stock_updates = []
        self.stock_error = None

    def find_product_by_id(self, product_id: int):
        if product_id not in self._products:
            raise RemoteNotFoundError("product-service", "Resource not found")
        return self._products[product_id]

    def update_stock_product(self, product_id: int, quantity: int):
        if self.stock_error is not None:
            raise self.stock_error
        self.stock_updates.append((product_id, quantity))
        return self._products.get(product_id)


class FakeUserClient:
    def __init__(self, user_ids):
        self._users = {
            uid: UserResponse(id=uid, name="Test", last_name="User", email=f"u{uid}@example.com")
            for uid in user_ids
        }
        self.error = None

    def get_user_by_id(self, user_id: int):
        if self.error is not None:
            raise self.error
        return self._users.get(user_id)


class ShoppingServiceUnitTests(unittest.TestCase):
    def setUp(self):
        self.products = FakeProductClient(
            [
                ProductResponse(id=1, name="Widget", price=Decimal("10.00"), stock=20),
                ProductResponse(id=2, name="Gadget", price=Decimal("2.50"), stock=5),
                ProductResponse(id=3, name="Doohickey", price=Decimal("1.25"), stock=9),
            ]
        )
        self.users = FakeUserClient([7])
        self.carts = FakeCartRepository()
        self.cart_items = FakeCartItemRepository()
        self.atomic_patcher = patch(
            "apps.shopping.services.transaction.atomic", DummyAtomic()
        )
        self.atomic_patcher.start()
        self.service = ShoppingService(
            carts=self.carts,
            cart_items=self.cart_items,
            products=self.products,
            users=self.users,
            cart_mapper=CartMapper(CartItemMapper()),
        )

    def tearDown(self):
        self.atomic_patcher.stop()

    def test_add_to_cart_creates_cart_on_first_add(self):
        dto = self.service.add_to_cart(7, 2, 2)
        self.assertEqual(dto.user_id, 7)
        self.assertEqual(len(dto.items), 1)
        self.assertEqual(dto.items[0].product_id, 2)
        self.assertEqual(dto.items[0].subtotal, Decimal("5.00"))
        self.assertEqual(dto.total, Decimal("5.00"))
        self.assertEqual(self.products.stock_updates, [(2, 2)])
        self.assertTrue(self.carts.lock_requests[-1])

    def test_adding_same_product_accumulates_quantity(self):
        self.service.add_to_cart(7, 1, 2)
        dto = self.service.add_to_cart(7, 1, 3)
        self.assertEqual(len(dto.items), 1)
        self.assertEqual(dto.items[0].quantity, 5)
        self.assertEqual(dto.total, Decimal("50.00"))

    def test_total_is_sum_of_line_subtotals(self):
        self.service.add_to_cart(7, 1, 1)
        self.service.add_to_cart(7, 2, 3)
        dto = self.service.add_to_cart(7, 3, 4)
        expected = sum((i.subtotal for i in dto.items), Decimal("0"))
        self.assertEqual(dto.total, expected)
        self.assertEqual(dto.total, Decimal("22.50"))

    def test_add_to_cart_unknown_product(self):
        with self.assertRaises(ProductNotFoundError):
            self.service.add_to_cart(7, 404, 1)
        self.assertIsNone(self.carts.get_for_user(7))
        self.assertEqual(self.products.stock_updates, [])

    def test_add_to_cart_unknown_user(self):
        with self.assertRaises(UserNotFoundError):
            self.service.add_to_cart(99, 1, 1)
        self.assertIsNone(self.carts.get_for_user(99))

    def test_add_to_cart_user_lookup_failure_is_user_not_found(self):
        self.users.error = RemoteServiceError("auth-service", "boom", remote_status=500)
        with self.assertRaises(UserNotFoundError):
            self.service.add_to_cart(7, 1, 1)

    def test_add_to_cart_rejects_quantity_above_stock(self):
        with self.assertRaises(CartOperationError):
            self.service.add_to_cart(7, 2, 6)
        self.assertIsNone(self.carts.get_for_user(7))
        self.assertEqual(self.products.stock_updates, [])

    def test_add_to_cart_rejects_non_positive_quantity(self):
        with self.assertRaises(CartOperationError):
            self.service.add_to_cart(7, 1, 0)

    def test_add_to_cart_reservation_failure_leaves_cart_untouched(self):
        self.products.stock_error = RemoteServiceError("product-service", "down", remote_status=503)
        with self.assertRaises(RemoteServiceError):
            self.service.add_to_cart(7, 1, 1)
        self.assertIsNone(self.carts.get_for_user(7))

    def test_add_to_cart_releases_stock_when_persistence_fails(self):
        with patch.object(self.cart_items, "create", side_effect=RuntimeError("db down")):
            with self.assertRaises(RuntimeError):
                self.service.add_to_cart(7, 1, 2)
        self.assertEqual(self.products.stock_updates, [(1, 2), (1, -2)])

    def test_remove_from_cart_without_cart(self):
        with self.assertRaises(CartNotFoundError):
            self.service.remove_from_cart(7, 1)

    def test_remove_absent_product_is_operation_error(self):
        self.service.add_to_cart(7, 1, 2)
        with self.assertRaises(CartOperationError):
            self.service.remove_from_cart(7, 2)
        dto = self.service.send_cart(7)
        self.assertEqual(len(dto.items), 1)

    def test_remove_from_cart_recomputes_total_and_releases_stock(self):
        self.service.add_to_cart(7, 1, 2)
        self.service.add_to_cart(7, 2, 2)
        dto = self.service.remove_from_cart(7, 1)
        self.assertEqual([i.product_id for i in dto.items], [2])
        self.assertEqual(dto.total, Decimal("5.00"))
        self.assertIn((1, -2), self.products.stock_updates)

    def test_remove_from_cart_succeeds_when_stock_release_fails(self):
        self.service.add_to_cart(7, 1, 2)
        self.products.stock_error = RemoteServiceError("product-service", "down")
        dto = self.service.remove_from_cart(7, 1)
        self.assertEqual(dto.items, [])
        self.assertEqual(dto.total, Decimal("0.00"))

    def test_send_cart_without_cart(self):
        with self.assertRaises(CartNotFoundError):
            self.service.send_cart(7)

    def test_send_cart_is_read_only(self):
        self.service.add_to_cart(7, 1, 1)
        saves_before = self.carts.saves
        updates_before = list(self.products.stock_updates)
        dto = self.service.send_cart(7)
        self.assertEqual(dto.total, Decimal("10.00"))
        self.assertEqual(self.carts.saves, saves_before)
        self.assertEqual(self.products.stock_updates, updates_before)

    def test_clear_cart_with_three_items(self):
        self.service.add_to_cart(7, 1, 1)
        self.service.add_to_cart(7, 2, 1)
        self.service.add_to_cart(7, 3, 1)
        dto = self.service.clear_cart(7)
        self.assertEqual(dto.items, [])
        self.assertEqual(dto.total, Decimal("0.00"))
        after = self.service.send_cart(7)
        self.assertEqual(after.items, [])
        self.assertEqual(after.total, Decimal("0.00"))
        self.assertEqual(
            sorted(u for u in self.products.stock_updates if u[1] < 0),
            [(1, -1), (2, -1), (3, -1)],
        )

    def test_clear_cart_without_cart(self):
        with self.assertRaises(CartNotFoundError):
            self.service.clear_cart(7)

    def test_add_to_cart_reuses_cart_created_concurrently(self):
        carts = RacingCartRepository()
        service = ShoppingService(
            carts=carts,
            cart_items=self.cart_items,
            products=self.products,
            users=self.users,
            cart_mapper=CartMapper(CartItemMapper()),
        )
        dto = service.add_to_cart(7, 1, 2)
        self.assertEqual(dto.user_id, 7)
        self.assertEqual(dto.total, Decimal("20.00"))
        self.assertEqual(len(carts._storage), 1)
        self.assertEqual(carts.lock_requests, [True, True])
        self.assertEqual(self.products.stock_updates, [(1, 2)])
