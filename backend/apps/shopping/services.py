from __future__ import annotations

from decimal import Decimal
from typing import List

from django.db import IntegrityError, transaction

from apps.clients.dtos import ProductResponse
from apps.clients.exceptions import RemoteNotFoundError, RemoteServiceError
from apps.common import get_logger
from .dtos import CartDTO
from .exceptions import (
    CartNotFoundError,
    CartOperationError,
    ProductNotFoundError,
    UserNotFoundError,
)
from .models import Cart, CartItem
from .protocols import (
    CartItemRepositoryProtocol,
    CartMapperProtocol,
    CartRepositoryProtocol,
    ProductClientProtocol,
    UserClientProtocol,
)

logger = get_logger(__name__).bind(component="shopping", layer="service")


class ShoppingService:
    """Cart mutations for one user, backed by the product and user services."""

    def __init__(
        self,
        carts: CartRepositoryProtocol,
        cart_items: CartItemRepositoryProtocol,
        products: ProductClientProtocol,
        users: UserClientProtocol,
        cart_mapper: CartMapperProtocol,
    ):
        self.carts = carts
        self.cart_items = cart_items
        self.products = products
        self.users = users
        self.cart_mapper = cart_mapper
        self.logger = logger.bind(service="ShoppingService")

    def add_to_cart(self, user_id: int, product_id: int, quantity: int) -> CartDTO:
        self.logger.info(
            "Adding product to cart",
            user_id=user_id,
            product_id=product_id,
            quantity=quantity,
        )
        if quantity is None or quantity <= 0:
            raise CartOperationError("Quantity must be a positive number")
        product = self._find_product(product_id)
        self._ensure_user(user_id)
        if quantity > product.stock:
            self.logger.warning(
                "Insufficient stock",
                product_id=product_id,
                requested=quantity,
                available=product.stock,
            )
            raise CartOperationError(
                f"Insufficient stock for product {product_id}: "
                f"requested {quantity}, available {product.stock}"
            )

        self._reserve_stock(product_id, quantity)
        try:
            with transaction.atomic():
                cart = self._lock_or_create_cart(user_id)
                self._merge_line(cart, product, quantity)
                items = self._recalculate(cart)
        except Exception:
            self._release_stock(product_id, quantity)
            raise
        self.logger.info(
            "Product added to cart",
            user_id=user_id,
            cart_id=cart.id,
            product_id=product_id,
            total=cart.total,
        )
        return self.cart_mapper.to_dto(cart, items)

    def remove_from_cart(self, user_id: int, product_id: int) -> CartDTO:
        self.logger.info("Removing product from cart", user_id=user_id, product_id=product_id)
        with transaction.atomic():
            cart = self._require_cart(user_id, lock=True)
            item = self.cart_items.get_for_cart_product(cart.id, product_id)
            if item is None:
                self.logger.warning(
                    "Product not present in cart",
                    user_id=user_id,
                    cart_id=cart.id,
                    product_id=product_id,
                )
                raise CartOperationError(f"Product {product_id} is not in the cart")
            released = item.quantity
            self.cart_items.delete(item)
            items = self._recalculate(cart)
        self._release_stock(product_id, released)
        self.logger.info(
            "Product removed from cart",
            user_id=user_id,
            cart_id=cart.id,
            product_id=product_id,
            total=cart.total,
        )
        return self.cart_mapper.to_dto(cart, items)

    def send_cart(self, user_id: int) -> CartDTO:
        self.logger.debug("Fetching cart", user_id=user_id)
        cart = self._require_cart(user_id)
        items = self.cart_items.list_for_cart(cart.id)
        return self.cart_mapper.to_dto(cart, items)

    def clear_cart(self, user_id: int) -> CartDTO:
        self.logger.info("Clearing cart", user_id=user_id)
        with transaction.atomic():
            cart = self._require_cart(user_id, lock=True)
            released = [
                (item.product_id, item.quantity)
                for item in self.cart_items.list_for_cart(cart.id)
            ]
            self.cart_items.delete_for_cart(cart)
            cart.total = Decimal("0.00")
            self.carts.save(cart)
        for product_id, quantity in released:
            self._release_stock(product_id, quantity)
        self.logger.info(
            "Cart cleared", user_id=user_id, cart_id=cart.id, lines_removed=len(released)
        )
        return self.cart_mapper.to_dto(cart, [])

    def _lock_or_create_cart(self, user_id: int) -> Cart:
        cart = self.carts.get_for_user(user_id, lock=True)
        if cart is not None:
            return cart
        try:
            # Savepoint: a concurrent first add may insert the same user_id.
            with transaction.atomic():
                cart = self.carts.create(user_id=user_id, total=Decimal("0.00"))
        except IntegrityError:
            cart = self.carts.get_for_user(user_id, lock=True)
            if cart is None:
                raise
            self.logger.info(
                "Cart created concurrently, reusing it", user_id=user_id, cart_id=cart.id
            )
            return cart
        self.logger.info("Cart created", user_id=user_id, cart_id=cart.id)
        return cart

    def _require_cart(self, user_id: int, lock: bool = False) -> Cart:
        cart = self.carts.get_for_user(user_id, lock=lock)
        if cart is None:
            self.logger.info("Cart not found", user_id=user_id)
            raise CartNotFoundError(user_id)
        return cart

    def _find_product(self, product_id: int) -> ProductResponse:
        try:
            product = self.products.find_product_by_id(product_id)
        except RemoteNotFoundError:
            product = None
        if product is None:
            self.logger.warning("Product not found", product_id=product_id)
            raise ProductNotFoundError(product_id)
        return product

    def _ensure_user(self, user_id: int) -> None:
        try:
            user = self.users.get_user_by_id(user_id)
        except RemoteServiceError as exc:
            self.logger.warning("User lookup failed", user_id=user_id, error=exc.message)
            raise UserNotFoundError(user_id) from exc
        if user is None:
            self.logger.warning("User not found", user_id=user_id)
            raise UserNotFoundError(user_id)

    def _merge_line(self, cart: Cart, product: ProductResponse, quantity: int) -> None:
        item = self.cart_items.get_for_cart_product(cart.id, product.id)
        if item is not None:
            item.quantity += quantity
            item.unit_price = product.price
            self.cart_items.save(item)
            return
        self.cart_items.create(
            cart=cart,
            product_id=product.id,
            quantity=quantity,
            unit_price=product.price,
        )

    def _recalculate(self, cart: Cart) -> List[CartItem]:
        items = self.cart_items.list_for_cart(cart.id)
        cart.total = sum(
            (Decimal(str(i.unit_price)) * i.quantity for i in items), Decimal("0.00")
        )
        self.carts.save(cart)
        return items

    def _reserve_stock(self, product_id: int, quantity: int) -> None:
        try:
            self.products.update_stock_product(product_id, quantity)
        except RemoteNotFoundError as exc:
            raise ProductNotFoundError(product_id) from exc
        self.logger.debug("Stock reserved", product_id=product_id, quantity=quantity)

    def _release_stock(self, product_id: int, quantity: int) -> None:
        try:
            self.products.update_stock_product(product_id, -quantity)
        except RemoteServiceError:
            self.logger.exception(
                "Failed to release reserved stock",
                product_id=product_id,
                quantity=quantity,
            )
            return
        self.logger.debug("Stock released", product_id=product_id, quantity=quantity)
