from __future__ import annotations

from typing import Iterable, List, Optional, Protocol, TYPE_CHECKING

from .models import Cart, CartItem

if TYPE_CHECKING:
    from apps.clients.dtos import ProductResponse, UserResponse
    from apps.shopping.dtos import CartDTO


class CartRepositoryProtocol(Protocol):
    def get_for_user(self, user_id: int, lock: bool = False) -> Optional[Cart]:
        ...

    def create(self, **data) -> Cart:
        ...

    def save(self, cart: Cart) -> Cart:
        ...


class CartItemRepositoryProtocol(Protocol):
    def create(self, **data) -> CartItem:
        ...

    def save(self, item: CartItem) -> CartItem:
        ...

    def list_for_cart(self, cart_id: int) -> List[CartItem]:
        ...

    def get_for_cart_product(self, cart_id: int, product_id: int) -> Optional[CartItem]:
        ...

    def delete(self, item: CartItem) -> None:
        ...

    def delete_for_cart(self, cart: Cart) -> None:
        ...


class ProductClientProtocol(Protocol):
    def find_product_by_id(self, product_id: int) -> Optional["ProductResponse"]:
        ...

    def update_stock_product(self, product_id: int, quantity: int) -> Optional["ProductResponse"]:
        ...


class UserClientProtocol(Protocol):
    def get_user_by_id(self, user_id: int) -> Optional["UserResponse"]:
        ...


class CartMapperProtocol(Protocol):
    def to_dto(self, cart: Cart, items: Iterable[CartItem]) -> "CartDTO":
        ...
