from typing import List, Optional

from apps.common.repository import GenericRepository
from .models import Cart, CartItem


class CartRepository(GenericRepository[Cart]):
    def __init__(self):
        super().__init__(Cart)

    def get_for_user(self, user_id: int, lock: bool = False) -> Optional[Cart]:
        # Locking serializes concurrent mutations of the same cart.
        return self.get(lock=lock, user_id=user_id)


class CartItemRepository(GenericRepository[CartItem]):
    def __init__(self):
        super().__init__(CartItem)

    def list_for_cart(self, cart_id: int) -> List[CartItem]:
        return self.list(cart_id=cart_id)

    def get_for_cart_product(self, cart_id: int, product_id: int) -> Optional[CartItem]:
        return self.get(cart_id=cart_id, product_id=product_id)

    def delete_for_cart(self, cart: Cart) -> None:
        self.delete_where(cart=cart)
