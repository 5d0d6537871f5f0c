from decimal import Decimal
from typing import Iterable, List, Optional

from .dtos import CartDTO, CartItemDTO
from .models import Cart, CartItem


class CartItemMapper:
    def to_dto(self, item: CartItem) -> CartItemDTO:
        unit_price = Decimal(str(item.unit_price))
        return CartItemDTO(
            product_id=item.product_id,
            quantity=item.quantity,
            unit_price=unit_price,
            subtotal=unit_price * item.quantity,
        )

    def many_to_dto(self, items: Iterable[CartItem]) -> List[CartItemDTO]:
        return [self.to_dto(i) for i in items]


class CartMapper:
    def __init__(self, item_mapper: Optional[CartItemMapper] = None) -> None:
        self.item_mapper = item_mapper or CartItemMapper()

    def to_dto(self, cart: Cart, items: Iterable[CartItem]) -> CartDTO:
        return CartDTO(
            id=cart.id,
            user_id=cart.user_id,
            total=Decimal(str(cart.total)),
            items=self.item_mapper.many_to_dto(items),
        )
