from __future__ import annotations

from apps.clients.container import build_product_client, build_user_client

from .mappers import CartItemMapper, CartMapper
from .repositories import CartItemRepository, CartRepository
from .services import ShoppingService


def build_shopping_service() -> ShoppingService:
    return ShoppingService(
        carts=CartRepository(),
        cart_items=CartItemRepository(),
        products=build_product_client(),
        users=build_user_client(),
        cart_mapper=CartMapper(CartItemMapper()),
    )
