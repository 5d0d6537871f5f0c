from dataclasses import dataclass
from decimal import Decimal
from typing import List


@dataclass
class CartItemDTO:
    product_id: int
    quantity: int
    unit_price: Decimal
    subtotal: Decimal


@dataclass
class CartDTO:
    id: int
    user_id: int
    total: Decimal
    items: List[CartItemDTO]
"""DTO dataclasses only. Mapping logic lives in mappers.py."""
