from dataclasses import dataclass
from typing import Any, Optional


def _optional_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (ValueError, TypeError):
        return None


@dataclass
class ProductRequestCommand:
    """Body of add-to-cart / remove-from-cart. Fields stay ``None`` when absent or unparseable."""

    product_id: Optional[int]
    quantity: Optional[int]

    @staticmethod
    def from_raw(raw: Any) -> "ProductRequestCommand":
        if not isinstance(raw, dict):
            return ProductRequestCommand(product_id=None, quantity=None)
        pid = None
        for key in ("idProduct", "productId", "product_id"):
            if raw.get(key) is not None:
                pid = raw.get(key)
                break
        return ProductRequestCommand(
            product_id=_optional_int(pid),
            quantity=_optional_int(raw.get("quantity")),
        )
