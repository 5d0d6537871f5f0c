from typing import Optional

from .dtos import ApiResponse, ProductResponse
from .http import ServiceClient


class ProductServiceClient(ServiceClient):
    service_name = "product-service"

    def find_product_by_id(self, product_id: int) -> Optional[ProductResponse]:
        body = self.get(f"/product/{product_id}")
        return ProductResponse.from_payload(ApiResponse.from_payload(body).data)

    def update_stock_product(self, product_id: int, quantity: int) -> Optional[ProductResponse]:
        """Deduct ``quantity`` from the product stock; a negative value gives stock back."""
        body = self.put(f"/product/update/stock/{product_id}", json=quantity)
        return ProductResponse.from_payload(ApiResponse.from_payload(body).data)
