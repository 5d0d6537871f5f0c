from typing import Optional

from .dtos import OrderResponse
from .http import ServiceClient


class OrderServiceClient(ServiceClient):
    service_name = "order-service"

    def bring_order(self, order_id: int) -> Optional[OrderResponse]:
        return OrderResponse.from_payload(self.get(f"/order/{order_id}"))

    def complete_order(self, order_id: int) -> None:
        self.put(f"/order/complete/{order_id}")
