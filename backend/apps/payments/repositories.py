from typing import List

from apps.common.repository import GenericRepository
from .models import Payment


class PaymentRepository(GenericRepository[Payment]):
    def __init__(self):
        super().__init__(Payment)

    def list_for_order(self, order_id: int) -> List[Payment]:
        return self.list(order_id=order_id)
