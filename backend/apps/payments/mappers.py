from decimal import Decimal
from typing import Iterable, List

from .dtos import PaymentDTO
from .models import Payment


class PaymentMapper:
    def to_dto(self, payment: Payment) -> PaymentDTO:
        return PaymentDTO(
            id=payment.id,
            order_id=payment.order_id,
            total=Decimal(str(payment.total)),
            currency=payment.currency,
            method=payment.method,
            description=payment.description or "",
            status=payment.status,
            created_at=payment.created_at,
        )

    def many_to_dto(self, payments: Iterable[Payment]) -> List[PaymentDTO]:
        return [self.to_dto(p) for p in payments]
