from __future__ import annotations

from typing import List, Optional, Protocol, TYPE_CHECKING

from .models import Payment

if TYPE_CHECKING:
    from apps.clients.dtos import OrderResponse
    from apps.common.events import PaymentNotification


class PaymentRepositoryProtocol(Protocol):
    def create(self, **data) -> Payment:
        ...

    def get(self, **filters) -> Optional[Payment]:
        ...

    def list_for_order(self, order_id: int) -> List[Payment]:
        ...


class OrderClientProtocol(Protocol):
    def bring_order(self, order_id: int) -> Optional["OrderResponse"]:
        ...

    def complete_order(self, order_id: int) -> None:
        ...


class NotificationPublisherProtocol(Protocol):
    def send_payment_notification(self, notification: "PaymentNotification") -> None:
        ...
