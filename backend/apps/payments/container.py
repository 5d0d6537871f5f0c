from __future__ import annotations

from apps.clients.container import build_order_client

from .mappers import PaymentMapper
from .notifications import NotificationProducerService
from .repositories import PaymentRepository
from .services import PaymentService


def build_payment_service() -> PaymentService:
    return PaymentService(
        orders=build_order_client(),
        payments=PaymentRepository(),
        notifier=NotificationProducerService(),
        mapper=PaymentMapper(),
    )
