from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from django.db import DatabaseError, transaction
from django.utils import timezone

from apps.api.exceptions import ErrorKind
from apps.clients.dtos import OrderResponse
from apps.clients.exceptions import RemoteNotFoundError, RemoteServiceError
from apps.common import get_logger
from apps.common.events import PaymentNotification
from .dtos import PaymentDTO
from .exceptions import OrderNotFoundError, PaymentError, PaymentNotFoundError
from .mappers import PaymentMapper
from .models import Payment, PaymentStatus
from .protocols import (
    NotificationPublisherProtocol,
    OrderClientProtocol,
    PaymentRepositoryProtocol,
)

logger = get_logger(__name__).bind(component="payments", layer="service")


class PaymentService:
    """
    Records payments for orders held by the order service.

    A payment is only stored once the order service has accepted the order
    as completed. The customer notification that follows is best-effort:
    it can fail without affecting the stored payment.
    """

    def __init__(
        self,
        orders: OrderClientProtocol,
        payments: PaymentRepositoryProtocol,
        notifier: NotificationPublisherProtocol,
        mapper: Optional[PaymentMapper] = None,
    ):
        self.orders = orders
        self.payments = payments
        self.notifier = notifier
        self.mapper = mapper or PaymentMapper()
        self.logger = logger.bind(service="PaymentService")

    def view_order_details(self, order_id: int) -> OrderResponse:
        self.logger.debug("Fetching order details", order_id=order_id)
        try:
            order = self.orders.bring_order(order_id)
        except RemoteNotFoundError as exc:
            raise OrderNotFoundError(order_id) from exc
        except RemoteServiceError as exc:
            raise PaymentError(
                f"Unable to fetch order {order_id}",
                order_id=order_id,
                kind=ErrorKind.REMOTE_FAILURE,
                cause=exc,
            ) from exc
        if order is None:
            self.logger.info("Order not found", order_id=order_id)
            raise OrderNotFoundError(order_id)
        return order

    def create_payment(
        self,
        order_id: int,
        total: Decimal,
        currency: str,
        method: str,
        description: Optional[str] = None,
    ) -> PaymentDTO:
        self.logger.info(
            "Creating payment",
            order_id=order_id,
            total=total,
            currency=currency,
            method=method,
        )
        self._complete_order(order_id)
        payment = self._persist(order_id, total, currency, method, description)
        self.logger.info("Payment stored", order_id=order_id, payment_id=payment.id)
        self._notify(order_id, payment)
        return self.mapper.to_dto(payment)

    def get_payment(self, payment_id: int) -> PaymentDTO:
        payment = self.payments.get(id=payment_id)
        if payment is None:
            self.logger.info("Payment not found", payment_id=payment_id)
            raise PaymentNotFoundError(payment_id)
        return self.mapper.to_dto(payment)

    def list_payments_for_order(self, order_id: int) -> List[PaymentDTO]:
        return self.mapper.many_to_dto(self.payments.list_for_order(order_id))

    @staticmethod
    def build_notification(order: OrderResponse, payment: Payment) -> PaymentNotification:
        user_name = " ".join(part for part in (order.name, order.last_name) if part)
        return PaymentNotification(
            order_id=order.order_id,
            user_name=user_name,
            user_email=order.email,
            user_address=order.address,
            user_phone=order.phone,
            order_status=order.order_status or "",
            order_date=order.order_date or timezone.now(),
            total_amount=Decimal(str(payment.total)),
        )

    def _complete_order(self, order_id: int) -> None:
        try:
            self.orders.complete_order(order_id)
        except RemoteNotFoundError as exc:
            self.logger.warning("Cannot complete unknown order", order_id=order_id)
            raise OrderNotFoundError(order_id) from exc
        except RemoteServiceError as exc:
            raise PaymentError(
                f"Unable to complete order {order_id}",
                order_id=order_id,
                kind=ErrorKind.REMOTE_FAILURE,
                cause=exc,
            ) from exc
        self.logger.debug("Order completed", order_id=order_id)

    def _persist(
        self,
        order_id: int,
        total: Decimal,
        currency: str,
        method: str,
        description: Optional[str],
    ) -> Payment:
        try:
            with transaction.atomic():
                return self.payments.create(
                    order_id=order_id,
                    total=total,
                    currency=currency,
                    method=method,
                    description=description or "",
                    status=PaymentStatus.SUCCESS,
                )
        except DatabaseError as exc:
            # The order stays completed remotely; there is no compensation.
            raise PaymentError(
                f"Unable to store payment for order {order_id}",
                order_id=order_id,
                cause=exc,
            ) from exc

    def _notify(self, order_id: int, payment: Payment) -> None:
        try:
            order = self.orders.bring_order(order_id)
            if order is None:
                self.logger.warning(
                    "Skipping payment notification: order vanished",
                    order_id=order_id,
                    payment_id=payment.id,
                )
                return
            self.notifier.send_payment_notification(self.build_notification(order, payment))
        except Exception:
            self.logger.exception(
                "Payment notification failed", order_id=order_id, payment_id=payment.id
            )
