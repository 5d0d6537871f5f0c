from __future__ import annotations

from typing import Any, Callable, Optional

from django.conf import settings
from django.core.mail import send_mail

from apps.common import get_logger
from apps.common.events import InvalidEventError, PaymentNotification

logger = get_logger(__name__).bind(component="notifications", layer="service")


class NotificationService:
    """Turns payment notifications into confirmation emails."""

    def __init__(
        self,
        mailer: Callable[..., int] = send_mail,
        from_email: Optional[str] = None,
    ):
        self.mailer = mailer
        self.from_email = from_email or settings.DEFAULT_FROM_EMAIL
        self.logger = logger.bind(service="NotificationService")

    def handle_payment_notification(self, payload: Any) -> bool:
        """Send the confirmation for one consumed message. Returns False when skipped."""
        try:
            notification = PaymentNotification.from_message(payload)
        except InvalidEventError as exc:
            self.logger.warning("Skipping malformed payment notification", error=str(exc))
            return False

        self.mailer(
            self.subject_for(notification),
            self.body_for(notification),
            self.from_email,
            [notification.user_email],
            fail_silently=False,
        )
        self.logger.info(
            "Payment confirmation sent",
            order_id=notification.order_id,
            recipient=notification.user_email,
        )
        return True

    @staticmethod
    def subject_for(notification: PaymentNotification) -> str:
        return f"Payment received for order #{notification.order_id}"

    @staticmethod
    def body_for(notification: PaymentNotification) -> str:
        greeting = notification.user_name or "customer"
        return "\n".join(
            [
                f"Hello {greeting},",
                "",
                f"We received your payment of {notification.total_amount:.2f} "
                f"for order #{notification.order_id}.",
                f"Order status: {notification.order_status or 'UNKNOWN'}",
                f"Order date: {notification.order_date:%Y-%m-%d %H:%M}",
                f"Shipping to: {notification.user_address or '-'}",
                f"Contact phone: {notification.user_phone or '-'}",
                "",
                "Thank you for shopping with us.",
            ]
        )
