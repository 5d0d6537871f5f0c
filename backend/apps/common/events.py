"""Event contracts exchanged between services over Kafka.

The payment service produces these, the notification service consumes them.
Field names on the wire are camelCase so every consumer reads the same JSON.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict

from django.utils import timezone
from django.utils.dateparse import parse_datetime


class InvalidEventError(ValueError):
    """A consumed message does not describe a valid event."""


@dataclass(frozen=True)
class PaymentNotification:
    order_id: int
    user_name: str
    user_email: str
    user_address: str
    user_phone: str
    order_status: str
    order_date: datetime
    total_amount: Decimal

    def to_message(self) -> Dict[str, Any]:
        return {
            "orderId": self.order_id,
            "userName": self.user_name,
            "userEmail": self.user_email,
            "userAddress": self.user_address,
            "userPhone": self.user_phone,
            "orderStatus": self.order_status,
            "orderDate": self.order_date.isoformat(),
            "totalAmount": float(self.total_amount),
        }

    @staticmethod
    def from_message(raw: Any) -> "PaymentNotification":
        if not isinstance(raw, dict):
            raise InvalidEventError("Payment notification must be a JSON object")
        try:
            order_id = int(raw["orderId"])
        except (KeyError, TypeError, ValueError):
            raise InvalidEventError("Payment notification has no valid orderId") from None
        email = raw.get("userEmail")
        if not email:
            raise InvalidEventError("Payment notification has no userEmail")

        order_date = raw.get("orderDate")
        try:
            parsed_date = parse_datetime(order_date) if isinstance(order_date, str) else None
        except ValueError:
            parsed_date = None
        try:
            total = Decimal(str(raw.get("totalAmount")))
        except (InvalidOperation, ValueError):
            raise InvalidEventError("Payment notification has no valid totalAmount") from None
        if not total.is_finite():
            raise InvalidEventError("Payment notification has no valid totalAmount")

        return PaymentNotification(
            order_id=order_id,
            user_name=str(raw.get("userName") or ""),
            user_email=str(email),
            user_address=str(raw.get("userAddress") or ""),
            user_phone=str(raw.get("userPhone") or ""),
            order_status=str(raw.get("orderStatus") or ""),
            order_date=parsed_date or timezone.now(),
            total_amount=total,
        )
