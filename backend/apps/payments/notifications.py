from __future__ import annotations

import json
import threading
from typing import Any, Callable, Dict, Optional

from django.conf import settings
from kafka import KafkaProducer

from apps.common import get_logger
from apps.common.events import PaymentNotification

logger = get_logger(__name__).bind(component="payments", layer="notification")


def _serialize_value(value: Dict[str, Any]) -> bytes:
    return json.dumps(value, default=str).encode("utf-8")


def _serialize_key(key: Optional[str]) -> Optional[bytes]:
    return key.encode("utf-8") if key is not None else None


def producer_config() -> Dict[str, Any]:
    return {
        "bootstrap_servers": settings.KAFKA_BOOTSTRAP_SERVERS.split(","),
        "client_id": "payment-service",
        "key_serializer": _serialize_key,
        "value_serializer": _serialize_value,
        "acks": "all",
        # Bounds how long send() may block on metadata when the broker is down.
        "max_block_ms": settings.KAFKA_MAX_BLOCK_MS,
    }


def build_producer() -> KafkaProducer:
    return KafkaProducer(**producer_config())


class NotificationProducerService:
    """
    Publishes payment notifications without waiting for the broker.

    The producer is created on first use so a missing broker never breaks
    start-up; a failed creation is retried on the next publish.
    """

    def __init__(
        self,
        topic: Optional[str] = None,
        producer_factory: Callable[[], KafkaProducer] = build_producer,
    ):
        self.topic = topic or settings.PAYMENT_NOTIFICATION_TOPIC
        self._producer_factory = producer_factory
        self._producer: Optional[KafkaProducer] = None
        self._lock = threading.Lock()
        self.logger = logger.bind(service="NotificationProducerService", topic=self.topic)

    @property
    def producer(self) -> KafkaProducer:
        if self._producer is None:
            with self._lock:
                if self._producer is None:
                    self._producer = self._producer_factory()
        return self._producer

    def send_payment_notification(self, notification: PaymentNotification) -> None:
        key = str(notification.order_id)
        future = self.producer.send(self.topic, key=key, value=notification.to_message())
        future.add_callback(self._on_delivered, order_id=notification.order_id)
        future.add_errback(self._on_failed, order_id=notification.order_id)
        self.logger.debug("Payment notification queued", order_id=notification.order_id)

    def _on_delivered(self, metadata, order_id: int) -> None:
        self.logger.info(
            "Payment notification delivered",
            order_id=order_id,
            partition=getattr(metadata, "partition", None),
            offset=getattr(metadata, "offset", None),
        )

    def _on_failed(self, exc: BaseException, order_id: int) -> None:
        self.logger.error(
            "Payment notification delivery failed",
            order_id=order_id,
            error=repr(exc),
        )

    def close(self, timeout: Optional[float] = None) -> None:
        with self._lock:
            if self._producer is not None:
                self._producer.flush(timeout=timeout)
                self._producer.close(timeout=timeout)
                self._producer = None
