from __future__ import annotations

import json
from typing import Any, Dict, Optional

from django.conf import settings
from kafka import KafkaConsumer

from apps.common import get_logger

logger = get_logger(__name__).bind(component="notifications", layer="kafka")


def deserialize_key(raw: Optional[bytes]) -> Optional[str]:
    if raw is None:
        return None
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        # Must not raise: the consumer iterator re-raises deserializer errors.
        logger.warning("Replacing undecodable message key", size=len(raw))
        return raw.decode("utf-8", errors="replace")


def deserialize_value(raw: Optional[bytes]) -> Any:
    """
    Decode a JSON message body.

    Producer type headers are never consulted, any JSON document is
    accepted. Undecodable bodies become ``None`` so the poll loop keeps going.
    """
    if raw is None:
        return None
    try:
        return json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, ValueError):
        logger.warning("Discarding undecodable message body", size=len(raw))
        return None


def consumer_config() -> Dict[str, Any]:
    return {
        "bootstrap_servers": settings.KAFKA_BOOTSTRAP_SERVERS.split(","),
        "group_id": settings.NOTIFICATION_CONSUMER_GROUP,
        "key_deserializer": deserialize_key,
        "value_deserializer": deserialize_value,
        "auto_offset_reset": "earliest",
        "enable_auto_commit": True,
    }


def build_consumer(*topics: str, **overrides: Any) -> KafkaConsumer:
    config = {**consumer_config(), **overrides}
    subscribed = topics or (settings.PAYMENT_NOTIFICATION_TOPIC,)
    logger.info(
        "Creating Kafka consumer",
        topics=",".join(subscribed),
        group_id=config["group_id"],
    )
    return KafkaConsumer(*subscribed, **config)
