from django.conf import settings
from django.core.management.base import BaseCommand

from apps.common import get_logger
from apps.notifications.kafka import build_consumer
from apps.notifications.services import NotificationService

logger = get_logger(__name__).bind(component="notifications", layer="command")


class Command(BaseCommand):
    help = "Consume payment notifications from Kafka and email customers."

    def add_arguments(self, parser):
        parser.add_argument(
            "--topic",
            default=None,
            help="Topic to consume (defaults to PAYMENT_NOTIFICATION_TOPIC)",
        )
        parser.add_argument(
            "--max-messages",
            type=int,
            default=None,
            help="Stop after this many messages (runs forever by default)",
        )

    def handle(self, *args, **options):
        topic = options["topic"] or settings.PAYMENT_NOTIFICATION_TOPIC
        limit = options["max_messages"]
        service = NotificationService()
        consumer = build_consumer(topic)
        self.stdout.write(f"Consuming payment notifications from '{topic}'...")

        processed = sent = 0
        try:
            for message in consumer:
                processed += 1
                log = logger.bind(
                    topic=message.topic,
                    partition=message.partition,
                    offset=message.offset,
                    key=message.key,
                )
                try:
                    if service.handle_payment_notification(message.value):
                        sent += 1
                except Exception:
                    # One undeliverable email must not stop the consumer.
                    log.exception("Failed to handle payment notification")
                if limit is not None and processed >= limit:
                    break
        except KeyboardInterrupt:
            self.stdout.write("Interrupted, shutting down.")
        finally:
            consumer.close()

        self.stdout.write(
            self.style.SUCCESS(f"Processed {processed} message(s), sent {sent} email(s).")
        )
