import json
import logging
from datetime import timedelta

from confluent_kafka import KafkaException, Producer
from django.conf import settings
from django.utils import timezone

logger = logging.getLogger(__name__)

MAX_BACKOFF_MINUTES = 60


def dlq_backoff(retry_count: int) -> timedelta:
    """Exponential backoff for dead letter retries, capped at an hour."""
    return timedelta(minutes=min(2**retry_count, MAX_BACKOFF_MINUTES))


class KafkaClient:
    def __init__(self):
        self._producer = None

    @property
    def producer(self):
        if self._producer is None:
            self._producer = Producer(
                {
                    "bootstrap.servers": settings.KAFKA_BOOTSTRAP_SERVERS,
                    "client.id": settings.KAFKA_CLIENT_ID,
                }
            )
        return self._producer

    def publish(self, topic: str, event_data: dict, key=None, dead_letter=True) -> bool:
        """Publish event to Kafka topic. Failed deliveries go to the dead letter queue."""
        delivery = {"error": None}

        def delivery_callback(err, msg):
            if err is not None:
                delivery["error"] = str(err)

        try:
            produce_kwargs = {
                "value": json.dumps(event_data, default=str).encode("utf-8"),
                "callback": delivery_callback,
            }
            if key:
                produce_kwargs["key"] = key.encode("utf-8") if isinstance(key, str) else key

            self.producer.produce(topic, **produce_kwargs)
            self.producer.poll(0)
            remaining = self.producer.flush(timeout=5)
            if remaining and delivery["error"] is None:
                delivery["error"] = f"{remaining} message(s) still in queue after flush timeout"
        except (KafkaException, BufferError) as e:
            delivery["error"] = str(e)

        if delivery["error"] is None:
            return True

        logger.error(f"Message delivery to {topic} failed: {delivery['error']}")
        if dead_letter:
            self._send_to_dlq(topic, event_data, delivery["error"])
        return False

    def _send_to_dlq(self, topic: str, event_data: dict, error_message: str):
        from apps.events.models import DeadLetterQueue

        entry = DeadLetterQueue.objects.create(
            topic=topic,
            event_data=event_data,
            error_message=error_message,
            retry_count=0,
            status="pending",
            next_retry_at=timezone.now() + dlq_backoff(0),
        )
        logger.warning(f"Event sent to DLQ: {topic} ({entry.id})")
        return entry

    def close(self):
        if self._producer is not None:
            self._producer.flush()


kafka_client = KafkaClient()
