import logging

from asgiref.sync import async_to_sync
from django.conf import settings
from django.db import transaction
from infrastructure.kafka_client import kafka_client

from .constants import EVENT_TOPICS
from .lifecycle import LifecycleEvent

logger = logging.getLogger(__name__)


class EventService:
    def emit(self, event: LifecycleEvent):
        """Deliver ``event`` once the surrounding transaction commits."""
        transaction.on_commit(lambda: self.publish(event))

    def publish(self, event: LifecycleEvent):
        from apps.tracking.broadcaster import broadcaster

        try:
            async_to_sync(broadcaster.dispatch)(event)
        except Exception:
            logger.exception(f"Live broadcast failed for {event.event_type} on order {event.order_id}")

        if settings.KAFKA_ENABLED:
            topic = EVENT_TOPICS[event.event_type]
            kafka_client.publish(topic=topic, event_data=event.to_payload(), key=event.order_id)

    def order_created(self, order):
        event = LifecycleEvent.created(order)
        self.emit(event)
        return event

    def order_status_changed(self, order, previous_status):
        event = LifecycleEvent.status_changed(order, previous_status)
        self.emit(event)
        return event


event_service = EventService()
