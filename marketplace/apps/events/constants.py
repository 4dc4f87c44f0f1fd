# Event Types
class EventTypes:
    ORDER_CREATED = "order_created"
    ORDER_STATUS_CHANGED = "order_status_changed"
    ORDER_READY = "order_ready"
    NOTIFICATION_CANCELLED = "notification_cancelled"


KAFKA_TOPICS = {
    "ORDER_CREATED": "marketplace.order.created",
    "ORDER_STATUS_CHANGED": "marketplace.order.status.changed",
    "DEAD_LETTER_QUEUE": "marketplace.dlq",
}

EVENT_TOPICS = {
    EventTypes.ORDER_CREATED: KAFKA_TOPICS["ORDER_CREATED"],
    EventTypes.ORDER_STATUS_CHANGED: KAFKA_TOPICS["ORDER_STATUS_CHANGED"],
}
