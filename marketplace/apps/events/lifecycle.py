import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from django.utils import timezone

from .constants import EventTypes


@dataclass(frozen=True)
class LifecycleEvent:
    """An order was created or moved to a new status. Broadcast after commit."""

    event_type: str
    order_id: str
    order_number: str
    status: str
    previous_status: Optional[str]
    customer_id: str
    vendor_id: str
    vendor_user_id: str
    delivery_partner_id: Optional[str] = None
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = field(default_factory=timezone.now)

    @classmethod
    def for_order(cls, order, event_type, previous_status=None):
        return cls(
            event_type=event_type,
            order_id=str(order.id),
            order_number=order.order_number,
            status=str(order.status),
            previous_status=str(previous_status) if previous_status else None,
            customer_id=str(order.customer_id),
            vendor_id=str(order.vendor_id),
            vendor_user_id=str(order.vendor.user_id),
            delivery_partner_id=str(order.delivery_partner_id) if order.delivery_partner_id else None,
        )

    @classmethod
    def created(cls, order):
        return cls.for_order(order, EventTypes.ORDER_CREATED)

    @classmethod
    def status_changed(cls, order, previous_status):
        return cls.for_order(order, EventTypes.ORDER_STATUS_CHANGED, previous_status)

    @property
    def recipients(self):
        """User ids that are party to the order."""
        ids = {self.customer_id, self.vendor_user_id}
        if self.delivery_partner_id:
            ids.add(self.delivery_partner_id)
        return ids

    def to_message(self):
        return {
            "type": self.event_type,
            "eventId": self.event_id,
            "orderId": self.order_id,
            "orderNumber": self.order_number,
            "status": self.status,
            "previousStatus": self.previous_status,
            "timestamp": self.timestamp.isoformat(),
        }

    def to_payload(self):
        payload = self.to_message()
        payload.update(
            {
                "customerId": self.customer_id,
                "vendorId": self.vendor_id,
                "deliveryPartnerId": self.delivery_partner_id,
            }
        )
        return payload
