import logging

from apps.accounts.models import UserRole
from apps.events.constants import EventTypes
from apps.orders.models import OrderStatus

from .registry import connection_registry

logger = logging.getLogger(__name__)

_RELEASED_REASONS = {
    OrderStatus.ASSIGNED_TO_DELIVERY: "accepted_by_other",
    OrderStatus.CANCELLED: "cancelled",
}


class EventBroadcaster:
    """Fans lifecycle events out to the live connections that care about them."""

    def __init__(self, registry):
        self.registry = registry

    async def audience(self, event):
        return set(event.recipients) | await self.registry.subscribers(event.order_id)

    async def dispatch(self, event) -> int:
        message = event.to_message()
        delivered = 0
        for user_id in await self.audience(event):
            if await self.registry.send_to_user(user_id, message):
                delivered += 1

        if event.event_type == EventTypes.ORDER_STATUS_CHANGED:
            await self._notify_delivery_partners(event)

        logger.debug(f"{event.event_type} for order {event.order_id} delivered to {delivered} connection(s)")
        return delivered

    async def _notify_delivery_partners(self, event):
        if event.status == OrderStatus.READY_FOR_PICKUP:
            await self.registry.broadcast_to_role(
                UserRole.DELIVERY_PARTNER,
                {
                    "type": EventTypes.ORDER_READY,
                    "orderId": event.order_id,
                    "orderNumber": event.order_number,
                    "vendorId": event.vendor_id,
                    "timestamp": event.timestamp.isoformat(),
                },
            )
        elif event.previous_status == OrderStatus.READY_FOR_PICKUP and event.status in _RELEASED_REASONS:
            await self.registry.broadcast_to_role(
                UserRole.DELIVERY_PARTNER,
                {
                    "type": EventTypes.NOTIFICATION_CANCELLED,
                    "orderId": event.order_id,
                    "reason": _RELEASED_REASONS[event.status],
                    "timestamp": event.timestamp.isoformat(),
                },
                exclude={event.delivery_partner_id},
            )


broadcaster = EventBroadcaster(connection_registry)
