import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Max

from apps.accounts.models import UserRole
from apps.core.exceptions import OrderNotFound, Unauthorized
from apps.events.services import event_service

from .models import Order, OrderStatus, OrderStatusHistory
from .state_machine import plan_transition

logger = logging.getLogger(__name__)

_SELF_ASSIGN_TARGETS = frozenset({OrderStatus.ASSIGNED_TO_DELIVERY, OrderStatus.PICKED_UP})


def can_view_order(order, role, user_id) -> bool:
    """Parties to the order and admins may see it and its live updates."""
    user_id = str(user_id)
    if role == UserRole.SUPER_ADMIN:
        return True
    if role == UserRole.CUSTOMER:
        return str(order.customer_id) == user_id
    if role == UserRole.VENDOR:
        return str(order.vendor.user_id) == user_id
    if role == UserRole.DELIVERY_PARTNER:
        if order.delivery_partner_id is None:
            return order.status == OrderStatus.READY_FOR_PICKUP
        return str(order.delivery_partner_id) == user_id
    return False


class OrderLifecycleService:
    @staticmethod
    def get_order(order_id):
        try:
            return Order.objects.select_related("vendor", "customer", "delivery_address").get(id=order_id)
        except (Order.DoesNotExist, ValueError, ValidationError):
            raise OrderNotFound()

    def get_order_for(self, order_id, role, user_id):
        order = self.get_order(order_id)
        if not can_view_order(order, role, user_id):
            raise Unauthorized("You do not have permission to view this order")
        return order

    @staticmethod
    def _authorize(order, actor_role, actor_id, target_status):
        actor_id = str(actor_id)
        if actor_role == UserRole.SUPER_ADMIN:
            return
        if actor_role == UserRole.CUSTOMER and str(order.customer_id) == actor_id:
            return
        if actor_role == UserRole.VENDOR and str(order.vendor.user_id) == actor_id:
            return
        if actor_role == UserRole.DELIVERY_PARTNER:
            if order.delivery_partner_id is None and target_status in _SELF_ASSIGN_TARGETS:
                return
            if order.delivery_partner_id is not None and str(order.delivery_partner_id) == actor_id:
                return
        raise Unauthorized("You do not have permission to update this order")

    def transition(self, order_id, actor_role, actor_id, target_status, notes=None):
        """
        Move an order to ``target_status`` on behalf of an actor.

        The order row is locked for the duration. Each step of the planned
        path gets its own history row and lifecycle event; events are only
        sent once the transaction commits.
        """
        with transaction.atomic():
            try:
                order = (
                    Order.objects.select_for_update(of=("self",))
                    .select_related("vendor")
                    .get(id=order_id)
                )
            except (Order.DoesNotExist, ValueError, ValidationError):
                raise OrderNotFound()

            self._authorize(order, actor_role, actor_id, target_status)
            steps = plan_transition(order.status, target_status, actor_role)

            sequence = order.status_history.aggregate(last=Max("sequence"))["last"] or 0
            for step in steps:
                previous_status = order.status
                order.status = step
                update_fields = ["status", "updated_at"]
                if step == OrderStatus.ASSIGNED_TO_DELIVERY:
                    order.delivery_partner_id = actor_id
                    update_fields.append("delivery_partner")
                order.save(update_fields=update_fields)

                sequence += 1
                OrderStatusHistory.objects.create(
                    order=order,
                    sequence=sequence,
                    status=step,
                    notes=notes if step == steps[-1] else None,
                    actor_role=actor_role,
                    actor_id=actor_id,
                )
                event_service.order_status_changed(order, previous_status)
                logger.info(
                    f"Order {order.order_number} {previous_status} -> {step} by {actor_role} {actor_id}"
                )

        return order

    def accept(self, order_id, vendor_user_id, notes=None):
        return self.transition(order_id, UserRole.VENDOR, vendor_user_id, OrderStatus.ACCEPTED, notes)

    def reject(self, order_id, vendor_user_id, notes=None):
        return self.transition(order_id, UserRole.VENDOR, vendor_user_id, OrderStatus.REJECTED, notes)

    def start_preparing(self, order_id, vendor_user_id, notes=None):
        return self.transition(order_id, UserRole.VENDOR, vendor_user_id, OrderStatus.PREPARING, notes)

    def mark_ready(self, order_id, vendor_user_id, notes=None):
        return self.transition(order_id, UserRole.VENDOR, vendor_user_id, OrderStatus.READY_FOR_PICKUP, notes)

    def self_assign(self, order_id, partner_id, notes=None):
        return self.transition(
            order_id, UserRole.DELIVERY_PARTNER, partner_id, OrderStatus.ASSIGNED_TO_DELIVERY, notes
        )

    def mark_picked_up(self, order_id, partner_id, notes=None):
        return self.transition(order_id, UserRole.DELIVERY_PARTNER, partner_id, OrderStatus.PICKED_UP, notes)

    def mark_in_transit(self, order_id, partner_id, notes=None):
        return self.transition(order_id, UserRole.DELIVERY_PARTNER, partner_id, OrderStatus.IN_TRANSIT, notes)

    def mark_delivered(self, order_id, partner_id, notes=None):
        return self.transition(order_id, UserRole.DELIVERY_PARTNER, partner_id, OrderStatus.DELIVERED, notes)

    def cancel(self, order_id, actor_role, actor_id, reason=None):
        return self.transition(order_id, actor_role, actor_id, OrderStatus.CANCELLED, reason)


order_lifecycle_service = OrderLifecycleService()
