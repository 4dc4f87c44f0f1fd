"""
Order status transitions as data.

``TRANSITIONS`` is the complete table of legal single steps. ``ROLE_GUARDS``
maps each role to the targets it may request and the statuses it may
request them from. A guard can permit a move the table only reaches through
one intermediate status; ``_BRIDGES`` names that status so the planned path
is always made of legal single steps.
"""

from apps.accounts.models import UserRole
from apps.core.exceptions import InvalidStateTransition

from .models import OrderStatus

S = OrderStatus

TRANSITIONS = {
    S.PENDING: frozenset({S.ACCEPTED, S.REJECTED, S.CANCELLED}),
    S.ACCEPTED: frozenset({S.PREPARING, S.CANCELLED}),
    S.PREPARING: frozenset({S.READY_FOR_PICKUP, S.CANCELLED}),
    S.READY_FOR_PICKUP: frozenset({S.ASSIGNED_TO_DELIVERY, S.CANCELLED}),
    S.ASSIGNED_TO_DELIVERY: frozenset({S.PICKED_UP, S.CANCELLED}),
    S.PICKED_UP: frozenset({S.IN_TRANSIT}),
    S.IN_TRANSIT: frozenset({S.DELIVERED}),
    S.DELIVERED: frozenset(),
    S.CANCELLED: frozenset(),
    S.REJECTED: frozenset(),
}

INITIAL_STATUS = S.PENDING
TERMINAL_STATUSES = frozenset(status for status, targets in TRANSITIONS.items() if not targets)

ROLE_GUARDS = {
    UserRole.CUSTOMER: {
        S.CANCELLED: frozenset({S.PENDING, S.ACCEPTED, S.PREPARING}),
    },
    UserRole.VENDOR: {
        S.ACCEPTED: frozenset({S.PENDING}),
        S.REJECTED: frozenset({S.PENDING}),
        S.PREPARING: frozenset({S.ACCEPTED}),
        S.READY_FOR_PICKUP: frozenset({S.ACCEPTED, S.PREPARING}),
    },
    UserRole.DELIVERY_PARTNER: {
        S.ASSIGNED_TO_DELIVERY: frozenset({S.READY_FOR_PICKUP}),
        S.PICKED_UP: frozenset({S.READY_FOR_PICKUP, S.ASSIGNED_TO_DELIVERY}),
        S.IN_TRANSIT: frozenset({S.PICKED_UP}),
        S.DELIVERED: frozenset({S.IN_TRANSIT}),
    },
    UserRole.SUPER_ADMIN: {
        S.CANCELLED: frozenset(status for status, targets in TRANSITIONS.items() if S.CANCELLED in targets),
    },
}

_BRIDGES = {
    (S.ACCEPTED, S.READY_FOR_PICKUP): (S.PREPARING,),
    (S.READY_FOR_PICKUP, S.PICKED_UP): (S.ASSIGNED_TO_DELIVERY,),
}

_DESCRIPTIONS = {
    S.PENDING: "Order placed, awaiting vendor confirmation",
    S.ACCEPTED: "Order accepted by vendor",
    S.PREPARING: "Order is being prepared",
    S.READY_FOR_PICKUP: "Order is ready for pickup",
    S.ASSIGNED_TO_DELIVERY: "Delivery partner assigned",
    S.PICKED_UP: "Order picked up by delivery partner",
    S.IN_TRANSIT: "Order is on the way",
    S.DELIVERED: "Order delivered successfully",
    S.CANCELLED: "Order cancelled",
    S.REJECTED: "Order rejected by vendor",
}


def can_transition(current, target) -> bool:
    return target in TRANSITIONS.get(current, frozenset())


def is_terminal(status) -> bool:
    return status in TERMINAL_STATUSES


def allowed_next_statuses(status, role=None):
    """Statuses reachable from ``status``, limited to what ``role`` may request when given."""
    if role is None:
        return set(TRANSITIONS.get(status, frozenset()))
    guard = ROLE_GUARDS.get(role, {})
    return {target for target, sources in guard.items() if status in sources}


def plan_transition(current, target, role):
    """
    Return the ordered single steps that take an order from ``current`` to
    ``target`` on behalf of ``role``. The last element is always ``target``.
    """
    sources = ROLE_GUARDS.get(role, {}).get(target, frozenset())
    if current not in sources:
        raise InvalidStateTransition(current, target, allowed_next_statuses(current, role))

    if can_transition(current, target):
        return (S(target),)

    bridge = _BRIDGES.get((current, target))
    if bridge is None:
        raise InvalidStateTransition(current, target, allowed_next_statuses(current, role))
    return bridge + (S(target),)


def status_description(status) -> str:
    return _DESCRIPTIONS[status]


def status_category(status) -> str:
    if status == S.DELIVERED:
        return "completed"
    if status in (S.CANCELLED, S.REJECTED):
        return "failed"
    return "active"
