"""
Allowed order status changes for the back office.

Orders move forward only: new -> processing -> shipped -> delivered.
Any state that is not final may be cancelled. Delivered and cancelled are final.
"""
from typing import Dict, FrozenSet

from models.order import OrderStatus


class IllegalStatusTransition(Exception):
    pass


TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.NEW: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


def check_transition(current: str, target: str) -> OrderStatus:
    """Return the target status or raise IllegalStatusTransition.

    Re-applying the current status is accepted as a no-op.
    """
    try:
        new = OrderStatus(target)
    except ValueError:
        raise IllegalStatusTransition(f"Unknown status: {target}")
    old = OrderStatus(current)

    if new == old:
        return new
    if new not in TRANSITIONS[old]:
        raise IllegalStatusTransition(f"Cannot change status from {old.value} to {new.value}")
    return new
