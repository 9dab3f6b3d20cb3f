"""
Order and order-item status rules.

An order's preparation status (pending/preparing/ready) is never written
directly; it follows from its items. Serving and completing are explicit
staff actions on top of that.
"""
from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    PREPARING = 'preparing', 'Preparing'
    READY = 'ready', 'Ready'
    SERVED = 'served', 'Served'
    COMPLETED = 'completed', 'Completed'


class ItemStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    PREPARING = 'preparing', 'Preparing'
    READY = 'ready', 'Ready'


ITEM_TRANSITIONS = {
    ItemStatus.PENDING: {ItemStatus.PREPARING, ItemStatus.READY},
    ItemStatus.PREPARING: {ItemStatus.READY},
    ItemStatus.READY: set(),
}

PREPARATION_STATUSES = frozenset({OrderStatus.PENDING, OrderStatus.PREPARING, OrderStatus.READY})
CLOSED_STATUSES = frozenset({OrderStatus.SERVED, OrderStatus.COMPLETED})
ACTIVE_STATUSES = PREPARATION_STATUSES


def can_transition_item(current, target):
    return target in ITEM_TRANSITIONS.get(current, ())


def derive_order_status(item_statuses):
    """No items or all pending -> pending, all ready -> ready, anything else -> preparing."""
    statuses = list(item_statuses)
    if not statuses or all(s == ItemStatus.PENDING for s in statuses):
        return OrderStatus.PENDING
    if all(s == ItemStatus.READY for s in statuses):
        return OrderStatus.READY
    return OrderStatus.PREPARING
