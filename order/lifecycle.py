"""
Order placement and status changes.

Every function here runs in one transaction: a failed ingredient
consumption or a rejected transition leaves nothing half written.
"""
import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from inventory.models import InventoryItem, InventoryUsage
from .models import Order, OrderItem
from .status import (
    ItemStatus,
    OrderStatus,
    PREPARATION_STATUSES,
    can_transition_item,
    derive_order_status,
)

logger = logging.getLogger(__name__)


def consume_ingredients(order_item):
    """
    Take one unit of every inventory item the dish requires.

    Unknown ingredient names are skipped. A critical ingredient with no stock
    raises ValidationError, which rolls back the surrounding transaction.
    """
    names = order_item.menu_item.required_inventory or []
    if not names:
        return []

    # Always locked in pk order
    locked = InventoryItem.objects.select_for_update().filter(name__in=names).order_by('pk')
    inventory = {item.name: item for item in locked}
    usage = []
    for name in names:
        inventory_item = inventory.get(name)
        if inventory_item is None:
            logger.warning(
                "Ingredient %r required by %s is not in inventory; skipped.", name, order_item.menu_item.name
            )
            continue

        used = inventory_item.consume_one()
        if used <= 0:
            continue
        usage.append(InventoryUsage.objects.create(
            inventory=inventory_item,
            order_item=order_item,
            used_quantity=used,
        ))
        logger.info("Used %s %s of %s for OrderItem %s.", used, inventory_item.unit, name, order_item.pk)
    return usage


def lock_order_of(order_item):
    """Lock the item's order, then the item, always in that order."""
    order_id = OrderItem.objects.values_list('order_id', flat=True).get(pk=order_item.pk)
    order = Order.objects.select_for_update().get(pk=order_id)
    item = OrderItem.objects.select_for_update().get(pk=order_item.pk)
    item.order = order
    return order, item


@transaction.atomic
def set_item_status(order_item, new_status):
    # Order row first, so the derived order status always reflects committed items
    _, item = lock_order_of(order_item)
    if new_status not in ItemStatus.values:
        raise ValidationError(f"Unknown item status '{new_status}'.")
    if item.status == new_status:
        return item
    if not can_transition_item(item.status, new_status):
        logger.warning("Rejected item %s transition %s -> %s.", item.pk, item.status, new_status)
        raise ValidationError(f"Cannot change item status from {item.status} to {new_status}.")

    if new_status == ItemStatus.READY:
        consume_ingredients(item)

    item.status = new_status
    item.save(update_fields=['status', 'u_at'])
    return item


@transaction.atomic
def set_order_status(order, new_status):
    """Only serving and completing are explicit; the rest follows the items."""
    order = Order.objects.select_for_update().get(pk=order.pk)
    if new_status not in OrderStatus.values:
        raise ValidationError(f"Unknown order status '{new_status}'.")
    if order.status == new_status:
        return order
    if new_status in PREPARATION_STATUSES:
        raise ValidationError("Preparation status is derived from the order's items and cannot be set directly.")

    if new_status == OrderStatus.SERVED:
        # Judged on the items themselves, not on the stored status
        derived = derive_order_status(order.order_items.values_list('status', flat=True))
        if order.is_closed or derived != OrderStatus.READY:
            logger.warning("Rejected serving order %s in status %s.", order.pk, order.status)
            raise ValidationError("Only orders whose items are all ready can be served.")
        order.served_at = timezone.now()
        update_fields = ['status', 'served_at', 'u_at']
    else:
        if order.status != OrderStatus.SERVED:
            logger.warning("Rejected completing order %s in status %s.", order.pk, order.status)
            raise ValidationError("Only served orders can be completed.")
        order.completed_at = timezone.now()
        update_fields = ['status', 'completed_at', 'u_at']

    order.status = new_status
    order.save(update_fields=update_fields)
    logger.info("Order %s marked %s.", order.pk, new_status)
    return order


@transaction.atomic
def add_item(order, menu_item, quantity=1, notes=''):
    """Append a line to an open order at the menu item's current price."""
    order = Order.objects.select_for_update().get(pk=order.pk)
    item = OrderItem(
        order=order,
        menu_item=menu_item,
        quantity=quantity,
        unit_price=menu_item.price,
        notes=notes or '',
    )
    item.full_clean()
    item.save()
    return item


@transaction.atomic
def place_order(items, **order_fields):
    """
    Create an order with its lines in one go.

    `items` is a list of dicts with menu_item, quantity and optional notes.
    Any invalid line aborts the whole order.
    """
    if not items:
        raise ValidationError("An order needs at least one item.")
    order = Order.objects.create(**order_fields)
    for line in items:
        add_item(order, line['menu_item'], line.get('quantity', 1), line.get('notes', ''))
    order.refresh_from_db()
    logger.info("Order %s placed with %s line(s), total %s.", order.pk, len(items), order.total)
    return order
