"""
Kitchen and bar work queues.

Both stations look at the same active orders; the kitchen gets the food
lines and the bar the beverage lines, each in their original order.
"""
from django.db.models import Prefetch

from inventory.models import InventoryItem
from inventory.stock import missing_critical_ingredients
from .models import Order, OrderItem
from .status import ACTIVE_STATUSES

KITCHEN = 'kitchen'
BAR = 'bar'


def is_bar_item(order_item):
    return bool(order_item.menu_item.is_beverage)


def split_by_station(items):
    kitchen, bar = [], []
    for item in items:
        (bar if is_bar_item(item) else kitchen).append(item)
    return kitchen, bar


def inventory_snapshot():
    return {item.name: item for item in InventoryItem.objects.all()}


def active_orders():
    return (
        Order.objects.filter(status__in=ACTIVE_STATUSES)
        .order_by('c_at', 'id')
        .prefetch_related(
            Prefetch('order_items', queryset=OrderItem.objects.select_related('menu_item').order_by('c_at', 'id'))
        )
    )


def station_queue(station):
    """[(order, [items for this station]), ...] oldest first, skipping orders with nothing for the station."""
    queue = []
    for order in active_orders():
        kitchen, bar = split_by_station(order.order_items.all())
        items = bar if station == BAR else kitchen
        if items:
            queue.append((order, items))
    return queue


def missing_for(order_item, inventory):
    return missing_critical_ingredients(order_item.menu_item.required_inventory, inventory)
