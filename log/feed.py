"""
Change feed over the tracked collections.

Writers call record_change() (directly, or through the model signals);
readers either poll the changes endpoint with a cursor or iterate
iter_changes() in process. Both deliver full row snapshots, so a consumer
keeps its copy current by merging on id.

Event ids are handed out when a row is inserted, not when its transaction
commits. On databases with concurrent writers a slow transaction can commit
an id below a cursor a reader already holds; CHANGE_FEED_LAG_SECONDS holds
back events younger than that many seconds so readers only see settled ones.
"""
import datetime
import logging

from django.conf import settings
from django.utils import timezone

from .models import ChangeEvent

logger = logging.getLogger(__name__)

COLLECTIONS = {
    'user.User': 'users',
    'order.MenuItem': 'menu_items',
    'inventory.InventoryItem': 'inventory_items',
    'order.Order': 'orders',
    'order.OrderItem': 'order_items',
}

# Never leave the database through the feed
EXCLUDED_FIELDS = {'password', 'pin'}

# Collections whose events are scoped to the order they belong to
ORDER_COLLECTIONS = {'orders': 'pk', 'order_items': 'order_id'}


def collection_for(model):
    return COLLECTIONS.get(model._meta.label)


def snapshot(instance):
    """Concrete field values keyed by field name; foreign keys as ids."""
    data = {}
    for field in instance._meta.concrete_fields:
        if field.name in EXCLUDED_FIELDS:
            continue
        data[field.name] = field.value_from_object(instance)
    return data


def get_user_from_instance(instance):
    for attr in ('waiter', 'customer'):
        user = getattr(instance, attr, None)
        if user is not None:
            return user
    return None


def record_change(instance, action, user=None):
    collection = collection_for(type(instance))
    if collection is None:
        return None
    order_attr = ORDER_COLLECTIONS.get(collection)
    event = ChangeEvent.objects.create(
        collection=collection,
        object_id=str(instance.pk),
        action=action,
        payload=snapshot(instance),
        order_ref=getattr(instance, order_attr) if order_attr else None,
        user=user or get_user_from_instance(instance),
    )
    logger.debug("Change %s: %s %s %s", event.id, collection, action, instance.pk)
    return event


def settled(events):
    """Drop events still inside the CHANGE_FEED_LAG_SECONDS window."""
    lag = getattr(settings, 'CHANGE_FEED_LAG_SECONDS', 0)
    if not lag:
        return events
    return events.filter(timestamp__lte=timezone.now() - datetime.timedelta(seconds=lag))


def latest_cursor():
    last = settled(ChangeEvent.objects.all()).order_by('-id').values_list('id', flat=True).first()
    return last or 0


def iter_changes(collections=None, after=0, batch_size=100):
    """Yield settled events with id > `after` in id order, reading in batches until caught up."""
    while True:
        events = settled(ChangeEvent.objects.filter(id__gt=after))
        if collections:
            events = events.filter(collection__in=collections)
        batch = list(events.order_by('id')[:batch_size])
        if not batch:
            return
        yield from batch
        after = batch[-1].id


def merge_changes(rows, events):
    """Apply events to `rows` ({object_id: payload}) in place: upsert on create/update, drop on delete."""
    for event in events:
        if event.action == 'delete':
            rows.pop(event.object_id, None)
        else:
            rows[event.object_id] = event.payload
    return rows


def prune_changes(before):
    """Delete events older than `before`; returns the number removed."""
    deleted, _ = ChangeEvent.objects.filter(timestamp__lt=before).delete()
    logger.info("Pruned %s change event(s) older than %s.", deleted, before)
    return deleted
