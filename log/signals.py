from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver

from inventory.models import InventoryItem
from order.models import MenuItem, Order, OrderItem
from user.models import User
from .feed import record_change


@receiver(post_save, sender=User)
@receiver(post_save, sender=MenuItem)
@receiver(post_save, sender=InventoryItem)
@receiver(post_save, sender=Order)
@receiver(post_save, sender=OrderItem)
def log_save(sender, instance, created, raw=False, **kwargs):
    if raw:
        return
    record_change(instance, 'create' if created else 'update')


@receiver(post_delete, sender=User)
@receiver(post_delete, sender=MenuItem)
@receiver(post_delete, sender=InventoryItem)
@receiver(post_delete, sender=Order)
@receiver(post_delete, sender=OrderItem)
def log_delete(sender, instance, **kwargs):
    record_change(instance, 'delete')
