"""
Human readable order numbers: YYYY/DDD/SSS.

The sequence is the order's 1-based position among all orders created on the
same local calendar day (by creation time, then id). It is computed on read,
so deleting an earlier order of the day renumbers the later ones.
"""
import datetime

from django.db.models import Q
from django.utils import timezone


def format_order_number(day, sequence):
    return f"{day.year}/{day.timetuple().tm_yday:03d}/{sequence:03d}"


def local_day_bounds(day):
    """Aware [start, end) datetimes covering the local calendar `day`."""
    start = timezone.make_aware(datetime.datetime.combine(day, datetime.time.min))
    end = timezone.make_aware(datetime.datetime.combine(day + datetime.timedelta(days=1), datetime.time.min))
    return start, end


def daily_sequence(order):
    from .models import Order

    day = timezone.localtime(order.c_at).date()
    start, end = local_day_bounds(day)
    earlier = Order.objects.filter(c_at__gte=start, c_at__lt=end).filter(
        Q(c_at__lt=order.c_at) | Q(c_at=order.c_at, id__lt=order.id)
    )
    return earlier.count() + 1


def order_number(order):
    if order.pk is None or order.c_at is None:
        return None
    day = timezone.localtime(order.c_at).date()
    return format_order_number(day, daily_sequence(order))


def order_numbers(orders):
    """{order.id: number} for many orders, one query per distinct local day."""
    from .models import Order

    numbers = {}
    days = {timezone.localtime(order.c_at).date() for order in orders}
    for day in days:
        start, end = local_day_bounds(day)
        ids = (
            Order.objects.filter(c_at__gte=start, c_at__lt=end)
            .order_by('c_at', 'id')
            .values_list('id', flat=True)
        )
        for sequence, order_id in enumerate(ids, start=1):
            numbers[order_id] = format_order_number(day, sequence)
    return {order.id: numbers[order.id] for order in orders}
