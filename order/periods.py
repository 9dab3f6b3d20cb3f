import datetime

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime
from rest_framework.exceptions import ValidationError

PERIOD_CHOICES = ('day', 'week', 'month', 'custom', 'alltime')


def _parse_bound(name, value, end_of_day):
    """ISO datetime, or a plain date meaning the start/end of that local day."""
    if not value:
        return None
    try:
        moment = parse_datetime(value)
        if moment is None:
            day = parse_date(value)
            if day is None:
                raise ValueError(value)
            moment = datetime.datetime.combine(day, datetime.time.max if end_of_day else datetime.time.min)
    except ValueError:
        raise ValidationError({name: f"'{value}' is not a valid date or datetime."})
    if timezone.is_naive(moment):
        moment = timezone.make_aware(moment)
    return moment


def resolve_period(params, default='day'):
    """
    Turn ?period=day|week|month|custom|alltime (plus start_time/end_time or
    start_date/end_date for custom ranges) into (period, start, end).

    Giving a start and end without a period implies 'custom'. Unknown periods
    fall back to 'day'. For 'alltime' both bounds are None.
    """
    start = _parse_bound('start_time', params.get('start_time') or params.get('start_date'), end_of_day=False)
    end = _parse_bound('end_time', params.get('end_time') or params.get('end_date'), end_of_day=True)
    if (start is None) != (end is None):
        missing = 'end_time' if end is None else 'start_time'
        raise ValidationError({missing: "A range needs both a start and an end."})
    period = params.get('period') or ('custom' if start and end else default)
    if period == 'custom' and start is None:
        raise ValidationError({'period': "A custom period needs start_date and end_date (or start_time and end_time)."})

    now = timezone.localtime()
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)

    if period == 'week':
        return period, today - datetime.timedelta(days=now.weekday()), now
    if period == 'month':
        return period, today.replace(day=1), now
    if period == 'custom' and start and end:
        if start > end:
            raise ValidationError({'start_time': "Start must not be after end."})
        return period, start, end
    if period == 'alltime':
        return period, None, None
    return 'day', today, now


def previous_window(start, end):
    """The window of equal length that ends where this one starts."""
    if start is None or end is None:
        return None, None
    return start - (end - start), start
