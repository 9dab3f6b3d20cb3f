import datetime

from django.contrib.auth import get_user_model
from django.db.models import Count, Sum
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema
from rest_framework.response import Response
from rest_framework.views import APIView

from inventory.models import InventoryItem
from inventory.stock import StockLevel
from user.models import STAFF_ROLES
from user.permissions import IsManager
from .models import Order
from .periods import resolve_period
from .status import ACTIVE_STATUSES, OrderStatus


class DashboardStatsView(APIView):
    """
    Manager dashboard figures for a period (default: today): revenue, order
    counts per status, active staff, average time from order to serving and
    the number of inventory items running low.
    """

    permission_classes = [IsManager]

    @swagger_auto_schema(tags=['Stats'],
        manual_parameters=[
                openapi.Parameter('period', openapi.IN_QUERY, description="Time period for stats (day, week, month, custom, alltime). Default is 'day'.", type=openapi.TYPE_STRING),
                openapi.Parameter("start_time", openapi.IN_QUERY, description="Start of the time window (ISO 8601 format)", type=openapi.TYPE_STRING, format=openapi.FORMAT_DATETIME),
                openapi.Parameter("end_time", openapi.IN_QUERY, description="End of the time window (ISO 8601 format)", type=openapi.TYPE_STRING, format=openapi.FORMAT_DATETIME),
            ])
    def get(self, request, *args, **kwargs):
        User = get_user_model()
        period, start_date, end_date = resolve_period(request.query_params)

        orders = Order.objects.all()
        if start_date and end_date:
            orders = orders.filter(c_at__range=(start_date, end_date))

        totals = orders.aggregate(revenue=Sum('total'), order_count=Count('id'))
        per_status = dict(orders.values_list('status').annotate(count=Count('id')).order_by())

        serve_times = [
            served_at - created for created, served_at in
            orders.filter(served_at__isnull=False).values_list('c_at', 'served_at')
        ]
        avg_serve_time = sum(serve_times, datetime.timedelta()) / len(serve_times) if serve_times else None

        low_stock = InventoryItem.objects.with_stock_level().filter(
            level__in=[StockLevel.LOW, StockLevel.CRITICAL]
        ).values_list('level', flat=True)
        low_stock = list(low_stock)

        return Response({
            'period': period,
            'start_date': start_date,
            'end_date': end_date,
            'revenue': float(totals['revenue'] or 0),
            'order_count': totals['order_count'],
            'orders_by_status': {status: per_status.get(status, 0) for status in OrderStatus.values},
            'active_orders': Order.objects.filter(status__in=ACTIVE_STATUSES).count(),
            'active_staff': User.objects.filter(is_active=True, role__in=STAFF_ROLES).count(),
            'avg_order_time_minutes': round(avg_serve_time.total_seconds() / 60, 1) if avg_serve_time else None,
            'low_stock_count': low_stock.count(StockLevel.LOW),
            'critical_stock_count': low_stock.count(StockLevel.CRITICAL),
        })
