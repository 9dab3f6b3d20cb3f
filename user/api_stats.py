from rest_framework.views import APIView
from rest_framework.response import Response
from django.contrib.auth import get_user_model
from django.db.models import Count, Q, Sum, DecimalField, Value
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi

from order.periods import resolve_period
from order.status import OrderStatus
from .models import Role
from .permissions import IsManager


class WaiterStatsView(APIView):
    """
    Returns per-waiter statistics: revenue of completed orders and order counts.
    Supports filtering by a time period using 'period' (day, week, month, alltime)
    or a custom range with 'start_time' and 'end_time'.
    Example: /api/v1/user-stats/?period=week
    """

    permission_classes = [IsManager]

    @swagger_auto_schema(
        tags=['Stats'],
            manual_parameters=[
                openapi.Parameter('period', openapi.IN_QUERY, description="Time period for stats (day, week, month, alltime, custom). Default is 'day'.", type=openapi.TYPE_STRING),
                openapi.Parameter("start_time", openapi.IN_QUERY, description="Start of the time window (ISO 8601 format)", type=openapi.TYPE_STRING, format=openapi.FORMAT_DATETIME),
                openapi.Parameter("end_time", openapi.IN_QUERY, description="End of the time window (ISO 8601 format)", type=openapi.TYPE_STRING, format=openapi.FORMAT_DATETIME),
            ]
    )
    def get(self, request, *args, **kwargs):
        User = get_user_model()
        period, start_date, end_date = resolve_period(request.query_params)

        time_filter = Q()
        if start_date and end_date:
            time_filter = Q(waited_orders__c_at__range=(start_date, end_date))
        completed = Q(waited_orders__status=OrderStatus.COMPLETED)
        still_open = Q(waited_orders__status__in=[s for s in OrderStatus.values if s != OrderStatus.COMPLETED])

        user_stats = User.objects.filter(role__in=[Role.WAITER, Role.MANAGER]).annotate(
            revenue=Sum(
                'waited_orders__total',
                filter=time_filter & completed,
                output_field=DecimalField(max_digits=12, decimal_places=2),
                default=Value(0),
            ),
            completed_order_count=Count('waited_orders', filter=time_filter & completed),
            open_order_count=Count('waited_orders', filter=time_filter & still_open),
        ).values(
            'id', 'name', 'role', 'revenue', 'completed_order_count', 'open_order_count'
        ).order_by('name')

        return Response({
            'period': period,
            'start_date': start_date,
            'end_date': end_date,
            # Users without orders in the window are left out
            'user_stats': [
                dict(user, revenue=float(user['revenue']))
                for user in user_stats
                if user['completed_order_count'] > 0 or user['open_order_count'] > 0
            ],
        })
