import decimal

from django.db.models import Sum
from django.utils import timezone
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema
from rest_framework.response import Response
from rest_framework.views import APIView

from config.exports import csv_response
from user.permissions import IsManager
from .models import Order
from .numbering import order_numbers
from .periods import previous_window, resolve_period
from .status import OrderStatus

ZERO = decimal.Decimal('0.00')
EXPORT_HEADERS = ['Date', 'Time', 'Bill Number', 'Customer', 'Table', 'Items', 'Total', 'Status']

REPORT_PARAMETERS = [
    openapi.Parameter('period', openapi.IN_QUERY, description="day, week, month, custom or alltime. Default is 'week'.", type=openapi.TYPE_STRING),
    openapi.Parameter('start_date', openapi.IN_QUERY, description="First day of a custom range (YYYY-MM-DD)", type=openapi.TYPE_STRING, format=openapi.FORMAT_DATE),
    openapi.Parameter('end_date', openapi.IN_QUERY, description="Last day of a custom range (YYYY-MM-DD)", type=openapi.TYPE_STRING, format=openapi.FORMAT_DATE),
    openapi.Parameter('status', openapi.IN_QUERY, description="Only bills in this order status", type=openapi.TYPE_STRING, enum=OrderStatus.values),
]


def _orders_between(start, end):
    orders = Order.objects.all()
    if start is not None and end is not None:
        orders = orders.filter(c_at__gte=start, c_at__lte=end)
    return orders


def bill_summaries(params):
    """(period, start, end, [bill dict, ...]) newest first."""
    period, start, end = resolve_period(params, default='week')
    orders = _orders_between(start, end)
    status_filter = params.get('status')
    if status_filter and status_filter != 'all':
        orders = orders.filter(status=status_filter)
    orders = list(orders.annotate(item_count=Sum('order_items__quantity')).order_by('-c_at', '-id'))

    numbers = order_numbers(orders)
    bills = []
    for order in orders:
        created = timezone.localtime(order.c_at)
        bills.append({
            'order_id': order.id,
            'bill_number': numbers[order.id],
            'date': created.date(),
            'time': created.strftime('%H:%M'),
            'customer_name': order.customer_name,
            'table_number': order.table_number,
            'item_count': order.item_count or 0,
            'total': order.total,
            'status': order.status,
        })
    return period, start, end, bills


def daily_summaries(bills):
    days = {}
    for bill in bills:
        day = days.setdefault(bill['date'], {'bill_count': 0, 'revenue': ZERO})
        day['bill_count'] += 1
        day['revenue'] += bill['total']
    return [
        {
            'date': date,
            'bill_count': data['bill_count'],
            'total_revenue': float(data['revenue']),
            'average_bill': float(data['revenue'] / data['bill_count']),
        }
        for date, data in sorted(days.items())
    ]


def growth_rate(revenue, previous_revenue):
    """Percentage change against the previous period; 0 when there is nothing to compare with."""
    if not previous_revenue:
        return 0.0
    return round(float((revenue - previous_revenue) / previous_revenue * 100), 2)


class SalesReportView(APIView):
    """
    Bills, daily totals and growth against the previous period of the same length.
    Example: /api/v1/reports/sales/?start_date=2025-06-01&end_date=2025-06-07
    """
    permission_classes = [IsManager]

    @swagger_auto_schema(tags=['Reports'], manual_parameters=REPORT_PARAMETERS)
    def get(self, request, *args, **kwargs):
        period, start, end, bills = bill_summaries(request.query_params)

        total_revenue = sum((bill['total'] for bill in bills), ZERO)
        total_bills = len(bills)
        today = timezone.localdate()
        today_bills = [bill for bill in bills if bill['date'] == today]

        previous_start, previous_end = previous_window(start, end)
        previous_revenue = ZERO
        if previous_start is not None:
            previous_revenue = Order.objects.filter(
                c_at__gte=previous_start, c_at__lt=previous_end
            ).aggregate(total=Sum('total'))['total'] or ZERO

        return Response({
            'period': period,
            'start': start,
            'end': end,
            'total_bills': total_bills,
            'total_revenue': float(total_revenue),
            'average_bill': float(total_revenue / total_bills) if total_bills else 0.0,
            'today_bills': len(today_bills),
            'today_revenue': float(sum((bill['total'] for bill in today_bills), ZERO)),
            'previous_revenue': float(previous_revenue),
            'growth_rate': growth_rate(total_revenue, previous_revenue),
            'daily_summaries': daily_summaries(bills),
            'bills': [dict(bill, total=float(bill['total'])) for bill in bills],
        })


class SalesReportExportView(APIView):
    """The sales report bills as CSV."""
    permission_classes = [IsManager]

    @swagger_auto_schema(tags=['Reports'], manual_parameters=REPORT_PARAMETERS)
    def get(self, request, *args, **kwargs):
        period, start, end, bills = bill_summaries(request.query_params)
        if start is not None and end is not None:
            span = f"{timezone.localtime(start).date()}-to-{timezone.localtime(end).date()}"
        else:
            span = 'all-time'
        rows = [
            [
                bill['date'].isoformat(),
                bill['time'],
                bill['bill_number'],
                bill['customer_name'],
                bill['table_number'] if bill['table_number'] is not None else 'N/A',
                bill['item_count'],
                f"{bill['total']:.2f}",
                bill['status'],
            ]
            for bill in bills
        ]
        return csv_response(f"sales-report-{span}.csv", EXPORT_HEADERS, rows)
