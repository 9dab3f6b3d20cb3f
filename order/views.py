import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Q
from django.utils import timezone
from rest_framework import mixins, pagination, permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_yasg.utils import swagger_auto_schema

from user.models import Role
from user.permissions import (
    CanPlaceOrders,
    CanPrepareItems,
    CanServeOrders,
    IsBarOrManager,
    IsKitchenOrManager,
    IsManager,
    IsManagerOrReadOnly,
)
from .filters import MenuItemFilter, OrderFilter, OrderItemFilter
from .lifecycle import add_item, lock_order_of, set_item_status, set_order_status
from .models import MenuItem, Order, OrderItem
from .queues import BAR, KITCHEN, inventory_snapshot, is_bar_item, station_queue
from .receipts import bill_receipt, kitchen_ticket
from .serializers import (
    MenuItemSerializer,
    OrderItemSerializer,
    OrderItemStatusSerializer,
    OrderLineSerializer,
    OrderSerializer,
    OrderStatusSerializer,
    QueueItemSerializer,
)

logger = logging.getLogger(__name__)

# Roles that see every order, not only their own
ALL_ORDERS_ROLES = (Role.MANAGER, Role.KITCHEN, Role.BAR)


def generate_kitchen_ticket_for_items(items):
    ticket = "\n--- KITCHEN TICKET ---\n"
    for item in items:
        order = item.order
        table_number = order.table_number if order.table_number is not None else '-'
        order_time = timezone.localtime(order.c_at).strftime('%Y-%m-%d %H:%M:%S')
        station = 'BAR' if is_bar_item(item) else 'KITCHEN'
        ticket += f"Table: {table_number}\n"
        ticket += f"Order: {order.order_number}\n"
        ticket += f"Time: {order_time}\n"
        ticket += f"Station: {station}\n"
        ticket += f"{item.menu_item.name} x {item.quantity}\n"
        if item.notes:
            ticket += f"  Note: {item.notes}\n"
    ticket += "----------------------\n"
    logger.info(ticket)


def scope_orders_for(user, queryset):
    """Customers see their own orders, waiters theirs plus unassigned ones."""
    if user.role in ALL_ORDERS_ROLES:
        return queryset
    if user.role == Role.WAITER:
        return queryset.filter(Q(waiter=user) | Q(waiter__isnull=True))
    return queryset.filter(customer=user)


class OrderPagination(pagination.PageNumberPagination):
    page_size = 100
    page_size_query_param = 'page_size'
    max_page_size = 100


@swagger_auto_schema(tags=['Orders'])
class OrderViewSet(viewsets.ModelViewSet):
    """ API endpoint for Orders """
    serializer_class = OrderSerializer
    pagination_class = OrderPagination
    filterset_class = OrderFilter

    def get_permissions(self):
        if self.action in ('create', 'items'):
            return [CanPlaceOrders()]
        if self.action in ('update', 'partial_update', 'set_status'):
            return [CanServeOrders()]
        if self.action == 'destroy':
            return [IsManager()]
        return [permissions.IsAuthenticated()]

    def get_queryset(self):
        if getattr(self, 'swagger_fake_view', False):
            return Order.objects.none()
        queryset = Order.objects.select_related('waiter', 'customer').order_by('-c_at', '-id')
        return scope_orders_for(self.request.user, queryset)

    def perform_create(self, serializer):
        """ Customers own their orders, staff become the owning waiter. """
        user = self.request.user
        if user.role == Role.CUSTOMER:
            order = serializer.save(customer=user, customer_name=serializer.validated_data.get('customer_name') or user.name)
        else:
            order = serializer.save(waiter=user)
        generate_kitchen_ticket_for_items(order.order_items.select_related('menu_item', 'order'))

    def perform_update(self, serializer):
        """A status in an update goes through the same rules as the status action."""
        new_status = self.request.data.get('status')
        with transaction.atomic():
            order = serializer.save()
            if new_status:
                serializer.instance = set_order_status(order, new_status)

    @swagger_auto_schema(request_body=OrderStatusSerializer, responses={200: OrderSerializer})
    @action(detail=True, methods=['post'], url_path='status')
    def set_status(self, request, pk=None):
        """Mark an order served (all items ready) or completed (after serving)."""
        order = self.get_object()
        serializer = OrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = set_order_status(order, serializer.validated_data['status'])
        if order.status == 'completed':
            logger.info(f"Bill for order {order.order_number} ready to print.")
        return Response(self.get_serializer(order).data)

    @swagger_auto_schema(request_body=OrderLineSerializer, responses={201: OrderItemSerializer})
    @action(detail=True, methods=['post'])
    def items(self, request, pk=None):
        """Append one line to an open order."""
        order = self.get_object()
        serializer = OrderLineSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        item = add_item(order, **serializer.validated_data)
        generate_kitchen_ticket_for_items([item])
        return Response(OrderItemSerializer(item, context=self.get_serializer_context()).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['get'])
    def receipt(self, request, pk=None):
        """Printable receipt as a base64 PNG; ?kind=ticket gives the preparation ticket."""
        order = self.get_object()
        if request.query_params.get('kind') == 'ticket':
            image = kitchen_ticket(order, order.order_items.select_related('menu_item'))
        else:
            image = bill_receipt(order)
        return Response({
            'order_id': order.id,
            'order_number': order.order_number,
            'image': image,
            'content_type': 'image/png',
        })


@swagger_auto_schema(tags=['MenuItems'])
class MenuItemViewSet(viewsets.ModelViewSet):
    queryset = MenuItem.objects.all().order_by('category', 'name')
    serializer_class = MenuItemSerializer
    permission_classes = [IsManagerOrReadOnly]
    filterset_class = MenuItemFilter


@swagger_auto_schema(tags=['OrderItems'])
class OrderItemViewSet(mixins.ListModelMixin,
                       mixins.RetrieveModelMixin,
                       mixins.UpdateModelMixin,
                       mixins.DestroyModelMixin,
                       viewsets.GenericViewSet):
    serializer_class = OrderItemSerializer
    pagination_class = OrderPagination
    filterset_class = OrderItemFilter

    def get_permissions(self):
        if self.action == 'set_status':
            return [CanPrepareItems()]
        if self.action in ('update', 'partial_update', 'destroy'):
            return [CanPlaceOrders()]
        return [permissions.IsAuthenticated()]

    def get_queryset(self):
        """ Order items of the orders the user can see. """
        if getattr(self, 'swagger_fake_view', False):
            return OrderItem.objects.none()
        queryset = OrderItem.objects.select_related('menu_item', 'order').order_by('c_at', 'id')
        visible = scope_orders_for(self.request.user, Order.objects.all())
        return queryset.filter(order__in=visible)

    def _ensure_editable(self, item):
        if item.order.is_closed or item.status != 'pending':
            raise ValidationError("Only pending items of open orders can be changed or removed.")

    def perform_update(self, serializer):
        with transaction.atomic():
            _, serializer.instance = lock_order_of(serializer.instance)
            self._ensure_editable(serializer.instance)
            serializer.save()

    def perform_destroy(self, instance):
        with transaction.atomic():
            _, instance = lock_order_of(instance)
            self._ensure_editable(instance)
            instance.delete()

    @swagger_auto_schema(request_body=OrderItemStatusSerializer, responses={200: OrderItemSerializer})
    @action(detail=True, methods=['post'], url_path='status')
    def set_status(self, request, pk=None):
        """Advance an item: pending -> preparing -> ready. Ready uses up its ingredients."""
        item = self.get_object()
        role = request.user.role
        if (role == Role.KITCHEN and is_bar_item(item)) or (role == Role.BAR and not is_bar_item(item)):
            raise PermissionDenied("This item is prepared at the other station.")
        serializer = OrderItemStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        item = set_item_status(item, serializer.validated_data['status'])
        return Response(self.get_serializer(item).data)


class StationQueueView(APIView):
    """Active orders restricted to one station's items, oldest first."""
    station = KITCHEN

    @swagger_auto_schema(tags=['Queues'])
    def get(self, request, *args, **kwargs):
        context = {'request': request, 'inventory': inventory_snapshot()}
        data = []
        for order, items in station_queue(self.station):
            data.append({
                'id': order.id,
                'order_number': order.order_number,
                'table_number': order.table_number,
                'customer_name': order.customer_name,
                'status': order.status,
                'notes': order.notes,
                'c_at': order.c_at,
                'items': QueueItemSerializer(items, many=True, context=context).data,
            })
        return Response(data)


class KitchenQueueView(StationQueueView):
    station = KITCHEN
    permission_classes = [IsKitchenOrManager]


class BarQueueView(StationQueueView):
    station = BAR
    permission_classes = [IsBarOrManager]
