from django.db.models import Q
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema
from rest_framework import permissions, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from order.models import Order
from order.views import ALL_ORDERS_ROLES, scope_orders_for
from user.models import Role
from .feed import COLLECTIONS, ORDER_COLLECTIONS, latest_cursor, settled
from .models import ChangeEvent
from .serializers import ChangeEventSerializer

DEFAULT_LIMIT = 100
MAX_LIMIT = 500

# Only managers follow the user collection
MANAGER_ONLY_COLLECTIONS = {'users'}
# Same roles as the inventory endpoints
INVENTORY_ROLES = (Role.BAR, Role.MANAGER)


def scope_changes_for(user, queryset):
    """Events of the rows `user` may read through the regular endpoints."""
    if user.role == Role.MANAGER:
        return queryset
    queryset = queryset.exclude(collection__in=MANAGER_ONLY_COLLECTIONS)
    if user.role not in INVENTORY_ROLES:
        queryset = queryset.exclude(collection='inventory_items')
    if user.role not in ALL_ORDERS_ROLES:
        visible_orders = scope_orders_for(user, Order.objects.all()).values('pk')
        queryset = queryset.filter(
            ~Q(collection__in=list(ORDER_COLLECTIONS)) | Q(order_ref__in=visible_orders)
        )
    return queryset


class ChangeEventViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Change feed. Poll with ?after=<last seen id>, optionally narrowed with
    ?collection=orders,order_items, and merge the returned rows by id.
    The response cursor is the id to send as `after` next time.
    """
    serializer_class = ChangeEventSerializer
    permission_classes = [permissions.IsAuthenticated]
    pagination_class = None

    def get_queryset(self):
        queryset = ChangeEvent.objects.all().order_by('id')
        if getattr(self, 'swagger_fake_view', False):
            return queryset.none()
        return scope_changes_for(self.request.user, settled(queryset))

    def _after(self):
        raw = self.request.query_params.get('after', '0') or '0'
        try:
            after = int(raw)
        except ValueError:
            raise ValidationError({'after': "Must be an integer event id."})
        if after < 0:
            raise ValidationError({'after': "Must not be negative."})
        return after

    def _limit(self):
        raw = self.request.query_params.get('limit')
        if not raw:
            return DEFAULT_LIMIT
        try:
            return max(1, min(int(raw), MAX_LIMIT))
        except ValueError:
            raise ValidationError({'limit': "Must be an integer."})

    def _collections(self):
        raw = self.request.query_params.get('collection', '')
        collections = [name.strip() for name in raw.split(',') if name.strip()]
        unknown = set(collections) - set(COLLECTIONS.values())
        if unknown:
            raise ValidationError({'collection': f"Unknown collection(s): {', '.join(sorted(unknown))}."})
        return collections

    @swagger_auto_schema(
        tags=['Changes'],
        manual_parameters=[
            openapi.Parameter('after', openapi.IN_QUERY, description="Return events with a larger id", type=openapi.TYPE_INTEGER),
            openapi.Parameter('collection', openapi.IN_QUERY, description="Comma separated collection names", type=openapi.TYPE_STRING),
            openapi.Parameter('limit', openapi.IN_QUERY, description=f"Maximum events returned (default {DEFAULT_LIMIT})", type=openapi.TYPE_INTEGER),
        ],
    )
    def list(self, request, *args, **kwargs):
        after = self._after()
        events = self.get_queryset().filter(id__gt=after)
        collections = self._collections()
        if collections:
            events = events.filter(collection__in=collections)
        events = list(events[:self._limit()])
        return Response({
            'cursor': events[-1].id if events else after,
            'results': self.get_serializer(events, many=True).data,
        })

    @swagger_auto_schema(tags=['Changes'])
    @action(detail=False, methods=['get'])
    def latest(self, request):
        """Cursor to continue from after a full reload."""
        return Response({'cursor': latest_cursor()})
