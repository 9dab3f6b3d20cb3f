# inventory/views.py
import logging

from django.db import transaction
from django.utils import timezone
from rest_framework import viewsets, pagination
from rest_framework.decorators import action
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend
from drf_yasg.utils import swagger_auto_schema

from config.exports import csv_response
from user.permissions import IsBarOrManager
from .filters import InventoryItemFilter
from .models import InventoryItem, InventoryUsage
from .serializers import (
    InventoryItemSerializer,
    InventoryAdjustSerializer,
    InventoryUsageSerializer,
)
from .stock import StockLevel

logger = logging.getLogger(__name__)

EXPORT_HEADERS = ['Name', 'Category', 'Quantity', 'Unit', 'Threshold', 'Status', 'Last Updated', 'Notes']


class InventoryPagination(pagination.PageNumberPagination):
    page_size = 100
    page_size_query_param = 'page_size'
    max_page_size = 500


@swagger_auto_schema(tags=['Inventory'])
class InventoryViewSet(viewsets.ModelViewSet):
    """ API endpoint for bar inventory items """
    queryset = InventoryItem.objects.all().order_by('name')
    serializer_class = InventoryItemSerializer
    permission_classes = [IsBarOrManager]
    pagination_class = InventoryPagination
    filter_backends = [DjangoFilterBackend]
    filterset_class = InventoryItemFilter

    @swagger_auto_schema(request_body=InventoryAdjustSerializer, responses={200: InventoryItemSerializer})
    @action(detail=True, methods=['post'])
    def adjust(self, request, pk=None):
        """Add (positive change) or remove (negative change) stock; never drops below zero."""
        item = self.get_object()
        serializer = InventoryAdjustSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        change = serializer.validated_data['change']
        with transaction.atomic():
            item.adjust_quantity(change)
        logger.info("Inventory %s adjusted by %s to %s by %s.", item.name, change, item.quantity, request.user)
        return Response(self.get_serializer(item).data)

    @action(detail=False, methods=['get'], url_path='low-stock')
    def low_stock(self, request):
        """Items at low or critical level, most urgent first."""
        queryset = (
            InventoryItem.objects.with_stock_level()
            .filter(level__in=[StockLevel.LOW, StockLevel.CRITICAL])
            .order_by('quantity', 'name')
        )
        serializer = self.get_serializer(queryset, many=True)
        return Response(serializer.data)

    @action(detail=False, methods=['get'])
    def export(self, request):
        """CSV of the (filtered) inventory."""
        queryset = self.filter_queryset(self.get_queryset())
        rows = [
            [
                item.name,
                item.category,
                item.quantity,
                item.unit,
                item.threshold,
                item.stock_level.label,
                item.last_updated.isoformat(),
                item.notes,
            ]
            for item in queryset
        ]
        filename = f"bar-inventory-{timezone.localdate().isoformat()}.csv"
        return csv_response(filename, EXPORT_HEADERS, rows)


@swagger_auto_schema(tags=['Inventory'])
class InventoryUsageViewSet(viewsets.ReadOnlyModelViewSet):
    """ API endpoint for viewing inventory usage (read-only) """
    queryset = InventoryUsage.objects.select_related('inventory', 'order_item').order_by('-c_at')
    serializer_class = InventoryUsageSerializer
    permission_classes = [IsBarOrManager]
    pagination_class = InventoryPagination
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ['inventory', 'order_item']
