# inventory/serializers.py
import decimal

from rest_framework import serializers
from .models import InventoryItem, InventoryUsage
from .stock import StockLevel


class InventoryItemSerializer(serializers.ModelSerializer):
    # Derived from quantity vs threshold, never stored
    stock_level = serializers.ChoiceField(choices=StockLevel.choices, read_only=True)

    class Meta:
        model = InventoryItem
        fields = [
            'id',
            'name',
            'category',
            'quantity',
            'unit',
            'threshold',
            'is_critical',
            'stock_level',
            'notes',
            'last_updated',
            'c_at',
        ]
        read_only_fields = ['last_updated', 'c_at']


class InventoryAdjustSerializer(serializers.Serializer):
    change = serializers.DecimalField(max_digits=10, decimal_places=2)

    def validate_change(self, value):
        if value == decimal.Decimal('0'):
            raise serializers.ValidationError("Change must not be zero.")
        return value


class InventoryUsageSerializer(serializers.ModelSerializer):
    inventory_name = serializers.CharField(source='inventory.name', read_only=True)
    order_id = serializers.IntegerField(source='order_item.order_id', read_only=True, allow_null=True)

    class Meta:
        model = InventoryUsage
        fields = [
            'id',
            'inventory',
            'inventory_name',
            'order_item',
            'order_id',
            'used_quantity',
            'c_at'
        ]
        read_only_fields = fields
