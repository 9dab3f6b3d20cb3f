# order/serializers.py
from rest_framework import serializers

from .categories import is_beverage_category
from .lifecycle import place_order
from .models import Order, OrderItem, MenuItem
from .status import ItemStatus, OrderStatus


def _string_list():
    return serializers.ListField(child=serializers.CharField(max_length=255), required=False)


class MenuItemSerializer(serializers.ModelSerializer):
    is_beverage = serializers.BooleanField(required=False)
    required_inventory = _string_list()
    ingredients = _string_list()
    allergens = _string_list()
    dietary_info = _string_list()

    class Meta:
        model = MenuItem
        fields = [
            'id',
            'name',
            'description',
            'price',
            'category',
            'is_beverage',
            'is_available',
            'required_inventory',
            'ingredients',
            'allergens',
            'dietary_info',
            'preparation_time',
            'calories',
            'image_url',
            'c_at',
            'u_at'
        ]
        read_only_fields = ['c_at', 'u_at']

    def create(self, validated_data):
        # Untagged items follow their category
        validated_data.setdefault('is_beverage', is_beverage_category(validated_data['category']))
        return super().create(validated_data)


class OrderItemSerializer(serializers.ModelSerializer):
    item_name = serializers.CharField(source='menu_item.name', read_only=True)
    is_beverage = serializers.BooleanField(source='menu_item.is_beverage', read_only=True)
    line_total = serializers.DecimalField(
        source='get_total_item_amount', read_only=True, max_digits=12, decimal_places=2
    )

    class Meta:
        model = OrderItem
        fields = [
            'id', 'order', 'menu_item', 'item_name', 'is_beverage', 'quantity',
            'unit_price', 'line_total', 'status', 'notes', 'c_at', 'u_at'
        ]
        # Status moves only through the status action, the price is snapshotted
        read_only_fields = ['order', 'menu_item', 'unit_price', 'status', 'c_at', 'u_at']


class OrderLineSerializer(serializers.Serializer):
    """One cart line when placing an order or appending to one."""
    menu_item = serializers.PrimaryKeyRelatedField(queryset=MenuItem.objects.all())
    quantity = serializers.IntegerField(min_value=1, default=1)
    notes = serializers.CharField(allow_blank=True, default='')

    def validate_menu_item(self, menu_item):
        if not menu_item.is_available:
            raise serializers.ValidationError(f"'{menu_item.name}' is currently not available.")
        return menu_item


class OrderSerializer(serializers.ModelSerializer):
    # Written as cart lines, read back as full order items
    items = OrderLineSerializer(many=True, write_only=True, required=False)
    order_number = serializers.CharField(read_only=True)
    waiter_name = serializers.CharField(source='waiter.name', read_only=True, default=None)

    class Meta:
        model = Order
        fields = [
            'id',
            'order_number',
            'customer',
            'customer_name',
            'table_number',
            'status',
            'total',
            'notes',
            'waiter',
            'waiter_name',
            'items',
            'served_at',
            'completed_at',
            'c_at',
            'u_at',
        ]
        # customer/waiter come from the request user; status from the items
        read_only_fields = [
            'customer', 'status', 'total', 'waiter', 'served_at', 'completed_at', 'c_at', 'u_at'
        ]

    def validate(self, attrs):
        if self.instance is None and not attrs.get('items'):
            raise serializers.ValidationError({'items': "An order needs at least one item."})
        if self.instance is not None and 'items' in attrs:
            raise serializers.ValidationError({'items': "Add items through the order's items endpoint."})
        return attrs

    def create(self, validated_data):
        lines = validated_data.pop('items')
        return place_order(lines, **validated_data)

    def to_representation(self, instance):
        data = super().to_representation(instance)
        data['items'] = OrderItemSerializer(
            instance.order_items.select_related('menu_item'), many=True, context=self.context
        ).data
        return data


class OrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)


class OrderItemStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=ItemStatus.choices)


class QueueItemSerializer(OrderItemSerializer):
    """Order line as shown on a station queue, with the ingredient check."""
    can_prepare = serializers.SerializerMethodField()
    missing_critical = serializers.SerializerMethodField()

    class Meta(OrderItemSerializer.Meta):
        fields = OrderItemSerializer.Meta.fields + ['can_prepare', 'missing_critical']

    def get_missing_critical(self, obj):
        from .queues import missing_for
        return missing_for(obj, self.context.get('inventory', {}))

    def get_can_prepare(self, obj):
        return not self.get_missing_critical(obj)
