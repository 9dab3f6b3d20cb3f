from django_filters import rest_framework as filters
from .models import MenuItem, Order, OrderItem


class CharInFilter(filters.BaseInFilter, filters.CharFilter):
    pass


class NumberInFilter(filters.BaseInFilter, filters.NumberFilter):
    pass


class OrderFilter(filters.FilterSet):
    # ?status=pending,preparing
    status = CharInFilter(field_name='status', lookup_expr='in')
    waiter = NumberInFilter(field_name='waiter', lookup_expr='in')
    table_number = NumberInFilter(field_name='table_number', lookup_expr='in')
    created_after = filters.IsoDateTimeFilter(field_name='c_at', lookup_expr='gte')
    created_before = filters.IsoDateTimeFilter(field_name='c_at', lookup_expr='lte')

    class Meta:
        model = Order
        fields = ['status', 'waiter', 'table_number', 'created_after', 'created_before']


class OrderItemFilter(filters.FilterSet):
    status = CharInFilter(field_name='status', lookup_expr='in')
    is_beverage = filters.BooleanFilter(field_name='menu_item__is_beverage')

    class Meta:
        model = OrderItem
        fields = ['status', 'order', 'is_beverage']


class MenuItemFilter(filters.FilterSet):
    category = CharInFilter(field_name='category', lookup_expr='in')
    available = filters.BooleanFilter(field_name='is_available')
    search = filters.CharFilter(field_name='name', lookup_expr='icontains')

    class Meta:
        model = MenuItem
        fields = ['category', 'is_beverage', 'available', 'search']
