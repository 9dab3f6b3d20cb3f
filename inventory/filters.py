from django_filters import rest_framework as filters
from .models import InventoryItem


class CharInFilter(filters.BaseInFilter, filters.CharFilter):
    pass


class InventoryItemFilter(filters.FilterSet):
    # ?stock_level=critical,low
    stock_level = CharInFilter(method='filter_stock_level')
    category = CharInFilter(field_name='category', lookup_expr='in')
    is_critical = filters.BooleanFilter(field_name='is_critical')

    class Meta:
        model = InventoryItem
        fields = ['stock_level', 'category', 'is_critical']

    def filter_stock_level(self, queryset, name, value):
        return queryset.with_stock_level().filter(level__in=value)
