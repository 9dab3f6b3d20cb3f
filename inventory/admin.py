from django.contrib import admin
from .models import InventoryItem, InventoryUsage


@admin.register(InventoryItem)
class InventoryItemAdmin(admin.ModelAdmin):
    list_display = ('name', 'category', 'quantity', 'unit', 'threshold', 'stock_level', 'is_critical', 'last_updated')
    list_filter = ('category', 'is_critical')
    search_fields = ('name', 'notes')


@admin.register(InventoryUsage)
class InventoryUsageAdmin(admin.ModelAdmin):
    list_display = ('inventory', 'order_item', 'used_quantity', 'c_at')
    list_filter = ('inventory',)
    search_fields = ('inventory__name', 'order_item__menu_item__name')
