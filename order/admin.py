from django.contrib import admin
from .models import Order, MenuItem, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    fields = ('menu_item', 'quantity', 'unit_price', 'status', 'notes')
    readonly_fields = ('unit_price', 'status')


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ('id', 'order_number', 'table_number', 'customer_name', 'waiter', 'status', 'total', 'c_at')
    list_filter = ('status', 'c_at')
    search_fields = ('customer_name', 'waiter__name', 'customer__email')
    readonly_fields = ('status', 'total', 'served_at', 'completed_at')
    inlines = [OrderItemInline]


@admin.register(MenuItem)
class MenuItemAdmin(admin.ModelAdmin):
    list_display = ('name', 'category', 'is_beverage', 'price', 'is_available')
    list_filter = ('category', 'is_beverage', 'is_available')
    search_fields = ('name', 'description')


@admin.register(OrderItem)
class OrderItemAdmin(admin.ModelAdmin):
    list_display = ('order', 'menu_item', 'quantity', 'unit_price', 'status')
    list_filter = ('status', 'menu_item')
