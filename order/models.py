# order/models.py
import decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from .categories import MenuCategory, is_beverage_category
from .status import CLOSED_STATUSES, ItemStatus, OrderStatus, derive_order_status

User = settings.AUTH_USER_MODEL


class MenuItem(models.Model):
    name = models.CharField(max_length=255, unique=True)
    description = models.TextField(blank=True, default='')
    price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(decimal.Decimal('0.00'))])
    category = models.CharField(max_length=100, choices=MenuCategory.choices)
    # Left empty on creation it follows the category
    is_beverage = models.BooleanField(blank=True)
    is_available = models.BooleanField(default=True)
    # Inventory item names, matched by InventoryItem.name
    required_inventory = models.JSONField(default=list, blank=True)
    ingredients = models.JSONField(default=list, blank=True)
    allergens = models.JSONField(default=list, blank=True)
    dietary_info = models.JSONField(default=list, blank=True)
    preparation_time = models.PositiveIntegerField(null=True, blank=True, help_text="Minutes")
    calories = models.PositiveIntegerField(null=True, blank=True)
    image_url = models.URLField(blank=True, default='')
    c_at = models.DateTimeField(auto_now_add=True)
    u_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['category', 'name']

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if self.is_beverage is None:
            self.is_beverage = is_beverage_category(self.category)
        super().save(*args, **kwargs)


class Order(models.Model):
    customer = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='orders')
    customer_name = models.CharField(max_length=255, blank=True, default='')
    table_number = models.PositiveIntegerField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=OrderStatus.choices, default=OrderStatus.PENDING)
    total = models.DecimalField(max_digits=10, decimal_places=2, default=decimal.Decimal('0.00'))
    notes = models.TextField(blank=True, default='')
    waiter = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='waited_orders')
    served_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    c_at = models.DateTimeField(auto_now_add=True)
    u_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-c_at', '-id']

    def __str__(self):
        return f"Order ID: {self.id}, Status: {self.status}"

    @property
    def is_closed(self):
        return self.status in CLOSED_STATUSES

    @property
    def order_number(self):
        from .numbering import order_number
        return order_number(self)

    def calculate_order_total(self):
        """Calculates total based on associated order items."""
        total = decimal.Decimal('0.00')
        for item in self.order_items.all():
            total += item.get_total_item_amount()

        # Update only if the amount changed to avoid unnecessary saves/signal triggers
        if self.total != total:
            self.total = total
            self.save(update_fields=['total', 'u_at'])
        return self.total

    def sync_status(self):
        """Recompute the preparation status from the items; served/completed orders stay put."""
        if self.is_closed:
            return self.status
        derived = derive_order_status(self.order_items.values_list('status', flat=True))
        if self.status != derived:
            self.status = derived
            self.save(update_fields=['status', 'u_at'])
        return self.status


class OrderItem(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='order_items')
    menu_item = models.ForeignKey(MenuItem, on_delete=models.PROTECT, related_name='order_items')
    quantity = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    # Price at the time the line was added
    unit_price = models.DecimalField(max_digits=10, decimal_places=2, blank=True)
    status = models.CharField(max_length=20, choices=ItemStatus.choices, default=ItemStatus.PENDING)
    notes = models.TextField(blank=True, default='')
    c_at = models.DateTimeField(auto_now_add=True)
    u_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['c_at', 'id']

    def __str__(self):
        return f"{self.quantity} x {self.menu_item.name} (Order: {self.order_id})"

    def get_total_item_amount(self):
        """Calculates the total price for this line item."""
        return self.quantity * self.unit_price

    def clean(self):
        """Ensure menu item is available and the order still takes new lines."""
        super().clean()
        if self.pk is None:
            if self.menu_item_id and not self.menu_item.is_available:
                raise ValidationError(f"'{self.menu_item.name}' is currently not available.")
            if self.order_id and self.order.is_closed:
                raise ValidationError(f"Order {self.order_id} is {self.order.status}; no new items can be added.")

    # Keep save/delete overrides for immediate total and status recalculation
    def save(self, *args, **kwargs):
        if self.unit_price is None:
            self.unit_price = self.menu_item.price
        super().save(*args, **kwargs)
        self.order.calculate_order_total()
        self.order.sync_status()

    def delete(self, *args, **kwargs):
        order = self.order
        result = super().delete(*args, **kwargs)
        order.calculate_order_total()
        order.sync_status()
        return result
