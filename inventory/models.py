# inventory/models.py
import decimal
import logging

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models, transaction
from django.db.models import Case, F, Value, When
from django.utils import timezone

from .stock import CRITICAL_RATIO, StockLevel, stock_level

logger = logging.getLogger(__name__)

ZERO = decimal.Decimal('0.00')
# Completing one order line uses one unit of each required ingredient
CONSUMPTION_PER_ITEM = decimal.Decimal('1')


def _clamped_decrease(amount):
    """UPDATE expression: quantity - amount, never below zero."""
    return Case(
        When(quantity__gte=amount, then=F('quantity') - amount),
        default=Value(ZERO),
        output_field=models.DecimalField(max_digits=10, decimal_places=2),
    )


class InventoryItemQuerySet(models.QuerySet):
    def with_stock_level(self):
        """Annotate `level` with the same rule as stock.stock_level()."""
        numerator, denominator = CRITICAL_RATIO.as_integer_ratio()
        return self.alias(
            scaled_quantity=F('quantity') * denominator,
            scaled_threshold=F('threshold') * numerator,
        ).annotate(
            level=Case(
                When(quantity__lte=0, then=Value(StockLevel.CRITICAL.value)),
                When(scaled_quantity__lte=F('scaled_threshold'), then=Value(StockLevel.CRITICAL.value)),
                When(quantity__lte=F('threshold'), then=Value(StockLevel.LOW.value)),
                default=Value(StockLevel.SUFFICIENT.value),
                output_field=models.CharField(max_length=20),
            )
        )


class InventoryItem(models.Model):
    name = models.CharField(max_length=255, unique=True)
    category = models.CharField(max_length=100)
    quantity = models.DecimalField(
        max_digits=10, decimal_places=2, default=ZERO,
        validators=[MinValueValidator(ZERO)],
    )
    unit = models.CharField(max_length=50)
    threshold = models.DecimalField(
        max_digits=10, decimal_places=2, default=decimal.Decimal('5.00'),
        validators=[MinValueValidator(decimal.Decimal('0.01'))],
    )
    is_critical = models.BooleanField(default=True)
    notes = models.TextField(blank=True, default='')
    c_at = models.DateTimeField(auto_now_add=True)
    last_updated = models.DateTimeField(auto_now=True)

    objects = InventoryItemQuerySet.as_manager()

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name

    @property
    def stock_level(self):
        return stock_level(self.quantity, self.threshold)

    def _after_update(self):
        self.refresh_from_db(fields=['quantity', 'last_updated'])
        from log.feed import record_change
        record_change(self, 'update')

    def increase_quantity(self, quantity_to_increase):
        """Increases the quantity atomically."""
        quantity_to_increase = decimal.Decimal(str(quantity_to_increase))
        if quantity_to_increase <= 0:
            return

        InventoryItem.objects.filter(pk=self.pk).update(
            quantity=F('quantity') + quantity_to_increase,
            last_updated=timezone.now(),
        )
        self._after_update()

    def reduce_quantity(self, quantity_to_reduce):
        """Reduces the quantity atomically, clamping at zero."""
        quantity_to_reduce = decimal.Decimal(str(quantity_to_reduce))
        if quantity_to_reduce <= 0:
            return

        InventoryItem.objects.filter(pk=self.pk).update(
            quantity=_clamped_decrease(quantity_to_reduce),
            last_updated=timezone.now(),
        )
        self._after_update()

    def adjust_quantity(self, change):
        """Manual +/- adjustment from the inventory screen."""
        change = decimal.Decimal(str(change))
        if change > 0:
            self.increase_quantity(change)
        elif change < 0:
            self.reduce_quantity(-change)
        return self.quantity

    def consume_one(self):
        """
        Use one unit for a completed order line.

        Critical items must still have stock: the decrement is a single
        conditional UPDATE, so two concurrent preparers cannot both take the
        last unit. Non-critical items are consumed best effort.

        Returns the amount actually taken, measured on the locked row.
        """
        with transaction.atomic():
            rows = InventoryItem.objects.filter(pk=self.pk)
            before = rows.select_for_update().values_list('quantity', flat=True).get()
            if self.is_critical:
                rows = rows.filter(quantity__gt=0)

            updated_rows = rows.update(
                quantity=_clamped_decrease(CONSUMPTION_PER_ITEM),
                last_updated=timezone.now(),
            )
            if updated_rows == 0:
                self.quantity = before
                logger.warning("Refused to consume %s: no stock left (%s).", self.name, before)
                raise ValidationError(f"Insufficient stock for {self.name}. Available: {before}")

            self._after_update()
        return before - self.quantity

    def is_out_of_stock(self):
        """Checks if quantity is zero or less."""
        return self.quantity <= ZERO


class InventoryUsage(models.Model):
    inventory = models.ForeignKey(InventoryItem, on_delete=models.CASCADE, related_name='usage_records')
    order_item = models.ForeignKey(
        'order.OrderItem', on_delete=models.SET_NULL, null=True, blank=True, related_name='inventory_usage'
    )
    used_quantity = models.DecimalField(max_digits=10, decimal_places=3)
    c_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        inventory_name = getattr(getattr(self, 'inventory', None), 'name', 'N/A')
        return f"{self.used_quantity} of {inventory_name} used by OrderItem {self.order_item_id}"
