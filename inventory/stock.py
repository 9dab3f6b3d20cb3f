"""
Stock level classification and the advisory "can this be prepared" check.

Both are pure functions over plain values so they can be used on model
instances, serializer data or test doubles alike.
"""
import decimal

from django.db import models

# At or below this share of the threshold an item is critical
CRITICAL_RATIO = decimal.Decimal('0.3')


class StockLevel(models.TextChoices):
    SUFFICIENT = 'sufficient', 'Sufficient'
    LOW = 'low', 'Low'
    CRITICAL = 'critical', 'Critical'


def _as_decimal(value):
    return value if isinstance(value, decimal.Decimal) else decimal.Decimal(str(value))


def stock_level(quantity, threshold):
    """Classify `quantity` against the low-stock `threshold` (> 0)."""
    quantity = _as_decimal(quantity)
    threshold = _as_decimal(threshold)
    if quantity <= 0 or quantity <= threshold * CRITICAL_RATIO:
        return StockLevel.CRITICAL
    if quantity <= threshold:
        return StockLevel.LOW
    return StockLevel.SUFFICIENT


def blocks_preparation(inventory_item):
    """A critical ingredient with nothing left blocks the dish."""
    if inventory_item is None or not inventory_item.is_critical:
        return False
    return _as_decimal(inventory_item.quantity) <= 0


def missing_critical_ingredients(required_names, inventory):
    """
    Names from `required_names` that block preparation.

    `inventory` maps ingredient name -> object with `quantity` and
    `is_critical`. Names missing from the mapping never block.
    """
    return [name for name in required_names or () if blocks_preparation(inventory.get(name))]


def can_prepare(required_names, inventory):
    return not missing_critical_ingredients(required_names, inventory)
