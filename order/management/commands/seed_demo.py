from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from inventory.models import InventoryItem
from order.categories import MenuCategory
from order.models import MenuItem

User = get_user_model()

# (email, name, role, pin)
STAFF = [
    ('waiter@example.com', 'Waiter Test', 'waiter', '1234'),
    ('kitchen@example.com', 'Kitchen Test', 'kitchen', '2345'),
    ('bar@example.com', 'Bar Test', 'bar', '3456'),
]

# (name, category, quantity, unit, threshold, is_critical, notes)
INVENTORY = [
    ('Vodka', 'Alcohol', 12, 'bottles', 5, True, 'Standard 750ml bottles'),
    ('Rum', 'Alcohol', 8, 'bottles', 5, True, 'White and dark rum'),
    ('Gin', 'Alcohol', 4, 'bottles', 5, True, 'Premium London dry gin'),
    ('Tequila', 'Alcohol', 2, 'bottles', 5, True, 'Silver tequila'),
    ('Coffee Beans', 'Coffee', 8, 'kg', 3, True, 'Arabica beans'),
    ('Milk', 'Dairy', 15, 'liters', 10, True, 'Whole milk'),
    ('Lemons', 'Fruit', 25, 'pieces', 15, False, 'For garnish and cocktails'),
    ('Limes', 'Fruit', 12, 'pieces', 15, False, 'For garnish and cocktails'),
    ('Simple Syrup', 'Syrups', 3, 'bottles', 2, True, '500ml bottles'),
    ('Mint', 'Herbs', 5, 'bunches', 3, False, 'For mojitos and garnish'),
    ('Tonic Water', 'Mixers', 24, 'bottles', 12, True, '200ml bottles'),
    ('Soda Water', 'Mixers', 18, 'bottles', 12, True, '200ml bottles'),
    ('Orange Juice', 'Juices', 8, 'liters', 5, True, 'Fresh squeezed'),
    ('Cranberry Juice', 'Juices', 3, 'liters', 5, True, ''),
    ('Ice', 'Essentials', 25, 'kg', 10, False, 'Cubed ice'),
]

# (name, category, price, required inventory, allergens, preparation minutes)
MENU = [
    ('Bruschetta', MenuCategory.APPETIZER, '6.50', [], ['Gluten'], 10),
    ('Caesar Salad', MenuCategory.APPETIZER, '8.90', [], ['Dairy', 'Egg', 'Fish'], 10),
    ('Margherita Pizza', MenuCategory.MAIN_COURSE, '11.50', [], ['Gluten', 'Dairy'], 15),
    ('Grilled Salmon', MenuCategory.MAIN_COURSE, '18.90', [], ['Fish'], 20),
    ('French Fries', MenuCategory.SIDE_DISH, '3.90', [], [], 8),
    ('Tiramisu', MenuCategory.DESSERT, '6.90', [], ['Dairy', 'Egg', 'Gluten'], 5),
    ('Iced Coffee', MenuCategory.BEVERAGE, '4.50', ['Coffee Beans', 'Milk', 'Ice'], ['Dairy'], 3),
    ('Iced Latte', MenuCategory.BEVERAGE, '5.50', ['Coffee Beans', 'Milk', 'Ice'], ['Dairy'], 4),
    ('Lemon Iced Tea', MenuCategory.TEA, '4.99', ['Lemons', 'Ice'], [], 3),
    ('Sparkling Water', MenuCategory.BEVERAGE, '3.50', ['Soda Water', 'Lemons', 'Limes'], [], 1),
    ('Fresh Orange Juice', MenuCategory.BEVERAGE, '4.90', ['Orange Juice', 'Ice'], [], 2),
    ('Mojito (Non-Alcoholic)', MenuCategory.DRINK, '6.50', ['Mint', 'Limes', 'Soda Water', 'Ice'], [], 4),
    ('Lemonade', MenuCategory.DRINK, '4.20', ['Lemons', 'Simple Syrup', 'Ice'], [], 3),
    ('Gin & Tonic', MenuCategory.ALCOHOL, '8.50', ['Gin', 'Tonic Water', 'Limes', 'Ice'], [], 2),
    ('Espresso', MenuCategory.COFFEE, '2.40', ['Coffee Beans'], [], 2),
    ('House Wine', MenuCategory.ALCOHOL, '5.90', [], ['Sulphites'], 1),
]


class Command(BaseCommand):
    help = "Create demo staff, bar inventory and a menu (existing rows are left alone)."

    def add_arguments(self, parser):
        parser.add_argument('--manager-password', default='managerpass')

    @transaction.atomic
    def handle(self, *args, **options):
        if not User.objects.filter(email='manager@example.com').exists():
            User.objects.create_superuser('manager@example.com', 'Manager Test', options['manager_password'])
            self.stdout.write("Created manager@example.com")

        for email, name, role, pin in STAFF:
            user, created = User.objects.get_or_create(email=email, defaults={'name': name, 'role': role})
            if created:
                user.set_unusable_password()
                user.set_pin(pin)
                user.save()
                self.stdout.write(f"Created {role} {email} (PIN {pin})")

        for name, category, quantity, unit, threshold, is_critical, notes in INVENTORY:
            InventoryItem.objects.get_or_create(name=name, defaults={
                'category': category,
                'quantity': Decimal(quantity),
                'unit': unit,
                'threshold': Decimal(threshold),
                'is_critical': is_critical,
                'notes': notes,
            })

        for name, category, price, required, allergens, minutes in MENU:
            MenuItem.objects.get_or_create(name=name, defaults={
                'category': category,
                'price': Decimal(price),
                'required_inventory': required,
                'allergens': allergens,
                'preparation_time': minutes,
            })

        self.stdout.write(self.style.SUCCESS(
            f"Demo data ready: {InventoryItem.objects.count()} inventory items, {MenuItem.objects.count()} menu items."
        ))
