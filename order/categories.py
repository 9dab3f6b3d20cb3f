"""
Menu categories and the drink/food split between kitchen and bar.
"""
from django.db import models

DRINK_KEYWORDS = ('drink', 'beverage', 'alcohol', 'coffee', 'tea', 'wine', 'beer', 'cocktail')


class MenuCategory(models.TextChoices):
    FOOD = 'Food', 'Food'
    APPETIZER = 'Appetizer', 'Appetizer'
    MAIN_COURSE = 'Main Course', 'Main Course'
    SIDE_DISH = 'Side Dish', 'Side Dish'
    DESSERT = 'Dessert', 'Dessert'
    DRINK = 'Drink', 'Drink'
    BEVERAGE = 'Beverage', 'Beverage'
    ALCOHOL = 'Alcohol', 'Alcohol'
    COFFEE = 'Coffee', 'Coffee'
    TEA = 'Tea', 'Tea'


BEVERAGE_CATEGORIES = frozenset({
    MenuCategory.DRINK,
    MenuCategory.BEVERAGE,
    MenuCategory.ALCOHOL,
    MenuCategory.COFFEE,
    MenuCategory.TEA,
})


def is_drink_category(category):
    """Case-insensitive keyword match for free-text categories ("Craft Beer Selection" -> True)."""
    text = (category or '').lower()
    return any(keyword in text for keyword in DRINK_KEYWORDS)


def is_beverage_category(category):
    """Default for MenuItem.is_beverage when the client does not send one."""
    return category in BEVERAGE_CATEGORIES
