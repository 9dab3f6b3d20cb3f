import decimal
from types import SimpleNamespace

from django.test import TestCase
from django.urls import reverse
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from rest_framework.test import APITestCase
from rest_framework import status

from log.models import ChangeEvent
from .models import InventoryItem
from .stock import StockLevel, can_prepare, missing_critical_ingredients, stock_level

User = get_user_model()
D = decimal.Decimal


class StockLevelTests(TestCase):

    def test_examples_with_threshold_five(self):
        self.assertEqual(stock_level(1, 5), StockLevel.CRITICAL)
        self.assertEqual(stock_level(3, 5), StockLevel.LOW)
        self.assertEqual(stock_level(10, 5), StockLevel.SUFFICIENT)

    def test_zero_is_always_critical(self):
        for threshold in ('0.01', '1', '5', '1000'):
            self.assertEqual(stock_level(0, D(threshold)), StockLevel.CRITICAL)

    def test_boundaries(self):
        # 30% of 5 is 1.5
        self.assertEqual(stock_level(D('1.5'), 5), StockLevel.CRITICAL)
        self.assertEqual(stock_level(D('1.51'), 5), StockLevel.LOW)
        self.assertEqual(stock_level(5, 5), StockLevel.LOW)
        self.assertEqual(stock_level(D('5.01'), 5), StockLevel.SUFFICIENT)

    def test_severity_never_increases_with_quantity(self):
        severity = {StockLevel.CRITICAL: 2, StockLevel.LOW: 1, StockLevel.SUFFICIENT: 0}
        for threshold in (D('0.5'), D('3'), D('10')):
            previous = None
            for step in range(0, 60):
                level = severity[stock_level(D(step) / 4, threshold)]
                if previous is not None:
                    self.assertLessEqual(level, previous)
                previous = level


class CanPrepareTests(TestCase):

    def setUp(self):
        self.inventory = {
            'Gin': SimpleNamespace(quantity=D('0'), is_critical=True),
            'Ice': SimpleNamespace(quantity=D('0'), is_critical=False),
            'Tonic Water': SimpleNamespace(quantity=D('4'), is_critical=True),
        }

    def test_empty_requirements_are_always_preparable(self):
        self.assertTrue(can_prepare([], self.inventory))
        self.assertTrue(can_prepare(None, {}))

    def test_critical_ingredient_at_zero_blocks(self):
        self.assertFalse(can_prepare(['Gin', 'Tonic Water'], self.inventory))
        self.assertEqual(missing_critical_ingredients(['Gin', 'Tonic Water'], self.inventory), ['Gin'])

    def test_same_ingredient_not_critical_does_not_block(self):
        self.inventory['Gin'].is_critical = False
        self.assertTrue(can_prepare(['Gin'], self.inventory))

    def test_non_critical_and_unknown_ingredients_never_block(self):
        self.assertTrue(can_prepare(['Ice', 'Tonic Water', 'Saffron'], self.inventory))


class InventoryModelTests(TestCase):

    def setUp(self):
        self.item = InventoryItem.objects.create(
            name="Vodka", category='Alcohol', quantity=D('10.0'), unit='bottles', threshold=D('5')
        )

    def test_inventory_creation(self):
        self.assertEqual(self.item.name, "Vodka")
        self.assertEqual(self.item.quantity, D('10.00'))
        self.assertTrue(self.item.is_critical)
        self.assertEqual(self.item.stock_level, StockLevel.SUFFICIENT)

    def test_reduce_quantity(self):
        self.item.reduce_quantity(D('3.0'))
        self.assertEqual(self.item.quantity, D('7.00'))

    def test_reduce_quantity_clamps_at_zero(self):
        self.item.reduce_quantity(D('11.0'))
        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, D('0.00'))
        self.assertTrue(self.item.is_out_of_stock())

    def test_increase_quantity(self):
        self.item.increase_quantity(D('5.0'))
        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, D('15.00'))

    def test_adjust_quantity_both_directions(self):
        self.assertEqual(self.item.adjust_quantity(D('2.5')), D('12.50'))
        self.assertEqual(self.item.adjust_quantity(D('-4')), D('8.50'))

    def test_consume_one_critical_without_stock_raises(self):
        self.item.reduce_quantity(D('10'))
        with self.assertRaises(ValidationError):
            self.item.consume_one()
        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, D('0.00'))

    def test_consume_one_non_critical_clamps(self):
        ice = InventoryItem.objects.create(
            name="Ice", category='Essentials', quantity=D('0.40'), unit='kg', threshold=D('10'), is_critical=False
        )
        self.assertEqual(ice.consume_one(), D('0.40'))
        self.assertEqual(ice.quantity, D('0.00'))
        self.assertEqual(ice.consume_one(), D('0.00'))

    def test_consume_one_critical_fractional_remainder_clamps(self):
        self.item.reduce_quantity(D('9.75'))
        self.assertEqual(self.item.consume_one(), D('0.25'))
        self.assertEqual(self.item.quantity, D('0.00'))

    def test_consume_one_measures_the_current_row(self):
        stale = InventoryItem.objects.get(pk=self.item.pk)
        InventoryItem.objects.filter(pk=self.item.pk).update(quantity=D('0.50'))
        self.assertEqual(stale.consume_one(), D('0.50'))
        self.assertEqual(stale.quantity, D('0.00'))

    def test_consume_one_refusal_reports_current_stock(self):
        stale = InventoryItem.objects.get(pk=self.item.pk)
        InventoryItem.objects.filter(pk=self.item.pk).update(quantity=0)
        with self.assertRaises(ValidationError):
            stale.consume_one()
        self.assertEqual(stale.quantity, D('0.00'))

    def test_quantity_updates_are_recorded_in_change_feed(self):
        before = ChangeEvent.objects.filter(collection='inventory_items').count()
        self.item.adjust_quantity(D('-1'))
        events = ChangeEvent.objects.filter(collection='inventory_items').order_by('id')
        self.assertEqual(events.count(), before + 1)
        self.assertEqual(events.last().action, 'update')
        self.assertEqual(D(str(events.last().payload['quantity'])), D('9.00'))

    def test_database_stock_level_matches_classifier(self):
        for quantity in ('0', '1', '1.5', '1.51', '3', '5', '5.01', '10'):
            InventoryItem.objects.create(
                name=f"Item {quantity}", category='Test', quantity=D(quantity), unit='pcs', threshold=D('5')
            )
        for item in InventoryItem.objects.with_stock_level():
            self.assertEqual(item.level, stock_level(item.quantity, item.threshold), item.name)

    def test_inventory_str(self):
        self.assertEqual(str(self.item), "Vodka")


class InventoryAPITests(APITestCase):

    @classmethod
    def setUpTestData(cls):
        cls.bar = User.objects.create_user(email='bar@example.com', name='Bar', role='bar')
        cls.waiter = User.objects.create_user(email='waiter@example.com', name='Waiter', role='waiter')
        cls.gin = InventoryItem.objects.create(name='Gin', category='Alcohol', quantity=D('1'), unit='bottles', threshold=D('5'))
        cls.rum = InventoryItem.objects.create(name='Rum', category='Alcohol', quantity=D('4'), unit='bottles', threshold=D('5'))
        cls.milk = InventoryItem.objects.create(name='Milk', category='Dairy', quantity=D('15'), unit='liters', threshold=D('10'))

    def setUp(self):
        self.client.force_authenticate(user=self.bar)
        self.list_url = reverse('inventory-list')

    def test_list_includes_stock_level(self):
        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        levels = {row['name']: row['stock_level'] for row in response.data['results']}
        self.assertEqual(levels, {'Gin': 'critical', 'Milk': 'sufficient', 'Rum': 'low'})

    def test_filter_by_stock_level(self):
        response = self.client.get(self.list_url, {'stock_level': 'critical,low'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['name'] for row in response.data['results']], ['Gin', 'Rum'])

    def test_waiter_cannot_manage_inventory(self):
        self.client.force_authenticate(user=self.waiter)
        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_create_item(self):
        data = {'name': 'Tequila', 'category': 'Alcohol', 'quantity': '2', 'unit': 'bottles', 'threshold': '5'}
        response = self.client.post(self.list_url, data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['stock_level'], 'low')

    def test_adjust_up_and_down(self):
        url = reverse('inventory-adjust', kwargs={'pk': self.rum.pk})
        response = self.client.post(url, {'change': '3'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(D(response.data['quantity']), D('7'))
        response = self.client.post(url, {'change': '-10'}, format='json')
        self.assertEqual(D(response.data['quantity']), D('0'))
        self.assertEqual(response.data['stock_level'], 'critical')

    def test_adjust_rejects_zero(self):
        url = reverse('inventory-adjust', kwargs={'pk': self.rum.pk})
        response = self.client.post(url, {'change': '0'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_low_stock(self):
        response = self.client.get(reverse('inventory-low-stock'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['name'] for row in response.data], ['Gin', 'Rum'])

    def test_export_csv(self):
        response = self.client.get(reverse('inventory-export'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response['Content-Type'], 'text/csv')
        self.assertIn('bar-inventory-', response['Content-Disposition'])
        lines = response.content.decode().strip().splitlines()
        self.assertEqual(lines[0], 'Name,Category,Quantity,Unit,Threshold,Status,Last Updated,Notes')
        self.assertEqual(len(lines), 4)
        self.assertTrue(lines[1].startswith('Gin,Alcohol,1.00,bottles,5.00,Critical,'))
