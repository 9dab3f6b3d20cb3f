import datetime
import decimal

from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from rest_framework.test import APITestCase
from rest_framework import exceptions, status

from inventory.models import InventoryItem, InventoryUsage
from .categories import MenuCategory, is_drink_category
from .lifecycle import add_item, place_order, set_item_status, set_order_status
from .models import MenuItem, Order, OrderItem
from .numbering import order_numbers
from .periods import previous_window, resolve_period
from .queues import split_by_station
from .status import ItemStatus, OrderStatus, can_transition_item, derive_order_status

User = get_user_model()
D = decimal.Decimal


def make_menu():
    """A food item and a coffee drink whose recipe uses bar inventory."""
    burger = MenuItem.objects.create(name="Burger", price=D('12.50'), category=MenuCategory.MAIN_COURSE)
    latte = MenuItem.objects.create(
        name="Iced Latte", price=D('5.50'), category=MenuCategory.BEVERAGE,
        required_inventory=['Coffee Beans', 'Milk', 'Ice'],
    )
    beans = InventoryItem.objects.create(name='Coffee Beans', category='Coffee', quantity=D('8'), unit='kg', threshold=D('3'))
    milk = InventoryItem.objects.create(name='Milk', category='Dairy', quantity=D('15'), unit='liters', threshold=D('10'))
    return burger, latte, beans, milk


class CategoryTests(TestCase):

    def test_is_drink_category(self):
        self.assertTrue(is_drink_category("Alcohol"))
        self.assertFalse(is_drink_category("Fruit"))
        self.assertTrue(is_drink_category("Craft Beer Selection"))
        self.assertTrue(is_drink_category("COFFEE"))
        self.assertFalse(is_drink_category(""))

    def test_is_beverage_follows_category_when_not_given(self):
        espresso = MenuItem.objects.create(name="Espresso", price=D('2.40'), category=MenuCategory.COFFEE)
        soup = MenuItem.objects.create(name="Soup", price=D('6.00'), category=MenuCategory.FOOD)
        self.assertTrue(espresso.is_beverage)
        self.assertFalse(soup.is_beverage)

    def test_explicit_is_beverage_wins(self):
        affogato = MenuItem.objects.create(name="Affogato", price=D('5.00'), category=MenuCategory.DESSERT, is_beverage=True)
        self.assertTrue(affogato.is_beverage)


class StatusRuleTests(TestCase):

    def test_item_transitions(self):
        self.assertTrue(can_transition_item(ItemStatus.PENDING, ItemStatus.PREPARING))
        self.assertTrue(can_transition_item(ItemStatus.PENDING, ItemStatus.READY))
        self.assertTrue(can_transition_item(ItemStatus.PREPARING, ItemStatus.READY))
        self.assertFalse(can_transition_item(ItemStatus.READY, ItemStatus.PREPARING))
        self.assertFalse(can_transition_item(ItemStatus.PREPARING, ItemStatus.PENDING))

    def test_derive_order_status(self):
        self.assertEqual(derive_order_status([]), OrderStatus.PENDING)
        self.assertEqual(derive_order_status(['pending', 'pending']), OrderStatus.PENDING)
        self.assertEqual(derive_order_status(['pending', 'ready']), OrderStatus.PREPARING)
        self.assertEqual(derive_order_status(['preparing']), OrderStatus.PREPARING)
        self.assertEqual(derive_order_status(['ready', 'ready']), OrderStatus.READY)


class OrderNumberTests(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.day = datetime.date(2025, 3, 1)
        cls.orders = []
        for hour in (9, 12, 18):
            cls.orders.append(cls._order_at(datetime.datetime(2025, 3, 1, hour)))
        cls.next_day = cls._order_at(datetime.datetime(2025, 3, 2, 8))

    @staticmethod
    def _order_at(moment):
        order = Order.objects.create()
        Order.objects.filter(pk=order.pk).update(c_at=timezone.make_aware(moment))
        order.refresh_from_db()
        return order

    def test_sequence_within_a_day(self):
        self.assertEqual([o.order_number for o in self.orders], ['2025/060/001', '2025/060/002', '2025/060/003'])

    def test_sequence_restarts_next_day(self):
        self.assertEqual(self.next_day.order_number, '2025/061/001')

    def test_batch_numbers_match(self):
        numbers = order_numbers(self.orders + [self.next_day])
        self.assertEqual(numbers[self.orders[2].id], '2025/060/003')
        self.assertEqual(numbers[self.next_day.id], '2025/061/001')

    def test_deleting_earlier_order_renumbers(self):
        self.orders[0].delete()
        self.assertEqual(self.orders[1].order_number, '2025/060/001')


class PeriodTests(TestCase):

    def test_custom_range_from_dates(self):
        period, start, end = resolve_period({'start_date': '2025-06-01', 'end_date': '2025-06-07'})
        self.assertEqual(period, 'custom')
        self.assertEqual(timezone.localtime(start).date(), datetime.date(2025, 6, 1))
        self.assertEqual(timezone.localtime(end).date(), datetime.date(2025, 6, 7))

    def test_alltime_has_no_bounds(self):
        self.assertEqual(resolve_period({'period': 'alltime'}), ('alltime', None, None))

    def test_one_sided_range_is_rejected(self):
        with self.assertRaises(exceptions.ValidationError):
            resolve_period({'start_date': '2025-06-01'})
        with self.assertRaises(exceptions.ValidationError):
            resolve_period({'period': 'custom', 'end_time': '2025-06-07T18:00:00'})

    def test_custom_period_needs_bounds(self):
        with self.assertRaises(exceptions.ValidationError):
            resolve_period({'period': 'custom'})

    def test_previous_window(self):
        start = timezone.make_aware(datetime.datetime(2025, 6, 8))
        end = timezone.make_aware(datetime.datetime(2025, 6, 15))
        self.assertEqual(previous_window(start, end), (start - datetime.timedelta(days=7), start))


class OrderLifecycleTests(TestCase):

    def setUp(self):
        self.waiter = User.objects.create_user(email='waiter@example.com', name='Waiter', role='waiter')
        self.burger, self.latte, self.beans, self.milk = make_menu()

    def _order(self, *lines):
        return place_order([{'menu_item': m, 'quantity': q} for m, q in lines], waiter=self.waiter, table_number=4)

    def test_place_order_totals_and_snapshots_prices(self):
        order = self._order((self.burger, 2), (self.latte, 1))
        self.assertEqual(order.total, D('30.50'))
        self.assertEqual(order.status, OrderStatus.PENDING)
        self.burger.price = D('99.00')
        self.burger.save()
        line = order.order_items.get(menu_item=self.burger)
        self.assertEqual(line.unit_price, D('12.50'))

    def test_unavailable_item_aborts_whole_order(self):
        self.latte.is_available = False
        self.latte.save()
        with self.assertRaises(ValidationError):
            self._order((self.burger, 1), (self.latte, 1))
        self.assertEqual(Order.objects.count(), 0)
        self.assertEqual(OrderItem.objects.count(), 0)

    def test_order_status_follows_items(self):
        order = self._order((self.burger, 1), (self.latte, 1))
        burger_line = order.order_items.get(menu_item=self.burger)
        latte_line = order.order_items.get(menu_item=self.latte)

        set_item_status(burger_line, ItemStatus.PREPARING)
        order.refresh_from_db()
        self.assertEqual(order.status, OrderStatus.PREPARING)

        set_item_status(burger_line, ItemStatus.READY)
        set_item_status(latte_line, ItemStatus.READY)
        order.refresh_from_db()
        self.assertEqual(order.status, OrderStatus.READY)

    def test_ready_consumes_one_unit_per_ingredient(self):
        order = self._order((self.latte, 3))
        line = order.order_items.get()
        set_item_status(line, ItemStatus.READY)

        self.beans.refresh_from_db()
        self.milk.refresh_from_db()
        self.assertEqual(self.beans.quantity, D('7.00'))
        self.assertEqual(self.milk.quantity, D('14.00'))
        # Ice is not stocked, so it is skipped
        self.assertEqual(
            sorted(InventoryUsage.objects.filter(order_item=line).values_list('inventory__name', flat=True)),
            ['Coffee Beans', 'Milk'],
        )

    def test_usage_records_what_was_actually_taken(self):
        order = self._order((self.latte, 1))
        InventoryItem.objects.filter(pk=self.beans.pk).update(quantity=D('0.40'))
        set_item_status(order.order_items.get(), ItemStatus.READY)
        usage = InventoryUsage.objects.get(inventory=self.beans)
        self.assertEqual(usage.used_quantity, D('0.400'))
        self.beans.refresh_from_db()
        self.assertEqual(self.beans.quantity, D('0.00'))

    def test_critical_ingredient_out_of_stock_blocks_ready(self):
        order = self._order((self.latte, 1))
        line = order.order_items.get()
        self.beans.adjust_quantity(D('-8'))

        with self.assertRaises(ValidationError):
            set_item_status(line, ItemStatus.READY)

        line.refresh_from_db()
        self.milk.refresh_from_db()
        self.assertEqual(line.status, ItemStatus.PENDING)
        self.assertEqual(self.milk.quantity, D('15.00'))
        self.assertFalse(InventoryUsage.objects.exists())

    def test_backwards_transition_rejected_and_same_status_is_noop(self):
        order = self._order((self.burger, 1))
        line = order.order_items.get()
        set_item_status(line, ItemStatus.READY)
        set_item_status(line, ItemStatus.READY)
        with self.assertRaises(ValidationError):
            set_item_status(line, ItemStatus.PREPARING)

    def test_serve_and_complete(self):
        order = self._order((self.burger, 1))
        with self.assertRaises(ValidationError):
            set_order_status(order, OrderStatus.SERVED)
        with self.assertRaises(ValidationError):
            set_order_status(order, OrderStatus.COMPLETED)

        set_item_status(order.order_items.get(), ItemStatus.READY)
        order = set_order_status(order, OrderStatus.SERVED)
        self.assertIsNotNone(order.served_at)
        order = set_order_status(order, OrderStatus.COMPLETED)
        self.assertEqual(order.status, OrderStatus.COMPLETED)
        self.assertIsNotNone(order.completed_at)

    def test_serving_follows_items_not_stored_status(self):
        order = self._order((self.burger, 1), (self.latte, 1))
        for line in order.order_items.all():
            set_item_status(line, ItemStatus.READY)
        Order.objects.filter(pk=order.pk).update(status=OrderStatus.PREPARING)

        order = set_order_status(order, OrderStatus.SERVED)
        self.assertEqual(order.status, OrderStatus.SERVED)

    def test_completed_order_cannot_be_served_again(self):
        order = self._order((self.burger, 1))
        set_item_status(order.order_items.get(), ItemStatus.READY)
        set_order_status(order, OrderStatus.SERVED)
        set_order_status(order, OrderStatus.COMPLETED)
        with self.assertRaises(ValidationError):
            set_order_status(order, OrderStatus.SERVED)
        order.refresh_from_db()
        self.assertEqual(order.status, OrderStatus.COMPLETED)

    def test_item_status_reads_current_row(self):
        order = self._order((self.burger, 1))
        stale = order.order_items.get()
        OrderItem.objects.filter(pk=stale.pk).update(status=ItemStatus.READY)
        with self.assertRaises(ValidationError):
            set_item_status(stale, ItemStatus.PREPARING)

    def test_preparation_status_cannot_be_written(self):
        order = self._order((self.burger, 1))
        for value in (OrderStatus.PREPARING, OrderStatus.READY):
            with self.assertRaises(ValidationError):
                set_order_status(order, value)

    def test_no_new_items_after_serving(self):
        order = self._order((self.burger, 1))
        set_item_status(order.order_items.get(), ItemStatus.READY)
        set_order_status(order, OrderStatus.SERVED)
        with self.assertRaises(ValidationError):
            add_item(order, self.latte, 1)

    def test_served_order_keeps_status_when_items_change(self):
        order = self._order((self.burger, 1))
        set_item_status(order.order_items.get(), ItemStatus.READY)
        set_order_status(order, OrderStatus.SERVED)
        OrderItem.objects.filter(order=order).update(status=ItemStatus.PENDING)
        order.refresh_from_db()
        self.assertEqual(order.sync_status(), OrderStatus.SERVED)

    def test_removing_a_line_recomputes_total_and_status(self):
        order = self._order((self.burger, 1), (self.latte, 2))
        set_item_status(order.order_items.get(menu_item=self.burger), ItemStatus.READY)
        order.order_items.get(menu_item=self.latte).delete()
        order.refresh_from_db()
        self.assertEqual(order.total, D('12.50'))
        self.assertEqual(order.status, OrderStatus.READY)

    def test_split_by_station_keeps_order(self):
        order = self._order((self.latte, 1), (self.burger, 1), (self.latte, 2))
        kitchen, bar = split_by_station(order.order_items.select_related('menu_item'))
        self.assertEqual([i.menu_item.name for i in kitchen], ['Burger'])
        self.assertEqual([i.quantity for i in bar], [1, 2])


class OrderAPITests(APITestCase):

    @classmethod
    def setUpTestData(cls):
        cls.manager = User.objects.create_user(email='manager@example.com', name='Manager', role='manager')
        cls.waiter = User.objects.create_user(email='waiter@example.com', name='Waiter', role='waiter')
        cls.kitchen = User.objects.create_user(email='kitchen@example.com', name='Kitchen', role='kitchen')
        cls.bar = User.objects.create_user(email='bar@example.com', name='Bar', role='bar')
        cls.customer = User.objects.create_user(email='anna@example.com', name='Anna', role='customer')
        cls.other_customer = User.objects.create_user(email='ben@example.com', name='Ben', role='customer')
        cls.burger, cls.latte, cls.beans, cls.milk = make_menu()

    def _place(self, user, lines, **extra):
        self.client.force_authenticate(user=user)
        data = {'items': [{'menu_item': m.pk, 'quantity': q} for m, q in lines], **extra}
        return self.client.post(reverse('order-list'), data, format='json')

    def test_customer_places_order(self):
        response = self._place(self.customer, [(self.burger, 2), (self.latte, 1)], table_number=7)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['customer'], self.customer.pk)
        self.assertEqual(response.data['customer_name'], 'Anna')
        self.assertEqual(D(response.data['total']), D('30.50'))
        self.assertEqual(len(response.data['items']), 2)
        self.assertRegex(response.data['order_number'], r'^\d{4}/\d{3}/001$')

    def test_waiter_becomes_owning_waiter(self):
        response = self._place(self.waiter, [(self.burger, 1)], customer_name='Table guest')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['waiter'], self.waiter.pk)

    def test_order_needs_items(self):
        response = self._place(self.waiter, [])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unavailable_item_is_rejected(self):
        MenuItem.objects.filter(pk=self.latte.pk).update(is_available=False)
        response = self._place(self.customer, [(self.latte, 1)])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Order.objects.count(), 0)

    def test_kitchen_cannot_place_orders(self):
        response = self._place(self.kitchen, [(self.burger, 1)])
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_customers_only_see_their_orders(self):
        self._place(self.customer, [(self.burger, 1)])
        self._place(self.other_customer, [(self.latte, 1)])
        self.client.force_authenticate(user=self.customer)
        response = self.client.get(reverse('order-list'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['customer'], self.customer.pk)

    def test_writing_preparation_status_is_rejected(self):
        order_id = self._place(self.waiter, [(self.burger, 1)]).data['id']
        response = self.client.post(reverse('order-set-status', kwargs={'pk': order_id}), {'status': 'ready'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('error', response.data)
        response = self.client.patch(reverse('order-detail', kwargs={'pk': order_id}), {'status': 'preparing'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_item_status_flow_through_api(self):
        order_id = self._place(self.waiter, [(self.latte, 1)]).data['id']
        item = OrderItem.objects.get(order_id=order_id)

        self.client.force_authenticate(user=self.kitchen)
        url = reverse('orderitem-set-status', kwargs={'pk': item.pk})
        response = self.client.post(url, {'status': 'ready'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(user=self.bar)
        response = self.client.post(url, {'status': 'ready'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'ready')
        self.assertEqual(Order.objects.get(pk=order_id).status, 'ready')

        self.client.force_authenticate(user=self.waiter)
        response = self.client.post(reverse('order-set-status', kwargs={'pk': order_id}), {'status': 'served'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        response = self.client.post(reverse('order-items', kwargs={'pk': order_id}), {'menu_item': self.burger.pk}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_insufficient_stock_returns_error(self):
        order_id = self._place(self.waiter, [(self.latte, 1)]).data['id']
        InventoryItem.objects.filter(name='Coffee Beans').update(quantity=0)
        item = OrderItem.objects.get(order_id=order_id)
        self.client.force_authenticate(user=self.bar)
        response = self.client.post(reverse('orderitem-set-status', kwargs={'pk': item.pk}), {'status': 'ready'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('Insufficient stock for Coffee Beans', response.data['error'])

    def test_append_item_to_open_order(self):
        order_id = self._place(self.waiter, [(self.burger, 1)]).data['id']
        response = self.client.post(
            reverse('order-items', kwargs={'pk': order_id}), {'menu_item': self.latte.pk, 'quantity': 2}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Order.objects.get(pk=order_id).total, D('23.50'))

    def test_pending_line_can_be_edited_and_removed(self):
        order_id = self._place(self.waiter, [(self.burger, 1), (self.latte, 1)]).data['id']
        burger_line = OrderItem.objects.get(order_id=order_id, menu_item=self.burger)
        latte_line = OrderItem.objects.get(order_id=order_id, menu_item=self.latte)

        response = self.client.patch(reverse('orderitem-detail', kwargs={'pk': burger_line.pk}), {'quantity': 3}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['quantity'], 3)
        self.assertEqual(Order.objects.get(pk=order_id).total, D('43.00'))

        response = self.client.delete(reverse('orderitem-detail', kwargs={'pk': latte_line.pk}))
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(Order.objects.get(pk=order_id).total, D('37.50'))

    def test_started_line_is_locked(self):
        order_id = self._place(self.waiter, [(self.burger, 1)]).data['id']
        line = OrderItem.objects.get(order_id=order_id)
        set_item_status(line, ItemStatus.PREPARING)

        self.client.force_authenticate(user=self.waiter)
        url = reverse('orderitem-detail', kwargs={'pk': line.pk})
        self.assertEqual(self.client.patch(url, {'quantity': 2}, format='json').status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(self.client.delete(url).status_code, status.HTTP_400_BAD_REQUEST)
        line.refresh_from_db()
        self.assertEqual(line.quantity, 1)

    def test_station_queues(self):
        self._place(self.waiter, [(self.burger, 1), (self.latte, 1)], table_number=3)
        InventoryItem.objects.filter(name='Milk').update(quantity=0)

        self.client.force_authenticate(user=self.kitchen)
        response = self.client.get(reverse('kitchen_queue'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([i['item_name'] for i in response.data[0]['items']], ['Burger'])

        self.client.force_authenticate(user=self.bar)
        response = self.client.get(reverse('bar_queue'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        latte = response.data[0]['items'][0]
        self.assertEqual(latte['item_name'], 'Iced Latte')
        self.assertFalse(latte['can_prepare'])
        self.assertEqual(latte['missing_critical'], ['Milk'])

        self.client.force_authenticate(user=self.waiter)
        self.assertEqual(self.client.get(reverse('bar_queue')).status_code, status.HTTP_403_FORBIDDEN)

    def test_receipt_is_png(self):
        order_id = self._place(self.waiter, [(self.burger, 2)]).data['id']
        response = self.client.get(reverse('order-receipt', kwargs={'pk': order_id}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['image'].startswith('iVBORw0KGgo'))

    def test_menu_is_read_only_for_staff(self):
        self.client.force_authenticate(user=self.waiter)
        self.assertEqual(self.client.get(reverse('menuitem-list')).status_code, status.HTTP_200_OK)
        response = self.client.post(reverse('menuitem-list'), {'name': 'Tea', 'price': '2.00', 'category': 'Tea'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(user=self.manager)
        response = self.client.post(reverse('menuitem-list'), {'name': 'Tea', 'price': '2.00', 'category': 'Tea'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['is_beverage'])


class ReportAPITests(APITestCase):

    @classmethod
    def setUpTestData(cls):
        cls.manager = User.objects.create_user(email='manager@example.com', name='Manager', role='manager')
        cls.waiter = User.objects.create_user(email='waiter@example.com', name='Waiter', role='waiter')
        cls.burger, cls.latte, _, _ = make_menu()
        place_order([{'menu_item': cls.burger, 'quantity': 2}], waiter=cls.waiter, customer_name='Anna', table_number=1)
        place_order([{'menu_item': cls.latte, 'quantity': 1}], waiter=cls.waiter, customer_name='Ben')

    def test_sales_report(self):
        self.client.force_authenticate(user=self.manager)
        response = self.client.get(reverse('sales_report'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_bills'], 2)
        self.assertEqual(response.data['total_revenue'], 30.5)
        self.assertEqual(response.data['average_bill'], 15.25)
        self.assertEqual(response.data['today_bills'], 2)
        self.assertEqual(response.data['growth_rate'], 0.0)
        self.assertEqual(len(response.data['daily_summaries']), 1)

    def test_sales_report_status_filter(self):
        self.client.force_authenticate(user=self.manager)
        response = self.client.get(reverse('sales_report'), {'status': 'completed'})
        self.assertEqual(response.data['total_bills'], 0)

    def test_sales_report_rejects_one_sided_range(self):
        self.client.force_authenticate(user=self.manager)
        response = self.client.get(reverse('sales_report'), {'start_date': '2025-06-01'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('end_time', response.data)

    def test_sales_export(self):
        self.client.force_authenticate(user=self.manager)
        response = self.client.get(reverse('sales_report_export'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        lines = response.content.decode().strip().splitlines()
        self.assertEqual(lines[0], 'Date,Time,Bill Number,Customer,Table,Items,Total,Status')
        self.assertEqual(len(lines), 3)
        self.assertTrue(lines[1].endswith(',Ben,N/A,1,5.50,pending'))

    def test_reports_are_manager_only(self):
        self.client.force_authenticate(user=self.waiter)
        self.assertEqual(self.client.get(reverse('sales_report')).status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(self.client.get(reverse('dashboard_stats')).status_code, status.HTTP_403_FORBIDDEN)

    def test_dashboard_stats(self):
        self.client.force_authenticate(user=self.manager)
        response = self.client.get(reverse('dashboard_stats'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['order_count'], 2)
        self.assertEqual(response.data['revenue'], 30.5)
        self.assertEqual(response.data['orders_by_status']['pending'], 2)
        self.assertEqual(response.data['active_orders'], 2)
        self.assertEqual(response.data['active_staff'], 2)
