import datetime
import decimal
from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase, override_settings
from django.utils import timezone
from django.urls import reverse
from django.contrib.auth import get_user_model
from rest_framework.test import APITestCase
from rest_framework import status

from inventory.models import InventoryItem
from order.lifecycle import place_order
from order.models import MenuItem
from .feed import iter_changes, latest_cursor, merge_changes, prune_changes, record_change
from .models import ChangeEvent

User = get_user_model()


class ChangeEventSignalTests(TestCase):

    def test_create_update_delete_are_recorded(self):
        soup = MenuItem.objects.create(name='Soup', price=decimal.Decimal('6.00'), category='Food')
        soup.price = decimal.Decimal('6.50')
        soup.save()
        pk = soup.pk
        soup.delete()

        events = ChangeEvent.objects.filter(collection='menu_items', object_id=str(pk)).order_by('id')
        self.assertEqual([e.action for e in events], ['create', 'update', 'delete'])
        self.assertEqual(events[1].payload['price'], '6.50')
        self.assertEqual(events[1].payload['name'], 'Soup')

    def test_secrets_never_enter_the_feed(self):
        user = User.objects.create_user(email='waiter@example.com', name='Waiter', role='waiter', password='Margherita-1')
        user.set_pin('1234')
        user.save()
        for event in ChangeEvent.objects.filter(collection='users'):
            self.assertNotIn('password', event.payload)
            self.assertNotIn('pin', event.payload)
            self.assertEqual(event.payload['email'], 'waiter@example.com')

    def test_order_events_carry_the_waiter(self):
        waiter = User.objects.create_user(email='waiter@example.com', name='Waiter', role='waiter')
        soup = MenuItem.objects.create(name='Soup', price=decimal.Decimal('6.00'), category='Food')
        order = place_order([{'menu_item': soup, 'quantity': 1}], waiter=waiter)
        event = ChangeEvent.objects.filter(collection='orders', object_id=str(order.pk)).first()
        self.assertEqual(event.user, waiter)
        self.assertEqual(event.payload['waiter'], waiter.pk)

    def test_order_rows_record_their_order(self):
        soup = MenuItem.objects.create(name='Soup', price=decimal.Decimal('6.00'), category='Food')
        order = place_order([{'menu_item': soup, 'quantity': 1}])
        refs = ChangeEvent.objects.filter(collection__in=['orders', 'order_items']).values_list('order_ref', flat=True)
        self.assertEqual(set(refs), {order.pk})
        self.assertIsNone(ChangeEvent.objects.filter(collection='menu_items').first().order_ref)

    def test_untracked_models_are_ignored(self):
        event = ChangeEvent.objects.create(collection='orders', object_id='1', action='create', payload={})
        self.assertIsNone(record_change(event, 'update'))


class FeedReaderTests(TestCase):

    def setUp(self):
        self.items = [
            MenuItem.objects.create(name=f'Dish {n}', price=decimal.Decimal('5.00'), category='Food')
            for n in range(5)
        ]

    def test_iter_changes_reads_in_batches(self):
        events = list(iter_changes(['menu_items'], batch_size=2))
        self.assertEqual(len(events), 5)
        self.assertEqual([e.id for e in events], sorted(e.id for e in events))

    def test_iter_changes_after_cursor(self):
        cursor = latest_cursor()
        self.items[0].delete()
        events = list(iter_changes(after=cursor))
        self.assertEqual([(e.collection, e.action) for e in events], [('menu_items', 'delete')])

    def test_latest_cursor_on_empty_feed(self):
        ChangeEvent.objects.all().delete()
        self.assertEqual(latest_cursor(), 0)

    @override_settings(CHANGE_FEED_LAG_SECONDS=60)
    def test_lag_window_holds_back_fresh_events(self):
        self.assertEqual(latest_cursor(), 0)
        self.assertEqual(list(iter_changes(['menu_items'])), [])

        ChangeEvent.objects.update(timestamp=timezone.now() - datetime.timedelta(minutes=2))
        self.assertEqual(latest_cursor(), ChangeEvent.objects.order_by('-id').first().id)
        self.assertEqual(len(list(iter_changes(['menu_items']))), 5)

    def test_prune_changes_keeps_recent_events(self):
        old_ids = list(ChangeEvent.objects.order_by('id').values_list('id', flat=True)[:2])
        ChangeEvent.objects.filter(id__in=old_ids).update(timestamp=timezone.now() - datetime.timedelta(days=10))

        self.assertEqual(prune_changes(timezone.now() - datetime.timedelta(days=7)), 2)
        self.assertFalse(ChangeEvent.objects.filter(id__in=old_ids).exists())
        self.assertEqual(ChangeEvent.objects.count(), 3)

    def test_merge_changes_keeps_a_current_copy(self):
        rows = merge_changes({}, iter_changes(['menu_items']))
        self.assertEqual(len(rows), 5)

        cursor = latest_cursor()
        self.items[1].name = 'Renamed'
        self.items[1].save()
        self.items[2].delete()
        merge_changes(rows, iter_changes(['menu_items'], after=cursor))

        self.assertEqual(len(rows), 4)
        self.assertEqual(rows[str(self.items[1].pk)]['name'], 'Renamed')
        self.assertNotIn(str(self.items[2].pk), rows)


class ChangeFeedAPITests(APITestCase):

    @classmethod
    def setUpTestData(cls):
        cls.manager = User.objects.create_user(email='manager@example.com', name='Manager', role='manager')
        cls.waiter = User.objects.create_user(email='waiter@example.com', name='Waiter', role='waiter')
        MenuItem.objects.create(name='Soup', price=decimal.Decimal('6.00'), category='Food')

    def test_changes_with_cursor(self):
        self.client.force_authenticate(user=self.manager)
        url = reverse('change-list')
        response = self.client.get(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['cursor'], latest_cursor())
        self.assertEqual(len(response.data['results']), ChangeEvent.objects.count())

        cursor = response.data['cursor']
        MenuItem.objects.create(name='Salad', price=decimal.Decimal('7.00'), category='Food')
        response = self.client.get(url, {'after': cursor})
        self.assertEqual(len(response.data['results']), 1)
        self.assertEqual(response.data['results'][0]['payload']['name'], 'Salad')

        response = self.client.get(url, {'after': response.data['cursor']})
        self.assertEqual(response.data['results'], [])
        self.assertEqual(response.data['cursor'], latest_cursor())

    def test_collection_filter(self):
        self.client.force_authenticate(user=self.manager)
        response = self.client.get(reverse('change-list'), {'collection': 'menu_items'})
        self.assertEqual({e['collection'] for e in response.data['results']}, {'menu_items'})

    def test_unknown_collection_rejected(self):
        self.client.force_authenticate(user=self.manager)
        response = self.client.get(reverse('change-list'), {'collection': 'tables'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_bad_cursor_rejected(self):
        self.client.force_authenticate(user=self.manager)
        response = self.client.get(reverse('change-list'), {'after': 'abc'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_limit(self):
        self.client.force_authenticate(user=self.manager)
        response = self.client.get(reverse('change-list'), {'limit': 1})
        self.assertEqual(len(response.data['results']), 1)
        self.assertEqual(response.data['cursor'], response.data['results'][0]['id'])

    def test_users_hidden_from_staff(self):
        self.client.force_authenticate(user=self.waiter)
        response = self.client.get(reverse('change-list'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertNotIn('users', {e['collection'] for e in response.data['results']})
        self.assertIn('menu_items', {e['collection'] for e in response.data['results']})

    def test_latest(self):
        self.client.force_authenticate(user=self.waiter)
        response = self.client.get(reverse('change-latest'))
        self.assertEqual(response.data, {'cursor': latest_cursor()})

    def test_requires_authentication(self):
        response = self.client.get(reverse('change-list'))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class ChangeFeedScopeTests(APITestCase):

    @classmethod
    def setUpTestData(cls):
        cls.alice = User.objects.create_user(email='alice@example.com', name='Alice', role='customer')
        cls.bob = User.objects.create_user(email='bob@example.com', name='Bob', role='customer')
        cls.waiter = User.objects.create_user(email='waiter@example.com', name='Waiter', role='waiter')
        cls.other_waiter = User.objects.create_user(email='other@example.com', name='Other', role='waiter')
        cls.bar = User.objects.create_user(email='bar@example.com', name='Bar', role='bar')
        soup = MenuItem.objects.create(name='Soup', price=decimal.Decimal('6.00'), category='Food')
        cls.alice_order = place_order(
            [{'menu_item': soup, 'quantity': 1}, {'menu_item': soup, 'quantity': 2}],
            customer=cls.alice, customer_name='Alice Secret', table_number=2,
        )
        cls.other_order = place_order([{'menu_item': soup, 'quantity': 1}], waiter=cls.other_waiter)
        InventoryItem.objects.create(name='Gin', category='Alcohol', quantity=decimal.Decimal('4'), unit='bottles')

    def _events(self, user, collection):
        self.client.force_authenticate(user=user)
        response = self.client.get(reverse('change-list'), {'collection': collection, 'limit': 500})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        return response.data['results']

    def _order_ids(self, events):
        return {e['payload']['order'] if e['collection'] == 'order_items' else e['payload']['id'] for e in events}

    def test_customer_does_not_see_another_customers_order(self):
        events = self._events(self.bob, 'orders,order_items')
        self.assertEqual(events, [])
        self.assertNotIn('Alice Secret', str(self._events(self.bob, '')))

    def test_customer_sees_own_order(self):
        events = self._events(self.alice, 'orders,order_items')
        self.assertEqual(self._order_ids(events), {self.alice_order.pk})
        self.assertEqual({e['collection'] for e in events}, {'orders', 'order_items'})

    def test_deleted_line_still_reaches_its_owner(self):
        line = self.alice_order.order_items.first()
        line_id = str(line.pk)
        line.delete()
        events = self._events(self.alice, 'order_items')
        self.assertIn(('delete', line_id), {(e['action'], e['object_id']) for e in events})
        self.assertNotIn(line_id, {e['object_id'] for e in self._events(self.bob, 'order_items')})

    def test_waiter_sees_own_and_unassigned_orders(self):
        self.assertEqual(self._order_ids(self._events(self.waiter, 'orders,order_items')), {self.alice_order.pk})
        self.assertEqual(self._order_ids(self._events(self.other_waiter, 'orders')), {self.alice_order.pk, self.other_order.pk})

    def test_bar_sees_every_order(self):
        self.assertEqual(self._order_ids(self._events(self.bar, 'orders')), {self.alice_order.pk, self.other_order.pk})

    def test_inventory_only_for_bar_and_managers(self):
        self.assertEqual(self._events(self.alice, 'inventory_items'), [])
        self.assertEqual(self._events(self.waiter, 'inventory_items'), [])
        self.assertEqual({e['payload']['name'] for e in self._events(self.bar, 'inventory_items')}, {'Gin'})

    def test_menu_is_visible_to_customers(self):
        self.assertEqual({e['payload']['name'] for e in self._events(self.bob, 'menu_items')}, {'Soup'})

    @override_settings(CHANGE_FEED_LAG_SECONDS=60)
    def test_fresh_events_are_held_back(self):
        self.client.force_authenticate(user=self.bar)
        response = self.client.get(reverse('change-list'))
        self.assertEqual(response.data, {'cursor': 0, 'results': []})
        self.assertEqual(self.client.get(reverse('change-latest')).data, {'cursor': 0})

        ChangeEvent.objects.update(timestamp=timezone.now() - datetime.timedelta(minutes=5))
        response = self.client.get(reverse('change-list'), {'collection': 'orders'})
        self.assertEqual(self._order_ids(response.data['results']), {self.alice_order.pk, self.other_order.pk})


class PruneChangesCommandTests(TestCase):

    def setUp(self):
        for n in range(3):
            MenuItem.objects.create(name=f'Dish {n}', price=decimal.Decimal('5.00'), category='Food')
        self.old_event = ChangeEvent.objects.order_by('id').first()
        ChangeEvent.objects.filter(pk=self.old_event.pk).update(timestamp=timezone.now() - datetime.timedelta(days=40))

    def test_prunes_with_default_retention(self):
        out = StringIO()
        call_command('prune_changes', stdout=out)
        self.assertIn('Removed 1 change event(s) older than 30 day(s).', out.getvalue())
        self.assertFalse(ChangeEvent.objects.filter(pk=self.old_event.pk).exists())
        self.assertEqual(ChangeEvent.objects.count(), 2)

    def test_days_option(self):
        call_command('prune_changes', days=60, stdout=StringIO())
        self.assertEqual(ChangeEvent.objects.count(), 3)

    def test_days_must_be_positive(self):
        with self.assertRaises(CommandError):
            call_command('prune_changes', days=0, stdout=StringIO())
