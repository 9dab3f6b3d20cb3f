# user/tests.py
import decimal

from django.test import TestCase
from django.urls import reverse
from django.contrib.auth import get_user_model
from rest_framework.test import APITestCase
from rest_framework import status

from order.lifecycle import place_order, set_item_status, set_order_status
from order.models import MenuItem

User = get_user_model()


class UserModelTests(TestCase):

    def test_create_user(self):
        """Test creating a user with the custom manager."""
        user = User.objects.create_user(email='Test@Example.com', name='Test User')
        self.assertEqual(user.email, 'Test@example.com')
        self.assertEqual(user.name, 'Test User')
        self.assertFalse(user.is_staff)
        self.assertFalse(user.is_superuser)
        self.assertFalse(user.has_usable_password())
        self.assertEqual(user.role, 'customer')

    def test_create_user_requires_email_and_name(self):
        with self.assertRaises(ValueError):
            User.objects.create_user(email='', name='Nobody')
        with self.assertRaises(ValueError):
            User.objects.create_user(email='nobody@example.com', name='')

    def test_create_superuser(self):
        """Test creating a superuser with the custom manager."""
        superuser = User.objects.create_superuser('admin@example.com', 'Test Admin', 'testpassword')
        self.assertTrue(superuser.is_staff)
        self.assertTrue(superuser.is_superuser)
        self.assertTrue(superuser.check_password('testpassword'))
        self.assertEqual(superuser.role, 'manager')

    def test_create_superuser_without_password(self):
        with self.assertRaises(ValueError):
            User.objects.create_superuser('admin@example.com', 'Test Admin')

    def test_create_superuser_with_other_role(self):
        with self.assertRaises(ValueError):
            User.objects.create_superuser('admin@example.com', 'Test Admin', 'testpassword', role='waiter')

    def test_set_and_check_pin(self):
        """Test setting and checking a PIN on a user."""
        user = User.objects.create_user(email='pin@example.com', name='PIN User', role='waiter')
        user.set_pin('1234')
        self.assertTrue(user.check_pin('1234'))
        self.assertFalse(user.check_pin('4321'))
        self.assertNotEqual(user.pin, '1234')

    def test_cleared_pin_never_matches(self):
        user = User.objects.create_user(email='pin@example.com', name='PIN User', role='waiter')
        user.set_pin('')
        self.assertIsNone(user.pin)
        self.assertFalse(user.check_pin(''))

    def test_str(self):
        user = User.objects.create_user(email='anna@example.com', name='Anna')
        self.assertEqual(str(user), 'Anna (anna@example.com)')


class AuthAPITests(APITestCase):

    @classmethod
    def setUpTestData(cls):
        cls.password = 'Tiramisu-2024'
        cls.manager = User.objects.create_superuser('manager@example.com', 'Manager', cls.password)
        cls.waiter = User.objects.create_user(email='waiter@example.com', name='Waiter', role='waiter')
        cls.waiter.set_pin('1234')
        cls.waiter.save()

    def test_register_customer(self):
        data = {'email': 'new@example.com', 'name': 'New Customer', 'password': 'Bruschetta-99'}
        response = self.client.post(reverse('register'), data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        user = User.objects.get(email='new@example.com')
        self.assertEqual(user.role, 'customer')
        self.assertNotIn('password', response.data)

    def test_register_duplicate_email(self):
        data = {'email': 'WAITER@example.com', 'name': 'Copy', 'password': 'Bruschetta-99'}
        response = self.client.post(reverse('register'), data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'User already registered.')

    def test_password_login(self):
        data = {'email': 'manager@example.com', 'password': self.password}
        response = self.client.post(reverse('login'), data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)
        self.assertEqual(response.data['role'], 'manager')

    def test_password_login_wrong_password(self):
        data = {'email': 'manager@example.com', 'password': 'wrong-password'}
        response = self.client.post(reverse('login'), data, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_pin_login(self):
        response = self.client.post(reverse('pin-login'), {'pin': '1234'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['user_id'], self.waiter.id)
        self.assertEqual(response.data['role'], 'waiter')

    def test_pin_login_invalid(self):
        response = self.client.post(reverse('pin-login'), {'pin': '9999'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['error'], 'Invalid PIN')

    def test_pin_login_not_for_managers(self):
        self.manager.set_pin('5555')
        self.manager.save()
        response = self.client.post(reverse('pin-login'), {'pin': '5555'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_access_token_authenticates(self):
        access = self.client.post(reverse('pin-login'), {'pin': '1234'}, format='json').data['access']
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {access}')
        response = self.client.get(reverse('getme'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['email'], 'waiter@example.com')
        self.assertNotIn('pin', response.data)

    def test_getme_requires_authentication(self):
        response = self.client.get(reverse('getme'))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_logout_blacklists_refresh_token(self):
        refresh = self.client.post(reverse('pin-login'), {'pin': '1234'}, format='json').data['refresh']
        response = self.client.post(reverse('logout'), {'refresh': refresh}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        response = self.client.post(reverse('token_refresh'), {'refresh': refresh}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_logout_requires_token(self):
        response = self.client.post(reverse('logout'), {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_logout_with_garbage_token(self):
        response = self.client.post(reverse('logout'), {'refresh': 'not-a-token'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_change_password(self):
        self.client.force_authenticate(user=self.manager)
        data = {'old_password': self.password, 'new_password': 'Espresso-Macchiato', 'confirm_password': 'Espresso-Macchiato'}
        response = self.client.put(reverse('change-password'), data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.manager.refresh_from_db()
        self.assertTrue(self.manager.check_password('Espresso-Macchiato'))

    def test_change_password_wrong_old(self):
        self.client.force_authenticate(user=self.manager)
        data = {'old_password': 'nope-nope', 'new_password': 'Espresso-Macchiato', 'confirm_password': 'Espresso-Macchiato'}
        response = self.client.put(reverse('change-password'), data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class UserAdminAPITests(APITestCase):

    @classmethod
    def setUpTestData(cls):
        cls.manager = User.objects.create_user(email='manager@example.com', name='Manager', role='manager')
        cls.waiter = User.objects.create_user(email='waiter@example.com', name='Waiter', role='waiter')

    def test_manager_creates_staff_with_pin(self):
        self.client.force_authenticate(user=self.manager)
        data = {'email': 'bar@example.com', 'name': 'Bar', 'role': 'bar', 'pin': '3456'}
        response = self.client.post(reverse('user-list'), data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        user = User.objects.get(email='bar@example.com')
        self.assertTrue(user.check_pin('3456'))
        self.assertFalse(user.has_usable_password())
        self.assertFalse(user.is_staff)

    def test_promoting_to_manager_grants_admin_access(self):
        self.client.force_authenticate(user=self.manager)
        url = reverse('user-detail', kwargs={'pk': self.waiter.pk})
        response = self.client.patch(url, {'role': 'manager'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.waiter.refresh_from_db()
        self.assertTrue(self.waiter.is_staff)

    def test_filter_by_role(self):
        self.client.force_authenticate(user=self.manager)
        response = self.client.get(reverse('user-list'), {'role': 'waiter'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([u['email'] for u in response.data], ['waiter@example.com'])

    def test_non_manager_forbidden(self):
        self.client.force_authenticate(user=self.waiter)
        response = self.client.get(reverse('user-list'))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class WaiterStatsAPITests(APITestCase):

    @classmethod
    def setUpTestData(cls):
        cls.manager = User.objects.create_user(email='manager@example.com', name='Manager', role='manager')
        cls.waiter = User.objects.create_user(email='waiter@example.com', name='Waiter', role='waiter')
        User.objects.create_user(email='idle@example.com', name='Idle', role='waiter')
        soup = MenuItem.objects.create(name='Soup', price=decimal.Decimal('6.00'), category='Food')

        done = place_order([{'menu_item': soup, 'quantity': 2}], waiter=cls.waiter)
        set_item_status(done.order_items.get(), 'ready')
        set_order_status(done, 'served')
        set_order_status(done, 'completed')
        place_order([{'menu_item': soup, 'quantity': 1}], waiter=cls.waiter)

    def test_waiter_stats(self):
        self.client.force_authenticate(user=self.manager)
        response = self.client.get(reverse('user-stats'), {'period': 'alltime'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['user_stats']), 1)
        stats = response.data['user_stats'][0]
        self.assertEqual(stats['name'], 'Waiter')
        self.assertEqual(stats['revenue'], 12.0)
        self.assertEqual(stats['completed_order_count'], 1)
        self.assertEqual(stats['open_order_count'], 1)

    def test_waiter_stats_manager_only(self):
        self.client.force_authenticate(user=self.waiter)
        response = self.client.get(reverse('user-stats'))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
