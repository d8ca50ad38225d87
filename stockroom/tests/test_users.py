from django.contrib.auth.models import User
from rest_framework import status

from stockroom.models import UserProfile
from stockroom.tests.base import StockroomTestCase


class UserManagementTests(StockroomTestCase):

    def setUp(self):
        super().setUp()
        self.admin = self.create_admin()
        self.client.force_authenticate(user=self.admin)

    def test_create_shopkeeper(self):
        response = self.client.post('/api/users/', {
            'name': 'Aarav Mehta',
            'email': 'Aarav@Nimbus.example',
            'password': 'secret1',
            'user_code': 'ND',
            'shop_name': 'Nimbus Digital Hub',
            'shop_expiry': '2030-01-31',
            'phone': '+1-555-0102',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['email'], 'aarav@nimbus.example')
        self.assertEqual(response.data['role'], UserProfile.ROLE_SHOPKEEPER)
        self.assertEqual(response.data['shop_status'], UserProfile.STATUS_ACTIVE)
        self.assertNotIn('password', response.data)

        user = User.objects.get(username='aarav@nimbus.example')
        self.assertTrue(user.check_password('secret1'))
        self.assertEqual(user.profile.user_code, 'ND')

    def test_email_and_password_required(self):
        response = self.client.post('/api/users/', {'name': 'Nobody'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Email and password required')

    def test_duplicate_email_rejected(self):
        self.create_shopkeeper(email='dup@stockroom.test')
        response = self.client.post('/api/users/', {
            'email': 'DUP@stockroom.test', 'password': 'secret1',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_duplicate_user_code_rejected(self):
        self.create_shopkeeper(user_code='KC')
        response = self.client.post('/api/users/', {
            'email': 'new@stockroom.test', 'password': 'secret1', 'user_code': 'KC',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_list_contains_only_shopkeepers_newest_first(self):
        first = self.create_shopkeeper(email='one@stockroom.test', user_code='ON')
        second = self.create_shopkeeper(email='two@stockroom.test', user_code='TW')

        response = self.client.get('/api/users/')
        self.assertEqual([u['id'] for u in response.data], [second.id, first.id])

    def test_update_status_and_password(self):
        shop = self.create_shopkeeper()
        response = self.client.put(f'/api/users/{shop.id}/', {
            'shop_status': 'SUSPENDED', 'password': 'changed1',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        shop.refresh_from_db()
        self.assertEqual(UserProfile.objects.get(user=shop).shop_status, UserProfile.STATUS_SUSPENDED)
        self.assertTrue(shop.check_password('changed1'))
        self.assertEqual(shop.profile.user_code, 'KC')

    def test_update_email_changes_login(self):
        shop = self.create_shopkeeper()
        response = self.client.put(f'/api/users/{shop.id}/', {'email': 'Moved@Stockroom.test'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['email'], 'moved@stockroom.test')
        shop.refresh_from_db()
        self.assertEqual(shop.email, 'moved@stockroom.test')
        self.assertEqual(shop.username, 'moved@stockroom.test')

    def test_update_email_to_taken_address_rejected(self):
        shop = self.create_shopkeeper()
        self.create_shopkeeper(email='taken@stockroom.test', user_code='TK')
        response = self.client.put(f'/api/users/{shop.id}/', {'email': 'taken@stockroom.test'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'A user with this email already exists')
        shop.refresh_from_db()
        self.assertEqual(shop.email, 'shop@stockroom.test')

    def test_delete(self):
        shop = self.create_shopkeeper()
        response = self.client.delete(f'/api/users/{shop.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(User.objects.filter(pk=shop.id).exists())

    def test_admins_are_not_listed_or_editable(self):
        response = self.client.get(f'/api/users/{self.admin.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_shopkeeper_is_forbidden(self):
        self.client.force_authenticate(user=self.create_shopkeeper())
        self.assertEqual(self.client.get('/api/users/').status_code, status.HTTP_403_FORBIDDEN)
