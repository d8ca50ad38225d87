from decimal import Decimal

from rest_framework import status

from stockroom.models import Order
from stockroom.tests.base import StockroomTestCase


class OrderAPITests(StockroomTestCase):

    def setUp(self):
        super().setUp()
        self.admin = self.create_admin()
        self.shopkeeper = self.create_shopkeeper()
        self.other = self.create_shopkeeper(email='other@stockroom.test', user_code='ND')

        self.own_sale = Order.objects.create(order_type=Order.TYPE_SALE, total='15.00', created_by=self.shopkeeper)
        self.own_purchase = Order.objects.create(order_type=Order.TYPE_PURCHASE, total='40.00', created_by=self.shopkeeper)
        self.foreign_sale = Order.objects.create(order_type=Order.TYPE_SALE, total='7.00', created_by=self.other)

    def test_shopkeeper_sees_only_own_sales(self):
        self.client.force_authenticate(user=self.shopkeeper)
        response = self.client.get('/api/orders/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([o['id'] for o in response.data], [self.own_sale.id])

    def test_shopkeeper_gets_404_for_other_orders(self):
        self.client.force_authenticate(user=self.shopkeeper)
        self.assertEqual(self.client.get(f'/api/orders/{self.foreign_sale.id}/').status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(self.client.get(f'/api/orders/{self.own_purchase.id}/').status_code, status.HTTP_404_NOT_FOUND)

    def test_admin_sees_everything(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.get('/api/orders/')
        self.assertEqual(len(response.data), 3)

        response = self.client.get('/api/orders/', {'order_type': 'PURCHASE'})
        self.assertEqual([o['id'] for o in response.data], [self.own_purchase.id])

    def test_shopkeeper_creates_sale_order(self):
        self.client.force_authenticate(user=self.shopkeeper)
        response = self.client.post('/api/orders/', {
            'order_type': 'SALE', 'partner_name': 'Walk-in', 'total': '19.99',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        order = Order.objects.get(pk=response.data['id'])
        self.assertEqual(order.created_by, self.shopkeeper)
        self.assertEqual(order.status, Order.STATUS_DRAFT)
        self.assertEqual(order.total, Decimal('19.99'))

    def test_shopkeeper_cannot_create_purchase(self):
        self.client.force_authenticate(user=self.shopkeeper)
        response = self.client.post('/api/orders/', {'order_type': 'PURCHASE'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_shopkeeper_cannot_change_type_to_purchase(self):
        self.client.force_authenticate(user=self.shopkeeper)
        response = self.client.put(f'/api/orders/{self.own_sale.id}/', {'order_type': 'PURCHASE'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.own_sale.refresh_from_db()
        self.assertEqual(self.own_sale.order_type, Order.TYPE_SALE)

    def test_order_type_required(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post('/api/orders/', {'total': '1.00'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Order type is required')

    def test_negative_total_rejected(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post('/api/orders/', {'order_type': 'PURCHASE', 'total': '-5'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Invalid total')

    def test_update_and_delete(self):
        self.client.force_authenticate(user=self.shopkeeper)
        response = self.client.put(f'/api/orders/{self.own_sale.id}/', {'status': 'CANCELLED'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], Order.STATUS_CANCELLED)

        response = self.client.delete(f'/api/orders/{self.own_sale.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Order.objects.filter(pk=self.own_sale.id).exists())

    def test_admin_can_create_purchase(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post('/api/orders/', {'order_type': 'PURCHASE', 'total': '250.00'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
