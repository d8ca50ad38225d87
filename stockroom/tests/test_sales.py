from decimal import Decimal
from unittest import mock

from rest_framework import status

from stockroom.models import Order, Product
from stockroom.tests.base import StockroomTestCase
from stockroom.utils.sale_service import SaleService


class SaleAPITests(StockroomTestCase):

    def setUp(self):
        super().setUp()
        self.shopkeeper = self.create_shopkeeper()
        self.product = self.create_product(self.shopkeeper, price='12.50', quantity=5)
        self.client.force_authenticate(user=self.shopkeeper)

    def _sell(self, quantity, product_id=None):
        return self.client.post(
            '/api/sales/',
            {'product_id': product_id or self.product.id, 'quantity': quantity},
            format='json',
        )

    def test_sale_decrements_stock_and_records_order(self):
        response = self._sell(2)

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        order = Order.objects.get(pk=response.data['order_id'])
        self.assertEqual(order.order_type, Order.TYPE_SALE)
        self.assertEqual(order.status, Order.STATUS_COMPLETED)
        self.assertEqual(order.total, Decimal('25.00'))
        self.assertEqual(order.product_id, self.product.id)
        self.assertEqual(order.quantity, 2)
        self.assertEqual(order.created_by, self.shopkeeper)

        self.product.refresh_from_db()
        self.assertEqual(self.product.quantity, 3)
        self.assertEqual(self.product.status, Product.STATUS_ACTIVE)

    def test_selling_exact_stock_marks_sold(self):
        response = self._sell(5)

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.product.refresh_from_db()
        self.assertEqual(self.product.quantity, 0)
        self.assertEqual(self.product.status, Product.STATUS_SOLD)

    def test_insufficient_stock_changes_nothing(self):
        response = self._sell(6)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Insufficient stock')
        self.product.refresh_from_db()
        self.assertEqual(self.product.quantity, 5)
        self.assertFalse(Order.objects.exists())

    def test_total_overflow_rolls_back(self):
        product = self.create_product(self.shopkeeper, price='99999999.00', quantity=10)
        response = self._sell(2, product_id=product.id)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Total exceeds limit (max 99,999,999.99)')
        product.refresh_from_db()
        self.assertEqual(product.quantity, 10)
        self.assertEqual(product.status, Product.STATUS_ACTIVE)
        self.assertFalse(Order.objects.exists())

    def test_foreign_product_not_found(self):
        other = self.create_shopkeeper(email='other@stockroom.test', user_code='ND')
        foreign = self.create_product(other, quantity=5)

        response = self._sell(1, product_id=foreign.id)
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'Product not found')
        foreign.refresh_from_db()
        self.assertEqual(foreign.quantity, 5)

    def test_invalid_quantities(self):
        for quantity in (0, -1, 1.5, 'abc', None, True):
            response = self._sell(quantity)
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, quantity)
            self.assertEqual(response.data['error'], 'Invalid quantity')

        self.product.refresh_from_db()
        self.assertEqual(self.product.quantity, 5)

    def test_missing_product_id(self):
        response = self.client.post('/api/sales/', {'quantity': 1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Invalid quantity')
        self.assertIn('product_id', response.data['errors'])

    def test_non_integer_product_id(self):
        response = self.client.post('/api/sales/', {'product_id': 'abc', 'quantity': 1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Invalid product')

    def test_unexpected_failure_is_reported_generically(self):
        with mock.patch.object(SaleService, 'record_sale', side_effect=RuntimeError('boom')):
            response = self._sell(1)
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data['error'], 'Unable to record sale')

    def test_admin_cannot_sell(self):
        self.client.force_authenticate(user=self.create_admin())
        self.assertEqual(self._sell(1).status_code, status.HTTP_403_FORBIDDEN)


class SaleServiceTests(StockroomTestCase):

    def test_validate_quantity_accepts_integral_values(self):
        self.assertEqual(SaleService.validate_quantity(3), 3)
        self.assertEqual(SaleService.validate_quantity('4'), 4)
        self.assertEqual(SaleService.validate_quantity(2.0), 2)
