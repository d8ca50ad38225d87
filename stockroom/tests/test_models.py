from datetime import timedelta

from django.contrib.auth.models import User
from django.test import TestCase
from django.utils import timezone

from stockroom.models import Product, UserProfile
from stockroom.role_utils import (
    ADMIN_HOME_PATH,
    ADMIN_LOGIN_PATH,
    BLOCK_EXPIRED,
    BLOCK_SUSPENDED,
    LOGIN_PATH,
    MAINTENANCE_PATH,
    SHOPKEEPER_HOME_PATH,
    account_block_reason,
    gate_redirect,
    normalize_role,
)
from stockroom.utils.product_service import format_sku


class UserProfileTests(TestCase):

    def test_profile_created_with_shopkeeper_role(self):
        user = User.objects.create_user(username='a@b.test', email='a@b.test', password='x')
        self.assertEqual(user.profile.role, UserProfile.ROLE_SHOPKEEPER)
        self.assertEqual(user.profile.shop_status, UserProfile.STATUS_ACTIVE)
        self.assertEqual(user.profile.last_product_serial, 0)

    def test_staff_users_become_admins(self):
        user = User.objects.create_superuser(username='root@b.test', email='root@b.test', password='x')
        self.assertEqual(user.profile.role, UserProfile.ROLE_ADMIN)

    def test_expiry_day_counts_as_expired(self):
        user = User.objects.create_user(username='c@b.test', email='c@b.test', password='x')
        user.profile.shop_expiry = timezone.localdate()
        self.assertTrue(user.profile.is_expired)
        user.profile.shop_expiry = timezone.localdate() + timedelta(days=1)
        self.assertFalse(user.profile.is_expired)

    def test_block_reason_prefers_suspension(self):
        user = User.objects.create_user(username='d@b.test', email='d@b.test', password='x')
        profile = user.profile
        profile.shop_status = UserProfile.STATUS_SUSPENDED
        profile.shop_expiry = timezone.localdate() - timedelta(days=3)
        profile.save()
        self.assertEqual(account_block_reason(user), BLOCK_SUSPENDED)

        profile.shop_status = UserProfile.STATUS_ACTIVE
        profile.save()
        self.assertEqual(account_block_reason(user), BLOCK_EXPIRED)

    def test_admins_are_never_blocked(self):
        user = User.objects.create_superuser(username='e@b.test', email='e@b.test', password='x')
        user.profile.shop_status = UserProfile.STATUS_SUSPENDED
        user.profile.save()
        self.assertIsNone(account_block_reason(user))


class ProductStatusTests(TestCase):

    def test_derive_status(self):
        self.assertEqual(Product.derive_status(0, Product.STATUS_ACTIVE), Product.STATUS_SOLD)
        self.assertEqual(Product.derive_status(0, Product.STATUS_INACTIVE), Product.STATUS_SOLD)
        self.assertEqual(Product.derive_status(3, Product.STATUS_SOLD), Product.STATUS_ACTIVE)
        self.assertEqual(Product.derive_status(3, None), Product.STATUS_ACTIVE)
        self.assertEqual(Product.derive_status(3, Product.STATUS_INACTIVE), Product.STATUS_INACTIVE)

    def test_save_applies_sold_status(self):
        owner = User.objects.create_user(username='f@b.test', email='f@b.test', password='x')
        product = Product.objects.create(
            owner=owner, name='Cable', sku='KC01', serial_number=1, price='2.50', quantity=0,
        )
        self.assertEqual(product.status, Product.STATUS_SOLD)

    def test_format_sku_pads_to_two_digits(self):
        self.assertEqual(format_sku('KC', 1), 'KC01')
        self.assertEqual(format_sku('KC', 42), 'KC42')
        self.assertEqual(format_sku('KC', 120), 'KC120')


class RoleUtilsTests(TestCase):

    def test_normalize_role(self):
        self.assertEqual(normalize_role('admin'), 'ADMIN')
        self.assertEqual(normalize_role('SHOPKEEPER'), 'SHOPKEEPER')
        self.assertEqual(normalize_role('shop_owner'), 'SHOPKEEPER')
        self.assertIsNone(normalize_role('farmer'))
        self.assertIsNone(normalize_role(''))

    def test_gate_redirects(self):
        from django.contrib.auth.models import AnonymousUser

        anonymous = AnonymousUser()
        admin = User.objects.create_superuser(username='g@b.test', email='g@b.test', password='x')
        shop = User.objects.create_user(username='h@b.test', email='h@b.test', password='x')

        self.assertEqual(gate_redirect(anonymous, 'app'), LOGIN_PATH)
        self.assertEqual(gate_redirect(anonymous, 'admin'), ADMIN_LOGIN_PATH)
        self.assertEqual(gate_redirect(admin, 'app'), ADMIN_HOME_PATH)
        self.assertIsNone(gate_redirect(admin, 'admin'))
        self.assertEqual(gate_redirect(shop, 'admin'), SHOPKEEPER_HOME_PATH)
        self.assertIsNone(gate_redirect(shop, 'app'))
        self.assertEqual(gate_redirect(shop, 'app', maintenance_mode=True), MAINTENANCE_PATH)

        shop.profile.shop_status = UserProfile.STATUS_SUSPENDED
        shop.profile.save()
        self.assertEqual(gate_redirect(shop, 'app', maintenance_mode=True), LOGIN_PATH)
