"""
ProductService allocates serial numbers and SKUs for new products.
"""
import logging

from django.db import transaction

from ..exceptions import UserCodeNotSet
from ..models import Product, UserProfile

logger = logging.getLogger(__name__)

SERIAL_PAD_WIDTH = 2


def format_sku(user_code, serial_number):
    """Shop prefix followed by the serial, zero-padded to two digits (KC01, KC120)"""
    return f"{user_code}{str(serial_number).zfill(SERIAL_PAD_WIDTH)}"


class ProductService:
    """Service class for product creation with per-owner SKU allocation"""

    @staticmethod
    def allocate_serial(owner):
        """
        Reserve the next serial number for ``owner``.

        Must run inside a transaction: the profile row stays locked until
        commit, so concurrent creates for the same owner queue up. The
        counter lives on the profile, which keeps serials unique even after
        the newest product is deleted.

        Returns (serial_number, sku).
        """
        profile = UserProfile.objects.select_for_update().get(user=owner)
        if not profile.user_code:
            raise UserCodeNotSet()

        profile.last_product_serial += 1
        profile.save(update_fields=['last_product_serial', 'updated_at'])
        serial_number = profile.last_product_serial
        return serial_number, format_sku(profile.user_code, serial_number)

    @staticmethod
    def create_product(owner, **data):
        with transaction.atomic():
            serial_number, sku = ProductService.allocate_serial(owner)
            quantity = data.pop('quantity', 0) or 0
            status = data.pop('status', None)
            product = Product.objects.create(
                owner=owner,
                serial_number=serial_number,
                sku=sku,
                quantity=quantity,
                status=Product.derive_status(quantity, status),
                **data
            )
        logger.info(f"[PRODUCT] {owner.email} created {product.sku} (qty={product.quantity})")
        return product
