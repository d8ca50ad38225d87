"""
SaleService records a sale of N units of one product.

The stock decrement, the SOLD transition and the SALE order are written in
one transaction; any failure leaves the product untouched.
"""
import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import F

from ..exceptions import InsufficientStock, InvalidQuantity, ProductNotFound, SaleTotalOverflow
from ..models import Order, Product

logger = logging.getLogger(__name__)

# Order.total is DECIMAL(10, 2)
SALE_TOTAL_CEILING = Decimal('100000000')


class SaleService:
    """Service class for the sale transaction"""

    @staticmethod
    def validate_quantity(quantity):
        """Coerce a requested quantity to a positive int or raise InvalidQuantity"""
        if isinstance(quantity, bool):
            raise InvalidQuantity()
        try:
            value = Decimal(str(quantity))
        except (ArithmeticError, ValueError, TypeError):
            raise InvalidQuantity()
        if not value.is_finite() or value <= 0 or value != value.to_integral_value():
            raise InvalidQuantity()
        return int(value)

    @staticmethod
    def record_sale(seller, product_id, quantity):
        """
        Sell ``quantity`` units of the seller's product.

        Returns the completed SALE order. Raises ProductNotFound,
        InsufficientStock or SaleTotalOverflow; each rolls back everything.
        """
        quantity = SaleService.validate_quantity(quantity)

        with transaction.atomic():
            product = Product.objects.filter(id=product_id, owner=seller).first()
            if product is None:
                raise ProductNotFound()

            # Guarded decrement: matches no row when stock is short
            updated = Product.objects.filter(
                id=product.id,
                owner=seller,
                quantity__gte=quantity,
            ).update(quantity=F('quantity') - quantity)
            if updated == 0:
                raise InsufficientStock()

            product.refresh_from_db(fields=['quantity', 'status'])
            if product.quantity == 0 and product.status != Product.STATUS_SOLD:
                Product.objects.filter(id=product.id).update(status=Product.STATUS_SOLD)
                product.status = Product.STATUS_SOLD

            line_total = product.price * quantity
            if not line_total.is_finite() or abs(line_total) >= SALE_TOTAL_CEILING:
                raise SaleTotalOverflow()

            order = Order.objects.create(
                order_type=Order.TYPE_SALE,
                status=Order.STATUS_COMPLETED,
                total=line_total,
                created_by=seller,
                product=product,
                quantity=quantity,
            )

        logger.info(
            f"[SALE] {seller.email} sold {quantity} x {product.sku} "
            f"for {line_total} (order {order.id}, remaining {product.quantity})"
        )
        return order
