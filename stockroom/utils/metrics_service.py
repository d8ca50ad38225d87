"""
Aggregates behind the admin overview and the shopkeeper dashboard.
"""
from datetime import timedelta
from decimal import Decimal

from django.db.models import Count, Sum
from django.utils import timezone

from ..models import Order, Product, UserProfile


def _start_of_today():
    now = timezone.localtime()
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def _completed_sales():
    return Order.objects.filter(order_type=Order.TYPE_SALE, status=Order.STATUS_COMPLETED)


def _sum_total(queryset):
    return queryset.aggregate(total=Sum('total'))['total'] or Decimal('0')


class MetricsService:

    @staticmethod
    def admin_overview():
        """Platform-wide shop account and sales figures"""
        now = timezone.localtime()
        today = now.date()
        month_start = _start_of_today().replace(day=1)
        expiry_window_end = today + timedelta(days=7)

        shopkeepers = UserProfile.objects.filter(role=UserProfile.ROLE_SHOPKEEPER)
        suspended = shopkeepers.filter(shop_status=UserProfile.STATUS_SUSPENDED)

        inactive_shop_list = [
            {
                'id': profile.user_id,
                'shop_name': profile.shop_name,
                'name': profile.user.first_name or None,
                'phone': profile.phone or None,
            }
            for profile in suspended.select_related('user').order_by('-updated_at')[:5]
        ]

        return {
            'total_shopkeepers': shopkeepers.count(),
            'new_this_month': shopkeepers.filter(user__date_joined__gte=month_start).count(),
            'active_shops': shopkeepers.filter(shop_status=UserProfile.STATUS_ACTIVE).count(),
            'inactive_shops': suspended.count(),
            'today_sales': _sum_total(_completed_sales().filter(created_at__gte=_start_of_today())),
            'expiring_soon_shops': shopkeepers.filter(
                shop_expiry__gt=today,
                shop_expiry__lte=expiry_window_end,
            ).count(),
            'inactive_shop_list': inactive_shop_list,
        }

    @staticmethod
    def shopkeeper_dashboard(user):
        """Sales and stock totals for one shop"""
        own_sales = _completed_sales().filter(created_by=user)
        month_ago = timezone.now() - timedelta(days=30)
        totals = Product.objects.filter(owner=user).aggregate(
            count=Count('id'),
            quantity=Sum('quantity'),
        )

        return {
            'sales_today': _sum_total(own_sales.filter(created_at__gte=_start_of_today())),
            'sales_month': _sum_total(own_sales.filter(created_at__gte=month_ago)),
            'total_products': totals['count'] or 0,
            'total_quantity': totals['quantity'] or 0,
        }
