import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Q
from django.utils import timezone
from rest_framework import status, viewsets
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.exceptions import APIException, PermissionDenied
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .exceptions import SaleFailed
from .models import Notification, Order, Product, UserProfile
from .permissions import IsAdmin, IsAdminForWrites, IsShopkeeper, NotUnderMaintenance
from .role_utils import is_admin
from .serializers import (
    AdminPasswordSerializer,
    AppSettingUpdateSerializer,
    NotificationSerializer,
    OrderSerializer,
    ProductSerializer,
    SaleRequestSerializer,
    ShopkeeperNotificationSerializer,
    ShopkeeperSerializer,
)
from .utils.metrics_service import MetricsService
from .utils.sale_service import SaleService
from .utils.settings_service import SettingsService

logger = logging.getLogger(__name__)

User = get_user_model()


class ProductViewSet(viewsets.ModelViewSet):
    """A shopkeeper's own catalog; other shops' products are invisible (404)"""
    serializer_class = ProductSerializer
    permission_classes = [IsShopkeeper, NotUnderMaintenance]
    filterset_fields = ['status']
    search_fields = ['name', 'sku']
    ordering_fields = ['serial_number', 'name', 'price', 'quantity', 'created_at']
    ordering = ['serial_number']

    def get_queryset(self):
        return Product.objects.filter(owner=self.request.user)

    def perform_create(self, serializer):
        serializer.save(owner=self.request.user)

    def update(self, request, *args, **kwargs):
        kwargs['partial'] = True
        return super().update(request, *args, **kwargs)

    def perform_destroy(self, instance):
        logger.info(f"[PRODUCT] {self.request.user.email} deleted {instance.sku}")
        instance.delete()


class OrderViewSet(viewsets.ModelViewSet):
    """
    Orders for admins (all of them) and shopkeepers (their own SALE orders).

    Shopkeepers can neither see nor create PURCHASE orders.
    """
    serializer_class = OrderSerializer
    permission_classes = [IsAuthenticated, NotUnderMaintenance]
    filterset_fields = ['order_type', 'status']
    ordering_fields = ['created_at', 'total']
    ordering = ['-created_at']

    def get_queryset(self):
        queryset = Order.objects.select_related('product', 'created_by')
        if is_admin(self.request.user):
            return queryset
        return queryset.filter(created_by=self.request.user, order_type=Order.TYPE_SALE)

    def _check_order_type(self, order_type):
        if not is_admin(self.request.user) and order_type != Order.TYPE_SALE:
            raise PermissionDenied('Forbidden')

    def perform_create(self, serializer):
        self._check_order_type(serializer.validated_data.get('order_type'))
        with transaction.atomic():
            order = serializer.save(created_by=self.request.user)
        logger.info(f"[ORDER] {self.request.user.email} created {order.order_type} order {order.id}")

    def update(self, request, *args, **kwargs):
        kwargs['partial'] = True
        return super().update(request, *args, **kwargs)

    def perform_update(self, serializer):
        self._check_order_type(serializer.validated_data.get('order_type', serializer.instance.order_type))
        with transaction.atomic():
            serializer.save()

    def perform_destroy(self, instance):
        with transaction.atomic():
            instance.delete()


class SaleView(APIView):
    """Sell units of one product; stock, status and the SALE order move together"""
    permission_classes = [IsShopkeeper, NotUnderMaintenance]

    def post(self, request):
        serializer = SaleRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = SaleService.record_sale(
                request.user,
                serializer.validated_data['product_id'],
                serializer.validated_data['quantity'],
            )
        except APIException:
            raise
        except Exception:
            logger.exception(f"[SALE] Unexpected failure for {request.user.email}")
            raise SaleFailed()

        return Response({'order_id': order.id}, status=status.HTTP_201_CREATED)


class UserViewSet(viewsets.ModelViewSet):
    """Admin management of shopkeeper accounts"""
    serializer_class = ShopkeeperSerializer
    permission_classes = [IsAdmin]
    search_fields = ['email', 'first_name', 'profile__shop_name', 'profile__user_code']

    def get_queryset(self):
        return (
            User.objects.filter(profile__role=UserProfile.ROLE_SHOPKEEPER)
            .select_related('profile')
            .order_by('-date_joined', '-id')
        )

    def perform_create(self, serializer):
        user = serializer.save()
        logger.info(f"[USERS] {self.request.user.email} created shopkeeper {user.email}")

    def update(self, request, *args, **kwargs):
        kwargs['partial'] = True
        return super().update(request, *args, **kwargs)

    def perform_update(self, serializer):
        user = serializer.save()
        logger.info(f"[USERS] {self.request.user.email} updated shopkeeper {user.email} (status={user.profile.shop_status})")

    def perform_destroy(self, instance):
        logger.info(f"[USERS] {self.request.user.email} deleted shopkeeper {instance.email}")
        instance.delete()


class NotificationViewSet(viewsets.ModelViewSet):
    """
    Admins see and send everything. Shopkeepers read what is addressed to
    them plus broadcasts (no target user).
    """
    permission_classes = [IsAdminForWrites]
    http_method_names = ['get', 'post', 'delete', 'head', 'options']

    def get_serializer_class(self):
        if is_admin(self.request.user):
            return NotificationSerializer
        return ShopkeeperNotificationSerializer

    def get_queryset(self):
        queryset = Notification.objects.select_related('created_by', 'user', 'user__profile')
        if is_admin(self.request.user):
            return queryset.order_by('-created_at')
        user_filter = Q(user=self.request.user) | Q(user__isnull=True)
        return queryset.filter(user_filter).order_by('-created_at')

    def perform_create(self, serializer):
        notification = serializer.save(created_by=self.request.user)
        target = notification.user.email if notification.user else 'all shops'
        logger.info(f"[NOTIFICATION] {self.request.user.email} sent {notification.id} to {target}")


class SettingsView(APIView):
    """Platform settings; reads come from the cache"""
    permission_classes = [IsAdmin]

    def get(self, request):
        return Response(SettingsService.get_app_settings())

    def put(self, request):
        serializer = AppSettingUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return Response(SettingsService.update_app_settings(serializer.validated_data['maintenance_mode']))


class AdminPasswordView(APIView):
    permission_classes = [IsAdmin]

    def put(self, request):
        serializer = AdminPasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        request.user.set_password(serializer.validated_data['password'])
        request.user.save(update_fields=['password'])
        logger.info(f"[ADMIN] {request.user.email} changed their password")
        return Response({'detail': 'Password updated'})


@api_view(['GET'])
@permission_classes([IsAdmin])
def admin_stats(request):
    return Response(MetricsService.admin_overview())


@api_view(['GET'])
@permission_classes([IsShopkeeper, NotUnderMaintenance])
def dashboard_view(request):
    return Response(MetricsService.shopkeeper_dashboard(request.user))


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def health_check(request):
    """Health check endpoint for monitoring backend availability"""
    return Response({
        'status': 'healthy',
        'timestamp': timezone.now().isoformat(),
        'service': 'stockroom-backend',
    })
