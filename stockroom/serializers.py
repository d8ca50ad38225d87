from django.contrib.auth import get_user_model
from django.db import transaction
from rest_framework import serializers

from .models import AppSetting, Notification, Order, Product, UserProfile
from .role_utils import normalize_role
from .utils.product_service import ProductService

User = get_user_model()

MIN_ADMIN_PASSWORD_LENGTH = 6


# ══════════════════════════════════════════════════════════════════════════════
# AUTH / SESSION
# ══════════════════════════════════════════════════════════════════════════════

class LoginSerializer(serializers.Serializer):
    email = serializers.CharField()
    password = serializers.CharField(trim_whitespace=False)
    role = serializers.CharField()

    def validate_email(self, value):
        return value.strip().lower()

    def validate_role(self, value):
        role = normalize_role(value)
        if role is None:
            raise serializers.ValidationError('Unknown role')
        return role


class SessionUserSerializer(serializers.ModelSerializer):
    """What the client keeps in its session: identity, role and shop metadata"""
    name = serializers.SerializerMethodField()
    role = serializers.CharField(source='profile.role', read_only=True)
    user_code = serializers.CharField(source='profile.user_code', read_only=True)
    shop_name = serializers.CharField(source='profile.shop_name', read_only=True)
    shop_status = serializers.CharField(source='profile.shop_status', read_only=True)
    shop_expiry = serializers.DateField(source='profile.shop_expiry', read_only=True)
    address = serializers.CharField(source='profile.address', read_only=True)
    phone = serializers.CharField(source='profile.phone', read_only=True)

    class Meta:
        model = User
        fields = [
            'id', 'name', 'email', 'role', 'user_code', 'shop_name',
            'shop_status', 'shop_expiry', 'address', 'phone',
        ]

    def get_name(self, obj):
        return obj.first_name or obj.email


class BootstrapSerializer(serializers.Serializer):
    name = serializers.CharField(required=False, allow_blank=True, max_length=150)
    email = serializers.EmailField(required=False)
    password = serializers.CharField(required=False, trim_whitespace=False)

    def validate(self, attrs):
        if not attrs.get('email') or not attrs.get('password'):
            raise serializers.ValidationError('Email and password required')
        attrs['email'] = attrs['email'].lower()
        return attrs


class AdminPasswordSerializer(serializers.Serializer):
    password = serializers.CharField(
        trim_whitespace=False,
        min_length=MIN_ADMIN_PASSWORD_LENGTH,
        error_messages={
            'required': 'Password too short',
            'blank': 'Password too short',
            'min_length': 'Password too short',
        },
    )


# ══════════════════════════════════════════════════════════════════════════════
# SHOP ACCOUNTS (admin user management)
# ══════════════════════════════════════════════════════════════════════════════

class ShopkeeperSerializer(serializers.Serializer):
    """Shopkeeper account: auth user plus the shop fields of its profile"""
    id = serializers.IntegerField(read_only=True)
    name = serializers.CharField(source='first_name', required=False, allow_blank=True, allow_null=True, max_length=150)
    email = serializers.EmailField(required=False)
    password = serializers.CharField(write_only=True, required=False, trim_whitespace=False)
    role = serializers.CharField(source='profile.role', read_only=True)
    user_code = serializers.CharField(source='profile.user_code', required=False, allow_blank=True, allow_null=True, max_length=20)
    shop_name = serializers.CharField(source='profile.shop_name', required=False, allow_blank=True, allow_null=True, max_length=200)
    shop_status = serializers.ChoiceField(source='profile.shop_status', choices=UserProfile.SHOP_STATUS_CHOICES, required=False)
    shop_expiry = serializers.DateField(source='profile.shop_expiry', required=False, allow_null=True)
    address = serializers.CharField(source='profile.address', required=False, allow_blank=True, allow_null=True)
    phone = serializers.CharField(source='profile.phone', required=False, allow_blank=True, allow_null=True, max_length=30)
    created_at = serializers.DateTimeField(source='date_joined', read_only=True)

    def validate_email(self, value):
        email = value.strip().lower()
        existing = User.objects.filter(username=email)
        if self.instance is not None:
            existing = existing.exclude(pk=self.instance.pk)
        if existing.exists():
            raise serializers.ValidationError('A user with this email already exists')
        return email

    def validate_user_code(self, value):
        code = (value or '').strip()
        if not code:
            return None
        existing = UserProfile.objects.filter(user_code=code)
        if self.instance is not None:
            existing = existing.exclude(user=self.instance)
        if existing.exists():
            raise serializers.ValidationError('User code already in use')
        return code

    def validate(self, attrs):
        if self.instance is None and (not attrs.get('email') or not attrs.get('password')):
            raise serializers.ValidationError('Email and password required')
        return attrs

    @staticmethod
    def _apply_profile(profile, profile_data):
        for field, value in profile_data.items():
            if field in ('address', 'phone') and value is None:
                value = ''
            setattr(profile, field, value)

    def create(self, validated_data):
        profile_data = validated_data.pop('profile', {})
        email = validated_data['email']
        with transaction.atomic():
            user = User.objects.create_user(
                username=email,
                email=email,
                password=validated_data['password'],
                first_name=validated_data.get('first_name') or '',
            )
            profile = user.profile
            profile.role = UserProfile.ROLE_SHOPKEEPER
            self._apply_profile(profile, profile_data)
            profile.save()
        return user

    def update(self, instance, validated_data):
        profile_data = validated_data.pop('profile', {})
        with transaction.atomic():
            if 'first_name' in validated_data:
                instance.first_name = validated_data['first_name'] or ''
            if validated_data.get('email'):
                # Login looks users up by username, so the two move together
                instance.username = instance.email = validated_data['email']
            if validated_data.get('password'):
                instance.set_password(validated_data['password'])
            instance.save()
            profile = instance.profile
            self._apply_profile(profile, profile_data)
            profile.save()
        return instance


# ══════════════════════════════════════════════════════════════════════════════
# CATALOG / ORDERS
# ══════════════════════════════════════════════════════════════════════════════

class ProductSerializer(serializers.ModelSerializer):
    status = serializers.ChoiceField(choices=Product.STATUS_CHOICES, required=False)

    class Meta:
        model = Product
        fields = [
            'id', 'name', 'sku', 'description', 'price', 'quantity',
            'reorder_level', 'status', 'serial_number', 'created_at', 'updated_at',
        ]
        read_only_fields = ('sku', 'serial_number', 'created_at', 'updated_at')

    def create(self, validated_data):
        owner = validated_data.pop('owner')
        return ProductService.create_product(owner, **validated_data)


class OrderSerializer(serializers.ModelSerializer):
    order_type = serializers.ChoiceField(
        choices=Order.TYPE_CHOICES,
        error_messages={'required': 'Order type is required'},
    )
    total = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=0,
        required=False,
        error_messages={
            'invalid': 'Invalid total',
            'min_value': 'Invalid total',
            'max_digits': 'Invalid total',
            'max_whole_digits': 'Invalid total',
        },
    )
    created_by_email = serializers.CharField(source='created_by.email', read_only=True)
    product_sku = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            'id', 'order_type', 'status', 'partner_name', 'total', 'product',
            'product_sku', 'quantity', 'created_by', 'created_by_email',
            'created_at', 'updated_at',
        ]
        read_only_fields = ('product', 'quantity', 'created_by', 'created_at', 'updated_at')

    def get_product_sku(self, obj):
        return obj.product.sku if obj.product else None


class SaleRequestSerializer(serializers.Serializer):
    product_id = serializers.IntegerField(error_messages={
        'required': 'Invalid quantity',
        'null': 'Invalid quantity',
        'invalid': 'Invalid product',
    })
    # Checked by SaleService so every malformed value gets the same message
    quantity = serializers.JSONField(required=False, allow_null=True, default=0)


# ══════════════════════════════════════════════════════════════════════════════
# NOTIFICATIONS / SETTINGS
# ══════════════════════════════════════════════════════════════════════════════

class NotificationAuthorSerializer(serializers.ModelSerializer):
    name = serializers.CharField(source='first_name', read_only=True)

    class Meta:
        model = User
        fields = ['id', 'name', 'email']


class NotificationTargetSerializer(serializers.ModelSerializer):
    name = serializers.CharField(source='first_name', read_only=True)
    shop_name = serializers.CharField(source='profile.shop_name', read_only=True)

    class Meta:
        model = User
        fields = ['id', 'name', 'shop_name', 'email']


class NotificationSerializer(serializers.ModelSerializer):
    """Admin view: every notification with its author and target"""
    message = serializers.CharField(error_messages={
        'required': 'Message required',
        'blank': 'Message required',
        'null': 'Message required',
    })
    title = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=200)
    channel = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=30)
    user = serializers.PrimaryKeyRelatedField(queryset=User.objects.all(), required=False, allow_null=True)
    created_by = NotificationAuthorSerializer(read_only=True)
    target = NotificationTargetSerializer(source='user', read_only=True)

    class Meta:
        model = Notification
        fields = ['id', 'title', 'message', 'channel', 'user', 'target', 'created_by', 'created_at']
        read_only_fields = ('created_at',)

    def validate_title(self, value):
        return value.strip() if value and value.strip() else None

    def validate_channel(self, value):
        return value.strip() if value and value.strip() else Notification.CHANNEL_IN_APP


class ShopkeeperNotificationSerializer(serializers.ModelSerializer):
    """Shopkeeper view: no targeting details"""
    created_by = serializers.SerializerMethodField()

    class Meta:
        model = Notification
        fields = ['id', 'title', 'message', 'channel', 'created_at', 'created_by']
        read_only_fields = fields

    def get_created_by(self, obj):
        return {'name': obj.created_by.first_name or None, 'email': obj.created_by.email}


class AppSettingUpdateSerializer(serializers.ModelSerializer):
    maintenance_mode = serializers.BooleanField(required=False, default=False)

    class Meta:
        model = AppSetting
        fields = ['maintenance_mode']
