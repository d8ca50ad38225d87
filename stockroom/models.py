from django.db import models
from django.contrib.auth.models import User
from django.core.validators import MinValueValidator
from django.utils import timezone
from django.db.models.signals import post_save
from django.dispatch import receiver


class UserProfile(models.Model):
    """Role and shop account attributes attached to every auth user"""
    ROLE_ADMIN = 'ADMIN'
    ROLE_SHOPKEEPER = 'SHOPKEEPER'
    ROLE_CHOICES = [
        (ROLE_ADMIN, 'Administrator'),
        (ROLE_SHOPKEEPER, 'Shopkeeper'),
    ]

    STATUS_ACTIVE = 'ACTIVE'
    STATUS_SUSPENDED = 'SUSPENDED'
    SHOP_STATUS_CHOICES = [
        (STATUS_ACTIVE, 'Active'),
        (STATUS_SUSPENDED, 'Suspended'),
    ]

    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='profile')
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_SHOPKEEPER)

    # Shop account fields (shopkeepers only)
    user_code = models.CharField(max_length=20, unique=True, null=True, blank=True, help_text="Prefix used for every SKU of this shop")
    shop_name = models.CharField(max_length=200, null=True, blank=True)
    shop_status = models.CharField(max_length=20, choices=SHOP_STATUS_CHOICES, default=STATUS_ACTIVE)
    shop_expiry = models.DateField(null=True, blank=True)
    address = models.TextField(blank=True, default='')
    phone = models.CharField(max_length=30, blank=True, default='')

    # High-water mark of product serials; never decreases
    last_product_serial = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.user.email or self.user.username} - {self.role}"

    @property
    def is_admin(self):
        return self.role == self.ROLE_ADMIN

    @property
    def is_shopkeeper(self):
        return self.role == self.ROLE_SHOPKEEPER

    @property
    def is_suspended(self):
        return self.shop_status == self.STATUS_SUSPENDED

    @property
    def is_expired(self):
        return self.shop_expiry is not None and self.shop_expiry <= timezone.localdate()


@receiver(post_save, sender=User)
def create_user_profile(sender, instance, created, **kwargs):
    """Create UserProfile when a new User is created"""
    if created:
        # Superusers created via createsuperuser land in the admin role
        role = UserProfile.ROLE_ADMIN if (instance.is_staff or instance.is_superuser) else UserProfile.ROLE_SHOPKEEPER
        UserProfile.objects.create(user=instance, role=role)


class Product(models.Model):
    STATUS_ACTIVE = 'ACTIVE'
    STATUS_INACTIVE = 'INACTIVE'
    STATUS_SOLD = 'SOLD'
    STATUS_CHOICES = [
        (STATUS_ACTIVE, 'Active'),
        (STATUS_INACTIVE, 'Inactive'),
        (STATUS_SOLD, 'Sold'),
    ]

    owner = models.ForeignKey(User, on_delete=models.CASCADE, related_name='products')
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True, null=True)
    sku = models.CharField(max_length=50)
    serial_number = models.PositiveIntegerField()
    price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    quantity = models.PositiveIntegerField(default=0)
    reorder_level = models.PositiveIntegerField(default=0)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_ACTIVE)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['serial_number']
        constraints = [
            models.UniqueConstraint(fields=['owner', 'serial_number'], name='unique_product_serial_per_owner'),
            models.UniqueConstraint(fields=['owner', 'sku'], name='unique_product_sku_per_owner'),
        ]

    def __str__(self):
        return f"{self.name} ({self.sku})"

    @staticmethod
    def derive_status(quantity, requested_status):
        """Status implied by a quantity: empty stock is always SOLD"""
        if quantity == 0:
            return Product.STATUS_SOLD
        if requested_status == Product.STATUS_SOLD or not requested_status:
            return Product.STATUS_ACTIVE
        return requested_status

    def save(self, *args, **kwargs):
        self.status = self.derive_status(self.quantity, self.status)
        super().save(*args, **kwargs)


class Order(models.Model):
    TYPE_PURCHASE = 'PURCHASE'
    TYPE_SALE = 'SALE'
    TYPE_CHOICES = [
        (TYPE_PURCHASE, 'Purchase'),
        (TYPE_SALE, 'Sale'),
    ]

    STATUS_DRAFT = 'DRAFT'
    STATUS_COMPLETED = 'COMPLETED'
    STATUS_CANCELLED = 'CANCELLED'
    STATUS_CHOICES = [
        (STATUS_DRAFT, 'Draft'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_CANCELLED, 'Cancelled'),
    ]

    order_type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_DRAFT)
    partner_name = models.CharField(max_length=200, blank=True, null=True)
    total = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)], default=0)
    created_by = models.ForeignKey(User, on_delete=models.CASCADE, related_name='orders')

    # Filled in for orders recorded by the sale transaction
    product = models.ForeignKey(Product, on_delete=models.SET_NULL, null=True, blank=True, related_name='orders')
    quantity = models.PositiveIntegerField(null=True, blank=True)

    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['created_by', 'order_type', 'status'], name='order_owner_type_status_idx'),
            models.Index(fields=['order_type', 'status', 'created_at'], name='order_type_status_created_idx'),
        ]

    def __str__(self):
        return f"Order {self.id} - {self.order_type} - {self.status} - {self.total}"


class Notification(models.Model):
    """Admin-authored message for one shopkeeper, or for all when user is empty"""
    CHANNEL_IN_APP = 'IN_APP'

    title = models.CharField(max_length=200, blank=True, null=True)
    message = models.TextField()
    channel = models.CharField(max_length=30, default=CHANNEL_IN_APP)
    user = models.ForeignKey(User, on_delete=models.CASCADE, null=True, blank=True, related_name='notifications')
    created_by = models.ForeignKey(User, on_delete=models.CASCADE, related_name='sent_notifications')
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', '-created_at'], name='notification_user_created_idx'),
        ]

    def __str__(self):
        target = self.user.email if self.user else 'everyone'
        return f"{self.title or 'Notification'} for {target}"


class AppSetting(models.Model):
    """Singleton row holding platform-wide switches"""
    maintenance_mode = models.BooleanField(default=False)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"AppSetting (maintenance={'on' if self.maintenance_mode else 'off'})"
