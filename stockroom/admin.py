from django import forms
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from django.contrib.auth.models import User
from django.db import transaction
from .exceptions import UserCodeNotSet
from .models import UserProfile, Product, Order, Notification, AppSetting
from .utils.product_service import ProductService


class UserProfileInline(admin.StackedInline):
    model = UserProfile
    can_delete = False
    verbose_name_plural = 'Shop account'
    readonly_fields = ('last_product_serial', 'created_at', 'updated_at')


class CustomUserAdmin(UserAdmin):
    inlines = (UserProfileInline,)
    list_display = ('username', 'email', 'first_name', 'get_role', 'get_shop_status', 'is_active')

    @admin.display(description='Role')
    def get_role(self, obj):
        return getattr(getattr(obj, 'profile', None), 'role', None)

    @admin.display(description='Shop status')
    def get_shop_status(self, obj):
        return getattr(getattr(obj, 'profile', None), 'shop_status', None)

    def get_inline_instances(self, request, obj=None):
        # The profile is created by the post_save signal; only edit it afterwards
        if obj is None:
            return []
        return super().get_inline_instances(request, obj)


# Re-register UserAdmin
admin.site.unregister(User)
admin.site.register(User, CustomUserAdmin)


class ProductAdminForm(forms.ModelForm):

    class Meta:
        model = Product
        fields = '__all__'

    def clean_owner(self):
        owner = self.cleaned_data['owner']
        if self.instance.pk is None and not getattr(getattr(owner, 'profile', None), 'user_code', None):
            raise forms.ValidationError(UserCodeNotSet.default_detail)
        return owner


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    form = ProductAdminForm
    list_display = ('id', 'sku', 'name', 'owner', 'price', 'quantity', 'status', 'created_at')
    search_fields = ('sku', 'name', 'owner__email', 'owner__profile__shop_name')
    list_filter = ('status', 'created_at')
    readonly_fields = ('sku', 'serial_number', 'created_at', 'updated_at')

    def save_model(self, request, obj, form, change):
        if change:
            return super().save_model(request, obj, form, change)
        # Same serial counter as the API so admin-created products never reuse a SKU
        with transaction.atomic():
            obj.serial_number, obj.sku = ProductService.allocate_serial(obj.owner)
            super().save_model(request, obj, form, change)


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ('id', 'order_type', 'status', 'total', 'created_by', 'product', 'quantity', 'created_at')
    search_fields = ('partner_name', 'created_by__email', 'product__sku')
    list_filter = ('order_type', 'status', 'created_at')


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ('id', 'title', 'channel', 'user', 'created_by', 'created_at')
    search_fields = ('title', 'message', 'user__email')
    list_filter = ('channel', 'created_at')


@admin.register(AppSetting)
class AppSettingAdmin(admin.ModelAdmin):
    list_display = ('id', 'maintenance_mode', 'updated_at')
