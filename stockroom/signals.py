# Signals for stockroom app
from django.db.models.signals import post_delete, post_save, pre_save
from django.dispatch import receiver
from .models import AppSetting, UserProfile
from .utils.settings_service import SettingsService
import logging

logger = logging.getLogger(__name__)


@receiver(pre_save, sender=UserProfile)
def track_shop_status_change(sender, instance, **kwargs):
    """Remember the stored shop status so post_save can tell what changed"""
    if instance.pk:
        instance._old_shop_status = (
            UserProfile.objects.filter(pk=instance.pk).values_list('shop_status', flat=True).first()
        )
    else:
        instance._old_shop_status = None


@receiver(post_save, sender=UserProfile)
def log_shop_status_change(sender, instance, created, **kwargs):
    if created:
        return

    old_status = getattr(instance, '_old_shop_status', None)
    if old_status and old_status != instance.shop_status:
        logger.info(
            f"[SHOP_STATUS] {instance.user.email} changed {old_status} -> {instance.shop_status}"
        )


# Settings edited outside SettingsService (Django admin, shell) still drop the cached copy
@receiver(post_save, sender=AppSetting)
@receiver(post_delete, sender=AppSetting)
def invalidate_settings_cache(sender, instance, **kwargs):
    SettingsService.invalidate()
