"""
Cached access to the AppSetting singleton.

The row is read at most once per APP_SETTINGS_CACHE_TIMEOUT seconds per cache
backend; writes go through ``update_app_settings`` which drops the cached copy.
"""
import logging

from django.conf import settings
from django.core.cache import cache

from ..models import AppSetting

logger = logging.getLogger(__name__)

CACHE_KEY = 'stockroom:app_settings'


class SettingsService:
    """Read and write platform settings through the cache"""

    @staticmethod
    def _serialize(setting):
        return {
            'id': setting.id,
            'maintenance_mode': setting.maintenance_mode,
            'updated_at': setting.updated_at.isoformat() if setting.updated_at else None,
            'app_name': settings.APP_NAME,
            'app_description': settings.APP_DESCRIPTION,
        }

    @staticmethod
    def get_setting_row():
        """The singleton row, created on first use"""
        setting = AppSetting.objects.order_by('id').first()
        if setting is None:
            setting = AppSetting.objects.create()
            logger.info(f"[SETTINGS] Created AppSetting row {setting.id}")
        return setting

    @classmethod
    def get_app_settings(cls):
        cached = cache.get(CACHE_KEY)
        if cached is not None:
            return cached
        value = cls._serialize(cls.get_setting_row())
        cache.set(CACHE_KEY, value, timeout=settings.APP_SETTINGS_CACHE_TIMEOUT)
        return value

    @classmethod
    def update_app_settings(cls, maintenance_mode):
        setting = cls.get_setting_row()
        setting.maintenance_mode = bool(maintenance_mode)
        setting.save()
        cls.invalidate()
        logger.info(f"[SETTINGS] Maintenance mode set to {setting.maintenance_mode}")
        return cls._serialize(setting)

    @staticmethod
    def invalidate():
        cache.delete(CACHE_KEY)

    @classmethod
    def is_maintenance_mode(cls):
        return bool(cls.get_app_settings().get('maintenance_mode'))
