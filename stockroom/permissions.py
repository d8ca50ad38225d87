from rest_framework import permissions

from .exceptions import MaintenanceMode
from .role_utils import is_admin, is_shopkeeper
from .utils.settings_service import SettingsService


class IsAdmin(permissions.BasePermission):
    """Platform administrators only"""
    message = 'Forbidden'

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and is_admin(request.user))


class IsShopkeeper(permissions.BasePermission):
    """Shop accounts only"""
    message = 'Forbidden'

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and is_shopkeeper(request.user))


class IsAdminForWrites(permissions.BasePermission):
    """
    Any authenticated user may read; only admins may create, update or delete.
    """
    message = 'Forbidden'

    def has_permission(self, request, view):
        if not (request.user and request.user.is_authenticated):
            return False
        if request.method in permissions.SAFE_METHODS:
            return True
        return is_admin(request.user)


class NotUnderMaintenance(permissions.BasePermission):
    """
    Shopkeeper traffic is turned away with 503 while maintenance mode is on.
    Admins keep working so they can switch it back off.
    """

    def has_permission(self, request, view):
        if request.user and request.user.is_authenticated and is_shopkeeper(request.user):
            if SettingsService.is_maintenance_mode():
                raise MaintenanceMode()
        return True
