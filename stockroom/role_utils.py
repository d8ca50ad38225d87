"""
Role normalization and account-state helpers.

Roles are stored upper-case ('ADMIN', 'SHOPKEEPER') but clients send them in
whatever form their login screen uses ('admin', 'shopkeeper', 'shop_owner',
...). Every comparison goes through ``normalize_role`` first.
"""

from .models import UserProfile

ROLE_ADMIN = UserProfile.ROLE_ADMIN
ROLE_SHOPKEEPER = UserProfile.ROLE_SHOPKEEPER

ROLE_MAPPING = {
    'admin': ROLE_ADMIN,
    'administrator': ROLE_ADMIN,
    'shopkeeper': ROLE_SHOPKEEPER,
    'shop': ROLE_SHOPKEEPER,
    'shopowner': ROLE_SHOPKEEPER,
}

# Client routes used by the layout gate
LOGIN_PATH = '/login'
ADMIN_LOGIN_PATH = '/admin/login'
SHOPKEEPER_HOME_PATH = '/dashboard'
ADMIN_HOME_PATH = '/admin/dashboard'
MAINTENANCE_PATH = '/maintenance'

AREA_APP = 'app'
AREA_ADMIN = 'admin'

BLOCK_SUSPENDED = 'suspended'
BLOCK_EXPIRED = 'expired'


def normalize_role(role):
    """
    Normalize a role string to its canonical form.

    'admin' -> 'ADMIN', 'shop_owner' -> 'SHOPKEEPER'. Returns None for
    empty or unknown roles.
    """
    if not role:
        return None
    key = str(role).lower().replace('_', '').replace(' ', '').replace('-', '')
    return ROLE_MAPPING.get(key)


def get_profile(user):
    if user is None or not getattr(user, 'is_authenticated', False):
        return None
    try:
        return user.profile
    except UserProfile.DoesNotExist:
        return None


def get_user_role(user):
    """Canonical role for a user, or None"""
    profile = get_profile(user)
    if profile is None:
        return None
    return profile.role


def is_admin(user):
    return get_user_role(user) == ROLE_ADMIN


def is_shopkeeper(user):
    return get_user_role(user) == ROLE_SHOPKEEPER


def account_block_reason(user):
    """
    Why a user may not hold a session, or None when they may.

    Only shopkeepers can be blocked; admins have no shop account.
    """
    profile = get_profile(user)
    if profile is None or not profile.is_shopkeeper:
        return None
    if profile.is_suspended:
        return BLOCK_SUSPENDED
    if profile.is_expired:
        return BLOCK_EXPIRED
    return None


def home_path_for(user):
    if is_admin(user):
        return ADMIN_HOME_PATH
    return SHOPKEEPER_HOME_PATH


def gate_redirect(user, area, maintenance_mode=False):
    """
    Where a client route in ``area`` must send this user, or None to render.

    Mirrors the two route layouts: the shopkeeper app and the admin console.
    """
    authenticated = get_profile(user) is not None

    if area == AREA_ADMIN:
        if not authenticated:
            return ADMIN_LOGIN_PATH
        if not is_admin(user):
            return SHOPKEEPER_HOME_PATH
        return None

    if not authenticated:
        return LOGIN_PATH
    if is_admin(user):
        return ADMIN_HOME_PATH
    if account_block_reason(user):
        return LOGIN_PATH
    if maintenance_mode:
        return MAINTENANCE_PATH
    return None
