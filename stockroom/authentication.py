"""
JWT session authentication backed by HttpOnly cookies.

The access token is read from the Authorization header first and from the
access cookie otherwise. The user row is reloaded on every request, so a
shopkeeper who is suspended or passes their expiry date loses the session on
the next call rather than when the token runs out.
"""
import logging

from django.conf import settings
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken
from rest_framework_simplejwt.tokens import RefreshToken

from .exceptions import AccountExpired, AccountSuspended
from .role_utils import BLOCK_EXPIRED, BLOCK_SUSPENDED, account_block_reason, get_profile

logger = logging.getLogger(__name__)


def ensure_account_active(user):
    """Raise AccountSuspended/AccountExpired for blocked shopkeepers"""
    reason = account_block_reason(user)
    if reason == BLOCK_SUSPENDED:
        logger.info(f"[AUTH] Rejected suspended account {user.email}")
        raise AccountSuspended()
    if reason == BLOCK_EXPIRED:
        logger.info(f"[AUTH] Rejected expired account {user.email}")
        raise AccountExpired()


def issue_tokens(user):
    """Refresh/access pair with the session claims the client renders from"""
    profile = get_profile(user)
    refresh = RefreshToken.for_user(user)
    claims = {
        'role': profile.role if profile else None,
        'user_code': profile.user_code if profile else None,
        'shop_name': profile.shop_name if profile else None,
        'shop_status': profile.shop_status if profile else None,
        'shop_expiry': profile.shop_expiry.isoformat() if profile and profile.shop_expiry else None,
    }
    for key, value in claims.items():
        refresh[key] = value
    access = refresh.access_token
    return {'refresh': str(refresh), 'access': str(access)}


def set_auth_cookies(response, access=None, refresh=None):
    cookie_options = {
        'httponly': True,
        'secure': settings.AUTH_COOKIE_SECURE,
        'samesite': settings.AUTH_COOKIE_SAMESITE,
        'path': '/',
    }
    jwt_settings = settings.SIMPLE_JWT
    if access:
        response.set_cookie(
            settings.AUTH_COOKIE_ACCESS,
            access,
            max_age=int(jwt_settings['ACCESS_TOKEN_LIFETIME'].total_seconds()),
            **cookie_options
        )
    if refresh:
        response.set_cookie(
            settings.AUTH_COOKIE_REFRESH,
            refresh,
            max_age=int(jwt_settings['REFRESH_TOKEN_LIFETIME'].total_seconds()),
            **cookie_options
        )
    return response


def clear_auth_cookies(response):
    response.delete_cookie(settings.AUTH_COOKIE_ACCESS, path='/', samesite=settings.AUTH_COOKIE_SAMESITE)
    response.delete_cookie(settings.AUTH_COOKIE_REFRESH, path='/', samesite=settings.AUTH_COOKIE_SAMESITE)
    return response


class CookieJWTAuthentication(JWTAuthentication):
    """Bearer header or access cookie, re-validated against the account state"""

    def authenticate(self, request):
        header = self.get_header(request)
        if header is not None:
            raw_token = self.get_raw_token(header)
        else:
            raw_token = request.COOKIES.get(settings.AUTH_COOKIE_ACCESS)

        if raw_token is None:
            return None

        if isinstance(raw_token, str):
            raw_token = raw_token.encode('utf-8')

        validated_token = self.get_validated_token(raw_token)
        user = self.get_user(validated_token)
        ensure_account_active(user)
        return user, validated_token


class OptionalCookieJWTAuthentication(CookieJWTAuthentication):
    """
    Same token sources, but a bad token or a blocked account simply means
    no user. Used by the route gate, which answers with a redirect instead
    of a 401.
    """

    def authenticate(self, request):
        try:
            header = self.get_header(request)
            if header is not None:
                raw_token = self.get_raw_token(header)
            else:
                raw_token = request.COOKIES.get(settings.AUTH_COOKIE_ACCESS)
            if raw_token is None:
                return None
            if isinstance(raw_token, str):
                raw_token = raw_token.encode('utf-8')
            validated_token = self.get_validated_token(raw_token)
            return self.get_user(validated_token), validated_token
        except (InvalidToken, AuthenticationFailed):
            return None
