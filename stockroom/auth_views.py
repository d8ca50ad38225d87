import logging

from django.conf import settings
from django.contrib.auth import authenticate, get_user_model
from django.contrib.auth.models import update_last_login
from django.db import transaction
from rest_framework import status
from rest_framework.exceptions import AuthenticationFailed, ValidationError
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings as jwt_api_settings
from rest_framework_simplejwt.tokens import RefreshToken

from .authentication import (
    OptionalCookieJWTAuthentication,
    clear_auth_cookies,
    ensure_account_active,
    issue_tokens,
    set_auth_cookies,
)
from .role_utils import AREA_ADMIN, AREA_APP, gate_redirect, get_user_role, home_path_for
from .serializers import BootstrapSerializer, LoginSerializer, SessionUserSerializer
from .utils.settings_service import SettingsService

logger = logging.getLogger(__name__)

User = get_user_model()

INVALID_CREDENTIALS = 'Invalid credentials'


def session_payload(user):
    """Session data as the client layouts consume it"""
    data = SessionUserSerializer(user).data
    data['home'] = home_path_for(user)
    return data


class PublicAuthView(APIView):
    """
    Reachable without a session. Stale cookies are not even parsed, so an
    expired access token can never block a login or refresh.
    """
    authentication_classes = []
    permission_classes = [AllowAny]

    def get_authenticate_header(self, request):
        # Keeps AuthenticationFailed at 401 instead of DRF's 403 fallback
        return 'Bearer realm="api"'


class LoginView(PublicAuthView):
    """Email, password and role login; sets the session cookies"""

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        email = serializer.validated_data['email']
        role = serializer.validated_data['role']

        user = authenticate(request, username=email, password=serializer.validated_data['password'])
        if user is None or get_user_role(user) != role:
            logger.info(f"[LOGIN] Failed login for {email} as {role}")
            raise AuthenticationFailed(INVALID_CREDENTIALS)

        ensure_account_active(user)

        tokens = issue_tokens(user)
        update_last_login(None, user)
        logger.info(f"[LOGIN] {email} signed in as {role}")
        response = Response({'tokens': tokens, 'user': session_payload(user)}, status=status.HTTP_200_OK)
        return set_auth_cookies(response, access=tokens['access'], refresh=tokens['refresh'])


class RefreshView(PublicAuthView):
    """Exchange a refresh token (body or cookie) for a new pair"""

    def post(self, request):
        raw = request.data.get('refresh') or request.COOKIES.get(settings.AUTH_COOKIE_REFRESH)
        if not raw:
            raise AuthenticationFailed('Refresh token required')

        try:
            refresh = RefreshToken(raw)
        except TokenError as e:
            raise AuthenticationFailed(str(e))

        user = User.objects.filter(pk=refresh.get(jwt_api_settings.USER_ID_CLAIM)).first()
        if user is None or not user.is_active:
            raise AuthenticationFailed(INVALID_CREDENTIALS)

        # Account state may have changed since the refresh token was issued
        ensure_account_active(user)

        tokens = issue_tokens(user)
        response = Response(tokens, status=status.HTTP_200_OK)
        return set_auth_cookies(response, access=tokens['access'], refresh=tokens['refresh'])


class LogoutView(PublicAuthView):

    def post(self, request):
        response = Response({'detail': 'Logged out'}, status=status.HTTP_200_OK)
        return clear_auth_cookies(response)


class SessionView(APIView):
    """The live session, re-read from the database on every call"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(session_payload(request.user))


class GateView(APIView):
    """
    Route-layout gate for the two client areas.

    Returns {"redirect": path} when the client must navigate away, or
    {"redirect": null} when the area may render.
    """
    authentication_classes = [OptionalCookieJWTAuthentication]
    permission_classes = [AllowAny]

    def get(self, request):
        area = request.query_params.get('area', AREA_APP)
        if area not in (AREA_APP, AREA_ADMIN):
            raise ValidationError({'area': f"Unknown area '{area}'"})

        maintenance = False
        if area == AREA_APP and request.user.is_authenticated:
            maintenance = SettingsService.is_maintenance_mode()

        return Response({'redirect': gate_redirect(request.user, area, maintenance_mode=maintenance)})


class BootstrapView(PublicAuthView):
    """Create the first administrator; refuses once any user exists"""

    def post(self, request):
        if User.objects.exists():
            raise ValidationError('Bootstrap already completed')

        serializer = BootstrapSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        with transaction.atomic():
            user = User.objects.create_superuser(
                username=data['email'],
                email=data['email'],
                password=data['password'],
                first_name=data.get('name') or '',
            )

        logger.info(f"[BOOTSTRAP] Created first admin {user.email}")
        return Response({'id': user.id, 'email': user.email}, status=status.HTTP_201_CREATED)
