from django.urls import include, path
from rest_framework.routers import DefaultRouter

from . import views
from .auth_views import BootstrapView, GateView, LoginView, LogoutView, RefreshView, SessionView


# ══════════════════════════════════════════════════════════════════════════════
# API ROUTER
# ══════════════════════════════════════════════════════════════════════════════

router = DefaultRouter()
router.register(r'products', views.ProductViewSet, basename='products')
router.register(r'orders', views.OrderViewSet, basename='orders')
router.register(r'users', views.UserViewSet, basename='users')
router.register(r'notifications', views.NotificationViewSet, basename='notifications')

urlpatterns = [
    # Session
    path('auth/login/', LoginView.as_view(), name='auth-login'),
    path('auth/refresh/', RefreshView.as_view(), name='auth-refresh'),
    path('auth/logout/', LogoutView.as_view(), name='auth-logout'),
    path('auth/session/', SessionView.as_view(), name='auth-session'),
    path('auth/gate/', GateView.as_view(), name='auth-gate'),
    path('bootstrap/', BootstrapView.as_view(), name='bootstrap'),

    # Shop operations
    path('sales/', views.SaleView.as_view(), name='sales'),
    path('dashboard/', views.dashboard_view, name='dashboard'),

    # Administration
    path('settings/', views.SettingsView.as_view(), name='settings'),
    path('admin/password/', views.AdminPasswordView.as_view(), name='admin-password'),
    path('admin/stats/', views.admin_stats, name='admin-stats'),

    path('health/', views.health_check, name='health'),
    path('', include(router.urls)),
]
