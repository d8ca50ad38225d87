"""
API errors raised by the stockroom services.

Each maps to one HTTP status and message; the exception handler renders them
as ``{"error": ..., "error_type": ...}``.
"""
from rest_framework import status
from rest_framework.exceptions import APIException, AuthenticationFailed


class ProductNotFound(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Product not found'
    default_code = 'product_not_found'


class InsufficientStock(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Insufficient stock'
    default_code = 'insufficient_stock'


class SaleTotalOverflow(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Total exceeds limit (max 99,999,999.99)'
    default_code = 'total_overflow'


class InvalidQuantity(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid quantity'
    default_code = 'invalid_quantity'


class UserCodeNotSet(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'User code not set'
    default_code = 'user_code_not_set'


class SaleFailed(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Unable to record sale'
    default_code = 'sale_failed'


class MaintenanceMode(APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = 'Maintenance in progress'
    default_code = 'maintenance'


class AccountSuspended(AuthenticationFailed):
    default_detail = 'Account suspended'
    default_code = 'account_suspended'


class AccountExpired(AuthenticationFailed):
    default_detail = 'Account expired'
    default_code = 'account_expired'
