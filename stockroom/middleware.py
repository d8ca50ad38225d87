"""
Request logging for the API.
"""
import logging
import time

logger = logging.getLogger(__name__)


class APILoggingMiddleware:
    """One log line per /api/ request: method, path, user, status and duration"""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if not request.path.startswith('/api/'):
            return self.get_response(request)

        start_time = time.time()

        # Process request (this is where authentication happens)
        response = self.get_response(request)

        # DRF copies the authenticated user onto the Django request
        user = getattr(request, 'user', None)
        username = user.get_username() if user is not None and user.is_authenticated else 'anonymous'

        duration = time.time() - start_time
        message = f"[API] {request.method} {request.path} user={username} -> {response.status_code} ({duration:.3f}s)"

        if response.status_code >= 500:
            logger.error(message)
        elif response.status_code >= 400:
            error = getattr(response, 'data', None)
            logger.warning(f"{message} {error}" if error else message)
        else:
            logger.info(message)

        return response
