# core/middleware.py
"""
MIDDLEWARE - tenant resolution, security headers, JSON errors, request logging.
Tenant resolution happens here once; services receive ``tenant_id`` explicitly.
"""
import logging
import time

from django.conf import settings
from django.http import JsonResponse

from .exceptions import AcademyManagementException, http_status_for
from .services import TenantService

logger = logging.getLogger(__name__)


# ============ SECURITY HEADERS MIDDLEWARE ============

class SecurityHeadersMiddleware:
    """Adds baseline security headers."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        response = self.get_response(request)

        if response is None:
            return response

        response["X-Content-Type-Options"] = "nosniff"
        response["X-Frame-Options"] = "DENY"
        response["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response


# ============ TENANT RESOLUTION MIDDLEWARE ============

class TenantMiddleware:
    """
    Sets ``request.tenant`` (None when unresolved).

    Tenant-scoped URLs carry a ``tenant_slug`` kwarg; the user must be a
    member of that tenant (super admins may open any active tenant).
    Other URLs fall back to the user's first membership.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.tenant = None
        return self.get_response(request)

    def process_view(self, request, view_func, view_args, view_kwargs):
        user = getattr(request, 'user', None)
        if not user or not user.is_authenticated:
            return None

        slug = view_kwargs.get('tenant_slug')
        tenant = TenantService.resolve_tenant_for_user(user, slug)

        if tenant is None:
            if slug:
                logger.warning(f"User {user.pk} cannot act for tenant '{slug}'")
            return None

        request.tenant = tenant
        return None


# ============ EXCEPTION HANDLING MIDDLEWARE ============

class ExceptionHandlingMiddleware:
    """Turns uncaught exceptions into JSON error responses."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        # Business logic error
        if isinstance(exception, AcademyManagementException):
            logger.warning(f"Business exception on {request.path}: {exception}")
            return JsonResponse({
                'success': False,
                'message': exception.message if exception.user_friendly else "Operation failed.",
                'error_code': exception.error_code,
            }, status=http_status_for(exception.error_code))

        # Let DEBUG show the technical page
        if settings.DEBUG:
            return None

        logger.error(f"System exception on {request.path}: {exception}", exc_info=True)
        return JsonResponse({
            'success': False,
            'message': "System error. Our team has been notified.",
            'error_code': 'SERVER_ERROR',
        }, status=500)


# ============ REQUEST LOGGING MIDDLEWARE ============

class RequestLoggingMiddleware:
    """Logs slow and failed requests; everything else at debug level."""

    SKIP_PATHS = ('/static/', '/media/', '/favicon.ico', '/health/')

    def __init__(self, get_response):
        self.get_response = get_response
        self.slow_threshold = getattr(settings, 'SLOW_REQUEST_THRESHOLD', 1.0)

    def __call__(self, request):
        if request.path.startswith(self.SKIP_PATHS):
            return self.get_response(request)

        started = time.monotonic()
        response = self.get_response(request)
        elapsed = time.monotonic() - started

        extra = {
            'method': request.method,
            'path': request.path,
            'status': response.status_code,
            'ip': self._get_client_ip(request),
            'user': getattr(getattr(request, 'user', None), 'pk', None),
            'tenant': getattr(getattr(request, 'tenant', None), 'slug', None),
            'elapsed': round(elapsed, 3),
        }

        if response.status_code >= 500:
            logger.error(f"{request.method} {request.path} -> {response.status_code}", extra=extra)
        elif elapsed > self.slow_threshold:
            logger.warning(f"Slow request {request.method} {request.path}: {elapsed:.2f}s", extra=extra)
        else:
            logger.debug(f"{request.method} {request.path} -> {response.status_code}", extra=extra)

        return response

    def _get_client_ip(self, request) -> str:
        xff = request.META.get("HTTP_X_FORWARDED_FOR")
        return xff.split(",")[0] if xff else request.META.get("REMOTE_ADDR", "unknown")
