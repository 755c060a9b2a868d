# core/decorators.py
from functools import wraps

from django.http import JsonResponse

from .exceptions import TenantPermissionError, http_status_for


def require_tenant_context(view_func):
    """Decorator to require a resolved tenant (see TenantMiddleware)."""
    @wraps(view_func)
    def _wrapped_view(request, *args, **kwargs):
        if getattr(request, 'tenant', None) is None:
            error = TenantPermissionError("Permission error: academy not identified.")
            return JsonResponse({
                'success': False,
                'message': error.message,
                'error_code': error.error_code,
            }, status=http_status_for(error.error_code))

        return view_func(request, *args, **kwargs)
    return _wrapped_view
