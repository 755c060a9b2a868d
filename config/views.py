# config/views.py
"""
Project-level views: landing redirect, health check and JSON error handlers.
"""
from django.db import connection
from django.db.utils import OperationalError
from django.http import JsonResponse
from django.shortcuts import redirect
from django.utils import timezone

from core.services import TenantService


# ============================================================================
# PUBLIC VIEWS
# ============================================================================

def home_view(request):
    """Authenticated users go to their academy dashboard."""
    if request.user.is_authenticated and not request.GET.get('error'):
        path = TenantService.login_redirect_path(request.user)
        if path:
            return redirect(path)

    return JsonResponse({
        'service': 'academy-management',
        'authenticated': request.user.is_authenticated,
        'error': request.GET.get('error'),
    })


# ============================================================================
# HEALTH & STATUS
# ============================================================================

def health_check_view(request):
    """System health check endpoint."""
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
        db_status = True
    except OperationalError:
        db_status = False

    status_code = 200 if db_status else 503

    return JsonResponse({
        'status': 'healthy' if db_status else 'unhealthy',
        'database': 'connected' if db_status else 'disconnected',
        'timestamp': timezone.now().isoformat(),
    }, status=status_code)


# ============================================================================
# ERROR HANDLERS
# ============================================================================

def _error(status, message):
    return JsonResponse({'success': False, 'message': message, 'error_code': status}, status=status)


def handler404(request, exception):
    return _error(404, 'The resource you are looking for does not exist.')


def handler500(request):
    return _error(500, 'Something went wrong on our end.')


def handler403(request, exception):
    return _error(403, 'You do not have permission to access this resource.')


def handler400(request, exception):
    return _error(400, 'Your request could not be processed.')
