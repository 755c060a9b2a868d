# students/views.py
"""
Student JSON views - registration and search.
"""
import logging

from rest_framework.decorators import api_view
from rest_framework.response import Response

# SHARED IMPORTS
from shared.utils import FieldMapper

from core.decorators import require_tenant_context
from core.results import result_status

from .services import StudentService

logger = logging.getLogger(__name__)


@api_view(['POST'])
@require_tenant_context
def register_student_view(request, tenant_slug):
    """Register a student in the current academy."""
    result = StudentService.register_student(request.tenant.pk, FieldMapper.request_payload(request.data))
    return Response(result, status=result_status(result, success_status=201))


@api_view(['GET'])
@require_tenant_context
def search_students_view(request, tenant_slug):
    """?q=<name fragment>&limit=<n>"""
    try:
        limit = int(request.query_params.get('limit') or 0)
    except ValueError:
        limit = 0

    result = StudentService.search_students(
        request.tenant.pk,
        request.query_params.get('q', ''),
        limit or None,
    )
    return Response(result, status=result_status(result))
