# billing/views.py
"""
Billing JSON views - dashboard, audit list and payment actions.
Views only translate HTTP to service calls; see billing.services.
"""
import logging

from rest_framework.decorators import api_view
from rest_framework.response import Response

# SHARED IMPORTS
from shared.utils import FieldMapper

from core.decorators import require_tenant_context
from core.exceptions import AcademyManagementException, ValidationError
from core.results import action_failure, result_status

from .services import DashboardService, PaymentLifecycleService

logger = logging.getLogger(__name__)


# ============ HELPER FUNCTIONS ============

def _optional_id(value, field):
    """Parse an id that may be absent (None / "" / "null")."""
    if value in (None, '', 'null'):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {field}.", user_friendly=True)


def _required_id(value, field):
    parsed = _optional_id(value, field)
    if parsed is None:
        raise ValidationError(f"{field} is required.", user_friendly=True)
    return parsed


def _status_filter(request):
    statuses = []
    for raw in request.query_params.getlist('status'):
        statuses.extend(s.strip() for s in raw.split(',') if s.strip())
    return statuses or None


def _respond(result, success_status=200):
    return Response(result, status=result_status(result, success_status))


# ============ DASHBOARD ============

@api_view(['GET'])
@require_tenant_context
def dashboard_view(request, tenant_slug):
    """Stats and segmentation of the current academy."""
    tenant_id = request.tenant.pk
    use_cache = request.query_params.get('refresh') not in ('1', 'true')

    return Response({
        'success': True,
        'tenant': {'id': tenant_id, 'name': request.tenant.name, 'slug': request.tenant.slug},
        'stats': DashboardService.get_dashboard_stats(tenant_id, use_cache=use_cache),
        'segmentation': DashboardService.get_segmentation_data(tenant_id, use_cache=use_cache),
    })


@api_view(['GET'])
@require_tenant_context
def audit_list_view(request, tenant_slug):
    """Current-cycle audit rows, optionally filtered with ?status=overdue,pending-review."""
    try:
        rows = DashboardService.list_audit_rows(request.tenant.pk, _status_filter(request))
    except AcademyManagementException as e:
        logger.warning(f"Audit list failed for {tenant_slug}: {e}")
        return _respond(action_failure(e))

    return Response({
        'success': True,
        'count': len(rows),
        'rows': [row.to_dict() for row in rows],
    })


# ============ PAYMENT ACTIONS ============

@api_view(['POST'])
@require_tenant_context
def approve_payment_view(request, tenant_slug):
    """
    Approve a payment. ``payment_id`` null means "no payment submitted":
    an approved payment is created for the student.
    """
    data = request.data
    try:
        payment_id = _optional_id(data.get('payment_id'), 'payment_id')
        student_id = _required_id(data.get('student_id'), 'student_id')
    except ValidationError as e:
        return _respond(action_failure(e))

    result = PaymentLifecycleService.approve_payment(
        request.tenant.pk,
        payment_id,
        student_id,
        data.get('amount'),
    )
    return _respond(result)


@api_view(['POST'])
@require_tenant_context
def manual_payment_view(request, tenant_slug):
    """Record a payment received outside the submission flow."""
    data = FieldMapper.map_form_to_model(FieldMapper.request_payload(request.data), 'manual_payment')
    try:
        student_id = _required_id(data.get('student_id'), 'student_id')
    except ValidationError as e:
        return _respond(action_failure(e))

    result = PaymentLifecycleService.register_manual_payment(
        request.tenant.pk,
        student_id,
        data.get('amount'),
        data.get('modality'),
    )
    return _respond(result, success_status=201)


@api_view(['POST'])
@require_tenant_context
def reject_payment_view(request, tenant_slug, payment_id):
    result = PaymentLifecycleService.reject_payment(request.tenant.pk, payment_id)
    return _respond(result)
