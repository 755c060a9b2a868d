# core/views.py
"""
Platform views - tenant provisioning for super admins.
"""
import logging

from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

# SHARED IMPORTS
from shared.utils import FieldMapper

from .exceptions import AcademyManagementException
from .permissions import IsSuperAdmin
from .results import action_failure, action_success, result_status
from .services import TenantProvisioningService
from .models import Tenant

logger = logging.getLogger(__name__)


def serialize_tenant(tenant) -> dict:
    return {
        'id': tenant.pk,
        'name': tenant.name,
        'slug': tenant.slug,
        'status': tenant.status,
        'modules': [
            {'module_id': m.module_id, 'is_enabled': m.is_enabled}
            for m in tenant.modules.all()
        ],
        'members': tenant.members.count(),
        'dashboard_path': tenant.dashboard_path(),
        'created_at': tenant.created_at.isoformat() if tenant.created_at else None,
    }


def _failure_response(error):
    result = action_failure(error)
    if isinstance(error, AcademyManagementException) and error.details:
        result['errors'] = error.details
    return Response(result, status=result_status(result))


@api_view(['GET', 'POST'])
@permission_classes([IsSuperAdmin])
def tenant_list_view(request):
    """List academies, or provision a new one with its owner account."""
    if request.method == 'GET':
        tenants = Tenant.objects.prefetch_related('modules').order_by('name')
        return Response({
            'success': True,
            'tenants': [serialize_tenant(t) for t in tenants],
        })

    data = request.data
    try:
        tenant = TenantProvisioningService.create_tenant(
            name=data.get('name', ''),
            slug=data.get('slug') or TenantProvisioningService.suggest_slug(data.get('name', '')),
            module_id=data.get('module'),
            email=data.get('email', ''),
            password=data.get('password', ''),
            full_name=data.get('full_name'),
        )
    except AcademyManagementException as e:
        logger.warning(f"Tenant provisioning refused: {e}")
        return _failure_response(e)

    return Response(
        action_success(f"Academy {tenant.name} created.", tenant=serialize_tenant(tenant)),
        status=201
    )


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsSuperAdmin])
def tenant_detail_view(request, tenant_id):
    try:
        if request.method == 'GET':
            tenant = TenantProvisioningService.get_tenant(tenant_id)
            return Response({'success': True, 'tenant': serialize_tenant(tenant)})

        if request.method == 'PATCH':
            tenant = TenantProvisioningService.update_tenant(tenant_id, FieldMapper.request_payload(request.data))
            return Response(action_success("Academy updated.", tenant=serialize_tenant(tenant)))

        TenantProvisioningService.delete_tenant(tenant_id)
        return Response(action_success("Academy deleted."))

    except AcademyManagementException as e:
        logger.warning(f"Tenant {request.method} failed for {tenant_id}: {e}")
        return _failure_response(e)
