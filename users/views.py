# users/views.py
"""
Platform views - user administration for super admins.
"""
import logging

from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

# SHARED IMPORTS
from shared.utils import FieldMapper

from core.exceptions import AcademyManagementException
from core.permissions import IsSuperAdmin
from core.results import action_failure, action_success, result_status

from .services import UserAdminService, serialize_user

logger = logging.getLogger(__name__)


@api_view(['GET'])
@permission_classes([IsSuperAdmin])
def user_list_view(request):
    users = UserAdminService.list_users(request.query_params.get('q'))
    return Response({
        'success': True,
        'users': [serialize_user(u) for u in users],
    })


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsSuperAdmin])
def user_detail_view(request, user_id):
    try:
        if request.method == 'GET':
            user = UserAdminService.get_user(user_id)
            return Response({'success': True, 'user': serialize_user(user)})

        if request.method == 'PATCH':
            user = UserAdminService.update_user(user_id, FieldMapper.request_payload(request.data))
            return Response(action_success("User updated.", user=serialize_user(user)))

        if request.user.pk == user_id:
            return Response(
                {'success': False, 'message': "You cannot delete your own account.", 'error_code': 'VALIDATION_ERROR'},
                status=400
            )
        UserAdminService.delete_user(user_id)
        return Response(action_success("User deleted."))

    except AcademyManagementException as e:
        logger.warning(f"User {request.method} failed for {user_id}: {e}")
        result = action_failure(e)
        return Response(result, status=result_status(result))
