# students/services.py
"""
STUDENT SERVICES - registration and search.
NO view logic, PROPER error handling, WELL LOGGED
"""
import logging
from typing import Any, Dict, Optional

# SHARED IMPORTS
from shared.utils import FieldMapper

from core.cache import DashboardCache
from core.exceptions import AcademyManagementException, ValidationError
from core.results import action_failure, action_success
from core.services import TenantService

from .forms import StudentRegistrationForm
from .store import StudentStore

logger = logging.getLogger(__name__)


def serialize_student(student) -> Dict[str, Any]:
    return {
        'id': student.pk,
        'name': student.name,
        'whatsapp': student.whatsapp,
        'due_date': student.due_date.isoformat() if student.due_date else None,
        'monthly_fee': float(student.monthly_fee or 0),
        'modalities': student.modality_tags,
        'classes_per_week': student.classes_per_week,
        'gender': student.gender,
        'status': student.status,
    }


# ============ STUDENT SERVICES ============

class StudentService:
    """
    Service for student-related business logic.
    """

    @staticmethod
    def register_student(tenant_id, student_data: Dict[str, Any]) -> Dict:
        """
        Register a new active student.

        Args:
            tenant_id: resolved tenant
            student_data: raw submission; legacy keys (nome, data_vencimento,
                mensalidade, modalidade...) are mapped to model fields

        Returns:
            dict: {'success': bool, 'message': str, 'student': {...}?}
        """
        try:
            TenantService.require_tenant(tenant_id)

            form = StudentRegistrationForm(FieldMapper.map_form_to_model(student_data, 'student'))
            if not form.is_valid():
                raise ValidationError(form.first_error(), user_friendly=True, details=form.errors.get_json_data())

            student = StudentStore.insert_student(tenant_id, form.cleaned_data)

        except AcademyManagementException as e:
            logger.warning(f"Student registration rejected (tenant {tenant_id}): {e}")
            return action_failure(e)
        except Exception as e:
            logger.error(f"Student registration failed (tenant {tenant_id}): {e}", exc_info=True)
            return action_failure(e)

        DashboardCache.invalidate(tenant_id)
        logger.info(f"Student registered: {student.name} (tenant {tenant_id})")
        return action_success("Student registered successfully.", student=serialize_student(student))

    @staticmethod
    def search_students(tenant_id, query: str = '', limit: Optional[int] = None) -> Dict:
        """Active students whose name contains ``query``, soonest due date first."""
        try:
            TenantService.require_tenant(tenant_id)
            students = StudentStore.search_active_students(tenant_id, query, limit)
        except AcademyManagementException as e:
            logger.warning(f"Student search failed (tenant {tenant_id}): {e}")
            return action_failure(e)

        return action_success(
            f"{len(students)} student(s) found.",
            students=[serialize_student(s) for s in students],
        )
