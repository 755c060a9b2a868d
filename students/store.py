# students/store.py
"""
STUDENT STORE - tenant-scoped reads and writes of Student rows.
"""
import logging
from datetime import date
from typing import Any, Dict, List

from django.conf import settings

from core.exceptions import NotFoundError
from core.store import store_operation
from shared.constants import StudentStatus

from .models import Student

logger = logging.getLogger(__name__)

STUDENT_FIELDS = (
    'name',
    'whatsapp',
    'due_date',
    'monthly_fee',
    'modalities',
    'classes_per_week',
    'gender',
)


class StudentStore:
    """Persistence boundary for students. Every call is scoped by tenant id."""

    @staticmethod
    @store_operation
    def list_active_students(tenant_id) -> List[Student]:
        return list(
            Student.objects.filter(tenant_id=tenant_id, status=StudentStatus.ACTIVE)
            .order_by('due_date', 'id')
        )

    @staticmethod
    @store_operation
    def search_active_students(tenant_id, name_substring: str, limit: int = None) -> List[Student]:
        """Case-insensitive substring match on name, ascending due date, capped."""
        default_limit = getattr(settings, 'ACADEMY_SEARCH_DEFAULT_LIMIT', 10)
        max_limit = getattr(settings, 'ACADEMY_SEARCH_MAX_LIMIT', 50)

        if not limit or limit < 1:
            limit = default_limit
        limit = min(limit, max_limit)

        queryset = Student.objects.filter(tenant_id=tenant_id, status=StudentStatus.ACTIVE)
        term = (name_substring or '').strip()
        if term:
            queryset = queryset.filter(name__icontains=term)

        return list(queryset.order_by('due_date', 'name', 'id')[:limit])

    @staticmethod
    @store_operation
    def get_student(tenant_id, student_id, for_update: bool = False) -> Student:
        queryset = Student.objects.filter(tenant_id=tenant_id)
        if for_update:
            queryset = queryset.select_for_update()

        student = queryset.filter(pk=student_id).first()
        if student is None:
            raise NotFoundError(f"Student {student_id} not found", user_friendly=True)
        return student

    @staticmethod
    @store_operation
    def insert_student(tenant_id, fields: Dict[str, Any]) -> Student:
        values = {key: fields[key] for key in STUDENT_FIELDS if key in fields}
        student = Student.objects.create(
            tenant_id=tenant_id,
            status=StudentStatus.ACTIVE,
            **values
        )
        logger.info(f"Student inserted: {student.name} (tenant {tenant_id}, id {student.pk})")
        return student

    @staticmethod
    @store_operation
    def update_student_due_date(tenant_id, student_id, new_due_date: date) -> None:
        updated = Student.objects.filter(tenant_id=tenant_id, pk=student_id).update(due_date=new_due_date)
        if not updated:
            raise NotFoundError(f"Student {student_id} not found", user_friendly=True)
