# shared/constants/__init__.py
from .model_fields import (
    STUDENT_CONTACT_FIELD,
    STUDENT_DUE_DATE_FIELD,
    STUDENT_FEE_FIELD,
    STUDENT_MODALITIES_FIELD,
    PAYMENT_APPROVED_AT_FIELD,
    UNSPECIFIED,
    BILLING_CYCLE_DAYS,
    FORM_TO_MODEL,
    StudentStatus,
    PaymentStatus,
    AuditStatus,
    GenderChoices,
    TenantStatus,
    ModuleChoices,
    MemberRoles,
)

__all__ = [
    'STUDENT_CONTACT_FIELD',
    'STUDENT_DUE_DATE_FIELD',
    'STUDENT_FEE_FIELD',
    'STUDENT_MODALITIES_FIELD',
    'PAYMENT_APPROVED_AT_FIELD',
    'UNSPECIFIED',
    'BILLING_CYCLE_DAYS',
    'FORM_TO_MODEL',
    'StudentStatus',
    'PaymentStatus',
    'AuditStatus',
    'GenderChoices',
    'TenantStatus',
    'ModuleChoices',
    'MemberRoles',
]
