# shared/constants/model_fields.py

"""
CONSTANT field names and choices shared by every academy app.
NO DEPENDENCIES - safe to import from models, services and migrations.
"""

# Field name constants
STUDENT_CONTACT_FIELD = 'whatsapp'  # ALWAYS use this for the student contact handle
STUDENT_DUE_DATE_FIELD = 'due_date'
STUDENT_FEE_FIELD = 'monthly_fee'
STUDENT_MODALITIES_FIELD = 'modalities'
PAYMENT_APPROVED_AT_FIELD = 'validated_at'

# Sentinel bucket for missing modality / frequency values
UNSPECIFIED = 'Unspecified'

# Fixed due-date increment applied on every approval (days, not months)
BILLING_CYCLE_DAYS = 30

# Form field → Model field mapping (legacy payload keys from the first UI)
FORM_TO_MODEL = {
    'nome': 'name',
    'phone': 'whatsapp',
    'data_vencimento': 'due_date',
    'mensalidade': 'monthly_fee',
    'modalidade': 'modalities',
    'modality': 'modalities',
    'freq': 'classes_per_week',
    'frequency': 'classes_per_week',
    'sexo': 'gender',
}


class StudentStatus:
    ACTIVE = 'active'
    INACTIVE = 'inactive'

    CHOICES = (
        (ACTIVE, 'Active'),
        (INACTIVE, 'Inactive'),
    )


class PaymentStatus:
    PENDING = 'pending'
    APPROVED = 'approved'
    REJECTED = 'rejected'

    CHOICES = (
        (PENDING, 'Pending review'),
        (APPROVED, 'Approved'),
        (REJECTED, 'Rejected'),
    )


class AuditStatus:
    """Derived per-cycle status of a student. Never persisted."""
    PAID = 'paid'
    PENDING_REVIEW = 'pending-review'
    OVERDUE = 'overdue'
    OPEN = 'open'

    ALL = (PAID, PENDING_REVIEW, OVERDUE, OPEN)
    ACTIONABLE = (PENDING_REVIEW, OVERDUE)


class GenderChoices:
    MASCULINE = 'masculine'
    FEMININE = 'feminine'
    UNSPECIFIED = 'unspecified'

    CHOICES = (
        (MASCULINE, 'Masculine'),
        (FEMININE, 'Feminine'),
    )


class TenantStatus:
    ACTIVE = 'active'
    SUSPENDED = 'suspended'

    CHOICES = (
        (ACTIVE, 'Active'),
        (SUSPENDED, 'Suspended'),
    )


class ModuleChoices:
    ACADEMIA = 'academia'
    RETAIL = 'varejo'
    DEFAULT_ROUTE = 'core'

    CHOICES = (
        (ACADEMIA, 'Academia'),
        (RETAIL, 'Varejo'),
    )


class MemberRoles:
    OWNER = 'owner'
    STAFF = 'staff'

    CHOICES = (
        (OWNER, 'Owner'),
        (STAFF, 'Staff'),
    )
