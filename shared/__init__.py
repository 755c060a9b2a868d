# shared/__init__.py
"""
Shared package - central access to constants and utils.
Avoids importing models or services to prevent circular dependencies.
"""

# Constants
from .constants import (
    UNSPECIFIED,
    BILLING_CYCLE_DAYS,
    FORM_TO_MODEL,
    StudentStatus,
    PaymentStatus,
    AuditStatus,
    GenderChoices,
    ModuleChoices,
)

# Utilities
from .utils.field_mapping import FieldMapper
from .utils.modality import parse_modalities, normalize_modalities

# Aliases for convenience
field_mapper = FieldMapper

__all__ = [
    # Constants
    'UNSPECIFIED',
    'BILLING_CYCLE_DAYS',
    'FORM_TO_MODEL',
    'StudentStatus',
    'PaymentStatus',
    'AuditStatus',
    'GenderChoices',
    'ModuleChoices',

    # Utilities
    'FieldMapper',
    'field_mapper',
    'parse_modalities',
    'normalize_modalities',
]
