# shared/utils/field_mapping.py
"""
Consistent field mapping across all forms and APIs.
DEPENDS ONLY ON: shared.constants
"""
import logging

from shared.constants.model_fields import FORM_TO_MODEL, STUDENT_CONTACT_FIELD

logger = logging.getLogger(__name__)

DEFAULT_COUNTRY_CODE = '55'


class FieldMapper:
    """Handle field name standardization and mapping."""

    # Per-model overrides applied after the global FORM_TO_MODEL map
    MAPS = {
        'student': {
            'classes_per_week': 'classes_per_week',
        },
        'manual_payment': {
            'valor': 'amount',
            'modalidade': 'modality',
            'modality': 'modality',
        },
    }

    @staticmethod
    def map_form_to_model(form_data, model_name=None):
        """
        Apply consistent field mapping from forms to models.

        Keys already using model names pass through untouched, so the
        mapping is safe to apply twice.
        """
        if not form_data:
            return {}

        mapping = dict(FORM_TO_MODEL)
        mapping.update(FieldMapper.MAPS.get(model_name, {}))

        standardized_data = {}
        for key, value in form_data.items():
            new_key = mapping.get(key, key)
            # An explicit model-named key wins over a legacy alias
            if new_key in standardized_data and key != new_key:
                continue
            standardized_data[new_key] = value

        if STUDENT_CONTACT_FIELD in standardized_data:
            standardized_data[STUDENT_CONTACT_FIELD] = FieldMapper.standardize_phone_number(
                standardized_data[STUDENT_CONTACT_FIELD]
            )

        return standardized_data

    @staticmethod
    def request_payload(data):
        """
        Plain dict from a request body.

        JSON bodies pass through. Form-encoded bodies (``QueryDict``) keep every
        value of a repeated key as a list, so ``modalities=a&modalities=b``
        arrives as ``['a', 'b']`` instead of only the last value.
        """
        if not data:
            return {}
        if hasattr(data, 'lists'):
            return {
                key: values if len(values) > 1 else values[0]
                for key, values in data.lists()
                if values
            }
        return dict(data)

    @staticmethod
    def standardize_phone_number(phone):
        """Standardize a WhatsApp handle to digits with the Brazilian country code."""
        if not phone:
            return ""

        digits = ''.join(filter(str.isdigit, str(phone)))
        if not digits:
            return ""

        # 11987654321 → 5511987654321 (DDD + number without country code)
        if len(digits) in (10, 11):
            digits = DEFAULT_COUNTRY_CODE + digits

        return digits
