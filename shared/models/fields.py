# shared/models/fields.py
"""
Model fields shared across apps.
"""
from django.db import models

from shared.utils.modality import normalize_modalities


class ModalityListField(models.JSONField):
    """
    JSON list of modality tags.

    Rows written by older code paths hold a bare tag or a JSON-encoded list
    string; both are normalised to a list when read and before every save,
    so the rest of the code only ever sees ``List[str]``.
    """

    description = "List of modality tags"

    def __init__(self, *args, **kwargs):
        kwargs.setdefault('default', list)
        kwargs.setdefault('blank', True)
        super().__init__(*args, **kwargs)

    def from_db_value(self, value, expression, connection):
        value = super().from_db_value(value, expression, connection)
        return normalize_modalities(value)

    def to_python(self, value):
        return normalize_modalities(value)

    def pre_save(self, model_instance, add):
        value = normalize_modalities(getattr(model_instance, self.attname))
        setattr(model_instance, self.attname, value)
        return value
