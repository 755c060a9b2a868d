# shared/utils/__init__.py
from .field_mapping import FieldMapper
from .modality import ModalityParse, parse_modalities, normalize_modalities
from .money import to_decimal

__all__ = [
    'FieldMapper',
    'ModalityParse',
    'parse_modalities',
    'normalize_modalities',
    'to_decimal',
]
