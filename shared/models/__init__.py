# shared/models/__init__.py
from .fields import ModalityListField

__all__ = ['ModalityListField']
