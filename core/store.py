# core/store.py
"""
Store adapter helpers.
Store modules are the only code that touches the ORM for academy rows;
every database failure leaves them as a StoreError.
"""
import logging
from functools import wraps

from django.db import DatabaseError

from .exceptions import StoreError

logger = logging.getLogger(__name__)


def store_operation(func):
    """Translate ``DatabaseError`` raised by a store call into ``StoreError``."""
    @wraps(func)
    def _wrapped(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except DatabaseError as e:
            logger.error(f"Store operation {func.__qualname__} failed: {e}", exc_info=True)
            raise StoreError(
                f"Store operation {func.__name__} failed",
                details={'operation': func.__qualname__}
            ) from e
    return _wrapped
