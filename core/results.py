# core/results.py
"""
Result dictionaries returned by every caller-facing operation.
Operations never raise across the boundary: they return
``{"success": bool, "message": str}`` (plus ``error_code`` on failure).
"""
import logging

from .exceptions import AcademyManagementException, StoreError, http_status_for

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "The operation could not be completed. Please try again."


def action_success(message, **data):
    result = {'success': True, 'message': message}
    result.update(data)
    return result


def action_failure(error, message=None):
    """
    Build a failure result from an exception.

    User-friendly academy exceptions keep their message; store faults and
    unexpected exceptions are reported with a generic message.
    """
    if isinstance(error, AcademyManagementException):
        error_code = error.error_code
        if message is None:
            message = error.message if error.user_friendly else GENERIC_FAILURE_MESSAGE
    else:
        error_code = StoreError.default_code
        message = message or GENERIC_FAILURE_MESSAGE

    return {'success': False, 'message': message, 'error_code': error_code}


def result_status(result, success_status=200):
    """HTTP status for a result dictionary."""
    if result.get('success'):
        return success_status
    return http_status_for(result.get('error_code'))
