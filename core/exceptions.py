# core/exceptions.py
class AcademyManagementException(Exception):
    """Base exception for all academy management errors."""

    default_message = "An error occurred"
    default_code = None

    def __init__(self, message=None, user_friendly=False, details=None, error_code=None):
        self.message = message or self.default_message
        self.user_friendly = user_friendly
        self.details = details or {}
        self.error_code = error_code or self.default_code
        super().__init__(self.message)


class AuthenticationError(AcademyManagementException):
    """Authentication errors."""
    default_message = "Authentication failed"
    default_code = "AUTH_ERROR"


class ValidationError(AcademyManagementException):
    """Malformed or missing input. Reported inline; nothing is written."""
    default_message = "Validation failed"
    default_code = "VALIDATION_ERROR"


class TenantPermissionError(AcademyManagementException):
    """The caller cannot be resolved to a tenant, or acts outside its tenant."""
    default_message = "Academy not identified"
    default_code = "PERMISSION_ERROR"


class NotFoundError(AcademyManagementException):
    """A referenced student or payment is missing at operation time."""
    default_message = "Record not found"
    default_code = "NOT_FOUND"


class StoreError(AcademyManagementException):
    """The underlying persistence call failed."""
    default_message = "Database operation failed"
    default_code = "STORE_ERROR"


class TenantProvisioningError(AcademyManagementException):
    """Errors while creating or changing a tenant."""
    default_message = "Academy setup failed"
    default_code = "PROVISIONING_ERROR"


HTTP_STATUS_BY_CODE = {
    AuthenticationError.default_code: 401,
    ValidationError.default_code: 400,
    TenantPermissionError.default_code: 403,
    NotFoundError.default_code: 404,
    StoreError.default_code: 500,
    TenantProvisioningError.default_code: 400,
}


def http_status_for(error_code, default=400):
    """Map an error code to the HTTP status used by the JSON boundary."""
    return HTTP_STATUS_BY_CODE.get(error_code, default)
