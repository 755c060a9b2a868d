# users/adapters.py
"""
ACCOUNT ADAPTER - e-mail login with tenant-aware redirects.
"""
import logging

from allauth.account.adapter import DefaultAccountAdapter
from django.conf import settings
from django.core.exceptions import ValidationError

from core.services import TenantService

logger = logging.getLogger(__name__)

NO_TENANT_REDIRECT = '/?error=no_tenant'


class AcademyAccountAdapter(DefaultAccountAdapter):
    """Custom account adapter for the academy platform."""

    def is_open_for_signup(self, request):
        """
        Academies are provisioned by platform administrators;
        public signup stays closed unless explicitly enabled.
        """
        return getattr(settings, 'ACCOUNT_ALLOW_REGISTRATION', False)

    def get_login_redirect_url(self, request):
        """``/<module>/<slug>/dashboard/`` of the user's first academy."""
        path = TenantService.login_redirect_path(request.user)
        if path:
            return path

        if getattr(request.user, 'is_super_admin', False):
            return '/platform/tenants/'

        logger.warning(f"User {request.user.pk} logged in without an academy")
        return NO_TENANT_REDIRECT

    def clean_email(self, email):
        """Validate email with additional checks."""
        email = super().clean_email(email).lower()

        # Check if email is from allowed domains (if configured)
        allowed_domains = getattr(settings, 'ALLOWED_EMAIL_DOMAINS', [])
        if allowed_domains:
            domain = email.split('@')[-1]
            if domain not in allowed_domains:
                raise ValidationError(
                    f"Email domain {domain} is not allowed. "
                    f"Please use an email from: {', '.join(allowed_domains)}"
                )

        return email
