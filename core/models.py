# core/models.py
"""
CORE MODELS - tenants, their enabled modules and their members.
Every academy row in the other apps hangs off `Tenant`.
"""
import logging
import re
from typing import Optional

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

# SHARED IMPORTS
from shared.constants import TenantStatus, ModuleChoices, MemberRoles

logger = logging.getLogger(__name__)

SLUG_PATTERN = re.compile(r'^[a-z0-9-]+$')


# ============ TENANT MODEL ============

class Tenant(models.Model):
    """One gym/academy customer - foundation for multi-tenancy."""

    name = models.CharField(max_length=255, help_text="Academy name")
    slug = models.SlugField(unique=True, help_text="Lower-case letters, digits and hyphens")
    status = models.CharField(max_length=20, choices=TenantStatus.CHOICES, default=TenantStatus.ACTIVE)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'tenants'
        ordering = ['name']
        indexes = [
            models.Index(fields=['slug', 'status'], name='tenants_slug_status_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.slug})"

    def clean(self):
        super().clean()
        if len((self.name or '').strip()) < 3:
            raise ValidationError({'name': "Academy name must have at least 3 characters."})
        if not SLUG_PATTERN.match(self.slug or ''):
            raise ValidationError({'slug': "Use only lower-case letters, digits and hyphens."})

    @property
    def is_active(self) -> bool:
        return self.status == TenantStatus.ACTIVE

    @property
    def active_module(self) -> str:
        """Module used for login routing: first enabled module, else the core route."""
        module = self.modules.filter(is_enabled=True).order_by('id').first()
        return module.module_id if module else ModuleChoices.DEFAULT_ROUTE

    def dashboard_path(self, module: Optional[str] = None) -> str:
        return f"/{module or self.active_module}/{self.slug}/dashboard/"


# ============ TENANT MODULES ============

class TenantModule(models.Model):
    """A product module switched on for a tenant."""

    tenant = models.ForeignKey(Tenant, on_delete=models.CASCADE, related_name='modules')
    module_id = models.CharField(max_length=50, choices=ModuleChoices.CHOICES)
    is_enabled = models.BooleanField(default=True)

    class Meta:
        db_table = 'tenant_modules'
        unique_together = ['tenant', 'module_id']

    def __str__(self):
        state = 'on' if self.is_enabled else 'off'
        return f"{self.tenant.slug}:{self.module_id} ({state})"


# ============ TENANT MEMBERS ============

class TenantMember(models.Model):
    """Links a user to a tenant with a role."""

    tenant = models.ForeignKey(Tenant, on_delete=models.CASCADE, related_name='members')
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='tenant_memberships'
    )
    role = models.CharField(max_length=20, choices=MemberRoles.CHOICES, default=MemberRoles.STAFF)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'tenant_members'
        unique_together = ['tenant', 'user']
        ordering = ['created_at', 'id']

    def __str__(self):
        return f"{self.user} @ {self.tenant.slug} ({self.role})"
