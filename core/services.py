# core/services.py
"""
CORE SERVICES - tenant resolution and tenant provisioning.
NO view logic, PROPER error handling, WELL LOGGED
"""
import logging
import re
from typing import Any, Dict, List, Optional

from django.contrib.auth import get_user_model
from django.core.validators import validate_email
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction, DatabaseError

# SHARED IMPORTS
from shared.constants import ModuleChoices, MemberRoles, TenantStatus

from .exceptions import (
    NotFoundError,
    StoreError,
    TenantPermissionError,
    TenantProvisioningError,
)
from .models import Tenant, TenantMember, TenantModule, SLUG_PATTERN

logger = logging.getLogger(__name__)

MIN_TENANT_NAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6
KNOWN_MODULES = {value for value, _label in ModuleChoices.CHOICES}


# ============ TENANT RESOLUTION ============

class TenantService:
    """Resolve and check the tenant a user acts for."""

    @staticmethod
    def require_tenant(tenant_id) -> Tenant:
        """
        Return the active tenant with ``tenant_id``.

        Raises:
            TenantPermissionError: if the id is empty, unknown or the tenant is suspended
        """
        if not tenant_id:
            raise TenantPermissionError("Permission error: academy not identified.", user_friendly=True)

        try:
            tenant = Tenant.objects.filter(pk=tenant_id).first()
        except (DatabaseError, ValueError, TypeError) as e:
            logger.error(f"Tenant lookup failed for {tenant_id!r}: {e}", exc_info=True)
            raise TenantPermissionError("Permission error: academy not identified.", user_friendly=True) from e

        if tenant is None or not tenant.is_active:
            raise TenantPermissionError("Permission error: academy not identified.", user_friendly=True)
        return tenant

    @staticmethod
    def memberships(user) -> List[TenantMember]:
        if not user or not user.is_authenticated:
            return []
        return list(
            TenantMember.objects.filter(user=user, tenant__status=TenantStatus.ACTIVE)
            .select_related('tenant')
        )

    @staticmethod
    def resolve_tenant_for_user(user, tenant_slug: Optional[str] = None) -> Optional[Tenant]:
        """
        Tenant the user acts for.

        With a slug, the user must be a member of that tenant (super admins
        may open any active tenant). Without one, the first membership wins.
        """
        if not user or not user.is_authenticated:
            return None

        if tenant_slug:
            tenant = Tenant.objects.filter(slug=tenant_slug, status=TenantStatus.ACTIVE).first()
            if tenant is None:
                return None
            if getattr(user, 'is_super_admin', False):
                return tenant
            is_member = TenantMember.objects.filter(tenant=tenant, user=user).exists()
            return tenant if is_member else None

        membership = (
            TenantMember.objects.filter(user=user, tenant__status=TenantStatus.ACTIVE)
            .select_related('tenant')
            .order_by('created_at', 'id')
            .first()
        )
        return membership.tenant if membership else None

    @staticmethod
    def login_redirect_path(user) -> Optional[str]:
        """``/<module>/<slug>/dashboard/`` for the user's first tenant, else None."""
        tenant = TenantService.resolve_tenant_for_user(user)
        if tenant is None:
            return None
        return tenant.dashboard_path()


# ============ TENANT PROVISIONING ============

class TenantProvisioningService:
    """
    Create and maintain academies.
    Platform (super admin) operations only.
    """

    @staticmethod
    def validate_tenant_data(name: str, slug: str, module_id: Optional[str] = None,
                             exclude_tenant_id=None) -> Dict[str, str]:
        errors = {}

        if len((name or '').strip()) < MIN_TENANT_NAME_LENGTH:
            errors['name'] = f"Academy name must have at least {MIN_TENANT_NAME_LENGTH} characters."

        slug = (slug or '').strip()
        if not SLUG_PATTERN.match(slug):
            errors['slug'] = "Use only lower-case letters, digits and hyphens."
        else:
            taken = Tenant.objects.filter(slug=slug)
            if exclude_tenant_id:
                taken = taken.exclude(pk=exclude_tenant_id)
            if taken.exists():
                errors['slug'] = f"Slug '{slug}' is already in use."

        if module_id is not None and module_id not in KNOWN_MODULES:
            errors['module'] = f"Unknown module '{module_id}'."

        return errors

    @staticmethod
    def validate_owner_data(email: str, password: str) -> Dict[str, str]:
        errors = {}
        User = get_user_model()

        try:
            validate_email(email or '')
        except DjangoValidationError:
            errors['email'] = "Enter a valid e-mail address."
        else:
            if User.objects.filter(email__iexact=email.strip()).exists():
                errors['email'] = f"User with email {email} already exists."

        if len(password or '') < MIN_PASSWORD_LENGTH:
            errors['password'] = f"Password must have at least {MIN_PASSWORD_LENGTH} characters."

        return errors

    @staticmethod
    def suggest_slug(name: str) -> str:
        slug = re.sub(r'[^a-z0-9]+', '-', (name or '').strip().lower()).strip('-')
        return slug or 'academia'

    @staticmethod
    def create_tenant(name: str, slug: str, module_id: str, email: str, password: str,
                      full_name: Optional[str] = None) -> Tenant:
        """
        Create an academy with its owner account.

        Creates, in one transaction: the owner user, the tenant (active), the
        owner membership and the enabled module.

        Raises:
            TenantProvisioningError: on invalid input or any failed step
        """
        module_id = module_id or ModuleChoices.ACADEMIA
        errors = TenantProvisioningService.validate_tenant_data(name, slug, module_id)
        errors.update(TenantProvisioningService.validate_owner_data(email, password))
        if errors:
            raise TenantProvisioningError(
                "; ".join(errors.values()),
                user_friendly=True,
                details=errors
            )

        User = get_user_model()
        try:
            with transaction.atomic():
                owner = User.objects.create_user(
                    email=email.strip(),
                    password=password,
                    full_name=(full_name or name).strip(),
                )
                tenant = Tenant.objects.create(
                    name=name.strip(),
                    slug=slug.strip(),
                    status=TenantStatus.ACTIVE,
                )
                TenantMember.objects.create(tenant=tenant, user=owner, role=MemberRoles.OWNER)
                TenantModule.objects.create(tenant=tenant, module_id=module_id, is_enabled=True)
        except DatabaseError as e:
            logger.error(f"Tenant provisioning failed for slug {slug}: {e}", exc_info=True)
            raise TenantProvisioningError("Failed to create academy.", user_friendly=True) from e

        logger.info(f"Tenant created: {tenant.name} ({tenant.slug}) owner={owner.email} module={module_id}")
        return tenant

    @staticmethod
    def get_tenant(tenant_id) -> Tenant:
        tenant = Tenant.objects.filter(pk=tenant_id).first()
        if tenant is None:
            raise NotFoundError(f"Academy {tenant_id} not found", user_friendly=True)
        return tenant

    @staticmethod
    def update_tenant(tenant_id, data: Dict[str, Any]) -> Tenant:
        """Update name, slug and/or status of a tenant."""
        tenant = TenantProvisioningService.get_tenant(tenant_id)

        name = data.get('name', tenant.name)
        slug = data.get('slug', tenant.slug)
        errors = TenantProvisioningService.validate_tenant_data(name, slug, exclude_tenant_id=tenant.pk)

        status = data.get('status', tenant.status)
        if status not in {value for value, _label in TenantStatus.CHOICES}:
            errors['status'] = f"Unknown status '{status}'."

        if errors:
            raise TenantProvisioningError("; ".join(errors.values()), user_friendly=True, details=errors)

        tenant.name = name.strip()
        tenant.slug = slug.strip()
        tenant.status = status
        try:
            tenant.save()
        except DatabaseError as e:
            logger.error(f"Tenant update failed for {tenant_id}: {e}", exc_info=True)
            raise StoreError("Failed to update academy.") from e

        if 'module' in data:
            TenantProvisioningService.set_module(tenant.pk, data['module'], enabled=True)

        logger.info(f"Tenant updated: {tenant.slug}")
        return tenant

    @staticmethod
    def set_module(tenant_id, module_id: str, enabled: bool = True) -> TenantModule:
        if module_id not in KNOWN_MODULES:
            raise TenantProvisioningError(f"Unknown module '{module_id}'.", user_friendly=True)

        tenant = TenantProvisioningService.get_tenant(tenant_id)
        module, _created = TenantModule.objects.update_or_create(
            tenant=tenant,
            module_id=module_id,
            defaults={'is_enabled': enabled},
        )
        logger.info(f"Module {module_id} {'enabled' if enabled else 'disabled'} for {tenant.slug}")
        return module

    @staticmethod
    def delete_tenant(tenant_id) -> None:
        """
        Delete a tenant together with its students, payments and memberships.
        User accounts are kept.
        """
        tenant = TenantProvisioningService.get_tenant(tenant_id)
        slug = tenant.slug
        try:
            with transaction.atomic():
                # Payments protect their students; remove them first
                tenant.payments.all().delete()
                tenant.delete()
        except DatabaseError as e:
            logger.error(f"Tenant delete failed for {tenant_id}: {e}", exc_info=True)
            raise StoreError("Failed to delete academy.") from e

        logger.info(f"Tenant deleted: {slug}")
