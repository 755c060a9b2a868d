# users/services.py
"""
USER SERVICES - platform-level user administration.
NO view logic, PROPER error handling, WELL LOGGED
"""
import logging
from typing import Any, Dict, List, Optional

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email
from django.db import DatabaseError, transaction

from core.exceptions import NotFoundError, StoreError, ValidationError
from core.models import TenantMember
from core.services import MIN_PASSWORD_LENGTH

logger = logging.getLogger(__name__)


def serialize_user(user) -> Dict[str, Any]:
    return {
        'id': user.pk,
        'email': user.email,
        'full_name': user.full_name,
        'is_active': user.is_active,
        'is_super_admin': user.is_super_admin,
        'date_joined': user.date_joined.isoformat() if user.date_joined else None,
        'tenants': [
            {'slug': m.tenant.slug, 'name': m.tenant.name, 'role': m.role}
            for m in user.tenant_memberships.select_related('tenant')
        ],
    }


class UserAdminService:
    """List, inspect, update and delete user accounts (super admin only)."""

    @staticmethod
    def list_users(query: Optional[str] = None) -> List:
        User = get_user_model()
        users = User.objects.search_users(query) if query else User.objects.all()
        return list(users.order_by('-date_joined', 'id'))

    @staticmethod
    def get_user(user_id):
        User = get_user_model()
        user = User.objects.filter(pk=user_id).first()
        if user is None:
            raise NotFoundError(f"User {user_id} not found", user_friendly=True)
        return user

    @staticmethod
    def update_user(user_id, data: Dict[str, Any]):
        """
        Update e-mail, full name and (optionally) password.

        Args:
            user_id: user to change
            data: any of 'email', 'full_name', 'password'; a blank password keeps the current one

        Raises:
            NotFoundError: unknown user
            ValidationError: invalid or duplicate e-mail, short password
        """
        User = get_user_model()
        user = UserAdminService.get_user(user_id)

        email = (data.get('email') or user.email).strip().lower()
        try:
            validate_email(email)
        except DjangoValidationError:
            raise ValidationError("Enter a valid e-mail address.", user_friendly=True)
        if User.objects.filter(email__iexact=email).exclude(pk=user.pk).exists():
            raise ValidationError(f"User with email {email} already exists.", user_friendly=True)

        password = data.get('password') or ''
        if password and len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must have at least {MIN_PASSWORD_LENGTH} characters.",
                user_friendly=True
            )

        user.email = email
        if 'full_name' in data:
            user.full_name = (data.get('full_name') or '').strip()
        if password:
            user.set_password(password)

        try:
            user.save()
        except DatabaseError as e:
            logger.error(f"User update failed for {user_id}: {e}", exc_info=True)
            raise StoreError("Failed to update user.") from e

        logger.info(f"User updated: {user.email}")
        return user

    @staticmethod
    def delete_user(user_id) -> None:
        """Remove the user's memberships, then the user."""
        user = UserAdminService.get_user(user_id)
        email = user.email
        try:
            with transaction.atomic():
                TenantMember.objects.filter(user=user).delete()
                user.delete()
        except DatabaseError as e:
            logger.error(f"User delete failed for {user_id}: {e}", exc_info=True)
            raise StoreError("Failed to delete user.") from e

        logger.info(f"User deleted: {email}")
