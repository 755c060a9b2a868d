# users/managers.py
"""
USER MANAGER - e-mail is the login identifier, stored lowercase.
"""
from django.contrib.auth.models import UserManager as BaseUserManager
from django.db.models import Q
from django.utils.translation import gettext_lazy as _


class UserManager(BaseUserManager):
    """Manager for the e-mail based User; platform admins via ``create_superuser``."""

    def create_user(self, email, password=None, **extra_fields):
        """
        Create an account identified by ``email``.

        Args:
            email: login address; lowercased before saving
            password: raw password; an unusable one is set when omitted

        Raises:
            ValueError: empty e-mail
        """
        if not email:
            raise ValueError(_('An e-mail address is required.'))

        extra_fields.pop('username', None)
        user = self.model(email=self.normalize_email(email).lower(), **extra_fields)

        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()

        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        """Django superusers double as platform administrators."""
        for flag in ('is_staff', 'is_superuser', 'is_super_admin', 'is_active'):
            extra_fields.setdefault(flag, True)

        if extra_fields['is_staff'] is not True or extra_fields['is_superuser'] is not True:
            raise ValueError(_('A superuser needs is_staff=True and is_superuser=True.'))

        return self.create_user(email, password, **extra_fields)

    def get_by_natural_key(self, email):
        # Login is case-insensitive
        return self.get(email__iexact=email)

    def search_users(self, query):
        return self.filter(Q(email__icontains=query) | Q(full_name__icontains=query))
