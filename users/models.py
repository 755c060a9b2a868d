# users/models.py
import logging

from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils.translation import gettext_lazy as _

from .managers import UserManager

logger = logging.getLogger(__name__)


class User(AbstractUser):
    """Custom user model: email login, optional platform administration."""

    username = None
    first_name = None
    last_name = None

    email = models.EmailField(_("email address"), unique=True)
    full_name = models.CharField(_("full name"), max_length=255, blank=True, default='')
    is_super_admin = models.BooleanField(
        default=False,
        help_text=_("Platform administrator: may provision academies and manage users.")
    )

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        db_table = 'users'
        ordering = ['email']

    def __str__(self):
        return self.email

    def clean(self):
        super().clean()
        self.email = (self.email or '').strip().lower()

    def get_full_name(self):
        return self.full_name or self.email

    def get_short_name(self):
        return (self.full_name.split(' ')[0] if self.full_name else self.email)
