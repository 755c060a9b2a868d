# students/models.py
"""
STUDENT MODEL - one gym member of one tenant.
Modalities are normalised to a list of tags at the field level.
"""
import logging
from decimal import Decimal
from typing import List

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

# SHARED IMPORTS
from shared.constants import StudentStatus, GenderChoices
from shared.models import ModalityListField

logger = logging.getLogger(__name__)


class Student(models.Model):
    """Gym member with a monthly fee and a rolling due date."""

    tenant = models.ForeignKey("core.Tenant", on_delete=models.CASCADE, related_name='students')

    name = models.CharField(_("name"), max_length=200)
    whatsapp = models.CharField(_("WhatsApp"), max_length=30, help_text="Contact handle, digits only")
    due_date = models.DateField(_("due date"))
    monthly_fee = models.DecimalField(
        _("monthly fee"),
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0'))]
    )
    modalities = ModalityListField(_("modalities"))
    classes_per_week = models.CharField(_("classes per week"), max_length=50, blank=True, default='')
    gender = models.CharField(_("gender"), max_length=20, choices=GenderChoices.CHOICES, blank=True, default='')
    status = models.CharField(max_length=20, choices=StudentStatus.CHOICES, default=StudentStatus.ACTIVE)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'students'
        verbose_name = 'Student'
        verbose_name_plural = 'Students'
        ordering = ['due_date', 'name']
        indexes = [
            models.Index(fields=['tenant', 'status'], name='students_tenant_status_idx'),
            models.Index(fields=['tenant', 'due_date'], name='students_tenant_due_idx'),
            models.Index(fields=['tenant', 'name'], name='students_tenant_name_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.whatsapp})"

    def clean(self):
        super().clean()
        if not (self.name or '').strip():
            raise ValidationError({'name': "Name is required."})
        if self.monthly_fee is not None and self.monthly_fee < 0:
            raise ValidationError({'monthly_fee': "Monthly fee cannot be negative."})

    @property
    def is_active(self) -> bool:
        return self.status == StudentStatus.ACTIVE

    @property
    def modality_tags(self) -> List[str]:
        return list(self.modalities or [])
