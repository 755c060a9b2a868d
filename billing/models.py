# billing/models.py
"""
PAYMENT MODEL - monthly fee payments submitted by, or recorded for, a student.
"""
import logging
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

# SHARED IMPORTS
from shared.constants import PaymentStatus

logger = logging.getLogger(__name__)


class Payment(models.Model):
    """
    A payment for one student of one tenant.

    ``validated_at`` is set if and only if the payment is approved.
    Rejected is terminal; payments are never deleted.
    """

    tenant = models.ForeignKey("core.Tenant", on_delete=models.CASCADE, related_name='payments')
    student = models.ForeignKey("students.Student", on_delete=models.PROTECT, related_name='payments')

    amount = models.DecimalField(_("amount"), max_digits=10, decimal_places=2, default=Decimal('0.00'))
    payment_date = models.DateField(_("payment date"), default=timezone.localdate)
    status = models.CharField(max_length=20, choices=PaymentStatus.CHOICES, default=PaymentStatus.PENDING)
    validated_at = models.DateTimeField(_("approved at"), null=True, blank=True)
    modality = models.CharField(
        _("modality"),
        max_length=100,
        blank=True,
        default='',
        help_text="Modality covered by this payment when the student trains several"
    )
    proof_url = models.URLField(blank=True, default='')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'payments'
        ordering = ['-payment_date', '-id']
        indexes = [
            models.Index(fields=['tenant', 'status'], name='payments_tenant_status_idx'),
            models.Index(fields=['tenant', 'status', 'validated_at'], name='payments_tenant_valid_idx'),
            models.Index(fields=['tenant', 'student'], name='payments_tenant_student_idx'),
        ]

    def __str__(self):
        return f"Payment #{self.pk} {self.amount} ({self.status})"

    def clean(self):
        super().clean()
        if self.status == PaymentStatus.APPROVED and not self.validated_at:
            raise ValidationError({'validated_at': "Approved payments need an approval timestamp."})
        if self.status != PaymentStatus.APPROVED and self.validated_at:
            raise ValidationError({'validated_at': "Only approved payments carry an approval timestamp."})
        if self.student_id and self.tenant_id and self.student.tenant_id != self.tenant_id:
            raise ValidationError("Payment and student belong to different academies.")

    @property
    def is_pending(self) -> bool:
        return self.status == PaymentStatus.PENDING

    @property
    def is_approved(self) -> bool:
        return self.status == PaymentStatus.APPROVED
