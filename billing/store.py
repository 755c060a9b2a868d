# billing/store.py
"""
PAYMENT STORE - tenant-scoped reads and writes of Payment rows.
"""
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from django.db.models import Q
from django.utils import timezone

from core.exceptions import NotFoundError
from core.store import store_operation
from shared.constants import PaymentStatus

from .models import Payment

logger = logging.getLogger(__name__)


class PaymentStore:
    """Persistence boundary for payments. Every call is scoped by tenant id."""

    @staticmethod
    @store_operation
    def list_approved_payments(tenant_id, start: datetime, end: datetime) -> List[Payment]:
        """Approved payments with ``start <= validated_at < end``."""
        return list(
            Payment.objects.filter(
                tenant_id=tenant_id,
                status=PaymentStatus.APPROVED,
                validated_at__gte=start,
                validated_at__lt=end,
            )
        )

    @staticmethod
    @store_operation
    def list_cycle_payments(tenant_id, approved_since: datetime) -> List[Payment]:
        """Pending payments plus payments approved since ``approved_since``."""
        return list(
            Payment.objects.filter(tenant_id=tenant_id).filter(
                Q(status=PaymentStatus.PENDING) |
                Q(status=PaymentStatus.APPROVED, validated_at__gte=approved_since)
            ).order_by('payment_date', 'id')
        )

    @staticmethod
    @store_operation
    def get_payment(tenant_id, payment_id, for_update: bool = False) -> Payment:
        queryset = Payment.objects.filter(tenant_id=tenant_id)
        if for_update:
            queryset = queryset.select_for_update()

        payment = queryset.filter(pk=payment_id).first()
        if payment is None:
            raise NotFoundError(f"Payment {payment_id} not found", user_friendly=True)
        return payment

    @staticmethod
    @store_operation
    def insert_payment(tenant_id, student_id, amount: Decimal, modality: Optional[str] = None,
                       payment_date: Optional[date] = None) -> Payment:
        """Create a payment directly in approved state."""
        payment = Payment.objects.create(
            tenant_id=tenant_id,
            student_id=student_id,
            amount=amount,
            payment_date=payment_date or timezone.localdate(),
            status=PaymentStatus.APPROVED,
            validated_at=timezone.now(),
            modality=modality or '',
        )
        logger.info(f"Approved payment inserted: #{payment.pk} student {student_id} amount {amount}")
        return payment

    @staticmethod
    @store_operation
    def update_payment_status(tenant_id, payment_id, new_status: str,
                              validated_at: Optional[datetime] = None) -> None:
        if new_status == PaymentStatus.APPROVED:
            validated_at = validated_at or timezone.now()
        else:
            validated_at = None

        updated = Payment.objects.filter(tenant_id=tenant_id, pk=payment_id).update(
            status=new_status,
            validated_at=validated_at,
            updated_at=timezone.now(),
        )
        if not updated:
            raise NotFoundError(f"Payment {payment_id} not found", user_friendly=True)
