# billing/services.py
"""
BILLING SERVICES - dashboard figures and the payment lifecycle.

Every operation takes an explicit ``tenant_id``; tenant resolution happens
once, upstream, in ``core.middleware.TenantMiddleware``.
"""
import logging
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from django.conf import settings
from django.db import transaction
from django.utils import timezone

# SHARED IMPORTS
from shared.constants import AuditStatus, BILLING_CYCLE_DAYS, PaymentStatus
from shared.utils import to_decimal

from core.cache import DashboardCache
from core.exceptions import AcademyManagementException, StoreError, ValidationError
from core.results import action_failure, action_success
from core.services import TenantService
from students.store import StudentStore

from . import stats
from .store import PaymentStore

logger = logging.getLogger(__name__)


def billing_cycle_days() -> int:
    return getattr(settings, 'ACADEMY_BILLING_CYCLE_DAYS', BILLING_CYCLE_DAYS)


def advance_due_date(current: Optional[date], today: Optional[date] = None) -> date:
    """Next due date: a fixed number of days later, never "one calendar month"."""
    if current is None:
        current = today or timezone.localdate()
        logger.warning(f"Student without due date; advancing from {current}")
    return current + timedelta(days=billing_cycle_days())


# ============ DASHBOARD SERVICE ============

class DashboardService:
    """
    Read-and-reduce operations behind the financial dashboard.
    A store failure yields the documented zero-valued result, never an exception.
    """

    @staticmethod
    def get_dashboard_stats(tenant_id, today: Optional[date] = None, use_cache: bool = True) -> Dict:
        """
        KPIs of one academy for ``today`` (defaults to the local date).

        Returns:
            dict: annualRevenue, nextMonthForecast, totalStudents,
            monthlyExpected, monthlyReceived, pendingPayments
        """
        if not tenant_id:
            return stats.empty_dashboard_stats()

        today = today or timezone.localdate()
        if use_cache:
            cached = DashboardCache.get(tenant_id, 'stats', today.isoformat())
            if cached is not None:
                return cached

        try:
            students = StudentStore.list_active_students(tenant_id)
            month_start, month_end = stats.month_bounds(today)
            year_start, year_end = stats.year_bounds(today)
            month_payments = PaymentStore.list_approved_payments(tenant_id, month_start, month_end)
            year_payments = PaymentStore.list_approved_payments(tenant_id, year_start, year_end)
            cycle_payments = DashboardService._cycle_payments(tenant_id, students, today)
        except StoreError as e:
            logger.error(f"Dashboard stats unavailable for tenant {tenant_id}: {e}")
            return stats.empty_dashboard_stats()

        result = stats.build_dashboard_stats(
            students,
            month_payments,
            year_payments,
            cycle_payments,
            today,
            cycle_days=billing_cycle_days(),
        )

        if use_cache:
            DashboardCache.set(tenant_id, 'stats', result, today.isoformat())
        return result

    @staticmethod
    def get_segmentation_data(tenant_id, use_cache: bool = True) -> Dict:
        """Modality/frequency/gender counts and apportioned revenue per modality."""
        if not tenant_id:
            return stats.empty_segmentation()

        if use_cache:
            cached = DashboardCache.get(tenant_id, 'segmentation')
            if cached is not None:
                return cached

        try:
            students = StudentStore.list_active_students(tenant_id)
        except StoreError as e:
            logger.error(f"Segmentation unavailable for tenant {tenant_id}: {e}")
            return stats.empty_segmentation()

        result = stats.build_segmentation(students)
        if use_cache:
            DashboardCache.set(tenant_id, 'segmentation', result)
        return result

    @staticmethod
    def list_audit_rows(tenant_id, statuses: Optional[Iterable[str]] = None,
                        today: Optional[date] = None) -> List[stats.AuditRow]:
        """
        Current billing-cycle rows of every active student.

        Raises:
            ValidationError: on an unknown status filter
            StoreError: when the store cannot be read
        """
        if statuses:
            unknown = set(statuses) - set(AuditStatus.ALL)
            if unknown:
                raise ValidationError(
                    f"Unknown status filter: {', '.join(sorted(unknown))}",
                    user_friendly=True
                )

        today = today or timezone.localdate()
        students = StudentStore.list_active_students(tenant_id)
        payments = DashboardService._cycle_payments(tenant_id, students, today)
        return stats.derive_audit_rows(students, payments, today, statuses, cycle_days=billing_cycle_days())

    @staticmethod
    def refresh(tenant_id, today: Optional[date] = None):
        """Fresh (stats, segmentation) pair, bypassing the cache."""
        DashboardCache.invalidate(tenant_id)
        return (
            DashboardService.get_dashboard_stats(tenant_id, today=today),
            DashboardService.get_segmentation_data(tenant_id),
        )

    @staticmethod
    def _cycle_payments(tenant_id, students, today: date):
        since = stats.earliest_cycle_start(students, today, billing_cycle_days())
        since_dt = timezone.make_aware(datetime.combine(since, datetime.min.time()))
        return PaymentStore.list_cycle_payments(tenant_id, since_dt)


# ============ PAYMENT LIFECYCLE SERVICE ============

class PaymentLifecycleService:
    """
    Approve, record and reject payments.

    Approval and the due-date advance share one transaction: if the
    due-date write fails the approval is rolled back.
    """

    @staticmethod
    def approve_payment(tenant_id, payment_id, student_id, amount=None) -> Dict:
        """
        Approve a submitted payment, or record one for an overdue student.

        Args:
            tenant_id: resolved tenant
            payment_id: existing payment id, or None for "no payment submitted yet"
            student_id: student the payment belongs to
            amount: amount to record when ``payment_id`` is None (defaults to the fee)

        Returns:
            dict: {'success': bool, 'message': str, ...}
        """
        try:
            TenantService.require_tenant(tenant_id)

            with transaction.atomic():
                if payment_id is not None:
                    payment = PaymentStore.get_payment(tenant_id, payment_id, for_update=True)
                    student = StudentStore.get_student(tenant_id, student_id, for_update=True)
                    PaymentLifecycleService._check_approvable(payment, student)
                    PaymentStore.update_payment_status(
                        tenant_id, payment.pk, PaymentStatus.APPROVED, timezone.now()
                    )
                    recorded_id = payment.pk
                else:
                    student = StudentStore.get_student(tenant_id, student_id, for_update=True)
                    value = PaymentLifecycleService._parse_amount(
                        student.monthly_fee if amount is None else amount
                    )
                    payment = PaymentStore.insert_payment(
                        tenant_id,
                        student.pk,
                        value,
                        modality=PaymentLifecycleService._default_modality(student),
                    )
                    recorded_id = payment.pk

                new_due_date = advance_due_date(student.due_date)
                StudentStore.update_student_due_date(tenant_id, student.pk, new_due_date)

        except AcademyManagementException as e:
            logger.warning(f"Payment approval rejected (tenant {tenant_id}, payment {payment_id}): {e}")
            return action_failure(e)
        except Exception as e:
            logger.error(f"Payment approval failed (tenant {tenant_id}, payment {payment_id}): {e}", exc_info=True)
            return action_failure(e)

        DashboardCache.invalidate(tenant_id)
        logger.info(
            f"Payment #{recorded_id} approved for student {student.pk}; due date now {new_due_date}"
        )
        return action_success(
            "Payment approved and due date updated.",
            payment_id=recorded_id,
            due_date=new_due_date.isoformat(),
        )

    @staticmethod
    def register_manual_payment(tenant_id, student_id, amount, modality: Optional[str] = None) -> Dict:
        """
        Record a payment taken outside the submission flow.

        Always creates an approved payment and advances the due date. When
        the student trains more than one modality, ``modality`` is required
        and must be one of them.
        """
        try:
            TenantService.require_tenant(tenant_id)
            value = PaymentLifecycleService._parse_amount(amount, allow_zero=False)

            with transaction.atomic():
                student = StudentStore.get_student(tenant_id, student_id, for_update=True)
                chosen = PaymentLifecycleService._resolve_modality(student, modality)
                payment = PaymentStore.insert_payment(tenant_id, student.pk, value, modality=chosen)
                new_due_date = advance_due_date(student.due_date)
                StudentStore.update_student_due_date(tenant_id, student.pk, new_due_date)

        except AcademyManagementException as e:
            logger.warning(f"Manual payment rejected (tenant {tenant_id}, student {student_id}): {e}")
            return action_failure(e)
        except Exception as e:
            logger.error(f"Manual payment failed (tenant {tenant_id}, student {student_id}): {e}", exc_info=True)
            return action_failure(e)

        DashboardCache.invalidate(tenant_id)
        logger.info(f"Manual payment #{payment.pk} recorded for student {student.pk}")
        return action_success(
            "Payment registered and due date updated.",
            payment_id=payment.pk,
            due_date=new_due_date.isoformat(),
        )

    @staticmethod
    def reject_payment(tenant_id, payment_id) -> Dict:
        """Reject a pending payment. Terminal; the due date is left alone."""
        try:
            TenantService.require_tenant(tenant_id)
            with transaction.atomic():
                payment = PaymentStore.get_payment(tenant_id, payment_id, for_update=True)
                if payment.status != PaymentStatus.PENDING:
                    raise ValidationError(
                        f"Only pending payments can be rejected (payment is {payment.status}).",
                        user_friendly=True
                    )
                PaymentStore.update_payment_status(tenant_id, payment.pk, PaymentStatus.REJECTED)
        except AcademyManagementException as e:
            logger.warning(f"Payment rejection refused (tenant {tenant_id}, payment {payment_id}): {e}")
            return action_failure(e)
        except Exception as e:
            logger.error(f"Payment rejection failed (tenant {tenant_id}, payment {payment_id}): {e}", exc_info=True)
            return action_failure(e)

        DashboardCache.invalidate(tenant_id)
        logger.info(f"Payment #{payment_id} rejected")
        return action_success("Payment rejected.", payment_id=payment.pk)

    # ============ HELPERS ============

    @staticmethod
    def _check_approvable(payment, student):
        if payment.student_id != student.pk:
            raise ValidationError("Payment does not belong to this student.", user_friendly=True)
        if payment.status == PaymentStatus.APPROVED:
            raise ValidationError("Payment is already approved.", user_friendly=True)
        if payment.status == PaymentStatus.REJECTED:
            raise ValidationError("Rejected payments cannot be approved.", user_friendly=True)

    @staticmethod
    def _parse_amount(value, allow_zero: bool = True) -> Decimal:
        amount = to_decimal(value)
        if amount is None:
            raise ValidationError("Amount must be a number.", user_friendly=True)
        if amount < 0 or (not allow_zero and amount == 0):
            raise ValidationError("Amount must be greater than zero.", user_friendly=True)
        return amount

    @staticmethod
    def _default_modality(student) -> str:
        tags = student.modality_tags
        return tags[0] if len(tags) == 1 else ''

    @staticmethod
    def _resolve_modality(student, modality: Optional[str]) -> str:
        tags = student.modality_tags
        chosen = (modality or '').strip()

        if len(tags) > 1 and not chosen:
            raise ValidationError(
                f"Choose which modality is being paid: {', '.join(tags)}.",
                user_friendly=True
            )
        if chosen and tags and chosen not in tags:
            raise ValidationError(
                f"Student does not train {chosen}.",
                user_friendly=True
            )
        return chosen or PaymentLifecycleService._default_modality(student)
