# billing/tests/test_services.py
from datetime import date, timedelta
from decimal import Decimal
from unittest import mock

from django.db import DatabaseError
from django.test import TestCase, override_settings
from django.utils import timezone

from shared.constants import AuditStatus, PaymentStatus, TenantStatus

from billing.models import Payment
from billing.services import DashboardService, PaymentLifecycleService, advance_due_date
from core.cache import DashboardCache
from core.exceptions import ValidationError
from core.tests.factories import make_payment, make_student, make_tenant
from students.models import Student

LOCMEM_CACHE = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'billing-tests',
    }
}


class AdvanceDueDateTest(TestCase):
    def test_fixed_thirty_day_advance(self):
        self.assertEqual(advance_due_date(date(2025, 6, 1)), date(2025, 7, 1))
        self.assertEqual(advance_due_date(date(2025, 1, 31)), date(2025, 3, 2))

    def test_missing_due_date_advances_from_today(self):
        self.assertEqual(advance_due_date(None, today=date(2025, 6, 15)), date(2025, 7, 15))

    @override_settings(ACADEMY_BILLING_CYCLE_DAYS=7)
    def test_cycle_length_is_configurable(self):
        self.assertEqual(advance_due_date(date(2025, 6, 1)), date(2025, 6, 8))


class ApprovePaymentTest(TestCase):
    def setUp(self):
        self.tenant = make_tenant()
        self.student = make_student(self.tenant, due_date=date(2025, 1, 31))

    def test_approve_existing_payment(self):
        payment = make_payment(self.student, amount='95.00')

        result = PaymentLifecycleService.approve_payment(self.tenant.pk, payment.pk, self.student.pk)

        self.assertTrue(result['success'])
        payment.refresh_from_db()
        self.student.refresh_from_db()
        self.assertEqual(payment.status, PaymentStatus.APPROVED)
        self.assertIsNotNone(payment.validated_at)
        self.assertEqual(payment.amount, Decimal('95.00'))
        self.assertEqual(self.student.due_date, date(2025, 3, 2))
        self.assertEqual(result['due_date'], '2025-03-02')

    def test_approve_without_payment_creates_approved_payment(self):
        result = PaymentLifecycleService.approve_payment(self.tenant.pk, None, self.student.pk, '100')

        self.assertTrue(result['success'])
        payment = Payment.objects.get(pk=result['payment_id'])
        self.assertEqual(payment.status, PaymentStatus.APPROVED)
        self.assertEqual(payment.amount, Decimal('100'))
        self.assertEqual(payment.payment_date, timezone.localdate())
        self.assertEqual(payment.modality, 'Jiu-Jitsu')
        self.student.refresh_from_db()
        self.assertEqual(self.student.due_date, date(2025, 3, 2))

    def test_approve_without_payment_defaults_to_fee(self):
        result = PaymentLifecycleService.approve_payment(self.tenant.pk, None, self.student.pk)
        self.assertEqual(Payment.objects.get(pk=result['payment_id']).amount, self.student.monthly_fee)

    def test_already_approved_payment_is_refused(self):
        payment = make_payment(self.student, status=PaymentStatus.APPROVED)

        result = PaymentLifecycleService.approve_payment(self.tenant.pk, payment.pk, self.student.pk)

        self.assertFalse(result['success'])
        self.assertEqual(result['error_code'], ValidationError.default_code)
        self.student.refresh_from_db()
        self.assertEqual(self.student.due_date, date(2025, 1, 31))

    def test_payment_of_another_student_is_refused(self):
        other = make_student(self.tenant, name='Bruno Lima')
        payment = make_payment(other)

        result = PaymentLifecycleService.approve_payment(self.tenant.pk, payment.pk, self.student.pk)

        self.assertFalse(result['success'])
        payment.refresh_from_db()
        self.assertEqual(payment.status, PaymentStatus.PENDING)

    def test_payment_of_another_tenant_is_not_found(self):
        other_tenant = make_tenant(slug='other-gym', name='Other Gym')
        payment = make_payment(make_student(other_tenant))

        result = PaymentLifecycleService.approve_payment(self.tenant.pk, payment.pk, self.student.pk)

        self.assertFalse(result['success'])
        self.assertEqual(result['error_code'], 'NOT_FOUND')

    def test_unresolved_tenant_is_a_permission_error(self):
        for tenant_id in (None, 0, 999999):
            with self.subTest(tenant_id=tenant_id):
                result = PaymentLifecycleService.approve_payment(tenant_id, None, self.student.pk)
                self.assertFalse(result['success'])
                self.assertEqual(result['error_code'], 'PERMISSION_ERROR')
                self.assertEqual(result['message'], "Permission error: academy not identified.")

    def test_suspended_tenant_is_refused(self):
        self.tenant.status = TenantStatus.SUSPENDED
        self.tenant.save()
        result = PaymentLifecycleService.approve_payment(self.tenant.pk, None, self.student.pk)
        self.assertEqual(result['error_code'], 'PERMISSION_ERROR')

    def test_failed_due_date_write_rolls_back_approval(self):
        payment = make_payment(self.student)

        with mock.patch('billing.services.StudentStore.update_student_due_date',
                        side_effect=DatabaseError('boom')):
            result = PaymentLifecycleService.approve_payment(self.tenant.pk, payment.pk, self.student.pk)

        self.assertFalse(result['success'])
        self.assertNotIn('boom', result['message'])
        payment.refresh_from_db()
        self.assertEqual(payment.status, PaymentStatus.PENDING)
        self.assertIsNone(payment.validated_at)

    def test_negative_amount_is_refused(self):
        result = PaymentLifecycleService.approve_payment(self.tenant.pk, None, self.student.pk, '-10')
        self.assertFalse(result['success'])
        self.assertFalse(Payment.objects.exists())


class ManualPaymentTest(TestCase):
    def setUp(self):
        self.tenant = make_tenant()
        self.student = make_student(
            self.tenant,
            due_date=date(2025, 6, 1),
            modalities=['Jiu-Jitsu', 'Crossfit'],
        )

    def test_register_manual_payment(self):
        result = PaymentLifecycleService.register_manual_payment(
            self.tenant.pk, self.student.pk, '120,00', 'Crossfit'
        )

        self.assertTrue(result['success'])
        payment = Payment.objects.get(pk=result['payment_id'])
        self.assertEqual(payment.status, PaymentStatus.APPROVED)
        self.assertEqual(payment.amount, Decimal('120.00'))
        self.assertEqual(payment.modality, 'Crossfit')
        self.student.refresh_from_db()
        self.assertEqual(self.student.due_date, date(2025, 7, 1))

    def test_modality_required_for_multi_modality_student(self):
        result = PaymentLifecycleService.register_manual_payment(self.tenant.pk, self.student.pk, '120')
        self.assertFalse(result['success'])
        self.assertFalse(Payment.objects.exists())

    def test_unknown_modality_is_refused(self):
        result = PaymentLifecycleService.register_manual_payment(
            self.tenant.pk, self.student.pk, '120', 'Yoga'
        )
        self.assertFalse(result['success'])

    def test_amount_must_be_positive_number(self):
        for amount in ('0', '-5', 'abc', None):
            with self.subTest(amount=amount):
                result = PaymentLifecycleService.register_manual_payment(
                    self.tenant.pk, self.student.pk, amount, 'Crossfit'
                )
                self.assertFalse(result['success'])
                self.assertEqual(result['error_code'], 'VALIDATION_ERROR')
        self.assertFalse(Payment.objects.exists())

    def test_unknown_student(self):
        result = PaymentLifecycleService.register_manual_payment(self.tenant.pk, 999999, '120', 'Crossfit')
        self.assertEqual(result['error_code'], 'NOT_FOUND')


class RejectPaymentTest(TestCase):
    def setUp(self):
        self.tenant = make_tenant()
        self.student = make_student(self.tenant)

    def test_reject_pending_payment(self):
        payment = make_payment(self.student)

        result = PaymentLifecycleService.reject_payment(self.tenant.pk, payment.pk)

        self.assertTrue(result['success'])
        payment.refresh_from_db()
        self.assertEqual(payment.status, PaymentStatus.REJECTED)
        self.student.refresh_from_db()
        self.assertEqual(self.student.due_date, date(2025, 6, 1))

    def test_rejected_payment_cannot_be_approved(self):
        payment = make_payment(self.student, status=PaymentStatus.REJECTED)
        result = PaymentLifecycleService.approve_payment(self.tenant.pk, payment.pk, self.student.pk)
        self.assertFalse(result['success'])

    def test_only_pending_payments_can_be_rejected(self):
        payment = make_payment(self.student, status=PaymentStatus.APPROVED)
        result = PaymentLifecycleService.reject_payment(self.tenant.pk, payment.pk)
        self.assertFalse(result['success'])
        payment.refresh_from_db()
        self.assertEqual(payment.status, PaymentStatus.APPROVED)


class DashboardServiceTest(TestCase):
    def setUp(self):
        self.tenant = make_tenant()
        self.today = timezone.localdate()
        self.ana = make_student(self.tenant, due_date=self.today - timedelta(days=3), monthly_fee=Decimal('100'))
        self.bia = make_student(
            self.tenant,
            name='Bia Costa',
            due_date=self.today + timedelta(days=10),
            monthly_fee=Decimal('120'),
            modalities=['Jiu-Jitsu', 'Crossfit'],
        )
        make_payment(self.bia, amount='120.00', status=PaymentStatus.APPROVED)

    def test_dashboard_stats(self):
        result = DashboardService.get_dashboard_stats(self.tenant.pk, use_cache=False)

        self.assertEqual(result['totalStudents'], 2)
        self.assertEqual(result['monthlyReceived'], 120.0)
        self.assertEqual(result['annualRevenue'], 120.0)
        self.assertEqual(result['nextMonthForecast'], 220.0)
        self.assertEqual([r['student_id'] for r in result['pendingPayments']], [self.ana.pk])

    def test_dashboard_stats_idempotent(self):
        first = DashboardService.get_dashboard_stats(self.tenant.pk, use_cache=False)
        second = DashboardService.get_dashboard_stats(self.tenant.pk, use_cache=False)
        self.assertEqual(first, second)

    def test_inactive_students_are_ignored(self):
        make_student(self.tenant, name='Caio', status='inactive', monthly_fee=Decimal('999'))
        result = DashboardService.get_dashboard_stats(self.tenant.pk, use_cache=False)
        self.assertEqual(result['totalStudents'], 2)

    def test_other_tenants_are_invisible(self):
        other = make_tenant(slug='other-gym', name='Other Gym')
        make_student(other, name='Outsider', monthly_fee=Decimal('500'))
        result = DashboardService.get_dashboard_stats(self.tenant.pk, use_cache=False)
        self.assertEqual(result['nextMonthForecast'], 220.0)

    def test_store_failure_returns_empty_result(self):
        with mock.patch('students.store.Student.objects.filter', side_effect=DatabaseError('down')):
            result = DashboardService.get_dashboard_stats(self.tenant.pk, use_cache=False)
            segmentation = DashboardService.get_segmentation_data(self.tenant.pk, use_cache=False)

        self.assertEqual(result['totalStudents'], 0)
        self.assertEqual(result['pendingPayments'], [])
        self.assertEqual(segmentation, {'modalityFrequencyCounts': {}, 'modalityRevenueCounts': {}})

    def test_no_tenant_returns_empty_result(self):
        self.assertEqual(DashboardService.get_dashboard_stats(None)['totalStudents'], 0)

    def test_segmentation(self):
        result = DashboardService.get_segmentation_data(self.tenant.pk, use_cache=False)
        self.assertEqual(result['modalityRevenueCounts'], {'Jiu-Jitsu': 160.0, 'Crossfit': 60.0})

    def test_legacy_modality_string_is_normalised(self):
        Student.objects.filter(pk=self.ana.pk).update(modalities='Muay Thai')
        result = DashboardService.get_segmentation_data(self.tenant.pk, use_cache=False)
        self.assertIn('Muay Thai', result['modalityRevenueCounts'])

    def test_audit_rows_filter(self):
        rows = DashboardService.list_audit_rows(self.tenant.pk, [AuditStatus.PAID])
        self.assertEqual([r.student_id for r in rows], [self.bia.pk])

    def test_audit_rows_unknown_status(self):
        with self.assertRaises(ValidationError):
            DashboardService.list_audit_rows(self.tenant.pk, ['late'])


class PaymentCycleTest(TestCase):
    def setUp(self):
        self.tenant = make_tenant()
        self.today = timezone.localdate()
        self.student = make_student(self.tenant, due_date=self.today)

    def pending_ids(self, today):
        result = DashboardService.get_dashboard_stats(self.tenant.pk, today=today, use_cache=False)
        return {row['student_id']: row['status'] for row in result['pendingPayments']}

    def test_student_is_overdue_again_after_paid_cycle_ends(self):
        result = PaymentLifecycleService.approve_payment(self.tenant.pk, None, self.student.pk)
        self.assertTrue(result['success'])
        new_due = self.today + timedelta(days=30)
        self.assertEqual(result['due_date'], new_due.isoformat())

        self.assertEqual(self.pending_ids(self.today + timedelta(days=5)), {})
        self.assertEqual(
            self.pending_ids(new_due + timedelta(days=1)),
            {self.student.pk: AuditStatus.OVERDUE}
        )


@override_settings(CACHES=LOCMEM_CACHE)
class DashboardCacheTest(TestCase):
    def setUp(self):
        self.tenant = make_tenant()
        self.student = make_student(self.tenant, due_date=timezone.localdate() - timedelta(days=1))

    def test_cached_result_reused_until_write(self):
        first = DashboardService.get_dashboard_stats(self.tenant.pk)
        self.assertIsNotNone(DashboardCache.get(self.tenant.pk, 'stats', timezone.localdate().isoformat()))

        with self.assertNumQueries(0):
            self.assertEqual(DashboardService.get_dashboard_stats(self.tenant.pk), first)

        PaymentLifecycleService.approve_payment(self.tenant.pk, None, self.student.pk)

        refreshed = DashboardService.get_dashboard_stats(self.tenant.pk)
        self.assertEqual(refreshed['pendingPayments'], [])
        self.assertEqual(refreshed['monthlyReceived'], 100.0)
