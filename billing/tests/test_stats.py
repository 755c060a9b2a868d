# billing/tests/test_stats.py
from datetime import date, datetime
from decimal import Decimal

from django.test import SimpleTestCase
from django.utils import timezone

from shared.constants import AuditStatus, GenderChoices, PaymentStatus, UNSPECIFIED

from billing import stats
from billing.models import Payment
from students.models import Student


def student(pk, fee='100', due=date(2025, 6, 1), modalities=('Jiu-Jitsu',), gender='feminine',
            frequency='3x', name=None):
    return Student(
        id=pk,
        tenant_id=1,
        name=name or f"Student {pk}",
        whatsapp=f"55119000000{pk:02d}",
        due_date=due,
        monthly_fee=Decimal(fee),
        modalities=list(modalities),
        classes_per_week=frequency,
        gender=gender,
    )


def payment(pk, student_id, amount='100', status=PaymentStatus.PENDING, validated_at=None,
            payment_date=date(2025, 6, 2)):
    return Payment(
        id=pk,
        tenant_id=1,
        student_id=student_id,
        amount=Decimal(amount),
        status=status,
        validated_at=validated_at,
        payment_date=payment_date,
    )


def aware(*args):
    return timezone.make_aware(datetime(*args))


class PeriodHelpersTest(SimpleTestCase):
    def test_month_bounds_roll_over_december(self):
        start, end = stats.month_bounds(date(2025, 12, 15))
        self.assertEqual(timezone.localtime(start).date(), date(2025, 12, 1))
        self.assertEqual(timezone.localtime(end).date(), date(2026, 1, 1))

    def test_year_bounds(self):
        start, end = stats.year_bounds(date(2025, 6, 15))
        self.assertEqual(timezone.localtime(start).date(), date(2025, 1, 1))
        self.assertEqual(timezone.localtime(end).date(), date(2026, 1, 1))

    def test_cycle_window_start(self):
        self.assertEqual(stats.cycle_window_start(date(2025, 7, 1)), date(2025, 6, 1))


class RevenueTest(SimpleTestCase):
    def test_monthly_expected_only_counts_current_month(self):
        students = [
            student(1, fee='100', due=date(2025, 6, 1)),
            student(2, fee='100', due=date(2025, 7, 1)),
        ]
        self.assertEqual(stats.monthly_expected(students, date(2025, 6, 15)), Decimal('100'))

    def test_monthly_expected_ignores_other_years(self):
        students = [student(1, due=date(2024, 6, 1))]
        self.assertEqual(stats.monthly_expected(students, date(2025, 6, 15)), Decimal('0'))

    def test_sum_amounts(self):
        payments = [payment(1, 1, amount='80'), payment(2, 1, amount='20.50')]
        self.assertEqual(stats.sum_amounts(payments), Decimal('100.50'))

    def test_next_month_forecast_is_all_fees(self):
        students = [student(1, fee='100'), student(2, fee='150')]
        self.assertEqual(stats.next_month_forecast(students), Decimal('250'))


class SegmentationTest(SimpleTestCase):
    def test_fee_split_equally_across_modalities(self):
        result = stats.build_segmentation([student(1, fee='120', modalities=['Jiu-Jitsu', 'Crossfit'])])
        self.assertEqual(result['modalityRevenueCounts'], {'Jiu-Jitsu': 60.0, 'Crossfit': 60.0})

    def test_revenue_sums_to_total_fees(self):
        students = [
            student(1, fee='100', modalities=['Jiu-Jitsu', 'Crossfit', 'Muay Thai']),
            student(2, fee='89.90', modalities=['Crossfit']),
            student(3, fee='45', modalities=[]),
        ]
        result = stats.build_segmentation(students)
        self.assertAlmostEqual(sum(result['modalityRevenueCounts'].values()), 234.90, places=6)

    def test_each_student_counted_once_per_modality(self):
        students = [
            student(1, modalities=['Jiu-Jitsu', 'Crossfit'], gender='masculine', frequency='2x'),
            student(2, modalities=['Jiu-Jitsu'], gender='feminine', frequency='2x'),
            student(3, modalities=['Jiu-Jitsu'], gender='', frequency=''),
        ]
        counts = stats.build_segmentation(students)['modalityFrequencyCounts']

        self.assertEqual(counts['Jiu-Jitsu']['total'], 3)
        self.assertEqual(counts['Crossfit']['total'], 1)
        self.assertEqual(counts['Jiu-Jitsu']['frequencies']['2x'], {
            GenderChoices.MASCULINE: 1,
            GenderChoices.FEMININE: 1,
            GenderChoices.UNSPECIFIED: 0,
            'total': 2,
        })
        self.assertEqual(counts['Jiu-Jitsu']['frequencies'][UNSPECIFIED][GenderChoices.UNSPECIFIED], 1)

    def test_student_without_modality_lands_in_unspecified(self):
        counts = stats.build_segmentation([student(1, modalities=[])])['modalityFrequencyCounts']
        self.assertEqual(list(counts), [UNSPECIFIED])

    def test_classify_gender(self):
        self.assertEqual(stats.classify_gender('Masculino'), GenderChoices.MASCULINE)
        self.assertEqual(stats.classify_gender('F'), GenderChoices.FEMININE)
        self.assertEqual(stats.classify_gender('feminine'), GenderChoices.FEMININE)
        self.assertEqual(stats.classify_gender(''), GenderChoices.UNSPECIFIED)
        self.assertEqual(stats.classify_gender(None), GenderChoices.UNSPECIFIED)
        self.assertEqual(stats.classify_gender('outro'), GenderChoices.UNSPECIFIED)

    def test_empty_input(self):
        self.assertEqual(stats.build_segmentation([]), stats.empty_segmentation())


class AuditRowTest(SimpleTestCase):
    today = date(2025, 6, 15)

    def test_overdue_without_payment(self):
        row = stats.derive_audit_row(student(1, fee='120', due=date(2025, 6, 1)), [], [], self.today)
        self.assertEqual(row.status, AuditStatus.OVERDUE)
        self.assertIsNone(row.payment_id)
        self.assertEqual(row.amount, Decimal('120'))
        self.assertEqual(row.date, date(2025, 6, 1))

    def test_open_when_due_date_ahead(self):
        row = stats.derive_audit_row(student(1, due=date(2025, 6, 20)), [], [], self.today)
        self.assertEqual(row.status, AuditStatus.OPEN)

    def test_due_today_is_not_overdue(self):
        row = stats.derive_audit_row(student(1, due=self.today), [], [], self.today)
        self.assertEqual(row.status, AuditStatus.OPEN)

    def test_pending_payment_needs_review(self):
        pending = [payment(7, 1, amount='90')]
        row = stats.derive_audit_row(student(1), pending, [], self.today)
        self.assertEqual(row.status, AuditStatus.PENDING_REVIEW)
        self.assertEqual(row.payment_id, 7)
        self.assertEqual(row.amount, Decimal('90'))

    def test_earliest_pending_payment_is_shown(self):
        pending = [
            payment(8, 1, payment_date=date(2025, 6, 10)),
            payment(7, 1, payment_date=date(2025, 6, 3)),
        ]
        row = stats.derive_audit_row(student(1), pending, [], self.today)
        self.assertEqual(row.payment_id, 7)

    def test_approval_inside_cycle_is_paid(self):
        approved = [payment(3, 1, status=PaymentStatus.APPROVED, validated_at=aware(2025, 6, 10, 9, 0))]
        row = stats.derive_audit_row(student(1, due=date(2025, 7, 1)), [], approved, self.today)
        self.assertEqual(row.status, AuditStatus.PAID)
        self.assertEqual(row.payment_id, 3)

    def test_approval_before_cycle_does_not_count(self):
        approved = [payment(3, 1, status=PaymentStatus.APPROVED, validated_at=aware(2025, 4, 1, 9, 0))]
        row = stats.derive_audit_row(student(1, due=date(2025, 6, 1)), [], approved, self.today)
        self.assertEqual(row.status, AuditStatus.OVERDUE)

    def test_approval_that_advanced_due_date_expires_with_it(self):
        approved = [payment(3, 1, status=PaymentStatus.APPROVED, validated_at=aware(2025, 6, 1, 9, 0))]
        row = stats.derive_audit_row(student(1, due=date(2025, 7, 1)), [], approved, date(2025, 9, 15))
        self.assertEqual(row.status, AuditStatus.OVERDUE)
        self.assertIsNone(row.payment_id)

    def test_late_approval_does_not_cover_an_older_due_date(self):
        approved = [payment(3, 1, status=PaymentStatus.APPROVED, validated_at=aware(2025, 6, 15, 9, 0))]
        row = stats.derive_audit_row(student(1, due=date(2025, 1, 31)), [], approved, date(2025, 6, 16))
        self.assertEqual(row.status, AuditStatus.OVERDUE)

    def test_approval_on_or_after_due_date_is_next_cycle(self):
        approved = [payment(3, 1, status=PaymentStatus.APPROVED, validated_at=aware(2025, 7, 1, 9, 0))]
        row = stats.derive_audit_row(student(1, due=date(2025, 7, 1)), [], approved, self.today)
        self.assertEqual(row.status, AuditStatus.OPEN)

    def test_approvals_without_validation_time_are_tolerated(self):
        approved = [
            payment(3, 1, status=PaymentStatus.APPROVED, validated_at=None),
            payment(4, 1, status=PaymentStatus.APPROVED, validated_at=aware(2025, 6, 10, 9, 0)),
        ]
        row = stats.derive_audit_row(student(1, due=None), [], approved, self.today)
        self.assertEqual(row.status, AuditStatus.PAID)
        self.assertEqual(row.payment_id, 4)

    def test_pending_beats_paid(self):
        approved = [payment(3, 1, status=PaymentStatus.APPROVED, validated_at=aware(2025, 6, 10, 9, 0))]
        pending = [payment(4, 1)]
        row = stats.derive_audit_row(student(1, due=date(2025, 7, 1)), pending, approved, self.today)
        self.assertEqual(row.status, AuditStatus.PENDING_REVIEW)

    def test_rows_filtered_and_sorted(self):
        students = [
            student(1, due=date(2025, 6, 10), name='Bruno'),
            student(2, due=date(2025, 6, 1), name='Carla'),
            student(3, due=date(2025, 6, 30), name='Ana'),
            student(4, due=date(2025, 6, 20), name='Davi'),
        ]
        payments = [payment(9, 4, payment_date=date(2025, 6, 5))]

        rows = stats.derive_audit_rows(students, payments, self.today, statuses=AuditStatus.ACTIONABLE)

        self.assertEqual([r.name for r in rows], ['Carla', 'Davi', 'Bruno'])
        self.assertEqual(
            [r.status for r in rows],
            [AuditStatus.OVERDUE, AuditStatus.PENDING_REVIEW, AuditStatus.OVERDUE]
        )

    def test_to_dict_serialises_amount_and_date(self):
        row = stats.derive_audit_row(student(1, fee='120.50'), [], [], self.today)
        self.assertEqual(row.to_dict()['amount'], 120.5)
        self.assertEqual(row.to_dict()['date'], '2025-06-01')


class DashboardStatsTest(SimpleTestCase):
    def test_build_dashboard_stats(self):
        today = date(2025, 6, 15)
        students = [
            student(1, fee='100', due=date(2025, 6, 1)),
            student(2, fee='100', due=date(2025, 7, 1)),
        ]
        month = [payment(1, 2, amount='100', status=PaymentStatus.APPROVED, validated_at=aware(2025, 6, 5, 10, 0))]
        year = month + [payment(2, 1, amount='100', status=PaymentStatus.APPROVED, validated_at=aware(2025, 3, 5, 10, 0))]

        result = stats.build_dashboard_stats(students, month, year, month, today)

        self.assertEqual(result['annualRevenue'], 200.0)
        self.assertEqual(result['monthlyReceived'], 100.0)
        self.assertEqual(result['monthlyExpected'], 100.0)
        self.assertEqual(result['nextMonthForecast'], 200.0)
        self.assertEqual(result['totalStudents'], 2)
        self.assertEqual([r['student_id'] for r in result['pendingPayments']], [1])
        self.assertEqual(result['pendingPayments'][0]['status'], AuditStatus.OVERDUE)

    def test_same_input_same_output(self):
        today = date(2025, 6, 15)
        students = [student(1), student(2, modalities=['Crossfit'])]
        first = stats.build_dashboard_stats(students, [], [], [], today)
        second = stats.build_dashboard_stats(students, [], [], [], today)
        self.assertEqual(first, second)

    def test_empty_result_shape(self):
        self.assertEqual(set(stats.empty_dashboard_stats()), {
            'annualRevenue', 'nextMonthForecast', 'totalStudents',
            'monthlyExpected', 'monthlyReceived', 'pendingPayments',
        })
