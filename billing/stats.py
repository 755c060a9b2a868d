# billing/stats.py

"""
Dashboard statistics for one academy.

Pure functions only: callers fetch the rows (see ``billing.store`` and
``students.store``) and pass them in, so the same input always yields the
same numbers. Nothing here touches the database.
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from django.utils import timezone

from shared.constants import (
    AuditStatus,
    BILLING_CYCLE_DAYS,
    GenderChoices,
    PaymentStatus,
    UNSPECIFIED,
)

logger = logging.getLogger(__name__)

ZERO = Decimal('0')


# =============================================================================
# PERIOD HELPERS
# =============================================================================

def _local_midnight(day: date) -> datetime:
    return timezone.make_aware(datetime.combine(day, time.min), timezone.get_current_timezone())


def month_bounds(today: date) -> Tuple[datetime, datetime]:
    """Aware ``[start, end)`` datetimes of the calendar month containing ``today``."""
    start = today.replace(day=1)
    if start.month == 12:
        end = start.replace(year=start.year + 1, month=1)
    else:
        end = start.replace(month=start.month + 1)
    return _local_midnight(start), _local_midnight(end)


def year_bounds(today: date) -> Tuple[datetime, datetime]:
    """Aware ``[start, end)`` datetimes of the calendar year containing ``today``."""
    start = date(today.year, 1, 1)
    end = date(today.year + 1, 1, 1)
    return _local_midnight(start), _local_midnight(end)


def cycle_window_start(due_date: date, cycle_days: int = BILLING_CYCLE_DAYS) -> date:
    """First day of the billing cycle that ends on ``due_date``."""
    return due_date - timedelta(days=cycle_days)


def _as_local_date(value) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        if timezone.is_aware(value):
            value = timezone.localtime(value)
        return value.date()
    return value


# =============================================================================
# REVENUE
# =============================================================================

def _fee(student) -> Decimal:
    return Decimal(student.monthly_fee or 0)


def sum_amounts(payments: Iterable) -> Decimal:
    """Sum of payment amounts; missing amounts count as zero."""
    return sum((Decimal(p.amount or 0) for p in payments), ZERO)


def monthly_expected(students: Iterable, today: date) -> Decimal:
    """Fees of students whose due date falls in today's (year, month); once per student."""
    return sum(
        (_fee(s) for s in students
         if s.due_date and (s.due_date.year, s.due_date.month) == (today.year, today.month)),
        ZERO
    )


def next_month_forecast(students: Iterable) -> Decimal:
    """Every active student's fee: the revenue a full month would bring in."""
    return sum((_fee(s) for s in students), ZERO)


# =============================================================================
# SEGMENTATION
# =============================================================================

def classify_gender(value) -> str:
    """
    Bucket a free-text gender value.

    "m..." is masculine and "f..." is feminine (case-insensitive); anything
    else, blank included, lands in the unspecified bucket instead of being
    forced into one of the other two.
    """
    text = (value or '').strip().lower()
    if text.startswith('m'):
        return GenderChoices.MASCULINE
    if text.startswith('f'):
        return GenderChoices.FEMININE
    return GenderChoices.UNSPECIFIED


def _empty_gender_counts() -> Dict[str, int]:
    return {
        GenderChoices.MASCULINE: 0,
        GenderChoices.FEMININE: 0,
        GenderChoices.UNSPECIFIED: 0,
        'total': 0,
    }


def build_segmentation(students: Iterable) -> Dict[str, Dict]:
    """
    Two co-indexed mappings keyed by modality, built in a single pass.

    Returns:
        dict:
            - modalityFrequencyCounts: {modality: {'total': n, 'frequencies':
              {freq: {'masculine', 'feminine', 'unspecified', 'total'}}}}
            - modalityRevenueCounts: {modality: fee apportioned equally across
              the student's modalities, summed}
    """
    frequency_counts: Dict[str, Dict] = OrderedDict()
    revenue_counts: Dict[str, Decimal] = OrderedDict()

    for student in students:
        modalities = list(student.modality_tags) or [UNSPECIFIED]
        apportioned = _fee(student) / len(modalities)
        frequency = (student.classes_per_week or '').strip() or UNSPECIFIED
        gender_bucket = classify_gender(student.gender)

        for modality in modalities:
            entry = frequency_counts.setdefault(modality, {'total': 0, 'frequencies': OrderedDict()})
            counts = entry['frequencies'].setdefault(frequency, _empty_gender_counts())

            entry['total'] += 1
            counts['total'] += 1
            counts[gender_bucket] += 1

            revenue_counts[modality] = revenue_counts.get(modality, ZERO) + apportioned

    return {
        'modalityFrequencyCounts': frequency_counts,
        'modalityRevenueCounts': OrderedDict((m, float(v)) for m, v in revenue_counts.items()),
    }


def empty_segmentation() -> Dict[str, Dict]:
    return {'modalityFrequencyCounts': {}, 'modalityRevenueCounts': {}}


# =============================================================================
# AUDIT ROWS
# =============================================================================

@dataclass(frozen=True)
class AuditRow:
    """Current billing-cycle state of one active student. Never persisted."""

    payment_id: Optional[int]
    student_id: int
    name: str
    whatsapp: str
    amount: Decimal
    date: Optional[date]
    status: str

    @property
    def has_payment(self) -> bool:
        return self.payment_id is not None

    def to_dict(self) -> Dict:
        return {
            'payment_id': self.payment_id,
            'student_id': self.student_id,
            'name': self.name,
            'whatsapp': self.whatsapp,
            'amount': float(self.amount),
            'date': self.date.isoformat() if self.date else None,
            'status': self.status,
        }


def _group_by_student(payments: Iterable) -> Dict[int, Dict[str, List]]:
    grouped: Dict[int, Dict[str, List]] = {}
    for payment in payments:
        bucket = grouped.setdefault(payment.student_id, {'pending': [], 'approved': []})
        if payment.status == PaymentStatus.PENDING:
            bucket['pending'].append(payment)
        elif payment.status == PaymentStatus.APPROVED:
            bucket['approved'].append(payment)
    return grouped


def derive_audit_row(student, pending: Sequence, approved: Sequence, today: date,
                     cycle_days: int = BILLING_CYCLE_DAYS) -> AuditRow:
    """
    Derive one student's row.

    pending-review beats everything: a submitted payment always needs attention.
    A passed due date is overdue; the approval that advanced it belongs to the
    previous cycle. paid means an approval landed inside the cycle that ends on
    the current due date. Anything else is open.
    """
    if pending:
        payment = min(pending, key=lambda p: (p.payment_date or date.max, p.pk or 0))
        return AuditRow(
            payment_id=payment.pk,
            student_id=student.pk,
            name=student.name,
            whatsapp=student.whatsapp,
            amount=Decimal(payment.amount or 0),
            date=payment.payment_date or student.due_date,
            status=AuditStatus.PENDING_REVIEW,
        )

    if student.due_date and student.due_date < today:
        in_cycle = []
    elif student.due_date:
        window_start = cycle_window_start(student.due_date, cycle_days)
        in_cycle = [
            p for p in approved
            if window_start <= (_as_local_date(p.validated_at) or date.min) < student.due_date
        ]
    else:
        in_cycle = list(approved)

    if in_cycle:
        payment = max(in_cycle, key=lambda p: (_as_local_date(p.validated_at) or date.min, p.pk or 0))
        return AuditRow(
            payment_id=payment.pk,
            student_id=student.pk,
            name=student.name,
            whatsapp=student.whatsapp,
            amount=Decimal(payment.amount or 0),
            date=payment.payment_date or _as_local_date(payment.validated_at),
            status=AuditStatus.PAID,
        )

    overdue = student.due_date is not None and student.due_date < today
    return AuditRow(
        payment_id=None,
        student_id=student.pk,
        name=student.name,
        whatsapp=student.whatsapp,
        amount=_fee(student),
        date=student.due_date,
        status=AuditStatus.OVERDUE if overdue else AuditStatus.OPEN,
    )


def derive_audit_rows(students: Iterable, payments: Iterable, today: date,
                      statuses: Optional[Iterable[str]] = None,
                      cycle_days: int = BILLING_CYCLE_DAYS) -> List[AuditRow]:
    """
    One audit row per student, optionally filtered by status.

    Rows come back ordered by display date (oldest first), then name.
    """
    wanted = set(statuses) if statuses else None
    grouped = _group_by_student(payments)

    rows = []
    for student in students:
        bucket = grouped.get(student.pk, {'pending': [], 'approved': []})
        row = derive_audit_row(student, bucket['pending'], bucket['approved'], today, cycle_days)
        if wanted is None or row.status in wanted:
            rows.append(row)

    rows.sort(key=lambda r: (r.date or date.max, r.name))
    return rows


def earliest_cycle_start(students: Iterable, today: date, cycle_days: int = BILLING_CYCLE_DAYS) -> date:
    """Oldest cycle window start among ``students``; bounds the payment fetch."""
    starts = [cycle_window_start(s.due_date, cycle_days) for s in students if s.due_date]
    return min(starts) if starts else cycle_window_start(today, cycle_days)


# =============================================================================
# DASHBOARD
# =============================================================================

def build_dashboard_stats(students: Sequence, month_payments: Iterable, year_payments: Iterable,
                          cycle_payments: Iterable, today: date,
                          cycle_days: int = BILLING_CYCLE_DAYS) -> Dict:
    """
    Dashboard KPIs for one academy.

    Args:
        students: active students
        month_payments: payments approved in the current month
        year_payments: payments approved in the current year
        cycle_payments: pending payments plus recent approvals (see
            ``earliest_cycle_start``) used to derive audit rows
        today: local date the figures are computed for

    Returns:
        dict with annualRevenue, nextMonthForecast, totalStudents,
        monthlyExpected, monthlyReceived and pendingPayments
    """
    pending_rows = derive_audit_rows(
        students,
        cycle_payments,
        today,
        statuses=AuditStatus.ACTIONABLE,
        cycle_days=cycle_days,
    )

    return {
        'annualRevenue': float(sum_amounts(year_payments)),
        'nextMonthForecast': float(next_month_forecast(students)),
        'totalStudents': len(students),
        'monthlyExpected': float(monthly_expected(students, today)),
        'monthlyReceived': float(sum_amounts(month_payments)),
        'pendingPayments': [row.to_dict() for row in pending_rows],
    }


def empty_dashboard_stats() -> Dict:
    """Zero-valued result returned when the store cannot be read."""
    return {
        'annualRevenue': 0.0,
        'nextMonthForecast': 0.0,
        'totalStudents': 0,
        'monthlyExpected': 0.0,
        'monthlyReceived': 0.0,
        'pendingPayments': [],
    }
