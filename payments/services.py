"""
Payment services.
register_payment and refund_payment consult the block store first and return
a blocked result carrying the block reason instead of writing.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from django.db import transaction
from django.db.models import Count, Q, Sum
from django.utils import timezone

from blocks.services import BlockStore
from students.models import Student
from .models import Payment

logger = logging.getLogger(__name__)

REGISTERED = 'registered'
REFUNDED = 'refunded'
BLOCKED = 'blocked'


@dataclass
class PaymentResult:
    status: str
    payment: Optional[Payment] = None
    reason: str = ''


def current_month(now=None) -> str:
    return timezone.localtime(now or timezone.now()).strftime('%Y-%m')


def is_month_paid(student, month) -> bool:
    return Payment.objects.filter(student=student, month=month, paid=True).exists()


def register_payment(student, month, amount=None, blocks=None, now=None) -> PaymentResult:
    blocks = blocks or BlockStore.load()
    outcome = blocks.check(student)
    if outcome is not None:
        logger.info(f"[payment] rejected, student={student.pk} is frozen")
        return PaymentResult(BLOCKED, reason=outcome.reason)

    now = now or timezone.now()
    amount = Decimal(amount) if amount is not None else student.monthly_fee
    with transaction.atomic():
        payment, created = Payment.objects.select_for_update().get_or_create(
            student=student,
            month=month,
            defaults={'amount': amount, 'paid': True, 'paid_at': now, 'notified': False},
        )
        if not created:
            payment.amount = amount
            payment.paid = True
            payment.paid_at = now
            payment.save(update_fields=['amount', 'paid', 'paid_at', 'updated_at'])
    logger.info(
        f"[payment] registered student={student.pk} month={month} amount={amount} created={created}"
    )
    return PaymentResult(REGISTERED, payment=payment)


def refund_payment(payment, blocks=None) -> PaymentResult:
    blocks = blocks or BlockStore.load()
    outcome = blocks.check(payment.student_id)
    if outcome is not None:
        logger.info(f"[payment] refund rejected, student={payment.student_id} is frozen")
        return PaymentResult(BLOCKED, payment=payment, reason=outcome.reason)

    payment.paid = False
    payment.paid_at = None
    payment.save(update_fields=['paid', 'paid_at', 'updated_at'])
    logger.info(f"[payment] refunded id={payment.pk} student={payment.student_id} month={payment.month}")
    return PaymentResult(REFUNDED, payment=payment)


def mark_notified(payment) -> Payment:
    if not payment.notified:
        payment.notified = True
        payment.save(update_fields=['notified', 'updated_at'])
    return payment


def unpaid_students(month, grade=None):
    """Students with no paid row for the month (missing or refunded)."""
    paid_ids = Payment.objects.filter(month=month, paid=True).values('student_id')
    qs = Student.objects.select_related('grade', 'group').exclude(pk__in=paid_ids)
    if grade:
        qs = qs.filter(grade_id=grade)
    return qs.order_by('name')


def month_summary(month) -> dict:
    totals = Payment.objects.filter(month=month).aggregate(
        paid_count=Count('id', filter=Q(paid=True)),
        collected=Sum('amount', filter=Q(paid=True)),
    )
    students_total = Student.objects.count()
    return {
        'month': month,
        'paidCount': totals['paid_count'],
        'unpaidCount': students_total - totals['paid_count'],
        'collected': totals['collected'] or Decimal('0'),
    }
