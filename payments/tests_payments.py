"""
Payment tests: registration upsert, refund, block enforcement, unpaid report.
"""
from decimal import Decimal

from django.test import TestCase
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from accounts.models import User
from blocks.services import BlockStore
from groups.models import GradeLevel
from payments.models import Payment
from payments.services import (
    BLOCKED,
    REFUNDED,
    REGISTERED,
    month_summary,
    refund_payment,
    register_payment,
    unpaid_students,
)
from students.services import create_student


class PaymentServiceTests(TestCase):
    def setUp(self):
        grade = GradeLevel.objects.get(code='1')
        self.student = create_student(
            name='Adam', grade=grade, parent_phone='01012345678', monthly_fee=Decimal('200'),
        )
        self.other = create_student(
            name='Bassel', grade=grade, parent_phone='01012345679', monthly_fee=Decimal('250'),
        )

    def test_register_uses_monthly_fee_by_default(self):
        result = register_payment(self.student, '2026-03')
        self.assertEqual(result.status, REGISTERED)
        self.assertEqual(result.payment.amount, Decimal('200'))
        self.assertTrue(result.payment.paid)
        self.assertIsNotNone(result.payment.paid_at)

    def test_register_same_month_updates_row(self):
        register_payment(self.student, '2026-03')
        register_payment(self.student, '2026-03', amount='180')
        rows = Payment.objects.filter(student=self.student, month='2026-03')
        self.assertEqual(rows.count(), 1)
        self.assertEqual(rows.get().amount, Decimal('180'))

    def test_frozen_student_is_rejected_without_write(self):
        BlockStore.load().freeze(self.student, 'موقوف لعدم الالتزام')
        result = register_payment(self.student, '2026-03')
        self.assertEqual(result.status, BLOCKED)
        self.assertEqual(result.reason, 'موقوف لعدم الالتزام')
        self.assertFalse(Payment.objects.filter(student=self.student).exists())

    def test_frozen_student_existing_row_untouched(self):
        payment = register_payment(self.student, '2026-03', amount='200').payment
        BlockStore.load().freeze(self.student, 'x')

        self.assertEqual(register_payment(self.student, '2026-03', amount='50').status, BLOCKED)
        self.assertEqual(refund_payment(payment).status, BLOCKED)
        payment.refresh_from_db()
        self.assertEqual(payment.amount, Decimal('200'))
        self.assertTrue(payment.paid)

    def test_refund_marks_unpaid(self):
        payment = register_payment(self.student, '2026-03').payment
        result = refund_payment(payment)
        self.assertEqual(result.status, REFUNDED)
        payment.refresh_from_db()
        self.assertFalse(payment.paid)
        self.assertIsNone(payment.paid_at)

    def test_unpaid_lists_missing_and_refunded(self):
        register_payment(self.other, '2026-03')
        self.assertEqual([s.name for s in unpaid_students('2026-03')], ['Adam'])

        refund_payment(Payment.objects.get(student=self.other))
        self.assertEqual([s.name for s in unpaid_students('2026-03')], ['Adam', 'Bassel'])

    def test_month_summary(self):
        register_payment(self.student, '2026-03')
        summary = month_summary('2026-03')
        self.assertEqual(summary['paidCount'], 1)
        self.assertEqual(summary['unpaidCount'], 1)
        self.assertEqual(summary['collected'], Decimal('200'))


class PaymentApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        user = User.objects.create_user(
            email="assistant@center.test", password="pass123", full_name="Assistant", role=User.ROLE_ASSISTANT,
        )
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {AccessToken.for_user(user)}")
        self.student = create_student(
            name='Adam', grade=GradeLevel.objects.get(code='2'), parent_phone='01012345678',
            monthly_fee=Decimal('200'),
        )

    def test_register_endpoint(self):
        res = self.client.post(
            "/api/payments/register", {"student": str(self.student.pk), "month": "2026-03"}, format="json",
        )
        self.assertIn(res.status_code, (200, 201))
        self.assertEqual(Payment.objects.get().amount, Decimal('200'))

    def test_register_frozen_returns_409(self):
        BlockStore.load().freeze(self.student, 'موقوف')
        res = self.client.post(
            "/api/payments/register", {"student": str(self.student.pk), "month": "2026-03"}, format="json",
        )
        self.assertEqual(res.status_code, 409)
        self.assertEqual(res.data, {'status': 'blocked', 'reason': 'موقوف'})
        self.assertFalse(Payment.objects.exists())

    def test_invalid_month_returns_400(self):
        res = self.client.post(
            "/api/payments/register", {"student": str(self.student.pk), "month": "2026-13"}, format="json",
        )
        self.assertEqual(res.status_code, 400)
