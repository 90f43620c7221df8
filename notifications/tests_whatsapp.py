"""
Notification tests: phone normalization, message composition, push dispatch
and the WhatsApp link endpoints.
"""
from datetime import date
from decimal import Decimal
from unittest import mock
from urllib.parse import unquote

import httpx
from django.test import SimpleTestCase, TestCase
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from accounts.models import User
from attendance.models import AttendanceRecord
from core.context import AppContext, invalidate_app_context
from groups.models import GradeLevel
from notifications import messages
from notifications.models import FcmToken
from notifications.push import PushDeliveryError, register_token, send_push
from notifications.whatsapp import build_whatsapp_link, normalize_phone
from students.services import create_student


class WhatsAppLinkTests(SimpleTestCase):
    def test_normalize_local_number(self):
        self.assertEqual(normalize_phone('01012345678'), '201012345678')

    def test_normalize_strips_formatting(self):
        self.assertEqual(normalize_phone('+20 101 234 5678'), '201012345678')
        self.assertEqual(normalize_phone('1012345678'), '201012345678')

    def test_link_encodes_text(self):
        link = build_whatsapp_link('01012345678', 'غياب اليوم & غدا')
        self.assertTrue(link.startswith('https://wa.me/201012345678?text='))
        self.assertNotIn(' ', link)
        self.assertEqual(unquote(link.split('text=', 1)[1]), 'غياب اليوم & غدا')


class MessageTests(SimpleTestCase):
    context = AppContext(teacher_name='أحمد علي')

    def test_exam_labels(self):
        self.assertEqual(messages.exam_label(95), 'ممتاز')
        self.assertEqual(messages.exam_label(80), 'جيد جداً')
        self.assertEqual(messages.exam_label(60), 'جيد')
        self.assertEqual(messages.exam_label(55), '')
        self.assertEqual(messages.exam_label(30), 'يحتاج متابعة')

    def test_month_label(self):
        self.assertEqual(messages.month_label('2026-03'), 'مارس 2026')

    def test_absence_message(self):
        text = messages.absence_message(
            self.context, 'منى', date(2026, 3, 14), template=messages.DEFAULT_TEMPLATES[messages.ABSENCE],
        )
        self.assertIn('منى', text)
        self.assertIn('السبت - 14/3/2026', text)
        self.assertIn('مستر/ أحمد علي', text)

    def test_exam_result_message(self):
        text = messages.exam_result_message(
            self.context, 'منى', 'الفصل الأول', Decimal('18.00'), Decimal('20.00'),
            template=messages.DEFAULT_TEMPLATES[messages.EXAM_RESULT],
        )
        self.assertIn('الدرجة: 18 من 20 (ممتاز)', text)
        self.assertIn('النسبة المئوية: 90%', text)

    def test_payment_message_amount(self):
        text = messages.payment_reminder_message(
            self.context, 'منى', '2026-03', Decimal('150.50'),
            template=messages.DEFAULT_TEMPLATES[messages.PAYMENT_REMINDER],
        )
        self.assertIn('150.5 جنيه', text)
        self.assertIn('مارس 2026', text)

    def test_unknown_placeholder_is_kept(self):
        self.assertEqual(messages.render('{studentName} {other}', {'studentName': 'x'}), 'x {other}')


class PushTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(
            email="admin@center.test", password="pass123", full_name="Admin", role=User.ROLE_ADMIN,
        )

    def test_register_token_upserts(self):
        register_token(self.user, 'tok-1', 'Android')
        register_token(self.user, 'tok-1', 'Android 14')
        self.assertEqual(FcmToken.objects.count(), 1)
        self.assertEqual(FcmToken.objects.get().device_info, 'Android 14')

    @mock.patch('notifications.push.httpx.post')
    def test_send_to_all_registered_tokens(self, post):
        register_token(self.user, 'tok-1')
        post.return_value = httpx.Response(200, json={'sent': 1})

        result = send_push('تنبيه', 'نص', type='alert')

        self.assertEqual(result, {'sent': 1})
        _, kwargs = post.call_args
        self.assertEqual(kwargs['json']['tokens'], ['tok-1'])
        self.assertEqual(kwargs['json']['type'], 'alert')
        self.assertEqual(kwargs['headers']['Authorization'], 'Bearer test-key')

    @mock.patch('notifications.push.httpx.post')
    def test_rejection_raises(self, post):
        post.return_value = httpx.Response(500, json={'error': 'boom'})
        with self.assertRaisesMessage(PushDeliveryError, 'boom'):
            send_push('t', 'b', tokens=['x'])

    @mock.patch('notifications.push.httpx.post', side_effect=httpx.ConnectError('down'))
    def test_network_failure_raises(self, post):
        with self.assertRaises(PushDeliveryError):
            send_push('t', 'b', tokens=['x'])

    @mock.patch('notifications.push.httpx.post', side_effect=httpx.ConnectError('down'))
    def test_push_endpoint_returns_502(self, post):
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {AccessToken.for_user(self.user)}")
        res = client.post("/api/notifications/push", {"title": "t", "body": "b", "tokens": ["x"]}, format="json")
        self.assertEqual(res.status_code, 502)


class WhatsAppApiTests(TestCase):
    def setUp(self):
        invalidate_app_context()
        self.client = APIClient()
        user = User.objects.create_user(
            email="assistant@center.test", password="pass123", full_name="Assistant", role=User.ROLE_ASSISTANT,
        )
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {AccessToken.for_user(user)}")
        self.student = create_student(
            name='Salma', grade=GradeLevel.objects.get(code='1'), parent_phone='01012345678',
            monthly_fee=Decimal('200'),
        )

    def tearDown(self):
        invalidate_app_context()

    def test_absence_link_marks_notified(self):
        record = AttendanceRecord.objects.create(student=self.student, date=date(2026, 3, 14), present=False)
        res = self.client.post(f"/api/notifications/whatsapp/absence/{record.pk}")
        self.assertEqual(res.status_code, 200)
        self.assertIn('Salma', res.data['message'])
        self.assertTrue(res.data['links'][0]['url'].startswith('https://wa.me/201012345678?text='))
        record.refresh_from_db()
        self.assertTrue(record.notified)

    def test_absence_link_for_present_record_rejected(self):
        record = AttendanceRecord.objects.create(student=self.student, date=date(2026, 3, 14), present=True)
        res = self.client.post(f"/api/notifications/whatsapp/absence/{record.pk}")
        self.assertEqual(res.status_code, 400)

    def test_payment_link_uses_monthly_fee(self):
        res = self.client.post(
            "/api/notifications/whatsapp/payment",
            {"student": str(self.student.pk), "month": "2026-03"},
            format="json",
        )
        self.assertEqual(res.status_code, 200)
        self.assertIn('200', res.data['message'])
