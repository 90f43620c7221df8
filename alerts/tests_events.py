"""
Alert event tests: persistence, resolution and staff decisions.
"""
from datetime import date
from unittest import mock

from django.db import DatabaseError
from django.test import TestCase
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from accounts.models import User
from alerts.models import AlertEvent
from alerts.rules import TriggeredAlert
from alerts.services import (
    DECISION_ALLOW,
    DECISION_FREEZE,
    EventAlreadyResolved,
    apply_decision,
    create_event,
    record_alerts,
    resolve_event,
)
from attendance.models import AttendanceRecord
from blocks.services import BlockStore
from groups.models import GradeLevel
from students.services import create_student


class AlertEventTests(TestCase):
    def setUp(self):
        self.student = create_student(
            name='Mona', grade=GradeLevel.objects.get(code='2'), parent_phone='01112345678',
        )
        self.day = date(2026, 4, 11)

    def _alerts(self):
        return [
            TriggeredAlert('absent_2_consecutive', 'غياب حصتين متتاليتين', 'm1', 'critical', {'consecutiveAbsences': 2}),
            TriggeredAlert('homework_required', 'الواجب غير محلول', 'm2', 'warning'),
        ]

    def test_record_alerts_creates_open_events_with_date(self):
        events = record_alerts(self.student, self._alerts(), self.day)
        self.assertEqual(len(events), 2)
        first = AlertEvent.objects.get(rule_code='absent_2_consecutive')
        self.assertEqual(first.status, AlertEvent.STATUS_OPEN)
        self.assertEqual(first.context['selectedDate'], '2026-04-11')
        self.assertEqual(first.context['consecutiveAbsences'], 2)

    def test_record_alerts_continues_after_a_failed_insert(self):
        real_create = create_event

        def flaky(student, rule_code, *args, **kwargs):
            if rule_code == 'absent_2_consecutive':
                raise DatabaseError('insert failed')
            return real_create(student, rule_code, *args, **kwargs)

        with mock.patch('alerts.services.create_event', side_effect=flaky):
            events = record_alerts(self.student, self._alerts(), self.day)

        self.assertEqual([e.rule_code for e in events], ['homework_required'])
        self.assertEqual(AlertEvent.objects.count(), 1)

    def test_resolve_twice_keeps_first_timestamp(self):
        event = create_event(self.student, 'payment_1_5', 't', 'm', 'warning')
        first = resolve_event(event.pk)
        second = resolve_event(event.pk)
        self.assertEqual(first.status, AlertEvent.STATUS_RESOLVED)
        self.assertIsNotNone(first.resolved_at)
        self.assertEqual(first.resolved_at, second.resolved_at)

    def test_allow_decision_resolves_without_blocking(self):
        event = record_alerts(self.student, self._alerts()[:1], self.day)[0]
        result = apply_decision(event, DECISION_ALLOW)

        self.assertEqual(result.event.status, AlertEvent.STATUS_RESOLVED)
        self.assertIsNone(result.block)
        self.assertFalse(BlockStore.load().is_blocked(self.student))
        audit = AlertEvent.objects.get(rule_code='decision_allow')
        self.assertEqual(audit.status, AlertEvent.STATUS_RESOLVED)
        self.assertEqual(audit.severity, 'info')

    def test_freeze_decision_blocks_and_marks_absent(self):
        event = record_alerts(self.student, self._alerts()[:1], self.day)[0]
        result = apply_decision(event, DECISION_FREEZE, reason='غياب متكرر')

        self.assertEqual(result.block.reason, 'غياب متكرر')
        self.assertEqual(result.block.triggered_by_rule_code, 'absent_2_consecutive')
        self.assertTrue(BlockStore.load().is_blocked(self.student))
        record = AttendanceRecord.objects.get(student=self.student, date=self.day)
        self.assertFalse(record.present)
        self.assertTrue(AlertEvent.objects.filter(rule_code='decision_freeze').exists())

    def test_unknown_decision_raises(self):
        event = create_event(self.student, 'payment_1_5', 't', 'm', 'warning')
        with self.assertRaises(ValueError):
            apply_decision(event, 'ignore')
        event.refresh_from_db()
        self.assertEqual(event.status, AlertEvent.STATUS_OPEN)

    def test_second_decision_on_resolved_event_writes_nothing(self):
        event = record_alerts(self.student, self._alerts()[:1], self.day)[0]
        apply_decision(event, DECISION_ALLOW)
        resolved_at = AlertEvent.objects.get(pk=event.pk).resolved_at

        with self.assertRaises(EventAlreadyResolved):
            apply_decision(event, DECISION_FREEZE)

        self.assertFalse(BlockStore.load().is_blocked(self.student))
        self.assertFalse(AttendanceRecord.objects.filter(student=self.student).exists())
        self.assertEqual(AlertEvent.objects.filter(rule_code__startswith='decision_').count(), 1)
        self.assertEqual(AlertEvent.objects.get(pk=event.pk).resolved_at, resolved_at)


class AlertApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(
            email="assistant@center.test", password="pass123", full_name="Assistant", role=User.ROLE_ASSISTANT,
        )
        token = str(AccessToken.for_user(self.user))
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        self.student = create_student(
            name='Omar', grade=GradeLevel.objects.get(code='1'), parent_phone='01012345678',
        )

    def test_decision_endpoint_freezes_student(self):
        event = create_event(
            self.student, 'absent_3_month', 't', 'm', 'critical', {'selectedDate': '2026-04-11'},
        )
        res = self.client.post(
            f"/api/alerts/events/{event.pk}/decision", {"decision": "freeze"}, format="json",
        )
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data['event']['status'], 'resolved')
        self.assertTrue(res.data['block']['is_active'])

        again = self.client.post(
            f"/api/alerts/events/{event.pk}/decision", {"decision": "allow"}, format="json",
        )
        self.assertEqual(again.status_code, 409)
        self.assertFalse(AlertEvent.objects.filter(rule_code='decision_allow').exists())

    def test_decision_endpoint_rejects_unknown_decision(self):
        event = create_event(self.student, 'absent_3_month', 't', 'm', 'critical')
        res = self.client.post(
            f"/api/alerts/events/{event.pk}/decision", {"decision": "ignore"}, format="json",
        )
        self.assertEqual(res.status_code, 400)

    def test_open_events_filter(self):
        open_event = create_event(self.student, 'absent_3_month', 't', 'm', 'critical')
        resolve_event(create_event(self.student, 'payment_1_5', 't', 'm', 'warning').pk)
        res = self.client.get("/api/alerts/events?status=open")
        self.assertEqual(res.status_code, 200)
        self.assertEqual([e['id'] for e in res.data], [str(open_event.pk)])
