"""
Attendance marking and check-in tests.
- mark_attendance transitions and duplicate scans
- insert race resolved from the stored row
- check-in gates: frozen student, session end, pending alerts, group and day, allow override
"""
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from unittest import mock

from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from accounts.models import User
from alerts.models import AlertEvent
from attendance.models import AttendanceRecord
from attendance.services import marking
from attendance.services.check_in import (
    ALERTS_PENDING,
    BLOCKED,
    DIFFERENT_DAY,
    DIFFERENT_GROUP,
    SESSION_ENDED,
    check_in,
)
from attendance.services.marking import (
    ALREADY_EXISTS,
    ALREADY_PRESENT,
    INSERTED,
    UPDATED,
    mark_attendance,
    mark_notified,
)
from blocks.services import BlockStore
from groups.models import WEEKDAYS, GradeLevel, Group
from payments.models import Payment
from payments.services import current_month
from students.services import create_student


class MarkAttendanceTests(TestCase):
    def setUp(self):
        self.student = create_student(
            name='Youssef', grade=GradeLevel.objects.get(code='1'), parent_phone='01012345678',
        )
        self.day = date(2026, 5, 9)

    def test_duplicate_scan_is_idempotent(self):
        first = mark_attendance(self.student, self.day, True)
        second = mark_attendance(self.student, self.day, True)

        self.assertEqual(first.status, INSERTED)
        self.assertEqual(second.status, ALREADY_PRESENT)
        self.assertEqual(AttendanceRecord.objects.filter(student=self.student, date=self.day).count(), 1)
        self.assertIsNotNone(first.record.checked_in_at)

    def test_absent_then_present_updates_and_stamps_check_in(self):
        absent = mark_attendance(self.student, self.day, False)
        self.assertEqual(absent.status, INSERTED)
        self.assertIsNone(absent.record.checked_in_at)

        present = mark_attendance(self.student, self.day, True)
        self.assertEqual(present.status, UPDATED)
        self.assertTrue(present.record.present)
        self.assertIsNotNone(present.record.checked_in_at)

    def test_present_to_absent_resets_notified(self):
        record = mark_attendance(self.student, self.day, False).record
        mark_notified(record)
        record.refresh_from_db()
        self.assertTrue(record.notified)

        mark_attendance(self.student, self.day, True)
        result = mark_attendance(self.student, self.day, False)
        self.assertEqual(result.status, UPDATED)
        result.record.refresh_from_db()
        self.assertFalse(result.record.present)
        self.assertFalse(result.record.notified)

    def test_repeated_absent_reaffirms(self):
        mark_attendance(self.student, self.day, False)
        result = mark_attendance(self.student, self.day, False)
        self.assertEqual(result.status, UPDATED)

    def test_lost_insert_race_reports_already_present(self):
        winner = AttendanceRecord.objects.create(student=self.student, date=self.day, present=True)
        with mock.patch.object(marking, '_fetch', side_effect=[None, winner]):
            result = mark_attendance(self.student, self.day, True)
        self.assertEqual(result.status, ALREADY_PRESENT)
        self.assertEqual(result.record.pk, winner.pk)

    def test_lost_insert_race_on_absent_row_reports_already_exists(self):
        winner = AttendanceRecord.objects.create(student=self.student, date=self.day, present=False)
        with mock.patch.object(marking, '_fetch', side_effect=[None, winner]):
            result = mark_attendance(self.student, self.day, True)
        self.assertEqual(result.status, ALREADY_EXISTS)
        self.assertEqual(AttendanceRecord.objects.count(), 1)


class CheckInTests(TestCase):
    def setUp(self):
        self.student = create_student(
            name='Nour', grade=GradeLevel.objects.get(code='2'), parent_phone='01012345678',
        )
        self.today = timezone.localdate()
        Payment.objects.create(
            student=self.student, month=current_month(), amount=Decimal('150'), paid=True, paid_at=timezone.now(),
        )

    def _absent_twice(self):
        for days_back in (7, 3):
            AttendanceRecord.objects.create(
                student=self.student, date=self.today - timedelta(days=days_back), present=False,
            )

    def test_frozen_student_is_blocked_without_write(self):
        BlockStore.load().freeze(self.student, 'موقوف لحين السداد')
        result = check_in(self.student, self.today)
        self.assertEqual(result.status, BLOCKED)
        self.assertEqual(result.reason, 'موقوف لحين السداد')
        self.assertFalse(AttendanceRecord.objects.filter(date=self.today).exists())

    def test_alerts_pending_records_events_without_marking(self):
        self._absent_twice()
        result = check_in(self.student, self.today)
        self.assertEqual(result.status, ALERTS_PENDING)
        self.assertEqual([a.rule_code for a in result.alerts], ['absent_2_consecutive'])
        self.assertEqual(AlertEvent.objects.filter(student=self.student).count(), 1)
        self.assertFalse(AttendanceRecord.objects.filter(date=self.today).exists())

    def test_allow_skips_rules_and_marks_present(self):
        self._absent_twice()
        result = check_in(self.student, self.today, allow=True)
        self.assertEqual(result.status, INSERTED)
        self.assertTrue(result.record.present)
        self.assertFalse(AlertEvent.objects.exists())

    def test_allow_does_not_bypass_block(self):
        BlockStore.load().freeze(self.student, 'x')
        self.assertEqual(check_in(self.student, self.today, allow=True).status, BLOCKED)


class GroupGateTests(TestCase):
    def setUp(self):
        grade = GradeLevel.objects.get(code='2')
        self.today = timezone.localdate()
        self.group = Group.objects.create(
            name='Sat 4PM', grade=grade, days=[WEEKDAYS[self.today.weekday()]], time_to=time(18, 0),
        )
        self.other_group = Group.objects.create(name='Tue 6PM', grade=grade)
        self.student = create_student(
            name='Hana', grade=grade, group=self.group, parent_phone='01012345678',
        )
        Payment.objects.create(
            student=self.student, month=current_month(), amount=Decimal('150'), paid=True, paid_at=timezone.now(),
        )

    def _at(self, hour):
        return timezone.make_aware(datetime.combine(self.today, time(hour, 0)))

    def test_session_ended_requires_decision(self):
        result = check_in(self.student, self.today, now=self._at(19))
        self.assertEqual(result.status, SESSION_ENDED)
        self.assertEqual(result.context['endTime'], '18:00')
        self.assertFalse(AttendanceRecord.objects.exists())

    def test_before_session_end_marks_present(self):
        result = check_in(self.student, self.today, now=self._at(17))
        self.assertEqual(result.status, INSERTED)

    def test_session_ended_checked_before_alert_rules(self):
        for days_back in (7, 3):
            AttendanceRecord.objects.create(
                student=self.student, date=self.today - timedelta(days=days_back), present=False,
            )
        result = check_in(self.student, self.today, now=self._at(19))
        self.assertEqual(result.status, SESSION_ENDED)
        self.assertFalse(AlertEvent.objects.exists())

    def test_allow_overrides_session_ended(self):
        result = check_in(self.student, self.today, allow=True, now=self._at(19))
        self.assertEqual(result.status, INSERTED)

    def test_selected_group_mismatch(self):
        result = check_in(self.student, self.today, selected_group=self.other_group.pk, now=self._at(17))
        self.assertEqual(result.status, DIFFERENT_GROUP)
        self.assertEqual(result.context['studentGroup'], 'Sat 4PM')
        self.assertFalse(AttendanceRecord.objects.exists())

    def test_selected_group_match_marks_present(self):
        result = check_in(self.student, self.today, selected_group=self.group, now=self._at(17))
        self.assertEqual(result.status, INSERTED)

    def test_allow_overrides_different_group(self):
        result = check_in(
            self.student, self.today, allow=True, selected_group=self.other_group.pk, now=self._at(17),
        )
        self.assertEqual(result.status, INSERTED)

    def test_day_outside_group_days(self):
        self.group.days = [WEEKDAYS[(self.today.weekday() + 1) % 7]]
        self.group.save()
        result = check_in(self.student, self.today, now=self._at(17))
        self.assertEqual(result.status, DIFFERENT_DAY)
        self.assertEqual(result.context['days'], self.group.days)
        self.assertFalse(AttendanceRecord.objects.exists())

    def test_day_gate_skipped_when_group_selected(self):
        self.group.days = [WEEKDAYS[(self.today.weekday() + 1) % 7]]
        self.group.save()
        result = check_in(self.student, self.today, selected_group=self.group.pk, now=self._at(17))
        self.assertEqual(result.status, INSERTED)

    def test_allow_overrides_different_day(self):
        self.group.days = [WEEKDAYS[(self.today.weekday() + 1) % 7]]
        self.group.save()
        result = check_in(self.student, self.today, allow=True, now=self._at(17))
        self.assertEqual(result.status, INSERTED)

    def test_group_without_days_meets_any_day(self):
        self.group.days = []
        self.group.save()
        self.assertEqual(check_in(self.student, self.today, now=self._at(17)).status, INSERTED)


class ScanApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        user = User.objects.create_user(
            email="assistant@center.test", password="pass123", full_name="Assistant", role=User.ROLE_ASSISTANT,
        )
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {AccessToken.for_user(user)}")
        self.student = create_student(
            name='Karim', grade=GradeLevel.objects.get(code='3'), parent_phone='01012345678',
        )
        Payment.objects.create(
            student=self.student, month=current_month(), amount=Decimal('150'), paid=True, paid_at=timezone.now(),
        )
        self.today = timezone.localdate().isoformat()

    def _scan(self, **extra):
        body = {"code": self.student.code.lower(), "date": self.today, **extra}
        return self.client.post("/api/attendance/scan", body, format="json")

    def test_scan_then_duplicate_scan(self):
        first = self._scan()
        self.assertEqual(first.status_code, 201)
        self.assertEqual(first.data['status'], 'inserted')

        second = self._scan()
        self.assertEqual(second.status_code, 200)
        self.assertEqual(second.data['status'], 'already_present')

    def test_scan_of_frozen_student_returns_409(self):
        BlockStore.load().freeze(self.student, 'موقوف')
        res = self._scan()
        self.assertEqual(res.status_code, 409)
        self.assertEqual(res.data['reason'], 'موقوف')

    def test_unknown_code_returns_404(self):
        res = self.client.post("/api/attendance/scan", {"code": "ST000000", "date": self.today}, format="json")
        self.assertEqual(res.status_code, 404)

    def test_absences_list(self):
        mark_attendance(self.student, timezone.localdate(), False)
        res = self.client.get(f"/api/attendance/absences?date={self.today}")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data[0]['parentPhone'], '01012345678')

    def test_scan_for_another_group_asks_for_confirmation(self):
        grade = GradeLevel.objects.get(code='3')
        own = Group.objects.create(name='Own', grade=grade)
        selected = Group.objects.create(name='Selected', grade=grade)
        self.student.group = own
        self.student.save()

        res = self._scan(group=str(selected.pk))
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data['status'], 'different_group')
        self.assertEqual(res.data['studentGroup'], 'Own')

        res = self._scan(group=str(selected.pk), allow=True)
        self.assertEqual(res.status_code, 201)
