"""
Rule evaluation tests.
- Pure counting helpers over attendance history
- Registry evaluation over AlertFacts (no database)
- evaluate_student against stored facts, honoring the active flags
"""
from datetime import date, datetime
from decimal import Decimal
from types import SimpleNamespace

from django.test import SimpleTestCase, TestCase
from django.utils import timezone

from alerts import rules
from alerts.models import AlertRule
from alerts.services import evaluate_student, set_rule_active
from attendance.models import AttendanceRecord
from exams.models import Exam
from groups.models import GradeLevel, Group
from lessons.models import Lesson, LessonHomework, LessonSheet
from payments.models import Payment
from students.services import create_student


def _record(day, present):
    return SimpleNamespace(date=day, present=present)


def _facts(**overrides):
    values = {
        'student': SimpleNamespace(grade_id='1'),
        'evaluation_date': date(2026, 3, 20),
        'now': datetime(2026, 3, 20, 10, 0),
        'attendance': [],
        'is_month_paid': True,
    }
    values.update(overrides)
    return rules.AlertFacts(**values)


class CountingTests(SimpleTestCase):
    def test_consecutive_absences_stop_at_first_present(self):
        history = [
            _record(date(2026, 3, 19), False),
            _record(date(2026, 3, 17), False),
            _record(date(2026, 3, 15), True),
            _record(date(2026, 3, 13), False),
        ]
        self.assertEqual(rules.consecutive_absence_count(history, date(2026, 3, 20)), 2)

    def test_consecutive_absences_ignore_input_order(self):
        history = [
            _record(date(2026, 3, 13), False),
            _record(date(2026, 3, 19), False),
            _record(date(2026, 3, 15), True),
            _record(date(2026, 3, 17), False),
        ]
        self.assertEqual(rules.consecutive_absence_count(history, date(2026, 3, 20)), 2)

    def test_record_on_evaluation_date_is_not_counted(self):
        history = [_record(date(2026, 3, 20), False), _record(date(2026, 3, 19), True)]
        self.assertEqual(rules.consecutive_absence_count(history, date(2026, 3, 20)), 0)

    def test_monthly_count_only_counts_the_month(self):
        history = [
            _record(date(2026, 3, 2), False),
            _record(date(2026, 3, 9), False),
            _record(date(2026, 2, 27), False),
            _record(date(2026, 3, 16), True),
        ]
        self.assertEqual(rules.monthly_absence_count(history, '2026-03'), 2)

    def test_payment_window_boundary(self):
        self.assertTrue(rules.should_warn_payment_window(datetime(2026, 3, 1, 9, 0), False))
        self.assertTrue(rules.should_warn_payment_window(datetime(2026, 3, 5, 23, 0), False))
        self.assertFalse(rules.should_warn_payment_window(datetime(2026, 3, 6, 9, 0), False))
        self.assertFalse(rules.should_warn_payment_window(datetime(2026, 3, 6, 9, 0), True))
        self.assertFalse(rules.should_warn_payment_window(datetime(2026, 3, 3, 9, 0), True))


class RegistryTests(SimpleTestCase):
    def _codes(self, facts, active=None):
        return [a.rule_code for a in rules.registry.evaluate(facts, active=active)]

    def test_registry_holds_all_rule_codes(self):
        self.assertEqual(
            set(rules.registry.codes()),
            {
                rules.ABSENT_2_CONSECUTIVE,
                rules.ABSENT_3_MONTH,
                rules.PAYMENT_1_5,
                rules.HOMEWORK_REQUIRED,
                rules.PERFORMANCE_BELOW_50,
                rules.EXAM_ABSENCE,
            },
        )

    def test_three_absences_in_month_fire(self):
        history = [_record(date(2026, 3, d), False) for d in (2, 9, 16)]
        history.append(_record(date(2026, 3, 18), True))
        self.assertEqual(self._codes(_facts(attendance=history)), [rules.ABSENT_3_MONTH])

    def test_two_absences_in_month_do_not_fire(self):
        history = [_record(date(2026, 3, d), False) for d in (2, 9)]
        history.append(_record(date(2026, 3, 18), True))
        self.assertEqual(self._codes(_facts(attendance=history)), [])

    def test_payment_rule_day_five_and_day_six(self):
        day5 = _facts(now=datetime(2026, 3, 5, 10, 0), is_month_paid=False)
        day6 = _facts(now=datetime(2026, 3, 6, 10, 0), is_month_paid=False)
        self.assertIn(rules.PAYMENT_1_5, self._codes(day5))
        self.assertNotIn(rules.PAYMENT_1_5, self._codes(day6))

    def test_inactive_rule_is_skipped(self):
        facts = _facts(now=datetime(2026, 3, 2, 10, 0), is_month_paid=False)
        self.assertEqual(self._codes(facts, active={rules.PAYMENT_1_5: False}), [])

    def test_missing_flag_counts_as_active(self):
        facts = _facts(homework_status=rules.HOMEWORK_NOT_DONE)
        self.assertEqual(self._codes(facts, active={}), [rules.HOMEWORK_REQUIRED])

    def test_alert_carries_rule_metadata(self):
        history = [_record(date(2026, 3, 19), False), _record(date(2026, 3, 18), False)]
        alerts = rules.registry.evaluate(_facts(attendance=history))
        self.assertEqual(len(alerts), 1)
        self.assertEqual(alerts[0].severity, 'critical')
        self.assertEqual(alerts[0].context, {'consecutiveAbsences': 2})

    def test_exam_today_matches_grade(self):
        exams = [SimpleNamespace(date=date(2026, 3, 20), grade_id='1')]
        other_grade = [SimpleNamespace(date=date(2026, 3, 20), grade_id='2')]
        self.assertEqual(self._codes(_facts(exams=exams)), [rules.EXAM_ABSENCE])
        self.assertEqual(self._codes(_facts(exams=other_grade)), [])


class EvaluateStudentTests(TestCase):
    def setUp(self):
        self.grade = GradeLevel.objects.get(code='1')
        self.group = Group.objects.create(name='A', grade=self.grade, days=['saturday'], time='16:00')
        self.student = create_student(
            name='Ali', grade=self.grade, group=self.group, parent_phone='01012345678',
        )
        self.day = date(2026, 3, 20)
        self.now = timezone.make_aware(datetime(2026, 3, 20, 16, 0))
        Payment.objects.create(
            student=self.student, month='2026-03', amount=Decimal('200'), paid=True, paid_at=self.now,
        )

    def _codes(self, now=None):
        return [a.rule_code for a in evaluate_student(self.student, self.day, now=now or self.now)]

    def test_clean_history_raises_nothing(self):
        AttendanceRecord.objects.create(student=self.student, date=date(2026, 3, 18), present=True)
        self.assertEqual(self._codes(), [])

    def test_two_consecutive_absences_fire(self):
        for d in (13, 18):
            AttendanceRecord.objects.create(student=self.student, date=date(2026, 3, d), present=False)
        self.assertEqual(self._codes(), [rules.ABSENT_2_CONSECUTIVE])

    def test_deactivated_rule_does_not_fire(self):
        for d in (13, 18):
            AttendanceRecord.objects.create(student=self.student, date=date(2026, 3, d), present=False)
        set_rule_active(rules.ABSENT_2_CONSECUTIVE, False)
        self.assertFalse(AlertRule.objects.get(code=rules.ABSENT_2_CONSECUTIVE).is_active)
        self.assertEqual(self._codes(), [])

    def test_unpaid_month_inside_window(self):
        Payment.objects.all().delete()
        early = timezone.make_aware(datetime(2026, 3, 4, 16, 0))
        self.assertIn(rules.PAYMENT_1_5, self._codes(now=early))
        self.assertNotIn(rules.PAYMENT_1_5, self._codes())

    def test_missing_homework_on_group_lesson(self):
        lesson = Lesson.objects.create(name='L1', date=self.day, grade=self.grade, group=self.group)
        self.assertEqual(self._codes(), [rules.HOMEWORK_REQUIRED])

        LessonHomework.objects.create(lesson=lesson, student=self.student, status=LessonHomework.STATUS_DONE)
        self.assertEqual(self._codes(), [])

    def test_low_performance_fires(self):
        lesson = Lesson.objects.create(
            name='L1', date=date(2026, 3, 7), grade=self.grade, group=self.group,
            sheet_max_score=Decimal('10'),
        )
        LessonSheet.objects.create(lesson=lesson, student=self.student, score=Decimal('3'))
        LessonHomework.objects.create(lesson=lesson, student=self.student, status=LessonHomework.STATUS_DONE)
        self.assertEqual(self._codes(), [rules.PERFORMANCE_BELOW_50])

    def test_exam_on_evaluation_date(self):
        Exam.objects.create(name='Quiz', date=self.day, max_score=Decimal('20'), grade=self.grade)
        codes = self._codes()
        self.assertIn(rules.EXAM_ABSENCE, codes)
