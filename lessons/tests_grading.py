"""
Grading tests: lesson grade batches, exam results, block enforcement and
monthly performance.
"""
from datetime import date
from decimal import Decimal

from django.test import TestCase
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from accounts.models import User
from blocks.services import BlockStore
from exams.models import Exam, ExamResult
from exams.services import BLOCKED, NOT_FOUND, SAVED, record_exam_results
from groups.models import GradeLevel, Group
from lessons.models import Lesson, LessonHomework, LessonSheet
from lessons.services import (
    homework_status_for,
    is_performance_below_threshold,
    monthly_performance,
    record_lesson_grades,
)
from students.services import create_student


class GradingServiceTests(TestCase):
    def setUp(self):
        self.grade = GradeLevel.objects.get(code='2')
        self.group = Group.objects.create(name='B', grade=self.grade, days=['sunday'], time='18:00')
        self.student = create_student(name='Laila', grade=self.grade, group=self.group, parent_phone='01012345678')
        self.frozen = create_student(name='Tarek', grade=self.grade, group=self.group, parent_phone='01012345679')
        BlockStore.load().freeze(self.frozen, 'موقوف')
        self.lesson = Lesson.objects.create(
            name='Lesson 1', date=date(2026, 2, 8), grade=self.grade, group=self.group,
            sheet_max_score=Decimal('10'), recitation_max_score=Decimal('5'),
        )

    def test_lesson_batch_skips_frozen_student(self):
        results = record_lesson_grades(self.lesson, [
            {'student': self.student.pk, 'sheet_score': Decimal('8'), 'homework': 'done'},
            {'student': self.frozen.pk, 'sheet_score': Decimal('9')},
        ])
        self.assertEqual([r.status for r in results], [SAVED, BLOCKED])
        self.assertEqual(results[1].reason, 'موقوف')
        self.assertTrue(LessonSheet.objects.filter(student=self.student).exists())
        self.assertFalse(LessonSheet.objects.filter(student=self.frozen).exists())

    def test_lesson_batch_upserts_only_given_fields(self):
        record_lesson_grades(self.lesson, [{'student': self.student.pk, 'sheet_score': Decimal('4')}])
        record_lesson_grades(self.lesson, [{'student': self.student.pk, 'homework': 'not_done', 'note': 'ناقص'}])
        record_lesson_grades(self.lesson, [{'student': self.student.pk, 'sheet_score': Decimal('7')}])

        self.assertEqual(LessonSheet.objects.get(student=self.student).score, Decimal('7'))
        homework = LessonHomework.objects.get(student=self.student)
        self.assertEqual(homework.status, 'not_done')
        self.assertEqual(homework.note, 'ناقص')

    def test_unknown_student_reported(self):
        results = record_lesson_grades(self.lesson, [{'student': '00000000-0000-0000-0000-000000000000'}])
        self.assertEqual(results[0].status, NOT_FOUND)

    def test_exam_results_upsert_and_reset_notified(self):
        exam = Exam.objects.create(name='Chapter 1', date=date(2026, 2, 15), max_score=Decimal('20'), grade=self.grade)
        record_exam_results(exam, [{'student': self.student.pk, 'score': Decimal('12')}])
        row = ExamResult.objects.get(exam=exam, student=self.student)
        row.notified = True
        row.save()

        results = record_exam_results(exam, [
            {'student': self.student.pk, 'score': Decimal('15')},
            {'student': self.frozen.pk, 'score': Decimal('18')},
        ])
        self.assertEqual([r.status for r in results], [SAVED, BLOCKED])
        row.refresh_from_db()
        self.assertEqual(row.score, Decimal('15'))
        self.assertFalse(row.notified)
        self.assertEqual(ExamResult.objects.count(), 1)

    def test_homework_status_defaults_to_not_done(self):
        self.assertEqual(homework_status_for(self.student, self.lesson.date), 'not_done')
        self.assertIsNone(homework_status_for(self.student, date(2026, 2, 9)))

    def test_homework_status_without_group_is_none(self):
        loner = create_student(name='Ziad', grade=self.grade, parent_phone='01012345670')
        self.assertIsNone(homework_status_for(loner, self.lesson.date))

    def test_monthly_performance_counts_missing_scores_as_zero(self):
        record_lesson_grades(self.lesson, [
            {'student': self.student.pk, 'sheet_score': Decimal('10'), 'recitation_score': Decimal('5')},
        ])
        self.assertEqual(monthly_performance(self.student, '2026-02'), 1.0)

        Exam.objects.create(name='Quiz', date=date(2026, 2, 20), max_score=Decimal('20'), grade=self.grade)
        self.assertAlmostEqual(monthly_performance(self.student, '2026-02'), 2 / 3)
        self.assertFalse(is_performance_below_threshold(self.student, '2026-02'))

    def test_no_graded_items_means_no_performance(self):
        self.assertIsNone(monthly_performance(self.student, '2026-01'))
        self.assertFalse(is_performance_below_threshold(self.student, '2026-01'))


class GradingApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        user = User.objects.create_user(
            email="assistant@center.test", password="pass123", full_name="Assistant", role=User.ROLE_ASSISTANT,
        )
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {AccessToken.for_user(user)}")
        grade = GradeLevel.objects.get(code='1')
        self.student = create_student(name='Rana', grade=grade, parent_phone='01012345678')
        self.lesson = Lesson.objects.create(
            name='Lesson 1', date=date(2026, 2, 8), grade=grade, sheet_max_score=Decimal('10'),
        )
        self.exam = Exam.objects.create(name='Quiz', date=date(2026, 2, 8), max_score=Decimal('20'), grade=grade)

    def test_sheet_score_above_max_rejected(self):
        res = self.client.post(
            f"/api/lessons/{self.lesson.pk}/grades",
            {"entries": [{"student": str(self.student.pk), "sheet_score": "11"}]},
            format="json",
        )
        self.assertEqual(res.status_code, 400)
        self.assertFalse(LessonSheet.objects.exists())

    def test_exam_score_above_max_rejected(self):
        res = self.client.post(
            f"/api/exams/{self.exam.pk}/results",
            {"results": [{"student": str(self.student.pk), "score": "21"}]},
            format="json",
        )
        self.assertEqual(res.status_code, 400)

    def test_exam_results_saved(self):
        res = self.client.post(
            f"/api/exams/{self.exam.pk}/results",
            {"results": [{"student": str(self.student.pk), "score": "18"}]},
            format="json",
        )
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data['results'][0]['status'], 'saved')
