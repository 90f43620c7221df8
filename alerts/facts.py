"""
Fact collection for rule evaluation: reads attendance, payments, exams and
lesson grades for one student and packs them into AlertFacts.
"""
from datetime import timedelta

from django.conf import settings
from django.utils import timezone

from attendance.models import AttendanceRecord
from exams.models import Exam
from lessons.services import homework_status_for, is_performance_below_threshold
from payments.services import is_month_paid
from .rules import AlertFacts, month_of


def collect_facts(student, evaluation_date, now=None) -> AlertFacts:
    now = now or timezone.now()
    since = evaluation_date - timedelta(days=settings.ALERT_HISTORY_DAYS)
    month = month_of(evaluation_date)
    attendance = list(
        AttendanceRecord.objects.filter(student=student, date__gte=since, date__lte=evaluation_date)
    )
    return AlertFacts(
        student=student,
        evaluation_date=evaluation_date,
        now=now,
        attendance=attendance,
        is_month_paid=is_month_paid(student, month),
        exams=list(Exam.objects.filter(grade_id=student.grade_id)),
        homework_status=homework_status_for(student, evaluation_date),
        performance_below_50=is_performance_below_threshold(student, month),
    )
