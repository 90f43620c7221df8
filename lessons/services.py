"""
Lesson grading and the performance facts derived from it.
"""
import logging
from calendar import monthrange
from datetime import date as date_cls

from django.db import transaction
from django.db.models import Q

from blocks.services import BlockStore
from exams.models import Exam, ExamResult
from exams.services import BLOCKED, NOT_FOUND, SAVED, EntryResult, load_students
from .models import Lesson, LessonHomework, LessonRecitation, LessonSheet

logger = logging.getLogger(__name__)

PERFORMANCE_THRESHOLD = 0.5


def month_bounds(month):
    """'YYYY-MM' -> (first day, last day)."""
    year, month_no = (int(part) for part in month.split('-'))
    return date_cls(year, month_no, 1), date_cls(year, month_no, monthrange(year, month_no)[1])


def record_lesson_grades(lesson, entries, blocks=None):
    """
    entries: [{'student', 'sheet_score'?, 'recitation_score'?, 'homework'?, 'note'?}]
    Only the keys present in an entry are written. Frozen students are skipped
    and reported as blocked; the batch continues.
    """
    blocks = blocks or BlockStore.load()
    students = load_students(entries)
    results = []
    for entry in entries:
        student_id = str(entry['student'])
        student = students.get(student_id)
        if student is None:
            results.append(EntryResult(student_id, NOT_FOUND))
            continue
        outcome = blocks.check(student)
        if outcome is not None:
            results.append(EntryResult(student_id, BLOCKED, reason=outcome.reason))
            continue
        with transaction.atomic():
            if entry.get('sheet_score') is not None:
                LessonSheet.objects.update_or_create(
                    lesson=lesson, student=student, defaults={'score': entry['sheet_score']},
                )
            if entry.get('recitation_score') is not None:
                LessonRecitation.objects.update_or_create(
                    lesson=lesson, student=student, defaults={'score': entry['recitation_score']},
                )
            if entry.get('homework'):
                LessonHomework.objects.update_or_create(
                    lesson=lesson,
                    student=student,
                    defaults={'status': entry['homework'], 'note': entry.get('note') or None},
                )
        results.append(EntryResult(student_id, SAVED))

    blocked = sum(1 for r in results if r.status == BLOCKED)
    logger.info(f"[lesson] grades recorded lesson={lesson.pk} total={len(results)} blocked={blocked}")
    return results


def lesson_for(student, date):
    """
    The group lesson the student attends on a date: same grade and the
    student's own group. Students without a group have no lesson.
    """
    if not student.group_id:
        return None
    return Lesson.objects.filter(date=date, grade_id=student.grade_id, group_id=student.group_id).first()


def homework_status_for(student, date):
    """'done' / 'not_done' for the day's lesson, None when there is no lesson."""
    lesson = lesson_for(student, date)
    if lesson is None:
        return None
    row = LessonHomework.objects.filter(lesson=lesson, student=student).first()
    return row.status if row else LessonHomework.STATUS_NOT_DONE


def _month_lessons(student, month):
    qs = Lesson.objects.filter(date__range=month_bounds(month), grade_id=student.grade_id)
    if student.group_id:
        qs = qs.filter(Q(group__isnull=True) | Q(group_id=student.group_id))
    return qs


def monthly_performance(student, month):
    """
    Average score ratio (0..1) over the month's sheets, recitations and exams
    for the student's grade. Missing scores count as 0. None when nothing
    was graded that month.
    """
    lessons = list(_month_lessons(student, month))
    sheets = dict(
        LessonSheet.objects.filter(lesson__in=lessons, student=student).values_list('lesson_id', 'score')
    )
    recitations = dict(
        LessonRecitation.objects.filter(lesson__in=lessons, student=student).values_list('lesson_id', 'score')
    )
    items = []
    for lesson in lessons:
        if lesson.sheet_max_score > 0:
            items.append(float(sheets.get(lesson.pk, 0)) / float(lesson.sheet_max_score))
        if lesson.recitation_max_score > 0:
            items.append(float(recitations.get(lesson.pk, 0)) / float(lesson.recitation_max_score))

    exams = list(Exam.objects.filter(date__range=month_bounds(month), grade_id=student.grade_id))
    scores = dict(
        ExamResult.objects.filter(exam__in=exams, student=student).values_list('exam_id', 'score')
    )
    for exam in exams:
        if exam.max_score > 0:
            items.append(float(scores.get(exam.pk, 0)) / float(exam.max_score))

    if not items:
        return None
    return sum(items) / len(items)


def is_performance_below_threshold(student, month) -> bool:
    average = monthly_performance(student, month)
    return average is not None and average < PERFORMANCE_THRESHOLD
