"""
Exam result entry.
Entries are recorded per student: a frozen student is skipped with a blocked
result carrying the reason, and the rest of the batch continues.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from django.db import transaction

from blocks.services import BlockStore
from students.models import Student
from .models import ExamResult

logger = logging.getLogger(__name__)

SAVED = 'saved'
BLOCKED = 'blocked'
NOT_FOUND = 'not_found'


@dataclass
class EntryResult:
    student_id: str
    status: str
    reason: str = ''
    row: Optional[object] = None


def load_students(entries):
    ids = [entry['student'] for entry in entries]
    return {str(s.pk): s for s in Student.objects.filter(pk__in=ids)}


def record_exam_results(exam, entries, blocks=None):
    """
    entries: [{'student': <id>, 'score': Decimal}]
    Upserts by (exam, student). A changed score clears notified so the parent
    gets the corrected result.
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
            row, _ = ExamResult.objects.update_or_create(
                exam=exam,
                student=student,
                defaults={'score': entry['score'], 'notified': False},
            )
        results.append(EntryResult(student_id, SAVED, row=row))

    saved = sum(1 for r in results if r.status == SAVED)
    logger.info(f"[exam] results recorded exam={exam.pk} saved={saved} total={len(results)}")
    return results


def mark_notified(result) -> ExamResult:
    if not result.notified:
        result.notified = True
        result.save(update_fields=['notified'])
    return result
