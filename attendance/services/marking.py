"""
Attendance marking.

mark_attendance(student, date, present) moves a (student, date) pair through
no-record -> present <-> absent and reports what happened:

- inserted: first mark for the date
- updated: existing record changed or re-affirmed (notified reset)
- already_present: present requested on a present record, nothing written
- already_exists: lost an insert race and the winner's row is not a duplicate scan
"""
import logging
from dataclasses import dataclass
from typing import Optional

from django.db import IntegrityError, transaction
from django.utils import timezone

from attendance.models import AttendanceRecord

logger = logging.getLogger(__name__)

INSERTED = 'inserted'
UPDATED = 'updated'
ALREADY_PRESENT = 'already_present'
ALREADY_EXISTS = 'already_exists'


@dataclass
class MarkResult:
    status: str
    record: Optional[AttendanceRecord]


def _insert(student, date, present, now):
    with transaction.atomic():
        return AttendanceRecord.objects.create(
            student=student,
            date=date,
            present=present,
            notified=False,
            checked_in_at=now if present else None,
        )


def _fetch(student, date):
    return AttendanceRecord.objects.filter(student=student, date=date).first()


def mark_attendance(student, date, present, now=None) -> MarkResult:
    now = now or timezone.now()
    existing = _fetch(student, date)

    if existing is None:
        try:
            record = _insert(student, date, present, now)
        except IntegrityError:
            # Another writer inserted the same (student, date) first
            record = _fetch(student, date)
            if record is None:
                raise
            status = ALREADY_PRESENT if (present and record.present) else ALREADY_EXISTS
            logger.info(f"[attendance] insert conflict student={student.pk} date={date} -> {status}")
            return MarkResult(status, record)
        logger.info(f"[attendance] inserted student={student.pk} date={date} present={present}")
        return MarkResult(INSERTED, record)

    if present and existing.present:
        return MarkResult(ALREADY_PRESENT, existing)

    existing.present = present
    existing.notified = False
    update_fields = ['present', 'notified']
    if present:
        existing.checked_in_at = now
        update_fields.append('checked_in_at')
    existing.save(update_fields=update_fields)
    logger.info(f"[attendance] updated student={student.pk} date={date} present={present}")
    return MarkResult(UPDATED, existing)


def mark_notified(record) -> AttendanceRecord:
    if not record.notified:
        record.notified = True
        record.save(update_fields=['notified'])
    return record


def absences_for_date(date):
    """Absent records for the day, with student and group for the absence list."""
    return (
        AttendanceRecord.objects.filter(date=date, present=False)
        .select_related('student', 'student__group')
        .order_by('student__name')
    )


def student_stats(student) -> dict:
    records = AttendanceRecord.objects.filter(student=student)
    total = records.count()
    present = records.filter(present=True).count()
    return {'present': present, 'absent': total - present, 'total': total}
